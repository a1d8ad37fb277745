"""Lightweight Telegram notification for benchmark progress.

Sends plain-text messages to a Telegram chat via the Bot API for:
- Benchmark start notifications
- Suite completion milestones
- Packing errors
- Final results summary

No retry logic — progress updates are non-critical.
"""

from __future__ import annotations

import os
from typing import Any

import httpx

TELEGRAM_API = "https://api.telegram.org/bot{token}/sendMessage"


async def send_telegram(
    message: str,
    chat_id: str | None = None,
    token: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> bool:
    """Send a plain-text message to a Telegram chat.

    Args:
        message: Text to send.
        chat_id: Telegram chat ID. Defaults to TELEGRAM_CHAT_ID env var.
        token: Bot token. Defaults to TELEGRAM_BOT_TOKEN env var.
        client: Optional client to reuse (a temporary one is created otherwise).

    Returns:
        True if the message was accepted, False when disabled or on failure.
    """
    token = token or os.environ.get("TELEGRAM_BOT_TOKEN", "")
    chat_id = chat_id or os.environ.get("TELEGRAM_CHAT_ID", "")
    if not token or not chat_id:
        return False

    url = TELEGRAM_API.format(token=token)
    payload = {"chat_id": chat_id, "text": message}

    try:
        if client is not None:
            resp = await client.post(url, json=payload)
        else:
            async with httpx.AsyncClient(timeout=10.0) as own_client:
                resp = await own_client.post(url, json=payload)
        data = resp.json()
    except (httpx.HTTPError, ValueError):
        return False
    return bool(data.get("ok", False))


def format_benchmark_start(
    suites: int,
    total_instances: int,
    algorithms: list[str],
) -> str:
    """Format benchmark start notification message.

    Example:
        >>> print(format_benchmark_start(2, 10, ["greedy_area", "ls_overlap"]))
        Benchmark Started
        Suites: 2 (10 instances)
        Algorithms: greedy_area, ls_overlap
    """
    return (
        f"Benchmark Started\n"
        f"Suites: {suites} ({total_instances} instances)\n"
        f"Algorithms: {', '.join(algorithms)}"
    )


def format_suite_milestone(
    suite: str,
    suites_completed: int,
    total_suites: int,
    best_algorithm: str,
    best_avg_bins: float,
) -> str:
    """Format suite completion notification.

    Example:
        >>> print(format_suite_milestone("small-30", 1, 4, "ls_overlap", 7.4))
        Progress Update
        Suite small-30 done: 1/4 (25%)
        Best: ls_overlap (7.40 bins avg)
    """
    progress_pct = (suites_completed / total_suites) * 100
    return (
        f"Progress Update\n"
        f"Suite {suite} done: {suites_completed}/{total_suites} ({progress_pct:.0f}%)\n"
        f"Best: {best_algorithm} ({best_avg_bins:.2f} bins avg)"
    )


def format_error(error_type: str, error_message: str, context: dict[str, Any] | None = None) -> str:
    """Format error notification message.

    Example:
        >>> print(format_error("InvariantViolation", "Bin 3 is empty", {"suite": "small-30"}))
        Error: InvariantViolation
        Bin 3 is empty
        Context: suite=small-30
    """
    lines = [
        f"Error: {error_type}",
        error_message,
    ]
    if context:
        ctx_str = ", ".join(f"{k}={v}" for k, v in context.items())
        lines.append(f"Context: {ctx_str}")
    return "\n".join(lines)


def format_final_summary(
    trials: int,
    runtime_seconds: float,
    errors: int,
) -> str:
    """Format final benchmark summary.

    Example:
        >>> print(format_final_summary(50, 120.0, 0))
        Benchmark Complete
        Trials: 50
        Runtime: 2.0 minutes
        Errors: 0
    """
    runtime_minutes = runtime_seconds / 60
    return (
        f"Benchmark Complete\n"
        f"Trials: {trials}\n"
        f"Runtime: {runtime_minutes:.1f} minutes\n"
        f"Errors: {errors}"
    )
