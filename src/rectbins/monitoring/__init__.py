"""Monitoring module for rectbins benchmarks.

Provides metrics tracking and optional Telegram notifications.
"""

from .metrics import (
    AlgorithmStats,
    BenchmarkMetrics,
    TrialMetrics,
    export_to_csv,
    export_to_json,
    format_stats_table,
    print_summary,
)
from .telegram_notifier import (
    format_benchmark_start,
    format_error,
    format_final_summary,
    format_suite_milestone,
    send_telegram,
)

__all__ = [
    # Metrics
    "AlgorithmStats",
    "BenchmarkMetrics",
    "TrialMetrics",
    "export_to_csv",
    "export_to_json",
    "format_stats_table",
    "print_summary",
    # Telegram
    "send_telegram",
    "format_benchmark_start",
    "format_suite_milestone",
    "format_error",
    "format_final_summary",
]
