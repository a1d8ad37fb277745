"""Metrics tracking and export for benchmark runs.

Provides dataclasses for per-trial results and their aggregation, plus
utilities for exporting results to JSON and CSV formats.
"""

from __future__ import annotations

import csv
import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import numpy as np

TRIAL_FIELDS = [
    "suite", "instance_idx", "algorithm", "bins_used", "lower_bound",
    "cost", "mean_density", "elapsed_ms", "finished_at",
]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class TrialMetrics:
    """Result of running one algorithm on one instance.

    Attributes:
        suite: Name of the suite the instance belongs to.
        instance_idx: Index of the instance within the suite.
        algorithm: Algorithm key (e.g. "greedy_area").
        bins_used: Number of bins in the returned solution.
        lower_bound: Area lower bound on the number of bins.
        cost: Cost tuple of the returned solution, as a list.
        mean_density: Average bin utilisation (0-1).
        elapsed_ms: Wall-clock time of the trial in milliseconds.
        finished_at: Timestamp when the trial finished.
    """

    suite: str
    instance_idx: int
    algorithm: str
    bins_used: int
    lower_bound: int
    cost: list[int]
    mean_density: float
    elapsed_ms: float
    finished_at: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary with ISO timestamp.

        Example:
            >>> tm = TrialMetrics("small", 0, "greedy_area", 4, 3, [4, -100], 0.8, 1.5)
            >>> tm.to_dict()["bins_used"]
            4
        """
        d = asdict(self)
        d["finished_at"] = self.finished_at.isoformat()
        return d


@dataclass
class AlgorithmStats:
    """Aggregate of all trials of one algorithm within one suite."""

    suite: str
    algorithm: str
    trials: int
    avg_bins: float
    avg_time_ms: float
    avg_density: float
    avg_gap: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class BenchmarkMetrics:
    """Aggregate metrics for an entire benchmark run.

    Attributes:
        benchmark_id: Unique identifier for the run.
        total_instances: Number of instances generated.
        errors_count: Number of trials aborted by a packing error.
        started_at: Run start timestamp.
        completed_at: Completion timestamp (None while running).
        runtime_seconds: Total runtime in seconds.
        trials: Per-trial results.
    """

    benchmark_id: str
    total_instances: int = 0
    errors_count: int = 0
    started_at: datetime = field(default_factory=_utcnow)
    completed_at: datetime | None = None
    runtime_seconds: float = 0.0
    trials: list[TrialMetrics] = field(default_factory=list)

    def add_trial(self, trial: TrialMetrics) -> None:
        """Record one trial result.

        Example:
            >>> bm = BenchmarkMetrics("bench_001")
            >>> bm.add_trial(TrialMetrics("small", 0, "greedy_area", 4, 3, [4, -100], 0.8, 1.5))
            >>> len(bm.trials)
            1
        """
        self.trials.append(trial)

    def record_error(self) -> None:
        self.errors_count += 1

    def mark_complete(self) -> None:
        """Mark the run complete and compute the runtime."""
        self.completed_at = _utcnow()
        self.runtime_seconds = (self.completed_at - self.started_at).total_seconds()

    def stats(self, suite: str | None = None) -> list[AlgorithmStats]:
        """Per-algorithm averages, in first-seen algorithm order.

        Args:
            suite: Restrict to one suite; None aggregates each suite separately.
        """
        groups: dict[tuple[str, str], list[TrialMetrics]] = {}
        for t in self.trials:
            if suite is not None and t.suite != suite:
                continue
            groups.setdefault((t.suite, t.algorithm), []).append(t)

        out = []
        for (suite_name, algorithm), trials in groups.items():
            bins = np.array([t.bins_used for t in trials], dtype=float)
            bounds = np.array([t.lower_bound for t in trials], dtype=float)
            out.append(AlgorithmStats(
                suite=suite_name,
                algorithm=algorithm,
                trials=len(trials),
                avg_bins=float(np.mean(bins)),
                avg_time_ms=float(np.mean([t.elapsed_ms for t in trials])),
                avg_density=float(np.mean([t.mean_density for t in trials])),
                avg_gap=float(np.mean(bins - bounds)),
            ))
        return out

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["started_at"] = self.started_at.isoformat()
        d["completed_at"] = self.completed_at.isoformat() if self.completed_at else None
        d["trials"] = [t.to_dict() for t in self.trials]
        d["stats"] = [s.to_dict() for s in self.stats()]
        return d

    def to_summary_dict(self) -> dict[str, Any]:
        """Dictionary with aggregate metrics only (no per-trial list)."""
        d = self.to_dict()
        del d["trials"]
        return d


def export_to_json(metrics: BenchmarkMetrics, output_path: Path | str, include_trials: bool = True) -> None:
    """Export benchmark metrics to a JSON file."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    data = metrics.to_dict() if include_trials else metrics.to_summary_dict()

    with output_path.open("w") as f:
        json.dump(data, f, indent=2)


def export_to_csv(metrics: BenchmarkMetrics, output_path: Path | str) -> None:
    """Export per-trial metrics to a CSV file (header only when empty)."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with output_path.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=TRIAL_FIELDS)
        writer.writeheader()
        for trial in metrics.trials:
            row = trial.to_dict()
            row["cost"] = " ".join(str(c) for c in trial.cost)
            writer.writerow(row)


def format_stats_table(stats: list[AlgorithmStats], labels: dict[str, str] | None = None) -> str:
    """Render ``Algorithm | avg bins | avg time`` rows as fixed-width text."""
    labels = labels or {}
    lines = [
        f"{'Algorithm':<25} | {'Avg Boxes':<12} | {'Avg Time (ms)':<15}",
        "-" * 58,
    ]
    for s in stats:
        name = labels.get(s.algorithm, s.algorithm)
        lines.append(f"{name:<25} | {s.avg_bins:<12.2f} | {s.avg_time_ms:<15.2f}")
    return "\n".join(lines)


def print_summary(metrics: BenchmarkMetrics) -> str:
    """Generate a human-readable summary of a benchmark run.

    Example:
        >>> bm = BenchmarkMetrics("bench_001", total_instances=1)
        >>> bm.mark_complete()
        >>> "Benchmark: bench_001" in print_summary(bm)
        True
    """
    lines = [
        "=" * 60,
        f"Benchmark: {metrics.benchmark_id}",
        "=" * 60,
        f"Instances: {metrics.total_instances}",
        f"Trials:    {len(metrics.trials)}",
        "",
    ]
    for s in metrics.stats():
        lines.append(
            f"  [{s.suite}] {s.algorithm:<16} bins={s.avg_bins:.2f} "
            f"gap={s.avg_gap:.2f} density={s.avg_density:.1%} time={s.avg_time_ms:.1f}ms"
        )
    lines += [
        "",
        f"Runtime: {metrics.runtime_seconds:.1f} seconds ({metrics.runtime_seconds / 60:.1f} minutes)",
        f"Errors: {metrics.errors_count}",
        "",
        f"Started:   {metrics.started_at.isoformat()}",
        f"Completed: {metrics.completed_at.isoformat() if metrics.completed_at else 'In Progress'}",
        "=" * 60,
    ]
    return "\n".join(lines)
