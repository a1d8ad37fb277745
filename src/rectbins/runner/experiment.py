"""Benchmark runner: every algorithm on every generated instance."""

from __future__ import annotations

import argparse
import asyncio
import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

import numpy as np

from rectbins.algorithms.annealing import run_overlap_annealing
from rectbins.algorithms.greedy_packing import solve_greedy
from rectbins.algorithms.local_search import local_search
from rectbins.algorithms.neighborhoods import GeometricNeighborhood, RuleBasedNeighborhood
from rectbins.core.errors import PackingError
from rectbins.core.models import Instance
from rectbins.core.solution import PackingSolution, PermutationSolution
from rectbins.monitoring.metrics import (
    BenchmarkMetrics,
    TrialMetrics,
    export_to_csv,
    export_to_json,
    format_stats_table,
    print_summary,
)
from rectbins.monitoring.telegram_notifier import (
    format_benchmark_start,
    format_error,
    format_final_summary,
    format_suite_milestone,
    send_telegram,
)
from rectbins.runner.config import (
    ALGORITHM_LABELS,
    DEFAULT_SUITES,
    BenchmarkConfig,
    SuiteConfig,
    load_config,
)
from rectbins.runner.dataset import generate_instance

logger = logging.getLogger(__name__)

# Zero-argument search whose wall time is measured
Prepared = Callable[[], PackingSolution]


class BenchmarkRunner:
    """
    Runs the configured algorithms on freshly generated instances,
    collects metrics, and optionally sends progress updates.
    """

    def __init__(
        self,
        config: BenchmarkConfig,
        keep_going: bool = False,
    ):
        """
        Args:
            config: Validated benchmark configuration.
            keep_going: Record packing errors and continue instead of re-raising.
        """
        self.config = config
        self.keep_going = keep_going
        self.results_dir = Path(config.results_dir)
        self.rng = np.random.default_rng(config.seed)
        self.schedule = config.schedule.to_schedule()

    # ── Algorithms ───────────────────────────────────────────────────────

    def prepare(self, algorithm: str, instance: Instance) -> Prepared:
        """Build the start state for *algorithm* and return the search to time."""
        if algorithm == "greedy_area":
            return lambda: solve_greedy(instance, "largest_area")
        if algorithm == "greedy_side":
            return lambda: solve_greedy(instance, "longest_side")
        if algorithm == "ls_geometric":
            trivial = PackingSolution.trivial(instance)
            return lambda: local_search(trivial, GeometricNeighborhood())
        if algorithm == "ls_permutation":
            start = PermutationSolution.shuffled(instance, self.rng)
            neighborhood = RuleBasedNeighborhood(self.config.sample_size, self.rng)
            return lambda: local_search(start, neighborhood).decode()
        if algorithm == "ls_overlap":
            trivial = PackingSolution.trivial(instance)
            return lambda: run_overlap_annealing(trivial, self.schedule)
        raise ValueError(f"Unknown algorithm '{algorithm}'")

    def run_trial(self, suite: str, idx: int, algorithm: str, instance: Instance) -> TrialMetrics:
        """Run one algorithm on one instance and validate the result."""
        search = self.prepare(algorithm, instance)
        start = time.perf_counter()
        solution = search()
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        solution.validate()
        logger.debug("%s #%d %s: %d bins in %.1f ms", suite, idx, algorithm, solution.bin_count, elapsed_ms)
        return TrialMetrics(
            suite=suite,
            instance_idx=idx,
            algorithm=algorithm,
            bins_used=solution.bin_count,
            lower_bound=instance.area_lower_bound,
            cost=list(solution.cost()),
            mean_density=solution.mean_density(),
            elapsed_ms=elapsed_ms,
        )

    # ── Suites ───────────────────────────────────────────────────────────

    async def run_suite(self, suite: SuiteConfig, metrics: BenchmarkMetrics) -> None:
        print(
            f"\nConfiguration: {suite.num_rects} Rectangles, Box-Size L={suite.box_size}, "
            f"Rectangle Ranges (width)-(height) {suite.width_range}-{suite.height_range}"
        )
        print(f"Number Instances: {suite.num_instances}")

        for idx in range(suite.num_instances):
            instance = generate_instance(
                suite.num_rects, suite.width_range, suite.height_range, suite.box_size, self.rng,
            )
            metrics.total_instances += 1
            for algorithm in self.config.algorithms:
                try:
                    metrics.add_trial(self.run_trial(suite.name, idx, algorithm, instance))
                except PackingError as exc:
                    metrics.record_error()
                    await self.notify(format_error(
                        type(exc).__name__, str(exc),
                        {"suite": suite.name, "instance": idx, "algorithm": algorithm},
                    ))
                    if not self.keep_going:
                        raise
                    logger.error("%s #%d %s failed: %s", suite.name, idx, algorithm, exc)

        print()
        print(format_stats_table(metrics.stats(suite.name), ALGORITHM_LABELS))

    async def run(self) -> BenchmarkMetrics:
        """
        Run all suites.

        Flow:
            1. Send start notification
            2. For each suite: generate instances, run every algorithm,
               print the suite table, save interim results, notify
            3. Mark complete, save final results, send summary
        """
        benchmark_id = f"bench_{datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')}"
        metrics = BenchmarkMetrics(benchmark_id=benchmark_id)
        suites = self.config.suites

        await self.notify(format_benchmark_start(
            suites=len(suites),
            total_instances=sum(s.num_instances for s in suites),
            algorithms=self.config.algorithms,
        ))

        print("Start Benchmark")
        for done, suite in enumerate(suites, start=1):
            await self.run_suite(suite, metrics)
            self._save_results(metrics, suffix=f"_interim_{done}")

            stats = metrics.stats(suite.name)
            if stats:
                best = min(stats, key=lambda s: s.avg_bins)
                await self.notify(format_suite_milestone(
                    suite.name, done, len(suites), best.algorithm, best.avg_bins,
                ))

        metrics.mark_complete()
        self._save_results(metrics, suffix="_final")
        await self.notify(format_final_summary(
            trials=len(metrics.trials),
            runtime_seconds=metrics.runtime_seconds,
            errors=metrics.errors_count,
        ))
        print(print_summary(metrics))
        return metrics

    async def notify(self, message: str) -> None:
        if self.config.send_telegram:
            await send_telegram(message)

    def _save_results(self, metrics: BenchmarkMetrics, suffix: str = "") -> None:
        base_filename = f"{metrics.benchmark_id}{suffix}"
        json_path = self.results_dir / f"{base_filename}.json"
        export_to_json(metrics, json_path, include_trials=suffix.endswith("_final"))
        csv_path = self.results_dir / f"{base_filename}_trials.csv"
        export_to_csv(metrics, csv_path)
        logger.info("Saved results to %s and %s", json_path, csv_path)


# ─────────────────────────────────────────────────────────────────────────────
# CLI
# ─────────────────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Benchmark rectangle bin packing heuristics")
    parser.add_argument("--config", type=Path, help="YAML/JSON benchmark config (overrides --mode)")
    parser.add_argument(
        "--mode", choices=["small", "large", "all"], default="small",
        help="Built-in suites to run when no config is given (default: small)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--algorithms", type=str, default=None,
                        help="Comma-separated subset of algorithms to run")
    parser.add_argument("--sample-size", type=int, default=None,
                        help="Neighbors sampled per round by the permutation search")
    parser.add_argument("--results-dir", type=str, default=None, help="Output directory")
    parser.add_argument("--telegram", action="store_true", help="Send Telegram progress messages")
    parser.add_argument("--keep-going", action="store_true", help="Continue after packing errors")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser


def config_from_args(args: argparse.Namespace) -> BenchmarkConfig:
    """Merge CLI flags over the config file (or the built-in suites)."""
    if args.config is not None:
        config = load_config(args.config)
    else:
        modes = ["small", "large"] if args.mode == "all" else [args.mode]
        config = BenchmarkConfig(suites=[s for m in modes for s in DEFAULT_SUITES[m]])

    overrides: dict = {}
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.algorithms:
        overrides["algorithms"] = [a.strip() for a in args.algorithms.split(",") if a.strip()]
    if args.sample_size is not None:
        overrides["sample_size"] = args.sample_size
    if args.results_dir:
        overrides["results_dir"] = args.results_dir
    if args.telegram:
        overrides["send_telegram"] = True
    if overrides:
        config = BenchmarkConfig.model_validate({**config.model_dump(), **overrides})
    return config


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    config = config_from_args(args)
    runner = BenchmarkRunner(config, keep_going=args.keep_going)
    asyncio.run(runner.run())
    print("\n=== Benchmark completed! ===")


if __name__ == "__main__":
    main()
