"""Benchmark configuration: pydantic models plus YAML/JSON loading.

A config file looks like::

    seed: 42
    sample_size: 50
    schedule:
      phases: 10
      initial_penalty: 10
    suites:
      - name: small
        num_instances: 5
        num_rects: 30
        width_range: [5, 20]
        height_range: [5, 20]
        box_size: 40
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from rectbins.algorithms.annealing import OverlapSchedule

ALGORITHMS: tuple[str, ...] = (
    "greedy_area",
    "greedy_side",
    "ls_geometric",
    "ls_permutation",
    "ls_overlap",
)

ALGORITHM_LABELS: dict[str, str] = {
    "greedy_area": "Greedy SortByArea",
    "greedy_side": "Greedy SortByMaxSide",
    "ls_geometric": "Local Search Geometric",
    "ls_permutation": "Local Search Permutation",
    "ls_overlap": "Local Search Overlap",
}


class SuiteConfig(BaseModel):
    """One benchmark configuration: how many instances of which shape."""

    name: str = "suite"
    num_instances: int = Field(ge=1)
    num_rects: int = Field(ge=1)
    width_range: tuple[int, int]
    height_range: tuple[int, int]
    box_size: int = Field(ge=1)

    @field_validator("width_range", "height_range")
    @classmethod
    def _ordered_range(cls, value: tuple[int, int]) -> tuple[int, int]:
        lo, hi = value
        if lo < 1:
            raise ValueError(f"range minimum must be >= 1, got {lo}")
        if lo > hi:
            raise ValueError(f"range minimum {lo} exceeds maximum {hi}")
        return value

    @model_validator(mode="after")
    def _ranges_fit_box(self) -> "SuiteConfig":
        if self.width_range[1] > self.box_size or self.height_range[1] > self.box_size:
            raise ValueError(
                f"{self.name}: rectangle ranges exceed box size {self.box_size}"
            )
        return self


class ScheduleConfig(BaseModel):
    phases: int = Field(default=10, ge=1)
    initial_penalty: int = Field(default=10, ge=1)
    penalty_growth: int = Field(default=5, ge=1)
    initial_tolerance: float = Field(default=1.0, ge=0.0, le=1.0)

    def to_schedule(self) -> OverlapSchedule:
        return OverlapSchedule(**self.model_dump())


class BenchmarkConfig(BaseModel):
    """Everything a benchmark run needs."""

    suites: list[SuiteConfig]
    seed: int | None = None
    sample_size: int = Field(default=50, ge=1)
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)
    algorithms: list[str] = Field(default_factory=lambda: list(ALGORITHMS))
    results_dir: str = "results"
    send_telegram: bool = False

    @field_validator("algorithms")
    @classmethod
    def _known_algorithms(cls, value: list[str]) -> list[str]:
        unknown = [a for a in value if a not in ALGORITHMS]
        if unknown:
            raise ValueError(f"Unknown algorithms {unknown}. Available: {list(ALGORITHMS)}")
        return value


DEFAULT_SUITES: dict[str, list[SuiteConfig]] = {
    "small": [
        SuiteConfig(name="small-30", num_instances=5, num_rects=30,
                    width_range=(5, 20), height_range=(5, 20), box_size=40),
        SuiteConfig(name="small-100", num_instances=5, num_rects=100,
                    width_range=(10, 30), height_range=(10, 30), box_size=100),
    ],
    "large": [
        SuiteConfig(name="large-500", num_instances=3, num_rects=500,
                    width_range=(10, 50), height_range=(10, 50), box_size=150),
        SuiteConfig(name="large-1000", num_instances=1, num_rects=1000,
                    width_range=(10, 80), height_range=(10, 80), box_size=300),
    ],
}


def _load_file(path: Path) -> Any:
    raw = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        return json.loads(raw)
    return yaml.safe_load(raw)


def load_config(path: Path | str) -> BenchmarkConfig:
    """Read a YAML or JSON benchmark config and validate it.

    Raises:
        pydantic.ValidationError: If the file content is not a valid config.
        TypeError: If the top level is not a mapping.
    """
    path = Path(path)
    data = _load_file(path)
    if not isinstance(data, dict):
        raise TypeError(f"{path}: expected a mapping at top-level, got {type(data).__name__}")
    return BenchmarkConfig.model_validate(data)
