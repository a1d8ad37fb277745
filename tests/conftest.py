"""Shared fixtures for the rectbins test-suite."""

import os
import sys

import pytest

# Ensure the package is importable without installation
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from rectbins.core.models import Instance, Rect
from rectbins.runner.dataset import generate_instance


@pytest.fixture
def three_squares():
    """Three 10x10 rectangles that each fill an L=10 bin completely."""
    return Instance(10, [Rect(i, 10, 10) for i in range(3)])


@pytest.fixture
def rotation_pair():
    """A 10x4 strip and a 4x10 strip: the second only fits rotated."""
    return Instance(10, [Rect(0, 10, 4), Rect(1, 4, 10)])


@pytest.fixture
def small_instance():
    """A reproducible random instance small enough for every algorithm."""
    return generate_instance(12, (2, 6), (2, 6), 10, rng=7)


@pytest.fixture
def medium_instance():
    return generate_instance(25, (3, 10), (3, 10), 20, rng=11)
