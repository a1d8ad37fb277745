"""Benchmark harness: instance generation, configuration and the suite runner."""
