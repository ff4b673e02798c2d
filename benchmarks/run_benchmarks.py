#!/usr/bin/env python3
"""Benchmark suite for pyskiplist comparing against a bisect-sorted list."""

import argparse
import bisect
import json
import math
import random
import time
from pathlib import Path
from typing import Callable, Dict, List

import numpy as np
import plotly.graph_objects as go
from tqdm import tqdm

from pyskiplist import SkipList

_MAX_LEVEL = 32


class Metrics:
    def __init__(self):
        self.add_latencies: List[float] = []
        self.contains_latencies: List[float] = []
        self.total_add_time: float = 0.0

    def to_dict(self) -> Dict:
        return {
            "add_latencies": {
                "p50": np.percentile(self.add_latencies, 50),
                "p95": np.percentile(self.add_latencies, 95),
                "p99": np.percentile(self.add_latencies, 99),
            },
            "contains_latencies": {
                "p50": np.percentile(self.contains_latencies, 50),
                "p95": np.percentile(self.contains_latencies, 95),
                "p99": np.percentile(self.contains_latencies, 99),
            },
            "total_add_time": self.total_add_time,
        }


def plot_latencies(results: Dict[str, Metrics], title: str, output_path: Path):
    fig = go.Figure()
    for name, metrics in results.items():
        fig.add_trace(go.Box(
            y=metrics.add_latencies,
            name=f"{name} add",
            boxpoints="outliers"
        ))
        fig.add_trace(go.Box(
            y=metrics.contains_latencies,
            name=f"{name} contains",
            boxpoints="outliers"
        ))

    fig.update_layout(
        title=title,
        yaxis_title="Latency (µs)",
        boxmode="group"
    )

    fig.write_html(output_path)


class BenchmarkSuite:
    def __init__(self, num_entries: int, seed: int):
        self.num_entries = num_entries
        rnd = random.Random(seed)
        self._values = [rnd.randrange(2**31) for _ in range(num_entries)]
        self._seed = seed

    def run_skiplist_benchmark(self) -> Metrics:
        metrics = Metrics()
        sl: SkipList[int] = SkipList(seed=self._seed)

        start_total = time.perf_counter()
        for v in tqdm(self._values, desc="SkipList add"):
            start = time.perf_counter()
            sl.add(v)
            metrics.add_latencies.append((time.perf_counter() - start) * 1e6)
        metrics.total_add_time = time.perf_counter() - start_total

        for v in tqdm(self._values, desc="SkipList contains"):
            start = time.perf_counter()
            _ = v in sl
            metrics.contains_latencies.append((time.perf_counter() - start) * 1e6)
        return metrics

    def run_sorted_list_benchmark(self) -> Metrics:
        metrics = Metrics()
        items: List[int] = []

        start_total = time.perf_counter()
        for v in tqdm(self._values, desc="bisect add"):
            start = time.perf_counter()
            bisect.insort_left(items, v)
            metrics.add_latencies.append((time.perf_counter() - start) * 1e6)
        metrics.total_add_time = time.perf_counter() - start_total

        for v in tqdm(self._values, desc="bisect contains"):
            start = time.perf_counter()
            i = bisect.bisect_left(items, v)
            _ = i < len(items) and items[i] == v
            metrics.contains_latencies.append((time.perf_counter() - start) * 1e6)
        return metrics


# ------------------------------------------------------------------
# Level drawing strategies
# ------------------------------------------------------------------
def _coin_flip_level(rnd: random.Random, p: float, current_max: int) -> int:
    lvl = 1
    while rnd.random() < p and lvl <= current_max and lvl < _MAX_LEVEL:
        lvl += 1
    return lvl


def _log_level(rnd: random.Random, p: float, current_max: int) -> int:
    u = 1.0 - rnd.random()
    level = int(math.log(u) / math.log(p)) + 1
    return min(level, current_max + 1, _MAX_LEVEL)


def time_level_draws(draw: Callable[[random.Random, float, int], int], p: float, rounds: int) -> float:
    """Mean nanoseconds per height draw."""
    rnd = random.Random(1)
    start = time.perf_counter()
    for _ in range(rounds):
        draw(rnd, p, _MAX_LEVEL)
    return (time.perf_counter() - start) / rounds * 1e9


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--size", type=int, default=30_000, help="Number of entries")
    parser.add_argument("--seed", type=int, default=1, help="Seed for values and towers")
    parser.add_argument("--output", type=Path, default=Path("benchmark_results"), help="Output directory")
    args = parser.parse_args()

    args.output.mkdir(parents=True, exist_ok=True)

    suite = BenchmarkSuite(args.size, args.seed)
    results = {
        "skiplist": suite.run_skiplist_benchmark(),
        "bisect": suite.run_sorted_list_benchmark(),
    }

    plot_latencies(
        results,
        f"SkipList vs bisect ({args.size} entries)",
        args.output / "latencies.html"
    )

    level_draws = {
        f"{name}_p{p}": time_level_draws(fn, p, 200_000)
        for name, fn in (("coin_flip", _coin_flip_level), ("log", _log_level))
        for p in (0.5, 0.1)
    }

    with open(args.output / "metrics.json", "w") as f:
        json.dump({
            name: metrics.to_dict() for name, metrics in results.items()
        } | {"level_draw_ns": level_draws}, f, indent=2)


if __name__ == "__main__":
    main()
