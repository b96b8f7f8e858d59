"""Per-index latency benchmark across Fibonacci strategies."""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

from fibengine.config import BenchmarkConfig
from fibengine.device import FibonacciDevice, SeekOrigin
from fibengine.strategies.base import Strategy

logger = logging.getLogger(__name__)

CSV_FIELDS = ["index", "strategy", "mean_ns", "median_ns", "std_ns", "min_ns", "samples"]


@dataclass
class LatencyStats:
    """Summary of repeated latency samples for one (strategy, index)."""

    index: int
    strategy: Strategy
    mean_ns: float
    median_ns: float
    std_ns: float
    min_ns: int
    samples: int

    @classmethod
    def from_samples(
        cls,
        index: int,
        strategy: Strategy,
        samples: list[int],
        trim_outliers: bool = True,
        outlier_z: float = 2.0,
    ) -> LatencyStats:
        """Summarize raw samples.

        With ``trim_outliers``, samples more than ``outlier_z`` standard
        deviations from the mean are dropped before the statistics are taken.
        """
        if not samples:
            raise ValueError("Cannot summarize an empty sample list")
        data = np.asarray(samples, dtype=np.float64)

        if trim_outliers and data.size > 2:
            std = data.std()
            if std > 0:
                kept = data[np.abs(data - data.mean()) <= outlier_z * std]
                if kept.size:
                    data = kept

        return cls(
            index=index,
            strategy=strategy,
            mean_ns=float(data.mean()),
            median_ns=float(np.median(data)),
            std_ns=float(data.std()),
            min_ns=int(data.min()),
            samples=int(data.size),
        )

    def to_row(self) -> dict[str, int | float | str]:
        return {
            "index": self.index,
            "strategy": self.strategy.name,
            "mean_ns": round(self.mean_ns, 1),
            "median_ns": round(self.median_ns, 1),
            "std_ns": round(self.std_ns, 1),
            "min_ns": self.min_ns,
            "samples": self.samples,
        }


@dataclass
class BenchmarkReport:
    """Latency statistics for every (strategy, index) pair measured."""

    stats: list[LatencyStats] = field(default_factory=list)

    def for_strategy(self, strategy: Strategy) -> list[LatencyStats]:
        return [s for s in self.stats if s.strategy == strategy]

    def mean_by_strategy(self) -> dict[Strategy, float]:
        """Average of the per-index mean latencies for each strategy."""
        result = {}
        for strategy in sorted({s.strategy for s in self.stats}):
            means = [s.mean_ns for s in self.for_strategy(strategy)]
            result[strategy] = float(np.mean(means))
        return result

    def to_rows(self) -> list[dict[str, int | float | str]]:
        return [s.to_row() for s in self.stats]

    def save_csv(self, path: str | Path) -> Path:
        """Write the report as CSV and return the path written."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
            writer.writeheader()
            writer.writerows(self.to_rows())
        logger.info("Saved benchmark to %s (%d rows)", path, len(self.stats))
        return path


class BenchmarkRunner:
    """Measures read latency through a FibonacciDevice.

    For each strategy the runner writes its selector byte, then seeks to
    every requested index and reads it ``runs_per_index`` times. Digits from
    different strategies are compared per index and any disagreement is an
    error.
    """

    def __init__(self, device: FibonacciDevice, config: BenchmarkConfig | None = None) -> None:
        self.device = device
        self.config = config or BenchmarkConfig()

    def run(
        self,
        strategies: list[Strategy] | None = None,
        indices: list[int] | range | None = None,
    ) -> BenchmarkReport:
        """Run the benchmark.

        Args:
            strategies: Strategies to measure. Defaults to all registered.
            indices: Fibonacci indices. Defaults to ``0..max_index``.

        Returns:
            BenchmarkReport with one LatencyStats per (strategy, index).

        Raises:
            ValueError: If two strategies produce different digits for an index.
        """
        if strategies is None:
            strategies = self.device.selector.registry.strategies
        indices = list(indices) if indices is not None else list(range(self.device.max_index + 1))
        report = BenchmarkReport()
        expected: dict[int, str] = {}

        with self.device.open() as session:
            previous = self.device.selector.current
            try:
                for strategy in strategies:
                    session.write(bytes([strategy.value]))
                    for k in indices:
                        position = session.seek(k, SeekOrigin.SET)
                        samples = []
                        for _ in range(self.config.runs_per_index):
                            result = session.read()
                            samples.append(result.elapsed_ns)
                        self._check_digits(expected, position, strategy, result.digits)
                        report.stats.append(
                            LatencyStats.from_samples(
                                position,
                                strategy,
                                samples,
                                trim_outliers=self.config.trim_outliers,
                                outlier_z=self.config.outlier_z,
                            )
                        )
                    logger.info("Benchmarked %s over %d indices", strategy.name, len(indices))
            finally:
                session.write(bytes([previous.value]))

        return report

    @staticmethod
    def _check_digits(expected: dict[int, str], index: int, strategy: Strategy, digits: str) -> None:
        seen = expected.setdefault(index, digits)
        if seen != digits:
            raise ValueError(f"{strategy.name} disagrees at F({index}): {digits} != {seen}")
