"""Tests for the latency benchmark runner."""

import csv

import pytest

from fibengine.bench.runner import BenchmarkReport, BenchmarkRunner, LatencyStats
from fibengine.config import BenchmarkConfig
from fibengine.device import ReadResult
from fibengine.strategies.base import Strategy


class TestLatencyStats:
    def test_basic_statistics(self):
        stats = LatencyStats.from_samples(5, Strategy.FAST_DOUBLING, [100, 200, 300], trim_outliers=False)
        assert stats.mean_ns == pytest.approx(200.0)
        assert stats.median_ns == pytest.approx(200.0)
        assert stats.min_ns == 100
        assert stats.samples == 3

    def test_outliers_trimmed(self):
        samples = [100, 101, 99, 100, 102, 98, 100, 5000]
        stats = LatencyStats.from_samples(1, Strategy.LINEAR_SCAN, samples, outlier_z=2.0)
        assert stats.samples == 7
        assert stats.mean_ns == pytest.approx(100.0)

    def test_constant_samples_kept(self):
        stats = LatencyStats.from_samples(1, Strategy.LINEAR_SCAN, [50, 50, 50, 50])
        assert stats.samples == 4
        assert stats.std_ns == 0.0

    def test_empty_samples(self):
        with pytest.raises(ValueError):
            LatencyStats.from_samples(1, Strategy.LINEAR_SCAN, [])

    def test_to_row(self):
        row = LatencyStats.from_samples(3, Strategy.FAST_DOUBLING_OPTIMIZED, [10, 20]).to_row()
        assert row["index"] == 3
        assert row["strategy"] == "FAST_DOUBLING_OPTIMIZED"
        assert row["samples"] == 2


class TestBenchmarkRunner:
    def test_runs_every_strategy_and_index(self, device):
        runner = BenchmarkRunner(device, BenchmarkConfig(runs_per_index=2))
        report = runner.run(indices=range(0, 31, 10))
        assert len(report.stats) == 3 * 4
        for strategy in Strategy:
            assert [s.index for s in report.for_strategy(strategy)] == [0, 10, 20, 30]
        assert not device.in_use

    def test_restores_selection(self, device):
        device.selector.select(Strategy.FAST_DOUBLING)
        BenchmarkRunner(device, BenchmarkConfig(runs_per_index=1)).run(indices=[5])
        assert device.selector.current == Strategy.FAST_DOUBLING

    def test_default_indices_cover_range(self, selector):
        from fibengine.device import FibonacciDevice

        small = FibonacciDevice(selector=selector, max_index=12)
        report = BenchmarkRunner(small, BenchmarkConfig(runs_per_index=1)).run(
            strategies=[Strategy.FAST_DOUBLING_OPTIMIZED]
        )
        assert [s.index for s in report.stats] == list(range(13))

    def test_empty_strategy_list_measures_nothing(self, device):
        device.selector.select(Strategy.FAST_DOUBLING)
        report = BenchmarkRunner(device, BenchmarkConfig(runs_per_index=1)).run(strategies=[], indices=[5])
        assert report.stats == []
        assert device.selector.current == Strategy.FAST_DOUBLING

    def test_mean_by_strategy(self, device):
        report = BenchmarkRunner(device, BenchmarkConfig(runs_per_index=1)).run(indices=[10, 20])
        means = report.mean_by_strategy()
        assert set(means) == set(Strategy)
        assert all(m >= 0 for m in means.values())

    def test_disagreement_is_an_error(self, device, monkeypatch):
        from fibengine.device import DeviceSession

        original = DeviceSession.read

        def faulty_read(self, size=None):
            result = original(self, size)
            if result.strategy == Strategy.FAST_DOUBLING:
                return ReadResult(
                    index=result.index,
                    strategy=result.strategy,
                    digits=result.digits + "0",
                    elapsed_ns=result.elapsed_ns,
                )
            return result

        monkeypatch.setattr(DeviceSession, "read", faulty_read)
        runner = BenchmarkRunner(device, BenchmarkConfig(runs_per_index=1))
        with pytest.raises(ValueError, match="disagrees"):
            runner.run(indices=[10])
        assert not device.in_use


class TestBenchmarkReport:
    def test_save_csv(self, device, tmp_path):
        report = BenchmarkRunner(device, BenchmarkConfig(runs_per_index=1)).run(indices=[1, 2])
        path = report.save_csv(tmp_path / "out" / "bench.csv")
        with open(path) as f:
            rows = list(csv.DictReader(f))
        assert len(rows) == 6
        assert set(rows[0]) == {"index", "strategy", "mean_ns", "median_ns", "std_ns", "min_ns", "samples"}

    def test_empty_report(self):
        assert BenchmarkReport().to_rows() == []
        assert BenchmarkReport().mean_by_strategy() == {}
