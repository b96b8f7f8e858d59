"""Shared test fixtures for the Fibonacci engine test suite."""

from __future__ import annotations

import pytest

from fibengine.config import (
    BenchmarkConfig,
    EngineConfig,
    LoggingConfig,
    Settings,
    TraceConfig,
)
from fibengine.device import FibonacciDevice
from fibengine.selector import StrategySelector
from fibengine.strategies.base import Strategy
from fibengine.trace.collector import TraceCollector


@pytest.fixture
def test_settings(tmp_path):
    """Create test settings with sensible defaults and a per-test trace directory."""
    return Settings(
        engine=EngineConfig(
            max_index=150,
            default_strategy=Strategy.FAST_DOUBLING_OPTIMIZED,
            linear_history_limit=1000,
        ),
        benchmark=BenchmarkConfig(runs_per_index=3),
        trace=TraceConfig(enabled=True, log_dir=str(tmp_path / "traces")),
        logging=LoggingConfig(level="DEBUG"),
    )


@pytest.fixture
def selector(test_settings):
    return StrategySelector.from_config(test_settings.engine)


@pytest.fixture
def trace_collector():
    """Create a trace collector for testing."""
    return TraceCollector(trace_id="test-trace-001")


@pytest.fixture
def device(selector, trace_collector, test_settings):
    return FibonacciDevice(
        selector=selector,
        max_index=test_settings.engine.max_index,
        trace_collector=trace_collector,
    )
