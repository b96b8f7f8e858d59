"""CLI entry point for the Fibonacci engine."""

from __future__ import annotations

import argparse
import os
import sys
import uuid

# Ensure project root is on Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from fibengine.bench.runner import BenchmarkReport, BenchmarkRunner
from fibengine.config import Settings, load_config, setup_logging
from fibengine.device import FibonacciDevice, ReadResult, SeekOrigin, SessionBusyError
from fibengine.selector import StrategySelector
from fibengine.strategies.base import Strategy
from fibengine.strategies.linear import HistoryLimitExceededError
from fibengine.trace.collector import TraceCollector

console = Console()


def build_device(settings: Settings, trace_collector: TraceCollector | None) -> FibonacciDevice:
    """Wire the selector and device from settings."""
    selector = StrategySelector.from_config(settings.engine)
    return FibonacciDevice(
        selector=selector,
        max_index=settings.engine.max_index,
        trace_collector=trace_collector,
    )


def display_result(result: ReadResult, requested: int, console: Console) -> None:
    """Display one computed value with its latency."""
    console.print()
    console.print(Panel(
        result.digits,
        title=f"F({result.index})",
        border_style="green",
    ))

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="dim")
    table.add_column()
    table.add_row("Strategy", result.strategy.name)
    table.add_row("Digits", str(len(result.digits)))
    table.add_row("Latency", f"{result.elapsed_ns:,} ns")
    if requested != result.index:
        table.add_row("Clamped from", str(requested))

    console.print(table)


def display_benchmark(report: BenchmarkReport, console: Console) -> None:
    """Render mean latency per index, one column per strategy."""
    strategies = sorted({s.strategy for s in report.stats})
    table = Table(title="Read latency (mean ns)")
    table.add_column("k", justify="right")
    for strategy in strategies:
        table.add_column(strategy.name, justify="right")

    by_key = {(s.index, s.strategy): s for s in report.stats}
    for index in sorted({s.index for s in report.stats}):
        row = [str(index)]
        for strategy in strategies:
            stats = by_key.get((index, strategy))
            row.append(f"{stats.mean_ns:,.0f}" if stats else "-")
        table.add_row(*row)

    console.print(table)
    for strategy, mean in report.mean_by_strategy().items():
        console.print(f"[dim]{strategy.name}: {mean:,.0f} ns average[/dim]")


def run_single(k: int, strategy: Strategy | None, device: FibonacciDevice) -> int:
    """Compute one value and exit."""
    with device.open() as session:
        if strategy is not None:
            session.write(bytes([strategy.value]))
        session.seek(k, SeekOrigin.SET)
        result = session.read()

    display_result(result, k, console)
    return 0


def run_bench(args, settings: Settings, device: FibonacciDevice) -> int:
    """Benchmark all strategies over 0..max."""
    if args.runs:
        settings.benchmark.runs_per_index = args.runs
    upper = min(args.max if args.max is not None else device.max_index, device.max_index)

    runner = BenchmarkRunner(device, settings.benchmark)
    with console.status("[bold blue]Benchmarking...[/bold blue]"):
        report = runner.run(indices=range(upper + 1))

    display_benchmark(report, console)
    if args.csv:
        path = report.save_csv(args.csv)
        console.print(f"[dim]Results saved: {path}[/dim]")
    return 0


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Exact Fibonacci numbers with selectable algorithms",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("index", nargs="?", type=int, help="Fibonacci index to compute")
    parser.add_argument(
        "--strategy", "-s", default=None,
        help="0/linear, 1/doubling or 2/doubling-opt (default from config)",
    )
    parser.add_argument("--bench", action="store_true", help="Benchmark all strategies")
    parser.add_argument("--max", type=int, default=None, help="Highest index to benchmark")
    parser.add_argument("--runs", type=int, default=None, help="Reads per index when benchmarking")
    parser.add_argument("--csv", default=None, help="Write benchmark results to this CSV file")
    parser.add_argument("--config", default=None, help="Path to config YAML file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    args = parser.parse_args()

    # Load configuration
    settings = load_config(args.config)
    if args.verbose:
        settings.logging.level = "DEBUG"
    setup_logging(settings.logging)

    if args.index is None and not args.bench:
        parser.error("an index is required unless --bench is given")

    try:
        strategy = Strategy.from_name(args.strategy) if args.strategy else None
    except ValueError as e:
        parser.error(str(e))

    trace_collector = TraceCollector(
        trace_id=uuid.uuid4().hex[:8],
        log_dir=settings.trace.log_dir if settings.trace.enabled else None,
    )
    device = build_device(settings, trace_collector)

    try:
        if args.bench:
            exit_code = run_bench(args, settings, device)
        else:
            exit_code = run_single(args.index, strategy, device)
    except (HistoryLimitExceededError, SessionBusyError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        exit_code = 1

    saved = trace_collector.save()
    if saved:
        console.print(f"[dim]Trace saved: {saved}[/dim]")
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
