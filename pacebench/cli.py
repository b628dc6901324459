"""
pacebench - CLI Entry Point

Usage:
    pacebench run benchmarks.py
    pacebench run benchmarks.py --filter "sort.*" --reporter csv -o results.csv
    pacebench run benchmarks.py --run size:*:1:2:10 --no-analysis
    pacebench list benchmarks.py
    pacebench list-reporters
"""

import sys
import logging
import importlib.util
from pathlib import Path
from typing import Dict, Tuple

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import Configuration, ParamRunSpec
from .errors import PaceBenchError
from .params import default_params
from .registry import default_benchmarks
from .reporters import default_reporters
from .benchmark.runner import run as run_benchmarks

logger = logging.getLogger(__name__)

console = Console()


def setup_logging(verbose: bool = False, debug: bool = False):
    """Configure logging level."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    # Configure root logger
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        force=True
    )

    logging.getLogger('pacebench').setLevel(level)


def load_benchmark_file(path: str) -> None:
    """
    Import a Python file so its @benchmark and declare_param calls
    register on the default registries.
    """
    file_path = Path(path)
    if not file_path.exists():
        raise click.BadParameter(f"Benchmark file not found: {path}")

    module_name = f"pacebench_user_{file_path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, file_path)
    if spec is None or spec.loader is None:
        raise click.BadParameter(f"Cannot import benchmark file: {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    logger.info(f"Loaded {len(default_benchmarks)} benchmarks from {file_path}")


def parse_overrides(values: Tuple[str, ...]) -> Dict[str, str]:
    """Parse repeated NAME=VALUE options."""
    overrides = {}
    for item in values:
        name, sep, value = item.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"Expected NAME=VALUE, got {item!r}", param_hint="--param")
        overrides[name.strip()] = value.strip()
    return overrides


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output (INFO level)')
@click.option('--debug', is_flag=True, help='Enable debug output (DEBUG level, shows calibration detail)')
@click.pass_context
def cli(ctx, verbose, debug):
    """
    pacebench - microbenchmarking harness

    Calibrates the clock, runs every registered benchmark under every
    parameter set, and reports timing statistics.

    Use -v for verbose output, --debug for detailed logs.
    """
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    ctx.obj['debug'] = debug
    setup_logging(verbose, debug)


@cli.command()
@click.argument('file', type=click.Path(dir_okay=False))
@click.option('--filter', '-f', 'filter_pattern', default='.*', help='Regular expression matching whole benchmark names')
@click.option('--reporter', '-r', default=None, help='Reporter name (see list-reporters)')
@click.option('--samples', '-s', default=None, type=click.IntRange(min=1), help='Samples per benchmark')
@click.option('--resamples', default=None, type=click.IntRange(min=1), help='Bootstrap resamples')
@click.option('--confidence', '-c', default=None, type=click.FloatRange(0, 1, min_open=True, max_open=True), help='Confidence interval')
@click.option('--no-analysis', '-A', is_flag=True, help='Skip statistical analysis')
@click.option('--param', '-p', 'params', multiple=True, help='Fixed parameter value, NAME=VALUE (repeatable)')
@click.option('--run', 'sweep', default=None, help='Parameter sweep, NAME:OP:INIT:STEP:COUNT (OP is + or *)')
@click.option('--output', '-o', default='', help='Report output file')
@click.option('--title', '-t', default='benchmarks', help='Report title')
@click.option('--summary', is_flag=True, help='Only print headline results')
@click.option('--verbose-report', is_flag=True, help='Print calibration and outlier detail')
def run(file, filter_pattern, reporter, samples, resamples, confidence, no_analysis,
        params, sweep, output, title, summary, verbose_report):
    """
    Run the benchmarks registered by FILE.

    Example:
        pacebench run benchmarks.py -f "sort.*" --run size:*:10:10:4
    """
    load_benchmark_file(file)

    try:
        overrides = {
            "filter_pattern": filter_pattern,
            "no_analysis": no_analysis,
            "param_overrides": parse_overrides(params),
            "params": ParamRunSpec.parse(sweep) if sweep else None,
            "output_file": output,
            "title": title,
            "summary": summary,
            "verbose": verbose_report,
        }
        if reporter:
            overrides["reporter_id"] = reporter
        if samples:
            overrides["samples"] = samples
        if resamples:
            overrides["resamples"] = resamples
        if confidence:
            overrides["confidence_interval"] = confidence
        cfg = Configuration.from_settings(**overrides)

        run_benchmarks(cfg, default_benchmarks, default_reporters(), default_params)
    except PaceBenchError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)


@cli.command('list')
@click.argument('file', type=click.Path(dir_okay=False))
def list_benchmarks_cmd(file):
    """List the benchmarks registered by FILE."""
    load_benchmark_file(file)

    console.print("\n[bold]Registered Benchmarks:[/bold]\n")
    for bench in default_benchmarks:
        console.print(f"  [cyan]{bench.name}[/cyan]")
    console.print(f"\n{len(default_benchmarks)} benchmarks")


@cli.command('list-params')
@click.argument('file', type=click.Path(dir_okay=False))
def list_params_cmd(file):
    """List the parameters declared by FILE."""
    load_benchmark_file(file)

    table = Table(title="Declared Parameters")
    table.add_column("Name", style="cyan")
    table.add_column("Default", justify="right")
    for name, default in default_params.defaults().items():
        table.add_row(name, default)
    console.print(table)


@cli.command('list-reporters')
def list_reporters_cmd():
    """List available reporters."""
    table = Table(title="Available Reporters")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    for reporter in default_reporters():
        table.add_row(reporter.name, reporter.description)
    console.print(table)


if __name__ == "__main__":
    cli()
