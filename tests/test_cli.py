"""Tests for the command line interface."""

import csv
import textwrap

import click
import pytest
from click.testing import CliRunner

from pacebench.cli import cli, parse_overrides
from pacebench.params import default_params
from pacebench.registry import default_benchmarks

BENCHMARKS = textwrap.dedent(
    """
    from pacebench import benchmark, declare_param

    declare_param("size", 16)

    @benchmark("list append")
    def append():
        items = []
        items.append(1)

    @benchmark("sorted")
    def sort_bench(meter):
        data = list(range(meter.param("size"), 0, -1))
        meter.measure(lambda: sorted(data))
    """
)


@pytest.fixture(autouse=True)
def clean_registries():
    default_benchmarks.clear()
    default_params.clear()
    yield
    default_benchmarks.clear()
    default_params.clear()


@pytest.fixture()
def bench_file(tmp_path):
    path = tmp_path / "benchmarks.py"
    path.write_text(BENCHMARKS, encoding="utf-8")
    return str(path)


@pytest.fixture()
def runner():
    return CliRunner()


def test_list_reporters(runner):
    result = runner.invoke(cli, ["list-reporters"])
    assert result.exit_code == 0
    for name in ("standard", "csv", "json"):
        assert name in result.output


def test_list_benchmarks(runner, bench_file):
    result = runner.invoke(cli, ["list", bench_file])
    assert result.exit_code == 0
    assert "list append" in result.output
    assert "sorted" in result.output
    assert "2 benchmarks" in result.output


def test_list_params(runner, bench_file):
    result = runner.invoke(cli, ["list-params", bench_file])
    assert result.exit_code == 0
    assert "size" in result.output
    assert "16" in result.output


def test_missing_file(runner, tmp_path):
    result = runner.invoke(cli, ["list", str(tmp_path / "absent.py")])
    assert result.exit_code != 0
    assert "not found" in result.output


def test_run_csv(runner, bench_file, tmp_path):
    out = tmp_path / "out.csv"
    result = runner.invoke(
        cli,
        ["run", bench_file, "-r", "csv", "-o", str(out), "-s", "3", "-A",
         "--run", "size:*:4:2:2"],
    )
    assert result.exit_code == 0, result.output

    with open(out, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows[0] == [
        "list append[size=4]",
        "sorted[size=4]",
        "list append[size=8]",
        "sorted[size=8]",
    ]
    assert len(rows) == 4


def test_run_standard_with_filter(runner, bench_file):
    result = runner.invoke(
        cli,
        ["run", bench_file, "-f", "sorted", "-s", "3", "--resamples", "10", "-p", "size=8"],
    )
    assert result.exit_code == 0, result.output
    assert "benchmarking 'sorted'" in result.output
    assert "list append" not in result.output
    assert "mean:" in result.output


@pytest.mark.parametrize(
    "args, message",
    [
        (["-f", "("], "Invalid filter pattern"),
        (["-r", "xml"], "Unknown reporter: xml"),
        (["-p", "depth=3"], "Unknown parameter: depth"),
        (["-p", "size=abc"], "Invalid value for parameter size"),
        (["--run", "size:-:1:1:3"], "Unsupported sweep operator"),
        (["--run", "missing:+:1:1:3"], "Unknown parameter: missing"),
    ],
)
def test_run_configuration_errors(runner, bench_file, args, message):
    result = runner.invoke(cli, ["run", bench_file, "-s", "2"] + args)
    assert result.exit_code == 1
    assert message in result.output
    assert "benchmarking" not in result.output


def test_run_aborts_on_benchmark_failure(runner, tmp_path):
    path = tmp_path / "failing.py"
    path.write_text(
        textwrap.dedent(
            """
            from pacebench import benchmark

            @benchmark("explodes")
            def explodes():
                raise ValueError("kaboom")
            """
        ),
        encoding="utf-8",
    )
    result = runner.invoke(cli, ["run", str(path)])
    assert result.exit_code == 1
    assert "explodes failed to run successfully" in result.output
    assert "kaboom" in result.output


def test_duplicate_benchmarks(runner, tmp_path):
    path = tmp_path / "dupes.py"
    path.write_text(
        textwrap.dedent(
            """
            from pacebench import benchmark

            @benchmark("same")
            def first():
                pass

            @benchmark("same")
            def second():
                pass
            """
        ),
        encoding="utf-8",
    )
    result = runner.invoke(cli, ["run", str(path)])
    assert result.exit_code == 1
    assert "Duplicate benchmark name: same" in result.output


def test_parse_overrides():
    assert parse_overrides(("size=10", " n = 2 ")) == {"size": "10", "n": "2"}
    with pytest.raises(click.BadParameter):
        parse_overrides(("size",))
