"""Tests for the built-in console, CSV and JSON reporters."""

import csv
import io
import json

import pytest

from pacebench.benchmark.runner import BenchmarkRunner
from pacebench.benchmark.utils import column_name, format_duration
from pacebench.config import Configuration, ParamRunSpec
from pacebench.errors import BenchmarkUserError, NoSuchReporter
from pacebench.registry import BenchmarkRegistry
from pacebench.reporters import (
    ConsoleReporter,
    CsvReporter,
    JsonReporter,
    ReporterRegistry,
    default_reporters,
)
from pacebench.reporters.console import variance_effect


@pytest.fixture()
def run_with(clock, fast_settings, param_registry):
    """Run benchmarks through a real reporter with the simulated clock."""

    def _run(reporter, cfg, benchmarks):
        runner = BenchmarkRunner(
            reporter, clock=clock, param_registry=param_registry, settings=fast_settings,
        )
        runner.go(cfg, list(benchmarks))

    return _run


def test_format_duration():
    assert format_duration(12.0) == "12 ns"
    assert format_duration(1500.0) == "1.5 μs"
    assert format_duration(2.5e6) == "2.5 ms"
    assert format_duration(3e9) == "3 s"


def test_column_name():
    assert column_name("sort", {}) == "sort"
    assert column_name("sort", {"size": "10", "n": "2"}) == "sort[size=10,n=2]"


def test_variance_effect():
    assert variance_effect(0.0) == "unaffected"
    assert variance_effect(0.05) == "slightly inflated"
    assert variance_effect(0.3) == "moderately inflated"
    assert variance_effect(0.9) == "severely inflated"


class TestReporterRegistry:
    def test_default_reporters(self):
        registry = default_reporters()
        assert registry.names() == ["standard", "csv", "json"]
        assert isinstance(registry.get("standard"), ConsoleReporter)

    def test_unknown_reporter_lists_available(self):
        registry = ReporterRegistry([CsvReporter()])
        with pytest.raises(NoSuchReporter) as exc_info:
            registry.get("xml")
        assert exc_info.value.name == "xml"
        assert "csv" in str(exc_info.value)


class TestConsoleReporter:
    def test_standard_output(self, run_with, make_registry):
        stream = io.StringIO()
        cfg = Configuration(samples=5, resamples=20)
        run_with(ConsoleReporter(stream), cfg, make_registry("a"))

        output = stream.getvalue()
        assert "clock resolution: mean is 10 ns" in output
        assert "benchmarking 'a'" in output
        assert "collecting 5 samples, 1 iterations each, in estimated" in output
        assert "mean: 99.94 ns" in output
        assert "std dev: 0 ns" in output
        assert "variance is unaffected by outliers" in output
        assert "warming up" not in output

    def test_verbose_output(self, run_with, make_registry):
        stream = io.StringIO()
        cfg = Configuration(samples=5, resamples=20, verbose=True)
        run_with(ConsoleReporter(stream), cfg, make_registry("a"))

        output = stream.getvalue()
        assert "warming up" in output
        assert "estimating clock resolution" in output
        assert "estimating cost of a clock call" in output
        assert "bootstrapping with 20 resamples" in output
        assert "variance introduced by outliers: 0.00%" in output

    def test_summary_output(self, run_with, make_registry):
        stream = io.StringIO()
        cfg = Configuration(samples=5, resamples=20, summary=True)
        run_with(ConsoleReporter(stream), cfg, make_registry("a"))

        output = stream.getvalue()
        assert "'a'" in output
        assert "benchmarking" not in output
        assert "collecting" not in output
        assert "mean: 99.94 ns" in output

    def test_parameters_and_table(self, run_with, make_registry):
        stream = io.StringIO()
        cfg = Configuration(
            samples=3, resamples=10, title="sizes",
            params=ParamRunSpec("size", "*", "1", "10", 2),
        )
        run_with(ConsoleReporter(stream), cfg, make_registry("a"))

        output = stream.getvalue()
        assert "parameters: size = 1" in output
        assert "parameters: size = 10" in output
        assert "sizes" in output
        assert "a[size=10]" in output

    def test_failure_output(self, run_with):
        registry = BenchmarkRegistry()

        def broken():
            raise RuntimeError("setup broke")

        registry.add("broken", broken)
        stream = io.StringIO()
        with pytest.raises(BenchmarkUserError):
            run_with(ConsoleReporter(stream), Configuration(), registry)

        output = stream.getvalue()
        assert "broken failed to run successfully" in output
        assert "error: setup broke" in output
        assert "benchmark aborted" in output


class TestCsvReporter:
    def _rows(self, text):
        header, *rows = text.splitlines()
        columns = next(csv.reader([header]))
        values = list(csv.reader(rows, quoting=csv.QUOTE_NONNUMERIC))
        return columns, values

    def test_samples_per_column(self, run_with, make_registry):
        stream = io.StringIO()
        cfg = Configuration(reporter_id="csv", no_analysis=True, samples=3)
        run_with(CsvReporter(stream), cfg, make_registry("a", "b"))

        text = stream.getvalue()
        assert text.splitlines()[0] == '"a","b"'
        columns, rows = self._rows(text)
        assert columns == ["a", "b"]
        assert len(rows) == 3
        for row in rows:
            assert row == [pytest.approx(99.9375e-9), pytest.approx(99.9375e-9)]

    def test_sweep_columns(self, run_with, make_registry):
        stream = io.StringIO()
        cfg = Configuration(
            no_analysis=True, samples=2, params=ParamRunSpec("n", "+", "0", "1", 2),
        )
        run_with(CsvReporter(stream), cfg, make_registry("a"))

        columns, rows = self._rows(stream.getvalue())
        assert columns == ["a[n=0]", "a[n=1]"]
        assert len(rows) == 2

    def test_writes_output_file(self, run_with, make_registry, tmp_path):
        path = tmp_path / "results" / "samples.csv"
        cfg = Configuration(no_analysis=True, samples=2, output_file=str(path))
        reporter = CsvReporter()
        run_with(reporter, cfg, make_registry("a"))

        assert path.read_text(encoding="utf-8").splitlines()[0] == '"a"'
        assert reporter.output_path == path


class TestJsonReporter:
    def test_document(self, run_with, make_registry, tmp_path):
        path = tmp_path / "out.json"
        cfg = Configuration(samples=4, resamples=10, title="suite", output_file=str(path))
        run_with(JsonReporter(), cfg, make_registry("a", "b"))

        document = json.loads(path.read_text(encoding="utf-8"))
        assert document["title"] == "suite"
        assert set(document["clock"]) == {"clock_resolution", "clock_cost"}
        assert document["clock"]["clock_resolution"]["mean"] == 10.0
        assert document["configuration"]["samples"] == 4
        assert "hostname" in document["test_environment"]

        names = [b["name"] for b in document["benchmarks"]]
        assert names == ["a", "b"]
        first = document["benchmarks"][0]
        assert len(first["samples"]) == 4
        assert first["plan"]["iterations_per_sample"] == 1
        assert first["analysis"]["mean"]["point"] == pytest.approx(99.9375)

    def test_default_output_directory(self, run_with, make_registry, tmp_path):
        cfg = Configuration(no_analysis=True, samples=2, title="nightly")
        run_with(JsonReporter(output_dir=tmp_path), cfg, make_registry("a"))

        reports = list(tmp_path.glob("nightly_*.json"))
        assert len(reports) == 1
        document = json.loads(reports[0].read_text(encoding="utf-8"))
        assert document["benchmarks"][0]["analysis"] is None

    def test_given_stream_wins_over_default_file(self, run_with, make_registry, tmp_path):
        stream = io.StringIO()
        cfg = Configuration(no_analysis=True, samples=2)
        run_with(JsonReporter(stream, output_dir=tmp_path), cfg, make_registry("a"))

        assert json.loads(stream.getvalue())["benchmarks"][0]["name"] == "a"
        assert list(tmp_path.iterdir()) == []


def _broken_registry():
    registry = BenchmarkRegistry()

    def broken():
        raise RuntimeError("setup broke")

    registry.add("broken", broken)
    return registry


class TestAbortedRuns:
    def test_json_leaves_no_default_file(self, run_with, tmp_path):
        reporter = JsonReporter(output_dir=tmp_path)
        with pytest.raises(BenchmarkUserError):
            run_with(reporter, Configuration(title="nightly"), _broken_registry())

        assert list(tmp_path.iterdir()) == []
        assert reporter.output_path is None

    def test_csv_leaves_no_output_file(self, run_with, tmp_path):
        path = tmp_path / "samples.csv"
        reporter = CsvReporter()
        cfg = Configuration(no_analysis=True, output_file=str(path))
        with pytest.raises(BenchmarkUserError):
            run_with(reporter, cfg, _broken_registry())

        assert not path.exists()
        assert reporter._owned_stream is None

    def test_console_file_is_closed_with_failure_output(self, run_with, tmp_path):
        path = tmp_path / "console.txt"
        reporter = ConsoleReporter()
        with pytest.raises(BenchmarkUserError):
            run_with(reporter, Configuration(output_file=str(path)), _broken_registry())

        assert reporter._owned_stream is None
        output = path.read_text(encoding="utf-8")
        assert "broken failed to run successfully" in output
        assert "benchmark aborted" in output

    def test_reporter_reusable_after_abort(self, run_with, make_registry, tmp_path):
        path = tmp_path / "out.json"
        reporter = JsonReporter()
        cfg = Configuration(no_analysis=True, samples=2, output_file=str(path))
        with pytest.raises(BenchmarkUserError):
            run_with(reporter, cfg, _broken_registry())
        assert not path.exists()

        run_with(reporter, cfg, make_registry("a"))
        document = json.loads(path.read_text(encoding="utf-8"))
        assert [b["name"] for b in document["benchmarks"]] == ["a"]
