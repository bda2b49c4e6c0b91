"""Tests for the end-to-end batch driver."""

import pytest

from hv_manager.calculators import ExternalHypervolumeCalculator
from hv_manager.config import RunConfig
from hv_manager.errors import (
    AmbiguousReferenceFile,
    ConfigurationError,
    MissingReferenceFile,
    NoInputFiles,
    NoValidResults,
)
from hv_manager.pipeline import build_calculator, check_calculator, resolve_executable, run_pipeline

from conftest import StubCalculator

EXPECTED_SUMMARY = "Number of valid files: 2\nMean: 5.0000000000e-01\nStandard Deviation: 1.0000000000e-01"


class TestRunPipeline:
    """Tests for run_pipeline with an injected calculator."""

    def test_worked_example(self, example_run, example_calculator) -> None:
        """a=0.4, b=0.0, c=0.6: three .hv files and a summary over two valid fronts."""
        stats = run_pipeline(RunConfig(directory=example_run, jobs=2), calculator=example_calculator)

        assert stats.valid_count == 2
        assert stats.total_count == 3
        assert (example_run / "a.hv").read_text() == "4.0000000000e-01"
        assert (example_run / "b.hv").read_text() == "0.0000000000e+00"
        assert (example_run / "c.hv").read_text() == "6.0000000000e-01"
        assert (example_run / "overall_hypervolume.ohv").read_text() == EXPECTED_SUMMARY

    def test_every_front_is_computed_once(self, example_run, example_calculator) -> None:
        run_pipeline(RunConfig(directory=example_run), calculator=example_calculator)
        assert sorted(example_calculator.calls) == ["a.pof", "b.pof", "c.pof"]

    def test_rerun_is_idempotent(self, example_run, example_calculator) -> None:
        config = RunConfig(directory=example_run, jobs=3)

        run_pipeline(config, calculator=example_calculator)
        first = {p.name: p.read_bytes() for p in example_run.glob("*.*hv")}
        run_pipeline(config, calculator=example_calculator)
        second = {p.name: p.read_bytes() for p in example_run.glob("*.*hv")}

        assert first == second
        assert set(first) == {"a.hv", "b.hv", "c.hv", "overall_hypervolume.ohv"}

    def test_failed_front_counts_as_non_convergent(self, example_run) -> None:
        calc = StubCalculator({"a.pof": 0.4, "c.pof": 0.6}, failures={"b.pof"})

        stats = run_pipeline(RunConfig(directory=example_run), calculator=calc)

        assert stats.valid_count == 2
        assert (example_run / "b.hv").read_text() == "0.0000000000e+00"

    def test_stepping_filters_generations(self, tmp_path, make_front, make_ref) -> None:
        make_ref(tmp_path)
        for gen in range(1, 7):
            make_front(tmp_path, f"run_gen{gen}.pof", offset=gen)
        make_front(tmp_path, "final.pof", offset=10)
        calc = StubCalculator({f"run_gen{gen}.pof": 0.1 * gen for gen in range(1, 7)} | {"final.pof": 0.9})

        stats = run_pipeline(RunConfig(directory=tmp_path, stepping=3), calculator=calc)

        assert sorted(calc.calls) == ["final.pof", "run_gen3.pof", "run_gen6.pof"]
        assert stats.valid_count == 3
        assert not (tmp_path / "run_gen1.hv").exists()

    def test_custom_summary_name(self, example_run, example_calculator) -> None:
        run_pipeline(RunConfig(directory=example_run, summary_name="batch.ohv"), calculator=example_calculator)
        assert (example_run / "batch.ohv").read_text() == EXPECTED_SUMMARY

    def test_all_zero_raises_without_summary(self, example_run) -> None:
        calc = StubCalculator({"a.pof": 0.0, "b.pof": 0.0, "c.pof": 0.0})

        with pytest.raises(NoValidResults):
            run_pipeline(RunConfig(directory=example_run), calculator=calc)

        assert (example_run / "a.hv").read_text() == "0.0000000000e+00"
        assert not (example_run / "overall_hypervolume.ohv").exists()


class TestFatalConditions:
    """Fatal conditions are detected before any calculation starts."""

    def test_missing_reference(self, tmp_path, make_front) -> None:
        make_front(tmp_path, "a.pof")
        calc = StubCalculator({"a.pof": 0.5})

        with pytest.raises(MissingReferenceFile):
            run_pipeline(RunConfig(directory=tmp_path), calculator=calc)

        assert calc.calls == []

    def test_ambiguous_reference(self, tmp_path, make_front, make_ref) -> None:
        make_ref(tmp_path, name="a.ref")
        make_ref(tmp_path, name="b.ref")
        make_front(tmp_path, "a.pof")
        calc = StubCalculator({"a.pof": 0.5})

        with pytest.raises(AmbiguousReferenceFile):
            run_pipeline(RunConfig(directory=tmp_path), calculator=calc)

        assert calc.calls == []

    def test_no_fronts(self, tmp_path, make_ref) -> None:
        make_ref(tmp_path)
        with pytest.raises(NoInputFiles):
            run_pipeline(RunConfig(directory=tmp_path), calculator=StubCalculator({}))

    def test_missing_directory(self, tmp_path) -> None:
        calc = StubCalculator({})
        with pytest.raises(ConfigurationError, match="Run directory not found"):
            run_pipeline(RunConfig(directory=tmp_path / "nope"), calculator=calc)
        assert calc.calls == []

    def test_missing_executable_is_checked_first(self, tmp_path) -> None:
        """Without a calculator the backend is checked even before the .ref lookup."""
        with pytest.raises(ConfigurationError, match="executable path not provided"):
            run_pipeline(RunConfig(directory=tmp_path))


class TestPreflight:
    """Tests for resolve_executable, check_calculator and build_calculator."""

    def test_unset_executable(self) -> None:
        with pytest.raises(ConfigurationError, match="lopez-ibanez.eu/hypervolume"):
            resolve_executable(None)

    def test_missing_executable(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            resolve_executable(str(tmp_path / "hv"))

    def test_non_executable_file(self, tmp_path) -> None:
        path = tmp_path / "hv"
        path.write_text("#!/bin/sh\n")
        path.chmod(0o644)
        with pytest.raises(ConfigurationError, match="not executable"):
            resolve_executable(str(path))

    def test_resolves_executable(self, fake_hv) -> None:
        assert resolve_executable(str(fake_hv)) == fake_hv

    def test_check_external(self, fake_hv) -> None:
        check_calculator(RunConfig(hv_executable=str(fake_hv)))

    def test_check_pymoo(self) -> None:
        pytest.importorskip("pymoo")
        check_calculator(RunConfig(calculator="pymoo"))

    def test_build_external(self, fake_hv) -> None:
        calc = build_calculator(RunConfig(hv_executable=str(fake_hv), timeout=10.0))
        assert isinstance(calc, ExternalHypervolumeCalculator)
        assert calc.timeout == 10.0


class TestEndToEnd:
    """Full runs with real calculator backends."""

    def test_external_tool(self, example_run, fake_hv) -> None:
        """The fake hv tool echoes each front's first coordinate."""
        stats = run_pipeline(RunConfig(directory=example_run, hv_executable=str(fake_hv), jobs=2))

        assert stats.valid_count == 2
        assert (example_run / "a.hv").read_text() == "4.0000000000e-01"
        assert (example_run / "b.hv").read_text() == "0.0000000000e+00"
        assert (example_run / "overall_hypervolume.ohv").read_text() == EXPECTED_SUMMARY

    def test_pymoo(self, tmp_path, make_front, make_ref) -> None:
        pytest.importorskip("pymoo")
        make_ref(tmp_path)
        make_front(tmp_path, "a.pof", offset=0, content="0.5 0.5\n")
        make_front(tmp_path, "b.pof", offset=1, content="1.5 1.5\n")
        make_front(tmp_path, "c.pof", offset=2, content="0.2 0.6\n0.6 0.2\n")

        stats = run_pipeline(RunConfig(directory=tmp_path, calculator="pymoo"))

        assert stats.valid_count == 2
        assert stats.mean == pytest.approx((0.25 + 0.48) / 2)
        assert (tmp_path / "b.hv").read_text() == "0.0000000000e+00"
