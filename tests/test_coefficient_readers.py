"""Tests for reading coefficient tables from CSV files."""

import itertools
import logging

import jax.numpy as jnp
import pytest

from aerojax.coefficients import (
    AerodynamicCoefficientIndependentVariable as Var,
)
from aerojax.coefficients import (
    AerodynamicCoefficientType,
    create_coefficient_model,
    read_scalar_table,
    read_tabulated_coefficients_from_files,
    read_tabulated_control_increments_from_files,
)
from aerojax.errors import InconsistentIndependentVariablesError, UnsupportedDimensionalityError

_MACH = [0.5, 1.5, 3.0]
_ALPHA = [0.0, 0.1, 0.2, 0.3]


def _write_table(path, function, axes=(_MACH, _ALPHA), names=("mach", "alpha"), shuffle=False):
    """Write a long-format table of ``function(*coordinates)``."""
    rows = list(itertools.product(*axes))
    if shuffle:
        rows = rows[::-1]
    lines = [",".join([*names, "value"])]
    lines += [",".join([*(repr(x) for x in row), repr(function(*row))]) for row in rows]
    path.write_text("\n".join(lines) + "\n")
    return path


# ---------------------------------------------------------------------------
# read_scalar_table
# ---------------------------------------------------------------------------


class TestReadScalarTable:
    def test_reads_grid(self, tmp_path):
        path = _write_table(tmp_path / "cd.csv", lambda m, a: 0.1 * m + a)
        table = read_scalar_table(path, ["mach", "alpha"], "value")
        assert table.shape == (3, 4)
        assert jnp.allclose(table.breakpoints[0], jnp.array(_MACH))
        assert jnp.allclose(table.breakpoints[1], jnp.array(_ALPHA))
        assert float(table.values[2, 1]) == pytest.approx(0.1 * 3.0 + 0.1)

    def test_row_order_irrelevant(self, tmp_path):
        ordered = _write_table(tmp_path / "a.csv", lambda m, a: m * a)
        shuffled = _write_table(tmp_path / "b.csv", lambda m, a: m * a, shuffle=True)
        assert jnp.array_equal(
            read_scalar_table(ordered, ["mach", "alpha"]).values,
            read_scalar_table(shuffled, ["mach", "alpha"]).values,
        )

    def test_column_order_defines_dimensions(self, tmp_path):
        path = _write_table(tmp_path / "cd.csv", lambda m, a: m + 10.0 * a)
        table = read_scalar_table(path, ["alpha", "mach"])
        assert table.shape == (4, 3)

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="not found"):
            read_scalar_table(tmp_path / "missing.csv", ["mach"])

    def test_missing_column_raises(self, tmp_path):
        path = _write_table(tmp_path / "cd.csv", lambda m, a: m)
        with pytest.raises(ValueError, match="beta"):
            read_scalar_table(path, ["mach", "beta"])

    def test_incomplete_grid_raises(self, tmp_path):
        path = _write_table(tmp_path / "cd.csv", lambda m, a: m)
        lines = path.read_text().splitlines()
        path.write_text("\n".join(lines[:-1]) + "\n")
        with pytest.raises(ValueError, match="Incomplete grid"):
            read_scalar_table(path, ["mach", "alpha"])

    def test_duplicate_nodes_raise(self, tmp_path):
        path = _write_table(tmp_path / "cd.csv", lambda m, a: m)
        lines = path.read_text().splitlines()
        path.write_text("\n".join([*lines, lines[1]]) + "\n")
        with pytest.raises(ValueError, match="Duplicate"):
            read_scalar_table(path, ["mach", "alpha"])

    def test_logs_file_load(self, tmp_path, caplog):
        path = _write_table(tmp_path / "cd.csv", lambda m, a: m)
        with caplog.at_level(logging.INFO, logger="aerojax.coefficients._readers"):
            read_scalar_table(path, ["mach", "alpha"])
        assert "cd.csv" in caplog.text


# ---------------------------------------------------------------------------
# Settings from files
# ---------------------------------------------------------------------------


class TestReadTabulatedCoefficients:
    def _files(self, tmp_path):
        cd = _write_table(tmp_path / "cd.csv", lambda m, a: 0.5 + 0.1 * m)
        cl = _write_table(tmp_path / "cl.csv", lambda m, a: 2.0 * a)
        cm = _write_table(tmp_path / "cm.csv", lambda m, a: 0.05 - 0.5 * a)
        return cd, cl, cm

    def test_builds_tabulated_settings(self, tmp_path):
        cd, cl, cm = self._files(tmp_path)
        settings = read_tabulated_coefficients_from_files(
            {0: cd, 2: cl}, {1: cm}, [Var.MACH_NUMBER, Var.ANGLE_OF_ATTACK]
        )
        assert settings.coefficient_type is AerodynamicCoefficientType.TABULATED
        assert settings.coefficients.dimensionality == 2

    def test_model_from_files(self, tmp_path):
        cd, cl, cm = self._files(tmp_path)
        settings = read_tabulated_coefficients_from_files(
            {0: cd, 2: cl}, {1: cm}, [Var.MACH_NUMBER, Var.ANGLE_OF_ATTACK]
        )
        coefficients = create_coefficient_model(settings).evaluate([1.5, 0.2])
        assert jnp.allclose(coefficients.force, jnp.array([0.65, 0.0, 0.4]))
        assert jnp.allclose(coefficients.moment, jnp.array([0.0, -0.05, 0.0]))

    def test_without_moment_files(self, tmp_path):
        cd, _, _ = self._files(tmp_path)
        settings = read_tabulated_coefficients_from_files({0: cd}, None, [Var.MACH_NUMBER, Var.ANGLE_OF_ATTACK])
        assert settings.coefficients.moment_table is None

    def test_variable_count_must_match_files(self, tmp_path):
        cd, _, _ = self._files(tmp_path)
        with pytest.raises(InconsistentIndependentVariablesError):
            read_tabulated_coefficients_from_files({0: cd}, None, [Var.MACH_NUMBER])

    def test_files_must_share_columns(self, tmp_path):
        cd, _, _ = self._files(tmp_path)
        other = _write_table(tmp_path / "cs.csv", lambda m, b: 0.0, names=("mach", "beta"))
        with pytest.raises(InconsistentIndependentVariablesError):
            read_tabulated_coefficients_from_files(
                {0: cd, 1: other}, None, [Var.MACH_NUMBER, Var.ANGLE_OF_ATTACK]
            )

    def test_files_must_share_grid(self, tmp_path):
        cd, _, _ = self._files(tmp_path)
        coarse = _write_table(tmp_path / "cl.csv", lambda m, a: a, axes=(_MACH, _ALPHA[:3]))
        with pytest.raises(InconsistentIndependentVariablesError):
            read_tabulated_coefficients_from_files(
                {0: cd, 2: coarse}, None, [Var.MACH_NUMBER, Var.ANGLE_OF_ATTACK]
            )

    def test_too_many_dimensions(self, tmp_path):
        axes = [[0.0, 1.0]] * 7
        names = [f"x{i}" for i in range(7)]
        path = _write_table(tmp_path / "cd7.csv", lambda *x: sum(x), axes=axes, names=names)
        with pytest.raises(UnsupportedDimensionalityError):
            read_tabulated_coefficients_from_files({0: path}, None, [Var.UNDEFINED] * 7)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_tabulated_coefficients_from_files(
                {0: tmp_path / "nope.csv"}, None, [Var.MACH_NUMBER]
            )


class TestReadControlIncrements:
    def test_builds_increment_settings(self, tmp_path):
        deflections = [-0.3, 0.0, 0.3]
        dcm = _write_table(
            tmp_path / "dcm.csv", lambda d, m: -0.2 * d,
            axes=(deflections, _MACH), names=("deflection", "mach"),
        )
        increment = read_tabulated_control_increments_from_files(
            {0: dcm}, {1: dcm}, [Var.CONTROL_SURFACE_DEFLECTION, Var.MACH_NUMBER]
        )
        assert increment.coefficient_type is AerodynamicCoefficientType.TABULATED
        assert increment.coefficients.independent_variables == (
            Var.CONTROL_SURFACE_DEFLECTION, Var.MACH_NUMBER,
        )
