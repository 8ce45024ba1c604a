"""Tests for coefficient table construction and merging."""

import logging

import jax.numpy as jnp
import pytest

from aerojax.coefficients import (
    CoefficientTable,
    ScalarTable,
    compare_independent_variables,
    create_coefficient_table,
    create_scalar_table,
    merge_axis_tables,
    merge_coefficient_tables,
)
from aerojax.errors import InconsistentIndependentVariablesError

_MACH = [0.5, 1.0, 2.0, 3.0, 5.0]
_ALPHA = [-0.2, -0.1, 0.0, 0.1, 0.2, 0.3, 0.4]


def _grid_table(offset: float = 0.0, mach=_MACH, alpha=_ALPHA) -> ScalarTable:
    """A 5x7 table whose value at (i, j) is ``offset + 10 i + j``."""
    values = [[offset + 10.0 * i + j for j in range(len(alpha))] for i in range(len(mach))]
    return create_scalar_table(values, [mach, alpha])


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestCreateTables:
    def test_scalar_table_shape(self):
        table = _grid_table()
        assert isinstance(table, ScalarTable)
        assert table.shape == (5, 7)
        assert table.dimensionality == 2

    def test_breakpoint_count_mismatch_raises(self):
        with pytest.raises(ValueError, match="breakpoint arrays"):
            create_scalar_table([[1.0, 2.0]], [[0.0]])

    def test_breakpoint_length_mismatch_raises(self):
        with pytest.raises(ValueError, match="Breakpoints of dimension 1"):
            create_scalar_table([[1.0, 2.0]], [[0.0], [0.0, 1.0, 2.0]])

    def test_non_increasing_breakpoints_raise(self):
        with pytest.raises(ValueError, match="strictly increasing"):
            create_scalar_table([1.0, 2.0, 3.0], [[0.0, 1.0, 1.0]])

    def test_coefficient_table_requires_vectors(self):
        with pytest.raises(ValueError, match="shape"):
            create_coefficient_table([[1.0, 2.0], [3.0, 4.0]], [[0.0, 1.0]])

    def test_coefficient_table(self):
        table = create_coefficient_table(jnp.zeros((2, 3, 3)), [[0.0, 1.0], [0.0, 1.0, 2.0]])
        assert isinstance(table, CoefficientTable)
        assert table.grid_shape == (2, 3)
        assert table.dimensionality == 2


class TestCompareIndependentVariables:
    def test_identical(self):
        assert compare_independent_variables([[0.0, 1.0], [2.0]], [[0.0, 1.0], [2.0]])

    def test_different_values(self):
        assert not compare_independent_variables([[0.0, 1.0]], [[0.0, 1.5]])

    def test_different_lengths(self):
        assert not compare_independent_variables([[0.0, 1.0]], [[0.0, 1.0], [2.0]])
        assert not compare_independent_variables([[0.0, 1.0]], [[0.0, 1.0, 2.0]])


# ---------------------------------------------------------------------------
# Merging
# ---------------------------------------------------------------------------


class TestMergeCoefficientTables:
    def test_merge_element_wise(self):
        x, y, z = _grid_table(0.0), _grid_table(100.0), _grid_table(200.0)
        merged = merge_coefficient_tables(x, y, z)
        assert merged.values.shape == (5, 7, 3)
        for i in range(5):
            for j in range(7):
                expected = jnp.array([x.values[i, j], y.values[i, j], z.values[i, j]])
                assert jnp.array_equal(merged.values[i, j], expected)

    def test_merge_keeps_breakpoints(self):
        merged = merge_coefficient_tables(_grid_table(), _grid_table(), _grid_table())
        assert compare_independent_variables(merged.breakpoints, [_MACH, _ALPHA])

    def test_shape_mismatch_raises(self):
        small = create_scalar_table(jnp.zeros((5, 6)), [_MACH, _ALPHA[:6]])
        with pytest.raises(InconsistentIndependentVariablesError, match="sizes"):
            merge_coefficient_tables(_grid_table(), small, _grid_table())

    def test_breakpoint_mismatch_raises(self):
        shifted_mach = [m + 0.01 for m in _MACH]
        other = _grid_table(mach=shifted_mach)
        with pytest.raises(InconsistentIndependentVariablesError, match="breakpoints"):
            merge_coefficient_tables(_grid_table(), _grid_table(), other)

    def test_mismatch_is_value_error(self):
        other = _grid_table(alpha=[a + 1.0 for a in _ALPHA])
        with pytest.raises(ValueError):
            merge_coefficient_tables(other, _grid_table(), _grid_table())


class TestMergeAxisTables:
    def test_missing_axes_zero_filled(self, caplog):
        cl = _grid_table(1.0)
        with caplog.at_level(logging.WARNING, logger="aerojax.coefficients.tables"):
            merged = merge_axis_tables({2: cl})
        assert jnp.array_equal(merged.values[..., 2], cl.values)
        assert jnp.array_equal(merged.values[..., 0], jnp.zeros((5, 7)))
        assert jnp.array_equal(merged.values[..., 1], jnp.zeros((5, 7)))
        assert "axis 0" in caplog.text
        assert "axis 1" in caplog.text

    def test_all_axes(self):
        tables = {0: _grid_table(0.0), 1: _grid_table(1.0), 2: _grid_table(2.0)}
        merged = merge_axis_tables(tables)
        assert jnp.array_equal(
            merged.values, merge_coefficient_tables(tables[0], tables[1], tables[2]).values
        )

    def test_empty_raises(self):
        with pytest.raises(ValueError, match="At least one"):
            merge_axis_tables({})

    def test_invalid_axis_raises(self):
        with pytest.raises(ValueError, match="Invalid coefficient axis"):
            merge_axis_tables({3: _grid_table()})

    def test_inconsistent_grids_raise(self):
        with pytest.raises(InconsistentIndependentVariablesError):
            merge_axis_tables({0: _grid_table(), 1: _grid_table(alpha=[a * 2.0 for a in _ALPHA])})
