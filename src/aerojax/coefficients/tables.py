"""Construction, validation and merging of coefficient tables.

Coefficient data usually arrives one component at a time (``C_D``,
``C_S``, ``C_L`` or ``C_l``, ``C_m``, ``C_n``), each as its own
:class:`ScalarTable`.  :func:`merge_coefficient_tables` combines three
such tables into a single :class:`CoefficientTable` of 3-vectors, after
checking that all three share the same grid.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

import jax.numpy as jnp
import numpy as np
from jax.typing import ArrayLike

from aerojax.coefficients._types import CoefficientTable, ScalarTable
from aerojax.config import get_dtype
from aerojax.errors import InconsistentIndependentVariablesError

logger = logging.getLogger(__name__)


def _validate_breakpoints(breakpoints: Sequence[ArrayLike], grid_shape: tuple[int, ...]) -> tuple:
    if len(breakpoints) != len(grid_shape):
        raise ValueError(
            f"Table has {len(grid_shape)} dimensions but {len(breakpoints)} "
            f"breakpoint arrays were given"
        )
    _float = get_dtype()
    validated = []
    for i, (axis_breakpoints, n) in enumerate(zip(breakpoints, grid_shape)):
        axis_breakpoints = np.asarray(axis_breakpoints, dtype=np.float64)
        if axis_breakpoints.ndim != 1 or axis_breakpoints.shape[0] != n:
            raise ValueError(
                f"Breakpoints of dimension {i} have shape {axis_breakpoints.shape}, "
                f"expected ({n},)"
            )
        if np.any(np.diff(axis_breakpoints) <= 0.0):
            raise ValueError(f"Breakpoints of dimension {i} are not strictly increasing")
        validated.append(jnp.asarray(axis_breakpoints, dtype=_float))
    return tuple(validated)


def create_scalar_table(values: ArrayLike, breakpoints: Sequence[ArrayLike]) -> ScalarTable:
    """Build a validated :class:`ScalarTable`.

    Args:
        values: Grid of values, shape ``(n_1, ..., n_N)``.
        breakpoints: N strictly increasing 1-D arrays of lengths ``n_i``.

    Returns:
        ScalarTable: The table, with arrays in the configured dtype.

    Raises:
        ValueError: If the breakpoints do not match the grid or are not
            strictly increasing.

    Examples:
        ```python
        from aerojax.coefficients import create_scalar_table
        cd = create_scalar_table([[0.1, 0.2], [0.3, 0.4]], [[0.5, 2.0], [0.0, 0.2]])
        ```
    """
    values = jnp.asarray(values, dtype=get_dtype())
    return ScalarTable(values, _validate_breakpoints(breakpoints, tuple(values.shape)))


def create_coefficient_table(values: ArrayLike, breakpoints: Sequence[ArrayLike]) -> CoefficientTable:
    """Build a validated :class:`CoefficientTable`.

    Args:
        values: Grid of 3-vectors, shape ``(n_1, ..., n_N, 3)``.
        breakpoints: N strictly increasing 1-D arrays of lengths ``n_i``.

    Returns:
        CoefficientTable: The table, with arrays in the configured dtype.

    Raises:
        ValueError: If the trailing dimension is not 3 or the breakpoints do
            not match the grid.
    """
    values = jnp.asarray(values, dtype=get_dtype())
    if values.ndim < 2 or values.shape[-1] != 3:
        raise ValueError(
            f"Coefficient table values must have shape (n_1, ..., n_N, 3), got {values.shape}"
        )
    return CoefficientTable(values, _validate_breakpoints(breakpoints, tuple(values.shape[:-1])))


def zeros_like_table(table: CoefficientTable) -> CoefficientTable:
    """Coefficient table on the same grid with all values zero."""
    return CoefficientTable(jnp.zeros_like(table.values), table.breakpoints)


def compare_independent_variables(
    first: Sequence[ArrayLike],
    second: Sequence[ArrayLike],
) -> bool:
    """Check whether two sets of breakpoint arrays are identical.

    Args:
        first: Breakpoint arrays of the first table.
        second: Breakpoint arrays of the second table.

    Returns:
        bool: True if both have the same number of dimensions and every
        pair of breakpoint arrays is element-wise equal.
    """
    if len(first) != len(second):
        return False
    return all(
        np.array_equal(np.asarray(a), np.asarray(b)) for a, b in zip(first, second)
    )


def merge_coefficient_tables(
    x_table: ScalarTable,
    y_table: ScalarTable,
    z_table: ScalarTable,
) -> CoefficientTable:
    """Merge three per-axis scalar tables into one table of 3-vectors.

    ``merged.values[i, j, ...] == (x[i, j, ...], y[i, j, ...], z[i, j, ...])``.

    Args:
        x_table: Component along the first axis.
        y_table: Component along the second axis.
        z_table: Component along the third axis.

    Returns:
        CoefficientTable: Merged table on the shared grid.

    Raises:
        InconsistentIndependentVariablesError: If the tables differ in shape
            or in any breakpoint array.
    """
    if not (x_table.shape == y_table.shape == z_table.shape):
        raise InconsistentIndependentVariablesError(
            f"Coefficient table sizes are inconsistent: {x_table.shape}, "
            f"{y_table.shape}, {z_table.shape}"
        )
    if not (compare_independent_variables(x_table.breakpoints, y_table.breakpoints)
            and compare_independent_variables(x_table.breakpoints, z_table.breakpoints)):
        raise InconsistentIndependentVariablesError(
            "Coefficient tables have inconsistent independent variable breakpoints"
        )

    values = jnp.stack([x_table.values, y_table.values, z_table.values], axis=-1)
    return CoefficientTable(values, x_table.breakpoints)


def merge_axis_tables(tables: Mapping[int, ScalarTable]) -> CoefficientTable:
    """Merge any subset of per-axis tables, zero-filling the missing axes.

    Args:
        tables: Mapping from axis index (0, 1 or 2) to its scalar table.

    Returns:
        CoefficientTable: Merged table.

    Raises:
        ValueError: If no table is given or an axis index is out of range.
        InconsistentIndependentVariablesError: If the given tables do not
            share a grid.
    """
    if not tables:
        raise ValueError("At least one coefficient table is required")
    invalid_axes = sorted(set(tables) - {0, 1, 2})
    if invalid_axes:
        raise ValueError(f"Invalid coefficient axis indices {invalid_axes}, expected 0, 1 or 2")

    reference = tables[min(tables)]
    components = []
    for axis in range(3):
        if axis in tables:
            components.append(tables[axis])
        else:
            logger.warning("No coefficient table for axis %d, filling with zeros", axis)
            components.append(ScalarTable(jnp.zeros_like(reference.values), reference.breakpoints))
    return merge_coefficient_tables(*components)
