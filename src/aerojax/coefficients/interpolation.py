"""JIT-compatible linear interpolation of coefficient tables.

Two interpolators are provided, both holding the boundary value for
queries outside the tabulated range:

- :func:`interpolate_univariate` for 1-D tables, built on ``jnp.interp``.
- :func:`interpolate_multilinear` for N-D tables.  Brackets each
  coordinate with ``jnp.searchsorted`` and reduces the grid one dimension
  at a time, so the cost grows linearly with N rather than with the
  ``2**N`` corners of the enclosing cell.

Both take the breakpoints and values as arguments, so a single jitted
function serves every table of the same shape.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike


def _bracket(breakpoints: Array, x: Array) -> tuple[Array, Array, Array]:
    """Lower/upper bracketing indices and clamped interpolation fraction."""
    n = breakpoints.shape[0]
    if n == 1:
        zero = jnp.zeros((), dtype=jnp.int32)
        return zero, zero, jnp.zeros((), dtype=breakpoints.dtype)

    idx = jnp.searchsorted(breakpoints, x, side="right")
    idx_lo = jnp.clip(idx - 1, 0, n - 2)
    idx_hi = idx_lo + 1

    x_lo = breakpoints[idx_lo]
    x_hi = breakpoints[idx_hi]
    frac = jnp.clip((x - x_lo) / (x_hi - x_lo), 0.0, 1.0)
    return idx_lo, idx_hi, frac


@jax.jit
def interpolate_univariate(
    breakpoints: tuple[Array],
    values: Array,
    point: ArrayLike,
) -> Array:
    """Interpolate a 1-D table of vectors.

    Args:
        breakpoints: One-element tuple holding the breakpoint array, shape ``(n,)``.
        values: Table values, shape ``(n, 3)``.
        point: Coordinates of the query, shape ``(1,)``.

    Returns:
        jax.Array: Interpolated vector, shape ``(3,)``.
    """
    x = jnp.asarray(point, dtype=values.dtype)[0]
    xp = breakpoints[0]
    if xp.shape[0] == 1:
        return values[0]
    return jax.vmap(lambda column: jnp.interp(x, xp, column), in_axes=1)(values)


@jax.jit
def interpolate_multilinear(
    breakpoints: tuple[Array, ...],
    values: Array,
    point: ArrayLike,
) -> Array:
    """Interpolate an N-D table of vectors.

    Args:
        breakpoints: N breakpoint arrays, the i-th of shape ``(n_i,)``.
        values: Table values, shape ``(n_1, ..., n_N, 3)``.
        point: Coordinates of the query, shape ``(N,)``.

    Returns:
        jax.Array: Interpolated vector, shape ``(3,)``.

    Examples:
        ```python
        import jax.numpy as jnp
        from aerojax.coefficients import interpolate_multilinear
        bp = (jnp.array([0.0, 1.0]), jnp.array([0.0, 1.0]))
        values = jnp.arange(12.0).reshape(2, 2, 3)
        interpolate_multilinear(bp, values, jnp.array([0.5, 0.5]))  # [4.5, 5.5, 6.5]
        ```
    """
    point = jnp.asarray(point, dtype=values.dtype)
    result = values
    for i, axis_breakpoints in enumerate(breakpoints):
        idx_lo, idx_hi, frac = _bracket(axis_breakpoints, point[i])
        result = (1.0 - frac) * result[idx_lo] + frac * result[idx_hi]
    return result
