"""Extended-precision time representation for long-duration propagation.

Provides the ``ExtendedTime`` class, which stores an instant as an integer
number of whole hours plus the seconds elapsed within the current hour.
Keeping the large part in an integer leaves the full float mantissa for
the sub-hour part, so times decades from the reference still resolve to
well below a microsecond in float64.

A Kahan compensator tracks rounding errors accumulated while repeatedly
adding small steps (e.g. integrator stages), keeping the accumulated error
at O(1) machine epsilon instead of O(N).

``ExtendedTime`` is registered as a JAX pytree, so it can be carried
through ``jax.tree_util`` utilities and ``jax.lax`` control flow.
"""

from __future__ import annotations

import math

import jax
import jax.numpy as jnp

from aerojax.config import get_dtype

_SECONDS_PER_HOUR = 3600.0


class ExtendedTime:
    """An instant in time, in seconds since an arbitrary reference.

    The internal representation uses three private components:
        ``_hours`` (jnp.int32), ``_seconds`` (float, in ``[0, 3600)``),
        ``_kahan_c`` (float compensator).

    Equality is exact: two ``ExtendedTime`` values compare equal only if
    they denote the same hour and bit-identical compensated seconds.
    Rotational models convert to float seconds since their reference
    time (:meth:`RotationalModel.seconds_since_reference`) and key their
    caches on that float.

    Constructors:
        ExtendedTime(hours, seconds)
        ExtendedTime.from_seconds(86400.5)

    Args:
        hours (int): Whole hours since the reference.
        seconds (float): Seconds on top of *hours*.  Values outside
            ``[0, 3600)`` are normalized into the hour count.
    """

    __slots__ = ('_hours', '_seconds', '_kahan_c')

    def __init__(self, hours: int = 0, seconds: float = 0.0) -> None:
        _float = get_dtype()
        hour_offset = int(math.floor(float(seconds) / _SECONDS_PER_HOUR))
        self._hours = jnp.int32(int(hours) + hour_offset)
        self._seconds = _float(float(seconds) - hour_offset * _SECONDS_PER_HOUR)
        self._kahan_c = _float(0.0)

    @classmethod
    def _from_internal(cls, hours, seconds, kahan_c):
        """Create an ExtendedTime from raw arrays without normalization.

        Used by pytree unflatten and the arithmetic operators.
        """
        obj = object.__new__(cls)
        obj._hours = hours
        obj._seconds = seconds
        obj._kahan_c = kahan_c
        return obj

    @classmethod
    def from_seconds(cls, seconds: float) -> ExtendedTime:
        """Create from a plain number of seconds since the reference.

        Args:
            seconds (float): Seconds since the reference.

        Returns:
            ExtendedTime: Equivalent extended time.
        """
        return cls(0, seconds)

    def _compensated_seconds(self):
        return self._seconds - self._kahan_c

    @property
    def hours(self) -> jax.Array:
        """Whole hours since the reference."""
        return self._hours

    @property
    def seconds_into_hour(self) -> jax.Array:
        """Compensated seconds elapsed within the current hour."""
        return self._compensated_seconds()

    def to_seconds(self) -> jax.Array:
        """Return the time as a single float of seconds since the reference.

        Lossy for very long spans; prefer differences between two
        ``ExtendedTime`` values when precision matters.

        Returns:
            jax.Array: Seconds since the reference.
        """
        _float = get_dtype()
        return (_float(self._hours) * _float(_SECONDS_PER_HOUR)
                + self._compensated_seconds())

    def __float__(self) -> float:
        return float(self.to_seconds())

    # Arithmetic operators

    def __add__(self, delta: float) -> ExtendedTime:
        """Return a new time advanced by *delta* seconds (Kahan summation)."""
        _float = get_dtype()
        delta = _float(delta)
        y = delta - self._kahan_c
        t = self._seconds + y
        new_kahan_c = (t - self._seconds) - y

        hour_offset = jnp.int32(jnp.floor(t / _SECONDS_PER_HOUR))
        new_seconds = t - _float(hour_offset) * _float(_SECONDS_PER_HOUR)
        return ExtendedTime._from_internal(self._hours + hour_offset, new_seconds, new_kahan_c)

    def __radd__(self, delta: float) -> ExtendedTime:
        return self.__add__(delta)

    def __sub__(self, other: ExtendedTime | float) -> ExtendedTime | jax.Array:
        """Subtract seconds, or compute the difference between two times.

        Args:
            other: If ``ExtendedTime``, the difference in seconds is
                returned.  If numeric, a new time *other* seconds earlier.

        Returns:
            Seconds between the two times, or a new ``ExtendedTime``.
        """
        if isinstance(other, ExtendedTime):
            _float = get_dtype()
            return (_float(self._hours - other._hours) * _float(_SECONDS_PER_HOUR)
                    + (self._compensated_seconds() - other._compensated_seconds()))
        return self.__add__(-float(other))

    # Comparison operators

    def _key(self) -> tuple[int, float]:
        return int(self._hours), float(self._compensated_seconds())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExtendedTime):
            return NotImplemented
        return self._key() == other._key()

    def __ne__(self, other: object) -> bool:
        if not isinstance(other, ExtendedTime):
            return NotImplemented
        return self._key() != other._key()

    def __lt__(self, other: ExtendedTime) -> bool:
        if not isinstance(other, ExtendedTime):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other: ExtendedTime) -> bool:
        if not isinstance(other, ExtendedTime):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other: ExtendedTime) -> bool:
        if not isinstance(other, ExtendedTime):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other: ExtendedTime) -> bool:
        if not isinstance(other, ExtendedTime):
            return NotImplemented
        return self._key() >= other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    # String representations

    def __str__(self) -> str:
        hours, seconds = self._key()
        return f"{hours}h + {seconds:.9f}s"

    def __repr__(self) -> str:
        return (f'ExtendedTime(_hours={int(self._hours)}, _seconds={float(self._seconds)}, '
                f'_kahan_c={float(self._kahan_c)})')


jax.tree_util.register_pytree_node(
    ExtendedTime,
    lambda t: ((t._hours, t._seconds, t._kahan_c), None),
    lambda _, children: ExtendedTime._from_internal(*children),
)
