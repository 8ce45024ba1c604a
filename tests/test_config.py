"""Tests for the aerojax.config module."""

import jax
import jax.numpy as jnp
import pytest

from aerojax.attitude import Orientation
from aerojax.coefficients import create_scalar_table
from aerojax.config import get_dtype, get_kinematics_tolerance, set_dtype
from aerojax.time import ExtendedTime


@pytest.fixture(autouse=True)
def reset_dtype():
    """Reset dtype to float64 before and after each test."""
    set_dtype(jnp.float64)
    yield
    set_dtype(jnp.float64)


class TestGetSetDtype:
    def test_default_dtype(self):
        assert get_dtype() == jnp.float64

    def test_set_float32(self):
        set_dtype(jnp.float32)
        assert get_dtype() == jnp.float32

    def test_set_float16(self):
        set_dtype(jnp.float16)
        assert get_dtype() == jnp.float16

    def test_set_bfloat16(self):
        set_dtype(jnp.bfloat16)
        assert get_dtype() == jnp.bfloat16

    def test_roundtrip(self):
        for dtype in (jnp.float16, jnp.bfloat16, jnp.float32, jnp.float64):
            set_dtype(dtype)
            assert get_dtype() == dtype

    def test_invalid_dtype_raises(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype(jnp.int32)

    def test_invalid_dtype_string_raises(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype("float32")

    def test_float64_enables_x64(self):
        set_dtype(jnp.float64)
        assert jax.config.jax_enable_x64 is True


class TestKinematicsTolerance:
    def test_float64_tolerance(self):
        assert get_kinematics_tolerance() == 1e-12

    def test_float32_tolerance(self):
        set_dtype(jnp.float32)
        assert get_kinematics_tolerance() == 1e-6

    def test_float16_tolerance(self):
        set_dtype(jnp.float16)
        assert get_kinematics_tolerance() == 1e-3

    def test_bfloat16_tolerance(self):
        set_dtype(jnp.bfloat16)
        assert get_kinematics_tolerance() == 1e-3


class TestDtypeSwitchingOutputs:
    """Verify that output dtypes match the configured dtype."""

    def test_orientation_matrix_dtype_float32(self):
        set_dtype(jnp.float32)
        assert Orientation.identity().to_matrix().dtype == jnp.float32

    def test_orientation_matrix_dtype_float64(self):
        assert Orientation.identity().to_matrix().dtype == jnp.float64

    def test_extended_time_seconds_dtype(self):
        time = ExtendedTime(2, 15.0)
        assert time._seconds.dtype == jnp.float64
        assert time._hours.dtype == jnp.int32

    def test_scalar_table_dtype_follows_config(self):
        set_dtype(jnp.float32)
        table = create_scalar_table([1.0, 2.0], [[0.0, 1.0]])
        assert table.values.dtype == jnp.float32
        assert table.breakpoints[0].dtype == jnp.float32
