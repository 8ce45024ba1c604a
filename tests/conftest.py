import jax.numpy as jnp
import pytest

from aerojax.config import set_dtype


@pytest.fixture(autouse=True)
def _ensure_float64():
    """Set float64 precision before every test.

    Tests that exercise other precisions (test_config.py) switch the dtype
    themselves; this fixture restores the default for everything else.
    """
    set_dtype(jnp.float64)
