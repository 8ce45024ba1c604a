"""CSV readers for tabulated coefficient data.

Tables are stored in long format: one row per grid node, one column per
independent variable plus a value column::

    mach,alpha,value
    0.5,0.0,0.021
    0.5,0.1,0.034
    ...

Every combination of the distinct independent variable values must appear
exactly once.  The reader sorts the rows and reshapes the value column
into an N-dimensional grid.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

import numpy as np
import polars as pl

from aerojax.coefficients._types import ScalarTable
from aerojax.coefficients.tables import create_scalar_table

logger = logging.getLogger(__name__)


def table_columns(filepath: str | Path, value_column: str = "value") -> list[str]:
    """Independent variable column names of a table file, in file order.

    Args:
        filepath: Path to the CSV file.
        value_column: Name of the value column, excluded from the result.

    Returns:
        list[str]: All other column names.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file has no column named *value_column*.
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Coefficient table file not found: {filepath}")
    columns = pl.read_csv(filepath).columns
    if value_column not in columns:
        raise ValueError(f"Column '{value_column}' missing from {filepath}")
    return [c for c in columns if c != value_column]


def read_scalar_table(
    filepath: str | Path,
    independent_variable_columns: Sequence[str],
    value_column: str = "value",
) -> ScalarTable:
    """Read a long-format CSV file into a :class:`ScalarTable`.

    Args:
        filepath: Path to the CSV file.
        independent_variable_columns: Columns forming the table dimensions,
            in table order.
        value_column: Column holding the tabulated values.

    Returns:
        ScalarTable: Table with one dimension per independent variable
        column.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If a column is missing, a grid node is duplicated, or
            the grid is incomplete.

    Examples:
        ```python
        from aerojax.coefficients import read_scalar_table
        cd = read_scalar_table("cd.csv", ["mach", "alpha"], "value")
        cd.shape
        ```
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Coefficient table file not found: {filepath}")

    logger.info("Loading coefficient table from %s", filepath)

    columns = list(independent_variable_columns)
    df = pl.read_csv(filepath)

    missing = [c for c in [*columns, value_column] if c not in df.columns]
    if missing:
        raise ValueError(f"Columns {missing} missing from {filepath}")
    if not columns:
        raise ValueError(f"No independent variable columns given for {filepath}")

    df = df.select([pl.col(c).cast(pl.Float64) for c in [*columns, value_column]])
    if df.select(pl.struct(columns).is_duplicated().any()).item():
        raise ValueError(f"Duplicate grid nodes in {filepath}")

    breakpoints = [np.sort(df[c].unique().to_numpy()) for c in columns]
    shape = tuple(len(b) for b in breakpoints)
    if df.height != int(np.prod(shape)):
        raise ValueError(
            f"Incomplete grid in {filepath}: {df.height} rows for a grid of shape {shape}"
        )

    values = df.sort(columns)[value_column].to_numpy().reshape(shape)
    logger.debug("Read %s table of shape %s from %s", value_column, shape, filepath)
    return create_scalar_table(values, breakpoints)
