"""Coefficient model factory.

Creates :class:`~aerojax.coefficients.models.AerodynamicCoefficientModel`
instances from :class:`~aerojax.coefficients.config.AerodynamicCoefficientSettings`.
The settings tag selects a builder from a fixed table; tabulated models
are further specialized by table dimensionality.  Control-surface
increment models are created by the same builders and attached to the
baseline model.

The file readers at the bottom of this module turn sets of per-axis CSV
tables into settings objects.  They are the only place where file I/O
happens, so all tables are loaded before a simulation starts.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path

from aerojax.coefficients._readers import read_scalar_table, table_columns
from aerojax.coefficients._types import (
    AerodynamicCoefficientIndependentVariable,
    AerodynamicCoefficientType,
    CoefficientTable,
)
from aerojax.coefficients.config import (
    AerodynamicCoefficientSettings,
    ConstantCoefficients,
    ControlSurfaceIncrementSettings,
    ReferenceQuantities,
    TabulatedCoefficients,
)
from aerojax.coefficients.interpolation import interpolate_multilinear, interpolate_univariate
from aerojax.coefficients.models import (
    AerodynamicCoefficientModel,
    ConstantCoefficientModel,
    TabulatedCoefficientModel,
)
from aerojax.coefficients.tables import merge_axis_tables, zeros_like_table
from aerojax.errors import InconsistentIndependentVariablesError, UnsupportedDimensionalityError

logger = logging.getLogger(__name__)

MIN_TABLE_DIMENSIONALITY = 1
MAX_TABLE_DIMENSIONALITY = 6


def _check_dimensionality(dimensionality: int, context: str) -> None:
    if not MIN_TABLE_DIMENSIONALITY <= dimensionality <= MAX_TABLE_DIMENSIONALITY:
        raise UnsupportedDimensionalityError(dimensionality, context)


def _create_constant_model(
    coefficients: ConstantCoefficients,
    reference: ReferenceQuantities,
    body: str,
) -> AerodynamicCoefficientModel:
    return ConstantCoefficientModel(coefficients.force, coefficients.moment, reference)


def _create_tabulated_model(
    coefficients: TabulatedCoefficients,
    reference: ReferenceQuantities,
    body: str,
) -> AerodynamicCoefficientModel:
    dimensionality = coefficients.dimensionality
    _check_dimensionality(dimensionality, f"body '{body}'")

    interpolator = interpolate_univariate if dimensionality == 1 else interpolate_multilinear
    moment_table = coefficients.moment_table
    if moment_table is None:
        moment_table = zeros_like_table(coefficients.force_table)

    return TabulatedCoefficientModel(
        coefficients.force_table,
        moment_table,
        coefficients.independent_variables,
        reference,
        interpolator,
    )


_MODEL_BUILDERS: dict[AerodynamicCoefficientType, Callable[..., AerodynamicCoefficientModel]] = {
    AerodynamicCoefficientType.CONSTANT: _create_constant_model,
    AerodynamicCoefficientType.TABULATED: _create_tabulated_model,
}


def create_control_surface_increment_model(
    settings: ControlSurfaceIncrementSettings,
    reference: ReferenceQuantities,
    body: str = "",
) -> AerodynamicCoefficientModel:
    """Create the increment model of a single control surface.

    Args:
        settings: Increment settings.
        reference: Reference quantities of the baseline model.
        body: Name of the body, used in error messages.

    Returns:
        AerodynamicCoefficientModel: The increment model.
    """
    return _MODEL_BUILDERS[settings.coefficient_type](settings.coefficients, reference, body)


def create_coefficient_model(
    settings: AerodynamicCoefficientSettings,
    body: str = "",
) -> AerodynamicCoefficientModel:
    """Create a coefficient model, including its control-surface increments.

    Args:
        settings: Coefficient settings.
        body: Name of the body the model belongs to, used in log and error
            messages.

    Returns:
        AerodynamicCoefficientModel: The configured model.

    Raises:
        UnsupportedDimensionalityError: If a tabulated model has fewer than
            1 or more than 6 independent variables.

    Examples:
        ```python
        from aerojax.coefficients import AerodynamicCoefficientSettings, create_coefficient_model
        settings = AerodynamicCoefficientSettings.constant(force=(1.2, 0.0, 0.3))
        model = create_coefficient_model(settings, "Capsule")
        model.evaluate([])
        ```
    """
    model = _MODEL_BUILDERS[settings.coefficient_type](
        settings.coefficients, settings.reference, body
    )

    if settings.control_surface_settings:
        model.set_control_surface_increments({
            name: create_control_surface_increment_model(increment, settings.reference, body)
            for name, increment in settings.control_surface_settings.items()
        })

    logger.info(
        "Created %s aerodynamic coefficient model for body '%s' with %d independent "
        "variables and %d control surfaces",
        settings.coefficient_type.value, body, model.dimensionality,
        len(model.control_surface_increments),
    )
    return model


# File-backed tables


def _read_axis_tables(
    files: Mapping[int, str | Path],
    independent_variable_columns: Sequence[str],
    value_column: str,
) -> CoefficientTable:
    return merge_axis_tables({
        axis: read_scalar_table(path, independent_variable_columns, value_column)
        for axis, path in files.items()
    })


def _read_coefficient_tables(
    force_files: Mapping[int, str | Path],
    moment_files: Mapping[int, str | Path] | None,
    independent_variables: Sequence[AerodynamicCoefficientIndependentVariable],
    independent_variable_columns: Sequence[str] | None,
    value_column: str,
) -> tuple[CoefficientTable, CoefficientTable | None]:
    if not force_files:
        raise ValueError("At least one force coefficient file is required")

    all_files = [*force_files.values(), *(moment_files or {}).values()]
    if independent_variable_columns is None:
        independent_variable_columns = table_columns(all_files[0], value_column)
        for path in all_files[1:]:
            if table_columns(path, value_column) != independent_variable_columns:
                raise InconsistentIndependentVariablesError(
                    f"Independent variable columns of {path} differ from "
                    f"{independent_variable_columns}"
                )

    dimensionality = len(independent_variable_columns)
    _check_dimensionality(dimensionality, f"files {[str(p) for p in all_files]}")
    if len(independent_variables) != dimensionality:
        raise InconsistentIndependentVariablesError(
            f"{len(independent_variables)} independent variables given for "
            f"{dimensionality}-dimensional coefficient files"
        )

    force_table = _read_axis_tables(force_files, independent_variable_columns, value_column)
    moment_table = None
    if moment_files:
        moment_table = _read_axis_tables(moment_files, independent_variable_columns, value_column)
    return force_table, moment_table


def read_tabulated_coefficients_from_files(
    force_files: Mapping[int, str | Path],
    moment_files: Mapping[int, str | Path] | None,
    independent_variables: Sequence[AerodynamicCoefficientIndependentVariable],
    reference: ReferenceQuantities | None = None,
    independent_variable_columns: Sequence[str] | None = None,
    value_column: str = "value",
    control_surface_settings: Mapping[str, ControlSurfaceIncrementSettings] | None = None,
) -> AerodynamicCoefficientSettings:
    """Build tabulated coefficient settings from per-axis CSV files.

    The table dimensionality is taken from the files: every column other
    than *value_column* is an independent variable.  Axes without a file
    are filled with zeros.

    Args:
        force_files: Force coefficient file per axis index (0, 1, 2).
        moment_files: Moment coefficient file per axis index, or ``None``.
        independent_variables: Meaning of each table dimension, in column
            order.
        reference: Reference quantities; defaults to unit values.
        independent_variable_columns: Explicit column names, overriding the
            column order found in the files.
        value_column: Name of the value column.
        control_surface_settings: Increment settings per control surface.

    Returns:
        AerodynamicCoefficientSettings: Tabulated-coefficient settings.

    Raises:
        FileNotFoundError: If a file does not exist.
        UnsupportedDimensionalityError: If the files have fewer than 1 or
            more than 6 independent variable columns.
        InconsistentIndependentVariablesError: If the files do not share a
            grid or *independent_variables* has the wrong length.

    Examples:
        ```python
        from aerojax.coefficients import (
            AerodynamicCoefficientIndependentVariable as Var,
            read_tabulated_coefficients_from_files,
        )
        settings = read_tabulated_coefficients_from_files(
            {0: "cd.csv", 2: "cl.csv"}, {1: "cm.csv"},
            [Var.MACH_NUMBER, Var.ANGLE_OF_ATTACK],
        )
        ```
    """
    force_table, moment_table = _read_coefficient_tables(
        force_files, moment_files, independent_variables,
        independent_variable_columns, value_column,
    )
    return AerodynamicCoefficientSettings.tabulated(
        force_table, independent_variables, moment_table, reference, control_surface_settings
    )


def read_tabulated_control_increments_from_files(
    force_files: Mapping[int, str | Path],
    moment_files: Mapping[int, str | Path] | None,
    independent_variables: Sequence[AerodynamicCoefficientIndependentVariable],
    independent_variable_columns: Sequence[str] | None = None,
    value_column: str = "value",
) -> ControlSurfaceIncrementSettings:
    """Build tabulated control-surface increment settings from CSV files.

    Same file conventions as :func:`read_tabulated_coefficients_from_files`.
    The independent variables usually include
    ``CONTROL_SURFACE_DEFLECTION``.

    Returns:
        ControlSurfaceIncrementSettings: Tabulated increment settings.
    """
    force_table, moment_table = _read_coefficient_tables(
        force_files, moment_files, independent_variables,
        independent_variable_columns, value_column,
    )
    return ControlSurfaceIncrementSettings(
        AerodynamicCoefficientType.TABULATED,
        TabulatedCoefficients(force_table, tuple(independent_variables), moment_table),
    )
