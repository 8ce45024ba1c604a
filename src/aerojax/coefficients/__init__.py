"""Aerodynamic coefficient models and the pipeline that builds them.

Settings (:class:`AerodynamicCoefficientSettings`) describe a constant or
tabulated model; :func:`create_coefficient_model` turns them into an
:class:`AerodynamicCoefficientModel`.  Tabulated data is assembled from
per-axis :class:`ScalarTable` objects with :func:`merge_coefficient_tables`
or read from CSV files with :func:`read_tabulated_coefficients_from_files`.
"""

from ._readers import read_scalar_table
from ._types import (
    AerodynamicCoefficientIndependentVariable,
    AerodynamicCoefficients,
    AerodynamicCoefficientType,
    CoefficientTable,
    ScalarTable,
)
from .config import (
    AerodynamicCoefficientSettings,
    ConstantCoefficients,
    ControlSurfaceIncrementSettings,
    ReferenceQuantities,
    TabulatedCoefficients,
)
from .factory import (
    MAX_TABLE_DIMENSIONALITY,
    MIN_TABLE_DIMENSIONALITY,
    create_coefficient_model,
    create_control_surface_increment_model,
    read_tabulated_coefficients_from_files,
    read_tabulated_control_increments_from_files,
)
from .interpolation import interpolate_multilinear, interpolate_univariate
from .models import (
    AerodynamicCoefficientModel,
    ConstantCoefficientModel,
    TabulatedCoefficientModel,
)
from .tables import (
    compare_independent_variables,
    create_coefficient_table,
    create_scalar_table,
    merge_axis_tables,
    merge_coefficient_tables,
)

__all__ = [
    # Types
    "AerodynamicCoefficientType",
    "AerodynamicCoefficientIndependentVariable",
    "AerodynamicCoefficients",
    "ScalarTable",
    "CoefficientTable",
    # Settings
    "ReferenceQuantities",
    "ConstantCoefficients",
    "TabulatedCoefficients",
    "ControlSurfaceIncrementSettings",
    "AerodynamicCoefficientSettings",
    # Tables
    "create_scalar_table",
    "create_coefficient_table",
    "compare_independent_variables",
    "merge_coefficient_tables",
    "merge_axis_tables",
    "read_scalar_table",
    # Interpolation
    "interpolate_univariate",
    "interpolate_multilinear",
    # Models
    "AerodynamicCoefficientModel",
    "ConstantCoefficientModel",
    "TabulatedCoefficientModel",
    # Factory
    "MIN_TABLE_DIMENSIONALITY",
    "MAX_TABLE_DIMENSIONALITY",
    "create_coefficient_model",
    "create_control_surface_increment_model",
    "read_tabulated_coefficients_from_files",
    "read_tabulated_control_increments_from_files",
]
