"""
Core infrastructure for glmirls.

Key components:
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Timing and linear algebra primitives
"""

from glmirls.core.result import Result
from glmirls.core.exceptions import (
    GLMIRLSError,
    ValidationError,
    DimensionError,
    MissingInputError,
    MissingPredictorsError,
    MissingOutcomeError,
    MissingFamilyError,
    NumericalError,
    SingularMatrixError,
    ConvergenceError,
    FittingDivergenceError,
    SpecConsumedError,
)

__all__ = [
    "Result",
    "GLMIRLSError",
    "ValidationError",
    "DimensionError",
    "MissingInputError",
    "MissingPredictorsError",
    "MissingOutcomeError",
    "MissingFamilyError",
    "NumericalError",
    "SingularMatrixError",
    "ConvergenceError",
    "FittingDivergenceError",
    "SpecConsumedError",
]
