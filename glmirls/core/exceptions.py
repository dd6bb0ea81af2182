"""
Exception hierarchy for glmirls.

All exceptions inherit from GLMIRLSError so callers can catch any
library-specific failure with a single handler. Every error is fatal to
the call that raised it; the only internal retry is the bounded
step-halving search inside the IRLS loop.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class GLMIRLSError(Exception):
    """Base exception for all glmirls errors."""
    pass


class ValidationError(GLMIRLSError):
    """
    Input validation failed.
    
    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.
    
    Raised when array shapes don't match expected dimensions or
    when multiple arrays have inconsistent shapes.
    """
    pass


class MissingInputError(ValidationError):
    """A required model input was never supplied (or is empty)."""
    pass


class MissingPredictorsError(MissingInputError):
    """No design matrix was supplied."""

    def __init__(self, message: str = "Cannot fit GLM without predictors"):
        super().__init__(message)


class MissingOutcomeError(MissingInputError):
    """No outcome vector was supplied."""

    def __init__(self, message: str = "Cannot fit GLM without an outcome"):
        super().__init__(message)


class MissingFamilyError(MissingInputError):
    """No exponential family was selected."""

    def __init__(self, message: str = "Cannot fit GLM without a family"):
        super().__init__(message)


class NumericalError(GLMIRLSError):
    """
    Numerical computation failed.
    
    Base class for errors arising from numerical issues during computation.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular or nearly singular.
    
    Raised when the weighted design handed to the QR solve is numerically
    rank-deficient (collinear or all-zero columns).
    
    Attributes:
        matrix_name: Name/description of the problematic matrix
        condition_number: Estimated condition number, if available
        rank: Numerical rank, if computed
        expected_rank: Expected rank (number of columns)
    """
    
    def __init__(
        self, 
        message: str,
        matrix_name: str | None = None,
        condition_number: float | None = None,
        rank: int | None = None,
        expected_rank: int | None = None
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.condition_number = condition_number
        self.rank = rank
        self.expected_rank = expected_rank


class ConvergenceError(GLMIRLSError):
    """
    Iterative algorithm failed to converge.
    
    Attributes:
        iterations: Number of iterations completed
        final_change: Final parameter or objective change
        reason: Why convergence failed (e.g., 'max_iterations', 'diverging')
        threshold: The convergence threshold that was not met
    """
    
    def __init__(
        self, 
        message: str, 
        iterations: int, 
        final_change: float | None = None,
        reason: str | None = None,
        threshold: float | None = None
    ):
        super().__init__(message)
        self.iterations = iterations
        self.final_change = final_change
        self.reason = reason
        self.threshold = threshold


class FittingDivergenceError(ConvergenceError):
    """
    Step-halving exhausted its attempt budget.

    Every shrunken update still increased the deviance by at least the
    convergence tolerance, so the IRLS update cannot be accepted.

    Attributes:
        attempts: Number of step-halving attempts made
    """

    def __init__(
        self,
        message: str,
        iterations: int,
        attempts: int,
        final_change: float | None = None,
        threshold: float | None = None,
    ):
        super().__init__(
            message,
            iterations=iterations,
            final_change=final_change,
            reason='step_halving_exhausted',
            threshold=threshold,
        )
        self.attempts = attempts


class SpecConsumedError(GLMIRLSError):
    """ModelSpec.fit() was called on a spec that has already been fitted."""
    pass
