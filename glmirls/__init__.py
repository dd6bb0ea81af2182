"""
glmirls: Generalized Linear Models by Iteratively Reweighted Least Squares.

Gaussian and Poisson families, QR-based weighted least squares and a
step-halving safeguard on every IRLS update.

Submodules:
    core: Exceptions, result envelope, validation, linear algebra
    regression: Families, options, IRLS backend and the fit() entry point
"""

__version__ = "0.1.0"

from glmirls import regression
from glmirls.regression import (
    fit,
    ModelSpec,
    FitOptions,
    FittedModel,
    Gaussian,
    Poisson,
)

__all__ = [
    "__version__",
    "regression",
    "fit",
    "ModelSpec",
    "FitOptions",
    "FittedModel",
    "Gaussian",
    "Poisson",
]
