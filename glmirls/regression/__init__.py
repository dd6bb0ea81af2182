"""
Generalized linear models fitted by IRLS.

Public API:
    fit(X, y, family, options) -> FittedModel
    ModelSpec().predictors(X).outcome(y).family(f).fit() -> FittedModel

Example:
    >>> from glmirls.regression import fit
    >>> model = fit(X, y, 'poisson')
    >>> print(model.coefficients)
    >>> print(model.summary())
"""

from glmirls.regression.design import Design
from glmirls.regression.families import (
    ExponentialFamily,
    Gaussian,
    Poisson,
    resolve_family,
)
from glmirls.regression.options import FitOptions
from glmirls.regression.solution import FittedModel, GLMParams
from glmirls.regression.spec import ModelSpec
from glmirls.regression.solvers import fit

__all__ = [
    "fit",
    "ModelSpec",
    "FitOptions",
    "Design",
    "FittedModel",
    "GLMParams",
    "ExponentialFamily",
    "Gaussian",
    "Poisson",
    "resolve_family",
]
