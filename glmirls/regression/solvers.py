"""
Public entry point for GLM fitting.
"""

from __future__ import annotations

from typing import Sequence
import warnings

from numpy.typing import ArrayLike

from glmirls.regression.families import ExponentialFamily
from glmirls.regression.options import FitOptions
from glmirls.regression.solution import FittedModel
from glmirls.regression.spec import ModelSpec


def fit(
    X: ArrayLike,
    y: ArrayLike,
    family: str | ExponentialFamily | None,
    options: FitOptions | None = None,
    *,
    coefficient_names: Sequence[str] | None = None,
    outcome_name: str | None = None,
) -> FittedModel:
    """
    Fit a generalized linear model by IRLS.

    The design matrix is used as given: include a column of ones for an
    intercept.

    Args:
        X: Design matrix (n_obs x n_features), n_features <= n_obs.
        y: Outcome vector (n_obs,).
        family: 'gaussian', 'poisson', or an ExponentialFamily instance.
        options: FitOptions (tolerance, max_iter, warm starts).
            Defaults to FitOptions().
        coefficient_names: Optional names for the columns of X.
        outcome_name: Optional name for y.

    Returns:
        FittedModel with coefficients, fitted means, residuals, deviances,
        degrees of freedom and the iteration count.

    Raises:
        MissingPredictorsError, MissingOutcomeError, MissingFamilyError:
            A required input is absent or empty.
        ValidationError / DimensionError: Malformed inputs.
        SingularMatrixError: The weighted design is rank-deficient.
        FittingDivergenceError: Step-halving exhausted its attempts.

    Warns:
        RuntimeWarning: If IRLS stops at max_iter without converging.

    Example:
        >>> import numpy as np
        >>> from glmirls import fit
        >>> X = np.array([[1, 1], [1, 2], [1, 3], [1, 4]])
        >>> model = fit(X, [2, 3, 5, 7], 'gaussian')
        >>> print(model.summary())
    """
    spec = ModelSpec().predictors(X, names=coefficient_names).outcome(y, name=outcome_name)
    if family is not None:
        spec = spec.family(family)
    if options is not None:
        spec = spec.fit_options(options)

    model = spec.fit()

    for message in model.warnings:
        warnings.warn(message, RuntimeWarning, stacklevel=2)

    return model
