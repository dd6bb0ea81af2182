"""
ModelSpec: staged builder for a single GLM fit.

Inputs are accumulated through chainable setters (last write wins) and
checked only when fit() is called. fit() consumes the spec.

Example:
    >>> model = (
    ...     ModelSpec()
    ...     .predictors(X, names=['(Intercept)', 'dose'])
    ...     .outcome(y, name='count')
    ...     .family('poisson')
    ...     .fit_options(FitOptions(max_iter=100))
    ...     .fit()
    ... )
"""

from __future__ import annotations

from typing import Sequence
from numpy.typing import ArrayLike

from glmirls.core.exceptions import (
    MissingFamilyError,
    MissingOutcomeError,
    MissingPredictorsError,
    SpecConsumedError,
)
from glmirls.regression.backends.cpu_glm import CPUIRLSBackend
from glmirls.regression.design import Design
from glmirls.regression.families import ExponentialFamily, resolve_family
from glmirls.regression.options import FitOptions
from glmirls.regression.solution import FittedModel


class ModelSpec:
    """Accumulates predictors, outcome, family and options for one fit."""

    def __init__(self):
        self._predictors: ArrayLike | None = None
        self._predictor_names: Sequence[str] | None = None
        self._outcome: ArrayLike | None = None
        self._outcome_name: str | None = None
        self._family: ExponentialFamily | None = None
        self._options = FitOptions()
        self._consumed = False

    def predictors(
        self, X: ArrayLike, names: Sequence[str] | None = None
    ) -> ModelSpec:
        """Set the design matrix (n_obs x n_features) and optional column names."""
        self._predictors = X
        self._predictor_names = names
        return self

    def outcome(self, y: ArrayLike, name: str | None = None) -> ModelSpec:
        """Set the outcome vector (n_obs,) and its optional name."""
        self._outcome = y
        self._outcome_name = name
        return self

    def family(self, family: str | ExponentialFamily) -> ModelSpec:
        """Set the exponential family, by instance or by name."""
        self._family = resolve_family(family)
        return self

    def fit_options(self, options: FitOptions) -> ModelSpec:
        if not isinstance(options, FitOptions):
            raise TypeError(
                f"options must be FitOptions, got {type(options).__name__}"
            )
        self._options = options
        return self

    @property
    def consumed(self) -> bool:
        return self._consumed

    def fit(self) -> FittedModel:
        """Validate inputs, run IRLS and return the fitted model.

        Raises:
            SpecConsumedError: If fit() was already called on this spec
            MissingPredictorsError: No (or empty) design matrix
            MissingOutcomeError: No (or empty) outcome vector
            MissingFamilyError: No family selected
            ValidationError / DimensionError: Malformed inputs
            SingularMatrixError: Rank-deficient weighted design
            FittingDivergenceError: Step-halving exhausted its attempts
        """
        if self._consumed:
            raise SpecConsumedError("ModelSpec has already been fitted; build a new spec")
        self._consumed = True

        if self._predictors is None:
            raise MissingPredictorsError()
        if self._outcome is None:
            raise MissingOutcomeError()
        if self._family is None:
            raise MissingFamilyError()

        design = Design.from_arrays(
            self._predictors,
            self._outcome,
            coefficient_names=self._predictor_names,
            outcome_name=self._outcome_name,
        )

        result = CPUIRLSBackend().solve(design, self._family, self._options)

        return FittedModel(
            _result=result,
            coefficient_names=design.coefficient_names,
            outcome_name=design.outcome_name,
            options=self._options,
        )
