"""
GLM design: validated predictors, outcome and their names.

Design is the boundary between user input and the IRLS loop. It converts
array-likes to float64, checks shapes and finiteness, and holds the result
immutably for the duration of a fit. Arrays already in float64 are
borrowed, not copied; nothing downstream writes to them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence
import numpy as np
from numpy.typing import ArrayLike, NDArray

from glmirls.core.exceptions import (
    DimensionError,
    MissingOutcomeError,
    MissingPredictorsError,
)
from glmirls.core.validation import (
    check_1d,
    check_2d,
    check_array,
    check_consistent_length,
    check_finite,
    check_min_samples,
)


@dataclass(frozen=True, eq=False)
class Design:
    """
    GLM design matrix specification.

    Construction:
        Design.from_arrays(X, y)
        Design.from_arrays(X, y, coefficient_names=['(Intercept)', 'dose'],
                           outcome_name='count')

    X and y may also be pandas-like objects: column names are taken from
    ``X.columns`` and the outcome name from ``y.name`` when not given.
    """
    _X: NDArray[np.floating[Any]]
    _y: NDArray[np.floating[Any]]
    _n: int
    _p: int
    coefficient_names: tuple[str, ...] | None = None
    outcome_name: str | None = None

    @classmethod
    def from_arrays(
        cls,
        X: ArrayLike | None,
        y: ArrayLike | None,
        *,
        coefficient_names: Sequence[str] | None = None,
        outcome_name: str | None = None,
    ) -> Design:
        """Build a Design from a predictor matrix and an outcome vector.

        Raises:
            MissingPredictorsError: X is None, has no rows or no columns
            MissingOutcomeError: y is None or empty
            DimensionError: shapes are inconsistent, or n_features > n_obs
            ValidationError: non-numeric or non-finite values
        """
        if X is None:
            raise MissingPredictorsError()
        if y is None:
            raise MissingOutcomeError()

        if coefficient_names is None and hasattr(X, 'columns'):
            coefficient_names = [str(c) for c in X.columns]
        if outcome_name is None and isinstance(getattr(y, 'name', None), str):
            outcome_name = y.name

        X_arr = check_array(X, 'X')
        y_arr = check_array(y, 'y')

        if X_arr.ndim == 1:
            X_arr = X_arr.reshape(-1, 1)
        if y_arr.ndim == 2 and y_arr.shape[1] == 1:
            y_arr = y_arr.ravel()

        check_2d(X_arr, 'X')
        check_1d(y_arr, 'y')

        if X_arr.shape[0] == 0 or X_arr.shape[1] == 0:
            raise MissingPredictorsError(
                f"Cannot fit GLM without predictors: X has shape {X_arr.shape}"
            )
        if y_arr.shape[0] == 0:
            raise MissingOutcomeError("Cannot fit GLM without an outcome: y is empty")

        check_finite(X_arr, 'X')
        check_finite(y_arr, 'y')
        check_consistent_length(X_arr, y_arr, names=('X', 'y'))

        n, p = X_arr.shape
        check_min_samples(X_arr, p, 'X')

        names = None
        if coefficient_names is not None:
            names = tuple(str(name) for name in coefficient_names)
            if len(names) != p:
                raise DimensionError(
                    f"coefficient_names: expected {p} names, got {len(names)}"
                )

        return cls(
            _X=X_arr,
            _y=y_arr,
            _n=n,
            _p=p,
            coefficient_names=names,
            outcome_name=outcome_name,
        )

    # === Properties ===

    @property
    def X(self) -> NDArray[np.floating[Any]]:
        """Design matrix (n x p)."""
        return self._X

    @property
    def y(self) -> NDArray[np.floating[Any]]:
        """Outcome vector (n,)."""
        return self._y

    @property
    def n(self) -> int:
        """Number of observations."""
        return self._n

    @property
    def p(self) -> int:
        """Number of features (columns of X)."""
        return self._p
