"""
IRLS fitting options.
"""

from __future__ import annotations

from dataclasses import dataclass
from numbers import Integral, Real
from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from glmirls.core.exceptions import ValidationError
from glmirls.core.validation import check_array, check_1d, check_finite


DEFAULT_EPSILON = 1e-8
DEFAULT_MAX_ITER = 25


@dataclass(frozen=True, eq=False)
class FitOptions:
    """
    Configuration for one IRLS fit. Pure data, no behavior.

    Attributes:
        epsilon: Convergence threshold on the relative deviance change
            |dev_new - dev_old| / (0.1 + |dev_new|). Must be > 0.
        max_iter: Maximum number of outer IRLS iterations. Positive integer.
        mu_start: Optional starting means (length n_obs). Overrides the
            family's initial_mu.
        beta_start: Optional starting coefficients (length n_features).
            Overrides the zero vector.

    Lengths of mu_start and beta_start are checked against the design
    when the fit starts.
    """
    epsilon: float = DEFAULT_EPSILON
    max_iter: int = DEFAULT_MAX_ITER
    mu_start: NDArray[np.floating[Any]] | None = None
    beta_start: NDArray[np.floating[Any]] | None = None

    def __post_init__(self) -> None:
        if isinstance(self.epsilon, bool) or not isinstance(self.epsilon, Real):
            raise ValidationError(f"epsilon: expected a float, got {self.epsilon!r}")
        if not np.isfinite(self.epsilon) or self.epsilon <= 0:
            raise ValidationError(f"epsilon: must be > 0, got {self.epsilon}")
        if isinstance(self.max_iter, bool) or not isinstance(self.max_iter, Integral):
            raise ValidationError(
                f"max_iter: expected an integer, got {type(self.max_iter).__name__}"
            )
        if self.max_iter < 1:
            raise ValidationError(f"max_iter: must be >= 1, got {self.max_iter}")

        # frozen: bypass __setattr__ to store the validated arrays
        object.__setattr__(self, 'epsilon', float(self.epsilon))
        object.__setattr__(self, 'max_iter', int(self.max_iter))
        object.__setattr__(self, 'mu_start', _start_vector(self.mu_start, 'mu_start'))
        object.__setattr__(self, 'beta_start', _start_vector(self.beta_start, 'beta_start'))


def _start_vector(value: ArrayLike | None, name: str) -> NDArray[np.floating[Any]] | None:
    if value is None:
        return None
    arr = check_array(value, name)
    check_1d(arr, name)
    check_finite(arr, name)
    # private read-only copy: the caller's buffer is never aliased
    arr = arr.copy()
    arr.setflags(write=False)
    return arr
