"""
Step-halving line search for IRLS.

The raw IRLS update can overshoot and increase the deviance. Each outer
iteration hands its candidate coefficients to step_halving(), which moves
from the current coefficients toward the candidate, halving the step until
the deviance is acceptable.

Classification of a trial with relative change
    rel = (dev_new - dev_old) / (0.1 + |dev_new|)
is checked in this order:

1. |rel| < epsilon        → CONVERGENCE (the outer loop stops)
2. rel >= epsilon         → halve the step and retry
3. otherwise (rel < -eps) → IMPROVEMENT (accepted, no further shrinking)

A small decrease inside the epsilon band is therefore CONVERGENCE, not
IMPROVEMENT.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any
import numpy as np
from numpy.typing import NDArray

from glmirls.core.exceptions import FittingDivergenceError
from glmirls.regression.families import ExponentialFamily


MAX_HALVINGS = 10


class StepOutcome(Enum):
    CONVERGENCE = 'convergence'
    IMPROVEMENT = 'improvement'


@dataclass(frozen=True)
class StepResult:
    """An accepted trial: coefficients, means and deviance."""
    outcome: StepOutcome
    beta: NDArray[np.floating[Any]]
    mu: NDArray[np.floating[Any]]
    deviance: float
    step_size: float
    halvings: int

    @property
    def converged(self) -> bool:
        return self.outcome is StepOutcome.CONVERGENCE


def relative_deviance_change(dev_new: float, dev_old: float) -> float:
    """(dev_new - dev_old) / (0.1 + |dev_new|)."""
    return (dev_new - dev_old) / (0.1 + abs(dev_new))


def step_halving(
    X: NDArray[np.floating[Any]],
    y: NDArray[np.floating[Any]],
    family: ExponentialFamily,
    beta_old: NDArray[np.floating[Any]],
    beta_candidate: NDArray[np.floating[Any]],
    dev_old: float,
    epsilon: float,
    *,
    iteration: int = 0,
    max_halvings: int = MAX_HALVINGS,
) -> StepResult:
    """Accept, shrink or reject an IRLS update.

    Args:
        X: Design matrix (n x p)
        y: Outcome vector (n,)
        family: Exponential family of the model
        beta_old: Coefficients of the current iteration
        beta_candidate: Coefficients proposed by the weighted solve
        dev_old: Deviance of the current iteration
        epsilon: Convergence threshold on the relative deviance change
        iteration: Outer iteration number, reported on failure
        max_halvings: Attempt budget (step sizes 1, 1/2, ..., 2^-(max-1))

    Returns:
        StepResult classified as CONVERGENCE or IMPROVEMENT

    Raises:
        FittingDivergenceError: If every attempt worsened the deviance by
            at least epsilon.
    """
    delta_beta = beta_candidate - beta_old
    step_size = 1.0
    rel_delta = float('nan')

    for attempt in range(max_halvings):
        beta_trial = beta_old + step_size * delta_beta
        eta_trial = X @ beta_trial
        mu_trial = family.inv_link(eta_trial)
        dev_new = family.deviance(y, mu_trial)

        rel_delta = relative_deviance_change(dev_new, dev_old)

        if abs(rel_delta) < epsilon:
            return StepResult(
                StepOutcome.CONVERGENCE, beta_trial, mu_trial, dev_new,
                step_size, attempt,
            )
        elif rel_delta >= epsilon or not np.isfinite(dev_new):
            step_size *= 0.5
            continue

        return StepResult(
            StepOutcome.IMPROVEMENT, beta_trial, mu_trial, dev_new,
            step_size, attempt,
        )

    raise FittingDivergenceError(
        f"Step-halving failed to reduce the deviance after {max_halvings} "
        f"attempts in iteration {iteration} "
        f"(deviance={dev_old:.6g}, last relative change={rel_delta:.3g})",
        iterations=iteration,
        attempts=max_halvings,
        final_change=rel_delta,
        threshold=epsilon,
    )
