"""
GLM solution types.

Contains the parameter payload produced by the IRLS backend and the
user-facing FittedModel wrapper.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray

from glmirls.core.result import Result
from glmirls.regression.options import FitOptions


@dataclass(frozen=True, eq=False)
class GLMParams:
    """
    Parameter payload for a GLM fit.

    This is the immutable data computed by the backend. Array fields are
    made read-only on construction.
    """
    coefficients: NDArray[np.floating[Any]]
    fitted_values: NDArray[np.floating[Any]]
    linear_predictor: NDArray[np.floating[Any]]
    residuals: NDArray[np.floating[Any]]
    null_deviance: float
    residual_deviance: float
    null_df: int
    residual_df: int
    iterations: int
    converged: bool
    dispersion: float
    cov_unscaled: NDArray[np.floating[Any]]
    family_name: str
    link_name: str

    def __post_init__(self) -> None:
        for arr in (self.coefficients, self.fitted_values, self.linear_predictor,
                    self.residuals, self.cov_unscaled):
            arr.setflags(write=False)


@dataclass(frozen=True, eq=False)
class FittedModel:
    """
    User-facing GLM results.

    Immutable snapshot of a completed fit: coefficients, fitted means,
    residuals, deviances and degrees of freedom, plus the names and options
    the fit was run with.
    """
    _result: Result[GLMParams]
    coefficient_names: tuple[str, ...] | None
    outcome_name: str | None
    options: FitOptions

    @property
    def coefficients(self) -> NDArray[np.floating[Any]]:
        return self._result.params.coefficients

    @property
    def fitted_values(self) -> NDArray[np.floating[Any]]:
        """Fitted means μ."""
        return self._result.params.fitted_values

    @property
    def linear_predictor(self) -> NDArray[np.floating[Any]]:
        """η = Xβ."""
        return self._result.params.linear_predictor

    @property
    def residuals(self) -> NDArray[np.floating[Any]]:
        """Response residuals y - μ."""
        return self._result.params.residuals

    @property
    def null_deviance(self) -> float:
        return self._result.params.null_deviance

    @property
    def residual_deviance(self) -> float:
        return self._result.params.residual_deviance

    @property
    def deviance(self) -> float:
        return self._result.params.residual_deviance

    @property
    def null_df(self) -> int:
        return self._result.params.null_df

    @property
    def residual_df(self) -> int:
        return self._result.params.residual_df

    @property
    def iterations(self) -> int:
        """Outer IRLS iterations actually consumed.

        Convergence is detected on the pass after the one that reaches the
        optimum, so a Gaussian fit that lands on OLS in iteration 1 reports 2.
        """
        return self._result.params.iterations

    @property
    def converged(self) -> bool:
        return self._result.params.converged

    @property
    def dispersion(self) -> float:
        """1 for Poisson; deviance / residual_df for Gaussian."""
        return self._result.params.dispersion

    @property
    def family_name(self) -> str:
        return self._result.params.family_name

    @property
    def link_name(self) -> str:
        return self._result.params.link_name

    @property
    def standard_errors(self) -> NDArray[np.floating[Any]]:
        """
        Standard errors of coefficients.

        SE(β) = sqrt(φ · diag((X'WX)⁻¹)) with W the IRLS weights at the
        fitted means. NaN when the dispersion cannot be estimated
        (Gaussian with residual_df = 0).
        """
        params = self._result.params
        return np.sqrt(params.dispersion * np.diag(params.cov_unscaled))

    @property
    def names(self) -> tuple[str, ...]:
        """Coefficient names, defaulting to x0, x1, ..."""
        if self.coefficient_names is not None:
            return self.coefficient_names
        return tuple(f"x{i}" for i in range(len(self.coefficients)))

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def to_dict(self) -> dict[str, list[float]]:
        """Generic result record for host bindings."""
        return {
            'coefficients': self.coefficients.tolist(),
            'residuals': self.residuals.tolist(),
            'fitted_values': self.fitted_values.tolist(),
        }

    def summary(self) -> str:
        """Generate a plain-text summary of the fit."""
        outcome = self.outcome_name or "Y"
        se = self.standard_errors

        lines = [
            "GLM Model Fit Results",
            "=" * 60,
            f"Family: {self.family_name}    Link: {self.link_name}",
            f"Formula: {outcome} ~ {' + '.join(self.names)}",
            "",
            "Coefficients:",
            f"{'Term':<20} {'Estimate':>12} {'Std.Error':>12}",
            "-" * 60,
        ]

        for name, coef, s in zip(self.names, self.coefficients, se):
            se_str = f"{s:12.6f}" if np.isfinite(s) else "          NA"
            lines.append(f"{name:<20} {coef:12.6f} {se_str}")

        lines.append("-" * 60)
        lines.append("")
        lines.append("Deviance Statistics:")
        lines.append(
            f"    Null Deviance:     {self.null_deviance:12.4f} "
            f"on {self.null_df} degrees of freedom"
        )
        lines.append(
            f"    Residual Deviance: {self.residual_deviance:12.4f} "
            f"on {self.residual_df} degrees of freedom"
        )
        lines.append("")
        status = "converged" if self.converged else "not converged"
        lines.append(f"Iterations: {self.iterations} ({status})")
        if self.timing:
            lines.append(f"Time: {self.timing.get('total_seconds', 0):.4f}s")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"FittedModel(family={self.family_name!r}, "
            f"n_coef={len(self.coefficients)}, "
            f"deviance={self.residual_deviance:.4f}, "
            f"iterations={self.iterations})"
        )
