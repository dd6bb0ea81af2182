"""
CPU backend for Generalized Linear Models via IRLS.

Each IRLS iteration solves a weighted least squares problem via QR on the
transformed system √W·X, √W·z, then passes the candidate coefficients
through step-halving before adopting them.

Algorithm:
    Null model: μ_null = mean(y), null deviance = deviance(y, μ_null)
    Initialize: μ = mu_start or initial_mu(y), η = link(μ),
                β = beta_start or 0, dev = deviance(y, μ)
    For iteration 1..max_iter:
        g' = link_derivative(μ)             # dη/dμ
        V  = variance(μ)
        z  = η + (y - μ) · g'               # working response
        √w = 1 / (√V · |g'|)                # square root of IRLS weights
        Solve min_β || √w·z - √w·X·β ||²    via QR + back-substitution
        Step-halving(β, β_candidate, dev)   # CONVERGENCE / IMPROVEMENT
        η = X @ β
        Stop on CONVERGENCE
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray

from glmirls.core.result import Result
from glmirls.core.compute.timing import Timer
from glmirls.core.compute.linalg.qr import qr_solve_cpu, unscaled_covariance
from glmirls.core.validation import check_length
from glmirls.regression.design import Design
from glmirls.regression.families import ExponentialFamily
from glmirls.regression.options import FitOptions
from glmirls.regression.solution import GLMParams
from glmirls.regression.step_halving import step_halving


@dataclass(frozen=True, eq=False)
class IterationState:
    """Accepted state of one IRLS iteration. Replaced whole, never updated in place."""
    beta: NDArray[np.floating[Any]]
    mu: NDArray[np.floating[Any]]
    eta: NDArray[np.floating[Any]]
    deviance: float


def sqrt_irls_weights(
    variance: NDArray[np.floating[Any]], g_prime: NDArray[np.floating[Any]]
) -> NDArray[np.floating[Any]]:
    """√w = 1/(√V(μ)·|g'(μ)|), computed without squaring g'."""
    return 1.0 / (np.sqrt(variance) * np.abs(g_prime))


class CPUIRLSBackend:
    """CPU backend using IRLS with a QR inner solve and step-halving."""

    @property
    def name(self) -> str:
        return 'cpu_irls'

    def solve(
        self,
        design: Design,
        family: ExponentialFamily,
        options: FitOptions,
    ) -> Result[GLMParams]:
        """Run IRLS to fit the GLM.

        Args:
            design: Validated design with X and y
            family: Exponential family of the model
            options: Tolerance, iteration cap and warm starts

        Returns:
            Result[GLMParams] with coefficients, deviances, residuals, etc.

        Raises:
            DimensionError: If a warm start has the wrong length
            SingularMatrixError: If the weighted design is rank-deficient
            FittingDivergenceError: If step-halving exhausts its attempts
        """
        timer = Timer()
        timer.start()

        X, y = design.X, design.y
        n, p = design.n, design.p
        epsilon = options.epsilon

        warnings_list: list[str] = []

        # ------------------------------------------------------------------
        # Null model and starting values
        # ------------------------------------------------------------------
        with timer.section('initialize'):
            mu_null = np.full(n, float(np.mean(y)))
            null_deviance = family.deviance(y, mu_null)

            if options.mu_start is not None:
                check_length(options.mu_start, n, 'mu_start')
                mu = options.mu_start.copy()
            else:
                mu = family.initial_mu(y)

            if options.beta_start is not None:
                check_length(options.beta_start, p, 'beta_start')
                beta = options.beta_start.copy()
            else:
                beta = np.zeros(p, dtype=np.float64)

            state = IterationState(
                beta=beta, mu=mu, eta=family.link(mu),
                deviance=family.deviance(y, mu),
            )

        # ------------------------------------------------------------------
        # IRLS loop
        # ------------------------------------------------------------------
        converged = False
        n_iter = 0
        total_halvings = 0
        deviance_trace = [state.deviance]

        with timer.section('irls'):
            for iteration in range(1, options.max_iter + 1):
                n_iter = iteration

                g_prime = family.link_derivative(state.mu)
                variance = family.variance(state.mu)
                z = state.eta + (y - state.mu) * g_prime
                sqrt_w = sqrt_irls_weights(variance, g_prime)

                X_tilde = X * sqrt_w[:, np.newaxis]
                z_tilde = z * sqrt_w

                beta_candidate, _ = qr_solve_cpu(X_tilde, z_tilde, matrix_name='weighted X')

                step = step_halving(
                    X, y, family,
                    state.beta, beta_candidate, state.deviance, epsilon,
                    iteration=iteration,
                )
                total_halvings += step.halvings

                state = IterationState(
                    beta=step.beta,
                    mu=step.mu,
                    eta=X @ step.beta,
                    deviance=step.deviance,
                )
                deviance_trace.append(state.deviance)

                if step.converged:
                    converged = True
                    break

        if not converged:
            warnings_list.append(
                f"IRLS did not converge in {options.max_iter} iterations "
                f"(deviance={state.deviance:.6f})"
            )

        # ------------------------------------------------------------------
        # Final statistics
        # ------------------------------------------------------------------
        with timer.section('statistics'):
            residuals = y - state.mu
            residual_deviance = family.deviance(y, state.mu)
            residual_df = n - p

            if family.dispersion_is_fixed:
                dispersion = 1.0
            else:
                dispersion = residual_deviance / residual_df if residual_df > 0 else float('nan')

            # (X'WX)⁻¹ at the fitted means, from the R factor of √W·X
            sqrt_w = sqrt_irls_weights(
                family.variance(state.mu), family.link_derivative(state.mu)
            )
            _, qr_final = qr_solve_cpu(
                X * sqrt_w[:, np.newaxis], np.zeros(n), matrix_name='weighted X'
            )
            cov_unscaled = unscaled_covariance(qr_final.R)

        timer.stop()

        params = GLMParams(
            coefficients=state.beta,
            fitted_values=state.mu,
            linear_predictor=state.eta,
            residuals=residuals,
            null_deviance=null_deviance,
            residual_deviance=residual_deviance,
            null_df=n - 1,
            residual_df=residual_df,
            iterations=n_iter,
            converged=converged,
            dispersion=dispersion,
            cov_unscaled=cov_unscaled,
            family_name=family.name,
            link_name=family.link_name,
        )

        return Result(
            params=params,
            info={
                'method': 'irls_qr',
                'deviance_trace': deviance_trace,
                'step_halvings': total_halvings,
            },
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )
