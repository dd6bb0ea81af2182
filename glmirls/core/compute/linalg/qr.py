"""
QR decomposition and least-squares solve.

Reduced QR via LAPACK (through NumPy) followed by back-substitution via
SciPy. Used by the IRLS loop for every weighted least-squares subproblem;
QR avoids squaring the condition number of the weighted design, which the
normal equations would do.

Every call allocates its own buffers, so concurrent fits on independent
inputs share no scratch state.
"""

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray
from scipy.linalg import solve_triangular

from glmirls.core.exceptions import SingularMatrixError


@dataclass(frozen=True)
class QRResult:
    """
    Result of QR decomposition.
    
    Attributes:
        Q: Orthonormal columns (n x k where k = min(n, p))
        R: Upper triangular matrix (k x p)
        rank: Numerical rank determined from R diagonal
    """
    Q: NDArray[np.floating[Any]]
    R: NDArray[np.floating[Any]]
    rank: int


def qr_cpu(X: NDArray[np.floating[Any]]) -> QRResult:
    """
    Reduced QR decomposition using LAPACK (via NumPy).
    
    Computes X = QR where Q has orthonormal columns and R is upper triangular.
    The numerical rank counts diagonal entries of R above
    max(n, p) * eps * max|diag(R)|.
        
    Returns:
        QRResult with Q, R, and numerical rank
    """
    Q, R = np.linalg.qr(X, mode='reduced')
    
    diag_R = np.abs(np.diag(R))
    scale = diag_R.max() if len(diag_R) > 0 else 0.0
    if scale > 0 and np.isfinite(scale):
        tol = max(X.shape) * np.finfo(X.dtype).eps * scale
        rank = int(np.sum(diag_R > tol))
    else:
        rank = 0
    
    return QRResult(Q=Q, R=R, rank=rank)


def qr_solve_cpu(
    X: NDArray[np.floating[Any]],
    y: NDArray[np.floating[Any]],
    matrix_name: str = 'X',
) -> tuple[NDArray[np.floating[Any]], QRResult]:
    """
    Solve least squares via QR decomposition.
    
    Solves min_β ||y - Xβ||² as:
        X = QR
        R β = Q'y   (back-substitution)
    
    Args:
        X: Design matrix (n x p), must have n >= p
        y: Response vector (n,)
        matrix_name: Name used in the error message
        
    Returns:
        (coefficients, QRResult)
        
    Raises:
        SingularMatrixError: If X is rank-deficient. Coefficients are never
            returned for a rank-deficient system.
    """
    p = X.shape[1]
    qr_result = qr_cpu(X)
    
    if qr_result.rank < p:
        raise SingularMatrixError(
            f"{matrix_name} is rank-deficient: rank={qr_result.rank}, expected={p}. "
            f"This indicates collinear or all-zero columns.",
            matrix_name=matrix_name,
            rank=qr_result.rank,
            expected_rank=p
        )
    
    Qty = qr_result.Q.T @ y
    beta = solve_triangular(qr_result.R[:p, :p], Qty[:p], lower=False)
    
    return beta, qr_result


def unscaled_covariance(R: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    """(R'R)⁻¹ = R⁻¹R⁻ᵀ for a square, full-rank upper triangular R."""
    p = R.shape[1]
    R_inv = solve_triangular(R[:p, :p], np.eye(p), lower=False)
    return R_inv @ R_inv.T
