"""
Linear algebra kernels for glmirls.

CPU implementations backed by LAPACK through NumPy/SciPy. Each operation
returns a structured result and raises immediately with a clear message
on failure.
"""

from glmirls.core.compute.linalg.qr import (
    QRResult,
    qr_cpu,
    qr_solve_cpu,
    unscaled_covariance,
)

__all__ = [
    "QRResult",
    "qr_cpu",
    "qr_solve_cpu",
    "unscaled_covariance",
]
