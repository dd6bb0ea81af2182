"""
Shared compute infrastructure for glmirls.

Submodules:
    timing: Execution timing utilities
    linalg: Linear algebra kernels (QR decomposition and solve)
"""

from glmirls.core.compute.timing import Timer, timed

__all__ = [
    "Timer",
    "timed",
]
