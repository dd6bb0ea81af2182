"""
GLM backends.

Available backends:
    CPUIRLSBackend: CPU implementation of IRLS with QR inner solve
"""

from glmirls.regression.backends.cpu_glm import CPUIRLSBackend

__all__ = [
    "CPUIRLSBackend",
]
