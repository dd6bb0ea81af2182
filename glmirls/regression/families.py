"""
Exponential family and link function specifications.

Each ExponentialFamily defines the five-function contract the IRLS loop
relies on, all pure and elementwise:

- link(μ) → η and inv_link(η) → μ (mutual inverses)
- link_derivative(μ) → dη/dμ
- variance(μ) → V(μ)
- deviance(y, μ) → scalar ≥ 0

plus initial_mu(y), which every variant takes from one shared default.

The variant set is closed: Gaussian (identity link) and Poisson (log link).
Each variant holds no data. A new variant must implement every abstract
method or it cannot be instantiated.

References:
    McCullagh, P., & Nelder, J. A. (1989). Generalized Linear Models (2nd ed.)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import numpy as np
from numpy.typing import NDArray


# Lower bound for Poisson means. exp(η) underflows to 0 for very negative η,
# after which 1/μ and log(μ) are undefined.
MU_MIN = 1e-10

# exp(η) overflows float64 above ~709.
ETA_MAX = 500.0


# =====================================================================
# Link functions
# =====================================================================

class Link(ABC):
    """Abstract link function g(μ) mapping mean to linear predictor."""

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    def link(self, mu: NDArray) -> NDArray:
        """g(μ) → η."""
        ...

    @abstractmethod
    def linkinv(self, eta: NDArray) -> NDArray:
        """g⁻¹(η) → μ."""
        ...

    @abstractmethod
    def derivative(self, mu: NDArray) -> NDArray:
        """g'(μ) = dη/dμ."""
        ...

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class IdentityLink(Link):
    """Identity link: g(μ) = μ. Canonical for the Gaussian family."""

    @property
    def name(self) -> str:
        return 'identity'

    def link(self, mu: NDArray) -> NDArray:
        return mu.copy()

    def linkinv(self, eta: NDArray) -> NDArray:
        return eta.copy()

    def derivative(self, mu: NDArray) -> NDArray:
        return np.ones_like(mu)


class LogLink(Link):
    """Log link: g(μ) = log(μ). Canonical for the Poisson family.

    Means are held at or above MU_MIN on both sides of the link.
    """

    @property
    def name(self) -> str:
        return 'log'

    def link(self, mu: NDArray) -> NDArray:
        return np.log(np.maximum(mu, MU_MIN))

    def linkinv(self, eta: NDArray) -> NDArray:
        return np.maximum(np.exp(np.minimum(eta, ETA_MAX)), MU_MIN)

    def derivative(self, mu: NDArray) -> NDArray:
        return 1.0 / np.maximum(mu, MU_MIN)


# =====================================================================
# Shared starting values
# =====================================================================

def shared_initial_mu(y: NDArray) -> NDArray:
    """Starting means μ₀ᵢ = (mean(y) + yᵢ) / 2.

    Used unchanged by every family, Gaussian and Poisson alike.
    """
    y_mean = float(np.mean(y))
    return (y_mean + y) / 2.0


# =====================================================================
# Family base class
# =====================================================================

class ExponentialFamily(ABC):
    """
    Exponential family specification.

    Stateless: every method is a pure function of its array arguments,
    so one instance may be shared by any number of concurrent fits.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @property
    @abstractmethod
    def link_function(self) -> Link:
        """The family's canonical link."""
        ...

    @property
    def link_name(self) -> str:
        return self.link_function.name

    def link(self, mu: NDArray) -> NDArray:
        """η = g(μ)."""
        return self.link_function.link(mu)

    def inv_link(self, eta: NDArray) -> NDArray:
        """μ = g⁻¹(η)."""
        return self.link_function.linkinv(eta)

    def link_derivative(self, mu: NDArray) -> NDArray:
        """dη/dμ evaluated at μ."""
        return self.link_function.derivative(mu)

    @abstractmethod
    def variance(self, mu: NDArray) -> NDArray:
        """Variance function V(μ)."""
        ...

    @abstractmethod
    def deviance(self, y: NDArray, mu: NDArray) -> float:
        """Total deviance: twice the log-likelihood gap to the saturated model."""
        ...

    def initial_mu(self, y: NDArray) -> NDArray:
        """Starting means for IRLS (the shared default for every family)."""
        return shared_initial_mu(y)

    @property
    def dispersion_is_fixed(self) -> bool:
        """Whether the dispersion parameter is known a priori (φ = 1)."""
        return False

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(link={self.link_name!r})"


# =====================================================================
# Concrete families
# =====================================================================

class Gaussian(ExponentialFamily):
    """Gaussian (Normal) family with identity link.

    V(μ) = 1
    Deviance = Σ (y_i - μ_i)²  (the residual sum of squares)
    """

    _LINK = IdentityLink()

    @property
    def name(self) -> str:
        return 'gaussian'

    @property
    def link_function(self) -> Link:
        return self._LINK

    def variance(self, mu: NDArray) -> NDArray:
        return np.ones_like(mu)

    def deviance(self, y: NDArray, mu: NDArray) -> float:
        return float(np.sum((y - mu) ** 2))


class Poisson(ExponentialFamily):
    """Poisson family with log link.

    V(μ) = μ
    Deviance = 2 * Σ [y_i log(y_i/μ_i) - (y_i - μ_i)], where the
    y_i log(y_i/μ_i) term is 0 for y_i = 0.
    """

    _LINK = LogLink()

    @property
    def name(self) -> str:
        return 'poisson'

    @property
    def link_function(self) -> Link:
        return self._LINK

    def variance(self, mu: NDArray) -> NDArray:
        return np.maximum(mu, MU_MIN)

    def deviance(self, y: NDArray, mu: NDArray) -> float:
        mu = np.maximum(mu, MU_MIN)
        # np.where evaluates both branches; the y == 0 branch is discarded
        with np.errstate(divide='ignore', invalid='ignore'):
            term = np.where(y > 0, y * np.log(y / mu), 0.0)
        return 2.0 * float(np.sum(term - (y - mu)))

    @property
    def dispersion_is_fixed(self) -> bool:
        return True


# =====================================================================
# Family name → class mapping + resolver
# =====================================================================

_FAMILY_CLASSES: dict[str, type[ExponentialFamily]] = {
    'gaussian': Gaussian,
    'normal': Gaussian,
    'poisson': Poisson,
}


def resolve_family(family: str | ExponentialFamily) -> ExponentialFamily:
    """Resolve a family argument to an ExponentialFamily instance.

    Args:
        family: Either a string name ('gaussian', 'poisson') or an
                ExponentialFamily instance (passed through).

    Raises:
        ValueError: If string name is not recognized.
        TypeError: If argument is neither string nor ExponentialFamily.
    """
    if isinstance(family, ExponentialFamily):
        return family
    if isinstance(family, str):
        cls = _FAMILY_CLASSES.get(family.lower())
        if cls is None:
            valid = ', '.join(
                sorted(k for k in _FAMILY_CLASSES.keys() if k != 'normal')
            )
            raise ValueError(
                f"Unknown family: {family!r}. Valid families: {valid}"
            )
        return cls()
    raise TypeError(
        f"family must be str or ExponentialFamily, got {type(family).__name__}"
    )
