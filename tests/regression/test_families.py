"""
Exponential family unit tests.

Tests link/inverse-link roundtrips, derivatives, variance and deviance,
the shared starting-value heuristic, the Poisson boundary clamp and the
family resolver.
"""

import numpy as np
import pytest

from glmirls.regression.families import (
    MU_MIN,
    ExponentialFamily,
    Gaussian,
    IdentityLink,
    LogLink,
    Poisson,
    resolve_family,
    shared_initial_mu,
)


# =====================================================================
# Links
# =====================================================================

class TestLinks:

    @pytest.mark.parametrize("family,mu", [
        (Gaussian(), np.linspace(-5, 5, 50)),
        (Poisson(), np.linspace(0.01, 10, 50)),
    ])
    def test_roundtrip(self, family, mu):
        """inv_link(link(mu)) == mu."""
        np.testing.assert_allclose(family.inv_link(family.link(mu)), mu, rtol=1e-12)

    @pytest.mark.parametrize("family,mu", [
        (Gaussian(), np.linspace(-5, 5, 50)),
        (Poisson(), np.linspace(0.1, 10, 50)),
    ])
    def test_link_derivative_matches_finite_difference(self, family, mu):
        h = 1e-6
        numeric = (family.link(mu + h) - family.link(mu - h)) / (2 * h)
        np.testing.assert_allclose(family.link_derivative(mu), numeric, rtol=1e-6)

    def test_link_names(self):
        assert Gaussian().link_name == 'identity'
        assert Poisson().link_name == 'log'
        assert isinstance(Gaussian().link_function, IdentityLink)
        assert isinstance(Poisson().link_function, LogLink)

    def test_identity_link_returns_copy(self):
        mu = np.array([1.0, 2.0])
        eta = Gaussian().link(mu)
        eta[0] = 99.0
        assert mu[0] == 1.0


# =====================================================================
# Variance and deviance
# =====================================================================

class TestVariance:

    def test_gaussian_variance(self):
        np.testing.assert_array_equal(
            Gaussian().variance(np.array([1.0, 2.0, 3.0])), np.ones(3)
        )

    def test_poisson_variance(self):
        mu = np.array([1.0, 2.0, 5.0])
        np.testing.assert_allclose(Poisson().variance(mu), mu)


class TestDeviance:

    def test_gaussian_deviance_is_rss(self):
        y = np.array([1.0, 2.0, 3.0])
        mu = np.array([1.1, 1.9, 3.2])
        assert Gaussian().deviance(y, mu) == pytest.approx(np.sum((y - mu) ** 2), abs=1e-14)

    def test_gaussian_perfect_fit_is_zero(self, rng):
        y = rng.standard_normal(20)
        assert Gaussian().deviance(y, y) == 0.0

    def test_poisson_perfect_fit_is_zero(self):
        y = np.array([1.0, 2.0, 5.0, 11.0])
        assert Poisson().deviance(y, y.copy()) == 0.0

    def test_poisson_zero_counts(self):
        """The y log(y/mu) term is 0 for y = 0, leaving 2 * mu."""
        y = np.array([0.0, 0.0])
        mu = np.array([0.5, 2.0])
        assert Poisson().deviance(y, mu) == pytest.approx(2.0 * 2.5)

    def test_poisson_matches_formula(self):
        y = np.array([1.0, 3.0, 0.0, 4.0])
        mu = np.array([1.5, 2.0, 0.3, 4.5])
        with np.errstate(divide='ignore', invalid='ignore'):
            term = np.where(y > 0, y * np.log(y / mu), 0.0)
        expected = 2.0 * np.sum(term - (y - mu))
        assert Poisson().deviance(y, mu) == pytest.approx(expected, rel=1e-12)

    @pytest.mark.parametrize("family", [Gaussian(), Poisson()])
    def test_deviance_nonnegative(self, family, rng):
        for _ in range(20):
            y = rng.poisson(3.0, size=30).astype(np.float64)
            mu = rng.uniform(0.1, 8.0, size=30)
            assert family.deviance(y, mu) >= 0.0

    def test_deviance_returns_python_float(self):
        y = np.array([1.0, 2.0])
        assert isinstance(Poisson().deviance(y, y), float)
        assert isinstance(Gaussian().deviance(y, y), float)


# =====================================================================
# Starting values
# =====================================================================

class TestInitialMu:

    def test_shared_heuristic(self):
        y = np.array([0.0, 2.0, 4.0])
        expected = (2.0 + y) / 2.0
        np.testing.assert_allclose(shared_initial_mu(y), expected)

    def test_same_for_every_family(self, rng):
        y = rng.poisson(4.0, size=25).astype(np.float64)
        np.testing.assert_array_equal(Gaussian().initial_mu(y), Poisson().initial_mu(y))

    def test_does_not_modify_y(self):
        y = np.array([1.0, 5.0])
        shared_initial_mu(y)
        np.testing.assert_array_equal(y, [1.0, 5.0])


# =====================================================================
# Poisson boundary clamp
# =====================================================================

class TestPoissonClamp:
    """Means are held at MU_MIN instead of underflowing to zero."""

    def test_inv_link_underflow_clamped(self):
        mu = Poisson().inv_link(np.array([-800.0, -50.0, 0.0]))
        assert mu[0] == MU_MIN
        assert mu[1] == MU_MIN
        assert mu[2] == 1.0

    def test_inv_link_no_overflow(self):
        mu = Poisson().inv_link(np.array([1000.0]))
        assert np.all(np.isfinite(mu))

    def test_zero_mean_stays_finite(self):
        fam = Poisson()
        mu = np.array([0.0, 1.0])
        assert np.all(np.isfinite(fam.link(mu)))
        assert np.all(np.isfinite(fam.link_derivative(mu)))
        assert np.all(fam.variance(mu) > 0)
        assert np.isfinite(fam.deviance(np.array([1.0, 1.0]), mu))

    def test_gaussian_is_unclamped(self):
        eta = np.array([-800.0, 0.0])
        np.testing.assert_array_equal(Gaussian().inv_link(eta), eta)


# =====================================================================
# Closed family set
# =====================================================================

class TestFamilyContract:

    def test_incomplete_family_cannot_be_instantiated(self):
        class Partial(ExponentialFamily):
            @property
            def name(self):
                return 'partial'

        with pytest.raises(TypeError):
            Partial()

    def test_families_compare_by_type(self):
        assert Gaussian() == Gaussian()
        assert Gaussian() != Poisson()
        assert len({Poisson(), Poisson()}) == 1

    def test_repr(self):
        assert repr(Poisson()) == "Poisson(link='log')"


class TestFamilyResolver:

    @pytest.mark.parametrize("name,cls", [
        ('gaussian', Gaussian),
        ('normal', Gaussian),
        ('poisson', Poisson),
        ('Poisson', Poisson),
    ])
    def test_resolve_string(self, name, cls):
        assert isinstance(resolve_family(name), cls)

    def test_resolve_passthrough(self):
        fam = Poisson()
        assert resolve_family(fam) is fam

    def test_resolve_unknown_raises(self):
        with pytest.raises(ValueError, match="Unknown family"):
            resolve_family('binomial')

    def test_resolve_wrong_type_raises(self):
        with pytest.raises(TypeError):
            resolve_family(42)
