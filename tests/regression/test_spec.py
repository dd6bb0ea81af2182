"""
Tests for the ModelSpec builder.
"""

import numpy as np
import pytest

from glmirls import ModelSpec, FitOptions, Gaussian, Poisson
from glmirls.core.exceptions import (
    MissingFamilyError,
    MissingOutcomeError,
    MissingPredictorsError,
    SpecConsumedError,
)


X = np.array([[1.0, 1.0], [1.0, 2.0], [1.0, 3.0], [1.0, 4.0]])
Y = np.array([2.0, 3.0, 5.0, 7.0])


class TestBuilder:

    def test_chained_fit(self):
        model = ModelSpec().predictors(X).outcome(Y).family('gaussian').fit()
        np.testing.assert_allclose(model.coefficients, [0.0, 1.7], atol=1e-10)

    def test_setters_return_same_spec(self):
        spec = ModelSpec()
        assert spec.predictors(X) is spec
        assert spec.outcome(Y) is spec
        assert spec.family(Poisson()) is spec
        assert spec.fit_options(FitOptions()) is spec

    def test_setters_in_any_order(self):
        model = (
            ModelSpec()
            .fit_options(FitOptions(epsilon=1e-10))
            .family(Gaussian())
            .outcome(Y)
            .predictors(X)
            .fit()
        )
        assert model.converged
        assert model.options.epsilon == 1e-10

    def test_last_write_wins(self):
        model = (
            ModelSpec()
            .predictors(X[:, :1])
            .predictors(X, names=['(Intercept)', 'x'])
            .outcome(np.ones(4))
            .outcome(Y, name='response')
            .family('poisson')
            .family('gaussian')
            .fit()
        )
        assert model.family_name == 'gaussian'
        assert model.names == ('(Intercept)', 'x')
        assert model.outcome_name == 'response'
        assert len(model.coefficients) == 2

    def test_default_options(self):
        model = ModelSpec().predictors(X).outcome(Y).family('gaussian').fit()
        assert model.options.epsilon == 1e-8
        assert model.options.max_iter == 25

    def test_family_resolved_eagerly(self):
        with pytest.raises(ValueError, match="Unknown family"):
            ModelSpec().family('binomial')

    def test_fit_options_type_checked(self):
        with pytest.raises(TypeError, match="FitOptions"):
            ModelSpec().fit_options({'max_iter': 10})


class TestMissingInputs:

    def test_nothing_set_reports_predictors_first(self):
        with pytest.raises(MissingPredictorsError, match="without predictors"):
            ModelSpec().fit()

    def test_missing_outcome(self):
        with pytest.raises(MissingOutcomeError, match="without an outcome"):
            ModelSpec().predictors(X).family('gaussian').fit()

    def test_missing_family(self):
        with pytest.raises(MissingFamilyError, match="without a family"):
            ModelSpec().predictors(X).outcome(Y).fit()


class TestConsumption:

    def test_spec_is_consumed_by_fit(self):
        spec = ModelSpec().predictors(X).outcome(Y).family('gaussian')
        assert not spec.consumed
        spec.fit()
        assert spec.consumed

    def test_second_fit_raises(self):
        spec = ModelSpec().predictors(X).outcome(Y).family('gaussian')
        spec.fit()
        with pytest.raises(SpecConsumedError):
            spec.fit()

    def test_failed_fit_still_consumes(self):
        spec = ModelSpec().outcome(Y).family('gaussian')
        with pytest.raises(MissingPredictorsError):
            spec.fit()
        with pytest.raises(SpecConsumedError):
            spec.predictors(X).fit()
