"""Tests for the closed-form linear fit."""

import numpy as np
import pytest
from pydantic import ValidationError

from histofit.core.fitting import LinearFitter
from histofit.core.shared.exceptions import DegenerateDataError, FitError


class TestLinearFitter:
    """Tests for LinearFitter."""

    def test_exact_line(self):
        """Points on y = 2x + 3 give slope 2 and intercept 3."""
        fit = LinearFitter(x_data=[0, 1, 2, 3], y_data=[3, 5, 7, 9])
        fit.perform_linear_fit()
        assert fit.slope == pytest.approx(2.0)
        assert fit.intercept == pytest.approx(3.0)
        assert fit.slope_err == pytest.approx(0.0, abs=1e-12)
        assert fit.intercept_err == pytest.approx(0.0, abs=1e-12)
        assert fit.r_squared == pytest.approx(1.0)
        assert len(fit.fit_line) == 4

    def test_two_points_have_zero_uncertainty(self):
        fit = LinearFitter(x_data=[1.0, 2.0], y_data=[1.0, 4.0])
        fit.perform_linear_fit()
        assert fit.slope == pytest.approx(3.0)
        assert fit.slope_err == 0.0

    def test_noisy_line_uncertainties(self, rng):
        x = np.linspace(0.0, 10.0, 200)
        y = 0.5 * x - 1.0 + rng.normal(0.0, 0.1, x.size)
        fit = LinearFitter(x_data=x.tolist(), y_data=y.tolist())
        fit.perform_linear_fit()
        assert fit.slope == pytest.approx(0.5, abs=5 * fit.slope_err)
        assert fit.intercept == pytest.approx(-1.0, abs=5 * fit.intercept_err)
        assert fit.slope_err > 0

    @pytest.mark.parametrize(
        ("x", "y"),
        [([], []), ([1.0], [2.0]), ([2.0, 2.0, 2.0], [1.0, 2.0, 3.0])],
    )
    def test_degenerate_input(self, x, y):
        """Fewer than two points or constant x is reported, no result stored."""
        fit = LinearFitter(x_data=x, y_data=y)
        with pytest.raises(DegenerateDataError):
            fit.perform_linear_fit()
        assert not fit.fitted

    def test_mismatched_lengths_rejected(self):
        with pytest.raises(ValidationError):
            LinearFitter(x_data=[1.0, 2.0], y_data=[1.0])

    def test_evaluate(self):
        fit = LinearFitter(x_data=[0, 1], y_data=[1, 3])
        with pytest.raises(FitError):
            fit.evaluate([0.0])
        fit.perform_linear_fit()
        np.testing.assert_allclose(fit.evaluate([2.0, 3.0]), [5.0, 7.0])

    def test_stats_rows(self):
        fit = LinearFitter(x_data=[0, 1, 2, 3], y_data=[3, 5, 7, 9])
        assert fit.stats_rows() == []
        fit.perform_linear_fit()
        assert fit.stats_rows()[0]["Slope"].startswith("2 ")
