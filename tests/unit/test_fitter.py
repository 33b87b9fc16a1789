"""Tests for fit orchestration and the fit collection."""

import numpy as np
import pytest

from histofit.core.domain.config import FitConfig
from histofit.core.fitting import (
    BackgroundFitter,
    Fits,
    Fitter,
    GaussianFitter,
    GaussianModel,
    LinearFitter,
    LinearModel,
)
from histofit.core.histograms import Histogram1D
from histofit.core.shared.exceptions import DegenerateDataError


def _sideband(x, y, regions):
    keep = np.zeros_like(x, dtype=bool)
    for low, high in regions:
        keep |= (x >= low) & (x <= high)
    return BackgroundFitter(x_data=x[keep].tolist(), y_data=y[keep].tolist())


class TestFitter:
    """Tests for Fitter."""

    def test_background_then_gaussian(self, double_peak_spectrum):
        """Background is fitted first and subtracted before the peak fit."""
        x, y, peaks, (slope, intercept) = double_peak_spectrum
        fitter = Fitter(
            x_data=x.tolist(),
            y_data=y.tolist(),
            background=_sideband(x, y, [(0.0, 20.0), (190.0, 200.0)]),
            model=GaussianModel(peak_markers=[55.0, 145.0]),
        )
        fitter.fit()

        assert fitter.background.get_slope_intercept() == pytest.approx((slope, intercept), rel=1e-3)
        assert isinstance(fitter.result, GaussianFitter)
        for fitted, (amplitude, mean, sigma) in zip(fitter.result.peaks, peaks, strict=True):
            assert fitted.amplitude == pytest.approx(amplitude, rel=0.01)
            assert fitted.mean == pytest.approx(mean, rel=0.01)
            assert fitted.sigma == pytest.approx(sigma, rel=0.01)
        assert len(fitter.deconvoluted_lines) == 2
        np.testing.assert_allclose(fitter.convoluted_line.y, y, rtol=1e-3, atol=1e-2)

    def test_without_background_uses_raw_data(self, single_peak_spectrum):
        x, y, _ = single_peak_spectrum
        fitter = Fitter(x_data=x.tolist(), y_data=y.tolist())
        assert fitter.subtract_background() == y.tolist()

    def test_unfitted_background_uses_raw_data(self):
        fitter = Fitter(
            x_data=[0.0, 1.0],
            y_data=[1.0, 2.0],
            background=BackgroundFitter(x_data=[0.0], y_data=[0.0]),
        )
        assert fitter.subtract_background() == [1.0, 2.0]

    def test_refit_replaces_lines(self, single_peak_spectrum):
        """fit() is not incremental: curves are replaced on every call."""
        x, y, _ = single_peak_spectrum
        fitter = Fitter(
            x_data=x.tolist(), y_data=y.tolist(), model=GaussianModel(peak_markers=[50.0])
        )
        fitter.fit()
        first = fitter.result
        fitter.fit()
        assert fitter.result is not first
        assert len(fitter.deconvoluted_lines) == 1

    def test_linear_model(self):
        fitter = Fitter(x_data=[0, 1, 2, 3], y_data=[3, 5, 7, 9], model=LinearModel())
        fitter.fit()
        assert isinstance(fitter.result, LinearFitter)
        assert fitter.result.slope == pytest.approx(2.0)
        assert fitter.deconvoluted_lines == []
        assert fitter.get_peak_markers() == []

    def test_linear_degenerate_clears_previous_result(self):
        fitter = Fitter(x_data=[0, 1, 2], y_data=[1, 2, 3], model=LinearModel())
        fitter.fit()
        assert fitter.result is not None
        fitter.x_data = [1.0, 1.0, 1.0]
        with pytest.raises(DegenerateDataError):
            fitter.fit()
        assert fitter.result is None

    def test_peak_markers(self, single_peak_spectrum):
        x, y, _ = single_peak_spectrum
        fitter = Fitter(
            x_data=x.tolist(), y_data=y.tolist(), model=GaussianModel(peak_markers=[52.0])
        )
        assert fitter.get_peak_markers() == [52.0]
        fitter.fit()
        assert fitter.get_peak_markers()[0] == pytest.approx(50.0, rel=0.01)

    def test_settings_reach_solver(self, single_peak_spectrum):
        x, y, _ = single_peak_spectrum
        fitter = Fitter(
            x_data=x.tolist(),
            y_data=y.tolist(),
            model=GaussianModel(peak_markers=[30.0]),
            settings=FitConfig(max_iterations=2),
        )
        fitter.fit()
        assert fitter.result.degraded

    def test_from_histogram(self):
        hist = Histogram1D("Energy", 10, (0.0, 10.0))
        hist.contribute(np.array([2.5] * 4 + [3.5] * 9))
        fitter = Fitter.from_histogram(hist, 2.0, 4.0, GaussianModel(peak_markers=[3.0]))
        assert fitter.name == "Energy"
        assert fitter.x_data == [2.5, 3.5]
        assert fitter.y_data == [4.0, 9.0]
        assert fitter.y_err == [2.0, 3.0]

    def test_from_histogram_empty_bins_get_unit_error(self):
        hist = Histogram1D("Energy", 4, (0.0, 4.0))
        fitter = Fitter.from_histogram(hist)
        assert fitter.y_err == [1.0, 1.0, 1.0, 1.0]


def _stored(name):
    return Fitter(name=name, x_data=[0.0, 1.0], y_data=[0.0, 1.0], model=LinearModel())


class TestFits:
    """Tests for the fit collection."""

    def test_store_temp_fit(self):
        fits = Fits()
        fitter = _stored("a")
        fitter.background = BackgroundFitter(x_data=[0.0, 1.0], y_data=[0.0, 0.0])
        fits.set_temp_fit(fitter)
        assert fits.temp_background_fit is fitter.background

        assert fits.store_temp_fit() is fitter
        assert fits.stored_fits == [fitter]
        assert fits.temp_fit is None
        assert fits.temp_background_fit is None

    def test_store_without_temp_fit(self):
        fits = Fits()
        assert fits.store_temp_fit() is None
        assert len(fits) == 0

    def test_remove_stored_fit(self):
        fits = Fits(stored_fits=[_stored("a"), _stored("b"), _stored("c")])
        removed = fits.remove_stored_fit(1)
        assert removed.name == "b"
        assert [f.name for f in fits.stored_fits] == ["a", "c"]
        with pytest.raises(IndexError):
            fits.remove_stored_fit(2)
        with pytest.raises(IndexError):
            fits.remove_stored_fit(-1)

    def test_merge_appends_and_overrides_temp(self):
        """Loaded stored fits are appended; the loaded temp fit wins."""
        existing = Fits(stored_fits=[_stored("a"), _stored("b")], temp_fit=_stored("old"))
        loaded = Fits(stored_fits=[_stored("c")], temp_fit=_stored("new"))
        existing.merge(loaded)
        assert [f.name for f in existing.stored_fits] == ["a", "b", "c"]
        assert existing.temp_fit.name == "new"

    def test_remove_temp_fits(self):
        fits = Fits(temp_fit=_stored("t"), temp_background_fit=BackgroundFitter())
        fits.remove_temp_fits()
        assert fits.temp_fit is None
        assert fits.temp_background_fit is None

    def test_summary_rows(self, single_peak_spectrum):
        x, y, _ = single_peak_spectrum
        gaussian = Fitter(
            x_data=x.tolist(), y_data=y.tolist(), model=GaussianModel(peak_markers=[50.0])
        )
        gaussian.fit()
        fits = Fits(stored_fits=[_stored("linear"), gaussian])
        rows = fits.summary_rows()
        assert len(rows) == 1
        assert rows[0]["Fit"] == "1"
        assert rows[0]["Peak"] == "0"
