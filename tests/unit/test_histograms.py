"""Tests for Histogram1D and Histogram2D."""

import threading

import numpy as np
import pytest

from histofit.core.histograms import Histogram1D, Histogram2D
from histofit.core.shared.exceptions import ConfigError


class TestHistogram1D:
    """Tests for the one-dimensional histogram."""

    def test_new_histogram_is_zeroed(self):
        """Should start with zero counts and no progress."""
        hist = Histogram1D("h", 10, (0.0, 10.0))
        assert hist.bin_count == 10
        assert hist.range == (0.0, 10.0)
        np.testing.assert_array_equal(hist.counts, np.zeros(10))
        assert hist.progress is None

    @pytest.mark.parametrize(("bins", "value_range"), [(0, (0.0, 1.0)), (5, (1.0, 1.0))])
    def test_invalid_geometry(self, bins, value_range):
        """Should refuse to create a histogram with invalid geometry."""
        with pytest.raises(ConfigError):
            Histogram1D("bad", bins, value_range)

    def test_fill_scenario(self):
        """[0.5, 1.5, 9.9, 10.0, -1.0] over 10 bins on [0, 10) counts three values."""
        hist = Histogram1D("h", 10, (0.0, 10.0))
        values = [0.5, 1.5, 9.9, 10.0, -1.0]
        for i, value in enumerate(values):
            hist.fill(value, i, len(values))
        counts = hist.counts
        assert counts[0] == 1
        assert counts[1] == 1
        assert counts[9] == 1
        assert hist.total == 3

    def test_out_of_range_fill_only_updates_progress(self):
        """Out-of-range values are a no-op on counts."""
        hist = Histogram1D("h", 4, (0.0, 4.0))
        hist.fill(100.0, 1, 4)
        assert hist.total == 0
        assert hist.progress == pytest.approx(0.25)

    def test_progress_cleared_by_finish(self):
        hist = Histogram1D("h", 4, (0.0, 4.0))
        hist.fill(1.0, 2, 4)
        assert hist.progress == pytest.approx(0.5)
        hist.finish_fill()
        assert hist.progress is None

    def test_counts_is_a_snapshot(self):
        """Mutating the returned counts never touches the histogram."""
        hist = Histogram1D("h", 4, (0.0, 4.0))
        hist.fill(1.0, 0, 1)
        snapshot = hist.counts
        snapshot[:] = 99
        assert hist.total == 1

    def test_reset_keeps_geometry(self):
        hist = Histogram1D("h", 4, (0.0, 4.0))
        hist.fill(1.0, 0, 1)
        hist.reset()
        assert hist.total == 0
        assert hist.progress is None
        assert hist.bin_count == 4
        assert hist.range == (0.0, 4.0)

    def test_reset_and_refill_is_identical(self, rng):
        """Re-filling the same data after reset yields identical counts."""
        values = rng.normal(5.0, 2.0, 2000)
        hist = Histogram1D("h", 25, (0.0, 10.0))
        for i, v in enumerate(values):
            hist.fill(float(v), i, len(values))
        first = hist.counts
        hist.reset()
        for i, v in enumerate(values):
            hist.fill(float(v), i, len(values))
        np.testing.assert_array_equal(hist.counts, first)

    def test_contribute_matches_fill(self, rng):
        """Batched contribution gives the same counts as per-value fill."""
        values = rng.uniform(-1.0, 11.0, 3000)
        single = Histogram1D("a", 10, (0.0, 10.0))
        for i, v in enumerate(values):
            single.fill(float(v), i, len(values))
        batched = Histogram1D("b", 10, (0.0, 10.0))
        for start in range(0, len(values), 256):
            batched.contribute(values[start : start + 256])
        np.testing.assert_array_equal(batched.counts, single.counts)
        in_range = np.count_nonzero((values >= 0.0) & (values < 10.0))
        assert batched.total == in_range

    def test_concurrent_fills_lose_no_updates(self):
        """Many threads filling one histogram still count every value."""
        hist = Histogram1D("h", 5, (0.0, 5.0))
        n_threads, per_thread = 8, 2000

        def worker(offset):
            for i in range(per_thread):
                hist.fill((offset + i) % 5 + 0.5, i, per_thread)

        threads = [threading.Thread(target=worker, args=(k,)) for k in range(n_threads)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert hist.total == n_threads * per_thread

    def test_spectrum_region(self):
        """Should return the bins whose centers lie in the region."""
        hist = Histogram1D("h", 10, (0.0, 10.0))
        hist.contribute(np.array([2.5, 3.5, 3.5, 8.5]))
        x, y = hist.spectrum(2.0, 5.0)
        np.testing.assert_allclose(x, [2.5, 3.5, 4.5])
        np.testing.assert_allclose(y, [1.0, 2.0, 0.0])
        x_rev, _ = hist.spectrum(5.0, 2.0)
        np.testing.assert_allclose(x_rev, x)

    def test_statistics(self):
        hist = Histogram1D("h", 10, (0.0, 10.0))
        hist.contribute(np.array([2.5, 2.5, 4.5, 4.5]))
        stats = hist.statistics()
        assert stats.integral == 4
        assert stats.mean == pytest.approx(3.5)
        assert stats.stdev == pytest.approx(1.0)

    def test_statistics_of_empty_region(self):
        stats = Histogram1D("h", 10, (0.0, 10.0)).statistics(0.0, 3.0)
        assert stats.integral == 0
        assert stats.mean == 0.0


class TestHistogram2D:
    """Tests for the two-dimensional histogram."""

    @pytest.fixture
    def hist(self):
        return Histogram2D("h2", (10, 5), ((0.0, 10.0), (0.0, 5.0)))

    def test_shape(self, hist):
        assert hist.counts.shape == (10, 5)
        assert hist.bin_count == (10, 5)
        assert hist.range == ((0.0, 10.0), (0.0, 5.0))

    def test_invalid_geometry(self):
        with pytest.raises(ConfigError):
            Histogram2D("bad", (10, 0), ((0.0, 1.0), (0.0, 1.0)))
        with pytest.raises(ConfigError):
            Histogram2D("bad", (10, 10), ((0.0, 1.0), (2.0, 1.0)))

    def test_fill_requires_both_components_in_range(self, hist):
        hist.fill(0.5, 0.5, 0, 3)
        hist.fill(9.5, 4.5, 1, 3)
        hist.fill(9.5, 5.0, 2, 3)
        counts = hist.counts
        assert counts[0, 0] == 1
        assert counts[9, 4] == 1
        assert hist.total == 2

    def test_contribute_matches_fill(self, hist, rng):
        x = rng.uniform(-1.0, 11.0, 1000)
        y = rng.uniform(-1.0, 6.0, 1000)
        for i, (a, b) in enumerate(zip(x, y, strict=True)):
            hist.fill(float(a), float(b), i, len(x))
        other = Histogram2D("h2b", (10, 5), ((0.0, 10.0), (0.0, 5.0)))
        other.contribute(x, y)
        np.testing.assert_array_equal(other.counts, hist.counts)

    def test_projections(self, hist):
        hist.contribute(np.array([0.5, 0.5, 3.5]), np.array([1.5, 2.5, 2.5]))
        px = hist.projection_x()
        py = hist.projection_y()
        assert isinstance(px, type(py))
        assert px.counts[0] == 2
        assert px.counts[3] == 1
        assert py.counts[2] == 2
        assert px.total == py.total == hist.total == 3

    def test_reset(self, hist):
        hist.fill(1.0, 1.0, 0, 1)
        hist.reset()
        assert hist.total == 0
        assert hist.progress is None
