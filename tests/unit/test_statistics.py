"""Tests for goodness-of-fit helpers."""

import numpy as np
import pytest

from histofit.core.results.statistics import (
    compute_chi_squared,
    compute_degrees_of_freedom,
    compute_r_squared,
    compute_reduced_chi_squared,
)


class TestStatistics:
    """Tests for the statistics helpers."""

    def test_chi_squared(self):
        assert compute_chi_squared(np.array([1.0, -2.0, 2.0])) == pytest.approx(9.0)

    def test_degrees_of_freedom_floor(self):
        assert compute_degrees_of_freedom(10, 3) == 7
        assert compute_degrees_of_freedom(3, 6) == 1

    def test_reduced_chi_squared(self):
        assert compute_reduced_chi_squared(14.0, 10, 3) == pytest.approx(2.0)

    def test_r_squared(self):
        y = np.array([1.0, 2.0, 3.0])
        assert compute_r_squared(y, y) == pytest.approx(1.0)
        assert compute_r_squared(y, np.full(3, 2.0)) == pytest.approx(0.0)
        assert compute_r_squared(np.ones(3), np.ones(3)) == 1.0
