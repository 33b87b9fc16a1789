"""Pytest fixtures for HistoFit tests."""

import numpy as np
import pandas as pd
import pytest


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def event_frame(rng):
    """Synthetic event table with two independent columns and a few NaNs."""
    n = 5000
    frame = pd.DataFrame(
        {
            "energy": rng.normal(500.0, 50.0, n),
            "delta_e": rng.uniform(0.0, 100.0, n),
            "time": np.arange(n, dtype=np.float64),
        }
    )
    frame.loc[[3, 17, 256], "energy"] = np.nan
    return frame


@pytest.fixture
def scenario_frame():
    """Five values over [0, 10): three in range, one at max, one below min."""
    return pd.DataFrame({"x": [0.5, 1.5, 9.9, 10.0, -1.0]})


def gaussian_spectrum(x, peaks):
    y = np.zeros_like(x, dtype=np.float64)
    for amplitude, mean, sigma in peaks:
        y += amplitude * np.exp(-((x - mean) ** 2) / (2.0 * sigma**2))
    return y


@pytest.fixture
def single_peak_spectrum():
    """Noise-free Gaussian with A=100, mu=50, sigma=5 sampled on [0, 100]."""
    x = np.linspace(0.0, 100.0, 201)
    return x, gaussian_spectrum(x, [(100.0, 50.0, 5.0)]), (100.0, 50.0, 5.0)


@pytest.fixture
def double_peak_spectrum():
    """Two well separated noise-free Gaussians on a linear background."""
    x = np.linspace(0.0, 200.0, 401)
    peaks = [(80.0, 60.0, 6.0), (50.0, 140.0, 8.0)]
    background = 0.05 * x + 2.0
    return x, gaussian_spectrum(x, peaks) + background, peaks, (0.05, 2.0)


@pytest.fixture
def sample_config_file(tmp_path):
    config_path = tmp_path / "histofit.toml"
    config_path.write_text(
        """
[fill]
max_workers = 2
batch_size = 64

[fit]
max_iterations = 500
tolerance = 1e-9

[[histograms]]
name = "Energy"
column = "energy"
bins = 100
range = [0.0, 1000.0]
container = "Detectors"

[[histograms]]
name = "Time"
column = "time"
bins = 50
range = [0.0, 5000.0]

[[histograms2d]]
name = "E vs dE"
x_column = "energy"
y_column = "delta_e"
bins = [20, 10]
range = [[0.0, 1000.0], [0.0, 100.0]]
"""
    )
    return config_path


@pytest.fixture
def parquet_file(tmp_path, event_frame):
    path = tmp_path / "events.parquet"
    event_frame.to_parquet(path)
    return path
