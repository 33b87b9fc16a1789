"""Configuration file loading and saving."""

import tomllib
from pathlib import Path

import tomli_w
from pydantic import ValidationError

from histofit.core.domain.config import HistoFitConfig
from histofit.core.shared.exceptions import ConfigError


def load_config(path: Path) -> HistoFitConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the TOML configuration file.

    Returns:
        HistoFitConfig: Validated configuration object.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ConfigError: If the file is not valid TOML or the configuration is invalid.
    """
    if not path.exists():
        msg = f"Configuration file not found: {path}"
        raise FileNotFoundError(msg)

    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise ConfigError(msg) from exc

    try:
        return HistoFitConfig.model_validate(data)
    except ValidationError as exc:
        msg = f"Invalid configuration in {path}:\n{exc}"
        raise ConfigError(msg) from exc


def save_config(config: HistoFitConfig, path: Path) -> None:
    """Save configuration to a TOML file.

    Args:
        config: Configuration object to save.
        path: Path where to save the TOML file.
    """
    data = config.model_dump(mode="json", exclude_none=True)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        tomli_w.dump(data, f)


def generate_default_config() -> str:
    """Generate a default configuration file as a string.

    Returns:
        str: TOML-formatted default configuration.
    """
    return """# HistoFit Configuration File
# Generated automatically - edit as needed

[fill]
# max_workers = 4  # Uncomment to cap the number of fill threads
batch_size = 1     # Values counted per lock acquisition

[fit]
max_iterations = 2000
tolerance = 1e-10

# One table per 1D histogram; range is [min, max) in column units.
[[histograms]]
name = "Energy"
column = "energy"
bins = 512
range = [0.0, 4096.0]
container = "Detectors"

# [[histograms2d]]
# name = "E vs dE"
# x_column = "energy"
# y_column = "delta_e"
# bins = [256, 256]
# range = [[0.0, 4096.0], [0.0, 4096.0]]
"""
