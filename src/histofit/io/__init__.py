"""I/O module for HistoFit.

Handles file operations including:
- Configuration file loading/saving (TOML)
- Fit collection persistence (JSON)
"""

from histofit.io.config import generate_default_config, load_config, save_config
from histofit.io.fits import FitsRepository

__all__ = [
    "FitsRepository",
    "generate_default_config",
    "load_config",
    "save_config",
]
