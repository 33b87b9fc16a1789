"""Persistence of the fit collection as JSON."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from histofit.core.fitting.fitter import Fits
from histofit.core.shared.exceptions import DataIOError

if TYPE_CHECKING:
    from pathlib import Path

log = logging.getLogger(__name__)


class FitsRepository:
    """Infrastructure boundary for saving/loading fit collections."""

    indent: int = 2

    @classmethod
    def save(cls, path: Path, fits: Fits) -> Path:
        """Serialize *fits* to *path* and return it."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(fits.model_dump_json(indent=cls.indent), encoding="utf-8")
        except OSError as exc:
            msg = f"Could not write fits to {path}: {exc}"
            raise DataIOError(msg) from exc
        log.info("Saved %d fit(s) to %s", len(fits.stored_fits), path)
        return path

    @classmethod
    def load(cls, path: Path) -> Fits:
        """Load a fit collection saved by :meth:`save`."""
        try:
            payload = path.read_text(encoding="utf-8")
        except OSError as exc:
            msg = f"Could not read fits from {path}: {exc}"
            raise DataIOError(msg) from exc
        try:
            return Fits.model_validate_json(payload)
        except ValidationError as exc:
            msg = f"Invalid fits file {path}:\n{exc}"
            raise DataIOError(msg) from exc

    @classmethod
    def load_into(cls, path: Path, fits: Fits) -> Fits:
        """Merge the file's fits into *fits*: stored fits are appended, temp slots replaced."""
        loaded = cls.load(path)
        fits.merge(loaded)
        log.info("Loaded %d fit(s) from %s", len(loaded.stored_fits), path)
        return fits
