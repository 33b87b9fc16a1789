"""Lazy tabular sources consumed by the histogram fill engine.

The engine only needs three things from a data source: pick columns, keep
rows satisfying a conjunction of ``column > literal`` / ``column < literal``
comparisons, and materialize what is left as ``float64`` columns. That
capability is captured by the :class:`TabularSource` protocol.

:class:`DataFrameSource` implements it on top of pandas. A source is an
immutable *plan*: ``select`` and ``filter`` return new sources and nothing is
read until :meth:`DataFrameSource.collect` runs, which is what lets every fill
worker share the same source object.
"""

from __future__ import annotations

import logging
import operator
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import TYPE_CHECKING, Literal, Protocol, runtime_checkable

import numpy as np
import pandas as pd

from histofit.core.shared.exceptions import DataSourceError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from histofit.core.shared.typing import FloatArray

log = logging.getLogger(__name__)

ComparisonOp = Literal[">", "<"]

_OPERATORS = {">": operator.gt, "<": operator.lt}

SUPPORTED_SUFFIXES = (".parquet", ".csv")


@dataclass(frozen=True, slots=True)
class Comparison:
    """A single ``column <op> literal`` comparison."""

    column: str
    op: ComparisonOp
    literal: float

    def __post_init__(self) -> None:
        if self.op not in _OPERATORS:
            msg = f"Unsupported comparison operator: {self.op!r}"
            raise ValueError(msg)

    def __str__(self) -> str:
        return f"{self.column} {self.op} {self.literal:g}"


@dataclass(frozen=True, slots=True)
class Predicate:
    """Conjunction of comparisons; an empty predicate keeps every row."""

    comparisons: tuple[Comparison, ...] = ()

    @classmethod
    def range(cls, column: str, low: float, high: float) -> Predicate:
        """Build ``column > low AND column < high``."""
        return cls((Comparison(column, ">", low), Comparison(column, "<", high)))

    @property
    def columns(self) -> list[str]:
        return list(dict.fromkeys(c.column for c in self.comparisons))

    def __and__(self, other: Predicate) -> Predicate:
        return Predicate(self.comparisons + other.comparisons)

    def __str__(self) -> str:
        return " AND ".join(str(c) for c in self.comparisons) or "TRUE"

    def mask(self, frame: pd.DataFrame) -> pd.Series:
        """Evaluate the predicate on *frame*; NaN never satisfies a comparison."""
        keep = pd.Series(True, index=frame.index)
        for comparison in self.comparisons:
            keep &= _OPERATORS[comparison.op](frame[comparison.column], comparison.literal)
        return keep


@runtime_checkable
class TabularSource(Protocol):
    """Column-oriented, lazily evaluated query over tabular data."""

    def select(self, columns: Sequence[str]) -> TabularSource:
        """Restrict the plan to *columns*."""
        ...

    def filter(self, predicate: Predicate) -> TabularSource:
        """Keep only rows satisfying *predicate*."""
        ...

    def collect(self) -> dict[str, FloatArray]:
        """Materialize the plan; raises :class:`DataSourceError` on failure."""
        ...


@dataclass(frozen=True, eq=False)
class DataFrameSource:
    """pandas-backed :class:`TabularSource`.

    Either wraps an in-memory frame or a list of ``.parquet`` / ``.csv`` files
    that are read (only the needed columns) and concatenated in the given
    order at collect time.
    """

    frame: pd.DataFrame | None = None
    files: tuple[Path, ...] = ()
    selected: tuple[str, ...] | None = None
    predicate: Predicate = field(default_factory=Predicate)

    def __post_init__(self) -> None:
        if self.frame is None and not self.files:
            msg = "DataFrameSource needs a DataFrame or at least one file"
            raise DataSourceError(msg)

    @classmethod
    def from_frame(cls, frame: pd.DataFrame) -> DataFrameSource:
        return cls(frame=frame)

    @classmethod
    def from_files(cls, paths: Iterable[str | Path]) -> DataFrameSource:
        files = tuple(Path(p) for p in paths)
        for path in files:
            if path.suffix.lower() not in SUPPORTED_SUFFIXES:
                msg = f"Unsupported file type {path.suffix!r} for {path}"
                raise DataSourceError(msg)
        return cls(files=files)

    @property
    def columns(self) -> list[str]:
        """Columns available after selection (reads file schemas lazily)."""
        if self.selected is not None:
            return list(self.selected)
        if self.frame is not None:
            return [str(c) for c in self.frame.columns]
        return list(dict.fromkeys(c for path in self.files for c in _read_header(path)))

    def select(self, columns: Sequence[str]) -> DataFrameSource:
        return replace(self, selected=tuple(columns))

    def filter(self, predicate: Predicate) -> DataFrameSource:
        return replace(self, predicate=self.predicate & predicate)

    def collect(self) -> dict[str, FloatArray]:
        wanted = list(self.selected) if self.selected is not None else None
        needed = None if wanted is None else list(dict.fromkeys(wanted + self.predicate.columns))

        frame = self._load(needed)
        missing = [c for c in (needed or self.predicate.columns) if c not in frame.columns]
        if missing:
            msg = f"Columns not found: {missing}. Available: {list(frame.columns)}"
            raise DataSourceError(msg)

        try:
            if self.predicate.comparisons:
                frame = frame.loc[self.predicate.mask(frame)]
            if wanted is not None:
                # A column requested twice (a diagonal 2D fill) is materialized once.
                frame = frame[list(dict.fromkeys(wanted))]
            frame = frame.dropna()
            columns = {str(name): frame[name].to_numpy(dtype=np.float64) for name in frame.columns}
        except (TypeError, ValueError) as exc:
            msg = f"Could not materialize columns as float64: {exc}"
            raise DataSourceError(msg) from exc

        log.debug("Collected %d rows (%s) where %s", len(frame), list(columns), self.predicate)
        return columns

    def _load(self, needed: list[str] | None) -> pd.DataFrame:
        if self.frame is not None:
            return self.frame

        frames = []
        for path in self.files:
            if not path.exists():
                msg = f"Data file not found: {path}"
                raise DataSourceError(msg)
            try:
                frames.append(_read_file(path, needed))
            except (OSError, ValueError, KeyError, ImportError) as exc:
                msg = f"Failed to read {path}: {exc}"
                raise DataSourceError(msg) from exc
        return pd.concat(frames, ignore_index=True)


def _read_file(path: Path, columns: list[str] | None) -> pd.DataFrame:
    if path.suffix.lower() == ".parquet":
        return pd.read_parquet(path, columns=columns)
    return pd.read_csv(path, usecols=columns)


def _read_header(path: Path) -> list[str]:
    try:
        if path.suffix.lower() == ".parquet":
            import pyarrow.parquet as pq

            return list(pq.read_schema(path).names)
        return [str(c) for c in pd.read_csv(path, nrows=0).columns]
    except (OSError, ValueError, ImportError) as exc:
        msg = f"Failed to read columns of {path}: {exc}"
        raise DataSourceError(msg) from exc


__all__ = [
    "Comparison",
    "DataFrameSource",
    "Predicate",
    "TabularSource",
]
