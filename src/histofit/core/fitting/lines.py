"""Render-ready point sequences produced by the fitters."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from histofit.core.shared.typing import FloatArray


class FitLine(BaseModel):
    """A named curve, stored as ``(x, y)`` points so it survives JSON round-trips."""

    model_config = ConfigDict(extra="forbid")

    name: str
    points: list[tuple[float, float]] = Field(default_factory=list)
    visible: bool = True

    @classmethod
    def from_arrays(cls, name: str, x: FloatArray, y: FloatArray) -> FitLine:
        return cls(name=name, points=[(float(a), float(b)) for a, b in zip(x, y, strict=True)])

    @property
    def x(self) -> FloatArray:
        return np.array([p[0] for p in self.points], dtype=np.float64)

    @property
    def y(self) -> FloatArray:
        return np.array([p[1] for p in self.points], dtype=np.float64)

    def __len__(self) -> int:
        return len(self.points)
