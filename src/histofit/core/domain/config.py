"""Configuration models for HistoFit."""

from __future__ import annotations

import math
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

PositiveInt = Annotated[int, Field(gt=0)]
Range = tuple[float, float]


def _check_range(value: Range) -> Range:
    low, high = value
    if not (math.isfinite(low) and math.isfinite(high)):
        msg = f"Range bounds must be finite, got {list(value)}"
        raise ValueError(msg)
    if not low < high:
        msg = f"Range minimum must be below maximum, got {list(value)}"
        raise ValueError(msg)
    return value


class FillConfig(BaseModel):
    """Configuration of the asynchronous histogram fill."""

    model_config = ConfigDict(extra="forbid")

    max_workers: PositiveInt | None = Field(
        default=None,
        description="Fill worker threads. None lets the thread pool pick its default.",
    )
    batch_size: PositiveInt = Field(
        default=1,
        description="Values counted per lock acquisition; 1 updates progress on every row.",
    )


class FitConfig(BaseModel):
    """Configuration of the nonlinear peak fit."""

    model_config = ConfigDict(extra="forbid")

    max_iterations: PositiveInt = Field(
        default=2000,
        description="Maximum number of function evaluations for the optimizer.",
    )
    tolerance: Annotated[float, Field(gt=0)] = Field(
        default=1e-10,
        description="Convergence tolerance on parameter and cost changes.",
    )


class Histogram1DSpec(BaseModel):
    """A 1D histogram to create and fill from one column."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    column: str = Field(min_length=1)
    bins: PositiveInt
    range: Range
    container: str | None = Field(default=None, description="Container label; 'Other' if unset.")

    @field_validator("range")
    @classmethod
    def validate_range(cls, v: Range) -> Range:
        return _check_range(v)


class Histogram2DSpec(BaseModel):
    """A 2D histogram to create and fill from a pair of columns."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    x_column: str = Field(min_length=1)
    y_column: str = Field(min_length=1)
    bins: tuple[PositiveInt, PositiveInt]
    range: tuple[Range, Range]
    container: str | None = None

    @field_validator("range")
    @classmethod
    def validate_range(cls, v: tuple[Range, Range]) -> tuple[Range, Range]:
        return (_check_range(v[0]), _check_range(v[1]))


class HistoFitConfig(BaseModel):
    """Top-level configuration: fill and fit settings plus the histogram script.

    Example TOML configuration:
        [fill]
        batch_size = 1000

        [fit]
        max_iterations = 2000

        [[histograms]]
        name = "Energy"
        column = "energy"
        bins = 512
        range = [0.0, 4096.0]
    """

    model_config = ConfigDict(extra="forbid")

    fill: FillConfig = Field(default_factory=FillConfig)
    fit: FitConfig = Field(default_factory=FitConfig)
    histograms: list[Histogram1DSpec] = Field(default_factory=list)
    histograms2d: list[Histogram2DSpec] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_unique_names(self) -> HistoFitConfig:
        names = [h.name for h in self.histograms] + [h.name for h in self.histograms2d]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            msg = f"Histogram names must be unique, duplicated: {duplicates}"
            raise ValueError(msg)
        return self
