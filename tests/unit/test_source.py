"""Tests for predicates and the pandas-backed tabular source."""

import numpy as np
import pandas as pd
import pytest

from histofit.core.shared.exceptions import DataSourceError
from histofit.core.source import Comparison, DataFrameSource, Predicate, TabularSource


class TestPredicate:
    """Tests for range predicates."""

    def test_range_is_strict_on_both_ends(self):
        """Should build column > low AND column < high."""
        predicate = Predicate.range("x", 0.0, 10.0)
        frame = pd.DataFrame({"x": [0.0, 0.5, 9.9, 10.0]})
        assert predicate.mask(frame).tolist() == [False, True, True, False]
        assert str(predicate) == "x > 0 AND x < 10"

    def test_and_combines(self):
        combined = Predicate.range("x", 0, 1) & Predicate.range("y", 2, 3)
        assert len(combined.comparisons) == 4
        assert combined.columns == ["x", "y"]

    def test_unsupported_operator(self):
        with pytest.raises(ValueError, match="Unsupported"):
            Comparison("x", ">=", 1.0)  # type: ignore[arg-type]


class TestDataFrameSource:
    """Tests for DataFrameSource plans."""

    def test_select_filter_collect(self, scenario_frame):
        """Should materialize only the rows inside the range."""
        source = DataFrameSource.from_frame(scenario_frame)
        data = source.select(["x"]).filter(Predicate.range("x", 0.0, 10.0)).collect()
        np.testing.assert_allclose(data["x"], [0.5, 1.5, 9.9])
        assert data["x"].dtype == np.float64

    def test_repeated_column_collected_once(self, scenario_frame):
        source = DataFrameSource.from_frame(scenario_frame).select(["x", "x"])
        data = source.filter(Predicate.range("x", 0.0, 10.0)).collect()
        assert list(data) == ["x"]
        assert data["x"].shape == (3,)

    def test_plans_are_immutable(self, scenario_frame):
        source = DataFrameSource.from_frame(scenario_frame)
        narrowed = source.select(["x"]).filter(Predicate.range("x", 0.0, 1.0))
        assert source.selected is None
        assert not source.predicate.comparisons
        assert len(narrowed.collect()["x"]) == 1
        assert len(source.collect()["x"]) == 5

    def test_satisfies_protocol(self, scenario_frame):
        assert isinstance(DataFrameSource.from_frame(scenario_frame), TabularSource)

    def test_missing_column(self, scenario_frame):
        source = DataFrameSource.from_frame(scenario_frame).select(["nope"])
        with pytest.raises(DataSourceError, match="nope"):
            source.collect()

    def test_nan_rows_are_dropped(self, event_frame):
        data = DataFrameSource.from_frame(event_frame).select(["energy"]).collect()
        assert len(data["energy"]) == len(event_frame) - 3
        assert np.isfinite(data["energy"]).all()

    def test_non_numeric_column(self):
        source = DataFrameSource.from_frame(pd.DataFrame({"s": ["a", "b"]})).select(["s"])
        with pytest.raises(DataSourceError):
            source.collect()

    def test_needs_data(self):
        with pytest.raises(DataSourceError):
            DataFrameSource()


class TestFileSources:
    """Tests for file-backed sources."""

    def test_csv_and_parquet_concatenate_in_order(self, tmp_path):
        first = tmp_path / "a.csv"
        second = tmp_path / "b.parquet"
        pd.DataFrame({"x": [1.0, 2.0], "y": [0.0, 0.0]}).to_csv(first, index=False)
        pd.DataFrame({"x": [3.0], "y": [0.0]}).to_parquet(second)

        source = DataFrameSource.from_files([first, second])
        assert source.columns == ["x", "y"]
        np.testing.assert_allclose(source.select(["x"]).collect()["x"], [1.0, 2.0, 3.0])

    def test_unsupported_suffix(self, tmp_path):
        with pytest.raises(DataSourceError, match="Unsupported"):
            DataFrameSource.from_files([tmp_path / "data.xlsx"])

    def test_missing_file_fails_on_collect(self, tmp_path):
        source = DataFrameSource.from_files([tmp_path / "missing.parquet"])
        with pytest.raises(DataSourceError, match="not found"):
            source.select(["x"]).collect()
