"""Test configuration loading and saving."""

import tomllib

import pytest
from pydantic import ValidationError

from histofit.core.domain.config import (
    FillConfig,
    FitConfig,
    Histogram1DSpec,
    Histogram2DSpec,
    HistoFitConfig,
)
from histofit.core.shared.exceptions import ConfigError
from histofit.io.config import generate_default_config, load_config, save_config


class TestConfigLoading:
    """Tests for configuration file loading."""

    def test_load_valid_config(self, sample_config_file):
        """Should load valid TOML configuration."""
        config = load_config(sample_config_file)
        assert config.fill.max_workers == 2
        assert config.fill.batch_size == 64
        assert config.fit.max_iterations == 500
        assert [h.name for h in config.histograms] == ["Energy", "Time"]
        assert config.histograms[0].container == "Detectors"
        assert config.histograms[1].container is None
        assert config.histograms2d[0].bins == (20, 10)
        assert config.histograms2d[0].range == ((0.0, 1000.0), (0.0, 100.0))

    def test_load_nonexistent_file(self, tmp_path):
        """Should raise error for nonexistent file."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "does_not_exist.toml")

    def test_load_invalid_toml(self, tmp_path):
        """Should raise ConfigError for invalid TOML syntax."""
        invalid_file = tmp_path / "invalid.toml"
        invalid_file.write_text("not valid toml {{{")
        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(invalid_file)

    def test_load_unknown_key(self, tmp_path):
        path = tmp_path / "typo.toml"
        path.write_text("[fill]\nbatchsize = 3\n")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_load_minimal_config(self, tmp_path):
        """Should load minimal config with defaults."""
        minimal_file = tmp_path / "minimal.toml"
        minimal_file.write_text("")
        config = load_config(minimal_file)
        assert config.fill.batch_size == 1
        assert config.fill.max_workers is None
        assert config.fit.max_iterations == 2000
        assert config.histograms == []


class TestConfigValidation:
    """Tests for model-level validation."""

    def test_inverted_range(self):
        with pytest.raises(ValidationError, match="below maximum"):
            Histogram1DSpec(name="h", column="x", bins=10, range=(5.0, 1.0))

    @pytest.mark.parametrize("bounds", [(0.0, float("inf")), (float("-inf"), 1.0), (float("nan"), 1.0)])
    def test_non_finite_range(self, bounds):
        with pytest.raises(ValidationError, match="finite"):
            Histogram1DSpec(name="h", column="x", bins=10, range=bounds)

    def test_non_finite_range_in_toml(self, tmp_path):
        path = tmp_path / "inf.toml"
        path.write_text('[[histograms]]\nname = "h"\ncolumn = "x"\nbins = 10\nrange = [0.0, inf]\n')
        with pytest.raises(ConfigError, match="finite"):
            load_config(path)

    def test_zero_bins(self):
        with pytest.raises(ValidationError):
            Histogram1DSpec(name="h", column="x", bins=0, range=(0.0, 1.0))

    def test_2d_ranges_checked_per_axis(self):
        with pytest.raises(ValidationError):
            Histogram2DSpec(
                name="h", x_column="x", y_column="y", bins=(2, 2), range=((0, 1), (1, 1))
            )

    def test_duplicate_names_across_dimensionalities(self):
        with pytest.raises(ValidationError, match="unique"):
            HistoFitConfig(
                histograms=[Histogram1DSpec(name="h", column="x", bins=2, range=(0, 1))],
                histograms2d=[
                    Histogram2DSpec(
                        name="h", x_column="x", y_column="y", bins=(2, 2), range=((0, 1), (0, 1))
                    )
                ],
            )

    def test_fit_tolerance_positive(self):
        with pytest.raises(ValidationError):
            FitConfig(tolerance=0.0)

    def test_batch_size_positive(self):
        with pytest.raises(ValidationError):
            FillConfig(batch_size=0)


class TestConfigSaving:
    """Tests for configuration file saving."""

    def test_save_and_load_roundtrip(self, tmp_path, sample_config_file):
        """Should save config that can be loaded back."""
        config = load_config(sample_config_file)
        save_path = tmp_path / "out" / "roundtrip.toml"
        save_config(config, save_path)
        assert load_config(save_path) == config

    def test_save_omits_unset_optionals(self, tmp_path):
        save_path = tmp_path / "defaults.toml"
        save_config(HistoFitConfig(), save_path)
        data = tomllib.loads(save_path.read_text())
        assert "max_workers" not in data["fill"]


class TestDefaultConfigGeneration:
    """Tests for default config generation."""

    def test_generate_default_config_is_loadable(self, tmp_path):
        content = generate_default_config()
        assert "[fill]" in content
        assert "[[histograms]]" in content
        path = tmp_path / "default.toml"
        path.write_text(content)
        config = load_config(path)
        assert config.histograms[0].name == "Energy"
