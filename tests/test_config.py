"""Tests for analyzer_config."""

import logging
from pathlib import Path

import pytest
import yaml

from analyzer_config import (
    AnalyzerConfig,
    ConfigError,
    get_default_config,
    load_config,
    save_config,
)

DEFAULT_YAML = Path(__file__).resolve().parent.parent / "configs" / "default.yaml"


class TestAnalyzerConfig:

    def test_defaults(self):
        config = AnalyzerConfig()
        assert config.ear_threshold == 0.2
        assert config.mar_threshold == 0.4
        assert config.ear_velocity_threshold == 0.03
        assert config.mar_velocity_threshold == 0.05
        assert config.value_window == 3
        assert config.ear_velocity_window == 1
        assert config.mar_velocity_window == 1
        assert config.htr_threshold == 0.4
        assert config.htr_window == 5
        assert config.mouth_gating == "symmetric"

    def test_per_eye_thresholds_fall_back(self):
        config = AnalyzerConfig(ear_threshold=0.25, left_ear_threshold=0.18)
        assert config.left_eye_threshold == 0.18
        assert config.right_eye_threshold == 0.25

    @pytest.mark.parametrize("field", ["value_window", "htr_window", "anchor_window"])
    def test_rejects_non_positive_windows(self, field):
        with pytest.raises(ConfigError):
            AnalyzerConfig(**{field: 0})

    def test_rejects_fractional_window(self):
        with pytest.raises(ConfigError):
            AnalyzerConfig(value_window=2.5)

    def test_rejects_negative_threshold(self):
        with pytest.raises(ConfigError):
            AnalyzerConfig(mar_threshold=-0.1)

    def test_rejects_unknown_gating(self):
        with pytest.raises(ConfigError):
            AnalyzerConfig(mouth_gating="always")

    def test_config_error_is_value_error(self):
        assert issubclass(ConfigError, ValueError)

    def test_replace(self):
        config = AnalyzerConfig().replace(htr_threshold=0.3)
        assert config.htr_threshold == 0.3
        assert config.ear_threshold == 0.2

    def test_from_dict_sections(self):
        config = AnalyzerConfig.from_dict({
            'eyes': {'ear_thresh': 0.22, 'right_ear_thresh': 0.19},
            'mouth': {'gating': 'close_only'},
            'filters': {'value_window': 5},
        })
        assert config.ear_threshold == 0.22
        assert config.right_eye_threshold == 0.19
        assert config.mouth_gating == "close_only"
        assert config.value_window == 5
        assert config.mar_threshold == 0.4

    def test_from_dict_ignores_unknown(self, caplog):
        with caplog.at_level(logging.WARNING):
            config = AnalyzerConfig.from_dict({'eyes': {'sparkle': 1}, 'display': 'big'})
        assert config == AnalyzerConfig()
        assert "eyes.sparkle" in caplog.text

    def test_to_dict_round_trips(self):
        config = AnalyzerConfig(hpr_threshold=0.2, mouth_gating="none")
        assert AnalyzerConfig.from_dict(config.to_dict()) == config


class TestLoadConfig:

    def test_shipped_defaults_match(self):
        assert load_config(str(DEFAULT_YAML)) == get_default_config()

    def test_missing_file_uses_defaults(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING):
            config = load_config(str(tmp_path / "nope.yaml"))
        assert config == AnalyzerConfig()
        assert "not found" in caplog.text

    def test_empty_file_uses_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(str(path)) == AnalyzerConfig()

    def test_partial_file(self, tmp_path):
        path = tmp_path / "partial.yaml"
        path.write_text("head:\n  htr_thresh: 0.5\n  htr_window: 7\n")
        config = load_config(str(path))
        assert config.htr_threshold == 0.5
        assert config.htr_window == 7
        assert config.hpr_window == 5

    def test_non_mapping_raises(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigError):
            load_config(str(path))

    def test_invalid_value_raises(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("filters:\n  value_window: 0\n")
        with pytest.raises(ConfigError):
            load_config(str(path))

    def test_save_then_load(self, tmp_path):
        path = tmp_path / "saved.yaml"
        config = AnalyzerConfig(left_ear_threshold=0.17, anchor_window=9)
        save_config(config, str(path))
        assert yaml.safe_load(path.read_text())['overlay']['anchor_window'] == 9
        assert load_config(str(path)) == config
