# analyzer_config.py
"""
Configuration for the face analyzer

All thresholds and window sizes live in one AnalyzerConfig. Values come from
a YAML file laid out in sections (eyes, mouth, filters, head, overlay); any
missing value falls back to the defaults below.
"""
import logging
from dataclasses import dataclass, fields
from typing import Optional

import yaml

from metrics.orifice import MOUTH_GATING_MODES

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "configs/default.yaml"

# (section, yaml key) -> AnalyzerConfig field
_YAML_KEYS = {
    ('eyes', 'ear_thresh'): 'ear_threshold',
    ('eyes', 'left_ear_thresh'): 'left_ear_threshold',
    ('eyes', 'right_ear_thresh'): 'right_ear_threshold',
    ('eyes', 'velocity_thresh'): 'ear_velocity_threshold',
    ('eyes', 'velocity_window'): 'ear_velocity_window',
    ('mouth', 'mar_thresh'): 'mar_threshold',
    ('mouth', 'velocity_thresh'): 'mar_velocity_threshold',
    ('mouth', 'velocity_window'): 'mar_velocity_window',
    ('mouth', 'gating'): 'mouth_gating',
    ('filters', 'value_window'): 'value_window',
    ('head', 'htr_thresh'): 'htr_threshold',
    ('head', 'htr_window'): 'htr_window',
    ('head', 'hpr_thresh'): 'hpr_threshold',
    ('head', 'hpr_window'): 'hpr_window',
    ('overlay', 'anchor_window'): 'anchor_window',
}

_WINDOW_FIELDS = ('value_window', 'ear_velocity_window', 'mar_velocity_window',
                  'htr_window', 'hpr_window', 'anchor_window')
_THRESHOLD_FIELDS = ('ear_threshold', 'left_ear_threshold', 'right_ear_threshold',
                     'mar_threshold', 'ear_velocity_threshold', 'mar_velocity_threshold',
                     'htr_threshold', 'hpr_threshold')


class ConfigError(ValueError):
    """Raised for invalid analyzer configuration"""


@dataclass
class AnalyzerConfig:
    # Open/closed thresholds
    ear_threshold: float = 0.2
    left_ear_threshold: Optional[float] = None
    right_ear_threshold: Optional[float] = None
    mar_threshold: float = 0.4

    # Velocity gates
    ear_velocity_threshold: float = 0.03
    mar_velocity_threshold: float = 0.05
    mouth_gating: str = "symmetric"

    # Window sizes
    value_window: int = 3
    ear_velocity_window: int = 1
    mar_velocity_window: int = 1
    htr_window: int = 5
    hpr_window: int = 5
    anchor_window: int = 5

    # Head orientation
    htr_threshold: float = 0.4
    hpr_threshold: float = 0.15

    def __post_init__(self):
        self.validate()

    def validate(self):
        for name in _WINDOW_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")
        for name in _THRESHOLD_FIELDS:
            value = getattr(self, name)
            if value is None and name in ('left_ear_threshold', 'right_ear_threshold'):
                continue
            if not isinstance(value, (int, float)) or isinstance(value, bool) or value < 0:
                raise ConfigError(f"{name} must be a non-negative number, got {value!r}")
        if self.mouth_gating not in MOUTH_GATING_MODES:
            raise ConfigError(
                f"mouth_gating must be one of {', '.join(MOUTH_GATING_MODES)}, got {self.mouth_gating!r}"
            )

    @property
    def left_eye_threshold(self):
        return self.ear_threshold if self.left_ear_threshold is None else self.left_ear_threshold

    @property
    def right_eye_threshold(self):
        return self.ear_threshold if self.right_ear_threshold is None else self.right_ear_threshold

    @classmethod
    def from_dict(cls, data):
        """
        Build a config from the nested YAML layout

        Args:
            data: Dictionary with eyes/mouth/filters/head/overlay sections

        Returns:
            AnalyzerConfig: Config with defaults for anything missing
        """
        values = {}
        for section, section_data in (data or {}).items():
            if not isinstance(section_data, dict):
                logger.warning("Ignoring config section %r: expected a mapping", section)
                continue
            for key, value in section_data.items():
                field_name = _YAML_KEYS.get((section, key))
                if field_name is None:
                    logger.warning("Ignoring unknown config key %s.%s", section, key)
                    continue
                values[field_name] = value
        return cls(**values)

    def to_dict(self):
        """Nested dictionary in the same layout from_dict reads"""
        data = {}
        for (section, key), field_name in _YAML_KEYS.items():
            data.setdefault(section, {})[key] = getattr(self, field_name)
        return data

    def replace(self, **changes):
        """Copy of this config with some fields changed"""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values.update(changes)
        return AnalyzerConfig(**values)


def get_default_config():
    """Configuration used when no file is available"""
    return AnalyzerConfig()


def load_config(config_path=DEFAULT_CONFIG_PATH):
    """
    Load configuration from a YAML file with fallback defaults

    Args:
        config_path: Path to configuration YAML file

    Returns:
        AnalyzerConfig: Parsed configuration

    Raises:
        ConfigError: If the file holds invalid values
    """
    try:
        with open(config_path, 'r') as file:
            data = yaml.safe_load(file)
    except FileNotFoundError:
        logger.warning("Config file %s not found. Using defaults.", config_path)
        return get_default_config()

    if data is None:
        logger.info("Config file %s is empty. Using defaults.", config_path)
        return get_default_config()
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")

    config = AnalyzerConfig.from_dict(data)
    logger.info("Configuration loaded from %s", config_path)
    return config


def save_config(config, config_path):
    """Write a config back out as YAML"""
    with open(config_path, 'w') as file:
        yaml.safe_dump(config.to_dict(), file, default_flow_style=False, sort_keys=False)
