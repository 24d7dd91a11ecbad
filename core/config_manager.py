"""
Configuration Manager for Acelera.

Central place for runtime tunables. Every empirical value is declared here
and can be overridden from config/runtime.yaml.

Usage:
    from core.config_manager import get_config
    config = get_config()
    delay = config.VALIDATION_DEBOUNCE_SECONDS
"""
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

from core.exceptions import ConfigError
from core.logger import get_logger
from core.paths import CONFIG_DIR

RUNTIME_CONFIG_PATH = CONFIG_DIR / "runtime.yaml"

logger = get_logger("config")


@dataclass
class SystemConfig:
    """
    Runtime constants.

    The SMART rubric weights are not here: they are part of the scoring
    contract and stay fixed in core.smart_validator.
    """

    # === Simulated AI validation ===

    # Artificial latency of the "AI" review, uniform in [min, max) ms
    AI_VALIDATION_MIN_DELAY_MS: int = 1000
    AI_VALIDATION_MAX_DELAY_MS: int = 3000

    # === Live re-validation while editing ===

    # Quiet period before a draft is re-scored
    VALIDATION_DEBOUNCE_SECONDS: float = 0.5

    # Drafts with a shorter title get no feedback yet; also the creation minimum
    PREVIEW_MIN_TITLE_LENGTH: int = 5

    # Minimum description length accepted when a goal is created
    MIN_DESCRIPTION_LENGTH: int = 10

    # === Persistence ===

    # Populate an empty goal store with the demo organisation goals
    SEED_ON_EMPTY: bool = True

    def validate(self) -> None:
        if self.AI_VALIDATION_MIN_DELAY_MS < 0:
            raise ConfigError("AI_VALIDATION_MIN_DELAY_MS must be >= 0", str(RUNTIME_CONFIG_PATH))
        if self.AI_VALIDATION_MAX_DELAY_MS < self.AI_VALIDATION_MIN_DELAY_MS:
            raise ConfigError(
                "AI_VALIDATION_MAX_DELAY_MS must be >= AI_VALIDATION_MIN_DELAY_MS",
                str(RUNTIME_CONFIG_PATH),
            )
        if self.VALIDATION_DEBOUNCE_SECONDS < 0:
            raise ConfigError("VALIDATION_DEBOUNCE_SECONDS must be >= 0", str(RUNTIME_CONFIG_PATH))


def _load_runtime_config(path: Path) -> dict:
    """Load runtime overrides if present."""
    if not path.exists():
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (yaml.YAMLError, OSError) as e:
        logger.warning(f"Ignoring unreadable runtime config {path}: {e}")
        return {}

    if not isinstance(data, dict):
        logger.warning(f"Ignoring runtime config {path}: top level must be a mapping")
        return {}
    return data


def get_config(path: Optional[Path] = None) -> SystemConfig:
    """
    Build a config instance.

    Priority: runtime.yaml > defaults
    """
    base = SystemConfig()
    overrides = _load_runtime_config(path or RUNTIME_CONFIG_PATH)

    known = {f.name for f in fields(SystemConfig)}
    for key, value in overrides.items():
        if key in known:
            setattr(base, key, value)
        else:
            logger.debug(f"Unknown config key ignored: {key}")

    base.validate()
    return base
