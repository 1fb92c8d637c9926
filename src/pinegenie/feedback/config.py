"""Thresholds used by the feedback analyzers and their YAML loader."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from pinegenie.feedback.errors import FeedbackConfigError

LOGGER = logging.getLogger(__name__)

CONFIG_ENV_VAR = "PINEGENIE_CONFIG"


@dataclass(frozen=True)
class FeedbackConfig:
    """Configuration for validation, improvement and tip thresholds."""

    complexity_threshold: int = 15
    max_indicators: int = 8

    rsi_period_min: float = 5
    rsi_period_max: float = 50
    sma_period_min: float = 5
    sma_period_max: float = 200

    critical_connection_count: int = 3
    regime_detection_min_nodes: int = 5
    max_educational_tips: int = 5

    def __post_init__(self) -> None:
        for item in fields(self):
            value = getattr(self, item.name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise FeedbackConfigError(f"{item.name}_invalid")
        if self.complexity_threshold <= 0:
            raise FeedbackConfigError("complexity_threshold must be > 0")
        if self.max_indicators <= 0:
            raise FeedbackConfigError("max_indicators must be > 0")
        if not (0 < self.rsi_period_min < self.rsi_period_max):
            raise FeedbackConfigError("rsi period range must satisfy 0 < min < max")
        if not (0 < self.sma_period_min < self.sma_period_max):
            raise FeedbackConfigError("sma period range must satisfy 0 < min < max")
        if self.critical_connection_count <= 0:
            raise FeedbackConfigError("critical_connection_count must be > 0")
        if self.regime_detection_min_nodes < 0:
            raise FeedbackConfigError("regime_detection_min_nodes must be >= 0")
        if self.max_educational_tips <= 0:
            raise FeedbackConfigError("max_educational_tips must be > 0")


DEFAULT_CONFIG = FeedbackConfig()


class FeedbackConfigModel(BaseModel):
    complexity_threshold: int = DEFAULT_CONFIG.complexity_threshold
    max_indicators: int = DEFAULT_CONFIG.max_indicators
    rsi_period_min: float = DEFAULT_CONFIG.rsi_period_min
    rsi_period_max: float = DEFAULT_CONFIG.rsi_period_max
    sma_period_min: float = DEFAULT_CONFIG.sma_period_min
    sma_period_max: float = DEFAULT_CONFIG.sma_period_max
    critical_connection_count: int = DEFAULT_CONFIG.critical_connection_count
    regime_detection_min_nodes: int = DEFAULT_CONFIG.regime_detection_min_nodes
    max_educational_tips: int = DEFAULT_CONFIG.max_educational_tips

    model_config = ConfigDict(extra="forbid")


def config_from_mapping(payload: Mapping[str, Any]) -> FeedbackConfig:
    try:
        model = FeedbackConfigModel.model_validate(dict(payload))
    except ValidationError as exc:
        raise FeedbackConfigError(f"config_validation_failed: {exc}") from exc
    return FeedbackConfig(**model.model_dump())


def load_feedback_config(path: Path) -> FeedbackConfig:
    path = Path(path)
    if not path.exists():
        raise FeedbackConfigError(f"config_not_found:{path}")
    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (yaml.YAMLError, UnicodeDecodeError) as exc:
        raise FeedbackConfigError("config_yaml_invalid") from exc
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise FeedbackConfigError("config_root_invalid")
    config = config_from_mapping(payload)
    LOGGER.info("Loaded feedback config from %s", path)
    return config


def config_from_env(environ: Mapping[str, str] | None = None) -> FeedbackConfig:
    env = os.environ if environ is None else environ
    raw = env.get(CONFIG_ENV_VAR, "").strip()
    if not raw:
        return DEFAULT_CONFIG
    return load_feedback_config(Path(raw))
