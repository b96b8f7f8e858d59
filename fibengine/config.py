"""Configuration management for the Fibonacci engine."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from fibengine.strategies.base import Strategy

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "configs" / "default.yaml"


class EngineConfig(BaseModel):
    """Computation limits and the initial strategy."""

    max_index: int = Field(default=150, ge=0)
    default_strategy: Strategy = Strategy.FAST_DOUBLING_OPTIMIZED
    doubling_bit_width: int = Field(default=32, ge=1)
    linear_history_limit: int = Field(default=10_000, ge=2)

    @field_validator("default_strategy", mode="before")
    @classmethod
    def parse_strategy(cls, value: Any) -> Any:
        if isinstance(value, str):
            return Strategy.from_name(value)
        return value


class BenchmarkConfig(BaseModel):
    """Latency benchmark configuration."""

    runs_per_index: int = Field(default=5, ge=1)
    trim_outliers: bool = True
    outlier_z: float = Field(default=2.0, gt=0)
    output_dir: str = "data/bench"


class TraceConfig(BaseModel):
    """Trace and observability configuration."""

    enabled: bool = True
    log_dir: str = "data/traces"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
    file: str = "data/fibengine.log"


class Settings(BaseModel):
    """Root configuration for the Fibonacci engine."""

    engine: EngineConfig = Field(default_factory=EngineConfig)
    benchmark: BenchmarkConfig = Field(default_factory=BenchmarkConfig)
    trace: TraceConfig = Field(default_factory=TraceConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(path: str | Path | None = None) -> Settings:
    """Load configuration from YAML file with environment variable overrides.

    Args:
        path: Path to YAML config file. Uses default if not provided.

    Returns:
        Validated Settings instance.
    """
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH

    raw: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}
        logger.info("Loaded config from %s", config_path)
    else:
        logger.warning("Config file not found at %s, using defaults", config_path)

    # Environment variable overrides
    engine = raw.setdefault("engine", {})
    max_index = os.environ.get("FIBENGINE_MAX_INDEX", "")
    if max_index:
        engine["max_index"] = int(max_index)
    strategy = os.environ.get("FIBENGINE_STRATEGY", "")
    if strategy:
        engine["default_strategy"] = strategy

    return Settings(**raw)


def setup_logging(config: LoggingConfig) -> None:
    """Configure logging from settings."""
    log_file = Path(config.file)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=getattr(logging, config.level.upper(), logging.INFO),
        format=config.format,
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_file),
        ],
    )
