"""
Doodle Animator Configuration
=============================

This module handles configuration loading for the doodle animator.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    API_KEY / GEMINI_API_KEY -> generation.api_key
    DOODLE_MODEL           -> generation.model
    DOODLE_TEMPERATURE     -> generation.temperature
    DOODLE_FRAME_RATE      -> animation.frame_rate_hz
    DOODLE_CANVAS_SIZE     -> animation.width and animation.height
    DOODLE_COLOR_FORMAT    -> animation.color_format
    DOODLE_DECODE_TIMEOUT  -> animation.decode_timeout_seconds
    DOODLE_SKIP_BAD_FRAMES -> animation.skip_bad_frames
    DOODLE_PORT            -> server.port
    DOODLE_LOG_LEVEL       -> logging.level
    PORT                   -> server.port (Cloud Run)

Example:
    from doodle_animator.config import settings

    print(settings.animation.frame_rate_hz)
    print(settings.generation.model)
"""

import os
import logging
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class AppConfig(BaseModel):
    """Service identification configuration."""

    name: str = Field(default="doodle-animator", description="Service name")
    version: str = Field(default="v0.1.0", description="Service version")


class GenerationConfig(BaseModel):
    """Remote frame generation configuration."""

    model: str = Field(
        default="gemini-2.0-flash-preview-image-generation",
        description="Gemini model that returns image parts",
    )
    temperature: float = Field(
        default=0.8,
        ge=0,
        le=2.0,
        description="Sampling temperature",
    )
    api_key: Optional[str] = Field(
        default=None,
        description="Gemini API key (prefer the API_KEY env var)",
    )
    min_frames: int = Field(
        default=2,
        ge=1,
        description="Usable frames required to build an animation",
    )


class AnimationConfig(BaseModel):
    """Frame-to-GIF assembly configuration."""

    frame_rate_hz: float = Field(
        default=4.0,
        gt=0,
        description="Playback rate in frames per second",
    )
    width: int = Field(default=1024, gt=0, le=4096, description="Canvas width")
    height: int = Field(default=1024, gt=0, le=4096, description="Canvas height")
    max_colors: int = Field(
        default=256,
        ge=2,
        le=256,
        description="Palette size limit per frame",
    )
    color_format: Literal["rgb444", "rgb565"] = Field(
        default="rgb444",
        description="Quantizer binning precision",
    )
    decode_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Maximum seconds to decode one frame",
    )
    skip_bad_frames: bool = Field(
        default=False,
        description="Drop undecodable frames instead of aborting the build",
    )


class ReferenceImageConfig(BaseModel):
    """Reference image intake configuration."""

    max_size_mb: float = Field(default=4.0, gt=0, description="Upload size limit")


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=8002, ge=1, le=65535, description="Bind port")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="json", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for the doodle animator.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    app: AppConfig = Field(default_factory=AppConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    animation: AnimationConfig = Field(default_factory=AnimationConfig)
    reference_image: ReferenceImageConfig = Field(default_factory=ReferenceImageConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to config.yaml. If None, searches common locations.

    Returns:
        Settings: Loaded configuration
    """
    # Find config file
    if config_path is None:
        search_paths = [
            Path("config.yaml"),
            Path("config.yml"),
            Path("/app/config.yaml"),
            Path(__file__).parent.parent.parent / "config.yaml",
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break

    # Load from YAML if exists
    config_data = {}
    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.warning("No config file found, using defaults and environment variables")

    # Apply environment variable overrides
    _apply_env_overrides(config_data)

    # Build settings object
    settings = Settings.model_validate(config_data)

    return settings


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Generation settings
    if env_key := os.environ.get("API_KEY") or os.environ.get("GEMINI_API_KEY"):
        config_data.setdefault("generation", {})["api_key"] = env_key
    if env_model := os.environ.get("DOODLE_MODEL"):
        config_data.setdefault("generation", {})["model"] = env_model
    if env_temp := os.environ.get("DOODLE_TEMPERATURE"):
        config_data.setdefault("generation", {})["temperature"] = float(env_temp)

    # Animation settings
    if env_rate := os.environ.get("DOODLE_FRAME_RATE"):
        config_data.setdefault("animation", {})["frame_rate_hz"] = float(env_rate)
    if env_size := os.environ.get("DOODLE_CANVAS_SIZE"):
        animation = config_data.setdefault("animation", {})
        animation["width"] = int(env_size)
        animation["height"] = int(env_size)
    if env_format := os.environ.get("DOODLE_COLOR_FORMAT"):
        config_data.setdefault("animation", {})["color_format"] = env_format
    if env_timeout := os.environ.get("DOODLE_DECODE_TIMEOUT"):
        config_data.setdefault("animation", {})["decode_timeout_seconds"] = float(env_timeout)
    if env_skip := os.environ.get("DOODLE_SKIP_BAD_FRAMES"):
        config_data.setdefault("animation", {})["skip_bad_frames"] = _parse_bool(env_skip)

    # Server settings (Cloud Run uses PORT env var)
    if env_port := os.environ.get("PORT"):
        config_data.setdefault("server", {})["port"] = int(env_port)
    elif env_port := os.environ.get("DOODLE_PORT"):
        config_data.setdefault("server", {})["port"] = int(env_port)

    # Logging settings
    if env_log := os.environ.get("DOODLE_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


# =============================================================================
# Global Settings Instance
# =============================================================================

# Global settings instance - loaded on import
settings = load_config()
setup_logging(settings)
