"""
Configuration models for the molang command-line front end.

Configuration is loaded from molang.toml:

    [molang]
    stdlib = true
    log_level = "WARNING"

    [constants]
    gravity = 9.81

    [repl]
    prompt = "> "
    precision = 4
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field

DEFAULT_CONFIG_FILE = "molang.toml"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ReplConfig(BaseModel):
    """Interactive loop settings."""

    prompt: str = "> "
    precision: int | None = Field(default=None, ge=0, le=17)


class MolangConfig(BaseModel):
    """Root configuration."""

    stdlib: bool = True
    log_level: LogLevel = "WARNING"
    constants: dict[str, float] = Field(default_factory=dict)
    repl: ReplConfig = Field(default_factory=ReplConfig)

    @property
    def log_level_value(self) -> int:
        """Numeric logging level."""
        return logging.getLevelName(self.log_level)


# =============================================================================
# Configuration Loading
# =============================================================================


def load_config(toml_path: Path | None = None) -> MolangConfig:
    """
    Load configuration from molang.toml.

    Args:
        toml_path: Path to the file; defaults to ./molang.toml

    Returns:
        MolangConfig with values from file, or defaults when the
        implicit ./molang.toml does not exist

    Raises:
        FileNotFoundError: If an explicitly given file does not exist
        tomllib.TOMLDecodeError: If the file is not valid TOML
        pydantic.ValidationError: If a value has the wrong type
    """
    if toml_path is None:
        toml_path = Path.cwd() / DEFAULT_CONFIG_FILE
        if not toml_path.exists():
            return MolangConfig()
    elif not toml_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {toml_path}")

    with open(toml_path, "rb") as f:
        data = tomllib.load(f)

    return _parse_config(data)


def _parse_config(data: dict[str, Any]) -> MolangConfig:
    """Parse config dict into MolangConfig."""
    config_data: dict[str, Any] = dict(data.get("molang", {}))

    if "constants" in data:
        config_data["constants"] = data["constants"]
    if "repl" in data:
        config_data["repl"] = data["repl"]

    return MolangConfig.model_validate(config_data)
