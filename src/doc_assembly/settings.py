"""Process-level settings read from the environment.

    DOC_ASSEMBLY_LOG_LEVEL=DEBUG
    DOC_ASSEMBLY_LOG_FORMAT=json
    DOC_ASSEMBLY_CONFIG_FILE=docs/assembly.yaml
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DocAssemblySettings(BaseSettings):
    """Environment-driven settings for the CLI."""

    model_config = SettingsConfigDict(
        env_prefix="DOC_ASSEMBLY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "console"] = "console"
    config_file: Path | None = Field(
        default=None,
        description="YAML configuration loaded when --config is not given",
    )
