"""Configuration management for readtrimesh using Pydantic."""

import math
from pathlib import Path
from typing import List, Literal, Optional

import numpy as np
import tomli
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from readtrimesh.core.exceptions import ConfigurationError
from readtrimesh.core.mesh import PostProcessFlags

FlagName = Literal["fix_internal_edges", "merge_duplicate_vertices"]


class LoaderConfig(BaseModel):
    """Configuration for mesh loading."""

    model_config = ConfigDict(frozen=True)

    scale: float = Field(1.0, gt=0, description="Uniform scale applied to all vertices")
    flags: List[FlagName] = Field(
        default_factory=lambda: ["fix_internal_edges", "merge_duplicate_vertices"],
        description="Post-processing flags applied at finalization",
    )

    @field_validator("scale")
    @classmethod
    def validate_scale(cls, v: float) -> float:
        """Reject scale factors that are not finite in float32."""
        if not math.isfinite(v) or v > np.finfo(np.float32).max:
            raise ValueError("scale must be finite")
        return v

    def post_process_flags(self) -> PostProcessFlags:
        """Get the configured flags as a ``PostProcessFlags`` set."""
        return PostProcessFlags.from_names(self.flags)


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    model_config = ConfigDict(frozen=True)

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO", description="Logging level"
    )
    format: Literal["json", "console", "plain"] = Field(
        "console", description="Log format"
    )
    log_dir: Optional[Path] = Field(None, description="Directory for log files")
    log_to_file: bool = Field(False, description="Enable file logging")
    timestamp_format: str = Field("iso", description="structlog timestamp format")
    colorize: bool = Field(True, description="Colorize console output on a TTY")
    add_caller_info: bool = Field(False, description="Add file/line/function to events")


class Config(BaseModel):
    """Main configuration for readtrimesh."""

    model_config = ConfigDict(frozen=True)

    loader: LoaderConfig = Field(
        default_factory=LoaderConfig, description="Loader configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    @classmethod
    def from_toml(cls, path: Path | str) -> "Config":
        """Load configuration from TOML file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            tomli.TOMLDecodeError: If TOML is invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, "rb") as f:
            data = tomli.load(f)

        return cls(**data)

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """Create configuration from dictionary.

        Args:
            data: Configuration dictionary

        Returns:
            Config instance
        """
        return cls(**data)

    def to_dict(self) -> dict:
        """Convert configuration to dictionary.

        Returns:
            Configuration as dictionary
        """
        return self.model_dump(mode="json", exclude_none=True)

    def save_toml(self, path: Path | str) -> None:
        """Save configuration to TOML file.

        Args:
            path: Path to save TOML file
        """
        import tomli_w

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "wb") as f:
            tomli_w.dump(self.to_dict(), f)


def get_default_config() -> Config:
    """Get default configuration.

    Returns:
        Default Config instance
    """
    return Config()


def load_config(path: Optional[Path | str] = None) -> Config:
    """Load configuration from file or return defaults.

    Args:
        path: Optional path to configuration file

    Returns:
        Config instance

    Raises:
        ConfigurationError: If the file is missing or invalid
    """
    if not path:
        return get_default_config()
    try:
        return Config.from_toml(path)
    except (FileNotFoundError, tomli.TOMLDecodeError, ValidationError) as e:
        raise ConfigurationError(
            f"Invalid configuration file '{path}': {e}", details={"path": str(path)}
        ) from e
