"""
Configuration management for Resemble.

Provides centralized configuration for parsing, feature extraction
and output with sensible defaults and validation.
"""

import codecs
import os
import json
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from resemble.core.exceptions import ConfigError


@dataclass
class ParserConfig:
    """Configuration for the Rust syntax parser."""

    # Encoding used to read source files
    encoding: str = "utf-8"

    # Reject `let`/expression statements at file level, like a Rust file parser
    reject_top_level_statements: bool = True


@dataclass
class FeatureConfig:
    """Configuration for syntax-tree feature extraction."""

    # Doc comments desugar to `#[doc = "..."]` attributes
    count_doc_comments: bool = True


@dataclass
class OutputConfig:
    """Configuration for result output."""

    # Digits after the decimal point in the similarity line
    precision: int = 6

    # Default output format (text, json)
    format: str = "text"


@dataclass
class ResembleConfig:
    """Master configuration combining all component configurations."""

    parser: ParserConfig = field(default_factory=ParserConfig)
    features: FeatureConfig = field(default_factory=FeatureConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    # Enable verbose logging
    verbose: bool = False

    # Optional log file path
    log_file: Optional[str] = None


# Component sections of ResembleConfig, keyed by their JSON name
SECTIONS = {
    "parser": ParserConfig,
    "features": FeatureConfig,
    "output": OutputConfig,
}

OUTPUT_FORMATS = ("text", "json")


class Config:
    """
    Central configuration manager providing access to all settings.

    Supports loading from environment variables and configuration files.
    """

    _instance: Optional["Config"] = None
    _config: ResembleConfig = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._config = ResembleConfig()
        return cls._instance

    @classmethod
    def get(cls) -> ResembleConfig:
        """Get the current configuration."""
        if cls._instance is None:
            cls()
        return cls._instance._config

    @classmethod
    def reset(cls) -> ResembleConfig:
        """Restore the default configuration."""
        instance = cls()
        instance._config = ResembleConfig()
        return instance._config

    @classmethod
    def load_from_file(cls, config_path: str) -> ResembleConfig:
        """
        Load configuration from a JSON file.

        Args:
            config_path: Path to the configuration file.

        Returns:
            Loaded ResembleConfig instance.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, "r") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(
                f"Invalid JSON in configuration file: {config_path}",
                details={"path": str(config_path), "error": str(e)},
            ) from e

        instance = cls()
        instance._config = cls._dict_to_config(data)
        return instance._config

    @classmethod
    def load_from_env(cls) -> ResembleConfig:
        """
        Load configuration from environment variables.

        Environment variables are prefixed with RESEMBLE_. A `.env` file
        in the working directory is read first when present.

        Returns:
            ResembleConfig with environment overrides applied.
        """
        load_dotenv()

        instance = cls()
        config = instance._config

        if os.getenv("RESEMBLE_ENCODING"):
            config.parser.encoding = os.getenv("RESEMBLE_ENCODING")

        if os.getenv("RESEMBLE_PRECISION"):
            try:
                config.output.precision = int(os.getenv("RESEMBLE_PRECISION"))
            except ValueError as e:
                raise ConfigError(
                    "RESEMBLE_PRECISION must be an integer",
                    details={"value": os.getenv("RESEMBLE_PRECISION")},
                ) from e

        if os.getenv("RESEMBLE_LOG_FILE"):
            config.log_file = os.getenv("RESEMBLE_LOG_FILE")

        if os.getenv("RESEMBLE_VERBOSE"):
            config.verbose = os.getenv("RESEMBLE_VERBOSE").lower() in ("true", "1", "yes")

        cls._validate(config)
        return config

    @staticmethod
    def _dict_to_config(data: dict) -> ResembleConfig:
        """Convert a dictionary to ResembleConfig."""
        if not isinstance(data, dict):
            raise ConfigError("Configuration root must be a JSON object")

        config = ResembleConfig()

        for section, section_cls in SECTIONS.items():
            if section not in data:
                continue
            values = data[section]
            if not isinstance(values, dict):
                raise ConfigError(
                    f"Configuration section '{section}' must be a JSON object",
                    details={"section": section},
                )
            try:
                setattr(config, section, section_cls(**values))
            except TypeError as e:
                raise ConfigError(
                    f"Unknown configuration key: {e}",
                    details={"error": str(e)},
                ) from e

        if "verbose" in data:
            config.verbose = data["verbose"]

        if "log_file" in data:
            config.log_file = data["log_file"]

        Config._validate(config)
        return config

    @staticmethod
    def _validate(config: ResembleConfig) -> None:
        """Check field types and values, raising ConfigError on the first problem."""
        for section in SECTIONS:
            component = getattr(config, section)
            for f in fields(component):
                value = getattr(component, f.name)
                # bool is a subclass of int
                if not isinstance(value, f.type) or (f.type is int and isinstance(value, bool)):
                    raise ConfigError(
                        f"{section}.{f.name} must be of type {f.type.__name__}, "
                        f"got {type(value).__name__}",
                        details={"key": f"{section}.{f.name}", "value": value},
                    )

        if not isinstance(config.verbose, bool):
            raise ConfigError("verbose must be a boolean", details={"value": config.verbose})

        if config.log_file is not None and not isinstance(config.log_file, str):
            raise ConfigError("log_file must be a string", details={"value": config.log_file})

        if config.output.precision < 0:
            raise ConfigError(
                "output.precision must not be negative",
                details={"value": config.output.precision},
            )

        if config.output.format not in OUTPUT_FORMATS:
            raise ConfigError(
                f"output.format must be one of {', '.join(OUTPUT_FORMATS)}",
                details={"value": config.output.format},
            )

        try:
            codecs.lookup(config.parser.encoding)
        except LookupError as e:
            raise ConfigError(
                f"Unknown source encoding: {config.parser.encoding}",
                details={"value": config.parser.encoding},
            ) from e

    @classmethod
    def save_to_file(cls, config_path: str) -> None:
        """
        Save current configuration to a JSON file.

        Args:
            config_path: Path to save the configuration file.
        """
        config_path = Path(config_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = asdict(cls.get())

        with open(config_path, "w") as f:
            json.dump(data, f, indent=2)
