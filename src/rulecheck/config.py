"""Configuration management for rulecheck using Pydantic models."""

import json
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .models import Rule

CONFIG_FILE_NAME = ".rulecheck.json"


class LogLevel(str, Enum):
    """Logging levels."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"


class LoggingConfig(BaseModel):
    """Logging configuration section."""
    level: LogLevel = LogLevel.INFO

    model_config = ConfigDict(use_enum_values=True)


class RuleConfig(BaseModel):
    """A rule as written in JSON rule files."""
    field: str
    tag: str
    code: str = ""
    message: str = ""

    model_config = ConfigDict(extra="forbid")

    def to_rule(self) -> Rule:
        return Rule(field=self.field, tag=self.tag, code=self.code, message=self.message)


class RulecheckConfig(BaseModel):
    """Complete rulecheck configuration model."""
    naming_scheme: str = Field(alias="namingScheme", default="")
    templates: dict[str, str] = Field(default_factory=dict)
    inclusions: dict[str, list[Any]] = Field(default_factory=dict)
    patterns: dict[str, str] = Field(default_factory=dict)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("templates", "patterns")
    @classmethod
    def validate_names(cls, v):
        if "" in v:
            raise ValueError("constraint names can not be empty")
        return v

    @field_validator("inclusions")
    @classmethod
    def validate_inclusion_params(cls, v):
        if "" in v:
            raise ValueError("inclusion param can not be empty")
        return v

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


def load_config(config_path: str | Path | None = None) -> RulecheckConfig:
    """Load configuration from file with fallback to defaults.

    Args:
        config_path: Optional path to configuration file. If None, searches
                    current directory and parents for .rulecheck.json

    Returns:
        RulecheckConfig: Loaded and validated configuration

    Raises:
        ValueError: If configuration is invalid
    """
    if config_path is None:
        config_path = find_config_file()
    else:
        config_path = Path(config_path)

    if config_path and config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                config_data = json.load(f)
            return RulecheckConfig(**config_data)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in config file {config_path}: {e}")
        except ValidationError as e:
            raise ValueError(f"Failed to load config from {config_path}: {e}")

    return create_default_config()


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find .rulecheck.json by searching up the directory tree."""
    if start_dir is None:
        start_dir = Path.cwd()

    current = Path(start_dir).resolve()

    while True:
        config_file = current / CONFIG_FILE_NAME
        if config_file.exists():
            return config_file

        parent = current.parent
        if parent == current:  # Reached root directory
            break
        current = parent

    return None


def create_default_config() -> RulecheckConfig:
    return RulecheckConfig()


def load_rules(rules_path: str | Path) -> list[Rule]:
    """Load a JSON list of rules.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a JSON list of valid rules
    """
    rules_path = Path(rules_path)
    with open(rules_path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in rules file {rules_path}: {e}")

    if not isinstance(data, list):
        raise ValueError(f"Rules file {rules_path} must contain a JSON list")

    try:
        return [RuleConfig(**item).to_rule() for item in data]
    except (ValidationError, TypeError) as e:
        raise ValueError(f"Invalid rule in {rules_path}: {e}")
