"""
Central configuration for the checkerboard engine.
Pydantic models for type-safe configuration management.
"""
from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator


ConfigDict = Dict[str, Any]


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class BoardSettings(BaseModel):
    """Board geometry and consistency checking."""

    size: int = Field(default=8, ge=1, le=64, description="Number of squares on each side of the board")
    check_representation: bool = Field(default=True, description="Verify grid/piece consistency after every mutation")
    setup_rows: int = Field(default=2, ge=0, description="Rows filled per side by prepare_new_game")

    @field_validator('size', 'setup_rows', mode='before')
    @classmethod
    def validate_int_fields(cls, v):
        return int(v)

    @field_validator('check_representation', mode='before')
    @classmethod
    def validate_bool_fields(cls, v):
        if isinstance(v, str):
            return v.lower() in ("1", "true", "yes")
        return bool(v)


class RulesSettings(BaseModel):
    """Rules engine settings."""

    random_seed: Optional[int] = Field(default=None, description="Seed for random move selection (None uses the process-wide source)")

    @field_validator('random_seed', mode='before')
    @classmethod
    def validate_seed(cls, v):
        if v is None or v == "":
            return None
        return int(v)


class LoggingSettings(BaseModel):
    """Logging configuration."""

    log_level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)")
    log_to_file: bool = Field(default=False, description="Write logs to file")
    log_file_path: str = Field(default="checkerboard.log", description="Log file path")

    @field_validator('log_level', mode='before')
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR']
        v_upper = v.upper() if isinstance(v, str) else str(v).upper()
        if v_upper not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v_upper


class CheckerboardConfig(BaseModel):
    """Main configuration model for the checkerboard engine."""

    board: BoardSettings = Field(default_factory=BoardSettings)
    rules: RulesSettings = Field(default_factory=RulesSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    # Metadata
    version: str = Field(default="1.0.0", description="Configuration version")
    config_file: Optional[str] = Field(default=None, description="Path to config file")

    @classmethod
    def from_env(cls) -> 'CheckerboardConfig':
        """Create configuration from environment variables."""
        return cls(
            board=BoardSettings(
                size=os.getenv('CHECKERBOARD_SIZE', '8'),
                check_representation=_env_bool('CHECKERBOARD_CHECK_REP', 'true'),
                setup_rows=os.getenv('CHECKERBOARD_SETUP_ROWS', '2'),
            ),
            rules=RulesSettings(
                random_seed=os.getenv('CHECKERBOARD_SEED'),
            ),
            logging=LoggingSettings(
                log_level=os.getenv('CHECKERBOARD_LOG_LEVEL', 'INFO'),
                log_to_file=_env_bool('CHECKERBOARD_LOG_FILE', 'false'),
            ),
        )

    def to_dict(self) -> ConfigDict:
        """Convert configuration to dictionary."""
        return {
            'board': self.board.model_dump(),
            'rules': self.rules.model_dump(),
            'logging': self.logging.model_dump(),
            'version': self.version,
            'config_file': self.config_file,
        }

    def save_to_file(self, filepath: str) -> None:
        """Save configuration to JSON file."""
        config_dict = self.to_dict()
        config_dict['config_file'] = filepath

        with open(filepath, 'w') as f:
            json.dump(config_dict, f, indent=2)

    @classmethod
    def load_from_file(cls, filepath: str) -> 'CheckerboardConfig':
        """Load configuration from JSON file."""
        with open(filepath, 'r') as f:
            data = json.load(f)

        return cls(
            board=BoardSettings(**data.get('board', {})),
            rules=RulesSettings(**data.get('rules', {})),
            logging=LoggingSettings(**data.get('logging', {})),
            version=data.get('version', '1.0.0'),
            config_file=filepath,
        )

    def update_from_dict(self, updates: ConfigDict) -> None:
        """Update configuration from dictionary, re-validating each touched section."""
        for section, settings in updates.items():
            if hasattr(self, section) and isinstance(settings, dict):
                section_model = getattr(self, section)
                merged = section_model.model_dump()
                merged.update({k: v for k, v in settings.items() if k in merged})
                setattr(self, section, type(section_model)(**merged))


# Global configuration instance
_config: Optional[CheckerboardConfig] = None


def get_config() -> CheckerboardConfig:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = CheckerboardConfig.from_env()
    return _config


def load_config_from_file(filepath: str) -> CheckerboardConfig:
    """Load configuration from file and update global instance."""
    global _config
    _config = CheckerboardConfig.load_from_file(filepath)
    return _config


def reset_config() -> None:
    """Reset the global configuration to defaults."""
    global _config
    _config = None


def get_board_settings() -> BoardSettings:
    """Get board configuration settings."""
    return get_config().board


def get_rules_settings() -> RulesSettings:
    """Get rules configuration settings."""
    return get_config().rules


def get_logging_settings() -> LoggingSettings:
    """Get logging configuration settings."""
    return get_config().logging


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    """Configure root logging once, controlled by CHECKERBOARD_LOG_LEVEL."""
    if getattr(setup_logging, "_configured", False):
        return
    settings = get_logging_settings()
    level_name = (level or settings.log_level).upper()
    kwargs: Dict[str, Any] = {
        "level": getattr(logging, level_name, logging.INFO),
        "format": LOG_FORMAT,
    }
    if settings.log_to_file:
        kwargs["filename"] = settings.log_file_path
    logging.basicConfig(**kwargs)
    setup_logging._configured = True  # type: ignore[attr-defined]
