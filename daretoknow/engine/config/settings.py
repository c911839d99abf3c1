"""Configuration settings and data models."""

import json
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, field_validator


class GameConfig(BaseModel):
    """Defaults applied to every new tournament."""

    default_question_time: int = Field(
        default=30, description="Countdown for TRUTH questions in seconds (0 disables)"
    )
    default_dare_time: int = Field(
        default=60, description="Countdown for DARE challenges in seconds (0 disables)"
    )
    default_rounds_per_match: int = Field(
        default=10, description="Rounds played in each match"
    )
    default_buzzer_enabled: bool = Field(
        default=True, description="Whether teams race a buzzer for the first turn"
    )
    default_max_teams: int = Field(default=8, description="Roster capacity")
    options_per_round: int = Field(
        default=3, description="Category/difficulty options offered each round"
    )
    timer_interval: float = Field(
        default=1.0, description="Seconds between timer ticks"
    )

    @field_validator("default_rounds_per_match", "options_per_round")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Value must be at least 1")
        return v

    @field_validator("default_question_time", "default_dare_time")
    @classmethod
    def validate_duration(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Timer durations cannot be negative")
        return v

    @field_validator("timer_interval")
    @classmethod
    def validate_interval(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timer_interval must be positive")
        return v


class ContentConfig(BaseModel):
    """Where prompts and categories are loaded from."""

    prompts_path: str = Field(
        default="prompts.json", description="JSON or YAML file with categories and prompts"
    )


class SystemConfig(BaseModel):
    """System-wide configuration."""

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=8000, description="HTTP/WebSocket port")
    allowed_origins: list[str] = Field(
        default_factory=list,
        description="CORS origins; empty means localhost development origins",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")


class AppConfig(BaseModel):
    """Complete application configuration."""

    game: GameConfig = Field(default_factory=GameConfig)
    content: ContentConfig = Field(default_factory=ContentConfig)
    system: SystemConfig = Field(default_factory=SystemConfig)

    @classmethod
    def load_from_file(cls, config_path: Path) -> "AppConfig":
        """Load configuration from a JSON or YAML file."""
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "r", encoding="utf-8") as f:
            if config_path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f) or {}
            else:
                data = json.load(f)

        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a mapping: {config_path}")

        unknown_sections = sorted(set(data) - {"game", "content", "system"})
        if unknown_sections:
            raise ValueError(f"Unknown config sections: {unknown_sections}")

        return cls(**data)

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to YAML file."""
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            yaml.dump(
                self.model_dump(),
                f,
                default_flow_style=False,
                indent=2,
            )


def get_default_config(config_path: Path | None = None) -> AppConfig:
    """Load configuration from daretoknow_config.json, creating it if needed."""
    config_path = config_path or Path("daretoknow_config.json")
    if not config_path.exists():
        template_config = get_template_config()
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(template_config.model_dump(), f, indent=2)
    return AppConfig.load_from_file(config_path)


def get_template_config() -> AppConfig:
    """Get template configuration for config file generation."""
    return AppConfig(
        game=GameConfig(
            default_question_time=30,
            default_dare_time=60,
            default_rounds_per_match=10,
            default_buzzer_enabled=True,
            default_max_teams=8,
            options_per_round=3,
            timer_interval=1.0,
        ),
        content=ContentConfig(prompts_path="prompts.json"),
        system=SystemConfig(
            host="0.0.0.0",
            port=8000,
            allowed_origins=[],
            log_level="INFO",
        ),
    )
