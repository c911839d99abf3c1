"""Tests for configuration loading."""

import json

import pytest
import yaml
from pydantic import ValidationError

from daretoknow.engine.config import (
    AppConfig,
    GameConfig,
    get_default_config,
    get_template_config,
)


def test_game_defaults() -> None:
    """Defaults match the standard game rules."""
    game = GameConfig()

    assert game.default_question_time == 30
    assert game.default_dare_time == 60
    assert game.default_rounds_per_match == 10
    assert game.options_per_round == 3
    assert game.timer_interval == 1.0


@pytest.mark.parametrize(
    "field, value",
    [
        ("default_rounds_per_match", 0),
        ("options_per_round", 0),
        ("default_question_time", -1),
        ("timer_interval", 0),
    ],
)
def test_game_config_rejects_bad_values(field: str, value: float) -> None:
    """Non-positive rounds and intervals, and negative durations, are invalid."""
    with pytest.raises(ValidationError):
        GameConfig(**{field: value})


def test_load_yaml(tmp_path) -> None:
    """YAML files are read by suffix."""
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump({"game": {"default_rounds_per_match": 4}, "system": {"port": 9000}}),
        encoding="utf-8",
    )

    config = AppConfig.load_from_file(path)

    assert config.game.default_rounds_per_match == 4
    assert config.system.port == 9000
    assert config.content.prompts_path == "prompts.json"


def test_unknown_sections_are_rejected(tmp_path) -> None:
    """Typos in section names fail loudly."""
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"gmae": {}}), encoding="utf-8")

    with pytest.raises(ValueError, match="Unknown config sections"):
        AppConfig.load_from_file(path)


def test_missing_file_raises(tmp_path) -> None:
    """Loading a missing file is an error."""
    with pytest.raises(FileNotFoundError):
        AppConfig.load_from_file(tmp_path / "nope.json")


def test_default_config_created_from_template(tmp_path) -> None:
    """A missing default config is written from the template, then loaded."""
    path = tmp_path / "daretoknow_config.json"

    config = get_default_config(path)

    assert path.exists()
    assert config == get_template_config()


def test_save_round_trip(tmp_path) -> None:
    """Saved YAML loads back to the same config."""
    path = tmp_path / "saved.yaml"
    config = AppConfig(game=GameConfig(default_max_teams=16))

    config.save_to_file(path)

    assert AppConfig.load_from_file(path).game.default_max_teams == 16
