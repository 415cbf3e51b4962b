"""Tests for chronicle.config and chronicle.logging_config."""

import logging
import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from chronicle.config import TrackerConfig, load_config
from chronicle.logging_config import LOG_FILE_NAME, get_logger, setup_logging


@pytest.fixture
def environ(monkeypatch) -> dict[str, str]:
    """A private copy of the environment without CHRONICLE_* variables."""
    env = {k: v for k, v in os.environ.items() if not k.startswith("CHRONICLE_")}
    monkeypatch.setattr(os, "environ", env)
    return env


@pytest.fixture
def missing_env_file(tmp_path: Path) -> Path:
    return tmp_path / "missing.env"


class TestTrackerConfig:
    """Tests for the settings model."""

    def test_defaults(self):
        config = TrackerConfig()

        assert config.enabled is True
        assert config.auto_parse_messages is True
        assert config.debug is False
        assert config.history_capacity == 50
        assert config.starting_date is None

    @pytest.mark.parametrize("capacity", [0, 501])
    def test_capacity_bounds(self, capacity: int):
        with pytest.raises(ValidationError):
            TrackerConfig(history_capacity=capacity)

    def test_frozen(self):
        config = TrackerConfig()

        with pytest.raises(ValidationError):
            config.debug = True  # type: ignore


class TestLoadConfig:
    """Tests for building settings from the environment."""

    def test_no_environment(self, environ, missing_env_file: Path):
        assert load_config(missing_env_file) == TrackerConfig()

    def test_environment_variables(self, environ, missing_env_file: Path):
        environ["CHRONICLE_HISTORY_CAPACITY"] = "100"
        environ["CHRONICLE_AUTO_PARSE_MESSAGES"] = "false"

        config = load_config(missing_env_file)

        assert config.history_capacity == 100
        assert config.auto_parse_messages is False

    def test_env_file(self, environ, tmp_path: Path):
        env_file = tmp_path / ".env"
        env_file.write_text(
            'CHRONICLE_STARTING_DATE="1st of Thawbreak, 2850 AV"\n'
            'CHRONICLE_STARTING_LOCATION="Ironhold - Market Square"\n'
        )

        config = load_config(env_file)

        assert config.starting_date == "1st of Thawbreak, 2850 AV"
        assert config.starting_location == "Ironhold - Market Square"

    def test_environment_wins_over_env_file(self, environ, tmp_path: Path):
        env_file = tmp_path / ".env"
        env_file.write_text("CHRONICLE_DEBUG=false\n")
        environ["CHRONICLE_DEBUG"] = "true"

        assert load_config(env_file).debug is True

    def test_overrides_win(self, environ, missing_env_file: Path):
        """Test explicit overrides beat the environment and None is ignored."""
        environ["CHRONICLE_DEBUG"] = "true"
        environ["CHRONICLE_HISTORY_CAPACITY"] = "20"

        config = load_config(missing_env_file, debug=False, history_capacity=None)

        assert config.debug is False
        assert config.history_capacity == 20

    def test_blank_values_are_ignored(self, environ, missing_env_file: Path):
        environ["CHRONICLE_STARTING_LOCATION"] = "   "

        assert load_config(missing_env_file).starting_location is None

    def test_invalid_value(self, environ, missing_env_file: Path):
        environ["CHRONICLE_HISTORY_CAPACITY"] = "0"

        with pytest.raises(ValidationError):
            load_config(missing_env_file)


@pytest.fixture
def chronicle_logger():
    """The chronicle logger, stripped of handlers after the test."""
    logger = logging.getLogger("chronicle")
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()


@pytest.mark.usefixtures("chronicle_logger")
class TestLogging:
    """Tests for logging setup."""

    def test_setup_logging(self, tmp_path: Path):
        """Test the log file is created and chronicle loggers write to it."""
        log_path = setup_logging(tmp_path / "logs")

        get_logger("tests").info("hello from the tests")
        for handler in logging.getLogger("chronicle").handlers:
            handler.flush()

        assert log_path == tmp_path / "logs" / LOG_FILE_NAME
        assert "hello from the tests" in log_path.read_text(encoding="utf-8")

    def test_setup_replaces_handlers(self, tmp_path: Path):
        setup_logging(tmp_path / "a")
        setup_logging(tmp_path / "b")

        assert len(logging.getLogger("chronicle").handlers) == 2

    def test_get_logger_namespacing(self):
        assert get_logger("chronicle.parsing").name == "chronicle.parsing"
        assert get_logger("tools").name == "chronicle.tools"
