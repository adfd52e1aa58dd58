import json
import logging
from datetime import UTC, datetime
from enum import Enum
from unittest.mock import patch

import pytest
import structlog

from shared.logging import LOG_FILE_TIMESTAMP_FORMAT, _enum_values, setup_logging
from wordchain.logic.enums import SessionPhase


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    saved_level = root.level
    yield
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)
    root.setLevel(saved_level)


@pytest.fixture
def file_logging():
    """Let setup_logging open a log file even though pytest is loaded."""
    with patch("shared.logging._is_test", return_value=False):
        yield


def _read_json_lines(path):
    return [json.loads(line) for line in path.read_text().splitlines() if line.strip()]


class TestStdoutLogging:
    def test_single_structlog_stdout_handler(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        assert setup_logging() is None

        [handler] = logging.getLogger().handlers
        assert isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter)
        assert logging.getLogger().level == logging.INFO

    def test_log_dir_ignored_under_pytest(self, tmp_path):
        assert setup_logging(log_dir=tmp_path / "wordchain") is None
        assert not (tmp_path / "wordchain").exists()

    def test_uvicorn_access_log_silenced(self):
        setup_logging()

        assert logging.getLogger("uvicorn.access").level == logging.WARNING

    def test_explicit_level_wins_over_env(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "error")

        setup_logging(level=logging.DEBUG)

        assert logging.getLogger().level == logging.DEBUG

    @pytest.mark.parametrize(("name", "value"), [("LOG_LEVEL", "chatty"), ("LOG_FORMAT", "xml")])
    def test_unknown_env_choice_rejected(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)

        with pytest.raises(ValueError, match=f"Invalid {name}"):
            setup_logging()


@pytest.mark.usefixtures("file_logging")
class TestFileLogging:
    def test_file_named_after_start_time(self, tmp_path):
        started = datetime(2026, 10, 19, 20, 15, 0, tzinfo=UTC)
        with patch("shared.logging.datetime") as mock_dt:
            mock_dt.now.return_value = started
            log_path = setup_logging(log_dir=str(tmp_path / "logs" / "wordchain"))

        assert log_path == tmp_path / "logs" / "wordchain" / f"{started.strftime(LOG_FILE_TIMESTAMP_FORMAT)}.log"
        assert len(logging.getLogger().handlers) == 2

    def test_json_lines_carry_connection_and_round(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "json")
        log_path = setup_logging(log_dir=tmp_path)

        structlog.contextvars.bind_contextvars(connection_id="a1b2c3d4e5f6")
        structlog.get_logger("wordchain.test").info("round started", round=3, phase=SessionPhase.ROUND_ACTIVE)
        structlog.contextvars.clear_contextvars()

        [entry] = _read_json_lines(log_path)
        assert entry["event"] == "round started"
        assert entry["connection_id"] == "a1b2c3d4e5f6"
        assert entry["round"] == 3
        assert entry["phase"] == "round_active"
        assert entry["level"] == "info"

    def test_console_format_is_plain_text(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "console")
        log_path = setup_logging(log_dir=tmp_path)

        structlog.get_logger("wordchain.test").warning("chain search exhausted, using fallback chain", length=7)

        content = log_path.read_text()
        assert "chain search exhausted" in content
        assert "length=7" in content
        assert "\x1b[" not in content


class TestEnumValues:
    class _Transport(Enum):
        TEXT = 1

    def test_session_phase_becomes_plain_string(self):
        result = _enum_values(None, "info", {"phase": SessionPhase.GAME_ENDED})

        assert result["phase"] == "game_ended"
        assert type(result["phase"]) is str

    def test_non_string_enum_uses_its_value(self):
        result = _enum_values(None, "info", {"transport": self._Transport.TEXT, "round": 2})

        assert result == {"transport": 1, "round": 2}
