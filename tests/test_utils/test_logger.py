from __future__ import annotations

import io
import pytest
import logging
from typing import Generator
from unittest.mock import patch

import nginit.utils.logger as logger_module
from nginit.utils.logger import (
    ColoredFormatter,
    disable_logging,
    get_logger,
    is_logging_configured,
    setup_logging,
)


@pytest.fixture(autouse=True)
def clean_logger_state() -> Generator[None, None, None]:
    """Reset the ``nginit`` logger before and after each test."""
    root_logger = logging.getLogger("nginit")
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)
    logger_module._logging_configured = False

    yield

    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)
    root_logger.propagate = True
    logger_module._logging_configured = False


def _record(level: int = logging.WARNING, msg: str = "message") -> logging.LogRecord:
    return logging.LogRecord("nginit.test", level, __file__, 1, msg, None, None)


@pytest.mark.unit
class TestColoredFormatter:
    """Tests for ColoredFormatter."""

    def test_plain_when_color_disabled(self) -> None:
        """Test use_color=False never emits ANSI codes."""
        formatter = ColoredFormatter("%(levelname)s: %(message)s", use_color=False)

        assert formatter.format(_record()) == "WARNING: message"

    def test_colors_level_when_terminal(self) -> None:
        """Test the level name is wrapped in its color on a TTY."""
        formatter = ColoredFormatter("%(levelname)s: %(message)s")

        with patch.object(ColoredFormatter, "_should_use_color", return_value=True):
            output = formatter.format(_record(logging.ERROR))

        assert output.startswith("\033[31mERROR\033[0m")

    def test_record_level_name_is_restored(self) -> None:
        """Test coloring does not leak into the record for other handlers."""
        formatter = ColoredFormatter("%(levelname)s")
        record = _record(logging.INFO)

        with patch.object(ColoredFormatter, "_should_use_color", return_value=True):
            formatter.format(record)

        assert record.levelname == "INFO"

    @pytest.mark.parametrize("var", ["NO_COLOR", "CI"])
    def test_env_disables_color(self, monkeypatch: pytest.MonkeyPatch, var: str) -> None:
        """Test NO_COLOR and CI turn colors off."""
        monkeypatch.setenv(var, "1")

        assert ColoredFormatter._should_use_color() is False


@pytest.mark.unit
class TestSetupLogging:
    """Tests for setup_logging."""

    def test_configures_level_and_stream(self) -> None:
        """Test messages at or above the level reach the stream."""
        stream = io.StringIO()
        setup_logging(level=logging.INFO, stream=stream)

        get_logger("registry").info("fetched demo-lib")
        get_logger("registry").debug("hidden")

        output = stream.getvalue()
        assert "fetched demo-lib" in output
        assert "hidden" not in output
        assert is_logging_configured() is True

    def test_repeated_setup_replaces_handler(self) -> None:
        """Test calling setup twice leaves exactly one handler."""
        setup_logging(stream=io.StringIO())
        setup_logging(stream=io.StringIO())

        assert len(logging.getLogger("nginit").handlers) == 1

    def test_verbose_format_includes_logger_name(self) -> None:
        """Test the verbose format carries the logger name."""
        stream = io.StringIO()
        setup_logging(level=logging.DEBUG, verbose=True, stream=stream)

        get_logger("resolver").debug("scan")

        assert "nginit.resolver" in stream.getvalue()

    def test_does_not_propagate(self) -> None:
        """Test ng-init records are not duplicated by the root logger."""
        setup_logging(stream=io.StringIO())

        assert logging.getLogger("nginit").propagate is False


@pytest.mark.unit
class TestGetLogger:
    """Tests for get_logger."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            (None, "nginit"),
            ("nginit", "nginit"),
            ("registry", "nginit.registry"),
            ("nginit.core.wizard", "nginit.core.wizard"),
        ],
    )
    def test_namespacing(self, name: str, expected: str) -> None:
        """Test short names are placed below the nginit namespace."""
        assert get_logger(name).name == expected

    def test_adds_null_handler_when_unconfigured(self) -> None:
        """Test library use does not trigger 'no handler' warnings."""
        get_logger("x")

        handlers = logging.getLogger("nginit").handlers
        assert any(isinstance(h, logging.NullHandler) for h in handlers)


@pytest.mark.unit
class TestDisableLogging:
    """Tests for disable_logging."""

    def test_silences_output(self) -> None:
        """Test disable_logging removes configured handlers."""
        stream = io.StringIO()
        setup_logging(stream=stream)

        disable_logging()
        get_logger("x").error("should not appear")

        assert stream.getvalue() == ""
        assert is_logging_configured() is False
