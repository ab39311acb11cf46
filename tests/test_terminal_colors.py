"""Tests for terminal color utilities used in error messages."""

import io

import pytest

from coda import terminal
from coda._types import CallSite
from coda.exceptions import TemplateRenderError


class TestColorDetection:
    """Test terminal color detection logic."""

    def test_no_color_disables(self, monkeypatch):
        """NO_COLOR turns colors off even on a TTY."""
        monkeypatch.delenv("FORCE_COLOR", raising=False)
        monkeypatch.setenv("NO_COLOR", "1")
        assert not terminal._colors_enabled()

    def test_force_color_wins_over_no_color(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        monkeypatch.setenv("FORCE_COLOR", "1")
        assert terminal._colors_enabled()

    def test_falls_back_to_tty_check(self, monkeypatch):
        monkeypatch.delenv("FORCE_COLOR", raising=False)
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setattr(terminal.sys, "stdout", io.StringIO())
        assert not terminal._colors_enabled()

    def test_supports_color_reflects_cached_value(self, monkeypatch):
        # Detection runs once at import; patch the cached value.
        monkeypatch.setattr(terminal, "_ENABLED", True)
        assert terminal.supports_color()
        monkeypatch.setattr(terminal, "_ENABLED", False)
        assert not terminal.supports_color()

    def test_colorize_returns_plain_when_disabled(self, monkeypatch):
        monkeypatch.setattr(terminal, "_ENABLED", False)
        result = terminal.colorize("Error", "bright_red", "bold")
        assert result == "Error"
        assert "\033[" not in result

    def test_colorize_adds_codes_when_enabled(self, monkeypatch):
        monkeypatch.setattr(terminal, "_ENABLED", True)
        result = terminal.colorize("Error", "bright_red", "bold")
        assert result == "\033[91m\033[1mError\033[0m"

    def test_strip_colors_removes_ansi_codes(self):
        colored = "\033[91m\033[1mError\033[0m"
        plain = terminal.strip_colors(colored)
        assert plain == "Error"


class TestSemanticHelpers:
    """Semantic helpers map to fixed colors."""

    @pytest.mark.parametrize(
        ("helper", "code"),
        [
            (terminal.location, "\033[36m"),
            (terminal.hint, "\033[32m"),
            (terminal.suggestion, "\033[92m"),
            (terminal.dim_text, "\033[2m"),
        ],
    )
    def test_helper_colors(self, monkeypatch, helper, code):
        monkeypatch.setattr(terminal, "_ENABLED", True)
        result = helper("app/presenters/user.py:42")
        assert code in result
        assert terminal.strip_colors(result) == "app/presenters/user.py:42"

    def test_helpers_plain_when_disabled(self, monkeypatch):
        monkeypatch.setattr(terminal, "_ENABLED", False)
        assert terminal.location("user.py") == "user.py"
        assert terminal.hint("Hint") == "Hint"
        assert terminal.suggestion("jinja") == "jinja"
        assert terminal.dim_text("|") == "|"


class TestErrorFormatting:
    """Formatted diagnostic pieces."""

    def test_format_error_header_with_code(self, monkeypatch):
        monkeypatch.setattr(terminal, "_ENABLED", True)
        result = terminal.format_error_header("C-RUN-001", "Something went wrong")
        assert "\033[91m" in result
        assert terminal.strip_colors(result) == "C-RUN-001: Something went wrong"

    def test_format_error_header_without_code(self, monkeypatch):
        monkeypatch.setattr(terminal, "_ENABLED", True)
        assert terminal.format_error_header(None, "Something went wrong") == "Something went wrong"

    def test_format_source_line_normal(self, monkeypatch):
        monkeypatch.setattr(terminal, "_ENABLED", False)
        result = terminal.format_source_line(43, "        # {{ user }}")
        assert result == "   43 |         # {{ user }}"

    def test_format_source_line_call(self, monkeypatch):
        monkeypatch.setattr(terminal, "_ENABLED", False)
        result = terminal.format_source_line(42, "return self.jinja()", is_call=True)
        assert result == ">  42 | return self.jinja()"

    def test_format_source_line_call_is_highlighted(self, monkeypatch):
        monkeypatch.setattr(terminal, "_ENABLED", True)
        result = terminal.format_source_line(42, "return self.jinja()", is_call=True)
        assert "\033[91m" in result
        assert "\033[33m" in result


class TestPlainTextMode:
    def test_exception_messages_readable_without_colors(self, monkeypatch):
        monkeypatch.setattr(terminal, "_ENABLED", False)

        error = TemplateRenderError(CallSite("/app/user.py", 5, "jinja"), ZeroDivisionError("boom"))
        message = str(error)

        assert "ZeroDivisionError: boom" in message
        assert "/app/user.py:5 (jinja)" in message
        assert "Hint" in message
        assert "\033[" not in message
