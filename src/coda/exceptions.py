"""Exceptions for Coda inline templates.

Exception Hierarchy:
InlineTemplateError (base)
├── SourceReadError         # Source file missing or unreadable (also OSError)
├── UnknownEngineError      # Engine name never registered (also LookupError)
├── TemplateCompileError    # Comment block failed to compile
└── TemplateRenderError     # Compiled template raised while rendering

Every error that concerns a particular inline usage carries its CallSite,
so a failure inside a comment block is attributed to file, line and engine
even though no ordinary Python frame points at it.

Example:
    ```
    C-RUN-001: ZeroDivisionError: division by zero
      Location: app/presenters/user.py:42 (jinja)
        |
     >  42 |         return self.jinja()
        43 |         # {{ 1 / 0 }}
        |
      Hint: The failing code lives in the comment block below the call
    ```

"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from enum import Enum
from typing import TYPE_CHECKING

from coda import terminal

if TYPE_CHECKING:
    from coda._types import CallSite


class ErrorCode(Enum):
    """Searchable error codes, formatted ``C-{CATEGORY}-{NUMBER}``."""

    SOURCE_UNREADABLE = "C-SRC-001"
    UNKNOWN_ENGINE = "C-ENG-001"
    COMPILE_FAILED = "C-CMP-001"
    RENDER_FAILED = "C-RUN-001"

    @property
    def category(self) -> str:
        prefix = self.value.split("-")[1]
        return {
            "SRC": "source",
            "ENG": "engine",
            "CMP": "compile",
            "RUN": "runtime",
        }.get(prefix, "unknown")


# ---------------------------------------------------------------------------
# Source snippets
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SourceSnippet:
    """Source lines around an inline call, for error messages.

    Attributes:
        lines: Tuple of (line_number, line_content) pairs.
        call_line: 1-based line of the invoking call (marked with ``>``).
    """

    lines: tuple[tuple[int, str], ...]
    call_line: int

    def format(self) -> str:
        parts = [terminal.dim_text("       |")]
        for lineno, content in self.lines:
            parts.append(
                terminal.format_source_line(lineno, content, is_call=lineno == self.call_line)
            )
        parts.append(terminal.dim_text("       |"))
        return "\n".join(parts)


def build_source_snippet(
    source: str,
    call_line: int,
    *,
    context_lines: int = 2,
    focus_line: int | None = None,
) -> SourceSnippet:
    """Build a SourceSnippet around ``focus_line`` (defaults to ``call_line``).

    Args:
        source: Full text of the source file.
        call_line: 1-based line of the invoking call.
        context_lines: Lines shown before and after the focus line.
        focus_line: Line the snippet centers on, e.g. a compile error line
            inside the comment block.
    """
    focus = focus_line or call_line
    all_lines = source.splitlines()
    start = max(0, min(call_line, focus) - 1 - context_lines)
    end = min(len(all_lines), focus + context_lines)
    lines = tuple((i + 1, all_lines[i]) for i in range(start, end))
    return SourceSnippet(lines=lines, call_line=call_line)


def format_render_stack(stack: tuple[CallSite, ...]) -> str:
    """Format the chain of enclosing inline renders, outermost first."""
    if not stack:
        return ""
    lines = [terminal.dim_text("Inline render stack:")]
    for site in stack:
        lines.append(f"  • {terminal.location(str(site))}")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class InlineTemplateError(Exception):
    """Base exception for all Coda errors.

    Attributes:
        code: ErrorCode identifying the failure class.
        call_site: The inline usage that failed, when known.
    """

    code: ErrorCode | None = None
    call_site: CallSite | None = None

    def format_compact(self) -> str:
        """Format the error as a short terminal diagnostic without traceback noise."""
        header = str(self).splitlines()[0] if str(self) else type(self).__name__
        parts = [terminal.format_error_header(self.code.value if self.code else None, header)]
        if self.call_site is not None:
            parts.append(f"  Location: {terminal.location(str(self.call_site))}")
        return "\n".join(parts)


class SourceReadError(InlineTemplateError, OSError):
    """Source file missing or unreadable at render time.

    Subclasses ``OSError`` so callers catching ``IOError`` keep working.
    Not retried.
    """

    code: ErrorCode | None = ErrorCode.SOURCE_UNREADABLE

    def __init__(self, path: str, reason: str, errno: int | None = None):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read inline template source {path}: {reason}")
        self.errno = errno


class UnknownEngineError(InlineTemplateError, LookupError):
    """Engine name was never registered.

    Fatal misconfiguration: surfaced immediately and never retried.
    """

    code: ErrorCode | None = ErrorCode.UNKNOWN_ENGINE

    def __init__(self, name: str, available: list[str] | tuple[str, ...] = ()):
        self.name = name
        self.available = tuple(sorted(available))
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"Unknown template engine '{self.name}'"
        matches = get_close_matches(self.name, self.available, n=1, cutoff=0.6)
        if matches:
            msg += f". Did you mean '{terminal.suggestion(matches[0])}'?"
        elif self.available:
            msg += f". Registered: {', '.join(self.available)}"
        else:
            msg += ". No engines are registered"
        return msg


class TemplateCompileError(InlineTemplateError):
    """Comment block failed to compile under its engine.

    Attributes:
        call_site: The inline usage whose block failed.
        message: The engine's diagnostic.
        body: Extracted template body that was compiled.
        lineno: Source file line of the error when the engine reports one.
        source_snippet: File lines around the call and the error.
    """

    code: ErrorCode | None = ErrorCode.COMPILE_FAILED

    def __init__(
        self,
        call_site: CallSite,
        message: str,
        *,
        body: str = "",
        lineno: int | None = None,
        source_snippet: SourceSnippet | None = None,
    ):
        self.call_site = call_site
        self.message = message
        self.body = body
        self.lineno = lineno
        self.source_snippet = source_snippet
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        loc = self.call_site.location
        if self.lineno:
            loc = f"{self.call_site.file}:{self.lineno}"
        parts = [
            f"Compile Error ({self.call_site.engine}): {self.message}",
            f"  --> {terminal.location(loc)}",
        ]
        if self.source_snippet:
            parts.append(self.source_snippet.format())
        if not self.body:
            parts.append(
                f"  {terminal.hint('Hint:')} No comment block follows line "
                f"{self.call_site.line}; the template must start on the next line"
            )
        return "\n".join(parts)


class TemplateRenderError(InlineTemplateError):
    """Compiled inline template raised during evaluation.

    Wraps the original exception together with the CallSite. The original is
    also chained as ``__cause__``.

    Attributes:
        call_site: The inline usage that failed.
        original: The exception raised inside the template.
        render_stack: Enclosing inline renders, outermost first.
        source_snippet: The call line and its comment block.
    """

    code: ErrorCode | None = ErrorCode.RENDER_FAILED

    def __init__(
        self,
        call_site: CallSite,
        original: BaseException,
        *,
        render_stack: tuple[CallSite, ...] = (),
        source_snippet: SourceSnippet | None = None,
    ):
        self.call_site = call_site
        self.original = original
        self.render_stack = render_stack
        self.source_snippet = source_snippet
        super().__init__(self._format_message())

    @property
    def original_exception(self) -> BaseException:
        return self.original

    def _format_message(self) -> str:
        parts = [
            f"Runtime Error: {type(self.original).__name__}: {self.original}",
            f"  Location: {terminal.location(str(self.call_site))}",
        ]
        if self.source_snippet:
            parts.append(self.source_snippet.format())
        if len(self.render_stack) > 1:
            parts.append("")
            parts.append(format_render_stack(self.render_stack))
        parts.append(
            f"  {terminal.hint('Hint:')} The failing code lives in the comment block below the call"
        )
        return "\n".join(parts)
