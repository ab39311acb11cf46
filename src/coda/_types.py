"""Core value types shared across Coda.

CallSite is the cache key for one inline-template usage. CompiledTemplate
is the contract every engine adapter's output satisfies.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from coda.render_context import RenderContext


@dataclass(frozen=True, slots=True)
class CallSite:
    """Identity of a single inline-template usage.

    Attributes:
        file: Absolute path of the source file containing the call.
        line: 1-based line number of the invoking call.
        engine: Symbolic engine name the trailing comment is compiled with.

    Two call sites on the same line with different engines are distinct,
    so one method may render the same comment through two engines.
    """

    file: str
    line: int
    engine: str

    def __str__(self) -> str:
        return f"{self.file}:{self.line} ({self.engine})"

    @property
    def location(self) -> str:
        return f"{self.file}:{self.line}"


@runtime_checkable
class CompiledTemplate(Protocol):
    """A compiled inline template.

    ``render()`` is a pure function of the context. Implementations must
    HTML-escape interpolated values unless the engine's own convention
    marks them safe (``markupsafe.Markup``).
    """

    def render(self, context: RenderContext) -> str: ...


CompileFunction = Callable[[str], CompiledTemplate]

# Anything comparable with ==; FileSourceReader uses (size, mtime_ns).
Identity = Hashable
