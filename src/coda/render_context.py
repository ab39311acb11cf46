"""Coda RenderContext: the variable environment an inline template sees.

A RenderContext is built fresh for every render and never cached. It holds
a *reference* to the calling object, so fields the caller set earlier in
the same method are visible, and a locals mapping taken from a
LocalsSource:

- ``ExplicitMapping``: names passed by the caller (``self.jinja(local="H")``)
- ``CapturedScope``: the caller's active local bindings (``self.jinja(binding())``)

Templates see the locals plus the caller under the name ``this``.

Render Stack:
A ContextVar records the call sites of in-flight inline renders. A
template that calls a method which renders its own inline template
nests one level; errors raised at any depth report the whole chain.

Thread Safety:
ContextVars are per-thread and per-task, so concurrent renders never see
each other's stack.

"""

from __future__ import annotations

import sys
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from types import FrameType
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from coda._types import CallSite

# Name the calling object is exposed under inside templates.
CALLER_NAME = "this"

# Jinja2 and Mako both claim ``self``; the caller is reachable as ``this``.
_HIDDEN_LOCALS = frozenset({"self"})


@runtime_checkable
class LocalsSource(Protocol):
    """Supplies the local-variable mapping for one render."""

    def resolve(self) -> dict[str, Any]: ...


class ExplicitMapping:
    """Locals given explicitly by the caller, used verbatim."""

    __slots__ = ("_mapping",)

    def __init__(self, mapping: Mapping[str, Any] | None = None, /, **values: Any):
        self._mapping = {**(mapping or {}), **values}

    def resolve(self) -> dict[str, Any]:
        return dict(self._mapping)

    def __repr__(self) -> str:
        return f"ExplicitMapping({self._mapping!r})"


class CapturedScope:
    """The local bindings of a live frame, read when the context is built.

    Example:
            >>> def locals_from_binding(self):
            ...     local = "H"
            ...     return self.jinja(CapturedScope.here())
            ...     # Local {{ local }}
    """

    __slots__ = ("_frame",)

    def __init__(self, frame: FrameType):
        self._frame = frame

    @classmethod
    def here(cls, depth: int = 0) -> CapturedScope:
        """Capture the frame ``depth`` levels above the caller of ``here()``."""
        return cls(sys._getframe(depth + 1))

    def resolve(self) -> dict[str, Any]:
        return dict(self._frame.f_locals)

    def __repr__(self) -> str:
        code = self._frame.f_code
        return f"CapturedScope({code.co_name} at {code.co_filename}:{self._frame.f_lineno})"


def binding() -> CapturedScope:
    """Capture the calling function's local scope."""
    return CapturedScope(sys._getframe(1))


NO_LOCALS: LocalsSource = ExplicitMapping()


@dataclass(frozen=True, slots=True)
class RenderContext:
    """Per-render variable environment.

    Attributes:
        caller: The object whose method invoked the render (not copied).
        locals: Local-variable mapping for this render only.
        call_site: The inline usage being rendered, for error attribution.
    """

    caller: Any = None
    locals: dict[str, Any] = field(default_factory=dict)
    call_site: CallSite | None = None

    def namespace(self, exclude: frozenset[str] = frozenset()) -> dict[str, Any]:
        """Flatten into the mapping engines render against.

        Args:
            exclude: Extra names an engine reserves for itself.
        """
        hidden = _HIDDEN_LOCALS | exclude
        ns = {k: v for k, v in self.locals.items() if k not in hidden}
        ns[CALLER_NAME] = self.caller
        return ns


def build_context(
    caller: Any,
    locals_source: LocalsSource | None = None,
    call_site: CallSite | None = None,
) -> RenderContext:
    """Assemble the RenderContext for one render.

    Args:
        caller: The calling object; always included by reference.
        locals_source: Where locals come from. ``None`` means no locals.
        call_site: The inline usage, carried for error messages.
    """
    source = locals_source if locals_source is not None else NO_LOCALS
    return RenderContext(caller=caller, locals=source.resolve(), call_site=call_site)


# ---------------------------------------------------------------------------
# Render stack
# ---------------------------------------------------------------------------

_render_stack: ContextVar[tuple[CallSite, ...]] = ContextVar(
    "coda_render_stack",
    default=(),
)


def current_stack() -> tuple[CallSite, ...]:
    """Call sites of the inline renders in flight, outermost first."""
    return _render_stack.get()


@contextmanager
def rendering(call_site: CallSite) -> Iterator[tuple[CallSite, ...]]:
    """Push ``call_site`` on the render stack for the duration of the block.

    Yields:
        The stack including ``call_site``.
    """
    stack = (*_render_stack.get(), call_site)
    token: Token[tuple[CallSite, ...]] = _render_stack.set(stack)
    try:
        yield stack
    finally:
        _render_stack.reset(token)
