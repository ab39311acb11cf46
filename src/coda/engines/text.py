"""Dependency-light ``string.Template`` engine.

Placeholders are ``$name`` or ``${name}`` with optional dotted paths
(``$this.greetee``, ``${user.name}``). Each path segment resolves by
attribute, then by item; a zero-argument callable at the end of a path is
called, so ``$this.full_name`` works for methods too. Every value is
escaped with MarkupSafe unless it is ``Markup``.

Unknown names raise ``KeyError`` at render time; malformed placeholders
raise TextSyntaxError at compile time.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from string import Template
from typing import TYPE_CHECKING, Any

from markupsafe import escape

if TYPE_CHECKING:
    from coda.render_context import RenderContext


class TextSyntaxError(ValueError):
    """Malformed ``$`` placeholder in a text template."""

    def __init__(self, message: str, lineno: int):
        self.lineno = lineno
        super().__init__(f"{message} (line {lineno})")


class _DottedTemplate(Template):
    idpattern = r"(?a:[_a-z][_a-z0-9]*(?:\.[_a-z][_a-z0-9]*)*)"


def _resolve(value: Any, part: str) -> Any:
    try:
        return getattr(value, part)
    except AttributeError as attr_error:
        try:
            return value[part]
        except (TypeError, LookupError):
            raise attr_error from None


class _EscapingLookup(Mapping[str, Any]):
    """Read-only view resolving dotted keys and escaping results."""

    __slots__ = ("_namespace",)

    def __init__(self, namespace: dict[str, Any]):
        self._namespace = namespace

    def __getitem__(self, key: str) -> Any:
        head, *path = key.split(".")
        value = self._namespace[head]
        for part in path:
            value = _resolve(value, part)
        if path and callable(value):
            value = value()
        return escape(value)

    def __iter__(self) -> Iterator[str]:
        return iter(self._namespace)

    def __len__(self) -> int:
        return len(self._namespace)


class TextTemplate:
    """A compiled text template."""

    __slots__ = ("_template",)

    def __init__(self, template: Template):
        self._template = template

    def render(self, context: RenderContext) -> str:
        return self._template.substitute(_EscapingLookup(context.namespace()))


def compile_text(template_text: str) -> TextTemplate:
    """Compile a ``$placeholder`` template, checking placeholder syntax up front."""
    template = _DottedTemplate(template_text)
    for match in template.pattern.finditer(template_text):
        if match.group("invalid") is not None:
            start = match.start()
            lineno = template_text.count("\n", 0, start) + 1
            raise TextSyntaxError(f"Invalid placeholder {template_text[start:start + 12]!r}", lineno)
    return TextTemplate(template)
