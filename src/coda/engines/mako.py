"""Mako adapter.

Blocks compile to ``mako.template.Template`` with the ``h`` default filter,
so every ``${...}`` is HTML-escaped through MarkupSafe. ``${value | n}``
disables default filters for one expression; ``Markup`` values pass
through ``h`` unchanged.

Mako binds some names itself at render time. A local with one of those
names never reaches the template: it is dropped when the template does not
mention the name, and rendering fails with :class:`MakoNameCollisionError`
when it does.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any

from mako.template import Template

if TYPE_CHECKING:
    from coda.render_context import RenderContext

# Names Mako refuses as render() keywords.
RESERVED_NAMES = frozenset({"context", "loop", "UNDEFINED", "STOP_RENDERING"})

# Names Mako replaces with its own objects, whatever the caller passed.
BUILTIN_NAMES = frozenset({"local", "caller", "capture", "pageargs"})

MAKO_NAMES = RESERVED_NAMES | BUILTIN_NAMES

_IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class MakoNameCollisionError(NameError):
    """A local shares its name with a name Mako binds itself."""

    def __init__(self, names: Iterable[str]):
        self.names = tuple(sorted(names))
        listed = ", ".join(repr(name) for name in self.names)
        if len(self.names) == 1:
            subject = f"Local {listed} is"
        else:
            subject = f"Locals {listed} are"
        super().__init__(
            f"{subject} shadowed by Mako built-in names and cannot be read "
            f"by the 'mako' engine; rename the local"
        )


class MakoTemplate:
    """A compiled Mako inline template."""

    __slots__ = ("_mentioned", "_template")

    def __init__(self, template: Template, mentioned: frozenset[str] = frozenset()):
        self._template = template
        # Mako names the template text refers to.
        self._mentioned = mentioned

    def render(self, context: RenderContext) -> str:
        colliding = self._mentioned.intersection(context.locals)
        if colliding:
            raise MakoNameCollisionError(colliding)
        return self._template.render(**context.namespace(MAKO_NAMES))


class MakoEngine:
    """Compile function producing Mako templates.

    Args:
        default_filters: Filters applied to every expression.
        strict_undefined: Raise ``NameError`` for undefined names.
        **options: Passed to ``mako.template.Template``.
    """

    __slots__ = ("_default_filters", "_options", "_strict_undefined")

    def __init__(
        self,
        *,
        default_filters: Sequence[str] = ("h",),
        strict_undefined: bool = True,
        **options: Any,
    ):
        self._default_filters = list(default_filters)
        self._strict_undefined = strict_undefined
        self._options = options

    def __call__(self, template_text: str) -> MakoTemplate:
        template = Template(
            template_text,
            default_filters=self._default_filters,
            strict_undefined=self._strict_undefined,
            **self._options,
        )
        mentioned = MAKO_NAMES.intersection(_IDENTIFIER_RE.findall(template_text))
        return MakoTemplate(template, frozenset(mentioned))
