"""Jinja2 adapter.

Inline blocks compile with ``Environment.from_string``. Autoescaping is on
and undefined names raise, so a typo in a comment block fails loudly
instead of rendering an empty string. Values wrapped in ``Markup`` or
passed through ``|safe`` render unescaped.

    ```python
    def erb_escaping(self):
        return self.jinja()
        # {{ "<script>alert(1);</script>" }} {{ "<b>ok</b>" | safe }}
    ```
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from jinja2 import Environment, StrictUndefined

if TYPE_CHECKING:
    from jinja2 import Template

    from coda.render_context import RenderContext

logger = logging.getLogger(__name__)


class JinjaTemplate:
    """A compiled Jinja2 inline template."""

    __slots__ = ("_template",)

    def __init__(self, template: Template):
        self._template = template

    def render(self, context: RenderContext) -> str:
        return self._template.render(context.namespace())


class JinjaEngine:
    """Compile function backed by one shared ``jinja2.Environment``.

    Args:
        **options: Passed to ``jinja2.Environment``. ``autoescape`` defaults
            to True and ``undefined`` to ``StrictUndefined``.
    """

    __slots__ = ("_env",)

    def __init__(self, **options: Any):
        options.setdefault("autoescape", True)
        options.setdefault("undefined", StrictUndefined)
        if options["autoescape"] is False:
            logger.warning("Jinja inline engine created with autoescape disabled")
        self._env = Environment(**options)

    @property
    def environment(self) -> Environment:
        return self._env

    def __call__(self, template_text: str) -> JinjaTemplate:
        return JinjaTemplate(self._env.from_string(template_text))
