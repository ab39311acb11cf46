"""Template engines for inline blocks.

Built-in engines, all escaping through MarkupSafe by default:

- ``jinja``: Jinja2 (``{{ this.name }}``, ``|safe`` to opt out)
- ``mako``: Mako (``${this.name}``, ``| n`` to opt out)
- ``text``: ``string.Template`` with dotted paths (``$this.name``)

Custom Engines:
Any callable taking template text and returning an object with
``render(context) -> str`` can be registered:

    >>> registry = default_registry()
    >>> registry.register("upper", lambda text: UpperTemplate(text))

"""

from __future__ import annotations

from typing import Any

from coda.engines.jinja import JinjaEngine, JinjaTemplate
from coda.engines.mako import MakoEngine, MakoNameCollisionError, MakoTemplate
from coda.engines.registry import EngineRegistry
from coda.engines.text import TextSyntaxError, TextTemplate, compile_text


def default_registry(**jinja_options: Any) -> EngineRegistry:
    """Create a registry with the built-in ``jinja``, ``mako`` and ``text`` engines.

    Args:
        **jinja_options: Extra ``jinja2.Environment`` options.
    """
    registry = EngineRegistry()
    registry.register("jinja", JinjaEngine(**jinja_options))
    registry.register("mako", MakoEngine())
    registry.register("text", compile_text)
    return registry


__all__ = [
    "EngineRegistry",
    "JinjaEngine",
    "JinjaTemplate",
    "MakoEngine",
    "MakoNameCollisionError",
    "MakoTemplate",
    "TextSyntaxError",
    "TextTemplate",
    "compile_text",
    "default_registry",
]
