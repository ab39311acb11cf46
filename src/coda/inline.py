"""Presenter-side front end for inline templates.

``@inline(...)`` gives a class one method per engine. Calling it renders
the comment block right below the call:

    ```python
    cache = TemplateCache(default_registry())

    @inline("jinja", "mako", cache=cache)
    class UserPresenter(Inline):
        def ivars(self):
            self.greetee = "world"
            return self.jinja()
            # Hello {{ this.greetee }}!

        def locals_from_hash(self):
            return self.jinja(local="H")
            # Local {{ local }}

        def locals_from_binding(self):
            local = "H"
            return self.jinja(binding())
            # Local {{ local }}
    ```

The call site comes from the calling frame: ``co_filename`` made absolute,
and the line being executed. The call must sit on a single line, since the
block is looked up directly below that line.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Mapping
from types import FrameType
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

from coda._types import CallSite
from coda.render_context import CapturedScope, ExplicitMapping, LocalsSource

if TYPE_CHECKING:
    from coda.cache import TemplateCache

T = TypeVar("T", bound=type)

_ENGINE_ATTR = "__coda_engine__"


def call_site_of(frame: FrameType, engine: str) -> CallSite:
    """CallSite for the line ``frame`` is currently executing."""
    return CallSite(os.path.abspath(frame.f_code.co_filename), frame.f_lineno, engine)


def _coerce_locals(
    locals_source: LocalsSource | Mapping[str, Any] | None,
    local_values: dict[str, Any],
) -> LocalsSource | None:
    if locals_source is None:
        return ExplicitMapping(local_values) if local_values else None
    if isinstance(locals_source, Mapping):
        return ExplicitMapping(locals_source, **local_values)
    if local_values:
        kind = "captured scope" if isinstance(locals_source, CapturedScope) else "locals source"
        raise TypeError(
            f"Cannot combine a {kind} with keyword locals ({', '.join(sorted(local_values))})"
        )
    return locals_source


def _render(
    caller: Any,
    engine: str,
    frame: FrameType,
    locals_source: LocalsSource | Mapping[str, Any] | None,
    local_values: dict[str, Any],
) -> str:
    cache: TemplateCache | None = getattr(caller, "inline_cache", None)
    if cache is None:
        raise RuntimeError(
            f"{type(caller).__name__} has no inline_cache; pass cache= to @inline "
            f"or set {type(caller).__name__}.inline_cache"
        )
    call_site = call_site_of(frame, engine)
    return cache.render(call_site, caller, _coerce_locals(locals_source, local_values))


class Inline:
    """Mixin for objects whose methods render trailing-comment templates.

    Attributes:
        inline_cache: The TemplateCache renders go through.
    """

    inline_cache: ClassVar[TemplateCache | None] = None

    def render_inline(
        self,
        engine: str,
        locals_source: LocalsSource | Mapping[str, Any] | None = None,
        /,
        **local_values: Any,
    ) -> str:
        """Render the comment block below this call with ``engine``."""
        return _render(self, engine, sys._getframe(1), locals_source, local_values)


def _engine_method(engine: str) -> Callable[..., str]:
    def render(
        self: Any,
        locals_source: LocalsSource | Mapping[str, Any] | None = None,
        /,
        **local_values: Any,
    ) -> str:
        return _render(self, engine, sys._getframe(1), locals_source, local_values)

    render.__name__ = engine
    render.__qualname__ = engine
    render.__doc__ = f"Render the comment block below this call with the {engine!r} engine."
    setattr(render, _ENGINE_ATTR, engine)
    return render


def inline(*engines: str, cache: TemplateCache | None = None) -> Callable[[T], T]:
    """Class decorator adding one inline render method per engine name.

    Args:
        *engines: Engine names; each becomes a method (``self.jinja()``).
        cache: TemplateCache to bind as the class's ``inline_cache``.

    Raises:
        TypeError: If an engine name collides with an existing attribute.
    """

    def decorate(cls: T) -> T:
        for engine in engines:
            existing = getattr(cls, engine, None)
            if existing is not None and getattr(existing, _ENGINE_ATTR, None) != engine:
                raise TypeError(f"{cls.__name__}.{engine} already exists")
            setattr(cls, engine, _engine_method(engine))
        if cache is not None:
            cls.inline_cache = cache
        return cls

    return decorate
