"""Engine registry: symbolic engine name → compile function.

A compile function takes template text and returns a CompiledTemplate.
Adapters for third-party engines register themselves here at process
start; the cache looks engines up by the name recorded in each CallSite.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping

from coda._types import CompiledTemplate, CompileFunction
from coda.exceptions import UnknownEngineError

logger = logging.getLogger(__name__)


class EngineRegistry:
    """Dict-like registry of template engines.

    Supports:
        - registry.register("jinja", compile_fn)
        - registry["jinja"]
        - "jinja" in registry
        - registry.compile("jinja", "Hello {{ this.name }}")

    All mutations use copy-on-write, so a ``compile()`` running in another
    thread always sees a complete mapping.

    Example:
            >>> registry = EngineRegistry()
            >>> registry.register("text", compile_text)
            >>> registry.compile("text", "Hi $name").render(context)
            'Hi World'
    """

    __slots__ = ("_engines",)

    def __init__(self, engines: Mapping[str, CompileFunction] | None = None):
        self._engines: dict[str, CompileFunction] = dict(engines or {})

    def register(self, name: str, compile_fn: CompileFunction) -> None:
        if not name.isidentifier():
            raise ValueError(f"Engine name must be a valid identifier, got {name!r}")
        new = self._engines.copy()
        if name in new:
            logger.warning("Replacing template engine %r", name)
        new[name] = compile_fn
        self._engines = new

    def unregister(self, name: str) -> None:
        if name not in self._engines:
            raise UnknownEngineError(name, list(self._engines))
        new = self._engines.copy()
        del new[name]
        self._engines = new

    def compile(self, name: str, template_text: str) -> CompiledTemplate:
        """Compile ``template_text`` with engine ``name``.

        Raises:
            UnknownEngineError: If ``name`` was never registered.
            Exception: Whatever the engine raises for invalid text.
        """
        engines = self._engines
        compile_fn = engines.get(name)
        if compile_fn is None:
            raise UnknownEngineError(name, list(engines))
        return compile_fn(template_text)

    def names(self) -> list[str]:
        return sorted(self._engines)

    def __getitem__(self, name: str) -> CompileFunction:
        try:
            return self._engines[name]
        except KeyError:
            raise UnknownEngineError(name, list(self._engines)) from None

    def __contains__(self, name: object) -> bool:
        return name in self._engines

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._engines)

    def copy(self) -> EngineRegistry:
        return EngineRegistry(self._engines)
