"""Template cache: call site → compiled inline template.

Each CallSite ``(file, line, engine)`` maps to a CacheEntry holding the
file's modification identity at compile time and the compiled template.

Entry States:
    Fresh: stored identity equals the file's current identity → serve.
    Stale: identities differ, or no entry yet → read, extract, compile,
    replace the entry, serve.

Staleness is detected lazily, at render time, with one ``stat`` per render.
Invalidation is per file: touching a file makes every entry for that file
stale on its next use, including blocks whose text did not change.

Thread-Safety:
    - Lookups are plain dict reads (no lock on the hot path).
    - Compilation is serialized per call site; different call sites never
      wait on each other's compiles.
    - ``reset()`` advances a generation counter; a compile that began
      before the reset does not store its result, so every render after
      ``reset()`` returns recompiles.

Example:
        >>> cache = TemplateCache(default_registry())
        >>> site = CallSite("/app/presenters/user.py", 12, "jinja")
        >>> cache.render(site, presenter, ExplicitMapping(local="H"))
        'Local H'

"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any

from markupsafe import Markup

from coda._types import CallSite, CompiledTemplate, Identity
from coda.engines.registry import EngineRegistry
from coda.exceptions import (
    InlineTemplateError,
    SourceSnippet,
    TemplateCompileError,
    TemplateRenderError,
    build_source_snippet,
)
from coda.extractor import DEFAULT_MARKER, extract
from coda.render_context import LocalsSource, build_context, rendering
from coda.source import FileSourceReader, SourceReader

logger = logging.getLogger(__name__)

# Block lines shown under the call in render error snippets.
_SNIPPET_BLOCK_LINES = 6


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """Compiled template for one call site, tagged with the identity it was built from."""

    call_site: CallSite
    identity: Identity
    template: CompiledTemplate
    snippet: SourceSnippet


class TemplateCache:
    """Process-wide cache of compiled inline templates.

    Create one per source tree and hand it to whatever composes render
    calls (``@inline(..., cache=cache)``); there is no module-level instance.

    Args:
        engines: Registry used to compile blocks.
        reader: Source reader. Defaults to FileSourceReader.
        auto_reload: Check the file's identity on every render. Disable in
            production to serve entries without a ``stat``.
        marker: Line-comment marker introducing template lines.
    """

    __slots__ = (
        "_compile_locks",
        "_entries",
        "_generation",
        "_lock",
        "_stats",
        "auto_reload",
        "engines",
        "marker",
        "reader",
    )

    def __init__(
        self,
        engines: EngineRegistry,
        reader: SourceReader | None = None,
        *,
        auto_reload: bool = True,
        marker: str = DEFAULT_MARKER,
    ):
        self.engines = engines
        self.reader: SourceReader = reader if reader is not None else FileSourceReader()
        self.auto_reload = auto_reload
        self.marker = marker
        self._entries: dict[CallSite, CacheEntry] = {}
        self._compile_locks: dict[CallSite, threading.Lock] = {}
        self._lock = threading.Lock()
        self._generation = 0
        self._stats = {"hits": 0, "misses": 0, "reloads": 0, "compiles": 0}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render(
        self,
        call_site: CallSite,
        caller: Any = None,
        locals_source: LocalsSource | None = None,
    ) -> str:
        """Render the inline template at ``call_site``.

        Args:
            call_site: File, line and engine of the inline call.
            caller: Object whose method made the call; templates see it as ``this``.
            locals_source: Locals for the template; ``None`` for none.

        Returns:
            The rendered output as ``Markup``: engines already escaped it, so
            embedding it in another inline template does not escape it twice.

        Raises:
            SourceReadError: Source file missing or unreadable.
            UnknownEngineError: ``call_site.engine`` is not registered.
            TemplateCompileError: The comment block does not compile.
            TemplateRenderError: The compiled template raised.
        """
        entry = self._fresh_entry(call_site)
        context = build_context(caller, locals_source, call_site)
        with rendering(call_site) as stack:
            try:
                return Markup(entry.template.render(context))
            except InlineTemplateError:
                raise
            except Exception as e:
                raise TemplateRenderError(
                    call_site,
                    e,
                    render_stack=stack,
                    source_snippet=entry.snippet,
                ) from e

    def reset(self) -> None:
        """Discard every entry; each call site recompiles on its next render."""
        with self._lock:
            dropped = len(self._entries)
            self._entries = {}
            self._generation += 1
        logger.debug("Inline template cache reset (%d entries dropped)", dropped)

    def stats(self) -> dict[str, int]:
        """Counters: ``hits``, ``misses`` (first use), ``reloads`` (stale), ``compiles``."""
        return dict(self._stats)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, call_site: object) -> bool:
        return call_site in self._entries

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _is_fresh(self, entry: CacheEntry | None) -> bool:
        if entry is None:
            return False
        if not self.auto_reload:
            return True
        return self.reader.peek_identity(entry.call_site.file) == entry.identity

    def _count(self, key: str) -> None:
        # Unlocked; counts may drift under contention.
        self._stats[key] += 1

    def _fresh_entry(self, call_site: CallSite) -> CacheEntry:
        entry = self._entries.get(call_site)
        if self._is_fresh(entry):
            self._count("hits")
            return entry  # type: ignore[return-value]

        with self._compile_lock(call_site):
            # Another thread may have compiled while we waited.
            current = self._entries.get(call_site)
            if current is not entry and self._is_fresh(current):
                self._count("hits")
                return current  # type: ignore[return-value]
            if current is None:
                self._count("misses")
            else:
                self._count("reloads")
                logger.debug("Source changed, recompiling inline template at %s", call_site)
            return self._compile(call_site)

    def _compile_lock(self, call_site: CallSite) -> threading.Lock:
        lock = self._compile_locks.get(call_site)
        if lock is None:
            with self._lock:
                lock = self._compile_locks.setdefault(call_site, threading.Lock())
        return lock

    def _compile(self, call_site: CallSite) -> CacheEntry:
        generation = self._generation
        text, identity = self.reader.read(call_site.file)
        body = extract(text, call_site.line, self.marker)
        try:
            template = self.engines.compile(call_site.engine, body)
        except InlineTemplateError as e:
            if e.call_site is None:
                e.call_site = call_site
            raise
        except Exception as e:
            raise self._compile_error(call_site, e, text, body) from e

        entry = CacheEntry(call_site, identity, template, _block_snippet(text, call_site.line, body))
        with self._lock:
            self._stats["compiles"] += 1
            if generation == self._generation:
                self._entries[call_site] = entry
        logger.debug("Compiled inline template at %s", call_site)
        return entry

    def _compile_error(
        self, call_site: CallSite, error: Exception, text: str, body: str
    ) -> TemplateCompileError:
        block_line = getattr(error, "lineno", None)
        lineno = None
        if isinstance(block_line, int) and block_line > 0:
            lineno = call_site.line + block_line
        message = getattr(error, "message", None) or str(error) or type(error).__name__
        return TemplateCompileError(
            call_site,
            f"{type(error).__name__}: {message}",
            body=body,
            lineno=lineno,
            source_snippet=build_source_snippet(text, call_site.line, focus_line=lineno),
        )


def _block_snippet(text: str, call_line: int, body: str) -> SourceSnippet:
    """The call line and the first lines of its comment block, as in the file."""
    lines = text.splitlines()
    block = min(body.count("\n") + 1 if body else 0, _SNIPPET_BLOCK_LINES)
    start = max(call_line - 1, 0)
    end = min(call_line + block, len(lines))
    numbered = tuple((i + 1, lines[i]) for i in range(start, end))
    return SourceSnippet(lines=numbered, call_line=call_line)
