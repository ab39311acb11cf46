"""Coda: view templates that live in the comment right after the call.

A method renders the comment block that immediately follows the line that
invokes it. The block is located in the object's own source file,
compiled with a pluggable engine, cached per call site and recompiled when
the file changes on disk.

Quickstart:
    >>> from coda import Inline, TemplateCache, default_registry, inline
    >>> cache = TemplateCache(default_registry())
    >>> @inline("jinja", cache=cache)
    ... class Greeter(Inline):
    ...     def hello(self, name):
    ...         return self.jinja(name=name)
    ...         # Hello {{ name }}!
    >>> Greeter().hello("<World>")
    Markup('Hello &lt;World&gt;!')

Architecture:
Call → CallSite(file, line, engine) → TemplateCache → (stale?) SourceReader
→ extract() → EngineRegistry.compile() → CompiledTemplate.render(RenderContext)

Components:
1. **SourceReader**: file text plus a cheap modification identity
2. **extract()**: trailing comment block, marker stripped, dedented
3. **EngineRegistry**: engine name → compile function (jinja, mako, text)
4. **RenderContext**: the caller (as ``this``) plus explicit or captured locals
5. **TemplateCache**: per-call-site entries, lazily invalidated per file

Escaping:
All built-in engines HTML-escape interpolated values through MarkupSafe.
Wrap trusted HTML in ``Markup`` (or use the engine's own safe marker).

Thread-Safety:
Renders run concurrently. Compilation is serialized per call site only;
``TemplateCache.reset()`` is safe to call at any time.

"""

from markupsafe import Markup, escape

from coda._types import CallSite, CompiledTemplate
from coda.cache import CacheEntry, TemplateCache
from coda.engines import EngineRegistry, default_registry
from coda.exceptions import (
    ErrorCode,
    InlineTemplateError,
    SourceReadError,
    SourceSnippet,
    TemplateCompileError,
    TemplateRenderError,
    UnknownEngineError,
    build_source_snippet,
)
from coda.extractor import extract
from coda.inline import Inline, call_site_of, inline
from coda.render_context import (
    CALLER_NAME,
    CapturedScope,
    ExplicitMapping,
    LocalsSource,
    RenderContext,
    binding,
    build_context,
    current_stack,
)
from coda.source import FileSourceReader, MemorySourceReader, ModificationIdentity, SourceReader

__version__ = "0.1.0"

__all__ = [
    "CALLER_NAME",
    "CacheEntry",
    "CallSite",
    "CapturedScope",
    "CompiledTemplate",
    "EngineRegistry",
    "ErrorCode",
    "ExplicitMapping",
    "FileSourceReader",
    "Inline",
    "InlineTemplateError",
    "LocalsSource",
    "Markup",
    "MemorySourceReader",
    "ModificationIdentity",
    "RenderContext",
    "SourceReadError",
    "SourceReader",
    "SourceSnippet",
    "TemplateCache",
    "TemplateCompileError",
    "TemplateRenderError",
    "UnknownEngineError",
    "__version__",
    "binding",
    "build_context",
    "build_source_snippet",
    "call_site_of",
    "current_stack",
    "default_registry",
    "escape",
    "extract",
    "inline",
]
