"""Pytest configuration and fixtures for Coda tests."""

from __future__ import annotations

import importlib.util
import inspect
import os
from collections.abc import Callable
from pathlib import Path
from types import ModuleType

import pytest

from coda import FileSourceReader, MemorySourceReader, TemplateCache, default_registry

from .presenters import InlineUser


class CountingReader(FileSourceReader):
    """FileSourceReader that counts full reads."""

    def __init__(self) -> None:
        super().__init__()
        self.reads = 0

    def read(self, path: str):
        self.reads += 1
        return super().read(path)


@pytest.fixture
def registry():
    """Registry with the built-in jinja, mako and text engines."""
    return default_registry()


@pytest.fixture
def reader() -> CountingReader:
    return CountingReader()


@pytest.fixture
def cache(registry, reader) -> TemplateCache:
    """File-backed cache counting its reads."""
    return TemplateCache(registry, reader)


@pytest.fixture
def memory_reader() -> MemorySourceReader:
    return MemorySourceReader()


@pytest.fixture
def memory_cache(registry, memory_reader) -> TemplateCache:
    """Cache over in-memory sources."""
    return TemplateCache(registry, memory_reader)


@pytest.fixture
def presenter(cache, monkeypatch) -> InlineUser:
    """InlineUser bound to a fresh cache for this test."""
    monkeypatch.setattr(InlineUser, "inline_cache", cache)
    return InlineUser("view")


def call_line(method: Callable) -> int:
    """Line of the first statement of ``method``, where its inline call sits."""
    _, start = inspect.getsourcelines(method)
    return start + 1


def bump_mtime(path: Path, seconds: int = 10) -> None:
    """Move the file's mtime forward so its identity changes."""
    st = path.stat()
    os.utime(path, ns=(st.st_atime_ns, st.st_mtime_ns + seconds * 1_000_000_000))


@pytest.fixture
def load_module(tmp_path: Path) -> Callable[[str, str], ModuleType]:
    """Write ``source`` to ``tmp_path/name.py`` and import it as a fresh module."""

    def load(source: str, name: str = "inline_module") -> ModuleType:
        path = tmp_path / f"{name}.py"
        path.write_text(source)
        spec = importlib.util.spec_from_file_location(f"coda_test_{name}", path)
        assert spec is not None
        assert spec.loader is not None
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module

    return load


def assert_contains(result: str, *expected_parts: str) -> None:
    """Assert the rendered result contains every expected part."""
    for part in expected_parts:
        assert part in result, (
            f"Inline output missing expected content:\n"
            f"  Missing: {part!r}\n"
            f"  Actual: {result!r}"
        )
