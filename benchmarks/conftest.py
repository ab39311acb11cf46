from __future__ import annotations

import importlib.metadata as importlib_metadata
import json
import os
import platform
import sys
from pathlib import Path

import pytest

from coda import TemplateCache, default_registry

from .presenters import ProfilePresenter

BASE_DIR = Path(__file__).resolve().parent
BENCHMARK_OUTPUT_DIR = BASE_DIR.parent / ".benchmarks"
BENCHMARK_OUTPUT_DIR.mkdir(exist_ok=True)


def _version(dist: str) -> str:
    try:
        return importlib_metadata.version(dist)
    except importlib_metadata.PackageNotFoundError:
        return "unknown"


def collect_environment_metadata() -> dict[str, object]:
    """Capture reproducibility metadata for each benchmark run."""
    return {
        "python": {
            "version": platform.python_version(),
            "implementation": platform.python_implementation(),
            "executable": sys.executable,
        },
        "os": {
            "system": platform.system(),
            "release": platform.release(),
            "machine": platform.machine(),
        },
        "cpu": {
            "processor": platform.processor(),
            "count": os.cpu_count(),
        },
        "coda-inline": _version("coda-inline"),
        "jinja2": _version("jinja2"),
        "mako": _version("mako"),
    }


@pytest.fixture(scope="session")
def environment_metadata() -> dict[str, object]:
    """Write environment metadata to .benchmarks for ingestion."""
    metadata = collect_environment_metadata()
    (BENCHMARK_OUTPUT_DIR / "environment.json").write_text(json.dumps(metadata, indent=2))
    return metadata


@pytest.fixture
def dev_cache(environment_metadata) -> TemplateCache:
    """Development cache: one ``stat`` per render."""
    return TemplateCache(default_registry())


@pytest.fixture
def production_cache(environment_metadata) -> TemplateCache:
    """Production cache: no freshness check."""
    return TemplateCache(default_registry(), auto_reload=False)


@pytest.fixture
def presenter(dev_cache, monkeypatch) -> ProfilePresenter:
    monkeypatch.setattr(ProfilePresenter, "inline_cache", dev_cache)
    return ProfilePresenter.sample()
