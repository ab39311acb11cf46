"""Source readers for Coda.

A reader returns a file's full text together with its modification
identity, and can report the identity alone so the cache can confirm an
entry is still fresh without reading the file.

Built-in Readers:
- `FileSourceReader`: Read from the filesystem; identity is (size, mtime_ns)
- `MemorySourceReader`: In-memory sources with explicit revisions (testing/embedded)

Custom Readers:
Implement the SourceReader protocol:
    ```python
    class HashingReader:
        def read(self, path: str) -> tuple[str, str]:
            text = Path(path).read_text()
            return text, hashlib.sha1(text.encode()).hexdigest()

        def peek_identity(self, path: str) -> str:
            return self.read(path)[1]
    ```

Thread-Safety:
Readers are called concurrently from render threads. FileSourceReader
holds no mutable state; MemorySourceReader guards its revisions with a lock.

"""

from __future__ import annotations

import errno
import os
import threading
from collections.abc import Mapping
from pathlib import Path
from typing import NamedTuple, Protocol

from coda._types import Identity
from coda.exceptions import SourceReadError


class SourceReader(Protocol):
    """Reads source text and its modification identity by path."""

    def read(self, path: str) -> tuple[str, Identity]: ...

    def peek_identity(self, path: str) -> Identity: ...


class ModificationIdentity(NamedTuple):
    """Cheap freshness signal for a file on disk.

    Changes whenever a development workflow saves or touches the file.
    Not a content hash: an edit that keeps both size and mtime is not seen.
    """

    size: int
    mtime_ns: int


class FileSourceReader:
    """Read inline template sources from the filesystem.

    The identity is captured *before* the text is read, so an edit landing
    mid-read leaves a stale identity behind and the next check rereads.

    Example:
            >>> reader = FileSourceReader()
            >>> text, identity = reader.read("/app/presenters/user.py")
            >>> reader.peek_identity("/app/presenters/user.py") == identity
            True

    Raises:
        SourceReadError: If the path is missing or unreadable
    """

    __slots__ = ("_encoding",)

    def __init__(self, encoding: str = "utf-8"):
        self._encoding = encoding

    @property
    def encoding(self) -> str:
        return self._encoding

    def peek_identity(self, path: str) -> ModificationIdentity:
        try:
            st = os.stat(path)
        except OSError as e:
            raise SourceReadError(path, e.strerror or str(e), e.errno) from e
        return ModificationIdentity(st.st_size, st.st_mtime_ns)

    def read(self, path: str) -> tuple[str, ModificationIdentity]:
        identity = self.peek_identity(path)
        try:
            text = Path(path).read_text(self._encoding)
        except OSError as e:
            raise SourceReadError(path, e.strerror or str(e), e.errno) from e
        except UnicodeDecodeError as e:
            raise SourceReadError(path, f"not valid {self._encoding}: {e.reason}") from e
        return text, identity


class MemorySourceReader:
    """Serve sources from an in-memory mapping of path → text.

    Each path has a revision counter used as its identity. ``write()``
    and ``touch()`` bump it; ``write(..., touch=False)`` swaps the text
    while keeping the identity, which is how tests show that identity is
    the only staleness signal.

    Example:
            >>> reader = MemorySourceReader({"/t.py": "x = view.jinja()\\n# Hi"})
            >>> reader.read("/t.py")
            ('x = view.jinja()\\n# Hi', 0)
            >>> reader.touch("/t.py")
            >>> reader.peek_identity("/t.py")
            1

    Attributes:
        reads: Number of full reads served, for cache assertions.
    """

    __slots__ = ("_lock", "_revisions", "_sources", "reads")

    def __init__(self, mapping: Mapping[str, str] | None = None):
        self._lock = threading.Lock()
        self._sources: dict[str, str] = dict(mapping or {})
        self._revisions: dict[str, int] = dict.fromkeys(self._sources, 0)
        self.reads = 0

    def _missing(self, path: str) -> SourceReadError:
        return SourceReadError(path, os.strerror(errno.ENOENT), errno.ENOENT)

    def peek_identity(self, path: str) -> int:
        with self._lock:
            if path not in self._revisions:
                raise self._missing(path)
            return self._revisions[path]

    def read(self, path: str) -> tuple[str, int]:
        with self._lock:
            if path not in self._sources:
                raise self._missing(path)
            self.reads += 1
            return self._sources[path], self._revisions[path]

    def write(self, path: str, text: str, *, touch: bool = True) -> None:
        with self._lock:
            self._sources[path] = text
            if touch or path not in self._revisions:
                self._revisions[path] = self._revisions.get(path, -1) + 1

    def touch(self, path: str) -> None:
        with self._lock:
            if path not in self._revisions:
                raise self._missing(path)
            self._revisions[path] += 1

    def remove(self, path: str) -> None:
        with self._lock:
            self._sources.pop(path, None)
            self._revisions.pop(path, None)
