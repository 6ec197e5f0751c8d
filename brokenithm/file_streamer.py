"""Cached, chunked reading of static files served over HTTP."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator

DEFAULT_CACHE_SIZE = 1024 * 1024


class FileReader:
    """Reads a file in chunks, keeping the most recent chunk cached."""

    def __init__(self, path: str | os.PathLike[str], cache_size: int = DEFAULT_CACHE_SIZE) -> None:
        if cache_size <= 0:
            raise ValueError("cache_size must be positive")
        self.path = Path(path)
        self.cache_size = cache_size
        self.file_size = self.path.stat().st_size
        self._cache = b""
        self._cache_offset = 0
        self.read(0)

    def peek(self, offset: int) -> bytes:
        """Return cached data starting at ``offset``, or ``b""`` on a cache miss."""
        relative = offset - self._cache_offset
        if offset < self._cache_offset or relative >= self.cache_size:
            return b""
        end = min(self.file_size - self._cache_offset, len(self._cache))
        return self._cache[relative:end]

    def read(self, offset: int) -> bytes:
        """Load a chunk at ``offset`` into the cache and return it."""
        if offset < 0:
            raise ValueError("offset must not be negative")
        with self.path.open("rb") as f:
            f.seek(offset)
            data = f.read(self.cache_size)
        self._cache = data
        self._cache_offset = offset
        return data[: max(0, min(self.cache_size, self.file_size - offset))]

    def chunks(self) -> Iterator[bytes]:
        """Yield the whole file in order, one cache-sized chunk at a time."""
        offset = 0
        while offset < self.file_size:
            chunk = self.peek(offset) or self.read(offset)
            if not chunk:
                break
            yield chunk
            offset += len(chunk)


class FileStreamer:
    """Maps URLs to readers for every file below a root directory."""

    def __init__(self, root: str | os.PathLike[str], cache_size: int = DEFAULT_CACHE_SIZE) -> None:
        self.root = os.fspath(root)
        self.cache_size = cache_size
        self.readers: dict[str, FileReader] = {}
        self.update_root_cache()

    def update_root_cache(self) -> None:
        """Scan the root directory and register a reader for each file."""
        root = Path(self.root)
        prefix = "" if self.root.endswith(("/", os.sep)) else "/"
        for path in sorted(root.rglob("*")):
            if not path.is_file():
                continue
            url = prefix + path.relative_to(root).as_posix()
            if url == "/index.html":
                url = "/"
            self.readers[url] = FileReader(path, self.cache_size)

    def find(self, url: str) -> FileReader | None:
        """Return the reader registered for ``url``, if any."""
        return self.readers.get(url)

    def read(self, url: str) -> bytes:
        """Return the full contents of the file registered for ``url``."""
        reader = self.find(url)
        if reader is None:
            raise FileNotFoundError(f"Did not find file: {url}")
        return b"".join(reader.chunks())