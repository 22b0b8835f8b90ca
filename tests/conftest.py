# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Test fixtures for ziprestore tests.

Provides in-memory archives, archive sources that track the streams they
open, and output channels that record what was written to them.
"""

import io
import tempfile
import zipfile
from pathlib import Path
from typing import Generator, List, Tuple

import pytest

from ziprestore.archive.keys import encode_record_key

KV_PACKAGE = "com.example.notes"
FULL_PACKAGE = "com.example.photos"
BOTH_PACKAGE = "com.example.both"
EMPTY_PACKAGE = "com.example.nothing"

FULL_PAYLOAD = bytes(range(256)) * 20  # 5120 bytes


def build_archive(
    entries: List[Tuple[str, bytes]],
    compression: int = zipfile.ZIP_DEFLATED,
) -> bytes:
    """Build a zip archive in memory from (path, payload) pairs, in order."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=compression) as zf:
        for path, payload in entries:
            zf.writestr(path, payload)
    return buffer.getvalue()


def kv_entry(package: str, key: str, payload: bytes) -> Tuple[str, bytes]:
    """An incremental archive entry for one record."""
    return f"incremental/{package}/{encode_record_key(key)}", payload


def full_entry(package: str, payload: bytes) -> Tuple[str, bytes]:
    """A full-stream archive entry."""
    return f"full/{package}", payload


class TrackingSource:
    """
    Archive source over in-memory bytes that remembers every stream it opened.

    ``data`` may be replaced between calls to simulate a changed archive.
    """

    def __init__(self, data: bytes):
        self.data = data
        self.opened: List[io.BytesIO] = []

    def __call__(self) -> io.BytesIO:
        stream = io.BytesIO(self.data)
        self.opened.append(stream)
        return stream

    @property
    def open_streams(self) -> List[io.BytesIO]:
        return [s for s in self.opened if not s.closed]


class FlakySource(TrackingSource):
    """Archive source that fails the first ``fail_times`` opens."""

    def __init__(self, data: bytes, fail_times: int):
        super().__init__(data)
        self.fail_times = fail_times
        self.attempts = 0

    def __call__(self) -> io.BytesIO:
        self.attempts += 1
        if self.attempts <= self.fail_times:
            raise OSError("storage unavailable")
        return super().__call__()


class _PipeReader(io.RawIOBase):
    """Read-only raw stream that cannot seek, like the read end of a pipe."""

    def __init__(self, data: bytes):
        self._data = data
        self._position = 0

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return False

    def readinto(self, buffer) -> int:
        size = min(len(buffer), len(self._data) - self._position)
        buffer[:size] = self._data[self._position:self._position + size]
        self._position += size
        return size


class PipeSource:
    """Archive source handing out sequential, non-seekable streams."""

    def __init__(self, data: bytes):
        self.data = data
        self.opened: List[io.BufferedReader] = []

    def __call__(self) -> io.BufferedReader:
        stream = io.BufferedReader(_PipeReader(self.data))
        self.opened.append(stream)
        return stream

    @property
    def open_streams(self) -> List[io.BufferedReader]:
        return [s for s in self.opened if not s.closed]


class RecordingChannel:
    """Output channel appending to a shared buffer; keeps data after close."""

    def __init__(self, sink: bytearray | None = None, fail_writes: bool = False):
        self.sink = sink if sink is not None else bytearray()
        self.fail_writes = fail_writes
        self.closed = False

    def write(self, data: bytes) -> int:
        if self.closed:
            raise ValueError("write to closed channel")
        if self.fail_writes:
            raise OSError("broken pipe")
        self.sink += data
        return len(data)

    def close(self) -> None:
        self.closed = True


class ShortWriteChannel(RecordingChannel):
    """Raw output channel accepting at most ``limit`` bytes per write."""

    def __init__(self, limit: int):
        super().__init__()
        self.limit = limit
        self.writes = 0

    def write(self, data) -> int:
        self.writes += 1
        return super().write(bytes(data[:self.limit]))


class FailingOutput(io.BytesIO):
    """Byte stream whose n-th write raises."""

    def __init__(self, fail_on_write: int):
        super().__init__()
        self.fail_on_write = fail_on_write
        self.writes = 0

    def write(self, data) -> int:
        self.writes += 1
        if self.writes >= self.fail_on_write:
            raise OSError("broken pipe")
        return super().write(data)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_archive() -> bytes:
    """
    Archive with one package per restore mode.

    Records of KV_PACKAGE are interleaved with other entries, and a package
    whose name is a prefix of KV_PACKAGE has its own records.
    """
    return build_archive(
        [
            kv_entry(KV_PACKAGE, "first", b"value one"),
            full_entry(FULL_PACKAGE, FULL_PAYLOAD),
            kv_entry("com.example.note", "other", b"must not leak"),
            kv_entry(KV_PACKAGE, "second", b"value two"),
            kv_entry(BOTH_PACKAGE, "setting", b"on"),
            full_entry(BOTH_PACKAGE, b"ignored stream"),
        ]
    )


@pytest.fixture
def source(sample_archive: bytes) -> TrackingSource:
    return TrackingSource(sample_archive)


@pytest.fixture
def test_config():
    """Create a test configuration with the default layout."""
    from ziprestore.config import RestoreConfig

    return RestoreConfig(chunk_size=2048)


@pytest.fixture
def restore_state(test_config, source: TrackingSource):
    """Create a fresh, not yet started restore state over the sample archive."""
    from ziprestore.core import initialize_restore_state

    return initialize_restore_state(test_config, archive_source=source)
