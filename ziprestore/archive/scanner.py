# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
ziprestore Archive Scanner - Entry lookup inside the backup archive.

Every lookup opens a fresh read handle and walks the entries in archive
order until the first path that matches. There is no persistent index,
and a lookup handle never shares a cursor with an in-progress transfer.
"""

import shutil
import tempfile
import zipfile
from pathlib import Path
from typing import IO, BinaryIO, Callable, Iterator, List, Tuple

import structlog

from ziprestore.exceptions import ArchiveError

logger = structlog.get_logger()

# Zero-argument callable returning a new binary stream over the archive
ArchiveSource = Callable[[], BinaryIO]

# Sequential archives larger than this are spooled to disk
SPOOL_MAX_MEMORY = 8 * 1024 * 1024

# Position of a matching entry and its metadata
EntryMatch = Tuple[int, zipfile.ZipInfo]


def file_archive_source(archive_path: Path | str) -> ArchiveSource:
    """
    Build an archive source reading a zip file from disk.

    Args:
        archive_path: Path to the archive

    Returns:
        Callable opening a new read-only stream per call
    """
    path = Path(archive_path)

    def open_source() -> BinaryIO:
        return open(path, "rb")

    return open_source


class ArchiveHandle:
    """
    An open archive: the raw stream plus the zip reader over it.

    Closing is idempotent and closes both.
    """

    def __init__(self, stream: BinaryIO, zip_file: zipfile.ZipFile):
        self._stream = stream
        self._zip = zip_file
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def entries(self) -> List[zipfile.ZipInfo]:
        """Entries in archive order."""
        return self._zip.infolist()

    def open_entry(self, info: zipfile.ZipInfo) -> IO[bytes]:
        """
        Open a read cursor positioned at the start of an entry's payload.

        Raises:
            ArchiveError: If the entry cannot be opened
        """
        try:
            return self._zip.open(info)
        except Exception as e:
            raise ArchiveError(
                f"Failed to open archive entry: {e}",
                details={"entry": info.filename},
            )

    def read_entry(self, info: zipfile.ZipInfo) -> bytes:
        """
        Read an entry's payload fully into memory.

        Raises:
            ArchiveError: If the payload cannot be read
        """
        try:
            with self._zip.open(info) as cursor:
                return cursor.read()
        except Exception as e:
            raise ArchiveError(
                f"Failed to read archive entry: {e}",
                details={"entry": info.filename},
            )

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._zip.close()
        finally:
            self._stream.close()

    def __enter__(self) -> "ArchiveHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def _spool(stream: BinaryIO) -> BinaryIO:
    """Copy a sequential stream into a seekable temporary file and close it."""
    spool = tempfile.SpooledTemporaryFile(max_size=SPOOL_MAX_MEMORY)
    try:
        shutil.copyfileobj(stream, spool)
        spool.seek(0)
    except BaseException:
        spool.close()
        raise
    finally:
        stream.close()
    return spool


def open_archive(source: ArchiveSource) -> ArchiveHandle:
    """
    Open a fresh read handle over the archive.

    Sources that cannot seek (pipes, sockets) are read to the end into a
    spooled temporary file first, since the zip directory sits at the end
    of the archive.

    Args:
        source: Archive source

    Returns:
        ArchiveHandle owning the new stream

    Raises:
        ArchiveError: If the stream cannot be opened or is not a zip archive
    """
    stream = None
    try:
        stream = source()
        seekable = getattr(stream, "seekable", None)
        if seekable is None or not seekable():
            logger.debug("archive_spooled", reason="stream_not_seekable")
            raw, stream = stream, None
            stream = _spool(raw)
        zip_file = zipfile.ZipFile(stream)
    except Exception as e:
        if stream is not None:
            stream.close()
        raise ArchiveError(f"Failed to open backup archive: {e}")

    return ArchiveHandle(stream, zip_file)


def locate_entry(
    archive: ArchiveHandle,
    prefix: str,
    start: int = 0,
    exact: bool = False,
) -> EntryMatch | None:
    """
    Find the first entry at or after ``start`` whose path matches.

    Directory entries are ignored. Callers looking up a package directory
    must include the trailing '/' so that a package never matches another
    package whose name it prefixes.

    Args:
        archive: Open archive handle
        prefix: Path prefix (or full path when exact)
        start: Entry position to resume scanning from
        exact: Require the whole path to equal ``prefix``

    Returns:
        (position, ZipInfo) of the match, or None
    """
    entries = archive.entries
    for index in range(start, len(entries)):
        info = entries[index]
        if info.is_dir():
            continue
        name = info.filename
        if (name == prefix) if exact else name.startswith(prefix):
            logger.debug("archive_entry_located", prefix=prefix, entry=name, index=index)
            return index, info

    return None


def iter_entries(archive: ArchiveHandle, prefix: str) -> Iterator[zipfile.ZipInfo]:
    """Yield every entry under ``prefix`` in archive order."""
    match = locate_entry(archive, prefix)
    while match is not None:
        index, info = match
        yield info
        match = locate_entry(archive, prefix, start=index + 1)


def contains_entry(source: ArchiveSource, prefix: str, exact: bool = False) -> bool:
    """
    Check the archive for a matching entry.

    The handle used for the check is always closed before returning.

    Raises:
        ArchiveError: If the archive cannot be opened
    """
    with open_archive(source) as archive:
        return locate_entry(archive, prefix, exact=exact) is not None
