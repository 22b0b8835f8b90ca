# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
ziprestore Full-Stream Restore - Chunked transfer of a package's stream.

The caller pulls one chunk per call. The archive handle and the read
cursor opened on the first call are kept in the session state until the
stream is exhausted, a call fails, or the transfer is aborted; every one
of those paths releases them together with the output channel.
"""

from typing import BinaryIO

import structlog

from ziprestore.archive.scanner import locate_entry, open_archive
from ziprestore.config import RestoreConfig
from ziprestore.exceptions import ArchiveError
from ziprestore.session import (
    RestoreMode,
    RestoreState,
    StreamPhase,
    TransportResult,
    has_open_stream,
    require_mode,
)

logger = structlog.get_logger()


def get_next_full_restore_data_chunk(
    config: RestoreConfig,
    state: RestoreState,
    output: BinaryIO,
) -> int:
    """
    Copy the next chunk of the current package's stream to ``output``.

    Args:
        config: Restore configuration (chunk_size bounds each chunk)
        state: Restore session state
        output: Writable binary stream for this call

    Returns:
        Number of bytes written (> 0), or one of
        TransportResult.NO_MORE_DATA (stream exhausted),
        TransportResult.PACKAGE_REJECTED (no full entry for the package),
        TransportResult.ERROR (read or write failed)

    Raises:
        ProtocolError: If the current package is not a full-stream package
    """
    package = require_mode(state, "get_next_full_restore_data_chunk", RestoreMode.FULL_STREAM)

    if state["stream_phase"] == StreamPhase.DONE:
        logger.warning(
            "full_restore_already_finished",
            session_id=state["session_id"],
            package=package,
        )
        return TransportResult.NO_MORE_DATA

    if state["stream_phase"] == StreamPhase.NOT_STARTED:
        if not _open_full_stream(config, state, package, output):
            return TransportResult.PACKAGE_REJECTED

    state["output"] = output

    try:
        chunk = state["cursor"].read(config.chunk_size)

        if not chunk:
            logger.info(
                "full_restore_completed",
                session_id=state["session_id"],
                package=package,
            )
            release_full_stream(state)
            return TransportResult.NO_MORE_DATA

        _write_fully(output, chunk)

    except Exception as e:
        state["last_error"] = str(e)
        logger.error(
            "full_restore_chunk_failed",
            session_id=state["session_id"],
            package=package,
            error=str(e),
        )
        release_full_stream(state)
        return TransportResult.ERROR

    logger.debug(
        "full_restore_chunk_written",
        session_id=state["session_id"],
        package=package,
        size=len(chunk),
    )
    return len(chunk)


def _write_fully(output: BinaryIO, chunk: bytes) -> None:
    """Write the whole chunk, retrying short writes from raw channels."""
    view = memoryview(chunk)
    while view:
        written = output.write(view)
        if written is None:
            # No byte count: the writer took everything
            return
        if written <= 0:
            raise OSError("Output channel accepted no bytes")
        view = view[written:]


def _open_full_stream(
    config: RestoreConfig,
    state: RestoreState,
    package: str,
    output: BinaryIO,
) -> bool:
    """Open the archive at the package's full entry; False if rejected."""
    entry_path = f"{config.full_dir}{package}"
    archive = None

    try:
        archive = open_archive(state["archive_source"])
        match = locate_entry(archive, entry_path, exact=True)
        if match is None:
            archive.close()
            state["stream_phase"] = StreamPhase.DONE
            state["last_error"] = f"No full-stream entry {entry_path}"
            logger.warning(
                "full_restore_entry_missing",
                session_id=state["session_id"],
                package=package,
                entry=entry_path,
            )
            return False

        cursor = archive.open_entry(match[1])

    except ArchiveError as e:
        if archive is not None:
            archive.close()
        state["stream_phase"] = StreamPhase.DONE
        state["last_error"] = str(e)
        logger.error(
            "full_restore_open_failed",
            session_id=state["session_id"],
            package=package,
            error=str(e),
        )
        return False

    state["archive"] = archive
    state["cursor"] = cursor
    state["output"] = output
    state["stream_phase"] = StreamPhase.STREAMING

    logger.info(
        "full_restore_started",
        session_id=state["session_id"],
        package=package,
        size=match[1].file_size,
    )
    return True


def _close_quietly(resource, name: str, state: RestoreState) -> None:
    if resource is None:
        return
    try:
        resource.close()
    except Exception as e:
        logger.warning(
            "full_restore_close_failed",
            session_id=state["session_id"],
            resource=name,
            error=str(e),
        )


def release_full_stream(state: RestoreState) -> None:
    """
    Close the cursor, archive and output channel and clear them.

    Safe to call when nothing is open.
    """
    _close_quietly(state["cursor"], "cursor", state)
    _close_quietly(state["archive"], "archive", state)
    _close_quietly(state["output"], "output", state)

    state["cursor"] = None
    state["archive"] = None
    state["output"] = None

    if state["stream_phase"] == StreamPhase.STREAMING:
        state["stream_phase"] = StreamPhase.DONE


def abort_full_restore(state: RestoreState) -> TransportResult:
    """
    Abandon the current full-stream transfer.

    Releases anything still open. Callable in any state, including when
    no transfer was ever started; the session itself stays usable.
    """
    was_open = has_open_stream(state)
    release_full_stream(state)

    if state["restore_mode"] == RestoreMode.FULL_STREAM:
        state["stream_phase"] = StreamPhase.DONE

    logger.info(
        "full_restore_aborted",
        session_id=state["session_id"],
        released=was_open,
    )
    return TransportResult.OK
