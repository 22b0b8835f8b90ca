# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
ziprestore Key/Value Restore - One-shot transfer of incremental records.

All records of the current package are written to the caller's output in
a single call. Records already written when a failure occurs are not
retracted.
"""

from typing import BinaryIO

import structlog

from ziprestore.archive.keys import record_key_from_path
from ziprestore.archive.scanner import iter_entries, open_archive
from ziprestore.config import RestoreConfig
from ziprestore.records import RecordWriter
from ziprestore.session import RestoreMode, RestoreState, TransportResult, require_mode

logger = structlog.get_logger()


def get_restore_data(
    config: RestoreConfig,
    state: RestoreState,
    output: BinaryIO,
) -> TransportResult:
    """
    Write every key/value record of the current package to ``output``.

    Entries under ``incremental/<package>/`` are visited in archive order.
    For each one the record key is decoded from the entry name, the
    payload is read fully and written as one record (header, then data).

    Args:
        config: Restore configuration
        state: Restore session state
        output: Writable binary stream receiving the record stream

    Returns:
        TransportResult.OK, or TransportResult.ERROR if reading the
        archive or writing a record failed

    Raises:
        ProtocolError: If the current package is not a key/value package
    """
    package = require_mode(state, "get_restore_data", RestoreMode.KEY_VALUE)
    prefix = f"{config.incremental_dir}{package}/"
    writer = RecordWriter(output)

    try:
        with open_archive(state["archive_source"]) as archive:
            for info in iter_entries(archive, prefix):
                key = record_key_from_path(info.filename)
                data = archive.read_entry(info)

                writer.write_entity_header(key, len(data))
                writer.write_entity_data(data)

                logger.debug(
                    "record_restored",
                    session_id=state["session_id"],
                    package=package,
                    key=key,
                    size=len(data),
                )

    except Exception as e:
        state["last_error"] = str(e)
        logger.error(
            "key_value_restore_failed",
            session_id=state["session_id"],
            package=package,
            records_written=writer.records_written,
            error=str(e),
        )
        return TransportResult.ERROR

    logger.info(
        "key_value_restore_completed",
        session_id=state["session_id"],
        package=package,
        records=writer.records_written,
    )
    return TransportResult.OK
