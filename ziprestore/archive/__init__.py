# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Backup Archive - Entry lookup and record key encoding.
"""

from ziprestore.archive.scanner import (
    ArchiveHandle,
    ArchiveSource,
    contains_entry,
    file_archive_source,
    iter_entries,
    locate_entry,
    open_archive,
)

from ziprestore.archive.keys import (
    decode_record_key,
    encode_record_key,
    record_key_from_path,
)

__all__ = [
    # Scanner
    "ArchiveHandle",
    "ArchiveSource",
    "contains_entry",
    "file_archive_source",
    "iter_entries",
    "locate_entry",
    "open_archive",
    # Keys
    "decode_record_key",
    "encode_record_key",
    "record_key_from_path",
]
