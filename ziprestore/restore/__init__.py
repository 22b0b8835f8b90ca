# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Restore Engines - Key/value record transfer and chunked full-stream transfer.
"""

from ziprestore.restore.key_value import get_restore_data

from ziprestore.restore.full_stream import (
    abort_full_restore,
    get_next_full_restore_data_chunk,
    release_full_stream,
)

__all__ = [
    # Key/value
    "get_restore_data",
    # Full stream
    "abort_full_restore",
    "get_next_full_restore_data_chunk",
    "release_full_stream",
]
