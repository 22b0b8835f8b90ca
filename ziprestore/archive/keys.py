# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Record key codec for incremental archive entries.

Record keys may contain characters that are not valid in a path segment,
so each key is stored as URL-safe base64 of its bytes with the padding
stripped.

Keys are arbitrary byte strings. Bytes that are not valid UTF-8 are
carried through ``str`` as surrogate escapes, so they survive a decode and
re-encode unchanged.
"""

import base64
import binascii

from ziprestore.exceptions import KeyDecodeError

# Error handler used whenever a record key crosses between bytes and str
KEY_ERRORS = "surrogateescape"


def encode_record_key(key: str) -> str:
    """
    Encode a record key as a path-safe entry name.

    Args:
        key: Record key as written by the application

    Returns:
        URL-safe base64 without padding
    """
    raw = key.encode("utf-8", KEY_ERRORS)
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def decode_record_key(entry_name: str) -> str:
    """
    Decode an entry name back into the original record key.

    Padding is optional and keys written with the standard base64
    alphabet ('+') decode as well. Key bytes that are not UTF-8 come back
    as surrogate escapes.

    Args:
        entry_name: Last path segment of an incremental entry

    Returns:
        Original record key

    Raises:
        KeyDecodeError: If the name is empty or not valid base64
    """
    if not entry_name:
        raise KeyDecodeError("Empty record key", details={"entry_name": entry_name})

    normalized = entry_name.replace("+", "-").replace("/", "_")
    padded = normalized + "=" * (-len(normalized) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded)
    except (binascii.Error, ValueError) as e:
        raise KeyDecodeError(
            f"Cannot decode record key: {e}",
            details={"entry_name": entry_name},
        )

    return raw.decode("utf-8", KEY_ERRORS)


def record_key_from_path(entry_path: str) -> str:
    """Decode the record key from a full incremental entry path."""
    return decode_record_key(entry_path.rsplit("/", 1)[-1])
