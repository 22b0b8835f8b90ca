# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Environment-based configuration helpers.

A small wrapper around create_config() that reads the archive location
and restore-set description from well-known environment variables.
"""

from __future__ import annotations

import os

from ziprestore.builder import create_config
from ziprestore.config import DEFAULT_CHUNK_SIZE, RestoreConfig
from ziprestore.errors import explain_invalid_int_env, explain_missing_archive_env
from ziprestore.exceptions import ConfigurationError


def _parse_positive_int(name: str, value: str | None, default: int | None) -> int | None:
    if not value:
        return default
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(explain_invalid_int_env(name, value)) from exc
    if number < 1:
        raise ConfigurationError(explain_invalid_int_env(name, value))
    return number


def create_config_from_env() -> RestoreConfig:
    """
    Create a RestoreConfig from environment variables.

    Required:
        - ZIPRESTORE_ARCHIVE_PATH: Zip archive to restore from

    Optional environment variables:
        - ZIPRESTORE_CHUNK_SIZE: Bytes per full-stream chunk (default: 2048)
        - ZIPRESTORE_RESTORE_SET_TOKEN: Restore set token (default: 1)
        - ZIPRESTORE_RESTORE_SET_NAME: Restore set name (default: "Local disk image")
        - ZIPRESTORE_RESTORE_SET_DEVICE: Restore set device (default: "flash")
    """

    archive_path = os.getenv("ZIPRESTORE_ARCHIVE_PATH")
    if not archive_path:
        raise ConfigurationError(explain_missing_archive_env())

    chunk_size = _parse_positive_int(
        "ZIPRESTORE_CHUNK_SIZE", os.getenv("ZIPRESTORE_CHUNK_SIZE"), DEFAULT_CHUNK_SIZE
    )
    token = _parse_positive_int(
        "ZIPRESTORE_RESTORE_SET_TOKEN", os.getenv("ZIPRESTORE_RESTORE_SET_TOKEN"), None
    )

    return create_config(
        archive_path,
        chunk_size=chunk_size,
        restore_set_name=os.getenv("ZIPRESTORE_RESTORE_SET_NAME"),
        restore_set_device=os.getenv("ZIPRESTORE_RESTORE_SET_DEVICE"),
        restore_set_token=token,
    )
