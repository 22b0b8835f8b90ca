# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
ziprestore Builder - Functional builder pattern for configuration.

This module provides pure functions for building RestoreConfig objects.
Each function takes a config dict and returns a new dict with the
modification applied (immutable updates).
"""

from pathlib import Path
from typing import Any, Callable, Dict

from ziprestore.config import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_RESTORE_SET_DEVICE,
    DEFAULT_RESTORE_SET_NAME,
    DEFAULT_RESTORE_SET_TOKEN,
    FULL_BACKUP_DIRECTORY,
    INCREMENTAL_BACKUP_DIRECTORY,
    RestoreConfig,
)


# Type alias for builder functions
ConfigDict = Dict[str, Any]
BuilderFunc = Callable[[ConfigDict], ConfigDict]


def create_empty_config() -> ConfigDict:
    """
    Create an initial configuration dictionary.

    Returns:
        Dict with default values for all configuration fields
    """
    return {
        "archive_path": None,
        "chunk_size": DEFAULT_CHUNK_SIZE,
        "incremental_dir": INCREMENTAL_BACKUP_DIRECTORY,
        "full_dir": FULL_BACKUP_DIRECTORY,
        "restore_set_token": DEFAULT_RESTORE_SET_TOKEN,
        "restore_set_name": DEFAULT_RESTORE_SET_NAME,
        "restore_set_device": DEFAULT_RESTORE_SET_DEVICE,
    }


def with_archive(config: ConfigDict, archive_path: Path | str) -> ConfigDict:
    """
    Set the backup archive to restore from.

    Args:
        config: Current configuration dictionary
        archive_path: Path to the zip archive

    Returns:
        New configuration dictionary with archive set
    """
    return {**config, "archive_path": Path(archive_path)}


def with_chunk_size(config: ConfigDict, chunk_size: int) -> ConfigDict:
    """
    Set the maximum number of bytes returned per full-stream chunk.

    Args:
        config: Current configuration dictionary
        chunk_size: Chunk size in bytes

    Returns:
        New configuration dictionary with chunk size set
    """
    return {**config, "chunk_size": chunk_size}


def with_backup_directories(
    config: ConfigDict,
    incremental_dir: str = INCREMENTAL_BACKUP_DIRECTORY,
    full_dir: str = FULL_BACKUP_DIRECTORY,
) -> ConfigDict:
    """
    Set the archive directories for key/value and full-stream data.

    Args:
        config: Current configuration dictionary
        incremental_dir: Directory of incremental (key/value) entries
        full_dir: Directory of full-stream entries

    Returns:
        New configuration dictionary with directories set
    """
    return {**config, "incremental_dir": incremental_dir, "full_dir": full_dir}


def with_restore_set(
    config: ConfigDict,
    name: str,
    device: str = DEFAULT_RESTORE_SET_DEVICE,
    token: int = DEFAULT_RESTORE_SET_TOKEN,
) -> ConfigDict:
    """
    Describe the single restore set advertised to callers.

    Args:
        config: Current configuration dictionary
        name: Human-readable restore set name
        device: Device label of the restore set
        token: Restore set token

    Returns:
        New configuration dictionary with restore set set
    """
    return {
        **config,
        "restore_set_name": name,
        "restore_set_device": device,
        "restore_set_token": token,
    }


def build_config(config_dict: ConfigDict) -> RestoreConfig:
    """
    Build an immutable RestoreConfig from a configuration dictionary.

    Raises:
        ConfigurationError: If the configuration is invalid
    """
    return RestoreConfig(**config_dict)


def pipe(*funcs: BuilderFunc) -> BuilderFunc:
    """
    Compose builder functions left to right.

    Example:
        configure = pipe(
            lambda c: with_archive(c, "/sdcard/backup.zip"),
            lambda c: with_chunk_size(c, 4096),
        )
        config = build_config(configure(create_empty_config()))
    """

    def composed(config: ConfigDict) -> ConfigDict:
        for func in funcs:
            config = func(config)
        return config

    return composed


def build_from_steps(*steps: BuilderFunc) -> RestoreConfig:
    """Apply builder steps to an empty config and build it."""
    return build_config(pipe(*steps)(create_empty_config()))


def create_config(
    archive_path: str | Path | None = None,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    restore_set_name: str | None = None,
    restore_set_device: str | None = None,
    restore_set_token: int | None = None,
    **kwargs: Any,
) -> RestoreConfig:
    """
    Create restore configuration from simple parameters.

    This is the recommended user-facing API for creating configurations.

    Args:
        archive_path: Zip archive to restore from
        chunk_size: Maximum bytes per full-stream chunk (default: 2048)
        restore_set_name: Name of the advertised restore set
        restore_set_device: Device label of the advertised restore set
        restore_set_token: Token of the advertised restore set
        **kwargs: Additional configuration options

    Returns:
        Validated, immutable RestoreConfig instance

    Example:
        config = create_config("/sdcard/backup.zip", chunk_size=4096)
    """
    config_dict = create_empty_config()

    if archive_path:
        config_dict = with_archive(config_dict, archive_path)

    config_dict = with_chunk_size(config_dict, chunk_size)

    if restore_set_name or restore_set_device or restore_set_token:
        config_dict = with_restore_set(
            config_dict,
            restore_set_name or DEFAULT_RESTORE_SET_NAME,
            restore_set_device or DEFAULT_RESTORE_SET_DEVICE,
            restore_set_token or DEFAULT_RESTORE_SET_TOKEN,
        )

    # Apply any additional kwargs
    for key, value in kwargs.items():
        if key in config_dict:
            config_dict[key] = value

    return build_config(config_dict)
