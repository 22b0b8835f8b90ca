# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
ziprestore Configuration - Immutable configuration data structures.

All configuration is frozen (immutable) after creation so that a restore
session never sees its settings change between pull calls.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List


# Archive layout used by the backup writer
INCREMENTAL_BACKUP_DIRECTORY = "incremental/"
FULL_BACKUP_DIRECTORY = "full/"

# Bytes handed back per full-stream chunk call
DEFAULT_CHUNK_SIZE = 2048

DEFAULT_RESTORE_SET_TOKEN = 1
DEFAULT_RESTORE_SET_NAME = "Local disk image"
DEFAULT_RESTORE_SET_DEVICE = "flash"


def _validate_directory(directory: str) -> bool:
    """Archive directories must be relative and end with a separator."""
    if not directory or not isinstance(directory, str):
        return False
    if directory.startswith("/") or not directory.endswith("/"):
        return False
    return True


@dataclass(frozen=True)
class RestoreConfig:
    """
    Immutable configuration for restoring from a backup archive.
    """

    # Zip archive on disk (optional when an archive source is passed explicitly)
    archive_path: Path | None = None

    # Maximum bytes per full-stream chunk
    chunk_size: int = DEFAULT_CHUNK_SIZE

    # Directory holding incremental/<package>/<encoded-key> entries
    incremental_dir: str = INCREMENTAL_BACKUP_DIRECTORY

    # Directory holding full/<package> entries
    full_dir: str = FULL_BACKUP_DIRECTORY

    # The single restore set this archive represents
    restore_set_token: int = DEFAULT_RESTORE_SET_TOKEN
    restore_set_name: str = DEFAULT_RESTORE_SET_NAME
    restore_set_device: str = DEFAULT_RESTORE_SET_DEVICE

    def __post_init__(self) -> None:
        """Validate configuration after creation."""
        errors: List[str] = []

        if self.archive_path is not None and not isinstance(self.archive_path, Path):
            # Accept plain strings from callers, store a Path
            object.__setattr__(self, "archive_path", Path(self.archive_path))

        if not isinstance(self.chunk_size, int) or self.chunk_size < 1:
            errors.append(f"chunk_size must be >= 1, got {self.chunk_size}")

        if not _validate_directory(self.incremental_dir):
            errors.append(f"Invalid incremental_dir: {self.incremental_dir!r}, expected 'name/'")

        if not _validate_directory(self.full_dir):
            errors.append(f"Invalid full_dir: {self.full_dir!r}, expected 'name/'")

        if self.incremental_dir == self.full_dir:
            errors.append("incremental_dir and full_dir must differ")

        if not isinstance(self.restore_set_token, int) or self.restore_set_token < 1:
            errors.append(f"restore_set_token must be >= 1, got {self.restore_set_token}")

        if not self.restore_set_name:
            errors.append("restore_set_name must not be empty")

        if errors:
            from ziprestore.exceptions import ConfigurationError

            raise ConfigurationError(
                "Configuration validation failed",
                details={"errors": errors},
            )

    def with_updates(self, **kwargs) -> "RestoreConfig":
        """
        Create a new config with updated values.

        Since the config is frozen, this creates a new instance.
        """
        from dataclasses import asdict

        current = asdict(self)
        current.update(kwargs)
        return RestoreConfig(**current)
