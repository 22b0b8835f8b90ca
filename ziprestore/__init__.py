# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
ziprestore - Restore transport for zip backup archives.

Enumerates the packages that have data in a read-only backup archive and
hands that data back through a caller-driven pull protocol: key/value
records in one call, or a full byte stream one bounded chunk per call.
"""

__version__ = "0.1.0"

# Configuration creation (user-facing API)
from ziprestore.builder import create_config
from ziprestore.config import RestoreConfig
from ziprestore.env import create_config_from_env

# Session lifecycle and package iteration
from ziprestore.core import (
    initialize_restore_state,
    start_restore,
    next_restore_package,
    finish_restore,
    get_current_restore_set,
    get_last_error,
    get_available_restore_sets,
)

# Transfers
from ziprestore.restore import (
    get_restore_data,
    get_next_full_restore_data_chunk,
    abort_full_restore,
)

# Result codes and descriptors
from ziprestore.session import (
    NO_MORE_PACKAGES,
    RestoreDescription,
    RestoreMode,
    RestoreSet,
    RestoreState,
    TransportResult,
)

from ziprestore.records import Record, RecordWriter, read_records

__all__ = [
    # Version
    "__version__",
    # Configuration
    "create_config",
    "create_config_from_env",
    "RestoreConfig",
    # Lifecycle
    "initialize_restore_state",
    "start_restore",
    "next_restore_package",
    "finish_restore",
    "get_current_restore_set",
    "get_last_error",
    "get_available_restore_sets",
    # Transfers
    "get_restore_data",
    "get_next_full_restore_data_chunk",
    "abort_full_restore",
    # Types
    "NO_MORE_PACKAGES",
    "RestoreDescription",
    "RestoreMode",
    "RestoreSet",
    "RestoreState",
    "TransportResult",
    "Record",
    "RecordWriter",
    "read_records",
]
