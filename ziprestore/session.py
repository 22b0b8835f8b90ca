# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
ziprestore Session - Result codes, descriptors and restore session state.

A RestoreState is created per restore session and passed explicitly to
every pull call; nothing is kept in module globals, so independent
sessions can coexist.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import IO, BinaryIO, Tuple, TypedDict

from ziprestore.archive.scanner import ArchiveHandle, ArchiveSource
from ziprestore.errors import (
    explain_no_current_package,
    explain_restore_not_started,
    explain_wrong_restore_mode,
)
from ziprestore.exceptions import ProtocolError


class RestoreMode(str, Enum):
    """How a package's data is handed back to the caller."""

    NONE = "none"  # Not classified yet
    KEY_VALUE = "key_value"  # Discrete (key, bytes) records
    FULL_STREAM = "full_stream"  # One opaque byte stream in chunks


class TransportResult(IntEnum):
    """Result codes returned by the pull calls."""

    OK = 0
    NO_MORE_DATA = -1
    ERROR = -1000
    PACKAGE_REJECTED = -1002


class IteratorPhase(str, Enum):
    """Package iteration progress of a session."""

    BEFORE_START = "before_start"
    ITERATING = "iterating"
    EXHAUSTED = "exhausted"


class StreamPhase(str, Enum):
    """Full-stream transfer progress of the current package."""

    NOT_STARTED = "not_started"
    STREAMING = "streaming"
    DONE = "done"  # Exhausted, rejected, failed or aborted


@dataclass(frozen=True)
class RestoreDescription:
    """A package selected for restore and the mode to restore it in."""

    package_name: str
    mode: RestoreMode


NO_MORE_PACKAGES = RestoreDescription(package_name="", mode=RestoreMode.NONE)


@dataclass(frozen=True)
class RestoreSet:
    """A restore set the caller may choose from."""

    name: str
    device: str
    token: int


class RestoreState(TypedDict):
    """Runtime state of one restore session."""

    session_id: str  # ULID
    archive_source: ArchiveSource
    token: int | None
    packages: Tuple[str, ...]
    package_index: int  # -1 until the first next_restore_package()
    phase: IteratorPhase
    restore_mode: RestoreMode
    stream_phase: StreamPhase
    # Open full-stream resources: all None or all set
    archive: ArchiveHandle | None
    cursor: IO[bytes] | None
    output: BinaryIO | None
    last_error: str | None


def require_started(state: RestoreState, operation: str) -> None:
    """Raise ProtocolError unless start_restore() has been called."""
    if state["phase"] == IteratorPhase.BEFORE_START:
        raise ProtocolError(explain_restore_not_started(operation))


def require_mode(state: RestoreState, operation: str, mode: RestoreMode) -> str:
    """
    Check the call order for a transfer and return the current package.

    Raises:
        ProtocolError: If the session is not started, no package is
            selected, or the current package uses another mode
    """
    require_started(state, operation)

    if state["phase"] != IteratorPhase.ITERATING or state["package_index"] < 0:
        raise ProtocolError(explain_no_current_package(operation))

    if state["restore_mode"] != mode:
        raise ProtocolError(
            explain_wrong_restore_mode(operation, mode.value, state["restore_mode"].value),
            details={"package": state["packages"][state["package_index"]]},
        )

    return state["packages"][state["package_index"]]


def has_open_stream(state: RestoreState) -> bool:
    return state["archive"] is not None
