# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
ziprestore Core - Restore session lifecycle and package iteration.

The caller drives a session with:

    state = initialize_restore_state(config)
    start_restore(state, token, packages)
    while (description := next_restore_package(config, state)) is not NO_MORE_PACKAGES:
        get_restore_data(...)                       # KEY_VALUE, once
        get_next_full_restore_data_chunk(...)       # FULL_STREAM, until NO_MORE_DATA
    finish_restore(state)

abort_full_restore() may be called at any point during a full-stream
transfer. Calls must not be made concurrently on the same state.
"""

from typing import List, Sequence

import structlog

from ziprestore.archive.scanner import ArchiveSource, contains_entry, file_archive_source
from ziprestore.config import RestoreConfig
from ziprestore.errors import explain_missing_archive_source, explain_restore_already_started
from ziprestore.exceptions import ArchiveError, ConfigurationError, ProtocolError
from ziprestore.restore.full_stream import abort_full_restore, release_full_stream
from ziprestore.session import (
    NO_MORE_PACKAGES,
    IteratorPhase,
    RestoreDescription,
    RestoreMode,
    RestoreSet,
    RestoreState,
    StreamPhase,
    TransportResult,
    has_open_stream,
    require_started,
)

logger = structlog.get_logger()


def initialize_restore_state(
    config: RestoreConfig,
    archive_source: ArchiveSource | None = None,
) -> RestoreState:
    """
    Create the state for a new restore session.

    Args:
        config: Restore configuration
        archive_source: Where to read the archive from; defaults to
            config.archive_path on disk

    Returns:
        RestoreState waiting for start_restore()

    Raises:
        ConfigurationError: If there is no archive to read
    """
    from ulid import ULID

    if archive_source is None:
        if config.archive_path is None:
            raise ConfigurationError(explain_missing_archive_source())
        archive_source = file_archive_source(config.archive_path)

    return RestoreState(
        session_id=str(ULID()),
        archive_source=archive_source,
        token=None,
        packages=(),
        package_index=-1,
        phase=IteratorPhase.BEFORE_START,
        restore_mode=RestoreMode.NONE,
        stream_phase=StreamPhase.NOT_STARTED,
        archive=None,
        cursor=None,
        output=None,
        last_error=None,
    )


def start_restore(
    state: RestoreState,
    token: int,
    packages: Sequence[str],
) -> TransportResult:
    """
    Begin restoring the given packages, in order.

    Raises:
        ProtocolError: If the session is already started
    """
    if state["phase"] != IteratorPhase.BEFORE_START:
        raise ProtocolError(explain_restore_already_started())

    state["token"] = token
    state["last_error"] = None
    state["packages"] = tuple(packages)
    state["package_index"] = -1
    state["phase"] = IteratorPhase.ITERATING
    state["restore_mode"] = RestoreMode.NONE
    state["stream_phase"] = StreamPhase.NOT_STARTED

    logger.info(
        "restore_started",
        session_id=state["session_id"],
        token=token,
        packages=len(state["packages"]),
    )
    return TransportResult.OK


def next_restore_package(config: RestoreConfig, state: RestoreState) -> RestoreDescription:
    """
    Select the next package that has data in the archive.

    Incremental data wins over a full stream when a package has both.
    Packages whose lookup fails are logged and skipped.

    Returns:
        RestoreDescription of the selected package, or NO_MORE_PACKAGES
        once the package list is exhausted (and on every call after)

    Raises:
        ProtocolError: If start_restore() has not been called
    """
    require_started(state, "next_restore_package")

    if state["phase"] == IteratorPhase.EXHAUSTED:
        return NO_MORE_PACKAGES

    if has_open_stream(state):
        logger.warning(
            "full_restore_left_open",
            session_id=state["session_id"],
            package=state["packages"][state["package_index"]],
        )
        release_full_stream(state)

    state["restore_mode"] = RestoreMode.NONE
    state["stream_phase"] = StreamPhase.NOT_STARTED
    state["last_error"] = None

    packages = state["packages"]
    while state["package_index"] + 1 < len(packages):
        state["package_index"] += 1
        name = packages[state["package_index"]]

        mode = _classify_package(config, state, name)
        if mode != RestoreMode.NONE:
            state["restore_mode"] = mode
            logger.info(
                "package_selected",
                session_id=state["session_id"],
                package=name,
                index=state["package_index"],
                mode=mode.value,
            )
            return RestoreDescription(package_name=name, mode=mode)

        logger.debug("package_skipped", session_id=state["session_id"], package=name)

    state["phase"] = IteratorPhase.EXHAUSTED
    logger.info("packages_exhausted", session_id=state["session_id"])
    return NO_MORE_PACKAGES


def _classify_package(config: RestoreConfig, state: RestoreState, name: str) -> RestoreMode:
    """Classify a package by looking for its entries in the archive."""
    source = state["archive_source"]
    try:
        if contains_entry(source, f"{config.incremental_dir}{name}/"):
            return RestoreMode.KEY_VALUE

        if contains_entry(source, f"{config.full_dir}{name}", exact=True):
            return RestoreMode.FULL_STREAM

    except ArchiveError as e:
        logger.error(
            "package_lookup_failed",
            session_id=state["session_id"],
            package=name,
            index=state["package_index"],
            error=str(e),
        )

    return RestoreMode.NONE


def finish_restore(state: RestoreState) -> None:
    """
    End the restore session.

    Releases an unfinished full-stream transfer, then returns the state to
    its initial condition so it can be started again.

    Raises:
        ProtocolError: If start_restore() has not been called
    """
    require_started(state, "finish_restore")

    if state["restore_mode"] == RestoreMode.FULL_STREAM:
        abort_full_restore(state)

    state["token"] = None
    state["packages"] = ()
    state["package_index"] = -1
    state["phase"] = IteratorPhase.BEFORE_START
    state["restore_mode"] = RestoreMode.NONE
    state["stream_phase"] = StreamPhase.NOT_STARTED

    logger.info("restore_finished", session_id=state["session_id"])


def get_current_restore_set(config: RestoreConfig, state: RestoreState | None = None) -> int:
    """
    Token of the restore set being restored.

    While a session is started this is the token passed to start_restore();
    otherwise it is the configured token of the archive's restore set.
    """
    if state is not None and state["token"] is not None:
        return state["token"]
    return config.restore_set_token


def get_last_error(state: RestoreState) -> str | None:
    """
    Reason for the last ERROR or PACKAGE_REJECTED result.

    Cleared when a session starts and whenever the next package is selected.
    """
    return state["last_error"]


def get_available_restore_sets(config: RestoreConfig) -> List[RestoreSet]:
    """The archive holds exactly one restore set."""
    return [
        RestoreSet(
            name=config.restore_set_name,
            device=config.restore_set_device,
            token=config.restore_set_token,
        )
    ]
