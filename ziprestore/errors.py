# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Human-friendly error message helpers for ziprestore.

These helpers centralize wording for configuration and call-order errors
so that all modules present consistent, actionable messages.
"""


def explain_missing_archive_env() -> str:
    """
    Explain that the archive path environment variable is missing.
    """

    return (
        "Backup archive is not configured. "
        "Set the ZIPRESTORE_ARCHIVE_PATH environment variable or pass "
        "archive_path=... to create_config()."
    )


def explain_missing_archive_source() -> str:
    """
    Explain that a restore state needs somewhere to read the archive from.
    """

    return (
        "No archive to restore from. "
        "Set archive_path in the configuration or pass archive_source=... "
        "to initialize_restore_state()."
    )


def explain_invalid_int_env(name: str, value: str | None) -> str:
    """
    Explain that an integer environment variable is invalid.
    """

    return f"Invalid {name} value: {value!r}. It must be a positive integer."


def explain_restore_not_started(operation: str) -> str:
    """
    Explain that an operation was called before start_restore().
    """

    return f"{operation}() called before start_restore()."


def explain_restore_already_started() -> str:
    """
    Explain that start_restore() was called twice without finish_restore().
    """

    return "start_restore() called on an active session. Call finish_restore() first."


def explain_no_current_package(operation: str) -> str:
    """
    Explain that no package has been selected yet.
    """

    return f"{operation}() called without a current package. Call next_restore_package() first."


def explain_wrong_restore_mode(operation: str, expected: str, actual: str) -> str:
    """
    Explain that the current package is restored in a different mode.
    """

    return (
        f"{operation}() requires restore mode {expected!r}, "
        f"but the current package uses {actual!r}."
    )
