# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
ziprestore Exceptions - Custom exceptions for the ziprestore package.

Only ProtocolError and ConfigurationError are meant to reach callers of
the pull-call surface; everything else is mapped to a TransportResult.
"""


class ZipRestoreError(Exception):
    """Base exception for all ziprestore errors."""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(ZipRestoreError):
    """Raised when configuration is invalid."""

    pass


class ProtocolError(ZipRestoreError):
    """Raised when a restore operation is called out of sequence."""

    pass


class ArchiveError(ZipRestoreError):
    """Raised when the backup archive cannot be opened or read."""

    pass


class KeyDecodeError(ZipRestoreError):
    """Raised when an encoded record key cannot be decoded."""

    pass


class RecordFormatError(ZipRestoreError):
    """Raised when a record stream is malformed."""

    pass
