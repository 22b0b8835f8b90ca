# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
ziprestore Records - Key/value record stream handed to the caller.

Each record is an entity header followed by its data:

    b"Data" | key length (int32 LE) | data size (int32 LE)
    key bytes + NUL, zero-padded to a 4-byte boundary
    data, zero-padded to a 4-byte boundary

There is no terminator; a reader stops at end of stream.
"""

import struct
from typing import BinaryIO, List, NamedTuple

from ziprestore.archive.keys import KEY_ERRORS
from ziprestore.exceptions import RecordFormatError

ENTITY_MAGIC = b"Data"
_HEADER = struct.Struct("<4sii")


class Record(NamedTuple):
    """A single restored key/value record."""

    key: str
    data: bytes


def _padding(length: int) -> bytes:
    return b"\x00" * (-length % 4)


class RecordWriter:
    """Writes key/value records to a binary output stream."""

    def __init__(self, stream: BinaryIO):
        self._stream = stream
        self._pending_size: int | None = None
        self.records_written = 0

    def write_entity_header(self, key: str, data_size: int) -> int:
        """
        Write the header announcing a record.

        Args:
            key: Record key
            data_size: Number of data bytes that follow

        Returns:
            Number of bytes written
        """
        if self._pending_size is not None:
            raise RecordFormatError(
                "Entity header written before previous entity data",
                details={"key": key},
            )
        if data_size < 0:
            raise RecordFormatError(
                "Entity data size must be >= 0",
                details={"key": key, "data_size": data_size},
            )

        key_bytes = key.encode("utf-8", KEY_ERRORS)
        block = _HEADER.pack(ENTITY_MAGIC, len(key_bytes), data_size)
        block += key_bytes + b"\x00" + _padding(len(key_bytes) + 1)
        self._stream.write(block)
        self._pending_size = data_size
        return len(block)

    def write_entity_data(self, data: bytes) -> int:
        """
        Write the data of the record announced by the last header.

        Returns:
            Number of bytes written, padding included
        """
        if self._pending_size is None:
            raise RecordFormatError("Entity data written without a header")
        if len(data) != self._pending_size:
            raise RecordFormatError(
                "Entity data does not match announced size",
                details={"expected": self._pending_size, "actual": len(data)},
            )

        block = bytes(data) + _padding(len(data))
        self._stream.write(block)
        self._pending_size = None
        self.records_written += 1
        return len(block)

    def write_record(self, key: str, data: bytes) -> None:
        self.write_entity_header(key, len(data))
        self.write_entity_data(data)


def _read_exact(stream: BinaryIO, size: int, what: str) -> bytes:
    chunk = stream.read(size)
    if len(chunk) != size:
        raise RecordFormatError(
            f"Truncated record stream while reading {what}",
            details={"expected": size, "actual": len(chunk)},
        )
    return chunk


def read_records(stream: BinaryIO) -> List[Record]:
    """
    Parse a record stream back into records.

    Raises:
        RecordFormatError: If the stream is malformed or truncated
    """
    records: List[Record] = []

    while True:
        header = stream.read(_HEADER.size)
        if not header:
            return records
        if len(header) != _HEADER.size:
            raise RecordFormatError(
                "Truncated entity header",
                details={"offset_records": len(records)},
            )

        magic, key_length, data_size = _HEADER.unpack(header)
        if magic != ENTITY_MAGIC:
            raise RecordFormatError(
                "Bad entity header magic",
                details={"magic": magic, "offset_records": len(records)},
            )
        if key_length < 0 or data_size < 0:
            raise RecordFormatError(
                "Negative entity length",
                details={"key_length": key_length, "data_size": data_size},
            )

        key_block = _read_exact(stream, key_length + 1 + (-(key_length + 1) % 4), "key")
        key = key_block[:key_length].decode("utf-8", KEY_ERRORS)

        data_block = _read_exact(stream, data_size + (-data_size % 4), "data")
        records.append(Record(key=key, data=data_block[:data_size]))
