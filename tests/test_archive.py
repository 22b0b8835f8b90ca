# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Archive Tests for ziprestore.

Covers record key encoding and entry lookup in the backup archive.
"""

import zipfile
from pathlib import Path

import pytest

from ziprestore.archive import (
    contains_entry,
    decode_record_key,
    encode_record_key,
    file_archive_source,
    iter_entries,
    locate_entry,
    open_archive,
    record_key_from_path,
)
from ziprestore.exceptions import ArchiveError, KeyDecodeError

from tests.conftest import (
    FULL_PACKAGE,
    FULL_PAYLOAD,
    KV_PACKAGE,
    PipeSource,
    TrackingSource,
    build_archive,
    kv_entry,
)


# ============================================================================
# Record key codec
# ============================================================================

def test_encoded_key_is_path_safe():
    """Encoded keys never contain separators or padding."""
    key = "settings/ui?theme=dark&x=éè>>"

    encoded = encode_record_key(key)

    assert "/" not in encoded
    assert "=" not in encoded
    assert "+" not in encoded
    assert decode_record_key(encoded) == key


def test_encode_uses_url_safe_alphabet():
    # "?>>" is "Pz4+" in the standard alphabet
    assert encode_record_key("?>>") == "Pz4-"


def test_decode_accepts_standard_alphabet_and_padding():
    assert decode_record_key("Pz4+") == "?>>"
    assert decode_record_key("UmVzdG9yZSBLZXk=") == "Restore Key"
    assert decode_record_key("UmVzdG9yZSBLZXk") == "Restore Key"


@pytest.mark.parametrize("name", ["", "A", "abcde"])
def test_decode_rejects_invalid_names(name: str):
    """Empty names and impossible base64 lengths are errors."""
    with pytest.raises(KeyDecodeError):
        decode_record_key(name)


def test_decode_keeps_non_utf8_key_bytes():
    """Keys are raw bytes; invalid UTF-8 survives decode and re-encode."""
    key = decode_record_key("__5rZXk")

    assert key.encode("utf-8", "surrogateescape") == b"\xff\xfekey"
    assert encode_record_key(key) == "__5rZXk"


def test_record_key_from_path_uses_last_segment():
    path, _ = kv_entry(KV_PACKAGE, "Restore Key", b"")
    assert record_key_from_path(path) == "Restore Key"


# ============================================================================
# Entry lookup
# ============================================================================

def test_locate_entry_returns_first_match_in_archive_order():
    data = build_archive(
        [
            ("full/other", b"x"),
            ("incremental/pkg/b", b"1"),
            ("incremental/pkg/a", b"2"),
        ]
    )

    with open_archive(TrackingSource(data)) as archive:
        match = locate_entry(archive, "incremental/pkg/")

    assert match is not None
    index, info = match
    assert index == 1
    assert info.filename == "incremental/pkg/b"


def test_locate_entry_resumes_from_start_position():
    data = build_archive([("incremental/pkg/a", b"1"), ("incremental/pkg/b", b"2")])

    with open_archive(TrackingSource(data)) as archive:
        index, _ = locate_entry(archive, "incremental/pkg/")
        second = locate_entry(archive, "incremental/pkg/", start=index + 1)
        third = locate_entry(archive, "incremental/pkg/", start=second[0] + 1)

    assert second[1].filename == "incremental/pkg/b"
    assert third is None


def test_exact_lookup_does_not_match_longer_names():
    data = build_archive([("full/com.example.app2", b"x")])

    with open_archive(TrackingSource(data)) as archive:
        assert locate_entry(archive, "full/com.example.app", exact=True) is None
        assert locate_entry(archive, "full/com.example.app") is not None


def test_directory_entries_are_skipped():
    data = build_archive([("incremental/pkg/", b""), ("incremental/pkg/a", b"1")])

    with open_archive(TrackingSource(data)) as archive:
        index, info = locate_entry(archive, "incremental/pkg/")

    assert info.filename == "incremental/pkg/a"
    assert index == 1


def test_iter_entries_yields_only_the_package_directory(sample_archive: bytes):
    with open_archive(TrackingSource(sample_archive)) as archive:
        names = [info.filename for info in iter_entries(archive, f"incremental/{KV_PACKAGE}/")]

    assert names == [
        kv_entry(KV_PACKAGE, "first", b"")[0],
        kv_entry(KV_PACKAGE, "second", b"")[0],
    ]


def test_read_entry_returns_payload(sample_archive: bytes):
    with open_archive(TrackingSource(sample_archive)) as archive:
        _, info = locate_entry(archive, f"full/{FULL_PACKAGE}", exact=True)
        payload = archive.read_entry(info)

    assert len(payload) == info.file_size


# ============================================================================
# Handle lifetime
# ============================================================================

def test_contains_entry_closes_its_handle(sample_archive: bytes):
    source = TrackingSource(sample_archive)

    assert contains_entry(source, f"incremental/{KV_PACKAGE}/") is True
    assert contains_entry(source, "full/missing", exact=True) is False

    assert len(source.opened) == 2
    assert source.open_streams == []


def test_every_lookup_uses_a_fresh_stream(sample_archive: bytes):
    source = TrackingSource(sample_archive)

    with open_archive(source) as first, open_archive(source) as second:
        assert first is not second
        assert source.opened[0] is not source.opened[1]


def test_open_archive_rejects_non_zip_and_closes_stream():
    source = TrackingSource(b"definitely not a zip archive")

    with pytest.raises(ArchiveError):
        open_archive(source)

    assert source.open_streams == []


def test_open_archive_wraps_source_failures():
    def broken_source():
        raise OSError("permission denied")

    with pytest.raises(ArchiveError):
        open_archive(broken_source)


def test_close_is_idempotent(sample_archive: bytes):
    archive = open_archive(TrackingSource(sample_archive))
    archive.close()
    archive.close()
    assert archive.closed


def test_file_archive_source_reads_from_disk(temp_dir: Path, sample_archive: bytes):
    path = temp_dir / "backup.zip"
    path.write_bytes(sample_archive)

    source = file_archive_source(path)

    assert contains_entry(source, f"full/{FULL_PACKAGE}", exact=True)
    stream = source()
    try:
        assert zipfile.is_zipfile(stream)
    finally:
        stream.close()


# ============================================================================
# Sequential sources
# ============================================================================

def test_open_archive_reads_non_seekable_source(sample_archive: bytes):
    source = PipeSource(sample_archive)

    with open_archive(source) as archive:
        assert locate_entry(archive, f"incremental/{KV_PACKAGE}/") is not None
        match = locate_entry(archive, f"full/{FULL_PACKAGE}", exact=True)
        assert archive.read_entry(match[1]) == FULL_PAYLOAD

    assert source.open_streams == []


def test_non_seekable_source_stream_closed_once_copied(sample_archive: bytes):
    source = PipeSource(sample_archive)

    archive = open_archive(source)
    try:
        assert source.open_streams == []
        assert contains_entry(source, f"full/{FULL_PACKAGE}", exact=True)
    finally:
        archive.close()


def test_non_seekable_non_zip_is_rejected():
    source = PipeSource(b"definitely not a zip archive")

    with pytest.raises(ArchiveError):
        open_archive(source)

    assert source.open_streams == []
