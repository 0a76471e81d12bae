# Tests for musync.utils.hashing
# Bounded content fingerprints

import pytest

from musync.errors import FileSystemError
from musync.utils.hashing import DEFAULT_PREFIX_BYTES, digest_width, prefix_hash


class TestDigestWidth:
    """Tests for digest_width."""

    def test_sha512(self):
        """Test the default key width."""
        assert digest_width() == 128

    def test_sha256(self):
        """Test width for another algorithm."""
        assert digest_width("sha256") == 64


class TestPrefixHash:
    """Tests for prefix_hash."""

    def test_hex_length(self, temp_dir):
        """Test that the digest is hex of full width."""
        f = temp_dir / "a.flac"
        f.write_bytes(b"hello")
        h = prefix_hash(f)
        assert len(h) == 128
        int(h, 16)

    def test_same_content_same_hash(self, temp_dir):
        """Test identical files at different paths."""
        f1 = temp_dir / "a.flac"
        f2 = temp_dir / "b.flac"
        f1.write_bytes(b"same")
        f2.write_bytes(b"same")
        assert prefix_hash(f1) == prefix_hash(f2)

    def test_different_content_different_hash(self, temp_dir):
        """Test that differing content changes the hash."""
        f1 = temp_dir / "a.flac"
        f2 = temp_dir / "b.flac"
        f1.write_bytes(b"one")
        f2.write_bytes(b"two")
        assert prefix_hash(f1) != prefix_hash(f2)

    def test_empty_file(self, temp_dir):
        """Test hashing an empty file."""
        f = temp_dir / "empty.flac"
        f.write_bytes(b"")
        assert len(prefix_hash(f)) == 128

    def test_only_prefix_is_read(self, temp_dir):
        """Test that bytes past the first MiB are ignored."""
        head = b"x" * DEFAULT_PREFIX_BYTES
        f1 = temp_dir / "a.flac"
        f2 = temp_dir / "b.flac"
        f1.write_bytes(head + b"tail one")
        f2.write_bytes(head + b"tail two")
        assert prefix_hash(f1) == prefix_hash(f2)

    def test_custom_limit(self, temp_dir):
        """Test a smaller prefix limit."""
        f1 = temp_dir / "a.flac"
        f2 = temp_dir / "b.flac"
        f1.write_bytes(b"abcd-1")
        f2.write_bytes(b"abcd-2")
        assert prefix_hash(f1, limit=4) == prefix_hash(f2, limit=4)
        assert prefix_hash(f1, limit=6) != prefix_hash(f2, limit=6)

    def test_small_chunks_match_single_read(self, temp_dir):
        """Test that chunk size does not change the digest."""
        f = temp_dir / "a.flac"
        f.write_bytes(bytes(range(256)) * 100)
        assert prefix_hash(f, chunk_size=7) == prefix_hash(f)

    def test_missing_file_raises(self, temp_dir):
        """Test hashing a missing file."""
        with pytest.raises(FileSystemError) as exc_info:
            prefix_hash(temp_dir / "missing.flac")
        assert exc_info.value.path == temp_dir / "missing.flac"

    def test_directory_raises(self, temp_dir):
        """Test hashing a directory."""
        with pytest.raises(FileSystemError):
            prefix_hash(temp_dir)
