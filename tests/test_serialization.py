"""Tests for AlphaDets record encoding and file writing."""

import os
import stat
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from serialization.alphadets import (
    record_width,
    integer_to_bytes,
    ci_strs_to_bytes,
    alphadets_filename,
    write_bytestrings_to_file,
    read_alphadets_file,
)


class TestRecordEncoding:
    """Test fixed-width big-endian records."""

    def test_record_width(self):
        assert record_width(1) == 1
        assert record_width(8) == 1
        assert record_width(9) == 2
        assert record_width(16) == 2
        assert record_width(64) == 8

    def test_single_byte(self):
        assert integer_to_bytes(3, 4) == b"\x03"
        assert integer_to_bytes(0, 4) == b"\x00"

    def test_big_endian_with_zero_padding(self):
        """Most significant byte first, unused high bits zero."""
        assert integer_to_bytes(0x1FF, 9) == b"\x01\xff"
        assert integer_to_bytes(1, 12) == b"\x00\x01"
        assert integer_to_bytes(0x0102, 16) == b"\x01\x02"

    def test_full_width(self):
        assert integer_to_bytes(2 ** 64 - 1, 64) == b"\xff" * 8
        assert integer_to_bytes(2 ** 63, 64) == b"\x80" + b"\x00" * 7

    def test_value_too_wide_rejected(self):
        with pytest.raises(ValueError):
            integer_to_bytes(512, 9)
        with pytest.raises(ValueError):
            integer_to_bytes(-1, 8)

    def test_order_preserved(self):
        assert ci_strs_to_bytes([3, 1, 2], 4) == [b"\x03", b"\x01", b"\x02"]


class TestArtifactFile:
    """Test writing and reading AlphaDets files."""

    def test_filename(self, tmp_path):
        assert alphadets_filename("run42", 3) == Path("AlphaDets_run42_3_cpp.bin")
        assert alphadets_filename("run42", 0, directory=tmp_path) == (
            tmp_path / "AlphaDets_run42_0_cpp.bin"
        )

    def test_records_without_delimiters(self, tmp_path):
        path = tmp_path / "dets.bin"
        written = write_bytestrings_to_file(ci_strs_to_bytes([1, 2, 0x1FF], 9), path)

        assert written == path
        assert path.read_bytes() == b"\x00\x01\x00\x02\x01\xff"

    def test_read_back(self, tmp_path):
        path = tmp_path / "dets.bin"
        ci_strs = [0, 5, 1023, 4095]
        write_bytestrings_to_file(ci_strs_to_bytes(ci_strs, 12), path)

        assert read_alphadets_file(path, 12) == ci_strs

    def test_empty_artifact(self, tmp_path):
        path = tmp_path / "dets.bin"
        write_bytestrings_to_file([], path)

        assert path.exists()
        assert path.read_bytes() == b""
        assert read_alphadets_file(path, 4) == []

    def test_overwrite(self, tmp_path):
        """Writing the same path twice keeps the last content."""
        path = tmp_path / "dets.bin"
        write_bytestrings_to_file([b"\x01"], path)
        write_bytestrings_to_file([b"\x02", b"\x03"], path)

        assert path.read_bytes() == b"\x02\x03"

    def test_unwritable_directory(self, tmp_path):
        path = tmp_path / "missing" / "dets.bin"

        with pytest.raises(OSError):
            write_bytestrings_to_file([b"\x01"], path)
        assert not path.exists()

    def test_failed_write_leaves_no_partial_file(self, tmp_path):
        path = tmp_path / "dets.bin"
        write_bytestrings_to_file([b"\x07"], path)

        with pytest.raises(TypeError):
            write_bytestrings_to_file([b"\x01", 2], path)

        # Previous artifact untouched, no temporary files left behind
        assert path.read_bytes() == b"\x07"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["dets.bin"]

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permission bits")
    def test_permissions_follow_umask(self, tmp_path):
        """Artifacts are readable by other users, like files created with open."""
        path = tmp_path / "dets.bin"
        old_umask = os.umask(0o022)
        try:
            write_bytestrings_to_file([b"\x01"], path)
        finally:
            os.umask(old_umask)

        assert stat.S_IMODE(path.stat().st_mode) == 0o644

    def test_truncated_file_rejected(self, tmp_path):
        path = tmp_path / "dets.bin"
        path.write_bytes(b"\x00\x01\x02")

        with pytest.raises(ValueError):
            read_alphadets_file(path, 9)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
