"""
Tests for filesystem I/O helpers.
"""

import pytest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


class TestLoadInputFiles:
    """Test building InputFiles from paths."""

    def test_files_keep_argument_order(self, tmp_path):
        from pdf_combine.utils.io import load_input_files

        (tmp_path / "b.pdf").write_bytes(b"%PDF")
        (tmp_path / "a.png").write_bytes(b"png")

        inputs = load_input_files([tmp_path / "b.pdf", tmp_path / "a.png"])

        assert [f.name for f in inputs] == ["b.pdf", "a.png"]
        assert inputs[0].mime_type == "application/pdf"
        assert inputs[1].mime_type == "image/png"
        assert inputs[0].read_bytes() == b"%PDF"

    def test_folder_sorted_and_filtered(self, tmp_path):
        """Folders contribute supported files sorted by name."""
        from pdf_combine.utils.io import load_input_files

        for name in ["c.jpg", "a.pdf", "notes.txt", "b.PNG"]:
            (tmp_path / name).write_bytes(b"data")

        inputs = load_input_files([tmp_path])

        assert [f.name for f in inputs] == ["a.pdf", "b.PNG", "c.jpg"]

    def test_missing_file(self, tmp_path):
        from pdf_combine.utils.io import load_input_files

        with pytest.raises(FileNotFoundError):
            load_input_files([tmp_path / "missing.pdf"])

    def test_unknown_type_has_empty_mime(self, tmp_path):
        from pdf_combine.utils.io import load_input_file

        path = tmp_path / "blob.unknownext"
        path.write_bytes(b"?")

        assert load_input_file(path).mime_type == ""


class TestWriteOutput:

    def test_creates_directory(self, tmp_path):
        from pdf_combine.utils.io import write_output

        path = write_output(b"%PDF-1.7", tmp_path / "out" / "nested", "combined.pdf")

        assert path == tmp_path / "out" / "nested" / "combined.pdf"
        assert path.read_bytes() == b"%PDF-1.7"


class TestFormatBytes:

    @pytest.mark.parametrize("size,expected", [
        (0, "0 B"),
        (512, "512 B"),
        (1024, "1.0 KB"),
        (1536, "1.5 KB"),
        (5 * 1024 * 1024, "5.0 MB"),
        (3 * 1024 ** 3, "3.0 GB"),
    ])
    def test_format(self, size, expected):
        from pdf_combine.utils.io import format_bytes

        assert format_bytes(size) == expected
