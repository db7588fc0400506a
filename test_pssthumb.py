"""
Pytest tests for the pssthumb command line tool
"""

import logging

import pytest

from pss_raster import PLACEHOLDER_HEIGHT, PLACEHOLDER_WIDTH
from pssthumb import main
from test_pss_header import create_test_pss_document


@pytest.fixture
def valid_document(tmp_path):
    pss_file = tmp_path / "valid.pss"
    pss_file.write_bytes(
        create_test_pss_document(2, 1, [bytes([0x00, 0x10, 0x00, 0x20])] * 3)
    )
    return pss_file


class TestMain:
    """Test exit codes and output of the CLI entry point"""

    def test_success_writes_ppm(self, capsys, valid_document):
        assert main([str(valid_document)]) == 0

        out = capsys.readouterr().out
        assert out == "P3\n2 1\n255\n16 16 16\n32 32 32\n"

    def test_outfile(self, tmp_path, valid_document):
        out_file = tmp_path / "out.ppm"

        assert main([str(valid_document), "-o", str(out_file)]) == 0

        assert out_file.read_text().splitlines()[3:] == [
            "16 16 16",
            "32 32 32",
        ]

    def test_no_arguments_prints_usage(self, capsys):
        assert main([]) == 0

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Paintstorm Studio" in captured.err
        assert "Example usage" in captured.err

    @pytest.mark.parametrize(
        "payload",
        [
            b"not a pss document at all, just text padding it out",
            b"\x6a\x87\x01\x00" + b"\x00" * 4 + b"\xff\xff" + b"\x00" * 30,
        ],
    )
    def test_failure_writes_placeholder(self, tmp_path, capsys, payload):
        pss_file = tmp_path / "bad.pss"
        pss_file.write_bytes(payload)

        assert main([str(pss_file)]) == 1

        lines = capsys.readouterr().out.splitlines()
        assert lines[:3] == [
            "P3",
            f"{PLACEHOLDER_WIDTH} {PLACEHOLDER_HEIGHT}",
            "255",
        ]
        assert len(lines) == 3 + PLACEHOLDER_WIDTH * PLACEHOLDER_HEIGHT

    def test_invalid_control_writes_placeholder(self, tmp_path, capsys):
        pss_file = tmp_path / "bad_rle.pss"
        pss_file.write_bytes(
            create_test_pss_document(1, 1, [bytes([0x05, 0x10])] * 3)
        )

        assert main([str(pss_file)]) == 1

        out = capsys.readouterr().out
        assert out.startswith(f"P3\n{PLACEHOLDER_WIDTH} {PLACEHOLDER_HEIGHT}\n")

    def test_missing_file_is_logged(self, tmp_path, capsys, caplog):
        with caplog.at_level(logging.ERROR):
            assert main([str(tmp_path / "missing.pss")]) == 1

        assert "Failed to read" in caplog.text
        assert capsys.readouterr().out.startswith("P3\n")

    def test_memory_error_is_not_caught(self, monkeypatch, valid_document):
        def exhausted(file_path):
            raise MemoryError

        monkeypatch.setattr("pssthumb.read_and_decompress_pss_data", exhausted)

        with pytest.raises(MemoryError):
            main([str(valid_document)])
