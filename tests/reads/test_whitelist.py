"""Tests for the cell code whitelist.

Copyright © 2025 Pixelgen Technologies AB.
"""

import gzip

import pytest

from fbcount.exception import WhitelistError
from fbcount.reads import Whitelist

CELL_1 = "AAAAAAAAAAAAAAAA"
CELL_2 = "CCCCCCCCCCCCCCCC"


def test_whitelist_from_path(tmp_path):
    path = tmp_path / "whitelist.txt"
    path.write_text(f"{CELL_1}\n\n{CELL_2}\n{CELL_1}\n")

    whitelist = Whitelist.from_path(path)

    assert len(whitelist) == 2
    assert CELL_1.encode() in whitelist
    assert b"GGGGGGGGGGGGGGGG" not in whitelist


def test_whitelist_gzip(tmp_path):
    path = tmp_path / "whitelist.txt.gz"
    with gzip.open(path, "wt") as fh:
        fh.write(f"{CELL_1}\n{CELL_2}\n")

    whitelist = Whitelist.from_path(path)

    assert CELL_2.encode() in whitelist


def test_whitelist_wrong_length(tmp_path):
    path = tmp_path / "whitelist.txt"
    path.write_text(f"{CELL_1}\nACGT\n")

    with pytest.raises(WhitelistError) as exc_info:
        Whitelist.from_path(path)

    assert "Line 2: cell code 'ACGT' has length 4, expected 16" in str(exc_info.value)


def test_whitelist_custom_length(tmp_path):
    path = tmp_path / "whitelist.txt"
    path.write_text("ACGT\nTTTT\n")

    assert len(Whitelist.from_path(path, cell_code_length=4)) == 2


def test_whitelist_missing_file(tmp_path):
    with pytest.raises(WhitelistError):
        Whitelist.from_path(tmp_path / "missing.txt")
