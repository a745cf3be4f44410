"""Configuration and shared files/objects for the testing framework.

Copyright © 2025 Pixelgen Technologies AB.
"""

from pathlib import Path

import pytest
from xopen import xopen

PANEL_HEADER = "id,name,read,pattern,sequence,feature_type"
PANEL_PATTERN = "5PNNNNNNNNNN(BC)"
FEATURE_TYPE = "Antibody Capture"

BARCODE_A = "ACGTACGTACGTACG"
BARCODE_B = "TTTTGGGGCCCCAAA"

# 10 bases in front of the feature barcode in read 2
R2_PREFIX = "GCTCACCTAT"
R2_SUFFIX = "GCTTTAAGGCCGGTCC"
R1_UMI = "ACGTTGCAACGT"


def make_cell_code(i: int) -> str:
    """Return a unique 16 base cell code for an integer."""
    return f"{i:016b}".replace("0", "A").replace("1", "C")


@pytest.fixture(name="cell_code")
def cell_code_fixture():
    """Return the function making unique 16 base cell codes."""
    return make_cell_code


@pytest.fixture(name="write_panel")
def write_panel_fixture(tmp_path):
    """Return a function writing a panel csv from (id, name, sequence) rows."""

    def _write(rows, header: str = PANEL_HEADER, name: str = "panel.csv") -> Path:
        path = tmp_path / name
        lines = [header]
        for id_, feature_name, sequence in rows:
            lines.append(
                f"{id_},{feature_name},R2,{PANEL_PATTERN},{sequence},{FEATURE_TYPE}"
            )
        path.write_text("\n".join(lines) + "\n")
        return path

    return _write


@pytest.fixture(name="panel_file")
def panel_file_fixture(write_panel) -> Path:
    """Write a panel with two barcodes, A at index 0 and B at index 1."""
    return write_panel([("A_id", "A", BARCODE_A), ("B_id", "B", BARCODE_B)])


@pytest.fixture(name="write_fastq_pair")
def write_fastq_pair_fixture(tmp_path):
    """Return a function writing read 1 and read 2 FASTQ files.

    Read 1 holds the cell code followed by a UMI and read 2 holds the feature
    barcode at offset 10.
    """

    def _write(pairs, prefix: str = "sample", suffix: str = ".fastq.gz"):
        r1 = tmp_path / f"{prefix}_R1{suffix}"
        r2 = tmp_path / f"{prefix}_R2{suffix}"
        with xopen(r1, "wt") as f1, xopen(r2, "wt") as f2:
            for i, (cell, barcode) in enumerate(pairs):
                seq1 = cell + R1_UMI
                seq2 = R2_PREFIX + barcode + R2_SUFFIX
                f1.write(f"@read{i} 1:N:0\n{seq1}\n+\n{'I' * len(seq1)}\n")
                f2.write(f"@read{i} 2:N:0\n{seq2}\n+\n{'I' * len(seq2)}\n")
        return r1, r2

    return _write


@pytest.fixture(name="scenario_pairs")
def scenario_pairs_fixture():
    """60 reads of barcode A from 6 cells and 40 reads of barcode B from 1 cell."""
    pairs = []
    for i in range(6):
        pairs.extend([(make_cell_code(i), BARCODE_A)] * 10)
    pairs.extend([(make_cell_code(100), BARCODE_B)] * 40)
    return pairs
