"""Tests for the reference panel.

Copyright © 2025 Pixelgen Technologies AB.
"""

import io
import logging

import pandas as pd
import pytest

from fbcount.config.panel import ReferencePanel, ReferenceRecord
from fbcount.exception import PanelValidationError

BARCODE_A = "ACGTACGTACGTACG"
BARCODE_B = "TTTTGGGGCCCCAAA"


def test_panel_from_csv(panel_file):
    panel = ReferencePanel.from_csv(panel_file)

    assert panel.size == 2
    assert panel.filename == "panel.csv"
    assert panel.barcode_length == 15
    assert panel.barcodes == [BARCODE_A.encode(), BARCODE_B.encode()]
    assert panel.record(1) == ReferenceRecord(
        id="B_id",
        name="B",
        read="R2",
        pattern="5PNNNNNNNNNN(BC)",
        sequence=BARCODE_B,
        feature_type="Antibody Capture",
    )
    assert panel.record(0).barcode == BARCODE_A.encode()
    assert panel.duplicated_barcodes() == {}


def test_panel_missing_file(tmp_path):
    with pytest.raises(PanelValidationError) as exc_info:
        ReferencePanel.from_csv(tmp_path / "missing.csv")

    assert exc_info.value.errors == ["Panel file not found"]


def test_panel_empty_file(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("")

    with pytest.raises(PanelValidationError) as exc_info:
        ReferencePanel.from_csv(path)

    assert exc_info.value.errors == ["Panel file is empty"]


def test_panel_header_only(write_panel):
    path = write_panel([])

    with pytest.raises(PanelValidationError) as exc_info:
        ReferencePanel.from_csv(path)

    assert exc_info.value.errors == ["Panel file is empty"]


def test_panel_header_mismatch(write_panel):
    path = write_panel(
        [("A_id", "A", BARCODE_A)],
        header="id,name,read,pattern,barcode,feature_type",
    )

    with pytest.raises(PanelValidationError) as exc_info:
        ReferencePanel.from_csv(path)

    assert len(exc_info.value.errors) == 1
    assert exc_info.value.errors[0].startswith("Header error")
    assert "panel.csv" in str(exc_info.value)


def test_panel_wrong_barcode_length(write_panel):
    path = write_panel(
        [
            ("A_id", "A", BARCODE_A),
            ("short_id", "short", "ACGT"),
            ("long_id", "long", BARCODE_B + "A"),
        ]
    )

    with pytest.raises(PanelValidationError) as exc_info:
        ReferencePanel.from_csv(path)

    errors = exc_info.value.errors
    assert len(errors) == 2
    assert errors[0].startswith("Row 2:")
    assert "has length 4, expected 15" in errors[0]
    assert errors[1].startswith("Row 3:")
    assert "has length 16, expected 15" in errors[1]


def test_panel_custom_barcode_length(write_panel):
    path = write_panel([("A_id", "A", "ACGTACGT")])

    panel = ReferencePanel.from_csv(path, barcode_length=8)

    assert panel.barcodes == [b"ACGTACGT"]


def test_panel_duplicates_warn(write_panel, caplog):
    path = write_panel(
        [
            ("A_id", "A", BARCODE_A),
            ("B_id", "B", BARCODE_B),
            ("A2_id", "A2", BARCODE_A),
        ]
    )

    with caplog.at_level(logging.WARNING):
        panel = ReferencePanel.from_csv(path)

    assert panel.duplicated_barcodes() == {BARCODE_A.encode(): [0, 2]}
    assert (
        f"Barcode {BARCODE_A} is found in panel rows 1, 3, only row 3 will be counted"
        in caplog.text
    )


def test_panel_duplicates_rejected(write_panel):
    path = write_panel(
        [
            ("A_id", "A", BARCODE_A),
            ("B_id", "B", BARCODE_B),
            ("A2_id", "A2", BARCODE_A),
        ]
    )

    with pytest.raises(PanelValidationError) as exc_info:
        ReferencePanel.from_csv(path, reject_duplicates=True)

    assert exc_info.value.errors == [
        f"Barcode {BARCODE_A} is duplicated in rows 1, 3"
    ]


def test_panel_from_csv_short_row(tmp_path):
    path = tmp_path / "panel.csv"
    path.write_text(
        "id,name,read,pattern,sequence,feature_type\n"
        f"A_id,A,R2,5PNNNNNNNNNN(BC),{BARCODE_A},Antibody Capture\n"
        f"B_id,B,R2,5PNNNNNNNNNN(BC),{BARCODE_B}\n"
    )

    with pytest.raises(PanelValidationError) as exc_info:
        ReferencePanel.from_csv(path)

    assert exc_info.value.errors == ["Row 2: missing value(s) for feature_type"]


def test_panel_from_csv_empty_fields(tmp_path):
    path = tmp_path / "panel.csv"
    path.write_text(
        "id,name,read,pattern,sequence,feature_type\n"
        f"A_id,,R2,5PNNNNNNNNNN(BC),{BARCODE_A},Antibody Capture\n"
        ",B,R2,5PNNNNNNNNNN(BC),,Antibody Capture\n"
    )

    with pytest.raises(PanelValidationError) as exc_info:
        ReferencePanel.from_csv(path)

    assert exc_info.value.errors == [
        "Row 1: missing value(s) for name",
        "Row 2: missing value(s) for id, sequence",
    ]


def test_panel_not_utf8(tmp_path):
    path = tmp_path / "panel.csv"
    path.write_bytes(b"\xff\xfe\x00garbage\n\x80\x81")

    with pytest.raises(PanelValidationError) as exc_info:
        ReferencePanel.from_csv(path)

    assert exc_info.value.errors[0].startswith("Malformed panel file")
    assert "panel.csv" in str(exc_info.value)


def test_panel_from_dataframe_missing_values():
    df = pd.DataFrame(
        {
            "id": ["A_id"],
            "name": [None],
            "read": ["R2"],
            "pattern": ["5PNNNNNNNNNN(BC)"],
            "sequence": [BARCODE_A],
            "feature_type": ["Antibody Capture"],
        }
    )

    with pytest.raises(PanelValidationError) as exc_info:
        ReferencePanel(df)

    assert exc_info.value.errors == ["Row 1: missing value(s) for name"]


def test_panel_write_csv_sorted_by_id(write_panel):
    path = write_panel(
        [
            ("z_id", "Z", BARCODE_A),
            ("a_id", "A", BARCODE_B),
            ("m_id", "M", "CCCCCCCCCCCCCCC"),
        ]
    )
    panel = ReferencePanel.from_csv(path)

    buf = io.StringIO()
    panel.write_csv([0, 1], buf)

    assert buf.getvalue() == (
        "id,name,read,pattern,sequence,feature_type\n"
        f"a_id,A,R2,5PNNNNNNNNNN(BC),{BARCODE_B},Antibody Capture\n"
        f"z_id,Z,R2,5PNNNNNNNNNN(BC),{BARCODE_A},Antibody Capture\n"
    )


def test_panel_write_csv_no_rows(panel_file, tmp_path):
    panel = ReferencePanel.from_csv(panel_file)
    out = tmp_path / "out.csv"

    panel.write_csv([], out)

    assert out.read_text() == "id,name,read,pattern,sequence,feature_type\n"
