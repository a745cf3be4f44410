"""Tests for the utils module.

Copyright © 2025 Pixelgen Technologies AB.
"""

import logging

import pytest

from fbcount.utils import (
    FASTQ_EXTENSIONS,
    get_sample_name,
    log_step_start,
    sanity_check_inputs,
)


@pytest.mark.parametrize(
    "filename,expected",
    [
        ("sample_R2.fastq.gz", "sample_R2"),
        ("/data/run1/sample.R2.fq", "sample"),
        ("sample", "sample"),
    ],
)
def test_get_sample_name(filename, expected):
    assert get_sample_name(filename) == expected


def test_sanity_check_inputs(tmp_path):
    fastq = tmp_path / "reads.fastq.gz"
    fastq.write_bytes(b"data")

    sanity_check_inputs([fastq], allowed_extensions=FASTQ_EXTENSIONS)
    sanity_check_inputs(str(fastq), allowed_extensions="fastq.gz")


def test_sanity_check_inputs_empty_file(tmp_path):
    fastq = tmp_path / "reads.fastq"
    fastq.write_bytes(b"")

    with pytest.raises(AssertionError, match="is an empty file"):
        sanity_check_inputs(fastq, allowed_extensions=FASTQ_EXTENSIONS)


def test_sanity_check_inputs_missing_file(tmp_path):
    with pytest.raises(AssertionError, match="is not a file"):
        sanity_check_inputs(tmp_path / "reads.fastq")


def test_sanity_check_inputs_wrong_extension(tmp_path):
    path = tmp_path / "reads.bam"
    path.write_bytes(b"data")

    with pytest.raises(AssertionError, match="does not have any of the extensions"):
        sanity_check_inputs([path], allowed_extensions=FASTQ_EXTENSIONS)

    with pytest.raises(AssertionError, match="does not have the extension fastq"):
        sanity_check_inputs([path], allowed_extensions="fastq")


def test_log_step_start(caplog):
    with caplog.at_level(logging.INFO):
        log_step_start(
            "count",
            input_files=["r1.fastq.gz", "r2.fastq.gz"],
            output="out.csv",
            min_reads=5,
        )

    assert "Start fbcount count" in caplog.text
    assert "Input file(s) r1.fastq.gz,r2.fastq.gz" in caplog.text
    assert "Output out.csv" in caplog.text
    assert "Parameters:min-reads=5" in caplog.text
