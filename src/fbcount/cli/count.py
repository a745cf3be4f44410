"""Console script for fbcount (count).

Copyright © 2025 Pixelgen Technologies AB.
"""

from pathlib import Path

import click

from fbcount.cli.common import layout_options, logger, parse_ignore_list
from fbcount.config import CountThresholds, ReadLayout, ReferencePanel
from fbcount.constants import (
    DEFAULT_IGNORED_BARCODES,
    DEFAULT_MIN_CELLS,
    DEFAULT_MIN_READS,
    MAX_EDIT_DISTANCE,
    PROGRESS_INTERVAL,
    UNKNOWN_TOP,
)
from fbcount.count import CountAggregator, CountSummary, StreamDriver
from fbcount.exception import FbcountError
from fbcount.reads import PairedReadReader, Whitelist
from fbcount.resolve import BarcodeResolutionIndex
from fbcount.utils import (
    FASTQ_EXTENSIONS,
    click_echo,
    get_sample_name,
    is_interactive,
    log_step_start,
    sanity_check_inputs,
    timer,
)


@click.command(
    "count",
    short_help="count feature barcodes per cell from paired FASTQ files",
    options_metavar="<options>",
)
@click.argument(
    "r1",
    nargs=1,
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    metavar="R1",
)
@click.argument(
    "r2",
    nargs=1,
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    metavar="R2",
)
@click.option(
    "--csv",
    "panel_file",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="The TotalSeq style feature reference csv file with the antibody barcodes",
)
@click.option(
    "--whitelist",
    default=None,
    required=False,
    type=click.Path(exists=True, dir_okay=False),
    help="The 10X cell barcodes whitelist file",
)
@click.option(
    "-b",
    "--min-reads",
    default=DEFAULT_MIN_READS,
    type=click.IntRange(min=0),
    show_default=True,
    help=(
        "Minimum barcode reads per cell code. Only count the barcodes that are"
        " found more than B times for a cell code"
    ),
)
@click.option(
    "-c",
    "--min-cells",
    default=DEFAULT_MIN_CELLS,
    type=click.IntRange(min=0),
    show_default=True,
    help="Minimum number of cells having an accepted barcode",
)
@click.option(
    "-r",
    "--reads-per-cell",
    default=None,
    type=click.IntRange(min=0),
    help="Only output the barcodes that on average have more than R reads per cell",
)
@click.option(
    "-o",
    "--out",
    default=None,
    type=click.Path(dir_okay=False),
    help="Write the passing barcodes as a feature reference csv for cellranger",
)
@click.option(
    "-x",
    "--ignore",
    default=",".join(DEFAULT_IGNORED_BARCODES),
    type=click.STRING,
    callback=parse_ignore_list,
    show_default=True,
    help="Comma separated barcodes to ignore",
)
@click.option(
    "-u",
    "--unknown",
    is_flag=True,
    default=False,
    help="Count the barcodes not matching the panel and summarize them at the end",
)
@click.option(
    "--unknown-top",
    default=UNKNOWN_TOP,
    type=click.IntRange(min=1),
    show_default=True,
    help="The number of unknown barcodes to summarize",
)
@click.option(
    "-a",
    "--approximate",
    is_flag=True,
    default=False,
    help=(
        f"Count the barcodes allowing a levenshtein distance up to {MAX_EDIT_DISTANCE}"
        " to the panel"
    ),
)
@click.option(
    "--reject-duplicates",
    is_flag=True,
    default=False,
    help="Fail when the panel holds the same barcode more than once",
)
@click.option(
    "--progress-interval",
    default=PROGRESS_INTERVAL,
    type=click.IntRange(min=1),
    show_default=True,
    help="The number of reads between live table updates on a terminal",
)
@click.option(
    "--report",
    default=None,
    type=click.Path(dir_okay=False),
    help="Write a JSON report with the read counters",
)
@layout_options
@timer
def count(
    r1,
    r2,
    panel_file,
    whitelist,
    min_reads,
    min_cells,
    reads_per_cell,
    out,
    ignore,
    unknown,
    unknown_top,
    approximate,
    reject_duplicates,
    progress_interval,
    report,
    cell_code_length,
    barcode_length,
    barcode_offset,
):
    """Count feature barcodes per cell and report the barcodes found in enough cells."""
    log_step_start(
        "count",
        input_files=[r1, r2],
        output=out,
        panel=panel_file,
        whitelist=whitelist,
        min_reads=min_reads,
        min_cells=min_cells,
        reads_per_cell=reads_per_cell,
        approximate=approximate,
        unknown=unknown,
    )

    try:
        sanity_check_inputs([r1, r2], allowed_extensions=FASTQ_EXTENSIONS)
    except AssertionError as exc:
        raise click.ClickException(str(exc)) from exc

    invalid_ignores = sorted(b.decode() for b in ignore if len(b) != barcode_length)
    if invalid_ignores:
        raise click.BadParameter(
            f"barcodes must have length {barcode_length}: {', '.join(invalid_ignores)}",
            param_hint="'--ignore'",
        )

    layout = ReadLayout(
        cell_code_length=cell_code_length,
        barcode_length=barcode_length,
        barcode_offset=barcode_offset,
    )
    thresholds = CountThresholds(
        min_reads=min_reads, min_cells=min_cells, reads_per_cell=reads_per_cell
    )

    try:
        panel = ReferencePanel.from_csv(
            panel_file,
            barcode_length=layout.barcode_length,
            reject_duplicates=reject_duplicates,
        )
        index = BarcodeResolutionIndex.from_panel(panel)
        logger.info("Loaded %d panel barcodes from %s", panel.size, panel_file)

        cell_codes = None
        if whitelist is not None:
            cell_codes = Whitelist.from_path(
                whitelist, cell_code_length=layout.cell_code_length
            )
            logger.info("Loaded %d whitelisted cell codes", len(cell_codes))

        counts = CountAggregator(count_unknown=unknown)
        driver = StreamDriver(
            index,
            counts,
            whitelist=cell_codes,
            ignore=ignore,
            approximate=approximate,
        )
        summary = CountSummary(panel, counts, thresholds)

        interactive = is_interactive()

        def show_progress(n_reads: int) -> None:
            summary.print_matches(clear=True)
            click_echo(f"Examined {n_reads} reads")

        with PairedReadReader(r1, r2, layout) as reader:
            n_reads = driver.run(
                reader,
                progress=show_progress if interactive else None,
                progress_interval=progress_interval,
            )
    except FbcountError as exc:
        raise click.ClickException(str(exc)) from exc

    summary.print_matches(clear=interactive)
    click_echo(f"Examined {n_reads} reads")

    if unknown:
        summary.print_unknown(unknown_top)

    if out is not None:
        summary.write_csv(Path(out))
        logger.info("Passing barcodes written to %s", out)

    if report is not None:
        sample_report = summary.to_report(get_sample_name(r2))
        sample_report.write_json_file(report, indent=4)
        logger.info("Report written to %s", report)
