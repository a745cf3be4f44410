"""Common click CLI helpers for the fbcount CLI.

Copyright © 2025 Pixelgen Technologies AB.
"""

import functools
import logging

import click

from fbcount.constants import (
    DEFAULT_BARCODE_LENGTH,
    DEFAULT_BARCODE_OFFSET,
    DEFAULT_CELL_CODE_LENGTH,
)

logger = logging.getLogger("fbcount.cli")


def layout_options(func):
    """Decorate a click command and add the read layout options."""

    @click.option(
        "--cell-code-length",
        default=DEFAULT_CELL_CODE_LENGTH,
        type=click.IntRange(min=1),
        show_default=True,
        help="The length of the cell code at the start of read 1",
    )
    @click.option(
        "--barcode-length",
        default=DEFAULT_BARCODE_LENGTH,
        type=click.IntRange(min=1),
        show_default=True,
        help="The length of the feature barcode in read 2",
    )
    @click.option(
        "--barcode-offset",
        default=DEFAULT_BARCODE_OFFSET,
        type=click.IntRange(min=0),
        show_default=True,
        help="The start position of the feature barcode in read 2",
    )
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        return func(*args, **kwargs)

    return wrapper


def parse_ignore_list(ctx, param, value):
    """Parse a comma separated list of barcodes into a set of bytes.

    :param ctx: The click context
    :param param: The click parameter
    :param value: The click value
    :returns: The barcodes as a frozenset of bytes
    """
    if value is None:
        return frozenset()
    try:
        return frozenset(
            barcode.strip().encode("ascii")
            for barcode in value.split(",")
            if barcode.strip()
        )
    except UnicodeEncodeError:
        raise click.BadParameter("barcodes must only contain ASCII characters")
