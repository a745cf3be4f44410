"""Whitelist of valid cell codes.

Copyright © 2025 Pixelgen Technologies AB.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from xopen import xopen

from fbcount.constants import DEFAULT_CELL_CODE_LENGTH
from fbcount.exception import WhitelistError
from fbcount.types import CellCode, PathType

logger = logging.getLogger(__name__)


class Whitelist:
    """A set of accepted cell codes."""

    def __init__(self, cell_codes: Iterable[CellCode]):
        """Initialize the whitelist from cell codes."""
        self._cell_codes = frozenset(cell_codes)

    @classmethod
    def from_path(
        cls, path: PathType, cell_code_length: int = DEFAULT_CELL_CODE_LENGTH
    ) -> Whitelist:
        """Load a newline delimited, optionally compressed, whitelist file.

        Blank lines are skipped.

        :param path: the whitelist file
        :param cell_code_length: the required length of every cell code
        :returns: the whitelist
        :raises WhitelistError: if the file cannot be read or holds a cell
            code of the wrong length
        """
        cell_codes = set()

        try:
            with xopen(Path(path), "rb") as fh:
                for line_number, line in enumerate(fh, 1):
                    cell_code = line.strip()
                    if not cell_code:
                        continue
                    if len(cell_code) != cell_code_length:
                        raise WhitelistError(
                            f"Line {line_number}: cell code "
                            f"{cell_code.decode(errors='replace')!r} has length "
                            f"{len(cell_code)}, expected {cell_code_length}",
                            path,
                        )
                    cell_codes.add(cell_code)
        except (EOFError, OSError) as exc:
            raise WhitelistError(f"Could not read whitelist: {exc}", path) from exc

        logger.debug("Loaded %d cell codes from %s", len(cell_codes), path)
        return cls(cell_codes)

    def __contains__(self, cell_code: object) -> bool:
        """Return True if the cell code is whitelisted."""
        return cell_code in self._cell_codes

    def __len__(self) -> int:
        """Return the number of whitelisted cell codes."""
        return len(self._cell_codes)
