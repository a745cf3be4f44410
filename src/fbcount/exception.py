"""
This module contains all the exception classes defined by fbcount.

Copyright © 2025 Pixelgen Technologies AB.
"""

from pathlib import Path
from typing import Optional, Sequence, Union


class FbcountError(Exception):
    """Base class for all fbcount errors."""


class InputValidationError(FbcountError):
    """
    Class to manage invalid input files.

    Attributes:
        msg: the error message to output
        fname: the name of the offending file
    """

    def __init__(self, msg: str, fname: Optional[Union[str, Path]] = None):
        super().__init__(msg)
        self.msg = msg
        self.fname = fname

    def __str__(self) -> str:
        if self.fname is None:
            return self.msg
        return f"{self.fname}: {self.msg}"


class PanelValidationError(InputValidationError):
    """
    Class to manage reference panel files that fail validation.

    Attributes:
        errors: the individual validation errors
    """

    def __init__(
        self,
        errors: Sequence[str],
        fname: Optional[Union[str, Path]] = None,
    ):
        self.errors = list(errors)
        msg_str = "\n".join(self.errors)
        super().__init__(
            f"The following errors were found validating the panel:\n{msg_str}",
            fname,
        )


class WhitelistError(InputValidationError):
    """Class to manage invalid cell code whitelist files."""


class ReadPairError(FbcountError):
    """
    Class to manage malformed or truncated paired read files.

    Attributes:
        msg: the error message to output
        read_number: the 1-based number of the offending read pair
    """

    def __init__(self, msg: str, read_number: Optional[int] = None):
        super().__init__(msg)
        self.msg = msg
        self.read_number = read_number

    def __str__(self) -> str:
        if self.read_number is None:
            return self.msg
        return f"Read pair {self.read_number}: {self.msg}"
