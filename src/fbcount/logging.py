"""Logging setup for fbcount.

Copyright © 2025 Pixelgen Technologies AB.
"""

import logging
import typing
from pathlib import Path

import click

from fbcount.types import PathType


class StyleDict(typing.TypedDict):
    """Style dictionary for kwargs to `click.style`."""

    fg: str


class ColorFormatter(logging.Formatter):
    """Click formatter with colored levels"""

    colors: dict[str, StyleDict] = {
        "debug": StyleDict(fg="blue"),
        "info": StyleDict(fg="green"),
        "warning": StyleDict(fg="yellow"),
        "error": StyleDict(fg="red"),
        "exception": StyleDict(fg="red"),
        "critical": StyleDict(fg="red"),
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format a record with colored level.

        :param record: The record to format.
        :returns str: A formatted log record.
        """
        if not record.exc_info:
            level = record.levelname.lower()
            msg = record.getMessage()
            if level in self.colors:
                timestamp = self.formatTime(record, self.datefmt)
                colored_level = click.style(
                    f"{level.upper():<10}", **self.colors[level]
                )
                prefix = f"{timestamp} [{colored_level}]  "
                msg = "\n".join(prefix + x for x in msg.splitlines())
            return msg
        return logging.Formatter.format(self, record)


class DefaultCliFormatter(logging.Formatter):
    """Plain formatter that only prefixes non-info levels."""

    def format(self, record: logging.LogRecord) -> str:
        """Format a record for CLI output."""
        if not record.exc_info:
            level = record.levelname.lower()
            msg = record.getMessage()

            if level == "info":
                return msg

            return f"{level.upper()}: {msg}"
        return logging.Formatter.format(self, record)


class ClickHandler(logging.Handler):
    """Click logging handler.

    Messages are forwarded to the console using `click.echo`.

    :param use_stderr: Log to sys.stderr instead of sys.stdout.
    """

    def __init__(self, use_stderr: bool = True):
        """Initialize the click handler."""
        super().__init__()
        self._use_stderr = use_stderr

    def emit(self, record: logging.LogRecord) -> None:
        """Echo the formatted record to the console."""
        try:
            msg = self.format(record)
            click.echo(msg, err=self._use_stderr)
        except Exception:
            self.handleError(record)


class LoggingSetup:
    """Configure console and (optional) file logging for a CLI invocation.

    The previous handlers and level of the configured logger are restored
    when the context manager exits.
    """

    def __init__(self, log_file: PathType | None, verbose: bool, logger=None):
        """Initialize the logging setup.

        :param log_file: the filename of the log output
        :param verbose: enable verbose logging and console output
        :param logger: the logger to configure, default is the root logger
        """
        self.log_file = Path(log_file) if log_file is not None else None
        self.verbose = verbose
        self._root_logger = logger or logging.getLogger()
        self._file_handler: logging.FileHandler | None = None
        self._saved_handlers: list[logging.Handler] = []
        self._saved_level = logging.NOTSET

    def initialize(self):
        """Replace the handlers of the logger with the fbcount handlers."""
        self._saved_handlers = list(self._root_logger.handlers)
        self._saved_level = self._root_logger.level

        level = logging.DEBUG if self.verbose else logging.INFO
        handlers: list[logging.Handler] = []

        console_handler = ClickHandler()
        if self.verbose:
            console_handler.setFormatter(ColorFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
        else:
            console_handler.setFormatter(DefaultCliFormatter())
        handlers.append(console_handler)

        if self.log_file:
            self._file_handler = logging.FileHandler(str(self.log_file), mode="w")
            self._file_handler.setFormatter(
                logging.Formatter("%(asctime)s %(name)s %(levelname)-8s %(message)s")
            )
            handlers.append(self._file_handler)

        self._root_logger.setLevel(level)
        self._root_logger.handlers = handlers

    def shutdown(self):
        """Close the log file and restore the previous logging configuration."""
        if self._file_handler is not None:
            self._file_handler.close()
            self._file_handler = None

        self._root_logger.handlers = self._saved_handlers
        self._root_logger.setLevel(self._saved_level)

    def __enter__(self):
        """Enter the context manager.

        This will initialize the logging setup.
        """
        self.initialize()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        """Exit the context manager and restore logging."""
        self.shutdown()
        # Reraise exception higher up the stack
        return False
