"""Diagnostics setup for the command line tools."""
from __future__ import annotations

import logging
import sys

import click

COLORS = ("auto", "always", "never")


class _ColourFormatter(logging.Formatter):
    COLOURS = {
        logging.DEBUG: "blue",
        logging.INFO: "green",
        logging.WARNING: "yellow",
        logging.ERROR: "red",
        logging.CRITICAL: "magenta",
    }

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        return click.style(message, fg=self.COLOURS.get(record.levelno, "green"))


def _level(verbosity: int) -> int:
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def _use_colour(color: str, stream) -> bool:
    if color == "always":
        return True
    if color == "never":
        return False
    return hasattr(stream, "isatty") and stream.isatty()


def init_logger(verbosity: int = 0, color: str = "auto", stream=None) -> None:
    """Route all diagnostics to one stderr handler at the requested verbosity."""
    if color not in COLORS:
        raise ValueError(f"color must be one of {', '.join(COLORS)}, got {color!r}")
    stream = stream if stream is not None else sys.stderr

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(_level(verbosity))

    fmt = "%(levelname)s: %(message)s" if verbosity < 2 else "%(levelname)s %(name)s: %(message)s"
    handler = logging.StreamHandler(stream)
    if _use_colour(color, stream):
        handler.setFormatter(_ColourFormatter(fmt))
    else:
        handler.setFormatter(logging.Formatter(fmt))
    root.addHandler(handler)
