"""Read and write Falcon pilot logbooks."""
from __future__ import annotations

import logging
from contextlib import contextmanager

import click

from .errors import LogbookError, LogbookIOError
from .layout import encode, read_logbook
from .logsetup import COLORS, init_logger
from .record import LogbookRecord
from .textform import dumps, loads

log = logging.getLogger("falcon_logbook")

STDIO = "-"


def _display(path: str) -> str:
    return "<stdin/stdout>" if path == STDIO else path


@contextmanager
def _fatal_on_error(path: str):
    # Fail closed with a single-line reason; no partial output is kept.
    try:
        yield
    except LogbookError as e:
        log.error("FATAL: %s: %s", _display(path), e)
        raise SystemExit(1)


def _open(path: str, mode: str, **kw):
    try:
        return click.open_file(path, mode, **kw)
    except OSError as e:
        raise LogbookIOError(f"Couldn't open ({e.strerror})", _display(path)) from e


def _write_output(path: str, payload, binary: bool) -> None:
    mode = "wb" if binary else "w"
    kw = {} if binary else {"encoding": "utf-8"}
    try:
        with _open(path, mode, atomic=path != STDIO, **kw) as f:
            f.write(payload)
    except OSError as e:
        raise LogbookIOError(f"Couldn't write ({e.strerror})", _display(path)) from e
    log.info("Wrote %s", _display(path))


@click.group()
@click.option("-v", "--verbose", count=True, help="Verbosity (-v, -vv, -vvv, etc.)")
@click.option("--color", type=click.Choice(COLORS), default="auto", show_default=True,
              help="Colour diagnostics on stderr")
def main(verbose: int, color: str) -> None:
    """Read and write Falcon logbooks."""
    init_logger(verbose, color)


@main.command("read")
@click.argument("source", default=STDIO)
@click.option("-o", "--output", default=STDIO, show_default=True, help="JSON destination")
@click.option("--pretty", is_flag=True, help="Indent the JSON output")
def read_cmd(source: str, output: str, pretty: bool) -> None:
    """Decode the logbook at SOURCE ('-' for stdin) to JSON."""
    with _fatal_on_error(source):
        try:
            with _open(source, "rb") as f:
                book = read_logbook(f)
        except OSError as e:
            raise LogbookIOError(f"Couldn't read ({e.strerror})", _display(source)) from e
        log.info("Decoded logbook for %s (%s)", book.callsign, book.rank.name)
    with _fatal_on_error(output):
        _write_output(output, dumps(book, pretty=pretty) + "\n", binary=False)


@main.command("write")
@click.argument("source", default=STDIO)
@click.option("-o", "--output", default=STDIO, show_default=True, help="Logbook destination")
def write_cmd(source: str, output: str) -> None:
    """Encode the JSON logbook at SOURCE ('-' for stdin) to the binary format."""
    with _fatal_on_error(source):
        try:
            with _open(source, "r", encoding="utf-8") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise LogbookIOError(f"Couldn't read ({e})", _display(source)) from e
        data = encode(loads(text, source=_display(source)))
    with _fatal_on_error(output):
        _write_output(output, data, binary=True)


@main.command("create-default")
@click.argument("name")
@click.argument("callsign")
@click.option("-p", "--password", default="", help="Pilot password (at most 10 characters)")
@click.option("-o", "--output", default=STDIO, show_default=True, help="Logbook destination")
def create_cmd(name: str, callsign: str, password: str, output: str) -> None:
    """Write a fresh logbook for NAME / CALLSIGN commissioned today."""
    with _fatal_on_error(output):
        book = LogbookRecord.create_default(name, callsign, password)
        data = encode(book)
        log.info("Created logbook for %s, commissioned %s", book.callsign, book.commissioned)
        _write_output(output, data, binary=True)


if __name__ == "__main__":
    main()
