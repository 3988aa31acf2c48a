"""Command-line interface: ``fixuphtml [-o OUTPUT] [INPUT]``.

Reads INPUT (or standard input) and writes the fixed-up HTML to OUTPUT (or
standard output). Line endings are preserved. Problems are reported on
standard error as ``file:line: message``; the exit status is 1 if any were.
"""

from __future__ import annotations

import argparse
import contextlib
import io
import logging
import sys
import traceback
from typing import TYPE_CHECKING

from .fixup import run
from .rewriter import StrictModeError
from .tokens import format_diagnostic

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence
    from typing import TextIO

ENCODING = "utf-8"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fixuphtml",
        description="Fix up HTML generated by pandoc.",
    )
    parser.add_argument("input", nargs="?", help="input file (default: standard input)")
    parser.add_argument("-o", "--output", help="output file (default: standard output)")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="stop at the first malformed markup instead of reporting and continuing",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log rewrite decisions")
    return parser


@contextlib.contextmanager
def _open_input(path: str | None) -> Iterator[TextIO]:
    if path is None:
        reader = io.TextIOWrapper(sys.stdin.buffer, encoding=ENCODING, newline="")
        try:
            yield reader
        finally:
            reader.detach()
        return
    with open(path, encoding=ENCODING, newline="") as reader:
        yield reader


@contextlib.contextmanager
def _open_output(path: str | None) -> Iterator[TextIO]:
    if path is None:
        writer = io.TextIOWrapper(sys.stdout.buffer, encoding=ENCODING, newline="")
        try:
            yield writer
        finally:
            writer.flush()
            writer.detach()
        return
    with open(path, "w", encoding=ENCODING, newline="") as writer:
        yield writer


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        with _open_input(args.input) as reader, _open_output(args.output) as writer:
            errors = run(reader, writer, filename=args.input, strict=args.strict)
    except StrictModeError as exc:
        print(exc, file=sys.stderr)
        return 1
    except OSError as exc:
        print(format_diagnostic(args.input, None, exc), file=sys.stderr)
        return 1
    except Exception:
        traceback.print_exc(file=sys.stderr)
        return 1

    for error in errors:
        print(error, file=sys.stderr)
    return 1 if errors else 0
