"""FixupHTML entry points."""

from __future__ import annotations

import io
from typing import TYPE_CHECKING

from .rewriter import FixupOpts, Rewriter
from .source import CharacterSource
from .tokenizer import Tokenizer, TokenizerOpts

if TYPE_CHECKING:
    from typing import TextIO

    from .tokens import ParseError


def run(
    reader: TextIO,
    writer: TextIO,
    *,
    filename: str | None = None,
    strict: bool = False,
    opts: FixupOpts | None = None,
    tokenizer_opts: TokenizerOpts | None = None,
) -> list[ParseError]:
    """Copy HTML from ``reader`` to ``writer``, applying the fixups.

    Returns the malformed-markup errors found. OSError from either stream
    propagates; output already written is left in place.
    """
    rewriter = Rewriter(writer, filename=filename, strict=strict, opts=opts)
    Tokenizer(rewriter, tokenizer_opts).run(CharacterSource(reader))
    return rewriter.errors


class FixupHTML:
    """Fix up an HTML string in memory.

    >>> FixupHTML('<html xmlns="http://www.w3.org/1999/xhtml">').html
    '<html lang="en">'
    """

    __slots__ = ("errors", "html")

    def __init__(
        self,
        html: str,
        *,
        filename: str | None = None,
        strict: bool = False,
        opts: FixupOpts | None = None,
    ) -> None:
        out = io.StringIO(newline="")
        self.errors = run(io.StringIO(html or "", newline=""), out, filename=filename, strict=strict, opts=opts)
        self.html = out.getvalue()


def fixup(html: str, **kwargs) -> str:
    return FixupHTML(html, **kwargs).html
