"""The rewrite engine: a token sink that copies its input to a writer.

Every token's raw text is written unchanged unless one of the rules below
replaces it:

``<html>``
    Replaced by ``<html lang="en">``, dropping any XML namespace attributes.

``<main>``
    Inserted before the first palpable content of ``<body>`` that is not inside
    ``article``, ``aside``, ``footer``, ``header`` or ``nav``, and closed again
    when one of those sections starts or the body ends. An explicit ``<main>``
    in the input suppresses insertion.

``<meta name="generator">``
    The ``content`` value is suffixed with ``,fixuphtml``.

``<nav id="TOC">``
    Gains ``title="Table Of Contents"``.

``<table>``
    Buffered whole and passed through :class:`~fixuphtml.table.Table`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .serialize import serialize_attribute, serialize_end_tag, serialize_start_tag
from .table import Table
from .tokenizer import WHITESPACE
from .tokens import CharacterTokens, CommentToken, Doctype, EOFToken, ParseError, Tag, format_diagnostic

if TYPE_CHECKING:
    from typing import Any, TextIO

logger = logging.getLogger(__name__)

SECTION_ELEMENTS = frozenset({"article", "aside", "footer", "header", "nav"})
TABLE_SECTION_ELEMENTS = frozenset({"thead", "tbody"})
CELL_ELEMENTS = frozenset({"td", "th"})
CELL_BOUNDARY_ELEMENTS = frozenset({"thead", "tbody", "tr", "td", "th"})


class StrictModeError(Exception):
    """Raised in strict mode for the first malformed-markup error."""

    def __init__(self, error: ParseError) -> None:
        super().__init__(str(error))
        self.error = error


class FixupOpts:
    __slots__ = ("generator_suffix", "lang", "toc_id", "toc_title")

    def __init__(
        self,
        lang: str = "en",
        generator_suffix: str = "fixuphtml",
        toc_id: str = "TOC",
        toc_title: str = "Table Of Contents",
    ) -> None:
        self.lang = lang
        self.generator_suffix = generator_suffix
        self.toc_id = toc_id
        self.toc_title = toc_title


class DocumentState:
    """Everything the rewriter remembers between tokens of one document.

    ``allow_main`` is false before ``<body>`` and inside sectioning elements;
    ``need_main`` is true from ``<body>`` until a ``<main>`` is found or
    generated; ``need_end_main`` is true while a generated ``<main>`` is open.
    """

    __slots__ = ("allow_main", "need_end_main", "need_main", "section_depth", "table")

    def __init__(self) -> None:
        self.allow_main = False
        self.need_main = False
        self.need_end_main = False
        self.section_depth = 0
        self.table: Table | None = None


class Rewriter:
    __slots__ = ("errors", "filename", "opts", "out", "state", "strict")

    def __init__(
        self,
        out: TextIO,
        *,
        filename: str | None = None,
        strict: bool = False,
        opts: FixupOpts | None = None,
    ) -> None:
        self.out = out
        self.filename = filename
        self.strict = bool(strict)
        self.opts = opts or FixupOpts()
        self.state = DocumentState()
        self.errors: list[ParseError] = []

    def process_token(self, token: Any) -> None:
        token_type = type(token)
        if token_type is Tag:
            if token.kind == Tag.START:
                self._start_tag(token)
            else:
                self._end_tag(token)
        elif token_type is CharacterTokens:
            self._characters(token)
        elif token_type is CommentToken or token_type is Doctype:
            self._write(token.raw)
        elif token_type is ParseError:
            self._parse_error(token)
        elif token_type is EOFToken:
            self._finish(token)

    # ---------------------
    # Token handlers
    # ---------------------

    def _start_tag(self, tag: Tag) -> None:
        state = self.state
        table = state.table
        name = tag.name
        fragment = tag.raw
        column = None
        cell_attrs = None

        if name == "html":
            fragment = serialize_start_tag("html", {"lang": self.opts.lang})
        elif name == "meta":
            fragment = self._generator_meta(tag)
        elif name in SECTION_ELEMENTS:
            self._end_main()
            state.section_depth += 1
            state.allow_main = False
            if name == "nav" and tag.attrs.get("id") == self.opts.toc_id:
                fragment = self._toc_nav(tag)
        elif name == "body":
            state.allow_main = True
            state.need_main = True
        elif name == "main":
            state.need_main = False
        elif name == "table":
            if table is None:
                table = state.table = Table(tag.line)
            else:
                table.mark_not_simple("nested table")
            table.depth += 1
        elif table is not None:
            if name in TABLE_SECTION_ELEMENTS:
                table.end_cell()
            elif name == "tr":
                table.start_row()
            elif name in CELL_ELEMENTS:
                index = table.start_cell(name, tag.attrs)
                cell_attrs = tag.source_attrs()
                if name == "td":
                    column = index

        if name != "body":
            self._start_main()
        self._write(fragment, column, cell_attrs)

    def _end_tag(self, tag: Tag) -> None:
        state = self.state
        table = state.table
        name = tag.name
        end_tag = None

        if name in SECTION_ELEMENTS:
            if state.section_depth > 0:
                state.section_depth -= 1
            if state.section_depth == 0:
                state.allow_main = True
        elif name == "body":
            self._end_main()
            state.allow_main = False
            state.need_main = False
        elif name == "table":
            if table is not None:
                table.depth -= 1
                if table.depth == 0:
                    table.add(tag.raw)
                    state.table = None
                    self._write_table(table)
                    return
        elif name in CELL_BOUNDARY_ELEMENTS and table is not None:
            table.end_cell()
            if name in CELL_ELEMENTS:
                end_tag = name

        self._write(tag.raw, end_tag=end_tag)

    def _characters(self, token: CharacterTokens) -> None:
        table = self.state.table
        if table is not None:
            table.content(token.data)
        elif token.data.strip(WHITESPACE):
            self._start_main()
        self._write(token.raw)

    def _parse_error(self, error: ParseError) -> None:
        error.filename = self.filename
        self.errors.append(error)
        logger.debug("%s", error)
        if self.strict:
            raise StrictModeError(error)

    def _finish(self, eof: EOFToken) -> None:
        table = self.state.table
        if table is not None:
            logger.warning("%s", format_diagnostic(self.filename, table.line, "unterminated table"))
            table.mark_not_simple("unterminated")
            self.state.table = None
            self._write_table(table)
        self._write(eof.raw)

    # ---------------------
    # Rules
    # ---------------------

    def _start_main(self) -> None:
        state = self.state
        if state.allow_main and state.need_main:
            logger.debug("inserting <main>")
            self._write(serialize_start_tag("main", None))
            state.need_main = False
            state.need_end_main = True

    def _end_main(self) -> None:
        state = self.state
        if state.need_end_main:
            self._write(serialize_end_tag("main"))
            state.need_end_main = False

    def _generator_meta(self, tag: Tag) -> str:
        raw = tag.raw
        if tag.attrs.get("name") != "generator":
            return raw
        content = tag.attrs.get("content")
        span = tag.spans.get("content")
        if content is None or span is None:
            return raw
        suffix = "," + self.opts.generator_suffix
        if content.endswith(suffix):
            return raw
        end = span[1]
        return raw[:end] + suffix + raw[end:]

    def _toc_nav(self, tag: Tag) -> str:
        raw = tag.raw
        if "title" in tag.attrs:
            return raw
        end = len(raw) - 1
        if tag.self_closing:
            end -= 1
        return raw[:end] + serialize_attribute("title", self.opts.toc_title) + raw[end:]

    # ---------------------
    # Output
    # ---------------------

    def _write(
        self,
        text: str,
        column: int | None = None,
        attrs: dict[str, str | None] | None = None,
        end_tag: str | None = None,
    ) -> None:
        if not text:
            return
        table = self.state.table
        if table is not None:
            table.add(text, column, attrs, end_tag)
        else:
            self.out.write(text)

    def _write_table(self, table: Table) -> None:
        for fragment in table.render():
            self._write(fragment)
