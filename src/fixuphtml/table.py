"""Row-header inference for simple tables.

The whole of a ``<table>`` element is buffered as it is read. Once it is
closed, the column whose cells hold the most distinct values is chosen as the
primary column, and in a simple table its ``<td>`` cells are rewritten as
``<th scope="row">`` cells. In case of a tie, a column whose ``<th>`` heading
begins with "name" is preferred, then the leftmost column.

A table is simple unless it contains a nested table, or a cell with a
``rowspan``, ``colspan`` or ``scope`` attribute. Other tables are written back
exactly as they were read.
"""

import logging

from .serialize import merge_style, serialize_end_tag, serialize_start_tag

logger = logging.getLogger(__name__)

ROW_HEADER_LEADING_STYLE = ["font-weight: normal"]
ROW_HEADER_DEFAULT_STYLE = ["text-align: left"]
NON_SIMPLE_CELL_ATTRS = ("rowspan", "colspan", "scope")


class TableEntry:
    """A verbatim fragment of a buffered table.

    ``column`` is set only for the opening tag of a ``td`` cell, ``attrs`` (the
    attributes as written, see :meth:`Tag.source_attrs`) for the opening tag of
    any cell, and ``end_tag`` for a cell's closing tag.
    """

    __slots__ = ("attrs", "column", "end_tag", "html")

    def __init__(self, html, column=None, attrs=None, end_tag=None):
        self.html = html
        self.column = column
        self.attrs = attrs
        self.end_tag = end_tag

    def __repr__(self):
        return f"TableEntry({self.html!r}, column={self.column!r})"


class Table:
    __slots__ = (
        "cell_column",
        "cell_kind",
        "cell_text",
        "columns",
        "depth",
        "entries",
        "line",
        "name_column",
        "next_column",
        "simple",
    )

    def __init__(self, line=None):
        self.simple = True
        self.depth = 0
        self.line = line
        self.entries = []
        # One insertion-ordered set (a dict) of distinct cell texts per column.
        self.columns = []
        self.name_column = None
        self.next_column = 0
        self.cell_kind = None
        self.cell_column = None
        self.cell_text = None

    def mark_not_simple(self, reason):
        if self.simple:
            logger.debug("table at line %s is not simple: %s", self.line, reason)
        self.simple = False

    def start_row(self):
        self.end_cell()
        self.next_column = 0

    def start_cell(self, kind, attrs=None):
        """Open a cell of ``kind`` ('td' or 'th'); returns its column index."""
        self.end_cell()
        if attrs:
            for name in NON_SIMPLE_CELL_ATTRS:
                if name in attrs:
                    self.mark_not_simple(f"<{kind}> has {name}")
                    break
        column = self.next_column
        self.next_column += 1
        self._column(column)
        self.cell_kind = kind
        self.cell_column = column
        self.cell_text = []
        return column

    def end_cell(self):
        if self.cell_text is None:
            return
        text = "".join(self.cell_text).strip()
        if self.cell_kind == "th" and text.lower().startswith("name"):
            self.name_column = self.cell_column
        self.columns[self.cell_column][text] = None
        self.cell_kind = None
        self.cell_column = None
        self.cell_text = None

    def content(self, text):
        if self.cell_text is not None:
            self.cell_text.append(text)

    def add(self, html, column=None, attrs=None, end_tag=None):
        self.entries.append(TableEntry(html, column, attrs, end_tag))

    def primary_column(self):
        best = None
        best_count = -1
        for index, values in enumerate(self.columns):
            count = len(values)
            if count > best_count or (count == best_count and index == self.name_column):
                best = index
                best_count = count
        return best

    def render(self):
        """Yield the buffered fragments, with the primary column promoted."""
        if not self.simple:
            for entry in self.entries:
                yield entry.html
            return

        primary = self.primary_column()
        logger.debug("table at line %s: primary column %s", self.line, primary)
        pending_close = False
        for entry in self.entries:
            if entry.column is not None and entry.column == primary:
                yield row_header_tag(entry.attrs)
                pending_close = True
            elif pending_close and entry.end_tag == "td":
                yield serialize_end_tag("th")
                pending_close = False
            else:
                if entry.attrs is not None:
                    # A new cell began without closing the promoted one.
                    pending_close = False
                yield entry.html

    def _column(self, index):
        columns = self.columns
        while len(columns) <= index:
            columns.append({})
        return columns[index]


def row_header_tag(attrs):
    """Build the ``<th scope="row">`` tag that replaces a ``<td>`` tag.

    ``attrs`` holds the cell's attribute values as written in the source, so
    they are carried over without being decoded and re-encoded.
    """
    attrs = dict(attrs or {})
    style = merge_style(attrs.get("style"), ROW_HEADER_LEADING_STYLE, ROW_HEADER_DEFAULT_STYLE)
    if "style" in attrs:
        attrs["style"] = style
    else:
        attrs = {"style": style, **attrs}
    attrs["scope"] = "row"
    return serialize_start_tag("th", attrs, encoded=True)
