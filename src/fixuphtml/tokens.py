class Tag:
    __slots__ = ("attrs", "kind", "line", "name", "raw", "self_closing", "spans")

    START = 0
    END = 1

    def __init__(self, kind, name, attrs=None, self_closing=False, line=None, raw="", spans=None):
        self.kind = kind
        self.name = name
        self.attrs = attrs if attrs is not None else {}
        self.self_closing = bool(self_closing)
        self.line = line
        self.raw = raw
        # attribute name -> (start, end) offsets of its value within raw
        self.spans = spans if spans is not None else {}

    def source_attrs(self):
        """Attributes with each value as written in the source, references left encoded."""
        raw = self.raw
        attrs = {}
        for name, value in self.attrs.items():
            span = self.spans.get(name)
            attrs[name] = raw[span[0] : span[1]] if span is not None else value
        return attrs

    def __repr__(self):
        if self.attrs:
            attrs = " " + " ".join(f"{name}={value!r}" for name, value in self.attrs.items())
        else:
            attrs = ""
        closing = " /" if self.self_closing else ""
        kind_str = "start" if self.kind == self.START else "end"
        return f"<{kind_str}:{self.name}{closing}{attrs}>"


class CharacterTokens:
    __slots__ = ("data", "line", "raw")

    def __init__(self, data, line=None, raw=None):
        self.data = data
        self.line = line
        self.raw = data if raw is None else raw


class CommentToken:
    __slots__ = ("data", "line", "raw")

    def __init__(self, data, line=None, raw=""):
        self.data = data
        self.line = line
        self.raw = raw


class Doctype:
    __slots__ = ("data", "line", "raw")

    def __init__(self, data, line=None, raw=""):
        self.data = data
        self.line = line
        self.raw = raw


class EOFToken:
    __slots__ = ("line", "raw")

    def __init__(self, line=None, raw=""):
        self.line = line
        self.raw = raw


class ParseError:
    """A malformed-markup diagnostic, with the file and line it was found on."""

    __slots__ = ("code", "filename", "line", "message")

    def __init__(self, code, line=None, message=None, filename=None):
        self.code = code
        self.line = line
        self.message = message or code
        self.filename = filename

    def __repr__(self):
        if self.line is not None:
            return f"ParseError({self.code!r}, line={self.line})"
        return f"ParseError({self.code!r})"

    def __str__(self):
        return format_diagnostic(self.filename, self.line, self.message)

    def __eq__(self, other):
        if not isinstance(other, ParseError):
            return NotImplemented
        return self.code == other.code and self.line == other.line and self.filename == other.filename

    __hash__ = None  # Unhashable since we define __eq__


def format_diagnostic(filename, line, message):
    """Render a diagnostic as ``file:line: message``, or ``file: message`` without a line."""
    location = str(filename) if filename is not None else "<stdin>"
    if line is not None and line > 0:
        location = f"{location}:{line}"
    return f"{location}: {message}"
