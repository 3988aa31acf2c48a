import re

from .source import CharacterSource
from .tokens import CharacterTokens, CommentToken, Doctype, EOFToken, ParseError, Tag

WHITESPACE = " \t\n\r\f\v"
_ATTR_VALUE_UNQUOTED_TERMINATORS = "\t\n\f\r \"'`=<>"
_DOCTYPE_PATTERN = re.compile(r"doctype\s+html\s?.*", re.IGNORECASE | re.DOTALL)
_CDATA_OPEN = "CDATA["
_SCRIPT = "script"


def _is_name_start(c):
    return c is not None and c.isalpha()


def _is_name_char(c):
    return c is not None and (c.isalnum() or c == "_" or c == "-")


def _decode_attr_value(value):
    # Only the three entities the converter writes into attribute values.
    if "&" not in value:
        return value
    return value.replace("&lt;", "<").replace("&gt;", ">").replace("&amp;", "&")


class TokenizerOpts:
    __slots__ = ("xml",)

    def __init__(self, xml=False):
        self.xml = bool(xml)


class Tokenizer:
    """Single-pass scanner over a :class:`CharacterSource`.

    Tokens are pushed to ``sink.process_token`` as soon as they are recognized.
    Each token carries ``raw``, the exact input consumed since the previous
    token, so a sink that writes every ``raw`` back reproduces the input.
    """

    __slots__ = (
        "in_script",
        "opts",
        "sink",
        "source",
        "tag_start",
        "text_buffer",
        "text_line",
        "xml",
    )

    def __init__(self, sink, opts=None):
        self.sink = sink
        self.opts = opts or TokenizerOpts()
        self.source = None
        self.in_script = False
        self.xml = self.opts.xml
        self.tag_start = 0
        self.text_buffer = []
        self.text_line = 1

    def run(self, source):
        if not isinstance(source, CharacterSource):
            source = CharacterSource(source)
        self.source = source
        self.in_script = False
        self.xml = self.opts.xml
        self.text_buffer.clear()
        self.text_line = 1

        c = source.start()
        while c is not None:
            if c == "<":
                self._flush_text()
                if self.in_script:
                    self._script_end_tag()
                else:
                    self._markup()
            else:
                self._append_text(c)
                source.next()
                if c == "\n":
                    self._flush_text()
            c = source.ch

        self._flush_text()
        self._emit_token(EOFToken(source.line, source.take_pending()))

    # ---------------------
    # Markup
    # ---------------------

    def _markup(self):
        source = self.source
        line = source.line
        self.tag_start = source.pending_length()
        c = source.next()

        if _is_name_start(c):
            matched = self._start_tag(line)
        elif c == "/":
            matched = self._end_tag(line)
        elif c == "!":
            matched = self._markup_declaration(line)
        elif c == "?":
            matched = self._processing_instruction()
        else:
            matched = False

        if not matched:
            # The '<' has been consumed, so scanning always moves forward.
            self._emit_error("bad html")
            self._append_text(source.peek_pending(self.tag_start))

    def _start_tag(self, line):
        source = self.source
        name = self._read_name()
        attrs, spans = self._read_attributes()
        self_closing = False
        if source.ch == "/":
            source.next()
            self_closing = True
        if source.ch != ">":
            return False
        source.next()
        self._emit_token(Tag(Tag.START, name, attrs, self_closing, line, source.take_pending(), spans))
        if name == _SCRIPT:
            self.in_script = True
        return True

    def _end_tag(self, line):
        source = self.source
        if not _is_name_start(source.next()):
            return False
        name = self._read_name()
        self._skip_whitespace()
        if source.ch != ">":
            return False
        source.next()
        self._emit_token(Tag(Tag.END, name, None, False, line, source.take_pending()))
        return True

    def _markup_declaration(self, line):
        source = self.source
        c = source.next()
        if c == "-":
            if source.next() != "-":
                return False
            source.next()
            return self._comment(line)
        if c == "[":
            return self._cdata()
        return self._doctype(line)

    def _comment(self, line):
        # A comment ends at the first '>' preceded by two or more dashes.
        source = self.source
        chars = []
        c = source.ch
        while c is not None:
            dashes = 0
            while c == "-":
                dashes += 1
                chars.append(c)
                c = source.next()
            if dashes >= 2 and c == ">":
                del chars[-2:]
                source.next()
                self._emit_token(CommentToken("".join(chars), line, source.take_pending()))
                return True
            if c is None:
                break
            chars.append(c)
            c = source.next()
        return False

    def _cdata(self):
        source = self.source
        for expected in _CDATA_OPEN:
            if source.next() != expected:
                return False
        brackets = 0
        c = source.next()
        while c is not None:
            if c == "]":
                brackets += 1
            elif c == ">" and brackets >= 2:
                source.next()
                return True
            else:
                brackets = 0
            c = source.next()
        return False

    def _doctype(self, line):
        source = self.source
        chars = []
        c = source.ch
        while c is not None and c != ">":
            chars.append(c)
            c = source.next()
        text = "".join(chars)
        if c != ">" or not _DOCTYPE_PATTERN.fullmatch(text):
            return False
        source.next()
        self._emit_token(Doctype(text, line, source.take_pending()))
        return True

    def _processing_instruction(self):
        source = self.source
        for expected in "xml":
            if source.next() != expected:
                return False
        source.next()
        self._read_attributes()
        if source.ch != "?" or source.next() != ">":
            return False
        source.next()
        self.xml = True
        return True

    def _script_end_tag(self):
        # Inside <script> only the matching end tag is markup.
        source = self.source
        line = source.line
        self.tag_start = source.pending_length()
        if source.next() == "/" and _is_name_start(source.next()):
            if self._read_name() == _SCRIPT:
                self._skip_whitespace()
                if source.ch == ">":
                    source.next()
                    self.in_script = False
                    self._emit_token(Tag(Tag.END, _SCRIPT, None, False, line, source.take_pending()))
                    return
        self._append_text(source.peek_pending(self.tag_start))

    # ---------------------
    # Names and attributes
    # ---------------------

    def _read_name(self):
        source = self.source
        chars = [source.ch]
        c = source.next()
        while _is_name_char(c):
            chars.append(c)
            c = source.next()
        return "".join(chars).lower()

    def _read_attribute_name(self):
        source = self.source
        chars = [source.ch]
        c = source.next()
        while c is not None:
            if _is_name_char(c):
                chars.append(c)
            elif c == ":" and (self.xml or "".join(chars[:3]) == "xml"):
                chars.append(c)
            else:
                break
            c = source.next()
        return "".join(chars).lower()

    def _read_attributes(self):
        source = self.source
        attrs = {}
        spans = {}
        self._skip_whitespace()
        while _is_name_start(source.ch):
            name = self._read_attribute_name()
            self._skip_whitespace()
            value = None
            if source.ch == "=":
                source.next()
                self._skip_whitespace()
                c = source.ch
                chars = []
                if c == '"' or c == "'":
                    quote = c
                    c = source.next()
                    start = self._offset()
                    while c is not None and c != quote:
                        chars.append(c)
                        c = source.next()
                    end = self._offset()
                    value = _decode_attr_value("".join(chars))
                    source.next()
                else:
                    start = self._offset()
                    while c is not None and c not in _ATTR_VALUE_UNQUOTED_TERMINATORS:
                        chars.append(c)
                        c = source.next()
                    end = self._offset()
                    value = "".join(chars)
                spans[name] = (start, end)
                self._skip_whitespace()
            else:
                spans.pop(name, None)
            attrs[name] = value
        return attrs, spans

    def _offset(self):
        return self.source.pending_length() - self.tag_start

    def _skip_whitespace(self):
        source = self.source
        c = source.ch
        while c is not None and c in WHITESPACE:
            c = source.next()

    # ---------------------
    # Emission
    # ---------------------

    def _append_text(self, text):
        if not self.text_buffer:
            self.text_line = self.source.line
        self.text_buffer.append(text)

    def _flush_text(self):
        source = self.source
        if not self.text_buffer:
            if not source.pending_length():
                return
            # Only unreported markup (CDATA, <?xml?>) is pending.
            self.text_line = source.line
        data = "".join(self.text_buffer)
        self.text_buffer.clear()
        self._emit_token(CharacterTokens(data, self.text_line, source.take_pending()))

    def _emit_token(self, token):
        self.sink.process_token(token)

    def _emit_error(self, message):
        self._emit_token(ParseError(message, line=self.source.line))
