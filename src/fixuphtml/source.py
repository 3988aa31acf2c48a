"""Character-at-a-time input for the tokenizer.

The source holds exactly one character of lookahead (``ch``). Every character
the tokenizer moves past is recorded in the pending buffer, so the text of each
token can be handed on verbatim once the token is recognized.
"""

import io

DEFAULT_CHUNK_SIZE = 8192


class CharacterSource:
    __slots__ = ("_chunk", "_chunk_size", "_index", "_pending", "_stream", "ch", "line")

    def __init__(self, stream, chunk_size=DEFAULT_CHUNK_SIZE):
        if isinstance(stream, str):
            stream = io.StringIO(stream, newline="")
        self._stream = stream
        self._chunk_size = chunk_size
        self._chunk = ""
        self._index = 0
        self._pending = []
        self.ch = None
        self.line = 1

    def start(self):
        """Load the first character; returns it, or None for empty input."""
        self.line = 1
        self._pending.clear()
        self.ch = self._read()
        return self.ch

    def next(self):
        """Consume the current character and return the new lookahead (None at EOF).

        OSError from the underlying stream propagates to the caller.
        """
        ch = self.ch
        if ch is None:
            return None
        self._pending.append(ch)
        if ch == "\n":
            self.line += 1
        self.ch = self._read()
        return self.ch

    def take_pending(self):
        """Return the text consumed since the last call, clearing it."""
        if not self._pending:
            return ""
        text = "".join(self._pending)
        self._pending.clear()
        return text

    def pending_length(self):
        return len(self._pending)

    def peek_pending(self, start=0):
        """Return pending text from offset ``start`` without clearing it."""
        return "".join(self._pending[start:])

    def _read(self):
        if self._index >= len(self._chunk):
            self._chunk = self._stream.read(self._chunk_size)
            self._index = 0
            if not self._chunk:
                return None
        c = self._chunk[self._index]
        self._index += 1
        return c
