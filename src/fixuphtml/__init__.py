from .fixup import FixupHTML, fixup, run
from .rewriter import FixupOpts, Rewriter, StrictModeError
from .table import Table
from .tokenizer import Tokenizer, TokenizerOpts
from .tokens import ParseError

__all__ = [
    "FixupHTML",
    "FixupOpts",
    "ParseError",
    "Rewriter",
    "StrictModeError",
    "Table",
    "Tokenizer",
    "TokenizerOpts",
    "fixup",
    "run",
]
