"""
Token and line types for the JLang scanner.

JLang is line-oriented: the atomic unit of parsing is the logical line
(a trimmed, non-empty line of script text). Each statement is classified
by its first whitespace-delimited word, which selects a command kind.
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Optional


class CommandKind(Enum):
    """All statement kinds recognized by the command dispatcher."""

    # --- Output ---
    PRINT = auto()          # print "text" | print @name | print @ARGUMENTS.STRING

    # --- Variables and memory ---
    STRING = auto()         # string name = "value"
    VAL = auto()            # @VAL name = value;
    MAX_MEM = auto()        # MAX_MEM 1024;
    FREE = auto()           # @FREE name

    # --- Directives ---
    REM = auto()            # @REM comment
    STDO = auto()           # @STDO REMOVE
    DEBUG = auto()          # @DEBUG REMOVE
    EXTERNAL = auto()       # @EXTERNAL RUN "other.jlsh"

    # --- Functions ---
    CALL = auto()           # call name[arg1, arg2]

    # --- Windows ---
    NEW = auto()            # @NEW WINDOW { ... } (structural, no-op as a statement)
    UPDATE = auto()         # @UPDATE WINDOW TEXT = "more"

    # --- Special ---
    UNKNOWN = auto()


@dataclass(frozen=True)
class SourceLocation:
    """Position of a logical line (line numbers are scanner-relative)."""
    line: Optional[int] = None      # 1-indexed logical line, None for synthesized lines
    filename: Optional[str] = None

    def __str__(self) -> str:
        if self.line is None:
            return f"{self.filename}:<action>" if self.filename else "<action>"
        if self.filename:
            return f"{self.filename}:{self.line}"
        return f"line {self.line}"


@dataclass(frozen=True)
class LogicalLine:
    """A trimmed, non-empty line of script text."""
    text: str
    location: SourceLocation = SourceLocation()
    source_line: Optional[int] = None   # 1-indexed line in the raw text

    @property
    def line(self) -> Optional[int]:
        return self.location.line

    def __str__(self) -> str:
        return self.text


# Keyword mapping - first word of a statement to its command kind
COMMANDS: dict[str, CommandKind] = {
    "print": CommandKind.PRINT,
    "string": CommandKind.STRING,
    "@VAL": CommandKind.VAL,
    "MAX_MEM": CommandKind.MAX_MEM,
    "@FREE": CommandKind.FREE,
    "@REM": CommandKind.REM,
    "@STDO": CommandKind.STDO,
    "@DEBUG": CommandKind.DEBUG,
    "@EXTERNAL": CommandKind.EXTERNAL,
    "call": CommandKind.CALL,
    "@NEW": CommandKind.NEW,
    "@UPDATE": CommandKind.UPDATE,
}

# Structural block openers, checked before a line becomes a statement
FUNCTION_KEYWORD = "function"
WINDOW_PREFIX = "@NEW WINDOW"

# Typographic quote variants and their ASCII replacements
QUOTE_VARIANTS: dict[str, str] = {
    "“": '"',   # left double quotation mark
    "”": '"',   # right double quotation mark
    "″": '"',   # double prime
    "‘": "'",   # left single quotation mark
    "’": "'",   # right single quotation mark
    "′": "'",   # prime
}


def lookup_command(word: str) -> CommandKind:
    """Map a statement's first word to its command kind."""
    return COMMANDS.get(word, CommandKind.UNKNOWN)


def normalize_quotes(text: str) -> str:
    """Replace curly quotes, apostrophes and primes with straight ASCII quotes."""
    for variant, ascii_quote in QUOTE_VARIANTS.items():
        text = text.replace(variant, ascii_quote)
    return text
