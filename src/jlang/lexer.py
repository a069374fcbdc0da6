"""
Line scanner and statement tokenizer for JLang.

The scanner turns raw script text into logical lines:
- Splits on every newline boundary (\\n, \\r\\n, \\r and Unicode separators)
- Trims leading and trailing whitespace from each line
- Drops empty lines entirely

Because blank lines are removed before structural parsing, line numbers
attached to logical lines count logical lines, not raw source lines. The
raw line number is kept alongside for tooling.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Iterator
from .tokens import (
    LogicalLine, SourceLocation, CommandKind, lookup_command,
)


class LineScanner:
    """
    Scanner producing the logical line sequence of a script.

    Usage:
        scanner = LineScanner(source_code)
        lines = scanner.scan()

    Or for streaming:
        for line in LineScanner(source_code):
            process(line)
    """

    def __init__(self, source: str, filename: Optional[str] = None):
        self.source = source
        self.filename = filename

    def __iter__(self) -> Iterator[LogicalLine]:
        count = 0
        for raw_number, raw in enumerate(self.source.splitlines(), start=1):
            text = raw.strip()
            if not text:
                continue
            count += 1
            yield LogicalLine(
                text=text,
                location=SourceLocation(count, self.filename),
                source_line=raw_number,
            )

    def scan(self) -> List[LogicalLine]:
        """Scan the whole source into an ordered list of logical lines."""
        return list(self)


def scan_lines(source: str, filename: Optional[str] = None) -> List[LogicalLine]:
    """
    Convenience function to scan source text into logical lines.

    Args:
        source: The raw script text
        filename: Optional filename for diagnostics

    Returns:
        List of logical lines; empty input yields an empty list
    """
    return LineScanner(source, filename).scan()


@dataclass(frozen=True)
class Statement:
    """A logical line split into whitespace-delimited words."""
    line: LogicalLine
    words: List[str] = field(default_factory=list)
    kind: CommandKind = CommandKind.UNKNOWN

    @property
    def text(self) -> str:
        return self.line.text

    @property
    def command(self) -> str:
        """The first word, which selects the handler."""
        return self.words[0] if self.words else ""

    def word(self, index: int) -> Optional[str]:
        """Word at position index, or None if the statement is shorter."""
        if index < len(self.words):
            return self.words[index]
        return None


def tokenize_statement(line: LogicalLine) -> Statement:
    """Re-trim a logical line, split it on whitespace and classify it."""
    if line.text != line.text.strip():
        line = LogicalLine(line.text.strip(), line.location, line.source_line)
    words = line.text.split()
    kind = lookup_command(words[0]) if words else CommandKind.UNKNOWN
    return Statement(line=line, words=words, kind=kind)
