"""
Structural parser for JLang.

A single forward pass over the logical line sequence that pulls out
brace-delimited blocks and leaves a flat list of top-level statements:

- `function <name> {` ... `}` registers a function body. Bodies are
  shallow: the first line that is exactly `}` closes them.
- `@NEW WINDOW {` ... `}` is a window block. Braces are counted (a line
  ending in `{` opens, a line exactly `}` closes) so one nested
  `@Content = { ... }` block is allowed inside. Window blocks are handed
  to the window handler as soon as they are parsed, before any top-level
  statement runs.
- Everything else is a top-level statement.

Malformed blocks are reported as diagnostics and skipped one line at a
time; parsing never aborts.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from .tokens import LogicalLine, SourceLocation, FUNCTION_KEYWORD, WINDOW_PREFIX
from .errors import (
    DiagnosticCollector,
    error_missing_function_name,
    error_function_missing_brace,
    error_unterminated_function,
    error_window_missing_brace,
    error_unterminated_window,
)

logger = logging.getLogger("jlang.parser")
logger.addHandler(logging.NullHandler())

FUNCTION_START = re.compile(r"^" + FUNCTION_KEYWORD + r"(?=\s|\{|$)")
FUNCTION_NAME = re.compile(FUNCTION_KEYWORD + r"\s+(\w+)")
CLOSE_BRACE = "}"
OPEN_BRACE = "{"


@dataclass
class FunctionDef:
    """A parsed function definition."""
    name: str
    body: List[LogicalLine] = field(default_factory=list)
    location: SourceLocation = field(default_factory=SourceLocation)

    @property
    def body_text(self) -> List[str]:
        return [line.text for line in self.body]


@dataclass
class WindowBlock:
    """The raw body of a @NEW WINDOW block."""
    body: List[str] = field(default_factory=list)
    location: SourceLocation = field(default_factory=SourceLocation)


@dataclass
class ParseResult:
    """
    Output of one structural pass.

    functions holds only the definitions found in this pass; the parser's
    function table accumulates across passes.
    """
    functions: Dict[str, FunctionDef] = field(default_factory=dict)
    statements: List[LogicalLine] = field(default_factory=list)
    windows: List[WindowBlock] = field(default_factory=list)


class StructuralParser:
    """
    Line-state-machine parser separating blocks from top-level statements.

    Usage:
        parser = StructuralParser(lines)
        result = parser.parse()

    Args:
        lines: Logical lines from the scanner
        functions: Function table to register into (last definition wins);
            a fresh dict when omitted
        on_window: Called with each WindowBlock the moment it is parsed
        diagnostics: Collector receiving structural diagnostics
    """

    def __init__(
        self,
        lines: List[LogicalLine],
        functions: Optional[Dict[str, FunctionDef]] = None,
        on_window: Optional[Callable[[WindowBlock], None]] = None,
        diagnostics: Optional[DiagnosticCollector] = None,
    ):
        self.lines = lines
        self.functions = functions if functions is not None else {}
        self.on_window = on_window
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticCollector()
        self.pos = 0

    def parse(self) -> ParseResult:
        """Run the structural pass over all lines."""
        result = ParseResult()
        self.pos = 0

        while self.pos < len(self.lines):
            line = self.lines[self.pos]

            if FUNCTION_START.match(line.text):
                parsed = self._parse_function(self.pos)
                if parsed is None:
                    self.pos += 1
                    continue
                func, next_pos = parsed
                if func.name in self.functions:
                    logger.debug("Function %s redefined at %s", func.name, func.location)
                self.functions[func.name] = func
                result.functions[func.name] = func
                self.pos = next_pos

            elif line.text.startswith(WINDOW_PREFIX):
                parsed = self._parse_window(self.pos)
                if parsed is None:
                    self.pos += 1
                    continue
                window, next_pos = parsed
                result.windows.append(window)
                if self.on_window is not None:
                    self.on_window(window)
                self.pos = next_pos

            else:
                result.statements.append(line)
                self.pos += 1

        return result

    def _parse_function(self, start: int) -> Optional[Tuple[FunctionDef, int]]:
        """Parse a function block starting at start; None if it is discarded."""
        header = self.lines[start]
        match = FUNCTION_NAME.search(header.text)
        if match is None:
            self.diagnostics.add(error_missing_function_name(header.location, header.text))
            return None
        name = match.group(1)

        if OPEN_BRACE not in header.text:
            self.diagnostics.add(error_function_missing_brace(name, header.location, header.text))
            return None

        body: List[LogicalLine] = []
        pos = start + 1
        while pos < len(self.lines):
            line = self.lines[pos]
            if line.text == CLOSE_BRACE:
                return FunctionDef(name, body, header.location), pos + 1
            body.append(line)
            pos += 1

        self.diagnostics.add(error_unterminated_function(name, header.location, header.text))
        return None

    def _parse_window(self, start: int) -> Optional[Tuple[WindowBlock, int]]:
        """Parse a window block starting at start; None if it is discarded."""
        header = self.lines[start]
        text = header.text

        if not text.endswith(OPEN_BRACE):
            inline = _inline_block(text)
            if inline is None:
                self.diagnostics.add(error_window_missing_brace(header.location, text))
                return None
            return WindowBlock(inline, header.location), start + 1

        body: List[str] = []
        depth = 1
        pos = start + 1
        while pos < len(self.lines):
            line = self.lines[pos].text
            if line == CLOSE_BRACE:
                depth -= 1
                if depth == 0:
                    return WindowBlock(body, header.location), pos + 1
            elif line.endswith(OPEN_BRACE):
                depth += 1
            body.append(line)
            pos += 1

        self.diagnostics.add(error_unterminated_window(header.location, text))
        return None


def _inline_block(text: str) -> Optional[List[str]]:
    """Body of a block opened and closed on one line, or None if unbalanced."""
    opens = text.count(OPEN_BRACE)
    if opens == 0 or opens != text.count(CLOSE_BRACE):
        return None
    first = text.index(OPEN_BRACE)
    last = text.rindex(CLOSE_BRACE)
    if last < first:
        return None
    inner = text[first + 1:last].strip()
    return [inner] if inner else []


def parse(
    lines: List[LogicalLine],
    functions: Optional[Dict[str, FunctionDef]] = None,
    on_window: Optional[Callable[[WindowBlock], None]] = None,
    diagnostics: Optional[DiagnosticCollector] = None,
) -> ParseResult:
    """Convenience function running one structural pass."""
    return StructuralParser(lines, functions, on_window, diagnostics).parse()
