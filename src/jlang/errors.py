"""
JLang diagnostics and error handling.

Script problems never abort a run: they are recorded as diagnostics and
forwarded to the host's debug channel. Exceptions are reserved for misuse
of the Python API (bad configuration files and the like).

Error code ranges:
- E1xx: Structural errors (function and window blocks)
- E2xx: Statement syntax errors
- E3xx: Reference errors
- E4xx: Resource errors (memory budget)
- E5xx: I/O errors (external scripts)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, List
from .tokens import SourceLocation


class ErrorSeverity(Enum):
    """Severity levels for diagnostics."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass
class Diagnostic:
    """A single diagnostic message (error, warning, etc.)."""
    code: str                       # E101, E201, etc.
    message: str                    # Human-readable message
    severity: ErrorSeverity
    location: SourceLocation = field(default_factory=SourceLocation)
    source_line: Optional[str] = None   # The offending logical line
    hints: List[str] = field(default_factory=list)

    def format(self, show_source: bool = False) -> str:
        """Format the diagnostic for display."""
        parts = [f"{self.location}: {self.severity.value}[{self.code}]: {self.message}"]
        if show_source and self.source_line is not None:
            parts.append(f"    | {self.source_line}")
        for hint in self.hints:
            parts.append(f"    = hint: {hint}")
        return "\n".join(parts)

    def to_json(self) -> dict:
        """Convert to JSON-serializable dict for tooling integration."""
        return {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "line": self.location.line,
            "file": self.location.filename,
            "source": self.source_line,
            "hints": self.hints,
        }


class JLangError(Exception):
    """Base exception for JLang API errors."""


class ConfigError(JLangError):
    """Invalid interpreter configuration."""


def error(code: str, message: str, location: SourceLocation = None,
          source_line: str = None, hints: List[str] = None) -> Diagnostic:
    """Build an error-severity diagnostic."""
    return Diagnostic(
        code=code,
        message=message,
        severity=ErrorSeverity.ERROR,
        location=location or SourceLocation(),
        source_line=source_line,
        hints=hints or [],
    )


# --- Structural error codes ---

def error_missing_function_name(location: SourceLocation, source_line: str = None) -> Diagnostic:
    """E101: 'function' keyword without a name."""
    return error("E101", "expected a function name after 'function'", location, source_line,
                 hints=["usage: function <name> {"])


def error_function_missing_brace(name: str, location: SourceLocation,
                                 source_line: str = None) -> Diagnostic:
    """E102: Function declaration without '{' on the same line."""
    return error("E102", f"missing '{{' in the definition of function '{name}'", location,
                 source_line)


def error_unterminated_function(name: str, location: SourceLocation,
                                source_line: str = None) -> Diagnostic:
    """E103: Function body without a closing '}' line."""
    return error("E103", f"expected '}}' to close function '{name}'", location, source_line)


def error_window_missing_brace(location: SourceLocation, source_line: str = None) -> Diagnostic:
    """E104: Window declaration line not ending in '{'."""
    return error("E104", "expected '{' to open the @NEW WINDOW block", location, source_line)


def error_unterminated_window(location: SourceLocation, source_line: str = None) -> Diagnostic:
    """E105: Window block without its closing '}' line."""
    return error("E105", "expected '}' to close the @NEW WINDOW block", location, source_line)


# --- Statement syntax error codes ---

def error_unknown_command(word: str, location: SourceLocation,
                          source_line: str = None) -> Diagnostic:
    """E201: Unrecognized command word."""
    return error("E201", f"unknown command '{word}'", location, source_line)


def error_string_syntax(location: SourceLocation, source_line: str = None) -> Diagnostic:
    """E202: Malformed string definition."""
    return error("E202", "malformed string definition", location, source_line,
                 hints=['usage: string <name> = "<value>"'])


def error_val_syntax(location: SourceLocation, source_line: str = None) -> Diagnostic:
    """E203: Malformed @VAL definition."""
    return error("E203", "malformed @VAL definition", location, source_line,
                 hints=["usage: @VAL <name> = <value>;"])


def error_max_mem_usage(location: SourceLocation, source_line: str = None) -> Diagnostic:
    """E204: MAX_MEM without a value."""
    return error("E204", "MAX_MEM requires a byte count", location, source_line,
                 hints=["usage: MAX_MEM <bytes>;"])


def error_max_mem_value(location: SourceLocation, source_line: str = None) -> Diagnostic:
    """E205: MAX_MEM value is not an integer."""
    return error("E205", "memory budget must be a whole number of bytes", location,
                 source_line)


def error_external_syntax(location: SourceLocation, source_line: str = None) -> Diagnostic:
    """E206: Malformed @EXTERNAL directive."""
    return error("E206", "malformed @EXTERNAL directive", location, source_line,
                 hints=['usage: @EXTERNAL RUN "<filename.jlsh>"'])


def error_call_syntax(location: SourceLocation, source_line: str = None) -> Diagnostic:
    """E207: Unparseable call statement."""
    return error("E207", "malformed call statement", location, source_line,
                 hints=["usage: call <name>[<arg1>, <arg2>]"])


def error_incomplete_literal(location: SourceLocation, source_line: str = None) -> Diagnostic:
    """E208: print with an unterminated string literal."""
    return error("E208", "incomplete string literal", location, source_line)


def error_print_argument(location: SourceLocation, source_line: str = None) -> Diagnostic:
    """E209: print argument is neither a literal nor a reference."""
    return error("E209", "unrecognized argument to 'print'", location, source_line)


def error_update_syntax(location: SourceLocation, source_line: str = None) -> Diagnostic:
    """E210: Malformed @UPDATE WINDOW directive."""
    return error("E210", "malformed @UPDATE WINDOW directive", location, source_line,
                 hints=['usage: @UPDATE WINDOW TEXT = "<text>"'])


def error_free_syntax(location: SourceLocation, source_line: str = None) -> Diagnostic:
    """E211: Malformed @FREE directive."""
    return error("E211", "malformed @FREE directive", location, source_line,
                 hints=["usage: @FREE <name>"])


# --- Reference error codes ---

def error_undefined_variable(name: str, location: SourceLocation,
                             source_line: str = None) -> Diagnostic:
    """E301: Reference to an undefined variable."""
    return error("E301", f"variable '@{name}' is not defined", location, source_line)


def error_unsupported_argument(reference: str, location: SourceLocation,
                               source_line: str = None) -> Diagnostic:
    """E302: Unsupported @ARGUMENTS suffix or no argument bound."""
    return error("E302", f"argument reference '{reference}' is unsupported or unbound",
                 location, source_line, hints=["only @ARGUMENTS.STRING is supported"])


def error_call_depth(limit: int, location: SourceLocation, source_line: str = None) -> Diagnostic:
    """E303: Nested call limit reached."""
    return error("E303", f"maximum call depth of {limit} exceeded", location, source_line)


# --- Resource error codes ---

def error_budget_exceeded(name: str, size: int, location: SourceLocation,
                          source_line: str = None) -> Diagnostic:
    """E401: Variable definition rejected by the memory budget."""
    return error("E401", f"memory budget exceeded while defining '{name}' ({size} bytes)",
                 location, source_line)


# --- I/O error codes ---

def error_external_unreadable(path: str, resolved: str) -> Diagnostic:
    """E501: External script could not be read."""
    return error("E501", f"could not read external script '{path}'",
                 hints=[f"looked for: {resolved}"])


class DiagnosticCollector:
    """
    Collects diagnostics over one or more script runs.

    An optional sink receives each diagnostic as it is added, so reports
    reach the host in program order.
    """

    def __init__(self, sink: Optional[Callable[[Diagnostic], None]] = None):
        self.diagnostics: List[Diagnostic] = []
        self.sink = sink
        self._error_count = 0

    def add(self, diagnostic: Diagnostic) -> None:
        """Add a diagnostic."""
        self.diagnostics.append(diagnostic)
        if diagnostic.severity == ErrorSeverity.ERROR:
            self._error_count += 1
        if self.sink is not None:
            self.sink(diagnostic)

    def clear(self) -> None:
        self.diagnostics.clear()
        self._error_count = 0

    def codes(self) -> List[str]:
        """Codes of all collected diagnostics, in order."""
        return [d.code for d in self.diagnostics]

    @property
    def error_count(self) -> int:
        return self._error_count

    @property
    def warning_count(self) -> int:
        return sum(1 for d in self.diagnostics if d.severity == ErrorSeverity.WARNING)

    @property
    def has_errors(self) -> bool:
        return self._error_count > 0

    def format_all(self, show_source: bool = True) -> str:
        """Format all diagnostics for display."""
        parts = [d.format(show_source) for d in self.diagnostics]
        if self._error_count > 0:
            parts.append(f"{self._error_count} error(s), {self.warning_count} warning(s)")
        elif self.warning_count > 0:
            parts.append(f"{self.warning_count} warning(s)")
        return "\n".join(parts)

    def to_json(self) -> dict:
        """Convert all diagnostics to JSON format."""
        return {
            "diagnostics": [d.to_json() for d in self.diagnostics],
            "error_count": self._error_count,
            "warning_count": self.warning_count,
        }
