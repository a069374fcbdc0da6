"""
Statement dispatch for JLang.

Each statement is classified by its first word and routed to a handler.
Handlers mutate the interpreter's Environment or notify the host; every
problem becomes a diagnostic and the statement is skipped.
"""

import re
import string
from typing import List, Optional, TYPE_CHECKING

from ..lexer import Statement, tokenize_statement
from ..tokens import CommandKind, LogicalLine, normalize_quotes
from ..windows import extract_update_text
from ..errors import (
    error_unknown_command,
    error_string_syntax,
    error_val_syntax,
    error_max_mem_usage,
    error_max_mem_value,
    error_external_syntax,
    error_call_syntax,
    error_incomplete_literal,
    error_print_argument,
    error_update_syntax,
    error_free_syntax,
    error_undefined_variable,
    error_unsupported_argument,
    error_call_depth,
    error_budget_exceeded,
)
from .context import CallFrame
from .memory import value_size

if TYPE_CHECKING:
    from .interpreter import Interpreter

STRING_DEFINITION = re.compile(r'string\s+(\w+)\s*=\s*"(.*?)"')
VAL_DEFINITION = re.compile(r'@VAL\s+(\w+)\s*=\s*(.*)')
CALL_PATTERN = re.compile(r'call\s+(\w+)(?:\[(.*)\])?', re.IGNORECASE)

ARGUMENTS_PREFIX = "@ARGUMENTS."
ARGUMENTS_STRING = "STRING"
REMOVE = "REMOVE"


def parse_call_arguments(text: Optional[str]) -> List[str]:
    """Split a call's bracket contents on commas; trim and drop double quotes."""
    if text is None or not text.strip():
        return []
    return [arg.strip().replace('"', "") for arg in normalize_quotes(text).split(",")]


class CommandDispatcher:
    """Routes one statement at a time to its handler."""

    def __init__(self, interpreter: "Interpreter"):
        self.interpreter = interpreter

    @property
    def environment(self):
        return self.interpreter.environment

    @property
    def host(self):
        return self.interpreter.host

    def _report(self, diagnostic) -> None:
        self.interpreter.report(diagnostic)

    def execute(self, line: LogicalLine, frame: CallFrame) -> None:
        """Execute one logical line in the given call frame."""
        stmt = tokenize_statement(line)
        if not stmt.words:
            return
        kind = stmt.kind

        if kind == CommandKind.PRINT:
            self._handle_print(stmt, frame)
        elif kind == CommandKind.STRING:
            self._handle_string(stmt)
        elif kind == CommandKind.VAL:
            self._handle_val(stmt)
        elif kind == CommandKind.MAX_MEM:
            self._handle_max_mem(stmt)
        elif kind == CommandKind.FREE:
            self._handle_free(stmt)
        elif kind == CommandKind.REM:
            pass
        elif kind == CommandKind.STDO:
            if stmt.word(1) == REMOVE:
                self.host.clear_output()
        elif kind == CommandKind.DEBUG:
            if stmt.word(1) == REMOVE:
                self.host.clear_debug()
        elif kind == CommandKind.EXTERNAL:
            self._handle_external(stmt, frame)
        elif kind == CommandKind.CALL:
            self._handle_call(stmt, frame)
        elif kind == CommandKind.NEW:
            pass  # window blocks are taken out by the structural parser
        elif kind == CommandKind.UPDATE:
            self._handle_update(stmt)
        else:
            self._report(error_unknown_command(stmt.command, line.location, line.text))

    # --- Output ---

    def _handle_print(self, stmt: Statement, frame: CallFrame) -> None:
        argument = stmt.word(1)
        loc = stmt.line.location
        if argument is None:
            self.host.print_output("")
            return

        if argument.startswith(ARGUMENTS_PREFIX):
            parts = argument.split(".")
            if len(parts) == 2 and parts[1] == ARGUMENTS_STRING and frame.arguments:
                self.host.print_output(frame.arguments[0])
            else:
                self._report(error_unsupported_argument(argument, loc, stmt.text))
        elif argument.startswith("@"):
            name = argument[1:]
            value = self.environment.get_variable(name)
            if value is None:
                self._report(error_undefined_variable(name, loc, stmt.text))
            else:
                self.host.print_output(value)
        elif argument.startswith('"'):
            # Everything between the first and the last quote on the line
            first = stmt.text.find('"')
            last = stmt.text.rfind('"')
            if first != last:
                self.host.print_output(stmt.text[first + 1:last])
            else:
                self._report(error_incomplete_literal(loc, stmt.text))
        else:
            self._report(error_print_argument(loc, stmt.text))

    # --- Variables and memory ---

    def _handle_string(self, stmt: Statement) -> None:
        match = STRING_DEFINITION.search(normalize_quotes(stmt.text))
        if match is None:
            self._report(error_string_syntax(stmt.line.location, stmt.text))
            return
        name, value = match.group(1), match.group(2)
        if value.endswith(";"):
            value = value[:-1]
        self._define(name, value, stmt, "String variable")

    def _handle_val(self, stmt: Statement) -> None:
        match = VAL_DEFINITION.search(normalize_quotes(stmt.text))
        if match is None:
            self._report(error_val_syntax(stmt.line.location, stmt.text))
            return
        name = match.group(1)
        value = match.group(2).strip()
        if value.endswith(";"):
            value = value[:-1]
        if value.startswith('"') and value.endswith('"'):
            value = value[1:-1]
        self._define(name, value, stmt, "Variable")

    def _define(self, name: str, value: str, stmt: Statement, label: str) -> None:
        """Charge the budget and store the variable if the charge is accepted."""
        config = self.interpreter.config
        size = value_size(value, config.value_overhead, config.encoding)
        if not self.environment.allocate(size):
            self._report(error_budget_exceeded(name, size, stmt.line.location, stmt.text))
            return
        self.environment.set_variable(name, value, size)
        self.interpreter.debug(f"{label} '{name}' defined with value '{value}'.")

    def _handle_max_mem(self, stmt: Statement) -> None:
        if len(stmt.words) < 2:
            self._report(error_max_mem_usage(stmt.line.location, stmt.text))
            return
        digits = "".join(ch for ch in "".join(stmt.words[1:]) if ch in string.digits)
        if not digits:
            self._report(error_max_mem_value(stmt.line.location, stmt.text))
            return
        ceiling = int(digits)
        self.environment.set_budget(ceiling)
        self.interpreter.debug(f"Memory budget set to {ceiling} bytes.")

    def _handle_free(self, stmt: Statement) -> None:
        if len(stmt.words) != 2:
            self._report(error_free_syntax(stmt.line.location, stmt.text))
            return
        name = stmt.words[1].rstrip(";")
        size = self.environment.remove_variable(name)
        if size is None:
            self._report(error_free_syntax(stmt.line.location, stmt.text))
            return
        self.environment.deallocate(size)
        self.interpreter.debug(f"Variable '{name}' released ({size} bytes).")

    # --- Scripts and functions ---

    def _handle_external(self, stmt: Statement, frame: CallFrame) -> None:
        if len(stmt.words) != 3 or stmt.words[1] != "RUN":
            self._report(error_external_syntax(stmt.line.location, stmt.text))
            return
        if not self._check_depth(stmt, frame):
            return
        path = stmt.words[2].replace('"', "")
        self.host.run_external_script(path, frame.base_directory)

    def _handle_call(self, stmt: Statement, frame: CallFrame) -> None:
        match = CALL_PATTERN.search(stmt.text)
        if match is None:
            self._report(error_call_syntax(stmt.line.location, stmt.text))
            return
        if not self._check_depth(stmt, frame):
            return
        name = match.group(1)
        arguments = parse_call_arguments(match.group(2))
        self.interpreter.call_function(name, arguments, frame)

    def _check_depth(self, stmt: Statement, frame: CallFrame) -> bool:
        limit = self.interpreter.max_call_depth
        if frame.depth >= limit:
            self._report(error_call_depth(limit, stmt.line.location, stmt.text))
            return False
        return True

    # --- Windows ---

    def _handle_update(self, stmt: Statement) -> None:
        text = extract_update_text(stmt.text) if stmt.word(1) == "WINDOW" else None
        if text is None:
            self._report(error_update_syntax(stmt.line.location, stmt.text))
            return
        self.host.update_secondary_window_content(text)
