"""
JLang interpreter.

Drives the scanner and structural parser, then runs the top-level
statements through the command dispatcher. Function calls, external
scripts and window buttons all re-enter the same statement path with a
new call frame but the same Environment and memory budget.
"""

import logging
import sys
import weakref
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

from ..config import InterpreterConfig
from ..errors import Diagnostic, DiagnosticCollector, ErrorSeverity, error_call_depth
from ..lexer import scan_lines
from ..parser import FunctionDef, StructuralParser, WindowBlock
from ..tokens import LogicalLine, SourceLocation
from ..windows import WindowSpec, build_window_spec
from .context import CallFrame, Environment
from .dispatcher import CommandDispatcher
from .host import HostCallbacks, NULL_HOST

logger = logging.getLogger("jlang.runtime")
logger.addHandler(logging.NullHandler())

MAIN_BANNER = "--- Running main script ---"
TRACE_PREFIX = "> EXECUTING: "

# Python frames consumed per nested call or external script, with headroom
FRAMES_PER_LEVEL = 8
FRAME_RESERVE = 50


@dataclass
class RunResult:
    """Result of running one script."""
    statements: List[LogicalLine] = field(default_factory=list)
    functions: Dict[str, FunctionDef] = field(default_factory=dict)
    windows: List[WindowSpec] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """True when the run produced no error diagnostics."""
        return not any(d.severity == ErrorSeverity.ERROR for d in self.diagnostics)


class Interpreter:
    """
    Line-oriented interpreter for JLang scripts.

    The interpreter exclusively owns its Environment; independent script
    runs need independent interpreters. The host is held weakly: once the
    host is gone, callbacks fall through to a NullHost.
    """

    def __init__(self, host: Optional[HostCallbacks] = None,
                 config: Optional[InterpreterConfig] = None):
        """
        Initialize the interpreter.

        Args:
            host: Callback target for output, diagnostics and windows
            config: Interpreter settings; defaults when omitted
        """
        self._host_ref = weakref.ref(host) if host is not None else None
        self.config = config or InterpreterConfig()
        self.environment = Environment()
        self.diagnostics = DiagnosticCollector(sink=self._forward_diagnostic)
        self.dispatcher = CommandDispatcher(self)
        self._depth = 0
        self._active_runs = 0

    @property
    def host(self) -> HostCallbacks:
        host = self._host_ref() if self._host_ref is not None else None
        return host if host is not None else NULL_HOST

    @property
    def functions(self) -> Dict[str, FunctionDef]:
        return self.environment.functions

    @property
    def variables(self) -> Dict[str, str]:
        return self.environment.variables

    @property
    def max_call_depth(self) -> int:
        """Configured nesting limit, capped by what the Python stack can hold."""
        ceiling = max(1, (sys.getrecursionlimit() - FRAME_RESERVE) // FRAMES_PER_LEVEL)
        return min(self.config.max_call_depth, ceiling)

    # --- Reporting ---

    def report(self, diagnostic: Diagnostic) -> None:
        """Record a diagnostic and forward it to the host's debug channel."""
        self.diagnostics.add(diagnostic)

    def _forward_diagnostic(self, diagnostic: Diagnostic) -> None:
        text = diagnostic.format()
        logger.debug("%s", text)
        self.host.print_debug(text)

    def debug(self, text: str) -> None:
        """Informational line on the host's debug channel."""
        self.host.print_debug(text)

    # --- Running ---

    def run(self, source: str, base_directory: Union[str, Path, None] = None,
            filename: Optional[str] = None) -> RunResult:
        """
        Scan, structurally parse and execute a script.

        Window blocks are opened while parsing, so they appear before any
        top-level statement runs. Functions are registered into the shared
        function table (a later definition replaces an earlier one).

        Args:
            source: Script text
            base_directory: Directory that @EXTERNAL paths are relative to;
                the current working directory when omitted
            filename: Name used in diagnostics

        Returns:
            RunResult describing what was parsed and reported
        """
        base = Path(base_directory) if base_directory is not None else Path.cwd()
        # A nested run (external script) sits one level below its caller.
        depth = self._depth + 1 if self._active_runs else 0
        first_diagnostic = len(self.diagnostics.diagnostics)
        windows: List[WindowSpec] = []

        def on_window(block: WindowBlock) -> None:
            windows.append(self.open_window(block, base))

        lines = scan_lines(source, filename)
        parsed = StructuralParser(
            lines,
            functions=self.environment.functions,
            on_window=on_window,
            diagnostics=self.diagnostics,
        ).parse()
        logger.debug("Parsed %d statement(s), %d function(s), %d window(s)",
                     len(parsed.statements), len(parsed.functions), len(windows))

        self.debug(MAIN_BANNER)
        outermost = self._active_runs == 0
        self._active_runs += 1
        try:
            if outermost:
                self._execute_guarded(parsed.statements, CallFrame([], base, depth))
            else:
                self.execute_lines(parsed.statements, CallFrame([], base, depth))
        finally:
            self._active_runs -= 1

        return RunResult(
            statements=parsed.statements,
            functions=dict(parsed.functions),
            windows=windows,
            diagnostics=self.diagnostics.diagnostics[first_diagnostic:],
        )

    def execute_lines(self, lines: List[LogicalLine], frame: CallFrame) -> None:
        """Execute statements in order within one call frame."""
        previous = self._depth
        self._depth = frame.depth
        host = self.host
        host.enter_interpreter(self)
        try:
            for line in lines:
                if self.config.trace:
                    self.debug(f"{TRACE_PREFIX}{line.text}")
                self.dispatcher.execute(line, frame)
        finally:
            self._depth = previous
            host.exit_interpreter(self)

    def _execute_guarded(self, lines: List[LogicalLine], frame: CallFrame) -> None:
        """Execute from the top of a run; a stack overflow becomes a diagnostic."""
        try:
            self.execute_lines(lines, frame)
        except RecursionError:
            logger.debug("Python stack exhausted below depth %d", self._depth)
            self.report(error_call_depth(self.max_call_depth, SourceLocation()))

    def execute_statement(self, text: str, base_directory: Union[str, Path, None] = None) -> None:
        """Execute one statement outside any call, with no arguments bound."""
        base = Path(base_directory) if base_directory is not None else Path.cwd()
        if self._active_runs:
            self.execute_lines([LogicalLine(text.strip())], CallFrame([], base, 0))
        else:
            self._execute_guarded([LogicalLine(text.strip())], CallFrame([], base, 0))

    def call_function(self, name: str, arguments: List[str], frame: CallFrame) -> None:
        """
        Run a function body with a new argument list.

        An undefined function runs as an empty body: nothing happens and
        nothing is reported.
        """
        function = self.environment.get_function(name)
        body = function.body if function is not None else []
        if function is None:
            logger.debug("Call to undefined function %s ignored", name)
        self.execute_lines(body, frame.enter(name, arguments))

    # --- Windows ---

    def open_window(self, block: WindowBlock, base_directory: Path) -> WindowSpec:
        """Hydrate a window block, bind its button and hand it to the host."""
        spec = build_window_spec(block.body, self.config.default_window_title)
        if spec.button is not None:
            statement = spec.button.bound_statement

            def press() -> None:
                self.execute_statement(statement, base_directory)

            spec.button.action = press
        logger.debug("Opening window %r", spec.title)
        self.host.open_new_window(spec)
        return spec

    def reset(self) -> None:
        """Forget variables, functions, the budget and collected diagnostics."""
        self.environment.clear()
        self.diagnostics.clear()


def run_script(source: str, host: Optional[HostCallbacks] = None,
               base_directory: Union[str, Path, None] = None,
               config: Optional[InterpreterConfig] = None) -> RunResult:
    """
    Run a script on a fresh interpreter.

    Args:
        source: Script text
        host: Callback target; a NullHost when omitted
        base_directory: Directory for @EXTERNAL resolution
        config: Interpreter settings

    Returns:
        RunResult for the script
    """
    return Interpreter(host, config).run(source, base_directory)
