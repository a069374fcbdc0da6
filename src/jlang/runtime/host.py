"""
Host callback interface and stock host implementations.

The interpreter core never touches the outside world directly. Output,
diagnostics, external script loading and auxiliary windows all go through
a HostCallbacks implementation supplied by the embedding application.
Every callback is a one-way notification: the core ignores return values.

Provided hosts:
- NullHost: ignores everything (stands in when the real host is gone)
- ScriptHost: owns an interpreter and loads external scripts from disk
- BufferedHost: keeps output, debug text and windows in memory
- ConsoleHost: writes output and debug text to streams
"""

import logging
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, TextIO, Union

from ..config import InterpreterConfig
from ..errors import error_external_unreadable
from ..windows import WindowButton, WindowSpec

logger = logging.getLogger("jlang.runtime.host")
logger.addHandler(logging.NullHandler())


class HostCallbacks(ABC):
    """Capabilities the interpreter core requires of its environment."""

    @abstractmethod
    def print_output(self, text: str) -> None:
        """Append text as a new line of user-visible output."""

    @abstractmethod
    def print_debug(self, text: str) -> None:
        """Append text to the diagnostic log."""

    @abstractmethod
    def clear_output(self) -> None:
        pass

    @abstractmethod
    def clear_debug(self) -> None:
        pass

    @abstractmethod
    def run_external_script(self, path: str, from_directory: Path) -> None:
        """Load and fully execute the script at path, relative to from_directory."""

    @abstractmethod
    def open_new_window(self, spec: WindowSpec) -> None:
        """Present an auxiliary window."""

    @abstractmethod
    def update_secondary_window_content(self, text: str) -> None:
        """Append text to the most recently opened window."""

    def enter_interpreter(self, interpreter) -> None:
        """Called when an interpreter starts executing statements for this host."""

    def exit_interpreter(self, interpreter) -> None:
        """Called when that execution finishes, in reverse order of entry."""


class NullHost(HostCallbacks):
    """A host that drops every notification."""

    def print_output(self, text: str) -> None:
        pass

    def print_debug(self, text: str) -> None:
        pass

    def clear_output(self) -> None:
        pass

    def clear_debug(self) -> None:
        pass

    def run_external_script(self, path: str, from_directory: Path) -> None:
        pass

    def open_new_window(self, spec: WindowSpec) -> None:
        pass

    def update_secondary_window_content(self, text: str) -> None:
        pass


NULL_HOST = NullHost()


@dataclass
class WindowState:
    """A window as presented by a host; content grows with updates."""
    title: str
    content: str = ""
    button: Optional[WindowButton] = None

    def press(self) -> bool:
        """Press the window's button; False if it has none."""
        if self.button is None:
            return False
        self.button.press()
        return True


class ScriptHost(HostCallbacks):
    """
    Base for hosts that own an interpreter and read scripts from disk.

    The host holds the interpreter; the interpreter only keeps a weak
    reference back, so dropping the host releases both.

    Any other interpreter constructed with this host may drive it too.
    External scripts always re-enter whichever interpreter is executing
    the @EXTERNAL directive, so they share its Environment and budget.
    """

    def __init__(self, config: Optional[InterpreterConfig] = None):
        from .interpreter import Interpreter

        self.config = config or InterpreterConfig()
        self.interpreter = Interpreter(self, self.config)
        self.windows: List[WindowState] = []
        self._executing: List = []

    # --- Interpreter tracking ---

    def enter_interpreter(self, interpreter) -> None:
        self._executing.append(interpreter)

    def exit_interpreter(self, interpreter) -> None:
        if self._executing and self._executing[-1] is interpreter:
            self._executing.pop()

    @property
    def active_interpreter(self):
        """The interpreter currently executing statements, else this host's own."""
        return self._executing[-1] if self._executing else self.interpreter

    # --- Running scripts ---

    def run_script(self, source: str, base_directory: Union[str, Path, None] = None,
                   filename: Optional[str] = None):
        """Run script text through this host's interpreter."""
        return self.interpreter.run(source, base_directory, filename)

    def run_file(self, path: Union[str, Path]):
        """
        Read and run a script file, resolving @EXTERNAL paths from its directory.

        Returns:
            The interpreter's RunResult, or None if the file could not be read
        """
        path = Path(path)
        try:
            source = path.read_text(encoding=self.config.encoding)
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Cannot read %s: %s", path, e)
            self.print_output(f"Error: could not read the script file. {e}")
            return None
        return self.interpreter.run(source, path.parent, path.name)

    def list_scripts(self, directory: Union[str, Path]) -> List[Path]:
        """Script files (by configured extension) directly inside directory."""
        directory = Path(directory)
        if not directory.is_dir():
            return []
        return sorted(
            p for p in directory.iterdir()
            if p.is_file() and p.suffix == self.config.script_extension
        )

    # --- Callbacks with a file-system meaning ---

    def run_external_script(self, path: str, from_directory: Path) -> None:
        interpreter = self.active_interpreter
        resolved = Path(from_directory) / path
        try:
            source = resolved.read_text(encoding=interpreter.config.encoding)
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("External script %s unreadable: %s", resolved, e)
            self.print_output(f"Error: could not read file {path}.")
            self.print_output(f"Check that the file exists at: {resolved}")
            interpreter.report(error_external_unreadable(path, str(resolved)))
            return

        self.print_output(f"--- Running external script: {path} ---")
        interpreter.run(source, resolved.parent, path)
        self.print_output(f"--- End of {path} ---")

    def open_new_window(self, spec: WindowSpec) -> None:
        self.windows.append(WindowState(spec.title, spec.content, spec.button))
        self.print_debug(f"New window requested: '{spec.title}'")

    def update_secondary_window_content(self, text: str) -> None:
        if not self.windows:
            return
        self.windows[-1].content += f"\n{text}"

    @property
    def current_window(self) -> Optional[WindowState]:
        return self.windows[-1] if self.windows else None


class BufferedHost(ScriptHost):
    """Host that accumulates everything in memory."""

    def __init__(self, config: Optional[InterpreterConfig] = None):
        super().__init__(config)
        self.output_lines: List[str] = []
        self.debug_lines: List[str] = []
        self.output_clears = 0
        self.debug_clears = 0

    def print_output(self, text: str) -> None:
        self.output_lines.append(text)

    def print_debug(self, text: str) -> None:
        self.debug_lines.append(text)

    def clear_output(self) -> None:
        self.output_lines.clear()
        self.output_clears += 1

    def clear_debug(self) -> None:
        self.debug_lines.clear()
        self.debug_clears += 1

    @property
    def output_text(self) -> str:
        return "\n".join(self.output_lines)

    @property
    def debug_text(self) -> str:
        return "\n".join(self.debug_lines)


class ConsoleHost(ScriptHost):
    """
    Host writing to text streams.

    Output goes to `output` (stdout by default). Debug text goes to `debug`
    when one is given and is discarded otherwise. Clearing a stream is not
    possible, so clears are written as separator lines.
    """

    def __init__(self, config: Optional[InterpreterConfig] = None,
                 output: Optional[TextIO] = None, debug: Optional[TextIO] = None):
        super().__init__(config)
        self.output = output if output is not None else sys.stdout
        self.debug = debug

    def print_output(self, text: str) -> None:
        print(text, file=self.output)

    def print_debug(self, text: str) -> None:
        if self.debug is not None:
            print(text, file=self.debug)

    def clear_output(self) -> None:
        print("--- output cleared ---", file=self.output)

    def clear_debug(self) -> None:
        if self.debug is not None:
            print("--- debug log cleared ---", file=self.debug)

    def open_new_window(self, spec: WindowSpec) -> None:
        super().open_new_window(spec)
        print(f"[window] {spec.title}", file=self.output)
        if spec.content:
            print(f"[window] {spec.content}", file=self.output)
        if spec.button is not None:
            print(f"[window] button: {spec.button.label}", file=self.output)

    def update_secondary_window_content(self, text: str) -> None:
        super().update_secondary_window_content(text)
        if self.windows:
            print(f"[window] {text}", file=self.output)
