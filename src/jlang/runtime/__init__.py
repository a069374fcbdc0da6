"""
JLang runtime - line-by-line interpreter for JLang scripts.

This module provides:
- Interpreter: Runs scripts and re-enters for calls and window buttons
- CommandDispatcher: Routes statements to their handlers
- Environment: Global variables, functions and the memory budget
- MemoryBudget: Byte ceiling bookkeeping for variable storage
- Hosts: The callback interface and stock implementations
"""

from .memory import (
    MemoryBudget,
    value_size,
)

from .context import (
    Environment,
    CallFrame,
)

from .host import (
    HostCallbacks,
    NullHost,
    NULL_HOST,
    ScriptHost,
    BufferedHost,
    ConsoleHost,
    WindowState,
)

from .dispatcher import (
    CommandDispatcher,
    parse_call_arguments,
)

from .interpreter import (
    Interpreter,
    RunResult,
    run_script,
)

__all__ = [
    # Memory
    'MemoryBudget',
    'value_size',

    # Context
    'Environment',
    'CallFrame',

    # Hosts
    'HostCallbacks',
    'NullHost',
    'NULL_HOST',
    'ScriptHost',
    'BufferedHost',
    'ConsoleHost',
    'WindowState',

    # Dispatch
    'CommandDispatcher',
    'parse_call_arguments',

    # Interpreter
    'Interpreter',
    'RunResult',
    'run_script',
]
