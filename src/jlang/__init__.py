"""
JLang scripting language interpreter core.

This module provides:
- Line scanner: Turns script text into trimmed, non-empty logical lines
- Structural parser: Extracts function and window blocks
- Interpreter: Executes statements against a global environment
- Memory budget: Optional byte ceiling for variable storage
- Host callbacks: Output, diagnostics, external scripts and windows

Usage:
    from jlang import BufferedHost

    host = BufferedHost()
    host.run_script('''
    function greet {
    print @ARGUMENTS.STRING
    }
    string name = "world"
    print @name
    call greet[hello, ignored]
    ''')
    print(host.output_lines)   # ['world', 'hello']
"""

__version__ = "0.1.0"

from .tokens import (
    CommandKind,
    LogicalLine,
    SourceLocation,
    COMMANDS,
    lookup_command,
    normalize_quotes,
)

from .lexer import (
    LineScanner,
    Statement,
    scan_lines,
    tokenize_statement,
)

from .parser import (
    StructuralParser,
    FunctionDef,
    WindowBlock,
    ParseResult,
    parse,
)

from .windows import (
    WindowSpec,
    WindowButton,
    build_window_spec,
)

from .errors import (
    JLangError,
    ConfigError,
    Diagnostic,
    DiagnosticCollector,
    ErrorSeverity,
)

from .config import (
    InterpreterConfig,
    load_config,
)

from .runtime import (
    Interpreter,
    RunResult,
    run_script,
    CommandDispatcher,
    Environment,
    CallFrame,
    MemoryBudget,
    value_size,
    HostCallbacks,
    NullHost,
    ScriptHost,
    BufferedHost,
    ConsoleHost,
    WindowState,
)

__all__ = [
    # Tokens
    'CommandKind',
    'LogicalLine',
    'SourceLocation',
    'COMMANDS',
    'lookup_command',
    'normalize_quotes',

    # Lexer
    'LineScanner',
    'Statement',
    'scan_lines',
    'tokenize_statement',

    # Parser
    'StructuralParser',
    'FunctionDef',
    'WindowBlock',
    'ParseResult',
    'parse',

    # Windows
    'WindowSpec',
    'WindowButton',
    'build_window_spec',

    # Errors
    'JLangError',
    'ConfigError',
    'Diagnostic',
    'DiagnosticCollector',
    'ErrorSeverity',

    # Configuration
    'InterpreterConfig',
    'load_config',

    # Runtime
    'Interpreter',
    'RunResult',
    'run_script',
    'CommandDispatcher',
    'Environment',
    'CallFrame',
    'MemoryBudget',
    'value_size',
    'HostCallbacks',
    'NullHost',
    'ScriptHost',
    'BufferedHost',
    'ConsoleHost',
    'WindowState',
]
