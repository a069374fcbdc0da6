#!/usr/bin/env python3
"""
CLI for the JLang interpreter.

Usage:
    python -m jlang run FILE.jlsh [--debug] [--no-trace] [--press-buttons]
    python -m jlang check FILE.jlsh [--json]
    python -m jlang functions FILE.jlsh

Examples:
    # Run a script, showing the debug log on stderr
    python -m jlang run examples/hello.jlsh --debug

    # Run with settings from a YAML file
    python -m jlang run examples/hello.jlsh --config jlang.yaml

    # Check structure and commands without executing anything
    python -m jlang check examples/hello.jlsh
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional


def _read_source(path: Path) -> Optional[str]:
    if not path.exists():
        print(f"Error: File not found: {path}", file=sys.stderr)
        return None
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return None


def cmd_run(args):
    """Run a script with console output."""
    from .config import load_config
    from .errors import ConfigError
    from .runtime import ConsoleHost

    source_path = Path(args.file)
    if not source_path.exists():
        print(f"Error: File not found: {source_path}", file=sys.stderr)
        return 1

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    if args.no_trace:
        config = config.with_overrides(trace=False)

    host = ConsoleHost(config, output=sys.stdout, debug=sys.stderr if args.debug else None)
    result = host.run_file(source_path)
    if result is None:
        return 1

    if args.press_buttons:
        for window in list(host.windows):
            if window.button is not None:
                print(f"[window] pressing '{window.button.label}'", file=sys.stdout)
                window.press()

    return 0


def cmd_check(args):
    """Check a script's structure and commands without executing it."""
    from .errors import DiagnosticCollector, error_unknown_command
    from .lexer import scan_lines, tokenize_statement
    from .parser import StructuralParser
    from .tokens import CommandKind
    from .windows import build_window_spec

    source_path = Path(args.file)
    source = _read_source(source_path)
    if source is None:
        return 1

    diagnostics = DiagnosticCollector()
    windows = []
    lines = scan_lines(source, source_path.name)
    result = StructuralParser(
        lines,
        on_window=lambda block: windows.append(build_window_spec(block.body)),
        diagnostics=diagnostics,
    ).parse()

    to_classify = list(result.statements)
    for func in result.functions.values():
        to_classify.extend(func.body)
    for line in sorted(to_classify, key=lambda l: l.line or 0):
        stmt = tokenize_statement(line)
        if stmt.kind == CommandKind.UNKNOWN:
            diagnostics.add(error_unknown_command(stmt.command, line.location, line.text))

    if args.json:
        print(json.dumps(diagnostics.to_json(), indent=2))
        return 1 if diagnostics.has_errors else 0

    if diagnostics.has_errors:
        print(f"Check failed with {diagnostics.error_count} error(s):")
        print(diagnostics.format_all())
        return 1

    print(f"OK: {source_path.name} - {len(result.functions)} function(s), "
          f"{len(windows)} window(s), {len(result.statements)} statement(s)")
    return 0


def cmd_functions(args):
    """List the functions defined in a script."""
    from .lexer import scan_lines
    from .parser import StructuralParser

    source_path = Path(args.file)
    source = _read_source(source_path)
    if source is None:
        return 1

    result = StructuralParser(scan_lines(source, source_path.name)).parse()
    print(f"Functions ({len(result.functions)}):")
    for func in result.functions.values():
        print(f"  {func.name} ({len(func.body)} line(s)) at {func.location}")
    return 0


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        prog='python -m jlang',
        description='JLang script interpreter',
    )
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable developer logging on stderr')

    subparsers = parser.add_subparsers(dest='action', required=True)

    # run command
    run_parser = subparsers.add_parser('run', help='Run a JLang script')
    run_parser.add_argument('file', help='Script file (.jlsh)')
    run_parser.add_argument('-c', '--config', metavar='FILE',
                            help='YAML configuration file')
    run_parser.add_argument('-d', '--debug', action='store_true',
                            help='Show the debug log on stderr')
    run_parser.add_argument('--no-trace', action='store_true',
                            help='Do not trace executed statements')
    run_parser.add_argument('--press-buttons', action='store_true',
                            help='Press every window button after the run')

    # check command
    check_parser = subparsers.add_parser('check', help='Check a script without running it')
    check_parser.add_argument('file', help='Script file (.jlsh)')
    check_parser.add_argument('--json', action='store_true',
                              help='Print diagnostics as JSON')

    # functions command
    functions_parser = subparsers.add_parser('functions', help='List functions in a script')
    functions_parser.add_argument('file', help='Script file (.jlsh)')

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if args.action == 'run':
        return cmd_run(args)
    elif args.action == 'check':
        return cmd_check(args)
    elif args.action == 'functions':
        return cmd_functions(args)
    else:
        parser.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
