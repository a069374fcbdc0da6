"""
Shared fixtures for the JLang tests.
"""

import textwrap

import pytest

from jlang import BufferedHost, InterpreterConfig


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Keep user configuration out of the tests."""
    for name in ("JLANG_CONFIG", "JLANG_TRACE", "JLANG_MAX_CALL_DEPTH", "JLANG_VALUE_OVERHEAD"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def host():
    """A buffered host with statement tracing turned off."""
    return BufferedHost(InterpreterConfig(trace=False))


@pytest.fixture
def run(host):
    """Run dedented script text on the shared host and return the host."""
    def _run(source, base_directory=None):
        host.run_script(textwrap.dedent(source), base_directory)
        return host
    return _run
