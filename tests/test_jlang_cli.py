"""
Tests for the jlang command-line interface.
"""

import json

import pytest

from jlang.__main__ import main


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def write(directory, name, text):
    path = directory / name
    path.write_text(text, encoding="utf-8")
    return str(path)


class TestRunCommand:
    """Test `jlang run`."""

    def test_run_prints_output(self, workdir, capsys):
        path = write(workdir, "hello.jlsh", 'string who = "world"\nprint @who')
        assert main(["run", path]) == 0
        assert capsys.readouterr().out == "world\n"

    def test_missing_file(self, workdir, capsys):
        assert main(["run", str(workdir / "nope.jlsh")]) == 1
        assert "File not found" in capsys.readouterr().err

    def test_debug_trace_on_stderr(self, workdir, capsys):
        path = write(workdir, "t.jlsh", 'print "x"')
        main(["run", path, "--debug"])
        err = capsys.readouterr().err
        assert "--- Running main script ---" in err
        assert '> EXECUTING: print "x"' in err

    def test_no_trace(self, workdir, capsys):
        path = write(workdir, "t.jlsh", 'print "x"')
        main(["run", path, "--debug", "--no-trace"])
        assert "EXECUTING" not in capsys.readouterr().err

    def test_diagnostics_on_stderr(self, workdir, capsys):
        path = write(workdir, "t.jlsh", "frobnicate")
        assert main(["run", path, "--debug"]) == 0
        assert "t.jlsh:1: error[E201]: unknown command 'frobnicate'" in capsys.readouterr().err

    def test_press_buttons(self, workdir, capsys):
        path = write(workdir, "w.jlsh", "\n".join([
            "@NEW WINDOW {",
            '@Title = "Demo"',
            "@Content = {",
            'TEXT = "ready"',
            'BUTTON = "Go": { print "pressed" }',
            "}",
            "}",
        ]))
        assert main(["run", path, "--press-buttons"]) == 0
        out = capsys.readouterr().out.splitlines()
        assert out == [
            "[window] Demo",
            "[window] ready",
            "[window] button: Go",
            "[window] pressing 'Go'",
            "pressed",
        ]

    def test_config_file(self, workdir, capsys):
        script = write(workdir, "t.jlsh", 'MAX_MEM 5;\nstring s = "abc"\nprint @s')
        config = write(workdir, "c.yaml", "value_overhead: 0\n")
        main(["run", script, "--config", config])
        assert capsys.readouterr().out == "abc\n"

    def test_bad_config(self, workdir, capsys):
        script = write(workdir, "t.jlsh", 'print "x"')
        config = write(workdir, "c.yaml", "nonsense: 1\n")
        assert main(["run", script, "--config", config]) == 1
        assert "Unknown configuration key" in capsys.readouterr().err


class TestCheckCommand:
    """Test `jlang check`."""

    def test_ok(self, workdir, capsys):
        path = write(workdir, "ok.jlsh", 'function f {\nprint "a"\n}\n@NEW WINDOW { }\ncall f[]')
        assert main(["check", path]) == 0
        assert capsys.readouterr().out.strip() == (
            "OK: ok.jlsh - 1 function(s), 1 window(s), 1 statement(s)"
        )

    def test_errors(self, workdir, capsys):
        path = write(workdir, "bad.jlsh", 'function f {\nbogus\n}\nfunction g\nprint "x"')
        assert main(["check", path]) == 1
        out = capsys.readouterr().out
        assert "E201" in out
        assert "E102" in out

    def test_does_not_execute(self, workdir, capsys):
        path = write(workdir, "ok.jlsh", 'print "should not appear"')
        main(["check", path])
        assert "should not appear" not in capsys.readouterr().out

    def test_json(self, workdir, capsys):
        path = write(workdir, "bad.jlsh", "bogus")
        assert main(["check", path, "--json"]) == 1
        data = json.loads(capsys.readouterr().out)
        assert data["error_count"] == 1
        assert data["diagnostics"][0]["code"] == "E201"
        assert data["diagnostics"][0]["file"] == "bad.jlsh"


class TestFunctionsCommand:
    """Test `jlang functions`."""

    def test_lists_functions(self, workdir, capsys):
        path = write(workdir, "f.jlsh", "function a {\nprint \"1\"\n}\nfunction b {\n}")
        assert main(["functions", path]) == 0
        out = capsys.readouterr().out.splitlines()
        assert out[0] == "Functions (2):"
        assert out[1] == "  a (1 line(s)) at f.jlsh:1"
        assert out[2] == "  b (0 line(s)) at f.jlsh:4"
