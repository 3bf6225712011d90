from __future__ import annotations

import io
import json
import subprocess
import sys
from pathlib import Path

from demystify import main as cli

ROOT = Path(__file__).resolve().parent.parent

SOURCE = "let a = 'fooBar.baz';\nuse(a);\n"
EXPECTED = "let fooBarBaz$a = 'fooBar.baz';\nuse(fooBarBaz$a);\n"


def test_default_output_path(write_js):
    path = write_js(SOURCE, "bundle.js")
    assert cli.main([str(path)]) == 0
    assert (path.parent / "bundle_demystified.js").read_text(encoding="utf-8") == EXPECTED


def test_stdout_and_report(write_js, tmp_path, capsys):
    path = write_js(SOURCE)
    report = tmp_path / "out" / "report.json"
    assert cli.main([str(path), "--stdout", "--rounds", "1", "--report", str(report)]) == 0
    assert capsys.readouterr().out == EXPECTED
    data = json.loads(report.read_text(encoding="utf-8"))
    assert data["rounds"][0]["renames"] == {"a": "fooBarBaz$a"}


def test_explicit_output(write_js, tmp_path):
    path = write_js(SOURCE)
    target = tmp_path / "result.js"
    assert cli.main([str(path), "-o", str(target)]) == 0
    assert target.read_text(encoding="utf-8") == EXPECTED


def test_parse_error_exit_code(write_js, capsys):
    path = write_js("var = ;")
    assert cli.main([str(path), "--stdout"]) == 1
    err = capsys.readouterr().err
    assert f"{path}:1:" in err


def test_missing_input_file(tmp_path, capsys):
    assert cli.main([str(tmp_path / "absent.js")]) == 1
    assert "cannot read" in capsys.readouterr().err


def test_usage_errors(write_js, tmp_path, capsys):
    assert cli.main([]) == 2
    config = tmp_path / "bad.json"
    config.write_text(json.dumps({"unknown": 1}), encoding="utf-8")
    assert cli.main([str(write_js(SOURCE)), "--config", str(config)]) == 2
    assert cli.main([str(write_js(SOURCE)), "--rounds", "-1"]) == 2


def test_flags_reach_the_pipeline(write_js, capsys):
    path = write_js("var handler = function () {};\n")
    assert cli.main([str(path), "--stdout", "--no-function-names"]) == 0
    assert capsys.readouterr().out == "var handler = function () {};\n"


def test_debug_log_captures_heuristics(write_js, tmp_path):
    path = write_js(SOURCE)
    trace = tmp_path / "trace.log"
    assert cli.main([str(path), "--stdout", "--debug-log", str(trace)]) == 0
    text = trace.read_text(encoding="utf-8")
    assert "candidate pairs" in text
    assert "long-name table" in text


def test_serve_mode(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO(json.dumps({"code": SOURCE, "id": 9}) + "\n"))
    assert cli.main(["--serve"]) == 0
    reply = json.loads(capsys.readouterr().out)
    assert reply == {"success": True, "result": EXPECTED, "id": 9}


def test_main_shim(write_js):
    path = write_js(SOURCE)
    proc = subprocess.run(
        [sys.executable, str(ROOT / "main.py"), str(path), "--stdout"],
        cwd=ROOT,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    )
    assert proc.returncode == 0, proc.stderr
    assert proc.stdout == EXPECTED


def test_pass_selection_flags(write_js, capsys):
    path = write_js(SOURCE)
    assert cli.main([str(path), "--stdout", "--skip-passes", "mine, frequency"]) == 0
    assert capsys.readouterr().out == SOURCE
    assert cli.main([str(path), "--stdout", "--only-passes", "deshadow,bogus"]) == 2
    assert "unknown pass(es): bogus" in capsys.readouterr().err
