from __future__ import annotations

import io
import json

import pytest

import mathsteps


def _run(monkeypatch, *argv: str) -> None:
    monkeypatch.setattr("sys.argv", ["mathsteps", *argv])
    mathsteps.main()


def test_eval_json_prints_api_payload(monkeypatch, capsys):
    _run(monkeypatch, "eval", "--json", "2 + 3 * 4")

    payload = json.loads(capsys.readouterr().out)
    assert payload["result"] == 14
    assert payload["steps"] == ["3 * 4 = 12", "2 + 12 = 14"]


def test_eval_reads_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("10 / 4\n"))

    _run(monkeypatch, "eval", "--json")

    assert json.loads(capsys.readouterr().out)["result"] == 2.5


def test_eval_failure_exits_with_status_2(monkeypatch, capsys):
    with pytest.raises(SystemExit) as info:
        _run(monkeypatch, "eval", "10 / 0")

    assert info.value.code == 2
    out = capsys.readouterr().out
    assert "EvalError" in out
    assert "division by zero" in out


def test_eval_table_output(monkeypatch, capsys):
    _run(monkeypatch, "eval", "--type", "scientific", "sqrt(16) + log(100)")

    out = capsys.readouterr().out
    assert "sqrt(16) = 4" in out
    assert "4 + 2 = 6" in out


def test_tokens_command(monkeypatch, capsys):
    _run(monkeypatch, "tokens", "1 + x")

    out = capsys.readouterr().out
    assert "identifier" in out
    assert "symbol=+" in out


def test_tree_command_rejects_unknown_function_in_basic_mode(monkeypatch, capsys):
    with pytest.raises(SystemExit):
        _run(monkeypatch, "tree", "--type", "basic", "sin(0)")

    assert "unknown identifier 'sin'" in capsys.readouterr().out


def test_settings_built_once_and_drive_defaults(monkeypatch, capsys):
    import config

    built = []

    class CountingSettings(config.Settings):
        def __init__(self, **values):
            super().__init__(**values)
            built.append(self)

    monkeypatch.setenv("MATHSTEPS_DEFAULT_CALC_TYPE", "scientific")
    monkeypatch.setenv("MATHSTEPS_DEFAULT_ANGLE_UNIT", "deg")
    monkeypatch.setattr(config, "Settings", CountingSettings)

    _run(monkeypatch, "eval", "--json", "sin(90)")

    assert len(built) == 1
    assert json.loads(capsys.readouterr().out)["result"] == 1
