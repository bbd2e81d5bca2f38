import io
import json

import pytest

from stackcalc import config
from stackcalc.interpreter import Interpreter
from stackcalc_repl.console import handle_line, main, run_command, run_sources
from stackcalc_repl.repl_server import handle_request, new_session


# -------------------------------
# TCP REPL request handling
# -------------------------------
@pytest.fixture
def session():
    return new_session(prelude=None)


def test_eval_request(session):
    resp = handle_request(session, {"cmd": "eval", "code": "1 2.5 [ 3 ]"})
    assert resp == {"ok": True, "stack": ["1", "2.5", "[3]"], "top": "[3]", "output": ""}
    json.dumps(resp)


def test_eval_request_on_empty_stack(session):
    resp = handle_request(session, {"cmd": "eval", "code": ""})
    assert resp == {"ok": True, "stack": [], "top": None, "output": ""}


def test_eval_request_error(bare):
    resp = handle_request(bare, {"cmd": "eval", "code": "1 0 div"})
    assert resp["ok"] is False
    assert resp["stack"] == []
    assert resp["error"] == {
        "kind": "DivisionByZero",
        "message": "division by zero",
        "word": "div",
        "trace": ("div",),
    }


def test_words_request(bare):
    resp = handle_request(bare, {"cmd": "words"})
    assert resp["ok"] is True
    assert "fold1" in resp["words"]
    assert resp["words"] == sorted(resp["words"])


def test_print_output_goes_to_the_client(session, capsys):
    resp = handle_request(session, {"cmd": "eval", "code": "5 dup print 6 print"})
    assert resp["output"] == "5\n6\n"
    assert resp["stack"] == ["5"]
    # drained per request, nothing reaches the server's terminal
    assert handle_request(session, {"cmd": "eval", "code": "1"})["output"] == ""
    assert capsys.readouterr().out == ""


def test_output_printed_before_an_error_is_returned(session):
    resp = handle_request(session, {"cmd": "eval", "code": "7 print nosuch"})
    assert resp["ok"] is False
    assert resp["output"] == "7\n"


def test_stdin_does_not_block_server_sessions(session):
    resp = handle_request(session, {"cmd": "eval", "code": "stdin"})
    assert resp["ok"] is False
    assert resp["error"]["kind"] == "UnexpectedEndOfInput"


@pytest.mark.parametrize(
    "req",
    [
        {"cmd": "launch"},
        {"code": "1"},
        ["eval"],
        {"cmd": "eval", "code": 5},
    ]
)
def test_bad_requests(bare, req):
    resp = handle_request(bare, req)
    assert resp["ok"] is False
    assert isinstance(resp["error"], str)


# -------------------------------
# Console
# -------------------------------
def test_handle_line_prints_top_or_error(bare):
    out = io.StringIO()
    assert handle_line(bare, "3 4 add", out)
    assert handle_line(bare, "nosuch", out)
    assert handle_line(bare, "   ", out)
    lines = out.getvalue().splitlines()
    assert lines[0] == "7"
    assert lines[1].startswith("error: UnknownWord")


def test_dot_commands(bare):
    out = io.StringIO()
    handle_line(bare, "1 2", out)
    handle_line(bare, ".stack", out)
    handle_line(bare, ".clear", out)
    handle_line(bare, ".bogus", out)
    assert bare.stack.items == []
    assert out.getvalue().splitlines()[:3] == ["2", "1", "2"]
    assert "unknown command .bogus" in out.getvalue()
    assert handle_line(bare, ".quit", out) is False


def test_words_command_groups_aliases(bare):
    bare.load(",plus ,add alias ,+ ,plus alias ,sq { dup mul } def")
    out = io.StringIO()
    run_command(bare, ".words", out)
    lines = out.getvalue().splitlines()
    assert "add (aliases: +, plus)" in lines
    assert "sq" in lines
    assert "plus" not in lines
    assert len(lines) == len(bare.dictionary) - 2


def test_run_sources(bare):
    out = io.StringIO()
    assert run_sources(bare, [",sq { dup mul } def", "7 sq"], out) == 0
    assert out.getvalue() == "49\n"


def test_run_sources_failure_exit_code(bare):
    out = io.StringIO()
    assert run_sources(bare, ["1 add"], out) == 1
    assert out.getvalue().startswith("Error: StackUnderflow in 'add'")


def test_main_eval_option(capsys):
    assert main(["-e", "5 !"]) == 0
    assert capsys.readouterr().out == "120\n"


def test_main_runs_files(tmp_path, capsys):
    lib = tmp_path / "lib.calc"
    lib.write_text(",twice { 2 mul } def\n", encoding="utf-8")
    prog = tmp_path / "prog.calc"
    prog.write_text("21 twice  # the answer\n", encoding="utf-8")
    assert main(["--no-prelude", str(lib), str(prog)]) == 0
    assert capsys.readouterr().out == "42\n"


def test_main_reports_missing_file(tmp_path, capsys):
    lib = tmp_path / "lib.calc"
    lib.write_text("1 2", encoding="utf-8")
    missing = tmp_path / "absent.calc"
    assert main(["--no-prelude", str(lib), str(missing)]) == 1
    out = capsys.readouterr().out
    assert out.startswith("Error: ")
    assert "absent.calc" in out


# -------------------------------
# Configuration
# -------------------------------
def test_prelude_path_from_env(tmp_path, monkeypatch):
    custom = tmp_path / "mine.calc"
    custom.write_text(",answer { 42 } def", encoding="utf-8")
    monkeypatch.setenv("STACKCALC_PRELUDE_PATH", str(custom))
    itp = Interpreter()
    assert itp.eval("answer") == 42
    assert "range" not in itp.dictionary


def test_prelude_directory_loads_every_file_in_order(tmp_path, monkeypatch):
    (tmp_path / "a.calc").write_text(",one { 1 } def", encoding="utf-8")
    (tmp_path / "b.calc").write_text(",two { one one add } def", encoding="utf-8")
    monkeypatch.setenv("STACKCALC_PRELUDE_PATH", str(tmp_path))
    assert [p.name for p in config.get_prelude_files()] == ["a.calc", "b.calc"]
    assert Interpreter().eval("two") == 2


def test_missing_prelude(tmp_path, monkeypatch):
    monkeypatch.setenv("STACKCALC_PRELUDE_PATH", str(tmp_path / "absent.calc"))
    with pytest.raises(FileNotFoundError):
        Interpreter()


def test_log_level_from_env(monkeypatch):
    monkeypatch.setenv("STACKCALC_LOG_LEVEL", "debug")
    assert config.get_log_level() == 10
    monkeypatch.setenv("STACKCALC_LOG_LEVEL", "nonsense")
    assert config.get_log_level() == 30


def test_repl_address_from_env(monkeypatch):
    monkeypatch.delenv("STACKCALC_REPL_HOST", raising=False)
    monkeypatch.setenv("STACKCALC_REPL_PORT", "9999")
    assert config.get_repl_address() == ("127.0.0.1", 9999)
