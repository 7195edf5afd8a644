import io
import sys

from vecalc.commands import Calculator
from vecalc.readers import StreamLineReader
from vecalc.repl import REPL, main
from vecalc.session import Session


def make_repl(make_reader, lines):
    reader = make_reader(lines)
    return REPL(Calculator(Session(), reader), reader)


def test_repl_prints_results_and_errors(make_reader, capsys):
    make_repl(make_reader, ["x = 2", "x * 3", "", "bogus +", "x"]).run()
    captured = capsys.readouterr()
    assert "6" in captured.out.splitlines()
    assert "x = 2" in captured.out
    assert captured.out.rstrip().endswith("CTRL-D")
    assert captured.err.startswith("ERR: ")


def test_one_bad_line_does_not_end_session(make_reader, capsys):
    make_repl(make_reader, ["5 + <1, 2>", "1 + 1"]).run()
    captured = capsys.readouterr()
    assert "Can't add a scalar and a vector together" in captured.err
    assert "2" in captured.out.splitlines()


def test_repl_interrupt_exits_loop(make_reader, capsys):
    make_repl(make_reader, ["1 + 1", KeyboardInterrupt(), "2 + 2"]).run()
    out = capsys.readouterr().out
    assert "CTRL-C" in out
    assert "4" not in out.splitlines()


def test_evaluate_line(make_reader):
    repl = make_repl(make_reader, [])
    assert repl.evaluate_line("1 + 2") == (True, "3")
    ok, out = repl.evaluate_line("nope + 1")
    assert not ok and out == "ERR: Invalid identifier 'nope'"


def test_stream_reader(capsys):
    reader = StreamLineReader(io.StringIO("a = 1\r\nb\n"))
    assert reader.read_line(">> ") == "a = 1"
    assert reader.read_line(">> ") == "b"
    try:
        reader.read_line(">> ")
    except EOFError:
        pass
    else:
        raise AssertionError("expected EOFError")
    assert capsys.readouterr().out == ">> >> >> "


def test_main_reads_piped_input(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("VECALC_HISTORY_FILE", str(tmp_path / "history"))
    monkeypatch.setenv("VECALC_DEBUG_LEVEL", "1")
    monkeypatch.setattr(sys, "stdin", io.StringIO("a = <1, 0, 0>\na × <0, 1, 0>\n.save s\n"))
    assert main() == 0
    out = capsys.readouterr().out
    assert "<0, 0, 1>" in out
    assert (tmp_path / "s.vecalc").exists()


def test_deeply_nested_line_does_not_end_session(make_reader, capsys):
    deep = "(" * 1000 + "1" + ")" * 1000
    make_repl(make_reader, [deep, "1 + 1"]).run()
    captured = capsys.readouterr()
    assert "ERR: Tokenization error: Expression nested too deeply at position 0" in captured.err
    assert "2" in captured.out.splitlines()


def test_unexpected_error_is_logged_and_loop_continues(make_reader, monkeypatch, capsys, caplog):
    repl = make_repl(make_reader, ["boom", "1 + 1"])
    execute = repl.calculator.execute

    def flaky(line):
        if line == "boom":
            raise RuntimeError("kaboom")
        return execute(line)

    monkeypatch.setattr(repl.calculator, "execute", flaky)
    with caplog.at_level("ERROR", logger="vecalc.repl"):
        repl.run()
    captured = capsys.readouterr()
    assert "ERR: kaboom" in captured.err
    assert "2" in captured.out.splitlines()
    assert any(r.levelname == "ERROR" and r.exc_info for r in caplog.records)
