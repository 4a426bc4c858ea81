import builtins
from typing import Iterator

import pytest

from coem.coem_lexer import tokenize
from coem.coem_repl import block_depth, render, start_repl
from coem.coem_uimap import KeywordMapper


def feed(monkeypatch: pytest.MonkeyPatch, *lines: str) -> list[str]:
    """Make `input` return `lines` in order, then raise EOFError, recording each prompt."""
    prompts: list[str] = []
    it: Iterator[str] = iter(lines)

    def fake_input(prompt: str) -> str:
        prompts.append(prompt)
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    monkeypatch.setattr(builtins, "input", fake_input)
    return prompts


@pytest.mark.parametrize("command", ["quit", "exit", "  quit  "])  # type: ignore[misc]
def test_repl_quit(
    command: str, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    feed(monkeypatch, command)
    start_repl()
    assert "Exiting Coem REPL." in capsys.readouterr().out


def test_repl_eof_exits(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    feed(monkeypatch)
    start_repl()
    assert "Exiting Coem REPL." in capsys.readouterr().out


def test_repl_keyboard_interrupt_exits(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def interrupt(_: str) -> str:
        raise KeyboardInterrupt

    monkeypatch.setattr(builtins, "input", interrupt)
    start_repl()
    assert "Exiting Coem REPL." in capsys.readouterr().out


def test_repl_prints_tree(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    feed(monkeypatch, "let x be true;", "quit")
    start_repl()
    assert "(var x true)" in capsys.readouterr().out


def test_repl_skips_blank_and_comment_lines(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    feed(monkeypatch, "   ", "# note", "quit")
    start_repl()
    out = capsys.readouterr().out
    assert "[error]" not in out
    assert "(" not in out


def test_repl_reads_continuation_lines(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    prompts = feed(monkeypatch, "to greet—name—:", "say name;", ".", "quit")
    start_repl()
    assert prompts == ["coem> ", "....> ", "....> ", "coem> "]
    assert "(fun greet (name) (print name))" in capsys.readouterr().out


def test_repl_shows_diagnostics(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    feed(monkeypatch, "let ;", "say ok;", "quit")
    start_repl()
    out = capsys.readouterr().out
    assert "[error] >>>" in out
    assert "[line 1] Error at ';': Expect variable name." in out
    assert "(print ok)" in out


def test_repl_verbose_toggle(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    feed(monkeypatch, "verbose-mode", "say x;", "verbose-mode", "quit")
    start_repl()
    out = capsys.readouterr().out
    assert "[mode] >>> Verbose mode ON" in out
    assert "[tokens] >>>" in out
    assert "[mode] >>> Verbose mode OFF" in out


def test_repl_keywords_command(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    mapper = KeywordMapper.from_canonical()
    mapper.configure({"yell": "SAY"})
    feed(monkeypatch, "keywords", "yell hi;", "quit")
    start_repl(keywords=mapper)
    out = capsys.readouterr().out
    assert "yell → SAY" in out
    assert "(print hi)" in out


def test_render_json() -> None:
    text = render("say x;", KeywordMapper.from_canonical(), output="json")
    assert '"kind": "print"' in text


def test_render_tokens_only() -> None:
    text = render("say x;", KeywordMapper.from_canonical(), output="tokens")
    assert text.startswith("[tokens] >>>")
    assert "(print" not in text


def test_block_depth() -> None:
    assert block_depth(tokenize("to f——: if —x—: say x;")) == 2
    assert block_depth(tokenize("to f——: say x;.")) == 0
