import pytest

from minishell.heredoc import (
    HeredocInterrupted,
    collect_heredocs,
    contains_heredoc,
    mark_last,
    write_heredoc,
)
from minishell.tokens import TokenType, tokenize
from minishell.tree import Redirection, TreeBuilder


def feeder(lines, prompts=None):
    queue = list(lines)

    def read_line(prompt):
        if prompts is not None:
            prompts.append(prompt)
        if not queue:
            return None
        item = queue.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    read_line.queue = queue
    return read_line


def test_mark_last_flags_final_input_and_output():
    redirs = [
        Redirection(TokenType.INPUT, "a"),
        Redirection(TokenType.OUTPUT, "b"),
        Redirection(TokenType.HEREDOC, "c1", key="c"),
        Redirection(TokenType.OUTPUT_APPEND, "d"),
        Redirection(TokenType.INPUT, "e"),
    ]
    mark_last(redirs)
    assert [r.last for r in redirs] == [False, False, False, True, True]


def test_contains_heredoc():
    assert contains_heredoc([Redirection(TokenType.HEREDOC, "x1", key="x")])
    assert not contains_heredoc([Redirection(TokenType.INPUT, "x")])
    assert not contains_heredoc([])


def test_write_heredoc_stops_at_delimiter(tmp_path):
    target = tmp_path / "body"
    prompts = []
    read_line = feeder(["a", "b", "EOF", "ignored"], prompts)
    write_heredoc(Redirection(TokenType.HEREDOC, str(target), key="EOF"), read_line)
    assert target.read_text() == "a\nb\n"
    assert read_line.queue == ["ignored"]
    assert prompts == ["> "] * 3


def test_write_heredoc_stops_at_end_of_input(tmp_path):
    target = tmp_path / "body"
    write_heredoc(Redirection(TokenType.HEREDOC, str(target), key="EOF"), feeder(["only"]))
    assert target.read_text() == "only\n"


def test_write_heredoc_interrupted(tmp_path):
    target = tmp_path / "body"
    read_line = feeder(["a", KeyboardInterrupt()])
    with pytest.raises(HeredocInterrupted):
        write_heredoc(Redirection(TokenType.HEREDOC, str(target), key="EOF"), read_line)


def test_collect_keeps_only_last_heredoc(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    tree = TreeBuilder().build(tokenize("cat << A << B | wc << C"))
    read_line = feeder(["one", "A", "two", "B", "three", "C"])
    kept = collect_heredocs(tree, read_line)
    assert kept == ["B2", "C3"]
    assert (tmp_path / "B2").read_text() == "two\n"
    assert (tmp_path / "C3").read_text() == "three\n"
    assert not (tmp_path / "A1").exists()


def test_collect_without_heredocs_reads_nothing(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    tree = TreeBuilder().build(tokenize("cat < in > out"))
    read_line = feeder(["untouched"])
    assert collect_heredocs(tree, read_line) == []
    assert read_line.queue == ["untouched"]
    assert tree.redirections[0].last and tree.redirections[1].last


def test_collect_interrupted(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    tree = TreeBuilder().build(tokenize("cat << A"))
    with pytest.raises(HeredocInterrupted) as info:
        collect_heredocs(tree, feeder([KeyboardInterrupt()]))
    assert info.value.exit_status == 1