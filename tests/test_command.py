from pipeshell.command import (
    RedirectKind,
    Redirection,
    SimpleCommand,
    unquote_filename,
)


def test_unquote_filename():
    assert unquote_filename('"out file".txt') == "out file.txt"
    assert unquote_filename("'a'\"b\"c") == "abc"
    assert unquote_filename("plain") == "plain"


def test_redirect_kind_symbols():
    assert RedirectKind(">>") is RedirectKind.APPEND
    assert RedirectKind("<") is RedirectKind.IN


def test_redirection_holds_values():
    redir = Redirection(RedirectKind.OUT, "out.txt")
    assert redir.kind is RedirectKind.OUT
    assert redir.target == "out.txt"


def test_content_is_original_order_copy():
    cmd = SimpleCommand(["grep", "-v", "x"])
    content = cmd.content()
    content.append("extra")
    assert cmd.content() == ["grep", "-v", "x"]


def test_words_and_flags():
    cmd = SimpleCommand(["grep", "-v", "x", "-", "-i"])
    assert cmd.words == ["grep", "x", "-"]
    assert cmd.flags == ["-v", "-i"]


def test_exec_argv_puts_flags_last():
    assert SimpleCommand(["grep", "-v", "x"]).exec_argv() == ["grep", "x", "-v"]
    assert SimpleCommand(["ls", "dir", "-l"]).exec_argv() == ["ls", "dir", "-l"]


def test_exec_argv_is_permutation_of_content():
    cmd = SimpleCommand(["cmd", "-a", "b", "-c", "d"])
    assert sorted(cmd.exec_argv()) == sorted(cmd.content())
    assert cmd.exec_argv()[0] == "cmd"


def test_is_invalid():
    assert SimpleCommand([]).is_invalid() is True
    assert SimpleCommand(["A=1"]).is_invalid() is True
    assert SimpleCommand([""]).is_invalid() is True
    assert SimpleCommand(["ls", "A=1"]).is_invalid() is False


def test_name():
    assert SimpleCommand(["echo", "hi"]).name == "echo"
    assert SimpleCommand().name is None


def test_defaults_are_independent():
    first = SimpleCommand()
    second = SimpleCommand()
    first.redirections.append(Redirection(RedirectKind.IN, "f"))
    assert second.redirections == []
    assert second.heredoc_file is None