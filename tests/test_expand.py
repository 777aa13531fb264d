import pytest

from minishell.env import Environment
from minishell.expand import expand_tokens, expand_word
from minishell.tokens import TokenType, tokenize

USER = "alice"


@pytest.fixture
def env():
    return Environment.from_envp(["USER=" + USER, "HOME=/home/" + USER, "PATH=/bin"])


def test_plain_word_unchanged(env):
    assert expand_word("hello", env, 0) == "hello"


def test_unquoted_variable(env):
    assert expand_word("$USER", env, 0) == USER


def test_variable_in_double_quotes(env):
    assert expand_word('"$USER"', env, 0) == USER


def test_single_quotes_keep_dollar(env):
    assert expand_word("'$USER'", env, 0) == "$USER"


def test_unset_variable_alone_gives_none(env):
    assert expand_word("$NOPE", env, 0) is None


def test_unset_variable_after_text(env):
    assert expand_word("pre$NOPE", env, 0) == "pre"


def test_exit_status(env):
    assert expand_word("$?", env, 127) == str(127)


def test_exit_status_inside_double_quotes(env):
    assert expand_word('"code $?"', env, 3) == "code " + str(3)


def test_bang_is_dropped(env):
    assert expand_word("$!", env, 0) is None


def test_trailing_dollar_is_literal(env):
    assert expand_word("abc$", env, 0) == "abc$"


def test_digit_after_dollar_is_skipped(env):
    assert expand_word("$1abc", env, 0) == "abc"


def test_percent_after_dollar_is_literal(env):
    assert expand_word("$%", env, 0) == "$%"


def test_backslash_after_dollar(env):
    assert expand_word("$\\x", env, 0) == "$" + "x"


@pytest.mark.parametrize("word", ['""', "''", '""""'])
def test_empty_quotes_give_none(env, word):
    assert expand_word(word, env, 0) is None


def test_adjacent_quoted_parts_join(env):
    assert expand_word("'a'\"b\"", env, 0) == "a" + "b"


def test_name_stops_at_non_name_char(env):
    assert expand_word("$USER.txt", env, 0) == USER + ".txt"


def test_spaces_inside_quotes_kept(env):
    assert expand_word('"a  b"', env, 0) == "a  b"


def test_unquoted_space_leaves_word_unchanged(env):
    assert expand_word("$USER b", env, 0) == "$USER b"


def test_leading_equals_in_value_is_dropped():
    env = Environment([("X", "=v")])
    assert expand_word("$X", env, 0) == "v"


def test_empty_value_is_kept_as_empty_string():
    env = Environment([("EMPTY", "")])
    assert expand_word("$EMPTY", env, 0) == ""


def test_single_quotes_inside_double_quotes(env):
    assert expand_word("\"'$USER'\"", env, 0) == "'" + USER + "'"


def test_dollar_before_single_quote_is_literal(env):
    assert expand_word("$'USER'", env, 0) == "$USER"


def test_none_value_stays_none(env):
    assert expand_word(None, env, 0) is None


def test_expand_tokens_keeps_types_and_order(env):
    tokens = tokenize('echo "$USER" | cat > $HOME')
    expanded = expand_tokens(tokens, env, 0)
    assert [token.type for token in expanded] == [token.type for token in tokens]
    assert [token.value for token in expanded] == [
        "echo",
        USER,
        "|",
        "cat",
        ">",
        env.get("HOME"),
    ]


def test_expand_tokens_leaves_operators_alone(env):
    expanded = expand_tokens(tokenize("cat << 'EOF'"), env, 0)
    assert expanded[1].type == TokenType.HEREDOC
    assert expanded[1].value == "<<"
    assert expanded[2].value == "EOF"


def test_expand_tokens_does_not_modify_input(env):
    tokens = tokenize("$USER")
    expand_tokens(tokens, env, 0)
    assert tokens[0].value == "$USER"


def test_expand_tokens_unset_variable_gives_none_value(env):
    expanded = expand_tokens(tokenize("echo $NOPE"), env, 0)
    assert expanded[0].value == "echo"
    assert expanded[1].value is None