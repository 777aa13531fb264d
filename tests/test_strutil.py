import pytest

from minishell.strutil import atoll, strnjoin


@pytest.mark.parametrize(
    "text, expected",
    [
        ("42", 42),
        ("   42", 42),
        ("\t\n\v\f\r7", 7),
        ("+15", 15),
        ("-15", -15),
        ("123abc", 123),
        ("", 0),
        ("abc", 0),
        ("--5", 0),
        ("+-5", 0),
        ("- 5", 0),
    ],
)
def test_atoll_parses_leading_integer(text, expected):
    assert atoll(text) == expected


def test_atoll_accepts_largest_positive():
    assert atoll("9223372036854775807") == 2**63 - 1


def test_atoll_accepts_smallest_negative():
    assert atoll("-9223372036854775808") == -(2**63)


@pytest.mark.parametrize(
    "text",
    ["9223372036854775808", "-9223372036854775809", "99999999999999999999999"],
)
def test_atoll_overflow_gives_zero(text):
    assert atoll(text) == 0


def test_atoll_stops_at_inner_whitespace():
    assert atoll("12 34") == 12


@pytest.mark.parametrize(
    "first, second, limit, expected",
    [
        ("ab", "cdef", 2, "abcd"),
        ("ab", "cd", 10, "abcd"),
        ("", "xyz", 1, "x"),
        ("ab", "", 3, "ab"),
        ("ab", "cd", 0, "ab"),
    ],
)
def test_strnjoin(first, second, limit, expected):
    assert strnjoin(first, second, limit) == expected


@pytest.mark.parametrize("first, second", [(None, "a"), ("a", None), (None, None)])
def test_strnjoin_missing_side_gives_none(first, second):
    assert strnjoin(first, second, 1) is None


def test_strnjoin_result_length_is_bounded():
    for limit in range(6):
        joined = strnjoin("abc", "defg", limit)
        assert len(joined) == 3 + min(limit, 4)
        assert joined.startswith("abc")