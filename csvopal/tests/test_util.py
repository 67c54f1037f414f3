import pytest

from csvopal import CsvOpalUserError
from csvopal.util import dequote, is_quoted, parse_column_numbers, parse_indexed_list


def test_parse_indexed_list_mixes_pinned_and_positional():
    """Every token consumes a position, pinned or not."""
    assert parse_indexed_list("1:vf,vt,4:last") == {1: "vf", 2: "vt", 4: "last"}
    assert parse_indexed_list("1:from_nanoseconds,from_nanoseconds,string,int64") == {
        1: "from_nanoseconds",
        2: "from_nanoseconds",
        3: "string",
        4: "int64",
    }


def test_parse_indexed_list_later_entries_win():
    assert parse_indexed_list("x,1:y") == {1: "y"}
    assert parse_indexed_list("2:y,late") == {2: "late"}


def test_parse_indexed_list_empty_tokens_keep_their_position():
    assert parse_indexed_list("a,,c") == {1: "a", 3: "c"}
    assert parse_indexed_list(",b") == {2: "b"}


def test_parse_indexed_list_empty_input():
    assert parse_indexed_list("") == {}
    assert parse_indexed_list(None) == {}


@pytest.mark.parametrize("bad", ["abc:int64", "0:x", "-1:x"])
def test_parse_indexed_list_rejects_bad_pins(bad):
    with pytest.raises(CsvOpalUserError) as ex:
        parse_indexed_list(bad)
    assert getattr(ex.value, "code", None) == "E_COLUMN_NUMBER"


def test_parse_column_numbers():
    assert parse_column_numbers("1,3,3") == frozenset({1, 3})
    assert parse_column_numbers("1,, 2 ") == frozenset({1, 2})
    assert parse_column_numbers([4, "5"]) == frozenset({4, 5})
    assert parse_column_numbers("") == frozenset()
    assert parse_column_numbers(None) == frozenset()


@pytest.mark.parametrize("bad", ["a", "-1", "0", "1.5"])
def test_parse_column_numbers_rejects_non_positive_integers(bad):
    with pytest.raises(CsvOpalUserError) as ex:
        parse_column_numbers(bad)
    assert getattr(ex.value, "code", None) == "E_COLUMN_NUMBER"
    assert "Hint:" in str(ex.value)


def test_dequote_removes_every_quote_and_is_a_noop_without_quotes():
    assert dequote('"abc"') == "abc"
    assert dequote('a"b"c') == "abc"
    assert dequote("abc") == "abc"
    assert dequote(dequote('"x"')) == "x"


def test_is_quoted():
    assert is_quoted('"a"')
    assert is_quoted('""')
    assert not is_quoted('"')
    assert not is_quoted("a")
    assert not is_quoted('"a')
