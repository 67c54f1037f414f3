import logging

import pytest

from csvopal import Column, ColumnConfig, ColumnOptions, CsvOpalUserError, reconcile_header

HEADER = ('"a"', '"b"', '"c"')


def test_reconcile_header_resolves_surviving_columns():
    opts = ColumnOptions.from_flags(drop="2", labels="1:x,3:z", types="1:int64")

    config = reconcile_header(opts, HEADER)

    assert config.num_input_cols == 3
    assert config.columns == (
        Column(number=1, label="x", cast="int64"),
        Column(number=3, label="z", cast="string"),
    )
    assert config.labels == ["x", "z"]


def test_labels_default_to_header_cells_without_quotes():
    config = reconcile_header(ColumnOptions(), ('"a"', "b", '"c d"', 'e"f'))

    assert config.labels == ["a", "b", "c d", "ef"]
    assert all(c.cast == "string" for c in config.columns)


def test_empty_label_or_cast_falls_back_to_defaults():
    opts = ColumnOptions.from_flags(labels="1:", types="1:")

    config = reconcile_header(opts, HEADER)

    assert config.columns[0] == Column(number=1, label="a", cast="string")


def test_columns_follow_input_order_not_flag_order():
    opts = ColumnOptions.from_flags(labels="3:z,2:y,1:x", dequote="3,1")

    config = reconcile_header(opts, HEADER)

    assert [c.number for c in config.columns] == [1, 2, 3]
    assert config.labels == ["x", "y", "z"]
    assert [c.dequote for c in config.columns] == [True, False, True]


def test_dropping_every_column_fails():
    with pytest.raises(CsvOpalUserError) as ex:
        reconcile_header(ColumnOptions.from_flags(drop="1,2,3"), HEADER)
    assert getattr(ex.value, "code", None) == "E_ALL_COLUMNS_DROPPED"


def test_out_of_range_columns_are_ignored_with_a_warning(caplog):
    opts = ColumnOptions.from_flags(drop="1,2,5", labels="9:late")

    with caplog.at_level(logging.WARNING, logger="csvopal"):
        config = reconcile_header(opts, HEADER)

    assert config.labels == ["c"]
    assert "drop column(s) 5 beyond the 3 header column(s) ignored" in caplog.text
    assert "label column(s) 9" in caplog.text


def test_empty_header_fails():
    with pytest.raises(CsvOpalUserError) as ex:
        reconcile_header(ColumnOptions(), ())
    assert getattr(ex.value, "code", None) == "E_NO_HEADER"


@pytest.mark.parametrize(
    "cast, numeric",
    [
        ("int64", True),
        ("from_seconds", True),
        ("from_milliseconds", True),
        ("from_nanoseconds", True),
        ("string", False),
        ("float64", False),
        ("parse_isotime", False),
    ],
)
def test_numeric_casts_are_a_closed_set(cast, numeric):
    assert Column(number=1, label="a", cast=cast).numeric is numeric


def test_config_requires_a_surviving_column():
    with pytest.raises(CsvOpalUserError) as ex:
        ColumnConfig(num_input_cols=2, columns=())
    assert getattr(ex.value, "code", None) == "E_ALL_COLUMNS_DROPPED"


def test_config_to_yaml_lists_columns():
    config = reconcile_header(ColumnOptions.from_flags(types="int64"), ('"a"', '"b"'))

    text = config.to_yaml()

    assert "num_input_cols: 2" in text
    assert "cast: int64" in text
    assert "numeric: true" in text
