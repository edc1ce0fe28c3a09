from __future__ import annotations

import pytest

from athenabridge.errors import MalformedValueError
from athenabridge.models.results import ColumnInfo, ColumnSchema
from athenabridge.results.coercion import base_type_name, coerce_value
from athenabridge.results.materializer import materialize, materialize_row, materialize_rows


def test_materialize_coerces_declared_types() -> None:
    schema = {"a": "bigint", "b": "boolean", "c": "varchar"}

    record = materialize({"a": "42", "b": "TRUE", "c": ""}, schema)

    assert record == {"a": 42, "b": True, "c": None}
    assert isinstance(record["a"], int)
    assert record["b"] is True


def test_materialize_rejects_non_boolean_token() -> None:
    with pytest.raises(MalformedValueError) as exc_info:
        materialize({"x": "maybe"}, {"x": "boolean"})

    assert exc_info.value.column == "x"
    assert exc_info.value.value == "maybe"


def test_bigint_keeps_arbitrary_precision() -> None:
    value = coerce_value("123456789012345678901234567890", "bigint")

    assert value == 123456789012345678901234567890


@pytest.mark.parametrize(
    ("raw", "declared", "expected"),
    [
        ("7", "integer", 7),
        ("-3", "tinyint", -3),
        ("12", "smallint", 12),
        ("5", "int", 5),
        ("1.5", "float", 1.5),
        ("2.25", "double", 2.25),
        ("false", "boolean", False),
        ("hello", "varchar", "hello"),
        ("2024-01-01", "date", "2024-01-01"),
        ("abc", "varchar(10)", "abc"),
    ],
)
def test_coerce_value_by_declared_type(raw: str, declared: str, expected: object) -> None:
    assert coerce_value(raw, declared) == expected


def test_numeric_parse_failure_is_malformed() -> None:
    with pytest.raises(MalformedValueError):
        coerce_value("forty", "integer", column="age")


def test_unknown_columns_pass_through_and_missing_declared_columns_are_null() -> None:
    record = materialize({"extra": "value"}, {"declared": "bigint"})

    assert record == {"extra": "value", "declared": None}


def test_materialize_row_maps_cells_positionally() -> None:
    schema = ColumnSchema(
        columns=[
            ColumnInfo(name="id", type="bigint"),
            ColumnInfo(name="name", type="varchar"),
            ColumnInfo(name="active", type="boolean"),
        ]
    )

    record = materialize_row(["1", "alpha", "false"], schema)

    assert list(record) == ["id", "name", "active"]
    assert record == {"id": 1, "name": "alpha", "active": False}


def test_materialize_row_fills_missing_cells_with_null() -> None:
    schema = ColumnSchema.from_types({"id": "bigint", "score": "double"})

    assert materialize_row(["9", None], schema) == {"id": 9, "score": None}
    assert materialize_row(["9"], schema) == {"id": 9, "score": None}


def test_materialize_rows_returns_nothing_when_one_row_is_malformed() -> None:
    schema = ColumnSchema.from_types({"flag": "boolean"})

    with pytest.raises(MalformedValueError):
        materialize_rows([["true"], ["nope"], ["false"]], schema)


def test_base_type_name_normalises_parameterised_types() -> None:
    assert base_type_name("DECIMAL(10, 2)") == "decimal"
    assert base_type_name(None) == ""


@pytest.mark.parametrize(
    ("raw", "declared"),
    [
        ("1_000", "bigint"),
        ("١٢", "integer"),
        ("12.0", "int"),
        ("1_0.5", "double"),
        ("١.5", "float"),
        ("inf", "real"),
    ],
)
def test_numbers_outside_plain_ascii_notation_are_malformed(raw: str, declared: str) -> None:
    with pytest.raises(MalformedValueError):
        coerce_value(raw, declared, column="n")


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("+12", 12), (" 7 ", 7), ("-0", 0)],
)
def test_signed_integers_are_accepted(raw: str, expected: int) -> None:
    assert coerce_value(raw, "bigint") == expected


def test_engine_float_notations_are_accepted() -> None:
    assert coerce_value("1.5E3", "double") == 1500.0
    assert coerce_value(".25", "float") == 0.25
    assert coerce_value("-Infinity", "double") == float("-inf")
