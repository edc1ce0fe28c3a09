from __future__ import annotations

import re
from typing import Any, Callable

from athenabridge.errors import MalformedValueError

INTEGER_TYPES = frozenset({"bigint", "integer", "int", "smallint", "tinyint"})
FLOAT_TYPES = frozenset({"float", "double", "real"})

_INTEGER_PATTERN = re.compile(r"[+-]?\d+", re.ASCII)
_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|[+-]?Infinity|NaN",
    re.ASCII,
)


def _parse_boolean(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ValueError(value)


def _parse_integer(value: str) -> int:
    text = value.strip()
    if not _INTEGER_PATTERN.fullmatch(text):
        raise ValueError(value)
    return int(text)


def _parse_float(value: str) -> float:
    text = value.strip()
    if not _FLOAT_PATTERN.fullmatch(text):
        raise ValueError(value)
    return float(text)


def _parser_for(base_type: str) -> Callable[[str], Any] | None:
    if base_type == "boolean":
        return _parse_boolean
    if base_type in INTEGER_TYPES:
        return _parse_integer
    if base_type in FLOAT_TYPES:
        return _parse_float
    return None


def base_type_name(declared_type: str | None) -> str:
    """Normalise ``varchar(10)`` style declarations to ``varchar``."""
    if not declared_type:
        return ""
    return declared_type.split("(", 1)[0].strip().lower()


def coerce_value(value: str | None, declared_type: str | None, *, column: str | None = None) -> Any:
    if value is None or value == "":
        return None

    parser = _parser_for(base_type_name(declared_type))
    if parser is None:
        # varchar and unrecognised types pass through untouched
        return value
    try:
        return parser(value)
    except ValueError as exc:
        raise MalformedValueError(
            column=column,
            value=value,
            declared_type=str(declared_type),
        ) from exc
