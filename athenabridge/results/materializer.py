from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from athenabridge.models.results import ColumnSchema, TypedRecord
from athenabridge.results.coercion import coerce_value


def _column_types(schema: ColumnSchema | Mapping[str, str] | None) -> Mapping[str, str]:
    if schema is None:
        return {}
    if isinstance(schema, ColumnSchema):
        return schema.types()
    return schema


def materialize(
    raw_row: Mapping[str, str | None],
    schema: ColumnSchema | Mapping[str, str] | None,
) -> TypedRecord:
    """Coerce a named row against the declared column types.

    Keys follow the row's own order; declared columns missing from the row are
    added as ``None``.
    """
    types = _column_types(schema)
    record: TypedRecord = {}
    for name, value in raw_row.items():
        record[name] = coerce_value(value, types.get(name), column=name)
    for name in types:
        if name not in record:
            record[name] = None
    return record


def materialize_row(cells: Sequence[str | None], schema: ColumnSchema) -> TypedRecord:
    """Coerce a positional row; cell ``i`` belongs to ``schema.columns[i]``."""
    record: TypedRecord = {}
    for index, column in enumerate(schema.columns):
        value = cells[index] if index < len(cells) else None
        record[column.name] = coerce_value(value, column.type, column=column.name)
    return record


def materialize_rows(rows: Iterable[Sequence[str | None]], schema: ColumnSchema) -> list[TypedRecord]:
    return [materialize_row(cells, schema) for cells in rows]
