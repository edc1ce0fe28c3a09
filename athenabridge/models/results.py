from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

TypedRecord = dict[str, Any]
RawCells = list[str | None]


class ColumnInfo(BaseModel):
    name: str
    type: str
    label: str | None = None
    nullable: str | None = None
    precision: int | None = None
    scale: int | None = None


class ColumnSchema(BaseModel):
    """Ordered column description of one result set."""

    columns: list[ColumnInfo] = Field(default_factory=list)

    def names(self) -> list[str]:
        return [column.name for column in self.columns]

    def types(self) -> dict[str, str]:
        return {column.name: column.type for column in self.columns}

    @classmethod
    def from_types(cls, types: dict[str, str]) -> "ColumnSchema":
        return cls(columns=[ColumnInfo(name=name, type=type_) for name, type_ in types.items()])


class ResultPage(BaseModel):
    rows: list[RawCells] = Field(default_factory=list)
    next_token: str | None = None
    metadata: ColumnSchema = Field(default_factory=ColumnSchema)


class RetrievalStrategy(str, Enum):
    NON_TABULAR = "non_tabular"
    PAGINATED_RAW = "paginated_raw"
    PAGINATED_TYPED = "paginated_typed"
    FULL_TYPED = "full_typed"
    FULL_RAW = "full_raw"

    @property
    def paginated(self) -> bool:
        return self in {RetrievalStrategy.PAGINATED_RAW, RetrievalStrategy.PAGINATED_TYPED}


class RetrievalOptions(BaseModel):
    format_json: bool = True
    page_size: int = Field(default=0, ge=0)
    next_token: str | None = None
    include_metadata: bool = False
    ignore_empty: bool = True


class QueryStats(BaseModel):
    query_execution_id: str
    data_scanned_mb: float
    query_cost_usd: float
    engine_execution_time_ms: int
    count: int
    s3_location: str | None = None


class QueryResultSet(BaseModel):
    query_execution_id: str
    strategy: RetrievalStrategy | None = None
    items: list[Any] = Field(default_factory=list)
    next_token: str | None = None
    metadata: ColumnSchema | None = None
    stats: QueryStats | None = None
