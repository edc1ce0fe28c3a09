from athenabridge.models.execution import (
    EncryptionConfiguration,
    ExecutionRequest,
    ExecutionState,
    QueryExecution,
    QueryStatistics,
)
from athenabridge.models.query import QueryRequest
from athenabridge.models.results import (
    ColumnInfo,
    ColumnSchema,
    QueryResultSet,
    QueryStats,
    RawCells,
    ResultPage,
    RetrievalOptions,
    RetrievalStrategy,
    TypedRecord,
)

__all__ = [
    "EncryptionConfiguration",
    "ExecutionRequest",
    "ExecutionState",
    "QueryExecution",
    "QueryStatistics",
    "QueryRequest",
    "ColumnInfo",
    "ColumnSchema",
    "QueryResultSet",
    "QueryStats",
    "RawCells",
    "ResultPage",
    "RetrievalOptions",
    "RetrievalStrategy",
    "TypedRecord",
]
