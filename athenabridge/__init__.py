from athenabridge.errors import (
    AthenaBridgeError,
    ConfigurationError,
    EngineFault,
    FatalSubmissionError,
    MalformedResultError,
    MalformedValueError,
    QueryCancelledError,
    QueryFailedError,
)
from athenabridge.models import ColumnSchema, ExecutionRequest, QueryRequest, QueryResultSet, RetrievalStrategy
from athenabridge.service import AthenaQueryService

__all__ = [
    "AthenaBridgeError",
    "ConfigurationError",
    "EngineFault",
    "FatalSubmissionError",
    "MalformedResultError",
    "MalformedValueError",
    "QueryCancelledError",
    "QueryFailedError",
    "ColumnSchema",
    "ExecutionRequest",
    "QueryRequest",
    "QueryResultSet",
    "RetrievalStrategy",
    "AthenaQueryService",
]
