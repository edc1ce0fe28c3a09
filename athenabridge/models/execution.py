from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ExecutionState(str, Enum):
    QUEUED = "QUEUED"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: str | None) -> "ExecutionState":
        try:
            return cls(str(value).upper())
        except ValueError:
            return cls.UNKNOWN

    @property
    def terminal(self) -> bool:
        return self in {ExecutionState.SUCCEEDED, ExecutionState.FAILED, ExecutionState.CANCELLED}


class EncryptionConfiguration(BaseModel):
    model_config = ConfigDict(frozen=True)

    encryption_option: str
    kms_key: str | None = None


class ExecutionRequest(BaseModel):
    """Everything the engine needs to start one query execution."""

    model_config = ConfigDict(frozen=True)

    sql: str = Field(min_length=1)
    workgroup: str = "primary"
    output_location: str | None = None
    database: str = "default"
    catalog: str | None = None
    parameters: tuple[str, ...] = ()
    encryption: EncryptionConfiguration | None = None


class QueryStatistics(BaseModel):
    data_scanned_bytes: int = 0
    engine_execution_time_ms: int = 0
    total_execution_time_ms: int | None = None
    queue_time_ms: int | None = None


class QueryExecution(BaseModel):
    execution_id: str
    state: ExecutionState
    state_change_reason: str | None = None
    statement_type: str | None = None
    output_location: str | None = None
    statistics: QueryStatistics | None = None
