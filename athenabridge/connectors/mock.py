from __future__ import annotations

from typing import Sequence

from athenabridge.connectors.base import ObjectStore, QueryEngine
from athenabridge.errors import EngineFault
from athenabridge.models.execution import ExecutionRequest, ExecutionState, QueryExecution, QueryStatistics
from athenabridge.models.results import ColumnSchema, RawCells, ResultPage

ScriptedStatus = ExecutionState | QueryExecution | EngineFault


class MockQueryEngine(QueryEngine):
    """In-memory engine replaying a scripted sequence of submissions and statuses.

    Result pages follow the remote engine's layout: the first row of the first
    page is a header row holding the column names.
    """

    def __init__(
        self,
        *,
        execution_id: str = "mock-execution",
        statuses: Sequence[ScriptedStatus] = (ExecutionState.SUCCEEDED,),
        submit_faults: Sequence[EngineFault] = (),
        schema: ColumnSchema | None = None,
        rows: Sequence[RawCells] = (),
        statement_type: str = "DML",
        output_location: str | None = None,
        failure_reason: str | None = None,
        statistics: QueryStatistics | None = None,
    ) -> None:
        self.execution_id = execution_id
        self._statuses = list(statuses)
        self._submit_faults = list(submit_faults)
        self._schema = schema or ColumnSchema()
        self._rows = [list(row) for row in rows]
        self._statement_type = statement_type
        self._output_location = output_location or f"s3://mock-bucket/results/{execution_id}.csv"
        self._failure_reason = failure_reason
        self._statistics = statistics or QueryStatistics()
        self.submitted: list[ExecutionRequest] = []
        self.submit_attempts = 0
        self.status_calls = 0
        self.result_calls: list[tuple[str, int, str | None]] = []

    async def start_query_execution(self, request: ExecutionRequest) -> str:
        self.submit_attempts += 1
        if self._submit_faults:
            raise self._submit_faults.pop(0)
        self.submitted.append(request)
        return self.execution_id

    async def get_query_execution(self, execution_id: str) -> QueryExecution:
        self.status_calls += 1
        scripted = self._statuses.pop(0) if len(self._statuses) > 1 else self._statuses[0]
        if isinstance(scripted, EngineFault):
            raise scripted
        if isinstance(scripted, QueryExecution):
            return scripted
        return QueryExecution(
            execution_id=execution_id,
            state=scripted,
            state_change_reason=self._failure_reason if scripted.terminal else None,
            statement_type=self._statement_type,
            output_location=self._output_location,
            statistics=self._statistics,
        )

    async def get_query_results(
        self,
        execution_id: str,
        max_results: int,
        next_token: str | None = None,
    ) -> ResultPage:
        self.result_calls.append((execution_id, max_results, next_token))
        table: list[RawCells] = [list(self._schema.names()), *self._rows]
        start = int(next_token) if next_token else 0
        end = start + max_results
        return ResultPage(
            rows=[list(row) for row in table[start:end]],
            next_token=str(end) if end < len(table) else None,
            metadata=self._schema.model_copy(deep=True),
        )


class MockObjectStore(ObjectStore):
    def __init__(self, objects: dict[str, bytes] | None = None) -> None:
        self._objects = dict(objects or {})
        self.requests: list[tuple[str, str]] = []

    def put(self, location: str, body: bytes | str) -> None:
        payload = body.encode("utf-8") if isinstance(body, str) else body
        self._objects[location.removeprefix("s3://")] = payload

    async def get_object(self, bucket: str, key: str) -> bytes:
        self.requests.append((bucket, key))
        try:
            return self._objects[f"{bucket}/{key}"]
        except KeyError:
            raise EngineFault("NoSuchKey", f"s3://{bucket}/{key} does not exist") from None
