from __future__ import annotations

from athenabridge.models.execution import ExecutionRequest, QueryExecution
from athenabridge.models.results import ResultPage


class QueryEngine:
    """Remote engine that runs queries asynchronously.

    Implementations raise :class:`athenabridge.errors.EngineFault` for remote
    failures so callers can classify them.
    """

    async def start_query_execution(self, request: ExecutionRequest) -> str:
        raise NotImplementedError

    async def get_query_execution(self, execution_id: str) -> QueryExecution:
        raise NotImplementedError

    async def get_query_results(
        self,
        execution_id: str,
        max_results: int,
        next_token: str | None = None,
    ) -> ResultPage:
        raise NotImplementedError


class ObjectStore:
    async def get_object(self, bucket: str, key: str) -> bytes:
        raise NotImplementedError
