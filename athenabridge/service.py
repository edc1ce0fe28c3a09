from __future__ import annotations

import asyncio
import logging
from typing import Any

from athenabridge.config import AthenaBridgeSettings
from athenabridge.connectors.base import ObjectStore, QueryEngine
from athenabridge.errors import ConfigurationError
from athenabridge.executor import CompletionPoller, CompletionResult, ExecutionLauncher
from athenabridge.executor.launcher import Sleep
from athenabridge.models import (
    ExecutionRequest,
    QueryRequest,
    QueryResultSet,
    QueryStats,
    RetrievalOptions,
)
from athenabridge.results import ResultRetriever, validate_options

BYTES_PER_MB = 1_000_000
BYTES_PER_TB = 1_000_000_000_000
USD_PER_TB_SCANNED = 5.0
# The engine bills at least 10 MB per query.
MIN_BILLED_BYTES = 10 * BYTES_PER_MB


def estimate_cost_usd(data_scanned_bytes: int) -> float:
    billed = max(data_scanned_bytes, MIN_BILLED_BYTES)
    return round(billed / BYTES_PER_TB * USD_PER_TB_SCANNED, 8)


class AthenaQueryService:
    """Runs a query end to end: submit, wait for completion, retrieve results."""

    def __init__(
        self,
        *,
        engine: QueryEngine | None,
        store: ObjectStore | None,
        settings: AthenaBridgeSettings | None = None,
        sleep: Sleep = asyncio.sleep,
        logger: logging.Logger | None = None,
    ) -> None:
        if engine is None:
            raise ConfigurationError("A query engine client is required.")
        if store is None:
            raise ConfigurationError("An object store client is required.")
        self._settings = settings or AthenaBridgeSettings()
        self._logger = logger or logging.getLogger(__name__)
        self._launcher = ExecutionLauncher(
            engine=engine,
            retry_interval_ms=self._settings.TRANSIENT_RETRY_MS,
            sleep=sleep,
            logger=self._logger,
        )
        self._poller = CompletionPoller(
            engine=engine,
            poll_interval_ms=self._settings.POLL_INTERVAL_MS,
            transient_retry_ms=self._settings.TRANSIENT_RETRY_MS,
            sleep=sleep,
            logger=self._logger,
        )
        self._retriever = ResultRetriever(engine=engine, store=store, logger=self._logger)

    @classmethod
    def from_settings(cls, settings: AthenaBridgeSettings | None = None) -> "AthenaQueryService":
        from athenabridge.connectors.aws import AthenaQueryEngine, S3ObjectStore

        settings = settings or AthenaBridgeSettings()
        return cls(
            engine=AthenaQueryEngine(region_name=settings.REGION),
            store=S3ObjectStore(region_name=settings.REGION),
            settings=settings,
        )

    async def query(self, query: QueryRequest | str | dict[str, Any]) -> QueryResultSet:
        request = self._coerce_request(query)
        options = self.build_retrieval_options(request)
        if not request.skip_results:
            validate_options(options)

        execution_id = request.query_execution_id
        if execution_id is None:
            execution_id = await self._launcher.submit(self.build_execution_request(request))
            if not request.wait_for_results:
                return QueryResultSet(query_execution_id=execution_id)

        completion = await self._poller.await_completion(execution_id, request.poll_interval_ms)
        try:
            if request.skip_results:
                result = QueryResultSet(query_execution_id=execution_id)
            else:
                result = await self._retriever.fetch_results(completion, options)
        finally:
            completion.release()

        if self._flag(request.get_stats, self._settings.GET_STATS):
            result.stats = self._build_stats(completion, result)
        return result

    def build_execution_request(self, request: QueryRequest) -> ExecutionRequest:
        if not request.sql:
            raise ConfigurationError("A SQL statement is required to start a query execution.")
        return ExecutionRequest(
            sql=request.sql,
            workgroup=request.workgroup or self._settings.WORKGROUP,
            output_location=request.output_location or self._settings.OUTPUT_LOCATION,
            database=request.database or self._settings.DATABASE,
            catalog=request.catalog or self._settings.CATALOG,
            parameters=tuple(request.parameters),
            encryption=request.encryption,
        )

    def build_retrieval_options(self, request: QueryRequest) -> RetrievalOptions:
        page_size = request.page_size if request.page_size is not None else self._settings.PAGE_SIZE
        return RetrievalOptions(
            format_json=self._flag(request.format_json, self._settings.FORMAT_JSON),
            page_size=page_size,
            next_token=request.next_token,
            include_metadata=self._flag(request.include_metadata, self._settings.INCLUDE_METADATA),
            ignore_empty=self._flag(request.ignore_empty, self._settings.IGNORE_EMPTY),
        )

    @staticmethod
    def _coerce_request(query: QueryRequest | str | dict[str, Any]) -> QueryRequest:
        if isinstance(query, QueryRequest):
            return query
        if isinstance(query, str):
            return QueryRequest(sql=query)
        return QueryRequest.model_validate(query)

    @staticmethod
    def _flag(value: bool | None, default: bool) -> bool:
        return default if value is None else value

    @staticmethod
    def _build_stats(completion: CompletionResult, result: QueryResultSet) -> QueryStats:
        statistics = completion.execution.statistics
        scanned = statistics.data_scanned_bytes if statistics else 0
        return QueryStats(
            query_execution_id=completion.execution_id,
            data_scanned_mb=round(scanned / BYTES_PER_MB, 3),
            query_cost_usd=estimate_cost_usd(scanned),
            engine_execution_time_ms=statistics.engine_execution_time_ms if statistics else 0,
            count=len(result.items),
            s3_location=completion.execution.output_location,
        )
