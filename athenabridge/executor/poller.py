from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from athenabridge.connectors.base import QueryEngine
from athenabridge.errors import QueryCancelledError, QueryFailedError, is_transient_fault
from athenabridge.executor.launcher import TRANSIENT_RETRY_MS, Sleep
from athenabridge.models.execution import ExecutionState, QueryExecution
from athenabridge.models.results import ColumnSchema, ResultPage

DEFAULT_POLL_INTERVAL_MS = 200


@dataclass(slots=True)
class CompletionResult:
    """Terminal status of a succeeded execution plus the schema warm-up fetch.

    ``metadata_task`` is started when success is observed and may still be
    running; always await it through :meth:`column_schema`.
    """

    execution: QueryExecution
    metadata_task: asyncio.Task[ResultPage] | None = None
    polls: int = 0

    @property
    def execution_id(self) -> str:
        return self.execution.execution_id

    async def column_schema(self) -> ColumnSchema | None:
        if self.metadata_task is None:
            return None
        page = await self.metadata_task
        return page.metadata

    def release(self) -> None:
        """Stop or reap the warm-up fetch once retrieval no longer needs it."""
        task = self.metadata_task
        if task is None:
            return
        if not task.done():
            task.cancel()
        elif not task.cancelled():
            # marks a failed warm-up as retrieved
            task.exception()


class CompletionPoller:
    def __init__(
        self,
        *,
        engine: QueryEngine,
        poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        transient_retry_ms: int = TRANSIENT_RETRY_MS,
        sleep: Sleep = asyncio.sleep,
        logger: logging.Logger | None = None,
    ) -> None:
        self._engine = engine
        self._poll_interval_ms = poll_interval_ms
        self._transient_retry_ms = transient_retry_ms
        self._sleep = sleep
        self._logger = logger or logging.getLogger(__name__)

    async def await_completion(
        self,
        execution_id: str,
        poll_interval_ms: int | None = None,
    ) -> CompletionResult:
        # Once throttled, keep the conservative interval until the execution finishes.
        interval_ms = self._poll_interval_ms if poll_interval_ms is None else poll_interval_ms
        polls = 0
        while True:
            polls += 1
            try:
                execution = await self._engine.get_query_execution(execution_id)
            except Exception as exc:
                if not is_transient_fault(exc):
                    self._logger.error("Polling execution=%s failed: %s", execution_id, exc)
                    raise
                interval_ms = self._transient_retry_ms
                self._logger.warning(
                    "Transient fault polling execution=%s: %s; backing off %sms",
                    execution_id,
                    exc,
                    interval_ms,
                )
                await self._sleep(interval_ms / 1000)
                continue

            if execution.state == ExecutionState.SUCCEEDED:
                self._logger.info("Execution %s succeeded after %s polls", execution_id, polls)
                metadata_task = asyncio.create_task(self._warm_schema(execution_id))
                return CompletionResult(execution=execution, metadata_task=metadata_task, polls=polls)
            if execution.state == ExecutionState.FAILED:
                self._logger.error("Execution %s failed: %s", execution_id, execution.state_change_reason)
                raise QueryFailedError(execution.state_change_reason, execution_id=execution_id)
            if execution.state == ExecutionState.CANCELLED:
                self._logger.warning("Execution %s was cancelled", execution_id)
                raise QueryCancelledError(execution.state_change_reason, execution_id=execution_id)

            await self._sleep(interval_ms / 1000)

    async def _warm_schema(self, execution_id: str) -> ResultPage:
        while True:
            try:
                return await self._engine.get_query_results(execution_id, 1)
            except Exception as exc:
                if not is_transient_fault(exc):
                    self._logger.warning("Schema fetch for execution=%s failed: %s", execution_id, exc)
                    raise
                self._logger.warning(
                    "Transient fault fetching schema for execution=%s: %s; retrying in %sms",
                    execution_id,
                    exc,
                    self._transient_retry_ms,
                )
                await self._sleep(self._transient_retry_ms / 1000)
