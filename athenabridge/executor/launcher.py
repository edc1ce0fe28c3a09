from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from athenabridge.connectors.base import QueryEngine
from athenabridge.errors import FatalSubmissionError, is_transient_fault
from athenabridge.models.execution import ExecutionRequest

TRANSIENT_RETRY_MS = 2000

Sleep = Callable[[float], Awaitable[None]]


class ExecutionLauncher:
    """Submits queries, retrying for as long as the engine reports transient faults."""

    def __init__(
        self,
        *,
        engine: QueryEngine,
        retry_interval_ms: int = TRANSIENT_RETRY_MS,
        sleep: Sleep = asyncio.sleep,
        logger: logging.Logger | None = None,
    ) -> None:
        self._engine = engine
        self._retry_interval_ms = retry_interval_ms
        self._sleep = sleep
        self._logger = logger or logging.getLogger(__name__)

    async def submit(self, request: ExecutionRequest) -> str:
        attempt = 0
        while True:
            attempt += 1
            try:
                execution_id = await self._engine.start_query_execution(request)
            except Exception as exc:
                if not is_transient_fault(exc):
                    self._logger.error("Query submission failed: %s", exc)
                    raise FatalSubmissionError(f"Unable to submit query: {exc}") from exc
                self._logger.warning(
                    "Transient fault submitting query (attempt %s): %s; retrying in %sms",
                    attempt,
                    exc,
                    self._retry_interval_ms,
                )
                await self._sleep(self._retry_interval_ms / 1000)
                continue
            self._logger.debug("Submitted query execution=%s attempts=%s", execution_id, attempt)
            return execution_id
