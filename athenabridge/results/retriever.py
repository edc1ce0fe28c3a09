from __future__ import annotations

import csv
import io
import logging
from typing import Iterator

from athenabridge.connectors.base import ObjectStore, QueryEngine
from athenabridge.errors import AthenaBridgeError, ConfigurationError, EngineFault, MalformedResultError
from athenabridge.executor.poller import CompletionResult
from athenabridge.models.results import (
    ColumnSchema,
    QueryResultSet,
    ResultPage,
    RetrievalOptions,
    RetrievalStrategy,
)
from athenabridge.results.materializer import materialize, materialize_rows

NON_TABULAR_STATEMENTS = frozenset({"UTILITY", "DDL"})
MAX_PAGE_SIZE = 1000


def validate_options(options: RetrievalOptions) -> None:
    if options.next_token and not options.page_size:
        raise ConfigurationError("A next token requires a page size.")
    if options.page_size + _header_rows(options.next_token) > MAX_PAGE_SIZE:
        raise ConfigurationError(
            f"Page size {options.page_size} exceeds the engine limit of {MAX_PAGE_SIZE} rows per page."
        )


def select_strategy(statement_type: str | None, options: RetrievalOptions) -> RetrievalStrategy:
    validate_options(options)
    if (statement_type or "").upper() in NON_TABULAR_STATEMENTS:
        return RetrievalStrategy.NON_TABULAR
    if options.page_size:
        return RetrievalStrategy.PAGINATED_TYPED if options.format_json else RetrievalStrategy.PAGINATED_RAW
    return RetrievalStrategy.FULL_TYPED if options.format_json else RetrievalStrategy.FULL_RAW


def split_output_location(location: str) -> tuple[str, str]:
    """Return ``(bucket, key)`` for an ``s3://bucket/key`` location."""
    segments = location.split("/")
    if len(segments) < 4 or not segments[2] or not segments[3]:
        raise AthenaBridgeError(f"Unrecognised result location '{location}'.")
    return segments[2], "/".join(segments[3:])


def _header_rows(next_token: str | None) -> int:
    # Only the first page carries the header row.
    return 0 if next_token else 1


def _decode(body: bytes) -> str:
    try:
        return body.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise MalformedResultError(f"Result object is not valid UTF-8: {exc}") from exc


def _split_lines(text: str) -> list[str]:
    # rows end only at \n, \r or \r\n; other Unicode breaks belong to cell values
    return [line.rstrip("\r\n") for line in io.StringIO(text, newline=None)]


def parse_non_tabular(text: str) -> list[dict[str, str]]:
    items: list[dict[str, str]] = []
    for line in _split_lines(text):
        if line.find("\t") > 0:
            key, value = line.split("\t")[:2]
            items.append({key.strip(): value.strip()})
        elif line.strip():
            items.append({"row": line.strip()})
    return items


def parse_raw_lines(text: str) -> list[str]:
    return [line.strip() for line in _split_lines(text)]


def iter_csv_records(text: str, *, ignore_empty: bool) -> Iterator[dict[str, str]]:
    reader = csv.DictReader(io.StringIO(text, newline=""))
    for row in reader:
        if ignore_empty and not any(row.values()):
            continue
        yield {name: value for name, value in row.items() if name is not None}


class ResultRetriever:
    """Fetches the results of a completed execution with one of the retrieval strategies."""

    def __init__(
        self,
        *,
        engine: QueryEngine,
        store: ObjectStore,
        logger: logging.Logger | None = None,
    ) -> None:
        self._engine = engine
        self._store = store
        self._logger = logger or logging.getLogger(__name__)

    async def fetch_results(self, completion: CompletionResult, options: RetrievalOptions) -> QueryResultSet:
        strategy = select_strategy(completion.execution.statement_type, options)
        self._logger.debug("Retrieving execution=%s strategy=%s", completion.execution_id, strategy.value)

        if strategy == RetrievalStrategy.NON_TABULAR:
            text = await self._read_output(completion)
            return QueryResultSet(
                query_execution_id=completion.execution_id,
                strategy=strategy,
                items=parse_non_tabular(text),
            )

        if strategy.paginated:
            return await self._fetch_page(completion, options, strategy)

        schema = await self._schema_for_full_read(completion, options, strategy)
        text = await self._read_output(completion)
        if strategy == RetrievalStrategy.FULL_TYPED:
            items: list = [
                materialize(record, schema)
                for record in iter_csv_records(text, ignore_empty=options.ignore_empty)
            ]
        else:
            items = parse_raw_lines(text)
        return QueryResultSet(
            query_execution_id=completion.execution_id,
            strategy=strategy,
            items=items,
            metadata=schema if options.include_metadata else None,
        )

    async def _fetch_page(
        self,
        completion: CompletionResult,
        options: RetrievalOptions,
        strategy: RetrievalStrategy,
    ) -> QueryResultSet:
        header_rows = _header_rows(options.next_token)
        page: ResultPage = await self._engine.get_query_results(
            completion.execution_id,
            options.page_size + header_rows,
            options.next_token,
        )
        rows = page.rows[header_rows:]

        items: list
        if strategy == RetrievalStrategy.PAGINATED_TYPED:
            try:
                schema = await completion.column_schema()
            except EngineFault as exc:
                # the page carries its own column metadata
                self._logger.warning("Using page metadata for execution=%s: %s", completion.execution_id, exc)
                schema = None
            items = materialize_rows(rows, schema or page.metadata)
        else:
            items = rows
        return QueryResultSet(
            query_execution_id=completion.execution_id,
            strategy=strategy,
            items=items,
            next_token=page.next_token,
            metadata=page.metadata,
        )

    async def _schema_for_full_read(
        self,
        completion: CompletionResult,
        options: RetrievalOptions,
        strategy: RetrievalStrategy,
    ) -> ColumnSchema | None:
        if strategy == RetrievalStrategy.FULL_RAW and not options.include_metadata:
            return None
        if completion.metadata_task is not None:
            return await completion.column_schema()
        if not options.include_metadata:
            return None
        page = await self._engine.get_query_results(completion.execution_id, 1)
        return page.metadata

    async def _read_output(self, completion: CompletionResult) -> str:
        location = completion.execution.output_location
        if not location:
            raise AthenaBridgeError(f"Execution {completion.execution_id} reported no result location.")
        bucket, key = split_output_location(location)
        body = await self._store.get_object(bucket, key)
        return _decode(body)
