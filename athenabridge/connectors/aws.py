from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError, EndpointConnectionError, HTTPClientError
from botocore.exceptions import ConnectionError as BotoConnectionError

from athenabridge.connectors.base import ObjectStore, QueryEngine
from athenabridge.errors import EngineFault
from athenabridge.models.execution import ExecutionRequest, ExecutionState, QueryExecution, QueryStatistics
from athenabridge.models.results import ColumnInfo, ColumnSchema, ResultPage


def to_engine_fault(exc: Exception) -> EngineFault:
    if isinstance(exc, ClientError):
        error = exc.response.get("Error", {})
        return EngineFault(str(error.get("Code") or "ClientError"), error.get("Message"))
    if isinstance(exc, EndpointConnectionError):
        return EngineFault("UnknownEndpoint", str(exc))
    if isinstance(exc, (BotoConnectionError, HTTPClientError)):
        return EngineFault("NetworkingError", str(exc))
    return EngineFault(type(exc).__name__, str(exc))


async def _call(method: Callable[..., dict[str, Any]], **kwargs: Any) -> dict[str, Any]:
    try:
        return await asyncio.to_thread(method, **kwargs)
    except (BotoCoreError, ClientError) as exc:
        raise to_engine_fault(exc) from exc


def build_start_params(request: ExecutionRequest) -> dict[str, Any]:
    result_configuration: dict[str, Any] = {}
    if request.output_location:
        result_configuration["OutputLocation"] = request.output_location
    if request.encryption is not None:
        encryption: dict[str, Any] = {"EncryptionOption": request.encryption.encryption_option}
        if request.encryption.kms_key:
            encryption["KmsKey"] = request.encryption.kms_key
        result_configuration["EncryptionConfiguration"] = encryption

    context: dict[str, Any] = {"Database": request.database}
    if request.catalog:
        context["Catalog"] = request.catalog

    params: dict[str, Any] = {
        "QueryString": request.sql,
        "WorkGroup": request.workgroup,
        "QueryExecutionContext": context,
    }
    if result_configuration:
        params["ResultConfiguration"] = result_configuration
    if request.parameters:
        params["ExecutionParameters"] = list(request.parameters)
    return params


def parse_query_execution(payload: dict[str, Any]) -> QueryExecution:
    execution = payload.get("QueryExecution", {})
    status = execution.get("Status", {})
    stats = execution.get("Statistics")
    return QueryExecution(
        execution_id=execution.get("QueryExecutionId", ""),
        state=ExecutionState.parse(status.get("State")),
        state_change_reason=status.get("StateChangeReason"),
        statement_type=execution.get("StatementType"),
        output_location=execution.get("ResultConfiguration", {}).get("OutputLocation"),
        statistics=(
            QueryStatistics(
                data_scanned_bytes=stats.get("DataScannedInBytes", 0),
                engine_execution_time_ms=stats.get("EngineExecutionTimeInMillis", 0),
                total_execution_time_ms=stats.get("TotalExecutionTimeInMillis"),
                queue_time_ms=stats.get("QueryQueueTimeInMillis"),
            )
            if stats
            else None
        ),
    )


def parse_result_page(payload: dict[str, Any]) -> ResultPage:
    result_set = payload.get("ResultSet", {})
    column_info = result_set.get("ResultSetMetadata", {}).get("ColumnInfo", [])
    return ResultPage(
        rows=[[cell.get("VarCharValue") for cell in row.get("Data", [])] for row in result_set.get("Rows", [])],
        next_token=payload.get("NextToken"),
        metadata=ColumnSchema(
            columns=[
                ColumnInfo(
                    name=column["Name"],
                    type=column["Type"],
                    label=column.get("Label"),
                    nullable=column.get("Nullable"),
                    precision=column.get("Precision"),
                    scale=column.get("Scale"),
                )
                for column in column_info
            ]
        ),
    )


class AthenaQueryEngine(QueryEngine):
    """Amazon Athena engine backed by a boto3 client."""

    def __init__(
        self,
        client: Any = None,
        *,
        region_name: str | None = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._client = client or boto3.client("athena", region_name=region_name)
        self.logger = logger or logging.getLogger(__name__)

    async def start_query_execution(self, request: ExecutionRequest) -> str:
        payload = await _call(self._client.start_query_execution, **build_start_params(request))
        return payload["QueryExecutionId"]

    async def get_query_execution(self, execution_id: str) -> QueryExecution:
        payload = await _call(self._client.get_query_execution, QueryExecutionId=execution_id)
        return parse_query_execution(payload)

    async def get_query_results(
        self,
        execution_id: str,
        max_results: int,
        next_token: str | None = None,
    ) -> ResultPage:
        params: dict[str, Any] = {"QueryExecutionId": execution_id, "MaxResults": max_results}
        if next_token:
            params["NextToken"] = next_token
        self.logger.debug("Fetching result page execution=%s max_results=%s", execution_id, max_results)
        payload = await _call(self._client.get_query_results, **params)
        return parse_result_page(payload)


class S3ObjectStore(ObjectStore):
    def __init__(self, client: Any = None, *, region_name: str | None = None) -> None:
        self._client = client or boto3.client("s3", region_name=region_name)

    async def get_object(self, bucket: str, key: str) -> bytes:
        def _read() -> bytes:
            response = self._client.get_object(Bucket=bucket, Key=key)
            return response["Body"].read()

        try:
            return await asyncio.to_thread(_read)
        except (BotoCoreError, ClientError) as exc:
            raise to_engine_fault(exc) from exc
