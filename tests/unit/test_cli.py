from __future__ import annotations

import asyncio

import pytest

from athenabridge.config import AthenaBridgeSettings
from athenabridge.connectors.mock import MockObjectStore, MockQueryEngine
from athenabridge.errors import AthenaBridgeError
from athenabridge.main import _build_request, _parse_args, run_query
from athenabridge.models import ColumnSchema
from athenabridge.service import AthenaQueryService


async def _noop_sleep(_: float) -> None:
    return None


def test_parse_args_requires_sql_or_execution_id() -> None:
    with pytest.raises(SystemExit):
        _parse_args([])


def test_cli_flags_only_override_when_given() -> None:
    request = _build_request(_parse_args(["SELECT 1"]))

    assert request.sql == "SELECT 1"
    assert request.format_json is None
    assert request.include_metadata is None
    assert request.wait_for_results is True

    request = _build_request(
        _parse_args(
            [
                "--execution-id",
                "exec-7",
                "--raw",
                "--metadata",
                "--stats",
                "--page-size",
                "50",
                "--parameter",
                "'a'",
                "--parameter",
                "'b'",
            ]
        )
    )

    assert request.sql is None
    assert request.query_execution_id == "exec-7"
    assert request.format_json is False
    assert request.include_metadata is True
    assert request.get_stats is True
    assert request.page_size == 50
    assert request.parameters == ["'a'", "'b'"]


def test_run_query_returns_json_ready_payload() -> None:
    engine = MockQueryEngine(
        execution_id="exec-cli",
        schema=ColumnSchema.from_types({"n": "integer"}),
        rows=[["1"], ["2"]],
    )
    service = AthenaQueryService(
        engine=engine,
        store=MockObjectStore(),
        settings=AthenaBridgeSettings(),
        sleep=_noop_sleep,
    )

    payload = asyncio.run(run_query(_parse_args(["SELECT n FROM t", "--page-size", "5"]), service))

    assert payload["query_execution_id"] == "exec-cli"
    assert payload["strategy"] == "paginated_typed"
    assert payload["items"] == [{"n": 1}, {"n": 2}]


def test_run_query_surfaces_undecodable_results_as_query_errors() -> None:
    store = MockObjectStore()
    store.put("s3://mock-bucket/results/exec-bad.csv", b"\xff\xfe")
    service = AthenaQueryService(
        engine=MockQueryEngine(execution_id="exec-bad"),
        store=store,
        settings=AthenaBridgeSettings(),
        sleep=_noop_sleep,
    )

    with pytest.raises(AthenaBridgeError):
        asyncio.run(run_query(_parse_args(["SELECT 1", "--raw"]), service))
