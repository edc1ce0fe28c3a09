from __future__ import annotations

import pytest

from athenabridge.connectors.mock import MockQueryEngine
from athenabridge.errors import EngineFault, FatalSubmissionError
from athenabridge.executor.launcher import ExecutionLauncher
from athenabridge.models.execution import ExecutionRequest


@pytest.fixture
def anyio_backend():
    return "asyncio"


class _RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


def _request() -> ExecutionRequest:
    return ExecutionRequest(sql="SELECT 1", database="sales", output_location="s3://results/prefix/")


@pytest.mark.anyio
async def test_submit_returns_handle_immediately_when_healthy() -> None:
    engine = MockQueryEngine(execution_id="exec-1")
    sleep = _RecordingSleep()
    launcher = ExecutionLauncher(engine=engine, sleep=sleep)

    execution_id = await launcher.submit(_request())

    assert execution_id == "exec-1"
    assert engine.submit_attempts == 1
    assert sleep.delays == []
    assert engine.submitted == [_request()]


@pytest.mark.anyio
@pytest.mark.parametrize("fault_count", [1, 5, 40])
async def test_submit_retries_every_transient_fault(fault_count: int) -> None:
    codes = ["TooManyRequestsException", "ThrottlingException", "NetworkingError", "UnknownEndpoint"]
    faults = [EngineFault(codes[index % len(codes)]) for index in range(fault_count)]
    engine = MockQueryEngine(execution_id="exec-retry", submit_faults=faults)
    sleep = _RecordingSleep()
    launcher = ExecutionLauncher(engine=engine, sleep=sleep)

    execution_id = await launcher.submit(_request())

    assert execution_id == "exec-retry"
    assert engine.submit_attempts == fault_count + 1
    assert sleep.delays == [2.0] * fault_count


@pytest.mark.anyio
async def test_submit_fails_fast_on_non_transient_fault() -> None:
    fault = EngineFault("InvalidRequestException", "line 1:8: mismatched input")
    engine = MockQueryEngine(submit_faults=[fault])
    sleep = _RecordingSleep()
    launcher = ExecutionLauncher(engine=engine, sleep=sleep)

    with pytest.raises(FatalSubmissionError) as exc_info:
        await launcher.submit(_request())

    assert exc_info.value.__cause__ is fault
    assert engine.submit_attempts == 1
    assert sleep.delays == []


@pytest.mark.anyio
async def test_submit_uses_configured_retry_interval() -> None:
    engine = MockQueryEngine(submit_faults=[EngineFault("ThrottlingException")])
    sleep = _RecordingSleep()
    launcher = ExecutionLauncher(engine=engine, retry_interval_ms=500, sleep=sleep)

    await launcher.submit(_request())

    assert sleep.delays == [0.5]
