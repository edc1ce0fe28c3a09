from athenabridge.executor.launcher import TRANSIENT_RETRY_MS, ExecutionLauncher
from athenabridge.executor.poller import DEFAULT_POLL_INTERVAL_MS, CompletionPoller, CompletionResult

__all__ = [
    "TRANSIENT_RETRY_MS",
    "DEFAULT_POLL_INTERVAL_MS",
    "CompletionPoller",
    "CompletionResult",
    "ExecutionLauncher",
]
