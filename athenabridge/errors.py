from __future__ import annotations

TRANSIENT_FAULT_CODES = frozenset(
    {
        "TooManyRequestsException",
        "ThrottlingException",
        "NetworkingError",
        "UnknownEndpoint",
    }
)


class AthenaBridgeError(RuntimeError):
    """Base error for query execution and result retrieval."""


class ConfigurationError(AthenaBridgeError):
    """Raised when the service or a query is configured inconsistently."""


class EngineFault(AthenaBridgeError):
    """Raised by a query engine adapter when a remote call fails."""

    def __init__(self, code: str, message: str | None = None) -> None:
        super().__init__(f"{code}: {message}" if message else code)
        self.code = code
        self.message = message

    @property
    def transient(self) -> bool:
        return self.code in TRANSIENT_FAULT_CODES


class FatalSubmissionError(AthenaBridgeError):
    """Raised when a query cannot be submitted because of a non-transient fault."""


class QueryFailedError(AthenaBridgeError):
    """Raised when the engine reports the execution as failed."""

    def __init__(self, reason: str | None, *, execution_id: str | None = None) -> None:
        super().__init__(reason or "Query execution failed.")
        self.reason = reason
        self.execution_id = execution_id


class QueryCancelledError(QueryFailedError):
    """Raised when the execution was cancelled before it completed."""


class MalformedResultError(AthenaBridgeError):
    """Raised when a result object cannot be decoded."""


class MalformedValueError(AthenaBridgeError):
    """Raised when a cell cannot be coerced to its declared column type."""

    def __init__(self, *, column: str | None, value: str, declared_type: str) -> None:
        target = f"column '{column}'" if column else "cell"
        super().__init__(f"Cannot coerce {value!r} in {target} to '{declared_type}'.")
        self.column = column
        self.value = value
        self.declared_type = declared_type


def is_transient_fault(exc: BaseException) -> bool:
    return isinstance(exc, EngineFault) and exc.transient
