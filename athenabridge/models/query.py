from __future__ import annotations

from pydantic import BaseModel, Field

from athenabridge.models.execution import EncryptionConfiguration


class QueryRequest(BaseModel):
    """Per-query options; unset values fall back to the service settings."""

    sql: str | None = None
    database: str | None = None
    workgroup: str | None = None
    catalog: str | None = None
    output_location: str | None = None
    parameters: list[str] = Field(default_factory=list)
    encryption: EncryptionConfiguration | None = None

    poll_interval_ms: int | None = Field(default=None, ge=0)
    page_size: int | None = Field(default=None, ge=0)
    next_token: str | None = None
    query_execution_id: str | None = None

    format_json: bool | None = None
    include_metadata: bool | None = None
    ignore_empty: bool | None = None
    get_stats: bool | None = None
    skip_results: bool = False
    wait_for_results: bool = True
