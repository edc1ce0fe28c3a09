from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AthenaBridgeSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ATHENABRIDGE_", env_file=".env", env_ignore_empty=True, extra="ignore"
    )

    DATABASE: str = "default"
    WORKGROUP: str = "primary"
    CATALOG: str | None = None
    OUTPUT_LOCATION: str | None = None
    REGION: str | None = None

    POLL_INTERVAL_MS: int = Field(default=200, ge=0)
    # Fixed backoff used while the engine is throttling or unreachable.
    TRANSIENT_RETRY_MS: int = Field(default=2000, ge=0)

    FORMAT_JSON: bool = True
    IGNORE_EMPTY: bool = True
    INCLUDE_METADATA: bool = False
    GET_STATS: bool = False
    PAGE_SIZE: int = Field(default=0, ge=0)

    LOG_LEVEL: str = "INFO"


settings = AthenaBridgeSettings()
