from pydantic import AliasChoices
from pydantic import Field
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Values are read from process environment and optionally from `.env`.
    The reference end date also honours the legacy `FITHUB_END_DATE` name.
    """

    end_date: str | None = Field(
        default=None,
        validation_alias=AliasChoices("end_date", "GITBIG_END_DATE", "FITHUB_END_DATE"),
    )
    graph_title: str = "Fitness contributions"
    output_dir: str = "dist"
    log_level: str = "INFO"
    sentry_dsn: str | None = None
    environment: str = "development"
    release: str | None = None
    sentry_traces_sample_rate: float = 0.1
    rate_limit_per_minute: int = 30
    rate_limit_window_seconds: int = 60
    rate_limited_paths: list[str] = ["/graph.svg", "/graph/levels"]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
