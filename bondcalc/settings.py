"""Process settings loaded from the environment."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Read from BONDCALC_* environment variables or a .env file."""

    model_config = SettingsConfigDict(
        env_prefix="BONDCALC_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Analytics store (Supabase-style REST). Telemetry is off without a URL.
    analytics_url: str | None = None
    analytics_key: str | None = None
    analytics_table: str = "bond_vs_cash_calculator_events"
    analytics_timeout_seconds: float = 5.0

    log_level: str = "WARNING"
    log_json: bool = False
