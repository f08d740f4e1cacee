"""
Application configuration using Pydantic settings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from typing import List, Optional


# Values shipped in example env files; treated the same as "not configured"
PLACEHOLDER_SUPABASE_URL = "https://placeholder.supabase.co"
PLACEHOLDER_SUPABASE_KEY = "placeholder-key"


class Settings(BaseSettings):
    """Application settings."""

    # App
    app_name: str = "Budget Tracker"
    log_level: str = "INFO"

    # Remote record store (Supabase)
    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None
    http_timeout: float = 10.0

    # Local fallback record store
    local_database_url: str = "sqlite:///./data/budget_tracker.sqlite"
    local_storage_namespace: str = "bolt_finance"
    dev_user_id: str = "dev-user-id"
    seed_demo_data: bool = False

    # Money
    default_currency: str = "USD"
    supported_currencies: List[str] = ["USD", "EUR", "GBP", "NGN", "AUD"]

    # Dashboard
    recent_transactions_limit: int = 5
    trend_months: int = 6

    # Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    frontend_url: str = "http://localhost:5173"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )

    @property
    def has_remote_credentials(self) -> bool:
        """True when real (non-placeholder) Supabase credentials are configured."""
        return bool(
            self.supabase_url
            and self.supabase_anon_key
            and self.supabase_url != PLACEHOLDER_SUPABASE_URL
            and self.supabase_anon_key != PLACEHOLDER_SUPABASE_KEY
        )


# Global settings instance
settings = Settings()
