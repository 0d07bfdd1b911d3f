# backend/inspector360/config.py
from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ---- App ----
    app_env: str = "local"  # local|dev|prod
    app_version: str = "1.0.0"
    database_url: str = "sqlite:///./inspector360.db"

    # ---- CORS (used by main.py) ----
    cors_allow_origins: list[str] | str = ["*"]

    # ---- Auth ----
    auth_mode: str = "dev"  # dev|jwt

    # Dev header names
    dev_header_user_email: str = "X-User-Email"
    dev_header_user_role: str = "X-User-Role"
    dev_header_user_station: str = "X-User-Station"

    # Supabase-issued access tokens (HS256)
    supabase_jwt_secret: str | None = None
    supabase_jwt_audience: str = "authenticated"

    # ---- Station calendar ----
    station_timezone: str = "America/Lima"

    # ---- Compliance ----
    trend_daily_max_days: int = 62
    punctuality_window_days: int = 2
    top_issues_limit: int = 10
    max_period_days: int = 1096

    # ---- Inspections ----
    form_code_prefix: str = "FOR-ATA-057"
    default_page_size: int = 20
    max_page_size: int = 200
    max_equipment_per_inspection: int = 50

    def model_post_init(self, __context) -> None:
        env = (self.app_env or "local").strip().lower()
        is_prod = env in ("prod", "production")

        if is_prod:
            if (self.auth_mode or "").strip().lower() == "dev":
                raise ValueError("SECURITY: auth_mode=dev is not allowed in prod")
            if not self.supabase_jwt_secret:
                raise ValueError("SECURITY: supabase_jwt_secret is required in prod")

            origins = self.cors_allow_origins
            if origins == "*" or origins == ["*"] or (isinstance(origins, str) and "*" in origins):
                raise ValueError("SECURITY: cors_allow_origins wildcard is not allowed in prod")


settings = Settings()
