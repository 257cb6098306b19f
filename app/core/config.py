"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Values are validated at load time.
"""

from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    Firestore credentials are optional at load time: without them the app
    starts, /health answers, and store-backed routes return 503.
    """

    # App
    app_name: str = "sports-admin-dashboard"
    app_version: str = "1.0.0"
    debug: bool = False

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:5173"

    # Request / middleware
    request_id_header: str = "X-Request-ID"

    # Firebase / Firestore: use key (env) or path (file). For Vercel, use key.
    firebase_service_account_key: SecretStr | None = None
    firebase_service_account_path: str | None = None  # Path to JSON file
    firestore_http_timeout_seconds: float = 30.0

    # Analytics windows
    report_timezone: str = "UTC"
    user_growth_days: int = 30
    growth_months: int = 6
    recent_registration_days: int = 7
    recent_activity_limit: int = 10
    top_regions_limit: int = 10
    # Tried in order until one count succeeds.
    contact_collections: str = "contactSubmissions,contacts,messages"

    # Live metrics
    subscription_poll_interval_seconds: float = 5.0

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @field_validator("report_timezone")
    @classmethod
    def validate_report_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown REPORT_TIMEZONE: {v!r}") from e
        return v

    @field_validator("contact_collections")
    @classmethod
    def validate_contact_collections(cls, v: str) -> str:
        names = [n.strip() for n in v.split(",") if n.strip()]
        if len(names) < 3:
            raise ValueError(
                "CONTACT_COLLECTIONS must list at least 3 collection names "
                "(primary first, then fallbacks)."
            )
        return ",".join(names)

    @field_validator("user_growth_days", "growth_months", "recent_registration_days")
    @classmethod
    def validate_positive_window(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Analytics windows must be at least 1")
        return v

    @property
    def report_tz(self) -> ZoneInfo:
        """Timezone that defines calendar-day and month boundaries in reports."""
        return ZoneInfo(self.report_timezone)

    @property
    def contact_collection_names(self) -> list[str]:
        return self.contact_collections.split(",")

    @property
    def allowed_origin_list(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    @property
    def firestore_configured(self) -> bool:
        has_key = (
            self.firebase_service_account_key is not None
            and bool(self.firebase_service_account_key.get_secret_value())
        )
        return has_key or bool(self.firebase_service_account_path)


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.
    """
    return Settings()
