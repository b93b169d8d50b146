from typing import Annotated, Any

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_CLINIC_SLOTS: list[str] = [
    "07:00-07:30",
    "07:35-08:05",
    "08:10-08:40",
    "08:45-09:15",
    "09:20-09:50",
    "09:55-10:25",
    "10:30-11:00",
    "13:00-13:30",
    "13:35-14:05",
    "14:10-14:40",
    "14:45-15:15",
    "15:20-15:50",
    "15:55-16:25",
    "16:30-17:00",
]


class Settings(BaseSettings):
    """
    Application configuration backed by Pydantic BaseSettings.
    Values are loaded from environment variables and the .env file.
    """

    # API Configuration
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Clinic Operations API"
    PROJECT_DESCRIPTION: str = "Appointment slot allocation and treatment continuity enforcement"
    VERSION: str = "0.1.0"

    # Application Settings
    DEBUG: bool = Field(False, description="Debug mode")
    ENVIRONMENT: str = Field("production", description="Runtime environment")
    CORS_ORIGINS: Annotated[list[str], NoDecode] = Field(
        default=["http://localhost:5173"], description="Allowed CORS origins"
    )

    # PostgreSQL Database Settings
    DB_HOST: str = Field("localhost", description="PostgreSQL host")
    DB_PORT: int = Field(5432, description="PostgreSQL port")
    DB_NAME: str = Field("clinicops", description="Database name")
    DB_USER: str = Field("postgres", description="PostgreSQL user")
    DB_PASSWORD: str | None = Field(None, description="PostgreSQL password")
    DB_ECHO: bool = Field(False, description="Log SQL queries (debug only)")

    # Database connection pool settings
    DB_POOL_SIZE: int = Field(10, description="Connection pool size")
    DB_MAX_OVERFLOW: int = Field(20, description="Maximum pool overflow")
    DB_POOL_RECYCLE: int = Field(3600, description="Recycle connections every N seconds")
    DB_POOL_TIMEOUT: int = Field(30, description="Seconds to wait for a pooled connection")

    # Scheduling
    CLINIC_SLOTS: Annotated[list[str], NoDecode] = Field(
        default=DEFAULT_CLINIC_SLOTS,
        description="Daily bookable slots as HH:MM-HH:MM, ordered by start",
    )
    SLOT_CLOCK_UTC_OFFSET_HOURS: int = Field(
        0, description="Offset from UTC of the wall clock used to match appointment times against slots"
    )
    SHIFT_UTC_OFFSET_HOURS: int = Field(7, description="Hours subtracted from the UTC hour before the shift cutoff")
    SHIFT_CUTOFF_HOUR: int = Field(11, description="Shifted hours below this value belong to the MORNING shift")
    APPOINTMENT_ENFORCE_TRANSITIONS: bool = Field(
        True, description="Reject appointment status changes outside the transition table"
    )

    # Treatment continuity
    TREATMENT_MAX_PAST_DAYS: int = Field(365, description="Oldest allowed treatment start, in days before now")
    TREATMENT_MAX_FUTURE_DAYS: int = Field(730, description="Latest allowed treatment start/end, in days after now")
    TREATMENT_NOTES_MAX_LENGTH: int = Field(2000, description="Maximum treatment notes length")

    # VideoSDK meeting provisioning
    VIDEOSDK_API_KEY: str | None = Field(None, description="VideoSDK API key")
    VIDEOSDK_SECRET_KEY: str | None = Field(None, description="VideoSDK secret used to sign tokens")
    VIDEOSDK_API_ENDPOINT: str = Field("https://api.videosdk.live/v2", description="VideoSDK REST endpoint")
    VIDEOSDK_TIMEOUT_SECONDS: float = Field(10.0, description="Timeout for VideoSDK requests in seconds")
    MEETING_BASE_URL: str = Field("http://localhost:5173", description="Frontend base URL for meeting links")

    # SMTP
    SMTP_SERVER: str | None = Field(None, description="SMTP server host")
    SMTP_PORT: int = Field(587, description="SMTP server port")
    SMTP_USERNAME: str | None = Field(None, description="SMTP username")
    SMTP_PASSWORD: str | None = Field(None, description="SMTP password")
    SMTP_TIMEOUT_SECONDS: float = Field(15.0, description="SMTP connection timeout in seconds")
    EMAIL_FROM: str = Field("no-reply@clinicops.local", description="Sender address for outgoing mail")

    # Error tracking
    SENTRY_DSN: str | None = Field(None, description="Sentry DSN; error tracking is off when unset")

    # Logging
    LOG_LEVEL: str = Field("INFO", description="Root log level")
    LOG_FORMAT: str = Field("colored", description="Console log format: colored, json or plain")
    LOG_FILE: str | None = Field(None, description="Optional JSON log file path")

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def __init__(self, **data: Any):
        super().__init__(**data)

    @field_validator("CLINIC_SLOTS", "CORS_ORIGINS", mode="before")
    @classmethod
    def parse_comma_separated(cls, value):
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @field_validator("SHIFT_CUTOFF_HOUR")
    @classmethod
    def validate_cutoff_hour(cls, v):
        if not 0 <= v <= 23:
            raise ValueError("SHIFT_CUTOFF_HOUR must be between 0 and 23")
        return v

    @field_validator("SLOT_CLOCK_UTC_OFFSET_HOURS", "SHIFT_UTC_OFFSET_HOURS")
    @classmethod
    def validate_utc_offset(cls, v):
        if not -12 <= v <= 14:
            raise ValueError("UTC offsets must be between -12 and 14 hours")
        return v

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v):
        if v not in ("colored", "json", "plain"):
            raise ValueError("LOG_FORMAT must be 'colored', 'json' or 'plain'")
        return v

    @field_validator("DB_POOL_SIZE")
    @classmethod
    def validate_pool_size(cls, v):
        if v < 1:
            raise ValueError("DB_POOL_SIZE must be at least 1")
        if v > 100:
            raise ValueError("DB_POOL_SIZE should not exceed 100")
        return v

    @field_validator("DB_MAX_OVERFLOW")
    @classmethod
    def validate_max_overflow(cls, v):
        if v < 0:
            raise ValueError("DB_MAX_OVERFLOW must be 0 or greater")
        return v

    @computed_field
    @property
    def database_url(self) -> str:
        """Synchronous PostgreSQL URL (used by Alembic)."""
        if self.DB_PASSWORD:
            return f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        return f"postgresql://{self.DB_USER}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    @computed_field
    @property
    def is_development(self) -> bool:
        return self.DEBUG or self.ENVIRONMENT.lower() in ["development", "dev", "local", "test"]

    @computed_field
    @property
    def meeting_enabled(self) -> bool:
        """VideoSDK provisioning needs both credentials."""
        return bool(self.VIDEOSDK_API_KEY and self.VIDEOSDK_SECRET_KEY)


_settings_instance = None


def get_settings() -> Settings:
    """
    Return the cached settings instance so the environment is read once.
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
