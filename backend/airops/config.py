"""
AirOps Configuration Management
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, model_validator
from functools import lru_cache
from pathlib import Path

# SQLite file lives next to the package so scripts and the server agree
# regardless of the working directory.
_BACKEND_DIR = Path(__file__).resolve().parents[1]
_DEFAULT_DB_URI = f"sqlite+aiosqlite:///{(_BACKEND_DIR / 'airops.db').as_posix()}"

INSECURE_JWT_SECRET = "change-this-secret-in-production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and ``.env``."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: str = Field(default="development", alias="APP_ENV")
    app_name: str = Field(default="AirOps Admin", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    airline_name: str = Field(default="International Airlines", alias="AIRLINE_NAME")

    # Server
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=5000, alias="PORT")
    frontend_url: str = Field(default="http://localhost:3000", alias="FRONTEND_URL")

    # Database
    database_url: str = Field(default=_DEFAULT_DB_URI, alias="DATABASE_URL")
    database_echo: bool = Field(default=False, alias="DATABASE_ECHO")

    # OpenWeatherMap
    weather_api_key: str = Field(default="", alias="WEATHER_API_KEY")
    weather_api_base_url: str = Field(
        default="https://api.openweathermap.org/data/2.5",
        alias="WEATHER_API_BASE_URL",
    )
    weather_timeout_seconds: float = Field(default=10.0, gt=0, alias="WEATHER_TIMEOUT_SECONDS")
    weather_default_city: str = Field(default="Dhaka,BD", alias="WEATHER_DEFAULT_CITY")

    # Analysis and fares
    route_history_window_days: int = Field(default=90, ge=1, alias="ROUTE_HISTORY_WINDOW_DAYS")
    currency: str = Field(default="BDT", min_length=3, max_length=3, alias="CURRENCY")

    # Authentication
    jwt_secret_key: str = Field(default=INSECURE_JWT_SECRET, alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    jwt_access_token_expire_minutes: int = Field(default=1440, ge=1, alias="JWT_ACCESS_TOKEN_EXPIRE_MINUTES")
    bcrypt_rounds: int = Field(default=12, ge=4, le=31, alias="BCRYPT_ROUNDS")
    login_max_failed_attempts: int = Field(default=5, ge=1, alias="LOGIN_MAX_FAILED_ATTEMPTS")
    login_lockout_window_hours: int = Field(default=1, ge=1, alias="LOGIN_LOCKOUT_WINDOW_HOURS")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="json", pattern="^(json|console)$", alias="LOG_FORMAT")

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @model_validator(mode="after")
    def require_real_secret_in_production(self) -> "Settings":
        if self.is_production and self.jwt_secret_key == INSECURE_JWT_SECRET:
            raise ValueError("JWT_SECRET_KEY must be set in production")
        return self


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
