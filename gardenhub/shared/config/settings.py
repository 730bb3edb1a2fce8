# 📄 File: gardenhub/shared/config/settings.py
#
# 🧭 Purpose (Layman Explanation):
# One place that reads the garden hub's knobs (where the database lives, where the garden
# is for the forecast, who counts as an organiser) from the environment.
#
# 🧪 Purpose (Technical Summary):
# pydantic-settings model loaded from environment variables and an optional .env file,
# with normalising validators for enumerated values and a cached accessor.
#
# 🔗 Dependencies:
# - pydantic-settings / pydantic
#
# 🔄 Connected Modules / Calls From:
# - gardenhub.main (application startup)
# - gardenhub.shared.config.supabase (gateway client)
# - gardenhub.shared.core (token checks, privileged roles)
# - gardenhub.modules.weather (forecast location and refresh)
# - gardenhub.modules.task_board (board permission policy)

from functools import lru_cache
from typing import Any, Dict, List, Optional

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Accepted values per enumerated setting, in their canonical case
CHOICES: Dict[str, List[str]] = {
    "ENVIRONMENT": ["development", "staging", "production", "test"],
    "LOG_LEVEL": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    "LOG_FORMAT": ["json", "text"],
}


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """
    Runtime configuration for the Community Garden Hub API.

    Names match the environment variables one to one.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # =========================================================================
    # SERVICE
    # =========================================================================

    APP_NAME: str = "Community Garden Hub API"
    APP_VERSION: str = "1.0.0"
    APP_DESCRIPTION: str = "Plots, volunteer tasks, events, rules, messaging and weather"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    ENABLE_SWAGGER_UI: bool = True

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = Field(default="json", description="json or text")
    LOG_FILE: Optional[str] = None

    # uvicorn, used by `gardenhub` console script only
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    RELOAD: bool = True
    WORKERS: int = 1

    CORS_ORIGINS: str = Field(
        default="http://localhost:5173,http://localhost:3000",
        description="Comma separated origins of the browser front-end"
    )
    CORS_ALLOW_CREDENTIALS: bool = True

    # =========================================================================
    # SUPABASE GATEWAY
    # =========================================================================

    SUPABASE_URL: str = Field(..., description="Project URL, e.g. https://xyz.supabase.co")
    SUPABASE_ANON_KEY: str = Field(..., description="Public anon key; row-level security applies")
    SUPABASE_JWT_SECRET: str = Field(..., description="HS256 secret that signs member access tokens")
    SUPABASE_JWT_AUDIENCE: str = "authenticated"
    SUPABASE_SCHEMA: str = "public"

    # =========================================================================
    # GARDEN POLICY
    # =========================================================================

    PRIVILEGED_ROLES: str = Field(
        default="admin,mod",
        description="Roles that manage tasks, plots, events and rules"
    )
    BOARD_ENFORCE_DRAG_PERMISSIONS: bool = Field(
        default=False,
        description="Stop members from dragging tasks assigned to someone else"
    )

    # =========================================================================
    # WEATHER (Open-Meteo, no key required)
    # =========================================================================

    WEATHER_API_URL: str = "https://api.open-meteo.com/v1"
    GARDEN_LATITUDE: float = 32.326757
    GARDEN_LONGITUDE: float = -95.337467
    WEATHER_FORECAST_DAYS: int = Field(default=7, description="Includes today, which is not shown")
    WEATHER_REFRESH_MINUTES: int = 30
    WEATHER_TIMEOUT: int = Field(default=10, description="Seconds per request")
    WEATHER_MAX_RETRIES: int = Field(default=3, description="Attempts, not extra retries")

    # =========================================================================
    # VALIDATORS
    # =========================================================================

    @field_validator("ENVIRONMENT", "LOG_LEVEL", "LOG_FORMAT")
    @classmethod
    def normalise_choice(cls, v: str, info: ValidationInfo) -> str:
        allowed = CHOICES[info.field_name]
        canonical = v.upper() if info.field_name == "LOG_LEVEL" else v.lower()
        if canonical not in allowed:
            raise ValueError(f"{info.field_name} must be one of {allowed}")
        return canonical

    @field_validator("CORS_ORIGINS")
    @classmethod
    def check_cors_origins(cls, v: str) -> str:
        bad = [o for o in _split_csv(v) if not o.startswith(("http://", "https://", "*"))]
        if bad:
            raise ValueError(f"Invalid CORS origin(s): {', '.join(bad)}")
        return v

    @field_validator("WEATHER_REFRESH_MINUTES", "WEATHER_MAX_RETRIES", "WEATHER_FORECAST_DAYS")
    @classmethod
    def at_least_one(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Value must be at least 1")
        return v

    # =========================================================================
    # DERIVED VALUES
    # =========================================================================

    @property
    def cors_origins_list(self) -> List[str]:
        return _split_csv(self.CORS_ORIGINS)

    @property
    def privileged_roles(self) -> List[str]:
        return _split_csv(self.PRIVILEGED_ROLES)

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def is_testing(self) -> bool:
        return self.ENVIRONMENT == "test"

    def get_weather_api_config(self) -> Dict[str, Any]:
        """Constructor arguments for the Open-Meteo client."""
        return {
            "api_url": self.WEATHER_API_URL,
            "latitude": self.GARDEN_LATITUDE,
            "longitude": self.GARDEN_LONGITUDE,
            "forecast_days": self.WEATHER_FORECAST_DAYS,
            "timeout": self.WEATHER_TIMEOUT,
            "max_retries": self.WEATHER_MAX_RETRIES,
        }


@lru_cache()
def get_settings() -> Settings:
    """Settings are read once per process; tests set the environment before the first call."""
    return Settings()
