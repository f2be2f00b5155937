"""
Configuration management system using Pydantic Settings.
Supports environment-based configuration for the map session engine.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from typing import Optional, Dict, Any, List
from enum import Enum


class Environment(str, Enum):
    """Supported deployment environments"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Supported log levels"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class FetchSettings(BaseSettings):
    """Remote POI dataset configuration (NYC Open Data / Socrata)"""

    restroom_url: str = Field(
        default="https://data.cityofnewyork.us/resource/i7jb-7jku.json",
        description="Public restrooms dataset endpoint"
    )
    restaurant_url: str = Field(
        default="https://data.cityofnewyork.us/resource/43nn-pn8j.json",
        description="Restaurant inspection results dataset endpoint"
    )
    result_limit: int = Field(default=500, ge=1, le=50000)
    timeout_seconds: float = Field(default=5.0, gt=0.0, le=60.0)
    app_token: Optional[str] = Field(default=None, description="Socrata X-App-Token")

    model_config = {"env_prefix": "FETCH_"}


class ViewportSettings(BaseSettings):
    """Viewport debounce and refetch threshold configuration"""

    debounce_seconds: float = Field(default=0.75, ge=0.5, le=1.0)
    edge_fraction: float = Field(default=0.10, gt=0.0, lt=1.0)

    model_config = {"env_prefix": "VIEWPORT_"}


class DeclutterSettings(BaseSettings):
    """Marker declutter configuration"""

    # Degrees, compared per axis.
    min_delta: float = Field(default=0.0005, ge=0.0)
    cap: int = Field(default=100, ge=0, le=5000)

    model_config = {"env_prefix": "DECLUTTER_"}


class DirectionsSettings(BaseSettings):
    """Routing provider configuration"""

    api_url: str = Field(default="https://api.mapbox.com/directions/v5/mapbox")
    profile: str = Field(default="walking")
    access_token: Optional[str] = Field(default=None, description="Mapbox access token")
    timeout_seconds: float = Field(default=10.0, gt=0.0, le=120.0)

    model_config = {
        "env_prefix": "DIRECTIONS_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


class Settings(BaseSettings):
    """Main application settings"""

    # Application Configuration
    app_name: str = Field(default="POI Map Engine")
    app_version: str = Field(default="1.0.0")
    environment: Environment = Field(default=Environment.DEVELOPMENT)
    debug: bool = Field(default=False)

    # Server Configuration
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000, ge=1, le=65535)
    reload: bool = Field(default=False)

    # Logging Configuration
    log_level: LogLevel = Field(default=LogLevel.INFO)
    log_format: str = Field(default="json", description="'json' or 'text'")

    # Map defaults (Times Square when geolocation is unavailable)
    default_lng: float = Field(default=-73.9855, ge=-180.0, le=180.0)
    default_lat: float = Field(default=40.7580, ge=-90.0, le=90.0)
    default_zoom: float = Field(default=13.0, ge=0.0, le=24.0)
    user_zoom: float = Field(default=14.0, ge=0.0, le=24.0)
    recenter_zoom: float = Field(default=15.0, ge=0.0, le=24.0)
    focus_zoom: float = Field(default=16.0, ge=0.0, le=24.0)
    geolocation_timeout_seconds: float = Field(default=5.0, gt=0.0, le=60.0)

    # Map session lifetime
    max_sessions: int = Field(default=1000, ge=1)
    session_idle_ttl_seconds: float = Field(default=1800.0, gt=0.0)

    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    # Nested Settings
    fetch: FetchSettings = Field(default_factory=FetchSettings)
    viewport: ViewportSettings = Field(default_factory=ViewportSettings)
    declutter: DeclutterSettings = Field(default_factory=DeclutterSettings)
    directions: DirectionsSettings = Field(default_factory=DirectionsSettings)

    @field_validator('environment', mode='before')
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment setting"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from environment variable or list"""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v or ["*"]

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment == Environment.PRODUCTION

    def get_cors_config(self) -> Dict[str, Any]:
        """Get CORS configuration for FastAPI"""
        return {
            "allow_origins": self.cors_origins,
            "allow_credentials": True,
            "allow_methods": ["GET", "POST", "DELETE"],
            "allow_headers": ["*"],
        }

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings instance"""
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment and files"""
    global settings
    settings = Settings()
    return settings
