"""
Configuration loader utility for environment-specific settings.
"""

import logging
import os
from pathlib import Path
from typing import Optional
from .settings import Settings, Environment

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Utility class for loading environment-specific configurations"""

    @staticmethod
    def load_environment_config(environment: Optional[str] = None) -> Settings:
        """
        Load configuration for the specified environment.

        Args:
            environment: Target environment (development, staging, production, testing)
                        If None, uses ENVIRONMENT env var or defaults to development

        Returns:
            Settings instance with environment-specific configuration
        """
        if environment is None:
            environment = os.getenv("ENVIRONMENT", "development")

        env = Environment(environment.lower())
        env_file = Path(f".env.{env.value}")

        if env_file.exists():
            return Settings(_env_file=str(env_file), environment=env)

        logger.warning(f"Environment file {env_file} not found, using default settings")
        return Settings(environment=env)

    @staticmethod
    def get_available_environments() -> list[str]:
        """Get list of available environment configurations"""
        env_files = []
        for env_file in Path(".").glob(".env.*"):
            if env_file.name.endswith(".sample"):
                continue
            env_files.append(env_file.name.replace(".env.", ""))
        return sorted(env_files)

    @staticmethod
    def create_sample_env_file(environment: str, output_path: Optional[str] = None) -> str:
        """
        Create a sample .env file for the specified environment.

        Args:
            environment: Target environment
            output_path: Optional custom output path

        Returns:
            Path to the created sample file
        """
        env = Environment(environment.lower())

        if output_path is None:
            output_path = f".env.{env.value}.sample"

        defaults = Settings()

        sample_content = f"""# Sample configuration for {env.value} environment
# Copy this file to .env.{env.value} and modify as needed

# Application Configuration
APP_NAME={defaults.app_name}
ENVIRONMENT={env.value}
DEBUG={'true' if env == Environment.DEVELOPMENT else 'false'}

# Server Configuration
HOST={defaults.host}
PORT={defaults.port}
RELOAD={'true' if env == Environment.DEVELOPMENT else 'false'}

# Logging Configuration
LOG_LEVEL={defaults.log_level.value}
LOG_FORMAT={defaults.log_format}

# Map Defaults
DEFAULT_LNG={defaults.default_lng}
DEFAULT_LAT={defaults.default_lat}
DEFAULT_ZOOM={defaults.default_zoom}
GEOLOCATION_TIMEOUT_SECONDS={defaults.geolocation_timeout_seconds}

# Map Sessions
MAX_SESSIONS={defaults.max_sessions}
SESSION_IDLE_TTL_SECONDS={defaults.session_idle_ttl_seconds}

# POI Datasets
FETCH_RESTROOM_URL={defaults.fetch.restroom_url}
FETCH_RESTAURANT_URL={defaults.fetch.restaurant_url}
FETCH_RESULT_LIMIT={defaults.fetch.result_limit}
FETCH_TIMEOUT_SECONDS={defaults.fetch.timeout_seconds}
FETCH_APP_TOKEN=

# Viewport and Declutter
VIEWPORT_DEBOUNCE_SECONDS={defaults.viewport.debounce_seconds}
VIEWPORT_EDGE_FRACTION={defaults.viewport.edge_fraction}
DECLUTTER_MIN_DELTA={defaults.declutter.min_delta}
DECLUTTER_CAP={defaults.declutter.cap}

# Directions
DIRECTIONS_PROFILE={defaults.directions.profile}
DIRECTIONS_ACCESS_TOKEN=your-mapbox-token
"""

        with open(output_path, "w") as f:
            f.write(sample_content)

        return output_path


def load_config_for_environment(environment: Optional[str] = None) -> Settings:
    """Convenience function to load configuration for an environment"""
    return ConfigLoader.load_environment_config(environment)
