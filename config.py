"""
Configuration management for the Messenger forecast bot.

Loads environment variables from .env file and provides typed access to configuration.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path)


NLUBackendType = Literal["wit", "stub"]

REQUIRED_KEYS = ("PAGE_ACCESS_TOKEN", "APP_VERIFY_TOKEN", "APP_SECRET", "WIT_TOKEN")


class ConfigError(Exception):
    """Required configuration is missing or invalid."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Missing config values: {', '.join(missing)}")


@dataclass
class Config:
    """Bot configuration from environment."""

    # Messenger Platform
    page_access_token: str
    app_verify_token: str
    app_secret: str
    graph_api_url: str
    graph_api_version: str
    notification_type: str
    configure_page: bool

    # Wit.ai
    wit_token: str
    wit_api_url: str
    wit_api_version: str
    nlu_backend: NLUBackendType

    # Server
    port: int
    environment: str
    log_level: str
    http_timeout_s: float

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        return cls(
            page_access_token=os.getenv("PAGE_ACCESS_TOKEN", ""),
            app_verify_token=os.getenv("APP_VERIFY_TOKEN", ""),
            app_secret=os.getenv("APP_SECRET", ""),
            graph_api_url=os.getenv("GRAPH_API_URL", "https://graph.facebook.com"),
            graph_api_version=os.getenv("GRAPH_API_VERSION", "v19.0"),
            # REGULAR is the platform default, set explicitly anyway
            notification_type=os.getenv("NOTIFICATION_TYPE", "REGULAR"),
            configure_page=os.getenv("CONFIGURE_PAGE", "true").lower() == "true",
            wit_token=os.getenv("WIT_TOKEN", ""),
            wit_api_url=os.getenv("WIT_API_URL", "https://api.wit.ai"),
            wit_api_version=os.getenv("WIT_API_VERSION", "20160526"),
            nlu_backend=os.getenv("NLU_BACKEND", "wit"),  # type: ignore
            port=int(os.getenv("PORT", "3000")),
            environment=os.getenv("ENVIRONMENT", "development"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            http_timeout_s=float(os.getenv("HTTP_TIMEOUT_S", "30")),
        )

    def missing_required(self) -> list[str]:
        """Names of required environment variables that are not set."""
        return [key for key in REQUIRED_KEYS if not getattr(self, key.lower())]

    def validate(self) -> "Config":
        """
        Validate that required configuration is set.

        Raises:
            ConfigError: listing every missing credential
        """
        missing = self.missing_required()
        if missing:
            raise ConfigError(missing)
        return self


def get_config() -> Config:
    """Get configuration from the current environment."""
    return Config.from_env()


if __name__ == "__main__":
    # Test configuration loading
    config = get_config()
    missing = config.missing_required()
    print("Configuration loaded:")
    for key in REQUIRED_KEYS:
        print(f"  {key}: {'✗ Missing' if key in missing else '✓ Set'}")
    print(f"  NLU Backend: {config.nlu_backend}")
    print(f"  Graph API: {config.graph_api_url}/{config.graph_api_version}")
    print(f"  Port: {config.port}")
    print(f"\n  Validation: {'✗ FAILED' if missing else '✓ PASSED'}")
