"""Application configuration using Pydantic Settings"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from typing import Optional, Union
from pathlib import Path
import os

from apnsgate.services.push.models import APNSConfig, Host


class Settings(BaseSettings):
    """APNs client settings loaded from environment variables"""

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None  # Rotating JSON log file, console only if unset

    # APNS credentials
    APNS_TEAM_ID: Optional[str] = None  # Team identifier (token issuer)
    APNS_KEY_ID: Optional[str] = None  # Key identifier (kid)
    APNS_KEY_FILE: Optional[str] = None  # Path to .p8 auth key file
    APNS_SIGNING_KEY: Optional[str] = None  # Inline PEM, takes precedence over APNS_KEY_FILE

    # APNS delivery
    APNS_HOST: Optional[str] = None  # Literal gateway host, overrides APNS_USE_SANDBOX
    APNS_USE_SANDBOX: bool = False  # Use sandbox for development
    APNS_DEFAULT_TOPIC: Optional[str] = None  # Usually the app bundle ID
    APNS_REQUEST_TIMEOUT: Optional[float] = None  # Seconds, passed to the transport
    APNS_KEEP_ALIVE: Optional[Union[float, bool]] = None  # False or expiry in ms

    @field_validator('LOG_LEVEL', mode='after')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level name."""
        allowed = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if v.upper() not in allowed:
            raise ValueError(f"LOG_LEVEL must be one of: {', '.join(sorted(allowed))}")
        return v.upper()

    @property
    def apns_host(self) -> str:
        """Gateway host derived from APNS_HOST / APNS_USE_SANDBOX."""
        if self.APNS_HOST:
            return self.APNS_HOST
        return Host.DEVELOPMENT.value if self.APNS_USE_SANDBOX else Host.PRODUCTION.value

    @property
    def apns_ready(self) -> bool:
        """Check if APNS is properly configured and ready to use."""
        has_key = self.APNS_SIGNING_KEY is not None or (
            self.APNS_KEY_FILE is not None and os.path.exists(self.APNS_KEY_FILE)
        )
        return (
            self.APNS_TEAM_ID is not None
            and self.APNS_KEY_ID is not None
            and has_key
        )

    def to_apns_config(self) -> APNSConfig:
        """
        Build the client configuration from these settings.

        Raises:
            ValueError: If team, key id or signing key are missing
        """
        if not self.apns_ready:
            raise ValueError(
                "APNS is not configured: set APNS_TEAM_ID, APNS_KEY_ID and "
                "APNS_SIGNING_KEY or an existing APNS_KEY_FILE"
            )

        signing_key = self.APNS_SIGNING_KEY
        if signing_key is None:
            signing_key = Path(self.APNS_KEY_FILE).read_text(encoding="utf-8")

        return APNSConfig(
            team=self.APNS_TEAM_ID,
            key_id=self.APNS_KEY_ID,
            signing_key=signing_key,
            host=self.apns_host,
            default_topic=self.APNS_DEFAULT_TOPIC,
            request_timeout=self.APNS_REQUEST_TIMEOUT,
            keep_alive=self.APNS_KEEP_ALIVE,
        )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )


# Global settings instance
settings = Settings()
