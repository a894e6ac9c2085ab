"""
Configuration settings for paygate
Handles environment variables and gateway credentials
"""
from typing import Literal, Optional
from pydantic_settings import BaseSettings
from pydantic import field_validator

from ..exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "paygate"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Outbound confirmation / query calls (seconds)
    GATEWAY_HTTP_TIMEOUT: float = 10.0

    # Tenpay merchant credentials
    TENPAY_PARTNER: Optional[str] = None
    TENPAY_KEY: Optional[str] = None
    TENPAY_NOTIFY_URL: Optional[str] = None
    TENPAY_RETURN_URL: Optional[str] = None

    @field_validator("GATEWAY_HTTP_TIMEOUT")
    @classmethod
    def positive_timeout(cls, v):
        if v <= 0:
            raise ValueError("GATEWAY_HTTP_TIMEOUT must be positive")
        return v

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields from .env file


# Create settings instance
settings = Settings()


def validate_settings(current: Optional[Settings] = None):
    """Validate critical settings"""
    current = current or settings
    issues = []

    if current.ENVIRONMENT == "production":
        if not current.TENPAY_PARTNER:
            issues.append("TENPAY_PARTNER must be set in production")
        if not current.TENPAY_KEY:
            issues.append("TENPAY_KEY must be set in production")
        if not current.TENPAY_NOTIFY_URL:
            issues.append("TENPAY_NOTIFY_URL must be set in production")

    if issues:
        raise ConfigurationError(f"Configuration issues: {', '.join(issues)}", {"issues": issues})
