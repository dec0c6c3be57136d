"""
Shared configuration management for the Password Validator service.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="VALIDATOR_",
        env_file=".env",
        case_sensitive=False,
        extra="allow"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Collaborators
    okapi_url: str = Field(default="http://localhost:9130")
    identity_timeout_seconds: float = Field(default=10.0, gt=0)
    module_timeout_seconds: float = Field(default=10.0, gt=0)

    # Engine behaviour
    include_advisory_messages: bool = Field(default=True)
    user_name_placeholder: str = Field(default="<USER_NAME>", min_length=1)
    load_default_rules: bool = Field(default=True)

    # Observability
    enable_tracing: bool = Field(default=False)


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"


def get_config(service_name: str, port: int, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port, **overrides)
