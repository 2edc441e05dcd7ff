"""
Centralized configuration using Pydantic settings.

All configuration is loaded from environment variables or .env file
with type validation and sensible defaults.
"""

from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class FlagsApiSettings(BaseSettings):
    """Feature flags REST backend configuration."""

    base_url: str = Field(
        'http://localhost:3000/flags',
        validation_alias='FLAGS_API_URL',
        description='Base URL of the flags collection endpoint'
    )
    timeout: int = Field(10, validation_alias='FLAGS_API_TIMEOUT', description='Request timeout in seconds')
    max_retries: int = Field(
        0,
        validation_alias='FLAGS_API_MAX_RETRIES',
        description='Extra attempts for list requests on connection failures'
    )

    model_config = SettingsConfigDict(env_prefix='flags_api_', case_sensitive=False, populate_by_name=True)

    @field_validator('base_url')
    @classmethod
    def validate_base_url(cls, v):
        if not v.startswith(('http://', 'https://')):
            raise ValueError('Flags API URL must start with http:// or https://')
        return v.rstrip('/')

    @field_validator('timeout')
    @classmethod
    def validate_timeout(cls, v):
        if v <= 0 or v > 300:
            raise ValueError('Timeout must be between 1 and 300 seconds')
        return v

    @field_validator('max_retries')
    @classmethod
    def validate_max_retries(cls, v):
        if v < 0 or v > 10:
            raise ValueError('Max retries must be between 0 and 10')
        return v


class BackendSettings(BaseSettings):
    """In-memory development backend configuration."""

    host: str = Field('127.0.0.1', validation_alias='BACKEND_HOST')
    port: int = Field(3000, validation_alias='BACKEND_PORT')
    seed_defaults: bool = Field(True, validation_alias='BACKEND_SEED_DEFAULTS', description='Create sample flags on startup')

    model_config = SettingsConfigDict(env_prefix='backend_', case_sensitive=False, populate_by_name=True)

    @field_validator('port')
    @classmethod
    def validate_port(cls, v):
        if v <= 0 or v > 65535:
            raise ValueError('Backend port must be between 1 and 65535')
        return v


class ObservabilitySettings(BaseSettings):
    """Observability configuration."""

    log_level: str = Field('INFO', validation_alias='LOG_LEVEL')
    log_format: str = Field('json', validation_alias='LOG_FORMAT', description='Log format: json or text')
    log_dir: str = Field('data/logs', validation_alias='LOG_DIR')
    metrics_enabled: bool = Field(True, validation_alias='METRICS_ENABLED')

    model_config = SettingsConfigDict(env_prefix='observability_', case_sensitive=False, populate_by_name=True)

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f'Log level must be one of {valid_levels}')
        return v

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v):
        v = v.lower()
        if v not in ['json', 'text']:
            raise ValueError('Log format must be "json" or "text"')
        return v


class Settings(BaseSettings):
    """Main application settings."""

    # Dashboard web server
    dashboard_host: str = Field('127.0.0.1', validation_alias='DASHBOARD_HOST')
    dashboard_port: int = Field(5001, validation_alias='DASHBOARD_PORT')
    dashboard_debug: bool = Field(False, validation_alias='DASHBOARD_DEBUG')

    enable_metrics: bool = Field(True, validation_alias='ENABLE_METRICS')

    # Sub-settings
    flags_api: FlagsApiSettings = Field(default_factory=FlagsApiSettings)
    backend: BackendSettings = Field(default_factory=BackendSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        populate_by_name=True,
        extra='ignore'
    )

    @field_validator('dashboard_port')
    @classmethod
    def validate_dashboard_port(cls, v):
        if v <= 0 or v > 65535:
            raise ValueError('Dashboard port must be between 1 and 65535')
        return v


# Global settings instance
settings = Settings()
