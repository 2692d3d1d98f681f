"""
Configuration management using Pydantic settings
"""
from pathlib import Path
from typing import List
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PortfolioSettings(BaseSettings):
    """Portfolio backend configuration"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application settings
    app_name: str = Field(default="Portfolio Blog API")
    app_version: str = Field(default="1.0.0")
    debug: bool = Field(default=False)
    cors_origins: List[str] = Field(default=["*"])

    # Content settings
    content_directory: Path = Field(default=Path("content/blog"))
    content_extensions: List[str] = Field(default=[".md", ".mdx"])
    site_owner: str = Field(default="김태회")
    default_category: str = Field(default="Development")
    words_per_minute: int = Field(default=200)
    excerpt_length: int = Field(default=200)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")  # json or text

    # Header carrying the acting user id, set by the auth proxy
    user_id_header: str = Field(default="X-User-Id")

    @field_validator("content_directory")
    @classmethod
    def validate_content_directory(cls, v):
        """Ensure content directory is absolute path"""
        if not isinstance(v, Path):
            v = Path(v)
        return v.absolute()

    @field_validator("content_extensions")
    @classmethod
    def validate_content_extensions(cls, v):
        """Normalize extensions to lowercase with a leading dot"""
        normalized = []
        for ext in v:
            ext = ext.strip().lower()
            if not ext:
                continue
            if not ext.startswith("."):
                ext = f".{ext}"
            if ext not in normalized:
                normalized.append(ext)
        if not normalized:
            raise ValueError("At least one content extension is required")
        return normalized

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        if v.lower() not in ("json", "text"):
            raise ValueError(f"Invalid log format: {v}")
        return v.lower()

    @field_validator("words_per_minute", "excerpt_length")
    @classmethod
    def validate_positive(cls, v):
        if v <= 0:
            raise ValueError("Value must be positive")
        return v


class DatabaseSettings(BaseSettings):
    """Relational store for authored posts"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str = Field(default="sqlite:///./portfolio.db")
    database_echo: bool = Field(default=False)


class SecuritySettings(BaseSettings):
    """Input validation limits"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_query_length: int = Field(default=200)


@lru_cache()
def get_settings() -> PortfolioSettings:
    """Get cached settings instance"""
    return PortfolioSettings()


@lru_cache()
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings"""
    return DatabaseSettings()


@lru_cache()
def get_security_settings() -> SecuritySettings:
    """Get cached security settings"""
    return SecuritySettings()


# Convenience function to reload settings (useful for testing)
def reload_settings():
    """Clear settings cache to reload from environment"""
    get_settings.cache_clear()
    get_database_settings.cache_clear()
    get_security_settings.cache_clear()
