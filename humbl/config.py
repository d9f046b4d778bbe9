"""Application configuration objects based on Pydantic settings."""
from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, EmailStr, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FastAPISettings(BaseModel):
    """Settings that control FastAPI specific behaviour."""

    title: str = "Humbl AI"
    description: str = "Conversational search assistant API."
    version: str = "0.1.0"
    docs_url: str | None = "/docs"
    redoc_url: str | None = "/redoc"
    openapi_url: str = "/openapi.json"
    cors_allow_origins: list[str] = Field(default_factory=lambda: ["*"])
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = Field(default_factory=lambda: ["*"])
    cors_allow_headers: list[str] = Field(default_factory=lambda: ["*"])
    gzip_minimum_size: int = 1024
    secret_key: str = Field(default="change-me", description="JWT signing secret")
    access_token_expire_minutes: int = 60 * 24


class PostgresSettings(BaseModel):
    """PostgreSQL connection settings."""

    host: str = "localhost"
    port: int = 5432
    user: str = "postgres"
    password: str = "postgres"
    database: str = "humbl"
    echo: bool = False

    @property
    def dsn(self) -> str:
        return f"postgresql+asyncpg://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


class LLMSettings(BaseModel):
    """Groq chat completion configuration."""

    base_url: str = "https://api.groq.com/openai/v1"
    api_key: str | None = None
    primary_model: str = "meta-llama/llama-4-maverick-17b-128e-instruct"
    fallback_model: str = "meta-llama/llama-4-scout-17b-16e-instruct"
    title_model: str = "llama-3.1-8b-instant"
    search_models: list[str] = Field(default_factory=lambda: ["groq/compound", "groq/compound-mini"])
    max_completion_tokens: int = 4096
    max_images: int = 4
    request_timeout: int = 60


class ImageSettings(BaseModel):
    """Image generation providers, tried in order."""

    gemini_api_key: str | None = None
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_model: str = "gemini-2.5-flash-image"
    reve_base_url: str = "https://api.reve.com/v1"
    reve_api_keys: list[str] = Field(
        default_factory=list,
        description="Reve credentials in fallback order; the first key is the primary one.",
    )
    max_prompt_chars: int = 2560
    max_reference_images: int = 6
    request_timeout: int = 120


class SpeechSettings(BaseModel):
    """Speech-to-text and text-to-speech models."""

    transcription_model: str = "whisper-large-v3"
    transcription_fallback_model: str = "whisper-large-v3-turbo"
    tts_model: str = "playai-tts"
    tts_voice: str = "Fritz-PlayAI"
    tts_format: str = "wav"
    max_tts_chars: int = 10000


class BootstrapSettings(BaseModel):
    """Bootstrap configuration for initial database seeding."""

    admin_email: EmailStr = "admin@example.com"
    admin_password: str = "ChangeMe123!"
    admin_full_name: str = "Administrator"


class LoggingSettings(BaseModel):
    """Log levels and the directory for file handlers."""

    level: str = "INFO"
    provider_level: str = "DEBUG"
    directory: str = "logs"
    json_console: bool = True


class ClientSettings(BaseModel):
    """Defaults for the streaming chat client and console."""

    api_base_url: str = "http://localhost:8000"
    request_timeout: float = 60.0
    history_limit: int = 100
    max_user_images: int = 3
    progress_interval: float = 0.5
    console_host: str = "127.0.0.1"
    console_port: int = 7860


class Settings(BaseSettings):
    """Aggregate settings for the application."""

    fastapi: FastAPISettings = Field(default_factory=FastAPISettings)
    postgres: PostgresSettings = Field(default_factory=PostgresSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    images: ImageSettings = Field(default_factory=ImageSettings)
    speech: SpeechSettings = Field(default_factory=SpeechSettings)
    bootstrap: BootstrapSettings = Field(default_factory=BootstrapSettings)
    client: ClientSettings = Field(default_factory=ClientSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(env_file=".env", env_nested_delimiter="__", case_sensitive=False)

    def sqlalchemy_database_uri(self) -> str:
        """Return SQLAlchemy DSN."""

        return self.postgres.dsn


@lru_cache()
def load_settings() -> Settings:
    """Load application settings with caching."""

    return Settings()


__all__ = [
    "Settings",
    "FastAPISettings",
    "PostgresSettings",
    "LLMSettings",
    "ImageSettings",
    "SpeechSettings",
    "BootstrapSettings",
    "ClientSettings",
    "LoggingSettings",
    "load_settings",
]
