"""
Configuration settings for the StudySpark service.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CHATBOT_INSTRUCTION = (
    "You are StudySpark, an academic assistant. Only answer academic questions such as "
    "study help, summaries, quizzes, explanations, and exam prep. If asked anything "
    "unrelated (shopping, groceries, etc.), politely refuse."
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Generation Gateway (Gemini)
    # ========================================
    gemini_api_key: str | None = Field(
        default=None,
        description="Google Generative AI (Gemini) API key",
    )
    ai_model: str = Field(
        default="gemini-1.5-flash-latest",
        description="Gemini model used for every generation task",
    )
    ai_temperature: float = Field(
        default=0.4,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for generation",
    )
    ai_max_output_tokens: int = Field(
        default=4096,
        description="Upper bound on generated tokens per call",
    )
    gateway_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Timeout for a single gateway call",
    )

    # ========================================
    # Quiz & Chat
    # ========================================
    quiz_question_count: int = Field(
        default=7,
        ge=1,
        le=50,
        description="Number of questions requested per generated quiz",
    )
    chatbot_system_instruction: str = Field(
        default=DEFAULT_CHATBOT_INSTRUCTION,
        description="Default system instruction when the client sends none",
    )

    # ========================================
    # Persistence
    # ========================================
    state_backend: Literal["memory", "json", "sql"] = Field(
        default="json",
        description="Key-value store used for topic coverage and cached notes",
    )
    state_dir: Path = Field(
        default=Path.home() / ".studyspark" / "state",
        description="Directory for the JSON state backend",
    )
    database_url: str = Field(
        default=f"sqlite:///{Path.home() / '.studyspark' / 'state.db'}",
        description="SQLAlchemy URL for the SQL state backend",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default="logs/studyspark.log",
        description="Log file path (None for stderr only)",
    )

    # ========================================
    # API Server
    # ========================================
    api_host: str = Field(
        default="127.0.0.1",
        description="API server host",
    )
    api_port: int = Field(
        default=3001,
        description="API server port",
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Allowed CORS origins",
    )

    # ========================================
    # Helper Methods
    # ========================================
    def has_ai_configured(self) -> bool:
        """Check if the Gemini gateway can be used."""
        return bool(self.gemini_api_key)

    def get_gateway_config(self) -> dict[str, Any]:
        """Non-sensitive gateway settings for the /config endpoint."""
        return {
            "configured": self.has_ai_configured(),
            "model": self.ai_model,
            "temperature": self.ai_temperature,
            "max_output_tokens": self.ai_max_output_tokens,
            "timeout_seconds": self.gateway_timeout_seconds,
        }

    def get_state_config(self) -> dict[str, Any]:
        """Describe the active state backend without leaking credentials."""
        config: dict[str, Any] = {"backend": self.state_backend}
        if self.state_backend == "json":
            config["state_dir"] = str(self.state_dir)
        elif self.state_backend == "sql":
            config["database"] = (
                self.database_url.split("@")[-1] if "@" in self.database_url else self.database_url
            )
        return config


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
