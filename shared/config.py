"""
Configuration module for the editor context assistant.
Manages all environment variables and settings.
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional


@dataclass
class LLMConfig:
    """Chat-completion provider configuration."""
    provider: str = field(default_factory=lambda: os.getenv("ASSISTANT_PROVIDER", "openai"))
    model: str = field(default_factory=lambda: os.getenv("ASSISTANT_MODEL", "gpt-4o-mini"))
    temperature: float = field(
        default_factory=lambda: float(os.getenv("ASSISTANT_TEMPERATURE", "0.7"))
    )
    max_tokens: int = field(default_factory=lambda: int(os.getenv("ASSISTANT_MAX_TOKENS", "2000")))
    timeout: int = field(default_factory=lambda: int(os.getenv("ASSISTANT_TIMEOUT", "30")))


@dataclass
class ContextConfig:
    """Context window budget and file reading limits."""
    max_tokens: int = field(default_factory=lambda: int(os.getenv("CONTEXT_MAX_TOKENS", "8000")))
    chars_per_token: int = field(
        default_factory=lambda: int(os.getenv("CONTEXT_CHARS_PER_TOKEN", "4"))
    )
    max_file_size_mb: float = field(
        default_factory=lambda: float(os.getenv("CONTEXT_MAX_FILE_MB", "5"))
    )
    project_root: Optional[str] = field(default_factory=lambda: os.getenv("PROJECT_ROOT"))
    read_timeout: float = field(
        default_factory=lambda: float(os.getenv("CONTEXT_READ_TIMEOUT", "10"))
    )


@dataclass
class Settings:
    """Main application settings loaded from environment."""

    API_KEY: str = field(default_factory=lambda: os.getenv("ASSISTANT_API_KEY", ""))

    # Application settings
    DEBUG: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")
    LOG_LEVEL: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    # Nested configs
    llm: LLMConfig = field(default_factory=LLMConfig)
    context: ContextConfig = field(default_factory=ContextConfig)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
