"""
Application configuration management.

This module handles configuration from environment variables using Pydantic Settings.
"""

from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application configuration from environment variables.

    All settings can be overridden via environment variables with the same name.
    """

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # CORS (JSON list in the environment, e.g. CORS_ALLOW_ORIGINS='["https://textify.app"]')
    cors_allow_origins: List[str] = ["*"]

    # LLM cleaning collaborator
    llm_provider: str = "ollama"  # "ollama" | "openai" | "deepseek" | "openrouter"
    llm_model: str = "llama3.1:8b"  # Model name (provider-specific)
    llm_api_key: str = ""  # Optional for Ollama, required for cloud providers
    llm_api_base_url: str = "http://localhost:11434"  # Ollama default
    llm_temperature: float = 0.0
    llm_max_tokens: int = 4096
    llm_timeout_seconds: int = 120

    # Revision engine
    auto_clean_enabled: bool = True
    auto_clean_delay_ms: int = 500
    diff_timeout_seconds: float = 0.0  # 0 = no deadline, always a minimal diff
    max_text_length: int = 100_000
    share_fragment_prefix: str = "#/s/"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }


# Global settings instance
settings = Settings()
