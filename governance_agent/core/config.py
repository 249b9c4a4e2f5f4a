"""Configuration management for the Governance Proposal Agent."""

from functools import lru_cache
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ===========================================
    # Langflow Configuration
    # ===========================================
    LANGFLOW_API_KEY: str = Field(default="", description="Langflow API key (x-api-key header)")
    LANGFLOW_BASE_URL: str = Field(
        default="https://ai.vitalpoint.ai",
        description="Langflow server base URL"
    )
    LANGFLOW_GENERATE_FLOW_ID: str = Field(
        default="6fa9f884-81d2-4412-85fd-e892c8007169",
        description="Flow that turns a governance idea into a full proposal"
    )
    LANGFLOW_REGENERATE_FLOW_ID: str = Field(
        default="cc1a00a3-3791-44ec-b8b0-3c9a409e41a4",
        description="Flow that rewrites a single section or item"
    )
    LANGFLOW_TIMEOUT: float = Field(default=60.0, description="Langflow request timeout in seconds")

    # ===========================================
    # Server Configuration
    # ===========================================
    DEBUG: bool = Field(default=True, description="Debug mode")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
