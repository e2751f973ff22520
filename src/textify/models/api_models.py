"""
API response models shared by the service endpoints.

This module defines the Pydantic models used for health and version responses.
"""

from pydantic import BaseModel, Field


class EngineVersion(BaseModel):
    """Component versions of the revision engine and the configured collaborator."""

    diff_engine_version: str = Field(description="Diff engine version", examples=["char-diff-1.0.0"])
    share_codec_version: str = Field(description="Share token codec version")
    prompt_version: str = Field(description="Cleaning prompt template version")
    tool_calling_version: str = Field(description="LLM tool calling API version")
    llm_provider: str = Field(description="Configured LLM provider")
    llm_model: str = Field(description="Configured LLM model")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service status", examples=["healthy"])
    version: str = Field(description="API version", examples=["1.0.0"])
    uptime_seconds: float = Field(description="Service uptime")
    llm_provider: str = Field(description="Configured cleaning model provider")
    llm_model: str = Field(description="Configured cleaning model")
    auto_clean_enabled: bool = Field(description="Whether paste triggers a debounced clean")


class VersionResponse(BaseModel):
    """Version information response."""

    api_version: str = Field(description="API version")
    engine_version: EngineVersion = Field(description="Current engine component versions")
