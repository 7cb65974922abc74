"""Pydantic models for the /api/v1/models endpoint."""

from pydantic import BaseModel, Field


class ModelDetail(BaseModel):
    """A locally available Ollama model."""

    name: str = Field(..., description="Full model name")
    size_mb: float = Field(..., description="Model size in megabytes")
    family: str = Field(..., description="Model family name")
    parameter_size: str = Field(..., description="Human-readable parameter count")
    quantization_level: str = Field(..., description="Quantization level")
    modified_at: str | None = Field(default=None, description="Last modification time")


class ModelListResponse(BaseModel):
    """Response model for listing all available models."""

    models: list[ModelDetail] = Field(..., description="List of available models")
    default_model: str = Field(..., description="Model used when none is requested")
