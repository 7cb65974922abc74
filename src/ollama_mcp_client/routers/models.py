"""Models router for listing locally available Ollama models."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from ollama_mcp_client.dependencies import get_orchestrator
from ollama_mcp_client.models.models import ModelDetail, ModelListResponse
from ollama_mcp_client.ollama import ModelInfo
from ollama_mcp_client.services import ChatOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["models"])


def model_info_to_detail(model_info: ModelInfo) -> ModelDetail:
    """Convert ModelInfo dataclass to ModelDetail Pydantic model."""
    return ModelDetail(
        name=model_info.name,
        size_mb=model_info.size_mb,
        family=model_info.family,
        parameter_size=model_info.parameter_size,
        quantization_level=model_info.quantization_level,
        modified_at=model_info.modified_at,
    )


@router.get("/models", response_model=ModelListResponse)
async def list_models(
    orchestrator: ChatOrchestrator = Depends(get_orchestrator),
) -> ModelListResponse:
    """List all available Ollama models and the configured default.

    Raises:
        HTTPException: 502 if the Ollama API request fails.
    """
    try:
        model_infos = await orchestrator.list_models()
    except Exception as e:
        logger.error(f"Failed to list models: {e}")
        raise HTTPException(
            status_code=502,
            detail=f"Failed to communicate with Ollama: {str(e)}",
        )

    models = [model_info_to_detail(info) for info in model_infos]
    logger.info(f"Listed {len(models)} models")
    return ModelListResponse(models=models, default_model=orchestrator.default_model)
