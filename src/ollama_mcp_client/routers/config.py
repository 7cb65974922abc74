"""Client configuration endpoints.

Updates are applied to the running Ollama client and orchestrator and
persisted to the config file. MCP server changes take effect on restart.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from ollama_mcp_client.dependencies import get_config_store, get_ollama_client
from ollama_mcp_client.models.config import (
    ConfigResponse,
    ConfigUpdateRequest,
    InstructionsPayload,
    OllamaSettingsPayload,
)
from ollama_mcp_client.ollama import OllamaClient
from ollama_mcp_client.services import ConfigStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["config"])


def _config_response(config_store: ConfigStore) -> ConfigResponse:
    config = config_store.config
    return ConfigResponse(
        config_path=str(config_store.path),
        ollama=OllamaSettingsPayload(
            host=config.ollama.host,
            default_model=config.ollama.default_model,
        ),
        mcp_servers=list(config.mcp_servers),
        instructions=InstructionsPayload(
            system=config.instructions.system,
            follow_up=config.instructions.follow_up,
        ),
    )


@router.get("/config", response_model=ConfigResponse)
async def get_config(
    config_store: ConfigStore = Depends(get_config_store),
) -> ConfigResponse:
    """Get the current client configuration."""
    return _config_response(config_store)


@router.patch("/config", response_model=ConfigResponse)
async def update_config(
    request_body: ConfigUpdateRequest,
    config_store: ConfigStore = Depends(get_config_store),
    ollama_client: OllamaClient = Depends(get_ollama_client),
) -> ConfigResponse:
    """Update the Ollama settings and/or prompt templates.

    Raises:
        HTTPException: 500 if the config file cannot be written.
    """
    if request_body.ollama is not None:
        ollama_config = config_store.update_ollama(
            host=request_body.ollama.host,
            default_model=request_body.ollama.default_model,
        )
        ollama_client.set_host(ollama_config.host)
        logger.info(
            f"Updated Ollama config: host={ollama_config.host}, "
            f"model={ollama_config.default_model}"
        )

    if request_body.instructions is not None:
        config_store.update_instructions(
            system=request_body.instructions.system,
            follow_up=request_body.instructions.follow_up,
        )
        logger.info("Updated instructions")

    try:
        config_store.save()
    except OSError as e:
        logger.error(f"Failed to save config: {e}")
        raise HTTPException(
            status_code=500,
            detail={
                "error": {
                    "code": "config_save_error",
                    "message": f"Failed to save config: {str(e)}",
                    "details": {},
                }
            },
        )

    return _config_response(config_store)
