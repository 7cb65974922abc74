"""Type definitions for Ollama integration."""

from dataclasses import dataclass
from typing import Any


def get_value(obj: Any, key: str, default: Any = None) -> Any:
    """Read a field from either a response object or a plain dict."""
    if isinstance(obj, dict):
        return obj.get(key, default)
    return getattr(obj, key, default)


@dataclass
class ModelInfo:
    """A locally available Ollama model.

    Attributes:
        name: Full model name (e.g., "llama3.2:latest")
        size_mb: Model size in megabytes
        family: Model family (e.g., "llama")
        parameter_size: Human-readable parameter count (e.g., "3.2B")
        quantization_level: Quantization level (e.g., "Q4_K_M")
        modified_at: When the model was last pulled, if reported
    """

    name: str
    size_mb: float
    family: str
    parameter_size: str
    quantization_level: str
    modified_at: str | None = None

    @staticmethod
    def from_list_entry(entry: Any) -> "ModelInfo":
        """Create a ModelInfo from one entry of the ``list`` response."""
        name = get_value(entry, "model") or get_value(entry, "name", "unknown")

        size = get_value(entry, "size", 0) or 0
        size_bytes = int(size)
        size_mb = round(size_bytes / (1024 * 1024), 1) if size_bytes > 0 else 0.0

        details = get_value(entry, "details") or {}
        modified_at = get_value(entry, "modified_at")

        return ModelInfo(
            name=name,
            size_mb=size_mb,
            family=get_value(details, "family") or "unknown",
            parameter_size=get_value(details, "parameter_size") or "unknown",
            quantization_level=get_value(details, "quantization_level") or "unknown",
            modified_at=str(modified_at) if modified_at else None,
        )
