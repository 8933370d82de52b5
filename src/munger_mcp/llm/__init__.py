"""Language-model boundary."""

from munger_mcp.llm.client import (
    AVAILABLE_MODELS,
    DEFAULT_MODEL,
    ChatModel,
    LLMResponseError,
    ModelCall,
    resolve_model,
)

__all__ = [
    "AVAILABLE_MODELS",
    "DEFAULT_MODEL",
    "ChatModel",
    "LLMResponseError",
    "ModelCall",
    "resolve_model",
]
