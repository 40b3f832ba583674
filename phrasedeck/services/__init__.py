"""Services layer: talking to the generation endpoint."""

from .generation_service import (
    AIConfig,
    AIProvider,
    BackoffState,
    BaseAIProvider,
    GeminiProvider,
    GenerationClient,
    OpenAIProvider,
    create_generation_client,
    create_provider,
    parse_phrase_batch,
)

__all__ = [
    "AIConfig",
    "AIProvider",
    "BackoffState",
    "BaseAIProvider",
    "GeminiProvider",
    "GenerationClient",
    "OpenAIProvider",
    "create_generation_client",
    "create_provider",
    "parse_phrase_batch",
]
