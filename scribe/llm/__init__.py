# LLM layer - AI client initialization and text generation

from scribe.llm.clients import (
    AIClients,
    init_ai_clients,
)

from scribe.llm.generation import (
    generate_with_llm,
    get_available_models,
)

__all__ = [
    # Clients
    "AIClients",
    "init_ai_clients",
    # Generation
    "generate_with_llm",
    "get_available_models",
]
