"""LLM text generation abstraction across providers."""

from scribe.config import LLM_MODELS
from scribe.llm.clients import AIClients


def generate_with_llm(prompt: str, model: str, clients: AIClients) -> str:
    """Generate text using the specified LLM model."""
    if model.startswith("gemini"):
        if not clients.gemini:
            raise ValueError("Gemini API key not configured")
        response = clients.gemini.models.generate_content(
            model=model,
            contents=prompt
        )
        return response.text
    elif model.startswith("gpt"):
        if not clients.openai:
            raise ValueError("OpenAI API key not configured")
        response = clients.openai.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt}]
        )
        return response.choices[0].message.content
    elif model.startswith("claude"):
        if not clients.anthropic:
            raise ValueError("Anthropic API key not configured")
        response = clients.anthropic.messages.create(
            model=model,
            max_tokens=4096,
            messages=[{"role": "user", "content": prompt}]
        )
        return response.content[0].text
    else:
        raise ValueError(f"Unknown model: {model}")


def get_available_models(clients: AIClients) -> list:
    """Return list of models that have API keys configured."""
    available = []
    if clients.openai:
        available.extend(LLM_MODELS["OpenAI"])
    if clients.gemini:
        available.extend(LLM_MODELS["Gemini"])
    if clients.anthropic:
        available.extend(LLM_MODELS["Anthropic"])
    return available
