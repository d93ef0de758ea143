"""AI client initialization for Gemini, OpenAI, and Anthropic."""

from typing import NamedTuple

from google import genai
from openai import OpenAI
import anthropic

from scribe.config import Settings


class AIClients(NamedTuple):
    gemini: genai.Client | None
    openai: OpenAI | None
    anthropic: anthropic.Anthropic | None


def init_ai_clients(settings: Settings) -> AIClients:
    """Initialize AI clients for every provider with a configured API key."""
    gemini_client = genai.Client(api_key=settings.gemini_api_key) if settings.gemini_api_key else None
    openai_client = OpenAI(api_key=settings.openai_api_key) if settings.openai_api_key else None
    anthropic_client = (
        anthropic.Anthropic(api_key=settings.anthropic_api_key) if settings.anthropic_api_key else None
    )
    return AIClients(gemini_client, openai_client, anthropic_client)
