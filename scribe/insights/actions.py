"""Action items extraction and the post-transcription analysis pass."""

import logging

import json_repair

from scribe.config import ANALYSIS_PROMPT, MAX_PROMPT_TRANSCRIPT_CHARS
from scribe.errors import AnalysisDegraded
from scribe.llm import AIClients, generate_with_llm

logger = logging.getLogger(__name__)


def _parse_json(text: str):
    """Parse LLM output, tolerating markdown fences and malformed JSON."""
    text = (text or "").strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1].rsplit("```", 1)[0].strip()
    return json_repair.loads(text)


def _as_strings(items) -> list[str]:
    if not isinstance(items, list):
        return []
    return [str(item).strip() for item in items if str(item).strip()]


def extract_action_items_llm(transcript: str, model: str, clients: AIClients) -> list[str]:
    """Ask the LLM for action items. Returns one string per item, "Owner: task" where known."""
    if not transcript or not transcript.strip():
        return []

    prompt = f"""Extract every action item from this meeting transcript.

{transcript[:MAX_PROMPT_TRANSCRIPT_CHARS]}

**Instructions:**
- Only include concrete commitments or requests
- Prefix each item with the owner's name when the transcript makes it clear ("Sarah: send the report")
- Keep each item to one sentence

Output a JSON array of strings only, no markdown."""

    parsed = _parse_json(generate_with_llm(prompt, model, clients))
    if isinstance(parsed, dict):
        parsed = parsed.get("action_items", [])
    return _as_strings(parsed)


def enrich_transcript(transcript: str, model: str, clients: AIClients) -> dict:
    """Summary and action items for a fresh transcription.

    Raises:
        AnalysisDegraded: If the model call fails or returns nothing usable
    """
    prompt = ANALYSIS_PROMPT.format(transcript=transcript[:MAX_PROMPT_TRANSCRIPT_CHARS])
    try:
        parsed = _parse_json(generate_with_llm(prompt, model, clients))
    except Exception as e:
        raise AnalysisDegraded(f"Analysis model call failed: {e}", e) from e

    if not isinstance(parsed, dict):
        raise AnalysisDegraded("Analysis output is not a JSON object")

    summary = parsed.get("summary")
    result = {
        "summary": summary.strip() if isinstance(summary, str) else None,
        "action_items": _as_strings(parsed.get("action_items")),
    }
    if not result["summary"] and not result["action_items"]:
        raise AnalysisDegraded("Analysis output is empty")

    logger.info("Transcript enriched", extra={"model": model, "action_items": len(result["action_items"])})
    return result
