"""Summary generation and export functions."""

from scribe.config import MAX_PROMPT_TRANSCRIPT_CHARS
from scribe.llm import AIClients, generate_with_llm


def summarize_transcript(
    transcript: str,
    model: str,
    clients: AIClients,
    custom_instructions: str = None,
) -> str:
    """Generate a markdown summary of a meeting transcript."""
    if not transcript or not transcript.strip():
        return "No content available to summarize."

    prompt = f"""Create a summary of this meeting.

The transcript below is a dialogue with one `Name: text` line per contribution:

{transcript[:MAX_PROMPT_TRANSCRIPT_CHARS]}

**Generate the following sections:**

## Summary
Brief 1-2 paragraph overview of the meeting

## Key Topics
- Bullet points of main topics discussed

## Decisions
- Decisions that were made, and by whom

## Open Questions
- Anything left unresolved

Be specific and use the participants' names. Use markdown formatting.{f'''

**Additional user instructions:** {custom_instructions}''' if custom_instructions else ''}"""

    return generate_with_llm(prompt, model, clients)


def export_to_markdown(
    title: str,
    transcript: str,
    summary: str = None,
    action_items: list = None,
    insights: str = None,
) -> str:
    """Export a meeting to markdown format."""
    md = f"""# {title}

---

"""

    if summary:
        md += f"""## Summary

{summary}

---

"""

    if action_items:
        md += "## Action Items\n\n"
        for item in action_items:
            if isinstance(item, dict):
                md += f"- [ ] {item.get('speaker', 'Unknown')}: {item.get('text', '')}\n"
            else:
                md += f"- [ ] {item}\n"
        md += "\n---\n\n"

    if insights:
        md += f"{insights.strip()}\n\n---\n\n"

    md += f"""## Full Transcript

{transcript}
"""
    return md
