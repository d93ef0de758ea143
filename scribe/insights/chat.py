"""Question answering over a meeting transcript."""

from scribe.config import MAX_PROMPT_TRANSCRIPT_CHARS
from scribe.llm import AIClients, generate_with_llm


def ask_about_meeting(
    transcript: str,
    question: str,
    chat_history: list,
    model: str,
    clients: AIClients,
) -> str:
    """Answer questions about this specific meeting.

    Args:
        transcript: Meeting transcript
        question: User's question
        chat_history: List of previous exchanges [{"user": "...", "assistant": "..."}]
        model: Model to use for generation
        clients: Configured AI clients

    Returns:
        Generated answer based on the transcript
    """
    if not transcript or not transcript.strip():
        return "There is no transcript to answer questions about yet. Record or load a meeting first."

    # Build chat history context
    history_text = ""
    if chat_history:
        history_text = "\n\n**Previous conversation:**\n"
        for msg in chat_history[-3:]:  # Last 3 exchanges
            history_text += f"User: {msg['user']}\nAssistant: {msg['assistant']}\n\n"

    prompt = f"""You are a helpful assistant answering questions about a specific meeting.

**Meeting transcript:**
{transcript[:MAX_PROMPT_TRANSCRIPT_CHARS]}
{history_text}
**Current question:** {question}

**Instructions:**
- Answer based ONLY on the transcript
- Refer to participants by name
- If the answer isn't in the transcript, say so
- Keep responses concise but helpful
- Use markdown formatting"""

    return generate_with_llm(prompt, model, clients)
