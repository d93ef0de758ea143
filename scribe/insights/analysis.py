"""Heuristic transcript analysis - speakers, participation, action items, topics.

Works on `Name: text` dialogue and needs no LLM, so it is always available,
including for sample transcripts.
"""

import re
from collections import Counter

SPEAKER_PATTERN = re.compile(r"^([A-Za-z]+):")

ACTION_KEYWORDS = [
    "need to",
    "should",
    "must",
    "have to",
    "going to",
    "by friday",
    "by monday",
    "next meeting",
    "prepare",
    "send",
    "share",
    "create",
    "finalize",
]

TOPIC_KEYWORDS = [
    "budget", "strategy", "quarterly", "Q1", "Q2", "Q3", "Q4",
    "report", "metrics", "revenue", "sales", "marketing",
    "launch", "product", "campaign", "increase", "decrease",
]

BRIEF_SUMMARY_LINES = 5


def _lines(transcript: str) -> list[str]:
    return [line.strip() for line in transcript.splitlines() if line.strip()]


def _split_speaker(line: str) -> tuple[str, str]:
    match = SPEAKER_PATTERN.match(line)
    if not match:
        return "Unknown", line
    return match.group(1), line[match.end():].strip()


def extract_speakers(transcript: str) -> list[str]:
    """Speaker names in order of first appearance."""
    speakers = []
    for line in _lines(transcript):
        match = SPEAKER_PATTERN.match(line)
        if match and match.group(1) not in speakers:
            speakers.append(match.group(1))
    return speakers


def count_contributions(transcript: str) -> Counter:
    """Number of lines spoken by each speaker."""
    counts = Counter()
    for line in _lines(transcript):
        match = SPEAKER_PATTERN.match(line)
        if match:
            counts[match.group(1)] += 1
    return counts


def build_brief_summary(transcript: str, max_lines: int = BRIEF_SUMMARY_LINES) -> str:
    """The opening lines of the conversation."""
    return "\n".join(_lines(transcript)[:max_lines])


def extract_action_items(transcript: str) -> list[dict]:
    """Lines that read like commitments.

    Returns:
        List of {"text", "speaker"} dicts in transcript order.
    """
    items = []
    for line in _lines(transcript):
        lower = line.lower()
        if any(keyword in lower for keyword in ACTION_KEYWORDS):
            speaker, text = _split_speaker(line)
            items.append({"text": text, "speaker": speaker})
    return items


def build_todo_list(action_items: list[dict]) -> list[dict]:
    return [
        {"task": item["text"], "assignee": item["speaker"], "completed": False}
        for item in action_items
    ]


def extract_key_topics(transcript: str) -> list[str]:
    """Topic keywords mentioned anywhere, capitalized, in keyword order."""
    lower = transcript.lower()
    return [
        keyword[0].upper() + keyword[1:]
        for keyword in TOPIC_KEYWORDS
        if keyword.lower() in lower
    ]


def build_insights(transcript: str) -> str:
    """Markdown participation report."""
    lines = _lines(transcript)
    speakers = extract_speakers(transcript)
    counts = count_contributions(transcript)
    action_items = extract_action_items(transcript)
    topics = extract_key_topics(transcript)

    md = f"""## Meeting Analysis

This meeting had:
- {len(speakers)} participants: {', '.join(speakers) or 'none identified'}
- {len(lines)} conversation exchanges
- {len(action_items)} action items identified
"""

    if counts:
        most_active, most_count = counts.most_common(1)[0]
        md += f"""
### Participation Analysis
- Most active participant: {most_active} ({most_count} comments)
"""
        md += "".join(f"- {speaker}: {counts[speaker]} comments\n" for speaker in speakers)

    md += "\n### Key Topics\n"
    if topics:
        md += "".join(f"- {topic}\n" for topic in topics)
    else:
        md += "No specific topics identified\n"

    if action_items:
        md += "\n### Next Steps\n"
        md += "".join(f"- {item['speaker']}: {item['text']}\n" for item in action_items[:3])
        if len(action_items) > 3:
            md += f"\n...and {len(action_items) - 3} more action items\n"

    return md


def analyze_transcript(transcript: str) -> dict:
    """Run every heuristic over one transcript."""
    action_items = extract_action_items(transcript)
    return {
        "speakers": extract_speakers(transcript),
        "summary": build_brief_summary(transcript),
        "action_items": action_items,
        "todo_list": build_todo_list(action_items),
        "topics": extract_key_topics(transcript),
        "insights": build_insights(transcript),
    }
