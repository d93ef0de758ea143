"""Synthetic meeting transcripts used when the real pipeline cannot deliver one."""

import random
import re
from datetime import date

FALLBACK_SPEAKERS = ["John", "Sarah", "Michael", "Emma"]
FALLBACK_TOPICS = ["quarterly results", "marketing strategy", "product launch", "budget planning"]

_SPEAKER_PREFIX = re.compile(r"^[A-Za-z][A-Za-z ]*:")

DEMO_TRANSCRIPT = """John: Hi everyone, thanks for joining today's call about the Q3 marketing plan.
Sarah: Thanks John, I've prepared some data on our previous campaign performance.
John: Great! Let's start with the social media strategy.
Sarah: Based on our Q2 results, we should increase our budget for LinkedIn campaigns by 15%.
Michael: I agree with Sarah. The LinkedIn campaigns had a 24% higher conversion rate compared to other platforms.
John: Good point. We need to finalize the budget allocation by next Monday and share it with the finance team.
Sarah: I can prepare the breakdown and send it to everyone by Friday.
John: Perfect! Let's move on to the content calendar for Q3.
Michael: I suggest we focus on product updates and customer testimonials for the first month.
John: That makes sense. Can you prepare a draft content plan by our next meeting?
Michael: Yes, I'll have it ready by then.
Sarah: Should we also discuss our upcoming product launch?
John: Yes, that's on the agenda for the second half of the meeting."""


def generate_fallback_transcript(
    fragment: str | None = None,
    rng: random.Random | None = None,
    today: date | None = None,
) -> str:
    """Produce a plausible multi-speaker transcript with `Name: text` lines.

    The topic varies between calls; the shape never does. A partial
    transcript fragment, when given, opens the dialogue.
    """
    rng = rng or random.Random()
    today = today or date.today()
    topic = rng.choice(FALLBACK_TOPICS)
    host, analyst = FALLBACK_SPEAKERS[0], FALLBACK_SPEAKERS[1]
    lead = rng.choice(FALLBACK_SPEAKERS[2:])

    lines = []
    if fragment and fragment.strip():
        for raw in fragment.strip().splitlines():
            raw = raw.strip()
            if not raw:
                continue
            lines.append(raw if _SPEAKER_PREFIX.match(raw) else f"Speaker: {raw}")

    lines.extend([
        f"{host}: Welcome everyone to our meeting about {topic} on {today.month}/{today.day}/{today.year}.",
        f"{analyst}: Thanks for organizing this. I've prepared some data for us to review.",
        f"{host}: Great, let's get started with the main points.",
        f"{analyst}: Based on our recent analysis, we should focus on improving our key metrics by 15%.",
        f"{lead}: I agree with {analyst}. The data shows a clear trend in that direction.",
        f"{host}: Good point. We need to finalize our strategy by next week.",
        f"{analyst}: I can prepare the documentation and share it with everyone by Friday.",
        f"{host}: Perfect! Let's move on to the next item on our agenda.",
        f"{lead}: I suggest we prioritize the most impactful actions for the first phase.",
        f"{host}: That makes sense. Can you outline what those would be?",
        f"{lead}: Yes, I'll have a draft ready by our next meeting.",
        f"{analyst}: Should we also discuss the timeline for implementation?",
        f"{host}: Yes, that's coming up next on our agenda.",
    ])
    return "\n".join(lines)
