# Insights layer - heuristic analysis, summary, actions, chat

from scribe.insights.analysis import (
    extract_speakers,
    count_contributions,
    build_brief_summary,
    extract_action_items,
    build_todo_list,
    extract_key_topics,
    build_insights,
    analyze_transcript,
)

from scribe.insights.summary import (
    summarize_transcript,
    export_to_markdown,
)

from scribe.insights.actions import (
    extract_action_items_llm,
    enrich_transcript,
)

from scribe.insights.chat import (
    ask_about_meeting,
)

__all__ = [
    # Analysis
    "extract_speakers",
    "count_contributions",
    "build_brief_summary",
    "extract_action_items",
    "build_todo_list",
    "extract_key_topics",
    "build_insights",
    "analyze_transcript",
    # Summary
    "summarize_transcript",
    "export_to_markdown",
    # Actions
    "extract_action_items_llm",
    "enrich_transcript",
    # Chat
    "ask_about_meeting",
]
