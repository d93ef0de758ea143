"""
Unit tests for heuristic transcript analysis.
"""
from scribe.insights.analysis import (
    analyze_transcript,
    build_brief_summary,
    build_insights,
    build_todo_list,
    count_contributions,
    extract_action_items,
    extract_key_topics,
    extract_speakers,
)
from scribe.processing.fallback import DEMO_TRANSCRIPT


class TestSpeakers:
    """Tests for speaker extraction and participation counts."""

    def test_speakers_in_order_of_appearance(self):
        assert extract_speakers(DEMO_TRANSCRIPT) == ["John", "Sarah", "Michael"]

    def test_contribution_counts(self):
        counts = count_contributions(DEMO_TRANSCRIPT)
        assert counts == {"John": 6, "Sarah": 4, "Michael": 3}

    def test_lines_without_speaker_are_not_counted(self):
        assert extract_speakers("just some text\nno labels here") == []
        assert count_contributions("just some text") == {}


class TestActionItems:
    """Tests for keyword-based action item detection."""

    def test_demo_action_items(self, sample_transcript):
        items = extract_action_items(sample_transcript)
        assert items == [
            {"text": "We need to send the press kit by Friday.", "speaker": "Ben"},
            {"text": "Agreed. I will share the budget report.", "speaker": "Anna"},
        ]

    def test_demo_transcript_item_count(self):
        items = extract_action_items(DEMO_TRANSCRIPT)
        assert len(items) == 6
        assert {"text": "I can prepare the breakdown and send it to everyone by Friday.", "speaker": "Sarah"} in items

    def test_unlabelled_line_gets_unknown_speaker(self):
        items = extract_action_items("we should ship it")
        assert items == [{"text": "we should ship it", "speaker": "Unknown"}]

    def test_todo_list_mirrors_action_items(self):
        todo = build_todo_list([{"text": "Send the kit", "speaker": "Ben"}])
        assert todo == [{"task": "Send the kit", "assignee": "Ben", "completed": False}]


class TestSummaryAndTopics:
    """Tests for the brief summary, topics and insights report."""

    def test_brief_summary_is_first_five_lines(self):
        summary = build_brief_summary(DEMO_TRANSCRIPT)
        assert summary.splitlines() == DEMO_TRANSCRIPT.splitlines()[:5]

    def test_key_topics(self):
        topics = extract_key_topics(DEMO_TRANSCRIPT)
        assert "Budget" in topics
        assert "Q3" in topics
        assert "Marketing" in topics
        assert "Revenue" not in topics

    def test_insights_report(self):
        report = build_insights(DEMO_TRANSCRIPT)
        assert "3 participants: John, Sarah, Michael" in report
        assert "13 conversation exchanges" in report
        assert "Most active participant: John (6 comments)" in report
        assert "...and 3 more action items" in report

    def test_insights_without_speakers(self):
        report = build_insights("hello there")
        assert "none identified" in report
        assert "No specific topics identified" in report

    def test_analyze_transcript_bundles_everything(self, sample_transcript):
        result = analyze_transcript(sample_transcript)
        assert result["speakers"] == ["Anna", "Ben"]
        assert len(result["todo_list"]) == len(result["action_items"]) == 2
        assert "Launch" in result["topics"]
        assert result["insights"].startswith("## Meeting Analysis")
