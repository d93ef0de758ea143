"""
Unit tests for LLM-backed insights: enrichment, action items, Q&A and export.
"""
from unittest.mock import MagicMock, patch

import pytest

from scribe.errors import AnalysisDegraded
from scribe.insights import (
    ask_about_meeting,
    enrich_transcript,
    export_to_markdown,
    extract_action_items_llm,
    summarize_transcript,
)
from scribe.llm import AIClients, generate_with_llm, get_available_models

CLIENTS = AIClients(gemini=None, openai=MagicMock(), anthropic=None)


class TestEnrichTranscript:
    """Tests for the gateway's secondary analysis pass."""

    @patch("scribe.insights.actions.generate_with_llm")
    def test_parses_markdown_wrapped_json(self, mock_llm, sample_transcript):
        mock_llm.return_value = '```json\n{"summary": "Launch review.", "action_items": ["Ben: send press kit"]}\n```'

        result = enrich_transcript(sample_transcript, "gpt-4o-mini", CLIENTS)

        assert result == {"summary": "Launch review.", "action_items": ["Ben: send press kit"]}
        prompt = mock_llm.call_args[0][0]
        assert "Ben: We need to send the press kit by Friday." in prompt

    @patch("scribe.insights.actions.generate_with_llm")
    def test_repairs_malformed_json(self, mock_llm, sample_transcript):
        mock_llm.return_value = '{"summary": "Launch review.", "action_items": ["Ben: send press kit",]}'
        result = enrich_transcript(sample_transcript, "gpt-4o-mini", CLIENTS)
        assert result["action_items"] == ["Ben: send press kit"]

    @patch("scribe.insights.actions.generate_with_llm")
    def test_model_failure_is_degraded(self, mock_llm, sample_transcript):
        mock_llm.side_effect = RuntimeError("rate limited")
        with pytest.raises(AnalysisDegraded):
            enrich_transcript(sample_transcript, "gpt-4o-mini", CLIENTS)

    @patch("scribe.insights.actions.generate_with_llm")
    def test_non_object_output_is_degraded(self, mock_llm, sample_transcript):
        mock_llm.return_value = '["just", "a", "list"]'
        with pytest.raises(AnalysisDegraded):
            enrich_transcript(sample_transcript, "gpt-4o-mini", CLIENTS)

    @patch("scribe.insights.actions.generate_with_llm")
    def test_empty_output_is_degraded(self, mock_llm, sample_transcript):
        mock_llm.return_value = '{"summary": "", "action_items": []}'
        with pytest.raises(AnalysisDegraded):
            enrich_transcript(sample_transcript, "gpt-4o-mini", CLIENTS)


class TestExtractActionItemsLLM:
    @patch("scribe.insights.actions.generate_with_llm")
    def test_returns_strings(self, mock_llm, sample_transcript):
        mock_llm.return_value = '["Ben: send press kit", "  ", "Anna: share budget"]'
        assert extract_action_items_llm(sample_transcript, "gpt-4o-mini", CLIENTS) == [
            "Ben: send press kit",
            "Anna: share budget",
        ]

    @patch("scribe.insights.actions.generate_with_llm")
    def test_accepts_wrapped_object(self, mock_llm, sample_transcript):
        mock_llm.return_value = '{"action_items": ["Ben: send press kit"]}'
        assert extract_action_items_llm(sample_transcript, "gpt-4o-mini", CLIENTS) == ["Ben: send press kit"]

    @patch("scribe.insights.actions.generate_with_llm")
    def test_empty_transcript_skips_model(self, mock_llm):
        assert extract_action_items_llm("  ", "gpt-4o-mini", CLIENTS) == []
        mock_llm.assert_not_called()


class TestChatAndSummary:
    @patch("scribe.insights.chat.generate_with_llm")
    def test_question_includes_recent_history(self, mock_llm, sample_transcript):
        mock_llm.return_value = "Ben is sending it."
        history = [{"user": f"q{i}", "assistant": f"a{i}"} for i in range(5)]

        answer = ask_about_meeting(sample_transcript, "Who sends the kit?", history, "gpt-4o-mini", CLIENTS)

        assert answer == "Ben is sending it."
        prompt = mock_llm.call_args[0][0]
        assert "Who sends the kit?" in prompt
        assert "User: q4" in prompt
        assert "User: q1" not in prompt

    @patch("scribe.insights.chat.generate_with_llm")
    def test_question_without_transcript(self, mock_llm):
        answer = ask_about_meeting("", "Anything?", [], "gpt-4o-mini", CLIENTS)
        assert "no transcript" in answer.lower()
        mock_llm.assert_not_called()

    @patch("scribe.insights.summary.generate_with_llm")
    def test_summary_prompt_contains_transcript(self, mock_llm, sample_transcript):
        mock_llm.return_value = "## Summary\nLaunch review."
        assert summarize_transcript(sample_transcript, "gpt-4o-mini", CLIENTS).startswith("## Summary")
        assert "Anna: Let's review the launch plan." in mock_llm.call_args[0][0]


class TestExportToMarkdown:
    def test_sections(self, sample_transcript):
        md = export_to_markdown(
            "Meeting on 1/2/2024",
            sample_transcript,
            summary="Launch review.",
            action_items=[{"speaker": "Ben", "text": "Send the kit"}, "Anna: share budget"],
        )
        assert md.startswith("# Meeting on 1/2/2024")
        assert "## Summary\n\nLaunch review." in md
        assert "- [ ] Ben: Send the kit" in md
        assert "- [ ] Anna: share budget" in md
        assert md.rstrip().endswith("Ben: Great.")

    def test_transcript_only(self, sample_transcript):
        md = export_to_markdown("Title", sample_transcript)
        assert "## Summary" not in md
        assert "## Full Transcript" in md


class TestGeneration:
    """Tests for provider routing."""

    def test_routes_gpt_models_to_openai(self):
        openai_client = MagicMock()
        openai_client.chat.completions.create.return_value.choices = [MagicMock(message=MagicMock(content="hi"))]
        clients = AIClients(gemini=None, openai=openai_client, anthropic=None)

        assert generate_with_llm("prompt", "gpt-4o-mini", clients) == "hi"

    def test_unconfigured_provider(self):
        with pytest.raises(ValueError, match="Gemini API key not configured"):
            generate_with_llm("prompt", "gemini-2.5-flash", CLIENTS)

    def test_available_models_follow_configured_keys(self):
        assert get_available_models(CLIENTS) == ["gpt-4o", "gpt-4o-mini"]
