"""Tests for agent prompt construction and the single inference call per agent."""

import json
import logging

import pytest

from clipcheck.agent.base import PipelineContext, format_text_block
from clipcheck.agent.orchestrator import OrchestratorAgent
from clipcheck.agent.registry import SpecialistRegistry
from clipcheck.agent.schemas import (
    LogicalFallacyResult,
    OrchestratorResult,
    ScreenerResult,
    SummaryResult,
)
from clipcheck.agent.screener import ScreenerAgent
from clipcheck.agent.specialists import LogicalFallacyAgent, TechnicalAccuracyAgent
from clipcheck.agent.summarizer import SummarizerAgent
from clipcheck.errors import InferenceUnavailable

from tests.fakes import FakeInferenceClient


def flagged_context(**kwargs) -> PipelineContext:
    return PipelineContext(
        source="example.com",
        screener_result=ScreenerResult(needs_deep_analysis=True, reasoning="Loaded language."),
        **kwargs,
    )


def test_format_text_block() -> None:
    assert format_text_block("Hello", "apnews.com") == 'Source: apnews.com\nText: "Hello"'
    assert format_text_block("Hello", "").startswith("Source: N/A")


class TestScreenerAgent:

    def test_prompt_contains_text_and_source(self) -> None:
        agent = ScreenerAgent(FakeInferenceClient())
        prompt = agent.format_prompt("Some claim.", PipelineContext(source="apnews.com"))
        assert 'Text: "Some claim."' in prompt
        assert "Source: apnews.com" in prompt
        assert '"needsDeepAnalysis"' in prompt

    @pytest.mark.asyncio
    async def test_single_call_with_response_model(self) -> None:
        client = FakeInferenceClient({
            ScreenerResult: {"needsDeepAnalysis": False, "reasoning": "Plain facts."}
        })
        agent = ScreenerAgent(client)
        result = await agent.analyze("Water boils at 100C at sea level.", PipelineContext())

        assert result.needs_deep_analysis is False
        assert len(client.calls) == 1
        system_prompt, _, model = client.calls[0]
        assert system_prompt == agent.system_prompt
        assert model is ScreenerResult

    @pytest.mark.asyncio
    async def test_failures_propagate(self) -> None:
        client = FakeInferenceClient({ScreenerResult: InferenceUnavailable("down")})
        with pytest.raises(InferenceUnavailable):
            await ScreenerAgent(client).analyze("text", PipelineContext())
        assert len(client.calls) == 1


class TestOrchestratorAgent:

    def test_prompt_lists_registry_and_screener_verdict(self) -> None:
        client = FakeInferenceClient()
        registry = SpecialistRegistry.create_default(client)
        agent = OrchestratorAgent(client, specialists=registry.describe(), max_specialists=2)

        prompt = agent.format_prompt("Some claim.", flagged_context())

        for specialist_id in registry.keys():
            assert f"- {specialist_id}:" in prompt
        assert '"needsDeepAnalysis": true' in prompt
        assert "at most 2 specialists" in prompt

    @pytest.mark.asyncio
    async def test_returns_selection(self) -> None:
        client = FakeInferenceClient({
            OrchestratorResult: {
                "selected_specialists": ["technical_accuracy"],
                "reasoning": "Scientific claim.",
            }
        })
        agent = OrchestratorAgent(client, specialists={"technical_accuracy": "Checks claims"})
        result = await agent.analyze("Vaccines contain microchips.", flagged_context())
        assert result.selected_specialists == ["technical_accuracy"]


class TestSpecialistAgents:

    def test_prompt_uses_specialist_field_names(self) -> None:
        agent = LogicalFallacyAgent(FakeInferenceClient())
        prompt = agent.format_prompt("If we allow this, society collapses.", flagged_context())
        assert '"fallacies_identified"' in prompt
        assert '"fallacy_type"' in prompt
        assert "- Slippery slope:" in prompt
        assert "example_from_text" in prompt

    def test_technical_accuracy_prompt(self) -> None:
        agent = TechnicalAccuracyAgent(FakeInferenceClient())
        prompt = agent.format_prompt("50% of 10 is 7.", flagged_context())
        assert '"accuracy_issues"' in prompt
        assert '"issue_type"' in prompt
        assert "Fundamentally misleading" in prompt

    @pytest.mark.asyncio
    async def test_reported_issue_types_are_logged(self, caplog) -> None:
        client = FakeInferenceClient({
            LogicalFallacyResult: {
                "fallacies_identified": [
                    {
                        "fallacy_type": "slippery slope",
                        "explanation": "Extreme outcome without evidence.",
                        "severity": "high",
                        "example_from_text": "society collapses",
                    }
                ],
                "overall_assessment": "Weak.",
                "recommendation": "Verify.",
            }
        })
        caplog.set_level(logging.INFO, logger="clipcheck.agent.specialists")

        await LogicalFallacyAgent(client).analyze("text", flagged_context())

        assert "reported 1 issue(s): slippery slope" in caplog.text

    @pytest.mark.asyncio
    async def test_specialist_result(self) -> None:
        client = FakeInferenceClient({
            LogicalFallacyResult: {
                "fallacies_identified": [],
                "overall_assessment": "Sound reasoning.",
                "recommendation": "No concerns.",
            }
        })
        result = await LogicalFallacyAgent(client).analyze("text", flagged_context())
        assert result.issues == []


class TestSummarizerAgent:

    def test_prompt_without_specialists(self) -> None:
        agent = SummarizerAgent(FakeInferenceClient())
        context = PipelineContext(
            screener_result=ScreenerResult(needs_deep_analysis=False, reasoning="Fine.")
        )
        prompt = agent.format_prompt("Plain text.", context)
        assert "No specialist analyses were conducted." in prompt
        assert "do NOT manufacture potential issues" in prompt

    def test_prompt_includes_each_specialist_in_order(self) -> None:
        agent = SummarizerAgent(FakeInferenceClient())
        fallacy = LogicalFallacyResult(overall_assessment="Weak.", recommendation="Verify.")
        context = flagged_context(
            specialist_results={"logical_fallacy": fallacy, "cognitive_bias": fallacy}
        )
        prompt = agent.format_prompt("Some claim.", context)

        assert prompt.index("logical_fallacy Analysis:") < prompt.index("cognitive_bias Analysis:")
        assert json.dumps(fallacy.model_dump(mode="json"), indent=2) in prompt

    @pytest.mark.asyncio
    async def test_summary(self) -> None:
        client = FakeInferenceClient({
            SummaryResult: {
                "credibility_score": 7,
                "potential_issues": [],
                "recommendation": "Generally reliable.",
            }
        })
        result = await SummarizerAgent(client).analyze("text", PipelineContext())
        assert result.credibility_score == 7
