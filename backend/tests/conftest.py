"""Shared fixtures for ClipCheck tests"""

import pytest

from clipcheck.agent.pipeline import AnalysisPipeline
from clipcheck.agent.schemas import (
    EmotionalManipulationResult,
    LogicalFallacyResult,
    OrchestratorResult,
    ScreenerResult,
    SummaryResult,
)
from clipcheck.memory import MemoryGuard
from clipcheck.service import AnalysisService

from tests.fakes import GB, FakeInferenceClient, memory_reader

WIRE_TEXT = (
    "WASHINGTON (AP) - The Senate voted 68-32 on Tuesday to approve the "
    "infrastructure bill, sending it to the House."
)
CLICKBAIT_TEXT = (
    "DOCTORS ARE TERRIFIED OF THIS!!! Share NOW before THEY delete it or "
    "your family will pay the price!"
)


@pytest.fixture
def reliable_responses():
    """Scenario: reputable wire-service excerpt"""
    return {
        ScreenerResult: {
            "needsDeepAnalysis": False,
            "reasoning": "Factual wire-service reporting with attributed figures.",
        },
        SummaryResult: {
            "credibility_score": 8.5,
            "potential_issues": [],
            "recommendation": "This appears to be reliable reporting.",
        },
    }


@pytest.fixture
def clickbait_responses():
    """Scenario: all-caps clickbait with a fear-based call to action"""
    return {
        ScreenerResult: {
            "needsDeepAnalysis": True,
            "reasoning": "Sensational framing and urgent call to action.",
        },
        OrchestratorResult: {
            "selected_specialists": ["emotional_manipulation", "logical_fallacy"],
            "reasoning": "Emotionally charged persuasive content.",
        },
        EmotionalManipulationResult: {
            "manipulation_tactics": [
                {
                    "tactic_type": "fear appeal",
                    "explanation": "Threatens harm to the reader's family.",
                    "severity": "high",
                    "example_from_text": "your family will pay the price",
                }
            ],
            "overall_assessment": "Heavy use of fear and urgency.",
            "recommendation": "Do not share without verification.",
        },
        LogicalFallacyResult: {
            "fallacies_identified": [
                {
                    "fallacy_type": "appeal to authority",
                    "explanation": "Unnamed doctors are invoked as proof.",
                    "severity": "moderate",
                    "example_from_text": "DOCTORS ARE TERRIFIED",
                }
            ],
            "overall_assessment": "Relies on vague authority.",
            "recommendation": "Look for named sources.",
        },
        SummaryResult: {
            "credibility_score": 2,
            "potential_issues": [
                {
                    "type": "fear appeal",
                    "explanation": "Threatens the reader's family to force sharing.",
                    "severity": "high",
                },
                {
                    "type": "appeal to authority",
                    "explanation": "Cites unnamed doctors.",
                    "severity": "medium",
                },
            ],
            "key_concerns": ["Fear-based urgency", "Unnamed authorities"],
            "recommendation": "Treat this as unreliable and check a reputable source.",
        },
    }


@pytest.fixture
def make_pipeline():
    def _make(responses, **kwargs):
        client = FakeInferenceClient(responses, on_call=kwargs.pop("on_call", None))
        return AnalysisPipeline(client, **kwargs), client
    return _make


@pytest.fixture
def make_service(make_pipeline):
    def _make(responses, available=4 * GB, **kwargs):
        pipeline, client = make_pipeline(responses, **kwargs)
        guard = MemoryGuard(memory_reader=memory_reader(available))
        return AnalysisService(pipeline, memory_guard=guard), client
    return _make
