"""Tests for agent input/output models."""

import pytest
from pydantic import ValidationError

from clipcheck.agent.schemas import (
    AnalysisRequest,
    CognitiveBiasResult,
    OrchestratorResult,
    PotentialIssue,
    ScreenerResult,
    Severity,
    SourceCredibilityResult,
    SummaryResult,
)


class TestAnalysisRequest:

    def test_default_source(self) -> None:
        assert AnalysisRequest(text="hello").source == "N/A"

    @pytest.mark.parametrize("source", [None, "", "   "])
    def test_blank_source_becomes_unknown(self, source) -> None:
        assert AnalysisRequest(text="hello", source=source).source == "N/A"

    def test_request_is_immutable(self) -> None:
        request = AnalysisRequest(text="hello", source="apnews.com")
        with pytest.raises(ValidationError):
            request.text = "changed"


class TestScreenerResult:

    def test_parses_camel_case_flag(self) -> None:
        result = ScreenerResult.model_validate({"needsDeepAnalysis": False, "reasoning": "ok"})
        assert result.needs_deep_analysis is False

    def test_populate_by_field_name(self) -> None:
        result = ScreenerResult(needs_deep_analysis=True, reasoning="hmm")
        assert result.model_dump(by_alias=True, exclude_none=True) == {
            "needsDeepAnalysis": True,
            "reasoning": "hmm",
        }

    def test_flag_is_required(self) -> None:
        with pytest.raises(ValidationError):
            ScreenerResult.model_validate({"reasoning": "ok"})


class TestOrchestratorResult:

    def test_accepts_one_to_three(self) -> None:
        result = OrchestratorResult(
            selected_specialists=["a", "b", "c"], reasoning="three"
        )
        assert len(result.selected_specialists) == 3

    @pytest.mark.parametrize("selected", [[], ["a", "b", "c", "d"]])
    def test_rejects_out_of_range(self, selected) -> None:
        with pytest.raises(ValidationError):
            OrchestratorResult(selected_specialists=selected, reasoning="x")


class TestSeverity:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("low", Severity.LOW),
            ("HIGH", Severity.HIGH),
            ("minor", Severity.LOW),
            ("moderate", Severity.MEDIUM),
            ("major", Severity.HIGH),
            (" Critical ", Severity.HIGH),
        ],
    )
    def test_synonyms_are_normalized(self, raw, expected) -> None:
        issue = PotentialIssue(type="t", explanation="e", severity=raw)
        assert issue.severity is expected

    def test_unknown_severity_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PotentialIssue(type="t", explanation="e", severity="catastrophic")


class TestSpecialistResult:

    def test_issues_view_and_type(self) -> None:
        result = CognitiveBiasResult.model_validate({
            "biases_identified": [
                {
                    "bias_type": "confirmation bias",
                    "explanation": "Only supporting evidence is cited.",
                    "severity": "medium",
                    "example_from_text": "as everyone knows",
                }
            ],
            "overall_assessment": "One-sided.",
            "recommendation": "Look for counter-evidence.",
        })
        assert len(result.issues) == 1
        assert result.issue_type(result.issues[0]) == "confirmation bias"

    def test_empty_issue_list_by_default(self) -> None:
        result = SourceCredibilityResult(overall_assessment="Fine", recommendation="None")
        assert result.credibility_issues == []
        assert result.issues == []


class TestSummaryResult:

    def test_score_bounds(self) -> None:
        with pytest.raises(ValidationError):
            SummaryResult(credibility_score=11, recommendation="x")
        with pytest.raises(ValidationError):
            SummaryResult(credibility_score=-1, recommendation="x")

    def test_recommendation_must_not_be_empty(self) -> None:
        with pytest.raises(ValidationError):
            SummaryResult(credibility_score=5, recommendation="")

    def test_empty_issues_are_valid(self) -> None:
        result = SummaryResult(credibility_score=9, recommendation="Reliable.")
        assert result.potential_issues == []

    def test_json_dict_omits_absent_key_concerns(self) -> None:
        result = SummaryResult(
            credibility_score=6,
            potential_issues=[PotentialIssue(type="t", explanation="e", severity="major")],
            recommendation="Check sources.",
        )
        assert result.to_json_dict() == {
            "credibility_score": 6.0,
            "potential_issues": [{"type": "t", "explanation": "e", "severity": "high"}],
            "recommendation": "Check sources.",
        }
