"""
Pydantic models for agent inputs and structured LLM outputs.

Each agent declares one of these as its response model. The inference client
sends the model's JSON schema to the server and validates the returned JSON
against it, so a shape mismatch surfaces as InferenceResponseMalformed.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, ClassVar, Dict, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator

UNKNOWN_SOURCE = "N/A"


class Severity(str, Enum):
    """Severity levels for identified issues"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Small local models drift between rubric vocabularies
_SEVERITY_SYNONYMS = {
    "minor": "low",
    "moderate": "medium",
    "major": "high",
    "critical": "high",
}


def _normalize_severity(value: Any) -> Any:
    if isinstance(value, str):
        lowered = value.strip().lower()
        return _SEVERITY_SYNONYMS.get(lowered, lowered)
    return value


SeverityLevel = Annotated[Severity, BeforeValidator(_normalize_severity)]


class AnalysisRequest(BaseModel):
    """Text and inferred source for one pipeline run"""
    model_config = ConfigDict(frozen=True)

    text: str
    source: str = UNKNOWN_SOURCE

    @field_validator("source", mode="before")
    @classmethod
    def _default_source(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return UNKNOWN_SOURCE
        return value


# Screener / Orchestrator


class ScreenerResult(BaseModel):
    """First-pass decision on whether deep analysis is warranted"""
    model_config = ConfigDict(populate_by_name=True)

    needs_deep_analysis: bool = Field(..., alias="needsDeepAnalysis")
    reasoning: str
    # Legacy fields from older prompt versions, not used for control flow
    initial_score: Optional[float] = Field(None, ge=0, le=10)
    suggested_specialists: Optional[List[str]] = None


class OrchestratorResult(BaseModel):
    """Specialists chosen to examine the text"""
    selected_specialists: List[str] = Field(..., min_length=1, max_length=3)
    reasoning: str


# Specialists


class SpecialistIssue(BaseModel):
    """Fields shared by every specialist's issue records"""
    explanation: str
    severity: SeverityLevel
    example_from_text: str


class BiasIssue(SpecialistIssue):
    bias_type: str


class ManipulationTactic(SpecialistIssue):
    tactic_type: str


class FallacyIssue(SpecialistIssue):
    fallacy_type: str


class CredibilityIssue(SpecialistIssue):
    issue_type: str


class AccuracyIssue(SpecialistIssue):
    issue_type: str


class SpecialistResult(BaseModel):
    """Base for the five specialist outputs"""
    # Name of the issue-list field and of the per-issue type field
    issues_field: ClassVar[str] = ""
    type_field: ClassVar[str] = ""

    overall_assessment: str
    recommendation: str

    @property
    def issues(self) -> List[SpecialistIssue]:
        return list(getattr(self, self.issues_field, []))

    def issue_type(self, issue: SpecialistIssue) -> str:
        return getattr(issue, self.type_field, "")


class CognitiveBiasResult(SpecialistResult):
    issues_field: ClassVar[str] = "biases_identified"
    type_field: ClassVar[str] = "bias_type"

    biases_identified: List[BiasIssue] = Field(default_factory=list)


class EmotionalManipulationResult(SpecialistResult):
    issues_field: ClassVar[str] = "manipulation_tactics"
    type_field: ClassVar[str] = "tactic_type"

    manipulation_tactics: List[ManipulationTactic] = Field(default_factory=list)


class LogicalFallacyResult(SpecialistResult):
    issues_field: ClassVar[str] = "fallacies_identified"
    type_field: ClassVar[str] = "fallacy_type"

    fallacies_identified: List[FallacyIssue] = Field(default_factory=list)


class SourceCredibilityResult(SpecialistResult):
    issues_field: ClassVar[str] = "credibility_issues"
    type_field: ClassVar[str] = "issue_type"

    credibility_issues: List[CredibilityIssue] = Field(default_factory=list)


class TechnicalAccuracyResult(SpecialistResult):
    issues_field: ClassVar[str] = "accuracy_issues"
    type_field: ClassVar[str] = "issue_type"

    accuracy_issues: List[AccuracyIssue] = Field(default_factory=list)


# Summary (final, user-facing output)


class PotentialIssue(BaseModel):
    """One issue in the final summary"""
    type: str
    explanation: str
    severity: SeverityLevel


class SummaryResult(BaseModel):
    """Final credibility verdict rendered to the user"""
    credibility_score: float = Field(..., ge=0, le=10)
    potential_issues: List[PotentialIssue] = Field(default_factory=list)
    key_concerns: Optional[List[str]] = None
    recommendation: str = Field(..., min_length=1)

    def to_json_dict(self) -> Dict[str, Any]:
        """JSON shape for the presentation layer (key_concerns omitted when absent)"""
        return self.model_dump(mode="json", exclude_none=True)


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()
