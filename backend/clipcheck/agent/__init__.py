"""Multi-Agent Credibility Analysis

A decomposed analysis flow against a local language model:

1. Screener: Decides whether the text needs specialist review
2. Orchestrator: Picks 1-3 specialists for the text
3. Specialists: Cognitive bias, emotional manipulation, logical fallacy,
   source credibility and technical accuracy, run one at a time
4. Summarizer: Produces the final credibility score and issue list

Each agent makes one schema-validated inference call; the pipeline
coordinates the stages, reports progress and degrades failures into a
well-formed result.
"""

from .base import BaseAgent, PipelineContext
from .client import InferenceClient
from .orchestrator import OrchestratorAgent
from .pipeline import AnalysisPipeline, build_error_result, is_error_result
from .progress import ProgressChannel, ProgressEvent, ProgressStatus
from .registry import SpecialistKind, SpecialistRegistry
from .schemas import (
    OrchestratorResult,
    ScreenerResult,
    SpecialistResult,
    SummaryResult,
)
from .screener import ScreenerAgent
from .specialists import SpecialistAgent
from .summarizer import SummarizerAgent

__all__ = [
    "AnalysisPipeline",
    "BaseAgent",
    "InferenceClient",
    "OrchestratorAgent",
    "OrchestratorResult",
    "PipelineContext",
    "ProgressChannel",
    "ProgressEvent",
    "ProgressStatus",
    "ScreenerAgent",
    "ScreenerResult",
    "SpecialistAgent",
    "SpecialistKind",
    "SpecialistRegistry",
    "SpecialistResult",
    "SummarizerAgent",
    "SummaryResult",
    "build_error_result",
    "is_error_result",
]
