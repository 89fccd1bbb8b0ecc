"""Multi-Agent Credibility Pipeline

Runs one credibility analysis as a fixed sequence of agent calls:

    ┌──────────┐  needsDeepAnalysis=false                   ┌────────────┐
    │ SCREENER │───────────────────────────────────────────▶│ SUMMARIZER │
    └────┬─────┘                                            └────────────┘
         │ needsDeepAnalysis=true                                 ▲
         ▼                                                        │
    ┌──────────────┐     ┌─────────────────────────────────┐     │
    │ ORCHESTRATOR │────▶│ SPECIALISTS (1-3, sequentially) │─────┘
    └──────────────┘     └─────────────────────────────────┘

Every stage is bracketed by a (stage, starting) and (stage, complete)
progress event. Specialists run one after another because they share a
single-slot local inference server.

Any failure inside a stage ends the run with a degraded SummaryResult
(score 0, one "analysis_error" issue); analyze() only raises for pre-flight
rejection (AnalysisInProgress) and cooperative cancellation.
"""

import asyncio
import logging
from enum import Enum
from typing import List, Optional

from ..errors import (
    AnalysisAborted,
    AnalysisCancelled,
    AnalysisInProgress,
    SpecialistNotFound,
)
from .base import BaseAgent, PipelineContext
from .client import InferenceClient
from .orchestrator import OrchestratorAgent
from .progress import ProgressChannel, ProgressEvent, ProgressStatus
from .registry import SpecialistRegistry
from .schemas import (
    AnalysisRequest,
    PotentialIssue,
    Severity,
    SummaryResult,
    UNKNOWN_SOURCE,
)
from .screener import ScreenerAgent
from .summarizer import SummarizerAgent

logger = logging.getLogger(__name__)

ANALYSIS_ERROR_TYPE = "analysis_error"
ERROR_KEY_CONCERN = "Analysis could not be completed due to an error"
ERROR_RECOMMENDATION = "Please try again or analyze a different text."


class PipelineStage(str, Enum):
    SCREENING = "screening"
    PLANNING = "planning"
    SPECIALISTS = "specialists"
    SUMMARIZING = "summarizing"


def build_error_result(message: str) -> SummaryResult:
    """Degraded SummaryResult returned when a run fails"""
    return SummaryResult(
        credibility_score=0,
        potential_issues=[
            PotentialIssue(
                type=ANALYSIS_ERROR_TYPE,
                explanation=f"Error during analysis: {message}",
                severity=Severity.HIGH,
            )
        ],
        key_concerns=[ERROR_KEY_CONCERN],
        recommendation=ERROR_RECOMMENDATION,
    )


def is_error_result(result: SummaryResult) -> bool:
    return result.credibility_score == 0 and any(
        issue.type == ANALYSIS_ERROR_TYPE for issue in result.potential_issues
    )


class AnalysisPipeline:
    """
    Coordinator for the screener → orchestrator → specialists → summarizer flow.

    Agents and the specialist registry are injected; by default they are
    built around the given inference client. One run at a time per instance.
    """

    def __init__(
        self,
        client: InferenceClient,
        registry: Optional[SpecialistRegistry] = None,
        screener: Optional[ScreenerAgent] = None,
        orchestrator: Optional[OrchestratorAgent] = None,
        summarizer: Optional[SummarizerAgent] = None,
        max_specialists: int = 3,
    ):
        """
        Initialize the pipeline.

        Args:
            client: Inference client shared by all default agents
            registry: Specialist registry (default: all five specialists)
            screener: Screener agent override
            orchestrator: Orchestrator agent override
            summarizer: Summarizer agent override
            max_specialists: Upper bound on specialists run per analysis
        """
        self.client = client
        self.registry = registry or SpecialistRegistry.create_default(client)
        self.max_specialists = max_specialists

        self.screener = screener or ScreenerAgent(client)
        self.orchestrator = orchestrator or OrchestratorAgent(
            client,
            specialists=self.registry.describe(),
            max_specialists=max_specialists,
        )
        self.summarizer = summarizer or SummarizerAgent(client)

        self._run_lock = asyncio.Lock()

        logger.info(
            f"Initialized AnalysisPipeline with {len(self.registry)} specialists, "
            f"max_specialists={max_specialists}"
        )

    @property
    def busy(self) -> bool:
        return self._run_lock.locked()

    async def analyze(
        self,
        text: str,
        source: str = UNKNOWN_SOURCE,
        progress: Optional[ProgressChannel] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> SummaryResult:
        """
        Analyze text for credibility issues.

        Args:
            text: Text to analyze
            source: Where the text came from (URL or "N/A")
            progress: Channel receiving stage events
            cancel_event: Set to cancel the run at the next stage boundary

        Returns:
            The summarizer's result, or the degraded error result

        Raises:
            AnalysisInProgress: Another run is active on this pipeline
            AnalysisCancelled: cancel_event was set between stages
        """
        # Check-and-acquire has no await in between, so it is atomic on the loop
        if self._run_lock.locked():
            raise AnalysisInProgress()

        async with self._run_lock:
            return await self._run(text, source, progress, cancel_event)

    async def _run(
        self,
        text: str,
        source: str,
        progress: Optional[ProgressChannel],
        cancel_event: Optional[asyncio.Event],
    ) -> SummaryResult:
        context = PipelineContext()
        state = PipelineStage.SCREENING

        try:
            request = AnalysisRequest(text=text, source=source)
            context.source = request.source
            logger.info(
                f"Analysis pipeline starting: {len(request.text)} chars from {request.source}"
            )

            # Stage 1: Screening
            self._check_cancelled(cancel_event, self.screener.name)
            context.stage = self.screener.name
            screener_result = await self._run_stage(self.screener, request.text, context, progress)
            context.screener_result = screener_result

            if not screener_result.needs_deep_analysis:
                logger.info("No deep analysis needed, skipping to summary")
            else:
                # Stage 2: Planning
                state = PipelineStage.PLANNING
                self._check_cancelled(cancel_event, self.orchestrator.name)
                context.stage = self.orchestrator.name
                orchestrator_result = await self._run_stage(
                    self.orchestrator, request.text, context, progress
                )
                context.orchestrator_result = orchestrator_result
                context.active_specialists = self._resolve_specialists(
                    orchestrator_result.selected_specialists
                )

                # Stage 3: Specialists, strictly in selection order
                state = PipelineStage.SPECIALISTS
                for specialist_id in context.active_specialists:
                    self._check_cancelled(cancel_event, specialist_id)
                    context.stage = specialist_id
                    specialist = self.registry.lookup(specialist_id)
                    result = await self._run_stage(
                        specialist, request.text, context, progress, stage=specialist_id
                    )
                    context.specialist_results[specialist_id] = result

            # Stage 4: Summary
            state = PipelineStage.SUMMARIZING
            self._check_cancelled(cancel_event, self.summarizer.name)
            context.stage = self.summarizer.name
            summary = await self._run_stage(self.summarizer, request.text, context, progress)

            logger.info(
                f"Analysis pipeline completed with {len(context.specialist_results)} "
                f"specialist(s): score={summary.credibility_score}"
            )
            return summary

        except AnalysisCancelled as e:
            logger.info(f"Analysis cancelled during {state.value}")
            self._emit(progress, e.stage, ProgressStatus.ERROR, message=str(e))
            raise

        except Exception as e:
            failed_stage = context.stage or "error"
            aborted = AnalysisAborted(failed_stage, e)
            logger.error(f"Analysis workflow failed in {state.value} stage: {aborted}")
            self._emit(progress, failed_stage, ProgressStatus.ERROR, message=str(e))
            return build_error_result(str(e))

    async def _run_stage(
        self,
        agent: BaseAgent,
        text: str,
        context: PipelineContext,
        progress: Optional[ProgressChannel],
        stage: Optional[str] = None,
    ):
        stage = stage or agent.name
        self._emit(progress, stage, ProgressStatus.STARTING)
        result = await agent.analyze(text, context)
        self._emit(
            progress,
            stage,
            ProgressStatus.COMPLETE,
            result=result.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
        return result

    def _resolve_specialists(self, selected: List[str]) -> List[str]:
        """
        Filter the orchestrator's selection down to runnable specialist ids.

        Unknown ids are logged and dropped; duplicates keep their first
        position; the list is capped at max_specialists.
        """
        resolved = []
        for specialist_id in selected:
            try:
                agent = self.registry.lookup(specialist_id)
            except SpecialistNotFound as e:
                logger.warning(f"{e}, skipping")
                continue

            if agent.name in resolved:
                logger.info(f"Specialist {agent.name} selected twice, running once")
                continue
            resolved.append(agent.name)

        if len(resolved) > self.max_specialists:
            logger.warning(
                f"Orchestrator selected {len(resolved)} specialists, "
                f"keeping the first {self.max_specialists}"
            )
            resolved = resolved[: self.max_specialists]

        logger.info(f"Selected specialists: {', '.join(resolved) or 'none'}")
        return resolved

    @staticmethod
    def _check_cancelled(cancel_event: Optional[asyncio.Event], next_stage: str) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise AnalysisCancelled(next_stage)

    @staticmethod
    def _emit(
        progress: Optional[ProgressChannel],
        stage: str,
        status: ProgressStatus,
        result=None,
        message: Optional[str] = None,
    ) -> None:
        if progress is None:
            return
        progress.emit(ProgressEvent(stage=stage, status=status, result=result, message=message))
