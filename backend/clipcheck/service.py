"""
Analysis service: pre-flight checks around the agent pipeline.

Validates the submitted text, refuses to start when memory is critically
low, runs the pipeline, and swaps in the low-memory failure message when a
degraded result coincides with memory pressure.
"""

import asyncio
import logging
from typing import Any, AsyncIterator, Dict, Optional

from .agent import AnalysisPipeline, InferenceClient, ProgressChannel, is_error_result
from .agent.schemas import UNKNOWN_SOURCE, SummaryResult
from .config import Config
from .errors import AnalysisInProgress, InsufficientResources, InvalidAnalysisText
from .memory import MemoryGuard, MemoryState

logger = logging.getLogger(__name__)


class AnalysisService:
    """Entry point used by the presentation layer"""

    def __init__(
        self,
        pipeline: AnalysisPipeline,
        memory_guard: Optional[MemoryGuard] = None,
        max_text_length: int = 5000,
    ):
        """
        Initialize the analysis service.

        Args:
            pipeline: Agent pipeline coordinator
            memory_guard: System memory check (default: psutil-backed guard)
            max_text_length: Texts at or above this stripped length are rejected
        """
        self.pipeline = pipeline
        self.memory_guard = memory_guard or MemoryGuard()
        self.max_text_length = max_text_length
        self._cancel_event: Optional[asyncio.Event] = None

    @classmethod
    def from_config(cls, config: Config) -> "AnalysisService":
        """Wire client, pipeline and memory guard from configuration"""
        client = InferenceClient.from_config(config.inference)
        pipeline = AnalysisPipeline(client, max_specialists=config.pipeline.max_specialists)
        return cls(
            pipeline=pipeline,
            memory_guard=MemoryGuard(config.memory),
            max_text_length=config.pipeline.max_text_length,
        )

    @property
    def busy(self) -> bool:
        return self.pipeline.busy

    def validate_text(self, text: Optional[str]) -> str:
        """
        Check that the text can be analyzed.

        Raises:
            InvalidAnalysisText: Missing, blank, or too long
        """
        if not text or not isinstance(text, str):
            logger.warning("Invalid text: text is missing or not a string")
            raise InvalidAnalysisText("No text found in clipboard")

        if not text.strip():
            logger.warning("Invalid text: text is empty or only whitespace")
            raise InvalidAnalysisText("Selected text is empty")

        if len(text.strip()) >= self.max_text_length:
            logger.warning("Invalid text: text exceeds maximum length")
            raise InvalidAnalysisText(
                f"Text is too long (maximum {self.max_text_length} characters). "
                "Please select a shorter portion of text."
            )

        return text

    def _preflight(self, text: Optional[str]) -> MemoryState:
        self.validate_text(text)

        if self.pipeline.busy:
            raise AnalysisInProgress()

        memory = self.memory_guard.check()
        logger.info(f"Memory state before analysis - Free: {memory.free_gb}GB")
        if memory.is_critical:
            logger.warning("Memory is critically low before analysis")
            raise InsufficientResources(
                memory.warning_message, free_memory_bytes=memory.free_memory_bytes
            )
        return memory

    async def analyze(
        self,
        text: str,
        source: str = UNKNOWN_SOURCE,
        progress: Optional[ProgressChannel] = None,
    ) -> SummaryResult:
        """
        Run a full analysis.

        Args:
            text: Copied text
            source: Inferred source URL or "N/A"
            progress: Optional channel for stage events

        Returns:
            SummaryResult (possibly the degraded error result)

        Raises:
            InvalidAnalysisText, AnalysisInProgress, InsufficientResources:
                Pre-flight rejection
            AnalysisCancelled: The run was cancelled via cancel()
        """
        logger.info("Starting agent-based analysis")
        self._preflight(text)
        return await self._run(text, source, progress)

    async def analyze_stream(
        self,
        text: str,
        source: str = UNKNOWN_SOURCE,
    ) -> AsyncIterator[Dict[str, Any]]:
        """
        Stream an analysis as WebSocket-ready messages.

        Yields:
            {"type": "progress", ...} per stage event, then
            {"type": "result", "result": {...}}
        """
        self._preflight(text)

        channel = ProgressChannel()
        task = asyncio.create_task(self._run(text, source, channel))
        task.add_done_callback(lambda _: channel.close())

        try:
            async for event in channel:
                yield event.to_message()
            result = await task
        finally:
            # Consumer stopped early (e.g. socket closed)
            if not task.done():
                task.cancel()

        yield {"type": "result", "result": result.to_json_dict()}

    def cancel(self) -> bool:
        """Request cancellation of the active run at its next stage boundary"""
        if self._cancel_event is None:
            return False
        logger.info("Cancellation requested for active analysis")
        self._cancel_event.set()
        return True

    async def _run(
        self,
        text: str,
        source: str,
        progress: Optional[ProgressChannel],
    ) -> SummaryResult:
        # Re-checked here: a streamed run is scheduled after its pre-flight
        if self.pipeline.busy:
            raise AnalysisInProgress()

        cancel_event = asyncio.Event()
        self._cancel_event = cancel_event
        try:
            result = await self.pipeline.analyze(
                text, source, progress=progress, cancel_event=cancel_event
            )
        finally:
            if self._cancel_event is cancel_event:
                self._cancel_event = None

        if is_error_result(result):
            post_failure = self.memory_guard.check()
            logger.debug(f"Memory state after failure - Free: {post_failure.free_gb}GB")
            if post_failure.is_critical:
                result = result.model_copy(
                    update={"recommendation": post_failure.critical_failure_message}
                )
        else:
            logger.info("Agent-based analysis complete")

        return result
