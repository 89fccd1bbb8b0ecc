"""Base agent class for the analysis pipeline"""

import logging
from abc import ABC, abstractmethod
from typing import ClassVar, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field

from .client import InferenceClient
from .schemas import (
    UNKNOWN_SOURCE,
    OrchestratorResult,
    ScreenerResult,
    SpecialistResult,
)

logger = logging.getLogger(__name__)


class PipelineContext(BaseModel):
    """
    Accumulator threaded through one pipeline run.

    Owned by a single AnalysisPipeline.analyze() call. Agents only read it;
    the coordinator writes each slot once (specialist_results grows in
    execution order).
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    source: str = UNKNOWN_SOURCE
    stage: Optional[str] = None
    screener_result: Optional[ScreenerResult] = None
    orchestrator_result: Optional[OrchestratorResult] = None
    active_specialists: List[str] = Field(default_factory=list)
    specialist_results: Dict[str, SpecialistResult] = Field(default_factory=dict)


class BaseAgent(ABC):
    """
    Abstract base class for all pipeline agents.

    An agent pairs a fixed system prompt with a per-call prompt builder and
    makes exactly one inference call per analyze(). Failures propagate to
    the caller; agents never retry or substitute a default result.
    """

    name: ClassVar[str] = "agent"
    system_prompt: ClassVar[str] = "You are a helpful AI assistant."
    response_model: ClassVar[Type[BaseModel]]

    def __init__(self, client: InferenceClient):
        """
        Initialize base agent.

        Args:
            client: Shared inference client
        """
        self.client = client
        logger.debug(f"Agent {self.name} initialized")

    @abstractmethod
    def format_prompt(self, text: str, context: PipelineContext) -> str:
        """
        Build the user message for this agent.

        Args:
            text: Text under analysis
            context: Read view of the current pipeline run

        Returns:
            User message content
        """
        pass

    async def analyze(self, text: str, context: PipelineContext) -> BaseModel:
        """
        Run this agent against the text.

        Args:
            text: Text under analysis
            context: Read view of the current pipeline run

        Returns:
            Validated instance of the agent's response model
        """
        logger.info(f"Agent {self.name}: starting analysis")
        prompt = self.format_prompt(text, context)

        try:
            result = await self.client.complete(
                self.system_prompt, prompt, self.response_model
            )
        except Exception as e:
            logger.error(f"Agent {self.name}: analysis failed: {e}")
            raise

        logger.info(f"Agent {self.name}: analysis complete")
        return result


def format_text_block(text: str, source: str) -> str:
    """Source line and quoted text shared by every agent prompt"""
    return f'Source: {source or UNKNOWN_SOURCE}\nText: "{text}"'
