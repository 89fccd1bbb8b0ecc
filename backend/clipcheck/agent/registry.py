"""Specialist registry

Maps the closed set of specialist identifiers to agent instances. The
orchestrator's free-text selections are resolved here; anything outside the
set raises SpecialistNotFound, which the coordinator logs and skips.
"""

import logging
from enum import Enum
from typing import Dict, List, Optional, Type

from ..errors import SpecialistNotFound
from .client import InferenceClient
from .specialists import (
    CognitiveBiasAgent,
    EmotionalManipulationAgent,
    LogicalFallacyAgent,
    SourceCredibilityAgent,
    SpecialistAgent,
    TechnicalAccuracyAgent,
)

logger = logging.getLogger(__name__)


class SpecialistKind(str, Enum):
    """Identifiers the orchestrator may select"""
    COGNITIVE_BIAS = "cognitive_bias"
    EMOTIONAL_MANIPULATION = "emotional_manipulation"
    LOGICAL_FALLACY = "logical_fallacy"
    SOURCE_CREDIBILITY = "source_credibility"
    TECHNICAL_ACCURACY = "technical_accuracy"


SPECIALIST_CLASSES: Dict[SpecialistKind, Type[SpecialistAgent]] = {
    SpecialistKind.COGNITIVE_BIAS: CognitiveBiasAgent,
    SpecialistKind.EMOTIONAL_MANIPULATION: EmotionalManipulationAgent,
    SpecialistKind.LOGICAL_FALLACY: LogicalFallacyAgent,
    SpecialistKind.SOURCE_CREDIBILITY: SourceCredibilityAgent,
    SpecialistKind.TECHNICAL_ACCURACY: TechnicalAccuracyAgent,
}


def parse_specialist_id(specialist_id: str) -> SpecialistKind:
    """
    Resolve a raw identifier to a SpecialistKind.

    Args:
        specialist_id: Identifier as returned by the orchestrator

    Raises:
        SpecialistNotFound: If the identifier is not a known kind
    """
    try:
        return SpecialistKind(specialist_id.strip().lower())
    except (ValueError, AttributeError):
        raise SpecialistNotFound(str(specialist_id)) from None


class SpecialistRegistry:
    """Fixed mapping from specialist kind to agent instance"""

    def __init__(self, agents: Dict[SpecialistKind, SpecialistAgent]):
        """
        Initialize the registry.

        Args:
            agents: Agent instance for each registered kind
        """
        self._agents = dict(agents)
        logger.info(f"Specialist registry initialized with: {', '.join(self.keys())}")

    @classmethod
    def create_default(cls, client: InferenceClient) -> "SpecialistRegistry":
        """
        Build a registry containing every SpecialistKind.

        Args:
            client: Shared inference client for all specialists

        Returns:
            Registry with one agent per kind
        """
        missing = [kind.value for kind in SpecialistKind if kind not in SPECIALIST_CLASSES]
        if missing:
            raise RuntimeError(f"No agent class registered for: {', '.join(missing)}")

        return cls({kind: SPECIALIST_CLASSES[kind](client) for kind in SpecialistKind})

    def lookup(self, specialist_id: str) -> SpecialistAgent:
        """
        Get the agent for an identifier.

        Raises:
            SpecialistNotFound: Unknown identifier, or a known kind that is
                not registered in this instance
        """
        kind = parse_specialist_id(specialist_id)
        agent: Optional[SpecialistAgent] = self._agents.get(kind)
        if agent is None:
            raise SpecialistNotFound(specialist_id)
        return agent

    def keys(self) -> List[str]:
        return [kind.value for kind in self._agents]

    def describe(self) -> Dict[str, str]:
        """Identifier -> description, for the orchestrator prompt"""
        return {kind.value: agent.description for kind, agent in self._agents.items()}

    def __contains__(self, specialist_id: object) -> bool:
        if not isinstance(specialist_id, str):
            return False
        try:
            return parse_specialist_id(specialist_id) in self._agents
        except SpecialistNotFound:
            return False

    def __len__(self) -> int:
        return len(self._agents)
