"""Orchestrator Agent

Chooses which specialists examine the text, based on the text itself and the
screener's verdict. The selection guidance in the prompt is advisory only;
the coordinator validates ids against the registry, nothing else.
"""

import json
import logging
from typing import Dict

from .base import BaseAgent, PipelineContext, format_text_block
from .schemas import OrchestratorResult

logger = logging.getLogger(__name__)


ORCHESTRATOR_SYSTEM_PROMPT = """You are an orchestrator who determines which specialist analysis agents should evaluate potentially problematic content. You select specialists based on the content and the initial screening result."""


ORCHESTRATOR_PROMPT = """Based on the initial screening of this text, decide which specialist analyzers should be used.

{text_block}

Initial screening result:
{screener_result}

Available specialists:
{specialists}

SELECTION GUIDELINES:
- News or factual reporting: source_credibility
- Opinion or persuasive writing: cognitive_bias and logical_fallacy
- Emotionally charged content: emotional_manipulation
- Technical or scientific claims: technical_accuracy

Select at least 1 and at most {max_specialists} specialists, using only the identifiers listed above.

OUTPUT FORMAT:
Respond with ONLY a JSON object:

{{
  "selected_specialists": ["specialist_id", ...],
  "reasoning": "Why each selected specialist fits this content"
}}"""


class OrchestratorAgent(BaseAgent):
    """Selects 1-3 specialists from the registry"""

    name = "orchestrator"
    system_prompt = ORCHESTRATOR_SYSTEM_PROMPT
    response_model = OrchestratorResult

    def __init__(self, client, specialists: Dict[str, str], max_specialists: int = 3):
        """
        Initialize the orchestrator agent.

        Args:
            client: Shared inference client
            specialists: Specialist id -> one-line description
            max_specialists: Upper bound stated in the prompt
        """
        super().__init__(client)
        self.specialists = specialists
        self.max_specialists = max_specialists

    def format_prompt(self, text: str, context: PipelineContext) -> str:
        screener = (
            context.screener_result.model_dump(by_alias=True, exclude_none=True)
            if context.screener_result is not None
            else {}
        )
        specialists = "\n".join(
            f"- {specialist_id}: {description}"
            for specialist_id, description in self.specialists.items()
        )
        return ORCHESTRATOR_PROMPT.format(
            text_block=format_text_block(text, context.source),
            screener_result=json.dumps(screener, indent=2),
            specialists=specialists,
            max_specialists=self.max_specialists,
        )

    async def analyze(self, text: str, context: PipelineContext) -> OrchestratorResult:
        result = await super().analyze(text, context)
        logger.info(
            f"Orchestrator selected {result.selected_specialists}: {result.reasoning[:100]}"
        )
        return result
