"""Screener Agent

First stage of the pipeline. Makes a quick call on whether the text needs
specialist review at all; reliable content goes straight to the summarizer.
"""

import logging

from .base import BaseAgent, PipelineContext, format_text_block
from .schemas import ScreenerResult

logger = logging.getLogger(__name__)


SCREENER_SYSTEM_PROMPT = """You are a text screener who quickly evaluates whether content needs deeper analysis for misinformation, bias, manipulation tactics, or credibility issues. You only flag content that genuinely needs deeper review."""


SCREENER_PROMPT = """Decide whether this text needs deeper analysis for potential misinformation, manipulation, bias, or credibility issues.

{text_block}

YOUR TASK:
1. Make a quick assessment of whether this content needs deeper specialist analysis
2. Explain your reasoning in one or two sentences

OUTPUT FORMAT:
Respond with ONLY a JSON object:

{{
  "needsDeepAnalysis": true | false,
  "reasoning": "Brief explanation of the decision"
}}

IMPORTANT: If the content is clearly reliable, well-sourced information without manipulation tactics, respond with "needsDeepAnalysis": false. Do NOT invent problems to justify a deeper review."""


class ScreenerAgent(BaseAgent):
    """Decides whether deep analysis is warranted"""

    name = "screener"
    system_prompt = SCREENER_SYSTEM_PROMPT
    response_model = ScreenerResult

    def format_prompt(self, text: str, context: PipelineContext) -> str:
        return SCREENER_PROMPT.format(text_block=format_text_block(text, context.source))

    async def analyze(self, text: str, context: PipelineContext) -> ScreenerResult:
        result = await super().analyze(text, context)
        logger.info(
            "Screener assessment: "
            f"{'needs deeper analysis' if result.needs_deep_analysis else 'no issues detected'}"
        )
        return result
