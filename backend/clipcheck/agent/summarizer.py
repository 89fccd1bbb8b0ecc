"""Summarizer Agent

Final stage. Combines the screener verdict and whatever specialist results
were collected (possibly none) into the user-facing SummaryResult.
"""

import json
import logging

from .base import BaseAgent, PipelineContext, format_text_block
from .schemas import SummaryResult

logger = logging.getLogger(__name__)


SUMMARIZER_SYSTEM_PROMPT = """You are a summarizer who creates credibility reports by combining screening results and specialist analyses. You provide clear, concise summaries with actionable recommendations without inventing problems where none exist."""


SUMMARIZER_PROMPT = """Create a summary of the credibility of this content based on all analyses.

{text_block}

Screener Result:
{screener_result}

{specialist_section}

IMPORTANT: If the screener determined no deeper analysis was needed ("needsDeepAnalysis": false) and no specialist flagged anything, do NOT manufacture potential issues. For credible content, reporting zero issues with a score that reflects its reliability is the expected answer.

Synthesize all analyses into one assessment. When specialists disagree, weigh the evidence and reasoning from each.

Your summary must include:
1. A final credibility score (0-10):
   * 0-3: Significant credibility issues, generally unreliable
   * 4-6: Mixed credibility, some valuable content alongside issues
   * 7-10: Generally reliable, follows good information practices
2. Potential issues ordered by severity (only if any exist). Consolidate similar issues raised by different specialists.
3. Key concerns as short phrases (may be empty).
4. A clear, actionable recommendation for the reader, with concrete verification steps if needed.

OUTPUT FORMAT:
Respond with ONLY a JSON object:

{{
  "credibility_score": 0-10,
  "potential_issues": [
    {{
      "type": "issue type",
      "explanation": "Explanation with specific examples from the text",
      "severity": "low" | "medium" | "high"
    }}
  ],
  "key_concerns": ["short concern", ...],
  "recommendation": "Guidance for the reader"
}}"""


class SummarizerAgent(BaseAgent):
    """Synthesizes the final credibility verdict"""

    name = "summarizer"
    system_prompt = SUMMARIZER_SYSTEM_PROMPT
    response_model = SummaryResult

    def format_prompt(self, text: str, context: PipelineContext) -> str:
        screener = (
            context.screener_result.model_dump(by_alias=True, exclude_none=True)
            if context.screener_result is not None
            else {}
        )

        if context.specialist_results:
            analyses = "\n\n".join(
                f"{specialist_id} Analysis:\n{json.dumps(result.model_dump(mode='json'), indent=2)}"
                for specialist_id, result in context.specialist_results.items()
            )
            specialist_section = f"Specialist Analyses:\n{analyses}"
        else:
            specialist_section = "No specialist analyses were conducted."

        return SUMMARIZER_PROMPT.format(
            text_block=format_text_block(text, context.source),
            screener_result=json.dumps(screener, indent=2),
            specialist_section=specialist_section,
        )

    async def analyze(self, text: str, context: PipelineContext) -> SummaryResult:
        result = await super().analyze(text, context)
        logger.info(
            f"Summary: score={result.credibility_score}, "
            f"issues={len(result.potential_issues)}"
        )
        return result
