"""Specialist Agents

Five agents, one per credibility dimension. They share a prompt layout:
an enumerated taxonomy of issue types, a severity rubric, and a JSON output
format whose issue list and type field names differ per specialist. Every
issue must quote its evidence in example_from_text.
"""

import logging
from typing import ClassVar, List, Tuple, Type

from .base import BaseAgent, PipelineContext, format_text_block
from .schemas import (
    CognitiveBiasResult,
    EmotionalManipulationResult,
    LogicalFallacyResult,
    SourceCredibilityResult,
    SpecialistResult,
    TechnicalAccuracyResult,
)

logger = logging.getLogger(__name__)


SPECIALIST_PROMPT = """{instruction}

{text_block}

Consider these {taxonomy_label}:
{taxonomy}

Severity guide:
- Low: {severity_low}
- Medium: {severity_medium}
- High: {severity_high}

OUTPUT FORMAT:
Respond with ONLY a JSON object:

{{
  "{issues_field}": [
    {{
      "{type_field}": "name of the {item_label}",
      "explanation": "Why this is a problem in this text",
      "severity": "low" | "medium" | "high",
      "example_from_text": "Exact quote from the text"
    }}
  ],
  "overall_assessment": "Short overall assessment",
  "recommendation": "Guidance for the reader"
}}

Every entry must quote direct evidence from the text in example_from_text. If there is no such evidence, return an empty "{issues_field}" list.
{closing_note}"""


class SpecialistAgent(BaseAgent):
    """Shared prompt construction for the specialist agents"""

    description: ClassVar[str] = ""
    response_model: ClassVar[Type[SpecialistResult]]
    instruction: ClassVar[str] = ""
    taxonomy_label: ClassVar[str] = "issue types"
    item_label: ClassVar[str] = "issue"
    taxonomy: ClassVar[List[Tuple[str, str]]] = []
    # Low = tone only, medium = affects interpretation, high = fundamentally misleading
    severity_guide: ClassVar[Tuple[str, str, str]] = (
        "Affects tone only; the core message is intact",
        "Affects how the content is interpreted",
        "Fundamentally misleading",
    )
    closing_note: ClassVar[str] = ""

    def format_prompt(self, text: str, context: PipelineContext) -> str:
        low, medium, high = self.severity_guide
        taxonomy = "\n".join(f"- {label}: {meaning}" for label, meaning in self.taxonomy)
        return SPECIALIST_PROMPT.format(
            instruction=self.instruction,
            text_block=format_text_block(text, context.source),
            taxonomy_label=self.taxonomy_label,
            taxonomy=taxonomy,
            severity_low=low,
            severity_medium=medium,
            severity_high=high,
            issues_field=self.response_model.issues_field,
            type_field=self.response_model.type_field,
            item_label=self.item_label,
            closing_note=self.closing_note,
        ).rstrip()

    async def analyze(self, text: str, context: PipelineContext) -> SpecialistResult:
        result = await super().analyze(text, context)
        issue_types = ", ".join(result.issue_type(issue) for issue in result.issues)
        logger.info(
            f"Specialist {self.name} reported {len(result.issues)} issue(s)"
            + (f": {issue_types}" if issue_types else "")
        )
        return result


class CognitiveBiasAgent(SpecialistAgent):
    name = "cognitive_bias"
    description = "Identifies cognitive biases in content"
    response_model = CognitiveBiasResult
    system_prompt = (
        "You are a cognitive bias specialist who identifies how content may "
        "leverage or exhibit cognitive biases. Your goal is to help readers "
        "recognize when their cognitive biases might be exploited."
    )
    instruction = (
        "Analyze this text for cognitive biases. Identify only clear examples "
        "with specific textual evidence."
    )
    taxonomy_label = "cognitive biases"
    item_label = "bias"
    taxonomy = [
        ("Confirmation bias", "Favoring information that confirms existing beliefs"),
        ("Authority bias", "Trusting claims because of who made them rather than the evidence"),
        ("Bandwagon effect", "Appealing to popularity instead of merit"),
        ("Framing effect", "Using presentation to steer interpretation"),
        ("Other", "Any other clearly evidenced cognitive bias"),
    ]
    closing_note = "Regular persuasion is not automatically bias."


class EmotionalManipulationAgent(SpecialistAgent):
    name = "emotional_manipulation"
    description = "Detects emotional manipulation tactics"
    response_model = EmotionalManipulationResult
    system_prompt = (
        "You are an emotional manipulation specialist who identifies how "
        "content may use emotional appeals to manipulate readers. Your goal is "
        "to help readers recognize when their emotions are being leveraged to "
        "influence their thinking."
    )
    instruction = (
        "Analyze this text for emotional manipulation tactics. Identify only "
        "clear instances where emotions are leveraged to bypass rational thinking."
    )
    taxonomy_label = "manipulation tactics"
    item_label = "tactic"
    taxonomy = [
        ("Fear-mongering", "Exaggerating threats to provoke anxiety"),
        ("Appeal to anger/outrage", "Inflaming indignation beyond what the facts warrant"),
        ("Guilt-tripping", "Inducing unwarranted guilt to influence behavior"),
        ("Urgency creation", "Artificial time pressure to force hasty decisions"),
        ("Other", "Any other emotional manipulation technique"),
    ]
    closing_note = (
        "Not all emotional content is manipulative. Only flag tactics designed "
        "to circumvent rational judgment or distort understanding."
    )


class LogicalFallacyAgent(SpecialistAgent):
    name = "logical_fallacy"
    description = "Identifies logical fallacies and reasoning errors"
    response_model = LogicalFallacyResult
    system_prompt = (
        "You are a logical fallacy specialist who identifies flawed reasoning "
        "and arguments in content. Your goal is to help readers recognize "
        "invalid arguments and reasoning patterns."
    )
    instruction = (
        "Analyze this text for logical fallacies and flawed reasoning. Identify "
        "only fallacies present in actual arguments, not in descriptions or quotations."
    )
    taxonomy_label = "common fallacies"
    item_label = "fallacy"
    taxonomy = [
        ("Straw man", "Misrepresenting an opposing argument to attack it more easily"),
        ("False dichotomy", "Presenting only two options when others exist"),
        ("Ad hominem", "Attacking the person instead of the argument"),
        ("Slippery slope", "Claiming extreme outcomes will follow without evidence"),
        ("False cause", "Treating correlation as causation"),
    ]
    closing_note = (
        "Descriptive text, quotations of others' views, or non-argumentative "
        "content should not be flagged."
    )


class SourceCredibilityAgent(SpecialistAgent):
    name = "source_credibility"
    description = "Evaluates source reliability and authority"
    response_model = SourceCredibilityResult
    system_prompt = (
        "You are a source credibility specialist who evaluates the reliability "
        "and authority of content sources. Your goal is to help readers "
        "understand the credibility of information sources."
    )
    instruction = (
        "Analyze this text for source credibility issues. Evaluate how sources "
        "are used, cited, or represented, considering the content type."
    )
    taxonomy_label = "credibility factors"
    item_label = "credibility issue"
    taxonomy = [
        ("Attribution clarity", "Are claims attributed to specific sources?"),
        ("Source expertise", "Do cited sources have relevant expertise?"),
        ("Citation completeness", "Is there sufficient sourcing for key claims?"),
        ("Source diversity", "Are multiple perspectives or sources considered?"),
        ("Transparency", "Is the author or publisher clearly identified?"),
    ]
    closing_note = (
        "News articles, academic papers and social media have different "
        "citation standards. Self-evident claims and personal experience may "
        "not need external sourcing."
    )


class TechnicalAccuracyAgent(SpecialistAgent):
    name = "technical_accuracy"
    description = "Checks factual and technical accuracy of claims"
    response_model = TechnicalAccuracyResult
    system_prompt = (
        "You are a technical accuracy specialist who evaluates factual claims "
        "and technical details in content. Your goal is to help readers "
        "identify potential factual errors or misrepresentations."
    )
    instruction = (
        "Analyze this text for technical accuracy issues. Evaluate factual "
        "claims, statistics, and technical details within your knowledge."
    )
    taxonomy_label = "accuracy factors"
    item_label = "accuracy issue"
    taxonomy = [
        ("Statistical integrity", "Are statistics presented accurately and in context?"),
        ("Causality claims", "Are cause-effect relationships established or overstated?"),
        ("Data selection", "Is evidence cherry-picked or representative?"),
        ("Technical terminology", "Are specialized terms used correctly?"),
        ("Complexity handling", "Are complex topics explained or oversimplified?"),
    ]
    closing_note = (
        "Consider the audience and purpose of the content. Only flag issues "
        "you can confidently identify from the text."
    )
