import json
import logging
from typing import Optional

from pydantic import ValidationError

from src.application.errors import GenerationError
from src.application.ports import GenerationPort
from src.application.prompts import build_messages
from src.application.schemas import ModelAssessment
from src.domain.models import AssessmentRequest, AssessmentResult
from src.domain.rules import (
    apply_safety_overrides,
    classify_by_keywords,
    insufficient_information_result,
)


logger = logging.getLogger(__name__)


def extract_json_object(raw: str) -> str:
    """Trim any text around the outermost JSON object."""
    raw = (raw or "").strip()
    if not raw.startswith('{'):
        start_idx = raw.find('{')
        if start_idx != -1:
            raw = raw[start_idx:]
    if not raw.endswith('}'):
        end_idx = raw.rfind('}')
        if end_idx != -1:
            raw = raw[:end_idx + 1]
    return raw


def parse_model_output(raw: Optional[str]) -> ModelAssessment:
    if raw is None or not raw.strip():
        raise GenerationError("No response from the generation service")

    cleaned = extract_json_object(raw)
    try:
        data = json.loads(cleaned)
        if not isinstance(data, dict):
            raise GenerationError("Model output is not a JSON object")
        return ModelAssessment(**data)
    except (json.JSONDecodeError, ValidationError, TypeError) as e:
        logger.warning("Assessment JSON invalid: %s. Raw: %s", e, raw[:200])
        raise GenerationError(f"Invalid model output: {e}") from e


class RiskAssessmentUseCase:
    """Triage a symptom report into a Green/Yellow/Red verdict.

    The model is asked once. Any failure (exception, empty output, invalid
    JSON or schema) falls back to keyword triage, so ``assess`` always
    returns a complete result. Without a generation service the keyword
    classifier is the only classifier.
    """

    def __init__(self, llm: Optional[GenerationPort] = None):
        self.llm = llm

    def assess(self, request: AssessmentRequest) -> AssessmentResult:
        if request.is_empty:
            logger.info("Empty assessment request; returning insufficient information result")
            return insufficient_information_result()

        if self.llm is None:
            logger.info("No generation service configured; using keyword triage")
            return classify_by_keywords(request)

        messages = build_messages(request)
        logger.debug("Prompt built (%d messages, image=%s)", len(messages), request.has_image)

        try:
            raw = self._generate(messages)
            model_result = parse_model_output(raw).to_result()
        except GenerationError as e:
            logger.warning("Generation failed, using keyword triage: %s", e)
            return classify_by_keywords(request)

        result = apply_safety_overrides(model_result, request)
        if result.risk_level.severity > model_result.risk_level.severity:
            logger.info(
                "Safety override raised risk level from %s to %s",
                model_result.risk_level.value,
                result.risk_level.value,
            )
        return result

    def _generate(self, messages) -> str:
        try:
            return self.llm.generate_assessment_json(messages)
        except GenerationError:
            raise
        except Exception as e:
            # Adapter, network and timeout errors all count as a failed generation.
            raise GenerationError(str(e) or e.__class__.__name__) from e
