from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.domain.models import AssessmentResult, RiskLevel, Specialist


class ModelAssessment(BaseModel):
    """Structured output expected from the generation service."""

    model_config = ConfigDict(populate_by_name=True)

    risk_level: RiskLevel = Field(..., alias="riskLevel")
    analysis: str = Field(..., min_length=1)
    precautions: List[str]
    next_action: str = Field(..., alias="nextAction")
    hospital_required: bool = Field(..., alias="hospitalRequired", strict=True)
    specialist: Optional[Specialist] = None

    @field_validator("analysis", "next_action", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("specialist", mode="before")
    @classmethod
    def unknown_specialist_to_none(cls, v):
        # Optional enrichment; an unknown name is dropped, a non-string is a type error.
        if isinstance(v, str) and v not in {s.value for s in Specialist}:
            return None
        return v

    def to_result(self) -> AssessmentResult:
        return AssessmentResult(
            risk_level=self.risk_level,
            analysis=self.analysis.strip(),
            precautions=[p.strip() for p in self.precautions if p and p.strip()],
            next_action=self.next_action,
            hospital_required=self.hospital_required,
            specialist=self.specialist,
            source="model",
        )
