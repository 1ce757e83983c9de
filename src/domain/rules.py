from typing import List, Optional, Tuple
from urllib.parse import quote_plus

from .models import AssessmentRequest, AssessmentResult, RiskLevel, Specialist


NEXT_ACTIONS = {
    RiskLevel.GREEN: "Continue home care and monitor",
    RiskLevel.YELLOW: "Visit a nearby doctor or hospital if needed",
    RiskLevel.RED: "Go to the nearest hospital immediately",
}

# Terms that, together with a photo, always mean an emergency.
STRICT_TRAUMA_KEYWORDS = ["bleeding", "blood", "head injury", "accident", "wound"]

# Fallback tiers. Order matters: first match wins.
RED_KEYWORDS: List[Tuple[Specialist, List[str]]] = [
    (Specialist.CARDIOLOGIST, ["chest pain", "heart"]),
    (Specialist.EMERGENCY, ["accident", "bleeding", "unconscious", "poison", "seizure"]),
    (Specialist.PULMONOLOGIST, ["breathing", "asthma"]),
]

YELLOW_KEYWORDS = [
    "fever",
    "vomiting",
    "diarrhea",
    "stomach pain",
    "infection",
    "body pain",
    "swelling",
    "headache",
]

INSUFFICIENT_INFO_ANALYSIS = "Not enough information provided."
IMAGE_FLOOR_ANALYSIS = "The photo shows a problem that a doctor should look at."
TRAUMA_ANALYSIS = "This looks like a serious injury. Please get medical help now."

FALLBACK_ANALYSIS = {
    RiskLevel.GREEN: "This looks like a minor problem that can be cared for at home.",
    RiskLevel.YELLOW: "This problem needs attention.",
    RiskLevel.RED: "This problem looks serious.",
}

FALLBACK_PRECAUTIONS = {
    RiskLevel.GREEN: ["Take rest", "Drink plenty of water", "Watch for new or worsening symptoms"],
    RiskLevel.YELLOW: ["Take rest", "Drink enough water", "Avoid heavy work"],
    RiskLevel.RED: [],
}

SPECIALIST_SEARCH_QUERIES = {
    Specialist.CARDIOLOGIST: "cardiology hospital",
    Specialist.PULMONOLOGIST: "pulmonology hospital",
    Specialist.EMERGENCY: "emergency hospital",
    Specialist.GENERAL_PHYSICIAN: "general hospital",
}

MAPS_SEARCH_URL = "https://www.google.com/maps/search/?api=1&query="


def _contains_any(text: str, keywords: List[str]) -> bool:
    return any(k in text for k in keywords)


def has_strict_trauma_keyword(description: str) -> bool:
    return _contains_any((description or "").lower(), STRICT_TRAUMA_KEYWORDS)


def infer_specialist(description: str) -> Specialist:
    text = (description or "").lower()
    for specialist, keywords in RED_KEYWORDS:
        if _contains_any(text, keywords):
            return specialist
    return Specialist.GENERAL_PHYSICIAN


def enforce_consistency(result: AssessmentResult) -> AssessmentResult:
    """Derive next action, hospital flag and precautions from the risk level."""
    update = {
        "next_action": NEXT_ACTIONS[result.risk_level],
        "hospital_required": result.risk_level == RiskLevel.RED,
    }
    if result.risk_level == RiskLevel.RED:
        update["precautions"] = []
    return result.model_copy(update=update)


def apply_safety_overrides(raw: AssessmentResult, request: AssessmentRequest) -> AssessmentResult:
    """Normalize a model verdict and apply the image safety rules.

    Overrides only ever raise the risk level. A photo combined with a trauma
    term in the description is always Red whatever the model said; a photo
    alone can never stay Green.
    """
    result = enforce_consistency(raw)
    if result.specialist is None:
        result = result.model_copy(update={"specialist": infer_specialist(request.description)})

    if request.has_image and has_strict_trauma_keyword(request.description):
        return enforce_consistency(
            result.model_copy(
                update={
                    "risk_level": RiskLevel.RED,
                    "analysis": TRAUMA_ANALYSIS,
                    "specialist": Specialist.EMERGENCY,
                }
            )
        )

    if request.has_image and result.risk_level == RiskLevel.GREEN:
        return enforce_consistency(
            result.model_copy(update={"risk_level": RiskLevel.YELLOW, "analysis": IMAGE_FLOOR_ANALYSIS})
        )

    return result


def insufficient_information_result() -> AssessmentResult:
    return enforce_consistency(
        AssessmentResult(
            risk_level=RiskLevel.YELLOW,
            analysis=INSUFFICIENT_INFO_ANALYSIS,
            precautions=["Describe the problem clearly", "Upload a photo if possible"],
            next_action="",
            hospital_required=False,
            specialist=Specialist.GENERAL_PHYSICIAN,
            source="insufficient_input",
        )
    )


def classify_by_keywords(request: AssessmentRequest) -> AssessmentResult:
    """Keyword triage used when the model is unavailable. Never raises."""
    if request.is_empty:
        return insufficient_information_result()

    text = request.description.lower()
    level: Optional[RiskLevel] = None
    specialist = Specialist.GENERAL_PHYSICIAN

    for tier_specialist, keywords in RED_KEYWORDS:
        if _contains_any(text, keywords):
            level, specialist = RiskLevel.RED, tier_specialist
            break

    if level is None:
        if _contains_any(text, YELLOW_KEYWORDS):
            level = RiskLevel.YELLOW
        else:
            level = RiskLevel.GREEN

    result = AssessmentResult(
        risk_level=level,
        analysis=FALLBACK_ANALYSIS[level],
        precautions=list(FALLBACK_PRECAUTIONS[level]),
        next_action="",
        hospital_required=False,
        specialist=specialist,
        source="fallback",
    )
    # Same image rules as model output, so a photo never yields Green here either.
    return apply_safety_overrides(result, request)


def specialist_search_query(specialist: Optional[Specialist]) -> str:
    return SPECIALIST_SEARCH_QUERIES[specialist or Specialist.GENERAL_PHYSICIAN]


def build_maps_search_url(query: str) -> str:
    return MAPS_SEARCH_URL + quote_plus(f"{query} near me")
