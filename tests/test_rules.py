"""Unit tests for safety overrides and the keyword fallback classifier."""
import pytest

from src.domain.models import (
    AssessmentRequest,
    AssessmentResult,
    ImagePayload,
    RiskLevel,
    Specialist,
)
from src.domain.rules import (
    IMAGE_FLOOR_ANALYSIS,
    NEXT_ACTIONS,
    apply_safety_overrides,
    build_maps_search_url,
    classify_by_keywords,
    enforce_consistency,
    infer_specialist,
    insufficient_information_result,
    specialist_search_query,
)


IMAGE = ImagePayload.from_bytes(b"fake-jpeg-bytes")


def model_result(level, precautions=None, specialist=None, hospital=False, next_action="whatever"):
    return AssessmentResult(
        risk_level=level,
        analysis="Model analysis.",
        precautions=precautions if precautions is not None else ["Rest", "Drink water"],
        next_action=next_action,
        hospital_required=hospital,
        specialist=specialist,
    )


def assert_consistent(result: AssessmentResult):
    assert result.next_action == NEXT_ACTIONS[result.risk_level]
    assert result.hospital_required == (result.risk_level == RiskLevel.RED)
    if result.risk_level == RiskLevel.RED:
        assert result.precautions == []


class TestEnforceConsistency:
    def test_green_forces_home_care(self):
        result = enforce_consistency(model_result(RiskLevel.GREEN, hospital=True))
        assert result.next_action == "Continue home care and monitor"
        assert result.hospital_required is False
        assert result.precautions == ["Rest", "Drink water"]

    def test_yellow_forces_doctor_visit(self):
        result = enforce_consistency(model_result(RiskLevel.YELLOW, hospital=True))
        assert result.next_action == "Visit a nearby doctor or hospital if needed"
        assert result.hospital_required is False

    def test_red_clears_precautions(self):
        result = enforce_consistency(model_result(RiskLevel.RED, hospital=False))
        assert result.next_action == "Go to the nearest hospital immediately"
        assert result.hospital_required is True
        assert result.precautions == []

    def test_does_not_mutate_input(self):
        raw = model_result(RiskLevel.RED)
        enforce_consistency(raw)
        assert raw.precautions == ["Rest", "Drink water"]
        assert raw.next_action == "whatever"


class TestSafetyOverrides:
    def test_no_image_trusts_model(self):
        request = AssessmentRequest(description="mild headache")
        result = apply_safety_overrides(model_result(RiskLevel.GREEN), request)
        assert result.risk_level == RiskLevel.GREEN
        assert result.analysis == "Model analysis."
        assert_consistent(result)

    def test_text_trauma_without_image_is_not_forced(self):
        request = AssessmentRequest(description="some bleeding from the gums")
        result = apply_safety_overrides(model_result(RiskLevel.YELLOW), request)
        assert result.risk_level == RiskLevel.YELLOW

    @pytest.mark.parametrize("level", list(RiskLevel))
    @pytest.mark.parametrize(
        "description",
        ["accident, heavy bleeding", "There is blood everywhere", "head injury from a fall", "deep wound on leg"],
    )
    def test_image_with_trauma_keyword_is_always_red(self, level, description):
        request = AssessmentRequest(description=description, image=IMAGE)
        result = apply_safety_overrides(model_result(level), request)
        assert result.risk_level == RiskLevel.RED
        assert result.specialist == Specialist.EMERGENCY
        assert_consistent(result)

    def test_trauma_keyword_is_case_insensitive(self):
        request = AssessmentRequest(description="ACCIDENT on the road", image=IMAGE)
        result = apply_safety_overrides(model_result(RiskLevel.GREEN), request)
        assert result.risk_level == RiskLevel.RED

    def test_image_raises_green_to_yellow(self):
        request = AssessmentRequest(description="small cut on arm", image=IMAGE)
        result = apply_safety_overrides(model_result(RiskLevel.GREEN), request)
        assert result.risk_level == RiskLevel.YELLOW
        assert result.analysis == IMAGE_FLOOR_ANALYSIS
        assert result.hospital_required is False
        assert_consistent(result)

    def test_image_floor_still_infers_specialist(self):
        request = AssessmentRequest(description="chest pain after a fall", image=IMAGE)
        result = apply_safety_overrides(model_result(RiskLevel.GREEN), request)
        assert result.risk_level == RiskLevel.YELLOW
        assert result.specialist == Specialist.CARDIOLOGIST

    def test_image_does_not_touch_yellow_or_red(self):
        request = AssessmentRequest(description="rash on hand", image=IMAGE)
        yellow = apply_safety_overrides(model_result(RiskLevel.YELLOW), request)
        red = apply_safety_overrides(model_result(RiskLevel.RED), request)
        assert yellow.risk_level == RiskLevel.YELLOW
        assert yellow.analysis == "Model analysis."
        assert red.risk_level == RiskLevel.RED

    def test_missing_specialist_is_inferred(self):
        request = AssessmentRequest(description="my asthma is worse")
        result = apply_safety_overrides(model_result(RiskLevel.YELLOW), request)
        assert result.specialist == Specialist.PULMONOLOGIST

    def test_model_specialist_is_kept(self):
        request = AssessmentRequest(description="stomach pain")
        result = apply_safety_overrides(model_result(RiskLevel.YELLOW, specialist=Specialist.CARDIOLOGIST), request)
        assert result.specialist == Specialist.CARDIOLOGIST


class TestFallbackClassifier:
    def test_empty_request_is_insufficient_information(self):
        result = classify_by_keywords(AssessmentRequest(description="   "))
        assert result.risk_level == RiskLevel.YELLOW
        assert result.analysis == "Not enough information provided."
        assert result.hospital_required is False
        assert result.source == "insufficient_input"

    @pytest.mark.parametrize(
        "description,specialist",
        [
            ("I have chest pain and heart racing", Specialist.CARDIOLOGIST),
            ("Had an accident on my bike", Specialist.EMERGENCY),
            ("he is unconscious", Specialist.EMERGENCY),
            ("child drank poison", Specialist.EMERGENCY),
            ("difficulty breathing at night", Specialist.PULMONOLOGIST),
            ("asthma attack", Specialist.PULMONOLOGIST),
        ],
    )
    def test_red_tier(self, description, specialist):
        result = classify_by_keywords(AssessmentRequest(description=description))
        assert result.risk_level == RiskLevel.RED
        assert result.specialist == specialist
        assert result.source == "fallback"
        assert_consistent(result)

    @pytest.mark.parametrize(
        "description",
        ["Fever since two days", "vomiting after lunch", "bad headache", "swelling on ankle", "body pain"],
    )
    def test_yellow_tier(self, description):
        result = classify_by_keywords(AssessmentRequest(description=description))
        assert result.risk_level == RiskLevel.YELLOW
        assert result.specialist == Specialist.GENERAL_PHYSICIAN
        assert result.precautions
        assert_consistent(result)

    def test_red_tier_wins_over_yellow(self):
        result = classify_by_keywords(AssessmentRequest(description="fever and chest pain"))
        assert result.risk_level == RiskLevel.RED
        assert result.specialist == Specialist.CARDIOLOGIST

    def test_no_keyword_is_green(self):
        result = classify_by_keywords(AssessmentRequest(description="a bit tired today"))
        assert result.risk_level == RiskLevel.GREEN
        assert result.specialist == Specialist.GENERAL_PHYSICIAN
        assert_consistent(result)

    def test_image_only_is_never_green(self):
        result = classify_by_keywords(AssessmentRequest(image=IMAGE))
        assert result.risk_level == RiskLevel.YELLOW

    def test_deterministic(self):
        request = AssessmentRequest(description="stomach pain and vomiting")
        assert classify_by_keywords(request) == classify_by_keywords(request)


def test_insufficient_information_result():
    result = insufficient_information_result()
    assert result.to_api_dict() == {
        "riskLevel": "Yellow",
        "analysis": "Not enough information provided.",
        "precautions": ["Describe the problem clearly", "Upload a photo if possible"],
        "nextAction": "Visit a nearby doctor or hospital if needed",
        "hospitalRequired": False,
        "specialist": "General Physician",
    }


def test_infer_specialist_defaults_to_general_physician():
    assert infer_specialist("skin itching") == Specialist.GENERAL_PHYSICIAN
    assert infer_specialist("") == Specialist.GENERAL_PHYSICIAN


def test_specialist_search_query_and_maps_url():
    assert specialist_search_query(Specialist.CARDIOLOGIST) == "cardiology hospital"
    assert specialist_search_query(None) == "general hospital"
    url = build_maps_search_url("cardiology hospital")
    assert url == "https://www.google.com/maps/search/?api=1&query=cardiology+hospital+near+me"
