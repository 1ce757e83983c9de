import json

import pytest

from src.application.errors import GenerationError
from src.application.use_cases import RiskAssessmentUseCase, extract_json_object, parse_model_output
from src.domain.models import AssessmentRequest, AssessmentResult, ImagePayload, RiskLevel, Specialist


IMAGE = ImagePayload.from_bytes(b"fake-jpeg-bytes", "image/png")


def model_json(risk_level="Green", **overrides):
    data = {
        "riskLevel": risk_level,
        "analysis": "Test analysis.",
        "precautions": ["Take rest"],
        "nextAction": "Do something",
        "hospitalRequired": False,
        "specialist": "General Physician",
    }
    data.update(overrides)
    return json.dumps(data)


class DummyLLM:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def generate_assessment_json(self, messages):
        self.calls.append(messages)
        if self.error:
            raise self.error
        return self.response


class TestScenarios:
    def test_scenario_a_empty_request(self):
        llm = DummyLLM(model_json("Green"))
        result = RiskAssessmentUseCase(llm=llm).assess(AssessmentRequest(description=""))
        assert result.risk_level == RiskLevel.YELLOW
        assert result.analysis == "Not enough information provided."
        assert result.hospital_required is False
        assert llm.calls == []

    def test_scenario_b_generation_failure_falls_back(self):
        llm = DummyLLM(error=ConnectionError("network down"))
        result = RiskAssessmentUseCase(llm=llm).assess(
            AssessmentRequest(description="I have chest pain and heart racing")
        )
        assert result.risk_level == RiskLevel.RED
        assert result.specialist == Specialist.CARDIOLOGIST
        assert result.hospital_required is True
        assert result.precautions == []
        assert result.source == "fallback"
        assert len(llm.calls) == 1

    def test_scenario_c_green_without_image(self):
        llm = DummyLLM(model_json("Green"))
        result = RiskAssessmentUseCase(llm=llm).assess(AssessmentRequest(description="mild headache"))
        assert result.risk_level == RiskLevel.GREEN
        assert result.next_action == "Continue home care and monitor"
        assert result.source == "model"

    def test_scenario_d_image_raises_green(self):
        llm = DummyLLM(model_json("Green"))
        result = RiskAssessmentUseCase(llm=llm).assess(
            AssessmentRequest(description="small cut on arm", image=IMAGE)
        )
        assert result.risk_level == RiskLevel.YELLOW
        assert result.hospital_required is False

    @pytest.mark.parametrize("risk_level", ["Green", "Yellow", "Red"])
    def test_scenario_e_trauma_with_image_is_red(self, risk_level):
        llm = DummyLLM(model_json(risk_level))
        result = RiskAssessmentUseCase(llm=llm).assess(
            AssessmentRequest(description="accident, heavy bleeding", image=IMAGE)
        )
        assert result.risk_level == RiskLevel.RED
        assert result.hospital_required is True
        assert result.precautions == []
        assert result.next_action == "Go to the nearest hospital immediately"

    def test_scenario_e_holds_when_generation_fails(self):
        llm = DummyLLM(error=TimeoutError())
        result = RiskAssessmentUseCase(llm=llm).assess(
            AssessmentRequest(description="accident, heavy bleeding", image=IMAGE)
        )
        assert result.risk_level == RiskLevel.RED


class TestGenerationFailures:
    @pytest.mark.parametrize(
        "response",
        [
            None,
            "",
            "   ",
            "not json at all",
            "[1, 2, 3]",
            model_json("Blue"),
            model_json("Green", precautions="rest"),
            model_json("Green", hospitalRequired="no"),
            json.dumps({"riskLevel": "Green"}),
            model_json("Green", specialist=["Cardiologist"]),
            model_json("Green", specialist={"a": 1}),
            model_json("Green", analysis="   "),
        ],
    )
    def test_bad_output_falls_back(self, response):
        llm = DummyLLM(response)
        result = RiskAssessmentUseCase(llm=llm).assess(AssessmentRequest(description="fever and cough"))
        assert result.source == "fallback"
        assert result.risk_level == RiskLevel.YELLOW

    def test_generation_error_from_adapter_falls_back(self):
        llm = DummyLLM(error=GenerationError("client not initialized"))
        result = RiskAssessmentUseCase(llm=llm).assess(AssessmentRequest(description="a bit tired"))
        assert result.source == "fallback"

    def test_no_llm_uses_keywords(self):
        result = RiskAssessmentUseCase(llm=None).assess(AssessmentRequest(description="seizure"))
        assert result.risk_level == RiskLevel.RED
        assert result.specialist == Specialist.EMERGENCY


class TestNormalization:
    def test_red_model_output_is_normalized(self):
        llm = DummyLLM(model_json("Red", precautions=["Stay home"], hospitalRequired=False, specialist=None))
        result = RiskAssessmentUseCase(llm=llm).assess(AssessmentRequest(description="very bad pain"))
        assert result.risk_level == RiskLevel.RED
        assert result.precautions == []
        assert result.hospital_required is True
        assert result.specialist == Specialist.GENERAL_PHYSICIAN

    def test_output_wrapped_in_text_is_accepted(self):
        llm = DummyLLM("Here you go:\n```json\n" + model_json("Yellow") + "\n```")
        result = RiskAssessmentUseCase(llm=llm).assess(AssessmentRequest(description="stomach pain"))
        assert result.source == "model"
        assert result.risk_level == RiskLevel.YELLOW

    def test_unknown_specialist_is_inferred(self):
        llm = DummyLLM(model_json("Yellow", specialist="Dermatologist"))
        result = RiskAssessmentUseCase(llm=llm).assess(AssessmentRequest(description="breathing is hard"))
        assert result.specialist == Specialist.PULMONOLOGIST

    def test_idempotent(self):
        llm = DummyLLM(model_json("Yellow"))
        usecase = RiskAssessmentUseCase(llm=llm)
        request = AssessmentRequest(description="swelling on knee", image=IMAGE)
        first = usecase.assess(request)
        second = usecase.assess(request)
        assert isinstance(first, AssessmentResult)
        assert first == second

    def test_image_is_sent_to_model(self):
        llm = DummyLLM(model_json("Yellow"))
        RiskAssessmentUseCase(llm=llm).assess(AssessmentRequest(description="rash", image=IMAGE))
        user_content = llm.calls[0][-1]["content"]
        assert user_content[-1] == {"type": "image_url", "image_url": IMAGE.data_uri}


def test_extract_json_object():
    assert extract_json_object('noise {"a": 1} trailing') == '{"a": 1}'
    assert extract_json_object('{"a": 1}') == '{"a": 1}'


def test_parse_model_output_raises_generation_error():
    with pytest.raises(GenerationError):
        parse_model_output('{"riskLevel": "Purple"}')


@pytest.mark.parametrize("specialist", [["Cardiologist"], {"a": 1}, 3])
def test_parse_model_output_rejects_non_string_specialist(specialist):
    with pytest.raises(GenerationError):
        parse_model_output(model_json("Green", specialist=specialist))


def test_parse_model_output_strips_analysis():
    parsed = parse_model_output(model_json("Yellow", analysis="  Needs a check-up.  "))
    assert parsed.analysis == "Needs a check-up."
