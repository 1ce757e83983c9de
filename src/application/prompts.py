from typing import List

from src.domain.models import AssessmentRequest


SYSTEM_PROMPT = """You are a healthcare guidance assistant for people in rural areas.

IMPORTANT SAFETY RULES:
- You are NOT a doctor.
- You must NOT give a medical diagnosis.
- You must NOT prescribe or name medicines.
- Use very simple words. Many users cannot read well.
- If you are unsure, choose Yellow or Red. Never choose Green when unsure.

TASK:
Classify the health problem into ONE category.

GREEN: minor issue, safe home care.
Choose Green ONLY if ALL of these are true: the symptoms are mild, there is no severe pain,
no difficulty breathing, no bleeding and the person is not unconscious.

YELLOW: moderate issue, a doctor or hospital visit is recommended if needed.

RED: serious or emergency, an immediate hospital visit is required.

PHOTOS:
If a photo is given and it shows a wound, rash, swelling, bleeding or signs of infection,
the category must be Yellow or Red, never Green.

SPECIALIST:
- Chest pain or heart problems: Cardiologist
- Accident or heavy bleeding: Emergency
- Breathing problems: Pulmonologist
- Everything else (fever, cold, stomach pain, skin problems): General Physician"""


def build_schema_instructions() -> str:
    return (
        "You MUST return ONLY a valid JSON object. Do NOT include any markdown, code fences, or explanations. "
        "JSON keys: riskLevel (one of 'Green', 'Yellow', 'Red'), "
        "analysis (string, one short simple sentence), "
        "precautions (array of short home care steps, empty for Red), "
        "nextAction (string, what the user should do next), "
        "hospitalRequired (boolean, true only if a hospital visit is required), "
        "specialist (one of 'Cardiologist', 'Pulmonologist', 'Emergency', 'General Physician').\n"
        "Start your response with { and end with }. Return valid JSON only."
    )


def build_user_prompt(request: AssessmentRequest) -> str:
    subject = request.subject
    lines = [
        "USER DETAILS:",
        "Name: " + subject.display("name"),
        "Age: " + subject.display("age"),
        "Weight: " + subject.display("weight"),
        "Gender: " + subject.display("gender"),
        "",
        "PROBLEM DESCRIPTION:",
        f'"{request.description}"',
    ]
    if request.has_image:
        lines += ["", "A photo of the problem is attached."]
    return "\n".join(lines)


def build_messages(request: AssessmentRequest) -> List[dict]:
    """Build the chat messages for one assessment. Pure function of the request."""
    user_content: List[dict] = [{"type": "text", "text": build_user_prompt(request)}]
    if request.has_image:
        user_content.append({"type": "image_url", "image_url": request.image.data_uri})

    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_schema_instructions()},
        {"role": "user", "content": user_content},
    ]
