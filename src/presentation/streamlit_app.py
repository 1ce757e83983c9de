import logging
import os
from datetime import date, timedelta

import streamlit as st

from src.application.errors import AppError
from src.application.medicine_tracker import MedicineTrackerService
from src.application.profiles import ProfileService
from src.application.reminders import ReminderService
from src.application.use_cases import RiskAssessmentUseCase
from src.domain.models import (
    AssessmentRequest,
    AssessmentResult,
    DoseStatus,
    DoseTime,
    ImagePayload,
    RiskLevel,
)
from src.domain.rules import build_maps_search_url, specialist_search_query
from src.infrastructure.config import Settings
from src.infrastructure.hospital_search.google_places import GooglePlacesHospitalSearchAdapter
from src.infrastructure.hospital_search.mock_search import MockHospitalSearchAdapter
from src.infrastructure.llm.mistral_client import MistralLLMAdapter
from src.infrastructure.notifications.resend_client import ResendEmailNotifier
from src.infrastructure.storage.json_store import JsonDocumentStore
from src.presentation.profile_screens import show_profile_screen, show_register_profile_screen


logger = logging.getLogger(__name__)


DISCLAIMER = (
    "⚕️ **DISCLAIMER:** This is AI-assisted guidance, NOT a medical diagnosis. "
    "Always consult a healthcare professional. "
    "In an emergency, go to the nearest hospital or call your local emergency number."
)

RISK_TITLES = {
    RiskLevel.GREEN: "## ✅ Minor Problem",
    RiskLevel.YELLOW: "## ⚠️ Caution Advised",
    RiskLevel.RED: "## 🚨 Emergency",
}

PAGES = ["Check Symptoms", "Medicine Tracker", "Profile"]


def format_result_markdown(result: AssessmentResult) -> str:
    """Render an assessment as markdown for the result card."""
    lines = [RISK_TITLES[result.risk_level], "", f"**{result.analysis}**", ""]

    if result.precautions:
        lines.append("### What you can do now")
        for tip in result.precautions:
            lines.append(f"- {tip}")
        lines.append("")

    lines.append(f"**Next step:** {result.next_action}")
    if result.specialist:
        lines.append(f"\n**Suggested specialist:** {result.specialist.value}")
    if result.source == "fallback":
        lines.append("\n_The AI service was unavailable, so a simpler safety check was used._")
    return "\n".join(lines)


@st.cache_resource
def _get_store(path: str) -> JsonDocumentStore:
    return JsonDocumentStore(storage_path=path)


def _build_use_case(settings: Settings) -> RiskAssessmentUseCase:
    llm = MistralLLMAdapter(settings=settings) if settings.mistral_api_key else None
    if llm is None or not llm.available:
        logger.warning("Generation service unavailable; keyword triage only")
        return RiskAssessmentUseCase(llm=None)
    return RiskAssessmentUseCase(llm=llm)


def _render_sidebar(settings: Settings) -> str:
    st.sidebar.title("⚙️ Menu")
    page = st.sidebar.radio("Go to", PAGES)

    st.sidebar.markdown("### Your account")
    username = st.sidebar.text_input(
        "Username",
        value=st.session_state.get("username", ""),
        help="Leave blank to check symptoms anonymously.",
    )
    st.session_state.username = username.strip()

    st.sidebar.markdown("### Hospital search")
    st.session_state.location_query = st.sidebar.text_input("Your city/area", placeholder="e.g., Madurai")

    if settings.mistral_api_key:
        st.sidebar.caption(f"**Model:** {settings.mistral_model}")
    else:
        st.sidebar.warning("⚠️ No Mistral API key: using simple keyword checks")
    return page


def _render_symptom_page(settings: Settings, profiles: ProfileService) -> None:
    st.markdown("# 🩺 Check Your Symptoms")
    st.info(DISCLAIMER)

    with st.form("symptom_form"):
        description = st.text_area("Describe your problem", placeholder="e.g., fever and body pain since 2 days")
        photo = st.file_uploader("Upload a photo (optional)", type=["png", "jpg", "jpeg", "webp"])
        submit = st.form_submit_button("Check", use_container_width=True)

    if not submit:
        return

    if not description.strip() and photo is None:
        st.error("Please describe your problem or upload an image.")
        return

    image = ImagePayload.from_bytes(photo.getvalue(), photo.type or "image/jpeg") if photo else None
    request = AssessmentRequest(
        description=description,
        image=image,
        subject=profiles.subject_for(st.session_state.get("username")),
    )

    with st.spinner("Analyzing your symptoms safely..."):
        result = _build_use_case(settings).assess(request)

    st.markdown(format_result_markdown(result))
    if result.hospital_required:
        _render_hospitals(settings, result)


def _render_hospitals(settings: Settings, result: AssessmentResult) -> None:
    query = specialist_search_query(result.specialist)
    st.link_button("📍 Find Nearby Specialist Hospital", build_maps_search_url(query))

    location = st.session_state.get("location_query", "")
    if not location:
        return
    if settings.google_places_api_key:
        adapter = GooglePlacesHospitalSearchAdapter(settings=settings)
    else:
        adapter = MockHospitalSearchAdapter()
    for hospital in adapter.search_hospitals(query, location, limit=3):
        line = f"**{hospital.name}**"
        if hospital.address:
            line += f", {hospital.address}"
        if hospital.phone:
            line += f" · 📞 {hospital.phone}"
        st.markdown(line)


def _render_tracker_page(settings: Settings, store: JsonDocumentStore) -> None:
    st.markdown("# 💊 Medicine Tracker")
    username = st.session_state.get("username")
    if not username:
        st.warning("Enter your username in the sidebar to track medicines.")
        return

    tracker = MedicineTrackerService(store)

    with st.expander("➕ Add Medicine"):
        with st.form("add_medicine_form", clear_on_submit=True):
            name = st.text_input("Medicine Name")
            dosage = st.text_input("Dosage")
            times = st.multiselect("Time of Day", [t.value for t in DoseTime])
            col1, col2 = st.columns(2)
            with col1:
                start = st.date_input("Start date", value=date.today())
            with col2:
                end = st.date_input("End date (optional)", value=None)
            if st.form_submit_button("Save"):
                try:
                    tracker.add_medicine(username, name, dosage, times, start_date=start, end_date=end)
                    st.success("Medicine added")
                except ValueError as e:
                    st.error(f"❌ {e}")

    today = date.today()
    doses = tracker.schedule_for(username, today)
    if not doses:
        st.info("No medicines added yet")
        return

    st.markdown(f"### Today ({today.isoformat()})")
    for dose in doses:
        col1, col2, col3 = st.columns([3, 1, 1])
        status = dose.status.value if dose.status else "pending"
        col1.markdown(f"**{dose.name}** ({dose.dosage}) · {dose.time.value} · _{status}_")
        key = f"{dose.medicine_id}-{dose.time.value}"
        if col2.button("Taken", key=f"taken-{key}"):
            tracker.mark_dose(username, dose.medicine_id, today, dose.time, DoseStatus.TAKEN)
            st.rerun()
        if col3.button("Missed", key=f"missed-{key}"):
            tracker.mark_dose(username, dose.medicine_id, today, dose.time, DoseStatus.MISSED)
            st.rerun()

    week_start = today - timedelta(days=6)
    st.caption(f"Adherence since {week_start.isoformat()}: {tracker.adherence(username, week_start, today):.0%}")

    slot = st.selectbox("Send reminder for", [t.value for t in DoseTime])
    if st.button("📧 Send reminder email"):
        try:
            sent = ReminderService(store, ResendEmailNotifier(settings)).send_due_reminders(
                username, today, DoseTime(slot)
            )
            st.success(f"Reminder sent for {sent} dose(s)" if sent else "Nothing pending for that time")
        except AppError as e:
            st.error(f"❌ {e}")


def _render_profile_page(profiles: ProfileService) -> None:
    profile = profiles.get_profile(st.session_state.get("username"))
    if profile is None:
        if show_register_profile_screen(profiles):
            st.rerun()
        return
    show_profile_screen(profile)


def main():
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))

    st.set_page_config(
        page_title="Health Guidance Assistant",
        page_icon="⚕️",
        layout="centered",
        initial_sidebar_state="expanded",
    )

    settings = Settings()
    store = _get_store(settings.data_path)
    profiles = ProfileService(store)

    page = _render_sidebar(settings)
    if page == "Check Symptoms":
        _render_symptom_page(settings, profiles)
    elif page == "Medicine Tracker":
        _render_tracker_page(settings, store)
    else:
        _render_profile_page(profiles)


if __name__ == "__main__":
    main()
