"""Profile screens: register a profile and show the current one."""
import streamlit as st

from src.application.profiles import ProfileService
from src.domain.models import UserProfile


def show_register_profile_screen(profiles: ProfileService) -> bool:
    """
    Display the profile registration form.

    Returns:
        True if a profile was created, False otherwise
    """
    st.markdown("# ✍️ Create Profile")
    st.markdown("Your details help give safer guidance. All fields except gender are required.")

    with st.form("register_profile_form"):
        username = st.text_input("Username", placeholder="ravi_k")
        email = st.text_input("Email", placeholder="your.email@example.com")
        col1, col2, col3 = st.columns(3)
        with col1:
            age = st.text_input("Age (years)")
        with col2:
            height = st.text_input("Height (cm)")
        with col3:
            weight = st.text_input("Weight (kg)")
        gender = st.selectbox("Gender", ["", "Female", "Male", "Other", "Prefer not to say"])

        submit = st.form_submit_button("Create Profile", use_container_width=True)

    if not submit:
        return False

    success, message = profiles.register_profile(
        username=username,
        email=email,
        age=age,
        height=height,
        weight=weight,
        gender=gender or None,
    )
    if not success:
        st.error(f"❌ {message}")
        return False

    st.session_state.username = username.strip()
    st.success(f"✅ {message}")
    return True


def show_profile_screen(profile: UserProfile) -> None:
    st.markdown(f"# 👤 {profile.username}")
    st.caption("Here are your account details.")

    col1, col2 = st.columns(2)
    with col1:
        st.metric("Email", profile.email)
        st.metric("Weight", f"{profile.weight:g} kg")
    with col2:
        st.metric("Age", f"{profile.age} years")
        st.metric("Height", f"{profile.height:g} cm")
    if profile.gender:
        st.caption(f"Gender: {profile.gender}")
