import os
import logging

try:
    import streamlit as st  # type: ignore
    _HAS_STREAMLIT = True
except Exception:
    _HAS_STREAMLIT = False

logger = logging.getLogger(__name__)


def get_secret(name: str, default: str | None = None) -> str | None:
    # Prefer Streamlit secrets if available
    if _HAS_STREAMLIT:
        try:
            if name in st.secrets:
                return str(st.secrets.get(name))
        except Exception:
            # No secrets.toml outside `streamlit run`
            logger.debug("Streamlit secrets unavailable for %s", name)
    # Fallback to environment variables
    return os.environ.get(name, default)


def _get_float(name: str, default: float) -> float:
    value = get_secret(name)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning("Invalid value for %s: %r; using default %s", name, value, default)
        return default


class Settings:
    @property
    def mistral_api_key(self) -> str | None:
        return get_secret("MISTRAL_API_KEY")

    @property
    def mistral_model(self) -> str:
        # Needs a vision-capable model for photo input
        return get_secret("MISTRAL_MODEL", "mistral-small-latest") or "mistral-small-latest"

    @property
    def generation_temperature(self) -> float:
        return _get_float("GENERATION_TEMPERATURE", 0.2)

    @property
    def generation_timeout_seconds(self) -> float:
        return _get_float("GENERATION_TIMEOUT_SECONDS", 20.0)

    @property
    def google_places_api_key(self) -> str | None:
        return get_secret("GOOGLE_PLACES_API_KEY")

    @property
    def resend_api_key(self) -> str | None:
        return get_secret("RESEND_API_KEY")

    @property
    def reminder_sender(self) -> str:
        return get_secret("REMINDER_SENDER") or "Medicine Tracker <onboarding@resend.dev>"

    @property
    def data_path(self) -> str:
        return get_secret("HEALTH_DATA_PATH") or os.path.join(".streamlit", "health_data.json")
