from typing import List, Optional, Protocol

from src.domain.models import HospitalResult, Medicine, UserProfile


class GenerationPort(Protocol):
    def generate_assessment_json(self, messages: List[dict]) -> str:
        """
        Accepts chat-style messages (content may include image chunks)
        and returns the raw JSON string produced by the model.
        Raises on network, timeout or service errors.
        """
        ...


class HospitalSearchPort(Protocol):
    def search_hospitals(self, query: str, location_query: str, limit: int = 5) -> List[HospitalResult]:
        ...


class ProfileStorePort(Protocol):
    def get_profile(self, username: str) -> Optional[UserProfile]:
        ...

    def save_profile(self, profile: UserProfile) -> None:
        ...

    def list_medicines(self, username: str) -> List[Medicine]:
        ...

    def save_medicine(self, username: str, medicine: Medicine) -> None:
        """Insert or replace a medicine entry by id."""
        ...

    def delete_medicine(self, username: str, medicine_id: str) -> bool:
        ...


class NotifierPort(Protocol):
    def send_email(self, to: List[str], subject: str, html: str) -> None:
        ...
