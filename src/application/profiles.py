import logging
from typing import Optional, Tuple

from src.application.ports import ProfileStorePort
from src.domain.models import SubjectDetails, UserProfile
from src.domain.validators import (
    validate_age,
    validate_email,
    validate_height,
    validate_username,
    validate_weight,
)


logger = logging.getLogger(__name__)


class ProfileService:
    """Profile registration and lookup over the document store."""

    def __init__(self, store: ProfileStorePort):
        self.store = store

    def register_profile(
        self,
        username: str,
        email: str,
        age,
        height,
        weight,
        gender: Optional[str] = None,
    ) -> Tuple[bool, str]:
        """
        Validate and store a new profile.

        Returns:
            Tuple of (success, message)
        """
        checks = [
            validate_username(username),
            validate_email(email),
            validate_age(age),
            validate_height(height),
            validate_weight(weight),
        ]
        for is_valid, error in checks:
            if not is_valid:
                return False, error

        username = username.strip()
        if self.store.get_profile(username) is not None:
            return False, "Username already taken"

        profile = UserProfile(
            username=username,
            email=email.strip().lower(),
            age=int(float(age)),
            height=float(height),
            weight=float(weight),
            gender=(gender or "").strip() or None,
        )
        self.store.save_profile(profile)
        logger.info("Registered profile for %s", username)
        return True, "Profile created successfully"

    def get_profile(self, username: Optional[str]) -> Optional[UserProfile]:
        if not username:
            return None
        return self.store.get_profile(username)

    def subject_for(self, username: Optional[str]) -> SubjectDetails:
        """Subject details for prompts; empty for anonymous or unknown users."""
        profile = self.get_profile(username)
        if profile is None:
            return SubjectDetails()
        return profile.to_subject()
