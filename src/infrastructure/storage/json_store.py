"""JSON file document store for user profiles and medicine schedules."""
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from src.application.errors import StorageError
from src.application.ports import ProfileStorePort
from src.domain.models import Medicine, UserProfile


logger = logging.getLogger(__name__)


class JsonDocumentStore(ProfileStorePort):
    """Stores one document per username: ``{"profile": {...}, "medicines": [...]}``."""

    def __init__(self, storage_path: Optional[str] = None):
        """
        Initialize the store.

        Args:
            storage_path: Path to the JSON file.
                         Defaults to .streamlit/health_data.json
        """
        if storage_path is None:
            # .streamlit is in .gitignore
            project_root = Path(__file__).parent.parent.parent.parent
            storage_path = str(project_root / ".streamlit" / "health_data.json")

        self.storage_path = storage_path
        self._ensure_storage_exists()

    def _ensure_storage_exists(self) -> None:
        """Create storage directory and file if they don't exist."""
        storage_dir = os.path.dirname(self.storage_path)
        if storage_dir and not os.path.exists(storage_dir):
            os.makedirs(storage_dir, exist_ok=True)

        if not os.path.exists(self.storage_path) or os.path.getsize(self.storage_path) == 0:
            self._save_documents({})

    def _load_documents(self) -> Dict[str, Any]:
        try:
            with open(self.storage_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as e:
            logger.warning("Document store %s is corrupt (%s); treating as empty", self.storage_path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _save_documents(self, documents: Dict[str, Any]) -> None:
        try:
            with open(self.storage_path, 'w', encoding='utf-8') as f:
                json.dump(documents, f, indent=2)
        except OSError as e:
            logger.exception("Failed to write document store: %s", e)
            raise StorageError(f"Failed to save data: {e}") from e

    def _document(self, documents: Dict[str, Any], username: str) -> Dict[str, Any]:
        return documents.setdefault(username, {"profile": None, "medicines": []})

    def get_profile(self, username: str) -> Optional[UserProfile]:
        doc = self._load_documents().get(username)
        if not doc or not doc.get("profile"):
            return None
        try:
            return UserProfile(**doc["profile"])
        except ValidationError as e:
            logger.warning("Skipping invalid profile for %s: %s", username, e)
            return None

    def save_profile(self, profile: UserProfile) -> None:
        documents = self._load_documents()
        self._document(documents, profile.username)["profile"] = profile.model_dump(mode="json")
        self._save_documents(documents)

    def list_medicines(self, username: str) -> List[Medicine]:
        doc = self._load_documents().get(username) or {}
        medicines: List[Medicine] = []
        for entry in doc.get("medicines", []):
            try:
                medicines.append(Medicine(**entry))
            except ValidationError as e:
                logger.warning("Skipping invalid medicine entry for %s: %s", username, e)
        return medicines

    def save_medicine(self, username: str, medicine: Medicine) -> None:
        documents = self._load_documents()
        doc = self._document(documents, username)
        entry = medicine.model_dump(mode="json")
        entries = doc.setdefault("medicines", [])
        for i, existing in enumerate(entries):
            if existing.get("id") == medicine.id:
                entries[i] = entry
                break
        else:
            entries.append(entry)
        self._save_documents(documents)

    def delete_medicine(self, username: str, medicine_id: str) -> bool:
        documents = self._load_documents()
        doc = documents.get(username)
        if not doc:
            return False
        entries = doc.get("medicines", [])
        remaining = [m for m in entries if m.get("id") != medicine_id]
        if len(remaining) == len(entries):
            return False
        doc["medicines"] = remaining
        self._save_documents(documents)
        return True
