import base64
import binascii
import re
import uuid
from datetime import date, datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


NOT_PROVIDED = "Not provided"

_DATA_URI_RE = re.compile(r"^data:(?P<media_type>[\w.+-]+/[\w.+-]+);base64,(?P<data>.+)$", re.DOTALL)


class RiskLevel(str, Enum):
    GREEN = "Green"
    YELLOW = "Yellow"
    RED = "Red"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]


_SEVERITY = {RiskLevel.GREEN: 0, RiskLevel.YELLOW: 1, RiskLevel.RED: 2}


class Specialist(str, Enum):
    CARDIOLOGIST = "Cardiologist"
    PULMONOLOGIST = "Pulmonologist"
    EMERGENCY = "Emergency"
    GENERAL_PHYSICIAN = "General Physician"


class ImagePayload(BaseModel):
    media_type: str = "image/jpeg"
    data: str

    @field_validator("media_type")
    @classmethod
    def validate_media_type(cls, v: str):
        if not v.startswith("image/"):
            raise ValueError("Only image payloads are supported")
        return v

    @property
    def data_uri(self) -> str:
        return f"data:{self.media_type};base64,{self.data}"

    @classmethod
    def from_data_uri(cls, uri: str) -> "ImagePayload":
        match = _DATA_URI_RE.match((uri or "").strip())
        if not match:
            raise ValueError("Malformed image data URI")
        data = match.group("data")
        try:
            base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Image data is not valid base64: {e}") from e
        return cls(media_type=match.group("media_type"), data=data)

    @classmethod
    def from_bytes(cls, raw: bytes, media_type: str = "image/jpeg") -> "ImagePayload":
        return cls(media_type=media_type, data=base64.b64encode(raw).decode("ascii"))


class SubjectDetails(BaseModel):
    name: Optional[str] = None
    age: Optional[str] = None
    weight: Optional[str] = None
    gender: Optional[str] = None

    @field_validator("name", "age", "weight", "gender", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    def display(self, field: str) -> str:
        return getattr(self, field) or NOT_PROVIDED


class AssessmentRequest(BaseModel):
    description: str = ""
    image: Optional[ImagePayload] = None
    subject: SubjectDetails = Field(default_factory=SubjectDetails)

    @field_validator("description", mode="before")
    @classmethod
    def clean_description(cls, v):
        return (v or "").strip()

    @field_validator("image", mode="before")
    @classmethod
    def parse_data_uri(cls, v):
        if isinstance(v, str):
            return ImagePayload.from_data_uri(v) if v.strip() else None
        return v

    @property
    def has_image(self) -> bool:
        return self.image is not None

    @property
    def is_empty(self) -> bool:
        return not self.description and not self.has_image


class AssessmentResult(BaseModel):
    """Final triage verdict returned to callers.

    The camelCase aliases are the public field names used by ``to_api_dict``.
    """

    model_config = ConfigDict(populate_by_name=True)

    risk_level: RiskLevel = Field(..., alias="riskLevel")
    analysis: str
    precautions: List[str] = []
    next_action: str = Field(..., alias="nextAction")
    hospital_required: bool = Field(..., alias="hospitalRequired")
    specialist: Optional[Specialist] = None
    source: str = Field("model", exclude=True)

    def to_api_dict(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class HospitalResult(BaseModel):
    name: str
    specialty: Optional[str] = None
    rating: Optional[float] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    maps_url: Optional[str] = None


# ---------------------------------------------------------------------------
# Profiles and medicine tracking
# ---------------------------------------------------------------------------


class UserProfile(BaseModel):
    username: str = Field(..., min_length=3)
    email: str
    age: int = Field(..., ge=1, le=120)
    height: float = Field(..., ge=50)
    weight: float = Field(..., ge=10)
    gender: Optional[str] = None

    @field_validator("username", "email")
    @classmethod
    def strip_text(cls, v: str):
        return v.strip()

    def to_subject(self) -> SubjectDetails:
        return SubjectDetails(
            name=self.username,
            age=str(self.age),
            weight=_format_number(self.weight),
            gender=self.gender,
        )


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


class DoseTime(str, Enum):
    MORNING = "Morning"
    AFTERNOON = "Afternoon"
    NIGHT = "Night"


DOSE_TIME_ORDER = [DoseTime.MORNING, DoseTime.AFTERNOON, DoseTime.NIGHT]


class DoseStatus(str, Enum):
    TAKEN = "taken"
    MISSED = "missed"


def status_key(day: date, time: DoseTime) -> str:
    return f"{day.isoformat()}|{time.value}"


class Medicine(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    name: str = Field(..., min_length=2)
    dosage: str = Field(..., min_length=1)
    times: List[DoseTime] = Field(..., min_length=1)
    start_date: date = Field(default_factory=date.today)
    end_date: Optional[date] = None
    status: Dict[str, DoseStatus] = {}
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("name", "dosage", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("times")
    @classmethod
    def order_times(cls, v: List[DoseTime]):
        return [t for t in DOSE_TIME_ORDER if t in set(v)]

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date cannot be before start_date")
        return self

    def is_active_on(self, day: date) -> bool:
        if day < self.start_date:
            return False
        return self.end_date is None or day <= self.end_date

    def status_on(self, day: date, time: DoseTime) -> Optional[DoseStatus]:
        return self.status.get(status_key(day, time))
