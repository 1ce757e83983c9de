import logging
from datetime import date, timedelta
from typing import Iterable, List, Optional

from pydantic import BaseModel

from src.application.errors import NotFoundError
from src.application.ports import ProfileStorePort
from src.domain.models import DOSE_TIME_ORDER, DoseStatus, DoseTime, Medicine, status_key
from src.domain.validators import validate_dosage, validate_medicine_name


logger = logging.getLogger(__name__)


class ScheduledDose(BaseModel):
    medicine_id: str
    name: str
    dosage: str
    time: DoseTime
    status: Optional[DoseStatus] = None  # None means still pending


class MedicineTrackerService:
    """Manage a user's medicines and the per-day taken/missed log."""

    def __init__(self, store: ProfileStorePort):
        self.store = store

    def add_medicine(
        self,
        username: str,
        name: str,
        dosage: str,
        times: Iterable,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Medicine:
        for is_valid, error in (validate_medicine_name(name), validate_dosage(dosage)):
            if not is_valid:
                raise ValueError(error)

        fields = dict(name=name, dosage=dosage, times=list(times), end_date=end_date)
        if start_date is not None:
            fields["start_date"] = start_date
        medicine = Medicine(**fields)
        self.store.save_medicine(username, medicine)
        logger.info("Added medicine %s for user %s", medicine.id, username)
        return medicine

    def list_medicines(self, username: str) -> List[Medicine]:
        return self.store.list_medicines(username)

    def get_medicine(self, username: str, medicine_id: str) -> Medicine:
        for medicine in self.store.list_medicines(username):
            if medicine.id == medicine_id:
                return medicine
        raise NotFoundError(f"Medicine {medicine_id} not found")

    def remove_medicine(self, username: str, medicine_id: str) -> None:
        if not self.store.delete_medicine(username, medicine_id):
            raise NotFoundError(f"Medicine {medicine_id} not found")
        logger.info("Removed medicine %s for user %s", medicine_id, username)

    def mark_dose(
        self,
        username: str,
        medicine_id: str,
        day: date,
        time: DoseTime,
        status: DoseStatus,
    ) -> Medicine:
        medicine = self.get_medicine(username, medicine_id)
        time = DoseTime(time)
        if time not in medicine.times:
            raise ValueError(f"{medicine.name} is not scheduled in the {time.value}")
        if not medicine.is_active_on(day):
            raise ValueError(f"{medicine.name} is not active on {day.isoformat()}")

        new_status = dict(medicine.status)
        new_status[status_key(day, time)] = DoseStatus(status)
        updated = medicine.model_copy(update={"status": new_status})
        self.store.save_medicine(username, updated)
        return updated

    def schedule_for(self, username: str, day: date) -> List[ScheduledDose]:
        doses: List[ScheduledDose] = []
        for medicine in self.store.list_medicines(username):
            if not medicine.is_active_on(day):
                continue
            for time in medicine.times:
                doses.append(
                    ScheduledDose(
                        medicine_id=medicine.id,
                        name=medicine.name,
                        dosage=medicine.dosage,
                        time=time,
                        status=medicine.status_on(day, time),
                    )
                )
        doses.sort(key=lambda d: DOSE_TIME_ORDER.index(d.time))
        return doses

    def pending_doses(self, username: str, day: date, time: DoseTime) -> List[ScheduledDose]:
        return [d for d in self.schedule_for(username, day) if d.time == time and d.status is None]

    def adherence(self, username: str, start: date, end: date) -> float:
        """Fraction of scheduled doses in [start, end] marked as taken."""
        if end < start:
            raise ValueError("end must not be before start")
        scheduled = 0
        taken = 0
        day = start
        while day <= end:
            for dose in self.schedule_for(username, day):
                scheduled += 1
                if dose.status == DoseStatus.TAKEN:
                    taken += 1
            day += timedelta(days=1)
        return taken / scheduled if scheduled else 0.0
