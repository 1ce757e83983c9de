import html
import logging
from datetime import date

from src.application.medicine_tracker import MedicineTrackerService
from src.application.ports import NotifierPort, ProfileStorePort
from src.domain.models import DoseTime


logger = logging.getLogger(__name__)


REMINDER_SUBJECT = "💊 Medicine Reminder"


def build_reminder_html(username: str, time: DoseTime, doses) -> str:
    items = "\n".join(
        f"<li><b>{html.escape(d.name)}</b> ({html.escape(d.dosage)})</li>" for d in doses
    )
    return (
        "<h2>Medicine Reminder</h2>\n"
        f"<p>Hi {html.escape(username)}, it is time for your {time.value.lower()} medicines:</p>\n"
        f"<ul>\n{items}\n</ul>"
    )


class ReminderService:
    def __init__(self, store: ProfileStorePort, notifier: NotifierPort):
        self.store = store
        self.tracker = MedicineTrackerService(store)
        self.notifier = notifier

    def send_due_reminders(self, username: str, day: date, time: DoseTime) -> int:
        """Email the user their pending doses for one time slot.

        Returns the number of doses included; nothing is sent when zero.
        """
        profile = self.store.get_profile(username)
        if profile is None:
            logger.warning("No profile for %s; skipping reminder", username)
            return 0

        time = DoseTime(time)
        doses = self.tracker.pending_doses(username, day, time)
        if not doses:
            return 0

        self.notifier.send_email(
            to=[profile.email],
            subject=REMINDER_SUBJECT,
            html=build_reminder_html(profile.username, time, doses),
        )
        logger.info("Sent %s reminder with %d dose(s) to %s", time.value, len(doses), username)
        return len(doses)
