"""
Reminder persistence
"""
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from followuply.models.database import Reminder, utcnow
from followuply.models.schemas import ReminderCreate, ReminderRecord, ReminderUpdate
from followuply.services.base import RecordGateway, require_record_id, require_user_id
from followuply.validation.forms import validate_reminder_form

# Reminders that still need attention
OPEN_REMINDER_STATUSES = ("pending", "snoozed")


class ReminderGateway(RecordGateway):
    """Reminders, soonest due first"""

    entity = "reminder"
    model = Reminder
    record = ReminderRecord
    order_by = staticmethod(lambda model: model.due_date.asc())
    search_columns = ("title", "description")
    validator = staticmethod(validate_reminder_form)

    async def create(self, user_id: str, reminder: ReminderCreate) -> ReminderRecord:
        require_user_id(user_id)
        values = self._validate(reminder.model_dump())
        return await self._insert(user_id, values)

    async def update(self, user_id: str, reminder_id: str, changes: ReminderUpdate) -> ReminderRecord:
        require_user_id(user_id)
        require_record_id(reminder_id)
        values = self._validate(changes.model_dump(exclude_unset=True), partial=True)
        return await self._apply(user_id, reminder_id, values)

    async def upcoming(self, user_id: str, days: int = 7, now: Optional[datetime] = None) -> List[ReminderRecord]:
        """Open reminders due within the next `days` days (overdue ones included), UTC"""
        require_user_id(user_id)
        horizon = (now or utcnow()) + timedelta(days=days)

        def work(db: Session):
            rows = db.query(Reminder).filter(
                Reminder.user_id == user_id,
                Reminder.status.in_(OPEN_REMINDER_STATUSES),
                Reminder.due_date <= horizon
            ).order_by(Reminder.due_date.asc()).all()
            return [self._to_record(r) for r in rows]

        return await self._run("upcoming", work)

    async def mark_completed(self, user_id: str, reminder_id: str) -> ReminderRecord:
        require_user_id(user_id)
        require_record_id(reminder_id)
        return await self._apply(
            user_id,
            reminder_id,
            {"status": "completed", "completed_at": utcnow()},
            operation="mark_completed"
        )
