"""
Notification center persistence
"""
from typing import List

from sqlalchemy.orm import Session

from followuply.constants import NOTIFICATION_RELATED_TYPES, NOTIFICATION_TYPES
from followuply.errors import ValidationError
from followuply.models.database import Notification
from followuply.models.schemas import NotificationCreate, NotificationRecord
from followuply.services.base import RecordGateway, require_record_id, require_user_id
from followuply.validation.fields import is_uuid
from followuply.validation.sanitize import check_content, sanitize_text


def _clean_notification(notification: NotificationCreate) -> dict:
    errors = []
    title = sanitize_text(notification.title, max_length=200)
    if not title:
        errors.append("Notification title is required")
    message, problems = check_content(notification.message)
    errors.extend(problems)
    if not message:
        errors.append("Notification message is required")
    if notification.type not in NOTIFICATION_TYPES:
        errors.append("Invalid notification type")
    if notification.related_type and notification.related_type not in NOTIFICATION_RELATED_TYPES:
        errors.append("Invalid related type")
    if notification.related_id and not is_uuid(notification.related_id):
        errors.append("Invalid related ID format")
    if errors:
        raise ValidationError(errors)

    return {
        "title": title,
        "message": message,
        "type": notification.type,
        "action_url": sanitize_text(notification.action_url, max_length=500) if notification.action_url else None,
        "related_id": notification.related_id,
        "related_type": notification.related_type,
    }


class NotificationGateway(RecordGateway):
    """Notifications, newest first"""

    entity = "notification"
    model = Notification
    record = NotificationRecord

    async def unread(self, user_id: str) -> List[NotificationRecord]:
        require_user_id(user_id)

        def work(db: Session):
            rows = db.query(Notification).filter(
                Notification.user_id == user_id,
                Notification.is_read.is_(False)
            ).order_by(Notification.created_at.desc()).all()
            return [self._to_record(r) for r in rows]

        return await self._run("unread", work)

    async def create(self, user_id: str, notification: NotificationCreate) -> NotificationRecord:
        require_user_id(user_id)
        return await self._insert(user_id, _clean_notification(notification))

    async def mark_read(self, user_id: str, notification_id: str) -> NotificationRecord:
        require_user_id(user_id)
        require_record_id(notification_id)
        return await self._apply(user_id, notification_id, {"is_read": True}, operation="mark_read")

    async def mark_all_read(self, user_id: str) -> int:
        """Returns how many notifications changed"""
        require_user_id(user_id)

        def work(db: Session):
            changed = db.query(Notification).filter(
                Notification.user_id == user_id,
                Notification.is_read.is_(False)
            ).update({Notification.is_read: True}, synchronize_session=False)
            db.commit()
            return changed

        return await self._run("mark_all_read", work)
