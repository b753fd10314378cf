from __future__ import annotations

from buildoffice import db
from buildoffice.data.projects.notification import Notification
from buildoffice.logger import get_logger

logger = get_logger("buildoffice.business.projects.notifications")


class NotificationManager:
    """Global notification feed"""

    @staticmethod
    def create(type: str, title: str, message: str, related_id: int | None = None,
               related_type: str | None = None, commit: bool = True) -> Notification:
        notification = Notification(
            type=type,
            title=title,
            message=message,
            related_id=related_id,
            related_type=related_type,
            read=False,
        )
        db.session.add(notification)
        if commit:
            db.session.commit()
        logger.debug(f"Notification created: {type} - {title}")
        return notification

    @staticmethod
    def list(limit: int | None = 50) -> list[Notification]:
        query = Notification.query.order_by(Notification.created_at.desc(), Notification.id.desc())
        if limit:
            query = query.limit(limit)
        return query.all()

    @staticmethod
    def unread_count() -> int:
        return Notification.query.filter_by(read=False).count()

    @staticmethod
    def mark_read(notification_id: int) -> Notification:
        notification = Notification.query.get_or_404(notification_id)
        notification.read = True
        db.session.commit()
        return notification

    @staticmethod
    def mark_all_read() -> int:
        updated = Notification.query.filter_by(read=False).update({'read': True})
        db.session.commit()
        return updated

    @staticmethod
    def clear() -> int:
        deleted = Notification.query.delete()
        db.session.commit()
        logger.info(f"Cleared {deleted} notifications")
        return deleted
