from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional, Tuple
import logging

from ..models.user import User, Notification, NotificationType

logger = logging.getLogger(__name__)

class NotificationService:
    def __init__(self, db: Session):
        self.db = db

    def notify(
        self,
        user_id: Optional[int],
        notification_type: NotificationType,
        message: str
    ) -> Optional[Notification]:
        """Append a notification for a user without failing the caller.

        The row is written inside a SAVEPOINT of the caller's transaction, so it
        commits together with the caller's own write. Any database error only
        rolls back the savepoint and is logged.
        """
        if user_id is None:
            return None

        # Caller's own writes go out before the savepoint opens
        self.db.flush()

        try:
            with self.db.begin_nested():
                if self.db.get(User, user_id) is None:
                    logger.warning(
                        f"Skipping {notification_type.value} notification: user {user_id} not found"
                    )
                    return None

                notification = Notification(
                    user_id=user_id,
                    type=notification_type,
                    message=message,
                )
                self.db.add(notification)
                self.db.flush()
            return notification
        except SQLAlchemyError:
            logger.exception(
                f"Failed to store {notification_type.value} notification for user {user_id}"
            )
            return None

    def notify_admins(self, notification_type: NotificationType, message: str) -> int:
        """Notify every admin-flagged user; returns how many were notified."""
        self.db.flush()
        try:
            admin_ids = [
                row.id for row in self.db.query(User.id).filter(User.is_admin == True).all()
            ]
        except SQLAlchemyError:
            logger.exception("Failed to look up admin users for notification")
            return 0

        if not admin_ids:
            logger.warning(f"No admin users to receive {notification_type.value} notification")

        delivered = 0
        for admin_id in admin_ids:
            if self.notify(admin_id, notification_type, message) is not None:
                delivered += 1
        return delivered

    def list_for_user(
        self,
        user_id: int,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[Notification], int, int]:
        """Return a page of notifications, newest first, with total and unread counts."""
        query = self.db.query(Notification).filter(Notification.user_id == user_id)
        total = query.count()
        unread = query.filter(Notification.is_read == False).count()
        items = (
            query.order_by(Notification.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        return items, total, unread

    def mark_all_read(self, user_id: int) -> int:
        updated = self.db.query(Notification).filter(
            Notification.user_id == user_id,
            Notification.is_read == False
        ).update({"is_read": True}, synchronize_session=False)
        self.db.commit()
        return updated

    def clear(self, user_id: int) -> int:
        deleted = self.db.query(Notification).filter(
            Notification.user_id == user_id
        ).delete(synchronize_session=False)
        self.db.commit()
        logger.info(f"Cleared {deleted} notifications for user {user_id}")
        return deleted
