from sqlalchemy import update

from freshcart.domain import freshcart
from freshcart.notifications.notification.notification import Notification
from freshcart.shared.pagination import Page, PageRequest, paginate


@freshcart.repository(part_of=Notification)
class NotificationRepository:
    def find(self, notification_id: str) -> Notification | None:
        return self._dao.query.filter(id=notification_id).all().first

    def inbox(self, recipient_id: str, request: PageRequest, read: bool | None = None) -> Page[Notification]:
        query = self._dao.query.filter(recipient_id=recipient_id).order_by("-created_at")
        if read is not None:
            query = query.filter(read=read)
        return paginate(query, request)

    def unread_count(self, recipient_id: str) -> int:
        return self._dao.query.filter(recipient_id=recipient_id, read=False).all().total

    def mark_all_read(self, recipient_id: str) -> int:
        """One UPDATE over every unread notification of ``recipient_id``."""
        model = self._dao.database_model_cls
        stmt = update(model).where(model.recipient_id == recipient_id, model.read.is_(False)).values(read=True)
        result = self._dao._get_session().execute(stmt.execution_options(synchronize_session=False))
        return result.rowcount
