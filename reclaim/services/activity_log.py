import uuid
from typing import List, Optional
from sqlmodel import Session, func, select

from reclaim.models.activity_log import ACTIVITY_ACTIONS, ADMIN_ACTIONS, ActivityLog
from reclaim.utils.logging_config import get_logger

logger = get_logger(__name__)


class ActivityLogRecorder:
    """Append-only audit trail of lifecycle transitions, read newest-first."""

    def __init__(self, engine):
        self.engine = engine

    def record(
        self,
        user_id: str,
        user_name: str,
        action: str,
        details: str,
        item_id: Optional[uuid.UUID] = None,
        item_type: Optional[str] = None,
        session: Optional[Session] = None,
    ) -> ActivityLog:
        """Append one entry.

        With `session` given the entry joins that session's transaction and
        the caller commits; otherwise it is committed on its own.
        """
        if action not in ACTIVITY_ACTIONS:
            raise ValueError(f"Unknown activity action '{action}'")

        entry = ActivityLog(
            user_id=user_id,
            user_name=user_name,
            action=action,
            item_id=item_id,
            item_type=item_type,
            details=details,
        )

        if session is not None:
            session.add(entry)
            return entry

        with Session(self.engine, expire_on_commit=False) as own_session:
            own_session.add(entry)
            own_session.commit()
            own_session.refresh(entry)

        logger.debug("activity recorded action=%s user=%s", action, user_id)
        return entry

    def list_all(self, limit: Optional[int] = None) -> List[ActivityLog]:
        query = select(ActivityLog).order_by(ActivityLog.id.desc())
        if limit:
            query = query.limit(limit)

        with Session(self.engine, expire_on_commit=False) as session:
            return list(session.exec(query).all())

    def list_for_user(self, user_id: str, limit: Optional[int] = None) -> List[ActivityLog]:
        """A user's own history, without staff decisions."""
        query = (
            select(ActivityLog)
            .where(ActivityLog.user_id == user_id)
            .where(ActivityLog.action.not_in(sorted(ADMIN_ACTIONS)))
            .order_by(ActivityLog.id.desc())
        )
        if limit:
            query = query.limit(limit)

        with Session(self.engine, expire_on_commit=False) as session:
            return list(session.exec(query).all())

    def count(self) -> int:
        with Session(self.engine) as session:
            return session.exec(select(func.count(ActivityLog.id))).one()
