import uuid
from datetime import date, time
from typing import Dict, List, Optional
from sqlmodel import Session, select

from reclaim.errors import InvalidState, NotFound
from reclaim.models.item import DEFAULT_PHOTO_URL, OTHER_ITEM_TYPE, ItemReport
from reclaim.models.user import Actor
from reclaim.services.activity_log import ActivityLogRecorder
from reclaim.utils.logging_config import get_logger

logger = get_logger(__name__)

MAX_SECURITY_QUESTIONS = 3


class ReportLifecycle:
    """Found-item reports: pending -> verified -> claimed, or pending -> rejected."""

    def __init__(self, engine, recorder: ActivityLogRecorder, retain_rejected: bool = False):
        self.engine = engine
        self.recorder = recorder
        self.retain_rejected = retain_rejected

    def submit_report(
        self,
        item_type: str,
        location: str,
        date_found: date,
        time_found: time,
        questions: List[Dict[str, str]],
        reporter: Actor,
        other_details: Optional[str] = None,
        photo_ref: Optional[str] = None,
    ) -> ItemReport:
        if not questions:
            raise ValueError("At least one security question is required")
        if len(questions) > MAX_SECURITY_QUESTIONS:
            raise ValueError(f"At most {MAX_SECURITY_QUESTIONS} security questions are allowed")

        questions = [
            {"question": q["question"], "answer": q["answer"]}
            for q in questions
        ]

        item = ItemReport(
            reported_by=reporter.user_id,
            item_type=item_type,
            other_details=other_details if item_type == OTHER_ITEM_TYPE else None,
            location=location,
            date_found=date_found,
            time_found=time_found,
            photo_ref=photo_ref or DEFAULT_PHOTO_URL,
            security_questions=questions,
        )

        with Session(self.engine, expire_on_commit=False) as session:
            session.add(item)
            self.recorder.record(
                user_id=reporter.user_id,
                user_name=reporter.name,
                action="item_reported",
                item_id=item.id,
                item_type=item.item_type,
                details=f"Reported found item: {item.item_type} at {item.location}",
                session=session,
            )
            session.commit()
            session.refresh(item)

        logger.info("item reported id=%s type=%s by=%s", item.id, item.item_type, reporter.user_id)
        return item

    def decide_report(self, item_id: uuid.UUID, approve: bool, admin: Actor) -> Optional[ItemReport]:
        """Verify or reject a pending report.

        Returns the verified report, or None once a rejected report is gone.
        """
        with Session(self.engine, expire_on_commit=False) as session:
            item = session.get(ItemReport, item_id)
            if not item or item.status == "rejected":
                raise NotFound("Item not found")

            if item.status != "pending":
                logger.warning("refused decision on item id=%s status=%s", item.id, item.status)
                raise InvalidState(f"Item report is already {item.status}")

            item_type = item.item_type

            if approve:
                item.status = "verified"
                session.add(item)
            elif self.retain_rejected:
                item.status = "rejected"
                session.add(item)
            else:
                session.delete(item)

            self.recorder.record(
                user_id=admin.user_id,
                user_name=admin.name,
                action="item_verified" if approve else "item_rejected",
                item_id=item_id,
                item_type=item_type,
                details=(
                    f"Verified item report for {item_type}"
                    if approve
                    else f"Rejected item report for {item_type}"
                ),
                session=session,
            )
            session.commit()

        logger.info("item %s id=%s by=%s", "verified" if approve else "rejected", item_id, admin.user_id)
        return item if approve else None

    def get_report(self, item_id: uuid.UUID) -> ItemReport:
        with Session(self.engine, expire_on_commit=False) as session:
            item = session.get(ItemReport, item_id)

        if not item or item.status == "rejected":
            raise NotFound("Item not found")

        return item

    def list_reports(
        self,
        status: Optional[str] = None,
        reported_by: Optional[str] = None,
    ) -> List[ItemReport]:
        query = (
            select(ItemReport)
            .where(ItemReport.status != "rejected")
            .order_by(ItemReport.reported_at.desc())
        )

        if status:
            query = query.where(ItemReport.status == status)

        if reported_by:
            query = query.where(ItemReport.reported_by == reported_by)

        with Session(self.engine, expire_on_commit=False) as session:
            return list(session.exec(query).all())
