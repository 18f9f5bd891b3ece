import os
from fastapi import Request

from reclaim.db.db import create_db_engine
from reclaim.services.activity_log import ActivityLogRecorder
from reclaim.services.claims import ClaimLifecycle, generate_claim_code
from reclaim.services.reports import ReportLifecycle
from reclaim.utils.logging_config import get_logger

logger = get_logger(__name__)


class LifecycleStore:
    """Owns the items, claims and activity log of one running service.

    Built by the composition root and handed to whatever needs it; there is
    no module-level instance.
    """

    def __init__(self, engine=None, retain_rejected: bool = False, code_factory=generate_claim_code):
        self.engine = engine if engine is not None else create_db_engine()

        self.activity = ActivityLogRecorder(self.engine)
        self.reports = ReportLifecycle(self.engine, self.activity, retain_rejected=retain_rejected)
        self.claims = ClaimLifecycle(self.engine, self.activity, code_factory=code_factory)

    @classmethod
    def from_env(cls) -> "LifecycleStore":
        retain = os.getenv("RETAIN_REJECTED_REPORTS", "false").lower() in ("1", "true", "yes")
        logger.info("lifecycle store starting retain_rejected=%s", retain)
        return cls(retain_rejected=retain)

    def dispose(self):
        self.engine.dispose()


def get_store(request: Request) -> LifecycleStore:
    return request.app.state.store
