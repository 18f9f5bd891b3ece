import uuid
from datetime import datetime, timezone
from typing import Literal, Optional, get_args
from sqlmodel import Field, SQLModel


ActivityAction = Literal[
    "item_reported",
    "item_verified",
    "item_rejected",
    "claim_submitted",
    "claim_approved",
    "claim_rejected",
    "failed_claim_attempt",
    "item_status_changed",
]

ACTIVITY_ACTIONS = set(get_args(ActivityAction))

# Decisions taken by staff; hidden from a regular user's own history
ADMIN_ACTIONS = {"item_verified", "item_rejected", "claim_approved", "claim_rejected"}


class ActivityLog(SQLModel, table=True):
    __tablename__ = "activity_logs"

    # Autoincrement id doubles as the recording order
    id: Optional[int] = Field(default=None, primary_key=True)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Actor
    user_id: str = Field(index=True)
    user_name: str

    action: str = Field(index=True)

    item_id: Optional[uuid.UUID] = Field(default=None, index=True)
    item_type: Optional[str] = None

    details: str
