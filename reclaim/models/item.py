import uuid
from datetime import date, datetime, time, timezone
from typing import Dict, List, Optional
from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


OTHER_ITEM_TYPE = "Other"

DEFAULT_PHOTO_URL = "https://images.unsplash.com/photo-1553062407-98eeb64c6a62?w=400"


class ItemReport(SQLModel, table=True):
    __tablename__ = "items"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    reported_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Reporter info
    reported_by: str = Field(index=True)

    # Item fields
    item_type: str
    other_details: Optional[str] = None  # only when item_type is "Other"
    location: str
    date_found: date
    time_found: time
    photo_ref: str = Field(default=DEFAULT_PHOTO_URL)

    # [{"question": ..., "answer": ...}], 1 to 3 entries
    security_questions: List[Dict[str, str]] = Field(sa_column=Column(JSON, nullable=False))

    status: str = Field(default="pending", index=True)  # values: "pending", "verified", "claimed", "rejected"

    def public_dict(self) -> dict:
        """Item data safe to show a claimant: questions without their answers."""
        data = self.model_dump()
        data["security_questions"] = [q["question"] for q in self.security_questions]
        return data
