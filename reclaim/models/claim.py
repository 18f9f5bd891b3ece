import uuid
from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class Claim(SQLModel, table=True):
    __tablename__ = "claims"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    submitted_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Shown to the claimant for pickup at the guard post
    claim_code: str = Field(index=True, unique=True)

    # Claimant
    claimant_id: str = Field(index=True)

    # Target item; not a foreign key since rejected reports are deleted
    item_id: uuid.UUID = Field(index=True)

    # Content, one answer per security question, blanks dropped
    answers: List[str] = Field(sa_column=Column(JSON, nullable=False))
    proof_photo_ref: Optional[str] = None

    status: str = Field(default="pending", index=True)  # values: "pending", "approved", "rejected"

    decided_at: Optional[datetime] = None
    decided_by: Optional[str] = None
