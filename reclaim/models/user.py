from typing import Literal
from pydantic import BaseModel, ConfigDict, Field


class UserProfile(BaseModel):
    """Profile document kept by the external profile store under users/{uid}."""

    model_config = ConfigDict(populate_by_name=True)

    full_name: str = Field(alias="fullName")
    student_id: str = Field(alias="studentId")
    contact_number: str = Field(alias="contactNumber")
    email: str

    role: Literal["user", "admin"] = "user"


class Actor(BaseModel):
    """Whoever triggers a lifecycle operation, as recorded in the activity log."""

    user_id: str
    name: str
    role: str = "user"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
