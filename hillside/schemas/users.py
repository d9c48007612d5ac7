"""
The Hillside Echo - User Schemas
================================
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from hillside.models import AccountStatus, UserRole
from hillside.schemas.content import PrintMedia, Publication


class User(BaseModel):
    id: int
    name: str
    email: Optional[str] = None
    role: UserRole = UserRole.hillsider
    status: AccountStatus = AccountStatus.approved
    department: Optional[str] = None
    course: Optional[str] = None
    position: Optional[str] = None
    year_graduated: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        extra = "ignore"

    @field_validator("year_graduated", mode="before")
    @classmethod
    def _year_as_text(cls, value):
        if value is None or value == "":
            return None
        return str(value)


class ProfilePayload(BaseModel):
    user: User
    articles: list[Publication] = Field(default_factory=list)
    print_media: list[PrintMedia] = Field(default_factory=list)
    review_queue: list[Publication] = Field(default_factory=list)
