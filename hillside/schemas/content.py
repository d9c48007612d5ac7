"""
The Hillside Echo - Content Schemas
===================================
Publications, print media and authorship (credit) requests as served by the API.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

from hillside.models import Category, PrintMediaType, PublicationStatus, RequestableKind


class Writer(BaseModel):
    id: int
    name: str = ""
    email: Optional[str] = None

    class Config:
        extra = "ignore"


class Publication(BaseModel):
    id: int = Field(validation_alias=AliasChoices("publication_id", "id"))
    user_id: Optional[int] = None
    title: str
    byline: str = ""
    body: str = ""
    category: Category
    image: Optional[str] = None
    thumbnail: Optional[str] = None
    photo_credits: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    date_published: Optional[str] = None
    status: PublicationStatus = PublicationStatus.DRAFT
    writers: list[Writer] = Field(default_factory=list)
    views: int = 0

    class Config:
        populate_by_name = True
        extra = "ignore"

    @field_validator("category", mode="before")
    @classmethod
    def _normalize_category(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    def is_owned_by(self, user_id: int | None) -> bool:
        return user_id is not None and self.user_id == user_id

    def has_writer(self, user_id: int | None) -> bool:
        if user_id is None:
            return False
        return self.is_owned_by(user_id) or any(writer.id == user_id for writer in self.writers)


class PrintMedia(BaseModel):
    id: int = Field(validation_alias=AliasChoices("print_media_id", "id"))
    title: str
    type: PrintMediaType = PrintMediaType.OTHER
    description: str = ""
    byline: Optional[str] = None
    user_id: Optional[int] = None
    file_path: Optional[str] = None
    file_url: Optional[str] = None
    original_file_path: Optional[str] = None
    original_filename: Optional[str] = None
    thumbnail_url: Optional[str] = None
    image_url: Optional[str] = None
    date_published: Optional[str] = Field(default=None, validation_alias=AliasChoices("date_published", "date"))
    created_at: Optional[datetime] = None
    owners: list[Writer] = Field(default_factory=list)

    class Config:
        populate_by_name = True
        extra = "ignore"

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value):
        if isinstance(value, str):
            normalized = value.strip().lower()
            if normalized in {item.value for item in PrintMediaType}:
                return normalized
            return PrintMediaType.OTHER.value
        return value

    def has_owner(self, user_id: int | None) -> bool:
        if user_id is None:
            return False
        return self.user_id == user_id or any(owner.id == user_id for owner in self.owners)


class PublicationRef(BaseModel):
    kind: Literal["publication"] = "publication"
    id: int
    title: str = ""


class PrintMediaRef(BaseModel):
    kind: Literal["print_media"] = "print_media"
    id: int
    title: str = ""


Requestable = Annotated[Union[PublicationRef, PrintMediaRef], Field(discriminator="kind")]


def requestable_kind_from_type(raw_type: str | None) -> RequestableKind:
    """Map the backend's polymorphic class name to a requestable kind."""
    if raw_type and "PrintMedia" in raw_type:
        return RequestableKind.PRINT_MEDIA
    return RequestableKind.PUBLICATION


class CreditRequest(BaseModel):
    id: int
    user: Writer
    kind: RequestableKind = RequestableKind.PUBLICATION
    requestable: Optional[Requestable] = None
    created_at: Optional[datetime] = None

    class Config:
        extra = "ignore"

    @model_validator(mode="before")
    @classmethod
    def _tag_requestable(cls, data):
        if not isinstance(data, dict) or "requestable_type" not in data:
            return data
        kind = requestable_kind_from_type(data.get("requestable_type"))
        item = data.get("requestable")
        tagged = dict(data, kind=kind.value)
        if isinstance(item, dict) and "kind" not in item:
            item_id = item.get("id") or item.get("publication_id") or item.get("print_media_id")
            tagged["requestable"] = {"kind": kind.value, "id": item_id, "title": item.get("title") or ""}
        return tagged


class Comment(BaseModel):
    id: int
    publication_id: Optional[int] = None
    body: str
    user: Writer
    is_edited: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        extra = "ignore"


class CommentRevision(BaseModel):
    """A previous body of an edited comment, newest first."""

    id: int
    comment_id: int
    body: str
    created_at: Optional[datetime] = None

    class Config:
        extra = "ignore"
