"""
The Hillside Echo - Publication Enums
=====================================
Editorial categories and workflow statuses as the backend encodes them.
"""

import enum


class PublicationStatus(str, enum.Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    REVIEWED = "reviewed"
    APPROVED = "approved"
    PUBLISHED = "published"
    RETURNED = "returned"
    REJECTED = "rejected"
    PENDING = "pending"


class Category(str, enum.Enum):
    UNIVERSITY = "university"
    LOCAL = "local"
    NATIONAL = "national"
    INTERNATIONAL = "international"
    ENTERTAINMENT = "entertainment"
    SCI_TECH = "sci-tech"
    SPORTS = "sports"
    OPINION = "opinion"
    LITERARY = "literary"


# Order used by the management listing (pending work first).
REVIEW_QUEUE_ORDER = (
    PublicationStatus.SUBMITTED,
    PublicationStatus.PENDING,
    PublicationStatus.REVIEWED,
    PublicationStatus.APPROVED,
    PublicationStatus.DRAFT,
    PublicationStatus.RETURNED,
    PublicationStatus.PUBLISHED,
    PublicationStatus.REJECTED,
)
