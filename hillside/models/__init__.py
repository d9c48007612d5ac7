from hillside.models.print_media import PrintMediaType, RequestableKind
from hillside.models.publication import REVIEW_QUEUE_ORDER, Category, PublicationStatus
from hillside.models.user import PROFILED_ROLES, AccountStatus, UserRole

__all__ = [
    "AccountStatus",
    "Category",
    "PROFILED_ROLES",
    "PrintMediaType",
    "PublicationStatus",
    "REVIEW_QUEUE_ORDER",
    "RequestableKind",
    "UserRole",
]
