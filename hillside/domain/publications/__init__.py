from hillside.domain.publications.permissions import GUEST, Capabilities, derive_capabilities
from hillside.domain.publications.state_machine import (
    ACTION_TARGETS,
    AWAITING_REVIEW,
    IN_REVIEW,
    OWNER_WRITABLE,
    REVIEW_DECISIONS,
    TERMINAL,
    ActionValidationResult,
    PublicationAction,
    Transition,
    TransitionChannel,
    available_actions,
    is_publicly_visible,
    plan_transition,
    validate_action,
)

__all__ = [
    "ACTION_TARGETS",
    "AWAITING_REVIEW",
    "ActionValidationResult",
    "Capabilities",
    "GUEST",
    "IN_REVIEW",
    "OWNER_WRITABLE",
    "PublicationAction",
    "REVIEW_DECISIONS",
    "TERMINAL",
    "Transition",
    "TransitionChannel",
    "available_actions",
    "derive_capabilities",
    "is_publicly_visible",
    "plan_transition",
    "validate_action",
]
