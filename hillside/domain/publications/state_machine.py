from __future__ import annotations

import enum
from dataclasses import dataclass

from hillside.domain.publications.permissions import Capabilities
from hillside.models import PublicationStatus
from hillside.schemas import Publication


class PublicationAction(str, enum.Enum):
    EDIT = "edit"
    SUBMIT = "submit"
    CANCEL = "cancel"
    APPROVE = "approve"
    PUBLISH = "publish"
    REJECT = "reject"
    RETURN = "return"
    DELETE = "delete"
    CLAIM_AUTHORSHIP = "claim_authorship"


class TransitionChannel(str, enum.Enum):
    STATUS = "status"  # POST /publications/{id}/status {"action": command}
    REVIEW = "review"  # PUT /publications/{id}/review {"status": command}
    DELETE = "delete"  # DELETE /publications/{id}


OWNER_WRITABLE: frozenset[PublicationStatus] = frozenset({PublicationStatus.DRAFT, PublicationStatus.RETURNED})
AWAITING_REVIEW: frozenset[PublicationStatus] = frozenset({PublicationStatus.SUBMITTED, PublicationStatus.PENDING})
IN_REVIEW: frozenset[PublicationStatus] = AWAITING_REVIEW | {PublicationStatus.REVIEWED, PublicationStatus.APPROVED}
TERMINAL: frozenset[PublicationStatus] = frozenset({PublicationStatus.REJECTED})
PUBLIC: frozenset[PublicationStatus] = frozenset({PublicationStatus.PUBLISHED})

# Targets that do not depend on the stage; APPROVE is resolved in plan_transition().
ACTION_TARGETS: dict[PublicationAction, PublicationStatus] = {
    PublicationAction.SUBMIT: PublicationStatus.SUBMITTED,
    PublicationAction.CANCEL: PublicationStatus.DRAFT,
    PublicationAction.PUBLISH: PublicationStatus.PUBLISHED,
    PublicationAction.REJECT: PublicationStatus.REJECTED,
    PublicationAction.RETURN: PublicationStatus.RETURNED,
}

# Statuses sent to the admin review endpoint.
REVIEW_DECISIONS: dict[PublicationAction, PublicationStatus] = {
    PublicationAction.APPROVE: PublicationStatus.APPROVED,
    PublicationAction.REJECT: PublicationStatus.REJECTED,
    PublicationAction.RETURN: PublicationStatus.RETURNED,
}


@dataclass(frozen=True, slots=True)
class Transition:
    action: PublicationAction
    channel: TransitionChannel
    command: str
    to_state: PublicationStatus | None


@dataclass(slots=True)
class ActionValidationResult:
    valid: bool
    action: PublicationAction
    from_state: PublicationStatus
    to_state: PublicationStatus | None
    allowed_actions: list[PublicationAction]


def is_publicly_visible(status: PublicationStatus) -> bool:
    return status in PUBLIC


def available_actions(publication: Publication, actor: Capabilities) -> frozenset[PublicationAction]:
    if not actor.is_authenticated:
        return frozenset()

    status = publication.status
    is_owner = publication.is_owned_by(actor.user_id)
    actions: set[PublicationAction] = set()

    if is_owner and status in OWNER_WRITABLE:
        actions.update({PublicationAction.EDIT, PublicationAction.SUBMIT})
    if is_owner and status == PublicationStatus.SUBMITTED:
        actions.add(PublicationAction.CANCEL)

    if status in AWAITING_REVIEW:
        if actor.can_mark_reviewed:
            actions.add(PublicationAction.APPROVE)
        if actor.is_admin:
            actions.add(PublicationAction.REJECT)
    elif status == PublicationStatus.REVIEWED and actor.can_approve:
        actions.add(PublicationAction.APPROVE)
    elif status == PublicationStatus.APPROVED and actor.can_approve:
        actions.add(PublicationAction.PUBLISH)

    if status in IN_REVIEW and actor.can_return:
        actions.add(PublicationAction.RETURN)

    if status == PublicationStatus.PUBLISHED and not publication.has_writer(actor.user_id):
        actions.add(PublicationAction.CLAIM_AUTHORSHIP)

    if (is_owner or actor.is_admin) and status not in TERMINAL:
        actions.add(PublicationAction.DELETE)

    return frozenset(actions)


def plan_transition(
    publication: Publication,
    action: PublicationAction,
    actor: Capabilities,
) -> Transition | None:
    """Endpoint, command and target status for ``action``; None when it is not a transition."""
    status = publication.status
    if action == PublicationAction.DELETE:
        return Transition(action, TransitionChannel.DELETE, "", None)

    admin_decides = actor.is_admin and (
        action in REVIEW_DECISIONS and (action != PublicationAction.APPROVE or status in AWAITING_REVIEW)
    )
    if admin_decides:
        decision = REVIEW_DECISIONS[action]
        # An admin approval publishes directly.
        target = PublicationStatus.PUBLISHED if action == PublicationAction.APPROVE else decision
        return Transition(action, TransitionChannel.REVIEW, decision.value, target)

    if action == PublicationAction.APPROVE:
        if status in AWAITING_REVIEW:
            return Transition(action, TransitionChannel.STATUS, "review", PublicationStatus.REVIEWED)
        return Transition(action, TransitionChannel.STATUS, "approve", PublicationStatus.APPROVED)

    if action in ACTION_TARGETS and action != PublicationAction.REJECT:
        return Transition(action, TransitionChannel.STATUS, action.value, ACTION_TARGETS[action])
    return None


def validate_action(
    publication: Publication,
    action: PublicationAction,
    actor: Capabilities,
) -> ActionValidationResult:
    allowed = available_actions(publication, actor)
    transition = plan_transition(publication, action, actor)
    return ActionValidationResult(
        valid=action in allowed,
        action=action,
        from_state=publication.status,
        to_state=transition.to_state if transition else ACTION_TARGETS.get(action),
        allowed_actions=sorted(allowed, key=lambda item: item.value),
    )
