"""
The Hillside Echo Client - Publication Workflow
===============================================
Role-gated lifecycle actions on publications and the authorship-claim
sub-flow. The backend owns the state machine; this layer only exposes the
actions the actor may take, sends one request per action and re-reads the
list once the response arrives.
"""

from __future__ import annotations

import enum
from typing import Any, Awaitable, Callable, Optional, Union

from hillside.api.http import FileField
from hillside.core.errors import (
    ActionNotAllowed,
    ApiError,
    AuthenticationRequired,
    Conflict,
    TransportError,
    ValidationFailed,
)
from hillside.core.logging import get_logger
from hillside.domain.publications import (
    PublicationAction,
    TransitionChannel,
    available_actions,
    plan_transition,
    validate_action,
)
from hillside.forms.validation import validate_publication_form
from hillside.models import PublicationStatus
from hillside.schemas import PrintMedia, PrintMediaRef, Publication, PublicationRef, Requestable
from hillside.services.notification_service import GENERIC_FAILURE, NotificationCenter
from hillside.services.print_media_service import PrintMediaService
from hillside.services.publication_service import PublicationService
from hillside.services.session_service import Session

logger = get_logger("workflow_service")

Loader = Callable[[], Awaitable[list[Publication]]]

SESSION_EXPIRED = "Your session has expired. Please log in again."
CLAIM_SUBMITTED = "Request sent! An administrator will review your claim."
CLAIM_DUPLICATE = "You have already submitted a request for this item."

SUCCESS_MESSAGES: dict[PublicationAction, str] = {
    PublicationAction.DELETE: "Publication deleted successfully",
    PublicationAction.EDIT: "Publication updated successfully",
}

# Keyed by the command sent to the status or review endpoint.
TRANSITION_MESSAGES: dict[str, str] = {
    "submit": "Article submitted for review.",
    "cancel": "Submission cancelled. Article is now a draft.",
    "review": "Article reviewed. Forwarded to EIC.",
    "approve": "Article approved. Ready for posting.",
    "publish": "Article is live on the website!",
    "return": "Article returned to author for revision.",
    PublicationStatus.APPROVED.value: "Article published successfully!",
    PublicationStatus.REJECTED.value: "Article rejected.",
    PublicationStatus.RETURNED.value: "Article returned to author for revision.",
}


class ClaimOutcome(str, enum.Enum):
    SUBMITTED = "submitted"
    ALREADY_REQUESTED = "already_requested"


def requestable_for(item: Union[Publication, PrintMedia]) -> Requestable:
    if isinstance(item, PrintMedia):
        return PrintMediaRef(id=item.id, title=item.title)
    return PublicationRef(id=item.id, title=item.title)


class PublicationWorkflow:
    def __init__(
        self,
        session: Session,
        publications: PublicationService,
        print_media: PrintMediaService,
        notices: NotificationCenter,
        loader: Optional[Loader] = None,
    ):
        self.session = session
        self.publications = publications
        self.print_media = print_media
        self.notices = notices
        self.loader = loader
        self.items: list[Publication] = []
        self.field_errors: dict[str, str] = {}
        self._in_flight: set[int] = set()

    def actions_for(self, publication: Publication) -> frozenset[PublicationAction]:
        return available_actions(publication, self.session.capabilities)

    def is_busy(self, publication_id: int) -> bool:
        return publication_id in self._in_flight

    async def refresh(self) -> list[Publication]:
        if self.loader is not None:
            self.items = list(await self.loader())
        return self.items

    def _ensure_allowed(self, publication: Publication, action: PublicationAction) -> None:
        result = validate_action(publication, action, self.session.capabilities)
        if not result.valid:
            raise ActionNotAllowed(
                action.value,
                publication.status.value,
                f"allowed: {[item.value for item in result.allowed_actions]}",
            )

    async def _dispatch(self, publication: Publication, action: PublicationAction) -> str:
        transition = plan_transition(publication, action, self.session.capabilities)
        if transition is None:
            raise ActionNotAllowed(action.value, publication.status.value, "not a transition")
        if transition.channel == TransitionChannel.DELETE:
            await self.publications.delete(publication.id)
            return SUCCESS_MESSAGES[action]
        if transition.channel == TransitionChannel.REVIEW:
            await self.publications.review(publication.id, PublicationStatus(transition.command))
        else:
            await self.publications.change_status(publication.id, transition.command)
        return TRANSITION_MESSAGES[transition.command]

    def _report_failure(self, action: str, publication_id: int, exc: Exception) -> None:
        if isinstance(exc, ValidationFailed):
            self.field_errors = dict(exc.field_errors)
        if isinstance(exc, AuthenticationRequired):
            self.session.clear()
            self.notices.error(SESSION_EXPIRED)
        elif isinstance(exc, TransportError):
            self.notices.error(GENERIC_FAILURE)
        else:
            self.notices.error("Action failed.")
        logger.warning("workflow_action_failed", action=action, publication_id=publication_id, error=str(exc))

    async def perform(self, publication: Publication, action: PublicationAction) -> bool:
        """Run one transition; returns False when nothing changed."""
        self._ensure_allowed(publication, action)
        if action in {PublicationAction.EDIT, PublicationAction.CLAIM_AUTHORSHIP}:
            raise ActionNotAllowed(action.value, publication.status.value, "use edit() or claim_authorship()")
        if self.is_busy(publication.id):
            logger.info("workflow_action_ignored", action=action.value, publication_id=publication.id)
            return False

        self._in_flight.add(publication.id)
        try:
            message = await self._dispatch(publication, action)
        except (ApiError, TransportError) as exc:
            self._report_failure(action.value, publication.id, exc)
            return False
        finally:
            self._in_flight.discard(publication.id)

        logger.info(
            "workflow_action_done",
            action=action.value,
            publication_id=publication.id,
            from_state=publication.status.value,
        )
        self.notices.success(message)
        if action == PublicationAction.DELETE:
            self.items = [item for item in self.items if item.id != publication.id]
        else:
            await self.refresh()
        return True

    async def edit(
        self,
        publication: Publication,
        fields: dict[str, Any],
        image: FileField | None = None,
    ) -> Optional[Publication]:
        self._ensure_allowed(publication, PublicationAction.EDIT)
        current = {**publication.model_dump(), "writer_ids": [writer.id for writer in publication.writers]}
        errors = validate_publication_form({**current, **fields})
        if errors:
            self.field_errors = errors
            return None
        if self.is_busy(publication.id):
            return None

        self.field_errors = {}
        self._in_flight.add(publication.id)
        try:
            updated = await self.publications.update(publication.id, fields, image=image)
        except (ApiError, TransportError) as exc:
            self._report_failure(PublicationAction.EDIT.value, publication.id, exc)
            return None
        finally:
            self._in_flight.discard(publication.id)

        self.notices.success(SUCCESS_MESSAGES[PublicationAction.EDIT])
        await self.refresh()
        return updated

    async def request_credit(self, target: Requestable) -> Any:
        if isinstance(target, PrintMediaRef):
            return await self.print_media.request_credit(target.id)
        return await self.publications.request_credit(target.id)

    async def claim_authorship(self, item: Union[Publication, PrintMedia]) -> ClaimOutcome:
        """Ask to be credited; a duplicate claim is a warning, not a failure."""
        actor = self.session.capabilities
        if isinstance(item, Publication):
            self._ensure_allowed(item, PublicationAction.CLAIM_AUTHORSHIP)
        elif not actor.is_authenticated or item.has_owner(actor.user_id):
            raise ActionNotAllowed(PublicationAction.CLAIM_AUTHORSHIP.value, "print_media")

        target = requestable_for(item)
        try:
            await self.request_credit(target)
        except Conflict:
            logger.info("credit_request_duplicate", kind=target.kind, item_id=target.id, user_id=actor.user_id)
            self.notices.warning(CLAIM_DUPLICATE)
            return ClaimOutcome.ALREADY_REQUESTED
        except (ApiError, TransportError) as exc:
            self._report_failure(PublicationAction.CLAIM_AUTHORSHIP.value, target.id, exc)
            raise

        logger.info("credit_request_submitted", kind=target.kind, item_id=target.id, user_id=actor.user_id)
        self.notices.success(CLAIM_SUBMITTED)
        return ClaimOutcome.SUBMITTED
