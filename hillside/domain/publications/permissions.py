from __future__ import annotations

from dataclasses import dataclass

from hillside.models import UserRole
from hillside.schemas import User


@dataclass(frozen=True, slots=True)
class Capabilities:
    """Permissions resolved once from role and position when the session loads.

    Review is staged: an associate editor marks a submission reviewed, the
    editor-in-chief approves and publishes it. Admins may act at every stage.
    Returning a piece to its author is open to any editor or director.
    """

    user_id: int | None = None
    role: UserRole = UserRole.guest
    is_admin: bool = False
    is_management: bool = False
    is_associate_editor: bool = False
    is_editor_in_chief: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def can_review(self) -> bool:
        return self.is_admin or self.is_associate_editor or self.is_editor_in_chief

    @property
    def can_mark_reviewed(self) -> bool:
        return self.is_admin or self.is_associate_editor

    @property
    def can_approve(self) -> bool:
        return self.is_admin or self.is_editor_in_chief

    @property
    def can_return(self) -> bool:
        return self.is_admin or self.is_management


GUEST = Capabilities()


def derive_capabilities(user: User | None) -> Capabilities:
    if user is None:
        return GUEST
    position = (user.position or "").strip().lower()
    return Capabilities(
        user_id=user.id,
        role=user.role,
        is_admin=user.role == UserRole.admin,
        is_management="editor" in position or "director" in position,
        is_associate_editor="associate" in position,
        is_editor_in_chief="chief" in position,
    )
