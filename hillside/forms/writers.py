"""Writer selection for the publication form, backed by ``GET /users/search``."""

from __future__ import annotations

from typing import Iterable, Optional

from hillside.core.errors import ApiError, TransportError
from hillside.core.logging import get_logger
from hillside.schemas import Publication, User, Writer
from hillside.services.user_service import UserService

logger = get_logger("forms.writers")

MIN_QUERY_LENGTH = 2


class WriterPicker:
    """Ordered, duplicate-free writer selection.

    A new article starts with the author selected; an existing one starts
    with its current writers.
    """

    def __init__(self, users: UserService, initial: Iterable[Writer] = ()):
        self.users = users
        self.selected: list[Writer] = []
        self.suggestions: list[User] = []
        for writer in initial:
            self.add(writer)

    @classmethod
    def for_publication(cls, users: UserService, publication: Publication) -> "WriterPicker":
        return cls(users, publication.writers)

    @classmethod
    def for_author(cls, users: UserService, author: Optional[User]) -> "WriterPicker":
        return cls(users, [Writer(id=author.id, name=author.name)] if author else [])

    @property
    def writer_ids(self) -> list[int]:
        return [writer.id for writer in self.selected]

    def add(self, person: User | Writer) -> bool:
        if person.id in self.writer_ids:
            return False
        self.selected.append(Writer(id=person.id, name=person.name))
        self.suggestions = []
        return True

    def remove(self, writer_id: int) -> None:
        self.selected = [writer for writer in self.selected if writer.id != writer_id]

    async def search(self, query: str) -> list[User]:
        """Suggest people not already selected; short queries make no request."""
        query = (query or "").strip()
        if len(query) < MIN_QUERY_LENGTH:
            self.suggestions = []
            return self.suggestions
        try:
            found = await self.users.search(query)
        except (ApiError, TransportError) as exc:
            logger.warning("writer_search_failed", query=query, error=str(exc))
            return self.suggestions
        self.suggestions = [user for user in found if user.id not in self.writer_ids]
        return self.suggestions
