from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from hillside.core.logging import get_logger
from hillside.services.polling import Poller, PollJob

if TYPE_CHECKING:
    from hillside.app import AppContext

logger = get_logger("views")


class View:
    """Page controller: owns its pollers and drops results that land after close()."""

    name = "view"

    def __init__(self, ctx: "AppContext"):
        self.ctx = ctx
        self.closed = False
        self.loading = False
        self.error: Optional[str] = None
        self.pollers: list[Poller] = []

    def add_poller(self, seconds: float, job: PollJob, name: Optional[str] = None) -> Poller:
        poller = Poller(name or self.name, seconds, job)
        self.pollers.append(poller)
        return poller

    def start_polling(self) -> None:
        if self.closed:
            return
        for poller in self.pollers:
            poller.start()

    def discard(self, what: str) -> bool:
        """True when the view is gone and ``what`` must not be applied."""
        if self.closed:
            logger.debug("view_result_discarded", view=self.name, result=what)
            return True
        return False

    async def close(self) -> None:
        self.closed = True
        for poller in self.pollers:
            poller.stop()

    async def __aenter__(self) -> Any:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
