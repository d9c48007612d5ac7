"""
The Hillside Echo Client - Application Context
==============================================
Explicit container for the process-wide pieces (HTTP client, session, cache,
notices) with a defined lifecycle: ``init()`` on boot, ``close()`` on exit.
Views receive the context instead of reaching for globals.
"""

from __future__ import annotations

from typing import Optional

import httpx

from hillside.api.http import HttpClient
from hillside.core.config import Settings, get_settings
from hillside.core.logging import get_logger, setup_logging
from hillside.services.analytics_service import AnalyticsService
from hillside.services.cache_service import ResponseCache
from hillside.services.comment_service import CommentService
from hillside.services.notification_service import NotificationCenter
from hillside.services.print_media_service import PrintMediaService
from hillside.services.publication_service import PublicationService
from hillside.services.session_service import Navigate, Session
from hillside.services.site_service import SiteService
from hillside.services.user_service import UserService

logger = get_logger("app")


class AppContext:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        http: Optional[HttpClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        navigate: Optional[Navigate] = None,
    ):
        self.settings = settings or get_settings()
        self.http = http or HttpClient(self.settings, transport=transport)
        self.cache = ResponseCache()
        self.notices = NotificationCenter()
        self.session = Session(self.http, self.cache, navigate=navigate)

        self.publications = PublicationService(self.http)
        self.print_media = PrintMediaService(self.http)
        self.users = UserService(self.http)
        self.analytics = AnalyticsService(self.http)
        self.site = SiteService(self.http)
        self.comments = CommentService(self.http)

    async def init(self) -> "AppContext":
        setup_logging()
        await self.session.check_auth()
        logger.info(
            "app_context_ready",
            api=self.settings.api_base_url,
            authenticated=self.session.is_authenticated,
        )
        return self

    async def close(self) -> None:
        self.cache.clear()
        await self.http.aclose()

    async def __aenter__(self) -> "AppContext":
        return await self.init()

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
