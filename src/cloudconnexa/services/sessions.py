"""VPN session history (cursor-paginated).

Unlike the other collections, sessions page by opaque cursor: each
response carries ``nextCursor``, empty on the last page. ``size`` is
mandatory and limited to 1..100.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from ..api.exceptions import ValidationError
from ..api.schemas import Session, SessionsListOptions, SessionsResponse, SessionStatus
from .base import BaseService, parse_model

logger = logging.getLogger(__name__)

MAX_SESSION_PAGE_SIZE = 100
DEFAULT_SESSION_PAGE_SIZE = 100


def format_timestamp(value: datetime) -> str:
    """RFC 3339 in UTC; naive datetimes are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class SessionsService(BaseService):

    async def list_all(self, options: Optional[SessionsListOptions] = None) -> list[Session]:
        """Follow ``nextCursor`` until the last page. Size defaults to 100."""
        options = (options or SessionsListOptions()).model_copy()
        if not options.size:
            options.size = DEFAULT_SESSION_PAGE_SIZE

        sessions: list[Session] = []
        pages = 0
        while True:
            response = await self.list(options)
            sessions.extend(response.sessions)
            pages += 1
            if not response.next_cursor:
                break
            options.cursor = response.next_cursor

        logger.debug(f"Fetched {len(sessions)} sessions in {pages} page(s)")
        return sessions

    async def list_active(self, size: int) -> SessionsResponse:
        return await self.list(SessionsListOptions(status=SessionStatus.ACTIVE, size=size))

    async def list_by_date_range(self, start_date: datetime, end_date: datetime, size: int) -> SessionsResponse:
        return await self.list(SessionsListOptions(start_date=start_date, end_date=end_date, size=size))

    async def list_by_status(self, status: SessionStatus, size: int) -> SessionsResponse:
        return await self.list(SessionsListOptions(status=status, size=size))

    async def list(self, options: SessionsListOptions) -> SessionsResponse:
        """Fetch one cursor page of sessions.

        Raises:
            ValidationError: If ``options.size`` is outside 1..100
        """
        if not 1 <= options.size <= MAX_SESSION_PAGE_SIZE:
            raise ValidationError(
                f"size must be between 1 and {MAX_SESSION_PAGE_SIZE}, got {options.size}",
                field="size",
            )

        params = {"size": options.size}
        if options.start_date:
            params["startDate"] = format_timestamp(options.start_date)
        if options.end_date:
            params["endDate"] = format_timestamp(options.end_date)
        if options.status:
            params["status"] = SessionStatus(options.status).value
        if options.return_only_new:
            params["returnOnlyNew"] = "true"
        if options.cursor:
            params["cursor"] = options.cursor

        data = await self.client.get(self._url("sessions"), params=params)
        return parse_model(SessionsResponse, data) or SessionsResponse()
