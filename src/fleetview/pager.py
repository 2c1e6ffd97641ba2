"""History log pagination."""

from __future__ import annotations

from fleetview.client import FleetClient
from fleetview.models.history import HistoryPage
from fleetview.state.view import PaginationCursor
from fleetview.window import TimeWindow


class HistoryPager:
    """Fetches one page of the history log at a time.

    The pager holds no rows and no cursor of its own; the device view owns
    both and hands the pager the window and page to load.
    """

    def __init__(self, client: FleetClient, *, page_size: int | None = None) -> None:
        self._client = client
        self.page_size = page_size if page_size is not None else client.config.history_page_size

    def first_cursor(self) -> PaginationCursor:
        """Cursor for a freshly selected window."""
        return PaginationCursor(page=1, limit=self.page_size, has_next=False)

    async def fetch_page(self, device_id: str, window: TimeWindow, page: int) -> HistoryPage:
        """Fetch *page* (1-based) of the history log for *window*.

        Raises
        ------
        ValueError
            If *page* is lower than 1.
        """
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")
        return await self._client.get_history_page(device_id, window, page=page, limit=self.page_size)

    @staticmethod
    def cursor_for(page: HistoryPage) -> PaginationCursor:
        """Cursor describing a loaded page."""
        return PaginationCursor(page=page.page, limit=page.limit, has_next=page.has_next)
