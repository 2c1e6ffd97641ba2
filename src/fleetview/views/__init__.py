"""Panel presenters for the device screen.

Each presenter turns part of :class:`fleetview.state.view.DeviceViewState`
into display-ready strings; none of them mutate state.
"""

from fleetview.views.header import HeaderView, render_header
from fleetview.views.history import HistoryRowView, HistoryTable, PaginationView, render_history, render_row
from fleetview.views.summary import SummaryCard, render_summary

__all__ = [
    "HeaderView",
    "HistoryRowView",
    "HistoryTable",
    "PaginationView",
    "SummaryCard",
    "render_header",
    "render_history",
    "render_row",
    "render_summary",
]
