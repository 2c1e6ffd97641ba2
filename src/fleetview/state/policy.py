"""Stale response policy.

Requests are tagged with the counters that were current when they were
issued. A response may only be applied if the counters still match;
anything else belongs to a device, window or page the user has left.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class RequestTicket(BaseModel):
    """Counters captured when a request is issued.

    ``generation`` changes on mount, unmount and device change;
    ``epoch`` on every window change; ``sequence`` on every history page
    request.
    """

    model_config = ConfigDict(frozen=True)

    generation: int
    epoch: int = 0
    sequence: int = 0


def is_current_device(ticket: RequestTicket, current: RequestTicket) -> bool:
    """Snapshot responses only care about the device generation."""
    return ticket.generation == current.generation


def is_current_window(ticket: RequestTicket, current: RequestTicket) -> bool:
    """Window-scoped responses (summary, track) need generation and epoch."""
    return is_current_device(ticket, current) and ticket.epoch == current.epoch


def is_current_page(ticket: RequestTicket, current: RequestTicket) -> bool:
    """History responses must also be the latest page request."""
    return is_current_window(ticket, current) and ticket.sequence == current.sequence
