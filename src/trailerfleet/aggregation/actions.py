"""Triage ordering of the action queue."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from trailerfleet._constants import ACTION_QUEUE_LIMIT
from trailerfleet.models.actions import ActionItem


@dataclass(frozen=True, slots=True)
class ActionQueue:
    """Action items in display order.

    ``unacknowledged`` holds at most the queue limit; ``hidden_count`` is
    how many more unacknowledged items were cut off.
    """

    unacknowledged: tuple[ActionItem, ...]
    acknowledged: tuple[ActionItem, ...]
    hidden_count: int = 0

    def __iter__(self) -> Iterator[ActionItem]:
        yield from self.unacknowledged
        yield from self.acknowledged

    def __len__(self) -> int:
        return len(self.unacknowledged) + len(self.acknowledged)

    @property
    def outstanding(self) -> int:
        """All unacknowledged items, including the hidden ones."""
        return len(self.unacknowledged) + self.hidden_count


def build_action_queue(items: Iterable[ActionItem], *, limit: int | None = ACTION_QUEUE_LIMIT) -> ActionQueue:
    """Order action items for triage.

    Unacknowledged items come first, most urgent (lowest priority number)
    first, capped to *limit* (``None`` for no cap). Acknowledged items
    follow in the same order, uncapped. Equal priorities keep their input
    order.
    """
    if limit is not None and limit < 0:
        raise ValueError(f"limit must be >= 0, got {limit}")
    pending: list[ActionItem] = []
    done: list[ActionItem] = []
    for item in items:
        (done if item.acknowledged else pending).append(item)

    pending.sort(key=lambda item: item.priority)
    done.sort(key=lambda item: item.priority)
    shown = pending if limit is None else pending[:limit]
    return ActionQueue(
        unacknowledged=tuple(shown),
        acknowledged=tuple(done),
        hidden_count=len(pending) - len(shown),
    )
