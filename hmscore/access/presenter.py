"""
Navigation presenter.

Turns the gated menu into a serialisable structure and converts a click
into a navigation intent.  The actual view transition belongs to the
collaborators handed in by the caller (a client-side router, a test spy,
...).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .catalog import item_for_path, menu_for, sections_for
from .roles import ROLE_LABELS, coerce_role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NavigationEvent:
    path: str
    external: bool = False


class NavigationPresenter:
    def __init__(
        self,
        role,
        on_navigate: Optional[Callable[[NavigationEvent], None]] = None,
        on_open_external: Optional[Callable[[NavigationEvent], None]] = None,
    ):
        self.role = coerce_role(role)
        self.on_navigate = on_navigate
        self.on_open_external = on_open_external

    @property
    def role_label(self) -> str:
        return ROLE_LABELS.get(self.role, '') if self.role else ''

    def render(self) -> list[dict]:
        return [
            {
                'key': category.key,
                'label': category.label,
                'items': [
                    {'title': item.title, 'path': item.path, 'external': item.external}
                    for item in items
                ],
            }
            for category, items in sections_for(self.role)
        ]

    def click(self, path: str) -> Optional[NavigationEvent]:
        """Dispatch a click on ``path``.

        Returns the emitted event, or ``None`` when nothing was dispatched:
        the path is not visible to this role or the collaborator for it
        was not supplied.
        """
        item = item_for_path(path)
        if item is None or item not in menu_for(self.role):
            logger.debug("navigation to %s ignored for role %s", path, self.role)
            return None

        event = NavigationEvent(path=path, external=item.external)
        handler = self.on_open_external if event.external else self.on_navigate
        if handler is None:
            logger.debug("no handler for navigation to %s", path)
            return None
        handler(event)
        return event
