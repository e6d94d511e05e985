"""
Single choke point for navigation visibility.

Two rules must both hold for a role to see an item: the role is listed in
the item's ``required_roles`` and the item's category is not on the role's
deny list.  Nothing here is cached; callers recompute per request.
"""
from __future__ import annotations

from typing import Iterable

from .catalog import CATEGORY_DENY, MenuItem, item_for_path
from .roles import coerce_role


def category_denied(role, item: MenuItem) -> bool:
    resolved = coerce_role(role)
    return resolved in CATEGORY_DENY.get(item.category, frozenset())


def can_access(role, item: MenuItem) -> bool:
    resolved = coerce_role(role)
    if resolved is None:
        return False
    if resolved not in item.required_roles:
        return False
    return not category_denied(resolved, item)


def visible_items(role, items: Iterable[MenuItem]) -> tuple[MenuItem, ...]:
    """Filter ``items`` down to what ``role`` may see, keeping input order."""
    resolved = coerce_role(role)
    if resolved is None:
        return ()
    return tuple(item for item in items if can_access(resolved, item))


def can_access_path(role, path: str) -> bool:
    item = item_for_path(path)
    if item is None:
        return False
    return can_access(role, item)
