"""Role-based navigation and permission rules.

Everything in this package is pure: no database access and no request
objects, so the same rules serve the API views, the navigation presenter
and the tests.
"""
from .roles import Role, ROLE_LABELS, coerce_role
from .catalog import Category, MenuItem, MENU_ITEMS, menu_for, sections_for, item_for_path
from .gate import can_access, can_access_path, visible_items

__all__ = [
    'Role',
    'ROLE_LABELS',
    'coerce_role',
    'Category',
    'MenuItem',
    'MENU_ITEMS',
    'menu_for',
    'sections_for',
    'item_for_path',
    'can_access',
    'can_access_path',
    'visible_items',
]
