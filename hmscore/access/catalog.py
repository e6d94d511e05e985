"""
Static navigation catalog.

Each entry names the roles allowed to see it (``required_roles``).  On top
of that per-item allow list, whole categories are withheld from specific
roles by :data:`CATEGORY_DENY`; an item is displayed only when both rules
allow it (see :mod:`hmscore.access.gate`).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .roles import ALL_ROLES, Role, coerce_role


class Category(Enum):
    DASHBOARD = 'Dashboard'
    CORE_SERVICES = 'Core Services'
    SUPPORT_SERVICES = 'Support Services'
    MANAGEMENT = 'Management'

    @property
    def key(self) -> str:
        return self.name.lower()

    @property
    def label(self) -> str:
        return self.value


CATEGORY_ORDER: tuple[Category, ...] = (
    Category.DASHBOARD,
    Category.CORE_SERVICES,
    Category.SUPPORT_SERVICES,
    Category.MANAGEMENT,
)

# Sections hidden from a role regardless of what the items themselves allow.
CATEGORY_DENY: dict[Category, frozenset[Role]] = {
    Category.SUPPORT_SERVICES: frozenset({Role.OPD_MANAGER}),
    Category.MANAGEMENT: frozenset({Role.OPD_MANAGER, Role.NURSE}),
}


@dataclass(frozen=True)
class MenuItem:
    title: str
    path: str
    category: Category
    required_roles: frozenset[Role] = field(default_factory=frozenset)
    external: bool = False
    module: Optional[str] = None


def _roles(*roles: Role) -> frozenset[Role]:
    return frozenset(roles)


_CLINICAL_ADMIN = (Role.SUPER_ADMIN, Role.ADMIN)

DASHBOARD = MenuItem('Dashboard', '/dashboard', Category.DASHBOARD, ALL_ROLES, module='DASHBOARD')

MENU_ITEMS: tuple[MenuItem, ...] = (
    DASHBOARD,
    # Core services
    MenuItem('OPD Service', '/opd-service', Category.CORE_SERVICES,
             _roles(*_CLINICAL_ADMIN, Role.DOCTOR, Role.NURSE, Role.OPD_MANAGER), module='OPD'),
    MenuItem('Patient Service', '/patient-service', Category.CORE_SERVICES,
             _roles(*_CLINICAL_ADMIN, Role.DOCTOR, Role.NURSE, Role.OPD_MANAGER), module='PATIENTS'),
    MenuItem('Doctor Portal', '/doctor-portal', Category.CORE_SERVICES,
             _roles(*_CLINICAL_ADMIN, Role.DOCTOR)),
    MenuItem('Patient Portal', '/patient-portal', Category.CORE_SERVICES,
             _roles(Role.PATIENT)),
    MenuItem('Prescriptions', '/prescriptions', Category.CORE_SERVICES,
             _roles(*_CLINICAL_ADMIN, Role.DOCTOR, Role.NURSE, Role.PATIENT, Role.MEDICAL_STORE),
             module='PRESCRIPTIONS'),
    MenuItem('Lab Test Ordering', '/lab-tests', Category.CORE_SERVICES,
             _roles(*_CLINICAL_ADMIN, Role.DOCTOR, Role.PATHOLOGY_LAB), module='PATHOLOGY'),
    MenuItem('Pathology Lab', '/pathology-lab', Category.CORE_SERVICES,
             _roles(*_CLINICAL_ADMIN, Role.PATHOLOGY_LAB), module='PATHOLOGY'),
    MenuItem('Medical Store', '/medical-store', Category.CORE_SERVICES,
             _roles(*_CLINICAL_ADMIN, Role.MEDICAL_STORE), module='STOCK'),
    MenuItem('Technician Portal', '/technician', Category.CORE_SERVICES,
             _roles(Role.SUPER_ADMIN, Role.TECHNICIAN), module='EQUIPMENT'),
    MenuItem('Bed Management', '/bed-management', Category.CORE_SERVICES,
             _roles(*_CLINICAL_ADMIN, Role.DOCTOR, Role.NURSE), module='BED_MANAGEMENT'),
    MenuItem('ICU Monitoring', '/icu-monitoring', Category.CORE_SERVICES,
             _roles(*_CLINICAL_ADMIN, Role.DOCTOR, Role.NURSE), module='IPD'),
    # Support services
    MenuItem('Chatbot Service', '/chatbot', Category.SUPPORT_SERVICES, ALL_ROLES),
    MenuItem('Consent Forms', '/consent-forms', Category.SUPPORT_SERVICES,
             _roles(*_CLINICAL_ADMIN, Role.DOCTOR, Role.NURSE, Role.OPD_MANAGER, Role.PATIENT),
             module='CONSENT_FORMS'),
    MenuItem('Blood Bank', '/blood-bank', Category.SUPPORT_SERVICES,
             _roles(*_CLINICAL_ADMIN, Role.DOCTOR, Role.NURSE)),
    MenuItem('Oxygen Tracker', '/oxygen-tracker', Category.SUPPORT_SERVICES,
             _roles(*_CLINICAL_ADMIN, Role.NURSE, Role.TECHNICIAN), module='OXYGEN'),
    MenuItem('Biowaste', '/biowaste', Category.SUPPORT_SERVICES,
             _roles(*_CLINICAL_ADMIN, Role.NURSE, Role.TECHNICIAN), module='BMW'),
    MenuItem('Equipment Servicing', '/equipment-servicing', Category.SUPPORT_SERVICES,
             _roles(*_CLINICAL_ADMIN, Role.TECHNICIAN), module='EQUIPMENT'),
    MenuItem('Disease Knowledge', '/disease-knowledge', Category.SUPPORT_SERVICES,
             _roles(*_CLINICAL_ADMIN, Role.DOCTOR, Role.NURSE, Role.PATIENT)),
    MenuItem('Help Center', 'https://help.hmscore.example/', Category.SUPPORT_SERVICES,
             ALL_ROLES, external=True),
    # Management
    MenuItem('Staff Management', '/staff-management', Category.MANAGEMENT,
             _roles(*_CLINICAL_ADMIN, Role.NURSE, Role.OPD_MANAGER), module='STAFF'),
    MenuItem('Nurse Department Preferences', '/nurse-preferences', Category.MANAGEMENT,
             _roles(*_CLINICAL_ADMIN, Role.NURSE), module='STAFF'),
    MenuItem('Department Nurse Assignments', '/department-assignments', Category.MANAGEMENT,
             _roles(*_CLINICAL_ADMIN), module='STAFF'),
    MenuItem('AI Analytics', '/ai-analytics', Category.MANAGEMENT,
             _roles(*_CLINICAL_ADMIN, Role.DOCTOR, Role.OPD_MANAGER), module='REPORTS'),
    MenuItem('Insurance Management', '/insurance', Category.MANAGEMENT,
             _roles(*_CLINICAL_ADMIN, Role.OPD_MANAGER), module='CLAIMS'),
    MenuItem('User Management', '/users', Category.MANAGEMENT,
             _roles(*_CLINICAL_ADMIN), module='USERS'),
    MenuItem('Hospital Settings', '/hospital-settings', Category.MANAGEMENT,
             _roles(*_CLINICAL_ADMIN), module='SETTINGS'),
    MenuItem('System Settings', '/system-settings', Category.MANAGEMENT,
             _roles(Role.SUPER_ADMIN), module='SETTINGS'),
    MenuItem('Super Admin Portal', '/super-admin', Category.MANAGEMENT,
             _roles(Role.SUPER_ADMIN)),
)

BASE_ITEMS: tuple[MenuItem, ...] = (DASHBOARD,)

_BY_PATH: dict[str, MenuItem] = {item.path: item for item in MENU_ITEMS}


def item_for_path(path: str) -> Optional[MenuItem]:
    return _BY_PATH.get(path)


def menu_for(role) -> tuple[MenuItem, ...]:
    """Ordered entries ``role`` may see.

    Unknown roles get :data:`BASE_ITEMS` (Dashboard only).
    """
    from .gate import visible_items

    resolved = coerce_role(role)
    if resolved is None:
        return BASE_ITEMS
    return visible_items(resolved, MENU_ITEMS)


def sections_for(role) -> list[tuple[Category, tuple[MenuItem, ...]]]:
    """Group :func:`menu_for` by category; empty categories are left out."""
    items = menu_for(role)
    sections = []
    for category in CATEGORY_ORDER:
        members = tuple(item for item in items if item.category is category)
        if members:
            sections.append((category, members))
    return sections
