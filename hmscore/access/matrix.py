"""
Module/action permission matrix.

The defaults below are the baseline for each role.  Administrators may
store per-role overrides (:class:`hmscore.models.RolePermission`); an
override row for a (role, module) pair replaces the default for that pair
entirely.  SUPER_ADMIN is always allowed.
"""
from __future__ import annotations

from typing import Iterable, Mapping, Optional

from .roles import Role, coerce_role

MODULES: tuple[str, ...] = (
    'DASHBOARD',
    'USERS',
    'PATIENTS',
    'APPOINTMENTS',
    'BILLING',
    'STOCK',
    'SURGERY',
    'MEDICINE',
    'INSURANCE',
    'CLAIMS',
    'PACKAGES',
    'REPORTS',
    'AUDIT_LOGS',
    'BED_MANAGEMENT',
    'OPD',
    'IPD',
    'PATHOLOGY',
    'PRESCRIPTIONS',
    'EQUIPMENT',
    'BMW',
    'OXYGEN',
    'CONSENT_FORMS',
    'NOTIFICATIONS',
    'SETTINGS',
    'STAFF',
)

ACTIONS: tuple[str, ...] = ('view', 'create', 'edit', 'delete', 'approve', 'lock', 'unlock', 'export')

MODULE_LABELS: dict[str, str] = {
    'DASHBOARD': 'Dashboard',
    'USERS': 'User Management',
    'PATIENTS': 'Patient Records',
    'APPOINTMENTS': 'Appointments',
    'BILLING': 'Billing & Invoices',
    'STOCK': 'Stock & Inventory',
    'SURGERY': 'Surgery Packages',
    'MEDICINE': 'Medicine Database',
    'INSURANCE': 'Insurance Providers',
    'CLAIMS': 'Insurance Claims',
    'PACKAGES': 'Hospital Packages',
    'REPORTS': 'Reports & Analytics',
    'AUDIT_LOGS': 'Audit Logs',
    'BED_MANAGEMENT': 'Bed Management',
    'OPD': 'OPD Services',
    'IPD': 'IPD Services',
    'PATHOLOGY': 'Pathology Lab',
    'PRESCRIPTIONS': 'Prescriptions',
    'EQUIPMENT': 'Equipment Servicing',
    'BMW': 'Biomedical Waste',
    'OXYGEN': 'Oxygen Tracking',
    'CONSENT_FORMS': 'Consent Forms',
    'NOTIFICATIONS': 'Notifications',
    'SETTINGS': 'System Settings',
    'STAFF': 'Staff & Nurse Assignments',
}


def _grant(*actions: str) -> dict[str, bool]:
    return {action: True for action in actions}


_CRUD = ('view', 'create', 'edit', 'delete')

DEFAULT_PERMISSIONS: dict[Role, dict[str, dict[str, bool]]] = {
    Role.SUPER_ADMIN: {module: _grant(*ACTIONS) for module in MODULES},
    Role.ADMIN: {
        'DASHBOARD': _grant('view'),
        'USERS': _grant(*_CRUD),
        'PATIENTS': _grant(*_CRUD),
        'APPOINTMENTS': _grant(*_CRUD, 'approve'),
        'BILLING': _grant('view', 'create', 'edit'),
        'STOCK': _grant('view', 'create', 'edit'),
        'SURGERY': _grant('view', 'create', 'edit'),
        'MEDICINE': _grant('view', 'create', 'edit'),
        'INSURANCE': _grant('view', 'create', 'edit'),
        'CLAIMS': _grant('view', 'create', 'edit', 'approve'),
        'PACKAGES': _grant('view', 'create', 'edit'),
        'REPORTS': _grant('view', 'export'),
        'AUDIT_LOGS': _grant('view'),
        'BED_MANAGEMENT': _grant('view', 'create', 'edit'),
        'OPD': _grant('view', 'create', 'edit'),
        'IPD': _grant('view', 'create', 'edit'),
        'PATHOLOGY': _grant('view'),
        'PRESCRIPTIONS': _grant('view'),
        'EQUIPMENT': _grant('view', 'create', 'edit'),
        'BMW': _grant('view', 'create', 'edit'),
        'OXYGEN': _grant('view', 'create', 'edit'),
        'CONSENT_FORMS': _grant('view'),
        'NOTIFICATIONS': _grant('view', 'create'),
        'SETTINGS': _grant('view', 'edit'),
        'STAFF': _grant(*_CRUD),
    },
    Role.DOCTOR: {
        'DASHBOARD': _grant('view'),
        'PATIENTS': _grant('view', 'edit'),
        'APPOINTMENTS': _grant('view', 'edit'),
        'PRESCRIPTIONS': _grant('view', 'create', 'edit', 'approve'),
        'OPD': _grant('view'),
        'IPD': _grant('view'),
        'PATHOLOGY': _grant('view'),
        'CONSENT_FORMS': _grant('view'),
        'NOTIFICATIONS': _grant('view'),
        'REPORTS': _grant('view'),
    },
    Role.NURSE: {
        'DASHBOARD': _grant('view'),
        'PATIENTS': _grant('view', 'edit'),
        'APPOINTMENTS': _grant('view'),
        'PRESCRIPTIONS': _grant('view'),
        'BED_MANAGEMENT': _grant('view', 'edit'),
        'OPD': _grant('view'),
        'IPD': _grant('view'),
        'OXYGEN': _grant('view', 'edit'),
        'CONSENT_FORMS': _grant('view'),
        'NOTIFICATIONS': _grant('view'),
        'STAFF': _grant('view'),
    },
    Role.OPD_MANAGER: {
        'DASHBOARD': _grant('view'),
        'PATIENTS': _grant('view', 'create', 'edit'),
        'APPOINTMENTS': _grant(*_CRUD),
        'BILLING': _grant('view', 'create'),
        'OPD': _grant('view', 'create', 'edit'),
        'CONSENT_FORMS': _grant('view'),
        'NOTIFICATIONS': _grant('view', 'create'),
    },
    Role.PATIENT: {
        'DASHBOARD': _grant('view'),
        'APPOINTMENTS': _grant('view'),
        'PRESCRIPTIONS': _grant('view'),
        'BILLING': _grant('view'),
        'NOTIFICATIONS': _grant('view'),
    },
    Role.PATHOLOGY_LAB: {
        'DASHBOARD': _grant('view'),
        'PATIENTS': _grant('view'),
        'PATHOLOGY': _grant('view', 'create', 'edit', 'approve'),
        'REPORTS': _grant('view', 'export'),
        'NOTIFICATIONS': _grant('view'),
    },
    Role.MEDICAL_STORE: {
        'DASHBOARD': _grant('view'),
        'PRESCRIPTIONS': _grant('view'),
        'MEDICINE': _grant('view', 'edit'),
        'STOCK': _grant('view', 'create', 'edit'),
        'BILLING': _grant('view', 'create'),
        'NOTIFICATIONS': _grant('view'),
    },
    Role.TECHNICIAN: {
        'DASHBOARD': _grant('view'),
        'EQUIPMENT': _grant('view', 'create', 'edit'),
        'OXYGEN': _grant('view', 'edit'),
        'BMW': _grant('view', 'edit'),
        'NOTIFICATIONS': _grant('view'),
    },
}


def default_permission(role, module: str) -> dict[str, bool]:
    resolved = coerce_role(role)
    if resolved is None:
        return {}
    return dict(DEFAULT_PERMISSIONS.get(resolved, {}).get(module, {}))


def _find_override(overrides: Iterable, role: Role, module: str):
    for row in overrides:
        if coerce_role(getattr(row, 'role', None)) == role and getattr(row, 'module', None) == module:
            return row
    return None


def has_permission(role, module: str, action: str, overrides: Iterable = ()) -> bool:
    """Return whether ``role`` may perform ``action`` on ``module``.

    ``overrides`` is any iterable of objects shaped like
    :class:`hmscore.models.RolePermission` (``role``, ``module`` and
    ``can_<action>`` attributes).
    """
    resolved = coerce_role(role)
    if resolved is None or action not in ACTIONS:
        return False
    if resolved is Role.SUPER_ADMIN:
        return True
    row = _find_override(overrides, resolved, module)
    if row is not None:
        return bool(getattr(row, f'can_{action}', False))
    return bool(DEFAULT_PERMISSIONS.get(resolved, {}).get(module, {}).get(action, False))


def effective_permissions(role, overrides: Iterable = ()) -> dict[str, dict[str, bool]]:
    """Full module → action → bool table for ``role`` with overrides applied."""
    overrides = list(overrides)
    return {
        module: {action: has_permission(role, module, action, overrides) for action in ACTIONS}
        for module in MODULES
    }


def normalise_actions(data: Optional[Mapping]) -> dict[str, bool]:
    """Accept ``{"view": true}`` or ``{"canView": true}`` shaped payloads."""
    result = {}
    for action in ACTIONS:
        camel = 'can' + action.capitalize()
        if data and action in data:
            result[action] = bool(data[action])
        elif data and camel in data:
            result[action] = bool(data[camel])
        else:
            result[action] = False
    return result
