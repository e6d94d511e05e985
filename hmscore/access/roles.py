from __future__ import annotations

from typing import Optional

from django.db import models


class Role(models.TextChoices):
    SUPER_ADMIN = 'SUPER_ADMIN', 'Super Admin'
    ADMIN = 'ADMIN', 'Admin'
    DOCTOR = 'DOCTOR', 'Doctor'
    NURSE = 'NURSE', 'Nurse'
    OPD_MANAGER = 'OPD_MANAGER', 'OPD Manager'
    PATIENT = 'PATIENT', 'Patient'
    MEDICAL_STORE = 'MEDICAL_STORE', 'Medical Store'
    PATHOLOGY_LAB = 'PATHOLOGY_LAB', 'Pathology Lab'
    TECHNICIAN = 'TECHNICIAN', 'Technician'


ROLE_LABELS: dict[str, str] = dict(Role.choices)

ALL_ROLES = frozenset(Role)
ADMIN_ROLES = frozenset({Role.SUPER_ADMIN, Role.ADMIN})


def coerce_role(value) -> Optional[Role]:
    """Map a stored role string (or a :class:`Role`) to the enum.

    Lookup is case-insensitive.  Anything outside the closed set yields
    ``None`` so callers fall back to deny-by-default behaviour.
    """
    if isinstance(value, Role):
        return value
    if not value:
        return None
    try:
        return Role(str(value).strip().upper())
    except ValueError:
        return None
