"""
Persistence and validation for the two nurse/department tables.

``NurseDepartmentPreference`` is nurse-centric (which departments a nurse
prefers) and ``DepartmentNurseAssignment`` is department-centric (which
nurses staff a department).  They describe the same relation but are
updated through separate screens and are not synchronised
here: saving one never touches the other.

Every mutation is a single-row write inside ``transaction.atomic()``.
Concurrent saves for the same key are last-write-wins.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional, Union

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.db import transaction
from django.db.models import Q

from hmscore.access.roles import Role
from hmscore.exceptions import NotFoundError, ValidationError
from hmscore.models import DepartmentNurseAssignment, NurseDepartmentPreference
from hmscore.services import broadcast
from hmscore.services.audit import log_action
from hmscore.services.rosters import DEPARTMENTS, NURSE_ROSTER

logger = logging.getLogger(__name__)

STATS_CACHE_KEY = 'staffing:stats'

POSITIONS = ('Primary', 'Secondary', 'Tertiary')

Slot = Union[None, str, tuple, dict]


def _clean(value) -> str:
    if value is None:
        return ''
    return str(value).strip()


def _optional(value) -> Optional[str]:
    value = _clean(value)
    return value or None


def format_preference(pref: NurseDepartmentPreference) -> dict:
    return {
        'id': pref.id,
        'nurseId': pref.nurse_id,
        'nurseName': pref.nurse_name,
        'primaryDepartment': pref.primary_department,
        'secondaryDepartment': pref.secondary_department,
        'tertiaryDepartment': pref.tertiary_department,
        'isAvailable': pref.is_available,
        'assignedRoom': pref.assigned_room,
        'assignedDoctor': pref.assigned_doctor,
        'assignedPosition': pref.assigned_position,
        'createdAt': pref.created_at.isoformat() if pref.created_at else None,
        'updatedAt': pref.updated_at.isoformat() if pref.updated_at else None,
    }


def format_assignment(assignment: DepartmentNurseAssignment) -> dict:
    return {
        'id': assignment.id,
        'departmentName': assignment.department_name,
        'primaryNurseId': assignment.primary_nurse_id,
        'primaryNurseName': assignment.primary_nurse_name,
        'secondaryNurseId': assignment.secondary_nurse_id,
        'secondaryNurseName': assignment.secondary_nurse_name,
        'tertiaryNurseId': assignment.tertiary_nurse_id,
        'tertiaryNurseName': assignment.tertiary_nurse_name,
        'assignedCount': assignment.filled_slots,
        'createdAt': assignment.created_at.isoformat() if assignment.created_at else None,
        'updatedAt': assignment.updated_at.isoformat() if assignment.updated_at else None,
    }


class AssignmentStore:
    """Validate and persist nurse preferences and department rosters.

    ``user`` is only used for the audit trail.  ``departments`` and
    ``roster`` default to the fixed hospital catalog and can be replaced in
    tests.
    """

    def __init__(self, *, user=None, departments: Iterable[str] = DEPARTMENTS,
                 roster: Iterable[dict] = NURSE_ROSTER):
        self.user = user
        self.departments = tuple(departments)
        self.roster = tuple(roster)

    # ------------------------------------------------------------------
    # Nurse department preferences
    # ------------------------------------------------------------------
    def list_preferences(self, q: Optional[str] = None) -> list[NurseDepartmentPreference]:
        qs = NurseDepartmentPreference.objects.all()
        q = _clean(q)
        if q:
            qs = qs.filter(
                Q(nurse_name__icontains=q) | Q(nurse_id__icontains=q) | Q(primary_department__icontains=q)
            )
        return list(qs.order_by('nurse_id'))

    def get_preference(self, nurse_id: str) -> NurseDepartmentPreference:
        pref = NurseDepartmentPreference.objects.filter(nurse_id=_clean(nurse_id)).first()
        if pref is None:
            raise NotFoundError(f"No department preferences for nurse {nurse_id}")
        return pref

    def save_preference(self, nurse_id: str, primary: str, secondary: str, tertiary: str,
                        nurse_name: Optional[str] = None) -> NurseDepartmentPreference:
        """Create or replace the preferences of ``nurse_id``.

        All three departments are required and must be pairwise distinct
        (compared case-insensitively).  Nothing is written when validation
        fails.
        """
        nurse_id = _clean(nurse_id)
        departments = [_clean(primary), _clean(secondary), _clean(tertiary)]
        if not nurse_id or not all(departments):
            logger.warning("rejected preference save for %r: missing field", nurse_id)
            raise ValidationError("All fields are required")
        if len({d.casefold() for d in departments}) != 3:
            logger.warning("rejected preference save for %s: duplicate departments %s", nurse_id, departments)
            raise ValidationError("All three department preferences must be unique")

        name = _clean(nurse_name) or self._resolve_nurse_name(nurse_id)
        if not name:
            raise ValidationError("All fields are required")

        with transaction.atomic():
            pref, created = NurseDepartmentPreference.objects.update_or_create(
                nurse_id=nurse_id,
                defaults={
                    'nurse_name': name,
                    'primary_department': departments[0],
                    'secondary_department': departments[1],
                    'tertiary_department': departments[2],
                },
            )
            log_action(user=self.user, action='preference_save', object_type='nurse_preference',
                       object_id=nurse_id, detail={'created': created, 'departments': departments})
        logger.info("saved preferences for %s (%s): %s", nurse_id, 'created' if created else 'updated', departments)
        self._changed('preferences', nurse_id, 'create' if created else 'update')
        return pref

    def delete_preference(self, nurse_id: str) -> None:
        nurse_id = _clean(nurse_id)
        with transaction.atomic():
            deleted, _ = NurseDepartmentPreference.objects.filter(nurse_id=nurse_id).delete()
            if not deleted:
                raise NotFoundError(f"No department preferences for nurse {nurse_id}")
            log_action(user=self.user, action='preference_delete', object_type='nurse_preference',
                       object_id=nurse_id)
        logger.info("deleted preferences for %s", nurse_id)
        self._changed('preferences', nurse_id, 'delete')

    def toggle_availability(self, nurse_id: str, is_available: bool) -> NurseDepartmentPreference:
        """Set the availability flag.

        Room, doctor and position are left untouched when a nurse becomes
        unavailable so the last assignment survives re-activation.
        """
        with transaction.atomic():
            pref = self.get_preference(nurse_id)
            pref.is_available = bool(is_available)
            pref.save(update_fields=['is_available', 'updated_at'])
            log_action(user=self.user, action='preference_availability', object_type='nurse_preference',
                       object_id=pref.nurse_id, detail={'isAvailable': pref.is_available})
        logger.info("nurse %s availability -> %s", pref.nurse_id, pref.is_available)
        self._changed('preferences', pref.nurse_id)
        return pref

    def assign_nurse(self, nurse_id: str, *, room: Optional[str] = None, doctor: Optional[str] = None,
                     position: Optional[str] = None) -> NurseDepartmentPreference:
        """Record the nurse's current room, doctor and slot position."""
        position = _optional(position)
        if position is not None:
            matches = [p for p in POSITIONS if p.lower() == position.lower()]
            if not matches:
                raise ValidationError(f"Position must be one of {', '.join(POSITIONS)}")
            position = matches[0]
        with transaction.atomic():
            pref = self.get_preference(nurse_id)
            pref.assigned_room = _optional(room)
            pref.assigned_doctor = _optional(doctor)
            pref.assigned_position = position
            pref.save(update_fields=['assigned_room', 'assigned_doctor', 'assigned_position', 'updated_at'])
            log_action(user=self.user, action='preference_assign', object_type='nurse_preference',
                       object_id=pref.nurse_id,
                       detail={'room': pref.assigned_room, 'doctor': pref.assigned_doctor, 'position': position})
        logger.info("nurse %s assigned room=%s doctor=%s position=%s",
                    pref.nurse_id, pref.assigned_room, pref.assigned_doctor, position)
        self._changed('preferences', pref.nurse_id)
        return pref

    def seed_nurses(self, count: int = 24) -> int:
        """Create preference rows for the first ``count`` roster nurses.

        Nurses that already have a row are skipped and never altered, so the
        operation is safe to re-run.  Returns the number of rows created.
        """
        entries = self.roster[:max(int(count), 0)]
        with transaction.atomic():
            existing = set(
                NurseDepartmentPreference.objects.filter(
                    nurse_id__in=[e['nurse_id'] for e in entries]
                ).values_list('nurse_id', flat=True)
            )
            missing = [NurseDepartmentPreference(**e) for e in entries if e['nurse_id'] not in existing]
            NurseDepartmentPreference.objects.bulk_create(missing)
            if missing:
                log_action(user=self.user, action='preference_seed', object_type='nurse_preference',
                           detail={'created': len(missing)})
        logger.info("seeded %d nurse preference rows (%d already present)", len(missing), len(existing))
        if missing:
            self._changed('preferences', None, 'seed')
        return len(missing)

    # ------------------------------------------------------------------
    # Department nurse assignments
    # ------------------------------------------------------------------
    def list_department_assignments(self, q: Optional[str] = None) -> list[DepartmentNurseAssignment]:
        qs = DepartmentNurseAssignment.objects.all()
        q = _clean(q)
        if q:
            qs = qs.filter(
                Q(department_name__icontains=q)
                | Q(primary_nurse_name__icontains=q)
                | Q(secondary_nurse_name__icontains=q)
                | Q(tertiary_nurse_name__icontains=q)
            )
        return list(qs.order_by('id'))

    def save_department_assignment(self, department_name: str, primary: Slot = None,
                                   secondary: Slot = None, tertiary: Slot = None) -> DepartmentNurseAssignment:
        """Create or replace the roster of ``department_name``.

        Each slot is ``None``/blank (left empty, stored as NULL), a nurse id,
        a ``(nurse_id, nurse_name)`` pair or a ``{"id", "name"}`` mapping.
        The same nurse id may not occupy two slots.
        """
        department_name = _clean(department_name)
        if not department_name:
            raise ValidationError("Department name is required")

        slots = [self._slot(primary), self._slot(secondary), self._slot(tertiary)]
        ids = [nurse_id for nurse_id, _ in slots if nurse_id]
        if len(set(ids)) != len(ids):
            logger.warning("rejected roster for %s: nurse in more than one slot %s", department_name, ids)
            raise ValidationError("Each nurse can only occupy one priority per department")

        defaults = {}
        for prefix, (nurse_id, nurse_name) in zip(DepartmentNurseAssignment.SLOTS, slots):
            if nurse_id and not nurse_name:
                nurse_name = self._resolve_nurse_name(nurse_id) or None
            defaults[f'{prefix}_nurse_id'] = nurse_id
            defaults[f'{prefix}_nurse_name'] = nurse_name if nurse_id else None

        with transaction.atomic():
            assignment, created = DepartmentNurseAssignment.objects.update_or_create(
                department_name=department_name, defaults=defaults,
            )
            log_action(user=self.user, action='department_assignment_save', object_type='department_assignment',
                       object_id=assignment.id, detail={'department': department_name, 'nurses': ids})
        logger.info("saved roster for %s: %s", department_name, ids)
        self._changed('department-assignments', department_name, 'create' if created else 'update')
        return assignment

    def initialize_departments(self, count: int = 24) -> int:
        """Create empty rosters for the first ``count`` catalog departments.

        Departments that already have a record (matched by name) are skipped;
        existing assignments are never overwritten.  Returns the number of
        rows created.
        """
        names = self.departments[:max(int(count), 0)]
        with transaction.atomic():
            existing = set(
                DepartmentNurseAssignment.objects.filter(department_name__in=names)
                .values_list('department_name', flat=True)
            )
            missing = [DepartmentNurseAssignment(department_name=name) for name in names if name not in existing]
            DepartmentNurseAssignment.objects.bulk_create(missing)
            if missing:
                log_action(user=self.user, action='department_initialize', object_type='department_assignment',
                           detail={'created': len(missing)})
        logger.info("initialized %d departments (%d already present)", len(missing), len(existing))
        if missing:
            self._changed('department-assignments', None, 'seed')
        return len(missing)

    # ------------------------------------------------------------------
    # Lookups and derived views
    # ------------------------------------------------------------------
    def department_choices(self) -> list[str]:
        return list(self.departments)

    def nurse_roster(self) -> list[dict]:
        """Nurse options for the preference dialog.

        The fixed roster first, then NURSE users from the database keyed by
        username.
        """
        options = {e['nurse_id']: e['nurse_name'] for e in self.roster}
        User = get_user_model()
        for user in User.objects.filter(role=Role.NURSE, is_active=True).order_by('id'):
            options.setdefault(user.username, user.get_full_name() or user.username)
        return [{'nurseId': nurse_id, 'nurseName': name} for nurse_id, name in options.items()]

    def staffing_stats(self) -> dict:
        cached = cache.get(STATS_CACHE_KEY)
        if cached is not None:
            return cached
        stats = compute_staffing_stats()
        cache.set(STATS_CACHE_KEY, stats, getattr(settings, 'STAFFING_STATS_CACHE_SECONDS', 60))
        return stats

    # ------------------------------------------------------------------
    def _slot(self, value: Slot) -> tuple[Optional[str], Optional[str]]:
        if value is None:
            return None, None
        if isinstance(value, dict):
            return _optional(value.get('id') or value.get('nurseId')), _optional(value.get('name') or value.get('nurseName'))
        if isinstance(value, (tuple, list)):
            nurse_id = _optional(value[0]) if value else None
            nurse_name = _optional(value[1]) if len(value) > 1 else None
            return nurse_id, nurse_name
        return _optional(value), None

    def _resolve_nurse_name(self, nurse_id: str) -> str:
        pref = NurseDepartmentPreference.objects.filter(nurse_id=nurse_id).only('nurse_name').first()
        if pref:
            return pref.nurse_name
        for entry in self.roster:
            if entry['nurse_id'] == nurse_id:
                return entry['nurse_name']
        User = get_user_model()
        user = User.objects.filter(username=nurse_id, role=Role.NURSE).first()
        if user:
            return user.get_full_name() or user.username
        return ''

    def _changed(self, resource: str, key: Optional[str], op: str = 'update') -> None:
        cache.delete(STATS_CACHE_KEY)
        # the row is saved either way; a failing channel layer is only logged
        transaction.on_commit(lambda: broadcast.staffing_changed(resource, key, op), robust=True)


def compute_staffing_stats() -> dict:
    prefs = NurseDepartmentPreference.objects.all()
    total_nurses = prefs.count()
    available = prefs.filter(is_available=True).count()
    full = partial = empty = filled = 0
    for assignment in DepartmentNurseAssignment.objects.all():
        count = assignment.filled_slots
        filled += count
        if count == 3:
            full += 1
        elif count:
            partial += 1
        else:
            empty += 1
    return {
        'totalNurses': total_nurses,
        'availableNurses': available,
        'unavailableNurses': total_nurses - available,
        'departments': full + partial + empty,
        'fullyStaffed': full,
        'partiallyStaffed': partial,
        'unstaffed': empty,
        'filledSlots': filled,
        'openSlots': (full + partial + empty) * 3 - filled,
    }
