"""
Database models for the HMS Core staffing backend.

These models capture the staffing side of the hospital system: users and
their roles, the nurse-centric department preference table, the
department-centric nurse roster table, per-role permission overrides and an
audit trail.  Field names mirror the camelCase payloads used by the web
client (``nurseId`` ↔ ``nurse_id`` and so on) to keep serialisation a plain
mapping.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.db import models
from django.db.models import F, Q

from .access.roles import Role


class User(AbstractUser):
    """Custom user model carrying exactly one :class:`Role`.

    The role drives every visibility decision (menus, module permissions)
    and is never changed by the login or profile flows.
    """
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.PATIENT, db_index=True)
    hospital_name = models.CharField(max_length=255, blank=True)

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class NurseDepartmentPreference(models.Model):
    """A nurse's ranked department interests plus their last assignment.

    The three department fields are pairwise distinct; this is checked by
    :class:`hmscore.services.assignments.AssignmentStore` before every
    write.  ``assigned_room``/``assigned_doctor``/``assigned_position`` are
    kept when the nurse is marked unavailable so the last assignment can be
    restored on re-activation.
    """
    POSITION_CHOICES = [
        ('Primary', 'Primary'),
        ('Secondary', 'Secondary'),
        ('Tertiary', 'Tertiary'),
    ]
    nurse_id = models.CharField(max_length=50, unique=True)
    nurse_name = models.CharField(max_length=255)
    primary_department = models.CharField(max_length=255)
    secondary_department = models.CharField(max_length=255)
    tertiary_department = models.CharField(max_length=255)
    is_available = models.BooleanField(default=True, db_index=True)
    assigned_room = models.CharField(max_length=100, null=True, blank=True)
    assigned_doctor = models.CharField(max_length=255, null=True, blank=True)
    assigned_position = models.CharField(max_length=20, choices=POSITION_CHOICES, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['nurse_id']
        constraints = [
            models.CheckConstraint(
                condition=~Q(primary_department=F('secondary_department'))
                & ~Q(primary_department=F('tertiary_department'))
                & ~Q(secondary_department=F('tertiary_department')),
                name='pref_departments_distinct',
            ),
        ]

    def departments(self) -> tuple[str, str, str]:
        return (self.primary_department, self.secondary_department, self.tertiary_department)

    def __str__(self) -> str:
        return f"{self.nurse_name} ({self.nurse_id})"


class DepartmentNurseAssignment(models.Model):
    """The roster of a single department: exactly three nurse slots.

    Empty slots are stored as NULL.  A nurse id may appear in at most one
    slot of the same record.
    """
    SLOTS = ('primary', 'secondary', 'tertiary')

    department_name = models.CharField(max_length=255, unique=True)
    primary_nurse_id = models.CharField(max_length=50, null=True, blank=True)
    primary_nurse_name = models.CharField(max_length=255, null=True, blank=True)
    secondary_nurse_id = models.CharField(max_length=50, null=True, blank=True)
    secondary_nurse_name = models.CharField(max_length=255, null=True, blank=True)
    tertiary_nurse_id = models.CharField(max_length=50, null=True, blank=True)
    tertiary_nurse_name = models.CharField(max_length=255, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['id']
        # NULL comparisons are unknown, so empty slots pass.
        constraints = [
            models.CheckConstraint(
                condition=~Q(primary_nurse_id=F('secondary_nurse_id'))
                & ~Q(primary_nurse_id=F('tertiary_nurse_id'))
                & ~Q(secondary_nurse_id=F('tertiary_nurse_id')),
                name='assignment_nurses_distinct',
            ),
        ]

    def nurse_ids(self) -> list[str]:
        return [nid for nid in (self.primary_nurse_id, self.secondary_nurse_id, self.tertiary_nurse_id) if nid]

    @property
    def filled_slots(self) -> int:
        return len(self.nurse_ids())

    def __str__(self) -> str:
        return f"{self.department_name} ({self.filled_slots}/3)"


class RolePermission(models.Model):
    """Stored override of the default permission matrix for one role/module."""
    role = models.CharField(max_length=20, choices=Role.choices)
    module = models.CharField(max_length=32)
    can_view = models.BooleanField(default=False)
    can_create = models.BooleanField(default=False)
    can_edit = models.BooleanField(default=False)
    can_delete = models.BooleanField(default=False)
    can_approve = models.BooleanField(default=False)
    can_lock = models.BooleanField(default=False)
    can_unlock = models.BooleanField(default=False)
    can_export = models.BooleanField(default=False)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['role', 'module'], name='uniq_role_module_permission'),
        ]

    def allows(self, action: str) -> bool:
        return bool(getattr(self, f'can_{action}', False))

    def __str__(self) -> str:
        return f"{self.role}:{self.module}"


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.CharField(max_length=64, blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='hmscore_aud_action_5d1c2e_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='hmscore_aud_object__8a3f41_idx'),
        ]

    def __str__(self):
        return f"{self.action}:{self.user_id}@{self.created_at:%F %T}"
