"""
Django admin registrations.

Lets superusers inspect staffing rows, permission overrides and the audit
trail at ``/admin/``.  Edits made here bypass AssignmentStore validation
except for the database constraints.
"""

from django.contrib import admin

from .models import AuditEvent, DepartmentNurseAssignment, NurseDepartmentPreference, RolePermission, User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'role', 'hospital_name', 'is_staff', 'is_superuser')
    list_filter = ('role',)
    search_fields = ('username', 'first_name', 'last_name')


@admin.register(NurseDepartmentPreference)
class NurseDepartmentPreferenceAdmin(admin.ModelAdmin):
    list_display = ('nurse_id', 'nurse_name', 'primary_department', 'secondary_department',
                    'tertiary_department', 'is_available', 'assigned_position')
    list_filter = ('is_available', 'assigned_position')
    search_fields = ('nurse_id', 'nurse_name', 'primary_department')


@admin.register(DepartmentNurseAssignment)
class DepartmentNurseAssignmentAdmin(admin.ModelAdmin):
    list_display = ('department_name', 'primary_nurse_name', 'secondary_nurse_name', 'tertiary_nurse_name')
    search_fields = ('department_name', 'primary_nurse_name', 'secondary_nurse_name', 'tertiary_nurse_name')


@admin.register(RolePermission)
class RolePermissionAdmin(admin.ModelAdmin):
    list_display = ('role', 'module', 'can_view', 'can_create', 'can_edit', 'can_delete')
    list_filter = ('role', 'module')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('action', 'user', 'object_type', 'object_id', 'created_at')
    list_filter = ('action', 'object_type')
    search_fields = ('object_id', 'user__username')
