"""
Module/action permission endpoints.

``current`` returns the effective table for the caller.  ``roles/<role>``
exposes the stored overrides per role; only SUPER_ADMIN may change them and
SUPER_ADMIN's own table cannot be overridden.
"""
from __future__ import annotations

from django.db import transaction
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..access.matrix import MODULE_LABELS, effective_permissions, normalise_actions
from ..access.roles import ROLE_LABELS, Role, coerce_role
from ..exceptions import NotFoundError, ValidationError
from ..models import RolePermission
from ..permissions import IsAdminRole, IsSuperAdmin
from ..serializers.staffing import RolePermissionSerializer
from ..services.audit import log_action


def _table(role: Role) -> dict:
    overrides = RolePermission.objects.filter(role=role)
    return {
        'role': role.value,
        'roleLabel': ROLE_LABELS[role],
        'modules': MODULE_LABELS,
        'permissions': effective_permissions(role, overrides),
        'overridden': sorted(overrides.values_list('module', flat=True)),
    }


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def current_permissions(request):
    role = coerce_role(request.user.role)
    if role is None:
        raise NotFoundError('Unknown role')
    return Response(_table(role))


class _RolePermissionAccess(IsAdminRole):
    def has_permission(self, request, view) -> bool:
        if request.method == 'PUT':
            return IsSuperAdmin().has_permission(request, view)
        return super().has_permission(request, view)


@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated, _RolePermissionAccess])
def role_permissions(request, role: str):
    resolved = coerce_role(role)
    if resolved is None:
        raise NotFoundError(f'Unknown role {role}')
    if request.method == 'GET':
        return Response(_table(resolved))

    if resolved is Role.SUPER_ADMIN:
        raise ValidationError('Super Admin permissions cannot be changed')
    ser = RolePermissionSerializer(data=request.data)
    ser.is_valid(raise_exception=True)
    with transaction.atomic():
        for module, actions in ser.validated_data['permissions'].items():
            flags = normalise_actions(actions)
            RolePermission.objects.update_or_create(
                role=resolved, module=module,
                defaults={f'can_{action}': allowed for action, allowed in flags.items()},
            )
        log_action(user=request.user, action='permissions_update', object_type='role', object_id=resolved.value,
                   detail={'modules': sorted(ser.validated_data['permissions'])})
    return Response(_table(resolved))
