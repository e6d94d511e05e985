"""
Custom permission classes for role and module based access control.
"""
from rest_framework.permissions import BasePermission

from .access.matrix import has_permission
from .access.roles import ADMIN_ROLES, Role, coerce_role

METHOD_ACTIONS = {
    'GET': 'view',
    'HEAD': 'view',
    'OPTIONS': 'view',
    'POST': 'create',
    'PUT': 'edit',
    'PATCH': 'edit',
    'DELETE': 'delete',
}


def _role(request):
    user = getattr(request, "user", None)
    if not (user and user.is_authenticated):
        return None
    return coerce_role(getattr(user, "role", None))


class IsAdminRole(BasePermission):
    """Allow access only to ADMIN and SUPER_ADMIN users."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _role(request) in ADMIN_ROLES


class IsSuperAdmin(BasePermission):
    """Only super admin."""
    def has_permission(self, request, view) -> bool:
        return _role(request) is Role.SUPER_ADMIN


class ModulePermission(BasePermission):
    """Check the role permission matrix for the view's ``permission_module``.

    The HTTP method picks the action (GET → view, POST → create, PUT/PATCH →
    edit, DELETE → delete) unless the view sets ``permission_action``.
    Stored :class:`~hmscore.models.RolePermission` overrides are honoured.
    """
    module = None
    action = None

    def has_permission(self, request, view) -> bool:
        role = _role(request)
        if role is None:
            return False
        module = self.module or getattr(view, "permission_module", None)
        if not module:
            return False
        action = self.action or getattr(view, "permission_action", None) or METHOD_ACTIONS.get(request.method, "view")
        from .models import RolePermission

        overrides = RolePermission.objects.filter(role=role, module=module)
        return has_permission(role, module, action, overrides)


def module_permission(module: str, action: str | None = None):
    """Build a :class:`ModulePermission` bound to ``module`` for function views."""
    return type(f"ModulePermission_{module}", (ModulePermission,), {"module": module, "action": action})
