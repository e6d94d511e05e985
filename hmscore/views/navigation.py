from __future__ import annotations

from django.conf import settings
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..access import can_access_path
from ..access.presenter import NavigationPresenter


def menu_payload(user) -> dict:
    presenter = NavigationPresenter(getattr(user, 'role', None))
    return {
        'role': presenter.role.value if presenter.role else None,
        'roleLabel': presenter.role_label,
        'sections': presenter.render(),
        'pollInterval': settings.POLL_INTERVAL_SECONDS,
    }


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def menu(request):
    """Sidebar sections visible to the caller's role, in display order."""
    return Response(menu_payload(request.user))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def access(request):
    path = (request.query_params.get('path') or '').strip()
    return Response({'path': path, 'allowed': bool(path) and can_access_path(request.user.role, path)})
