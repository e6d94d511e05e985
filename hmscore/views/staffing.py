"""
Staffing overview endpoint.

Counts nurses by availability and departments by how many of their three
slots are filled.  The numbers are cached for
``STAFFING_STATS_CACHE_SECONDS`` and dropped by every staffing mutation, so
a read right after a save is always current.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..permissions import module_permission
from ..services.assignments import AssignmentStore


@api_view(['GET'])
@permission_classes([IsAuthenticated, module_permission('STAFF', 'view')])
def staffing_stats(request):
    return Response(AssignmentStore().staffing_stats())
