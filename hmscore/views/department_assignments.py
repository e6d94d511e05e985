"""Department-centric nurse roster endpoints (three slots per department)."""
from __future__ import annotations

from django.conf import settings
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..permissions import module_permission
from ..serializers.staffing import CountSerializer, DepartmentAssignmentSerializer, SearchQuerySerializer
from ..services.assignments import AssignmentStore, format_assignment

StaffPermission = module_permission('STAFF')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, StaffPermission])
def department_assignments(request):
    store = AssignmentStore(user=request.user)
    if request.method == 'GET':
        query = SearchQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        rows = store.list_department_assignments(query.validated_data.get('q'))
        return Response([format_assignment(a) for a in rows])

    ser = DepartmentAssignmentSerializer(data=request.data)
    ser.is_valid(raise_exception=True)
    primary, secondary, tertiary = ser.slots()
    assignment = store.save_department_assignment(
        ser.validated_data.get('departmentName'), primary, secondary, tertiary,
    )
    return Response(format_assignment(assignment))


@api_view(['POST'])
@permission_classes([IsAuthenticated, StaffPermission])
def initialize_departments(request):
    ser = CountSerializer(data=request.data)
    ser.is_valid(raise_exception=True)
    count = ser.validated_data.get('count', settings.STAFFING_DEPARTMENT_COUNT)
    created = AssignmentStore(user=request.user).initialize_departments(count)
    return Response({'ok': True, 'created': created})
