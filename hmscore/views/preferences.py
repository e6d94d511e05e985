"""
Nurse department preference endpoints.

Each nurse ranks three distinct departments; administrators additionally
record the nurse's current room, doctor and slot and flip availability.
All routes require the STAFF module permission for the HTTP method used
(nurses can read, administrators can write).
"""
from __future__ import annotations

from django.conf import settings
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..permissions import module_permission
from ..serializers.staffing import (
    AvailabilitySerializer,
    CountSerializer,
    NurseAssignmentSerializer,
    PreferenceSaveSerializer,
    SearchQuerySerializer,
)
from ..services.assignments import AssignmentStore, format_preference

StaffPermission = module_permission('STAFF')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, StaffPermission])
def preferences(request):
    """``GET`` lists preferences (``?q=`` filters); ``POST`` creates or replaces one."""
    store = AssignmentStore(user=request.user)
    if request.method == 'GET':
        query = SearchQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        rows = store.list_preferences(query.validated_data.get('q'))
        return Response([format_preference(p) for p in rows])

    ser = PreferenceSaveSerializer(data=request.data)
    ser.is_valid(raise_exception=True)
    data = ser.validated_data
    pref = store.save_preference(
        data.get('nurseId'),
        data.get('primaryDepartment'),
        data.get('secondaryDepartment'),
        data.get('tertiaryDepartment'),
        nurse_name=data.get('nurseName'),
    )
    return Response(format_preference(pref))


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, StaffPermission])
def preference_detail(request, nurse_id: str):
    AssignmentStore(user=request.user).delete_preference(nurse_id)
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['PATCH'])
@permission_classes([IsAuthenticated, StaffPermission])
def preference_availability(request, nurse_id: str):
    ser = AvailabilitySerializer(data=request.data)
    ser.is_valid(raise_exception=True)
    pref = AssignmentStore(user=request.user).toggle_availability(nurse_id, ser.validated_data['isAvailable'])
    return Response(format_preference(pref))


@api_view(['PATCH'])
@permission_classes([IsAuthenticated, StaffPermission])
def preference_assignment(request, nurse_id: str):
    ser = NurseAssignmentSerializer(data=request.data)
    ser.is_valid(raise_exception=True)
    data = ser.validated_data
    pref = AssignmentStore(user=request.user).assign_nurse(
        nurse_id,
        room=data.get('assignedRoom'),
        doctor=data.get('assignedDoctor'),
        position=data.get('assignedPosition'),
    )
    return Response(format_preference(pref))


@api_view(['GET'])
@permission_classes([IsAuthenticated, StaffPermission])
def department_choices(request):
    return Response(AssignmentStore().department_choices())


@api_view(['GET'])
@permission_classes([IsAuthenticated, StaffPermission])
def all_nurses(request):
    return Response(AssignmentStore().nurse_roster())


@api_view(['POST'])
@permission_classes([IsAuthenticated, StaffPermission])
def seed_preferences(request):
    """Bulk-create preference rows for the fixed nurse roster.

    Existing nurses are skipped, so calling this twice creates nothing the
    second time.
    """
    ser = CountSerializer(data=request.data)
    ser.is_valid(raise_exception=True)
    count = ser.validated_data.get('count', settings.STAFFING_SEED_NURSE_COUNT)
    created = AssignmentStore(user=request.user).seed_nurses(count)
    return Response({'ok': True, 'created': created})
