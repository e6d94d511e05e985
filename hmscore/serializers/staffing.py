import html

import bleach
from rest_framework import serializers

from hmscore.access.matrix import ACTIONS, MODULES


def plain_text(v):
    # Entities are decoded before cleaning so encoded tags are stripped too.
    # Only '&' is restored afterwards ("Day Care & Minor Procedure").
    cleaned = bleach.clean(html.unescape((v or '').strip()), tags=[], strip=True)
    return cleaned.replace('&amp;', '&').strip()


class _TextField(serializers.CharField):
    def __init__(self, **kwargs):
        kwargs.setdefault('required', False)
        kwargs.setdefault('allow_blank', True)
        kwargs.setdefault('allow_null', True)
        kwargs.setdefault('max_length', 255)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        return plain_text(super().to_internal_value(data))


class PreferenceSaveSerializer(serializers.Serializer):
    # Blank values pass through; AssignmentStore reports missing fields.
    nurseId = _TextField(max_length=50)
    nurseName = _TextField()
    primaryDepartment = _TextField()
    secondaryDepartment = _TextField()
    tertiaryDepartment = _TextField()


class AvailabilitySerializer(serializers.Serializer):
    isAvailable = serializers.BooleanField()


class NurseAssignmentSerializer(serializers.Serializer):
    assignedRoom = _TextField(max_length=100)
    assignedDoctor = _TextField()
    assignedPosition = _TextField(max_length=20)


class DepartmentAssignmentSerializer(serializers.Serializer):
    departmentName = _TextField()
    primaryNurseId = _TextField(max_length=50)
    primaryNurseName = _TextField()
    secondaryNurseId = _TextField(max_length=50)
    secondaryNurseName = _TextField()
    tertiaryNurseId = _TextField(max_length=50)
    tertiaryNurseName = _TextField()

    def slots(self):
        data = self.validated_data
        return [
            (data.get(f'{prefix}NurseId'), data.get(f'{prefix}NurseName'))
            for prefix in ('primary', 'secondary', 'tertiary')
        ]


class SearchQuerySerializer(serializers.Serializer):
    q = serializers.CharField(required=False, allow_blank=True, max_length=100)


class CountSerializer(serializers.Serializer):
    count = serializers.IntegerField(required=False, min_value=0, max_value=500)


class RolePermissionSerializer(serializers.Serializer):
    """``{"permissions": {"STAFF": {"view": true, ...}, ...}}``"""
    permissions = serializers.DictField(child=serializers.DictField(child=serializers.BooleanField()))

    def validate_permissions(self, value):
        unknown = [m for m in value if m not in MODULES]
        if unknown:
            raise serializers.ValidationError(f"Unknown module(s): {', '.join(sorted(unknown))}")
        for module, actions in value.items():
            bad = [a for a in actions if a not in ACTIONS and not (a.startswith('can') and a[3:].lower() in ACTIONS)]
            if bad:
                raise serializers.ValidationError(f"Unknown action(s) for {module}: {', '.join(sorted(bad))}")
        return value
