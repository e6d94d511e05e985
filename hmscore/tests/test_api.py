"""
Integration tests for the HMS Core API.

These tests exercise authentication, role gating on the staffing endpoints,
the nurse preference and department roster flows, navigation and the
permission override endpoints.  They use Django REST Framework's
APIClient within the APITestCase base class.

To run the tests:

```
pytest -q hmscore/tests
```
"""

from unittest import mock

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase, APITransactionTestCase

from ..access.roles import Role
from ..models import DepartmentNurseAssignment, NurseDepartmentPreference, RolePermission, User
from ..services import broadcast


class StaffingAPITests(APITestCase):
    def setUp(self) -> None:
        self.admin = User.objects.create_user(username="admin1", password="adminpass", role=Role.ADMIN)
        self.superadmin = User.objects.create_user(username="super1", password="superpass", role=Role.SUPER_ADMIN)
        self.nurse = User.objects.create_user(username="nurse1", password="nursepass", role=Role.NURSE)
        self.opd = User.objects.create_user(username="opd1", password="opdpass", role=Role.OPD_MANAGER)
        self.patient = User.objects.create_user(username="patient1", password="patientpass", role=Role.PATIENT)

    def as_user(self, user) -> None:
        self.client.force_authenticate(user=user)

    # ------------------------------------------------------------------
    # Authentication and gating
    # ------------------------------------------------------------------
    def test_unauthenticated_requests_are_rejected(self) -> None:
        resp = self.client.get("/api/nurse-department-preferences")
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(resp.data["ok"])

    def test_roles_without_staff_module_are_forbidden(self) -> None:
        for user in (self.patient, self.opd):
            self.as_user(user)
            resp = self.client.get("/api/nurse-department-preferences")
            self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_nurse_can_read_but_not_write(self) -> None:
        self.as_user(self.nurse)
        self.assertEqual(self.client.get("/api/nurse-department-preferences").status_code, status.HTTP_200_OK)
        resp = self.client.post("/api/nurse-department-preferences/seed", {}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(NurseDepartmentPreference.objects.exists())

    def test_permission_override_grants_write(self) -> None:
        RolePermission.objects.create(role=Role.NURSE, module="STAFF", can_view=True, can_create=True)
        self.as_user(self.nurse)
        resp = self.client.post("/api/nurse-department-preferences/seed", {"count": 2}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data, {"ok": True, "created": 2})

    def test_api_responses_are_not_cached(self) -> None:
        self.as_user(self.admin)
        resp = self.client.get("/api/navigation/menu")
        self.assertEqual(resp["Cache-Control"], "no-store")

    # ------------------------------------------------------------------
    # Nurse preferences
    # ------------------------------------------------------------------
    def test_save_and_list_preferences(self) -> None:
        self.as_user(self.admin)
        payload = {
            "nurseId": "N1",
            "nurseName": "Nina",
            "primaryDepartment": "ICU",
            "secondaryDepartment": "ER",
            "tertiaryDepartment": "Cardiology",
        }
        resp = self.client.post("/api/nurse-department-preferences", payload, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["nurseId"], "N1")
        self.assertTrue(resp.data["isAvailable"])

        resp = self.client.get("/api/nurse-department-preferences", {"q": "nina"})
        self.assertEqual([p["nurseId"] for p in resp.data], ["N1"])

    def test_duplicate_departments_return_400(self) -> None:
        self.as_user(self.admin)
        payload = {
            "nurseId": "N1",
            "nurseName": "Nina",
            "primaryDepartment": "ICU",
            "secondaryDepartment": "ICU",
            "tertiaryDepartment": "ER",
        }
        resp = self.client.post("/api/nurse-department-preferences", payload, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["error"]["code"], "validation_error")
        self.assertFalse(NurseDepartmentPreference.objects.exists())

    def test_markup_is_stripped_from_text(self) -> None:
        self.as_user(self.admin)
        payload = {
            "nurseId": "N1",
            "nurseName": "<b>Nina</b>",
            "primaryDepartment": "Day Care & Minor Procedure",
            "secondaryDepartment": "ER",
            "tertiaryDepartment": "ICU",
        }
        resp = self.client.post("/api/nurse-department-preferences", payload, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["nurseName"], "Nina")
        self.assertEqual(resp.data["primaryDepartment"], "Day Care & Minor Procedure")

    def test_entity_encoded_markup_is_stripped(self) -> None:
        self.as_user(self.admin)
        payload = {
            "nurseId": "N1",
            "nurseName": "&lt;script&gt;alert(1)&lt;/script&gt;Nina",
            "primaryDepartment": "ICU",
            "secondaryDepartment": "ER",
            "tertiaryDepartment": "&lt;b&gt;Oncology&lt;/b&gt;",
        }
        resp = self.client.post("/api/nurse-department-preferences", payload, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        stored = NurseDepartmentPreference.objects.get(nurse_id="N1")
        self.assertNotIn("<", stored.nurse_name)
        self.assertNotIn("script>", stored.nurse_name)
        self.assertEqual(stored.tertiary_department, "Oncology")


    def test_availability_assignment_and_delete(self) -> None:
        self.as_user(self.admin)
        self.client.post("/api/nurse-department-preferences/seed", {}, format="json")
        url = "/api/nurse-department-preferences/NUR-001"

        resp = self.client.patch(f"{url}/assignment",
                                 {"assignedRoom": "201", "assignedDoctor": "Dr. Rao", "assignedPosition": "Primary"},
                                 format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["assignedRoom"], "201")

        resp = self.client.patch(f"{url}/availability", {"isAvailable": False}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertFalse(resp.data["isAvailable"])
        self.assertEqual(resp.data["assignedDoctor"], "Dr. Rao")

        self.assertEqual(self.client.delete(url).status_code, status.HTTP_204_NO_CONTENT)
        resp = self.client.delete(url)
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data["error"]["code"], "not_found")

    def test_seed_twice_creates_nothing_the_second_time(self) -> None:
        self.as_user(self.admin)
        first = self.client.post("/api/nurse-department-preferences/seed", {}, format="json")
        second = self.client.post("/api/nurse-department-preferences/seed", {}, format="json")
        self.assertEqual(first.data["created"], 24)
        self.assertEqual(second.data["created"], 0)

    def test_department_choices_and_all_nurses(self) -> None:
        self.as_user(self.nurse)
        departments = self.client.get("/api/nurse-department-preferences/departments").data
        self.assertEqual(len(departments), 24)
        self.assertEqual(departments[0], "Cardiology")
        nurses = self.client.get("/api/nurse-department-preferences/all-nurses").data
        self.assertIn({"nurseId": "nurse1", "nurseName": "nurse1"}, nurses)

    # ------------------------------------------------------------------
    # Department assignments
    # ------------------------------------------------------------------
    def test_initialize_and_save_department_assignment(self) -> None:
        self.as_user(self.admin)
        resp = self.client.post("/api/department-nurse-assignments/initialize", {}, format="json")
        self.assertEqual(resp.data, {"ok": True, "created": 24})
        resp = self.client.post("/api/department-nurse-assignments/initialize", {}, format="json")
        self.assertEqual(resp.data["created"], 0)

        payload = {
            "departmentName": "Cardiology",
            "primaryNurseId": "NUR-001",
            "secondaryNurseId": "",
            "tertiaryNurseId": "NUR-003",
            "tertiaryNurseName": "Kavita Patil",
        }
        resp = self.client.post("/api/department-nurse-assignments", payload, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["primaryNurseName"], "Anita Sharma")
        self.assertIsNone(resp.data["secondaryNurseId"])
        self.assertEqual(resp.data["assignedCount"], 2)
        self.assertEqual(DepartmentNurseAssignment.objects.count(), 24)

    def test_same_nurse_twice_returns_400(self) -> None:
        self.as_user(self.admin)
        payload = {"departmentName": "Cardiology", "primaryNurseId": "N1", "secondaryNurseId": "N1"}
        resp = self.client.post("/api/department-nurse-assignments", payload, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(DepartmentNurseAssignment.objects.exists())

    def test_staffing_stats_reflect_saves(self) -> None:
        self.as_user(self.admin)
        self.client.post("/api/department-nurse-assignments/initialize", {"count": 2}, format="json")
        self.assertEqual(self.client.get("/api/staffing/stats").data["unstaffed"], 2)
        self.client.post("/api/department-nurse-assignments",
                         {"departmentName": "Cardiology", "primaryNurseId": "N1", "primaryNurseName": "Nina"},
                         format="json")
        stats = self.client.get("/api/staffing/stats").data
        self.assertEqual((stats["partiallyStaffed"], stats["unstaffed"]), (1, 1))

    # ------------------------------------------------------------------
    # Navigation and permissions
    # ------------------------------------------------------------------
    def test_menu_for_opd_manager(self) -> None:
        self.as_user(self.opd)
        resp = self.client.get("/api/navigation/menu")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        titles = [item["title"] for section in resp.data["sections"] for item in section["items"]]
        self.assertEqual(titles, ["Dashboard", "OPD Service", "Patient Service"])
        self.assertEqual(resp.data["roleLabel"], "OPD Manager")

    def test_access_check(self) -> None:
        self.as_user(self.nurse)
        self.assertTrue(self.client.get("/api/navigation/access", {"path": "/opd-service"}).data["allowed"])
        self.assertFalse(self.client.get("/api/navigation/access", {"path": "/nurse-preferences"}).data["allowed"])
        self.assertFalse(self.client.get("/api/navigation/access", {"path": "/nowhere"}).data["allowed"])

    def test_current_permissions(self) -> None:
        self.as_user(self.nurse)
        resp = self.client.get("/api/permissions/current")
        self.assertEqual(resp.data["role"], "NURSE")
        self.assertTrue(resp.data["permissions"]["STAFF"]["view"])
        self.assertFalse(resp.data["permissions"]["STAFF"]["edit"])

    def test_only_super_admin_changes_role_permissions(self) -> None:
        body = {"permissions": {"STAFF": {"view": True, "canEdit": True}}}
        self.as_user(self.admin)
        self.assertEqual(self.client.get("/api/permissions/roles/NURSE").status_code, status.HTTP_200_OK)
        resp = self.client.put("/api/permissions/roles/NURSE", body, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

        self.as_user(self.superadmin)
        resp = self.client.put("/api/permissions/roles/NURSE", body, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertTrue(resp.data["permissions"]["STAFF"]["edit"])
        self.assertEqual(resp.data["overridden"], ["STAFF"])

        resp = self.client.put("/api/permissions/roles/SUPER_ADMIN", body, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        resp = self.client.put("/api/permissions/roles/NURSE", {"permissions": {"SPACE": {"view": True}}},
                               format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self.client.get("/api/permissions/roles/JANITOR").status_code, status.HTTP_404_NOT_FOUND)

    def test_health(self) -> None:
        resp = self.client.get(reverse("healthz"))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertTrue(resp.json()["ok"])


class BroadcastFailureTests(APITransactionTestCase):
    """Writes commit for real here so the on-commit broadcast actually runs."""

    def setUp(self) -> None:
        self.admin = User.objects.create_user(username="admin1", password="adminpass", role=Role.ADMIN)
        self.client.force_authenticate(user=self.admin)

    def test_failed_broadcast_does_not_fail_the_save(self) -> None:
        payload = {
            "nurseId": "N1",
            "nurseName": "Nina",
            "primaryDepartment": "ICU",
            "secondaryDepartment": "ER",
            "tertiaryDepartment": "Cardiology",
        }
        with mock.patch.object(broadcast, "broadcast", side_effect=ConnectionError("redis down")) as send:
            resp = self.client.post("/api/nurse-department-preferences", payload, format="json")
            self.assertEqual(resp.status_code, status.HTTP_200_OK)
            self.assertEqual(resp.data["nurseId"], "N1")

            resp = self.client.post("/api/department-nurse-assignments/initialize", {}, format="json")
            self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(send.call_count, 2)
        self.assertTrue(NurseDepartmentPreference.objects.filter(nurse_id="N1").exists())
        self.assertEqual(DepartmentNurseAssignment.objects.count(), 24)
