from django.core.management.base import BaseCommand
from django.contrib.auth.hashers import make_password

from hmscore.access.roles import Role
from hmscore.models import User

TEST_PASSWORD = "123456"

TEST_SET = [
    ("superadmin", Role.SUPER_ADMIN),
    ("admin1", Role.ADMIN),
    ("doctor1", Role.DOCTOR),
    ("nurse1", Role.NURSE),
    ("opd1", Role.OPD_MANAGER),
    ("patient1", Role.PATIENT),
    ("store1", Role.MEDICAL_STORE),
    ("lab1", Role.PATHOLOGY_LAB),
    ("tech1", Role.TECHNICIAN),
]


class Command(BaseCommand):
    help = "Ensure one test user per role exists with password=123456 (idempotent)."

    def handle(self, *args, **opts):
        for username, role in TEST_SET:
            u, created = User.objects.get_or_create(
                username=username,
                defaults={"role": role, "password": make_password(TEST_PASSWORD), "is_active": True},
            )
            if not created:
                # reset password, role and active flag
                u.password = make_password(TEST_PASSWORD)
                u.role = role
                u.is_active = True
                u.save(update_fields=["password", "role", "is_active"])
            self.stdout.write(self.style.SUCCESS(f"ok: {username} ({role.label})"))
        self.stdout.write(self.style.SUCCESS("All test users ensured."))
