"""
Seed the staffing tables.

Creates empty rosters for the department catalog and preference rows for
the fixed nurse roster.  Existing rows are left alone, so the command can
run on every deploy.
"""
from django.conf import settings
from django.core.management.base import BaseCommand

from hmscore.services.assignments import AssignmentStore


class Command(BaseCommand):
    help = "Initialize department rosters and seed nurse preferences (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--departments", type=int, default=settings.STAFFING_DEPARTMENT_COUNT,
                            help="number of catalog departments to initialize")
        parser.add_argument("--nurses", type=int, default=settings.STAFFING_SEED_NURSE_COUNT,
                            help="number of roster nurses to seed")

    def handle(self, *args, **options):
        store = AssignmentStore()
        departments = store.initialize_departments(options["departments"])
        nurses = store.seed_nurses(options["nurses"])
        self.stdout.write(self.style.SUCCESS(
            f"Created {departments} department rosters and {nurses} nurse preference rows."
        ))
