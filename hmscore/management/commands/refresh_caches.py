from django.conf import settings
from django.core.cache import cache
from django.core.management.base import BaseCommand
from django.utils import timezone

from hmscore.services import broadcast
from hmscore.services.assignments import STATS_CACHE_KEY, compute_staffing_stats


class Command(BaseCommand):
    help = "Recompute the staffing stats cache and broadcast a WebSocket refresh event."

    def handle(self, *args, **options):
        now = timezone.now()
        cache.set(STATS_CACHE_KEY, compute_staffing_stats(), settings.STAFFING_STATS_CACHE_SECONDS)
        keys_refreshed = [STATS_CACHE_KEY]
        broadcast.broadcast("broadcast.refresh", keys=keys_refreshed)
        self.stdout.write(self.style.SUCCESS(f"Refreshed {len(keys_refreshed)} keys at {now}"))
