"""
HTTP polling client for the staffing API.

Screens keep their lists fresh by polling: a ``get`` returns the cached body
while it is younger than ``interval`` seconds and goes back to the server
once it is stale.  A successful ``mutate`` drops the cached entries of the
collection it touched (and of the derived stats view) so the next ``get``
re-fetches immediately.

Failures are raised as :class:`ClientError` subclasses.  Nothing is retried;
a failed mutation leaves the cache untouched and the caller decides what to
show.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional
from urllib.parse import urlsplit

import requests

logger = logging.getLogger(__name__)

API_PREFIX = '/api'
# relative to the API prefix
DERIVED_PATHS = ('/staffing/stats',)


class ClientError(Exception):
    """Base class for errors reported to the polling caller."""

    def __init__(self, message: str, *, status: Optional[int] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code


class ValidationFailed(ClientError):
    pass


class RecordNotFound(ClientError):
    pass


class ServerFailure(ClientError):
    pass


class NetworkFailure(ClientError):
    pass


@dataclass
class _Entry:
    body: Any
    fetched_at: float


def collection_of(path: str, prefix: str = API_PREFIX) -> str:
    """``/api/nurse-department-preferences/NUR-001/availability`` -> ``/api/nurse-department-preferences``

    The collection is the first segment after ``prefix``.  Paths that do not
    start with ``prefix`` use their own first segment.
    """
    parts = [p for p in path.split('?', 1)[0].split('/') if p]
    lead = [p for p in prefix.split('/') if p]
    depth = len(lead) if lead and parts[:len(lead)] == lead else 0
    return '/' + '/'.join(parts[:depth + 1])


def _error_from(resp: requests.Response) -> ClientError:
    code = None
    message = resp.reason or f"HTTP {resp.status_code}"
    try:
        data = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        error = data.get('error')
        if isinstance(error, dict):
            code = error.get('code')
            message = error.get('message') or message
        elif data.get('detail'):
            message = str(data['detail'])
    if resp.status_code == 400:
        cls = ValidationFailed
    elif resp.status_code == 404:
        cls = RecordNotFound
    elif resp.status_code >= 500:
        cls = ServerFailure
    else:
        cls = ClientError
    return cls(message, status=resp.status_code, code=code)


class PollingClient:
    def __init__(
        self,
        base_url: str,
        *,
        interval: float = 30,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        clock: Callable[[], float] = time.monotonic,
        timeout: float = 10,
        derived_paths: Iterable[str] = DERIVED_PATHS,
        api_prefix: Optional[str] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.interval = interval
        self.session = session or requests.Session()
        self.clock = clock
        self.timeout = timeout
        # a base_url that already ends in /api takes paths without the prefix
        if api_prefix is None:
            api_prefix = '' if urlsplit(self.base_url).path.endswith(API_PREFIX) else API_PREFIX
        self.api_prefix = api_prefix.rstrip('/')
        self.derived_paths = tuple(self.api_prefix + p for p in derived_paths)
        self._cache: dict[str, _Entry] = {}
        if token:
            self.session.headers['Authorization'] = f'Token {token}'

    @classmethod
    def from_settings(cls, base_url: str, **kwargs) -> 'PollingClient':
        from django.conf import settings
        kwargs.setdefault('interval', getattr(settings, 'POLL_INTERVAL_SECONDS', 30))
        return cls(base_url, **kwargs)

    def is_fresh(self, path: str) -> bool:
        entry = self._cache.get(path)
        return entry is not None and self.clock() - entry.fetched_at < self.interval

    def get(self, path: str, *, force: bool = False) -> Any:
        if not force and self.is_fresh(path):
            return self._cache[path].body
        body = self._request('GET', path)
        self._cache[path] = _Entry(body=body, fetched_at=self.clock())
        return body

    def invalidate(self, path: Optional[str] = None) -> None:
        """Drop cached entries under ``path`` (or everything when omitted)."""
        if path is None:
            self._cache.clear()
            return
        prefix = path.rstrip('/')
        for key in [k for k in self._cache if k == prefix or k.startswith(prefix + '/') or k.startswith(prefix + '?')]:
            del self._cache[key]

    def mutate(self, method: str, path: str, json: Any = None) -> Any:
        body = self._request(method.upper(), path, json=json)
        self.invalidate(collection_of(path, self.api_prefix))
        for derived in self.derived_paths:
            self.invalidate(derived)
        return body

    def _request(self, method: str, path: str, json: Any = None) -> Any:
        url = self.base_url + path
        try:
            resp = self.session.request(method, url, json=json, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise NetworkFailure(str(exc)) from exc
        if resp.status_code >= 400:
            error = _error_from(resp)
            logger.info("%s %s -> %s %s", method, path, resp.status_code, error.code)
            raise error
        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()
