"""Polling client tests with a fake clock and a fake requests session."""
import pytest
import requests

from hmscore.services.polling import (
    ClientError,
    NetworkFailure,
    PollingClient,
    RecordNotFound,
    ServerFailure,
    ValidationFailed,
    collection_of,
)


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeResponse:
    def __init__(self, status_code=200, body=None, reason='OK'):
        self.status_code = status_code
        self._body = body
        self.reason = reason
        self.content = b'' if body is None else b'x'

    def json(self):
        if self._body is None:
            raise ValueError('no body')
        return self._body


class FakeSession:
    def __init__(self):
        self.headers = {}
        self.calls = []
        self.responses = []

    def queue(self, *responses):
        self.responses.extend(responses)

    def request(self, method, url, json=None, timeout=None):
        self.calls.append((method, url, json))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def client(clock, session):
    return PollingClient('http://hms.test/', interval=30, token='abc', session=session, clock=clock)


def test_token_header_is_set(client, session):
    assert session.headers['Authorization'] == 'Token abc'


def test_get_is_served_from_cache_while_fresh(client, clock, session):
    session.queue(FakeResponse(body=[1]), FakeResponse(body=[2]))
    assert client.get('/api/nurse-department-preferences') == [1]
    clock.advance(29)
    assert client.get('/api/nurse-department-preferences') == [1]
    assert len(session.calls) == 1

    clock.advance(1)
    assert client.get('/api/nurse-department-preferences') == [2]
    assert session.calls[-1] == ('GET', 'http://hms.test/api/nurse-department-preferences', None)


def test_force_bypasses_cache(client, session):
    session.queue(FakeResponse(body=[1]), FakeResponse(body=[2]))
    client.get('/api/staffing/stats')
    assert client.get('/api/staffing/stats', force=True) == [2]


def test_mutation_invalidates_collection_and_stats(client, session):
    session.queue(
        FakeResponse(body=['prefs']),
        FakeResponse(body={'stats': 1}),
        FakeResponse(body=['depts']),
        FakeResponse(body={'isAvailable': False}),
    )
    client.get('/api/nurse-department-preferences?q=ni')
    client.get('/api/staffing/stats')
    client.get('/api/department-nurse-assignments')

    client.mutate('patch', '/api/nurse-department-preferences/N1/availability', {'isAvailable': False})
    assert session.calls[-1] == ('PATCH', 'http://hms.test/api/nurse-department-preferences/N1/availability',
                                 {'isAvailable': False})
    assert not client.is_fresh('/api/nurse-department-preferences?q=ni')
    assert not client.is_fresh('/api/staffing/stats')
    assert client.is_fresh('/api/department-nurse-assignments')


def test_failed_mutation_is_not_retried_and_keeps_cache(client, session):
    session.queue(
        FakeResponse(body=[]),
        FakeResponse(400, {'ok': False, 'error': {'code': 'validation_error', 'message': 'dup'}}, 'Bad Request'),
    )
    client.get('/api/department-nurse-assignments')
    with pytest.raises(ValidationFailed) as info:
        client.mutate('POST', '/api/department-nurse-assignments', {'departmentName': 'ICU'})
    assert info.value.code == 'validation_error'
    assert info.value.message == 'dup'
    assert len(session.calls) == 2
    assert client.is_fresh('/api/department-nurse-assignments')


@pytest.mark.parametrize('status_code, error_class', [
    (404, RecordNotFound),
    (500, ServerFailure),
    (503, ServerFailure),
    (403, ClientError),
])
def test_status_codes_map_to_errors(client, session, status_code, error_class):
    session.queue(FakeResponse(status_code, None, 'nope'))
    with pytest.raises(error_class) as info:
        client.get('/api/staffing/stats')
    assert info.value.status == status_code
    assert len(session.calls) == 1


def test_network_errors(client, session):
    session.queue(requests.ConnectionError('refused'))
    with pytest.raises(NetworkFailure):
        client.get('/api/staffing/stats')
    assert not client.is_fresh('/api/staffing/stats')


def test_empty_body_returns_none(client, session):
    session.queue(FakeResponse(204))
    assert client.mutate('DELETE', '/api/nurse-department-preferences/N1') is None


def test_invalidate_everything(client, session):
    session.queue(FakeResponse(body=1), FakeResponse(body=2))
    client.get('/api/staffing/stats')
    client.get('/api/navigation/menu')
    client.invalidate()
    assert not client.is_fresh('/api/staffing/stats')
    assert not client.is_fresh('/api/navigation/menu')


def test_collection_of():
    assert collection_of('/api/nurse-department-preferences/N1/availability') == '/api/nurse-department-preferences'
    assert collection_of('/api/department-nurse-assignments?q=x') == '/api/department-nurse-assignments'


def test_collection_of_relative_to_prefix():
    assert collection_of('/nurse-department-preferences/N1/availability', '') == '/nurse-department-preferences'
    assert collection_of('/v2/department-nurse-assignments/x', '/v2') == '/v2/department-nurse-assignments'
    assert collection_of('/nurse-department-preferences/N1') == '/nurse-department-preferences'


def test_base_url_ending_in_api_invalidates_the_collection(clock, session):
    client = PollingClient('http://hms.test/api', interval=30, session=session, clock=clock)
    assert client.api_prefix == ''
    session.queue(
        FakeResponse(body=['prefs']),
        FakeResponse(body={'stats': 1}),
        FakeResponse(body={'isAvailable': False}),
    )
    client.get('/nurse-department-preferences')
    client.get('/staffing/stats')

    client.mutate('patch', '/nurse-department-preferences/N1/availability', {'isAvailable': False})
    assert session.calls[-1][1] == 'http://hms.test/api/nurse-department-preferences/N1/availability'
    assert not client.is_fresh('/nurse-department-preferences')
    assert not client.is_fresh('/staffing/stats')
