import json

import pytest
import requests

from snakeboard.services.errors import ConfigurationError, StorageError
from snakeboard.services.leaderboard import Leaderboard, SqlStore, UpstashStore, build_store
from snakeboard.services.leaderboard import store as store_module


class DictStore:
    def __init__(self, initial=None):
        self.data = dict(initial or {})
        self.writes = 0

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.writes += 1
        self.data[key] = value


class FakeResponse:
    def __init__(self, body, status=200):
        self.body = body
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f'{self.status_code} error')

    def json(self):
        if isinstance(self.body, Exception):
            raise self.body
        return self.body


def test_record_sorts_descending_and_truncates():
    board = Leaderboard(DictStore(), size=5)
    for i, score in enumerate([5, 30, 12, 0, 44, 7, 19]):
        top = board.record(f'p{i}', score, at=1000 + i)
    assert [e['score'] for e in top] == [44, 30, 19, 12, 7]
    assert board.top() == top


def test_ties_keep_arrival_order():
    board = Leaderboard(DictStore())
    board.record('first', 10, at=1)
    board.record('second', 10, at=2)
    top = board.record('third', 10, at=3)
    assert [e['name'] for e in top] == ['first', 'second', 'third']


def test_record_entry_shape():
    store = DictStore()
    board = Leaderboard(store, key='k')
    board.record('Alice', 9, at=1234)
    assert store.data['k'] == [{'name': 'Alice', 'score': 9, 'at': 1234}]


def test_non_list_value_is_treated_as_empty():
    board = Leaderboard(DictStore({'snake:top5': {'oops': 1}}))
    assert board.top() == []
    assert board.record('a', 1, at=1) == [{'name': 'a', 'score': 1, 'at': 1}]


def test_reset():
    store = DictStore()
    board = Leaderboard(store)
    board.record('a', 1, at=1)
    board.reset()
    assert board.top() == []


def test_upstash_get_and_set(monkeypatch):
    calls = []

    def fake_get(url, headers=None, timeout=None):
        calls.append((url, headers, timeout))
        if '/get/' in url:
            return FakeResponse({'result': json.dumps([{'name': 'a', 'score': 3, 'at': 1}])})
        return FakeResponse({'result': 'OK'})

    monkeypatch.setattr(store_module.requests, 'get', fake_get)
    s = UpstashStore('https://kv.example.com/', 'tok', timeout=2)
    assert s.get('snake:top5') == [{'name': 'a', 'score': 3, 'at': 1}]
    s.set('snake:top5', [])
    assert calls[0][0] == 'https://kv.example.com/get/snake%3Atop5'
    assert calls[0][1] == {'Authorization': 'Bearer tok'}
    assert calls[0][2] == 2
    assert calls[1][0] == 'https://kv.example.com/set/snake%3Atop5/%5B%5D'


def test_upstash_missing_key_returns_none(monkeypatch):
    monkeypatch.setattr(store_module.requests, 'get', lambda *a, **kw: FakeResponse({'result': None}))
    assert UpstashStore('https://kv', 'tok').get('x') is None


@pytest.mark.parametrize('response', [
    FakeResponse({'error': 'boom'}, status=500),
    FakeResponse(ValueError('not json')),
    FakeResponse({'result': '{not json'}),
])
def test_upstash_bad_responses_raise_storage_error(monkeypatch, response):
    monkeypatch.setattr(store_module.requests, 'get', lambda *a, **kw: response)
    with pytest.raises(StorageError):
        UpstashStore('https://kv', 'tok').get('x')


def test_upstash_network_failure_raises_storage_error(monkeypatch):
    def boom(*a, **kw):
        raise requests.ConnectionError('unreachable')

    monkeypatch.setattr(store_module.requests, 'get', boom)
    with pytest.raises(StorageError):
        UpstashStore('https://kv', 'tok').set('x', [])


def test_upstash_requires_url_and_token():
    with pytest.raises(ConfigurationError):
        UpstashStore('', 'tok')
    with pytest.raises(ConfigurationError):
        UpstashStore('https://kv', None)


def test_build_store_selects_backend():
    assert isinstance(build_store({'LEADERBOARD_BACKEND': 'sql'}), SqlStore)
    upstash = build_store({'UPSTASH_REDIS_REST_URL': 'https://kv', 'UPSTASH_REDIS_REST_TOKEN': 't'})
    assert isinstance(upstash, UpstashStore)
    with pytest.raises(ConfigurationError):
        build_store({'LEADERBOARD_BACKEND': 'upstash'})
    with pytest.raises(ConfigurationError):
        build_store({'LEADERBOARD_BACKEND': 'floppy'})


def test_sql_store_round_trip(flask_app):
    from snakeboard import db
    s = SqlStore(db)
    assert s.get('snake:top5') is None
    s.set('snake:top5', [{'name': 'a', 'score': 1, 'at': 2}])
    s.set('snake:top5', [{'name': 'b', 'score': 5, 'at': 3}])
    assert s.get('snake:top5') == [{'name': 'b', 'score': 5, 'at': 3}]
