"""
Shared fixtures: an in-memory redis stand-in, a store that fails on demand, and a raw detail factory.
"""

import sys
from pathlib import Path

import fakeredis
import pytest
import redis

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from media_index.store import PersistenceError, RedisStore


class FailingStore(RedisStore):
    """RedisStore that raises PersistenceError for chosen operations on keys containing a marker."""

    def __init__(self, client, fail_ops=(), key_marker=""):
        super().__init__(client)
        self.fail_ops = set(fail_ops)
        self.key_marker = key_marker

    def _call(self, operation, key, fn, *args, **kwargs):
        if operation in self.fail_ops and self.key_marker in key:
            raise PersistenceError(operation, key, redis.ConnectionError("simulated outage"))
        return super()._call(operation, key, fn, *args, **kwargs)


@pytest.fixture
def redis_client():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture
def store(redis_client):
    return RedisStore(redis_client)


@pytest.fixture
def failing_store(redis_client):
    def build(fail_ops, key_marker=""):
        return FailingStore(redis_client, fail_ops=fail_ops, key_marker=key_marker)
    return build


@pytest.fixture
def make_detail():
    """Build a raw detail in the upstream shape; keyword args override descriptor fields."""
    def build(mid=1, cid=6, pid=1, **descriptor):
        fields = {
            "cName": "Action Movies",
            "classTag": "Action/Comedy",
            "area": "USA/Canada",
            "language": "English",
            "year": "2020",
            "initial": "T",
            "dbScore": "7.5",
            "dbId": 1000 + mid,
            "updateTime": "2024-05-01 12:00:00",
            "state": "Released",
            "remarks": "HD",
            "addTime": 1700000000 + mid,
            "subTitle": "",
            "actor": "Jane Doe",
            "director": "John Roe",
        }
        fields.update(descriptor)
        return {
            "id": mid,
            "cid": cid,
            "pid": pid,
            "name": f"Movie {mid}",
            "picture": f"https://img.example/{mid}.jpg",
            "descriptor": fields,
        }
    return build
