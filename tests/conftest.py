import asyncio

import pytest

from petspot.capabilities import PERMISSION_GRANTED, Coordinates, PhotoMetadata
from petspot.settings import settings
from petspot.store.models import AnnouncementResult


class FakeRedis:
    """In-memory stand-in for the handful of Redis commands the store uses."""

    def __init__(self):
        self.kv = {}
        self.sets = {}

    def get(self, key):
        return self.kv.get(key)

    def set(self, key, value, px=None, nx=False):
        if nx and key in self.kv:
            return None
        self.kv[key] = value
        return True

    def delete(self, *keys):
        return sum(1 for k in keys if self.kv.pop(k, None) is not None)

    def sadd(self, key, *members):
        s = self.sets.setdefault(key, set())
        before = len(s)
        s.update(members)
        return len(s) - before

    def smembers(self, key):
        return set(self.sets.get(key, set()))

    def eval(self, script, numkeys, *args):
        # only the compare-and-delete lock release script is ever sent
        key, token = args[0], args[1]
        if self.kv.get(key) == token:
            del self.kv[key]
            return 1
        return 0


class FakeAnnouncementService:
    def __init__(self):
        self.result = AnnouncementResult(id="ann-1", managementPassword="123456")
        self.create_error = None
        self.upload_error = None
        self.create_delay = 0
        self.create_calls = []
        self.upload_calls = []

    async def create_announcement(self, payload):
        self.create_calls.append(payload)
        await asyncio.sleep(self.create_delay)
        if self.create_error is not None:
            raise self.create_error
        return self.result

    async def upload_photo(self, announcement_id, photo, management_password):
        self.upload_calls.append((announcement_id, photo, management_password))
        await asyncio.sleep(0)
        if self.upload_error is not None:
            raise self.upload_error


class FakeGeolocation:
    def __init__(self):
        self.permission = PERMISSION_GRANTED
        self.permission_after_request = PERMISSION_GRANTED
        self.coords = Coordinates(lat=52.2297, lng=21.0122)
        self.error = None
        self.delay = 0
        self.requested = 0

    async def current_permission_state(self):
        return self.permission

    async def request_permission(self):
        self.requested += 1
        self.permission = self.permission_after_request
        return self.permission

    async def current_coordinates(self):
        await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.coords


class FakePhotoMetadata:
    def __init__(self):
        self.slow = set()
        self.error = None
        self.calls = []

    async def extract_metadata(self, raw_file_handle):
        self.calls.append(raw_file_handle)
        if raw_file_handle in self.slow:
            await asyncio.sleep(10)
        if self.error is not None:
            raise self.error
        name = raw_file_handle.rsplit("/", 1)[-1]
        return PhotoMetadata(filename=name, sizeBytes=2048)


class FakeClipboard:
    def __init__(self):
        self.copied = []
        self.error = None

    def copy_text(self, text):
        if self.error is not None:
            raise self.error
        self.copied.append(text)


@pytest.fixture
def fake_redis(monkeypatch):
    r = FakeRedis()
    monkeypatch.setattr("petspot.store.announcement_repo.get_redis", lambda: r)
    monkeypatch.setattr("petspot.utils.lock.get_redis", lambda: r)
    return r


@pytest.fixture
def api_client(fake_redis, tmp_path, monkeypatch):
    from fastapi.testclient import TestClient
    from petspot.main import app

    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path / "images"))
    monkeypatch.setattr(settings, "API_KEY", "")
    return TestClient(app)


@pytest.fixture
def service():
    return FakeAnnouncementService()


@pytest.fixture
def geolocation():
    return FakeGeolocation()


@pytest.fixture
def photo_metadata():
    return FakePhotoMetadata()


@pytest.fixture
def clipboard():
    return FakeClipboard()
