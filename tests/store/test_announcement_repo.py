from unittest.mock import patch

import pytest

from petspot.api.auth import hash_password, verify_password
from petspot.store import announcement_repo as repo
from petspot.utils.lock import redis_lock

FIELDS = {
    "species": "DOG",
    "sex": "MALE",
    "lastSeenDate": "2025-12-03",
    "status": "MISSING",
    "locationLatitude": 52.2,
    "locationLongitude": 21.0,
    "email": "owner@example.com",
}


def test_create_and_load(fake_redis):
    record = repo.create_announcement(dict(FIELDS), "hash")
    loaded = repo.load_announcement(record["id"])
    assert loaded["species"] == "DOG"
    assert loaded["managementPasswordHash"] == "hash"
    assert loaded["createdAt"]
    assert repo.to_public(loaded).get("managementPasswordHash") is None
    assert record["id"] in fake_redis.smembers(repo.IDS_KEY)


def test_load_missing_returns_none(fake_redis):
    assert repo.load_announcement("nope") is None


def test_microchip_is_unique(fake_redis):
    first = repo.create_announcement(dict(FIELDS, microchipNumber="123456"), "h")
    assert repo.find_by_microchip("123456") == first["id"]

    with pytest.raises(repo.DuplicateMicrochipError) as exc:
        repo.create_announcement(dict(FIELDS, microchipNumber="123456"), "h")
    assert exc.value.existing_id == first["id"]
    # the lock is released on both paths
    assert "lock:microchip:123456" not in fake_redis.kv


def test_set_photo_url(fake_redis):
    record = repo.create_announcement(dict(FIELDS), "h")
    updated = repo.set_photo_url(record["id"], "/images/x.png")
    assert updated["photoUrl"] == "/images/x.png"
    assert repo.load_announcement(record["id"])["photoUrl"] == "/images/x.png"
    assert repo.set_photo_url("nope", "/images/y.png") is None


def test_list_announcements(fake_redis):
    a = repo.create_announcement(dict(FIELDS), "h")
    b = repo.create_announcement(dict(FIELDS, species="CAT"), "h")
    ids = {rec["id"] for rec in repo.list_announcements()}
    assert ids == {a["id"], b["id"]}


@patch("time.sleep")
def test_lock_held_elsewhere_fails(mock_sleep, fake_redis):
    fake_redis.set("lock:microchip:1", "someone-else")
    with pytest.raises(RuntimeError, match="Could not acquire lock"):
        with redis_lock("microchip:1"):
            pass
    assert mock_sleep.call_count == 5
    # a lock owned by someone else is never released by us
    assert fake_redis.get("lock:microchip:1") == "someone-else"


def test_password_hash_roundtrip():
    stored = hash_password("123456")
    assert verify_password("123456", stored)
    assert not verify_password("654321", stored)
    assert not verify_password("123456", "garbage")
