"""
Announcements as JSON documents in Redis.

Layout:
- ANNOUNCEMENT_KEY_PREFIX + id -> JSON record (public fields + managementPasswordHash)
- announcements:ids            -> set of ids, used for listing
- microchip:<number>           -> id of the announcement carrying that chip
"""

import json
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from petspot.observability.logging import log
from petspot.settings import settings
from petspot.store.redis_conn import get_redis
from petspot.utils.lock import redis_lock

IDS_KEY = "announcements:ids"
MICROCHIP_PREFIX = "microchip:"
PRIVATE_FIELDS = ("managementPasswordHash",)


class DuplicateMicrochipError(Exception):
    def __init__(self, microchip_number: str, existing_id: str):
        super().__init__(f"microchip {microchip_number} already used by {existing_id}")
        self.microchip_number = microchip_number
        self.existing_id = existing_id


def _key(announcement_id: str) -> str:
    return f"{settings.ANNOUNCEMENT_KEY_PREFIX}{announcement_id}"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def to_public(record: dict) -> dict:
    return {k: v for k, v in record.items() if k not in PRIVATE_FIELDS}


def load_announcement(announcement_id: str) -> Optional[dict]:
    r = get_redis()
    raw = r.get(_key(announcement_id))
    if not raw:
        return None
    return json.loads(raw)


def save_announcement(record: dict) -> None:
    r = get_redis()
    record["updatedAt"] = _now_iso()
    r.set(_key(record["id"]), json.dumps(record, ensure_ascii=False))
    r.sadd(IDS_KEY, record["id"])


def list_announcements() -> List[dict]:
    r = get_redis()
    out = []
    for announcement_id in sorted(r.smembers(IDS_KEY) or []):
        record = load_announcement(announcement_id)
        if record is not None:
            out.append(record)
    out.sort(key=lambda rec: rec.get("createdAt") or "", reverse=True)
    return out


def find_by_microchip(microchip_number: str) -> Optional[str]:
    r = get_redis()
    return r.get(f"{MICROCHIP_PREFIX}{microchip_number}")


def _insert(fields: dict, password_hash: str) -> dict:
    now = _now_iso()
    record = dict(fields)
    record.update({
        "id": uuid.uuid4().hex,
        "photoUrl": None,
        "createdAt": now,
        "updatedAt": now,
        "managementPasswordHash": password_hash,
    })
    save_announcement(record)
    return record


def create_announcement(fields: dict, password_hash: str) -> dict:
    """
    Insert a new announcement. A microchip number may only be used once;
    the per-chip lock keeps the check and the insert together.
    """
    chip = fields.get("microchipNumber")
    if not chip:
        record = _insert(fields, password_hash)
        log(event="announcement_stored", announcementId=record["id"])
        return record

    with redis_lock(f"microchip:{chip}"):
        existing = find_by_microchip(chip)
        if existing:
            raise DuplicateMicrochipError(chip, existing)
        record = _insert(fields, password_hash)
        get_redis().set(f"{MICROCHIP_PREFIX}{chip}", record["id"])
    log(event="announcement_stored", announcementId=record["id"], hasMicrochip=True)
    return record


def set_photo_url(announcement_id: str, photo_url: str) -> Optional[dict]:
    record = load_announcement(announcement_id)
    if record is None:
        return None
    record["photoUrl"] = photo_url
    save_announcement(record)
    return record
