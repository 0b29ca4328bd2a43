import time
import uuid
from contextlib import contextmanager

from petspot.store.redis_conn import get_redis

RELEASE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
else
    return 0
end
"""


@contextmanager
def redis_lock(name: str, ttl_ms: int = 5000, attempts: int = 5, wait_sec: float = 0.1):
    """
    Short distributed lock (SET NX PX). Spins a few times before giving up
    with RuntimeError; released only by the holder of the token.
    """
    r = get_redis()
    key = f"lock:{name}"
    token = uuid.uuid4().hex
    acquired = r.set(key, token, px=ttl_ms, nx=True)

    try:
        if not acquired:
            for _ in range(attempts):
                time.sleep(wait_sec)
                if r.set(key, token, px=ttl_ms, nx=True):
                    acquired = True
                    break

            if not acquired:
                raise RuntimeError(f"Could not acquire lock {key}")

        yield
    finally:
        if acquired:
            r.eval(RELEASE_SCRIPT, 1, key, token)
