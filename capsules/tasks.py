import logging
import uuid

from celery import shared_task
from django.conf import settings
from django.core.cache import caches
from django.core.cache.backends.redis import RedisCache
from django.db import close_old_connections

from capsules.scheduler import UnlockScheduler

logger = logging.getLogger(__name__)

UNLOCK_LOCK_KEY = 'capsules:unlock-cycle-lock'

# delete the key only while it still holds our token
RELEASE_LOCK_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
end
return 0
"""


def release_unlock_lock(token, backend=None):
    """Drop the cycle lock if this worker still owns it."""
    backend = backend or caches['default']
    if isinstance(backend, RedisCache):
        key = backend.make_and_validate_key(UNLOCK_LOCK_KEY)
        client = backend._cache.get_client(key, write=True)
        return bool(client.eval(RELEASE_LOCK_SCRIPT, 1, key, token))
    # process-local caches: no other worker shares the key
    if backend.get(UNLOCK_LOCK_KEY) == token:
        return backend.delete(UNLOCK_LOCK_KEY)
    return False


@shared_task(name="capsules.tasks.capsule_unlock_handler")
def capsule_unlock_handler():
    """
    One scan-and-notify cycle per beat tick.

    The cache lock keeps cycles from overlapping across worker processes; a
    tick that finds it taken is skipped. Nothing raised here reaches Celery.
    """
    # ints are stored raw by RedisCache, so the release script can compare them
    token = uuid.uuid4().int
    if not caches['default'].add(UNLOCK_LOCK_KEY, token, timeout=settings.CAPSULE_UNLOCK_LOCK_TIMEOUT):
        logger.warning("capsule_unlock_handler skipped, another cycle holds the lock")
        return None

    try:
        report = UnlockScheduler().tick()
    except Exception:
        logger.exception("capsule_unlock_handler failed")
        report = None
    finally:
        release_unlock_lock(token)
        close_old_connections()

    if report is None:
        return None
    return {
        "capsules_notified": report.capsules_notified,
        "entries_notified": report.entries_notified,
        "sends_attempted": report.sends_attempted,
        "sends_failed": report.sends_failed,
        "write_failures": report.write_failures,
    }
