from redis import Redis
from typing import Optional
from redis.lock import Lock

from distribution.src import exceptions
from distribution.src.constants import REDIS_HOST, REDIS_PORT, REDIS_PASSWORD

# Redis client (single connection)
redisClient = Redis(
    host=REDIS_HOST,
    port=REDIS_PORT,
    password=REDIS_PASSWORD,
    decode_responses=True,
)


def acquireLock(resourceName: str, timeOut: int) -> Optional[Lock]:
    """
    Try once to take a Redis-based mutex lock on a resource.

    Args:
        resourceName (str): Name of the resource to lock, stored as `lock:<name>`.
        timeOut (int): Lock expiration in seconds (auto-released after this).

    Returns:
        Lock | None: The Redis lock object if it was free, None if another
        holder owns it. The call never waits.
    """
    try:
        lock = redisClient.lock(f"lock:{resourceName}", timeout=timeOut)
        return lock if lock.acquire(blocking=False) else None
    except Exception as e:
        exceptions.handle(e)


def releaseLock(lock: Optional[Lock]) -> None:
    """
    Release a previously acquired Redis lock.

    Args:
        lock (Lock | None): The Redis lock object to release. Does nothing if None.

    Notes:
        - Ensures only the owner can release the lock.
        - Silently ignores invalid/unowned locks.
    """
    if lock and lock.locked() and lock.owned():
        lock.release()
