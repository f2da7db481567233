"""Per-opportunity admission locks.

Admission, status transitions and waitlist fills for one opportunity run one at a
time within a process; different opportunities never contend. Across processes the
opportunity row lock taken by `opportunity.lock_opportunity` provides the same
ordering on databases that support `SELECT ... FOR UPDATE`.
"""

import threading
import weakref
from collections.abc import Iterator
from contextlib import contextmanager

from app.core.config import get_settings
from app.exceptions import BusyError
from app.utils.logger import logger


class OpportunityLocks:
    def __init__(self) -> None:
        self._guard = threading.Lock()
        # Entries drop out once no thread holds or waits on the lock
        self._locks: weakref.WeakValueDictionary[int, threading.Lock] = (
            weakref.WeakValueDictionary()
        )

    def _lock_for(self, opportunity_id: int) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(opportunity_id)
            if lock is None:
                lock = self._locks[opportunity_id] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, opportunity_id: int, timeout: float | None = None) -> Iterator[None]:
        """
        Hold the opportunity's lock for the duration of the block.

        Parameters:
            opportunity_id (int): Opportunity to serialize on.
            timeout (float | None): Seconds to wait; defaults to SIGNUP_LOCK_TIMEOUT_SECONDS.

        Raises:
            BusyError: If the lock is not acquired within the timeout.
        """
        if timeout is None:
            timeout = get_settings().SIGNUP_LOCK_TIMEOUT_SECONDS
        lock = self._lock_for(opportunity_id)
        if not lock.acquire(timeout=timeout):
            logger.warning(
                f"Admission lock for opportunity {opportunity_id} not acquired after {timeout:g}s"
            )
            raise BusyError("Opportunity", opportunity_id, timeout)
        try:
            yield
        finally:
            lock.release()


opportunity_locks = OpportunityLocks()
