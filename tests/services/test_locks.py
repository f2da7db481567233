"""Tests for per-opportunity admission locks."""

import gc
import threading
import pytest

from app.exceptions import BusyError
from app.services.locks import OpportunityLocks


class TestOpportunityLocks:
    def test_hold_releases_on_exit(self):
        locks = OpportunityLocks()

        with locks.hold(1, timeout=0.1):
            pass
        with locks.hold(1, timeout=0.1):
            pass

    def test_hold_releases_on_error(self):
        locks = OpportunityLocks()

        with pytest.raises(RuntimeError):
            with locks.hold(1, timeout=0.1):
                raise RuntimeError("boom")

        with locks.hold(1, timeout=0.1):
            pass

    def test_contended_lock_raises_busy(self):
        locks = OpportunityLocks()
        held = threading.Event()
        release = threading.Event()

        def holder():
            with locks.hold(7, timeout=1):
                held.set()
                release.wait(timeout=5)

        thread = threading.Thread(target=holder)
        thread.start()
        held.wait(timeout=5)
        try:
            with pytest.raises(BusyError) as exc_info:
                with locks.hold(7, timeout=0.05):
                    pass
        finally:
            release.set()
            thread.join(timeout=5)

        assert exc_info.value.identifier == 7
        assert exc_info.value.timeout == 0.05

    def test_different_opportunities_do_not_contend(self):
        locks = OpportunityLocks()

        with locks.hold(1, timeout=0.1):
            with locks.hold(2, timeout=0.1):
                pass

    def test_idle_locks_are_released(self):
        locks = OpportunityLocks()

        for opportunity_id in range(50):
            with locks.hold(opportunity_id, timeout=0.1):
                assert opportunity_id in locks._locks
        gc.collect()

        assert len(locks._locks) == 0
