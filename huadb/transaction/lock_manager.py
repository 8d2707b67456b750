"""Multi-granularity table and row locks."""

import threading
from collections import defaultdict
from enum import Enum, auto


class LockType(Enum):
    IS = auto()
    IX = auto()
    S = auto()
    SIX = auto()
    X = auto()


class LockGranularity(Enum):
    TABLE = auto()
    ROW = auto()


class DeadlockType(Enum):
    NONE = auto()
    WAIT_DIE = auto()
    WOUND_WAIT = auto()
    DETECTION = auto()


_COMPATIBLE = {
    LockType.IS: frozenset({LockType.IS, LockType.IX, LockType.S, LockType.SIX}),
    LockType.IX: frozenset({LockType.IS, LockType.IX}),
    LockType.S: frozenset({LockType.IS, LockType.S}),
    LockType.SIX: frozenset({LockType.IS}),
    LockType.X: frozenset(),
}

_STRENGTH = {LockType.IS: 0, LockType.IX: 1, LockType.S: 2, LockType.SIX: 3, LockType.X: 4}


def compatible(type_a, type_b):
    """Whether two transactions may hold these locks on one resource at once."""
    return type_b in _COMPATIBLE[type_a]


def upgrade(held, requested):
    """The weakest lock that covers both ``held`` and ``requested``."""
    if {held, requested} == {LockType.IX, LockType.S}:
        return LockType.SIX
    return max(held, requested, key=_STRENGTH.__getitem__)


class LockManager:
    """Grants table and row locks to transactions without waiting."""

    def __init__(self):
        self._locks = {}
        self._held = defaultdict(set)
        self._mutex = threading.Lock()
        self.deadlock_type = DeadlockType.NONE

    def _acquire(self, xid, lock_type, resource):
        with self._mutex:
            holders = self._locks.get(resource, {})
            held = holders.get(xid)
            wanted = lock_type if held is None else upgrade(held, lock_type)
            if any(not compatible(wanted, other) for holder, other in holders.items() if holder != xid):
                return False
            self._locks.setdefault(resource, {})[xid] = wanted
            self._held[xid].add(resource)
            return True

    def lock_table(self, xid, lock_type, oid):
        """Lock a table; False if another transaction holds a conflicting lock."""
        return self._acquire(xid, lock_type, (LockGranularity.TABLE, oid))

    def lock_row(self, xid, lock_type, oid, rid):
        """Lock a row; False if another transaction holds a conflicting lock."""
        return self._acquire(xid, lock_type, (LockGranularity.ROW, oid, rid))

    def release_locks(self, xid):
        """Drop every lock held by ``xid``."""
        with self._mutex:
            for resource in self._held.pop(xid, set()):
                holders = self._locks.get(resource)
                if holders is None:
                    continue
                holders.pop(xid, None)
                if not holders:
                    del self._locks[resource]

    def set_deadlock_type(self, deadlock_type):
        self.deadlock_type = deadlock_type