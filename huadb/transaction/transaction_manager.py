"""Transaction ids, command ids and snapshots."""

import threading
from enum import Enum, auto

NULL_XID = 0
DDL_XID = 1
FIRST_XID = 2
NULL_CID = 0
FIRST_CID = 0


class IsolationLevel(Enum):
    READ_COMMITTED = auto()
    REPEATABLE_READ = auto()
    SERIALIZABLE = auto()


DEFAULT_ISOLATION_LEVEL = IsolationLevel.READ_COMMITTED


class TransactionManager:
    """Hands out transaction ids and tracks active transactions."""

    def __init__(self, lock_manager, next_xid=FIRST_XID):
        self._lock_manager = lock_manager
        self._next_xid = next_xid
        self._cids = {}
        self._snapshots = {}
        self._mutex = threading.Lock()

    @property
    def next_xid(self):
        return self._next_xid

    def set_next_xid(self, next_xid):
        """Raise the next xid; used after recovery. Never lowers it."""
        with self._mutex:
            if next_xid > self._next_xid:
                self._next_xid = next_xid

    def get_cid_and_increment(self, xid):
        """Return the current command id of ``xid`` and advance it."""
        with self._mutex:
            if xid not in self._cids:
                raise KeyError(f"xid {xid} not found")
            cid = self._cids[xid]
            self._cids[xid] = cid + 1
            return cid

    def begin(self):
        """Start a transaction and return its xid."""
        with self._mutex:
            xid = self._next_xid
            self._next_xid += 1
            self._snapshots[xid] = frozenset(self._cids)
            self._cids[xid] = FIRST_CID
            return xid

    def _finish(self, xid, action):
        with self._mutex:
            if xid not in self._cids:
                raise KeyError(f"xid {xid} not found in command ids during {action}")
            if xid not in self._snapshots:
                raise KeyError(f"xid {xid} not found in snapshots during {action}")
        self._lock_manager.release_locks(xid)
        with self._mutex:
            self._cids.pop(xid, None)
            self._snapshots.pop(xid, None)

    def commit(self, xid):
        self._finish(xid, "commit")

    def rollback(self, xid):
        self._finish(xid, "rollback")

    def get_snapshot(self, xid):
        """The set of xids that were active when ``xid`` began."""
        with self._mutex:
            return set(self._snapshots.get(xid, ()))

    def active_transactions(self):
        with self._mutex:
            return set(self._cids)