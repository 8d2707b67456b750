"""Write-ahead log buffering, flushing, checkpoints and recovery analysis."""

import threading

from huadb.log.log_record import (
    NULL_LSN,
    BeginCheckpointLog,
    BeginLog,
    CommitLog,
    LogType,
    RollbackLog,
)
from huadb.log.log_records import (
    NULL_PAGE_ID,
    DeleteLog,
    EndCheckpointLog,
    InsertLog,
    NewPageLog,
    deserialize_log,
)
from huadb.transaction.transaction_manager import DDL_XID, NULL_XID

FIRST_LSN = 1
MASTER_RECORD_NAME = "huadb_master_record"
NEXT_LSN_NAME = "huadb_next_lsn"


class LogManager:
    """Assigns lsns, keeps the active transaction and dirty page tables, and writes the log."""

    def __init__(self, disk, transaction_manager, next_lsn=FIRST_LSN):
        self._disk = disk
        self._transaction_manager = transaction_manager
        self._buffer_pool = None
        self._catalog = None
        self._att = {}
        self._dpt = {}
        self._next_lsn = next_lsn
        self._flushed_lsn = next_lsn - 1
        self._buffer = []
        self._redo_count = 0
        self._mutex = threading.RLock()

    def set_buffer_pool(self, buffer_pool):
        self._buffer_pool = buffer_pool

    def set_catalog(self, catalog):
        self._catalog = catalog

    @property
    def next_lsn(self):
        return self._next_lsn

    @property
    def flushed_lsn(self):
        return self._flushed_lsn

    @property
    def redo_count(self):
        return self._redo_count

    @property
    def active_transactions(self):
        """Copy of the active transaction table: xid to last lsn."""
        return dict(self._att)

    @property
    def dirty_pages(self):
        """Copy of the dirty page table: (oid, page_id) to recovery lsn."""
        return dict(self._dpt)

    @property
    def pending(self):
        """Records appended but not yet written to disk."""
        return tuple(self._buffer)

    def _path(self, name):
        return self._disk.base_path / name

    def clear(self):
        """Drop buffered records without writing them; used to simulate a crash."""
        with self._mutex:
            self._buffer.clear()

    def set_dirty(self, oid, page_id, lsn):
        with self._mutex:
            self._dpt.setdefault((oid, page_id), lsn)

    def _require_active(self, xid, action):
        if xid not in self._att:
            raise KeyError(f"{xid} does not exist in att (in {action})")

    def _append(self, record):
        lsn = self._next_lsn
        self._next_lsn += record.size
        record.lsn = lsn
        self._buffer.append(record)
        return lsn

    def append_insert_log(self, xid, oid, page_id, slot_id, offset, size, new_record):
        with self._mutex:
            self._require_active(xid, "append_insert_log")
            record_bytes = bytes(new_record[:size])
            if len(record_bytes) != size:
                raise ValueError(f"record holds {len(record_bytes)} bytes, expected {size}")
            record = InsertLog(xid, self._att[xid], oid, page_id, slot_id, offset, record_bytes)
            lsn = self._append(record)
            self._att[xid] = lsn
            self._dpt.setdefault((oid, page_id), lsn)
            return lsn

    def append_delete_log(self, xid, oid, page_id, slot_id):
        with self._mutex:
            self._require_active(xid, "append_delete_log")
            lsn = self._append(DeleteLog(xid, self._att[xid], oid, page_id, slot_id))
            self._att[xid] = lsn
            self._dpt.setdefault((oid, page_id), lsn)
            return lsn

    def append_new_page_log(self, xid, oid, prev_page_id, page_id):
        with self._mutex:
            if xid == DDL_XID:
                prev_lsn = NULL_LSN
            else:
                self._require_active(xid, "append_new_page_log")
                prev_lsn = self._att[xid]
            lsn = self._append(NewPageLog(xid, prev_lsn, oid, prev_page_id, page_id))
            if xid != DDL_XID:
                self._att[xid] = lsn
            self._dpt.setdefault((oid, page_id), lsn)
            if prev_page_id != NULL_PAGE_ID:
                self._dpt.setdefault((oid, prev_page_id), lsn)
            return lsn

    def append_begin_log(self, xid):
        with self._mutex:
            if xid in self._att:
                raise ValueError(f"{xid} already exists in att")
            lsn = self._append(BeginLog(xid, NULL_LSN))
            self._att[xid] = lsn
            return lsn

    def _append_end_log(self, xid, record_cls, action):
        with self._mutex:
            self._require_active(xid, action)
            lsn = self._append(record_cls(xid, self._att[xid]))
            self.flush(lsn)
            del self._att[xid]
            return lsn

    def append_commit_log(self, xid):
        return self._append_end_log(xid, CommitLog, "append_commit_log")

    def append_rollback_log(self, xid):
        return self._append_end_log(xid, RollbackLog, "append_rollback_log")

    def checkpoint(self, is_async=False):
        """Write a checkpoint, record its start in the master record and return the end lsn."""
        with self._mutex:
            begin_lsn = self._append(BeginCheckpointLog(NULL_XID, NULL_LSN))
            end_lsn = self._append(EndCheckpointLog(NULL_XID, NULL_LSN, self._att, self._dpt))
            self.flush(end_lsn)
            self._path(MASTER_RECORD_NAME).write_text(str(begin_lsn))
            return end_lsn

    def flush_page(self, table_oid, page_id, page_lsn):
        """Make the log durable up to ``page_lsn`` before the page is written."""
        with self._mutex:
            self.flush(page_lsn)
            self._dpt.pop((table_oid, page_id), None)

    def flush(self, lsn=NULL_LSN):
        """Write buffered records up to ``lsn``, or all of them for NULL_LSN."""
        with self._mutex:
            last_size = 0
            last_lsn = self._flushed_lsn
            written = 0
            for record in self._buffer:
                if lsn != NULL_LSN and record.lsn > lsn:
                    break
                data = record.serialize()
                self._disk.write_log(record.lsn, data)
                last_size = len(data)
                last_lsn = record.lsn
                written += 1
            del self._buffer[:written]
            if lsn == NULL_LSN and last_lsn > self._flushed_lsn:
                self._flushed_lsn = last_lsn
            elif lsn > self._flushed_lsn:
                self._flushed_lsn = lsn
            self._path(NEXT_LSN_NAME).write_text(str(self._flushed_lsn + last_size))

    def recover(self):
        """Restore log positions and rebuild the active transaction and dirty page tables."""
        with self._mutex:
            self._analyze()

    def _analyze(self):
        next_lsn_path = self._path(NEXT_LSN_NAME)
        if next_lsn_path.is_file():
            self._next_lsn = int(next_lsn_path.read_text().strip())
            self._flushed_lsn = self._next_lsn - 1
        start = FIRST_LSN
        if self._disk.file_exists(MASTER_RECORD_NAME):
            start = int(self._path(MASTER_RECORD_NAME).read_text().strip())
        if start >= self._next_lsn:
            return
        chunk = memoryview(self._disk.read_log(start, self._next_lsn - start))
        position = 0
        max_xid = NULL_XID
        while position < len(chunk):
            record = deserialize_log(chunk[position:])
            record.lsn = start + position
            self._apply(record)
            if record.xid not in (NULL_XID, DDL_XID):
                max_xid = max(max_xid, record.xid)
            position += record.size
        if max_xid != NULL_XID:
            self._transaction_manager.set_next_xid(max_xid + 1)

    def _apply(self, record):
        kind = record.log_type
        if kind == LogType.BEGIN:
            self._att[record.xid] = record.lsn
        elif kind in (LogType.INSERT, LogType.DELETE):
            self._att[record.xid] = record.lsn
            self._dpt.setdefault((record.oid, record.page_id), record.lsn)
        elif kind == LogType.NEW_PAGE:
            if record.xid != DDL_XID:
                self._att[record.xid] = record.lsn
            self._dpt.setdefault((record.oid, record.page_id), record.lsn)
            if record.prev_page_id != NULL_PAGE_ID:
                self._dpt.setdefault((record.oid, record.prev_page_id), record.lsn)
        elif kind in (LogType.COMMIT, LogType.ROLLBACK):
            self._att.pop(record.xid, None)
        elif kind == LogType.END_CHECKPOINT:
            for xid, lsn in record.att.items():
                self._att.setdefault(xid, lsn)
            for key, lsn in record.dpt.items():
                self._dpt.setdefault(key, lsn)

    def increment_redo_count(self):
        self._redo_count += 1