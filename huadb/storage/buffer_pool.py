"""Page cache in front of the disk, with a separate cache for system tables."""

from dataclasses import dataclass

from huadb.storage.buffer_strategy import LRUBufferStrategy
from huadb.storage.disk import SYSTEM_DATABASE_OID, Disk
from huadb.storage.page import Page
from huadb.table.table_page import TablePage

BUFFER_SIZE = 1024


@dataclass
class BufferPoolEntry:
    db_oid: int
    table_oid: int
    page_id: int
    page: Page


class BufferPool:
    """Caches pages; regular pages are replaced by the strategy, system pages never."""

    capacity = BUFFER_SIZE

    def __init__(self, disk, log_manager):
        self._disk = disk
        self._log_manager = log_manager
        self._strategy = LRUBufferStrategy()
        self._buffers = []
        self._frames = {}
        self._system_buffers = []
        self._system_frames = {}

    def get_page(self, db_oid, table_oid, page_id):
        """Return the cached page, reading it from disk on a miss."""
        if db_oid == SYSTEM_DATABASE_OID:
            buffers, frames = self._system_buffers, self._system_frames
        else:
            buffers, frames = self._buffers, self._frames
        frame = frames.get((table_oid, page_id))
        if frame is not None:
            return buffers[frame].page
        data = self._disk.read_page(Disk.get_file_path(db_oid, table_oid), page_id)
        page = Page(data)
        self._add_to_buffer(db_oid, table_oid, page_id, page)
        return page

    def new_page(self, db_oid, table_oid, page_id):
        """Cache an empty page without touching the disk."""
        page = Page()
        self._add_to_buffer(db_oid, table_oid, page_id, page)
        return page

    def flush(self, regular_only=False):
        """Write dirty pages to disk and empty the cache."""
        for entry in self._buffers:
            self._flush_entry(entry)
        self._buffers.clear()
        self._frames.clear()
        self._strategy = LRUBufferStrategy()
        if not regular_only:
            for entry in self._system_buffers:
                self._flush_system_entry(entry)
            self._system_buffers.clear()
            self._system_frames.clear()

    def clear(self):
        """Drop every cached page without writing; used to simulate a crash."""
        self._buffers.clear()
        self._frames.clear()
        self._system_buffers.clear()
        self._system_frames.clear()
        self._strategy = LRUBufferStrategy()

    def _add_to_buffer(self, db_oid, table_oid, page_id, page):
        entry = BufferPoolEntry(db_oid, table_oid, page_id, page)
        if db_oid == SYSTEM_DATABASE_OID:
            self._system_frames[(table_oid, page_id)] = len(self._system_buffers)
            self._system_buffers.append(entry)
        elif len(self._buffers) >= self.capacity:
            victim = self._strategy.evict()
            self._flush_entry(self._buffers[victim])
            self._strategy.access(victim)
            self._buffers[victim] = entry
            self._frames[(table_oid, page_id)] = victim
        else:
            frame = len(self._buffers)
            self._strategy.access(frame)
            self._frames[(table_oid, page_id)] = frame
            self._buffers.append(entry)

    def _flush_entry(self, entry):
        if entry.page.is_dirty:
            page_lsn = TablePage(entry.page).page_lsn
            self._log_manager.flush_page(entry.table_oid, entry.page_id, page_lsn)
            self._disk.write_page(
                Disk.get_file_path(entry.db_oid, entry.table_oid), entry.page_id, entry.page.data
            )
        self._frames.pop((entry.table_oid, entry.page_id), None)

    def _flush_system_entry(self, entry):
        if entry.page.is_dirty:
            self._disk.write_page(
                Disk.get_file_path(entry.db_oid, entry.table_oid), entry.page_id, entry.page.data
            )
        self._system_frames.pop((entry.table_oid, entry.page_id), None)