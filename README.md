# huadb

Building blocks for the storage and recovery layer of a small relational
database used for teaching: fixed-size pages, a disk manager, a page cache,
slotted table pages, binary write-ahead log records with a log manager, and
transaction and lock bookkeeping. It has no dependencies outside the standard
library.

## Modules

- `huadb.storage.page` – `Page`, a 4096-byte (`DB_PAGE_SIZE`) `bytearray`
  with a dirty flag (`set_dirty()`, `is_dirty`).
- `huadb.storage.disk` – `Disk` keeps table files at `"<db_oid>/<table_oid>"`
  under a base directory (`Disk.get_file_path`). It also keeps a log file
  `huadb.log` that is sized to `LOG_SEGMENT_SIZE` bytes.
  `read_page` returns one page and zero-fills it past the end of the file.
  `write_page` does nothing if the table file is missing. `read_log` and
  `write_log` read and write at byte offsets in the log. `access_count` counts
  page reads and writes outside the system database (oid 0). `Disk` is a
  context manager; `close()` closes every open file.
- `huadb.storage.buffer_strategy` – the abstract `BufferStrategy` and
  `LRUBufferStrategy`. `evict()` returns the least recently accessed frame and
  raises `LookupError` when no frame is tracked.
- `huadb.storage.buffer_pool` – `BufferPool` caches up to `BUFFER_SIZE`
  (1024) regular pages and evicts them by LRU. It keeps pages of the system
  database in a separate cache that is never evicted. Before a dirty regular
  page is written, it calls `LogManager.flush_page` with the page's LSN.
  `flush()` writes dirty pages and empties the cache; `flush(True)` leaves the
  system cache alone. `clear()` drops everything without writing.
- `huadb.table.record_header` – `RecordHeader` (a dataclass: `deleted`,
  `xmin`, `xmax`, `cid`) with `serialize()` and `deserialize()`. The header
  takes `RECORD_HEADER_SIZE` bytes.
- `huadb.table.table_page` – `TablePage`, a view of a `Page` as a 16-byte
  header (`page_lsn`, `next_page_id`, `lower`, `upper`), a slot array that
  grows up and a record area that grows down. It offers `init()`,
  `record_count()`, `free_space_size()`, `set_next_page_id()` and
  `set_page_lsn()`.
- `huadb.log.log_record` – `LogType`, the base `LogRecord` (`serialize()`,
  `size`, `lsn`), and the header-only records `BeginLog`, `CommitLog`,
  `RollbackLog` and `BeginCheckpointLog`.
- `huadb.log.log_records` – `InsertLog`, `DeleteLog`, `NewPageLog` and
  `EndCheckpointLog`, which carries the active transaction and dirty page
  tables. `deserialize_log(data)` decodes any complete serialized record and
  raises `ValueError` on truncated data or an unknown type.
- `huadb.log.log_manager` – `LogManager` assigns LSNs as byte offsets into
  the log and buffers records. It maintains the active transaction table
  (`active_transactions`) and the dirty page table (`dirty_pages`).
  - `append_*_log` methods add records to the buffer.
  - `append_commit_log` and `append_rollback_log` flush the log.
  - `flush(lsn)` writes buffered records and stores the next LSN in
    `huadb_next_lsn`.
  - `checkpoint()` writes begin and end checkpoint records and stores the
    begin LSN in `huadb_master_record`.
  - `recover()` reads those files, scans the log from the checkpoint (or from
    the first LSN), rebuilds both tables and raises the transaction manager's
    next xid.
- `huadb.transaction.transaction_manager` – `TransactionManager` handles
  `begin`, `commit` and `rollback`, `get_cid_and_increment`, `get_snapshot`
  (the xids that were active when a transaction began) and
  `active_transactions`. Unknown xids raise `KeyError`. `IsolationLevel` is
  defined here too.
- `huadb.transaction.lock_manager` – `LockType` (IS, IX, S, SIX, X) with the
  standard `compatible` matrix and `upgrade` rule. `LockManager.lock_table`
  and `lock_row` grant a lock at once, or return `False` if another
  transaction holds a conflicting lock. `release_locks(xid)` drops all locks
  of `xid`.

## Example

```python
from huadb.storage.disk import Disk
from huadb.storage.buffer_pool import BufferPool
from huadb.transaction.lock_manager import LockManager
from huadb.transaction.transaction_manager import TransactionManager
from huadb.log.log_manager import LogManager

with Disk("huadb_data") as disk:
    transactions = TransactionManager(LockManager())
    log_manager = LogManager(disk, transactions)
    buffer_pool = BufferPool(disk, log_manager)
    log_manager.set_buffer_pool(buffer_pool)

    xid = transactions.begin()
    log_manager.append_begin_log(xid)
    log_manager.append_commit_log(xid)
    transactions.commit(xid)

    buffer_pool.flush()
```

## What it does not do

- There is no SQL: no parser, planner, optimizer or executor, and no shell,
  server or command-line program.
- There is no table or catalog layer. `TablePage` reads and sets page header
  fields only; it does not insert, delete or fetch records.
- `LogManager.recover()` runs the analysis pass only. It does not redo or
  undo page changes, and log records do not apply themselves to pages.
- `LockManager` never waits. The value given to `set_deadlock_type` is stored
  but has no effect.

## Tests

```
pip install ".[test]"
pytest
```