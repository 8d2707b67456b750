"""File-backed storage for table pages and the write-ahead log."""

import os
import shutil
from pathlib import Path

from huadb.storage.page import DB_PAGE_SIZE

BASE_PATH = "huadb_data"
LOG_NAME = "huadb.log"
LOG_SEGMENT_SIZE = 1 << 24
SYSTEM_DATABASE_OID = 0


class Disk:
    """Reads and writes pages and log bytes under a base directory."""

    def __init__(self, base_path=BASE_PATH):
        self._base = Path(base_path)
        self._base.mkdir(parents=True, exist_ok=True)
        self._files = {}
        self._access_count = 0
        log_path = self._resolve(LOG_NAME)
        if not log_path.is_file():
            log_path.touch()
        self._log = open(log_path, "r+b")
        self._log.truncate(LOG_SEGMENT_SIZE)

    @property
    def base_path(self):
        return self._base

    @property
    def access_count(self):
        """Number of page reads and writes outside the system database."""
        return self._access_count

    def _resolve(self, path):
        return self._base / path

    def directory_exists(self, path):
        return self._resolve(path).is_dir()

    def create_directory(self, path):
        self._resolve(path).mkdir(exist_ok=True)

    def remove_directory(self, path):
        target = self._resolve(path)
        prefix = str(Path(path)) + os.sep
        for open_path in [p for p in self._files if p.startswith(prefix)]:
            self.close_file(open_path)
        shutil.rmtree(target, ignore_errors=True)

    def file_exists(self, path):
        return self._resolve(path).is_file()

    def create_file(self, path):
        self._resolve(path).touch()

    def remove_file(self, path):
        self.close_file(path)
        target = self._resolve(path)
        if target.exists():
            target.unlink()

    def open_file(self, path):
        target = self._resolve(path)
        if not target.is_file():
            raise FileNotFoundError(f"file {path} does not exist")
        self.close_file(path)
        self._files[path] = open(target, "r+b")

    def close_file(self, path):
        handle = self._files.pop(path, None)
        if handle is not None:
            handle.close()

    def _handle(self, path):
        if path not in self._files:
            self.open_file(path)
        return self._files[path]

    def read_page(self, path, page_id):
        """Return the bytes of one page, zero-filled past the end of the file."""
        if self._get_oid(path)[0] != SYSTEM_DATABASE_OID:
            self._access_count += 1
        handle = self._handle(path)
        handle.seek(page_id * DB_PAGE_SIZE)
        return handle.read(DB_PAGE_SIZE).ljust(DB_PAGE_SIZE, b"\0")

    def write_page(self, path, page_id, data):
        """Write one page; does nothing if the file has been removed."""
        if len(data) != DB_PAGE_SIZE:
            raise ValueError(f"page data must be {DB_PAGE_SIZE} bytes, got {len(data)}")
        if not self.file_exists(path):
            return
        handle = self._handle(path)
        if self._get_oid(path)[0] != SYSTEM_DATABASE_OID:
            self._access_count += 1
        handle.seek(page_id * DB_PAGE_SIZE)
        handle.write(bytes(data))
        handle.flush()

    def read_log(self, offset, count):
        self._log.seek(offset)
        return self._log.read(count)

    def write_log(self, offset, data):
        self._log.seek(offset)
        self._log.write(bytes(data))
        self._log.flush()

    @staticmethod
    def get_file_path(db_oid, table_oid):
        return f"{db_oid}/{table_oid}"

    @staticmethod
    def _get_oid(path):
        db_oid, table_oid = str(path).split("/")[:2]
        return int(db_oid), int(table_oid)

    def close(self):
        for handle in self._files.values():
            handle.close()
        self._files.clear()
        if not self._log.closed:
            self._log.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()