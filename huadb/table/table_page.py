"""Slotted table pages laid over a raw page buffer."""

import struct

from huadb.log.log_records import NULL_PAGE_ID
from huadb.storage.page import DB_PAGE_SIZE

_PAGE_LSN = struct.Struct("<Q")
_NEXT_PAGE_ID = struct.Struct("<i")
_POINTER = struct.Struct("<H")

_PAGE_LSN_OFFSET = 0
_NEXT_PAGE_ID_OFFSET = _PAGE_LSN_OFFSET + _PAGE_LSN.size
_LOWER_OFFSET = _NEXT_PAGE_ID_OFFSET + _NEXT_PAGE_ID.size
_UPPER_OFFSET = _LOWER_OFFSET + _POINTER.size

# page_lsn(8) + next_page_id(4) + lower(2) + upper(2)
PAGE_HEADER_SIZE = _UPPER_OFFSET + _POINTER.size

_SLOT = struct.Struct("<HH")
SLOT_SIZE = _SLOT.size


class TablePage:
    """View of a page as a header, a slot array growing up and records growing down."""

    def __init__(self, page):
        self.page = page

    def _read(self, fmt, offset):
        return fmt.unpack_from(self.page.data, offset)[0]

    def _write(self, fmt, offset, value):
        fmt.pack_into(self.page.data, offset, value)
        self.page.set_dirty()

    def init(self):
        """Reset the header of a freshly allocated page."""
        _PAGE_LSN.pack_into(self.page.data, _PAGE_LSN_OFFSET, 0)
        _NEXT_PAGE_ID.pack_into(self.page.data, _NEXT_PAGE_ID_OFFSET, NULL_PAGE_ID)
        _POINTER.pack_into(self.page.data, _LOWER_OFFSET, PAGE_HEADER_SIZE)
        _POINTER.pack_into(self.page.data, _UPPER_OFFSET, DB_PAGE_SIZE)
        self.page.set_dirty()

    @property
    def page_lsn(self):
        return self._read(_PAGE_LSN, _PAGE_LSN_OFFSET)

    @property
    def next_page_id(self):
        return self._read(_NEXT_PAGE_ID, _NEXT_PAGE_ID_OFFSET)

    @property
    def lower(self):
        """Offset of the end of the slot array."""
        return self._read(_POINTER, _LOWER_OFFSET)

    @property
    def upper(self):
        """Offset of the start of the record area."""
        return self._read(_POINTER, _UPPER_OFFSET)

    def record_count(self):
        """Number of slots in use on the page."""
        return (self.lower - PAGE_HEADER_SIZE) // SLOT_SIZE

    def free_space_size(self):
        """Bytes left for a record once room for its slot is reserved."""
        lower, upper = self.lower, self.upper
        if upper < lower + SLOT_SIZE:
            return 0
        return upper - lower - SLOT_SIZE

    def set_next_page_id(self, page_id):
        self._write(_NEXT_PAGE_ID, _NEXT_PAGE_ID_OFFSET, page_id)

    def set_page_lsn(self, page_lsn):
        self._write(_PAGE_LSN, _PAGE_LSN_OFFSET, page_lsn)