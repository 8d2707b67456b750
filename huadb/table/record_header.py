"""Per-record header holding deletion and visibility information."""

import struct
from dataclasses import dataclass

from huadb.transaction.transaction_manager import NULL_CID, NULL_XID

_FORMAT = struct.Struct("<?III")
RECORD_HEADER_SIZE = _FORMAT.size


@dataclass
class RecordHeader:
    deleted: bool = False
    xmin: int = NULL_XID
    xmax: int = NULL_XID
    cid: int = NULL_CID

    def serialize(self):
        """Return the header's on-page bytes."""
        return _FORMAT.pack(self.deleted, self.xmin, self.xmax, self.cid)

    @classmethod
    def deserialize(cls, data):
        """Read a header from the start of ``data``."""
        if len(data) < RECORD_HEADER_SIZE:
            raise ValueError(f"record header needs {RECORD_HEADER_SIZE} bytes, got {len(data)}")
        deleted, xmin, xmax, cid = _FORMAT.unpack_from(data)
        return cls(deleted, xmin, xmax, cid)