"""Log records that carry page changes and checkpoint tables, and record decoding."""

import struct

from huadb.log.log_record import (
    BeginCheckpointLog,
    BeginLog,
    CommitLog,
    LogRecord,
    LogType,
    RollbackLog,
    read_prefix,
    read_type,
    unpack,
)

NULL_PAGE_ID = -1

_INSERT = struct.Struct("<IiHHH")
_DELETE = struct.Struct("<IiH")
_NEW_PAGE = struct.Struct("<Iii")
_COUNT = struct.Struct("<Q")
_ATT_ENTRY = struct.Struct("<IQ")
_DPT_ENTRY = struct.Struct("<IiQ")


class InsertLog(LogRecord):
    """A record inserted at ``page_offset`` into slot ``slot_id`` of a page."""

    def __init__(self, xid, prev_lsn, oid, page_id, slot_id, page_offset, record):
        super().__init__(LogType.INSERT, xid, prev_lsn)
        self.oid = oid
        self.page_id = page_id
        self.slot_id = slot_id
        self.page_offset = page_offset
        self.record = bytes(record)

    @property
    def record_size(self):
        return len(self.record)

    def serialize(self):
        """Return the record's bytes as written to the log."""
        return (
            self._header()
            + _INSERT.pack(self.oid, self.page_id, self.slot_id, self.page_offset, self.record_size)
            + self.record
        )

    @classmethod
    def deserialize(cls, data):
        """Build the record from the bytes that follow its type field."""
        xid, prev_lsn, offset = read_prefix(data)
        oid, page_id, slot_id, page_offset, record_size = unpack(_INSERT, data, offset)
        offset += _INSERT.size
        record = bytes(data[offset:offset + record_size])
        if len(record) != record_size:
            raise ValueError("truncated log record: record bytes missing")
        return cls(xid, prev_lsn, oid, page_id, slot_id, page_offset, record)


class DeleteLog(LogRecord):
    """A record in slot ``slot_id`` of a page marked deleted."""

    def __init__(self, xid, prev_lsn, oid, page_id, slot_id):
        super().__init__(LogType.DELETE, xid, prev_lsn)
        self.oid = oid
        self.page_id = page_id
        self.slot_id = slot_id

    def serialize(self):
        """Return the record's bytes as written to the log."""
        return self._header() + _DELETE.pack(self.oid, self.page_id, self.slot_id)

    @classmethod
    def deserialize(cls, data):
        """Build the record from the bytes that follow its type field."""
        xid, prev_lsn, offset = read_prefix(data)
        oid, page_id, slot_id = unpack(_DELETE, data, offset)
        return cls(xid, prev_lsn, oid, page_id, slot_id)


class NewPageLog(LogRecord):
    """A page appended to a table after ``prev_page_id``."""

    def __init__(self, xid, prev_lsn, oid, prev_page_id, page_id):
        super().__init__(LogType.NEW_PAGE, xid, prev_lsn)
        self.oid = oid
        self.prev_page_id = prev_page_id
        self.page_id = page_id

    def serialize(self):
        """Return the record's bytes as written to the log."""
        return self._header() + _NEW_PAGE.pack(self.oid, self.prev_page_id, self.page_id)

    @classmethod
    def deserialize(cls, data):
        """Build the record from the bytes that follow its type field."""
        xid, prev_lsn, offset = read_prefix(data)
        oid, prev_page_id, page_id = unpack(_NEW_PAGE, data, offset)
        return cls(xid, prev_lsn, oid, prev_page_id, page_id)


class EndCheckpointLog(LogRecord):
    """Checkpoint end carrying the active transaction table and dirty page table.

    ``att`` maps xid to last lsn; ``dpt`` maps ``(oid, page_id)`` to recovery lsn.
    """

    def __init__(self, xid, prev_lsn, att, dpt):
        super().__init__(LogType.END_CHECKPOINT, xid, prev_lsn)
        self.att = dict(att)
        self.dpt = dict(dpt)

    def serialize(self):
        """Return the record's bytes as written to the log."""
        parts = [self._header(), _COUNT.pack(len(self.att))]
        parts.extend(_ATT_ENTRY.pack(xid, lsn) for xid, lsn in self.att.items())
        parts.append(_COUNT.pack(len(self.dpt)))
        parts.extend(_DPT_ENTRY.pack(oid, page_id, lsn) for (oid, page_id), lsn in self.dpt.items())
        return b"".join(parts)

    @classmethod
    def deserialize(cls, data):
        """Build the record from the bytes that follow its type field."""
        xid, prev_lsn, offset = read_prefix(data)
        (att_size,) = unpack(_COUNT, data, offset)
        offset += _COUNT.size
        att = {}
        for _ in range(att_size):
            entry_xid, lsn = unpack(_ATT_ENTRY, data, offset)
            offset += _ATT_ENTRY.size
            att[entry_xid] = lsn
        (dpt_size,) = unpack(_COUNT, data, offset)
        offset += _COUNT.size
        dpt = {}
        for _ in range(dpt_size):
            oid, page_id, lsn = unpack(_DPT_ENTRY, data, offset)
            offset += _DPT_ENTRY.size
            dpt[(oid, page_id)] = lsn
        return cls(xid, prev_lsn, att, dpt)


_DESERIALIZERS = {
    LogType.INSERT: InsertLog,
    LogType.DELETE: DeleteLog,
    LogType.NEW_PAGE: NewPageLog,
    LogType.BEGIN: BeginLog,
    LogType.COMMIT: CommitLog,
    LogType.ROLLBACK: RollbackLog,
    LogType.BEGIN_CHECKPOINT: BeginCheckpointLog,
    LogType.END_CHECKPOINT: EndCheckpointLog,
}


def deserialize_log(data):
    """Decode one complete serialized log record of any kind."""
    log_type = read_type(data)
    cls = _DESERIALIZERS.get(log_type)
    if cls is None:
        raise ValueError(f"unknown log type {log_type.name} in deserialize_log")
    return cls.deserialize(memoryview(data)[4:])