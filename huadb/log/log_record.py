"""Write-ahead log records: the common header and the header-only kinds."""

import struct
from enum import IntEnum

NULL_LSN = 0


class LogType(IntEnum):
    BEGIN = 0
    COMMIT = 1
    ROLLBACK = 2
    INSERT = 3
    DELETE = 4
    UPDATE = 5
    NEW_PAGE = 6
    BEGIN_CHECKPOINT = 7
    END_CHECKPOINT = 8


_TYPE = struct.Struct("<i")
_PREFIX = struct.Struct("<IQ")
HEADER_SIZE = _TYPE.size + _PREFIX.size


def unpack(fmt, data, offset=0):
    """Unpack ``fmt`` from ``data`` at ``offset``, raising ValueError if too short."""
    try:
        return fmt.unpack_from(data, offset)
    except struct.error as exc:
        raise ValueError(f"truncated log record: {exc}") from None


def read_type(data):
    """Read the log type that starts a serialized record."""
    (raw,) = unpack(_TYPE, data)
    try:
        return LogType(raw)
    except ValueError:
        raise ValueError(f"unknown log type {raw}") from None


def read_prefix(data):
    """Read ``(xid, prev_lsn, bytes_consumed)`` from data that follows the type field."""
    xid, prev_lsn = unpack(_PREFIX, data)
    return xid, prev_lsn, _PREFIX.size


class LogRecord:
    """A log record: its kind, owning transaction and the previous lsn of that transaction."""

    def __init__(self, log_type, xid, prev_lsn):
        self.log_type = LogType(log_type)
        self.xid = xid
        self.prev_lsn = prev_lsn
        self.lsn = NULL_LSN

    def _header(self):
        return _TYPE.pack(self.log_type) + _PREFIX.pack(self.xid, self.prev_lsn)

    @property
    def size(self):
        """Number of bytes the record takes in the log."""
        return len(self.serialize())

    def serialize(self):
        """Return the record's bytes as written to the log."""
        return self._header()

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return self.serialize() == other.serialize()

    def __hash__(self):
        return hash((type(self), self.serialize()))

    def __repr__(self):
        return f"{type(self).__name__}(xid={self.xid}, prev_lsn={self.prev_lsn}, lsn={self.lsn})"


class _HeaderOnlyLog(LogRecord):
    LOG_TYPE = None

    def __init__(self, xid, prev_lsn):
        super().__init__(self.LOG_TYPE, xid, prev_lsn)


class BeginLog(_HeaderOnlyLog):
    LOG_TYPE = LogType.BEGIN

    @classmethod
    def deserialize(cls, data):
        """Build the record from the bytes that follow its type field."""
        xid, prev_lsn, _ = read_prefix(data)
        return cls(xid, prev_lsn)


class CommitLog(_HeaderOnlyLog):
    LOG_TYPE = LogType.COMMIT

    @classmethod
    def deserialize(cls, data):
        """Build the record from the bytes that follow its type field."""
        xid, prev_lsn, _ = read_prefix(data)
        return cls(xid, prev_lsn)


class RollbackLog(_HeaderOnlyLog):
    LOG_TYPE = LogType.ROLLBACK

    @classmethod
    def deserialize(cls, data):
        """Build the record from the bytes that follow its type field."""
        xid, prev_lsn, _ = read_prefix(data)
        return cls(xid, prev_lsn)


class BeginCheckpointLog(_HeaderOnlyLog):
    LOG_TYPE = LogType.BEGIN_CHECKPOINT

    @classmethod
    def deserialize(cls, data):
        """Build the record from the bytes that follow its type field."""
        xid, prev_lsn, _ = read_prefix(data)
        return cls(xid, prev_lsn)