import pytest

from huadb.log.log_record import (
    HEADER_SIZE,
    NULL_LSN,
    BeginCheckpointLog,
    BeginLog,
    CommitLog,
    LogRecord,
    LogType,
    RollbackLog,
    read_prefix,
    read_type,
)

HEADER_KINDS = [
    (BeginLog, LogType.BEGIN),
    (CommitLog, LogType.COMMIT),
    (RollbackLog, LogType.ROLLBACK),
    (BeginCheckpointLog, LogType.BEGIN_CHECKPOINT),
]


@pytest.mark.parametrize("cls,kind", HEADER_KINDS)
def test_round_trip(cls, kind):
    log = cls(42, 1234)
    data = log.serialize()
    assert read_type(data) is kind
    restored = cls.deserialize(data[4:])
    assert restored == log
    assert restored.xid == 42
    assert restored.prev_lsn == 1234


@pytest.mark.parametrize("cls,kind", HEADER_KINDS)
def test_size_matches_serialized_length(cls, kind):
    log = cls(7, 99)
    data = log.serialize()
    assert read_type(data) is kind
    assert log.size == len(data) == HEADER_SIZE


def test_begin_log_is_sixteen_bytes():
    log = BeginLog(0, 0)
    assert log.size == 16
    assert len(log.serialize()) == 16


def test_type_field_is_little_endian_enum_value():
    data = CommitLog(3, 0).serialize()
    assert data[:4] == int(LogType.COMMIT).to_bytes(4, "little")


def test_xid_and_prev_lsn_layout():
    data = BeginLog(5, 9).serialize()
    assert data[4:8] == (5).to_bytes(4, "little")
    assert data[8:16] == (9).to_bytes(8, "little")


def test_lsn_defaults_and_is_not_serialized():
    log = BeginLog(1, NULL_LSN)
    assert log.lsn == NULL_LSN
    before = log.serialize()
    log.lsn = 500
    assert log.lsn == 500
    assert log.serialize() == before


def test_generic_record_keeps_its_type():
    log = LogRecord(LogType.UPDATE, 2, 3)
    assert log.log_type is LogType.UPDATE
    assert read_type(log.serialize()) is LogType.UPDATE


def test_read_prefix_reports_consumed_bytes():
    data = RollbackLog(11, 22).serialize()[4:]
    assert read_prefix(data) == (11, 22, 12)


def test_unknown_type_rejected():
    with pytest.raises(ValueError):
        read_type((99).to_bytes(4, "little"))


def test_truncated_prefix_rejected():
    with pytest.raises(ValueError):
        BeginLog.deserialize(b"\x01\x00")


def test_different_kinds_not_equal():
    assert BeginLog(1, 2) != CommitLog(1, 2)
    assert BeginLog(1, 2) == BeginLog(1, 2)