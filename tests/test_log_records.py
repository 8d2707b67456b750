import pytest

from huadb.log.log_record import (
    HEADER_SIZE,
    BeginCheckpointLog,
    BeginLog,
    CommitLog,
    LogRecord,
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


def sample_logs():
    return [
        InsertLog(3, 100, 20, 1, 4, 3900, b"record-bytes"),
        DeleteLog(3, 140, 20, 1, 4),
        NewPageLog(3, 160, 20, 0, 1),
        NewPageLog(1, 0, 21, NULL_PAGE_ID, 0),
        EndCheckpointLog(0, 0, {3: 160, 5: 200}, {(20, 0): 50, (20, 1): 160}),
        BeginLog(3, 0),
        CommitLog(3, 160),
        RollbackLog(5, 200),
        BeginCheckpointLog(0, 0),
    ]


@pytest.mark.parametrize("log", sample_logs(), ids=lambda log: type(log).__name__)
def test_deserialize_log_round_trip(log):
    data = log.serialize()
    restored = deserialize_log(data)
    assert type(restored) is type(log)
    assert restored == log
    assert restored.serialize() == data


@pytest.mark.parametrize("log", sample_logs(), ids=lambda log: type(log).__name__)
def test_size_matches_serialized_length(log):
    data = log.serialize()
    restored = deserialize_log(data)
    assert restored.size == log.size == len(data)


def test_insert_fields_survive():
    log = InsertLog(3, 100, 20, 2, 7, 3000, b"\x00\x01\x02")
    restored = deserialize_log(log.serialize())
    assert (restored.oid, restored.page_id, restored.slot_id) == (20, 2, 7)
    assert restored.page_offset == 3000
    assert restored.record == b"\x00\x01\x02"
    assert restored.record_size == 3


def test_insert_record_bytes_end_the_entry():
    payload = b"abcdef"
    data = InsertLog(3, 0, 20, 0, 0, 4000, payload).serialize()
    assert data.endswith(payload)
    assert data[:4] == int(LogType.INSERT).to_bytes(4, "little")


def test_insert_size_grows_with_record():
    short = InsertLog(1, 0, 1, 0, 0, 0, b"a")
    long = InsertLog(1, 0, 1, 0, 0, 0, b"a" * 11)
    assert long.size - short.size == 10


def test_delete_type_field():
    data = DeleteLog(2, 0, 20, 0, 1).serialize()
    assert data[:4] == int(LogType.DELETE).to_bytes(4, "little")


def test_new_page_keeps_null_prev_page():
    restored = deserialize_log(NewPageLog(1, 0, 21, NULL_PAGE_ID, 0).serialize())
    assert restored.prev_page_id == NULL_PAGE_ID
    assert restored.page_id == 0
    assert restored.oid == 21


def test_end_checkpoint_tables_survive():
    att = {3: 160, 5: 200}
    dpt = {(20, 0): 50, (21, 4): 170}
    restored = deserialize_log(EndCheckpointLog(0, 0, att, dpt).serialize())
    assert restored.att == att
    assert restored.dpt == dpt


def test_end_checkpoint_copies_tables():
    att = {1: 10}
    log = EndCheckpointLog(0, 0, att, {})
    att[2] = 20
    assert log.att == {1: 10}


def test_empty_end_checkpoint_has_two_counts():
    log = EndCheckpointLog(0, 0, {}, {})
    assert log.size == HEADER_SIZE + 16
    restored = deserialize_log(log.serialize())
    assert restored.att == {}
    assert restored.dpt == {}


def test_update_type_cannot_be_decoded():
    data = LogRecord(LogType.UPDATE, 1, 0).serialize()
    with pytest.raises(ValueError):
        deserialize_log(data)


def test_unknown_type_cannot_be_decoded():
    data = (42).to_bytes(4, "little") + bytes(12)
    with pytest.raises(ValueError):
        deserialize_log(data)


@pytest.mark.parametrize("log", sample_logs()[:5], ids=lambda log: type(log).__name__)
def test_truncated_record_rejected(log):
    data = log.serialize()
    with pytest.raises(ValueError):
        deserialize_log(data[:-1])


def test_deserialize_accepts_bytearray():
    log = DeleteLog(9, 8, 7, 6, 5)
    restored = deserialize_log(bytearray(log.serialize()))
    assert restored == log