import struct

from huadb.log.log_records import NULL_PAGE_ID
from huadb.storage.page import DB_PAGE_SIZE, Page
from huadb.table.table_page import PAGE_HEADER_SIZE, SLOT_SIZE, TablePage


def test_init_puts_lower_after_sixteen_byte_header():
    table_page = TablePage(Page())
    table_page.init()
    assert table_page.lower == 16
    assert table_page.record_count() == 0


def test_init_sets_header():
    page = Page()
    table_page = TablePage(page)
    table_page.init()
    assert table_page.page_lsn == 0
    assert table_page.next_page_id == NULL_PAGE_ID
    assert table_page.lower == PAGE_HEADER_SIZE
    assert table_page.upper == DB_PAGE_SIZE
    assert table_page.record_count() == 0
    assert page.is_dirty


def test_free_space_after_init_reserves_one_slot():
    table_page = TablePage(Page())
    table_page.init()
    assert table_page.free_space_size() == DB_PAGE_SIZE - PAGE_HEADER_SIZE - SLOT_SIZE


def test_free_space_is_zero_when_no_room_for_slot():
    page = Page()
    lower = PAGE_HEADER_SIZE + 3 * SLOT_SIZE
    struct.pack_into("<QiHH", page.data, 0, 0, NULL_PAGE_ID, lower, lower + 1)
    table_page = TablePage(page)
    assert table_page.free_space_size() == 0
    assert table_page.record_count() == 3


def test_page_lsn_is_stored_in_page_bytes():
    page = Page()
    table_page = TablePage(page)
    table_page.init()
    table_page.set_page_lsn(42)
    assert bytes(page.data[:8]) == (42).to_bytes(8, "little")
    assert TablePage(page).page_lsn == 42


def test_set_next_page_id_marks_dirty_and_persists():
    page = Page()
    table_page = TablePage(page)
    assert not page.is_dirty
    table_page.set_next_page_id(7)
    assert page.is_dirty
    assert TablePage(page).next_page_id == 7


def test_wrapping_existing_data_reads_header():
    source = Page()
    original = TablePage(source)
    original.init()
    original.set_page_lsn(99)
    original.set_next_page_id(3)
    copy = TablePage(Page(bytes(source.data)))
    assert (copy.page_lsn, copy.next_page_id, copy.lower, copy.upper) == (
        original.page_lsn,
        original.next_page_id,
        original.lower,
        original.upper,
    )