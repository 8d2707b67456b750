"""In-memory page frames."""

DB_PAGE_SIZE = 4096


class Page:
    """A fixed-size block of bytes with a dirty flag."""

    __slots__ = ("data", "_dirty")

    def __init__(self, data=None):
        if data is None:
            self.data = bytearray(DB_PAGE_SIZE)
        else:
            if len(data) != DB_PAGE_SIZE:
                raise ValueError(f"page data must be {DB_PAGE_SIZE} bytes, got {len(data)}")
            self.data = bytearray(data)
        self._dirty = False

    def set_dirty(self):
        """Mark the page as modified since it was loaded."""
        self._dirty = True

    @property
    def is_dirty(self):
        return self._dirty

    def __repr__(self):
        return f"Page(dirty={self._dirty})"