"""Buffer replacement strategies."""

import abc
from collections import OrderedDict


class BufferStrategy(abc.ABC):
    """Decides which buffer frame to replace."""

    @abc.abstractmethod
    def access(self, frame_no):
        """Record that a frame was used."""

    @abc.abstractmethod
    def evict(self):
        """Pick a frame to replace and return its index."""


class LRUBufferStrategy(BufferStrategy):
    """Evicts the least recently used frame."""

    def __init__(self):
        self._frames = OrderedDict()

    def access(self, frame_no):
        self._frames[frame_no] = None
        self._frames.move_to_end(frame_no)

    def evict(self):
        if not self._frames:
            raise LookupError("no frame available to evict")
        frame_no, _ = self._frames.popitem(last=False)
        return frame_no

    def __len__(self):
        return len(self._frames)