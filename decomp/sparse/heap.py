"""
Index-addressable binary min-heap.

Entries are referred to by integer *handles* handed out by `insert`.
An auxiliary position array maps each handle to its slot in the heap,
so re-keying or removing an arbitrary entry is an array lookup plus a sift,
rather than a search.
"""

from typing import Any, List, Optional, Tuple

from ..errors import MatrixError


class PriorityQueue(object):
    def __init__(self):
        self.heap: List[int] = []  # Handles, in heap order
        self.pos: List[int] = []  # Handle -> index into `heap`, or -1 if free
        self.keys: List[int] = []
        self.vals: List[Any] = []
        self.free: List[int] = []  # Recycled handles

    def __len__(self):
        return len(self.heap)

    def __contains__(self, handle: int) -> bool:
        return 0 <= handle < len(self.pos) and self.pos[handle] >= 0

    def insert(self, key: int, value: Any = None) -> int:
        """ Insert a new entry, returning its handle """
        if self.free:
            h = self.free.pop()
            self.keys[h] = key
            self.vals[h] = value
        else:
            h = len(self.pos)
            self.pos.append(-1)
            self.keys.append(key)
            self.vals.append(value)
        self.pos[h] = len(self.heap)
        self.heap.append(h)
        self._sift_up(self.pos[h])
        return h

    def peek(self) -> Optional[Tuple[int, Any]]:
        """ (key, value) of the minimum entry, without removing it. None if empty. """
        if not self.heap:
            return None
        h = self.heap[0]
        return self.keys[h], self.vals[h]

    def extract_min(self) -> Optional[Tuple[int, Any]]:
        """ Remove and return (key, value) of the minimum entry. None if empty. """
        if not self.heap:
            return None
        return self._remove_at(0)

    def remove(self, handle: int) -> Tuple[int, Any]:
        """ Remove entry `handle`, returning its (key, value). """
        MatrixError.assert_true(handle in self, f"Invalid heap handle {handle}")
        return self._remove_at(self.pos[handle])

    def key(self, handle: int) -> int:
        return self.keys[handle]

    def value(self, handle: int) -> Any:
        return self.vals[handle]

    def set_value(self, handle: int, value: Any):
        self.vals[handle] = value

    def decrease_key(self, handle: int, key: int):
        """ Lower the key of entry `handle` to `key`. """
        MatrixError.assert_true(handle in self, f"Invalid heap handle {handle}")
        MatrixError.assert_true(key <= self.keys[handle], "decrease_key cannot increase a key")
        self.keys[handle] = key
        self._sift_up(self.pos[handle])

    def update_key(self, handle: int, key: int):
        """ Change the key of entry `handle` in either direction. """
        if key <= self.keys[handle]:
            return self.decrease_key(handle, key)
        self.keys[handle] = key
        self._sift_down(self.pos[handle])

    def clear(self):
        self.heap.clear()
        self.pos.clear()
        self.keys.clear()
        self.vals.clear()
        self.free.clear()

    def _remove_at(self, i: int) -> Tuple[int, Any]:
        h = self.heap[i]
        last = self.heap.pop()
        if i < len(self.heap):
            self.heap[i] = last
            self.pos[last] = i
            self._sift_down(i)
            self._sift_up(self.pos[last])
        self.pos[h] = -1
        self.free.append(h)
        key, val = self.keys[h], self.vals[h]
        self.vals[h] = None
        return key, val

    def _less(self, i: int, j: int) -> bool:
        return self.keys[self.heap[i]] < self.keys[self.heap[j]]

    def _swap(self, i: int, j: int):
        hi, hj = self.heap[i], self.heap[j]
        self.heap[i], self.heap[j] = hj, hi
        self.pos[hj] = i
        self.pos[hi] = j

    def _sift_up(self, i: int):
        while i > 0:
            parent = (i - 1) // 2
            if not self._less(i, parent):
                break
            self._swap(i, parent)
            i = parent

    def _sift_down(self, i: int):
        n = len(self.heap)
        while True:
            smallest = i
            for child in (2 * i + 1, 2 * i + 2):
                if child < n and self._less(child, smallest):
                    smallest = child
            if smallest == i:
                break
            self._swap(i, smallest)
            i = smallest

    def _checkup(self):
        """ Internal consistency tests. """
        for i, h in enumerate(self.heap):
            MatrixError.assert_eq(self.pos[h], i)
            if i > 0:
                MatrixError.assert_true(not self._less(i, (i - 1) // 2))
        MatrixError.assert_eq(len(self.heap) + len(self.free), len(self.pos))
