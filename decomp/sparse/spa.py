"""
Sparse accumulator.
"""

from typing import Any, Callable, List, Optional, Tuple

from ..errors import MatrixError
from ..scalar import ScalarOps
from .heap import PriorityQueue


class Spa(object):
    """ Sparse accumulator: scatter values into a sparse column, keyed by row,
    and enumerate them back in ascending row order without sorting.

    `slot[row]` holds the row's priority-queue handle, or None if the row holds no value.
    Zero values stay in the accumulator; they are only skipped by `for_each`. """

    def __init__(self, ops: ScalarOps, size: int = 0):
        self.ops = ops
        self.slot: List[Optional[int]] = [None] * size
        self.queue = PriorityQueue()
        self.cursor: Optional[int] = None  # Row being visited by `for_each`, if any

    def __len__(self):
        return len(self.queue)

    def __contains__(self, row: int) -> bool:
        return row < len(self.slot) and self.slot[row] is not None

    def grow(self, to: int):
        if to > len(self.slot):
            self.slot.extend([None] * (to - len(self.slot)))

    def set(self, row: int, val: Any):
        """ Set the value at `row`, replacing anything accumulated so far """
        self.grow(row + 1)
        h = self.slot[row]
        if h is None:
            self.slot[row] = self.queue.insert(row, val)
        else:
            self.queue.set_value(h, val)

    def get(self, row: int) -> Any:
        if row not in self:
            return self.ops.zero
        return self.queue.value(self.slot[row])

    def accumulate(self, row: int, val: Any):
        """ Add `val` into `row` """
        if self.cursor is not None:
            MatrixError.assert_true(row > self.cursor, f"Cannot accumulate into row {row} behind the cursor")
        self.grow(row + 1)
        h = self.slot[row]
        if h is None:
            self.slot[row] = self.queue.insert(row, val)
        else:
            self.queue.set_value(h, self.ops.add(self.queue.value(h), val))

    def swap(self, x: int, y: int):
        """ Exchange the contents of rows `x` and `y` """
        if x == y: return
        self.grow(max(x, y) + 1)
        hx, hy = self.slot[x], self.slot[y]
        if hx is not None and hy is not None:
            vx = self.queue.value(hx)
            self.queue.set_value(hx, self.queue.value(hy))
            self.queue.set_value(hy, vx)
            return
        if hx is not None:
            self.queue.update_key(hx, y)
        if hy is not None:
            self.queue.update_key(hy, x)
        self.slot[x], self.slot[y] = hy, hx

    def for_each(self, first: int, last: int, callback: Callable[[int, Any], None]):
        """ Invoke `callback(row, value)` for each nonzero row in [first, last], in ascending order.

        The callback may `accumulate` into rows after the current one;
        those rows are visited later in the same pass if they fall in range. """
        visited: List[Tuple[int, Any]] = []
        try:
            while self.queue:
                row, _ = self.queue.peek()
                if row > last:
                    break
                row, val = self.queue.extract_min()
                self.slot[row] = None
                visited.append((row, val))
                if row >= first and not self.ops.is_zero(val):
                    self.cursor = row
                    callback(row, val)
        finally:
            self.cursor = None
            for row, val in visited:
                self.slot[row] = self.queue.insert(row, val)

    def items(self) -> List[Tuple[int, Any]]:
        """ All (row, value) pairs, zeros included, in ascending row order """
        out = []
        while self.queue:
            out.append(self.queue.extract_min())
        for row, val in out:
            self.slot[row] = self.queue.insert(row, val)
        return out

    def clear(self):
        """ Drain all rows, leaving an empty accumulator of the same size """
        while self.queue:
            row, _ = self.queue.extract_min()
            self.slot[row] = None
