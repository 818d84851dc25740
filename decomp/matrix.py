"""
Dense matrix storage, and the storage-format tag shared by all matrix types.
"""

from enum import Enum, auto
from typing import Any, Callable, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .errors import DimensionError, UnsupportedStorageError
from .scalar import ScalarOps, infer_ops


class Storage(Enum):
    """ Storage-format tags. Engine entry points dispatch on these. """
    DENSE = auto()
    CSC = auto()
    CSR = auto()

    @classmethod
    def parse(cls, name) -> "Storage":
        """ Accept a `Storage`, or one of its (case-insensitive) names.
        'sparse' is an alias for compressed-column storage. """
        if isinstance(name, Storage):
            return name
        key = str(name).upper()
        if key == "SPARSE":
            return cls.CSC
        try:
            return cls[key]
        except KeyError:
            raise UnsupportedStorageError(f"Unknown storage format: {name!r}")


class DenseMatrix(object):
    """ Row-major two-dimensional matrix.
    Every row holds exactly `size[1]` entries. """

    storage = Storage.DENSE

    def __init__(self, data: Optional[List[List[Any]]] = None, size: Optional[Tuple[int, int]] = None):
        data = [] if data is None else data
        if size is None:
            size = (len(data), len(data[0]) if data else 0)
        rows, cols = size
        DimensionError.check(len(data), rows, "rows")
        for r in data:
            DimensionError.check(len(r), cols, "row length")
        self.data: List[List[Any]] = data
        self.size: Tuple[int, int] = (rows, cols)

    @property
    def rows(self) -> int:
        return self.size[0]

    @property
    def cols(self) -> int:
        return self.size[1]

    @classmethod
    def from_list(cls, data: Sequence) -> "DenseMatrix":
        """ Create from a nested sequence (copied).
        A flat sequence becomes a column vector. """
        if len(data) and not isinstance(data[0], (list, tuple)):
            return cls([[v] for v in data])
        return cls([list(r) for r in data])

    @classmethod
    def from_numpy(cls, arr: np.ndarray) -> "DenseMatrix":
        arr = np.asarray(arr)
        if arr.ndim == 1:
            arr = arr.reshape(-1, 1)
        if arr.ndim != 2:
            raise DimensionError(f"Expected a two-dimensional array, got {arr.ndim} dimensions",
                                 actual=arr.ndim, expected=2)
        return cls(arr.tolist(), size=arr.shape)

    @classmethod
    def zeros(cls, rows: int, cols: int, ops: Optional[ScalarOps] = None) -> "DenseMatrix":
        zero = ops.zero if ops is not None else 0
        return cls([[zero] * cols for _ in range(rows)], size=(rows, cols))

    @classmethod
    def identity(cls, n: int, ops: Optional[ScalarOps] = None) -> "DenseMatrix":
        m = cls.zeros(n, n, ops)
        one = ops.one if ops is not None else 1
        for k in range(n):
            m.data[k][k] = one
        return m

    def _check_index(self, row: int, col: int):
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise IndexError(f"Index ({row}, {col}) out of range for size {self.size}")

    def get(self, row: int, col: int) -> Any:
        self._check_index(row, col)
        return self.data[row][col]

    def set(self, row: int, col: int, val: Any) -> "DenseMatrix":
        self._check_index(row, col)
        self.data[row][col] = val
        return self

    def swap_rows(self, x: int, y: int) -> "DenseMatrix":
        """ Swap rows `x` and `y`, in place. """
        if x != y:
            self.data[x], self.data[y] = self.data[y], self.data[x]
        return self

    def column(self, j: int) -> List[Any]:
        return [r[j] for r in self.data]

    def values(self) -> Iterator[Any]:
        """ Rows-first iterator of entry values """
        for r in self.data:
            yield from r

    def map(self, fn: Callable[[Any], Any]) -> "DenseMatrix":
        return DenseMatrix([[fn(v) for v in r] for r in self.data], size=self.size)

    def copy(self) -> "DenseMatrix":
        return DenseMatrix([r[:] for r in self.data], size=self.size)

    def transpose(self) -> "DenseMatrix":
        data = [[self.data[i][j] for i in range(self.rows)] for j in range(self.cols)]
        return DenseMatrix(data, size=(self.cols, self.rows))

    def to_list(self) -> List[List[Any]]:
        return [r[:] for r in self.data]

    def to_numpy(self) -> np.ndarray:
        return np.array(self.data).reshape(self.size)

    def to_dense(self) -> "DenseMatrix":
        return self

    def matmul(self, other, ops: Optional[ScalarOps] = None) -> "DenseMatrix":
        """ Matrix multiplication self*other """
        other = other.to_dense()
        if self.cols != other.rows:
            raise DimensionError(f"Cannot multiply {self.size} by {other.size}",
                                 actual=other.rows, expected=self.cols)
        ops = ops or infer_ops(self.values())
        out = DenseMatrix.zeros(self.rows, other.cols, ops)
        for i, row in enumerate(self.data):
            orow = out.data[i]
            for k, a in enumerate(row):
                if ops.is_zero(a):
                    continue
                for j, b in enumerate(other.data[k]):
                    orow[j] = ops.add(orow[j], ops.multiply(a, b))
        return out

    def mult(self, rhs: Sequence, ops: Optional[ScalarOps] = None) -> List[Any]:
        """ Multiply with a column vector, given as a flat list """
        if len(rhs) != self.cols:
            raise DimensionError(f"Invalid rhs: length {len(rhs)} for matrix size {self.size}",
                                 actual=len(rhs), expected=self.cols)
        ops = ops or infer_ops(self.values())
        y = []
        for row in self.data:
            acc = ops.zero
            for a, x in zip(row, rhs):
                acc = ops.add(acc, ops.multiply(a, x))
            y.append(acc)
        return y

    def display(self) -> str:
        """ Create a string "X" versus " " display of nonzero entries. """
        s = ''
        for r in self.data:
            s += ''.join(' ' if v == 0 else 'X' for v in r) + '\n'
        return s

    def __eq__(self, other):
        if not isinstance(other, DenseMatrix):
            return NotImplemented
        return self.size == other.size and self.data == other.data

    def __repr__(self):
        return f"<{self.__class__.__name__}(size={self.size}, data={self.data})>"


def check_square(m, name: str = "Matrix"):
    rows, cols = m.size
    if rows != cols:
        raise DimensionError(f"{name} must be square, got size {m.size}", actual=m.size, expected=(rows, rows))
