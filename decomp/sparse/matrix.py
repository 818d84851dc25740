from bisect import bisect_left
from enum import Enum, auto
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from ..errors import DimensionError, MatrixError
from ..matrix import DenseMatrix, Storage
from ..scalar import NUMBER, ScalarOps, infer_ops
from .spa import Spa


class Axis(Enum):
    rows = auto()
    cols = auto()

    def __invert__(self):
        if self is Axis.rows: return Axis.cols
        if self is Axis.cols: return Axis.rows
        raise ValueError


class AxisMapping(object):
    """ Two-vector object to help keep track of index swaps.
    Converts bi-directionally in constant time by keeping two vectors,
    `internal to external` and `external to internal`. """

    def __init__(self, size: int):
        self.e2i = list(range(size))
        self.i2e = list(range(size))

    def swap_int(self, x: int, y: int):
        """ Swap internal indices x and y """
        self.i2e[x], self.i2e[y] = self.i2e[y], self.i2e[x]
        self.e2i[self.i2e[x]] = x
        self.e2i[self.i2e[y]] = y


def find_index(minor: int, start: int, stop: int, index: List[int]) -> int:
    """ Position of `minor` within the sorted slice `index[start:stop]`,
    or the position it would be inserted at. """
    return bisect_left(index, minor, start, stop)


def vector_entries(major: int, values: List[Any], index: List[int], ptr: List[int]) -> Iterator[Tuple[int, Any]]:
    """ (minor, value) pairs stored along `major`, e.g. (row, value) for a CSC column.
    A `major` with no closing pointer yet is read through to the end of the arrays. """
    k1 = ptr[major + 1] if major + 1 < len(ptr) else len(index)
    for k in range(ptr[major], k1):
        yield index[k], values[k]


def _relabel(k: int, to: int, k0: int, k1: int, values: List[Any], index: List[int]):
    """ Change the minor index of entry `k` to `to`, shifting it to keep `index[k0:k1]` sorted. """
    v = values[k]
    if to > index[k]:
        while k + 1 < k1 and index[k + 1] < to:
            index[k] = index[k + 1]
            values[k] = values[k + 1]
            k += 1
    else:
        while k > k0 and index[k - 1] > to:
            index[k] = index[k - 1]
            values[k] = values[k - 1]
            k -= 1
    index[k] = to
    values[k] = v


def swap_minor(x: int, y: int, majors: int, values: List[Any], index: List[int], ptr: List[int]):
    """ Swap minor indices `x` and `y` (e.g. rows of a CSC matrix),
    across the first `majors` compressed vectors. Sorted order is preserved. """
    if x == y: return
    for j in range(majors):
        k0, k1 = ptr[j], ptr[j + 1]
        kx = find_index(x, k0, k1, index)
        ky = find_index(y, k0, k1, index)
        has_x = kx < k1 and index[kx] == x
        has_y = ky < k1 and index[ky] == y
        if has_x and has_y:
            values[kx], values[ky] = values[ky], values[kx]
        elif has_x:
            _relabel(kx, y, k0, k1, values, index)
        elif has_y:
            _relabel(ky, x, k0, k1, values, index)


class CompressedMatrix(object):
    """ Shared implementation of compressed sparse storage.

    Entries are grouped into "major" vectors (columns for CSC, rows for CSR).
    Vector `j` occupies `values[ptr[j]:ptr[j+1]]`, with its "minor" indices
    in `index`, sorted ascending. """

    major: Axis = None
    storage: Storage = None

    def __init__(self, values: Optional[List[Any]] = None, index: Optional[List[int]] = None,
                 ptr: Optional[List[int]] = None, size: Tuple[int, int] = (0, 0)):
        self.values: List[Any] = [] if values is None else values
        self.index: List[int] = [] if index is None else index
        self.size: Tuple[int, int] = tuple(size)
        self.ptr: List[int] = [0] * (self.n_major + 1) if ptr is None else ptr
        DimensionError.check(len(self.ptr), self.n_major + 1, "pointer length")
        DimensionError.check(len(self.values), len(self.index), "values length")
        MatrixError.assert_eq(self.ptr[-1], len(self.index), "Last pointer must equal the entry count")

    @property
    def rows(self) -> int:
        return self.size[0]

    @property
    def cols(self) -> int:
        return self.size[1]

    @property
    def n_major(self) -> int:
        return self.size[1] if self.major is Axis.cols else self.size[0]

    @property
    def n_minor(self) -> int:
        return self.size[0] if self.major is Axis.cols else self.size[1]

    @property
    def nnz(self) -> int:
        return len(self.values)

    def _split(self, row: int, col: int) -> Tuple[int, int]:
        """ (major, minor) indices for (row, col) """
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise IndexError(f"Index ({row}, {col}) out of range for size {self.size}")
        if self.major is Axis.cols:
            return col, row
        return row, col

    def _join(self, major: int, minor: int) -> Tuple[int, int]:
        """ (row, col) indices for (major, minor) """
        if self.major is Axis.cols:
            return minor, major
        return major, minor

    def get(self, row: int, col: int, default: Any = 0) -> Any:
        """ Value at (row, col), or `default` if no entry is stored there """
        j, i = self._split(row, col)
        k0, k1 = self.ptr[j], self.ptr[j + 1]
        k = find_index(i, k0, k1, self.index)
        if k < k1 and self.index[k] == i:
            return self.values[k]
        return default

    def set(self, row: int, col: int, val: Any, ops: Optional[ScalarOps] = None) -> "CompressedMatrix":
        """ Replace the value at (row, col). Setting a zero removes the entry. """
        ops = ops or infer_ops([val])
        j, i = self._split(row, col)
        k0, k1 = self.ptr[j], self.ptr[j + 1]
        k = find_index(i, k0, k1, self.index)
        present = k < k1 and self.index[k] == i
        if present and ops.is_zero(val):
            del self.values[k]
            del self.index[k]
            for x in range(j + 1, len(self.ptr)):
                self.ptr[x] -= 1
        elif present:
            self.values[k] = val
        elif not ops.is_zero(val):
            self.values.insert(k, val)
            self.index.insert(k, i)
            for x in range(j + 1, len(self.ptr)):
                self.ptr[x] += 1
        return self

    def vector(self, j: int) -> Iterator[Tuple[int, Any]]:
        """ (minor, value) pairs of major vector `j` """
        return vector_entries(j, self.values, self.index, self.ptr)

    def elements(self) -> Iterator[Tuple[int, int, Any]]:
        """ Iterator of stored (row, col, value) triplets, major-axis first """
        for j in range(self.n_major):
            for i, v in self.vector(j):
                r, c = self._join(j, i)
                yield r, c, v

    def map(self, fn: Callable[[Any], Any], ops: Optional[ScalarOps] = None) -> "CompressedMatrix":
        """ Apply `fn` to every stored entry. Entries mapped to zero are dropped. """
        ops = ops or infer_ops(self.values)
        values, index, ptr = [], [], [0]
        for j in range(self.n_major):
            for i, v in self.vector(j):
                v = fn(v)
                if not ops.is_zero(v):
                    values.append(v)
                    index.append(i)
            ptr.append(len(values))
        return self.__class__(values, index, ptr, self.size)

    def copy(self) -> "CompressedMatrix":
        return self.__class__(self.values[:], self.index[:], self.ptr[:], self.size)

    def to_dense(self, zero: Any = None) -> DenseMatrix:
        """ Expand to a DenseMatrix. Missing entries take `zero`, by default the zero of the stored scalar type. """
        if zero is None:
            zero = infer_ops(self.values).zero
        m = DenseMatrix([[zero] * self.cols for _ in range(self.rows)], size=self.size)
        for r, c, v in self.elements():
            m.data[r][c] = v
        return m

    def to_list(self, zero: Any = None) -> List[List[Any]]:
        return self.to_dense(zero).data

    @classmethod
    def from_dense(cls, m, ops: Optional[ScalarOps] = None) -> "CompressedMatrix":
        """ Compress a DenseMatrix or nested list, dropping zeros """
        if not isinstance(m, DenseMatrix):
            m = DenseMatrix.from_list(m)
        ops = ops or infer_ops(m.values())
        self = cls(size=m.size)
        values, index, ptr = self.values, self.index, [0]
        for j in range(self.n_major):
            for i in range(self.n_minor):
                r, c = self._join(j, i)
                v = m.data[r][c]
                if not ops.is_zero(v):
                    values.append(v)
                    index.append(i)
            ptr.append(len(values))
        self.ptr = ptr
        return self

    @classmethod
    def from_triplets(cls, entries: Iterable[Tuple[int, int, Any]], size: Optional[Tuple[int, int]] = None,
                      ops: Optional[ScalarOps] = None) -> "CompressedMatrix":
        """ Build from (row, col, value) triplets. Duplicate positions are summed. """
        entries = list(entries)
        ops = ops or infer_ops(v for _, _, v in entries)
        if size is None:
            size = (max((r for r, _, _ in entries), default=-1) + 1,
                    max((c for _, c, _ in entries), default=-1) + 1)
        self = cls(size=size)
        merged: Dict[Tuple[int, int], Any] = {}
        for r, c, v in entries:
            key = self._split(r, c)
            merged[key] = ops.add(merged[key], v) if key in merged else v
        counts = [0] * self.n_major
        for (j, i), v in sorted(merged.items()):
            if ops.is_zero(v):
                continue
            self.values.append(v)
            self.index.append(i)
            counts[j] += 1
        for j, n in enumerate(counts):
            self.ptr[j + 1] = self.ptr[j] + n
        return self

    @classmethod
    def identity(cls, n: int, ops: ScalarOps = NUMBER) -> "CompressedMatrix":
        return cls([ops.one] * n, list(range(n)), list(range(n + 1)), (n, n))

    def display(self) -> str:
        """ Create a string "X" versus " " display of matrix entries. """
        grid = [[' '] * self.cols for _ in range(self.rows)]
        for r, c, _ in self.elements():
            grid[r][c] = 'X'
        return ''.join(''.join(row) + '\n' for row in grid)

    def __eq__(self, other):
        if not isinstance(other, CompressedMatrix):
            return NotImplemented
        if self.storage is not other.storage: return False
        if self.size != other.size: return False
        return self.ptr == other.ptr and self.index == other.index and self.values == other.values

    def __repr__(self):
        return f"<{self.__class__.__name__}(size={self.size}, nnz={self.nnz})>"

    def _checkup(self):
        """ Internal consistency tests. """
        MatrixError.assert_eq(self.ptr[0], 0)
        for j in range(self.n_major):
            MatrixError.assert_true(self.ptr[j] <= self.ptr[j + 1])
            prev = -1
            for i, _ in self.vector(j):
                MatrixError.assert_true(0 <= i < self.n_minor)
                MatrixError.assert_true(i > prev)
                prev = i


class CscMatrix(CompressedMatrix):
    """ Compressed sparse column matrix: `index` holds row numbers, `ptr` column pointers. """

    major = Axis.cols
    storage = Storage.CSC

    def column(self, j: int) -> Iterator[Tuple[int, Any]]:
        """ (row, value) pairs of column `j` """
        return self.vector(j)

    def swap_rows(self, x: int, y: int) -> "CscMatrix":
        """ Swap rows `x` and `y`, in place """
        self._split(x, 0)
        self._split(y, 0)
        swap_minor(x, y, self.cols, self.values, self.index, self.ptr)
        return self

    def to_csr(self) -> "CsrMatrix":
        return CsrMatrix.from_triplets(self.elements(), self.size, ops=infer_ops(self.values))

    def matmul(self, other, ops: Optional[ScalarOps] = None) -> "CscMatrix":
        """ Matrix multiplication self*other, one output column at a time.
        Each column of `other` selects columns of `self` to scatter into a sparse accumulator. """
        if not isinstance(other, CscMatrix):
            other = CscMatrix.from_dense(other.to_dense(), ops)
        if self.cols != other.rows:
            raise DimensionError(f"Cannot multiply {self.size} by {other.size}",
                                 actual=other.rows, expected=self.cols)
        ops = ops or infer_ops(self.values + other.values)

        values, index, ptr = [], [], [0]
        spa = Spa(ops, self.rows)

        def gather(i, v):
            values.append(v)
            index.append(i)

        for j in range(other.cols):
            for k, b in other.column(j):
                for i, a in self.column(k):
                    spa.accumulate(i, ops.multiply(a, b))
            spa.for_each(0, self.rows - 1, gather)
            spa.clear()
            ptr.append(len(values))
        return CscMatrix(values, index, ptr, (self.rows, other.cols))

    def mult(self, rhs: Sequence, ops: Optional[ScalarOps] = None) -> List[Any]:
        """ Multiply with a column vector, given as a flat list """
        if len(rhs) != self.cols:
            raise DimensionError(f"Invalid rhs: length {len(rhs)} for matrix size {self.size}",
                                 actual=len(rhs), expected=self.cols)
        ops = ops or infer_ops(self.values)
        y = [ops.zero] * self.rows
        for j, x in enumerate(rhs):
            for i, v in self.column(j):
                y[i] = ops.add(y[i], ops.multiply(v, x))
        return y


class CsrMatrix(CompressedMatrix):
    """ Compressed sparse row matrix: `index` holds column numbers, `ptr` row pointers. """

    major = Axis.rows
    storage = Storage.CSR

    def row(self, i: int) -> Iterator[Tuple[int, Any]]:
        """ (col, value) pairs of row `i` """
        return self.vector(i)

    def to_csc(self) -> CscMatrix:
        return CscMatrix.from_triplets(self.elements(), self.size, ops=infer_ops(self.values))

    def mult(self, rhs: Sequence, ops: Optional[ScalarOps] = None) -> List[Any]:
        """ Multiply with a column vector, given as a flat list """
        if len(rhs) != self.cols:
            raise DimensionError(f"Invalid rhs: length {len(rhs)} for matrix size {self.size}",
                                 actual=len(rhs), expected=self.cols)
        ops = ops or infer_ops(self.values)
        y = []
        for i in range(self.rows):
            acc = ops.zero
            for j, v in self.row(i):
                acc = ops.add(acc, ops.multiply(v, rhs[j]))
            y.append(acc)
        return y
