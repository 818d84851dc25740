"""
LU decomposition with partial pivoting, and the linear solve built on it.

`lup(A)` returns `LupResult(L, U, p)` such that `(L·U)[p[i]] == A[i]`:
row `i` of `A` becomes row `p[i]` of the factored product.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Sequence

from .formats import as_matrix, dispatch, is_matrix, ops_for
from .matrix import DenseMatrix, Storage
from .scalar import ScalarOps
from .sparse.matrix import AxisMapping, CscMatrix, CsrMatrix, swap_minor, vector_entries
from .sparse.spa import Spa
from .substitution import backward_substitution, forward_substitution, rhs_values

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LupResult:
    """
    Immutable result of an LU decomposition with row pivoting.

    Attributes:
        L: Unit lower-triangular factor, m × min(m, n)
        U: Upper-triangular factor, min(m, n) × n
        p: Row permutation. `p[i]` is the row of L·U holding original row `i`.
    """
    L: Any
    U: Any
    p: List[int]

    @property
    def q(self) -> List[int]:
        """ The inverse permutation: `q[k]` is the original row at position `k` of L·U """
        return invert_permutation(self.p)


def invert_permutation(p: Sequence[int]) -> List[int]:
    q = [0] * len(p)
    for i, pi in enumerate(p):
        q[pi] = i
    return q


def apply_permutation(b: Sequence, p: Sequence[int]) -> List:
    """ Reorder `b` so that entry `i` lands at position `p[i]` """
    out = [None] * len(p)
    for i, pi in enumerate(p):
        out[pi] = b[i]
    return out


def _dense_lup(m: DenseMatrix, ops: ScalarOps) -> LupResult:
    rows, cols = m.size
    n = min(rows, cols)
    data = m.copy().data
    perm = list(range(rows))  # Current row -> original row

    for j in range(cols):
        if j > 0:
            for i in range(rows):
                s = ops.zero
                for k in range(min(i, j)):
                    s = ops.add(s, ops.multiply(data[i][k], data[k][j]))
                data[i][j] = ops.subtract(data[i][j], s)

        # Pivot on the largest magnitude at or below the diagonal
        pi, vjj = j, ops.zero
        for i in range(j, rows):
            if ops.abs_gt(data[i][j], vjj):
                pi, vjj = i, data[i][j]
        if pi != j:
            logger.debug("Pivot: column %d swaps rows %d and %d", j, j, pi)
            perm[j], perm[pi] = perm[pi], perm[j]
            data[j], data[pi] = data[pi], data[j]

        for i in range(j + 1, rows):
            if not ops.is_zero(data[i][j]):
                data[i][j] = ops.divide(data[i][j], vjj)

    L = DenseMatrix.zeros(rows, n, ops)
    for i in range(rows):
        for j in range(min(i + 1, n)):
            L.data[i][j] = ops.one if i == j else data[i][j]
    U = DenseMatrix.zeros(n, cols, ops)
    for i in range(n):
        for j in range(i, cols):
            U.data[i][j] = data[i][j]
    return LupResult(L, U, invert_permutation(perm))


def _sparse_lup(m: CscMatrix, ops: ScalarOps) -> LupResult:
    """ Left-looking, column-at-a-time LU.

    Column `j` of `A` is scattered into a sparse accumulator, updated by the
    already-finished columns of `L`, pivoted, and gathered into column `j`
    of `L` and `U`. Row numbers in the accumulator, `L` and `U` are all
    *current* (pivoted) rows; `rowmap` translates from the original rows of `A`. """
    rows, cols = m.size
    n = min(rows, cols)
    lvalues, lindex, lptr = [], [], []
    uvalues, uindex, uptr = [], [], []
    rowmap = AxisMapping(rows)
    spa = Spa(ops, rows)

    for j in range(cols):
        if j < rows:
            lptr.append(len(lvalues))
            lvalues.append(ops.one)
            lindex.append(j)
        uptr.append(len(uvalues))

        for i, v in m.column(j):
            spa.set(rowmap.e2i[i], v)

        def eliminate(k, vkj):
            for i, vik in vector_entries(k, lvalues, lindex, lptr):
                if i > k:
                    spa.accumulate(i, ops.negate(ops.multiply(vik, vkj)))

        if j > 0:
            spa.for_each(0, j - 1, eliminate)

        pi, vjj = j, ops.zero
        if j < rows:
            vjj = spa.get(j)

            def search(i, v):
                nonlocal pi, vjj
                if ops.abs_gt(v, vjj):
                    pi, vjj = i, v

            spa.for_each(j + 1, rows - 1, search)

        if pi != j:
            logger.debug("Pivot: column %d swaps rows %d and %d", j, j, pi)
            swap_minor(j, pi, j, lvalues, lindex, lptr)
            swap_minor(j, pi, j, uvalues, uindex, uptr)
            spa.swap(j, pi)
            rowmap.swap_int(j, pi)

        def partition(i, v):
            if i <= j:
                uvalues.append(v)
                uindex.append(i)
                return
            v = ops.divide(v, vjj)
            if not ops.is_zero(v):
                lvalues.append(v)
                lindex.append(i)

        spa.for_each(0, rows - 1, partition)
        spa.clear()

    lptr.append(len(lvalues))
    uptr.append(len(uvalues))
    L = CscMatrix(lvalues, lindex, lptr, (rows, n))
    U = CscMatrix(uvalues, uindex, uptr, (n, cols))
    logger.debug("Sparse LU: nnz(A)=%d nnz(L)=%d nnz(U)=%d", m.nnz, L.nnz, U.nnz)
    return LupResult(L, U, rowmap.e2i[:])


def _csr_lup(m: CsrMatrix, ops: ScalarOps) -> LupResult:
    return _sparse_lup(m.to_csc(), ops)


_LUP = {
    Storage.DENSE: _dense_lup,
    Storage.CSC: _sparse_lup,
    Storage.CSR: _csr_lup,
}


def lup(A, ops: ScalarOps = None) -> LupResult:
    """ LU decomposition with partial (row) pivoting, of a dense or sparse matrix.

    Singular matrices decompose without error, leaving a zero on the diagonal
    of `U`; solving against them raises `SingularMatrixError`.
    Nested-list input produces nested-list factors.

    Example:
        >>> r = lup([[2, 1], [1, 4]])
        >>> r.L, r.U, r.p
        ([[1, 0], [0.5, 1]], [[2, 1], [0, 3.5]], [0, 1])
    """
    m = as_matrix(A)
    fn = dispatch(_LUP, m, "lup")
    ops = ops_for(m, ops=ops)
    logger.debug("lup: %s of size %s", type(m).__name__, m.size)
    r = fn(m, ops)
    if not is_matrix(A):
        return LupResult(r.L.to_list(), r.U.to_list(), r.p)
    return r


def lusolve(A, b, ops: ScalarOps = None):
    """ Solve A·x = b for square `A`, or for a previously computed `LupResult`.

    Returns `x` as an n×1 column in the storage format of `U`,
    or as nested lists if the factors are nested lists. """
    r = A if isinstance(A, LupResult) else lup(A, ops)
    ops = ops_for(r.L, r.U, b, ops=ops)
    L, U = as_matrix(r.L), as_matrix(r.U)
    bp = apply_permutation(rhs_values(b, len(r.p), ops), r.p)
    y = forward_substitution(L, bp, ops)
    x = backward_substitution(U, y, ops)
    if not is_matrix(r.U):
        return x.to_list()
    return x
