"""
Triangular solves.

`forward_substitution` solves L·x = b for lower-triangular L,
`backward_substitution` solves U·x = b for upper-triangular U.
Only the relevant triangle of the matrix is read.
"""

import logging
from typing import Any, List

from .errors import DimensionError, SingularMatrixError
from .formats import as_matrix, dispatch, is_matrix, ops_for
from .matrix import DenseMatrix, Storage, check_square
from .scalar import ScalarOps
from .sparse.matrix import CscMatrix, CsrMatrix, find_index

logger = logging.getLogger(__name__)


def rhs_values(b, n: int, ops: ScalarOps) -> List[Any]:
    """ Copy right-hand side `b` into a flat list of length `n`.

    `b` may be a flat list, a list of one-element rows, or a single-column
    dense or sparse matrix. """
    if is_matrix(b):
        if b.cols != 1:
            raise DimensionError(f"Right-hand side must be a column vector, got size {b.size}",
                                 actual=b.size, expected=(n, 1))
        vals = b.column(0) if isinstance(b, DenseMatrix) else b.to_dense(ops.zero).column(0)
    else:
        vals = []
        for v in b:
            if isinstance(v, (list, tuple)):
                if len(v) != 1:
                    raise DimensionError(f"Right-hand side must be a column vector, got a row of length {len(v)}",
                                         actual=len(v), expected=1)
                v = v[0]
            vals.append(v)
    DimensionError.check(len(vals), n, "right-hand side length")
    return vals


def _validate(m, b, ops: ScalarOps) -> List[Any]:
    check_square(m, "Triangular matrix")
    return rhs_values(b, m.rows, ops)


def _diagonal(m: CscMatrix, j: int, ops: ScalarOps):
    """ (position, value) of the diagonal entry of CSC column `j`.
    A missing entry has value `ops.zero`, and `position` is where it would go. """
    k0, k1 = m.ptr[j], m.ptr[j + 1]
    k = find_index(j, k0, k1, m.index)
    if k < k1 and m.index[k] == j:
        return k, m.values[k]
    return k, ops.zero


def _sparse_column(x: List[Any], ops: ScalarOps) -> CscMatrix:
    values, index = [], []
    for i, v in enumerate(x):
        if not ops.is_zero(v):
            values.append(v)
            index.append(i)
    return CscMatrix(values, index, [0, len(values)], (len(x), 1))


def _sparse_row_vector(x: List[Any], ops: ScalarOps) -> CsrMatrix:
    """ Column vector `x` in CSR form: one (possibly empty) row per entry """
    values, index, ptr = [], [], [0]
    for v in x:
        if not ops.is_zero(v):
            values.append(v)
            index.append(0)
        ptr.append(len(values))
    return CsrMatrix(values, index, ptr, (len(x), 1))


# Dense

def _dense_forward(m: DenseMatrix, b, ops: ScalarOps) -> DenseMatrix:
    b = _validate(m, b, ops)
    n, data = m.rows, m.data
    x = [ops.zero] * n
    for j in range(n):
        vjj = data[j][j]
        if ops.is_zero(vjj):
            raise SingularMatrixError(index=j)
        bj = b[j]
        if ops.is_zero(bj):
            continue
        xj = x[j] = ops.divide(bj, vjj)
        for i in range(j + 1, n):
            b[i] = ops.subtract(b[i], ops.multiply(xj, data[i][j]))
    return DenseMatrix([[v] for v in x], size=(n, 1))


def _dense_backward(m: DenseMatrix, b, ops: ScalarOps) -> DenseMatrix:
    b = _validate(m, b, ops)
    n, data = m.rows, m.data
    x = [ops.zero] * n
    for j in reversed(range(n)):
        vjj = data[j][j]
        if ops.is_zero(vjj):
            raise SingularMatrixError(index=j)
        bj = b[j]
        if ops.is_zero(bj):
            continue
        xj = x[j] = ops.divide(bj, vjj)
        for i in range(j):
            b[i] = ops.subtract(b[i], ops.multiply(xj, data[i][j]))
    return DenseMatrix([[v] for v in x], size=(n, 1))


# Compressed sparse column

def _csc_forward(m: CscMatrix, b, ops: ScalarOps) -> CscMatrix:
    b = _validate(m, b, ops)
    n, values, index = m.rows, m.values, m.index
    x = [ops.zero] * n
    for j in range(n):
        k, vjj = _diagonal(m, j, ops)
        if ops.is_zero(vjj):
            raise SingularMatrixError(index=j)
        bj = b[j]
        if ops.is_zero(bj):
            continue
        xj = x[j] = ops.divide(bj, vjj)
        # Rows below the diagonal follow it in the column
        for kk in range(k + 1, m.ptr[j + 1]):
            i = index[kk]
            b[i] = ops.subtract(b[i], ops.multiply(xj, values[kk]))
    return _sparse_column(x, ops)


def _csc_backward(m: CscMatrix, b, ops: ScalarOps) -> CscMatrix:
    b = _validate(m, b, ops)
    n, values, index = m.rows, m.values, m.index
    x = [ops.zero] * n
    for j in reversed(range(n)):
        k, vjj = _diagonal(m, j, ops)
        if ops.is_zero(vjj):
            raise SingularMatrixError(index=j)
        bj = b[j]
        if ops.is_zero(bj):
            continue
        xj = x[j] = ops.divide(bj, vjj)
        # Rows above the diagonal precede it, scanned nearest-first
        for kk in reversed(range(m.ptr[j], k)):
            i = index[kk]
            b[i] = ops.subtract(b[i], ops.multiply(xj, values[kk]))
    return _sparse_column(x, ops)


# Compressed sparse row

def _csr_forward(m: CsrMatrix, b, ops: ScalarOps) -> CsrMatrix:
    b = _validate(m, b, ops)
    n = m.rows
    x = [ops.zero] * n
    for i in range(n):
        acc, vii = b[i], ops.zero
        for j, v in m.row(i):
            if j > i:
                break
            if j == i:
                vii = v
                break
            acc = ops.subtract(acc, ops.multiply(v, x[j]))
        if ops.is_zero(vii):
            raise SingularMatrixError(index=i)
        x[i] = ops.divide(acc, vii)
    return _sparse_row_vector(x, ops)


def _csr_backward(m: CsrMatrix, b, ops: ScalarOps) -> CsrMatrix:
    b = _validate(m, b, ops)
    n = m.rows
    x = [ops.zero] * n
    for i in reversed(range(n)):
        acc, vii = b[i], ops.zero
        for j, v in reversed(list(m.row(i))):
            if j < i:
                break
            if j == i:
                vii = v
                break
            acc = ops.subtract(acc, ops.multiply(v, x[j]))
        if ops.is_zero(vii):
            raise SingularMatrixError(index=i)
        x[i] = ops.divide(acc, vii)
    return _sparse_row_vector(x, ops)


_FORWARD = {
    Storage.DENSE: _dense_forward,
    Storage.CSC: _csc_forward,
    Storage.CSR: _csr_forward,
}
_BACKWARD = {
    Storage.DENSE: _dense_backward,
    Storage.CSC: _csc_backward,
    Storage.CSR: _csr_backward,
}


def _solve(table, name: str, T, b, ops):
    m = as_matrix(T)
    fn = dispatch(table, m, name)
    ops = ops_for(m, b, ops=ops)
    logger.debug("%s: %s of size %s", name, type(m).__name__, m.size)
    x = fn(m, b, ops)
    if not is_matrix(T):
        return x.to_list()
    return x


def forward_substitution(T, b, ops: ScalarOps = None):
    """ Solve T·x = b for lower-triangular `T`, returning `x` as an n×1 column
    in the storage format of `T`. Entries above the diagonal are ignored.

    Raises:
        DimensionError: `T` is not square, or `b` is not an n-vector
        SingularMatrixError: `T` has a zero diagonal entry
    """
    return _solve(_FORWARD, "forward_substitution", T, b, ops)


def backward_substitution(T, b, ops: ScalarOps = None):
    """ Solve T·x = b for upper-triangular `T`. See `forward_substitution`. """
    return _solve(_BACKWARD, "backward_substitution", T, b, ops)
