"""
QR decomposition by Householder reflections.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from .config import DEFAULT_CONFIG
from .errors import DecompositionError
from .formats import as_matrix, dispatch, is_matrix, ops_for
from .matrix import DenseMatrix, Storage
from .scalar import ScalarOps

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QrResult:
    """
    Immutable result of a QR decomposition, A = Q·R.

    Attributes:
        Q: Unitary factor, m × m
        R: Upper-triangular factor, m × n
    """
    Q: Any
    R: Any


def _largest(m: DenseMatrix, ops: ScalarOps):
    """ The entry of largest magnitude, or `ops.one` for an all-zero matrix """
    big = ops.zero
    for v in m.values():
        if ops.abs_gt(v, big):
            big = v
    return ops.one if ops.is_zero(big) else big


def _dense_qr(m: DenseMatrix, ops: ScalarOps, residual_tol: float) -> QrResult:
    rows, cols = m.size
    Q = DenseMatrix.identity(rows, ops)
    R = m.copy()
    q, r = Q.data, R.data
    w = [ops.zero] * rows

    for k in range(min(rows, cols)):
        pivot = r[k][k]
        sgn = ops.negate(ops.one if ops.is_zero(pivot) else ops.sign(pivot))
        conj_sgn = ops.conj(sgn)

        alpha_sq = ops.zero
        for i in range(k, rows):
            alpha_sq = ops.add(alpha_sq, ops.multiply(r[i][k], ops.conj(r[i][k])))
        alpha = ops.multiply(sgn, ops.sqrt(alpha_sq))
        if ops.is_zero(alpha):
            continue  # Column is already zero below the diagonal

        # Householder vector w, scaled so that w[k] = 1
        u1 = ops.subtract(pivot, alpha)
        w[k] = ops.one
        for i in range(k + 1, rows):
            w[i] = ops.divide(r[i][k], u1)
        tau = ops.negate(ops.conj(ops.divide(u1, alpha)))

        # R = H·R
        for j in range(k, cols):
            s = ops.zero
            for i in range(k, rows):
                s = ops.add(s, ops.multiply(ops.conj(w[i]), r[i][j]))
            s = ops.multiply(s, tau)
            for i in range(k, rows):
                r[i][j] = ops.multiply(ops.subtract(r[i][j], ops.multiply(w[i], s)), conj_sgn)

        # Q = Q·H'
        for i in range(rows):
            s = ops.zero
            for j in range(k, rows):
                s = ops.add(s, ops.multiply(q[i][j], w[j]))
            s = ops.multiply(s, tau)
            for j in range(k, rows):
                q[i][j] = ops.divide(ops.subtract(q[i][j], ops.multiply(s, ops.conj(w[j]))), conj_sgn)

    # Rounding leaves residue below the diagonal of R.
    # Anything beyond the tolerance is an arithmetic defect.
    limit = ops.multiply(_largest(m, ops), ops.from_float(residual_tol))
    coerced = 0
    for i in range(rows):
        for j in range(min(i, cols)):
            v = r[i][j]
            if v == ops.zero:
                continue
            if ops.abs_gt(v, limit):
                raise DecompositionError(f"QR: R is not upper triangular, R[{i}][{j}] = {v!r}",
                                         row=i, col=j, value=v)
            r[i][j] = ops.zero
            coerced += 1
    if coerced:
        logger.debug("QR: coerced %d sub-diagonal residuals of R to zero", coerced)
    return QrResult(Q, R)


_QR = {
    Storage.DENSE: _dense_qr,
}


def qr(A, ops: Optional[ScalarOps] = None, residual_tol: Optional[float] = None) -> QrResult:
    """ Householder QR decomposition of a dense matrix.

    Args:
        A: DenseMatrix, numpy array or nested lists, m × n
        ops: Scalar arithmetic, inferred from `A` if not given
        residual_tol: Relative tolerance for the triangularity check of R.
            Defaults to `DEFAULT_CONFIG.qr_residual_tol(ops)`.

    Returns:
        QrResult(Q, R), as nested lists if `A` is nested lists

    Raises:
        UnsupportedStorageError: `A` is sparse
        DecompositionError: R fails its triangularity check
    """
    m = as_matrix(A)
    fn = dispatch(_QR, m, "qr")
    ops = ops_for(m, ops=ops)
    if residual_tol is None:
        residual_tol = DEFAULT_CONFIG.qr_residual_tol(ops)
    logger.debug("qr: size %s, residual tolerance %g", m.size, residual_tol)
    result = fn(m, ops, residual_tol)
    if not is_matrix(A):
        return QrResult(result.Q.to_list(), result.R.to_list())
    return result
