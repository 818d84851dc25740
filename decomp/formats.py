"""
Storage-format table and the `matrix()` factory.

Every matrix type is registered here, keyed by its `Storage` tag. Engine
entry points resolve the storage of their arguments once, via `as_matrix`
and `dispatch`, and then run format-specific code.
"""

from typing import Any, Callable, Dict, Iterator, Optional

import numpy as np

from .errors import UnsupportedStorageError
from .matrix import DenseMatrix, Storage
from .scalar import ScalarOps, infer_ops
from .sparse.matrix import CscMatrix, CsrMatrix

STORAGE_TYPES = {
    Storage.DENSE: DenseMatrix,
    Storage.CSC: CscMatrix,
    Storage.CSR: CsrMatrix,
}
MATRIX_TYPES = tuple(STORAGE_TYPES.values())


def is_matrix(x) -> bool:
    return isinstance(x, MATRIX_TYPES)


def as_matrix(x) -> Any:
    """ Return `x` if it is already a matrix, else wrap array-like data in a DenseMatrix """
    if is_matrix(x):
        return x
    if isinstance(x, np.ndarray):
        return DenseMatrix.from_numpy(x)
    if isinstance(x, (list, tuple)):
        return DenseMatrix.from_list(x)
    raise UnsupportedStorageError(f"Unsupported matrix type: {type(x).__name__}")


def matrix(data, storage="dense", ops: Optional[ScalarOps] = None):
    """ Create a matrix of the given storage format from nested lists, a numpy array, or another matrix.

    Example:
        m = matrix([[2, 1], [1, 4]], 'sparse')  # CscMatrix
    """
    fmt = Storage.parse(storage)
    src = as_matrix(data)
    if src is data and src.storage is fmt:
        return src.copy()
    dense = src.to_dense()
    if fmt is Storage.DENSE:
        return dense.copy()
    return STORAGE_TYPES[fmt].from_dense(dense, ops)


def dispatch(table: Dict[Storage, Callable], m, name: str) -> Callable:
    """ Look up the implementation of operation `name` for the storage of `m` """
    fn = table.get(getattr(m, "storage", None))
    if fn is None:
        raise UnsupportedStorageError(f"{name}() does not support {type(m).__name__} arguments")
    return fn


def scalars(x) -> Iterator[Any]:
    """ Iterate the stored scalars of a matrix, numpy array, or (nested) list """
    if isinstance(x, DenseMatrix):
        yield from x.values()
    elif is_matrix(x):
        yield from x.values
    elif isinstance(x, np.ndarray):
        yield from x.ravel().tolist()
    elif isinstance(x, (list, tuple)):
        for v in x:
            if isinstance(v, (list, tuple)):
                yield from v
            else:
                yield v


def ops_for(*args, ops: Optional[ScalarOps] = None) -> ScalarOps:
    """ `ops` if given, else the `ScalarOps` inferred from the scalars of all `args` """
    if ops is not None:
        return ops
    return infer_ops(v for x in args for v in scalars(x))
