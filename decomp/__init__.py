"""
Generic linear-system engine: LU and QR decompositions and triangular solves,
over dense and compressed sparse storage, for any injected scalar arithmetic.
"""

import logging

from .errors import (DecompositionError, DimensionError, MatrixError, SingularMatrixError,
                     UnsupportedStorageError)
from .scalar import DECIMAL, FRACTION, NUMBER, SCALAR_OPS, ScalarOps, infer_ops
from .matrix import DenseMatrix, Storage
from .sparse import CscMatrix, CsrMatrix
from .formats import as_matrix, matrix
from .config import DEFAULT_CONFIG, EngineConfig, load_config
from .substitution import backward_substitution, forward_substitution
from .lu import LupResult, apply_permutation, invert_permutation, lup, lusolve
from .qr import QrResult, qr

logging.getLogger(__name__).addHandler(logging.NullHandler())
