"""
Exception hierarchy.

All errors derive from `MatrixError`, so callers can catch any engine failure
with a single clause. Sub-classes carry the offending indices or shapes as
attributes.
"""

from typing import Optional, Tuple


class MatrixError(Exception):
    @classmethod
    def assert_true(cls, cond, msg: str = ""):
        if not cond:
            raise cls(msg)

    @classmethod
    def assert_eq(cls, x, y, msg: str = ""):
        if x != y:
            raise cls(msg or f"{x!r} != {y!r}")


class DimensionError(MatrixError):
    """
    Shapes of the inputs are incompatible.

    Attributes:
        actual: The offending size
        expected: The size that was required, if known
    """

    def __init__(self, message: str = "", actual=None, expected=None):
        super().__init__(message)
        self.actual = actual
        self.expected = expected

    @classmethod
    def check(cls, actual, expected, what: str = "size"):
        if actual != expected:
            raise cls(f"Dimension mismatch: {what} {actual} != {expected}", actual=actual, expected=expected)


class SingularMatrixError(MatrixError):
    """
    A required pivot (diagonal) divisor is zero.

    Attributes:
        index: Diagonal position of the zero divisor, if known
    """

    def __init__(self, message: str = "Linear system cannot be solved since matrix is singular",
                 index: Optional[int] = None):
        super().__init__(message)
        self.index = index


class DecompositionError(MatrixError):
    """
    A decomposition failed its own post-condition check.
    Indicates a defect in the arithmetic, not bad input.

    Attributes:
        row, col: Position of the offending entry
        value: The offending value
    """

    def __init__(self, message: str, row: Optional[int] = None, col: Optional[int] = None, value=None):
        super().__init__(message)
        self.row = row
        self.col = col
        self.value = value

    @property
    def position(self) -> Tuple[Optional[int], Optional[int]]:
        return (self.row, self.col)


class UnsupportedStorageError(MatrixError, TypeError):
    """ The storage format of an argument is not handled by the operation. """
    pass
