import pytest
from decimal import Decimal
from fractions import Fraction

from ..matrix import Axis, AxisMapping, CscMatrix, CsrMatrix, swap_minor
from ...errors import DimensionError, MatrixError
from ...matrix import DenseMatrix


def example():
    """ Helper function.  (Not a test!)
    3x3 matrix with one structural zero, at (0, 1). """
    return CscMatrix.from_dense([[1, 0, 3], [4, 5, 6], [7, 8, 9]])


def test_axis():
    assert ~Axis.rows is Axis.cols
    assert ~Axis.cols is Axis.rows


def test_axis_mapping():
    m = AxisMapping(4)
    m.swap_int(0, 3)
    assert m.i2e == [3, 1, 2, 0]
    assert m.e2i == [3, 1, 2, 0]
    m.swap_int(0, 1)
    assert m.i2e == [1, 3, 2, 0]
    assert m.e2i == [3, 0, 2, 1]
    for e in range(4):
        assert m.i2e[m.e2i[e]] == e


def test_create_matrix():
    m = CscMatrix(size=(3, 2))
    assert m.rows == 3
    assert m.cols == 2
    assert m.nnz == 0
    assert m.ptr == [0, 0, 0]


def test_create_bad_pointers():
    with pytest.raises(DimensionError):
        CscMatrix([1], [0], [0, 1], size=(2, 2))
    with pytest.raises(MatrixError):
        CscMatrix([1], [0], [0, 0, 0], size=(2, 2))


def test_from_dense():
    m = example()
    m._checkup()
    assert m.values == [1, 4, 7, 5, 8, 3, 6, 9]
    assert m.index == [0, 1, 2, 1, 2, 0, 1, 2]
    assert m.ptr == [0, 3, 5, 8]
    assert m.to_list() == [[1, 0, 3], [4, 5, 6], [7, 8, 9]]


def test_from_triplets():
    m = CscMatrix.from_triplets([(2, 1, 1.0), (0, 0, 2.0), (2, 1, 3.0), (1, 1, 0.0)])
    m._checkup()
    assert m.size == (3, 2)
    assert m.nnz == 2
    assert m.get(2, 1) == 4.0
    assert m.get(0, 0) == 2.0
    assert m.get(1, 1) == 0


def test_get():
    m = example()
    assert m.get(0, 0) == 1
    assert m.get(0, 1) == 0
    assert m.get(0, 1, default=None) is None
    assert m.get(2, 2) == 9
    with pytest.raises(IndexError):
        m.get(3, 0)


def test_set():
    m = example()
    m.set(0, 1, 2)
    m._checkup()
    assert m.get(0, 1) == 2
    assert m.nnz == 9
    m.set(1, 0, 0)
    m._checkup()
    assert m.get(1, 0) == 0
    assert m.nnz == 8
    m.set(2, 2, -9)
    assert m.get(2, 2) == -9
    assert m.nnz == 8


def test_identity():
    i2 = CscMatrix.identity(2)
    i2._checkup()
    assert i2.get(0, 0) == 1
    assert i2.get(1, 1) == 1
    assert i2.get(0, 1) == 0
    assert i2.nnz == 2


def test_swap_rows():
    m = CscMatrix.from_triplets([(0, 0, 11.0), (7, 0, 22.0), (0, 7, 33.0), (7, 7, 44.0)])
    m.swap_rows(0, 7)
    m._checkup()
    assert m.get(7, 0) == 11.0
    assert m.get(0, 0) == 22.0
    assert m.get(0, 7) == 44.0
    assert m.get(7, 7) == 33.0


def test_swap_rows2():
    m = CscMatrix.from_dense([[1, 2, 3], [4, 5, 6], [7, 8, 9]])
    m.swap_rows(0, 2)
    m._checkup()
    assert m.to_list() == [[7, 8, 9], [4, 5, 6], [1, 2, 3]]


def test_swap_rows3():
    # Moving an entry past another one in its column
    m = CscMatrix.from_triplets([(1, 0, 71), (2, 0, -11), (2, 2, 99)])
    m.swap_rows(0, 2)
    m._checkup()
    assert m.get(0, 0) == -11
    assert m.get(1, 0) == 71
    assert m.get(2, 0) == 0
    assert m.get(0, 2) == 99


def test_swap_rows4():
    m = CscMatrix.from_dense([[1, 0, 3], [4, 5, 6], [7, 8, 9]])
    m.swap_rows(0, 1)
    m._checkup()
    assert m.to_list() == [[4, 5, 6], [1, 0, 3], [7, 8, 9]]
    m.swap_rows(2, 1)
    m._checkup()
    assert m.to_list() == [[4, 5, 6], [7, 8, 9], [1, 0, 3]]


def test_swap_minor_partial():
    m = example()
    swap_minor(0, 2, 1, m.values, m.index, m.ptr)
    m._checkup()
    # Only the first column swaps
    assert m.to_list() == [[7, 0, 3], [4, 5, 6], [1, 8, 9]]


def test_eq():
    assert example() == example()
    m = example()
    m.set(0, 1, 1)
    assert m != example()
    assert CscMatrix.identity(2) != CsrMatrix.identity(2)


def test_csr():
    m = CsrMatrix.from_dense([[1, 0, 3], [4, 5, 6]])
    m._checkup()
    assert m.size == (2, 3)
    assert m.ptr == [0, 2, 5]
    assert list(m.row(0)) == [(0, 1), (2, 3)]
    assert m.get(1, 1) == 5
    assert m.to_csc() == CscMatrix.from_dense([[1, 0, 3], [4, 5, 6]])
    assert m.to_csc().to_csr() == m


def test_elements():
    m = example()
    assert list(m.to_csr().elements()) == [(0, 0, 1), (0, 2, 3), (1, 0, 4), (1, 1, 5), (1, 2, 6),
                                           (2, 0, 7), (2, 1, 8), (2, 2, 9)]


def test_map():
    m = example().map(lambda v: v - 4)
    m._checkup()
    assert m.get(1, 0) == 0
    assert m.get(0, 0) == -3
    assert m.nnz == 7


def test_mult():
    m = example()
    assert m.mult([1, 1, 1]) == [4, 15, 24]
    assert m.to_csr().mult([1, 1, 1]) == [4, 15, 24]
    with pytest.raises(DimensionError):
        m.mult([1, 1])


def test_matmul():
    a = example()
    b = CscMatrix.from_dense([[1, 0], [0, 0], [0, 2]])
    c = a.matmul(b)
    c._checkup()
    assert c.to_list() == [[1, 6], [4, 12], [7, 18]]
    d = a.matmul(CscMatrix.identity(3))
    assert d == a
    with pytest.raises(DimensionError):
        b.matmul(b)


def test_matmul_cancellation():
    a = CscMatrix.from_dense([[1, 1], [0, 0]])
    b = CscMatrix.from_dense([[1], [-1]])
    c = a.matmul(b)
    assert c.to_list() == [[0], [0]]


def test_fractions():
    m = CscMatrix.from_dense([[Fraction(1, 3), 0], [0, Fraction(2, 3)]])
    assert m.mult([3, 3]) == [1, 2]
    assert isinstance(m.to_dense(), DenseMatrix)


def test_display():
    m = example()
    assert m.display() == 'X X\nXXX\nXXX\n'


def test_tiny_values_kept():
    a = [[1e-17, 0], [2e-17, 1e-17]]
    m = CscMatrix.from_dense(a)
    assert m.nnz == 3
    assert m.to_list() == a
    assert CsrMatrix.from_dense(a).to_list() == a
    m = CscMatrix.from_triplets([(0, 0, 1e-300), (1, 1, 0.0)], (2, 2))
    assert m.nnz == 1
    m.set(1, 0, 1e-20)
    assert m.get(1, 0) == 1e-20
    assert m.map(lambda v: v * 1e-10).nnz == 2


def test_to_dense_typed_zero():
    m = CscMatrix.from_dense([[Fraction(1, 3), 0], [0, Fraction(2, 3)]])
    assert all(isinstance(v, Fraction) for row in m.to_list() for v in row)
    m = CsrMatrix.from_dense([[Decimal('0.5'), 0], [0, 0]])
    assert all(isinstance(v, Decimal) for row in m.to_dense().data for v in row)
    assert m.to_list(zero=None)[1][1] == Decimal(0)
    assert CscMatrix.identity(2).to_list(zero=0.0)[0][1] == 0.0
    assert type(CscMatrix.identity(2).to_list()[0][1]) is int
