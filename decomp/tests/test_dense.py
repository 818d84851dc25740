import pytest
import numpy as np
from fractions import Fraction

from ..errors import DimensionError, UnsupportedStorageError
from ..formats import as_matrix, dispatch, matrix, ops_for
from ..matrix import DenseMatrix, Storage, check_square
from ..scalar import FRACTION, NUMBER
from ..sparse.matrix import CscMatrix, CsrMatrix


def test_create():
    m = DenseMatrix([[1, 2, 3], [4, 5, 6]])
    assert m.size == (2, 3)
    assert m.rows == 2
    assert m.cols == 3
    assert m.get(1, 2) == 6
    with pytest.raises(IndexError):
        m.get(2, 0)


def test_ragged():
    with pytest.raises(DimensionError) as e:
        DenseMatrix([[1, 2], [3]])
    assert e.value.actual == 1
    assert e.value.expected == 2


def test_from_list():
    m = DenseMatrix.from_list([1, 2, 3])
    assert m.size == (3, 1)
    data = [[1, 2], [3, 4]]
    m = DenseMatrix.from_list(data)
    m.set(0, 0, 9)
    assert data[0][0] == 1


def test_numpy():
    m = DenseMatrix.from_numpy(np.arange(6).reshape(2, 3))
    assert m.to_list() == [[0, 1, 2], [3, 4, 5]]
    assert np.array_equal(m.to_numpy(), np.arange(6).reshape(2, 3))
    assert DenseMatrix.from_numpy(np.ones(3)).size == (3, 1)
    with pytest.raises(DimensionError):
        DenseMatrix.from_numpy(np.ones((2, 2, 2)))


def test_identity():
    i3 = DenseMatrix.identity(3, FRACTION)
    assert i3.to_list() == [[1, 0, 0], [0, 1, 0], [0, 0, 1]]
    assert isinstance(i3.get(0, 1), Fraction)


def test_swap_rows():
    m = DenseMatrix([[1, 2], [3, 4], [5, 6]])
    m.swap_rows(0, 2)
    assert m.to_list() == [[5, 6], [3, 4], [1, 2]]


def test_transpose():
    m = DenseMatrix([[1, 2, 3], [4, 5, 6]])
    assert m.transpose().to_list() == [[1, 4], [2, 5], [3, 6]]
    assert m.transpose().transpose() == m


def test_matmul():
    a = DenseMatrix([[1, 2], [3, 4]])
    b = DenseMatrix([[0, 1], [1, 0]])
    assert a.matmul(b).to_list() == [[2, 1], [4, 3]]
    assert a.matmul(CscMatrix.from_dense(b)).to_list() == [[2, 1], [4, 3]]
    with pytest.raises(DimensionError):
        a.matmul(DenseMatrix([[1, 2, 3]]))


def test_mult():
    a = DenseMatrix([[1, 2], [3, 4]])
    assert a.mult([1, 1]) == [3, 7]
    with pytest.raises(DimensionError):
        a.mult([1, 1, 1])


def test_display():
    m = DenseMatrix([[1, 0], [0, 1]])
    assert m.display() == 'X \n X\n'


def test_check_square():
    check_square(DenseMatrix([[1]]))
    with pytest.raises(DimensionError):
        check_square(DenseMatrix([[1, 2]]))


def test_storage_parse():
    assert Storage.parse('dense') is Storage.DENSE
    assert Storage.parse('sparse') is Storage.CSC
    assert Storage.parse('CSR') is Storage.CSR
    assert Storage.parse(Storage.CSC) is Storage.CSC
    with pytest.raises(UnsupportedStorageError):
        Storage.parse('coo')


def test_matrix_factory():
    data = [[2, 1], [1, 4]]
    s = matrix(data, 'sparse')
    assert isinstance(s, CscMatrix)
    assert s.to_list() == data
    r = matrix(s, 'csr')
    assert isinstance(r, CsrMatrix)
    assert r.to_list() == data
    d = matrix(r)
    assert isinstance(d, DenseMatrix)
    assert d.to_list() == data
    # Same-format conversion copies
    d2 = matrix(d)
    d2.set(0, 0, 0)
    assert d.get(0, 0) == 2


def test_as_matrix():
    m = DenseMatrix([[1]])
    assert as_matrix(m) is m
    assert as_matrix([[1, 2]]).size == (1, 2)
    assert as_matrix(np.eye(2)).size == (2, 2)
    with pytest.raises(UnsupportedStorageError):
        as_matrix("abc")
    # Also a TypeError, for callers that only know the builtin
    with pytest.raises(TypeError):
        as_matrix(42)


def test_dispatch():
    table = {Storage.DENSE: "dense impl"}
    assert dispatch(table, DenseMatrix([[1]]), "op") == "dense impl"
    with pytest.raises(UnsupportedStorageError):
        dispatch(table, CscMatrix.identity(1), "op")


def test_ops_for():
    assert ops_for([[1, 2]], [3]) is NUMBER
    assert ops_for([[1, 2]], [Fraction(1, 2)]) is FRACTION
    assert ops_for(CscMatrix.from_dense([[Fraction(1, 2)]])) is FRACTION
    assert ops_for([[Fraction(1, 2)]], ops=NUMBER) is NUMBER
