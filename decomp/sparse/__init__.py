from .heap import PriorityQueue
from .spa import Spa
from .matrix import Axis, AxisMapping, CompressedMatrix, CscMatrix, CsrMatrix
from .file import SparseFile
from .yaml import MatrixYaml
