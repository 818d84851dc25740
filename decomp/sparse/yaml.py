"""
Support for storing array-of-entries form matrices to YAML
"""

from pathlib import Path
from typing import List, Optional, Tuple

import ruamel.yaml

from ..errors import DimensionError
from .file import SparseFile
from .matrix import CscMatrix

yaml = ruamel.yaml.YAML()


@yaml.register_class
class MatrixYaml(object):
    def __init__(self):
        self.desc: str = ""
        self.size: int = 0
        self.entries: List[Tuple] = []  # 0-based (row, col, value)
        self.rhs: Optional[List[float]] = None
        self.ntype: str = "real"
        self.solution: Optional[List[float]] = None

    @classmethod
    def from_sparse_file(cls, sf: SparseFile) -> "MatrixYaml":
        if not isinstance(sf, SparseFile):
            raise TypeError(sf)

        self = cls()
        self.desc = sf.desc
        self.size = sf.size
        self.entries = [(r - 1, c - 1, v) for (r, c, v) in sf.entries]
        self.rhs = sf.rhs
        self.ntype = sf.ntype
        return self

    @classmethod
    def from_mat(cls, m: CscMatrix, desc: str = "", rhs=None, solution=None) -> "MatrixYaml":
        """ Create from a square sparse matrix, plus optional rhs and solution vectors """
        DimensionError.check(m.rows, m.cols, "columns")
        self = cls()
        self.desc = desc
        self.size = m.rows
        self.entries = [(r, c, v) for r, c, v in m.elements()]
        self.rhs = None if rhs is None else list(rhs)
        self.solution = None if solution is None else list(solution)
        return self

    def to_dict(self) -> dict:
        return dict(
            desc=self.desc,
            size=self.size,
            ntype=self.ntype,
            entries=[list(e) for e in self.entries],
            rhs=self.rhs,
            solution=self.solution,
        )

    @classmethod
    def to_yaml(cls, representer, node):
        return representer.represent_dict(node.to_dict())

    @classmethod
    def from_dict(cls, d: dict) -> "MatrixYaml":
        self = cls()
        self.desc = d['desc']
        self.size = d['size']
        self.entries = d['entries']
        self.rhs = d.get('rhs')
        self.ntype = d.get('ntype', 'real')
        self.solution = d.get('solution')
        return self

    def to_mat(self) -> CscMatrix:
        return CscMatrix.from_triplets((tuple(e) for e in self.entries), size=(self.size, self.size))

    def dump(self, file):
        yaml.dump(self, Path(file))

    @classmethod
    def load(cls, file) -> "MatrixYaml":
        y = yaml.load(Path(file))
        rhs = None
        if y.get('rhs'):
            rhs = [float(v) for v in y['rhs']]
        solution = None
        if y.get('solution'):
            solution = [float(v) for v in y['solution']]
        d = dict(
            desc=str(y['desc']),
            ntype=str(y.get('ntype', 'real')),
            size=int(y['size']),
            entries=[(int(r), int(c), float(v)) for r, c, v in y['entries']],
            rhs=rhs,
            solution=solution,
        )
        return cls.from_dict(d)
