"""
Reader for the Kundert `sparse` text format:

    <title>
    <size> real
    <row> <col> <value>     (1-based, one entry per line)
    ...
    0 0 0
    <rhs value>             (optional, one per line)
    ...
"""

from typing import List, Optional, Tuple

from ..errors import DimensionError, MatrixError
from .matrix import CscMatrix


class SparseFile(object):
    def __init__(self, path):
        self.path = path
        self.desc: str = ""
        self.desc2: str = ""
        self.size: int = 0
        self.entries: List[Tuple[int, int, float]] = []
        self.rhs: Optional[List[float]] = None
        self.ntype: str = "real"
        self.line: int = 1

    def read(self) -> "SparseFile":
        with open(self.path) as f:
            self.desc = f.readline().strip()
            self.line = 2
            header = f.readline()
            fields = header.strip().split()
            if len(fields) == 2:
                self.size = int(fields[0])
                if fields[1] != "real":
                    raise NotImplementedError(f"Only real values are supported, got {fields[1]!r}")
            elif "--" in fields:
                # Two-line title, with the size alone on the third line
                self.desc2 = header.strip()
                self.line = 3
                self.size = int(f.readline().strip())
            else:
                raise MatrixError(f"{self.path}:{self.line}: header parse error: {header!r}")

            def read_entry():
                self.line += 1
                text = f.readline().strip().split()
                if len(text) != 3:
                    raise MatrixError(f"{self.path}:{self.line}: expected `row col value`, got {text!r}")
                row, col, val = text
                return int(row), int(col), float(val)

            entry = read_entry()
            while entry[0] != 0 and entry[1] != 0:
                self.entries.append(entry)
                entry = read_entry()

            self.line += 1
            text = f.readline().strip()
            if text:  # Right-hand side follows
                self.rhs = []
                while text:
                    if "Beginning source vector" not in text:
                        self.rhs.append(float(text))
                    self.line += 1
                    text = f.readline().strip()
                DimensionError.check(len(self.rhs), self.size, "right-hand side length")
        return self

    def to_mat(self) -> CscMatrix:
        return CscMatrix.from_triplets(((r - 1, c - 1, v) for r, c, v in self.entries),
                                       size=(self.size, self.size))
