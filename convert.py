"""
Convert example matrices from the Kundert `sparse` project
"""

import os
import sys
from pathlib import Path

from decomp import lusolve
from decomp.errors import MatrixError
from decomp.sparse.file import SparseFile
from decomp.sparse.yaml import MatrixYaml


def solve(sf: SparseFile):
    """ Reference solution of a file's system, by sparse LU. None if it has no RHS. """
    if sf.rhs is None:
        return None
    x = lusolve(sf.to_mat(), sf.rhs)
    return [v for (v,) in x.to_list()]


def convert_sparse_to_yaml(src: Path, dest: Path = Path("data")):
    """ Convert all *.mat files under `src` to YAML files in `dest` """
    dest.mkdir(parents=True, exist_ok=True)
    paths = sorted(src.glob("*.mat"))
    results = []
    for path in paths:
        print(f"Reading {path}")
        res = dict(
            real=False,
            read=False,
            rhs=False,
            solve=False,
            yaml=False,
        )
        results.append(res)

        sf = SparseFile(path)
        try:
            sf.read()
        except NotImplementedError as e:
            print(e)
            continue
        except (MatrixError, ValueError) as e:
            res["real"] = True
            print(e)
            continue
        res["real"] = True
        res["read"] = True
        res["rhs"] = sf.rhs is not None

        y = MatrixYaml.from_sparse_file(sf)
        try:
            y.solution = solve(sf)
        except MatrixError as e:
            print(e)
        else:
            res["solve"] = True

        y.dump(dest / f"{path.name}.yaml")
        res["yaml"] = True

    for path, res in zip(paths, results):
        print(f"{str(path.name).ljust(50)} : {res}")
    return results


if __name__ == '__main__':
    if len(sys.argv) > 1:
        src = Path(sys.argv[1])
    else:
        src = Path(os.environ['SPARSE_DIR']) / "matrices"
    convert_sparse_to_yaml(src)
