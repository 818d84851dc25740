"""
Engine configuration.

Example YAML:

    scalar: fraction
    qr_residual_factor: 1.0e+5
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional, Union

from ruamel.yaml import YAML

from .scalar import SCALAR_OPS, ScalarOps


@dataclass(frozen=True)
class EngineConfig:
    """
    Attributes:
        scalar: Name of the default scalar arithmetic, one of `SCALAR_OPS`
        qr_residual_factor: QR triangularity tolerance, in multiples of the scalar epsilon
    """
    scalar: str = "number"
    qr_residual_factor: float = 1e5

    def __post_init__(self):
        if self.scalar not in SCALAR_OPS:
            raise ValueError(f"Unknown scalar type {self.scalar!r}, expected one of {sorted(SCALAR_OPS)}")
        if not self.qr_residual_factor > 0:
            raise ValueError(f"qr_residual_factor must be positive, got {self.qr_residual_factor}")

    @property
    def ops(self) -> ScalarOps:
        return SCALAR_OPS[self.scalar]

    def qr_residual_tol(self, ops: Optional[ScalarOps] = None) -> float:
        ops = ops or self.ops
        return self.qr_residual_factor * ops.epsilon()


DEFAULT_CONFIG = EngineConfig()


def load_config(path: Union[str, Path]) -> EngineConfig:
    """ Load an `EngineConfig` from a YAML mapping. Missing keys take their defaults. """
    data = YAML(typ='safe').load(Path(path)) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must hold a mapping")
    known = {f.name for f in fields(EngineConfig)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown config keys in {path}: {sorted(unknown)}")
    if "qr_residual_factor" in data:
        data["qr_residual_factor"] = float(data["qr_residual_factor"])
    return EngineConfig(**data)
