import sys
from decimal import localcontext
import pytest

from ..config import DEFAULT_CONFIG, EngineConfig, load_config
from ..scalar import DECIMAL, FRACTION, NUMBER


def test_defaults():
    assert DEFAULT_CONFIG.scalar == "number"
    assert DEFAULT_CONFIG.ops is NUMBER
    assert DEFAULT_CONFIG.qr_residual_factor == 1e5
    assert DEFAULT_CONFIG.qr_residual_tol() == pytest.approx(1e5 * sys.float_info.epsilon)
    assert DEFAULT_CONFIG.qr_residual_tol(DECIMAL) == pytest.approx(1e5 * DECIMAL.epsilon())


def test_frozen():
    with pytest.raises(AttributeError):
        DEFAULT_CONFIG.scalar = "fraction"


def test_invalid():
    with pytest.raises(ValueError):
        EngineConfig(scalar="quaternion")
    with pytest.raises(ValueError):
        EngineConfig(qr_residual_factor=0)


def test_load(tmp_path):
    p = tmp_path / "decomp.yaml"
    p.write_text("scalar: fraction\nqr_residual_factor: 1000\n")
    cfg = load_config(p)
    assert cfg.ops is FRACTION
    assert cfg.qr_residual_factor == 1000.0
    assert isinstance(cfg.qr_residual_factor, float)


def test_load_partial(tmp_path):
    p = tmp_path / "decomp.yaml"
    p.write_text("scalar: decimal\n")
    assert load_config(p) == EngineConfig(scalar="decimal")


def test_load_empty(tmp_path):
    p = tmp_path / "decomp.yaml"
    p.write_text("")
    assert load_config(p) == DEFAULT_CONFIG


def test_load_unknown_key(tmp_path):
    p = tmp_path / "decomp.yaml"
    p.write_text("scalar: number\npivoting: full\n")
    with pytest.raises(ValueError) as e:
        load_config(p)
    assert "pivoting" in str(e.value)


def test_qr_residual_tol_follows_decimal_context():
    with localcontext() as ctx:
        ctx.prec = 12
        assert DEFAULT_CONFIG.qr_residual_tol(DECIMAL) == pytest.approx(1e5 * 1e-11)
    assert DEFAULT_CONFIG.qr_residual_tol(DECIMAL) < 1e-20
