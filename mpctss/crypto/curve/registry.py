"""Construction of curve instances by type."""

from __future__ import annotations

from mpctss.crypto.curve.base import Curve, CurveType, UnsupportedCurveError
from mpctss.crypto.curve.ed25519 import Ed25519Curve
from mpctss.crypto.curve.weierstrass import P256Curve, Secp256k1Curve

__all__ = ["new_curve"]

_FACTORIES = {
    CurveType.SECP256K1: Secp256k1Curve,
    CurveType.P256: P256Curve,
    CurveType.ED25519: Ed25519Curve,
}


def new_curve(curve_type: CurveType | int) -> Curve:
    """Return a new instance of the requested curve."""
    try:
        kind = CurveType(curve_type)
    except ValueError as exc:
        raise UnsupportedCurveError() from exc
    return _FACTORIES[kind]()