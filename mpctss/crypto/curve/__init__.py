"""Elliptic curves behind a common interface: secp256k1, P-256 and Ed25519."""

__all__ = ["base", "ed25519", "registry", "weierstrass"]