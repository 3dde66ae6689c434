"""Curves, randomness, hashing, hash-to-curve and commitment schemes."""

__all__ = ["commitment", "curve", "hash_to_curve", "hashing", "rand"]