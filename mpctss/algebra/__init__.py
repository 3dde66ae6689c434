"""Polynomials over prime fields and Shamir secret sharing."""

__all__ = ["polynomial", "shamir"]