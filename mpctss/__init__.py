"""Cryptographic building blocks for threshold signature schemes."""

__version__ = "0.1.0"
__all__ = ["algebra", "crypto", "security"]