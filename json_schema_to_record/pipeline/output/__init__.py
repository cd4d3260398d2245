"""
Output module: writing generated code to disk.
"""

from __future__ import annotations

from .atomic_writer import AtomicWriter

__all__ = ["AtomicWriter"]
