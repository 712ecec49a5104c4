"""
Core module: key registry and permutations.
"""

from bayestree.core.keys import Key, KeyRegistry, Permutation

__all__ = ["Key", "KeyRegistry", "Permutation"]
