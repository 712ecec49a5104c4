"""
bayestree/core/keys.py

Key bookkeeping: stable integer indices and key permutations.

Keys are opaque hashable identifiers (strings or integers) naming one
unknown each. Two small structures are kept here:
- KeyRegistry: insertion-ordered key -> index map
- Permutation: bijective key -> storage-key map used by permuted assignments
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Hashable, Iterable, Iterator, List, Mapping

Key = Hashable


@dataclass
class KeyRegistry:
    """
    Registry assigning stable indices to keys in insertion order.

    Attributes:
        key_to_index: Key -> index
        index_to_key: Index -> key
    """
    key_to_index: Dict[Key, int] = field(default_factory=dict)
    index_to_key: List[Key] = field(default_factory=list)

    @staticmethod
    def build(keys: Iterable[Key]) -> "KeyRegistry":
        """Build a registry from keys, in the order given."""
        reg = KeyRegistry()
        for k in keys:
            reg.add(k)
        return reg

    def add(self, key: Key) -> int:
        """Register a key and return its index. Duplicates are rejected."""
        if key in self.key_to_index:
            raise ValueError(f"Key {key!r} already registered")
        idx = len(self.index_to_key)
        self.key_to_index[key] = idx
        self.index_to_key.append(key)
        return idx

    def index(self, key: Key) -> int:
        """Get index by key."""
        return self.key_to_index[key]

    def key(self, idx: int) -> Key:
        """Get key by index."""
        return self.index_to_key[idx]

    def __contains__(self, key: Key) -> bool:
        return key in self.key_to_index

    def __len__(self) -> int:
        return len(self.index_to_key)


class Permutation:
    """
    A bijection from variable keys to storage keys.

    A permuted assignment stores the value of variable `k` under
    `perm[k]`; the algorithms only ever see variable keys.
    """

    def __init__(self, mapping: Mapping[Key, Key]):
        self._map: Dict[Key, Key] = dict(mapping)
        if len(set(self._map.values())) != len(self._map):
            raise ValueError("Permutation is not injective")
        if set(self._map.values()) != set(self._map.keys()):
            raise ValueError("Permutation must map a key set onto itself")

    @staticmethod
    def identity(keys: Iterable[Key]) -> "Permutation":
        return Permutation({k: k for k in keys})

    @staticmethod
    def from_orders(source: Iterable[Key], target: Iterable[Key]) -> "Permutation":
        """Map the i-th key of `source` to the i-th key of `target`."""
        src = list(source)
        tgt = list(target)
        if len(src) != len(tgt):
            raise ValueError(f"Orders differ in length: {len(src)} != {len(tgt)}")
        return Permutation(dict(zip(src, tgt)))

    def inverse(self) -> "Permutation":
        return Permutation({v: k for k, v in self._map.items()})

    def __getitem__(self, key: Key) -> Key:
        return self._map[key]

    def __contains__(self, key: Key) -> bool:
        return key in self._map

    def __iter__(self) -> Iterator[Key]:
        return iter(self._map)

    def __len__(self) -> int:
        return len(self._map)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Permutation):
            return NotImplemented
        return self._map == other._map

    def __repr__(self) -> str:
        return f"Permutation({self._map!r})"
