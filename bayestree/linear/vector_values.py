"""
bayestree/linear/vector_values.py

Assignment containers: a mapping from variable key to a numeric vector.

VectorValues is the plain container. PermutedValues is a view that stores
each variable's value under a permuted slot; solves run through it
unchanged because every access goes through __getitem__/__setitem__.
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence

import numpy as np

from bayestree.core.keys import Key, Permutation
from bayestree.linear.numeric import as_vector, equal_with_abs_tol


class VectorValues:
    """
    Ordered mapping key -> 1-D float vector.

    Absent keys raise KeyError; values are never defaulted.
    """

    def __init__(self, values: Optional[Mapping[Key, Sequence[float]]] = None):
        self._values: Dict[Key, np.ndarray] = {}
        if values is not None:
            for k, v in values.items():
                self[k] = v

    @staticmethod
    def zero(dims: Mapping[Key, int]) -> "VectorValues":
        """All-zero assignment with the given per-key dimensions."""
        out = VectorValues()
        for k, d in dims.items():
            out[k] = np.zeros(d)
        return out

    def __getitem__(self, key: Key) -> np.ndarray:
        try:
            return self._values[key]
        except KeyError:
            raise KeyError(f"No value for variable {key!r}") from None

    def __setitem__(self, key: Key, value) -> None:
        self._values[key] = as_vector(value, name=f"value of {key!r}").copy()

    def __contains__(self, key: Key) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[Key]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def keys(self) -> List[Key]:
        return list(self._values.keys())

    def items(self):
        return self._values.items()

    def dims(self) -> Dict[Key, int]:
        return {k: v.size for k, v in self._values.items()}

    def range(self, keys: Iterable[Key]) -> np.ndarray:
        """Concatenate the vectors of the given keys."""
        parts = [self[k] for k in keys]
        if not parts:
            return np.zeros(0)
        return np.concatenate(parts)

    def set_range(self, keys: Sequence[Key], vec: np.ndarray, dims: Sequence[int]) -> None:
        """Split vec into per-key segments of the given dims."""
        set_range(self, keys, vec, dims)

    def vector(self) -> np.ndarray:
        """All entries concatenated in key order."""
        return self.range(self._values.keys())

    def copy(self) -> "VectorValues":
        return VectorValues(self._values)

    def equals(self, other: "VectorValues", tol: float = 1e-9) -> bool:
        if set(self._values) != set(other.keys()):
            return False
        return all(equal_with_abs_tol(v, other[k], tol) for k, v in self._values.items())

    def print(self, s: str = "") -> None:
        print(self.format(s))

    def format(self, s: str = "") -> str:
        lines = [f"{s}VectorValues: {len(self)} entries"]
        for k, v in self._values.items():
            lines.append(f"  {k}: {np.array2string(v, precision=6)}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"VectorValues({ {k: v.tolist() for k, v in self._values.items()} })"


class PermutedValues:
    """
    View over a VectorValues whose entries are stored under permuted keys.

    `view[k]` reads `values[permutation[k]]`.
    """

    def __init__(self, values: VectorValues, permutation: Permutation):
        self.values = values
        self.permutation = permutation

    def __getitem__(self, key: Key) -> np.ndarray:
        return self.values[self.permutation[key]]

    def __setitem__(self, key: Key, value) -> None:
        self.values[self.permutation[key]] = value

    def __contains__(self, key: Key) -> bool:
        return key in self.permutation and self.permutation[key] in self.values

    def __iter__(self) -> Iterator[Key]:
        return (k for k in self.permutation if self.permutation[k] in self.values)

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def range(self, keys: Iterable[Key]) -> np.ndarray:
        parts = [self[k] for k in keys]
        if not parts:
            return np.zeros(0)
        return np.concatenate(parts)

    def set_range(self, keys: Sequence[Key], vec: np.ndarray, dims: Sequence[int]) -> None:
        set_range(self, keys, vec, dims)

    def unpermuted(self) -> VectorValues:
        """Copy of the view as a plain VectorValues keyed by variable."""
        return VectorValues({k: self[k] for k in self})


def set_range(x, keys: Sequence[Key], vec: np.ndarray, dims: Sequence[int]) -> None:
    """Write consecutive segments of vec into x[keys[i]]."""
    if sum(dims) != vec.size:
        raise ValueError(f"set_range: vector of size {vec.size} does not match dims {list(dims)}")
    start = 0
    for k, d in zip(keys, dims):
        x[k] = vec[start:start + d]
        start += d
