"""
bayestree/inference/front.py

A Front (clique) groups conditionals that are solved together.

The separator is fixed by the conditional the front is created from;
later additions are prepended, so the most recently added frontal key
comes first.
"""

from __future__ import annotations

from typing import Hashable, Iterator, List, Tuple

from bayestree.inference.conditional import Conditional

Key = Hashable


class Front:
    """
    Clique of frontal keys and their conditionals over a shared separator.

    Attributes:
        frontal_keys: Frontal keys, most recently added first
        conditionals: Conditionals aligned 1:1 with frontal_keys
        separator_keys: Parents of the first conditional
    """

    def __init__(self, key: Key, conditional: Conditional):
        self.frontal_keys: List[Key] = []
        self.conditionals: List[Conditional] = []
        self.add(key, conditional)
        self._separator: Tuple[Key, ...] = tuple(conditional.parents)

    @property
    def separator_keys(self) -> Tuple[Key, ...]:
        return self._separator

    def add(self, key: Key, conditional: Conditional) -> None:
        """Prepend a frontal key and its conditional. No separator check."""
        self.frontal_keys.insert(0, key)
        self.conditionals.insert(0, conditional)

    def size(self) -> int:
        """Number of frontal keys plus separator keys."""
        return len(self.frontal_keys) + len(self._separator)

    def keys(self) -> Tuple[Key, ...]:
        return tuple(self.frontal_keys) + self._separator

    def variables(self) -> Tuple[Key, ...]:
        """All frontals of every conditional, then the separator."""
        frontals = tuple(k for c in self.conditionals for k in c.frontals)
        return frontals + self._separator

    def __iter__(self) -> Iterator[Tuple[Key, Conditional]]:
        return iter(zip(self.frontal_keys, self.conditionals))

    def __len__(self) -> int:
        return len(self.frontal_keys)

    def equals(self, other: "Front", tol: float = 1e-9) -> bool:
        """Fronts are equal when their frontal key sequences are."""
        return isinstance(other, Front) and self.frontal_keys == other.frontal_keys

    def format(self, s: str = "") -> str:
        text = s + "".join(f" {k}" for k in self.frontal_keys)
        if self._separator:
            text += " :" + "".join(f" {k}" for k in self._separator)
        return text

    def print(self, s: str = "") -> None:
        print(self.format(s))

    def __repr__(self) -> str:
        return f"Front({self.format().strip()!r})"
