"""
bayestree/inference/conditional.py

Payload-independent conditional interface.

A conditional p(frontals | parents) is identified by its ordered frontal
keys and its ordered parent keys. Fronts, Bayes trees and Bayes chains only
use this interface, so the same machinery carries symbolic conditionals
(structure only) and Gaussian conditionals (numeric payload).
"""

from __future__ import annotations

import numbers
from typing import Hashable, Iterable, Tuple, Union

Key = Hashable


def _as_keys(keys: Union[Key, Iterable[Key]]) -> Tuple[Key, ...]:
    # A bare string or integer (numpy integers included) is a single key
    if isinstance(keys, (str, bytes, numbers.Integral)):
        return (keys,)
    return tuple(keys)


class Conditional:
    """
    Base class for conditionals over ordered frontal and parent keys.

    Attributes:
        frontals: Keys this conditional jointly defines (at least one)
        parents: Keys it is conditioned on (the separator)
    """

    def __init__(self, frontals: Union[Key, Iterable[Key]], parents: Iterable[Key] = ()):
        self._frontals = _as_keys(frontals)
        self._parents = tuple(parents)
        if not self._frontals:
            raise ValueError("Conditional needs at least one frontal key")
        all_keys = self._frontals + self._parents
        if len(set(all_keys)) != len(all_keys):
            raise ValueError(f"Conditional has duplicate keys: {all_keys}")

    @property
    def frontals(self) -> Tuple[Key, ...]:
        return self._frontals

    @property
    def parents(self) -> Tuple[Key, ...]:
        return self._parents

    @property
    def keys(self) -> Tuple[Key, ...]:
        return self._frontals + self._parents

    @property
    def nr_frontals(self) -> int:
        return len(self._frontals)

    @property
    def nr_parents(self) -> int:
        return len(self._parents)

    @property
    def first_frontal(self) -> Key:
        return self._frontals[0]

    def equals(self, other: "Conditional", tol: float = 1e-9) -> bool:
        raise NotImplementedError

    def format(self, s: str = "") -> str:
        frontals = " ".join(f"[{k}]" for k in self._frontals)
        text = f"{s}P({frontals}"
        if self._parents:
            text += " | " + " ".join(f"[{k}]" for k in self._parents)
        return text + ")"

    def print(self, s: str = "") -> None:
        print(self.format(s))

    def __str__(self) -> str:
        return self.format()


class SymbolicConditional(Conditional):
    """A conditional carrying only structure: frontal and parent keys."""

    def equals(self, other: Conditional, tol: float = 1e-9) -> bool:
        if not isinstance(other, SymbolicConditional):
            return False
        return self.frontals == other.frontals and self.parents == other.parents

    def __repr__(self) -> str:
        return f"SymbolicConditional(frontals={self.frontals!r}, parents={self.parents!r})"
