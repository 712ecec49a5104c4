"""
bayestree/inference/bayes_chain.py

Bayes chain: conditionals in elimination order.

The first entry is the first eliminated variable (a leaf); the last entry is
the last eliminated one (the root). Forward solves walk the chain backwards,
transpose solves walk it forwards.
"""

from __future__ import annotations

from typing import Dict, Hashable, Iterable, Iterator, List, Optional, Set, Tuple

from bayestree.core.keys import KeyRegistry
from bayestree.inference.conditional import Conditional

Key = Hashable


class BayesChain:
    """
    Ordered mapping key -> conditional, in elimination order.

    Each conditional is stored under its first frontal key.
    """

    def __init__(self, conditionals: Optional[Iterable[Conditional]] = None):
        self._order: List[Key] = []
        self._conditionals: Dict[Key, Conditional] = {}
        self._frontals: Set[Key] = set()
        if conditionals is not None:
            for c in conditionals:
                self.push_back(c)

    def _check_new(self, conditional: Conditional) -> Key:
        for k in conditional.frontals:
            if k in self._frontals:
                raise ValueError(f"BayesChain already has a conditional on {k!r}")
        self._frontals.update(conditional.frontals)
        return conditional.first_frontal

    def push_back(self, conditional: Conditional) -> None:
        """Append a conditional eliminated after all current ones."""
        key = self._check_new(conditional)
        self._order.append(key)
        self._conditionals[key] = conditional

    def push_front(self, conditional: Conditional) -> None:
        """Prepend a conditional eliminated before all current ones."""
        key = self._check_new(conditional)
        self._order.insert(0, key)
        self._conditionals[key] = conditional

    def keys(self) -> List[Key]:
        return list(self._order)

    def ordering(self) -> KeyRegistry:
        """Elimination position of every key in the chain."""
        return KeyRegistry.build(self._order)

    def items(self) -> List[Tuple[Key, Conditional]]:
        return [(k, self._conditionals[k]) for k in self._order]

    def __getitem__(self, key: Key) -> Conditional:
        return self._conditionals[key]

    def __contains__(self, key: Key) -> bool:
        return key in self._conditionals

    def __iter__(self) -> Iterator[Conditional]:
        return (self._conditionals[k] for k in self._order)

    def __reversed__(self) -> Iterator[Conditional]:
        return (self._conditionals[k] for k in reversed(self._order))

    def __len__(self) -> int:
        return len(self._order)

    def equals(self, other: "BayesChain", tol: float = 1e-9) -> bool:
        if not isinstance(other, BayesChain) or self._order != other.keys():
            return False
        return all(c.equals(other[k], tol) for k, c in self.items())

    def format(self, s: str = "") -> str:
        lines = [f"{s}BayesChain: {len(self)} conditionals"]
        for c in self:
            lines.append("  " + str(c))
        return "\n".join(lines)

    def print(self, s: str = "") -> None:
        print(self.format(s))
