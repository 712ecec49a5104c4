"""
bayestree/solver.py

Solve engine over Bayes chains and Bayes trees.

Forward solve visits every conditional after the conditionals owning its
parents (reverse elimination order for a chain, clique pre-order for a
tree). Transpose solve visits them in the opposite order, accumulating
adjoint contributions into the parents.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Union

from bayestree.core.keys import Permutation
from bayestree.inference.bayes_chain import BayesChain
from bayestree.inference.bayes_tree import BayesTree
from bayestree.linear.conditional import GaussianConditional
from bayestree.linear.factor import JacobianFactor
from bayestree.linear.vector_values import PermutedValues, VectorValues

logger = logging.getLogger(__name__)

Bayes = Union[BayesChain, BayesTree]


@dataclass
class SolveResult:
    """Result from solving a Bayes tree."""
    values: VectorValues
    order: List
    tree: BayesTree


def _gaussian(conditional) -> GaussianConditional:
    if not isinstance(conditional, GaussianConditional):
        raise TypeError(f"Cannot solve non-Gaussian conditional {conditional}")
    return conditional


def forward_order(bayes: Bayes) -> Iterator[GaussianConditional]:
    """Conditionals ordered so that parents are solved before children."""
    if isinstance(bayes, BayesTree):
        conditionals = bayes.conditionals()
    elif isinstance(bayes, BayesChain):
        conditionals = reversed(bayes)
    else:
        raise TypeError(f"Expected BayesChain or BayesTree, got {type(bayes).__name__}")
    for c in conditionals:
        yield _gaussian(c)


def elimination_order(bayes: Bayes) -> List[GaussianConditional]:
    """Conditionals in elimination order (reverse of forward_order)."""
    return list(reversed(list(forward_order(bayes))))


def solve_in_place(bayes: Bayes, x: Union[VectorValues, PermutedValues], verbose: bool = False):
    """
    Forward back-substitution, writing every frontal into x.

    Parents not produced by an earlier conditional must already be in x.
    """
    n = 0
    for c in forward_order(bayes):
        c.solve_in_place(x, verbose=verbose)
        n += 1
    logger.debug("solve_in_place: solved %d conditionals", n)
    return x


def optimize(bayes: Bayes, x: Optional[VectorValues] = None, verbose: bool = False) -> VectorValues:
    """Solve for every variable; returns a new VectorValues."""
    result = VectorValues() if x is None else x.copy()
    return solve_in_place(bayes, result, verbose=verbose)


def solve_permuted(
    bayes: Bayes,
    values: VectorValues,
    permutation: Permutation,
    verbose: bool = False,
) -> PermutedValues:
    """Forward solve into values stored under `permutation`."""
    view = PermutedValues(values, permutation)
    solve_in_place(bayes, view, verbose=verbose)
    return view


def solve_transpose_in_place(bayes: Bayes, gy: Union[VectorValues, PermutedValues]):
    """Transpose back-substitution in elimination order."""
    for c in elimination_order(bayes):
        c.solve_transpose_in_place(gy)
    return gy


def back_substitute_transpose(bayes: Bayes, gx: VectorValues) -> VectorValues:
    """Copying variant of solve_transpose_in_place."""
    return solve_transpose_in_place(bayes, gx.copy())


def scale_by_sigmas(bayes: Bayes, gy: Union[VectorValues, PermutedValues]):
    """Rescale every frontal segment by its conditional's sigmas."""
    for c in forward_order(bayes):
        c.scale_frontals_by_sigma(gy)
    return gy


def to_factors(bayes: Bayes) -> List[JacobianFactor]:
    """One JacobianFactor per conditional, in elimination order."""
    return [c.to_factor() for c in elimination_order(bayes)]


def solve_tree(tree: BayesTree, x: Optional[VectorValues] = None, verbose: bool = False) -> SolveResult:
    """
    Solve a Bayes tree and report the order conditionals were visited in.

    Args:
        tree: A built Bayes tree with Gaussian conditionals
        x: Optional initial values (copied)
        verbose: Log every conditional's solve at INFO

    Returns:
        SolveResult with values, visit order (first frontal keys) and the tree
    """
    order = [c.first_frontal for c in forward_order(tree)]
    values = optimize(tree, x, verbose=verbose)
    return SolveResult(values=values, order=order, tree=tree)
