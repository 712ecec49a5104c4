"""
bayestree: Bayes trees over Gaussian conditionals

Clique trees built from eliminated Bayes chains, with back-substitution
and transpose solves.

Key components:
- core: key registry and permutations
- linear: Gaussian conditionals, Jacobian factors, assignments
- inference: conditional interface, fronts, Bayes chains and Bayes trees
- solver: forward / transpose solves over chains and trees
- io: JSON loading and saving
"""

__version__ = "1.0.0"
__author__ = "bayestree Team"

from bayestree.core.keys import KeyRegistry, Permutation
from bayestree.linear.vector_values import VectorValues, PermutedValues
from bayestree.linear.factor import JacobianFactor
from bayestree.linear.conditional import GaussianConditional
from bayestree.inference.conditional import Conditional, SymbolicConditional
from bayestree.inference.front import Front
from bayestree.inference.bayes_chain import BayesChain
from bayestree.inference.bayes_tree import BayesTree, Node
from bayestree.solver import (
    SolveResult,
    optimize,
    solve_in_place,
    solve_permuted,
    solve_transpose_in_place,
    back_substitute_transpose,
    scale_by_sigmas,
    to_factors,
    solve_tree,
)

__all__ = [
    # Keys
    "KeyRegistry",
    "Permutation",
    # Linear
    "VectorValues",
    "PermutedValues",
    "JacobianFactor",
    "GaussianConditional",
    # Inference
    "Conditional",
    "SymbolicConditional",
    "Front",
    "BayesChain",
    "BayesTree",
    "Node",
    # Solver
    "SolveResult",
    "optimize",
    "solve_in_place",
    "solve_permuted",
    "solve_transpose_in_place",
    "back_substitute_transpose",
    "scale_by_sigmas",
    "to_factors",
    "solve_tree",
]
