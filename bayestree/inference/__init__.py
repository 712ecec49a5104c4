"""
Inference module: conditionals, fronts, Bayes chains and Bayes trees.
"""

from bayestree.inference.conditional import Conditional, SymbolicConditional
from bayestree.inference.front import Front
from bayestree.inference.bayes_chain import BayesChain
from bayestree.inference.bayes_tree import BayesTree, Node

__all__ = [
    "Conditional",
    "SymbolicConditional",
    "Front",
    "BayesChain",
    "BayesTree",
    "Node",
]
