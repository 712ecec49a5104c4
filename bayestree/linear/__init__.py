"""
Linear module: Gaussian conditionals, Jacobian factors and assignments.
"""

from bayestree.linear.vector_values import VectorValues, PermutedValues
from bayestree.linear.factor import JacobianFactor
from bayestree.linear.conditional import GaussianConditional
from bayestree.linear.numeric import linear_dependent, back_substitute_upper, back_substitute_upper_transpose

__all__ = [
    "VectorValues",
    "PermutedValues",
    "JacobianFactor",
    "GaussianConditional",
    "linear_dependent",
    "back_substitute_upper",
    "back_substitute_upper_transpose",
]
