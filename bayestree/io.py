"""
bayestree/io.py

JSON loading and saving for Gaussian Bayes chains and assignments.

Expected chain format (conditionals listed in elimination order):
{
    "conditionals": [
        {"frontals": ["x1"], "R": [[1.0]], "d": [1.0],
         "parents": [{"key": "x2", "S": [[1.0]]}],
         "sigmas": [1.0], "dims": [1]}
    ]
}
"sigmas", "dims", "parents" and "permutation" are optional.
"""

from __future__ import annotations

import json
from typing import Any, Dict

from bayestree.inference.bayes_chain import BayesChain
from bayestree.linear.conditional import GaussianConditional
from bayestree.linear.vector_values import VectorValues


def conditional_from_dict(data: Dict[str, Any]) -> GaussianConditional:
    """Build one GaussianConditional from its JSON description."""
    try:
        frontals = data["frontals"]
        R = data["R"]
        d = data["d"]
    except KeyError as e:
        raise ValueError(f"Conditional description is missing field {e.args[0]!r}") from None
    parents = [(p["key"], p["S"]) for p in data.get("parents", [])]
    return GaussianConditional(
        frontals,
        d,
        R,
        parents=parents,
        sigmas=data.get("sigmas"),
        frontal_dims=data.get("dims"),
        permutation=data.get("permutation"),
    )


def chain_from_dict(data: Dict[str, Any]) -> BayesChain:
    """Build a BayesChain from a parsed JSON document."""
    return BayesChain(conditional_from_dict(c) for c in data["conditionals"])


def load_chain(filepath: str) -> BayesChain:
    """Load a Gaussian Bayes chain from a JSON file."""
    with open(filepath, 'r') as f:
        data = json.load(f)
    return chain_from_dict(data)


def values_to_dict(values: VectorValues) -> Dict[str, list]:
    """JSON-ready mapping; keys are stringified."""
    return {str(k): v.tolist() for k, v in values.items()}


def values_from_dict(data: Dict[str, list]) -> VectorValues:
    return VectorValues(data)


def save_values(filepath: str, values: VectorValues, **extra: Any) -> None:
    """Save an assignment (and any extra top-level fields) to JSON."""
    output = {"values": values_to_dict(values)}
    output.update(extra)
    with open(filepath, 'w') as f:
        json.dump(output, f, indent=2)
