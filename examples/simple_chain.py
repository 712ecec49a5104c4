"""
Example: Bayes tree over a simple chain.

x1 | x2, x2 | x3, x3 with unit blocks.
"""

import numpy as np
from bayestree import BayesChain, BayesTree, GaussianConditional, optimize, back_substitute_transpose


def main():
    I = np.eye(1)

    # Conditionals in elimination order: x1 first, x3 last
    chain = BayesChain([
        GaussianConditional("x1", [1.0], I, parents=[("x2", I)]),
        GaussianConditional("x2", [2.0], I, parents=[("x3", I)]),
        GaussianConditional("x3", [3.0], I),
    ])

    print("Building Bayes tree from chain x1 -- x2 -- x3...")
    tree = BayesTree(chain)
    tree.print("Bayes tree")

    # Forward solve
    values = optimize(tree)
    print("\nSolution:")
    for key, v in values.items():
        print(f"  {key} = {v}")

    # Transpose solve with a unit right-hand side
    gy = values.copy()
    for key in gy:
        gy[key] = np.ones(1)
    gx = back_substitute_transpose(tree, gy)
    print("\nTranspose solution for unit rhs:")
    for key, v in gx.items():
        print(f"  {key} = {v}")

    # Verify by substitution
    print("\n--- Verification ---")
    print(f"x3 = 3:        {np.isclose(values['x3'][0], 3.0)}")
    print(f"x2 = 2 - x3:   {np.isclose(values['x2'][0], 2.0 - values['x3'][0])}")
    print(f"x1 = 1 - x2:   {np.isclose(values['x1'][0], 1.0 - values['x2'][0])}")


if __name__ == "__main__":
    main()
