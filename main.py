#!/usr/bin/env python3
"""
bayestree: Bayes trees over Gaussian conditionals

Builds a clique tree from an eliminated Gaussian Bayes chain and solves it
by back-substitution.

Usage:
    # Solve a chain stored as JSON
    python main.py solve --input chain.json --output result.json

    # Transpose solve with a given right-hand side
    python main.py solve --input chain.json --transpose --rhs rhs.json

    # Run demos
    python main.py demo --example chain

    # Run tests
    python main.py test
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import numpy as np

from bayestree import (
    BayesTree,
    GaussianConditional,
    BayesChain,
    VectorValues,
    Permutation,
    optimize,
    solve_permuted,
    back_substitute_transpose,
    solve_tree,
    __version__,
)
from bayestree.io import load_chain, save_values, values_from_dict

logger = logging.getLogger("bayestree.cli")


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def print_values(values: VectorValues) -> None:
    for key, v in values.items():
        vec = ', '.join(f'{a:.6f}' for a in v)
        print(f"  {key} = [{vec}]")


def cmd_solve(args):
    """Execute the solve command."""
    if not args.input:
        print("Error: Must specify --input FILE")
        return 1

    print(f"Loading chain from: {args.input}")
    try:
        chain = load_chain(args.input)
    except (OSError, ValueError, KeyError) as e:
        print(f"Error loading chain: {e}")
        return 1

    print(f"\nBayes chain: {len(chain)} conditionals")
    for c in chain:
        print(f"  {c}")

    try:
        tree = BayesTree(chain, merge_policy=args.merge_policy)
    except (KeyError, ValueError) as e:
        print(f"Error building Bayes tree: {e}")
        return 1
    print()
    print(tree.format("Bayes tree"))

    bayes = tree if args.tree else chain
    try:
        if args.transpose:
            if not args.rhs:
                print("Error: --transpose requires --rhs FILE")
                return 1
            with open(args.rhs, 'r') as f:
                gy = values_from_dict(json.load(f))
            values = back_substitute_transpose(bayes, gy)
            print("\nTranspose solution:")
        else:
            if args.tree:
                result = solve_tree(tree, verbose=args.verbose)
                values = result.values
                print(f"\nVisit order: {' '.join(str(k) for k in result.order)}")
            else:
                values = optimize(chain, verbose=args.verbose)
            print("\nSolution:")
    except (KeyError, ValueError, TypeError) as e:
        logger.error("solve failed: %s", e)
        print(f"Error during solving: {e}")
        return 1

    print_values(values)

    if args.output:
        save_values(args.output, values, cliques=len(tree), transpose=bool(args.transpose))
        print(f"\nResults saved to: {args.output}")

    return 0


def demo_simple_chain():
    """Demo: chain x1 -> x2 -> x3"""
    print("=" * 60)
    print("Demo: Chain x1 | x2, x2 | x3, x3")
    print("=" * 60)

    I = np.eye(1)
    chain = BayesChain([
        GaussianConditional("x1", [1.0], I, parents=[("x2", I)]),
        GaussianConditional("x2", [2.0], I, parents=[("x3", I)]),
        GaussianConditional("x3", [3.0], I),
    ])
    tree = BayesTree(chain)
    print()
    tree.print("Bayes tree")

    values = optimize(tree)
    print("\nSolution:")
    print_values(values)

    expected = VectorValues({"x3": [3.0], "x2": [-1.0], "x1": [2.0]})
    match = values.equals(expected)
    print(f"\nMatch: {match}")
    return match


def demo_multivariate():
    """Demo: 2-D variables with a shared separator"""
    print("=" * 60)
    print("Demo: 2-D variables")
    print("=" * 60)

    R = np.array([[2.0, 1.0], [0.0, 4.0]])
    S = np.array([[1.0, 0.0], [0.5, 1.0]])
    chain = BayesChain([
        GaussianConditional("a", [3.0, 4.0], R, parents=[("c", S)]),
        GaussianConditional("b", [1.0, 1.0], R, parents=[("c", S)]),
        GaussianConditional("c", [2.0, 8.0], R),
    ])
    tree = BayesTree(chain)
    print()
    tree.print("Bayes tree")

    values = optimize(tree)
    print("\nSolution:")
    print_values(values)

    residuals = []
    for c in chain:
        lhs = c.R @ values[c.first_frontal]
        rhs = c.d - sum((S_i @ values[k] for k, S_i in c.parent_blocks), np.zeros(c.frontal_dim))
        residuals.append(np.max(np.abs(lhs - rhs)))
    match = max(residuals) < 1e-9
    print(f"\nMax residual: {max(residuals):.3e}")
    print(f"Match: {match}")
    return match


def demo_permuted():
    """Demo: solve into a permuted assignment"""
    print("=" * 60)
    print("Demo: Permuted assignment")
    print("=" * 60)

    I = np.eye(1)
    chain = BayesChain([
        GaussianConditional(0, [1.0], I, parents=[(1, I)]),
        GaussianConditional(1, [2.0], I, parents=[(2, I)]),
        GaussianConditional(2, [3.0], I),
    ])
    perm = Permutation.from_orders([0, 1, 2], [2, 0, 1])
    storage = VectorValues.zero({0: 1, 1: 1, 2: 1})
    view = solve_permuted(chain, storage, perm)

    plain = optimize(chain)
    print("\nStorage slots:")
    print_values(storage)
    match = view.unpermuted().equals(plain, tol=0.0)
    print(f"\nMatch: {match}")
    return match


def cmd_demo(args):
    """Execute the demo command."""
    demos = {
        "chain": demo_simple_chain,
        "multivariate": demo_multivariate,
        "permuted": demo_permuted,
    }

    if args.example == "all":
        results = []
        for name, func in demos.items():
            try:
                passed = func()
            except (KeyError, ValueError) as e:
                print(f"Error in {name}: {e}")
                passed = False
            results.append((name, passed))
            print()

        print("=" * 60)
        print("Summary")
        print("=" * 60)
        all_passed = True
        for name, passed in results:
            status = "PASS" if passed else "FAIL"
            print(f"  {name}: {status}")
            if not passed:
                all_passed = False

        return 0 if all_passed else 1

    passed = demos[args.example]()
    return 0 if passed else 1


def cmd_test(args):
    """Execute the test command."""
    import subprocess

    test_dir = Path(__file__).parent / "tests"
    if not test_dir.exists():
        print(f"Test directory not found: {test_dir}")
        return 1

    cmd = [sys.executable, "-m", "pytest", str(test_dir)]
    if args.verbose:
        cmd.append("-v")
    if args.coverage:
        cmd.extend(["--cov=bayestree", "--cov-report=term-missing"])

    print(f"Running: {' '.join(cmd)}")
    result = subprocess.run(cmd, cwd=Path(__file__).parent)
    return result.returncode


def cmd_info(args):
    """Display system information."""
    print(f"bayestree v{__version__}")
    print("Bayes trees over Gaussian conditionals")
    print()
    print("Merge policies:")
    print("  clique    - merge when parents equal the owning clique's variables")
    print("  separator - merge when parents equal the owning clique's separator")
    print()
    print("Python:", sys.version.split()[0])
    print("NumPy:", np.__version__)

    import scipy
    import networkx
    print("SciPy:", scipy.__version__)
    print("NetworkX:", networkx.__version__)

    return 0


def main():
    parser = argparse.ArgumentParser(
        prog="bayestree",
        description="bayestree: Bayes trees over Gaussian conditionals",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Solve a chain stored as JSON
  bayestree solve --input chain.json --output result.json

  # Transpose solve
  bayestree solve --input chain.json --transpose --rhs rhs.json

  # Run demos
  bayestree demo --example all

  # Run tests
  bayestree test -v
"""
    )

    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"bayestree {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Solve command
    solve_parser = subparsers.add_parser("solve", help="Solve a Gaussian Bayes chain")
    solve_parser.add_argument("--input", "-i", type=str, help="Input JSON file")
    solve_parser.add_argument("--output", "-o", type=str, help="Output JSON file")
    solve_parser.add_argument("--transpose", "-t", action="store_true", help="Transpose solve")
    solve_parser.add_argument("--rhs", type=str, help="Right-hand side JSON for --transpose")
    solve_parser.add_argument(
        "--merge-policy", "-p",
        choices=["clique", "separator"],
        default="clique",
        help="Clique merge policy (default: clique)"
    )
    solve_parser.add_argument(
        "--no-tree",
        dest="tree",
        action="store_false",
        help="Solve over the chain instead of the tree"
    )
    solve_parser.add_argument("--verbose", "-v", action="store_true", help="Trace every conditional solve")

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Run demonstration examples")
    demo_parser.add_argument(
        "--example", "-e",
        choices=["chain", "multivariate", "permuted", "all"],
        default="all",
        help="Which example to run (default: all)"
    )

    # Test command
    test_parser = subparsers.add_parser("test", help="Run test suite")
    test_parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    test_parser.add_argument("--coverage", "-c", action="store_true", help="With coverage")

    # Info command
    subparsers.add_parser("info", help="Show system information")

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 0

    configure_logging(getattr(args, "verbose", False) and args.command == "solve")

    if args.command == "solve":
        return cmd_solve(args)
    elif args.command == "demo":
        return cmd_demo(args)
    elif args.command == "test":
        return cmd_test(args)
    elif args.command == "info":
        return cmd_info(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
