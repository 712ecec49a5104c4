"""
Tests for BayesChain.
"""

import numpy as np
import pytest

from bayestree.inference.bayes_chain import BayesChain
from bayestree.inference.conditional import SymbolicConditional
from bayestree.linear.conditional import GaussianConditional


class TestBayesChain:
    def test_order(self):
        chain = BayesChain([SymbolicConditional("a", ["b"]), SymbolicConditional("b")])
        chain.push_front(SymbolicConditional("c", ["a"]))
        assert chain.keys() == ["c", "a", "b"]
        assert [c.first_frontal for c in reversed(chain)] == ["b", "a", "c"]
        assert chain.ordering().index("b") == 2

    def test_duplicate_frontal(self):
        chain = BayesChain([SymbolicConditional(("a", "b"))])
        with pytest.raises(ValueError):
            chain.push_back(SymbolicConditional("b"))

    def test_equals(self):
        c1 = BayesChain([GaussianConditional("a", [1.0], np.eye(1))])
        c2 = BayesChain([GaussianConditional("a", [2.0], 3.0 * np.eye(1))])
        c3 = BayesChain([GaussianConditional("b", [1.0], np.eye(1))])
        assert c1.equals(c2)
        assert not c1.equals(c3)

    def test_format(self):
        chain = BayesChain([SymbolicConditional("a", ["b"]), SymbolicConditional("b")])
        assert chain.format().splitlines() == ["BayesChain: 2 conditionals", "  P([a] | [b])", "  P([b])"]
