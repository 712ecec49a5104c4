"""
Tests for fronts and Bayes trees.
"""

import numpy as np
import pytest

from bayestree.inference.bayes_chain import BayesChain
from bayestree.inference.bayes_tree import BayesTree
from bayestree.inference.conditional import SymbolicConditional
from bayestree.inference.front import Front
from bayestree.linear.conditional import GaussianConditional


@pytest.fixture
def gaussian_chain():
    I = np.eye(1)
    return BayesChain([
        GaussianConditional("x1", [1.0], I, parents=[("x2", I)]),
        GaussianConditional("x2", [2.0], I, parents=[("x3", I)]),
        GaussianConditional("x3", [3.0], I),
    ])


@pytest.fixture
def symbolic_chain():
    # Elimination order X, T, S, E, L, B
    return BayesChain([
        SymbolicConditional("X", ["E"]),
        SymbolicConditional("T", ["E", "L"]),
        SymbolicConditional("S", ["L", "B"]),
        SymbolicConditional("E", ["L", "B"]),
        SymbolicConditional("L", ["B"]),
        SymbolicConditional("B"),
    ])


def assert_separators_owned_by_ancestors(tree):
    for node in tree.nodes:
        ancestors = {a.index for a in node.ancestors()}
        for k in node.separator_keys:
            assert k in tree.key_index
            assert tree.key_index[k] in ancestors


class TestFront:
    def test_construction(self):
        front = Front("a", SymbolicConditional("a", ["c", "d"]))
        assert front.frontal_keys == ["a"]
        assert front.separator_keys == ("c", "d")
        assert front.size() == 3

    def test_add_prepends(self):
        front = Front("a", SymbolicConditional("a", ["c"]))
        cb = SymbolicConditional("b", ["a", "c"])
        front.add("b", cb)
        assert front.frontal_keys == ["b", "a"]
        assert front.conditionals[0] is cb
        assert front.separator_keys == ("c",)
        assert front.size() == 3

    def test_equals_compares_frontal_keys_only(self):
        f1 = Front("a", SymbolicConditional("a", ["c"]))
        f2 = Front("a", SymbolicConditional("a", ["d"]))
        f3 = Front("b", SymbolicConditional("b", ["c"]))
        assert f1.equals(f2)
        assert not f1.equals(f3)

    def test_format(self):
        front = Front("a", SymbolicConditional("a", ["c"]))
        front.add("b", SymbolicConditional("b", ["a", "c"]))
        assert front.format("  ") == "   b a : c"


class TestChainScenario:
    def test_clique_policy_merges(self, gaussian_chain):
        tree = BayesTree()
        for key in ("x3", "x2", "x1"):
            tree.insert(key, gaussian_chain[key])

        assert len(tree) == 2
        assert tree.root().frontal_keys == ["x2", "x3"]
        assert tree.root().separator_keys == ()
        leaf = tree["x1"]
        assert leaf.separator_keys == ("x2",)
        assert leaf.parent is tree.root()
        assert tree.root().children == [leaf]
        assert_separators_owned_by_ancestors(tree)

    def test_separator_policy_does_not_merge(self, gaussian_chain):
        tree = BayesTree(gaussian_chain, merge_policy="separator")
        assert len(tree) == 3
        assert tree.root().frontal_keys == ["x3"]
        assert tree["x1"].parent is tree["x2"]
        assert_separators_owned_by_ancestors(tree)

    def test_from_chain_matches_insert(self, gaussian_chain):
        manual = BayesTree()
        for key in ("x3", "x2", "x1"):
            manual.insert(key, gaussian_chain[key])
        assert BayesTree(gaussian_chain).equals(manual)

    def test_print_tree(self, gaussian_chain, capsys):
        tree = BayesTree(gaussian_chain)
        tree.root().print_tree("")
        assert capsys.readouterr().out == " x2 x3\n   x1 : x2\n"


class TestSymbolicTree:
    def test_structure(self, symbolic_chain):
        tree = BayesTree(symbolic_chain)

        assert len(tree) == 4
        assert tree.root().frontal_keys == ["E", "L", "B"]
        children = [c.format().strip() for c in tree.root().children]
        assert children == ["S : L B", "T : E L", "X : E"]
        tree.check_invariants()

    def test_graph(self, symbolic_chain):
        g = BayesTree(symbolic_chain).to_graph()
        assert sorted(g.edges()) == [(0, 1), (0, 2), (0, 3)]
        assert g.nodes[0]["frontals"] == ("E", "L", "B")

    def test_forward_order(self, symbolic_chain):
        tree = BayesTree(symbolic_chain)
        order = [c.first_frontal for c in tree.conditionals()]
        assert order == ["B", "L", "E", "S", "T", "X"]

    def test_separator_policy(self, symbolic_chain):
        tree = BayesTree(symbolic_chain, merge_policy="separator")
        assert len(tree) == 6
        tree.check_invariants()
        assert_separators_owned_by_ancestors(tree)

    def test_equals(self, symbolic_chain):
        t1 = BayesTree(symbolic_chain)
        t2 = BayesTree(symbolic_chain)
        assert t1.equals(t2)
        assert t1.equals(t1)
        assert not t1.equals(BayesTree(symbolic_chain, merge_policy="separator"))

    def test_format(self, symbolic_chain):
        text = BayesTree(symbolic_chain).format("tree")
        assert text.splitlines()[0] == "tree: 4 cliques"
        assert "     X : E" in text.splitlines()


class TestInsertErrors:
    def test_unknown_parent_leaves_tree_unchanged(self):
        tree = BayesTree()
        tree.insert("x3", SymbolicConditional("x3"))

        with pytest.raises(KeyError):
            tree.insert("x1", SymbolicConditional("x1", ["x9"]))

        assert len(tree) == 1
        assert "x1" not in tree
        with pytest.raises(KeyError):
            tree.index_of("x1")

    def test_unknown_later_parent_leaves_tree_unchanged(self):
        tree = BayesTree()
        tree.insert("x3", SymbolicConditional("x3"))

        with pytest.raises(KeyError):
            tree.insert("x1", SymbolicConditional("x1", ["x3", "ghost"]))

        assert len(tree) == 1
        assert "x1" not in tree
        assert tree.root().frontal_keys == ["x3"]
        assert tree.root().children == []

    def test_unknown_later_parent_gaussian(self):
        tree = BayesTree()
        tree.insert("x3", GaussianConditional("x3", [3.0], np.eye(1)))
        c = GaussianConditional("x1", [1.0], np.eye(1), parents=[("x3", np.eye(1)), ("x9", np.eye(1))])

        with pytest.raises(KeyError):
            tree.insert("x1", c)
        assert list(tree.key_index) == ["x3"]

    def test_unknown_parent_on_empty_tree(self):
        tree = BayesTree()
        with pytest.raises(KeyError):
            tree.insert("x1", SymbolicConditional("x1", ["x2"]))
        assert len(tree) == 0

    def test_duplicate_key(self):
        tree = BayesTree()
        tree.insert("a", SymbolicConditional("a"))
        with pytest.raises(ValueError):
            tree.insert("a", SymbolicConditional("a"))
        assert len(tree) == 1

    def test_key_must_be_frontal(self):
        tree = BayesTree()
        with pytest.raises(ValueError):
            tree.insert("b", SymbolicConditional("a"))

    def test_root_of_empty_tree(self):
        with pytest.raises(IndexError):
            BayesTree().root()

    def test_unknown_merge_policy(self):
        with pytest.raises(ValueError):
            BayesTree(merge_policy="prefix")


class TestForest:
    def test_second_parentless_conditional_is_new_root(self):
        tree = BayesTree()
        tree.insert("a", SymbolicConditional("a"))
        tree.insert("b", SymbolicConditional("b"))
        assert [r.index for r in tree.roots()] == [0, 1]
        assert tree.root().frontal_keys == ["a"]

    def test_invariant_violation_detected(self):
        tree = BayesTree()
        tree.insert("a", SymbolicConditional("a"))
        tree.insert("b", SymbolicConditional("b"))
        tree.insert("c", SymbolicConditional("c", ["a", "b"]))
        with pytest.raises(ValueError):
            tree.check_invariants()


def test_multi_frontal_conditional_keys_indexed():
    tree = BayesTree()
    tree.insert("a", SymbolicConditional(("a", "b")))
    tree.insert("c", SymbolicConditional("c", ["a", "b"]))

    assert tree.index_of("b") == 0
    assert len(tree) == 1
    assert tree.root().frontal_keys == ["c", "a"]


def test_numpy_integer_keys():
    keys = np.arange(3)
    tree = BayesTree()
    tree.insert(keys[2], SymbolicConditional(keys[2]))
    tree.insert(keys[1], SymbolicConditional(keys[1], [keys[2]]))

    assert tree.root().frontal_keys == [1, 2]
    assert tree.index_of(2) == 0
