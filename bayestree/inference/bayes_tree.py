"""
bayestree/inference/bayes_tree.py

Bayes tree: a tree of cliques built from a Bayes chain.

Conditionals are inserted in reverse elimination order (root first). Each
insertion either merges the conditional into the clique owning its first
parent or starts a new clique as a child of that clique.

All nodes are owned by the tree's node list; parent/child links are plain
references used for traversal only.
"""

from __future__ import annotations

import logging
from typing import Dict, Hashable, Iterator, List, Optional

import networkx as nx

from bayestree.inference.bayes_chain import BayesChain
from bayestree.inference.conditional import Conditional
from bayestree.inference.front import Front

logger = logging.getLogger(__name__)

Key = Hashable

MERGE_POLICIES = ("clique", "separator")


class Node(Front):
    """A Front with tree connectivity."""

    def __init__(self, index: int, key: Key, conditional: Conditional):
        super().__init__(key, conditional)
        self.index = index
        self.parent: Optional["Node"] = None
        self.children: List["Node"] = []

    def ancestors(self) -> Iterator["Node"]:
        """Parent, grandparent, ... up to the root."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def format_tree(self, indent: str = "") -> str:
        """This node and its subtree, pre-order, children indented by two spaces."""
        lines = [self.format(indent)]
        for child in self.children:
            lines.append(child.format_tree(indent + "  "))
        return "\n".join(lines)

    def print_tree(self, indent: str = "") -> None:
        print(self.format_tree(indent))

    def __repr__(self) -> str:
        return f"Node({self.index}, {self.format().strip()!r})"


class BayesTree:
    """
    Clique tree over conditionals.

    Attributes:
        nodes: All nodes, indexed by position; nodes[0] is the root
        key_index: Frontal key -> index of the owning node
        merge_policy: "clique" merges a conditional into the clique owning
            its first parent when its parents are exactly that clique's
            variables; "separator" merges only when its parents equal that
            clique's separator
    """

    def __init__(self, chain: Optional[BayesChain] = None, merge_policy: str = "clique"):
        if merge_policy not in MERGE_POLICIES:
            raise ValueError(f"Unknown merge policy {merge_policy!r}, expected one of {MERGE_POLICIES}")
        self.merge_policy = merge_policy
        self.nodes: List[Node] = []
        self.key_index: Dict[Key, int] = {}
        if chain is not None:
            for conditional in reversed(chain):
                self.insert(conditional.first_frontal, conditional)

    # ---- construction ----

    def _should_merge(self, node: Node, parents: tuple) -> bool:
        if self.merge_policy == "clique":
            return set(parents) == set(node.variables())
        return set(parents) == set(node.separator_keys)

    def insert(self, key: Key, conditional: Conditional) -> None:
        """
        Insert a conditional on `key`, whose parents must already be in the tree.

        Raises:
            ValueError: if `key` is not a frontal of the conditional or any
                frontal is already in the tree
            KeyError: if any parent has not been inserted

        The tree is unchanged when an error is raised.
        """
        if key not in conditional.frontals:
            raise ValueError(f"BayesTree.insert: {key!r} is not a frontal of {conditional}")
        for k in conditional.frontals:
            if k in self.key_index:
                raise ValueError(f"BayesTree.insert: {k!r} already inserted")
        for p in conditional.parents:
            if p not in self.key_index:
                raise KeyError(f"BayesTree.insert({key!r}): parent {p!r} not yet inserted")

        parents = conditional.parents
        if not parents:
            node = self._add_node(key, conditional, parent=None)
            if node.index > 0:
                logger.debug("BayesTree.insert(%r): additional root %d", key, node.index)
            return

        owner = self.nodes[self.key_index[parents[0]]]

        if self._should_merge(owner, parents):
            owner.add(key, conditional)
            for k in conditional.frontals:
                self.key_index[k] = owner.index
            logger.debug("BayesTree.insert(%r): merged into clique %d", key, owner.index)
        else:
            node = self._add_node(key, conditional, parent=owner)
            logger.debug("BayesTree.insert(%r): new clique %d under %d", key, node.index, owner.index)

    def _add_node(self, key: Key, conditional: Conditional, parent: Optional[Node]) -> Node:
        node = Node(len(self.nodes), key, conditional)
        node.parent = parent
        if parent is not None:
            parent.children.append(node)
        self.nodes.append(node)
        for k in conditional.frontals:
            self.key_index[k] = node.index
        return node

    # ---- queries ----

    def root(self) -> Node:
        """The clique at index 0 (the last eliminated variable's clique)."""
        if not self.nodes:
            raise IndexError("BayesTree.root: tree is empty")
        return self.nodes[0]

    def roots(self) -> List[Node]:
        return [n for n in self.nodes if n.parent is None]

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, key: Key) -> bool:
        return key in self.key_index

    def index_of(self, key: Key) -> int:
        try:
            return self.key_index[key]
        except KeyError:
            raise KeyError(f"BayesTree: no clique owns {key!r}") from None

    def __getitem__(self, key: Key) -> Node:
        """The node owning `key`."""
        return self.nodes[self.index_of(key)]

    def preorder(self) -> Iterator[Node]:
        """Nodes, each root's subtree parent before children."""
        for r in self.roots():
            stack = [r]
            while stack:
                node = stack.pop()
                yield node
                stack.extend(reversed(node.children))

    def conditionals(self) -> Iterator[Conditional]:
        """
        Conditionals in a valid forward-solve order.

        Cliques are visited pre-order; inside a clique the earliest added
        conditional is solved first.
        """
        for node in self.preorder():
            for conditional in reversed(node.conditionals):
                yield conditional

    def to_graph(self) -> nx.DiGraph:
        """Directed graph with parent -> child edges between node indices."""
        g = nx.DiGraph()
        for node in self.nodes:
            g.add_node(node.index, frontals=tuple(node.frontal_keys), separator=node.separator_keys)
            if node.parent is not None:
                g.add_edge(node.parent.index, node.index)
        return g

    def check_invariants(self) -> None:
        """
        Every separator key must be owned by a strict ancestor.

        Raises:
            ValueError: on the first violation found
        """
        g = self.to_graph()
        for node in self.nodes:
            ancestors = nx.ancestors(g, node.index)
            for k in node.separator_keys:
                if k not in self.key_index:
                    raise ValueError(f"Clique {node.index}: separator key {k!r} has no owner")
                if self.key_index[k] not in ancestors:
                    raise ValueError(
                        f"Clique {node.index}: separator key {k!r} owned by {self.key_index[k]}, "
                        f"which is not an ancestor"
                    )

    def equals(self, other: "BayesTree", tol: float = 1e-9) -> bool:
        if not isinstance(other, BayesTree) or len(self) != len(other):
            return False
        return all(a.equals(b, tol) for a, b in zip(self.nodes, other.nodes))

    def format(self, s: str = "") -> str:
        lines = [f"{s}: {len(self)} cliques"]
        for r in self.roots():
            lines.append(r.format_tree("  "))
        return "\n".join(lines)

    def print(self, s: str = "") -> None:
        print(self.format(s))

    def __repr__(self) -> str:
        return f"BayesTree(cliques={len(self)}, keys={len(self.key_index)})"
