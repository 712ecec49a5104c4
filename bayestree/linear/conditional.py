"""
bayestree/linear/conditional.py

Gaussian conditional density in square-root information form.

A GaussianConditional over frontal variables x given parents s_1..s_k is

    p(x | s) = N( R^{-1} (d - sum_i S_i s_i), sigmas )

stored as an upper-triangular block R (frontal_dim x frontal_dim), one dense
block S_i per parent (frontal_dim x dim(s_i)), a right-hand side d and a
diagonal noise vector. An optional permutation re-orders the frontal
scalars of the back-substituted solution.

Operations:
  - solve_in_place: back-substitution given solved parents
  - solve_transpose_in_place: adjoint solve, accumulating into parents
  - scale_frontals_by_sigma: elementwise rescaling of the frontal segment
  - to_factor: materialize as a JacobianFactor
"""

from __future__ import annotations

import logging
from typing import Hashable, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from bayestree.inference.conditional import Conditional
from bayestree.linear.factor import JacobianFactor
from bayestree.linear.numeric import (
    as_matrix,
    as_vector,
    back_substitute_upper,
    back_substitute_upper_transpose,
    equal_with_abs_tol,
    format_matrix,
    linear_dependent,
)

logger = logging.getLogger(__name__)

Key = Hashable
ParentBlocks = Union[Mapping[Key, np.ndarray], Iterable[Tuple[Key, np.ndarray]]]


class GaussianConditional(Conditional):
    """
    Conditional Gaussian density p(frontals | parents).

    Args:
        frontals: A single key or an ordered sequence of keys
        d: Right-hand side, size R.rows
        R: Upper-triangular block; only the upper triangle is kept
        parents: Ordered (key, S) pairs, or a mapping key -> S
        sigmas: Diagonal noise, size R.rows (default: ones)
        frontal_dims: Per-frontal dimensions summing to R.cols; required
            when there is more than one frontal
        permutation: Index array of length R.cols applied to the solution

    Raises:
        ValueError: on any dimension mismatch or if R has more rows than columns
    """

    def __init__(
        self,
        frontals,
        d,
        R,
        parents: ParentBlocks = (),
        sigmas=None,
        frontal_dims: Optional[Sequence[int]] = None,
        permutation: Optional[Sequence[int]] = None,
    ):
        if isinstance(parents, Mapping):
            parents = list(parents.items())
        parents = [(k, as_matrix(S, name=f"S[{k!r}]")) for k, S in parents]
        super().__init__(frontals, [k for k, _ in parents])

        R = as_matrix(R, name="R")
        if R.shape[0] > R.shape[1]:
            raise ValueError(
                f"GaussianConditional: R has more rows than columns ({R.shape[0]} > {R.shape[1]})"
            )
        d = as_vector(d, name="d")
        if d.size != R.shape[0]:
            raise ValueError(f"GaussianConditional: d has size {d.size} but R has {R.shape[0]} rows")
        for k, S in parents:
            if S.shape[0] != R.shape[0]:
                raise ValueError(
                    f"GaussianConditional: S[{k!r}] has {S.shape[0]} rows but R has {R.shape[0]}"
                )

        if sigmas is None:
            sigmas = np.ones(R.shape[0])
        sigmas = as_vector(sigmas, name="sigmas")
        if sigmas.size != R.shape[0]:
            raise ValueError(
                f"GaussianConditional: sigmas has size {sigmas.size} but R has {R.shape[0]} rows"
            )

        if frontal_dims is None:
            if self.nr_frontals != 1:
                raise ValueError("GaussianConditional: frontal_dims required for multiple frontals")
            frontal_dims = (R.shape[1],)
        frontal_dims = tuple(int(n) for n in frontal_dims)
        if len(frontal_dims) != self.nr_frontals or sum(frontal_dims) != R.shape[1]:
            raise ValueError(
                f"GaussianConditional: frontal_dims {frontal_dims} do not split R with {R.shape[1]} columns "
                f"over {self.nr_frontals} frontals"
            )

        if permutation is None:
            permutation = np.arange(R.shape[1])
        permutation = np.asarray(permutation, dtype=int)
        if permutation.shape != (R.shape[1],) or not np.array_equal(
            np.sort(permutation), np.arange(R.shape[1])
        ):
            raise ValueError(f"GaussianConditional: invalid permutation {permutation.tolist()}")

        self._R = np.triu(R)
        self._d = d.copy()
        self._S = {k: S.copy() for k, S in parents}
        self._sigmas = sigmas.copy()
        self._dims = dict(zip(self.frontals, frontal_dims))
        self._permutation = permutation
        for arr in (self._R, self._d, self._sigmas, self._permutation, *self._S.values()):
            arr.setflags(write=False)

    # ---- accessors ----

    @property
    def R(self) -> np.ndarray:
        return self._R

    @property
    def d(self) -> np.ndarray:
        return self._d

    @property
    def sigmas(self) -> np.ndarray:
        return self._sigmas

    @property
    def permutation(self) -> np.ndarray:
        return self._permutation

    @property
    def frontal_dims(self) -> Tuple[int, ...]:
        return tuple(self._dims[k] for k in self.frontals)

    @property
    def frontal_dim(self) -> int:
        return self._R.shape[1]

    def get_S(self, key: Key) -> np.ndarray:
        """Parent block for `key`."""
        try:
            return self._S[key]
        except KeyError:
            raise KeyError(f"{key!r} is not a parent of {self.frontals}") from None

    @property
    def parent_blocks(self) -> List[Tuple[Key, np.ndarray]]:
        return [(k, self._S[k]) for k in self.parents]

    def dim(self, key: Key) -> int:
        """Dimension of a frontal or parent variable."""
        if key in self._dims:
            return self._dims[key]
        return self.get_S(key).shape[1]

    def _require_square(self) -> None:
        if self._R.shape[0] != self._R.shape[1]:
            raise ValueError(f"Cannot back-substitute with non-square R of shape {self._R.shape}")

    # ---- solving ----

    def _parent_rhs(self, x) -> np.ndarray:
        rhs = self._d.copy()
        for k, S in self.parent_blocks:
            xs = x[k]
            if xs.size != S.shape[1]:
                raise ValueError(f"Parent {k!r} has dimension {xs.size}, expected {S.shape[1]}")
            rhs -= S @ xs
        return rhs

    def solve_in_place(self, x, verbose: bool = False) -> None:
        """
        Back-substitute the frontals given parent values already in x.

        Reads every parent from x (KeyError if absent), solves
        R z = d - sum_i S_i x[parent_i], applies the permutation and writes
        the per-frontal segments of the solution into x.
        """
        self._require_square()
        rhs = self._parent_rhs(x)
        z = back_substitute_upper(self._R, rhs)
        soln = np.empty_like(z)
        soln[self._permutation] = z
        level = logging.INFO if verbose else logging.DEBUG
        if logger.isEnabledFor(level):
            logger.log(level, "solve %s: rhs=%s solution=%s", self, rhs, soln)
        x.set_range(self.frontals, soln, self.frontal_dims)

    def solve(self, x):
        """Copy of x with this conditional's frontals solved."""
        result = x.copy()
        self.solve_in_place(result)
        return result

    def rhs(self, x) -> None:
        """Write d into the frontal entries of x."""
        x.set_range(self.frontals, self._d.copy(), self.frontal_dims)

    def solve_transpose_in_place(self, gy) -> None:
        """
        Adjoint of solve_in_place.

        With v the frontal segment of gy, computes y = R^{-T} (P v), subtracts
        S_i^T y from every parent entry and stores y in the frontals.
        """
        self._require_square()
        v = gy.range(self.frontals)
        if v.size != self.frontal_dim:
            raise ValueError(f"Frontal segment has size {v.size}, expected {self.frontal_dim}")
        y = back_substitute_upper_transpose(self._R, v[self._permutation])
        updates = []
        for k, S in self.parent_blocks:
            updates.append((k, gy[k] - S.T @ y))
        for k, value in updates:
            gy[k] = value
        gy.set_range(self.frontals, y, self.frontal_dims)

    def scale_frontals_by_sigma(self, gy) -> None:
        """Multiply the frontal segment of gy elementwise by sigmas."""
        v = gy.range(self.frontals)
        gy.set_range(self.frontals, v * self._sigmas, self.frontal_dims)

    # ---- conversion / comparison ----

    def to_factor(self) -> JacobianFactor:
        """Materialize as a JacobianFactor [R | S_1 | ...] with rhs d."""
        blocks = []
        start = 0
        for k in self.frontals:
            n = self._dims[k]
            blocks.append((k, self._R[:, start:start + n]))
            start += n
        blocks.extend(self.parent_blocks)
        return JacobianFactor(blocks, self._d, self._sigmas)

    def equals(self, other: Conditional, tol: float = 1e-9) -> bool:
        """
        Equal if parents match position-wise, every row of [R | S_1 | ...]
        is linearly dependent on the other's, and sigmas agree within tol.
        """
        if not isinstance(other, GaussianConditional):
            return False
        if self.nr_parents != other.nr_parents:
            return False
        if self.parents != other.parents:
            return False
        if self._R.shape != other._R.shape:
            return False
        for k in self.parents:
            if self._S[k].shape != other._S[k].shape:
                return False
        for i in range(self._R.shape[0]):
            row1 = np.concatenate([self._R[i]] + [self._S[k][i] for k in self.parents])
            row2 = np.concatenate([other._R[i]] + [other._S[k][i] for k in other.parents])
            if not linear_dependent(row1, row2, tol):
                return False
        return equal_with_abs_tol(self._sigmas, other._sigmas, tol)

    def format(self, s: str = "") -> str:
        lines = [f"{s}: density on " + " ".join(f"[{k}]" for k in self.frontals)]
        lines.append(format_matrix("R", self._R))
        for k, S in self.parent_blocks:
            lines.append(format_matrix(f"A[{k}]", S))
        lines.append(format_matrix("d", self._d))
        lines.append(format_matrix("sigmas", self._sigmas))
        return "\n".join(lines)

    def __str__(self) -> str:
        return Conditional.format(self)

    def __repr__(self) -> str:
        return (
            f"GaussianConditional(frontals={self.frontals!r}, parents={self.parents!r}, "
            f"dim={self.frontal_dim})"
        )
