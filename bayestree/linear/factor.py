"""
bayestree/linear/factor.py

Linear (Jacobian) factor: a block row [A_1 | A_2 | ... | b] with diagonal noise.

Produced by GaussianConditional.to_factor so a Bayes tree or chain can be
flattened back into a factor list.
"""

from __future__ import annotations

from typing import Dict, Hashable, Iterable, List, Tuple

import numpy as np

from bayestree.linear.numeric import as_matrix, as_vector, equal_with_abs_tol

Key = Hashable


class JacobianFactor:
    """
    Gaussian factor ||Sigma^{-1/2} (sum_j A_j x_j - b)||^2 / 2.

    Attributes:
        keys: Ordered keys, one per block
        b: Right-hand side
        sigmas: Diagonal noise standard deviations
    """

    def __init__(self, blocks: Iterable[Tuple[Key, np.ndarray]], b, sigmas=None):
        self._blocks: Dict[Key, np.ndarray] = {}
        b = as_vector(b, name="b")
        keys = []
        for k, A in blocks:
            A = as_matrix(A, name=f"A[{k!r}]")
            if A.shape[0] != b.size:
                raise ValueError(f"JacobianFactor: A[{k!r}] has {A.shape[0]} rows but b has {b.size}")
            if k in self._blocks:
                raise ValueError(f"JacobianFactor: duplicate key {k!r}")
            self._blocks[k] = A.copy()
            keys.append(k)
        self.keys: Tuple[Key, ...] = tuple(keys)
        self.b = b.copy()
        if sigmas is None:
            sigmas = np.ones(b.size)
        self.sigmas = as_vector(sigmas, name="sigmas").copy()
        if self.sigmas.size != b.size:
            raise ValueError(f"JacobianFactor: sigmas has size {self.sigmas.size} but b has {b.size}")

    def get_A(self, key: Key) -> np.ndarray:
        return self._blocks[key]

    @property
    def A(self) -> np.ndarray:
        if not self.keys:
            return np.zeros((self.b.size, 0))
        return np.hstack([self._blocks[k] for k in self.keys])

    def augmented_matrix(self) -> np.ndarray:
        """[A | b]"""
        return np.hstack([self.A, self.b.reshape(-1, 1)])

    def rows(self) -> int:
        return self.b.size

    def dims(self) -> List[int]:
        return [self._blocks[k].shape[1] for k in self.keys]

    def error_vector(self, x) -> np.ndarray:
        """Whitened residual (A x - b) / sigmas."""
        r = -self.b.copy()
        for k in self.keys:
            r += self._blocks[k] @ x[k]
        return r / self.sigmas

    def error(self, x) -> float:
        e = self.error_vector(x)
        return 0.5 * float(e @ e)

    def equals(self, other: "JacobianFactor", tol: float = 1e-9) -> bool:
        if not isinstance(other, JacobianFactor) or self.keys != other.keys:
            return False
        for k in self.keys:
            if not equal_with_abs_tol(self._blocks[k], other.get_A(k), tol):
                return False
        return equal_with_abs_tol(self.b, other.b, tol) and equal_with_abs_tol(self.sigmas, other.sigmas, tol)

    def __repr__(self) -> str:
        return f"JacobianFactor(keys={self.keys!r}, rows={self.rows()})"
