"""
Tests for assignments, permutations and the key registry.
"""

import numpy as np
import pytest

from bayestree.core.keys import KeyRegistry, Permutation
from bayestree.linear.numeric import linear_dependent
from bayestree.linear.vector_values import PermutedValues, VectorValues


class TestVectorValues:
    def test_missing_key_raises(self):
        x = VectorValues({"a": [1.0]})
        with pytest.raises(KeyError):
            x["b"]

    def test_scalars_become_vectors(self):
        x = VectorValues({"a": 2.0})
        assert x["a"].shape == (1,)

    def test_range_and_set_range(self):
        x = VectorValues({"a": [1.0], "b": [2.0, 3.0]})
        assert np.allclose(x.range(["b", "a"]), [2.0, 3.0, 1.0])

        x.set_range(["a", "b"], np.array([4.0, 5.0, 6.0]), [1, 2])
        assert np.allclose(x["a"], [4.0])
        assert np.allclose(x["b"], [5.0, 6.0])

    def test_set_range_size_mismatch(self):
        x = VectorValues()
        with pytest.raises(ValueError):
            x.set_range(["a"], np.zeros(3), [2])

    def test_zero(self):
        x = VectorValues.zero({"a": 2, "b": 1})
        assert x.dims() == {"a": 2, "b": 1}
        assert np.allclose(x.vector(), 0.0)

    def test_copy_is_independent(self):
        x = VectorValues({"a": [1.0]})
        y = x.copy()
        y["a"] = [5.0]
        assert np.allclose(x["a"], [1.0])

    def test_equals(self):
        x = VectorValues({"a": [1.0]})
        assert x.equals(VectorValues({"a": [1.0 + 1e-12]}))
        assert not x.equals(VectorValues({"a": [1.1]}))
        assert not x.equals(VectorValues({"b": [1.0]}))


class TestPermutedValues:
    def test_reads_and_writes_through_permutation(self):
        storage = VectorValues({0: [10.0], 1: [11.0], 2: [12.0]})
        view = PermutedValues(storage, Permutation({0: 2, 1: 0, 2: 1}))

        assert np.allclose(view[0], [12.0])
        view[1] = [7.0]
        assert np.allclose(storage[0], [7.0])
        assert np.allclose(view.unpermuted().vector(), [12.0, 7.0, 11.0])

    def test_unknown_key(self):
        view = PermutedValues(VectorValues(), Permutation.identity(["a"]))
        with pytest.raises(KeyError):
            view["b"]


class TestPermutation:
    def test_inverse(self):
        p = Permutation({"a": "b", "b": "c", "c": "a"})
        inv = p.inverse()
        assert all(inv[p[k]] == k for k in p)

    def test_not_injective(self):
        with pytest.raises(ValueError):
            Permutation({"a": "b", "b": "b"})

    def test_not_onto_same_keys(self):
        with pytest.raises(ValueError):
            Permutation({"a": "z"})

    def test_from_orders(self):
        p = Permutation.from_orders(["a", "b"], ["b", "a"])
        assert p["a"] == "b"
        with pytest.raises(ValueError):
            Permutation.from_orders(["a"], ["a", "b"])


class TestKeyRegistry:
    def test_build(self):
        reg = KeyRegistry.build(["x3", "x2", "x1"])
        assert reg.index("x1") == 2
        assert reg.key(0) == "x3"
        assert len(reg) == 3
        assert "x2" in reg

    def test_duplicate_rejected(self):
        reg = KeyRegistry.build(["x"])
        with pytest.raises(ValueError):
            reg.add("x")


class TestLinearDependent:
    def test_scalar_multiple(self):
        assert linear_dependent(np.array([1.0, 2.0, 0.0]), np.array([-2.0, -4.0, 0.0]))

    def test_zero_pattern_differs(self):
        assert not linear_dependent(np.array([1.0, 0.0]), np.array([1.0, 1.0]))

    def test_not_multiple(self):
        assert not linear_dependent(np.array([1.0, 2.0]), np.array([1.0, 3.0]))

    def test_both_zero(self):
        assert linear_dependent(np.zeros(3), np.zeros(3))
