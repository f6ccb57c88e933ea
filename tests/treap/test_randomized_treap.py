import numpy as np
import pytest

from rtreap.tree.treap.node_pool import NIL
from rtreap.tree.treap.randomized_treap import RandomizedTreap


class TestRandomizedTreap:
    def test_empty_treap(self):
        treap = RandomizedTreap(seed=0)
        assert len(treap) == 0
        assert treap.is_empty()
        assert not bool(treap)
        assert treap.height() == 0
        assert treap.root == NIL
        assert 1.0 not in treap
        assert treap.search(1.0) is None
        assert treap.rank(1.0) == -1

        with pytest.raises(KeyError):
            treap.get(1.0)

        with pytest.raises(KeyError):
            _ = treap[1.0]

        with pytest.raises(IndexError):
            treap.select(0)

        assert treap._validate()

    def test_single_element(self):
        treap = RandomizedTreap(seed=0)
        assert treap.insert(5.0, "five")

        assert len(treap) == 1
        assert not treap.is_empty()
        assert treap.search(5.0) == "five"
        assert treap.get(5.0) == "five"
        assert treap.rank(5.0) == 0
        assert treap.select(0) == "five"
        assert treap.height() == 1
        assert treap.pool.key(treap.root) == 5.0

    def test_basic_operations(self):
        treap = RandomizedTreap(seed=1)

        data = [(3.0, "three"), (1.0, "one"), (4.0, "four"), (2.0, "two")]
        for key, value in data:
            assert treap.insert(key, value)

        assert len(treap) == 4

        assert treap.search(1.0) == "one"
        assert treap.search(2.0) == "two"
        assert treap[3.0] == "three"
        assert treap[4.0] == "four"
        assert treap.search(5.0) is None
        assert treap.contains(2.0)
        assert not treap.contains(5.0)
        assert treap._validate()

    def test_rank_operations(self):
        """Test rank and select operations"""
        treap = RandomizedTreap(seed=2)
        keys = [3.0, 1.0, 4.0, 1.5, 2.0]
        values = ["three", "one", "four", "one_five", "two"]

        for key, value in zip(keys, values):
            treap.insert(key, value)

        # ranks 0-based, sorted order: 1.0, 1.5, 2.0, 3.0, 4.0
        assert treap.rank(1.0) == 0
        assert treap.rank(1.5) == 1
        assert treap.rank(2.0) == 2
        assert treap.rank(3.0) == 3
        assert treap.rank(4.0) == 4
        assert treap.rank(0.5) == -1  # Not found

        # select
        assert treap.select(0) == "one"
        assert treap.select(1) == "one_five"
        assert treap.select(2) == "two"
        assert treap.select(3) == "three"
        assert treap.select(4) == "four"

        with pytest.raises(IndexError):
            treap.select(5)
        with pytest.raises(IndexError):
            treap.select(-1)

    def test_concrete_scenario(self):
        treap = RandomizedTreap()
        for key in [5, 3, 8, 1, 4]:
            treap.insert(key, f"value_{key}")

        assert 3 in treap
        assert 9 not in treap
        assert 3 <= treap.height() <= 5
        assert treap._validate()

    def test_duplicate_keys(self):
        treap = RandomizedTreap(seed=2)

        assert treap.insert(2.0, "first")
        assert not treap.insert(2.0, "second")
        assert not treap.insert(2.0, "third")

        assert len(treap) == 1
        # first value wins, and no node was allocated for the repeats
        assert treap.search(2.0) == "first"
        assert len(treap.pool) == 1
        assert treap._validate()

    def test_build_tree(self):
        treap = RandomizedTreap(seed=3)
        keys = [50, 30, 70, 20, 40, 60, 80]
        values = [100, 200, 300, 400, 500, 600, 700]
        treap.build_tree(keys, values)

        assert len(treap) == 7
        for key, value in zip(keys, values):
            assert treap[key] == value
        np.testing.assert_array_equal(
            np.array([treap.select(i) for i in range(len(treap))]),
            np.array([400, 200, 500, 100, 600, 300, 700])
        )
        assert treap._validate()

    def test_build_tree_mismatched_lengths_raise_error(self):
        treap = RandomizedTreap(seed=3)
        with pytest.raises(
            ValueError,
            match="Keys and values must have same length"
        ):
            treap.build_tree(np.array([1, 2, 3]), np.array([10, 20]))
        assert treap.is_empty()

    def test_queries_do_not_mutate(self):
        treap = RandomizedTreap(seed=4)
        treap.build_tree(range(100), range(100))

        root = treap.root
        first = (treap.height(), 42 in treap, 500 in treap, treap.rank(42))
        second = (treap.height(), 42 in treap, 500 in treap, treap.rank(42))
        assert first == second == (first[0], True, False, 42)
        assert treap.root == root

    def test_same_seed_same_shape(self):
        keys = [7, 2, 9, 4, 1, 8, 3]
        a = RandomizedTreap(seed=11)
        b = RandomizedTreap(rng=np.random.default_rng(11))
        a.build_tree(keys, keys)
        b.build_tree(keys, keys)

        def shape(treap, node):
            pool = treap.pool
            if node == NIL:
                return None
            return (pool.key(node), pool.priority(node),
                    shape(treap, pool.left(node)),
                    shape(treap, pool.right(node)))

        assert shape(a, a.root) == shape(b, b.root)

    def test_sorted_insertion_stays_shallow(self):
        treap = RandomizedTreap(seed=5)
        n = 2000
        for i in range(n):
            treap.insert(i, i)

        assert len(treap) == n
        assert treap._validate()
        # a plain BST would have height n here
        assert treap.height() < 4 * np.log2(n)

    def test_large_dataset(self):
        n = 1000
        # keys and priorities must come from unrelated streams
        treap = RandomizedTreap(seed=42)
        rng = np.random.default_rng(43)
        keys = rng.uniform(0, 1000, n)

        for i, key in enumerate(keys):
            treap.insert(key, f"value_{i}")

        assert len(treap) == len(np.unique(keys))
        height = treap.height()
        assert height < 4 * np.log2(n), f"treap degenerated: height {height}"
        for i in range(0, min(10, n)):
            assert treap.search(keys[i]) == f"value_{i}"

        for _ in range(10):
            rank = int(rng.integers(0, len(treap)))
            selected_value = treap.select(rank)

            value_idx = int(selected_value.split("_")[1])
            assert treap.rank(keys[value_idx]) == rank
        assert treap._validate()

    def test_memory_growth(self):
        treap = RandomizedTreap(seed=6, initial_capacity=4)

        # Insert more than initial capacity
        for i in range(10):
            treap.insert(float(i), f"value_{i}")

        assert len(treap) == 10
        assert treap.pool.capacity >= 10
        for i in range(10):
            assert treap.search(float(i)) == f"value_{i}"
        assert treap._validate()

    def test_edge_case_keys(self):
        treap = RandomizedTreap(seed=6)

        edge_keys = [0.0, -1.0, float("inf"), -float("inf"), 1e-10, 1e10]
        for i, key in enumerate(edge_keys):
            treap.insert(key, f"value_{i}")

        for i, key in enumerate(edge_keys):
            assert treap.get(key) == f"value_{i}"
        assert treap.select(0) == "value_3"
        assert treap.select(len(treap) - 1) == "value_2"
        assert treap._validate()

    def test_string_keys(self):
        treap = RandomizedTreap(seed=7)
        for word in ["pear", "apple", "fig", "kiwi"]:
            treap.insert(word, len(word))

        assert treap["fig"] == 3
        assert treap.rank("apple") == 0
        assert "plum" not in treap
        assert treap._validate()
