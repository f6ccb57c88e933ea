import logging
from typing import Any, Iterable, Optional

import numpy as np

from rtreap.tree.treap.node_pool import NIL, NodePool
from rtreap.tree.treap.priority import make_rng

logger = logging.getLogger(__name__)


class RandomizedTreap:
    """
    Key-value map backed by a treap.

    Parameters
    ----------
    seed : int, optional
        Seed for the priority generator. Ignored when ``rng`` is given.
    rng : np.random.Generator, optional
        Generator to draw priorities from.
    initial_capacity : int
        Node slots allocated up front, by default 16.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
        initial_capacity: int = 16
    ):
        self._rng = rng if rng is not None else make_rng(seed)
        self._pool = NodePool(initial_capacity)
        self._root = NIL

    @property
    def root(self) -> int:
        return self._root

    @property
    def pool(self) -> NodePool:
        return self._pool

    def __len__(self) -> int:
        return self._pool.size(self._root)

    def __bool__(self) -> bool:
        return self._root != NIL

    def __contains__(self, key: Any) -> bool:
        return self._pool.exists(self._root, key)

    def __getitem__(self, key: Any) -> Any:
        return self.get(key)

    def is_empty(self) -> bool:
        return self._root == NIL

    def insert(self, key: Any, value: Any) -> bool:
        """
        Insert a key-value pair.

        Returns
        -------
        bool
            True if inserted, False if ``key`` was already present. An
            existing key keeps its original value and priority, and no
            priority is drawn for a rejected key.
        """
        if self._pool.exists(self._root, key):
            logger.debug("Key %r already present, insert ignored", key)
            return False
        handle = self._pool.construct(key, value, self._rng)
        self._root = self._pool.insert(self._root, handle, assume_new=True)
        return True

    def build_tree(self, keys: Iterable[Any], values: Iterable[Any]) -> None:
        keys = list(keys)
        values = list(values)
        if len(keys) != len(values):
            raise ValueError("Keys and values must have same length")
        for key, value in zip(keys, values):
            self.insert(key, value)

    def contains(self, key: Any) -> bool:
        return self._pool.exists(self._root, key)

    def search(self, key: Any) -> Any:
        """Return the value stored under ``key``, or None."""
        handle = self._pool.find(self._root, key)
        if handle == NIL:
            return None
        return self._pool.value(handle)

    def get(self, key: Any) -> Any:
        handle = self._pool.find(self._root, key)
        if handle == NIL:
            raise KeyError(key)
        return self._pool.value(handle)

    def rank(self, key: Any) -> int:
        """0-based rank of ``key`` in key order, -1 if not found."""
        return self._pool.rank(self._root, key)

    def select(self, index: int) -> Any:
        """Value at 0-based position ``index`` in key order."""
        return self._pool.value(self._pool.select(self._root, index))

    def height(self) -> int:
        return self._pool.height(self._root)

    def _validate(self) -> bool:
        pool = self._pool
        return (
            pool.is_bst(self._root)
            and pool.is_heap(self._root)
            and pool.sizes_consistent(self._root)
            and pool.size(self._root) == len(pool)
        )
