"""
Array-backed treap nodes.

A treap is a binary search tree by key and a max-heap by a random priority
drawn once per node. For distinct keys and priorities the two orderings fix
the shape of the tree regardless of insertion order, which gives an expected
height of O(log n) without rotations or rebalancing rules.

Nodes live in a :class:`NodePool`: keys and values in Python lists, and
priority, child links and subtree sizes in numpy arrays that grow by
doubling. A node is addressed by its integer handle and a tree by the handle
of its root, with ``NIL`` standing for the empty tree. ``split`` and
``insert`` rewire the links of existing nodes instead of copying them, so a
node must belong to exactly one tree. Every walk is iterative, so a
degenerate (list-shaped) treap is handled at any depth.
"""
from typing import Any, Optional

import numpy as np

from rtreap.tree.treap.priority import draw_priority

NIL = -1


class NodePool:
    """
    Growable storage for treap nodes.

    Parameters
    ----------
    initial_capacity : int
        Number of node slots allocated up front, by default 16. Storage
        doubles whenever it runs out.
    """

    def __init__(self, initial_capacity: int = 16):
        if initial_capacity < 1:
            raise ValueError("initial_capacity must be positive")
        self._capacity = initial_capacity
        self._keys: list[Any] = []
        self._values: list[Any] = []
        self._priority = np.zeros(initial_capacity, dtype=np.int64)
        self._left = np.full(initial_capacity, NIL, dtype=np.int64)
        self._right = np.full(initial_capacity, NIL, dtype=np.int64)
        self._count = np.zeros(initial_capacity, dtype=np.int64)

    def __len__(self) -> int:
        return len(self._keys)

    @property
    def capacity(self) -> int:
        return self._capacity

    def _grow(self) -> None:
        extra = self._capacity
        self._priority = np.concatenate(
            [self._priority, np.zeros(extra, dtype=np.int64)]
        )
        self._left = np.concatenate(
            [self._left, np.full(extra, NIL, dtype=np.int64)]
        )
        self._right = np.concatenate(
            [self._right, np.full(extra, NIL, dtype=np.int64)]
        )
        self._count = np.concatenate(
            [self._count, np.zeros(extra, dtype=np.int64)]
        )
        self._capacity += extra

    def new_node(self, key: Any, value: Any, priority: int) -> int:
        """Allocate a detached node with an explicit priority."""
        handle = len(self._keys)
        if handle == self._capacity:
            self._grow()
        self._keys.append(key)
        self._values.append(value)
        self._priority[handle] = priority
        self._left[handle] = NIL
        self._right[handle] = NIL
        self._count[handle] = 1
        return handle

    def construct(
        self,
        key: Any,
        value: Any,
        rng: Optional[np.random.Generator] = None
    ) -> int:
        """
        Create a single-node treap with a freshly drawn priority.

        Parameters
        ----------
        key : Any
            Ordering key; must be totally ordered against the other keys of
            the tree it will join.
        value : Any
            Payload stored alongside the key.
        rng : np.random.Generator, optional
            Generator the priority is drawn from. Consumes exactly one
            value. The shared default generator is used when omitted.

        Returns
        -------
        int
            Handle of the new node.
        """
        return self.new_node(key, value, draw_priority(rng))

    def key(self, handle: int) -> Any:
        return self._keys[handle]

    def value(self, handle: int) -> Any:
        return self._values[handle]

    def priority(self, handle: int) -> int:
        return int(self._priority[handle])

    def left(self, handle: int) -> int:
        return int(self._left[handle])

    def right(self, handle: int) -> int:
        return int(self._right[handle])

    def size(self, root: int) -> int:
        """Number of nodes in the subtree, read from the stored count."""
        if root == NIL:
            return 0
        return int(self._count[root])

    def join(self, handle: int, left: int = NIL, right: int = NIL) -> int:
        """Make ``left`` and ``right`` the children of ``handle``."""
        self._left[handle] = left
        self._right[handle] = right
        self._count[handle] = 1 + self.size(left) + self.size(right)
        return handle

    def _refresh(self, handle: int) -> None:
        self._count[handle] = (
            1
            + self.size(int(self._left[handle]))
            + self.size(int(self._right[handle]))
        )

    def find(self, root: int, key: Any) -> int:
        """Return the handle holding ``key``, or ``NIL``."""
        node = root
        while node != NIL:
            node_key = self._keys[node]
            if key < node_key:
                node = int(self._left[node])
            elif node_key < key:
                node = int(self._right[node])
            else:
                return node
        return NIL

    def exists(self, root: int, key: Any) -> bool:
        return self.find(root, key) != NIL

    def split(self, root: int, key: Any) -> tuple[int, int]:
        """
        Partition a treap around ``key``.

        The input tree is consumed: its nodes are redistributed between the
        two returned trees and only the links along the search path for
        ``key`` are rewritten. Priorities are never compared, and every node
        keeps an ancestor chain drawn from its original ancestors, so both
        halves remain valid treaps.

        Parameters
        ----------
        root : int
            Root of the treap to split.
        key : Any
            Pivot key.

        Returns
        -------
        tuple[int, int]
            ``(left, right)`` where ``left`` holds every key ``< key`` and
            ``right`` every key ``>= key``.
        """
        left_root = right_root = NIL
        # last node placed on each side; the next one hangs off it
        left_tail = right_tail = NIL
        path = []
        node = root
        while node != NIL:
            path.append(node)
            if self._keys[node] < key:
                if left_tail == NIL:
                    left_root = node
                else:
                    self._right[left_tail] = node
                left_tail = node
                node = int(self._right[node])
            else:
                if right_tail == NIL:
                    right_root = node
                else:
                    self._left[right_tail] = node
                right_tail = node
                node = int(self._left[node])
        if left_tail != NIL:
            self._right[left_tail] = NIL
        if right_tail != NIL:
            self._left[right_tail] = NIL
        # children of a path node are either untouched or deeper on the path
        for node in reversed(path):
            self._refresh(node)
        return left_root, right_root

    def insert(self, root: int, handle: int, assume_new: bool = False) -> int:
        """
        Insert the detached node ``handle`` into the treap at ``root``.

        Below higher-priority nodes the insertion descends by key; at the
        first node whose priority does not exceed the new one, that subtree
        is split around the new key and hung under ``handle``.

        Parameters
        ----------
        root : int
            Root of the target treap.
        handle : int
            A detached node, typically fresh from :meth:`construct`.
        assume_new : bool
            Skip the duplicate-key lookup when the caller has already made
            sure the key is absent.

        Returns
        -------
        int
            Root of the updated treap, which may be ``handle`` itself.

        Raises
        ------
        ValueError
            If ``handle`` still has children, i.e. is owned by another tree.
        KeyError
            If the key is already present. The tree is left unchanged.
        """
        if self._left[handle] != NIL or self._right[handle] != NIL:
            raise ValueError("Node is already part of a tree")
        key = self._keys[handle]
        if not assume_new and self.exists(root, key):
            raise KeyError(key)
        priority = self._priority[handle]

        path = []
        went_left = False
        node = root
        while node != NIL and self._priority[node] > priority:
            path.append(node)
            went_left = key < self._keys[node]
            node = int(self._left[node] if went_left else self._right[node])

        left, right = self.split(node, key)
        self.join(handle, left, right)
        if not path:
            return handle

        parent = path[-1]
        if went_left:
            self._left[parent] = handle
        else:
            self._right[parent] = handle
        for node in path:
            self._count[node] += 1
        return root

    def height(self, root: int) -> int:
        """Number of nodes on the longest root-to-leaf path (0 when empty)."""
        best = 0
        stack = [(root, 1)] if root != NIL else []
        while stack:
            node, depth = stack.pop()
            if depth > best:
                best = depth
            for child in (self._left[node], self._right[node]):
                if child != NIL:
                    stack.append((int(child), depth + 1))
        return best

    def rank(self, root: int, key: Any) -> int:
        """0-based position of ``key`` in key order, or -1 if absent."""
        position = 0
        node = root
        while node != NIL:
            node_key = self._keys[node]
            if key < node_key:
                node = int(self._left[node])
            elif node_key < key:
                position += 1 + self.size(int(self._left[node]))
                node = int(self._right[node])
            else:
                return position + self.size(int(self._left[node]))
        return -1

    def select(self, root: int, index: int) -> int:
        """Handle of the node at 0-based position ``index`` in key order."""
        if not 0 <= index < self.size(root):
            raise IndexError(f"Index {index} out of range")
        node = root
        while True:
            left = int(self._left[node])
            left_size = self.size(left)
            if index < left_size:
                node = left
            elif index == left_size:
                return node
            else:
                index -= left_size + 1
                node = int(self._right[node])

    def _nodes(self, root: int):
        stack = [root] if root != NIL else []
        while stack:
            node = stack.pop()
            yield node
            for child in (self._left[node], self._right[node]):
                if child != NIL:
                    stack.append(int(child))

    def is_bst(self, root: int) -> bool:
        """Check strict key ordering: left keys < node key < right keys."""
        stack = [(root, NIL, NIL)] if root != NIL else []
        while stack:
            node, low, high = stack.pop()
            key = self._keys[node]
            if low != NIL and not self._keys[low] < key:
                return False
            if high != NIL and not key < self._keys[high]:
                return False
            left = int(self._left[node])
            right = int(self._right[node])
            if left != NIL:
                stack.append((left, low, node))
            if right != NIL:
                stack.append((right, node, high))
        return True

    def is_heap(self, root: int) -> bool:
        """Check that no child has a higher priority than its parent."""
        for node in self._nodes(root):
            for child in (self._left[node], self._right[node]):
                if child != NIL and self._priority[child] > self._priority[node]:
                    return False
        return True

    def sizes_consistent(self, root: int) -> bool:
        for node in self._nodes(root):
            expected = (
                1
                + self.size(int(self._left[node]))
                + self.size(int(self._right[node]))
            )
            if self._count[node] != expected:
                return False
        return True
