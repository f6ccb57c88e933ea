from typing import Any, Optional


class _BSTNode:
    __slots__ = ("key", "value", "left", "right")

    def __init__(self, key: Any, value: Any):
        self.key = key
        self.value = value
        self.left: Optional["_BSTNode"] = None
        self.right: Optional["_BSTNode"] = None


class BinarySearchTree:
    """
    Plain, unbalanced binary search tree.

    Used as a baseline to compare treap heights against: its shape depends
    entirely on insertion order, so sorted input degenerates into a list.
    All operations are iterative for that reason.
    """

    def __init__(self):
        self._root: Optional[_BSTNode] = None
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self._size > 0

    def __contains__(self, key: Any) -> bool:
        return self._find(key) is not None

    def __getitem__(self, key: Any) -> Any:
        return self.get(key)

    def is_empty(self) -> bool:
        return self._size == 0

    def _find(self, key: Any) -> Optional[_BSTNode]:
        node = self._root
        while node is not None:
            if key < node.key:
                node = node.left
            elif node.key < key:
                node = node.right
            else:
                return node
        return None

    def insert(self, key: Any, value: Any) -> bool:
        """Insert ``key``; returns False and keeps the old value on duplicates."""
        new = _BSTNode(key, value)
        if self._root is None:
            self._root = new
            self._size += 1
            return True

        node = self._root
        while True:
            if key < node.key:
                if node.left is None:
                    node.left = new
                    break
                node = node.left
            elif node.key < key:
                if node.right is None:
                    node.right = new
                    break
                node = node.right
            else:
                return False
        self._size += 1
        return True

    def contains(self, key: Any) -> bool:
        return self._find(key) is not None

    def get(self, key: Any) -> Any:
        node = self._find(key)
        if node is None:
            raise KeyError(key)
        return node.value

    def height(self) -> int:
        # level-order walk, one level per iteration
        depth = 0
        level = [self._root] if self._root is not None else []
        while level:
            depth += 1
            level = [
                child
                for node in level
                for child in (node.left, node.right)
                if child is not None
            ]
        return depth
