from rtreap.tree.bst.binary_search_tree import BinarySearchTree
from rtreap.tree.treap.node_pool import NIL, NodePool
from rtreap.tree.treap.priority import draw_priority, make_rng
from rtreap.tree.treap.randomized_treap import RandomizedTreap
