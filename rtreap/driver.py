"""
Example caller: reads integer key/value pairs, builds a treap and compares
its height with the 2 * log(n) height bound of a red-black tree.
"""
import argparse
import logging
import math
import sys
from typing import Optional, TextIO

import numpy as np

from rtreap.tree.bst.binary_search_tree import BinarySearchTree
from rtreap.tree.treap.node_pool import NIL, NodePool
from rtreap.tree.treap.priority import make_rng
from rtreap.tree.treap.randomized_treap import RandomizedTreap

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger("rtreap")
    root.setLevel(level)
    if not root.handlers:
        root.addHandler(handler)


def read_pairs(stream: TextIO) -> list[tuple[int, int]]:
    """
    Read whitespace-separated ``key value`` integer pairs.

    Parameters
    ----------
    stream : TextIO
        Text stream to read until exhausted.

    Returns
    -------
    list[tuple[int, int]]
        The pairs in input order.

    Raises
    ------
    ValueError
        If a token is not an integer or the token count is odd.
    """
    tokens = stream.read().split()
    numbers = []
    for position, token in enumerate(tokens):
        try:
            numbers.append(int(token))
        except ValueError:
            raise ValueError(
                f"Token {position} is not an integer: {token!r}"
            ) from None
    if len(numbers) % 2:
        raise ValueError(
            f"Expected key/value pairs, got an odd number of tokens "
            f"({len(numbers)})"
        )
    return list(zip(numbers[0::2], numbers[1::2]))


def balanced_height(n: int) -> float:
    """Height bound ``2 * log(n)`` of a red-black tree with ``n`` nodes."""
    if n < 2:
        return 0.0
    return 2 * math.log(n)


def build(
    pairs: list[tuple[int, int]],
    rng: np.random.Generator
) -> RandomizedTreap:
    """
    Insert ``pairs`` into an empty treap.

    Repeated keys keep their first value and are skipped.
    """
    treap = RandomizedTreap(rng=rng, initial_capacity=max(1, len(pairs)))
    for key, value in pairs:
        treap.insert(key, value)
    skipped = len(pairs) - len(treap)
    if skipped:
        logger.info("Skipped %d repeated keys", skipped)
    return treap


def average_height(n: int, trials: int, seed: Optional[int] = None) -> float:
    """
    Mean treap height over ``trials`` trees of ``n`` distinct random keys.

    Keys and priorities come from two independent streams spawned from
    ``seed``.
    """
    if n < 0 or trials <= 0:
        raise ValueError("n must be non-negative and trials positive")
    key_seed, priority_seed = np.random.SeedSequence(seed).spawn(2)
    key_rng = np.random.default_rng(key_seed)
    priority_rng = np.random.default_rng(priority_seed)
    heights = np.empty(trials, dtype=np.int64)
    for trial in range(trials):
        pool = NodePool(max(1, n))
        root = NIL
        for key in key_rng.permutation(n):
            handle = pool.construct(int(key), None, priority_rng)
            # permutation keys are distinct
            root = pool.insert(root, handle, assume_new=True)
        heights[trial] = pool.height(root)
    logger.debug("Heights for n=%d: %s", n, heights)
    return float(heights.mean())


def _parse_args(argv: Optional[list[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="rtreap",
        description=(
            "Build a treap from key/value pairs on stdin and report its "
            "height."
        ),
    )
    parser.add_argument(
        "--seed", type=int, default=None,
        help="seed for node priorities (default: OS entropy)",
    )
    parser.add_argument(
        "--baseline", action="store_true",
        help="also report the height of an unbalanced binary search tree",
    )
    parser.add_argument(
        "--trials", type=int, default=None,
        help="average the height over this many random treaps instead of "
             "reading stdin",
    )
    parser.add_argument(
        "--size", type=int, default=1000,
        help="number of keys per random treap when --trials is given",
    )
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser.parse_args(argv)


def main(
    argv: Optional[list[str]] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None
) -> int:
    args = _parse_args(argv)
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    setup_logging(args.verbose)

    if args.trials is not None:
        try:
            mean = average_height(args.size, args.trials, args.seed)
        except ValueError as err:
            logger.error("%s", err)
            return 1
        print(
            f"Average height over {args.trials} trials of {args.size} keys "
            f"is {mean:.4f} (log2(n) = "
            f"{math.log2(args.size) if args.size > 0 else 0.0:.4f})",
            file=stdout,
        )
        return 0

    try:
        pairs = read_pairs(stdin)
    except ValueError as err:
        logger.error("Invalid input: %s", err)
        return 1

    treap = build(pairs, make_rng(args.seed))
    count = len(treap)
    treap_height = treap.height()
    logger.info("Inserted %d keys, height %d", count, treap_height)
    print(
        f"Height is {treap_height} for RB it is "
        f"{balanced_height(count):.4f}",
        file=stdout,
    )

    if args.baseline:
        bst = BinarySearchTree()
        for key, value in pairs:
            bst.insert(key, value)
        print(f"Unbalanced BST height is {bst.height()}", file=stdout)
    return 0
