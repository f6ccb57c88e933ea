import threading
from typing import Optional

import numpy as np

MAX_PRIORITY = np.iinfo(np.int64).max

_default_rng: Optional[np.random.Generator] = None
_default_lock = threading.Lock()


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """
    Create a generator for drawing node priorities.

    Parameters
    ----------
    seed : int, optional
        Seed for a reproducible stream. When None the generator is seeded
        from OS entropy.

    Returns
    -------
    np.random.Generator
        A fresh generator.
    """
    return np.random.default_rng(seed)


def default_rng() -> np.random.Generator:
    """Return the shared generator, creating it on first use."""
    global _default_rng
    with _default_lock:
        if _default_rng is None:
            _default_rng = make_rng()
        return _default_rng


def reset_default_rng(seed: Optional[int] = None) -> None:
    """Replace the shared generator, e.g. with a fixed-seed one in tests."""
    global _default_rng
    with _default_lock:
        _default_rng = make_rng(seed)


def draw_priority(rng: Optional[np.random.Generator] = None) -> int:
    """
    Draw a priority uniformly from ``[0, MAX_PRIORITY]``.

    Parameters
    ----------
    rng : np.random.Generator, optional
        Generator to consume one value from; the shared generator is used
        when omitted.

    Returns
    -------
    int
        The priority as a Python int.
    """
    if rng is None:
        rng = default_rng()
    return int(rng.integers(0, MAX_PRIORITY, endpoint=True))
