import itertools
from typing import Dict, Any, Iterator

# This file holds the in-memory data stores and id counters.

CATEGORIES: Dict[int, Dict[str, Any]] = {}
PRODUCTS: Dict[int, Dict[str, Any]] = {}
_COUNTERS: Dict[str, Iterator[int]] = {}


def next_id(collection: str) -> int:
    if collection not in _COUNTERS:
        _COUNTERS[collection] = itertools.count(1)
    return next(_COUNTERS[collection])


def reset_stores() -> None:
    CATEGORIES.clear()
    PRODUCTS.clear()
    _COUNTERS.clear()
