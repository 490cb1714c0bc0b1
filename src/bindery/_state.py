# bindery/_state.py
import itertools
from typing import Iterator

_ids: Iterator[int] = itertools.count(1)


def next_id() -> int:
    """Return a process-wide unique identifier for containers, bindings, contexts and modules."""
    return next(_ids)
