"""
Client-side joins for relations the database does not join for us.

Related rows are fetched separately, filtered by the distinct foreign keys
present, then associated through a plain key -> row lookup.
"""
from typing import Any, Callable, Dict, Hashable, Iterable, List, TypeVar, Union

T = TypeVar("T")

Key = Union[str, Callable[[Any], Hashable]]


def _key_func(key: Key) -> Callable[[Any], Hashable]:
    if callable(key):
        return key
    return lambda row: row[key] if isinstance(row, dict) else getattr(row, key)


def distinct(values: Iterable[T]) -> List[T]:
    """Unique values in first-seen order"""
    return list(dict.fromkeys(values))


def index_by(rows: Iterable[T], key: Key) -> Dict[Hashable, T]:
    """Build a key -> row lookup; the last row wins on duplicate keys"""
    get = _key_func(key)
    return {get(row): row for row in rows}


def group_by(rows: Iterable[T], key: Key) -> Dict[Hashable, List[T]]:
    get = _key_func(key)
    groups: Dict[Hashable, List[T]] = {}
    for row in rows:
        groups.setdefault(get(row), []).append(row)
    return groups
