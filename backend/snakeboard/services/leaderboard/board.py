from typing import List

from .store import KeyValueStore


class Leaderboard:
    """Top-N list kept as one JSON document in a KV store.

    ``record`` is read-modify-write without any locking: two submissions
    landing together can both read the old list and the later write wins.
    """

    def __init__(self, store: KeyValueStore, key: str = 'snake:top5', size: int = 5):
        self.store = store
        self.key = key
        self.size = size

    def top(self) -> List[dict]:
        entries = self.store.get(self.key)
        return entries if isinstance(entries, list) else []

    def record(self, name: str, score: int, at: int) -> List[dict]:
        entries = self.top()
        entries.append({'name': name, 'score': score, 'at': at})
        # stable: equal scores keep arrival order
        entries.sort(key=_score_of, reverse=True)
        entries = entries[:self.size]
        self.store.set(self.key, entries)
        return entries

    def reset(self) -> None:
        self.store.set(self.key, [])


def _score_of(entry) -> float:
    try:
        return float(entry.get('score', 0))
    except (AttributeError, TypeError, ValueError):
        return 0.0
