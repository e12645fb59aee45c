from __future__ import annotations

import logging
import re
from typing import Callable, NamedTuple

from cachetools import Cache, LRUCache

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9 ]")


def normalize_topic(utterance: str, *, min_word_len: int = 4, max_words: int = 2) -> str:
    """
    Naive keyword topic: strip punctuation, drop short words (<= 3 chars),
    keep the first two that remain.

    >>> normalize_topic("Tell me about machine learning basics")
    'Tell about'
    """
    cleaned = _NON_ALNUM.sub("", utterance or "")
    words = [w for w in cleaned.split(" ") if len(w) >= min_word_len]
    return " ".join(words[:max_words])


class _Entry(NamedTuple):
    count: int
    seq: int  # increment order; breaks count ties


class TopicTracker:
    """
    Rolling window of normalized topics with a trend and a one-shot
    "trend reached" notification per trend.
    """

    def __init__(self, *, threshold: int = 5, window_size: int = 50) -> None:
        if threshold <= 0:
            raise ValueError("threshold must be > 0")
        if window_size <= 0:
            raise ValueError("window_size must be > 0")
        self.threshold = int(threshold)
        self._window: LRUCache[str, _Entry] = LRUCache(maxsize=int(window_size))
        self._seq = 0
        self._listeners: list[Callable[[str], None]] = []
        self.trend: str | None = None
        self.suggestion_shown = False

    def on_trend(self, callback: Callable[[str], None]) -> None:
        self._listeners.append(callback)

    def count(self, key: str) -> int:
        entry = self._peek(key)
        return entry.count if entry is not None else 0

    def __len__(self) -> int:
        return len(self._window)

    def record(self, utterance: str) -> str | None:
        """Count one utterance. Returns the trend when this call fired a notification."""
        key = normalize_topic(utterance)
        if not key:
            return None

        self._seq += 1
        entry = _Entry(count=self.count(key) + 1, seq=self._seq)
        self._window[key] = entry

        previous = self.trend
        if previous is None or previous not in self._window:
            self.trend = self._recompute_trend()
        elif key != previous and entry.count >= self.count(previous):
            # equal counts: the key incremented last wins
            self.trend = key

        if self.trend != previous:
            self.suggestion_shown = False

        if self.trend is not None and not self.suggestion_shown and self.count(self.trend) >= self.threshold:
            self.suggestion_shown = True
            logger.info("trend_reached topic=%s count=%d", self.trend, self.count(self.trend))
            for cb in list(self._listeners):
                cb(self.trend)
            return self.trend
        return None

    def reset(self) -> None:
        self._window.clear()
        self._seq = 0
        self.trend = None
        self.suggestion_shown = False

    def _recompute_trend(self) -> str | None:
        best: tuple[int, int] | None = None
        best_key: str | None = None
        for key in list(self._window.keys()):
            entry = self._peek(key)
            if entry is None:
                continue
            rank = (entry.count, entry.seq)
            if best is None or rank > best:
                best, best_key = rank, key
        return best_key

    def _peek(self, key: str) -> _Entry | None:
        # reads don't refresh recency; only record() moves a key to the front
        if key in self._window:
            return Cache.__getitem__(self._window, key)
        return None
