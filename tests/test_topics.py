from __future__ import annotations

import pytest

from learning_assistant.topics import TopicTracker, normalize_topic


def test_normalize_topic_strips_punctuation_and_short_words() -> None:
    assert normalize_topic("Tell me about machine learning basics") == "Tell about"
    assert normalize_topic("What's machine-learning?") == "Whats machinelearning"
    assert normalize_topic("is it ok?") == ""
    assert normalize_topic("   deep   neural nets  ") == "deep neural"


def test_empty_topic_is_not_counted() -> None:
    tracker = TopicTracker(threshold=1)
    fired: list[str] = []
    tracker.on_trend(fired.append)

    assert tracker.record("why? how?") is None
    assert len(tracker) == 0
    assert tracker.trend is None
    assert fired == []


def test_record_counts_per_key() -> None:
    tracker = TopicTracker(threshold=100)
    for _ in range(4):
        tracker.record("photosynthesis process")
    tracker.record("cell biology")

    assert tracker.count("photosynthesis process") == 4
    assert tracker.count("cell biology") == 1
    assert tracker.count("unknown topic") == 0
    assert tracker.trend == "photosynthesis process"


def test_threshold_fires_once_per_trend() -> None:
    tracker = TopicTracker(threshold=5)
    fired: list[str] = []
    tracker.on_trend(fired.append)

    results = [tracker.record("machine learning") for _ in range(5)]
    assert results == [None, None, None, None, "machine learning"]
    assert fired == ["machine learning"]
    assert tracker.suggestion_shown is True

    assert tracker.record("machine learning") is None
    assert fired == ["machine learning"]


def test_new_trend_fires_again_after_change() -> None:
    tracker = TopicTracker(threshold=5)
    fired: list[str] = []
    tracker.on_trend(fired.append)

    for _ in range(5):
        tracker.record("machine learning")
    for _ in range(4):
        tracker.record("quantum physics")
    assert tracker.trend == "machine learning"
    assert fired == ["machine learning"]

    # ties with the current trend; the key incremented last takes over
    tracker.record("quantum physics")
    assert tracker.trend == "quantum physics"
    assert fired == ["machine learning", "quantum physics"]


def test_tie_goes_to_most_recently_incremented() -> None:
    tracker = TopicTracker(threshold=100)
    tracker.record("alpha topic")
    tracker.record("bravo topic")
    assert tracker.trend == "bravo topic"

    tracker.record("alpha topic")
    assert tracker.trend == "alpha topic"


def test_flag_survives_while_trend_unchanged() -> None:
    tracker = TopicTracker(threshold=2)
    tracker.record("linear algebra")
    tracker.record("linear algebra")
    assert tracker.suggestion_shown is True

    tracker.record("graph theory")
    assert tracker.trend == "linear algebra"
    assert tracker.suggestion_shown is True


def test_window_is_bounded() -> None:
    tracker = TopicTracker(threshold=100, window_size=2)
    tracker.record("alpha words")
    tracker.record("bravo words")
    tracker.record("gamma words")

    assert len(tracker) == 2
    assert tracker.count("alpha words") == 0
    assert tracker.count("gamma words") == 1
    assert tracker.trend == "gamma words"


def test_evicted_trend_is_recomputed() -> None:
    tracker = TopicTracker(threshold=100, window_size=2)
    tracker.record("alpha words")
    tracker.record("alpha words")
    tracker.record("bravo words")
    assert tracker.trend == "alpha words"

    # alpha was incremented least recently, so it is the one evicted
    tracker.record("gamma words")

    assert tracker.count("alpha words") == 0
    assert tracker.count("bravo words") == 1
    assert tracker.trend == "gamma words"


def test_reset_clears_window_and_trend() -> None:
    tracker = TopicTracker(threshold=1)
    tracker.record("organic chemistry")
    tracker.reset()

    assert len(tracker) == 0
    assert tracker.trend is None
    assert tracker.suggestion_shown is False


def test_invalid_configuration_rejected() -> None:
    with pytest.raises(ValueError):
        TopicTracker(threshold=0)
    with pytest.raises(ValueError):
        TopicTracker(window_size=0)
