"""
Tests for the in-memory score store.
"""

import pytest

from feedcat.score_store import InMemoryScoreStore, ScoreStore


def test_add_player():
    store = InMemoryScoreStore()

    assert store.add_player("ann")
    assert not store.add_player("ann")  # Duplicate
    assert not store.add_player("")
    assert store.player_exists("ann")
    assert not store.player_exists("bob")
    assert len(store) == 1


def test_unknown_player_defaults():
    store = InMemoryScoreStore()
    assert store.get_high_score("nobody") == 0
    assert store.get_high_fish_count("nobody") == 0
    assert not store.record_game_score("nobody", 100, 3)
    assert len(store) == 0


def test_record_only_raises_highs():
    store = InMemoryScoreStore()
    store.add_player("ann")

    assert store.record_game_score("ann", 50, 2)
    assert store.record_game_score("ann", 30, 4)
    assert store.record_game_score("ann", 70, 1)

    record = store.get_player("ann")
    assert record.high_score == 70
    assert record.high_fish_count == 4
    assert record.games_played == 3
    assert record.to_dict() == {
        'name': "ann", 'high_score': 70, 'high_fish_count': 4, 'games_played': 3
    }


def test_top_players_ordering():
    store = InMemoryScoreStore()
    for name, score in (("cat", 40), ("ann", 90), ("bob", 40), ("dee", 10)):
        store.add_player(name)
        store.record_game_score(name, score, 1)

    top = store.get_top_players(3)
    assert [r.name for r in top] == ["ann", "bob", "cat"]
    assert store.get_top_players(0) == []
    assert len(store.get_top_players()) == 4


def test_base_interface_is_abstract():
    with pytest.raises(TypeError):
        ScoreStore()

    class PartialStore(ScoreStore):
        def add_player(self, name):
            return True

    # Missing methods fail at construction, not on first call
    with pytest.raises(TypeError):
        PartialStore()
