"""
Player score storage.

ScoreStore is the interface the game session talks to; InMemoryScoreStore
keeps everything in a dict for the lifetime of the process.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass
class PlayerRecord:
    """Per-player best results"""
    name: str
    high_score: int = 0
    high_fish_count: int = 0
    games_played: int = 0

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'high_score': self.high_score,
            'high_fish_count': self.high_fish_count,
            'games_played': self.games_played,
        }


class ScoreStore(ABC):
    """Interface for high score persistence"""

    @abstractmethod
    def add_player(self, name: str) -> bool:
        pass

    @abstractmethod
    def player_exists(self, name: str) -> bool:
        pass

    @abstractmethod
    def get_high_score(self, name: str) -> int:
        pass

    @abstractmethod
    def get_high_fish_count(self, name: str) -> int:
        pass

    @abstractmethod
    def record_game_score(self, name: str, score: int, fish_count: int) -> bool:
        pass

    @abstractmethod
    def get_top_players(self, limit: int = 10) -> List[PlayerRecord]:
        pass


class InMemoryScoreStore(ScoreStore):
    """Dict-backed store, keyed by player name"""

    def __init__(self):
        self._players: Dict[str, PlayerRecord] = {}

    def __len__(self) -> int:
        return len(self._players)

    def get_player(self, name: str) -> Optional[PlayerRecord]:
        return self._players.get(name)

    def add_player(self, name: str) -> bool:
        """
        Register a player.

        Returns:
            True if the player was added, False if the name is empty or taken
        """
        if not name or name in self._players:
            return False
        self._players[name] = PlayerRecord(name=name)
        return True

    def player_exists(self, name: str) -> bool:
        return name in self._players

    def get_high_score(self, name: str) -> int:
        """High score for a player (0 when unknown)"""
        record = self._players.get(name)
        return record.high_score if record is not None else 0

    def get_high_fish_count(self, name: str) -> int:
        record = self._players.get(name)
        return record.high_fish_count if record is not None else 0

    def record_game_score(self, name: str, score: int, fish_count: int) -> bool:
        """
        Record a finished game.

        Games played always increments; high score and high fish count only
        ever move up.

        Returns:
            False for an unknown player, else True
        """
        record = self._players.get(name)
        if record is None:
            return False

        record.games_played += 1
        if score > record.high_score:
            record.high_score = score
        if fish_count > record.high_fish_count:
            record.high_fish_count = fish_count
        return True

    def get_top_players(self, limit: int = 10) -> List[PlayerRecord]:
        """Players by high score (descending), ties broken by name"""
        ranked = sorted(self._players.values(), key=lambda r: (-r.high_score, r.name))
        return ranked[:max(limit, 0)]
