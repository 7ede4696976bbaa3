"""
Game session: player, clock and high scores around one simulation.

The countdown is driven by simulation ticks (tick_rate_hz ticks = one
second), so a paused or stopped session neither ticks nor loses time.
"""

from typing import List, Optional

from .simulation import FeedCatSimulation
from .score_store import ScoreStore
from .data_types import GameStats
from .events import EventKind, SimEvent


def format_time(seconds: int) -> str:
    """MM:SS"""
    seconds = max(int(seconds), 0)
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


class GameSession:
    """
    Outer game object owning the simulation and the injected score store.

    Attributes:
        player_name: Current player ("" when none is set)
        is_running: True between start_game() and game over / stop_game()
        is_paused: Paused sessions skip ticks
        remaining_time: Seconds left on the clock
        high_score: Best known score for the player (raised live)
    """

    def __init__(self, score_store: ScoreStore, simulation: Optional[FeedCatSimulation] = None):
        self.score_store = score_store
        self.simulation = simulation if simulation is not None else FeedCatSimulation()

        session_cfg = self.simulation.config.session
        self.tick_rate_hz: int = session_cfg.tick_rate_hz
        self.time_limit: int = session_cfg.time_limit_seconds

        self.player_name: str = ""
        self.is_running: bool = False
        self.is_paused: bool = False
        self.is_time_up: bool = False
        self.remaining_time: int = self.time_limit
        self.high_score: int = 0
        self.is_new_high_score: bool = False
        self._ticks_into_second: int = 0

    # ------------------------------------------------------------------
    # Player
    # ------------------------------------------------------------------

    def set_player_name(self, name: str) -> bool:
        """
        Switch player.

        Empty names (after trimming) are ignored. New players are registered
        in the store; the session is reset and the stored high score loaded.
        """
        name = (name or "").strip()
        if not name:
            return False

        self.player_name = name
        if not self.score_store.player_exists(name):
            self.score_store.add_player(name)

        self.is_running = False
        self.is_paused = False
        self.is_time_up = False
        self.remaining_time = self.time_limit
        self._ticks_into_second = 0
        self.simulation.reset_session()

        self.high_score = self.score_store.get_high_score(name)
        self.is_new_high_score = False
        return True

    # ------------------------------------------------------------------
    # Game lifecycle
    # ------------------------------------------------------------------

    def start_game(self) -> List[SimEvent]:
        """Reset everything and start the countdown"""
        events = self.simulation.reset_session()

        self.is_running = True
        self.is_paused = False
        self.is_time_up = False
        self.remaining_time = self.time_limit
        self._ticks_into_second = 0
        self.is_new_high_score = False
        if self.player_name:
            self.high_score = self.score_store.get_high_score(self.player_name)

        tick = self.simulation.tick_count
        events.append(SimEvent(EventKind.GAME_STARTED, tick, new=self.player_name))
        events.append(SimEvent(EventKind.REMAINING_TIME_CHANGED, tick, new=self.remaining_time))
        return events

    def stop_game(self) -> List[SimEvent]:
        if not self.is_running:
            return []
        self.is_running = False
        self.is_paused = False
        return [SimEvent(EventKind.GAME_STOPPED, self.simulation.tick_count)]

    def toggle_pause(self) -> List[SimEvent]:
        if not self.is_running:
            return []
        self.is_paused = not self.is_paused
        kind = EventKind.GAME_PAUSED if self.is_paused else EventKind.GAME_RESUMED
        return [SimEvent(kind, self.simulation.tick_count)]

    def tick(self) -> List[SimEvent]:
        """
        One frame of the game.

        Runs a simulation tick when running and not paused, raises the high
        score live and advances the countdown.
        """
        if not self.is_running or self.is_paused:
            return []

        events = self.simulation.tick()
        tick = self.simulation.tick_count

        score = self.simulation.score
        if score > self.high_score:
            events.append(SimEvent(EventKind.HIGH_SCORE_CHANGED, tick, old=self.high_score, new=score))
            self.high_score = score
            self.is_new_high_score = True

        self._ticks_into_second += 1
        if self._ticks_into_second >= self.tick_rate_hz:
            self._ticks_into_second = 0
            old = self.remaining_time
            self.remaining_time = max(self.remaining_time - 1, 0)
            events.append(SimEvent(EventKind.REMAINING_TIME_CHANGED, tick, old=old, new=self.remaining_time))
            if self.remaining_time <= 0:
                events.extend(self._end_game())

        return events

    def _end_game(self) -> List[SimEvent]:
        """Time is up: stop, record the score, refresh the high score"""
        tick = self.simulation.tick_count
        self.is_running = False
        self.is_paused = False
        self.is_time_up = True

        score = self.simulation.score
        fish_count = self.simulation.fish_caught_count
        recorded = False
        events = []

        if self.player_name:
            recorded = self.score_store.record_game_score(self.player_name, score, fish_count)
            stored = self.score_store.get_high_score(self.player_name)
            if stored > self.high_score:
                events.append(SimEvent(EventKind.HIGH_SCORE_CHANGED, tick, old=self.high_score, new=stored))
                self.high_score = stored

        events.append(SimEvent(EventKind.GAME_OVER, tick, new={
            'player': self.player_name,
            'score': score,
            'fish_count': fish_count,
            'recorded': recorded,
        }))
        return events

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    def get_stats(self) -> GameStats:
        sim = self.simulation
        return GameStats(
            score=sim.score,
            fish_delivered=sim.fish_caught_count,
            fish_in_bowl=sim.bowl.delivered_count,
            available_fish=len(sim.population),
            is_carrying=sim.is_carrying,
            is_game_running=self.is_running,
            is_paused=self.is_paused,
            remaining_time=self.remaining_time,
            formatted_time=format_time(self.remaining_time),
            is_time_up=self.is_time_up,
            high_score=self.high_score,
            is_new_high_score=self.is_new_high_score
        )

    def print_session_summary(self):
        """Print game status to console"""
        stats = self.get_stats()
        state = "running" if stats.is_game_running else ("time up" if stats.is_time_up else "stopped")
        if stats.is_paused:
            state = "paused"
        print(f"[{self.player_name or '-'}] {state} | "
              f"Time: {stats.formatted_time} | "
              f"Score: {stats.score} (high {stats.high_score}) | "
              f"Delivered: {stats.fish_delivered} | "
              f"Fish: {stats.available_fish}")
