"""
Typed change notifications.

Every tick returns a list of SimEvent records instead of firing listeners;
the rendering layer drains the list once per frame.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional


class EventKind(Enum):
    """Kinds of externally observable state changes"""
    SCORE_CHANGED = "score_changed"
    FISH_COUNT_CHANGED = "fish_count_changed"    # Fish caught counter
    FISH_SPAWNED = "fish_spawned"
    FISH_REMOVED = "fish_removed"                # Despawned or consumed
    FISH_DELIVERED = "fish_delivered"
    FISH_CAPTURED = "fish_captured"
    DELIVERY_STARTED = "delivery_started"
    BOWL_COUNT_CHANGED = "bowl_count_changed"
    BOWL_HOVER_CHANGED = "bowl_hover_changed"
    HAND_ACTIVE_CHANGED = "hand_active_changed"
    PANEL_DIMENSIONS_CHANGED = "panel_dimensions_changed"
    SESSION_RESET = "session_reset"
    # Game session (clock / store)
    GAME_STARTED = "game_started"
    GAME_STOPPED = "game_stopped"
    GAME_PAUSED = "game_paused"
    GAME_RESUMED = "game_resumed"
    REMAINING_TIME_CHANGED = "remaining_time_changed"
    HIGH_SCORE_CHANGED = "high_score_changed"
    GAME_OVER = "game_over"


@dataclass
class SimEvent:
    """
    One state change.

    Attributes:
        kind: What changed
        tick: Simulation tick the change happened on
        old: Previous value (None when not applicable)
        new: New value, or the affected entity id
    """
    kind: EventKind
    tick: int
    old: Any = None
    new: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind.value,
            'tick': self.tick,
            'old': self.old,
            'new': self.new,
        }


def events_of(events: List[SimEvent], kind: EventKind) -> List[SimEvent]:
    """Filter an event list down to one kind"""
    return [e for e in events if e.kind is kind]


def last_value(events: List[SimEvent], kind: EventKind) -> Optional[Any]:
    """New value of the last event of a kind, or None"""
    matching = events_of(events, kind)
    if not matching:
        return None
    return matching[-1].new
