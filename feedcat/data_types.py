"""
Data types mirroring the game configuration and the read-only views.

Configuration dataclasses are populated by loader.py from YAML files; the
defaults reproduce data/game/default.yaml so a GameConfig() can be used
directly in tests. View dataclasses are the snapshot records handed to the
rendering layer once per frame.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Any
from enum import Enum

from .constants import (
    FIELD_WIDTH_DEFAULT, FIELD_HEIGHT_DEFAULT,
    FISH_WIDTH, FISH_HEIGHT, FISH_SPEED, FISH_CATEGORY_COUNT, FISH_SCORE_BASE,
    SPAWN_ATTEMPTS, MIN_SPAWN_SEPARATION, SPAWN_OFFSET_MIN, SPAWN_OFFSET_MAX,
    TOP_LANE_Y_RANGE, BOTTOM_LANE_Y_RANGE,
    COLLISION_THRESHOLD, AVOIDANCE_STEP, AVOIDANCE_JITTER, DESPAWN_MARGIN,
    POPULATION_FLOOR, POPULATION_CEILING, EXTRA_SPAWN_CHANCE, MAX_FILL_ATTEMPTS,
    AGENT_WIDTH, AGENT_HEIGHT, AGENT_START_X, AGENT_ZONE_TOP, AGENT_ZONE_BOTTOM,
    HAND_SPEED, HAND_DELIVERY_SPEED, HAND_PROBE_HALF_SIZE,
    BOWL_WIDTH, BOWL_HEIGHT, BOWL_RIGHT_MARGIN,
    ARRIVAL_RADIUS, FOLLOW_TICKS, FOLLOW_RATE,
    TICK_RATE_HZ, TIME_LIMIT_SECONDS, WORLD_SEED_DEFAULT,
)


# ============================================================================
# State Enums
# ============================================================================

class FishState(Enum):
    """Interaction state of a fish (replaces captured/carried/delivering flags)"""
    FREE = "free"              # Swimming, available for capture
    CARRIED = "carried"        # Bound to the carry slot, following the agent
    DELIVERING = "delivering"  # Riding the hand to the food bowl


class Facing(Enum):
    """Direction the agent sprite faces"""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class DeliveryPhase(Enum):
    """Delivery coordinator state machine phases"""
    IDLE = "idle"
    CAPTURED_FOLLOWING = "captured_following"
    DELIVERING = "delivering"


# ============================================================================
# Game Configuration
# ============================================================================

@dataclass
class FieldConfig:
    """Play field (panel) dimensions"""
    width: float = FIELD_WIDTH_DEFAULT
    height: float = FIELD_HEIGHT_DEFAULT


@dataclass
class LaneConfig:
    """A horizontal band fish spawn into and swim along"""
    name: str
    y_min: float
    y_max: float
    direction: int  # -1 = leftward (enters from the right edge), +1 = rightward
    spawn_offset_min: float = SPAWN_OFFSET_MIN
    spawn_offset_max: float = SPAWN_OFFSET_MAX

    def distance_to(self, y: float) -> float:
        """Vertical distance from y to this lane (0.0 when inside)"""
        if y < self.y_min:
            return self.y_min - y
        if y > self.y_max:
            return y - self.y_max
        return 0.0


def default_lanes() -> List[LaneConfig]:
    """Top lane swims right-to-left, bottom lane left-to-right"""
    return [
        LaneConfig(name="top", y_min=TOP_LANE_Y_RANGE[0], y_max=TOP_LANE_Y_RANGE[1], direction=-1),
        LaneConfig(name="bottom", y_min=BOTTOM_LANE_Y_RANGE[0], y_max=BOTTOM_LANE_Y_RANGE[1], direction=1),
    ]


@dataclass
class FishConfig:
    """Fish geometry, spawning, avoidance and population band"""
    width: float = FISH_WIDTH
    height: float = FISH_HEIGHT
    speed: float = FISH_SPEED
    category_count: int = FISH_CATEGORY_COUNT
    score_base: int = FISH_SCORE_BASE
    spawn_attempts: int = SPAWN_ATTEMPTS
    min_separation: float = MIN_SPAWN_SEPARATION
    collision_threshold: float = COLLISION_THRESHOLD
    avoidance_step: float = AVOIDANCE_STEP
    avoidance_jitter: int = AVOIDANCE_JITTER
    despawn_margin: float = DESPAWN_MARGIN
    floor: int = POPULATION_FLOOR
    ceiling: int = POPULATION_CEILING
    extra_spawn_chance: float = EXTRA_SPAWN_CHANCE
    max_fill_attempts: int = MAX_FILL_ATTEMPTS
    lanes: List[LaneConfig] = field(default_factory=default_lanes)


@dataclass
class AgentConfig:
    """Cat body geometry and its movement band"""
    width: float = AGENT_WIDTH
    height: float = AGENT_HEIGHT
    start_x: float = AGENT_START_X
    start_y: Optional[float] = None  # None = zone_top + 30
    zone_top: float = AGENT_ZONE_TOP
    zone_bottom: float = AGENT_ZONE_BOTTOM


@dataclass
class HandConfig:
    """Hand interpolation speeds and capture probe size"""
    speed: float = HAND_SPEED
    delivery_speed: float = HAND_DELIVERY_SPEED
    probe_half_size: float = HAND_PROBE_HALF_SIZE


@dataclass
class BowlConfig:
    """Food bowl geometry"""
    width: float = BOWL_WIDTH
    height: float = BOWL_HEIGHT
    right_margin: float = BOWL_RIGHT_MARGIN


@dataclass
class DeliveryConfig:
    """Delivery hand-off tuning"""
    arrival_radius: float = ARRIVAL_RADIUS
    follow_ticks: int = FOLLOW_TICKS
    follow_rate: float = FOLLOW_RATE


@dataclass
class SessionConfig:
    """Tick rate, game clock and RNG seed"""
    tick_rate_hz: int = TICK_RATE_HZ
    time_limit_seconds: int = TIME_LIMIT_SECONDS
    seed: int = WORLD_SEED_DEFAULT


@dataclass
class GameConfig:
    """Complete game configuration"""
    name: str = "default"
    play_field: FieldConfig = field(default_factory=FieldConfig)
    fish: FishConfig = field(default_factory=FishConfig)
    agent: AgentConfig = field(default_factory=AgentConfig)
    hand: HandConfig = field(default_factory=HandConfig)
    bowl: BowlConfig = field(default_factory=BowlConfig)
    delivery: DeliveryConfig = field(default_factory=DeliveryConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    description: Optional[str] = None


# ============================================================================
# Snapshot Views (read-only, consumed once per render frame)
# ============================================================================

@dataclass
class FishView:
    """Render data for one live fish"""
    instance_id: str
    x: float
    y: float
    width: float
    height: float
    category: int
    captured: bool
    velocity_x: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'instance_id': self.instance_id,
            'x': float(self.x),
            'y': float(self.y),
            'width': float(self.width),
            'height': float(self.height),
            'category': int(self.category),
            'captured': bool(self.captured),
            'velocity_x': float(self.velocity_x),
        }


@dataclass
class AgentView:
    """Render data for the cat and its hand"""
    x: float
    y: float
    width: float
    height: float
    facing: Facing
    velocity_x: float
    velocity_y: float
    hand_active: bool
    hand_x: float
    hand_y: float
    hand_target_x: float
    hand_target_y: float
    hand_delivering: bool
    hand_returning: bool

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to dict.
        Floats are cast to builtin float so no numpy types leak through.
        """
        result = {}
        for name in ('x', 'y', 'width', 'height', 'velocity_x', 'velocity_y',
                     'hand_x', 'hand_y', 'hand_target_x', 'hand_target_y'):
            result[name] = float(getattr(self, name))
        result['facing'] = self.facing.value
        result['hand_active'] = bool(self.hand_active)
        result['hand_delivering'] = bool(self.hand_delivering)
        result['hand_returning'] = bool(self.hand_returning)
        return result


@dataclass
class TargetView:
    """Render data for the food bowl"""
    x: float
    y: float
    width: float
    height: float
    center_x: float
    center_y: float
    visible: bool
    delivered_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'x': float(self.x),
            'y': float(self.y),
            'width': float(self.width),
            'height': float(self.height),
            'center_x': float(self.center_x),
            'center_y': float(self.center_y),
            'visible': bool(self.visible),
            'delivered_count': int(self.delivered_count),
        }


@dataclass
class GameStats:
    """Status-panel statistics for the current game session"""
    score: int = 0
    fish_delivered: int = 0       # Fish caught this game
    fish_in_bowl: int = 0         # Bowl's delivered count
    available_fish: int = 0       # Live fish in the population
    is_carrying: bool = False
    is_game_running: bool = False
    is_paused: bool = False
    remaining_time: int = TIME_LIMIT_SECONDS
    formatted_time: str = "01:00"
    is_time_up: bool = False
    high_score: int = 0
    is_new_high_score: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.__dict__)
