"""
Entity runtime representation.

Fish, the cat (agent) with its hand, and the food bowl. Positions are
float64 numpy arrays [x, y] holding the top-left corner of the entity's
bounding box (the hand holds a single point instead).
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Optional

from .data_types import FishState, Facing


def _as_point(value) -> np.ndarray:
    """Coerce a 2-sequence or array into a float64 [x, y] array"""
    if not isinstance(value, np.ndarray):
        return np.array(value, dtype=np.float64)
    return value.astype(np.float64, copy=False)


@dataclass(eq=False)
class Fish:
    """
    Runtime fish in the play field. Compared by identity.

    Attributes:
        instance_id: Unique identifier (format: "fish-{index:04d}")
        position: Top-left corner [x, y]
        width: Bounding box width
        height: Bounding box height
        category: 0, 1 or 2; determines the score value
        velocity_x: Horizontal speed (units per tick, signed)
        lane: Name of the lane the fish swims in (None = resolve from y)
        state: Interaction state (FREE / CARRIED / DELIVERING)
        score_base: Points per category step
    """
    instance_id: str
    position: np.ndarray
    width: float
    height: float
    category: int
    velocity_x: float = 0.0
    lane: Optional[str] = None
    state: FishState = FishState.FREE
    score_base: int = 10

    def __post_init__(self):
        self.position = _as_point(self.position)

    @property
    def x(self) -> float:
        return float(self.position[0])

    @property
    def y(self) -> float:
        return float(self.position[1])

    @property
    def center(self) -> np.ndarray:
        return self.position + np.array([self.width / 2.0, self.height / 2.0])

    @property
    def score(self) -> int:
        """Points awarded when this fish is delivered"""
        return self.score_base * (self.category + 1)

    @property
    def is_available(self) -> bool:
        """True iff the fish can be captured (not bound to the carry slot)"""
        return self.state is FishState.FREE

    @property
    def captured(self) -> bool:
        return self.state is not FishState.FREE

    @property
    def carried(self) -> bool:
        return self.state is not FishState.FREE

    @property
    def delivering(self) -> bool:
        return self.state is FishState.DELIVERING

    def contains_point(self, px: float, py: float) -> bool:
        """Inclusive point-in-box test"""
        return (self.x <= px <= self.x + self.width and
                self.y <= py <= self.y + self.height)

    def intersects_rect(self, rx: float, ry: float, rw: float, rh: float) -> bool:
        """Strict axis-aligned overlap test against a rectangle"""
        return (rx < self.x + self.width and rx + rw > self.x and
                ry < self.y + self.height and ry + rh > self.y)

    def center_on(self, px: float, py: float):
        """Move the fish so its centre sits on (px, py)"""
        self.position[0] = px - self.width / 2.0
        self.position[1] = py - self.height / 2.0

    def to_dict(self) -> dict:
        """
        Serialize fish to JSON-compatible dict.

        Returns:
            Dict with all fish fields
        """
        return {
            'instance_id': self.instance_id,
            'position': self.position.tolist(),
            'width': self.width,
            'height': self.height,
            'category': self.category,
            'velocity_x': self.velocity_x,
            'lane': self.lane,
            'state': self.state.value,
            'score_base': self.score_base,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Fish':
        """
        Deserialize fish from dict.

        Args:
            data: Dict with fish fields

        Returns:
            Fish instance
        """
        return cls(
            instance_id=data['instance_id'],
            position=np.array(data['position'], dtype=np.float64),
            width=data['width'],
            height=data['height'],
            category=data['category'],
            velocity_x=data.get('velocity_x', 0.0),
            lane=data.get('lane'),
            state=FishState(data.get('state', FishState.FREE.value)),
            score_base=data.get('score_base', 10),
        )


@dataclass
class Hand:
    """
    The cat's capture probe, animated independently of the body.

    Invariant: delivering implies active.
    """
    current: np.ndarray = field(default_factory=lambda: np.zeros(2, dtype=np.float64))
    target: np.ndarray = field(default_factory=lambda: np.zeros(2, dtype=np.float64))
    active: bool = False
    delivering: bool = False
    returning: bool = False

    def __post_init__(self):
        self.current = _as_point(self.current)
        self.target = _as_point(self.target)

    def rest_at(self, point: np.ndarray):
        """Park the hand (current and target) on a point"""
        self.current = _as_point(point).copy()
        self.target = self.current.copy()


@dataclass
class Agent:
    """The player-controlled cat"""
    position: np.ndarray
    width: float
    height: float
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(2, dtype=np.float64))
    facing: Facing = Facing.RIGHT
    hand: Hand = field(default_factory=Hand)

    def __post_init__(self):
        self.position = _as_point(self.position)
        self.velocity = _as_point(self.velocity)

    @property
    def center(self) -> np.ndarray:
        return self.position + np.array([self.width / 2.0, self.height / 2.0])


@dataclass
class FoodBowl:
    """Fixed delivery target"""
    position: np.ndarray
    width: float
    height: float
    visible: bool = False
    delivered_count: int = 0

    def __post_init__(self):
        self.position = _as_point(self.position)

    @property
    def center(self) -> np.ndarray:
        return self.position + np.array([self.width / 2.0, self.height / 2.0])

    def is_point_over(self, px: float, py: float) -> bool:
        """Inclusive hover test"""
        x, y = float(self.position[0]), float(self.position[1])
        return x <= px <= x + self.width and y <= py <= y + self.height
