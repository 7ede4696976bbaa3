"""
Fish spawning system.

Places new fish just outside the entry edge of a randomly chosen lane,
retrying while the candidate sits too close to another interactable fish.
Spawning never raises: when every attempt fails the spawn is skipped.
"""

import numpy as np
from typing import List, Optional, Tuple

from .entity import Fish
from .data_types import FishConfig, LaneConfig
from .rng import random_category


def spawn_fish(
    existing: List[Fish],
    config: FishConfig,
    field_width: float,
    rng: np.random.Generator,
    instance_id: str
) -> Optional[Fish]:
    """
    Try to spawn one fish.

    Each attempt picks a lane uniformly, a Y inside the lane's sub-range and
    an X outside the lane's entry edge, so the fish visibly swims in. The
    candidate is rejected while its centre is closer than
    config.min_separation to the centre of any FREE fish.

    Args:
        existing: Live fish (captured/carried fish are ignored for spacing)
        config: Fish configuration (lanes, geometry, retry budget)
        field_width: Current play field width
        rng: Population RNG stream
        instance_id: Identifier for the new fish

    Returns:
        New Fish, or None if all attempts were too close (spawn skipped)
    """
    if not config.lanes:
        return None

    others = _interactable_centers(existing)

    for _ in range(config.spawn_attempts):
        lane = config.lanes[int(rng.integers(0, len(config.lanes)))]
        position = _candidate_position(lane, config, field_width, rng)

        if _is_too_close(position, config.width, config.height, others, config.min_separation):
            continue

        return Fish(
            instance_id=instance_id,
            position=position,
            width=config.width,
            height=config.height,
            category=random_category(rng, config.category_count),
            velocity_x=lane.direction * config.speed,
            lane=lane.name,
            score_base=config.score_base
        )

    # Retry budget exhausted: skip this spawn cycle
    return None


def _candidate_position(
    lane: LaneConfig,
    config: FishConfig,
    field_width: float,
    rng: np.random.Generator
) -> np.ndarray:
    """
    Candidate top-left corner for a fish entering along a lane.

    Leftward lanes enter past the right edge, rightward lanes before the left edge.
    """
    y = rng.uniform(lane.y_min, lane.y_max)
    offset = rng.uniform(lane.spawn_offset_min, lane.spawn_offset_max)

    if lane.direction < 0:
        x = field_width + offset
    else:
        x = -offset

    return np.array([x, y], dtype=np.float64)


def _interactable_centers(existing: List[Fish]) -> np.ndarray:
    """(M, 2) centres of FREE fish"""
    centers = [f.center for f in existing if f.is_available]
    if not centers:
        return np.empty((0, 2), dtype=np.float64)
    return np.array(centers, dtype=np.float64)


def _is_too_close(
    position: np.ndarray,
    width: float,
    height: float,
    others: np.ndarray,
    min_separation: float
) -> bool:
    """True if the candidate centre is within min_separation of any centre in `others`"""
    if len(others) == 0:
        return False

    center = position + np.array([width / 2.0, height / 2.0])
    dist = np.sqrt(np.sum((others - center) ** 2, axis=1))
    return bool(np.any(dist < min_separation))


def lane_y_range(config: FishConfig, lane_name: str) -> Optional[Tuple[float, float]]:
    """(y_min, y_max) for a named lane, or None if unknown"""
    for lane in config.lanes:
        if lane.name == lane_name:
            return lane.y_min, lane.y_max
    return None
