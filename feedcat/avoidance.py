"""
Fish-to-fish collision avoidance.

Greedy, per-fish resolution in list order (not a physics solve):
- Candidate move: x + velocity_x
- Nearest other FREE fish measured centre-to-centre at the candidate position
- Closer than the collision threshold: reject the move and nudge vertically
  inside the fish's lane, plus a small random horizontal jitter
- Otherwise commit the move

Positions of fish already processed this tick are visible to later fish,
so transient overlaps are possible and acceptable.
"""

import numpy as np
from typing import Dict, List, Optional

from .entity import Fish
from .data_types import FishConfig, LaneConfig
from .geometry import nearest_index
from .rng import random_jitter


def advance_with_avoidance(
    fish_list: List[Fish],
    config: FishConfig,
    rng: np.random.Generator
) -> Dict[str, int]:
    """
    Advance every FREE fish one tick with collision avoidance.

    Modifies fish positions in place. Carried or delivering fish are
    neither moved nor considered as obstacles.

    Args:
        fish_list: Live fish (iteration order decides who yields)
        config: Fish configuration (threshold, step, jitter, lanes)
        rng: Population RNG stream (jitter)

    Returns:
        Telemetry dict: {'moved': n, 'avoided': n}
    """
    movers = [f for f in fish_list if f.is_available]
    telemetry = {'moved': 0, 'avoided': 0}
    if not movers:
        return telemetry

    centers = np.array([f.center for f in movers], dtype=np.float64)  # (N, 2)

    for i, fish in enumerate(movers):
        candidate = fish.position + np.array([fish.velocity_x, 0.0])
        candidate_center = candidate + np.array([fish.width / 2.0, fish.height / 2.0])

        nearest, dist = nearest_index(candidate_center, centers, exclude=i)

        if nearest >= 0 and dist < config.collision_threshold:
            _avoid(fish, movers[nearest], config, rng)
            telemetry['avoided'] += 1
        else:
            fish.position = candidate
            telemetry['moved'] += 1

        # Later fish see this fish's updated position
        centers[i] = fish.center

    return telemetry


def _avoid(fish: Fish, other: Fish, config: FishConfig, rng: np.random.Generator):
    """
    Avoidance maneuver: step away vertically from `other`, clamped to the lane.

    A fish above its neighbour moves up, otherwise down. A horizontal jitter
    keeps pairs from locking in place.
    """
    lane = resolve_lane(fish, config.lanes)
    y = fish.y

    if y < other.y:
        new_y = y - config.avoidance_step
        if lane is not None:
            new_y = max(new_y, lane.y_min)
    else:
        new_y = y + config.avoidance_step
        if lane is not None:
            new_y = min(new_y, lane.y_max)

    fish.position[1] = new_y
    fish.position[0] = fish.x + random_jitter(rng, config.avoidance_jitter)


def resolve_lane(fish: Fish, lanes: List[LaneConfig]) -> Optional[LaneConfig]:
    """
    Lane a fish belongs to.

    Uses the lane recorded at spawn; fish placed by hand (lane=None or an
    unknown name) fall back to the lane vertically closest to their y.
    """
    if not lanes:
        return None

    if fish.lane is not None:
        for lane in lanes:
            if lane.name == fish.lane:
                return lane

    return min(lanes, key=lambda lane: lane.distance_to(fish.y))
