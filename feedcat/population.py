"""
Fish population manager.

Owns the list of live fish: spawns them under lane and spacing constraints,
advances them with pairwise collision avoidance, removes fish that left the
field, and keeps the population inside its [floor, ceiling] band.

Methods return the fish they created or removed; the tick driver turns those
into events.
"""

import numpy as np
from typing import Dict, List, Optional

from .entity import Fish
from .data_types import FishConfig, FishState
from .spawning import spawn_fish
from .avoidance import advance_with_avoidance


class FishPopulation:
    """
    Live fish and the policy that keeps them coming.

    Iteration order is spawn order; it decides which fish wins when two
    overlap a capture query, and is deterministic for a given RNG stream.
    """

    def __init__(self, config: FishConfig, field_width: float, rng: np.random.Generator):
        """
        Args:
            config: Fish configuration (geometry, lanes, population band)
            field_width: Current play field width
            rng: Population RNG stream
        """
        self.config = config
        self.field_width = float(field_width)
        self.rng = rng

        self.fish: List[Fish] = []
        self._next_index: int = 0

        # Lifetime counters (telemetry)
        self.total_spawned: int = 0
        self.total_despawned: int = 0
        self.total_consumed: int = 0
        self.skipped_spawns: int = 0
        self.last_avoidance: Dict[str, int] = {'moved': 0, 'avoided': 0}

    def __len__(self) -> int:
        return len(self.fish)

    # ------------------------------------------------------------------
    # Spawning
    # ------------------------------------------------------------------

    def spawn_fish(self) -> Optional[Fish]:
        """
        Spawn one fish, or skip silently if no spaced position was found.

        Returns:
            The new fish, or None when the retry budget ran out
        """
        instance_id = f"fish-{self._next_index:04d}"
        fish = spawn_fish(self.fish, self.config, self.field_width, self.rng, instance_id)
        if fish is None:
            self.skipped_spawns += 1
            return None

        self._next_index += 1
        self.fish.append(fish)
        self.total_spawned += 1
        return fish

    def add_fish(self, fish: Fish) -> Fish:
        """Insert an externally built fish (scenario setup, tests)"""
        self.fish.append(fish)
        return fish

    def fill_to_floor(self) -> List[Fish]:
        """
        Spawn until count >= floor.

        Bounded by config.max_fill_attempts spawn calls so a crowded field
        cannot loop forever; the next tick tries again.
        """
        spawned = []
        attempts = 0
        while len(self.fish) < self.config.floor and attempts < self.config.max_fill_attempts:
            fish = self.spawn_fish()
            if fish is not None:
                spawned.append(fish)
            attempts += 1
        return spawned

    def spawn_if_below_ceiling(self) -> Optional[Fish]:
        """Spawn one fish if the population is below its ceiling"""
        if len(self.fish) >= self.config.ceiling:
            return None
        return self.spawn_fish()

    def regulate(self) -> List[Fish]:
        """
        Population regulation step (after advance + despawn).

        1. Fill up to the floor
        2. Small independent chance of one extra fish while below the ceiling

        Returns:
            Fish spawned this step
        """
        spawned = self.fill_to_floor()

        if self.rng.random() < self.config.extra_spawn_chance:
            extra = self.spawn_if_below_ceiling()
            if extra is not None:
                spawned.append(extra)

        return spawned

    def populate(self) -> List[Fish]:
        """Initial population for a fresh session"""
        return self.fill_to_floor()

    # ------------------------------------------------------------------
    # Motion
    # ------------------------------------------------------------------

    def advance(self) -> List[Fish]:
        """
        Move FREE fish one tick (with collision avoidance), then despawn.

        Carried and delivering fish are skipped entirely.

        Returns:
            Fish removed because they left the field
        """
        self.last_avoidance = advance_with_avoidance(self.fish, self.config, self.rng)
        return self.despawn()

    def despawn(self) -> List[Fish]:
        """
        Remove FREE fish that swam past their exit edge.

        Rightward fish leave past field_width + margin, leftward fish
        past -margin.
        """
        margin = self.config.despawn_margin
        gone = []
        for fish in self.fish:
            if not fish.is_available:
                continue
            if fish.velocity_x > 0 and fish.x > self.field_width + margin:
                gone.append(fish)
            elif fish.velocity_x < 0 and fish.x < -margin:
                gone.append(fish)

        for fish in gone:
            self.fish.remove(fish)
        self.total_despawned += len(gone)
        return gone

    # ------------------------------------------------------------------
    # Carry-state transitions (driven by the delivery coordinator)
    # ------------------------------------------------------------------

    def set_carried(self, fish: Fish):
        """Bind a fish to the carry slot: freeze it so advance() skips it"""
        fish.state = FishState.CARRIED
        fish.velocity_x = 0.0

    def set_delivering(self, fish: Fish):
        fish.state = FishState.DELIVERING
        fish.velocity_x = 0.0

    def consume(self, fish: Fish) -> bool:
        """
        Remove a delivered fish.

        Returns:
            True if the fish was live and has been removed
        """
        if fish not in self.fish:
            return False
        self.fish.remove(fish)
        self.total_consumed += 1
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_fish_at(self, x: float, y: float) -> Optional[Fish]:
        """First available fish whose box contains the point, else None"""
        for fish in self.fish:
            if fish.is_available and fish.contains_point(x, y):
                return fish
        return None

    def find_fish_in_rect(self, x: float, y: float, width: float, height: float) -> Optional[Fish]:
        """First available fish whose box intersects the rectangle, else None"""
        for fish in self.fish:
            if fish.is_available and fish.intersects_rect(x, y, width, height):
                return fish
        return None

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    def set_field_width(self, width: float):
        self.field_width = float(width)

    def reset(self, rng: np.random.Generator) -> List[Fish]:
        """
        Drop every fish and repopulate from scratch with a new RNG stream.

        Instance ids keep counting so ids from the previous session are never reused.

        Returns:
            Fish spawned by the repopulation
        """
        self.fish = []
        self.rng = rng
        self.total_spawned = 0
        self.total_despawned = 0
        self.total_consumed = 0
        self.skipped_spawns = 0
        return self.populate()
