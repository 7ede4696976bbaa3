"""
Capture and delivery coordination.

Phase machine for the single carry slot:

    IDLE --capture--> CAPTURED_FOLLOWING --follow_ticks elapsed--> DELIVERING
    DELIVERING --hand within arrival radius of the bowl--> IDLE

With follow_ticks == 0 (default) the following phase is skipped and the
delivery starts on the capture tick. Every guard here recovers locally;
nothing raises for gameplay conditions.
"""

from dataclasses import dataclass
from typing import Optional

from .entity import Fish, FoodBowl
from .data_types import DeliveryConfig, DeliveryPhase
from .population import FishPopulation
from .agent import AgentController
from .geometry import distance_2d, ease_toward


@dataclass
class DeliveryOutcome:
    """Bookkeeping of one completed delivery"""
    fish: Fish
    points: int
    score_before: int
    score_after: int
    caught_before: int
    caught_after: int
    bowl_count_before: int
    bowl_count_after: int
    spawned: Optional[Fish] = None


class DeliveryCoordinator:
    """
    Owns the carry slot, the score and the fish-caught counter.

    Invariant: at most one fish is carried system-wide, and it is never FREE.
    """

    def __init__(
        self,
        population: FishPopulation,
        agent: AgentController,
        bowl: Optional[FoodBowl],
        config: DeliveryConfig
    ):
        self.population = population
        self.agent = agent
        self.bowl = bowl
        self.config = config

        self.carried_fish: Optional[Fish] = None
        self.phase: DeliveryPhase = DeliveryPhase.IDLE
        self.score: int = 0
        self.fish_caught_count: int = 0
        self._follow_elapsed: int = 0

    @property
    def is_carrying(self) -> bool:
        return self.carried_fish is not None

    # ------------------------------------------------------------------
    # Capture
    # ------------------------------------------------------------------

    def try_capture(self) -> Optional[Fish]:
        """
        Capture detection for this tick.

        Requires an active hand, an empty carry slot and a FREE fish under
        the hand probe. First match in population order wins.

        Returns:
            The captured fish, or None
        """
        if not self.agent.hand.active:
            return None
        if self.carried_fish is not None:
            return None

        fish = self.population.find_fish_in_rect(*self.agent.hand_probe_rect())
        if fish is None:
            return None

        if not self.capture(fish):
            return None
        return fish

    def capture(self, fish: Fish) -> bool:
        """
        Bind a fish to the carry slot.

        Returns:
            False if something is already carried or the fish is not FREE
        """
        if self.carried_fish is not None or not fish.is_available:
            return False

        self.population.set_carried(fish)
        self.carried_fish = fish
        self.phase = DeliveryPhase.CAPTURED_FOLLOWING
        self._follow_elapsed = 0

        if self.config.follow_ticks <= 0:
            self.begin_delivery()
        return True

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    def begin_delivery(self) -> bool:
        """Lock the hand onto the bowl and attach the carried fish to it"""
        fish = self.carried_fish
        if fish is None or self.bowl is None:
            return False

        hand = self.agent.hand
        hand.delivering = True
        hand.active = True
        hand.returning = False
        hand.target = self.bowl.center

        self.population.set_delivering(fish)
        fish.center_on(float(hand.current[0]), float(hand.current[1]))
        self.phase = DeliveryPhase.DELIVERING
        return True

    def update(self) -> Optional[DeliveryOutcome]:
        """
        Per-tick positioning of the carried fish and the arrival check.

        Returns:
            DeliveryOutcome when the delivery completed this tick, else None
        """
        fish = self.carried_fish
        if fish is None:
            return None

        if self.phase is DeliveryPhase.CAPTURED_FOLLOWING:
            eased = ease_toward(fish.center, self.agent.agent.center, self.config.follow_rate)
            fish.center_on(float(eased[0]), float(eased[1]))
            self._follow_elapsed += 1
            if self._follow_elapsed >= self.config.follow_ticks:
                self.begin_delivery()
            return None

        hand = self.agent.hand
        fish.center_on(float(hand.current[0]), float(hand.current[1]))

        if self.bowl is None:
            return None
        if distance_2d(hand.current, self.bowl.center) < self.config.arrival_radius:
            return self.complete_delivery()
        return None

    def complete_delivery(self) -> Optional[DeliveryOutcome]:
        """
        Consume the carried fish into the bowl and score it.

        Order: remove fish, bowl count, score, caught counter, release the
        hand (starts its return), clear the slot, then one spawn opportunity
        bounded by the population ceiling.
        """
        fish = self.carried_fish
        if fish is None or self.bowl is None:
            return None

        score_before = self.score
        caught_before = self.fish_caught_count
        bowl_before = self.bowl.delivered_count

        self.population.consume(fish)
        self.bowl.delivered_count += 1
        self.score += fish.score
        self.fish_caught_count += 1

        self.agent.hand.delivering = False
        self.agent.set_hand_active(False)
        self.carried_fish = None
        self.phase = DeliveryPhase.IDLE

        spawned = self.population.spawn_if_below_ceiling()

        return DeliveryOutcome(
            fish=fish,
            points=fish.score,
            score_before=score_before,
            score_after=self.score,
            caught_before=caught_before,
            caught_after=self.fish_caught_count,
            bowl_count_before=bowl_before,
            bowl_count_after=self.bowl.delivered_count,
            spawned=spawned
        )

    def reset(self):
        """Empty the carry slot and zero the counters"""
        self.carried_fish = None
        self.phase = DeliveryPhase.IDLE
        self.score = 0
        self.fish_caught_count = 0
        self._follow_elapsed = 0
