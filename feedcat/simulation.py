"""
FeedCat simulation kernel.

Single-threaded fixed-rate tick driver. Input intents are queued and applied
at the next tick boundary; each tick then runs strictly in this order:

    0. apply queued intents
    1. agent body + hand advance
    2. fish advance (with avoidance), despawn, population regulation
    3. capture detection
    4. carried-fish positioning and delivery arrival check

Every tick returns the list of SimEvent records it produced.
"""

import time
import numpy as np
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from .entity import Fish, FoodBowl
from .data_types import (
    GameConfig, DeliveryPhase, AgentView, FishView, TargetView
)
from .population import FishPopulation
from .agent import AgentController
from .delivery import DeliveryCoordinator, DeliveryOutcome
from .events import EventKind, SimEvent
from .loader import load_default_config
from .rng import make_rng
from .constants import TICK_TIME_WINDOW


class FeedCatSimulation:
    """
    Main simulation class for one FeedCat play field.

    Owns the fish population, the agent controller, the food bowl and the
    delivery coordinator, and drives them one tick at a time.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        data_root: Optional[Path] = None,
        schema_dir: Optional[Path] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize simulation from a config object or a data pack.

        Args:
            config: Game configuration (takes precedence over data_root)
            data_root: Optional data directory holding game/default.yaml
            schema_dir: Optional path to JSON schemas
            seed: Optional seed override (defaults to config.session.seed)
        """
        if config is None:
            if data_root is not None:
                print("Loading game configuration...")
                config = load_default_config(data_root, schema_dir)
            else:
                config = GameConfig()

        self.config: GameConfig = config
        self.seed: int = config.session.seed if seed is None else seed
        self.generation: int = 0

        self.field_width: float = float(config.play_field.width)
        self.field_height: float = float(config.play_field.height)

        # Simulation state
        self.tick_count: int = 0
        self._intents: List[Tuple[Callable, tuple]] = []
        self._pending_events: List[SimEvent] = []

        # Performance metrics
        self._tick_times: List[float] = []
        self._tick_time_sum: float = 0.0
        self._tick_time_window: int = TICK_TIME_WINDOW  # Rolling average window

        self.population = FishPopulation(
            config.fish, self.field_width, make_rng(self.seed, "population", self.generation)
        )
        self.agent = AgentController(config.agent, config.hand, self.field_width)
        self.bowl = FoodBowl(
            position=self._bowl_position(),
            width=config.bowl.width,
            height=config.bowl.height
        )
        self.delivery = DeliveryCoordinator(self.population, self.agent, self.bowl, config.delivery)

        self.population.populate()

        print(f"[OK] Simulation initialized: {len(self.population)} fish, "
              f"field {self.field_width:.0f}x{self.field_height:.0f}, seed={self.seed}")

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def fish(self) -> List[Fish]:
        return self.population.fish

    @property
    def score(self) -> int:
        return self.delivery.score

    @property
    def fish_caught_count(self) -> int:
        return self.delivery.fish_caught_count

    @property
    def carried_fish(self) -> Optional[Fish]:
        return self.delivery.carried_fish

    @property
    def is_carrying(self) -> bool:
        return self.delivery.is_carrying

    # ------------------------------------------------------------------
    # Panel / bowl layout
    # ------------------------------------------------------------------

    def _bowl_position(self) -> np.ndarray:
        """Bowl sits right_margin from the right edge, centred in the agent band"""
        bowl_cfg = self.config.bowl
        zone_top = self.config.agent.zone_top
        zone_height = self.config.agent.zone_bottom - zone_top
        x = self.field_width - bowl_cfg.width - bowl_cfg.right_margin
        y = zone_top + (zone_height - bowl_cfg.height) / 2.0
        return np.array([x, y], dtype=np.float64)

    def set_panel_dimensions(self, width: float, height: float) -> bool:
        """
        Resize the play field and relocate the bowl.

        Non-positive dimensions are ignored.

        Returns:
            True if the new dimensions were applied
        """
        if width <= 0 or height <= 0:
            print(f"[WARN] Ignoring panel dimensions {width}x{height}")
            return False

        old = (self.field_width, self.field_height)
        self.field_width = float(width)
        self.field_height = float(height)

        self.population.set_field_width(self.field_width)
        self.agent.set_field_width(self.field_width)
        self.bowl.position = self._bowl_position()

        if self.delivery.phase is DeliveryPhase.DELIVERING:
            self.agent.hand.target = self.bowl.center

        self._pending_events.append(SimEvent(
            EventKind.PANEL_DIMENSIONS_CHANGED, self.tick_count,
            old=old, new=(self.field_width, self.field_height)
        ))
        return True

    # ------------------------------------------------------------------
    # Intents (queued, applied at the next tick boundary)
    # ------------------------------------------------------------------

    def set_agent_velocity(self, vx: float, vy: float):
        self._intents.append((self._apply_agent_velocity, (vx, vy)))

    def set_hand_active(self, active: bool):
        self._intents.append((self._apply_hand_active, (bool(active),)))

    def set_hand_target(self, x: float, y: float):
        self._intents.append((self._apply_hand_target, (x, y)))

    def on_pointer_down(self, x: float, y: float):
        self._intents.append((self._apply_pointer_down, (x, y)))

    def on_pointer_up(self):
        self._intents.append((self._apply_pointer_up, ()))

    def on_pointer_move(self, x: float, y: float):
        self._intents.append((self._apply_pointer_move, (x, y)))

    @property
    def pending_intents(self) -> int:
        return len(self._intents)

    def _apply_intents(self, events: List[SimEvent]):
        intents = self._intents
        self._intents = []
        for apply, args in intents:
            apply(events, *args)

    def _apply_agent_velocity(self, events: List[SimEvent], vx: float, vy: float):
        self.agent.set_velocity(vx, vy)

    def _apply_hand_active(self, events: List[SimEvent], active: bool):
        if self.agent.set_hand_active(active):
            events.append(SimEvent(EventKind.HAND_ACTIVE_CHANGED, self.tick_count,
                                   old=not active, new=active))

    def _apply_hand_target(self, events: List[SimEvent], x: float, y: float):
        # A delivering hand stays locked on the bowl
        if self.agent.hand.delivering:
            return
        self.agent.set_hand_target(x, y)

    def _apply_pointer_down(self, events: List[SimEvent], x: float, y: float):
        """Press: grab the fish under the pointer, or reach toward the point"""
        if self.delivery.is_carrying:
            return

        fish = self.population.find_fish_at(x, y)
        self._apply_hand_active(events, True)
        self.agent.set_hand_target(x, y)

        if fish is not None and self.delivery.capture(fish):
            self._capture_events(events, fish)

    def _apply_pointer_up(self, events: List[SimEvent]):
        if self.delivery.is_carrying:
            return
        self._apply_hand_active(events, False)

    def _apply_pointer_move(self, events: List[SimEvent], x: float, y: float):
        hand = self.agent.hand
        if hand.active and not hand.delivering:
            self.agent.set_hand_target(x, y)

        over = self.bowl.is_point_over(x, y)
        if over != self.bowl.visible:
            self.bowl.visible = over
            events.append(SimEvent(EventKind.BOWL_HOVER_CHANGED, self.tick_count,
                                   old=not over, new=over))

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def tick(self) -> List[SimEvent]:
        """
        Execute one simulation tick.

        Returns:
            Events produced this tick, in the order they happened
        """
        tick_start = time.perf_counter()
        self.tick_count += 1

        events = self._pending_events
        self._pending_events = []
        for event in events:
            event.tick = self.tick_count

        # 0. Intents
        self._apply_intents(events)

        # 1. Agent body and hand
        self.agent.advance()
        self.agent.advance_hand()

        # 2. Fish motion, despawn, regulation
        for fish in self.population.advance():
            events.append(SimEvent(EventKind.FISH_REMOVED, self.tick_count, new=fish.instance_id))
        for fish in self.population.regulate():
            events.append(SimEvent(EventKind.FISH_SPAWNED, self.tick_count, new=fish.instance_id))

        # 3. Capture detection
        captured = self.delivery.try_capture()
        if captured is not None:
            self._capture_events(events, captured)

        # 4. Delivery positioning and arrival
        phase_before = self.delivery.phase
        outcome = self.delivery.update()
        if phase_before is DeliveryPhase.CAPTURED_FOLLOWING and self.delivery.phase is DeliveryPhase.DELIVERING:
            events.append(SimEvent(EventKind.DELIVERY_STARTED, self.tick_count,
                                   new=self.delivery.carried_fish.instance_id))
        if outcome is not None:
            self._delivery_events(events, outcome)

        self._record_tick_time(time.perf_counter() - tick_start)
        return events

    def _capture_events(self, events: List[SimEvent], fish: Fish):
        events.append(SimEvent(EventKind.FISH_CAPTURED, self.tick_count, new=fish.instance_id))
        if self.delivery.phase is DeliveryPhase.DELIVERING:
            events.append(SimEvent(EventKind.DELIVERY_STARTED, self.tick_count, new=fish.instance_id))

    def _delivery_events(self, events: List[SimEvent], outcome: DeliveryOutcome):
        tick = self.tick_count
        fish_id = outcome.fish.instance_id
        events.append(SimEvent(EventKind.FISH_REMOVED, tick, new=fish_id))
        events.append(SimEvent(EventKind.BOWL_COUNT_CHANGED, tick,
                               old=outcome.bowl_count_before, new=outcome.bowl_count_after))
        events.append(SimEvent(EventKind.SCORE_CHANGED, tick,
                               old=outcome.score_before, new=outcome.score_after))
        events.append(SimEvent(EventKind.FISH_COUNT_CHANGED, tick,
                               old=outcome.caught_before, new=outcome.caught_after))
        events.append(SimEvent(EventKind.FISH_DELIVERED, tick, old=outcome.points, new=fish_id))
        events.append(SimEvent(EventKind.HAND_ACTIVE_CHANGED, tick, old=True, new=False))
        if outcome.spawned is not None:
            events.append(SimEvent(EventKind.FISH_SPAWNED, tick, new=outcome.spawned.instance_id))

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    def reset_session(self) -> List[SimEvent]:
        """
        Start a fresh session in place.

        Clears score, caught counter, carry slot, hand flags, bowl count and
        queued intents, then repopulates to the floor with a new RNG stream.

        Returns:
            Reset events (reported with the current tick number)
        """
        old_score = self.delivery.score
        old_caught = self.delivery.fish_caught_count

        self.generation += 1
        self._intents = []
        self._pending_events = []

        self.delivery.reset()
        self.agent.reset()
        self.bowl.delivered_count = 0
        self.bowl.visible = False

        removed = [fish.instance_id for fish in self.population.fish]
        spawned = self.population.reset(make_rng(self.seed, "population", self.generation))

        events = [SimEvent(EventKind.SESSION_RESET, self.tick_count, new=self.generation)]
        if old_score != 0:
            events.append(SimEvent(EventKind.SCORE_CHANGED, self.tick_count, old=old_score, new=0))
        if old_caught != 0:
            events.append(SimEvent(EventKind.FISH_COUNT_CHANGED, self.tick_count, old=old_caught, new=0))
        for fish_id in removed:
            events.append(SimEvent(EventKind.FISH_REMOVED, self.tick_count, new=fish_id))
        for fish in spawned:
            events.append(SimEvent(EventKind.FISH_SPAWNED, self.tick_count, new=fish.instance_id))
        return events

    # ------------------------------------------------------------------
    # Snapshot views
    # ------------------------------------------------------------------

    def get_agent_view(self) -> AgentView:
        agent = self.agent.agent
        hand = agent.hand
        return AgentView(
            x=float(agent.position[0]),
            y=float(agent.position[1]),
            width=agent.width,
            height=agent.height,
            facing=agent.facing,
            velocity_x=float(agent.velocity[0]),
            velocity_y=float(agent.velocity[1]),
            hand_active=hand.active,
            hand_x=float(hand.current[0]),
            hand_y=float(hand.current[1]),
            hand_target_x=float(hand.target[0]),
            hand_target_y=float(hand.target[1]),
            hand_delivering=hand.delivering,
            hand_returning=hand.returning
        )

    def get_fish_views(self) -> List[FishView]:
        return [
            FishView(
                instance_id=f.instance_id,
                x=f.x,
                y=f.y,
                width=f.width,
                height=f.height,
                category=f.category,
                captured=f.captured,
                velocity_x=f.velocity_x
            )
            for f in self.population.fish
        ]

    def get_target_view(self) -> TargetView:
        bowl = self.bowl
        center = bowl.center
        return TargetView(
            x=float(bowl.position[0]),
            y=float(bowl.position[1]),
            width=bowl.width,
            height=bowl.height,
            center_x=float(center[0]),
            center_y=float(center[1]),
            visible=bowl.visible,
            delivered_count=bowl.delivered_count
        )

    def get_snapshot(self) -> Dict[str, Any]:
        """
        Get complete simulation state snapshot.

        Returns:
            JSON-compatible dict with tick, counters, agent, fish and bowl
        """
        carried = self.delivery.carried_fish
        return {
            'tick': self.tick_count,
            'generation': self.generation,
            'score': self.delivery.score,
            'fish_caught_count': self.delivery.fish_caught_count,
            'carried_fish': carried.instance_id if carried is not None else None,
            'delivery_phase': self.delivery.phase.value,
            'field': {'width': self.field_width, 'height': self.field_height},
            'agent': self.get_agent_view().to_dict(),
            'fish': [view.to_dict() for view in self.get_fish_views()],
            'target': self.get_target_view().to_dict(),
            'stats': self.get_tick_stats()
        }

    # ------------------------------------------------------------------
    # Performance monitoring
    # ------------------------------------------------------------------

    def get_tick_stats(self) -> dict:
        """
        Get current tick timing statistics.

        Returns:
            Dict with tick_count, avg_tick_time_ms, last_tick_time_ms
        """
        if not self._tick_times:
            return {
                'tick_count': self.tick_count,
                'avg_tick_time_ms': 0.0,
                'last_tick_time_ms': 0.0
            }

        avg_time = self._tick_time_sum / len(self._tick_times)
        last_time = self._tick_times[-1]

        return {
            'tick_count': self.tick_count,
            'avg_tick_time_ms': avg_time * 1000.0,
            'last_tick_time_ms': last_time * 1000.0
        }

    def _record_tick_time(self, elapsed: float):
        """
        Record tick timing for rolling average.

        Args:
            elapsed: Tick time in seconds
        """
        self._tick_times.append(elapsed)
        self._tick_time_sum += elapsed

        if len(self._tick_times) > self._tick_time_window:
            removed = self._tick_times.pop(0)
            self._tick_time_sum -= removed

    def print_tick_summary(self):
        """Print tick summary to console (lightweight monitoring)"""
        stats = self.get_tick_stats()
        print(f"Tick {stats['tick_count']:5d} | "
              f"Avg: {stats['avg_tick_time_ms']:6.3f} ms | "
              f"Last: {stats['last_tick_time_ms']:6.3f} ms | "
              f"Fish: {len(self.population)} | "
              f"Avoided: {self.population.last_avoidance['avoided']} | "
              f"Score: {self.delivery.score}")
