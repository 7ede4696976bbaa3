"""
Agent controller: the cat's body and its hand.

The body moves with a velocity intent inside a horizontal band of the play
field. The hand is animated independently: it interpolates toward a target
point and its current point is the capture probe location.
"""

import numpy as np
from typing import Tuple

from .entity import Agent, Hand
from .data_types import AgentConfig, HandConfig, Facing
from .geometry import step_toward, inflate_point, rects_intersect, clamp


class AgentController:
    """
    Owns the Agent (and its Hand) and applies movement and hand commands.

    Hand states:
        idle       not active, not returning: rests on the agent centre
        active     follows its target at hand speed
        delivering active and locked on the bowl, moves at delivery speed
        returning  not active, homing on the agent centre
    """

    def __init__(self, agent_config: AgentConfig, hand_config: HandConfig, field_width: float):
        self.agent_config = agent_config
        self.hand_config = hand_config
        self.field_width = float(field_width)
        self.agent = self._build_agent()

    def _build_agent(self) -> Agent:
        cfg = self.agent_config
        start_y = cfg.start_y if cfg.start_y is not None else cfg.zone_top + 30.0
        agent = Agent(
            position=np.array([cfg.start_x, start_y], dtype=np.float64),
            width=cfg.width,
            height=cfg.height,
            hand=Hand()
        )
        self._clamp_position(agent)
        agent.hand.rest_at(agent.center)
        return agent

    @property
    def hand(self) -> Hand:
        return self.agent.hand

    # ------------------------------------------------------------------
    # Body
    # ------------------------------------------------------------------

    def set_velocity(self, vx: float, vy: float):
        """Store the movement intent (units per tick)"""
        self.agent.velocity = np.array([vx, vy], dtype=np.float64)

    def advance(self):
        """Integrate position, clamp into the movement band, update facing"""
        agent = self.agent
        agent.position = agent.position + agent.velocity
        self._clamp_position(agent)
        agent.facing = facing_for(agent.velocity, agent.facing)

    def _clamp_position(self, agent: Agent):
        cfg = self.agent_config
        x = clamp(float(agent.position[0]), 0.0, self.field_width - agent.width)
        y = clamp(float(agent.position[1]), cfg.zone_top, cfg.zone_bottom - agent.height)
        agent.position = np.array([x, y], dtype=np.float64)

    def collides_with(self, x: float, y: float, width: float, height: float) -> bool:
        """Strict overlap of the agent body with a rectangle"""
        body = (float(self.agent.position[0]), float(self.agent.position[1]),
                self.agent.width, self.agent.height)
        return rects_intersect(body, (x, y, width, height))

    # ------------------------------------------------------------------
    # Hand
    # ------------------------------------------------------------------

    def advance_hand(self):
        """
        Move the hand one tick toward its target.

        Delivering hands use the delivery speed, everything else the normal
        hand speed. A returning hand chases the agent's current centre and
        stops returning once it snaps onto it.
        """
        hand = self.hand

        if not hand.active and not hand.returning:
            hand.rest_at(self.agent.center)
            return

        if hand.returning:
            hand.target = self.agent.center

        speed = self.hand_config.delivery_speed if hand.delivering else self.hand_config.speed
        hand.current, arrived = step_toward(hand.current, hand.target, speed)

        if arrived and hand.returning:
            hand.returning = False

    def set_hand_active(self, active: bool) -> bool:
        """
        Extend or withdraw the hand. Ignored while delivering.

        Returns:
            True if the active flag changed
        """
        hand = self.hand
        if hand.delivering:
            return False

        if active:
            changed = not hand.active
            hand.active = True
            hand.returning = False
            return changed

        if not hand.active:
            return False
        hand.active = False
        hand.returning = True
        hand.target = self.agent.center
        return True

    def set_hand_target(self, x: float, y: float):
        """
        Point the hand at (x, y).

        An active hand jumps there (current snaps to target); while
        delivering only the target moves. Idle or returning hands ignore it.
        """
        hand = self.hand
        point = np.array([x, y], dtype=np.float64)
        if hand.delivering:
            hand.target = point
            return
        if not hand.active:
            return
        hand.target = point
        hand.current = point.copy()

    def hand_probe_rect(self) -> Tuple[float, float, float, float]:
        """Capture probe: hand point inflated to a square (x, y, w, h)"""
        current = self.hand.current
        return inflate_point(float(current[0]), float(current[1]), self.hand_config.probe_half_size)

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    def set_field_width(self, width: float):
        self.field_width = float(width)
        self._clamp_position(self.agent)

    def reset(self):
        """Back to the start position with an idle hand"""
        self.agent = self._build_agent()


def facing_for(velocity: np.ndarray, current: Facing) -> Facing:
    """
    Facing from the dominant velocity axis.

    Horizontal wins ties; zero velocity keeps the current facing.
    """
    vx, vy = float(velocity[0]), float(velocity[1])
    if vx == 0.0 and vy == 0.0:
        return current
    if abs(vx) >= abs(vy):
        return Facing.RIGHT if vx > 0 else Facing.LEFT
    return Facing.DOWN if vy > 0 else Facing.UP
