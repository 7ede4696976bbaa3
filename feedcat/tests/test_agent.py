"""
Tests for the agent controller (body movement and hand animation).
"""

import numpy as np

from feedcat.agent import AgentController, facing_for
from feedcat.data_types import AgentConfig, HandConfig, Facing


def _controller(field_width: float = 800.0) -> AgentController:
    return AgentController(AgentConfig(), HandConfig(), field_width)


def test_initial_placement():
    ctrl = _controller()
    agent = ctrl.agent

    assert np.allclose(agent.position, [100.0, 230.0])  # zone_top + 30
    assert np.allclose(agent.center, [135.0, 260.0])
    assert np.allclose(ctrl.hand.current, agent.center)
    assert not ctrl.hand.active
    assert agent.facing is Facing.RIGHT


def test_advance_clamps_to_band():
    ctrl = _controller()

    ctrl.set_velocity(-500.0, -500.0)
    ctrl.advance()
    assert np.allclose(ctrl.agent.position, [0.0, 200.0])

    ctrl.set_velocity(5000.0, 5000.0)
    ctrl.advance()
    # x <= 800 - 70, y <= 360 - 60
    assert np.allclose(ctrl.agent.position, [730.0, 300.0])


def test_advance_integrates_velocity():
    ctrl = _controller()
    ctrl.set_velocity(3.0, 2.0)
    ctrl.advance()
    ctrl.advance()
    assert np.allclose(ctrl.agent.position, [106.0, 234.0])


def test_facing_dominant_axis():
    assert facing_for(np.array([5.0, 0.0]), Facing.UP) is Facing.RIGHT
    assert facing_for(np.array([-5.0, 1.0]), Facing.UP) is Facing.LEFT
    assert facing_for(np.array([1.0, -5.0]), Facing.RIGHT) is Facing.UP
    assert facing_for(np.array([0.0, 2.0]), Facing.RIGHT) is Facing.DOWN
    # Ties go horizontal
    assert facing_for(np.array([-3.0, 3.0]), Facing.UP) is Facing.LEFT
    # Zero velocity keeps the previous facing
    assert facing_for(np.array([0.0, 0.0]), Facing.DOWN) is Facing.DOWN


def test_idle_hand_follows_agent_centre():
    ctrl = _controller()
    ctrl.set_velocity(10.0, 0.0)
    ctrl.advance()
    ctrl.advance_hand()

    assert np.allclose(ctrl.hand.current, ctrl.agent.center)
    assert np.allclose(ctrl.hand.target, ctrl.agent.center)


def test_hand_target_snaps_outside_delivery():
    ctrl = _controller()
    assert ctrl.set_hand_active(True)
    ctrl.set_hand_target(400.0, 300.0)

    assert np.allclose(ctrl.hand.current, [400.0, 300.0])
    assert np.allclose(ctrl.hand.target, [400.0, 300.0])


def test_hand_return_animation():
    """Deactivating starts a return toward the agent centre at hand speed"""
    ctrl = _controller()
    center = ctrl.agent.center.copy()

    ctrl.set_hand_active(True)
    ctrl.set_hand_target(float(center[0]) + 40.0, float(center[1]))

    assert ctrl.set_hand_active(False)
    assert ctrl.hand.returning and not ctrl.hand.active

    # 40 units at 8 per tick: four full steps, snap on the fifth
    for _ in range(4):
        ctrl.advance_hand()
        assert ctrl.hand.returning

    ctrl.advance_hand()
    assert not ctrl.hand.returning
    assert np.allclose(ctrl.hand.current, center)



def test_hand_target_ignored_when_not_active():
    ctrl = _controller()
    center = ctrl.agent.center.copy()

    # Idle hand stays resting on the agent
    ctrl.set_hand_target(400.0, 300.0)
    assert np.allclose(ctrl.hand.current, center)
    assert np.allclose(ctrl.hand.target, center)

    ctrl.set_hand_active(True)
    ctrl.set_hand_target(float(center[0]) + 40.0, float(center[1]))
    ctrl.set_hand_active(False)

    # Returning hand keeps homing, no jump to the new point
    ctrl.set_hand_target(600.0, 300.0)
    assert ctrl.hand.returning
    assert np.allclose(ctrl.hand.current, [center[0] + 40.0, center[1]])
    assert np.allclose(ctrl.hand.target, center)

def test_returning_hand_chases_moving_agent():
    ctrl = _controller()
    ctrl.set_hand_active(True)
    ctrl.set_hand_target(300.0, 260.0)
    ctrl.set_hand_active(False)

    ctrl.set_velocity(0.0, 20.0)
    ctrl.advance()
    ctrl.advance_hand()

    assert np.allclose(ctrl.hand.target, ctrl.agent.center)


def test_activate_cancels_return():
    ctrl = _controller()
    ctrl.set_hand_active(True)
    ctrl.set_hand_target(300.0, 260.0)
    ctrl.set_hand_active(False)

    assert ctrl.set_hand_active(True)
    assert ctrl.hand.active and not ctrl.hand.returning

    # Already active: no change reported
    assert not ctrl.set_hand_active(True)


def test_hand_commands_while_delivering():
    ctrl = _controller()
    ctrl.set_hand_active(True)
    ctrl.set_hand_target(400.0, 300.0)
    ctrl.hand.delivering = True

    # Deactivation ignored
    assert not ctrl.set_hand_active(False)
    assert ctrl.hand.active and ctrl.hand.delivering

    # Only the target moves
    ctrl.set_hand_target(500.0, 250.0)
    assert np.allclose(ctrl.hand.current, [400.0, 300.0])
    assert np.allclose(ctrl.hand.target, [500.0, 250.0])


def test_delivering_hand_uses_delivery_speed():
    ctrl = _controller()
    ctrl.set_hand_active(True)
    ctrl.set_hand_target(400.0, 300.0)
    ctrl.hand.delivering = True
    ctrl.set_hand_target(500.0, 300.0)

    ctrl.advance_hand()
    assert np.allclose(ctrl.hand.current, [418.0, 300.0])

    ctrl.hand.delivering = False
    ctrl.advance_hand()
    assert np.allclose(ctrl.hand.current, [426.0, 300.0])


def test_hand_probe_rect_and_body_collision():
    ctrl = _controller()
    ctrl.set_hand_active(True)
    ctrl.set_hand_target(400.0, 300.0)

    assert ctrl.hand_probe_rect() == (385.0, 285.0, 30.0, 30.0)

    # Body is 100..170 x 230..290
    assert ctrl.collides_with(160.0, 280.0, 20.0, 20.0)
    assert not ctrl.collides_with(170.0, 230.0, 20.0, 20.0)


def test_field_width_change_reclamps():
    ctrl = _controller()
    ctrl.set_velocity(5000.0, 0.0)
    ctrl.advance()
    assert ctrl.agent.position[0] == 730.0

    ctrl.set_field_width(500.0)
    assert ctrl.agent.position[0] == 430.0


def test_reset():
    ctrl = _controller()
    ctrl.set_velocity(5.0, 5.0)
    ctrl.advance()
    ctrl.set_hand_active(True)
    ctrl.hand.delivering = True

    ctrl.reset()

    assert np.allclose(ctrl.agent.position, [100.0, 230.0])
    hand = ctrl.hand
    assert not hand.active and not hand.delivering and not hand.returning
