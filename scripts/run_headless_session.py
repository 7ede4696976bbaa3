"""
Headless FeedCat session.

Plays one timed game with a simple auto-player (clicks the first fish that is
fully inside the play field whenever the hand is free) and prints periodic
tick and session summaries.
"""

import time
from pathlib import Path

from feedcat.session import GameSession
from feedcat.simulation import FeedCatSimulation
from feedcat.score_store import InMemoryScoreStore
from feedcat.events import EventKind
from feedcat.constants import TICK_SUMMARY_INTERVAL


DATA_ROOT = Path(__file__).parent.parent / "data"
PLAYER_NAME = "headless"
CLICK_INTERVAL = 20  # Ticks between auto-player attempts


def pick_target(sim: FeedCatSimulation):
    """Centre of the first free fish fully on screen, or None"""
    for fish in sim.fish:
        if not fish.is_available:
            continue
        if 0.0 <= fish.x and fish.x + fish.width <= sim.field_width:
            center = fish.center
            return float(center[0]), float(center[1])
    return None


def main():
    """Run one full game and report the result."""
    print("=" * 80)
    print("FeedCat Headless Session")
    print("=" * 80)
    print()

    store = InMemoryScoreStore()
    sim = FeedCatSimulation(data_root=DATA_ROOT)
    session = GameSession(store, sim)
    session.set_player_name(PLAYER_NAME)
    session.start_game()

    deliveries = 0
    wall_start = time.perf_counter()

    while session.is_running:
        if sim.tick_count % CLICK_INTERVAL == 0 and not sim.is_carrying:
            target = pick_target(sim)
            if target is not None:
                sim.on_pointer_down(*target)
                sim.on_pointer_up()

        events = session.tick()
        for event in events:
            if event.kind is EventKind.FISH_DELIVERED:
                deliveries += 1
                print(f"  Tick {event.tick:5d}: delivered {event.new} (+{event.old})")
            elif event.kind is EventKind.GAME_OVER:
                print(f"\n[OK] Game over: {event.new}")

        if sim.tick_count % TICK_SUMMARY_INTERVAL == 0:
            sim.print_tick_summary()
            session.print_session_summary()

    wall_ms = (time.perf_counter() - wall_start) * 1000.0

    print()
    print("=" * 80)
    print("Summary")
    print("=" * 80)
    session.print_session_summary()
    print(f"Ticks: {sim.tick_count}, deliveries: {deliveries}, wall time: {wall_ms:.1f} ms")
    for rank, record in enumerate(store.get_top_players(5), start=1):
        print(f"  {rank}. {record.name}: {record.high_score} "
              f"({record.high_fish_count} fish, {record.games_played} games)")
    print("=" * 80)


if __name__ == '__main__':
    main()
