"""
Central configuration constants for the FeedCat simulation.

Defines default values, thresholds, and tuning parameters used across
multiple modules. Every value here can be overridden from the YAML game
configuration (see data/game/default.yaml).
"""

# ============================================================================
# Play Field
# ============================================================================

FIELD_WIDTH_DEFAULT = 800.0    # Panel width (units)
FIELD_HEIGHT_DEFAULT = 600.0   # Panel height (units)


# ============================================================================
# Fish Population
# ============================================================================

FISH_WIDTH = 60.0
FISH_HEIGHT = 50.0
FISH_SPEED = 5.0               # Units per tick, same for every category
FISH_CATEGORY_COUNT = 3        # Categories 0, 1, 2
FISH_SCORE_BASE = 10           # score = FISH_SCORE_BASE * (category + 1)

# Spawn placement
SPAWN_ATTEMPTS = 15            # Candidate positions tried before skipping a spawn
MIN_SPAWN_SEPARATION = 120.0   # Centre-to-centre distance to interactable fish
SPAWN_OFFSET_MIN = 50.0        # Distance outside the entry edge (near)
SPAWN_OFFSET_MAX = 350.0       # Distance outside the entry edge (far)

# Default lanes (horizontal bands)
TOP_LANE_Y_RANGE = (15.0, 135.0)      # Top lane swims right-to-left
BOTTOM_LANE_Y_RANGE = (465.0, 585.0)  # Bottom lane swims left-to-right

# Collision avoidance
COLLISION_THRESHOLD = 85.0     # Centre distance that blocks a forward move
AVOIDANCE_STEP = 15.0          # Vertical nudge per blocked tick
AVOIDANCE_JITTER = 5           # Horizontal jitter range [-J, J]
DESPAWN_MARGIN = 120.0         # Distance past the exit edge before removal

# Population band
POPULATION_FLOOR = 6           # Spawn until at least this many fish
POPULATION_CEILING = 9         # Random extra spawns stop at this count
EXTRA_SPAWN_CHANCE = 0.008     # Per-tick probability of one extra spawn
MAX_FILL_ATTEMPTS = 60         # Spawn calls allowed per fill pass


# ============================================================================
# Agent (Cat) and Hand
# ============================================================================

AGENT_WIDTH = 70.0
AGENT_HEIGHT = 60.0
AGENT_START_X = 100.0
AGENT_ZONE_TOP = 200.0         # Agent is restricted to [zone_top, zone_bottom]
AGENT_ZONE_BOTTOM = 360.0

HAND_SPEED = 8.0               # Normal / return interpolation speed (units/tick)
HAND_DELIVERY_SPEED = 18.0     # Interpolation speed while delivering
HAND_PROBE_HALF_SIZE = 15.0    # Capture probe is a (2h x 2h) square at the hand


# ============================================================================
# Food Bowl (Target) and Delivery
# ============================================================================

BOWL_WIDTH = 100.0
BOWL_HEIGHT = 80.0
BOWL_RIGHT_MARGIN = 50.0       # Gap between bowl and the right field edge

ARRIVAL_RADIUS = 30.0          # Hand-to-bowl distance that completes a delivery
FOLLOW_TICKS = 0               # Ticks spent following the agent before delivery
FOLLOW_RATE = 0.3              # Fraction of remaining distance per follow tick


# ============================================================================
# Session
# ============================================================================

TICK_RATE_HZ = 60              # Fixed simulation rate
TIME_LIMIT_SECONDS = 60        # Length of one game
WORLD_SEED_DEFAULT = 12345


# ============================================================================
# Performance Configuration
# ============================================================================

# Tick timing window for rolling average
TICK_TIME_WINDOW = 100  # Number of ticks to average

# Default tick summary interval (print every N ticks)
TICK_SUMMARY_INTERVAL = 300
