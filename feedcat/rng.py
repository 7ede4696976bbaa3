"""
Deterministic RNG utilities for the FeedCat simulation.

Uses SHA256 hashing to derive stable seeds from hierarchical components
(world_seed, stream name, generation). All randomness uses
numpy.random.Generator(PCG64) for reproducible cross-session results.
"""

import hashlib
import numpy as np
from typing import Any


def make_seed(*components: Any) -> int:
    """
    Generate deterministic 64-bit seed from hierarchical components.

    Uses SHA256 to hash components into stable seed value.

    Args:
        *components: Seed components (world_seed, stream name, generation, etc.)

    Returns:
        64-bit integer seed for numpy RNG

    Example:
        population_seed = make_seed(world_seed, "population", 0)
    """
    # Join all components with colon separator
    hash_input = ":".join(str(c) for c in components)

    # SHA256 hash and extract 64-bit integer
    hash_bytes = hashlib.sha256(hash_input.encode('utf-8')).digest()
    seed = int.from_bytes(hash_bytes[:8], byteorder='big')

    return seed


def make_rng(*components: Any) -> np.random.Generator:
    """
    Build a PCG64 generator seeded from hierarchical components.

    Each session reset uses a new generation component so a fresh game
    gets a fresh (but reproducible) stream.
    """
    return np.random.Generator(np.random.PCG64(make_seed(*components)))


def random_category(rng: np.random.Generator, category_count: int) -> int:
    """Uniform fish category in [0, category_count)"""
    return int(rng.integers(0, category_count))


def random_jitter(rng: np.random.Generator, magnitude: int) -> int:
    """Uniform integer in [-magnitude, magnitude]"""
    if magnitude <= 0:
        return 0
    return int(rng.integers(-magnitude, magnitude + 1))
