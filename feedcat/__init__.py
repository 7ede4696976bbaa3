"""
FeedCat Simulation Core

A deterministic, headless simulation of a small arcade scene: a cat catches
fish drifting through a bounded play field and carries them to a food bowl.

Architecture: the simulation is the source of truth. Rendering, input
translation and score persistence are consumers or injected collaborators.
"""

__version__ = "0.1.0"
