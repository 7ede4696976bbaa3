"""
Geometry helper utilities for motion and hit testing.

This module provides small, focused functions with no simulation
state. All helpers operate on float64 numpy arrays [x, y] and are safe
to use in deterministic, per-entity calculations.
"""
from __future__ import annotations

from typing import Optional, Tuple

import numpy as np


def distance_2d(a: np.ndarray, b: np.ndarray) -> float:
    """Euclidean distance between two points"""
    diff = np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)
    return float(np.sqrt(np.dot(diff, diff)))


def step_toward(current: np.ndarray, target: np.ndarray, speed: float) -> Tuple[np.ndarray, bool]:
    """
    Move a point toward a target by at most `speed`.

    Parameters
    - current: (2,) start point
    - target: (2,) destination
    - speed: maximum distance travelled this step

    Returns
    - (new_point, arrived); arrived is True when the point snapped to target
    """
    current = np.asarray(current, dtype=np.float64)
    target = np.asarray(target, dtype=np.float64)

    delta = target - current
    dist = float(np.sqrt(np.dot(delta, delta)))
    if dist > speed:
        return current + delta / dist * speed, False
    return target.copy(), True


def ease_toward(current: np.ndarray, target: np.ndarray, rate: float) -> np.ndarray:
    """Move a fixed fraction of the remaining distance toward target"""
    current = np.asarray(current, dtype=np.float64)
    target = np.asarray(target, dtype=np.float64)
    return current + (target - current) * rate


def rects_intersect(a: Tuple[float, float, float, float],
                    b: Tuple[float, float, float, float]) -> bool:
    """Strict axis-aligned overlap of two (x, y, w, h) rectangles"""
    ax, ay, aw, ah = a
    bx, by, bw, bh = b
    return ax < bx + bw and ax + aw > bx and ay < by + bh and ay + ah > by


def inflate_point(px: float, py: float, half_size: float) -> Tuple[float, float, float, float]:
    """Square (x, y, w, h) of side 2*half_size centred on a point"""
    return (px - half_size, py - half_size, 2.0 * half_size, 2.0 * half_size)


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp value into [lo, hi]; lo wins when the range is empty"""
    return max(lo, min(hi, value))


def nearest_index(point: np.ndarray, others: np.ndarray,
                  exclude: Optional[int] = None) -> Tuple[int, float]:
    """
    Index of and distance to the row of `others` closest to `point`.

    Parameters
    - point: (2,) query point
    - others: (N, 2) candidate points
    - exclude: optional row to ignore (the querying entity itself)

    Returns
    - (index, distance); (-1, inf) when there is no candidate
    """
    if len(others) == 0:
        return -1, float('inf')

    diff = others - np.asarray(point, dtype=np.float64)
    dist = np.sqrt(np.sum(diff ** 2, axis=1))
    if exclude is not None and 0 <= exclude < len(dist):
        dist[exclude] = np.inf

    idx = int(np.argmin(dist))
    if not np.isfinite(dist[idx]):
        return -1, float('inf')
    return idx, float(dist[idx])
