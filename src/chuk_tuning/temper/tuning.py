"""
Least squares tuning maps.

All maps are given in (co-)weighted coordinates: a tuning map divided by
the per-element weights so that a plain Euclidean norm measures weighted
error. The just intonation point (JIP) is the map of pure sizes.
"""

from __future__ import annotations

import math
from itertools import product
from typing import Sequence

import numpy as np


def combine_tuning_maps(jip: Sequence[float], maps: Sequence[Sequence[float]]) -> np.ndarray:
    """
    Linear combination of maps closest to the JIP.

    Args:
        jip: Just intonation point in weighted coordinates
        maps: Rows spanning the admissible tuning maps

    Returns:
        Orthogonal projection of the JIP onto the row space of maps
    """
    target = np.asarray(jip, dtype=float)
    rows = np.asarray(maps, dtype=float)
    if not len(rows):
        return np.zeros_like(target)
    coefficients = np.linalg.solve(rows @ rows.T, rows @ target)
    return coefficients @ rows


def vanish_commas(jip: Sequence[float], commas: Sequence[Sequence[float]]) -> np.ndarray:
    """
    Tuning map closest to the JIP that maps every comma to zero.

    Args:
        jip: Just intonation point in co-weighted coordinates
        commas: Commas to vanish in weighted coordinates

    Returns:
        The JIP with its projection onto the comma space removed
    """
    target = np.asarray(jip, dtype=float)
    rows = np.asarray(commas, dtype=float)
    if not len(rows):
        return target.copy()
    null_projector = rows.T @ np.linalg.solve(rows @ rows.T, rows)
    return target - null_projector @ target


def int_combine_tuning_maps(
    jip: Sequence[float], vals: Sequence[Sequence[float]], search_radius: int
) -> list[int]:
    """
    Integer combination of vals closest to the JIP.

    Every combination with coefficients in [-search_radius, search_radius]
    is tried. Vals are projective so the first coefficient only needs to
    cover [0, search_radius]. Combinations with a common factor or with
    a zero equave mapping are skipped. Each candidate is normalized to a
    pure equave before measuring its distance to the JIP.

    Returns:
        Coefficients of the best combination (the first best one on ties)
    """
    if not len(vals):
        return []
    if len(vals) == 1:
        return [1]
    target = np.asarray(jip, dtype=float)
    rows = np.asarray(vals, dtype=float)
    scale = float(np.abs(rows[:, 0]).max())
    least_error = math.inf
    result: list[int] = []
    ranges = [range(0, search_radius + 1)]
    ranges.extend(range(-search_radius, search_radius + 1) for _ in range(len(vals) - 1))
    for coefficients in product(*ranges):
        if abs(math.gcd(*coefficients)) != 1:
            continue
        val = np.asarray(coefficients, dtype=float) @ rows
        if abs(val[0]) <= 1e-12 * scale:
            continue
        tuning = val / val[0] * target[0]
        error = float(np.linalg.norm(target - tuning))
        if error < least_error:
            least_error = error
            result = list(coefficients)
    return result
