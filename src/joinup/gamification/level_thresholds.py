"""Level thresholds and computation.

These values MUST match the frontend level table exactly.
"""

from __future__ import annotations

from dataclasses import dataclass

LEVEL_THRESHOLDS: list[dict] = [
    {"level": 1, "name": "Newcomer", "min_points": 0},
    {"level": 2, "name": "Explorer", "min_points": 500},
    {"level": 3, "name": "Competitor", "min_points": 1000},
    {"level": 4, "name": "Champion", "min_points": 2000},
    {"level": 5, "name": "Expert", "min_points": 3500},
    {"level": 6, "name": "Master", "min_points": 5500},
    {"level": 7, "name": "Legend", "min_points": 8000},
    {"level": 8, "name": "Elite", "min_points": 11500},
    {"level": 9, "name": "Grandmaster", "min_points": 16000},
    {"level": 10, "name": "Hall of Fame", "min_points": 22000},
]

MAX_LEVEL = LEVEL_THRESHOLDS[-1]["level"]


@dataclass(frozen=True)
class LevelInfo:
    level: int
    name: str
    min_points: int
    next_level_points: int

    @property
    def is_max(self) -> bool:
        return self.level == MAX_LEVEL


def compute_level(points: int) -> LevelInfo:
    """Resolve the level for a point total.

    Scans from the highest threshold down and takes the first one whose
    ``min_points`` does not exceed ``points``. At the maximum level
    ``next_level_points`` saturates to the current threshold, so callers must
    not assume it is greater than ``points``.
    """
    points = max(0, points)
    current = LEVEL_THRESHOLDS[0]
    index = 0
    for i in range(len(LEVEL_THRESHOLDS) - 1, -1, -1):
        if points >= LEVEL_THRESHOLDS[i]["min_points"]:
            current = LEVEL_THRESHOLDS[i]
            index = i
            break

    if index + 1 < len(LEVEL_THRESHOLDS):
        next_level_points = LEVEL_THRESHOLDS[index + 1]["min_points"]
    else:
        next_level_points = current["min_points"]

    return LevelInfo(
        level=current["level"],
        name=current["name"],
        min_points=current["min_points"],
        next_level_points=next_level_points,
    )


def level_progress(points: int) -> dict:
    """Progress toward the next level, for the stats API."""
    info = compute_level(points)
    if info.is_max:
        return {"points_into_level": max(0, points) - info.min_points, "points_to_next_level": 0, "percent": 100.0}

    span = info.next_level_points - info.min_points
    into = max(0, points) - info.min_points
    return {
        "points_into_level": into,
        "points_to_next_level": info.next_level_points - max(0, points),
        "percent": round(into * 100 / span, 1),
    }
