from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

# fixed English names; strftime("%B") follows the locale
MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

WorkoutKind = Literal["running", "cycling"]
KINDS: tuple[WorkoutKind, ...] = ("running", "cycling")

Coordinates = tuple[float, float]  # (latitude, longitude)


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class RunningStats:
    cadence_spm: float
    pace_min_per_km: float


@dataclass(frozen=True)
class CyclingStats:
    elevation_gain_m: float
    speed_km_per_h: float


@dataclass(frozen=True)
class Workout:
    """
    One committed exercise session.
    `kind` is the discriminant; `stats` carries the kind-specific payload
    (RunningStats for "running", CyclingStats for "cycling").
    Build instances with create_running() / create_cycling().
    """

    kind: WorkoutKind
    coordinates: Coordinates
    distance_km: float
    duration_min: float
    stats: RunningStats | CyclingStats
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def lat(self) -> float:
        return self.coordinates[0]

    @property
    def lng(self) -> float:
        return self.coordinates[1]

    @property
    def description(self) -> str:
        """e.g. 'Running on April 14'."""
        month = MONTHS[self.created_at.month - 1]
        return f"{self.kind.capitalize()} on {month} {self.created_at.day}"

    @property
    def metric(self) -> float:
        """Pace (min/km) for running, speed (km/h) for cycling."""
        match self.stats:
            case RunningStats(pace_min_per_km=pace):
                return pace
            case CyclingStats(speed_km_per_h=speed):
                return speed
        raise ValueError(f"Unknown workout stats: {self.stats!r}")


def create_running(
    coordinates: Coordinates,
    distance_km: float,
    duration_min: float,
    cadence_spm: float,
) -> Workout:
    """Inputs must already be validated: distance, duration and cadence > 0."""
    pace = duration_min / distance_km
    return Workout(
        kind="running",
        coordinates=(float(coordinates[0]), float(coordinates[1])),
        distance_km=distance_km,
        duration_min=duration_min,
        stats=RunningStats(cadence_spm=cadence_spm, pace_min_per_km=pace),
    )


def create_cycling(
    coordinates: Coordinates,
    distance_km: float,
    duration_min: float,
    elevation_gain_m: float,
) -> Workout:
    """Inputs must already be validated: distance, duration > 0 and elevation >= 0."""
    speed = distance_km / (duration_min / 60)
    return Workout(
        kind="cycling",
        coordinates=(float(coordinates[0]), float(coordinates[1])),
        distance_km=distance_km,
        duration_min=duration_min,
        stats=CyclingStats(elevation_gain_m=elevation_gain_m, speed_km_per_h=speed),
    )
