from __future__ import annotations

from dataclasses import dataclass

from workout_map.workouts import CyclingStats, RunningStats, Workout

ICONS = {
    "running": "🏃‍♂️",
    "cycling": "🚴‍♀️",
}


@dataclass(frozen=True)
class EntryField:
    icon: str
    value: str
    unit: str


@dataclass(frozen=True)
class EntryContent:
    title: str
    kind: str
    fields: tuple[EntryField, ...]


def _fmt(value: float, decimals: int | None = None) -> str:
    if decimals is not None:
        return f"{value:.{decimals}f}"
    # whole numbers without a trailing ".0"
    return f"{value:g}"


def popup_text(workout: Workout) -> str:
    return f"{ICONS[workout.kind]} {workout.description}"


def marker_css_class(workout: Workout) -> str:
    return f"{workout.kind}-popup"


def render_entry(workout: Workout) -> EntryContent:
    """
    Content of one list entry:
      distance, duration, then pace + cadence (running) or speed + elevation (cycling).
    """
    fields = [
        EntryField(ICONS[workout.kind], _fmt(workout.distance_km), "km"),
        EntryField("⏱", _fmt(workout.duration_min), "min"),
    ]

    match workout.stats:
        case RunningStats(cadence_spm=cadence, pace_min_per_km=pace):
            fields.append(EntryField("⚡️", _fmt(pace, 1), "min/km"))
            fields.append(EntryField("🦶🏼", _fmt(cadence), "spm"))
        case CyclingStats(elevation_gain_m=elevation, speed_km_per_h=speed):
            fields.append(EntryField("⚡️", _fmt(speed, 1), "km/h"))
            fields.append(EntryField("⛰", _fmt(elevation), "m"))
        case _:
            raise ValueError(f"Unknown workout kind: {workout.kind!r}")

    return EntryContent(title=workout.description, kind=workout.kind, fields=tuple(fields))
