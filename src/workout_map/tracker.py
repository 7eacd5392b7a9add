from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from workout_map.entries import EntryContent, marker_css_class, popup_text, render_entry
from workout_map.workouts import Coordinates, Workout, create_cycling, create_running

INVALID_INPUT_MSG = "Inputs have to be positive numbers!"
NO_POSITION_MSG = "Could not get your position"


class ValidationError(ValueError):
    """Form input rejected; nothing was committed."""


class LocationUnavailable(RuntimeError):
    """The current position could not be determined."""


# ---- collaborator contracts
@dataclass
class FormFields:
    """Raw text of the form inputs, as typed by the user."""

    type: str = "running"
    distance: str = ""
    duration: str = ""
    cadence: str = ""
    elevation: str = ""


class Locator(Protocol):
    def request_current_position(
        self,
        on_success: Callable[[Coordinates], None],
        on_error: Callable[[LocationUnavailable], None],
    ) -> None: ...


class MapWidget(Protocol):
    def initialize(self, center: Coordinates, zoom: int) -> None: ...

    def on_click(self, handler: Callable[[Coordinates], None]) -> None: ...

    def add_marker(self, coords: Coordinates, popup_content: str, style_class: str) -> Any: ...

    def set_view(
        self,
        coords: Coordinates,
        zoom: int,
        *,
        animate: bool = True,
        pan_duration_s: float = 1.0,
    ) -> None: ...


class FormView(Protocol):
    def show(self) -> None: ...

    def hide(self) -> None: ...

    def focus_field(self, name: str) -> None: ...

    def read_fields(self) -> FormFields: ...

    def clear_fields(self) -> None: ...

    def toggle_extra_field(self, kind: str) -> None: ...


class ListView(Protocol):
    def append_entry(self, workout_id: str, content: EntryContent) -> None: ...


class Notifier(Protocol):
    def alert(self, message: str) -> None: ...


# ---- state
class TrackerState(Enum):
    IDLE = "idle"
    AWAITING_FORM_INPUT = "awaiting_form_input"


@dataclass
class TrackerConfig:
    zoom: int = 13
    pan_duration_s: float = 1.0


@dataclass
class SessionState:
    workouts: list[Workout] = field(default_factory=list)
    active_map_click: Coordinates | None = None
    markers: dict[str, Any] = field(default_factory=dict)
    map_ready: bool = False
    locating: bool = False


@dataclass(frozen=True)
class ParsedForm:
    kind: str
    distance_km: float
    duration_min: float
    extra: float  # cadence (running) or elevation gain (cycling)


def _number(raw: str) -> float:
    try:
        value = float(str(raw).strip())
    except ValueError:
        raise ValidationError(INVALID_INPUT_MSG) from None
    if not math.isfinite(value):
        raise ValidationError(INVALID_INPUT_MSG)
    return value


def parse_form(fields: FormFields) -> ParsedForm:
    """
    Coerce the raw form text to numbers.
    Raises ValidationError unless distance, duration (and cadence for running) are
    finite and > 0, and elevation for cycling is finite and >= 0.
    """
    kind = (fields.type or "").strip().lower()
    distance = _number(fields.distance)
    duration = _number(fields.duration)

    if kind == "running":
        extra = _number(fields.cadence)
        if min(distance, duration, extra) <= 0:
            raise ValidationError(INVALID_INPUT_MSG)
    elif kind == "cycling":
        extra = _number(fields.elevation)
        if min(distance, duration) <= 0 or extra < 0:
            raise ValidationError(INVALID_INPUT_MSG)
    else:
        raise ValidationError(f"Unknown workout type: {fields.type!r}")

    return ParsedForm(kind=kind, distance_km=distance, duration_min=duration, extra=extra)


def _closest_workout_id(target: Any) -> str | None:
    node = target
    while node is not None:
        workout_id = getattr(node, "workout_id", None)
        if workout_id:
            return workout_id
        get_parent = getattr(node, "get_parent", None)
        node = get_parent() if get_parent else None
    return None


class TrackerController:
    """
    Owns the session (workouts + pending map click) and drives the
    Idle -> AwaitingFormInput -> Idle cycle.
    Every handler runs to completion on the main loop.
    """

    def __init__(
        self,
        *,
        locator: Locator,
        map_widget: MapWidget,
        form: FormView,
        entries: ListView,
        notifier: Notifier,
        config: TrackerConfig | None = None,
    ) -> None:
        self.locator = locator
        self.map = map_widget
        self.form = form
        self.entries = entries
        self.notifier = notifier
        self.config = config or TrackerConfig()
        self.session = SessionState()

    @property
    def state(self) -> TrackerState:
        if self.session.active_map_click is None:
            return TrackerState.IDLE
        return TrackerState.AWAITING_FORM_INPUT

    @property
    def workouts(self) -> list[Workout]:
        return self.session.workouts

    # ---- geolocation
    def start(self) -> None:
        """Ask for the current position once; the map is built when it arrives."""
        if self.session.map_ready or self.session.locating:
            return
        self.session.locating = True
        self.locator.request_current_position(self._on_position, self._on_position_error)

    def _on_position(self, coords: Coordinates) -> None:
        self.session.locating = False
        lat, lng = coords
        print(f"https://www.google.com/maps/@{lat},{lng}")

        self.map.initialize((lat, lng), self.config.zoom)
        self.map.on_click(self.on_map_click)
        self.session.map_ready = True

    def _on_position_error(self, error: LocationUnavailable) -> None:
        self.session.locating = False
        print(f"Location unavailable: {error}")
        self.notifier.alert(NO_POSITION_MSG)

    # ---- event handlers
    def on_map_click(self, coords: Coordinates) -> None:
        # last click wins
        self.session.active_map_click = (float(coords[0]), float(coords[1]))
        self.form.show()
        self.form.focus_field("distance")

    def on_form_submit(self) -> Workout | None:
        click = self.session.active_map_click
        if click is None:
            return None

        try:
            parsed = parse_form(self.form.read_fields())
        except ValidationError as e:
            self.notifier.alert(str(e))
            return None

        if parsed.kind == "running":
            workout = create_running(click, parsed.distance_km, parsed.duration_min, parsed.extra)
        else:
            workout = create_cycling(click, parsed.distance_km, parsed.duration_min, parsed.extra)

        self.session.workouts.append(workout)
        self.session.markers[workout.id] = self.map.add_marker(
            workout.coordinates,
            popup_text(workout),
            marker_css_class(workout),
        )
        self.entries.append_entry(workout.id, render_entry(workout))

        self.form.clear_fields()
        self.form.hide()
        self.session.active_map_click = None
        return workout

    def on_list_click(self, target: Any) -> None:
        workout_id = _closest_workout_id(target)
        if workout_id is None:
            return

        workout = next((w for w in self.session.workouts if w.id == workout_id), None)
        if workout is None:
            # stale row
            return

        self.map.set_view(
            workout.coordinates,
            self.config.zoom,
            animate=True,
            pan_duration_s=self.config.pan_duration_s,
        )

    def on_type_changed(self, kind: str) -> None:
        self.form.toggle_extra_field(kind)
