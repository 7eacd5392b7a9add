from __future__ import annotations

from collections.abc import Callable

import gi

from workout_map.tracker import LocationUnavailable
from workout_map.workouts import Coordinates

gi.require_versions({"Geoclue": "2.0"})
from gi.repository import Geoclue, GLib  # noqa: E402


class GeoclueLocator:
    """
    One-shot position lookup through GeoClue.
    Both callbacks are invoked from the GLib main loop.
    """

    def __init__(self, desktop_id: str) -> None:
        self.desktop_id = desktop_id
        self._pending = False
        self._on_success: Callable[[Coordinates], None] | None = None
        self._on_error: Callable[[LocationUnavailable], None] | None = None

    def request_current_position(
        self,
        on_success: Callable[[Coordinates], None],
        on_error: Callable[[LocationUnavailable], None],
    ) -> None:
        if self._pending:
            return
        self._pending = True
        self._on_success = on_success
        self._on_error = on_error

        Geoclue.Simple.new(
            self.desktop_id,
            Geoclue.AccuracyLevel.EXACT,
            None,
            self._on_simple_ready,
        )

    def _on_simple_ready(self, _source, result) -> None:
        self._pending = False
        try:
            simple = Geoclue.Simple.new_finish(result)
            location = simple.get_location()
            if location is None:
                raise LocationUnavailable("GeoClue returned no location")
            coords = (location.props.latitude, location.props.longitude)
        except GLib.Error as e:
            self._on_error(LocationUnavailable(e.message))
            return
        except LocationUnavailable as e:
            self._on_error(e)
            return

        self._on_success(coords)
