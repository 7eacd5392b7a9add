from __future__ import annotations

from collections.abc import Callable

import gi

from workout_map.workouts import Coordinates

gi.require_versions({"Gtk": "4.0", "Shumate": "1.0"})
from gi.repository import GLib, Gtk, Shumate  # noqa: E402


class MapView(Gtk.Box):
    """
    Shumate map with one marker layer.
    Stays insensitive until initialize() is called with the user's position.
    """

    def __init__(self, source_id: str = Shumate.MAP_SOURCE_OSM_MAPNIK) -> None:
        super().__init__(orientation=Gtk.Orientation.VERTICAL)
        self.set_vexpand(True)
        self.set_hexpand(True)

        self.simple = Shumate.SimpleMap()
        self.simple.set_vexpand(True)
        registry = Shumate.MapSourceRegistry.new_with_defaults()
        source = registry.get_by_id(source_id) or registry.get_by_id(
            Shumate.MAP_SOURCE_OSM_MAPNIK
        )
        self.simple.set_map_source(source)

        self.viewport = self.simple.get_viewport()
        self.map = self.simple.get_map()

        self.marker_layer = Shumate.MarkerLayer.new(self.viewport)
        self.simple.add_overlay_layer(self.marker_layer)

        self._click_handler: Callable[[Coordinates], None] | None = None
        click = Gtk.GestureClick()
        click.connect("released", self._on_released)
        self.map.add_controller(click)

        self.append(self.simple)
        self.set_sensitive(False)

    # ---- MapWidget
    def initialize(self, center: Coordinates, zoom: int) -> None:
        lat, lng = center
        self.viewport.set_zoom_level(zoom)
        self.map.center_on(lat, lng)
        self.set_sensitive(True)

    def on_click(self, handler: Callable[[Coordinates], None]) -> None:
        self._click_handler = handler

    def add_marker(self, coords: Coordinates, popup_content: str, style_class: str):
        lat, lng = coords

        pin = Gtk.Button()
        pin.set_icon_name("mark-location-symbolic")
        pin.add_css_class("flat")
        pin.add_css_class("map-pin")

        label = Gtk.Label(label=popup_content)
        popover = Gtk.Popover()
        popover.set_child(label)
        popover.set_autohide(False)
        popover.set_position(Gtk.PositionType.TOP)
        popover.add_css_class(style_class)
        popover.set_parent(pin)
        pin.connect("clicked", lambda *_: popover.popup())

        marker = Shumate.Marker()
        marker.set_location(lat, lng)
        marker.set_child(pin)
        self.marker_layer.add_marker(marker)

        # open once the pin is mapped
        GLib.idle_add(lambda: (popover.popup(), False)[1])
        return marker

    def set_view(
        self,
        coords: Coordinates,
        zoom: int,
        *,
        animate: bool = True,
        pan_duration_s: float = 1.0,
    ) -> None:
        lat, lng = coords
        if animate:
            self.map.go_to_full_with_duration(lat, lng, zoom, int(pan_duration_s * 1000))
        else:
            self.viewport.set_zoom_level(zoom)
            self.map.center_on(lat, lng)

    # ---- gesture
    def _on_released(self, _gesture, _n_press, x, y):
        if not self._click_handler or not self.get_sensitive():
            return
        lat, lng = self.viewport.widget_coords_to_location(self.map, x, y)
        self._click_handler((lat, lng))
