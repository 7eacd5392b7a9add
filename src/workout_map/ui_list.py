from __future__ import annotations

from collections.abc import Callable

import gi

from workout_map.entries import EntryContent

gi.require_versions({"Gtk": "4.0"})
from gi.repository import Gtk  # noqa: E402


class WorkoutRow(Gtk.ListBoxRow):
    """A rendered workout; `workout_id` ties it to its map marker."""

    def __init__(self, workout_id: str, content: EntryContent) -> None:
        super().__init__()
        self.workout_id = workout_id
        self.add_css_class("workout")
        self.add_css_class(f"workout--{content.kind}")

        box = Gtk.Box(orientation=Gtk.Orientation.VERTICAL, spacing=6)
        for m in ("top", "bottom", "start", "end"):
            getattr(box, f"set_margin_{m}")(12)

        title = Gtk.Label(label=content.title)
        title.add_css_class("heading")
        title.set_xalign(0)
        box.append(title)

        details = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=18)
        for f in content.fields:
            detail = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=4)
            detail.append(Gtk.Label(label=f.icon))
            value = Gtk.Label(label=f.value)
            value.add_css_class("numeric")
            detail.append(value)
            unit = Gtk.Label(label=f.unit)
            unit.add_css_class("dim-label")
            unit.add_css_class("caption")
            detail.append(unit)
            details.append(detail)
        box.append(details)

        self.set_child(box)


class WorkoutList(Gtk.ScrolledWindow):
    """
    Append-only list of workouts, oldest first.
    Clicks are forwarded with the innermost widget under the pointer.
    """

    def __init__(self, on_click: Callable[[Gtk.Widget | None], None]) -> None:
        super().__init__()
        self.set_policy(Gtk.PolicyType.NEVER, Gtk.PolicyType.AUTOMATIC)
        self.set_vexpand(True)

        self._on_click = on_click

        self._list = Gtk.ListBox()
        self._list.set_selection_mode(Gtk.SelectionMode.NONE)
        self._list.add_css_class("boxed-list")
        for m in ("top", "bottom", "start", "end"):
            getattr(self._list, f"set_margin_{m}")(12)

        placeholder = Gtk.Label(label="Click on the map to add a workout")
        placeholder.add_css_class("dim-label")
        for m in ("top", "bottom"):
            getattr(placeholder, f"set_margin_{m}")(24)
        self._list.set_placeholder(placeholder)

        click = Gtk.GestureClick()
        click.connect("released", self._on_released)
        self._list.add_controller(click)

        self.set_child(self._list)

    def _on_released(self, _gesture, _n_press, x, y):
        self._on_click(self._list.pick(x, y, Gtk.PickFlags.DEFAULT))

    # ---- ListView
    def append_entry(self, workout_id: str, content: EntryContent) -> None:
        self._list.append(WorkoutRow(workout_id, content))
