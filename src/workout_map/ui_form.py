from __future__ import annotations

from collections.abc import Callable

import gi

from workout_map.tracker import FormFields
from workout_map.workouts import KINDS

gi.require_versions({"Gtk": "4.0", "Adw": "1"})
from gi.repository import Adw, Gtk  # noqa: E402


class WorkoutForm(Gtk.Revealer):
    """
    New-workout form, hidden until the map is clicked.
    Enter in any entry submits; changing the type swaps cadence/elevation.
    """

    def __init__(
        self,
        on_submit: Callable[[], None],
        on_type_changed: Callable[[str], None],
    ) -> None:
        super().__init__()
        self.set_transition_type(Gtk.RevealerTransitionType.SLIDE_DOWN)
        self.set_reveal_child(False)

        self._on_submit = on_submit
        self._on_type_changed = on_type_changed

        group = Adw.PreferencesGroup()
        group.set_title("New workout")
        for m in ("top", "bottom", "start", "end"):
            getattr(group, f"set_margin_{m}")(12)

        # Type
        type_row = Adw.ActionRow()
        type_row.set_title("Type")
        self.type_dropdown = Gtk.DropDown.new_from_strings([k.capitalize() for k in KINDS])
        self.type_dropdown.set_valign(Gtk.Align.CENTER)
        self.type_dropdown.connect("notify::selected", self._on_type_selected)
        type_row.add_suffix(self.type_dropdown)
        group.add(type_row)

        self.entries: dict[str, Gtk.Entry] = {}
        self.rows: dict[str, Adw.ActionRow] = {}
        for name, title, placeholder in (
            ("distance", "Distance", "km"),
            ("duration", "Duration", "min"),
            ("cadence", "Cadence", "step/min"),
            ("elevation", "Elev Gain", "meters"),
        ):
            row = Adw.ActionRow()
            row.set_title(title)
            entry = Gtk.Entry()
            entry.set_placeholder_text(placeholder)
            entry.set_input_purpose(Gtk.InputPurpose.NUMBER)
            entry.set_valign(Gtk.Align.CENTER)
            entry.connect("activate", lambda *_: self._on_submit())
            row.add_suffix(entry)
            row.set_activatable_widget(entry)
            group.add(row)
            self.entries[name] = entry
            self.rows[name] = row

        self.rows["elevation"].set_visible(False)
        self.set_child(group)

    def _selected_kind(self) -> str:
        return KINDS[self.type_dropdown.get_selected()]

    def _on_type_selected(self, *_):
        self._on_type_changed(self._selected_kind())

    # ---- FormView
    def show(self) -> None:
        self.set_reveal_child(True)

    def hide(self) -> None:
        self.set_reveal_child(False)

    def focus_field(self, name: str) -> None:
        self.entries[name].grab_focus()

    def read_fields(self) -> FormFields:
        return FormFields(
            type=self._selected_kind(),
            distance=self.entries["distance"].get_text(),
            duration=self.entries["duration"].get_text(),
            cadence=self.entries["cadence"].get_text(),
            elevation=self.entries["elevation"].get_text(),
        )

    def clear_fields(self) -> None:
        for entry in self.entries.values():
            entry.set_text("")

    def toggle_extra_field(self, kind: str) -> None:
        self.rows["cadence"].set_visible(kind == "running")
        self.rows["elevation"].set_visible(kind == "cycling")
