from configparser import ConfigParser
from pathlib import Path

import gi

from workout_map.geolocation import GeoclueLocator
from workout_map.tracker import TrackerConfig, TrackerController
from workout_map.ui_form import WorkoutForm
from workout_map.ui_list import WorkoutList
from workout_map.ui_map import MapView

gi.require_versions({"Gtk": "4.0", "Adw": "1", "Shumate": "1.0"})
from gi.repository import Adw, Gdk, GObject, Gtk, Shumate  # noqa: E402

APP_ID = "io.WorkoutMap.Tracker"

Adw.init()

_PROV = Gtk.CssProvider()
_PROV.load_from_data(b"""
.running-popup { border-left: 5px solid #00c46a; }
.cycling-popup { border-left: 5px solid #ffb545; }
.workout--running { border-left: 5px solid #00c46a; }
.workout--cycling { border-left: 5px solid #ffb545; }
.map-pin { color: #2d3439; }
""")
Gtk.StyleContext.add_provider_for_display(
    Gdk.Display.get_default(), _PROV, Gtk.STYLE_PROVIDER_PRIORITY_APPLICATION
)


class WorkoutMapApp(Adw.Application):
    def __init__(self, zoom: int | None = None):
        super().__init__(application_id=APP_ID)

        self.window = None
        self.controller: TrackerController | None = None

        # Set up application directory
        app_dir = Path(f"~/.local/share/{APP_ID}").expanduser()
        app_dir.mkdir(parents=True, exist_ok=True)
        self.config_file = app_dir / "config.ini"

        self.cfg = ConfigParser()
        self.zoom: int = 13
        self.pan_duration: float = 1.0
        self.map_source: str = Shumate.MAP_SOURCE_OSM_MAPNIK

        if self.config_file.exists():
            self.cfg.read(self.config_file)
            self.zoom = self.cfg.getint("map", "zoom", fallback=self.zoom)
            self.pan_duration = self.cfg.getfloat("map", "pan_duration", fallback=self.pan_duration)
            self.map_source = self.cfg.get("map", "source", fallback=self.map_source)

        # command line wins over config.ini
        if zoom is not None:
            self.zoom = zoom

    def alert(self, message: str) -> None:
        print(message)
        dialog = Adw.AlertDialog.new("Workout Map", message)
        dialog.add_response("ok", "OK")
        dialog.set_default_response("ok")
        dialog.present(self.window)

    def do_activate(self):
        if not self.window:
            self._build_ui()
            self.controller.start()

        self.window.present()

    def _build_ui(self):
        self.window = Adw.ApplicationWindow(application=self)
        self.window.connect("close-request", lambda *a: (self.quit(), False)[1])
        self.window.set_title("Workout Map")
        self.window.set_default_size(1280, 800)
        self.window.set_resizable(True)
        toolbar_view = Adw.ToolbarView()
        self.window.set_content(toolbar_view)

        header_bar = Adw.HeaderBar()
        header_bar.set_show_title(True)
        toolbar_view.add_top_bar(header_bar)

        # Views call into the controller, which is created right after them
        self.map_view = MapView(self.map_source)
        self.form = WorkoutForm(
            on_submit=lambda: self.controller.on_form_submit(),
            on_type_changed=lambda kind: self.controller.on_type_changed(kind),
        )
        self.workout_list = WorkoutList(on_click=lambda target: self.controller.on_list_click(target))

        self.controller = TrackerController(
            locator=GeoclueLocator(APP_ID),
            map_widget=self.map_view,
            form=self.form,
            entries=self.workout_list,
            notifier=self,
            config=TrackerConfig(zoom=self.zoom, pan_duration_s=self.pan_duration),
        )

        sidebar = Gtk.Box(orientation=Gtk.Orientation.VERTICAL, spacing=6)
        sidebar.set_size_request(360, -1)
        sidebar.append(self.form)
        sidebar.append(self.workout_list)

        split = Adw.OverlaySplitView()
        split.set_sidebar(sidebar)
        split.set_content(self.map_view)
        toolbar_view.set_content(split)

        # a map click must surface the form even when the sidebar is collapsed
        self.form.connect(
            "notify::reveal-child",
            lambda form, _pspec: form.get_reveal_child() and split.set_show_sidebar(True),
        )

        # narrow windows: map first, sidebar as an overlay
        cond = Adw.BreakpointCondition.parse("max-width: 700sp")
        bp = Adw.Breakpoint.new(cond)
        bp.add_setter(split, "collapsed", True)
        self.window.add_breakpoint(bp)

        toggle = Gtk.ToggleButton()
        toggle.set_icon_name("sidebar-show-symbolic")
        toggle.bind_property(
            "active",
            split,
            "show-sidebar",
            GObject.BindingFlags.BIDIRECTIONAL | GObject.BindingFlags.SYNC_CREATE,
        )
        header_bar.pack_start(toggle)
