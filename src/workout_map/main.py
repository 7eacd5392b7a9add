import argparse
import signal

from gi.repository import GLib

from workout_map.ui import WorkoutMapApp


def main():
    parser = argparse.ArgumentParser(description="Workout Map")
    parser.add_argument(
        "--zoom",
        type=int,
        default=None,
        help="Map zoom level used on start and when jumping to a workout.",
    )
    args = parser.parse_args()

    app = WorkoutMapApp(zoom=args.zoom)

    # Convert Unix signals to a graceful quit
    GLib.unix_signal_add(GLib.PRIORITY_DEFAULT, signal.SIGINT,  lambda *a: (app.quit(), False)[1])
    GLib.unix_signal_add(GLib.PRIORITY_DEFAULT, signal.SIGTERM, lambda *a: (app.quit(), False)[1])

    app.run(None)


if __name__ == "__main__":
    main()
