# tests/test_tracker.py
from __future__ import annotations

import math

import pytest
from fakes import FakeForm, FakeList, FakeLocator, FakeMap, FakeNotifier, FakeWidget
from workout_map.tracker import (
    INVALID_INPUT_MSG,
    NO_POSITION_MSG,
    FormFields,
    TrackerConfig,
    TrackerController,
    TrackerState,
    ValidationError,
    parse_form,
)

HOME = (51.5, -0.12)


# -------- fixtures --------
@pytest.fixture
def parts():
    return {
        "locator": FakeLocator(),
        "map_widget": FakeMap(),
        "form": FakeForm(),
        "entries": FakeList(),
        "notifier": FakeNotifier(),
    }


@pytest.fixture
def tracker(parts) -> TrackerController:
    t = TrackerController(**parts, config=TrackerConfig(zoom=13, pan_duration_s=1.0))
    t.start()
    parts["locator"].succeed(HOME)
    return t


def _submit_running(t: TrackerController, lat=49, lng=-12, distance="5.2", duration="24", cadence="178"):
    t.map.click(lat, lng)
    t.form.fill(type="running", distance=distance, duration=duration, cadence=cadence)
    return t.on_form_submit()


# -------- geolocation / startup --------
def test_start_builds_map_at_position(parts, tracker: TrackerController) -> None:
    m = parts["map_widget"]
    assert m.initialized == [(HOME, 13)]
    assert m.click_handler == tracker.on_map_click
    assert tracker.session.map_ready
    assert tracker.state is TrackerState.IDLE


def test_start_requests_position_once(parts) -> None:
    t = TrackerController(**parts)
    t.start()
    t.start()
    assert parts["locator"].requests == 1

    parts["locator"].succeed(HOME)
    t.start()
    assert parts["locator"].requests == 1


def test_location_failure_warns_and_keeps_map_disabled(parts) -> None:
    t = TrackerController(**parts)
    t.start()
    parts["locator"].fail()

    assert parts["notifier"].messages == [NO_POSITION_MSG]
    assert parts["map_widget"].initialized == []
    assert parts["map_widget"].click_handler is None
    assert not t.session.map_ready


# -------- map click --------
def test_map_click_opens_form(tracker: TrackerController) -> None:
    tracker.map.click(49, -12)

    assert tracker.state is TrackerState.AWAITING_FORM_INPUT
    assert tracker.session.active_map_click == (49.0, -12.0)
    assert tracker.form.visible
    assert tracker.form.focused == "distance"


def test_last_click_wins(tracker: TrackerController) -> None:
    tracker.map.click(49, -12)
    tracker.map.click(10, 20)
    assert tracker.session.active_map_click == (10.0, 20.0)

    tracker.form.fill(type="running", distance="5", duration="25", cadence="170")
    w = tracker.on_form_submit()
    assert w.coordinates == (10.0, 20.0)


# -------- submit --------
def test_running_scenario(tracker: TrackerController) -> None:
    w = _submit_running(tracker)

    assert w is not None
    assert w.kind == "running"
    assert math.isclose(w.metric, 4.6154, abs_tol=1e-4)
    assert tracker.workouts == [w]

    (marker,) = tracker.map.markers
    assert marker["coords"] == (49.0, -12.0)
    assert "Running" in marker["popup"]
    assert marker["style"] == "running-popup"

    ((entry_id, content),) = tracker.entries.entries
    assert entry_id == w.id
    assert content.kind == "running"

    assert tracker.state is TrackerState.IDLE
    assert not tracker.form.visible
    assert tracker.form.fields.distance == ""


def test_cycling_scenario(tracker: TrackerController) -> None:
    tracker.map.click(49, -12)
    tracker.form.fill(type="cycling", distance="27", duration="95", elevation="522")
    w = tracker.on_form_submit()

    assert w.kind == "cycling"
    assert math.isclose(w.metric, 17.0526, abs_tol=1e-4)
    assert tracker.map.markers[0]["style"] == "cycling-popup"
    assert tracker.entries.entries[0][1].kind == "cycling"


def test_marker_handle_is_kept_per_workout(tracker: TrackerController) -> None:
    w = _submit_running(tracker)
    assert tracker.session.markers == {w.id: "marker-0"}


def test_negative_distance_is_rejected(tracker: TrackerController) -> None:
    w = _submit_running(tracker, distance="-1")

    assert w is None
    assert tracker.workouts == []
    assert tracker.map.markers == []
    assert tracker.entries.entries == []
    assert tracker.notifier.messages == [INVALID_INPUT_MSG]
    assert tracker.form.visible
    assert tracker.state is TrackerState.AWAITING_FORM_INPUT
    assert tracker.session.active_map_click == (49.0, -12.0)


@pytest.mark.parametrize(
    "fields",
    [
        FormFields(type="running", distance="", duration="24", cadence="178"),
        FormFields(type="running", distance="abc", duration="24", cadence="178"),
        FormFields(type="running", distance="5", duration="0", cadence="178"),
        FormFields(type="running", distance="5", duration="24", cadence="0"),
        FormFields(type="running", distance="nan", duration="24", cadence="178"),
        FormFields(type="running", distance="inf", duration="24", cadence="178"),
        FormFields(type="cycling", distance="27", duration="95", elevation="-5"),
        FormFields(type="cycling", distance="27", duration="95", elevation=""),
        FormFields(type="cycling", distance="0", duration="95", elevation="10"),
        FormFields(type="swimming", distance="1", duration="30"),
    ],
    ids=lambda f: f"{f.type}-{f.distance}-{f.duration}-{f.cadence or f.elevation}",
)
def test_invalid_submissions_change_nothing(tracker: TrackerController, fields: FormFields) -> None:
    tracker.map.click(49, -12)
    tracker.form.fields = fields

    assert tracker.on_form_submit() is None
    assert tracker.workouts == []
    assert tracker.map.markers == []
    assert tracker.entries.entries == []
    assert len(tracker.notifier.messages) == 1
    assert tracker.form.clears == 0


def test_retry_after_rejection_keeps_pending_click(tracker: TrackerController) -> None:
    assert _submit_running(tracker, distance="-1") is None

    tracker.form.fill(type="running", distance="5.2", duration="24", cadence="178")
    w = tracker.on_form_submit()
    assert w.coordinates == (49.0, -12.0)
    assert len(tracker.workouts) == 1


def test_submit_without_pending_click_is_ignored(tracker: TrackerController) -> None:
    tracker.form.fill(type="running", distance="5", duration="25", cadence="170")
    assert tracker.on_form_submit() is None
    assert tracker.workouts == []
    assert tracker.notifier.messages == []


def test_markers_and_entries_pair_up(tracker: TrackerController) -> None:
    for i in range(5):
        _submit_running(tracker, lat=40 + i, lng=i)

    ids = [w.id for w in tracker.workouts]
    assert len(set(ids)) == 5
    assert [e[0] for e in tracker.entries.entries] == ids
    assert [m["coords"] for m in tracker.map.markers] == [w.coordinates for w in tracker.workouts]
    assert list(tracker.session.markers) == ids


# -------- list click --------
def test_list_click_pans_to_workout(tracker: TrackerController) -> None:
    w = _submit_running(tracker)
    row = FakeWidget(workout_id=w.id)
    label = FakeWidget(parent=FakeWidget(parent=row))

    tracker.on_list_click(label)

    assert tracker.map.views == [
        {"coords": (49.0, -12.0), "zoom": 13, "animate": True, "pan_duration_s": 1.0}
    ]


def test_list_click_outside_rows_is_noop(tracker: TrackerController) -> None:
    _submit_running(tracker)
    tracker.on_list_click(FakeWidget(parent=FakeWidget()))
    tracker.on_list_click(None)
    assert tracker.map.views == []


def test_list_click_on_stale_row_is_silent(tracker: TrackerController) -> None:
    _submit_running(tracker)
    tracker.on_list_click(FakeWidget(workout_id="gone"))
    assert tracker.map.views == []
    assert tracker.notifier.messages == []


# -------- type toggle --------
def test_type_toggle_swaps_extra_field(tracker: TrackerController) -> None:
    tracker.map.click(49, -12)
    tracker.on_type_changed("cycling")

    assert tracker.form.extra_visible == {"cadence": False, "elevation": True}
    assert tracker.workouts == []
    assert tracker.state is TrackerState.AWAITING_FORM_INPUT


# -------- parse_form --------
def test_parse_form_trims_and_coerces() -> None:
    parsed = parse_form(FormFields(type=" Cycling ", distance=" 27 ", duration="95", elevation="0"))
    assert parsed.kind == "cycling"
    assert (parsed.distance_km, parsed.duration_min, parsed.extra) == (27.0, 95.0, 0.0)


def test_parse_form_ignores_other_kinds_extra_field() -> None:
    # cadence is irrelevant for cycling and may be left blank or garbage
    parsed = parse_form(
        FormFields(type="cycling", distance="10", duration="30", cadence="x", elevation="5")
    )
    assert parsed.extra == 5.0

    with pytest.raises(ValidationError):
        parse_form(FormFields(type="running", distance="10", duration="30", elevation="5"))
