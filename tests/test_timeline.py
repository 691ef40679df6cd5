# SPDX-License-Identifier: MIT

import random

import pendulum
import pytest

from taskflow.error import TimelineCapacityError
from taskflow.model.task import Task
from taskflow.model.timeline import NoDueDatePolicy, TaskBar, TimelineLayout
from taskflow.service.timeline import (
    bars_by_week,
    compute_timeline,
    intervals_overlap,
    month_window,
    task_span,
)

from .fakes import TaskFactory

# April 2024 starts on a Monday: the window runs Apr 1 - May 5, five weeks
APRIL = month_window(pendulum.date(2024, 4, 1))


def layout_for(tasks: list[Task], **kwargs) -> TimelineLayout:
    return compute_timeline(tasks, APRIL, tz="UTC", **kwargs)


def bars_of(layout: TimelineLayout, task_id: str) -> list[TaskBar]:
    return [bar for bar in layout["bars"] if bar["task_id"] == task_id]


def test_month_window_expands_to_full_weeks() -> None:
    window = month_window(pendulum.date(2024, 3, 15))

    assert window["month"] == pendulum.date(2024, 3, 1)
    assert window["start"] == pendulum.date(2024, 2, 26)
    assert window["end"] == pendulum.date(2024, 3, 31)
    assert window["weeks"] == 5


def test_month_window_for_month_of_exact_weeks() -> None:
    window = month_window(pendulum.date(2021, 2, 1))

    assert window["start"] == pendulum.date(2021, 2, 1)
    assert window["end"] == pendulum.date(2021, 2, 28)
    assert window["weeks"] == 4


def test_task_across_two_weeks_is_split_into_two_bars(make_task: TaskFactory) -> None:
    task = make_task(created="2024-04-01", due="2024-04-10")

    layout = layout_for([task])
    first, second = bars_of(layout, task["id"])

    assert (first["week"], first["start_day"], first["end_day"]) == (0, 0, 6)
    assert first["left_percent"] == 0
    assert first["width_percent"] == 100
    assert first["continues_before"] is False
    assert first["continues_after"] is True

    assert (second["week"], second["start_day"], second["end_day"]) == (1, 0, 2)
    assert second["left_percent"] == 0
    assert second["width_percent"] == pytest.approx(3 / 7 * 100)
    assert second["continues_before"] is True
    assert second["continues_after"] is False

    assert first["row"] == second["row"] == 0


def test_bar_position_within_week(make_task: TaskFactory) -> None:
    task = make_task(created="2024-04-03", due="2024-04-04")

    (bar,) = bars_of(layout_for([task]), task["id"])

    assert bar["start"] == pendulum.date(2024, 4, 3)
    assert bar["end"] == pendulum.date(2024, 4, 4)
    assert bar["left_percent"] == pytest.approx(2 / 7 * 100)
    assert bar["width_percent"] == pytest.approx(2 / 7 * 100)


def test_overlapping_single_day_tasks_use_separate_rows(make_task: TaskFactory) -> None:
    first = make_task(created="2024-04-01", due="2024-04-01")
    second = make_task(created="2024-04-01", due="2024-04-01")

    layout = layout_for([first, second])

    assert bars_of(layout, first["id"])[0]["row"] == 0
    assert bars_of(layout, second["id"])[0]["row"] == 1
    assert layout["row_count"] == 2


def test_non_overlapping_tasks_share_a_row(make_task: TaskFactory) -> None:
    first = make_task(created="2024-04-01", due="2024-04-02")
    second = make_task(created="2024-04-03", due="2024-04-05")

    layout = layout_for([first, second])

    assert {bar["row"] for bar in layout["bars"]} == {0}
    assert layout["row_count"] == 1


def test_task_outside_window_has_no_bars(make_task: TaskFactory) -> None:
    task = make_task(created="2024-06-01", due="2024-06-03")

    layout = layout_for([task])

    assert layout["bars"] == []
    assert layout["row_count"] == 0


def test_task_clipped_at_window_start(make_task: TaskFactory) -> None:
    task = make_task(created="2024-03-20", due="2024-04-02")

    (bar,) = bars_of(layout_for([task]), task["id"])

    assert bar["start"] == APRIL["start"]
    assert bar["end"] == pendulum.date(2024, 4, 2)
    assert bar["continues_before"] is True
    assert bar["continues_after"] is False


def test_task_clipped_at_window_end(make_task: TaskFactory) -> None:
    task = make_task(created="2024-05-01", due="2024-05-20")

    bars = bars_of(layout_for([task]), task["id"])

    assert bars[-1]["end"] == APRIL["end"]
    assert bars[-1]["continues_after"] is True


def test_segments_cover_every_day_of_the_span(make_task: TaskFactory) -> None:
    tasks = [
        make_task(created="2024-04-01", due="2024-04-01"),
        make_task(created="2024-04-02", due="2024-04-16"),
        make_task(created="2024-04-06", due="2024-04-08"),
        make_task(created="2024-04-01", due="2024-05-05"),
    ]

    layout = layout_for(tasks)

    for task in tasks:
        span = task_span(task, tz="UTC")
        assert span is not None
        start, end = span
        days = sum(
            bar["end_day"] - bar["start_day"] + 1 for bar in bars_of(layout, task["id"])
        )
        assert days == start.diff(end).in_days() + 1


def test_tasks_in_the_same_row_never_overlap(make_task: TaskFactory) -> None:
    rng = random.Random(7)
    tasks = []
    for _ in range(40):
        start = APRIL["start"].add(days=rng.randrange(35))
        end = start.add(days=rng.randrange(10))
        tasks.append(make_task(created=start.isoformat(), due=end.isoformat()))

    layout = layout_for(tasks)

    spans: dict[str, tuple[int, pendulum.Date, pendulum.Date]] = {}
    for bar in layout["bars"]:
        row, start, end = spans.get(bar["task_id"], (bar["row"], bar["start"], bar["end"]))
        assert row == bar["row"]
        spans[bar["task_id"]] = (row, min(start, bar["start"]), max(end, bar["end"]))

    placed = list(spans.values())
    for index, (row, start, end) in enumerate(placed):
        for other_row, other_start, other_end in placed[index + 1 :]:
            if row == other_row:
                assert not (start <= other_end and other_start <= end)


@pytest.mark.parametrize(
    ("policy", "expected_end"),
    [
        (NoDueDatePolicy.SAME_DAY, pendulum.date(2024, 4, 3)),
        (NoDueDatePolicy.ONE_MONTH, pendulum.date(2024, 5, 3)),
    ],
)
def test_no_due_date_policy_sets_the_end(
    make_task: TaskFactory, policy: NoDueDatePolicy, expected_end: pendulum.Date
) -> None:
    task = make_task(created="2024-04-03")

    layout = layout_for([task], no_due_date_policy=policy)
    bars = bars_of(layout, task["id"])

    assert bars[0]["start"] == pendulum.date(2024, 4, 3)
    assert bars[-1]["end"] == expected_end


def test_no_due_date_excluded(make_task: TaskFactory) -> None:
    task = make_task(created="2024-04-03")

    layout = layout_for([task], no_due_date_policy=NoDueDatePolicy.EXCLUDE)

    assert layout["bars"] == []
    assert task_span(task, NoDueDatePolicy.EXCLUDE, tz="UTC") is None


def test_due_before_created_is_reversed_and_reported(make_task: TaskFactory) -> None:
    task = make_task(created="2024-04-10", due="2024-04-08")

    layout = layout_for([task])
    (bar,) = bars_of(layout, task["id"])

    assert bar["start"] == pendulum.date(2024, 4, 8)
    assert bar["end"] == pendulum.date(2024, 4, 10)
    assert layout["corrected_task_ids"] == [task["id"]]


def test_max_rows_exceeded_raises(make_task: TaskFactory) -> None:
    tasks = [make_task(created="2024-04-01", due="2024-04-01") for _ in range(3)]

    with pytest.raises(TimelineCapacityError) as excinfo:
        layout_for(tasks, max_rows=2)

    assert excinfo.value.max_rows == 2


def test_max_rows_not_exceeded(make_task: TaskFactory) -> None:
    tasks = [make_task(created="2024-04-01", due="2024-04-01") for _ in range(2)]

    assert layout_for(tasks, max_rows=2)["row_count"] == 2


def test_bars_by_week_lists_every_week(make_task: TaskFactory) -> None:
    task = make_task(created="2024-04-08", due="2024-04-09")

    grouped = bars_by_week(layout_for([task]))

    assert list(grouped) == [0, 1, 2, 3, 4]
    assert [bar["task_id"] for bar in grouped[1]] == [task["id"]]
    assert grouped[0] == []


def test_intervals_overlap_is_inclusive() -> None:
    assert intervals_overlap(0, 2, 2, 4)
    assert not intervals_overlap(0, 1, 2, 4)
    assert intervals_overlap(3, 3, 0, 6)
