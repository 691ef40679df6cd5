# SPDX-License-Identifier: MIT

import pytest

from taskflow.model.task import TaskStatus
from taskflow.query.filter import filter_tasks
from taskflow.query.filter_type import SortOrder, StatusFilter
from taskflow.query.sort import sort_tasks

from .fakes import TaskFactory


def test_incomplete_returns_exactly_the_open_tasks(make_task: TaskFactory) -> None:
    tasks = [
        make_task(status=TaskStatus.TODO),
        make_task(status=TaskStatus.DONE),
        make_task(status=TaskStatus.IN_PROGRESS),
        make_task(status=TaskStatus.DONE),
    ]

    result = filter_tasks(tasks, StatusFilter.INCOMPLETE)

    assert result == [tasks[0], tasks[2]]


@pytest.mark.parametrize(
    ("status_filter", "expected"),
    [
        (StatusFilter.ALL, [0, 1, 2]),
        (StatusFilter.TODO, [0]),
        (StatusFilter.IN_PROGRESS, [1]),
        (StatusFilter.DONE, [2]),
    ],
)
def test_filter_by_status(
    make_task: TaskFactory, status_filter: StatusFilter, expected: list[int]
) -> None:
    tasks = [
        make_task(status=TaskStatus.TODO),
        make_task(status=TaskStatus.IN_PROGRESS),
        make_task(status=TaskStatus.DONE),
    ]

    assert filter_tasks(tasks, status_filter) == [tasks[i] for i in expected]


def test_search_matches_title_or_description_ignoring_case(
    make_task: TaskFactory,
) -> None:
    by_title = make_task(title="Write Report")
    by_description = make_task(title="Email", description="send the REPORT draft")
    neither = make_task(title="Groceries", description=None)

    result = filter_tasks([by_title, by_description, neither], search="report")

    assert result == [by_title, by_description]


def test_blank_search_matches_everything(make_task: TaskFactory) -> None:
    tasks = [make_task(), make_task()]

    assert filter_tasks(tasks, search="   ") == tasks
    assert filter_tasks(tasks, search=None) == tasks


def test_status_and_search_combine(make_task: TaskFactory) -> None:
    open_match = make_task(title="report", status=TaskStatus.TODO)
    done_match = make_task(title="report", status=TaskStatus.DONE)

    result = filter_tasks([open_match, done_match], StatusFilter.INCOMPLETE, "REP")

    assert result == [open_match]


@pytest.mark.parametrize("sort_order", [SortOrder.DUE_ASC, SortOrder.DUE_DESC])
def test_missing_due_dates_sort_last(
    make_task: TaskFactory, sort_order: SortOrder
) -> None:
    undated = make_task()
    early = make_task(due="2024-04-02")
    late = make_task(due="2024-04-20")

    result = sort_tasks([undated, late, early], sort_order)

    assert result[-1] is undated
    if sort_order == SortOrder.DUE_ASC:
        assert result[:2] == [early, late]
    else:
        assert result[:2] == [late, early]


def test_sort_by_created(make_task: TaskFactory) -> None:
    older = make_task(created="2024-04-01")
    newer = make_task(created="2024-04-05")

    assert sort_tasks([older, newer], SortOrder.CREATED_DESC) == [newer, older]
    assert sort_tasks([newer, older], SortOrder.CREATED_ASC) == [older, newer]


def test_sort_is_stable_for_equal_due_dates(make_task: TaskFactory) -> None:
    first = make_task(due="2024-04-02")
    second = make_task(due="2024-04-02")

    assert sort_tasks([first, second], SortOrder.DUE_ASC) == [first, second]
