# SPDX-License-Identifier: MIT

from typing import Callable, Optional

import pendulum
import pytest

from taskflow.error import (
    BackendError,
    StaleWriteError,
    TaskNotFoundError,
    TaskValidationError,
)
from taskflow.model.task import Task, TaskStatus
from taskflow.service.optimistic import OptimisticUpdateController
from taskflow.service.task_cache import TaskCache

from .fakes import USER_ID, FakeTaskBackend, TaskFactory


class ObservingBackend(FakeTaskBackend):
    """Fake backend that runs a callback before each write is applied."""

    def __init__(self, tasks: list[Task], on_write: Callable[[], None]) -> None:
        super().__init__(tasks)
        self.on_write = on_write

    def update_task(self, *args, **kwargs) -> Task:  # type: ignore[no-untyped-def]
        self.on_write()
        return super().update_task(*args, **kwargs)

    def delete_task(self, *args, **kwargs) -> None:  # type: ignore[no-untyped-def]
        self.on_write()
        super().delete_task(*args, **kwargs)


def controller_for(
    tasks: list[Task], backend: Optional[FakeTaskBackend] = None
) -> tuple[OptimisticUpdateController, FakeTaskBackend]:
    backend = backend if backend is not None else FakeTaskBackend(tasks)
    cache = TaskCache(backend.list_tasks(USER_ID))
    return OptimisticUpdateController(cache, backend, USER_ID), backend


def test_create_adds_the_stored_task(make_task: TaskFactory) -> None:
    controller, backend = controller_for([make_task()])

    task = controller.create("  New task ", "", TaskStatus.IN_PROGRESS)

    assert task["title"] == "New task"
    assert task["description"] is None
    assert controller.cache.tasks[0] == task
    assert task["id"] in backend.tasks


def test_create_rejects_empty_title(make_task: TaskFactory) -> None:
    controller, backend = controller_for([])

    with pytest.raises(TaskValidationError):
        controller.create("   ")

    assert backend.calls == ["list"]
    assert len(controller.cache) == 0


def test_create_failure_leaves_cache_unchanged(make_task: TaskFactory) -> None:
    controller, backend = controller_for([make_task()])
    before = controller.cache.snapshot()
    backend.fail_with = BackendError("insert failed")

    with pytest.raises(BackendError):
        controller.create("New task")

    assert controller.cache.snapshot() is before


def test_change_status_is_visible_before_the_write(make_task: TaskFactory) -> None:
    task = make_task()
    seen: list[TaskStatus] = []
    backend = ObservingBackend(
        [task], lambda: seen.append(controller.cache.tasks[0]["status"])
    )
    controller, _ = controller_for([task], backend)

    controller.change_status(task["id"], TaskStatus.IN_PROGRESS)

    assert seen == [TaskStatus.IN_PROGRESS]
    assert backend.tasks[task["id"]]["status"] == TaskStatus.IN_PROGRESS


def test_confirmed_row_replaces_optimistic_task(make_task: TaskFactory) -> None:
    task = make_task()
    controller, backend = controller_for([task])

    confirmed = controller.update(task["id"], {"title": "Renamed"})

    assert controller.cache.get(task["id"]) == backend.tasks[task["id"]] == confirmed


@pytest.mark.parametrize(
    "mutate",
    [
        lambda c, task_id: c.update(task_id, {"title": "Renamed"}),
        lambda c, task_id: c.change_status(task_id, TaskStatus.DONE),
        lambda c, task_id: c.toggle_complete(task_id),
        lambda c, task_id: c.delete(task_id),
    ],
    ids=["update", "change_status", "toggle_complete", "delete"],
)
def test_failed_write_restores_previous_state(
    make_task: TaskFactory,
    mutate: Callable[[OptimisticUpdateController, str], object],
) -> None:
    task = make_task()
    controller, backend = controller_for([task, make_task()])
    before = controller.cache.tasks
    backend.fail_with = BackendError("network down")

    with pytest.raises(BackendError, match="network down"):
        mutate(controller, task["id"])

    assert controller.cache.tasks == before


def test_toggle_complete_flips_between_done_and_todo(make_task: TaskFactory) -> None:
    task = make_task(status=TaskStatus.IN_PROGRESS)
    controller, _ = controller_for([task])

    assert controller.toggle_complete(task["id"])["status"] == TaskStatus.DONE
    assert controller.toggle_complete(task["id"])["status"] == TaskStatus.TODO


def test_change_to_same_status_skips_the_backend(make_task: TaskFactory) -> None:
    task = make_task(status=TaskStatus.DONE)
    controller, backend = controller_for([task])

    controller.change_status(task["id"], TaskStatus.DONE)

    assert "update" not in backend.calls


def test_delete_removes_from_cache_and_backend(make_task: TaskFactory) -> None:
    task = make_task()
    controller, backend = controller_for([task])

    controller.delete(task["id"])

    assert task["id"] not in controller.cache
    assert task["id"] not in backend.tasks


def test_unknown_task_raises_not_found(make_task: TaskFactory) -> None:
    controller, _ = controller_for([make_task()])

    with pytest.raises(TaskNotFoundError):
        controller.toggle_complete("missing")


def test_write_on_outdated_row_is_rejected(make_task: TaskFactory) -> None:
    task = make_task()
    controller, backend = controller_for([task])
    # Another client changed the task after this cache was loaded
    backend.tasks[task["id"]]["updated_at"] = pendulum.datetime(2030, 1, 1, tz="UTC")

    with pytest.raises(StaleWriteError):
        controller.toggle_complete(task["id"])

    assert controller.cache.get(task["id"]) == task


def test_second_controller_on_stale_cache_loses(make_task: TaskFactory) -> None:
    task = make_task()
    backend = FakeTaskBackend([task])
    first, _ = controller_for([task], backend)
    second, _ = controller_for([task], backend)

    first.toggle_complete(task["id"])

    with pytest.raises(StaleWriteError):
        second.toggle_complete(task["id"])
    assert backend.tasks[task["id"]]["status"] == TaskStatus.DONE


def test_writes_are_scoped_to_the_user(make_task: TaskFactory) -> None:
    other = make_task(user_id="someone-else")
    backend = FakeTaskBackend([other])
    cache = TaskCache([other])
    controller = OptimisticUpdateController(cache, backend, USER_ID)

    with pytest.raises(TaskNotFoundError):
        controller.delete(other["id"])

    assert other["id"] in backend.tasks
    assert other["id"] in controller.cache
