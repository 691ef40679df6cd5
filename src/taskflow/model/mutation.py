# SPDX-License-Identifier: MIT

from enum import StrEnum
from typing import TypedDict

import pendulum

from taskflow.model.entity_id import TaskId
from taskflow.model.task import Task, TaskStatus


class MutationKind(StrEnum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    STATUS_CHANGE = "status_change"


class Mutation(TypedDict):
    kind: MutationKind


class CreateMutation(Mutation):
    task: Task


class UpdateMutation(Mutation):
    task: Task


class DeleteMutation(Mutation):
    task_id: TaskId


class StatusChangeMutation(Mutation):
    task_id: TaskId
    status: TaskStatus
    updated_at: pendulum.DateTime


Mutations = CreateMutation | UpdateMutation | DeleteMutation | StatusChangeMutation
