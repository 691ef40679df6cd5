# SPDX-License-Identifier: MIT

from taskflow.model.entity_id import UserId
from taskflow.model.task import TaskDraft, TaskStatus


def get_task_draft_template(user_id: UserId) -> TaskDraft:
    return {
        "user_id": user_id,
        "title": "",
        "description": None,
        "status": TaskStatus.TODO,
        "due_date": None,
    }
