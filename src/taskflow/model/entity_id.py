# SPDX-License-Identifier: MIT

import uuid

type TaskId = str
type UserId = str


def generate_entity_id() -> str:
    return str(uuid.uuid4())
