# SPDX-License-Identifier: MIT

import atexit

from taskflow.repository.configuration import CONFIGURATION_REPO
from taskflow.repository.id_map import ID_MAP_REPO


def flush() -> None:
    # Task and auth stores write through; only the cached stores need flushing
    CONFIGURATION_REPO.flush()
    ID_MAP_REPO.flush()


def register_cleanup() -> None:
    atexit.register(flush)
