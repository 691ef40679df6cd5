# SPDX-License-Identifier: MIT

from pathlib import Path
from typing import Optional

from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from taskflow import configuration
from taskflow.model.entity_id import TaskId
from taskflow.model.id_map import IdMap
from taskflow.template.id_map import get_id_map_template


class IdMapRepository:
    def __init__(self, id_map_path: Optional[Path] = None) -> None:
        self._id_map_path = id_map_path
        self._id_map: Optional[IdMap] = None
        self.is_dirty = False

    @property
    def id_map_path(self) -> Path:
        if self._id_map_path is not None:
            return self._id_map_path
        return configuration.DATA_ID_MAP_PATH

    @property
    def id_map(self) -> IdMap:
        if self._id_map is None:
            self.__load_data()
        if self._id_map is None:
            raise ValueError()
        return self._id_map

    def __load_data(self) -> None:
        if self.id_map_path.is_file():
            self._id_map = load(self.id_map_path.read_text(), Loader=Loader)
        if self._id_map is None:
            self._id_map = get_id_map_template()

    def __save_data(self, id_map: IdMap) -> None:
        self.id_map_path.parent.mkdir(parents=True, exist_ok=True)
        self.id_map_path.write_text(dump(id_map, Dumper=Dumper))

    def flush(self) -> bool:
        if self._id_map is not None and self.is_dirty:
            self.__save_data(self._id_map)
            self.is_dirty = False
            return True
        return False

    def clear_ids(self) -> None:
        self.is_dirty = True
        self._id_map = get_id_map_template()

    def associate_id(self, task_id: TaskId) -> int:
        """
        Create a new synthetic id to associate with a task id
        """
        if task_id in self.id_map["real_to_synthetic"]:
            return self.id_map["real_to_synthetic"][task_id]

        self.is_dirty = True
        next_id = len(self.id_map["real_to_synthetic"]) + 1
        self.id_map["real_to_synthetic"][task_id] = next_id
        self.id_map["synthetic_to_real"][next_id] = task_id
        return next_id

    def get_real_id(self, synthetic_id: int) -> Optional[TaskId]:
        """
        Get the task id associated with a synthetic id
        """
        return self.id_map["synthetic_to_real"].get(synthetic_id)


ID_MAP_REPO = IdMapRepository()
