# SPDX-License-Identifier: MIT

from copy import deepcopy
from pathlib import Path
from typing import Any, Optional, cast

from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from taskflow import configuration


class ConfigurationRepository:
    def __init__(self, config_path: Optional[Path] = None) -> None:
        self._config_path = config_path
        self._config: Optional[configuration.Configuration] = None
        self.is_dirty = False

    @property
    def config_path(self) -> Path:
        if self._config_path is not None:
            return self._config_path
        return configuration.APP_CONFIG_PATH

    @property
    def config(self) -> configuration.Configuration:
        if self._config is None:
            self.__load_data()
        if self._config is None:
            raise ValueError()
        return self._config

    def __load_data(self) -> None:
        loaded: Optional[dict[str, Any]] = None
        if self.config_path.is_file():
            loaded = load(self.config_path.read_text(), Loader=Loader)

        # Back-fill settings added after the file was written
        config = cast(dict[str, Any], configuration.get_default_configuration())
        config.update(loaded or {})
        self._config = cast(configuration.Configuration, config)

    def __save_data(self, config: configuration.Configuration) -> None:
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        self.config_path.write_text(dump(dict(config), Dumper=Dumper))

    def flush(self) -> bool:
        if self._config is not None and self.is_dirty:
            self.__save_data(self._config)
            self.is_dirty = False
            return True
        return False

    def get_config(self) -> configuration.Configuration:
        return deepcopy(self.config)

    def update_config(
        self,
        backend: Optional[configuration.BackendType] = None,
        data_path: Optional[str] = None,
        remove_data_path: bool = False,
        supabase_url: Optional[str] = None,
        supabase_key: Optional[str] = None,
        redirect_url: Optional[str] = None,
        show_header: Optional[bool] = None,
        default_sort: Optional[str] = None,
        timeline_no_due_date: Optional[str] = None,
        timeline_max_rows: Optional[int] = None,
        remove_timeline_max_rows: bool = False,
    ) -> None:
        self.is_dirty = True

        if backend is not None:
            self.config["backend"] = backend
        if data_path is not None:
            self.config["data_path"] = data_path
        if remove_data_path:
            self.config["data_path"] = None
        if supabase_url is not None:
            self.config["supabase_url"] = supabase_url
        if supabase_key is not None:
            self.config["supabase_key"] = supabase_key
        if redirect_url is not None:
            self.config["redirect_url"] = redirect_url
        if show_header is not None:
            self.config["show_header"] = show_header
        if default_sort is not None:
            self.config["default_sort"] = default_sort
        if timeline_no_due_date is not None:
            self.config["timeline_no_due_date"] = timeline_no_due_date
        if timeline_max_rows is not None:
            self.config["timeline_max_rows"] = timeline_max_rows
        if remove_timeline_max_rows:
            self.config["timeline_max_rows"] = None


CONFIGURATION_REPO = ConfigurationRepository()
