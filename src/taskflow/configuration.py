# SPDX-License-Identifier: MIT

from pathlib import Path
from typing import Literal, NotRequired, Optional, TypedDict

from yaml import load

try:
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Loader  # type: ignore[assignment]
import platformdirs

APP_NAME = "taskflow"

CONFIG_PATH = platformdirs.user_config_path(APP_NAME)
APP_CONFIG_PATH = CONFIG_PATH / "config.yaml"
LOG_PATH = platformdirs.user_log_path(APP_NAME)

# These will be set dynamically by load_data_path_configuration()
DATA_PATH: Path = platformdirs.user_data_path(APP_NAME)
DATA_TASKS_DIR: Path = DATA_PATH / "tasks"
DATA_USERS_PATH: Path = DATA_PATH / "users.yaml"
DATA_SESSION_PATH: Path = DATA_PATH / "session.yaml"
DATA_AUTH_STORAGE_PATH: Path = DATA_PATH / "auth_storage.yaml"
DATA_ID_MAP_PATH: Path = DATA_PATH / "id_map.yaml"

BackendType = Literal["local", "supabase"]


class Configuration(TypedDict):
    backend: BackendType
    data_path: Optional[str]
    supabase_url: Optional[str]
    supabase_key: Optional[str]
    redirect_url: Optional[str]
    show_header: bool
    default_sort: str
    timeline_no_due_date: str
    timeline_max_rows: NotRequired[Optional[int]]


def get_default_configuration() -> Configuration:
    return {
        "backend": "local",
        "data_path": None,
        "supabase_url": None,
        "supabase_key": None,
        "redirect_url": None,
        "show_header": True,
        "default_sort": "created-desc",
        "timeline_no_due_date": "same_day",
        "timeline_max_rows": None,
    }


def set_data_path(data_path: Path) -> None:
    global DATA_PATH, DATA_TASKS_DIR, DATA_USERS_PATH, DATA_SESSION_PATH
    global DATA_AUTH_STORAGE_PATH, DATA_ID_MAP_PATH

    DATA_PATH = data_path
    DATA_TASKS_DIR = DATA_PATH / "tasks"
    DATA_USERS_PATH = DATA_PATH / "users.yaml"
    DATA_SESSION_PATH = DATA_PATH / "session.yaml"
    DATA_AUTH_STORAGE_PATH = DATA_PATH / "auth_storage.yaml"
    DATA_ID_MAP_PATH = DATA_PATH / "id_map.yaml"


def load_data_path_configuration() -> None:
    """
    Load the configuration and set the DATA_PATH variables dynamically.

    This must be called after the config file exists and before any
    repositories are used.
    """
    if not APP_CONFIG_PATH.is_file():
        # Config doesn't exist yet, use defaults
        return

    config: Optional[Configuration] = load(APP_CONFIG_PATH.read_text(), Loader=Loader)
    if config is None:
        return

    data_path_setting = config.get("data_path")
    if data_path_setting is not None:
        set_data_path(Path(data_path_setting))
