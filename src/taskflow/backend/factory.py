# SPDX-License-Identifier: MIT

import logging
import os
from functools import cache
from types import ModuleType
from typing import TYPE_CHECKING, Optional

from taskflow.backend.port import AuthBackend, TaskBackend
from taskflow.error import ConfigurationError
from taskflow.repository.configuration import CONFIGURATION_REPO
from taskflow.repository.task import TASK_REPO
from taskflow.repository.user import AUTH_REPO

if TYPE_CHECKING:
    from supabase import Client

logger = logging.getLogger(__name__)


def get_task_backend() -> TaskBackend:
    backend = CONFIGURATION_REPO.get_config()["backend"]
    match backend:
        case "local":
            return TASK_REPO
        case "supabase":
            supabase_client = __import_supabase_client()
            return supabase_client.SupabaseTaskBackend(__get_supabase_client())
    raise ConfigurationError(f"Unknown backend '{backend}'")


def get_auth_backend() -> AuthBackend:
    backend = CONFIGURATION_REPO.get_config()["backend"]
    match backend:
        case "local":
            return AUTH_REPO
        case "supabase":
            supabase_client = __import_supabase_client()
            return supabase_client.SupabaseAuthBackend(__get_supabase_client())
    raise ConfigurationError(f"Unknown backend '{backend}'")


def get_redirect_url() -> Optional[str]:
    return CONFIGURATION_REPO.get_config()["redirect_url"]


def __import_supabase_client() -> ModuleType:
    # The supabase client is an optional extra, imported only when configured
    try:
        from taskflow.backend import supabase_client
    except ImportError as e:
        raise ConfigurationError(
            "The supabase backend needs the 'supabase' extra: "
            "pip install 'taskflow[supabase]'"
        ) from e
    return supabase_client


@cache
def __get_supabase_client() -> "Client":
    supabase_client = __import_supabase_client()
    config = CONFIGURATION_REPO.get_config()
    url = config["supabase_url"] or os.environ.get("SUPABASE_URL")
    key = config["supabase_key"] or os.environ.get("SUPABASE_ANON_KEY")
    logger.debug("using supabase backend")
    return supabase_client.connect(url, key)
