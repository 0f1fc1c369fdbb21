from __future__ import annotations

import os
from typing import Any, Mapping, Optional

import yaml
from loguru import logger

from .paths import resolve
from .store import ConfigStore, Lazy

ENVIRONMENT_VARIABLE = "RACK_ENV"
DEFAULT_ENVIRONMENT = "development"
DEFAULT_CONFIG_PATH = ("config",)
DATABASE_FILE = "database.yml"


def default_environment(environ: Optional[Mapping[str, str]] = None) -> str:
    environ = os.environ if environ is None else environ
    return environ.get(ENVIRONMENT_VARIABLE) or DEFAULT_ENVIRONMENT


def load_database(store: ConfigStore) -> Any:
    """Read ``database.yml`` from the store's current search path.

    Returns ``None`` when the file does not exist.
    """
    path = resolve(store.get("config_path"), DATABASE_FILE)
    if not os.path.isfile(path):
        logger.debug(f"No database settings at {path}")
        return None
    with open(path, "r", encoding="utf-8") as handle:
        return yaml.safe_load(handle)


def install_defaults(store: ConfigStore, environ: Optional[Mapping[str, str]] = None) -> ConfigStore:
    """Declare the baseline bootstrap options on ``store``.

    Safe to call more than once; each call declares the same defaults.
    """
    store.declare(
        "config_path",
        list(DEFAULT_CONFIG_PATH),
        """
        Array of paths to search for configuration and environment files.
        """,
    )
    store.declare(
        "initializers",
        [],
        """
        Array of initializers to invoke when setting up the system.
        """,
    )
    store.declare(
        "environment",
        default_environment(environ),
        """
        The current runtime environment. Can be one of production,
        development or test.
        """,
    )
    store.declare(
        "database",
        Lazy(lambda: load_database(store)),
        """
        The database configuration settings for the supported environments,
        loaded from the 'database.yml' file in the configuration path.
        """,
    )
    return store
