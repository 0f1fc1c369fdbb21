"""Application bootstrap: layered configuration, search paths and initializers."""

from typing import Any, Optional

from . import defaults as _defaults
from .application import Application, register  # noqa: F401
from .errors import (  # noqa: F401
    ConfigurationPathError,
    EnvironmentFileError,
    MissingInitializerError,
    RoadieError,
)
from .initializer import Initializer, InitializerRun, RunState, handlers_from  # noqa: F401
from .initializer import Override
from .paths import resolve  # noqa: F401
from .store import ConfigOption, ConfigStore, Lazy, configuration_for  # noqa: F401


def install_defaults(namespace: str) -> ConfigStore:
    """Register ``namespace`` and (re)declare its baseline options."""
    app = register(namespace)
    return _defaults.install_defaults(app.store)


def run(namespace: str, override: Optional[Override] = None) -> InitializerRun:
    return register(namespace).setup(override)


def resolve_path(namespace: str, *parts: Any) -> str:
    return register(namespace).config_path(*parts)
