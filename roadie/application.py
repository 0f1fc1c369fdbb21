from __future__ import annotations

import threading
from typing import Any, Callable, Dict, Mapping, Optional

from loguru import logger

from .defaults import install_defaults
from .initializer import Handler, Initializer, InitializerRun, Override
from .paths import resolve
from .store import ConfigStore, configuration_for


class Application:
    """Bootstrap state for one application namespace.

    Holds the namespace's configuration store and its initializer. Obtain
    instances through :func:`register` so each namespace has exactly one.
    """

    def __init__(self, name: str, handlers: Optional[Mapping[str, Handler]] = None):
        self.name = name
        self.store = configuration_for(name)
        install_defaults(self.store)
        self.initializer = Initializer(self.store, handlers)

    def config(self, callback: Optional[Callable[[ConfigStore], Any]] = None, /, **options: Any) -> ConfigStore:
        """Return the store, first applying ``options`` and ``callback``."""
        self.store.update(options)
        if callback is not None:
            callback(self.store)
        return self.store

    def config_path(self, *parts: Any) -> str:
        """Resolve ``parts`` against the ``config_path`` search list.

        With no arguments the first configuration directory is returned.
        """
        return resolve(self.store.get("config_path"), *parts)

    def initializer_step(self, step: str):
        """Decorator registering a handler for the initializer ``step``."""
        return self.initializer.register(step)

    def setup(self, override: Optional[Override] = None) -> InitializerRun:
        return self.initializer.run(override)

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"Application({self.name!r})"


_APPLICATIONS: Dict[str, Application] = {}
_APPLICATIONS_LOCK = threading.Lock()


def register(name: str, handlers: Optional[Mapping[str, Handler]] = None) -> Application:
    """Return the application registered as ``name``, creating it once.

    Handlers passed on a later call are added to the existing initializer.
    """
    with _APPLICATIONS_LOCK:
        app = _APPLICATIONS.get(name)
        if app is None:
            app = Application(name, handlers)
            _APPLICATIONS[name] = app
            logger.debug(f"Registered application namespace {name}")
        elif handlers:
            app.initializer.handlers.update(handlers)
        return app
