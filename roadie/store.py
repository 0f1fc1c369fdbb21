from __future__ import annotations

import inspect
import threading
from typing import Any, Callable, Dict, Iterator, List

from pydantic import BaseModel, ConfigDict


class Lazy:
    """Deferred option value, evaluated on every read."""

    __slots__ = ("func",)

    def __init__(self, func: Callable[[], Any]):
        if not callable(func):
            raise TypeError(f"Lazy expects a callable, got {type(func).__name__}")
        self.func = func

    def __call__(self) -> Any:
        return self.func()

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"Lazy({self.func!r})"


class ConfigOption(BaseModel):
    """A declared option: name, default (concrete or Lazy) and description."""

    model_config = ConfigDict(frozen=True)

    name: str
    default: Any = None
    description: str = ""


class ConfigStore:
    """Named configuration options for one application namespace.

    Declared defaults and explicitly set values are kept apart, so
    re-declaring an option replaces its default without discarding a value
    the application has already set.
    """

    def __init__(self, name: str):
        self.name = name
        self._options: Dict[str, ConfigOption] = {}
        self._values: Dict[str, Any] = {}

    def declare(self, name: str, default: Any = None, description: str = "") -> ConfigOption:
        option = ConfigOption(name=name, default=default, description=inspect.cleandoc(description))
        self._options[name] = option
        return option

    def get(self, name: str, default: Any = None) -> Any:
        if name in self._values:
            value = self._values[name]
        elif name in self._options:
            value = self._options[name].default
        else:
            return default
        if isinstance(value, Lazy):
            return value()
        return value

    def set(self, name: str, value: Any) -> None:
        self._values[name] = value

    def update(self, values: Dict[str, Any]) -> None:
        for name, value in values.items():
            self.set(name, value)

    def reset(self, name: str) -> None:
        """Drop an explicitly set value so the declared default shows again."""
        self._values.pop(name, None)

    def describe(self, name: str) -> str:
        option = self._options.get(name)
        return option.description if option else ""

    def option(self, name: str) -> ConfigOption | None:
        return self._options.get(name)

    def names(self) -> List[str]:
        ordered = list(self._options)
        ordered.extend(key for key in self._values if key not in self._options)
        return ordered

    def to_dict(self) -> Dict[str, Any]:
        return {name: self.get(name) for name in self.names()}

    def __getitem__(self, name: str) -> Any:
        if name not in self:
            raise KeyError(name)
        return self.get(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self.set(name, value)

    def __contains__(self, name: object) -> bool:
        return name in self._options or name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"ConfigStore({self.name!r}, options={self.names()!r})"


_STORES: Dict[str, ConfigStore] = {}
_STORES_LOCK = threading.Lock()


def configuration_for(name: str) -> ConfigStore:
    """Return the process-wide store for ``name``, creating it on first use."""
    with _STORES_LOCK:
        store = _STORES.get(name)
        if store is None:
            store = ConfigStore(name)
            _STORES[name] = store
        return store
