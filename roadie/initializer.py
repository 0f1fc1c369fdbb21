from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional

from loguru import logger

from .environment import apply_environment_file, environment_file
from .errors import MissingInitializerError
from .store import ConfigStore

Handler = Callable[[ConfigStore], Any]
Override = Callable[[ConfigStore], Any]


class RunState(str, Enum):
    CREATED = "created"
    ENVIRONMENT_LOADED = "environment_loaded"
    OVERRIDE_APPLIED = "override_applied"
    STEPS_RUNNING = "steps_running"
    DONE = "done"
    FAILED = "failed"


def handlers_from(obj: Any, prefix: str = "initialize_") -> Dict[str, Handler]:
    """Collect ``initialize_<step>`` callables on ``obj`` into a step mapping."""
    handlers: Dict[str, Handler] = {}
    for attr in dir(obj):
        if not attr.startswith(prefix) or len(attr) == len(prefix):
            continue
        value = getattr(obj, attr)
        if callable(value):
            handlers[attr[len(prefix):]] = value
    return handlers


def _step_names(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(step) for step in value]


class InitializerRun:
    """One pass through the initialization process.

    The run loads the environment file, applies the caller's override and
    then invokes each declared step. A run is single-use: once it reaches
    ``DONE`` or ``FAILED`` it cannot be executed again.
    """

    def __init__(self, store: ConfigStore, handlers: Mapping[str, Handler]):
        self.store = store
        self.handlers = handlers
        self.environment = str(store.get("environment"))
        self.state = RunState.CREATED
        self.environment_file: Optional[str] = None
        self.completed_steps: List[str] = []
        self.error: Optional[BaseException] = None

    @property
    def succeeded(self) -> bool:
        return self.state is RunState.DONE

    def execute(self, override: Optional[Override] = None) -> "InitializerRun":
        if self.state is not RunState.CREATED:
            raise RuntimeError(f"Initializer run already {self.state.value}")

        try:
            self._load_environment()
            self._apply_override(override)
            self._run_steps()
        except Exception as exc:
            logger.error(f"[{self.store.name}] initialization failed while {self.state.value}: {exc}")
            self.error = exc
            self.state = RunState.FAILED
            raise

        self.state = RunState.DONE
        logger.info(
            f"[{self.store.name}] initialized {self.environment} environment "
            f"({len(self.completed_steps)} step(s))"
        )
        return self

    def _load_environment(self) -> None:
        path = environment_file(self.store.get("config_path"), self.environment)
        if path is None:
            logger.debug(f"[{self.store.name}] no environment file for {self.environment}")
        else:
            apply_environment_file(self.store, path)
            self.environment_file = path
        self.state = RunState.ENVIRONMENT_LOADED

    def _apply_override(self, override: Optional[Override]) -> None:
        if override is not None:
            override(self.store)
        self.state = RunState.OVERRIDE_APPLIED

    def _run_steps(self) -> None:
        self.state = RunState.STEPS_RUNNING
        for step in _step_names(self.store.get("initializers")):
            handler = self.handlers.get(step)
            if handler is None:
                raise MissingInitializerError(step)
            logger.debug(f"[{self.store.name}] running initializer {step}")
            handler(self.store)
            self.completed_steps.append(step)


class Initializer:
    """Runs the initialization process for one namespace's store."""

    def __init__(self, store: ConfigStore, handlers: Optional[Mapping[str, Handler]] = None):
        self.store = store
        self.handlers: Dict[str, Handler] = dict(handlers or {})

    def register(self, step: str, handler: Optional[Handler] = None):
        """Register ``handler`` for ``step``; usable as a decorator."""
        if handler is None:
            def decorator(func: Handler) -> Handler:
                self.handlers[step] = func
                return func
            return decorator
        self.handlers[step] = handler
        return handler

    def validate(self) -> None:
        """Fail before running if a declared step has no handler."""
        for step in _step_names(self.store.get("initializers")):
            if step not in self.handlers:
                raise MissingInitializerError(step)

    def run(self, override: Optional[Override] = None) -> InitializerRun:
        return InitializerRun(self.store, self.handlers).execute(override)
