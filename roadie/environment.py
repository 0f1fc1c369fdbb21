"""Environment override files.

An environment file is a YAML mapping of option names to values, applied to
the namespace's store with ``set``. String values may reference process
environment variables as ``${NAME}``.
"""

from __future__ import annotations

import os
import re
from typing import Any, Dict, Mapping, Optional

import yaml
from loguru import logger

from .errors import ConfigurationPathError, EnvironmentFileError
from .paths import normalize_search_paths, resolve
from .store import ConfigStore

ENVIRONMENTS_DIR = "environments"
ENVIRONMENT_EXTENSIONS = (".yml", ".yaml")

_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}")


def expand_env(data: Any, environ: Optional[Mapping[str, str]] = None) -> Any:
    """Recursively expand ${VAR} placeholders using environment variables."""
    environ = os.environ if environ is None else environ
    if isinstance(data, str):
        return _ENV_PATTERN.sub(lambda match: environ.get(match.group(1), ""), data)
    if isinstance(data, list):
        return [expand_env(item, environ) for item in data]
    if isinstance(data, dict):
        return {key: expand_env(value, environ) for key, value in data.items()}
    return data


def environment_file(search_paths: Any, environment: str) -> Optional[str]:
    """Return the first existing environment file for ``environment``, if any.

    Directories are probed in search-path order; within one directory
    ``.yml`` is preferred over ``.yaml``.
    """
    roots = normalize_search_paths(search_paths)
    if not roots:
        raise ConfigurationPathError("config_path is empty; no directory to resolve against")
    for root in roots:
        for ext in ENVIRONMENT_EXTENSIONS:
            path = resolve([root], ENVIRONMENTS_DIR, f"{environment}{ext}")
            if os.path.isfile(path):
                return path
    return None


def read_environment_file(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as handle:
            document = yaml.safe_load(handle)
    except (yaml.YAMLError, UnicodeDecodeError) as exc:
        raise EnvironmentFileError(path, str(exc)) from exc

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise EnvironmentFileError(
            path, f"expected a mapping of option names, got {type(document).__name__}"
        )
    for key in document:
        if not isinstance(key, str):
            raise EnvironmentFileError(path, f"option name {key!r} is not a string")
    return expand_env(document)


def apply_environment_file(store: ConfigStore, path: str) -> Dict[str, Any]:
    settings = read_environment_file(path)
    store.update(settings)
    logger.info(f"[{store.name}] loaded {len(settings)} option(s) from {path}")
    return settings
