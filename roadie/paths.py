"""Search-path resolution for configuration and environment files."""

from __future__ import annotations

import os
from typing import Any, Iterable, List, Sequence

from loguru import logger

from .errors import ConfigurationPathError


_SEPARATORS = os.sep + (os.altsep or "")


def _flatten(parts: Iterable[Any]) -> List[str]:
    flat: List[str] = []
    for part in parts:
        if isinstance(part, (list, tuple)):
            flat.extend(_flatten(part))
        else:
            # leading separators would make os.path.join discard the root
            flat.append(os.fspath(part).lstrip(_SEPARATORS))
    return flat


def normalize_search_paths(search_paths: Any) -> List[str]:
    """Coerce a ``config_path`` value into a list of directory strings."""
    if search_paths is None:
        return []
    if isinstance(search_paths, (str, os.PathLike)):
        return [os.fspath(search_paths)]
    return [os.fspath(path) for path in search_paths]


def resolve(search_paths: Sequence[str] | str, *parts: Any) -> str:
    """Locate ``parts`` within the first search directory that contains it.

    When no directory contains the file, the path under the first directory
    is returned so callers can create it there. With no ``parts`` the first
    directory itself is returned.
    """
    roots = normalize_search_paths(search_paths)
    if not roots:
        raise ConfigurationPathError("config_path is empty; no directory to resolve against")

    relative = _flatten(parts)
    if not relative:
        return roots[0]

    for root in roots:
        candidate = os.path.join(root, *relative)
        if os.path.exists(candidate):
            logger.debug(f"Resolved {os.path.join(*relative)} -> {candidate}")
            return candidate

    fallback = os.path.join(roots[0], *relative)
    logger.debug(f"{os.path.join(*relative)} not found in {roots}; using {fallback}")
    return fallback
