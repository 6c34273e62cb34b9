"""Immutable environment maps and the precedence rules for combining them."""

import logging
from collections.abc import Mapping
from types import MappingProxyType

from .models import EnvironmentMap

logger = logging.getLogger(__name__)


def snapshot_environment(environment: Mapping[str, str] | None) -> EnvironmentMap:
    """
    Take an immutable copy of an environment.

    ``None`` is treated as an empty environment. Later changes to the source
    mapping (``os.environ`` included) are not visible through the snapshot.
    """
    return MappingProxyType(dict(environment or {}))


def merge_environments(
    base: Mapping[str, str] | None, additions: Mapping[str, str] | None
) -> EnvironmentMap:
    """
    Layer ``additions`` on top of ``base``.

    Parameters
    ----------
    base : Mapping[str, str], optional
        Base environment (system or docker variables)
    additions : Mapping[str, str], optional
        User-supplied variables; these win on key collisions

    Returns
    -------
    EnvironmentMap
        Read-only merged mapping

    Examples
    --------
    >>> merged = merge_environments({"A": "1", "B": "2"}, {"B": "3"})
    >>> dict(merged)
    {'A': '1', 'B': '3'}
    """
    merged = dict(base or {})
    for key, value in (additions or {}).items():
        if key in merged and merged[key] != value:
            logger.warning(f"Additional environment overrides {key}")
        merged[key] = value
    return MappingProxyType(merged)
