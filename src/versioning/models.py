"""Data models for version lookups."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class VersionMode(Enum):
    """How a requested version string should be looked up."""
    LATEST = "latest"
    EXACT = "exact"
    RANGE = "range"


@dataclass(frozen=True)
class VersionInterval:
    """Version interval with optional, independently inclusive bounds.

    Both bounds absent means all versions. ``min_version <= max_version``
    is not checked here.
    """
    min_version: Optional[str] = None
    max_version: Optional[str] = None
    is_min_inclusive: bool = True
    is_max_inclusive: bool = True

    @property
    def is_unbounded(self) -> bool:
        """True when the interval matches every version."""
        return self.min_version is None and self.max_version is None


@dataclass(frozen=True)
class VersionRequest:
    """Parsed form of a user supplied version argument."""
    raw: Optional[str]
    mode: VersionMode
    exact: Optional[str] = None
    interval: Optional[VersionInterval] = None
