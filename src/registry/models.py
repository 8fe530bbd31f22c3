"""Data models shared by the gallery protocol clients."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import BinaryIO, List, Optional, Tuple

from constants import ApiVersion, FindResponseType
from .errors import ErrorRecord


@dataclass(frozen=True)
class RepositoryInfo:
    """A configured remote gallery. Immutable for the lifetime of a client."""

    name: str
    uri: str
    api_version: ApiVersion = ApiVersion.V2
    credential: Optional[Tuple[str, str]] = field(default=None, repr=False)

    @property
    def base_uri(self) -> str:
        """Repository URI without a trailing slash."""
        return self.uri.rstrip("/")


@dataclass
class FindResults:
    """Ordered raw pages from one find operation plus an optional error.

    ``responses`` holds every page fetched before the operation stopped,
    in fetch order. When ``error`` is set the pages are the partial result
    gathered before the failure.
    """

    responses: List[str] = field(default_factory=list)
    response_type: FindResponseType = FindResponseType.RESPONSE_STRING
    error: Optional[ErrorRecord] = None

    @property
    def ok(self) -> bool:
        """True when the operation finished without an error."""
        return self.error is None

    def __len__(self) -> int:
        return len(self.responses)


@dataclass
class InstallResult:
    """Outcome of a content fetch: an open stream, or an error and no content."""

    stream: Optional[BinaryIO] = None
    error: Optional[ErrorRecord] = None

    @property
    def ok(self) -> bool:
        """True when content was retrieved."""
        return self.error is None
