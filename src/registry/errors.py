"""Exceptions raised inside the gallery clients and the error record they map to."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorCategory(Enum):
    """Classification attached to a failed operation."""

    CONNECTION_ERROR = "ConnectionError"
    INVALID_DATA = "InvalidData"
    INVALID_ARGUMENT = "InvalidArgument"
    INVALID_OPERATION = "InvalidOperation"


class GalleryError(Exception):
    """Base class for failures raised while talking to a gallery."""

    category = ErrorCategory.INVALID_OPERATION

    def __init__(self, message: str, error_id: str = "GalleryFailure"):
        super().__init__(message)
        self.error_id = error_id


class GalleryConnectionError(GalleryError):
    """Transport-level failure while fetching a page or package content."""

    category = ErrorCategory.CONNECTION_ERROR


class GalleryDataError(GalleryError, ValueError):
    """A response body could not be parsed where parsing was required."""

    category = ErrorCategory.INVALID_DATA


class GalleryArgumentError(GalleryError, ValueError):
    """Caller supplied a value the protocol cannot express."""

    category = ErrorCategory.INVALID_ARGUMENT


class UnsupportedOperationError(GalleryError):
    """The request has no equivalent in the repository's protocol."""

    category = ErrorCategory.INVALID_OPERATION


@dataclass(frozen=True)
class ErrorRecord:
    """Error indicator returned alongside (partial) results."""

    category: ErrorCategory
    error_id: str
    message: str
    exception: Optional[BaseException] = None

    @classmethod
    def from_exception(cls, exc: GalleryError) -> "ErrorRecord":
        """Build a record from a raised gallery exception."""
        return cls(
            category=exc.category,
            error_id=exc.error_id,
            message=str(exc),
            exception=exc,
        )

    def __str__(self) -> str:
        return f"{self.category.value} ({self.error_id}): {self.message}"
