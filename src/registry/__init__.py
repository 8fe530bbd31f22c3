"""Gallery protocol clients.

- base.py: ServerAPICall capability interface and protocol selection
- models.py: repository, find and install result types
- errors.py: gallery exceptions and the ErrorRecord they map to
- v2/: OData (V2) protocol client
"""

from .base import ServerAPICall, get_server_api_call  # noqa: F401
from .errors import ErrorCategory, ErrorRecord  # noqa: F401
from .models import FindResults, InstallResult, RepositoryInfo  # noqa: F401

__all__ = [
    "ServerAPICall",
    "get_server_api_call",
    "ErrorCategory",
    "ErrorRecord",
    "FindResults",
    "InstallResult",
    "RepositoryInfo",
]
