"""V2 (OData) gallery protocol.

- filters.py: $filter fragments, wildcard names and version ranges
- query.py: request URLs per query variant
- pagination.py: count extraction and the page fetch loop
- client.py: V2ServerAPICalls
"""

from .client import V2ServerAPICalls  # noqa: F401

__all__ = ["V2ServerAPICalls"]
