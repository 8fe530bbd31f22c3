"""Page-count driven fetch loop for V2 find operations."""
from __future__ import annotations

import logging
from typing import Callable, List
from xml.etree import ElementTree as ET

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled
from ..errors import ErrorRecord, GalleryDataError, GalleryError
from ..models import FindResults
from .query import PagedQuery

logger = logging.getLogger(__name__)

COUNT_TAG = f"{{{Constants.ODATA_METADATA_NS}}}count"


def get_count_from_response(http_response: str) -> int:
    """Return the ``m:count`` value of an OData feed, or 0 when absent.

    The count is the total number of matches reported by the server and
    drives how many further pages are requested.

    Raises:
        GalleryDataError: the body is not XML or the count is not an integer.
    """
    try:
        root = ET.fromstring(http_response)
    except ET.ParseError as exc:
        raise GalleryDataError(f"Response could not be parsed as XML: {exc}", "GetCountFromResponse") from exc

    node = root if root.tag == COUNT_TAG else root.find(f".//{COUNT_TAG}")
    if node is None:
        return 0

    try:
        return int((node.text or "").strip())
    except ValueError as exc:
        raise GalleryDataError(
            f"Response count '{node.text}' is not an integer", "GetCountFromResponse"
        ) from exc


def paginate(
    query: PagedQuery,
    fetch: Callable[[str], str],
    get_only_latest: bool = False,
) -> FindResults:
    """Fetch every page of ``query`` and aggregate the raw bodies in order.

    The first page is always requested. Unless only the latest entry is
    wanted, its reported count determines ``count // batch_size`` further
    pages at increasing ``$skip`` offsets. Any failure stops the loop and is
    returned with the pages collected so far.
    """
    responses: List[str] = []
    skip = 0

    try:
        responses.append(fetch(query.page_url(skip)))
        if get_only_latest:
            return FindResults(responses=responses)

        count = get_count_from_response(responses[0])
        remaining = count // query.batch_size

        if is_debug_enabled(logger):
            logger.debug(
                "Pagination planned",
                extra=extra_context(
                    event="pagination",
                    component="pagination",
                    action="plan",
                    count=count,
                    batch_size=query.batch_size,
                    additional_pages=remaining,
                ),
            )

        while remaining > 0:
            skip += query.batch_size
            responses.append(fetch(query.page_url(skip)))
            remaining -= 1
    except GalleryError as exc:
        logger.warning(
            "Find stopped after %d page(s): %s",
            len(responses),
            exc,
            extra=extra_context(
                event="pagination",
                component="pagination",
                outcome=exc.category.value,
                pages=len(responses),
            ),
        )
        return FindResults(responses=responses, error=ErrorRecord.from_exception(exc))

    return FindResults(responses=responses)
