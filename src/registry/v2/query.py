"""Request URL construction for the V2 (OData) gallery protocol.

Filter composition lives here; paging parameters are appended through
``with_paging`` so the filter for a variant stays identical from page to
page and only ``$skip`` moves.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from constants import Constants
from versioning.models import VersionInterval
from . import filters
from .filters import FilterExpression


@dataclass(frozen=True)
class PagedQuery:
    """A query whose filter is fixed and whose pages differ by ``$skip`` only."""

    base_url: str
    order_by: str
    batch_size: int

    def page_url(self, skip: int) -> str:
        return with_paging(self.base_url, self.order_by, skip, self.batch_size)


def with_paging(url: str, order_by: str, skip: int, top: int) -> str:
    """Append ordering, inline count and skip/top parameters to ``url``."""
    return f"{url}&$orderby={order_by}&$inlinecount=allpages&$skip={skip}&$top={top}"


def _filter_param(expression: FilterExpression, include_prerelease: bool = False) -> str:
    """Render ``$filter=...`` (and the includePrerelease switch) or nothing."""
    param = "" if expression.is_empty() else f"$filter={expression.render()}"
    if include_prerelease:
        param = f"{param}&includePrerelease=true" if param else "includePrerelease=true"
    return param


class QueryBuilder:
    """Builds request URLs for each V2 query variant against one repository."""

    def __init__(self, base_uri: str):
        self.base_uri = base_uri.rstrip("/")

    # Search() endpoint -------------------------------------------------

    def _search(self, expression: FilterExpression, include_prerelease: bool, batch_size: int) -> PagedQuery:
        params = _filter_param(expression, include_prerelease)
        return PagedQuery(
            base_url=f"{self.base_uri}/Search()?{params}",
            order_by=Constants.ORDER_BY_ID,
            batch_size=batch_size,
        )

    def find_all(self, include_prerelease: bool) -> PagedQuery:
        expression = FilterExpression(filters.latest_version_filter(include_prerelease))
        return self._search(expression, include_prerelease, Constants.FIND_ALL_BATCH_SIZE)

    def find_tags(self, tags: Iterable[str], include_prerelease: bool) -> PagedQuery:
        expression = FilterExpression(filters.latest_version_filter(include_prerelease))
        expression.extend(filters.tag_filters(tags))
        return self._search(expression, include_prerelease, Constants.FIND_BATCH_SIZE)

    def find_name_globbing(
        self,
        pattern: str,
        include_prerelease: bool,
        tags: Optional[Iterable[str]] = None,
    ) -> PagedQuery:
        """Raises GalleryArgumentError for unsupported wildcard shapes."""
        expression = FilterExpression(filters.name_glob_filter(pattern))
        expression.extend(filters.tag_filters(tags))
        expression.add(filters.latest_version_filter(include_prerelease))
        return self._search(expression, include_prerelease, Constants.FIND_BATCH_SIZE)

    # FindPackagesById() endpoint ----------------------------------------

    def _by_id(self, package_name: str, expression: FilterExpression) -> str:
        url = f"{self.base_uri}/FindPackagesById()?id='{package_name}'"
        params = _filter_param(expression)
        return f"{url}&{params}" if params else url

    def find_name(
        self,
        package_name: str,
        include_prerelease: bool,
        tags: Optional[Iterable[str]] = None,
    ) -> str:
        expression = FilterExpression(
            filters.latest_version_filter(include_prerelease),
            filters.id_filter(package_name),
        )
        expression.extend(filters.tag_filters(tags))
        return self._by_id(package_name, expression)

    def find_version(
        self,
        package_name: str,
        version: str,
        tags: Optional[Iterable[str]] = None,
    ) -> str:
        expression = FilterExpression(
            filters.exact_version_filter(version),
            filters.id_filter(package_name),
        )
        expression.extend(filters.tag_filters(tags))
        return self._by_id(package_name, expression)

    def find_version_globbing(
        self,
        package_name: str,
        interval: VersionInterval,
        include_prerelease: bool,
        get_only_latest: bool = False,
    ) -> PagedQuery:
        expression = FilterExpression(
            None if include_prerelease else "IsPrerelease eq false",
            filters.id_filter(package_name),
        )
        expression.add(filters.version_range_filter(interval).render())
        return PagedQuery(
            base_url=self._by_id(package_name, expression),
            order_by=Constants.ORDER_BY_VERSION,
            batch_size=Constants.LATEST_BATCH_SIZE if get_only_latest else Constants.FIND_BATCH_SIZE,
        )

    # Content endpoints ----------------------------------------------------

    def install_name(self, package_name: str) -> str:
        return f"{self.base_uri}/package/{package_name}"

    def install_version(self, package_name: str, version: str) -> str:
        return f"{self.base_uri}/package/{package_name}/{version}"
