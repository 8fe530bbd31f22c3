"""V2 gallery client: OData queries against Search(), FindPackagesById() and package/."""
from __future__ import annotations

import logging
from typing import List, Optional

import requests

from common.http_client import create_session, get_content, get_text
from common.logging_utils import extra_context
from versioning.models import VersionInterval
from ..base import ServerAPICall
from ..errors import ErrorRecord, GalleryError, UnsupportedOperationError
from ..models import FindResults, InstallResult, RepositoryInfo
from .pagination import paginate
from .query import PagedQuery, QueryBuilder

logger = logging.getLogger(__name__)


class V2ServerAPICalls(ServerAPICall):
    """Client for V2 (OData) galleries such as the PowerShell Gallery.

    One ``requests.Session`` is created per client (or supplied by the
    caller) and shared by every request; requests are issued one at a time.
    """

    def __init__(self, repository: RepositoryInfo, session: Optional[requests.Session] = None):
        super().__init__(repository)
        self._owns_session = session is None
        self._session = session if session is not None else create_session(repository.credential)
        self.queries = QueryBuilder(repository.base_uri)

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    # Find operations --------------------------------------------------------

    def find_all(self, include_prerelease: bool) -> FindResults:
        """Search()?$filter=IsLatestVersion, 6000 entries per page."""
        logger.info(
            "Finding all packages",
            extra=extra_context(event="find", action="find_all", target=self.repository.name),
        )
        return self._find_paged(lambda: self.queries.find_all(include_prerelease))

    def find_tags(self, tags: List[str], include_prerelease: bool) -> FindResults:
        return self._find_paged(lambda: self.queries.find_tags(tags, include_prerelease))

    def find_command_or_dsc_resource(
        self, tags: List[str], include_prerelease: bool, is_searching_for_commands: bool
    ) -> FindResults:
        """Not available on V2 galleries; always returns an error."""
        exc = UnsupportedOperationError(
            "Find by CommandName or DSCResource is not supported for the V2 server repository "
            f"{self.repository.name}",
            "FindCommandOrDscResourceFailure",
        )
        return FindResults(error=ErrorRecord.from_exception(exc))

    def find_name(self, package_name: str, include_prerelease: bool) -> FindResults:
        """FindPackagesById()?id='<name>'&$filter=IsLatestVersion and Id eq '<name>'

        Single request; the server returns the latest stable (or absolute
        latest) entry.
        """
        return self._find_single(lambda: self.queries.find_name(package_name, include_prerelease))

    def find_name_with_tag(self, package_name: str, tags: List[str], include_prerelease: bool) -> FindResults:
        return self._find_single(lambda: self.queries.find_name(package_name, include_prerelease, tags))

    def find_name_globbing(self, package_name: str, include_prerelease: bool) -> FindResults:
        """Search() with startswith/endswith/substringof on Id, 100 per page."""
        return self._find_paged(lambda: self.queries.find_name_globbing(package_name, include_prerelease))

    def find_name_globbing_with_tag(
        self, package_name: str, tags: List[str], include_prerelease: bool
    ) -> FindResults:
        return self._find_paged(
            lambda: self.queries.find_name_globbing(package_name, include_prerelease, tags)
        )

    def find_version_globbing(
        self,
        package_name: str,
        version_range: VersionInterval,
        include_prerelease: bool,
        get_only_latest: bool = False,
    ) -> FindResults:
        """FindPackagesById() with NormalizedVersion comparisons.

        With ``get_only_latest`` a single entry is requested and no further
        pages are fetched.
        """
        return self._find_paged(
            lambda: self.queries.find_version_globbing(
                package_name, version_range, include_prerelease, get_only_latest
            ),
            get_only_latest=get_only_latest,
        )

    def find_version(self, package_name: str, version: str) -> FindResults:
        return self._find_single(lambda: self.queries.find_version(package_name, version))

    def find_version_with_tag(self, package_name: str, version: str, tags: List[str]) -> FindResults:
        return self._find_single(lambda: self.queries.find_version(package_name, version, tags))

    # Install operations -----------------------------------------------------

    def install_name(self, package_name: str, include_prerelease: bool) -> InstallResult:
        """package/<name>: the server picks the latest stable version.

        ``include_prerelease`` has no V2 equivalent on this endpoint; callers
        wanting a prerelease resolve the version first and use install_version.
        """
        return self._install(self.queries.install_name(package_name))

    def install_version(self, package_name: str, version: str) -> InstallResult:
        return self._install(self.queries.install_version(package_name, version))

    # Helpers ----------------------------------------------------------------

    def _fetch(self, url: str) -> str:
        return get_text(self._session, url, context=self.repository.name)

    def _find_paged(self, build_query, get_only_latest: bool = False) -> FindResults:
        try:
            query: PagedQuery = build_query()
        except GalleryError as exc:
            logger.error("%s", exc)
            return FindResults(error=ErrorRecord.from_exception(exc))
        return paginate(query, self._fetch, get_only_latest=get_only_latest)

    def _find_single(self, build_url) -> FindResults:
        try:
            response = self._fetch(build_url())
        except GalleryError as exc:
            return FindResults(error=ErrorRecord.from_exception(exc))
        return FindResults(responses=[response])

    def _install(self, url: str) -> InstallResult:
        try:
            stream = get_content(self._session, url, context=self.repository.name)
        except GalleryError as exc:
            return InstallResult(error=ErrorRecord.from_exception(exc))
        return InstallResult(stream=stream)
