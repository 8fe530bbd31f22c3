"""Capability interface implemented by each gallery protocol client."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from constants import ApiVersion
from versioning.models import VersionInterval
from .errors import UnsupportedOperationError
from .models import FindResults, InstallResult, RepositoryInfo


class ServerAPICall(ABC):
    """Package-repository protocol client.

    Every find operation returns a ``FindResults`` and every install
    operation an ``InstallResult``; failures are reported on the result's
    ``error`` and never raised.
    """

    def __init__(self, repository: RepositoryInfo):
        self.repository = repository

    def close(self) -> None:
        """Release transport resources held by the client."""

    def __enter__(self) -> "ServerAPICall":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @abstractmethod
    def find_all(self, include_prerelease: bool) -> FindResults:
        """Latest version of every package in the repository."""

    @abstractmethod
    def find_tags(self, tags: List[str], include_prerelease: bool) -> FindResults:
        """Latest version of every package carrying all ``tags``."""

    @abstractmethod
    def find_command_or_dsc_resource(
        self, tags: List[str], include_prerelease: bool, is_searching_for_commands: bool
    ) -> FindResults:
        """Packages exporting the given command or DSC resource names."""

    @abstractmethod
    def find_name(self, package_name: str, include_prerelease: bool) -> FindResults:
        """Latest version of one package."""

    @abstractmethod
    def find_name_with_tag(self, package_name: str, tags: List[str], include_prerelease: bool) -> FindResults:
        """Latest version of one package, constrained by tags."""

    @abstractmethod
    def find_name_globbing(self, package_name: str, include_prerelease: bool) -> FindResults:
        """Latest versions of packages whose name matches a wildcard pattern."""

    @abstractmethod
    def find_name_globbing_with_tag(
        self, package_name: str, tags: List[str], include_prerelease: bool
    ) -> FindResults:
        """Wildcard name search constrained by tags."""

    @abstractmethod
    def find_version_globbing(
        self,
        package_name: str,
        version_range: VersionInterval,
        include_prerelease: bool,
        get_only_latest: bool = False,
    ) -> FindResults:
        """Versions of one package inside ``version_range``."""

    @abstractmethod
    def find_version(self, package_name: str, version: str) -> FindResults:
        """One specific version of a package."""

    @abstractmethod
    def find_version_with_tag(self, package_name: str, version: str, tags: List[str]) -> FindResults:
        """One specific version of a package, constrained by tags."""

    @abstractmethod
    def install_name(self, package_name: str, include_prerelease: bool) -> InstallResult:
        """Content of the latest version of a package."""

    @abstractmethod
    def install_version(self, package_name: str, version: str) -> InstallResult:
        """Content of a specific package version."""


def get_server_api_call(
    repository: RepositoryInfo,
    session: Optional[object] = None,
) -> ServerAPICall:
    """Return the client implementation for the repository's protocol family.

    Raises:
        UnsupportedOperationError: no client exists for ``repository.api_version``.
    """
    if repository.api_version == ApiVersion.V2:
        from .v2.client import V2ServerAPICalls  # pylint: disable=import-outside-toplevel
        return V2ServerAPICalls(repository, session=session)
    raise UnsupportedOperationError(
        f"Repository '{repository.name}' uses protocol '{repository.api_version.value}', "
        "which has no client implementation",
        "UnsupportedRepositoryProtocol",
    )
