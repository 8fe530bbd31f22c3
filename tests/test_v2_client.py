"""Tests for the V2 gallery client."""

from unittest.mock import patch

import pytest
import requests

from constants import ApiVersion, Constants, FindResponseType
from registry import RepositoryInfo, get_server_api_call
from registry.errors import ErrorCategory, UnsupportedOperationError
from registry.v2.client import V2ServerAPICalls
from versioning.models import VersionInterval

BASE = "https://www.powershellgallery.com/api/v2"


@pytest.fixture
def repo():
    return RepositoryInfo(name="PSGallery", uri=BASE)


@pytest.fixture
def client(repo, session):
    return V2ServerAPICalls(repo, session=session)


def _requested_urls(session):
    return [call.args[0] for call in session.get.call_args_list]


class TestFindAll:
    """Find all packages."""

    def test_prerelease_count_12400_fetches_three_pages(self, client, session, feed, respond):
        """6000 per page: skip 0, 6000 and 12000."""
        session.get.side_effect = [respond(feed(12400)), respond(feed()), respond(feed())]

        result = client.find_all(True)

        assert result.ok
        assert len(result.responses) == 3
        assert result.response_type == FindResponseType.RESPONSE_STRING
        urls = _requested_urls(session)
        assert all("IsAbsoluteLatestVersion&includePrerelease=true" in url for url in urls)
        assert [url.rsplit("$skip=", 1)[1] for url in urls] == [
            "0&$top=6000",
            "6000&$top=6000",
            "12000&$top=6000",
        ]

    def test_requests_use_configured_timeout(self, client, session, feed, respond):
        session.get.return_value = respond(feed(0))

        client.find_all(False)

        assert session.get.call_args.kwargs["timeout"] == Constants.REQUEST_TIMEOUT

    def test_connection_error_on_second_page_keeps_first(self, client, session, feed, respond):
        first = feed(7000)
        session.get.side_effect = [respond(first), requests.ConnectionError("reset by peer")]

        result = client.find_all(False)

        assert result.responses == [first]
        assert result.error.category == ErrorCategory.CONNECTION_ERROR
        assert "reset by peer" in result.error.message

    def test_http_status_failure_is_connection_error(self, client, session, respond):
        failing = respond("")
        failing.raise_for_status.side_effect = requests.HTTPError("503 Server Error")
        session.get.return_value = failing

        result = client.find_all(False)

        assert result.responses == []
        assert result.error.category == ErrorCategory.CONNECTION_ERROR
        assert result.error.error_id == "HttpRequestCallFailure"


class TestFindTagsAndGlobbing:
    """Paged variants with 100 entries per page."""

    def test_find_tags_pages_by_100(self, client, session, feed, respond):
        session.get.side_effect = [respond(feed(150)), respond(feed())]

        result = client.find_tags(["JSON"], False)

        assert len(result.responses) == 2
        assert _requested_urls(session)[1].endswith("&$skip=100&$top=100")

    def test_find_name_globbing_with_tag(self, client, session, feed, respond):
        session.get.return_value = respond(feed(3))

        result = client.find_name_globbing_with_tag("Power*Get", ["Provider"], False)

        assert result.ok
        assert "$filter=startswith(Id, 'Power') and endswith(Id, 'Get') and " \
               "substringof('Provider', Tags) eq true and IsLatestVersion" in _requested_urls(session)[0]

    def test_unsupported_glob_fails_before_any_request(self, client, session):
        result = client.find_name_globbing("*", False)

        assert result.responses == []
        assert result.error.category == ErrorCategory.INVALID_ARGUMENT
        session.get.assert_not_called()

    def test_malformed_xml_reports_data_error_with_first_page(self, client, session, respond):
        session.get.return_value = respond("<html>oops")

        result = client.find_name_globbing("PowerShell*", False)

        assert result.responses == ["<html>oops"]
        assert result.error.category == ErrorCategory.INVALID_DATA
        assert session.get.call_count == 1


class TestFindNameAndVersion:
    """Single-request variants."""

    def test_find_version_is_single_request(self, client, session, feed, respond):
        body = feed(1)
        session.get.return_value = respond(body)

        result = client.find_version("PowerShellGet", "2.2.5")

        assert result.ok
        assert result.responses == [body]
        assert _requested_urls(session) == [
            f"{BASE}/FindPackagesById()?id='PowerShellGet'"
            "&$filter=NormalizedVersion eq '2.2.5' and Id eq 'PowerShellGet'"
        ]

    def test_find_name_with_tag(self, client, session, respond):
        session.get.return_value = respond("body")

        result = client.find_name_with_tag("PowerShellGet", ["Provider"], True)

        assert result.responses == ["body"]
        assert "IsAbsoluteLatestVersion and Id eq 'PowerShellGet' and substringof('Provider', Tags) eq true" \
            in _requested_urls(session)[0]

    def test_find_name_failure_has_no_pages(self, client, session):
        session.get.side_effect = requests.Timeout("slow")

        result = client.find_name("PowerShellGet", False)

        assert result.responses == []
        assert result.error.category == ErrorCategory.CONNECTION_ERROR

    def test_find_version_with_tag(self, client, session, respond):
        session.get.return_value = respond("body")

        client.find_version_with_tag("Az", "1.0.0", ["a"])

        assert _requested_urls(session)[0].endswith(
            "$filter=NormalizedVersion eq '1.0.0' and Id eq 'Az' and substringof('a', Tags) eq true"
        )


class TestFindVersionGlobbing:
    """Version range lookups."""

    def test_range_pages_and_filter(self, client, session, feed, respond):
        session.get.side_effect = [respond(feed(120)), respond(feed())]
        interval = VersionInterval("1.0.0", "2.0.0", True, False)

        result = client.find_version_globbing("PowerShellGet", interval, False)

        assert len(result.responses) == 2
        first = _requested_urls(session)[0]
        assert "IsPrerelease eq false and Id eq 'PowerShellGet'" in first
        assert "NormalizedVersion ge '1.0.0' and NormalizedVersion lt '2.0.0'" in first
        assert "$orderby=NormalizedVersion desc" in first

    def test_unnormalized_bounds_in_request(self, client, session, feed, respond):
        session.get.return_value = respond(feed(1))

        client.find_version_globbing("Az", VersionInterval("1.0", "2.0.0.0", True, False), False)

        assert "NormalizedVersion ge '1.0.0' and NormalizedVersion lt '2.0.0'" in _requested_urls(session)[0]

    def test_invalid_bound_makes_no_request(self, client, session):
        result = client.find_version_globbing("Az", VersionInterval(min_version="x.y"), False)

        assert result.error.category == ErrorCategory.INVALID_ARGUMENT
        assert result.responses == []
        session.get.assert_not_called()

    def test_only_latest_makes_one_request(self, client, session, feed, respond):
        session.get.return_value = respond(feed(500))

        result = client.find_version_globbing("PowerShellGet", VersionInterval(), False, get_only_latest=True)

        assert len(result.responses) == 1
        assert session.get.call_count == 1
        assert _requested_urls(session)[0].endswith("&$top=1")


class TestUnsupportedAndInstall:
    """Command search and content retrieval."""

    def test_command_search_is_unsupported(self, client, session):
        result = client.find_command_or_dsc_resource(["Get-Thing"], False, True)

        assert result.responses == []
        assert result.error.category == ErrorCategory.INVALID_OPERATION
        assert result.error.error_id == "FindCommandOrDscResourceFailure"
        assert "PSGallery" in result.error.message
        session.get.assert_not_called()

    def test_install_version_returns_stream(self, client, session, respond):
        session.get.return_value = respond(content=b"PK\x03\x04nupkg")

        result = client.install_version("PowerShellGet", "2.2.5")

        assert result.ok
        assert result.stream.read() == b"PK\x03\x04nupkg"
        assert _requested_urls(session) == [f"{BASE}/package/PowerShellGet/2.2.5"]

    def test_install_name_endpoint(self, client, session, respond):
        session.get.return_value = respond(content=b"data")

        client.install_name("PowerShellGet", False)

        assert _requested_urls(session) == [f"{BASE}/package/PowerShellGet"]

    def test_install_failure_has_no_content(self, client, session):
        session.get.side_effect = requests.ConnectionError("refused")

        result = client.install_name("PowerShellGet", False)

        assert result.stream is None
        assert result.error.category == ErrorCategory.CONNECTION_ERROR
        assert result.error.error_id == "HttpRequestCallForContentFailure"


class TestClientSelection:
    """Protocol family selection and session ownership."""

    def test_v2_repository_gets_v2_client(self, repo, session):
        client = get_server_api_call(repo, session=session)

        assert isinstance(client, V2ServerAPICalls)

    def test_v3_repository_is_unsupported(self):
        repo = RepositoryInfo(name="NuGet", uri="https://api.nuget.org/v3/index.json", api_version=ApiVersion.V3)

        with pytest.raises(UnsupportedOperationError):
            get_server_api_call(repo)

    def test_supplied_session_is_not_closed(self, repo, session):
        with V2ServerAPICalls(repo, session=session):
            pass

        session.close.assert_not_called()

    @patch("registry.v2.client.create_session")
    def test_owned_session_is_created_with_credential_and_closed(self, mock_create, session):
        mock_create.return_value = session
        repo = RepositoryInfo(name="Internal", uri=BASE, credential=("user", "pw"))

        with V2ServerAPICalls(repo):
            pass

        mock_create.assert_called_once_with(("user", "pw"))
        session.close.assert_called_once()
