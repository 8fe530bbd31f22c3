"""Shared fixtures for gallery client tests."""

from typing import Optional
from unittest.mock import MagicMock

import pytest
import requests


def make_feed(count: Optional[int] = None, marker: str = "") -> str:
    """Minimal OData Atom feed, optionally carrying an m:count element."""
    count_xml = f"<m:count>{count}</m:count>" if count is not None else ""
    return (
        '<?xml version="1.0" encoding="utf-8"?>'
        '<feed xmlns="http://www.w3.org/2005/Atom"'
        ' xmlns:d="http://schemas.microsoft.com/ado/2007/08/dataservices"'
        ' xmlns:m="http://schemas.microsoft.com/ado/2007/08/dataservices/metadata">'
        f"<title>{marker}</title>{count_xml}</feed>"
    )


def make_response(text: str = "", content: bytes = b"") -> MagicMock:
    """Stand-in for a successful requests.Response."""
    response = MagicMock(spec=requests.Response)
    response.status_code = 200
    response.text = text
    response.content = content
    return response


@pytest.fixture
def feed():
    return make_feed


@pytest.fixture
def respond():
    return make_response


@pytest.fixture
def session():
    """Mocked requests.Session; tests set get.return_value / get.side_effect."""
    return MagicMock(spec=requests.Session)
