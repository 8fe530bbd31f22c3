"""Shared HTTP helpers used by the gallery clients.

Encapsulates request error handling so clients avoid duplicating
try/except blocks: every transport failure leaves this module as a
``GalleryConnectionError``. All calls go through one caller-owned
``requests.Session``.
"""
from __future__ import annotations

import io
import logging
from typing import Any, Optional, Tuple

import requests
from requests.auth import HTTPBasicAuth

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer
from registry.errors import GalleryConnectionError

logger = logging.getLogger(__name__)


def create_session(credential: Optional[Tuple[str, str]] = None) -> requests.Session:
    """Create the session shared by every request of one client."""
    session = requests.Session()
    session.headers.update({"User-Agent": Constants.USER_AGENT})
    if credential:
        username, password = credential
        session.auth = HTTPBasicAuth(username, password)
    return session


def _send(session: requests.Session, url: str, *, context: str, error_id: str, **kwargs: Any) -> requests.Response:
    """GET ``url`` and return the response, raising on any transport or status failure."""
    safe_target = safe_url(url)
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="GET",
                    target=safe_target,
                    context=context,
                ),
            )
        try:
            res = session.get(url, timeout=Constants.REQUEST_TIMEOUT, **kwargs)
            res.raise_for_status()
        except requests.Timeout as exc:
            logger.error(
                "%s request timed out after %s seconds",
                context,
                Constants.REQUEST_TIMEOUT,
            )
            raise GalleryConnectionError(
                f"Error occurred while trying to retrieve response: {exc}", error_id
            ) from exc
        except requests.RequestException as exc:  # includes ConnectionError and HTTPError
            logger.error("%s connection error: %s", context, exc)
            raise GalleryConnectionError(
                f"Error occurred while trying to retrieve response: {exc}", error_id
            ) from exc
        except ValueError as exc:  # malformed URL rejected before sending
            logger.error("%s invalid request: %s", context, exc)
            raise GalleryConnectionError(
                f"Error occurred while trying to retrieve response: {exc}", error_id
            ) from exc

        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response ok",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action="GET",
                    outcome="success",
                    status_code=res.status_code,
                    duration_ms=t.duration_ms(),
                    target=safe_target,
                    context=context,
                ),
            )
        return res


def get_text(session: requests.Session, url: str, *, context: str) -> str:
    """Fetch ``url`` and return the body as text (find operations)."""
    return _send(session, url, context=context, error_id="HttpRequestCallFailure").text


def get_content(session: requests.Session, url: str, *, context: str) -> io.BytesIO:
    """Fetch ``url`` and return the body as an open binary stream (install operations)."""
    res = _send(session, url, context=context, error_id="HttpRequestCallForContentFailure")
    return io.BytesIO(res.content)
