"""Shared HTTP helpers used by the release index client and script download.

Encapsulates the request/timeout/retry handling so callers only deal with a
status code and a decoded payload. Transient failures (timeouts, connection
errors and 5xx responses) are retried up to ``Constants.HTTP_RETRY_MAX``
attempts in total.
"""
from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, Optional, Tuple

import requests

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {"User-Agent": Constants.USER_AGENT}


def _backoff(attempt: int) -> None:
    """Sleep before the next attempt; no delay after the final one."""
    if attempt + 1 < Constants.HTTP_RETRY_MAX:
        time.sleep(Constants.HTTP_RETRY_BASE_DELAY_SEC * (2 ** attempt))


def robust_get(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any
) -> Tuple[int, Dict[str, str], str]:
    """Perform GET request with timeout and retries, with DEBUG traces.

    Returns:
        Tuple of (status_code, headers_dict, body_text). When every attempt
        failed without a response, status_code is 0 and body_text describes
        the last failure.
    """
    safe_target = safe_url(url)
    request_headers = dict(DEFAULT_HEADERS)
    if headers:
        request_headers.update(headers)

    last_exception = None

    for attempt in range(Constants.HTTP_RETRY_MAX):
        with Timer() as t:
            try:
                if is_debug_enabled(logger):
                    logger.debug(
                        "HTTP request",
                        extra=extra_context(
                            event="http_request",
                            component="http_client",
                            action="GET",
                            target=safe_target,
                            attempt=attempt + 1
                        )
                    )

                response = requests.get(
                    url,
                    timeout=Constants.REQUEST_TIMEOUT,
                    headers=request_headers,
                    **kwargs
                )
            except requests.Timeout:
                last_exception = "timeout"
                if is_debug_enabled(logger):
                    logger.debug(
                        "HTTP timeout",
                        extra=extra_context(
                            event="http_exception",
                            component="http_client",
                            action="GET",
                            outcome="timeout",
                            attempt=attempt + 1,
                            target=safe_target
                        )
                    )
                _backoff(attempt)
                continue
            except requests.RequestException as exc:  # includes ConnectionError
                last_exception = str(exc)
                if is_debug_enabled(logger):
                    logger.debug(
                        "HTTP request exception",
                        extra=extra_context(
                            event="http_exception",
                            component="http_client",
                            action="GET",
                            outcome="request_exception",
                            attempt=attempt + 1,
                            target=safe_target
                        )
                    )
                _backoff(attempt)
                continue

        if response.status_code >= 500:
            last_exception = f"HTTP {response.status_code}"
            if is_debug_enabled(logger):
                logger.debug(
                    "HTTP server error",
                    extra=extra_context(
                        event="http_response",
                        component="http_client",
                        action="GET",
                        outcome="server_error",
                        status_code=response.status_code,
                        attempt=attempt + 1,
                        target=safe_target
                    )
                )
            _backoff(attempt)
            continue

        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response ok",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action="GET",
                    outcome="success",
                    status_code=response.status_code,
                    duration_ms=t.duration_ms(),
                    target=safe_target
                )
            )
        return response.status_code, dict(response.headers), response.text

    return 0, {}, f"Request failed after {Constants.HTTP_RETRY_MAX} attempts: {last_exception}"


def get_json(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any
) -> Tuple[int, Dict[str, str], Optional[Any]]:
    """Perform GET request and parse JSON response with DEBUG traces.

    Args:
        url: Target URL
        headers: Optional request headers
        **kwargs: Additional requests.get parameters

    Returns:
        Tuple of (status_code, headers_dict, parsed_json_or_none)
    """
    request_headers = {"Accept": "application/json"}
    if headers:
        request_headers.update(headers)
    status_code, response_headers, text = robust_get(url, headers=request_headers, **kwargs)

    if status_code == 200 and text:
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError:
            if is_debug_enabled(logger):
                logger.debug(
                    "JSON decode error",
                    extra=extra_context(
                        event="parse",
                        component="http_client",
                        action="get_json",
                        outcome="json_decode_error",
                        status_code=status_code,
                        target=safe_url(url)
                    )
                )
            return status_code, response_headers, None
        return status_code, response_headers, parsed

    return status_code, response_headers, None


def get_text(url: str, **kwargs: Any) -> Optional[str]:
    """Fetch a text document, returning None unless the final status is 200."""
    status_code, _, text = robust_get(url, **kwargs)
    if status_code != 200:
        logger.debug("GET %s returned status %s", safe_url(url), status_code)
        return None
    return text
