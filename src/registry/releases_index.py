"""Client for the .NET release metadata index (releases-index.json)."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from constants import Constants
from common.http_client import get_json
from common.logging_utils import extra_context, is_debug_enabled, safe_url
from errors import ChannelNotFound, NetworkError

logger = logging.getLogger(__name__)


def fetch_releases_index(url: Optional[str] = None) -> List[Dict[str, Any]]:
    """Return the ``releases-index`` rows of the release metadata document.

    Raises:
        NetworkError: when the document cannot be fetched or has no index.
    """
    url = url or Constants.RELEASES_INDEX_URL
    status_code, _, data = get_json(url)
    if status_code != 200 or not isinstance(data, dict):
        raise NetworkError(
            f"Failed to fetch the .NET release index from {safe_url(url)} (status: {status_code})"
        )

    releases = data.get("releases-index")
    if not isinstance(releases, list):
        raise NetworkError(f"Malformed .NET release index at {safe_url(url)}: missing 'releases-index'")
    return releases


def fetch_channel_for_major(major_tag: str, url: Optional[str] = None) -> str:
    """Map a bare major tag (e.g. ``"8"``) to its channel (e.g. ``"8.0"``).

    The first row whose leading ``channel-version`` component equals
    ``major_tag`` wins; its ``channel-version`` is returned unchanged.
    """
    url = url or Constants.RELEASES_INDEX_URL
    for release in fetch_releases_index(url):
        channel = release.get("channel-version")
        if not isinstance(channel, str):
            continue
        if channel.split(".")[0] == major_tag:
            if is_debug_enabled(logger):
                logger.debug(
                    "Resolved channel from release index",
                    extra=extra_context(
                        event="decision",
                        component="releases_index",
                        action="fetch_channel_for_major",
                        major=major_tag,
                        channel=channel
                    )
                )
            return channel

    raise ChannelNotFound(
        f'Could not find info for version with major tag: "{major_tag}" at {url}'
    )
