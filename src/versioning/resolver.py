""".NET SDK version resolver.

Turns the user supplied version text into a ``ResolvedDirective``: an exact
``--version`` value, a ``--channel`` value, or nothing at all. Supported
syntax: ``A.B.C``, ``A.B``, ``A.B.x``, ``A``, ``A.x``, ``A.B.Cxx`` and any
other npm-style semver range (which falls back to the ``LTS`` channel).
"""
from __future__ import annotations

import logging
import re
from typing import Optional

import semantic_version

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled
from errors import InvalidVersionSyntax, UnsupportedLegacyMajor
from registry.releases_index import fetch_channel_for_major
from versioning.models import NO_DIRECTIVE, DirectiveKind, ResolvedDirective

logger = logging.getLogger(__name__)

LATEST_PATCH_PATTERN = re.compile(r"^(?P<major>\d+)\.\d+\.\d{1}x{2}$")
NUMERIC_TAG_PATTERN = re.compile(r"^\d+$")


def is_valid_range(text: str) -> bool:
    """Return True if ``text`` parses as an npm-style semver range."""
    try:
        semantic_version.NpmSpec(text)
    except ValueError:
        return False
    return True


def is_exact_version(text: str) -> bool:
    """Return True if ``text`` is a complete semantic version.

    A single lowercase ``v`` prefix is accepted, as npm's ``semver.valid`` does.
    """
    if text.startswith("v"):
        text = text[1:]
    try:
        semantic_version.Version(text)
    except ValueError:
        return False
    return True


def _is_numeric_tag(tag: Optional[str]) -> bool:
    return bool(tag) and NUMERIC_TAG_PATTERN.match(tag) is not None


def _parse_major(tag: str) -> Optional[int]:
    return int(tag) if _is_numeric_tag(tag) else None


class DotnetVersionResolver:
    """Resolve one version text into an install directive."""

    def __init__(self, version: str):
        self.input_version = (version or "").strip()

    def _latest_patch_major(self) -> Optional[int]:
        """Major of A.B.Cxx syntax, or None when the text is not in that form.

        Raises:
            UnsupportedLegacyMajor: for A.B.Cxx with a major below 5.
        """
        match = LATEST_PATCH_PATTERN.match(self.input_version)
        if not match:
            return None
        major = int(match.group("major"))
        if major < Constants.LATEST_PATCH_SYNTAX_MINIMAL_MAJOR_TAG:
            raise UnsupportedLegacyMajor(
                f"The 'dotnet-version' was supplied in invalid format: {self.input_version}! "
                "The A.B.Cxx syntax is available since the .NET 5.0 release."
            )
        return major

    def _validate(self) -> None:
        if self._latest_patch_major() is not None:
            return
        if not is_valid_range(self.input_version):
            raise InvalidVersionSyntax(
                f"The 'dotnet-version' was supplied in invalid format: {self.input_version}! "
                "Supported syntax: A.B.C, A.B, A.B.x, A, A.x, A.B.Cxx"
            )

    def _channel_directive(self) -> ResolvedDirective:
        parts = self.input_version.split(".")
        major = parts[0]
        minor = parts[1] if len(parts) > 1 else None

        if self._latest_patch_major() is not None:
            value = self.input_version
        elif _is_numeric_tag(major) and _is_numeric_tag(minor):
            value = f"{major}.{minor}"
        elif _is_numeric_tag(major):
            value = fetch_channel_for_major(major)
        else:
            value = Constants.LTS_CHANNEL

        major_number = _parse_major(major)
        quality_allowed = (
            major_number is not None
            and major_number >= Constants.QUALITY_INPUT_MINIMAL_MAJOR_TAG
        )
        return ResolvedDirective(
            kind=DirectiveKind.CHANNEL,
            value=value,
            quality_allowed=quality_allowed,
        )

    def resolve(self) -> ResolvedDirective:
        """Classify the input version.

        Raises:
            InvalidVersionSyntax: for text that is neither a range nor A.B.Cxx.
            UnsupportedLegacyMajor: for A.B.Cxx below .NET 5.
            ChannelNotFound / NetworkError: from the release index lookup.
        """
        if not self.input_version:
            return NO_DIRECTIVE

        self._validate()
        if is_exact_version(self.input_version):
            directive = ResolvedDirective(kind=DirectiveKind.VERSION, value=self.input_version)
        else:
            directive = self._channel_directive()

        if is_debug_enabled(logger):
            logger.debug(
                "Resolved version input",
                extra=extra_context(
                    event="decision",
                    component="resolver",
                    action="resolve",
                    requested=self.input_version,
                    kind=directive.kind.value,
                    value=directive.value,
                    quality_allowed=directive.quality_allowed
                )
            )
        return directive
