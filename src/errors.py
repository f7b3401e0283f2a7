"""Exception types raised while resolving and installing .NET SDKs.

Fatal errors propagate to ``setup_dotnet.main`` which maps them to an exit
code. ``RuntimeInstallFailed`` and ``VersionUnparsable`` are only ever logged.
"""

from __future__ import annotations

from constants import ExitCodes


class SetupDotnetError(Exception):
    """Base class for all errors surfaced by setup-dotnet."""

    exit_code = ExitCodes.INSTALL_ERROR


class InvalidInput(SetupDotnetError, ValueError):
    """Raised when a descriptor document or global.json cannot be used."""

    exit_code = ExitCodes.FILE_ERROR


class InvalidQualityTier(SetupDotnetError, ValueError):
    """Raised when a quality value is outside the supported enumeration."""


class InvalidVersionSyntax(SetupDotnetError, ValueError):
    """Raised when the version text is neither a semver range nor A.B.Cxx."""


class UnsupportedLegacyMajor(InvalidVersionSyntax):
    """Raised when A.B.Cxx syntax is used for a major below 5."""


class ChannelNotFound(SetupDotnetError, LookupError):
    """Raised when the release index has no channel for a major tag."""


class NetworkError(SetupDotnetError):
    """Raised when a remote document cannot be fetched after retries."""

    exit_code = ExitCodes.CONNECTION_ERROR


class UnsupportedArchitecture(SetupDotnetError):
    """Raised when the requested architecture cannot be installed on the host."""


class EmulationLayerMissing(SetupDotnetError):
    """Raised when an x64 install on Apple Silicon has no Rosetta 2."""


class RuntimeInstallFailed(SetupDotnetError):
    """Runtime phase failure; reported as a warning, never raised to main."""


class SdkInstallFailed(SetupDotnetError):
    """Raised when the SDK phase of the install script exits non-zero."""


class VersionUnparsable(SetupDotnetError):
    """Install output carried no version; reported as a warning only."""
