"""Host platform detection and architecture feasibility checks."""
from __future__ import annotations

import logging
import platform
import subprocess
from typing import Optional

from constants import Constants, PlatformFamily
from errors import EmulationLayerMissing, UnsupportedArchitecture

logger = logging.getLogger(__name__)

# platform.machine() values -> install script architecture names
_MACHINE_ALIASES = {
    "x86_64": "x64",
    "amd64": "x64",
    "x64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv8l": "arm64",
    "i386": "x86",
    "i686": "x86",
    "x86": "x86",
    "armv7l": "arm",
    "armv6l": "arm",
    "arm": "arm",
}


def host_platform_family(system: Optional[str] = None) -> PlatformFamily:
    """Map ``platform.system()`` to a platform family."""
    system = (system if system is not None else platform.system()).lower()
    if system == "windows":
        return PlatformFamily.WINDOWS
    if system == "darwin":
        return PlatformFamily.MAC
    return PlatformFamily.LINUX


def normalize_arch(arch: Optional[str]) -> Optional[str]:
    """Normalize an architecture name to the install script vocabulary.

    Unknown names are returned lower-cased so the script can reject them.
    """
    if not arch:
        return None
    key = arch.strip().lower()
    return _MACHINE_ALIASES.get(key, key)


def host_arch(machine: Optional[str] = None) -> str:
    """Return the normalized processor architecture of this host."""
    return normalize_arch(machine if machine is not None else platform.machine()) or ""


def is_supported(requested_arch: str, family: PlatformFamily, native_arch: str) -> bool:
    """Return True if ``requested_arch`` can be installed on this host."""
    if family in (PlatformFamily.MAC, PlatformFamily.WINDOWS):
        return requested_arch in Constants.SUPPORTED_CROSS_ARCHITECTURES
    # No cross-architecture installs on other hosts
    return requested_arch == native_arch


def is_emulation_layer_active(family: PlatformFamily, native_arch: str) -> bool:
    """Return True when Rosetta 2 is running on an Apple Silicon host.

    Detection is best effort: any failure to run the probe counts as absent.
    """
    if family != PlatformFamily.MAC or native_arch != "arm64":
        return False
    try:
        result = subprocess.run(
            ["pgrep", Constants.EMULATION_DAEMON],
            capture_output=True,
            text=True,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("Rosetta probe failed: %s", exc)
        return False
    return result.returncode == 0


def ensure_installable(requested_arch: str, family: PlatformFamily, native_arch: str) -> None:
    """Apply the architecture policy for one descriptor.

    Raises:
        UnsupportedArchitecture: when the host cannot install ``requested_arch``.
        EmulationLayerMissing: for x64 on Apple Silicon without Rosetta 2.
    """
    if not is_supported(requested_arch, family, native_arch):
        raise UnsupportedArchitecture(
            f"The architecture '{requested_arch}' is not supported on this runner "
            f"(platform: {family.value}, arch: {native_arch})"
        )

    if family == PlatformFamily.MAC and native_arch == "arm64" and requested_arch == "x64":
        if not is_emulation_layer_active(family, native_arch):
            raise EmulationLayerMissing(
                "Rosetta 2 is required to install the x64 .NET SDK on Apple Silicon. "
                "Please run: sudo softwareupdate --install-rosetta --agree-to-license"
            )
