"""Process-wide configuration resolved once before any SDK is installed."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from constants import Constants, PlatformFamily
from installer.arch_support import host_arch, host_platform_family

logger = logging.getLogger(__name__)


def convert_install_path_to_absolute(install_dir: str, cwd: Optional[str] = None) -> str:
    """Make an install directory absolute.

    A leading ``~`` is expanded to the home directory; other relative paths
    are resolved against ``cwd`` (default: the current working directory).
    """
    if os.path.isabs(install_dir):
        return os.path.normpath(install_dir)

    if install_dir.startswith("~"):
        transformed = os.path.join(os.path.expanduser("~"), install_dir[1:].lstrip("/\\"))
    else:
        transformed = os.path.join(cwd or os.getcwd(), install_dir)
    return os.path.normpath(transformed)


def resolve_install_dir(
    family: PlatformFamily,
    override: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> str:
    """Pick the install directory: explicit override, DOTNET_INSTALL_DIR, platform default."""
    environ = os.environ if environ is None else environ
    requested = override or environ.get(Constants.ENV_INSTALL_DIR)
    if requested:
        return convert_install_path_to_absolute(requested)
    return Constants.DEFAULT_INSTALL_DIRS[family]


@dataclass(frozen=True)
class SetupConfig:
    """Host facts and directories shared by every install step."""

    family: PlatformFamily
    native_arch: str
    install_dir: str
    script_dir: Optional[str] = None

    @property
    def is_windows(self) -> bool:
        return self.family == PlatformFamily.WINDOWS

    @classmethod
    def from_args(cls, args: Any, environ: Optional[Mapping[str, str]] = None) -> "SetupConfig":
        """Create config from CLI arguments and the environment.

        Args:
            args: Parsed CLI arguments namespace.
            environ: Environment mapping (defaults to ``os.environ``).

        Returns:
            SetupConfig instance.
        """
        environ = os.environ if environ is None else environ
        family = host_platform_family()
        config = cls(
            family=family,
            native_arch=host_arch(),
            install_dir=resolve_install_dir(family, getattr(args, "INSTALL_DIR", None), environ),
            script_dir=getattr(args, "SCRIPT_DIR", None) or environ.get(Constants.INSTALL_SCRIPT_DIR_ENV),
        )
        logger.debug("Resolved install directory: %s", config.install_dir)
        return config
