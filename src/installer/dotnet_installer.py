"""Install one .NET SDK descriptor: runtime + CLI first, then the SDK."""
from __future__ import annotations

import logging
import re
from typing import Optional

from constants import Constants
from errors import RuntimeInstallFailed, SdkInstallFailed, VersionUnparsable
from installer.arch_support import ensure_installable, normalize_arch
from installer.install_script import DotnetInstallScript
from setup_config import SetupConfig
from versioning.models import DirectiveKind, InstallOutcome, VersionDescriptor
from versioning.resolver import DotnetVersionResolver

logger = logging.getLogger(__name__)

INSTALLED_VERSION_PATTERN = re.compile(r"(?P<version>\d+\.\d+\.\d+[a-z0-9._-]*)")


def parse_installed_version(stdout: str) -> Optional[str]:
    """Pull the first semver-shaped token out of the install script output."""
    match = INSTALLED_VERSION_PATTERN.search(stdout or "")
    if not match:
        logger.warning("%s", VersionUnparsable("Failed to parse installed by the script version of .NET"))
        return None
    return match.group("version")


class DotnetCoreInstaller:
    """Runs the two install script phases for one descriptor."""

    def __init__(self, config: SetupConfig, descriptor: VersionDescriptor):
        self.config = config
        self.descriptor = descriptor

    @property
    def effective_arch(self) -> str:
        return normalize_arch(self.descriptor.architecture) or self.config.native_arch

    def install_dotnet(self) -> Optional[InstallOutcome]:
        """Install the runtime and the SDK.

        Returns None without running the script when the version is blank.

        Raises:
            UnsupportedArchitecture / EmulationLayerMissing: before any network
                or install call.
            InvalidVersionSyntax / ChannelNotFound / NetworkError: from resolving.
            SdkInstallFailed: when the SDK phase exits non-zero.
        """
        arch = self.effective_arch
        ensure_installable(arch, self.config.family, self.config.native_arch)

        directive = DotnetVersionResolver(self.descriptor.version).resolve()
        if directive.kind == DirectiveKind.NONE:
            logger.info("No .NET version requested; nothing to install.")
            return None

        runtime_output = (
            DotnetInstallScript(self.config)
            .use_flag("skip_non_versioned_files")
            .use_flag("runtime", Constants.RUNTIME_COMPONENT)
            .use_flag("channel", Constants.LTS_CHANNEL)
            .use_arch(arch)
            .execute()
        )
        if runtime_output.exit_code:
            logger.warning(
                "%s",
                RuntimeInstallFailed(
                    f"Failed to install dotnet runtime + cli, exit code: "
                    f"{runtime_output.exit_code}. {runtime_output.stderr}"
                ),
            )

        sdk_output = (
            DotnetInstallScript(self.config)
            .use_flag("skip_non_versioned_files")
            .use_version(directive, self.descriptor.quality)
            .use_arch(arch)
            .execute()
        )
        if sdk_output.exit_code:
            raise SdkInstallFailed(
                f"Failed to install dotnet, exit code: {sdk_output.exit_code}. {sdk_output.stderr}"
            )

        return InstallOutcome(
            descriptor=self.descriptor,
            architecture=arch,
            installed_version=parse_installed_version(sdk_output.stdout),
        )
