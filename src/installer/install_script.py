"""Argument builder and runner for the dotnet-install script.

Flag spellings differ between the PowerShell (Windows) and bash flavors of
the script; both are kept in ``SCRIPT_FLAGS`` so callers only name the
semantic flag.
"""
from __future__ import annotations

import logging
import os
import shutil
import subprocess
from typing import Dict, List, Mapping, Optional

from constants import Constants, PlatformFamily, QualityOption
from common.http_client import get_text
from common.logging_utils import extra_context, is_debug_enabled, Timer
from errors import NetworkError, SetupDotnetError
from installer.arch_support import normalize_arch
from setup_config import SetupConfig
from versioning.models import DirectiveKind, InstallResult, ResolvedDirective

logger = logging.getLogger(__name__)

_POWERSHELL_FLAGS = {
    "channel": "-Channel",
    "version": "-Version",
    "quality": "-Quality",
    "architecture": "-Architecture",
    "runtime": "-Runtime",
    "skip_non_versioned_files": "-SkipNonVersionedFiles",
    "proxy_address": "-ProxyAddress",
    "proxy_bypass_list": "-ProxyBypassList",
}

_BASH_FLAGS = {
    "channel": "--channel",
    "version": "--version",
    "quality": "--quality",
    "architecture": "--architecture",
    "runtime": "--runtime",
    "skip_non_versioned_files": "--skip-non-versioned-files",
}

SCRIPT_FLAGS: Dict[PlatformFamily, Dict[str, str]] = {
    PlatformFamily.WINDOWS: _POWERSHELL_FLAGS,
    PlatformFamily.MAC: _BASH_FLAGS,
    PlatformFamily.LINUX: _BASH_FLAGS,
}

_DIRECTIVE_FLAGS = {
    DirectiveKind.CHANNEL: "channel",
    DirectiveKind.VERSION: "version",
}

POWERSHELL_PREFIX = [
    "-NoLogo",
    "-Sta",
    "-NoProfile",
    "-NonInteractive",
    "-ExecutionPolicy",
    "Unrestricted",
    "-Command",
]


def script_name(family: PlatformFamily) -> str:
    """Return the install script flavor for a platform family."""
    if family == PlatformFamily.WINDOWS:
        return Constants.INSTALL_SCRIPT_PS1
    return Constants.INSTALL_SCRIPT_SH


def _download_script(name: str) -> str:
    """Fetch the install script into the cache directory and return its path."""
    url = f"{Constants.INSTALL_SCRIPT_BASE_URL}{name}"
    logger.info("Downloading %s from %s", name, url)
    body = get_text(url)
    if not body:
        raise NetworkError(f"Failed to download the .NET install script from {url}")

    os.makedirs(Constants.INSTALL_SCRIPT_CACHE_DIR, exist_ok=True)
    target = os.path.join(Constants.INSTALL_SCRIPT_CACHE_DIR, name)
    with open(target, "w", encoding="utf-8", newline="\n") as f:
        f.write(body)
    return target


def locate_script(config: SetupConfig) -> str:
    """Find the install script, downloading it when no local copy exists.

    Lookup order: configured script directory, bundled externals directory,
    download cache.
    """
    name = script_name(config.family)
    search_dirs = [config.script_dir, Constants.EXTERNALS_DIR, Constants.INSTALL_SCRIPT_CACHE_DIR]
    for directory in search_dirs:
        if not directory:
            continue
        candidate = os.path.join(directory, name)
        if os.path.isfile(candidate):
            return os.path.abspath(candidate)
    return _download_script(name)


class DotnetInstallScript:
    """Accumulates arguments for one install script invocation and runs it."""

    def __init__(self, config: SetupConfig, environ: Optional[Mapping[str, str]] = None):
        self.config = config
        self.flags = SCRIPT_FLAGS[config.family]
        self.environ = dict(os.environ if environ is None else environ)
        self.script_path = locate_script(config)
        self.script_arguments: List[str] = []

        if config.is_windows:
            self._setup_script_powershell()
        else:
            self._setup_script_bash()

    def _setup_script_powershell(self) -> None:
        escaped_script = self.script_path.replace("'", "''")
        self.script_arguments = list(POWERSHELL_PREFIX)
        self.script_arguments.extend(["&", f"'{escaped_script}'"])

        if self.environ.get("https_proxy") is not None:
            self.script_arguments.append(f"{self.flags['proxy_address']} {self.environ['https_proxy']}")
        if self.environ.get("no_proxy") is not None:
            self.script_arguments.append(f"{self.flags['proxy_bypass_list']} {self.environ['no_proxy']}")

    def _setup_script_bash(self) -> None:
        os.chmod(self.script_path, 0o777)

    def flag(self, name: str) -> str:
        """Spell a semantic flag for this platform."""
        return self.flags[name]

    def use_arguments(self, *args: str) -> "DotnetInstallScript":
        self.script_arguments.extend(args)
        return self

    def use_flag(self, name: str, *values: str) -> "DotnetInstallScript":
        return self.use_arguments(self.flag(name), *values)

    def use_version(
        self, directive: ResolvedDirective, quality: Optional[QualityOption] = None
    ) -> "DotnetInstallScript":
        """Append the channel/version directive and, when allowed, the quality."""
        if directive.kind != DirectiveKind.NONE:
            self.use_flag(_DIRECTIVE_FLAGS[directive.kind], directive.value)

        if quality and not directive.quality_allowed:
            logger.warning(
                "The 'dotnet-quality' input can be used only with .NET SDK version in A.B, A.B.x, "
                "A, A.x and A.B.Cxx formats where the major tag is higher than 5. "
                "You specified: %s. 'dotnet-quality' input is ignored.",
                directive.value,
            )
            return self

        if quality:
            self.use_flag("quality", quality.value)
        return self

    def use_arch(self, arch: Optional[str]) -> "DotnetInstallScript":
        script_arch = normalize_arch(arch)
        if not script_arch:
            return self
        return self.use_flag("architecture", script_arch)

    def _executable(self) -> List[str]:
        if self.config.is_windows:
            shell = shutil.which("pwsh") or shutil.which("powershell")
            if not shell:
                raise SetupDotnetError("Unable to locate pwsh or powershell to run the .NET install script")
            return [shell]
        return [self.script_path]

    def execute(self) -> InstallResult:
        """Run the script; a non-zero exit code is returned, not raised."""
        command = self._executable() + self.script_arguments
        env = dict(self.environ)
        env[Constants.ENV_INSTALL_DIR] = self.config.install_dir

        logger.info("Running: %s", " ".join(command))
        with Timer() as t:
            completed = subprocess.run(
                command,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                env=env,
                check=False,
            )

        for line in (completed.stdout or "").splitlines():
            logger.info(line)
        for line in (completed.stderr or "").splitlines():
            logger.info(line)

        if is_debug_enabled(logger):
            logger.debug(
                "Install script finished",
                extra=extra_context(
                    event="subprocess",
                    component="install_script",
                    action="execute",
                    exit_code=completed.returncode,
                    duration_ms=t.duration_ms()
                )
            )
        return InstallResult(
            exit_code=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
