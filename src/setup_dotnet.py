"""setup-dotnet: resolve .NET SDK versions and install them with dotnet-install."""

import logging
import os
import sys
from typing import List, Optional

import semantic_version

from args import parse_args
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import Constants, ExitCodes, Outputs
from errors import SetupDotnetError
from installer.dotnet_installer import DotnetCoreInstaller
from installer.environment import EnvironmentExporter
from setup_config import SetupConfig
from versioning.models import InstallOutcome, VersionDescriptor
from versioning.parser import collect_descriptors

logger = logging.getLogger(__name__)


def _setup_logging(args) -> None:
    """Configure logging from --loglevel / --logfile."""
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.LOG_LEVEL_ENV] = str(args.LOG_LEVEL).upper()
    configure_logging()

    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        logging.getLogger().addHandler(file_handler)
        logger.info("Logging to file: %s", log_file)


def export_architecture_root(config: SetupConfig, outcome: InstallOutcome, exporter: EnvironmentExporter) -> None:
    """Export DOTNET_ROOT_X64 / DOTNET_ROOT_ARM64 for one installed SDK."""
    variable = Constants.ENV_ROOT_BY_ARCH.get(outcome.architecture)
    if variable:
        exporter.export_variable(variable, config.install_dir)


def install_all(
    config: SetupConfig, descriptors: List[VersionDescriptor], exporter: EnvironmentExporter
) -> List[InstallOutcome]:
    """Install descriptors one at a time, in order.

    Each architecture root is exported as soon as its SDK is installed, so
    earlier exports survive a later fatal error.
    """
    outcomes: List[InstallOutcome] = []
    for descriptor in descriptors:
        installer = DotnetCoreInstaller(config, descriptor)
        quality = f", quality: {descriptor.quality.value}" if descriptor.quality else ""
        logger.info(
            "Installing .NET SDK version %s (%s)%s", descriptor.version, installer.effective_arch, quality
        )

        outcome = installer.install_dotnet()
        if outcome is not None:
            export_architecture_root(config, outcome, exporter)
            outcomes.append(outcome)
    return outcomes


def export_environment(config: SetupConfig, exporter: EnvironmentExporter) -> None:
    """Publish PATH and DOTNET_ROOT; DOTNET_INSTALL_DIR stays process-local."""
    exporter.set_process_variable(Constants.ENV_INSTALL_DIR, config.install_dir)
    exporter.add_path(config.install_dir)
    exporter.export_variable(Constants.ENV_DOTNET_ROOT, config.install_dir)


def select_output_version(installed: List[Optional[str]], last_wins: bool) -> Optional[str]:
    """Choose the version reported as the ``dotnet-version`` output.

    ``last_wins`` reports the last installed version (global.json input);
    otherwise the highest version, pre-releases included, is reported.
    """
    if not installed or None in installed:
        return None
    if last_wins:
        return installed[-1]

    parsed = []
    for version in installed:
        try:
            parsed.append((semantic_version.Version(version), version))
        except ValueError:
            logger.debug("Skipping non-semver installed version %s", version)
    if not parsed:
        return None
    return max(parsed, key=lambda item: item[0])[1]


def output_installed_version(
    installed: List[Optional[str]], global_json_file: Optional[str], exporter: EnvironmentExporter
) -> None:
    if not installed:
        logger.info("The '%s' output will not be set.", Outputs.DOTNET_VERSION)
        return

    if None in installed:
        logger.warning(
            "Failed to output the installed version of .NET. The '%s' output will not be set.",
            Outputs.DOTNET_VERSION,
        )
        return

    version = select_output_version(installed, last_wins=bool(global_json_file))
    if version:
        exporter.set_output(Outputs.DOTNET_VERSION, version)


def run(args, exporter: Optional[EnvironmentExporter] = None) -> None:
    """Resolve, install and export for one parsed CLI invocation."""
    exporter = exporter or EnvironmentExporter()
    descriptors = collect_descriptors(args)
    config = SetupConfig.from_args(args)

    if is_debug_enabled(logger):
        logger.debug(
            "Collected descriptors",
            extra=extra_context(
                event="decision",
                component="cli",
                action="collect_descriptors",
                count=len(descriptors),
                install_dir=config.install_dir
            )
        )

    outcomes = install_all(config, descriptors, exporter)
    export_environment(config, exporter)
    output_installed_version(
        [o.installed_version for o in outcomes], getattr(args, "GLOBAL_JSON_FILE", None), exporter
    )


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    _setup_logging(args)
    logger.info("Arguments parsed.")

    try:
        run(args)
    except SetupDotnetError as exc:
        logger.error("%s", exc)
        sys.exit(exc.exit_code.value)

    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()
