"""Argument parsing functionality for setup-dotnet."""

import argparse
from constants import Constants


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="setup-dotnet",
        description=(
            "setup-dotnet - Resolve and install .NET SDKs with the dotnet-install script"
        ),
        add_help=True,
    )

    parser.add_argument("-v", "--dotnet-version",
                        dest="DOTNET_VERSION",
                        help="SDK version to install (A.B.C, A.B, A.B.x, A, A.x, A.B.Cxx). Repeatable.",
                        action="append", type=str,
                        default=[])
    parser.add_argument("-q", "--dotnet-quality",
                        dest="DOTNET_QUALITY",
                        help="Quality of the build for channel installs (major 6 and later)",
                        action="store", type=str,
                        choices=Constants.QUALITY_OPTIONS)
    parser.add_argument("-a", "--architecture",
                        dest="ARCHITECTURE",
                        help="Architecture to install (x64, arm64). Defaults to the host architecture.",
                        action="store", type=str)
    parser.add_argument("--dotnet",
                        dest="DOTNET",
                        help="YAML/JSON list of SDK definitions with 'version', 'arch' and 'quality' keys",
                        action="store", type=str)
    parser.add_argument("-g", "--global-json-file",
                        dest="GLOBAL_JSON_FILE",
                        help="Path to a global.json file to read the SDK version from",
                        action="store", type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON) with a 'dotnet' section",
                        action="store", type=str)

    parser.add_argument("--install-dir",
                        dest="INSTALL_DIR",
                        help="Installation directory (overrides DOTNET_INSTALL_DIR)",
                        action="store", type=str)
    parser.add_argument("--script-dir",
                        dest="SCRIPT_DIR",
                        help="Directory holding dotnet-install.sh / dotnet-install.ps1",
                        action="store", type=str)

    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)

    return parser.parse_args(argv)
