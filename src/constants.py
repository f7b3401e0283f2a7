"""Constants used in the project."""

import os
from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    INSTALL_ERROR = 3


class QualityOption(Enum):
    """Pre-release quality tiers accepted by the install script.

    Args:
        Enum (string): Quality tiers accepted by the install script.
    """

    DAILY = "daily"
    SIGNED = "signed"
    VALIDATED = "validated"
    PREVIEW = "preview"
    GA = "ga"


class PlatformFamily(Enum):
    """Host platform families with distinct install behavior."""

    WINDOWS = "windows"
    MAC = "mac"
    LINUX = "linux"


class Outputs:  # pylint: disable=too-few-public-methods
    """Names of the values published through the environment exporter."""

    DOTNET_VERSION = "dotnet-version"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    QUALITY_OPTIONS = [q.value for q in QualityOption]
    SUPPORTED_CROSS_ARCHITECTURES = ["x64", "arm64"]
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_LEVEL_ENV = "SETUP_DOTNET_LOG_LEVEL"

    RELEASES_INDEX_URL = (
        "https://builds.dotnet.microsoft.com/dotnet/release-metadata/releases-index.json"
    )
    INSTALL_SCRIPT_BASE_URL = "https://dot.net/v1/"
    INSTALL_SCRIPT_SH = "dotnet-install.sh"
    INSTALL_SCRIPT_PS1 = "dotnet-install.ps1"
    INSTALL_SCRIPT_DIR_ENV = "SETUP_DOTNET_SCRIPT_DIR"
    INSTALL_SCRIPT_CACHE_DIR = os.path.join(os.path.expanduser("~"), ".cache", "setup-dotnet")
    EXTERNALS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "externals")

    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    HTTP_RETRY_MAX = 3
    HTTP_RETRY_BASE_DELAY_SEC = 0.3
    USER_AGENT = "setup-dotnet"

    # Release lines where newer syntax became available
    QUALITY_INPUT_MINIMAL_MAJOR_TAG = 6
    LATEST_PATCH_SYNTAX_MINIMAL_MAJOR_TAG = 5

    LTS_CHANNEL = "LTS"
    RUNTIME_COMPONENT = "dotnet"

    ENV_INSTALL_DIR = "DOTNET_INSTALL_DIR"
    ENV_DOTNET_ROOT = "DOTNET_ROOT"
    ENV_ROOT_BY_ARCH = {
        "x64": "DOTNET_ROOT_X64",
        "arm64": "DOTNET_ROOT_ARM64",
    }
    DEFAULT_INSTALL_DIRS = {
        PlatformFamily.LINUX: "/usr/share/dotnet",
        PlatformFamily.MAC: os.path.join(os.environ.get("HOME", ""), ".dotnet"),
        PlatformFamily.WINDOWS: os.path.join(os.environ.get("PROGRAMFILES", ""), "dotnet"),
    }

    GLOBAL_JSON_FILE = "global.json"
    EMULATION_DAEMON = "oahd"
