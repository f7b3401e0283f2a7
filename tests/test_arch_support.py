"""Tests for host platform and architecture checks."""

import subprocess
from unittest.mock import patch

import pytest

from constants import PlatformFamily
from errors import EmulationLayerMissing, UnsupportedArchitecture
from installer.arch_support import (
    ensure_installable,
    host_arch,
    host_platform_family,
    is_emulation_layer_active,
    is_supported,
    normalize_arch,
)


class TestNormalization:
    """platform.machine() values map onto script architecture names."""

    @pytest.mark.parametrize("machine,expected", [
        ("x86_64", "x64"),
        ("AMD64", "x64"),
        ("aarch64", "arm64"),
        ("arm64", "arm64"),
        ("i686", "x86"),
        ("armv7l", "arm"),
        ("s390x", "s390x"),
    ])
    def test_normalize_arch(self, machine, expected):
        assert normalize_arch(machine) == expected

    @pytest.mark.parametrize("arch", [None, ""])
    def test_empty_arch(self, arch):
        assert normalize_arch(arch) is None

    def test_host_arch_uses_machine(self):
        assert host_arch("AMD64") == "x64"

    @pytest.mark.parametrize("system,family", [
        ("Windows", PlatformFamily.WINDOWS),
        ("Darwin", PlatformFamily.MAC),
        ("Linux", PlatformFamily.LINUX),
        ("FreeBSD", PlatformFamily.LINUX),
    ])
    def test_platform_family(self, system, family):
        assert host_platform_family(system) == family


class TestIsSupported:
    """Feasibility rules per platform family."""

    @pytest.mark.parametrize("family", [PlatformFamily.MAC, PlatformFamily.WINDOWS])
    @pytest.mark.parametrize("requested,expected", [
        ("x64", True),
        ("arm64", True),
        ("x86", False),
        ("arm", False),
    ])
    def test_mac_and_windows_allow_list(self, family, requested, expected):
        assert is_supported(requested, family, "x64") is expected
        assert is_supported(requested, family, "arm64") is expected

    def test_linux_requires_native_arch(self):
        assert is_supported("x64", PlatformFamily.LINUX, "x64") is True
        assert is_supported("arm64", PlatformFamily.LINUX, "x64") is False
        assert is_supported("arm64", PlatformFamily.LINUX, "arm64") is True


class TestEmulationProbe:
    """Rosetta 2 detection through pgrep oahd."""

    @patch("installer.arch_support.subprocess.run")
    def test_daemon_running(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess(["pgrep", "oahd"], 0, "123\n", "")
        assert is_emulation_layer_active(PlatformFamily.MAC, "arm64") is True
        assert mock_run.call_args.args[0] == ["pgrep", "oahd"]

    @patch("installer.arch_support.subprocess.run")
    def test_daemon_not_running(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess(["pgrep", "oahd"], 1, "", "")
        assert is_emulation_layer_active(PlatformFamily.MAC, "arm64") is False

    @patch("installer.arch_support.subprocess.run", side_effect=FileNotFoundError("pgrep"))
    def test_probe_failure_means_absent(self, mock_run):
        assert is_emulation_layer_active(PlatformFamily.MAC, "arm64") is False

    @patch("installer.arch_support.subprocess.run")
    def test_only_probed_on_apple_silicon(self, mock_run):
        assert is_emulation_layer_active(PlatformFamily.MAC, "x64") is False
        assert is_emulation_layer_active(PlatformFamily.LINUX, "arm64") is False
        mock_run.assert_not_called()


class TestEnsureInstallable:
    """Caller policy combining feasibility and the emulation probe."""

    def test_unsupported_architecture(self):
        with pytest.raises(UnsupportedArchitecture) as excinfo:
            ensure_installable("arm64", PlatformFamily.LINUX, "x64")
        assert "arm64" in str(excinfo.value)

    @patch("installer.arch_support.is_emulation_layer_active", return_value=False)
    def test_x64_on_apple_silicon_without_rosetta(self, mock_probe):
        with pytest.raises(EmulationLayerMissing) as excinfo:
            ensure_installable("x64", PlatformFamily.MAC, "arm64")
        assert "softwareupdate --install-rosetta" in str(excinfo.value)

    @patch("installer.arch_support.is_emulation_layer_active", return_value=True)
    def test_x64_on_apple_silicon_with_rosetta(self, mock_probe):
        ensure_installable("x64", PlatformFamily.MAC, "arm64")
        mock_probe.assert_called_once()

    @patch("installer.arch_support.is_emulation_layer_active")
    def test_native_arch_skips_probe(self, mock_probe):
        ensure_installable("arm64", PlatformFamily.MAC, "arm64")
        ensure_installable("x64", PlatformFamily.WINDOWS, "x64")
        mock_probe.assert_not_called()
