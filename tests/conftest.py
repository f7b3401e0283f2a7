"""Shared fixtures: fake install scripts, host configs and a subprocess recorder."""

import subprocess

import pytest

from constants import Constants, PlatformFamily
from setup_config import SetupConfig


@pytest.fixture
def script_dir(tmp_path):
    """Directory holding stub dotnet-install scripts."""
    directory = tmp_path / "scripts"
    directory.mkdir()
    (directory / Constants.INSTALL_SCRIPT_SH).write_text("#!/usr/bin/env bash\n", encoding="utf-8")
    (directory / Constants.INSTALL_SCRIPT_PS1).write_text("param()\n", encoding="utf-8")
    return directory


@pytest.fixture
def make_config(script_dir, tmp_path):
    """Factory building a SetupConfig for an arbitrary host."""
    def _make(family=PlatformFamily.LINUX, native_arch="x64"):
        return SetupConfig(
            family=family,
            native_arch=native_arch,
            install_dir=str(tmp_path / "dotnet"),
            script_dir=str(script_dir),
        )
    return _make


class ScriptRecorder:
    """Stands in for subprocess.run, replaying queued results."""

    def __init__(self):
        self.calls = []
        self.results = []

    def queue(self, returncode=0, stdout="", stderr=""):
        self.results.append((returncode, stdout, stderr))
        return self

    def __call__(self, command, **kwargs):
        self.calls.append((command, kwargs))
        returncode, stdout, stderr = self.results.pop(0) if self.results else (0, "", "")
        return subprocess.CompletedProcess(command, returncode, stdout, stderr)

    @property
    def commands(self):
        return [command for command, _ in self.calls]


@pytest.fixture
def recorder(monkeypatch):
    """Patch the install script runner and the PowerShell lookup."""
    rec = ScriptRecorder()
    monkeypatch.setattr("installer.install_script.subprocess.run", rec)
    monkeypatch.setattr("installer.install_script.shutil.which", lambda name: f"/usr/bin/{name}")
    return rec
