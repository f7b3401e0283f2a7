"""Publishes PATH additions, environment variables and outputs.

When running under a CI host that exposes file commands (``GITHUB_PATH``,
``GITHUB_ENV``, ``GITHUB_OUTPUT``) the values are appended to those files so
later steps see them. The current process environment is always updated.
"""
from __future__ import annotations

import logging
import os
import uuid
from typing import MutableMapping, Optional

logger = logging.getLogger(__name__)

ENV_FILE_PATH = "GITHUB_PATH"
ENV_FILE_ENV = "GITHUB_ENV"
ENV_FILE_OUTPUT = "GITHUB_OUTPUT"


class EnvironmentExporter:
    """Writes exported values to the process environment and CI file commands."""

    def __init__(self, environ: Optional[MutableMapping[str, str]] = None):
        self.environ = os.environ if environ is None else environ
        self.outputs = {}

    def _file_command(self, name: str) -> Optional[str]:
        path = self.environ.get(name)
        return path if path and os.path.isfile(path) else None

    @staticmethod
    def _append(path: str, text: str) -> None:
        with open(path, "a", encoding="utf-8") as f:
            f.write(text)

    @staticmethod
    def _key_value(name: str, value: str) -> str:
        # Heredoc form so values may contain newlines
        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        return f"{name}<<{delimiter}\n{value}\n{delimiter}\n"

    def add_path(self, directory: str) -> None:
        """Prepend ``directory`` to PATH."""
        path_file = self._file_command(ENV_FILE_PATH)
        if path_file:
            self._append(path_file, f"{directory}\n")
        current = self.environ.get("PATH", "")
        self.environ["PATH"] = f"{directory}{os.pathsep}{current}" if current else directory
        logger.info("Added %s to PATH", directory)

    def export_variable(self, name: str, value: str) -> None:
        env_file = self._file_command(ENV_FILE_ENV)
        if env_file:
            self._append(env_file, self._key_value(name, value))
        self.environ[name] = value
        logger.info("Exported %s=%s", name, value)

    def set_process_variable(self, name: str, value: str) -> None:
        """Set ``name`` for this process and its children only; later CI steps do not see it."""
        self.environ[name] = value
        logger.debug("Set %s=%s", name, value)

    def set_output(self, name: str, value: str) -> None:
        output_file = self._file_command(ENV_FILE_OUTPUT)
        if output_file:
            self._append(output_file, self._key_value(name, value))
        self.outputs[name] = value
        logger.info("Output %s=%s", name, value)
