"""Input parsing: descriptor documents, global.json and CLI versions."""
from __future__ import annotations

import logging
import os
from typing import Any, Iterable, List, Optional

import json5
import yaml

from constants import Constants, QualityOption
from errors import InvalidInput, InvalidQualityTier
from versioning.models import VersionDescriptor

logger = logging.getLogger(__name__)


def parse_quality(value: Optional[str]) -> Optional[QualityOption]:
    """Validate a quality tier; blank means none requested."""
    if value is None or str(value).strip() == "":
        return None
    try:
        return QualityOption(str(value).strip())
    except ValueError as exc:
        raise InvalidQualityTier(
            f"Value '{value}' is not supported for the 'dotnet-quality' option. "
            f"Supported values are: {', '.join(Constants.QUALITY_OPTIONS)}."
        ) from exc


def _descriptors_from_data(data: Any, source: str) -> List[VersionDescriptor]:
    """Build descriptors from a mapping or a list of mappings."""
    entries = data if isinstance(data, list) else [data]
    descriptors: List[VersionDescriptor] = []
    for entry in entries:
        if not isinstance(entry, dict):
            logger.warning("Ignoring non-mapping .NET SDK definition in %s: %r", source, entry)
            continue
        version = entry.get("version")
        if not isinstance(version, str) or not version.strip():
            logger.warning(
                "Ignoring .NET SDK definition without a string 'version' in %s "
                "(quote numeric versions such as '8.0'): %r",
                source,
                entry,
            )
            continue
        arch = entry.get("arch")
        descriptors.append(
            VersionDescriptor(
                version=version.strip(),
                architecture=str(arch).strip() if arch else None,
                quality=parse_quality(entry.get("quality")),
            )
        )

    if not descriptors:
        raise InvalidInput(f"No valid .NET SDK definitions found in {source}.")
    return descriptors


def parse_descriptor_document(text: str) -> List[VersionDescriptor]:
    """Parse the multi-architecture ``--dotnet`` input (YAML or JSON)."""
    if not text or not text.strip():
        return []
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise InvalidInput(f"Failed to parse 'dotnet' input as YAML/array: {exc}") from exc
    return _descriptors_from_data(data, "'dotnet' input")


def load_descriptor_config(path: str) -> List[VersionDescriptor]:
    """Load descriptors from a YAML/JSON config file's ``dotnet`` section."""
    if not os.path.isfile(path):
        raise InvalidInput(f"Config file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise InvalidInput(f"Failed to load config {path}: {exc}") from exc

    if isinstance(data, dict) and "dotnet" in data:
        data = data["dotnet"]
    return _descriptors_from_data(data, path)


def _stringify_versions(pairs):
    """JSON object hook coercing numeric version fields to strings."""
    return {
        key: str(value) if key in ("version", "rollForward") and isinstance(value, (int, float)) else value
        for key, value in pairs
    }


def get_version_from_global_json(global_json_path: str) -> str:
    """Read ``sdk.version`` from a global.json file.

    With ``rollForward: latestFeature`` only ``major.minor`` is kept so the
    newest feature band is installed.
    """
    try:
        with open(global_json_path, "r", encoding="utf-8-sig") as f:
            global_json = json5.loads(f.read().strip(), object_pairs_hook=_stringify_versions)
    except (OSError, ValueError) as exc:
        raise InvalidInput(f"Failed to read {global_json_path}: {exc}") from exc

    sdk = global_json.get("sdk") if isinstance(global_json, dict) else None
    if not isinstance(sdk, dict) or not sdk.get("version"):
        return ""

    version = sdk["version"]
    if sdk.get("rollForward") == "latestFeature":
        major, minor = (version.split(".") + [""])[:2]
        version = f"{major}.{minor}"
    return version


def _unique(values: Iterable[str]) -> List[str]:
    seen = set()
    result = []
    for value in values:
        if value and value not in seen:
            seen.add(value)
            result.append(value)
    return result


def collect_descriptors(args: Any, cwd: Optional[str] = None) -> List[VersionDescriptor]:
    """Gather descriptors from the CLI namespace.

    The ``--dotnet`` document (or ``dotnet`` section of ``--config``) wins.
    Otherwise versions come from ``--dotnet-version``, ``--global-json-file``
    and, when neither yields anything, ``./global.json``.
    """
    cwd = cwd or os.getcwd()

    descriptors = parse_descriptor_document(getattr(args, "DOTNET", None) or "")
    if not descriptors and getattr(args, "CONFIG", None):
        descriptors = load_descriptor_config(args.CONFIG)
    if descriptors:
        return descriptors

    versions = [v.strip() for v in (getattr(args, "DOTNET_VERSION", None) or [])]
    global_json_input = getattr(args, "GLOBAL_JSON_FILE", None)
    if global_json_input:
        global_json_path = os.path.join(cwd, global_json_input)
        if not os.path.exists(global_json_path):
            raise InvalidInput(f"The specified global.json file '{global_json_input}' does not exist")
        versions.append(get_version_from_global_json(global_json_path))

    if not any(versions):
        logger.debug("No version found, trying to find version from global.json")
        global_json_path = os.path.join(cwd, Constants.GLOBAL_JSON_FILE)
        if os.path.exists(global_json_path):
            versions.append(get_version_from_global_json(global_json_path))
        else:
            logger.info(
                "The global.json wasn't found in the root directory. No .NET version will be installed."
            )

    quality = parse_quality(getattr(args, "DOTNET_QUALITY", None))
    architecture = getattr(args, "ARCHITECTURE", None)
    return [
        VersionDescriptor(version=v, architecture=architecture, quality=quality)
        for v in _unique(versions)
    ]
