"""Tests for descriptor input parsing and global.json support."""

import argparse
import json

import pytest

from constants import QualityOption
from errors import InvalidInput, InvalidQualityTier
from versioning.models import VersionDescriptor
from versioning.parser import (
    collect_descriptors,
    get_version_from_global_json,
    load_descriptor_config,
    parse_descriptor_document,
    parse_quality,
)


def make_args(**overrides):
    values = dict(
        DOTNET=None,
        CONFIG=None,
        DOTNET_VERSION=[],
        GLOBAL_JSON_FILE=None,
        DOTNET_QUALITY=None,
        ARCHITECTURE=None,
    )
    values.update(overrides)
    return argparse.Namespace(**values)


class TestParseQuality:
    """Quality tier validation."""

    @pytest.mark.parametrize("value", ["daily", "signed", "validated", "preview", "ga"])
    def test_supported(self, value):
        assert parse_quality(value) == QualityOption(value)

    @pytest.mark.parametrize("value", [None, "", "  "])
    def test_blank(self, value):
        assert parse_quality(value) is None

    def test_unsupported(self):
        with pytest.raises(InvalidQualityTier) as excinfo:
            parse_quality("nightly")
        assert "daily, signed, validated, preview, ga" in str(excinfo.value)


class TestDescriptorDocument:
    """Multi-architecture --dotnet input."""

    def test_yaml_list(self):
        text = (
            "- version: '8.0'\n"
            "  arch: arm64\n"
            "- version: 6.0.4xx\n"
            "  arch: x64\n"
            "  quality: ga\n"
        )
        assert parse_descriptor_document(text) == [
            VersionDescriptor(version="8.0", architecture="arm64"),
            VersionDescriptor(version="6.0.4xx", architecture="x64", quality=QualityOption.GA),
        ]

    def test_single_mapping(self):
        assert parse_descriptor_document("version: '7.0.102'") == [VersionDescriptor(version="7.0.102")]

    def test_json(self):
        text = json.dumps([{"version": "8.0.100", "arch": "x64"}])
        assert parse_descriptor_document(text) == [VersionDescriptor(version="8.0.100", architecture="x64")]

    def test_blank_document(self):
        assert parse_descriptor_document("   ") == []

    def test_numeric_versions_are_dropped(self):
        with pytest.raises(InvalidInput) as excinfo:
            parse_descriptor_document("version: 8.0")
        assert "No valid .NET SDK definitions" in str(excinfo.value)

    def test_malformed_yaml(self):
        with pytest.raises(InvalidInput):
            parse_descriptor_document("- version: [unclosed")

    def test_bad_quality(self):
        with pytest.raises(InvalidQualityTier):
            parse_descriptor_document("version: '8.0'\nquality: nightly\n")

    def test_config_file_section(self, tmp_path):
        path = tmp_path / "setup-dotnet.yml"
        path.write_text("dotnet:\n  - version: '9.0'\n    arch: x64\n", encoding="utf-8")
        assert load_descriptor_config(str(path)) == [VersionDescriptor(version="9.0", architecture="x64")]

    def test_missing_config_file(self, tmp_path):
        with pytest.raises(InvalidInput):
            load_descriptor_config(str(tmp_path / "missing.yml"))


class TestGlobalJson:
    """global.json version extraction."""

    def write(self, tmp_path, content, bom=False):
        path = tmp_path / "global.json"
        data = ("\ufeff" if bom else "") + content
        path.write_text(data, encoding="utf-8")
        return str(path)

    def test_sdk_version(self, tmp_path):
        path = self.write(tmp_path, '{"sdk": {"version": "8.0.204"}}')
        assert get_version_from_global_json(path) == "8.0.204"

    def test_byte_order_mark(self, tmp_path):
        path = self.write(tmp_path, '{"sdk": {"version": "6.0.100"}}\n', bom=True)
        assert get_version_from_global_json(path) == "6.0.100"

    def test_latest_feature_roll_forward(self, tmp_path):
        path = self.write(tmp_path, '{"sdk": {"version": "8.0.204", "rollForward": "latestFeature"}}')
        assert get_version_from_global_json(path) == "8.0"

    def test_numeric_version(self, tmp_path):
        path = self.write(tmp_path, '{"sdk": {"version": 8.0}}')
        assert get_version_from_global_json(path) == "8.0"

    def test_comments_and_trailing_commas(self, tmp_path):
        content = (
            "{\n"
            "  // pinned for the release branch\n"
            '  "sdk": {\n'
            '    "version": "8.0.204", /* feature band 2xx */\n'
            '    "rollForward": "latestPatch",\n'
            "  },\n"
            "}\n"
        )
        path = self.write(tmp_path, content)
        assert get_version_from_global_json(path) == "8.0.204"

    def test_without_sdk(self, tmp_path):
        path = self.write(tmp_path, '{"msbuild-sdks": {}}')
        assert get_version_from_global_json(path) == ""

    def test_invalid_json(self, tmp_path):
        path = self.write(tmp_path, "{not json")
        with pytest.raises(InvalidInput):
            get_version_from_global_json(path)


class TestCollectDescriptors:
    """Combining the CLI inputs."""

    def test_versions_deduplicated_in_order(self, tmp_path):
        args = make_args(DOTNET_VERSION=["8.0", "6.0.4xx", "8.0"], DOTNET_QUALITY="ga", ARCHITECTURE="x64")
        assert collect_descriptors(args, cwd=str(tmp_path)) == [
            VersionDescriptor(version="8.0", architecture="x64", quality=QualityOption.GA),
            VersionDescriptor(version="6.0.4xx", architecture="x64", quality=QualityOption.GA),
        ]

    def test_dotnet_document_wins(self, tmp_path):
        args = make_args(DOTNET="version: '9.0'", DOTNET_VERSION=["8.0"])
        assert collect_descriptors(args, cwd=str(tmp_path)) == [VersionDescriptor(version="9.0")]

    def test_config_file(self, tmp_path):
        config = tmp_path / "dotnet.json"
        config.write_text(json.dumps({"dotnet": [{"version": "7.0.x"}]}), encoding="utf-8")
        args = make_args(CONFIG=str(config))
        assert collect_descriptors(args, cwd=str(tmp_path)) == [VersionDescriptor(version="7.0.x")]

    def test_global_json_file_appended(self, tmp_path):
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "global.json").write_text('{"sdk": {"version": "8.0.100"}}', encoding="utf-8")
        args = make_args(DOTNET_VERSION=["6.0"], GLOBAL_JSON_FILE="sub/global.json")
        versions = [d.version for d in collect_descriptors(args, cwd=str(tmp_path))]
        assert versions == ["6.0", "8.0.100"]

    def test_missing_global_json_file(self, tmp_path):
        args = make_args(GLOBAL_JSON_FILE="nope/global.json")
        with pytest.raises(InvalidInput) as excinfo:
            collect_descriptors(args, cwd=str(tmp_path))
        assert "does not exist" in str(excinfo.value)

    def test_falls_back_to_root_global_json(self, tmp_path):
        (tmp_path / "global.json").write_text('{"sdk": {"version": "9.0.100"}}', encoding="utf-8")
        assert collect_descriptors(make_args(), cwd=str(tmp_path)) == [VersionDescriptor(version="9.0.100")]

    def test_nothing_requested(self, tmp_path, caplog):
        with caplog.at_level("INFO"):
            assert collect_descriptors(make_args(), cwd=str(tmp_path)) == []
        assert "No .NET version will be installed" in caplog.text

    def test_invalid_quality_rejected(self, tmp_path):
        args = make_args(DOTNET_VERSION=["8.0"], DOTNET_QUALITY="nightly")
        with pytest.raises(InvalidQualityTier):
            collect_descriptors(args, cwd=str(tmp_path))
