"""
Tests for the artifact metadata models.
"""

import json

import pytest

from bcartifacts.artifact_models import ArtifactManifest, PrerequisiteComponents
from bcartifacts.bcartifacts_exceptions import ManifestError


class TestArtifactManifest:
    """Tests for ArtifactManifest model."""

    def test_terminal_manifest(self):
        manifest = ArtifactManifest.from_dict({"version": "21.0.1", "country": "us"})
        assert not manifest.is_redirect()
        assert not manifest.has_platform_url()

    def test_redirect_manifest(self):
        manifest = ArtifactManifest.from_dict({"applicationUrl": "sandbox/21.1/us"})
        assert manifest.is_redirect()
        assert manifest.application_url == "sandbox/21.1/us"

    def test_populate_by_field_name(self):
        manifest = ArtifactManifest(application_url="https://host/a", platform_url="p")
        assert manifest.is_redirect()
        assert manifest.model_dump(by_alias=True)["platformUrl"] == "p"

    def test_platform_url(self):
        manifest = ArtifactManifest.from_dict({"platformUrl": "https://host/platform/21"})
        assert manifest.has_platform_url()
        assert manifest.platform_url == "https://host/platform/21"

    def test_extra_fields_preserved(self):
        manifest = ArtifactManifest.from_dict({"version": "21.0.1"})
        assert manifest.model_dump()["version"] == "21.0.1"

    def test_load(self, tmp_path):
        (tmp_path / "manifest.json").write_text(
            json.dumps({"applicationUrl": "https://host/a"}), encoding="utf-8-sig"
        )
        assert ArtifactManifest.load(str(tmp_path)).is_redirect()

    def test_load_missing(self, tmp_path):
        with pytest.raises(ManifestError):
            ArtifactManifest.load(str(tmp_path))

    @pytest.mark.parametrize("content", ["{not json", "[1, 2]", '{"applicationUrl": 5}'])
    def test_load_invalid(self, tmp_path, content):
        (tmp_path / "manifest.json").write_text(content)
        with pytest.raises(ManifestError):
            ArtifactManifest.load(str(tmp_path))


class TestPrerequisiteComponents:
    """Tests for PrerequisiteComponents model."""

    def test_load(self, tmp_path):
        data = {"Prerequisite Components\\Foo\\foo.msi": "https://host/foo.msi"}
        (tmp_path / "Prerequisite Components.json").write_text(json.dumps(data))

        prerequisites = PrerequisiteComponents.load(str(tmp_path))

        assert len(prerequisites) == 1
        assert list(prerequisites.items()) == list(data.items())

    def test_load_missing(self, tmp_path):
        assert PrerequisiteComponents.load(str(tmp_path)) is None

    def test_load_invalid(self, tmp_path):
        (tmp_path / "Prerequisite Components.json").write_text('["not", "a", "map"]')
        with pytest.raises(ManifestError):
            PrerequisiteComponents.load(str(tmp_path))
