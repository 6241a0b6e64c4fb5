import tempfile

import pytest

from bcartifacts.bcartifacts_config import ArtifactConfig
from bcartifacts.bcartifacts_utils import FileUtils
from tests.test_utils import FakeArtifactServer


@pytest.fixture
def server(monkeypatch):
    """Replace network downloads with an in-memory artifact server."""
    fake = FakeArtifactServer()
    monkeypatch.setattr(FileUtils, "download_file", staticmethod(fake.download_file))
    return fake


@pytest.fixture
def temp_dir(tmp_path, monkeypatch):
    """Redirect temporary archives to a folder the test can inspect."""
    path = tmp_path / "temp"
    path.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(path))
    return path


@pytest.fixture
def cache_dir(tmp_path):
    path = tmp_path / "cache"
    path.mkdir()
    return path


@pytest.fixture
def config(cache_dir):
    return ArtifactConfig(cache_folder=str(cache_dir), timeout=30)
