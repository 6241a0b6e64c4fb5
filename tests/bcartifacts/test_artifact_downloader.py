"""
Tests for ArtifactDownloader and CacheEntry staging.
"""

import os

import pytest

from bcartifacts.artifact_cache import CacheEntry
from bcartifacts.artifact_downloader import ArtifactDownloader, DownloadStatus
from bcartifacts.bcartifacts_exceptions import ArchiveError, ArtifactDownloadError
from bcartifacts.bcartifacts_logger import ArtifactLogger
from tests.test_utils import make_artifact

CDN_URL = "https://bcinsider.azureedge.net/sandbox/22.0/base"
ORIGIN_URL = "https://bcinsider.blob.core.windows.net/sandbox/22.0/base"


@pytest.fixture
def downloader(config):
    return ArtifactDownloader(config, ArtifactLogger())


class TestDownloadPlan:
    def test_cdn_plan_has_fallback(self, downloader, cache_dir):
        plan = downloader.create_plan(CacheEntry(str(cache_dir), CDN_URL))
        assert plan.candidate_urls() == [CDN_URL, ORIGIN_URL]
        assert plan.status == DownloadStatus.PENDING

    def test_other_plan_has_no_fallback(self, downloader, cache_dir):
        plan = downloader.create_plan(CacheEntry(str(cache_dir), "https://host/a/b"))
        assert plan.fallback_url is None
        assert plan.candidate_urls() == ["https://host/a/b"]


class TestArtifactDownloader:
    """Tests for ArtifactDownloader."""

    def test_download_and_unpack(self, downloader, server, cache_dir, temp_dir):
        entry = CacheEntry(str(cache_dir), "https://host/a/b")
        server.serve(entry.url, make_artifact({"version": "1"}))

        plan = downloader.download_and_unpack(entry, 30)

        assert plan.status == DownloadStatus.COMPLETED
        assert plan.downloaded_from == entry.url
        assert entry.read_manifest().model_dump()["version"] == "1"
        assert not os.path.exists(entry.staging_path)
        assert list(temp_dir.iterdir()) == []

    def test_fallback_used_once(self, downloader, server, cache_dir):
        """Test that only one retry is made, and its error is the one raised."""
        server.fail(CDN_URL)
        entry = CacheEntry(str(cache_dir), CDN_URL)

        with pytest.raises(ArtifactDownloadError) as error:
            downloader.download_and_unpack(entry, 30)

        assert server.requests == [CDN_URL, ORIGIN_URL]
        assert "blob.core.windows.net" in str(error.value)
        assert not entry.exists()

    def test_fallback_success(self, downloader, server, cache_dir):
        server.fail(CDN_URL)
        server.serve(ORIGIN_URL, make_artifact({}))

        plan = downloader.download_and_unpack(CacheEntry(str(cache_dir), CDN_URL), 30)

        assert plan.downloaded_from == ORIGIN_URL

    def test_unpack_failure_keeps_final_path_absent(self, downloader, server, cache_dir, temp_dir):
        """Test that a failed expansion never leaves a partial cache entry."""
        entry = CacheEntry(str(cache_dir), "https://host/a/b")
        server.serve(entry.url, b"PK\x03\x04 truncated")

        with pytest.raises(ArchiveError):
            downloader.download_and_unpack(entry, 30)

        assert not entry.exists()
        assert list(temp_dir.iterdir()) == []

    def test_leftover_staging_is_cleared(self, downloader, server, cache_dir):
        entry = CacheEntry(str(cache_dir), "https://host/a/b")
        os.makedirs(entry.staging_path)
        with open(os.path.join(entry.staging_path, "leftover.txt"), "w") as f:
            f.write("x")
        server.serve(entry.url, make_artifact({}))

        downloader.download_and_unpack(entry, 30)

        assert not os.path.exists(os.path.join(entry.path, "leftover.txt"))


class TestCacheEntry:
    def test_touch_and_last_used(self, cache_dir):
        entry = CacheEntry(str(cache_dir), "https://host/a/b")
        os.makedirs(entry.path)
        assert entry.last_used() is None

        entry.touch()

        assert entry.last_used() > 0

    def test_remove(self, cache_dir):
        entry = CacheEntry(str(cache_dir), "https://host/a/b")
        os.makedirs(os.path.join(entry.path, "sub"))

        entry.remove()

        assert not entry.exists()
