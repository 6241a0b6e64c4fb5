"""
Artifact downloader implementation.

Handles downloading artifact archives and expanding them into the cache.
"""

import logging
import os
import tempfile
from typing import List, Optional

from bcartifacts.artifact_cache import CacheEntry
from bcartifacts.bcartifacts_config import ArtifactConfig
from bcartifacts.bcartifacts_exceptions import ArtifactDownloadError, BcArtifactsException
from bcartifacts.bcartifacts_logger import ArtifactLogger
from bcartifacts.bcartifacts_utils import FileUtils, UrlUtils

from .sas_token import validate_sas_token


class DownloadStatus:
    """Enumeration of download statuses."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


class DownloadPlan:
    """
    A plan to download one artifact archive.

    Holds the primary URL and, for artifacts served through a known CDN, the
    origin storage URL that is tried once when the primary download fails.
    """

    def __init__(
        self,
        url: str,
        destination_path: str,
        fallback_url: Optional[str] = None,
        status: str = DownloadStatus.PENDING,
    ):
        """
        Initialize a download plan.

        Args:
            url: URL to download from
            destination_path: Cache folder the archive is expanded into
            fallback_url: Origin URL to retry with, None if no retry is allowed
            status: Current download status
        """
        self.url = url
        self.destination_path = destination_path
        self.fallback_url = fallback_url
        self.status = status
        self.downloaded_from: Optional[str] = None
        self.error_message: Optional[str] = None

    def candidate_urls(self) -> List[str]:
        if self.fallback_url:
            return [self.url, self.fallback_url]
        return [self.url]

    def __repr__(self) -> str:
        return (
            f"DownloadPlan(status={self.status}, url={UrlUtils.redact(self.url)}, "
            f"destination={self.destination_path})"
        )


class ArtifactDownloader:
    """
    Downloads artifact archives and expands them into cache entries.
    """

    def __init__(self, config: ArtifactConfig, logger: ArtifactLogger):
        """
        Initialize the artifact downloader.

        Args:
            config: Configuration holding the CDN rewrite rules
            logger: Logger for progress and error messages
        """
        self.config = config
        self.logger = logger

    def create_plan(self, entry: CacheEntry) -> DownloadPlan:
        return DownloadPlan(
            url=entry.url,
            destination_path=entry.path,
            fallback_url=UrlUtils.fallback_url(entry.url, self.config.cdn_rewrites),
        )

    def download_and_unpack(self, entry: CacheEntry, timeout: int) -> DownloadPlan:
        """
        Download the artifact of entry and expand it into place.

        The temporary archive is deleted whether or not expansion succeeds.

        Returns:
            The completed download plan
        """
        plan = self.create_plan(entry)
        fd, archive_path = tempfile.mkstemp(suffix=".zip", prefix="bcartifact-")
        os.close(fd)
        try:
            self.download(plan, archive_path, timeout)
            self.unpack(archive_path, entry)
        finally:
            if os.path.exists(archive_path):
                os.remove(archive_path)
        return plan

    def download(self, plan: DownloadPlan, archive_path: str, timeout: int) -> None:
        """
        Execute a download plan.

        The first failure is retried on the fallback URL when the plan has one.
        The error of the last attempt is raised.
        """
        plan.status = DownloadStatus.IN_PROGRESS
        candidates = plan.candidate_urls()
        for attempt, url in enumerate(candidates, start=1):
            if attempt > 1:
                self.logger.log(
                    f"Retrying download from {UrlUtils.redact(url)}",
                    logging.INFO,
                )
            try:
                self._download_once(url, archive_path, timeout)
            except ArtifactDownloadError as e:
                if attempt < len(candidates):
                    self.logger.log(str(e), logging.WARNING)
                    continue
                self._mark_failed(plan, e)
                raise
            except BcArtifactsException as e:
                self._mark_failed(plan, e)
                raise
            plan.downloaded_from = url
            plan.status = DownloadStatus.COMPLETED
            return

    def unpack(self, archive_path: str, entry: CacheEntry) -> None:
        """
        Expand archive_path into the staging folder of entry and promote it.
        """
        self.logger.log(f"Unpacking artifact to {entry.path}", logging.INFO)
        staging_path = entry.prepare_staging()
        FileUtils.extract_zip(self.logger, archive_path, staging_path)
        entry.promote()

    def _download_once(self, url: str, archive_path: str, timeout: int) -> None:
        validate_sas_token(url, self.logger)
        self.logger.log(f"Downloading artifact {UrlUtils.redact(url)}", logging.INFO)
        FileUtils.download_file(self.logger, url, archive_path, timeout)

    def _mark_failed(self, plan: DownloadPlan, error: Exception) -> None:
        plan.status = DownloadStatus.FAILED
        plan.error_message = str(error)
        self.logger.log(f"Failed to download {UrlUtils.redact(plan.url)}: {error}", logging.ERROR)
