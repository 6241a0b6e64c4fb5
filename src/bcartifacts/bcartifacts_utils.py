"""
This file contains various utility functions like downloading files, expanding
archives and mapping artifact URLs onto the local cache folder.
"""

import logging
import os
import pathlib
import zipfile
from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import Dict, Optional
from urllib.parse import unquote, urlparse

import requests

from bcartifacts.bcartifacts_exceptions import (
    ArchiveError,
    ArtifactDownloadError,
    InvalidArtifactUrlError,
)
from bcartifacts.bcartifacts_logger import ArtifactLogger

_DOTNET_EPOCH = datetime(1, 1, 1, tzinfo=timezone.utc)


def utc_ticks(now: Optional[datetime] = None) -> int:
    """
    Returns the number of 100 nanosecond intervals elapsed since 0001-01-01 UTC,
    the representation used by the lastused marker.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    delta = now - _DOTNET_EPOCH
    return (delta.days * 86400 + delta.seconds) * 10**7 + delta.microseconds * 10


class UrlUtils:
    """
    Helpers for artifact URLs.
    """

    @staticmethod
    def is_absolute(url: str) -> bool:
        parsed = urlparse(url)
        return bool(parsed.scheme and parsed.netloc)

    @staticmethod
    def redact(url: str) -> str:
        """
        Drops the query string, which may carry a SAS signature, so the URL can be logged.
        """
        return url.split("?", 1)[0]

    @staticmethod
    def resolve(url: str, reference_url: str) -> str:
        """
        Resolves a URL found in a manifest against the URL of the artifact that held it.

        Absolute URLs are returned unchanged. Relative ones are rooted at the host of
        reference_url and inherit its query string.
        """
        if UrlUtils.is_absolute(url):
            return url
        reference = urlparse(reference_url)
        query = f"?{reference.query}" if reference.query else ""
        return f"{reference.scheme}://{reference.netloc}/{url.lstrip('/')}{query}"

    @staticmethod
    def platform_url(app_url: str) -> str:
        """
        Derives the conventional platform artifact URL, a sibling named "platform" of
        the application artifact.
        """
        path = urlparse(app_url).path.rstrip("/")
        parent = path[: path.rfind("/")]
        return UrlUtils.resolve(f"{parent}/platform", app_url)

    @staticmethod
    def fallback_url(url: str, cdn_rewrites: Dict[str, str]) -> Optional[str]:
        """
        Returns url with its CDN host replaced by the origin storage host, or None
        if the host is not a known CDN endpoint.
        """
        parsed = urlparse(url)
        host = parsed.hostname
        if host is None or host not in cdn_rewrites:
            return None
        netloc = parsed.netloc.lower().replace(host, cdn_rewrites[host], 1)
        return parsed._replace(netloc=netloc).geturl()

    @staticmethod
    def local_path(base_path: str, url: str) -> str:
        """
        Maps an artifact URL onto its folder below base_path, using the URL path.
        """
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise InvalidArtifactUrlError(f"Not an http(s) artifact URL: {UrlUtils.redact(url)}")
        parts = PurePosixPath(unquote(parsed.path).strip("/")).parts
        if not parts:
            raise InvalidArtifactUrlError(f"Artifact URL has no path: {UrlUtils.redact(url)}")
        if any(part in ("..", ".") for part in parts):
            raise InvalidArtifactUrlError(
                f"Artifact URL path escapes the cache folder: {UrlUtils.redact(url)}"
            )
        return str(pathlib.Path(base_path).joinpath(*parts))


class FileUtils:
    """
    Utility functions for files and directories.
    """

    CHUNK_SIZE = 1024 * 1024

    @staticmethod
    def download_file(
        logger: ArtifactLogger, url: str, target_path: str, timeout: int
    ) -> None:
        """
        Downloads the file from the given URL to the given target path.

        A partially written target is removed when the download fails.
        """
        logger.log(f"Downloading {UrlUtils.redact(url)} to {target_path}", logging.DEBUG)
        try:
            with requests.get(url, stream=True, timeout=timeout) as response:
                response.raise_for_status()
                with open(target_path, "wb") as f:
                    for chunk in response.iter_content(chunk_size=FileUtils.CHUNK_SIZE):
                        if chunk:
                            f.write(chunk)
        except requests.RequestException as e:
            if os.path.exists(target_path):
                os.remove(target_path)
            raise ArtifactDownloadError(
                f"Error downloading {UrlUtils.redact(url)}: {e}"
            ) from e

    @staticmethod
    def extract_zip(logger: ArtifactLogger, archive_path: str, target_dir: str) -> None:
        """
        Expands the zip archive into target_dir, overwriting existing files.
        """
        logger.log(f"Expanding {archive_path} to {target_dir}", logging.DEBUG)
        try:
            with zipfile.ZipFile(archive_path) as archive:
                archive.extractall(target_dir)
        except (zipfile.BadZipFile, zipfile.LargeZipFile) as e:
            raise ArchiveError(f"Could not expand {archive_path}: {e}") from e
