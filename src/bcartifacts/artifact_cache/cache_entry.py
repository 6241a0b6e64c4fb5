"""
Cache entry implementation.

A cache entry is the folder an artifact is unpacked into. It is either absent
or complete: archives are expanded into a "-tmp" sibling first and renamed
into place once expansion succeeded.
"""

import os
import shutil
from datetime import datetime
from typing import Optional

from bcartifacts.artifact_models import ArtifactManifest
from bcartifacts.bcartifacts_utils import UrlUtils, utc_ticks

LASTUSED_FILE_NAME = "lastused"
STAGING_SUFFIX = "-tmp"


class CacheEntry:
    """
    The local folder holding one artifact.
    """

    def __init__(self, base_path: str, url: str):
        """
        Args:
            base_path: Root of the artifact cache
            url: URL of the artifact, its path decides the folder
        """
        self.base_path = base_path
        self.url = url
        self.path = UrlUtils.local_path(base_path, url)

    @property
    def staging_path(self) -> str:
        return self.path + STAGING_SUFFIX

    @property
    def lastused_path(self) -> str:
        return os.path.join(self.path, LASTUSED_FILE_NAME)

    def exists(self) -> bool:
        return os.path.isdir(self.path)

    def remove(self) -> None:
        """Delete the entry and everything in it."""
        shutil.rmtree(self.path)

    def prepare_staging(self) -> str:
        """
        Create an empty staging folder, clearing leftovers of an earlier failed
        expansion.

        Returns:
            The staging folder path
        """
        if os.path.exists(self.staging_path):
            shutil.rmtree(self.staging_path)
        os.makedirs(self.staging_path)
        return self.staging_path

    def promote(self) -> None:
        """Move the staging folder to its final location."""
        os.rename(self.staging_path, self.path)

    def touch(self, now: Optional[datetime] = None) -> None:
        """Record the current time in the lastused marker."""
        with open(self.lastused_path, "w", encoding="utf-8") as f:
            f.write(str(utc_ticks(now)))

    def last_used(self) -> Optional[int]:
        """
        Returns:
            The tick count stored in the lastused marker, or None if there is none
        """
        if not os.path.isfile(self.lastused_path):
            return None
        with open(self.lastused_path, encoding="utf-8") as f:
            return int(f.read().strip())

    def read_manifest(self) -> ArtifactManifest:
        return ArtifactManifest.load(self.path)

    def __repr__(self) -> str:
        return f"CacheEntry(path={self.path}, url={UrlUtils.redact(self.url)})"
