"""
Artifact downloader.

This package handles:
1. Validating SAS tokens before a download
2. Downloading artifact archives, with a single retry on the origin storage
   host when the CDN fails
3. Expanding archives into the cache
"""

from .downloader import ArtifactDownloader, DownloadPlan, DownloadStatus
from .sas_token import validate_sas_token

__all__ = ["ArtifactDownloader", "DownloadPlan", "DownloadStatus", "validate_sas_token"]
