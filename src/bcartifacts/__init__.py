"""
bcartifacts fetches versioned application and platform artifacts into a local
cache, follows redirect manifests and downloads prerequisite components.
"""

from .artifact_fetcher import ArtifactFetcher, download_artifacts
from .bcartifacts_config import ArtifactConfig
from .bcartifacts_exceptions import BcArtifactsException

__version__ = "0.1.0"

__all__ = ["ArtifactFetcher", "ArtifactConfig", "BcArtifactsException", "download_artifacts"]
