"""
Configuration parameters for bcartifacts.
"""

import os
import pathlib
from dataclasses import dataclass, field
from typing import Dict

DEFAULT_TIMEOUT = 300
DEFAULT_MAX_REDIRECTS = 10

# Public CDN endpoints and the storage accounts behind them
DEFAULT_CDN_REWRITES = {
    "bcartifacts.azureedge.net": "bcartifacts.blob.core.windows.net",
    "bcinsider.azureedge.net": "bcinsider.blob.core.windows.net",
    "bcprerelease.azureedge.net": "bcprerelease.blob.core.windows.net",
    "bcpublicpreview.azureedge.net": "bcpublicpreview.blob.core.windows.net",
}


def default_cache_folder() -> str:
    """
    Returns the default artifact cache folder for the current platform.
    """
    if os.name == "nt":
        return "c:\\bcartifacts.cache"
    base_dir = pathlib.Path(os.getenv("XDG_CACHE_HOME", "~/.cache")).expanduser()
    return str(base_dir / "bcartifacts.cache")


@dataclass
class ArtifactConfig:
    """
    Configuration for fetching artifacts.
    """

    cache_folder: str = field(default_factory=default_cache_folder)
    timeout: int = DEFAULT_TIMEOUT
    max_redirects: int = DEFAULT_MAX_REDIRECTS
    cdn_rewrites: Dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_CDN_REWRITES)
    )

    @classmethod
    def from_dict(cls, env: dict) -> "ArtifactConfig":
        """
        Create an ArtifactConfig instance from a dictionary. Unknown keys are ignored.
        """
        import inspect

        return cls(
            **{k: v for k, v in env.items() if k in inspect.signature(cls).parameters}
        )

    @classmethod
    def from_env(cls) -> "ArtifactConfig":
        """
        Create an ArtifactConfig instance, honouring BCARTIFACTS_CACHE_FOLDER and
        BCARTIFACTS_TIMEOUT when they are set.
        """
        values = {}
        cache_folder = os.getenv("BCARTIFACTS_CACHE_FOLDER")
        if cache_folder:
            values["cache_folder"] = cache_folder
        timeout = os.getenv("BCARTIFACTS_TIMEOUT")
        if timeout:
            values["timeout"] = int(timeout)
        return cls.from_dict(values)
