"""
Fetches application and platform artifacts into the local artifact cache.
"""

import dataclasses
import logging
import pathlib
from pathlib import PurePosixPath
from typing import List, Optional

from bcartifacts.artifact_cache import CacheEntry
from bcartifacts.artifact_downloader import ArtifactDownloader
from bcartifacts.artifact_models import ArtifactManifest, PrerequisiteComponents
from bcartifacts.bcartifacts_config import ArtifactConfig
from bcartifacts.bcartifacts_exceptions import ManifestError, RedirectLoopError
from bcartifacts.bcartifacts_logger import ArtifactLogger
from bcartifacts.bcartifacts_utils import FileUtils, UrlUtils

PREREQUISITES_FOLDER = "Prerequisite Components"
DOTNET_CORE_FOLDER = "DotNetCore"
DOTNET_CORE_INSTALLER = "DotNetCore.1.0.4_1.1.1-WindowsHosting.exe"
DOTNET_CORE_INSTALLER_URL = "https://go.microsoft.com/fwlink/?LinkID=844461"


@dataclasses.dataclass
class ApplicationArtifact:
    """
    The application artifact a chain of redirections ended at.
    """

    url: str
    path: str
    manifest: ArtifactManifest


class ArtifactFetcher:
    """
    Downloads artifacts into the cache, follows redirect manifests and fetches
    the prerequisite components of platform artifacts.
    """

    def __init__(
        self,
        config: Optional[ArtifactConfig] = None,
        logger: Optional[ArtifactLogger] = None,
        downloader: Optional[ArtifactDownloader] = None,
    ):
        self.config = config or ArtifactConfig()
        self.logger = logger or ArtifactLogger()
        self.downloader = downloader or ArtifactDownloader(self.config, self.logger)

    def download_artifacts(
        self,
        url: str,
        include_platform: bool = False,
        force: bool = False,
        force_redirection: bool = False,
        base_path: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> List[str]:
        """
        Fetch an application artifact and, on request, its platform artifact.

        Returns:
            [application path] or [application path, platform path]
        """
        application = self._fetch_application(
            url, force, force_redirection, base_path, timeout
        )
        paths = [application.path]
        if include_platform:
            paths.append(
                self.fetch_platform_artifact(
                    application.manifest,
                    application.url,
                    force=force,
                    base_path=base_path,
                    timeout=timeout,
                )
            )
        return paths

    def fetch_application_artifact(
        self,
        url: str,
        force: bool = False,
        force_redirection: bool = False,
        base_path: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> str:
        """
        Fetch an application artifact, following redirect manifests.

        Args:
            url: Artifact URL
            force: Delete and download again when already cached
            force_redirection: Download cached redirect manifests again, their
                target may have moved
            base_path: Cache root, defaults to the configured cache folder
            timeout: Download timeout in seconds, defaults to the configured one

        Returns:
            Local path of the artifact the redirections ended at
        """
        return self._fetch_application(
            url, force, force_redirection, base_path, timeout
        ).path

    def fetch_platform_artifact(
        self,
        app_manifest: ArtifactManifest,
        app_url: str,
        force: bool = False,
        base_path: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> str:
        """
        Fetch the platform artifact belonging to an application artifact, together
        with the prerequisite components it lists.

        Returns:
            Local path of the platform artifact
        """
        if app_manifest.has_platform_url():
            platform_url = UrlUtils.resolve(app_manifest.platform_url, app_url)
        else:
            platform_url = UrlUtils.platform_url(app_url)

        entry = CacheEntry(self._base_path(base_path), platform_url)
        if entry.exists() and force:
            self.logger.log(f"Removing cached platform artifact {entry.path}", logging.INFO)
            entry.remove()

        self._ensure_cached(entry, self._timeout(timeout))
        self._download_prerequisites(entry.path, self._timeout(timeout))
        return entry.path

    def _fetch_application(
        self,
        url: str,
        force: bool,
        force_redirection: bool,
        base_path: Optional[str],
        timeout: Optional[int],
    ) -> ApplicationArtifact:
        base_path = self._base_path(base_path)
        timeout = self._timeout(timeout)
        visited = set()
        url = url.strip()

        while True:
            visited.add(url)
            entry = CacheEntry(base_path, url)

            if entry.exists():
                if force:
                    self.logger.log(f"Removing cached artifact {entry.path}", logging.INFO)
                    entry.remove()
                elif force_redirection and entry.read_manifest().is_redirect():
                    self.logger.log(
                        f"Removing cached redirect manifest {entry.path}", logging.INFO
                    )
                    entry.remove()

            self._ensure_cached(entry, timeout)

            manifest = entry.read_manifest()
            if not manifest.is_redirect():
                return ApplicationArtifact(url=url, path=entry.path, manifest=manifest)

            target = UrlUtils.resolve(manifest.application_url, url)
            if target in visited:
                raise RedirectLoopError(
                    f"Redirect from {UrlUtils.redact(url)} returns to "
                    f"{UrlUtils.redact(target)}"
                )
            if len(visited) > self.config.max_redirects:
                raise RedirectLoopError(
                    f"More than {self.config.max_redirects} redirects following "
                    f"{UrlUtils.redact(target)}"
                )
            self.logger.log(
                f"Artifact {UrlUtils.redact(url)} redirects to {UrlUtils.redact(target)}",
                logging.INFO,
            )
            url = target

    def _ensure_cached(self, entry: CacheEntry, timeout: int) -> None:
        if entry.exists():
            self.logger.log(f"Using cached artifact {entry.path}", logging.DEBUG)
        else:
            self.downloader.download_and_unpack(entry, timeout)
        entry.touch()

    def _download_prerequisites(self, platform_path: str, timeout: int) -> None:
        prerequisites = PrerequisiteComponents.load(platform_path)
        if prerequisites is None:
            return

        for relative_path, url in prerequisites.items():
            target = self._prerequisite_path(platform_path, relative_path)
            if target.exists():
                continue
            self.logger.log(f"Downloading prerequisite component {relative_path}", logging.INFO)
            target.parent.mkdir(parents=True, exist_ok=True)
            FileUtils.download_file(self.logger, url, str(target), timeout)

        installer = pathlib.Path(
            platform_path, PREREQUISITES_FOLDER, DOTNET_CORE_FOLDER, DOTNET_CORE_INSTALLER
        )
        if not installer.is_file():
            self.logger.log(f"Downloading {DOTNET_CORE_INSTALLER}", logging.INFO)
            installer.parent.mkdir(parents=True, exist_ok=True)
            FileUtils.download_file(self.logger, DOTNET_CORE_INSTALLER_URL, str(installer), timeout)

    @staticmethod
    def _prerequisite_path(platform_path: str, relative_path: str) -> pathlib.Path:
        # Lists are written on Windows and use backslashes
        parts = PurePosixPath(relative_path.replace("\\", "/").strip("/")).parts
        if not parts or ".." in parts:
            raise ManifestError(
                f"Prerequisite component path '{relative_path}' is outside {platform_path}"
            )
        return pathlib.Path(platform_path).joinpath(*parts)

    def _base_path(self, base_path: Optional[str]) -> str:
        return base_path or self.config.cache_folder

    def _timeout(self, timeout: Optional[int]) -> int:
        return timeout or self.config.timeout


def download_artifacts(
    url: str,
    include_platform: bool = False,
    force: bool = False,
    force_redirection: bool = False,
    base_path: Optional[str] = None,
    timeout: Optional[int] = None,
    config: Optional[ArtifactConfig] = None,
) -> List[str]:
    """
    Fetch an artifact with a default ArtifactFetcher. See ArtifactFetcher.download_artifacts.
    """
    fetcher = ArtifactFetcher(config or ArtifactConfig.from_env())
    return fetcher.download_artifacts(
        url,
        include_platform=include_platform,
        force=force,
        force_redirection=force_redirection,
        base_path=base_path,
        timeout=timeout,
    )
