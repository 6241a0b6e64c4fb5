"""
Helpers shared by the bcartifacts tests.
"""

import io
import json
import zipfile
from typing import Dict, List, Optional

from bcartifacts.bcartifacts_exceptions import ArtifactDownloadError


def make_zip(files: Dict[str, bytes]) -> bytes:
    """Build a zip archive in memory from a mapping of member names to contents."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, content in files.items():
            archive.writestr(name, content)
    return buffer.getvalue()


def make_artifact(manifest: dict, files: Optional[Dict[str, bytes]] = None) -> bytes:
    """Build an artifact archive holding manifest.json and any extra files."""
    members = {"manifest.json": json.dumps(manifest).encode("utf-8")}
    members.update(files or {})
    return make_zip(members)


class FakeArtifactServer:
    """
    Stands in for FileUtils.download_file, serving registered URLs and
    recording every request.
    """

    def __init__(self):
        self.files: Dict[str, bytes] = {}
        self.failing = set()
        self.requests: List[str] = []

    def serve(self, url: str, content: bytes) -> None:
        self.files[url] = content

    def fail(self, url: str) -> None:
        self.failing.add(url)

    def count(self, url: str) -> int:
        return self.requests.count(url)

    def download_file(self, logger, url: str, target_path: str, timeout: int) -> None:
        self.requests.append(url)
        if url in self.failing or url not in self.files:
            raise ArtifactDownloadError(f"Error downloading {url}: 404 Not Found")
        with open(target_path, "wb") as f:
            f.write(self.files[url])
