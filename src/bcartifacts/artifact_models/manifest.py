"""
Pydantic data model for the manifest.json found at the root of every
application artifact.
"""

import json
import pathlib
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from bcartifacts.bcartifacts_exceptions import ManifestError

MANIFEST_FILE_NAME = "manifest.json"


class ArtifactManifest(BaseModel):
    """
    Artifact manifest.

    Only the fields that drive fetching are modelled. Everything else in the
    document (version, country, ...) is kept as extra fields.
    """

    application_url: Optional[str] = Field(
        None,
        alias="applicationUrl",
        description="Location of the real application artifact when this one only redirects",
    )
    platform_url: Optional[str] = Field(
        None,
        alias="platformUrl",
        description="Location of the platform artifact, derived from the application URL when absent",
    )

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def is_redirect(self) -> bool:
        """Check if this manifest points to another application artifact."""
        return bool(self.application_url)

    def has_platform_url(self) -> bool:
        return bool(self.platform_url)

    @classmethod
    def from_dict(cls, data: dict) -> "ArtifactManifest":
        return cls(**data)

    @classmethod
    def load(cls, artifact_path: str) -> "ArtifactManifest":
        """
        Load the manifest of the artifact unpacked at artifact_path.

        Raises:
            ManifestError: if the file is missing or is not a JSON object
        """
        manifest_path = pathlib.Path(artifact_path) / MANIFEST_FILE_NAME
        if not manifest_path.is_file():
            raise ManifestError(f"No {MANIFEST_FILE_NAME} in {artifact_path}")

        # utf-8-sig: manifests produced on Windows may carry a BOM
        try:
            with open(manifest_path, encoding="utf-8-sig") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ManifestError(f"Invalid JSON in {manifest_path}: {e}") from e

        if not isinstance(data, dict):
            raise ManifestError(f"{manifest_path} does not contain a JSON object")

        try:
            return cls.from_dict(data)
        except ValidationError as e:
            raise ManifestError(f"Unexpected content in {manifest_path}: {e}") from e
