"""
Artifact metadata models.

This package provides Pydantic data models for the JSON documents shipped
inside artifacts: the artifact manifest and the prerequisite component list.
"""

from .manifest import ArtifactManifest
from .prerequisites import PrerequisiteComponents

__all__ = [
    "ArtifactManifest",
    "PrerequisiteComponents",
]
