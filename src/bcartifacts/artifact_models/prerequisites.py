"""
Pydantic data model for "Prerequisite Components.json", the list of extra files
a platform artifact needs next to its own content.
"""

import json
import pathlib
from typing import Dict, Iterator, Optional, Tuple

from pydantic import RootModel

from bcartifacts.bcartifacts_exceptions import ManifestError

PREREQUISITES_FILE_NAME = "Prerequisite Components.json"


class PrerequisiteComponents(RootModel[Dict[str, str]]):
    """
    Mapping of file paths, relative to the platform artifact, to download URLs.

    Structure:
    {
      "Prerequisite Components/Foo/foo.msi": "https://...",
      ...
    }
    """

    def items(self) -> Iterator[Tuple[str, str]]:
        return iter(self.root.items())

    def __len__(self) -> int:
        return len(self.root)

    @classmethod
    def load(cls, platform_path: str) -> Optional["PrerequisiteComponents"]:
        """
        Load the prerequisite list of a platform artifact.

        Returns:
            PrerequisiteComponents or None if the artifact has no list
        """
        list_path = pathlib.Path(platform_path) / PREREQUISITES_FILE_NAME
        if not list_path.is_file():
            return None

        try:
            with open(list_path, encoding="utf-8-sig") as f:
                data = json.load(f)
            return cls.model_validate(data)
        except ValueError as e:
            raise ManifestError(f"Invalid {PREREQUISITES_FILE_NAME} in {platform_path}: {e}") from e
