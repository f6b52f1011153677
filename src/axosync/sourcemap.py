"""Sourcemap document model and on-disk storage for axosync."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from . import SOURCEMAP_FILE
from .errors import FileSystemError, FormatError, describe_validation_error

logger = logging.getLogger(__name__)


class SourcemapInstance(BaseModel):
    """A node in the sourcemap, mirroring one instance in the editor's object tree."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = ""
    class_name: str = ""
    plugin_managed: bool = False
    file_paths: list[str] = Field(default_factory=list)
    children: list[SourcemapInstance] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase JSON shape, omitting fields at their defaults."""
        result: dict[str, Any] = {
            "name": self.name,
            "className": self.class_name,
        }
        if self.plugin_managed:
            result["pluginManaged"] = True
        if self.file_paths:
            result["filePaths"] = list(self.file_paths)
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result

    def find_first_child(self, name: str) -> SourcemapInstance | None:
        """Return the first child called ``name``, or None."""
        for child in self.children:
            if child.name == name:
                return child
        return None

    def describe(self) -> str:
        """Short ``ClassName Name`` label used in error messages."""
        return f"{self.class_name} {self.name}"

    def count(self) -> int:
        """Number of nodes in this subtree, including this one."""
        return 1 + sum(child.count() for child in self.children)


def parse_instance(data: Any, path: Path | None = None) -> SourcemapInstance:
    """Validate decoded JSON into a SourcemapInstance."""
    try:
        return SourcemapInstance.model_validate(data)
    except ValidationError as e:
        raise FormatError(describe_validation_error(e), path) from e


def get_sourcemap_path(directory: Path) -> Path:
    """Get the sourcemap file path inside ``directory``."""
    return directory / SOURCEMAP_FILE


class SourcemapStore:
    """Whole-document load/save of the sourcemap JSON file."""

    def __init__(self, path: Path):
        self.path = path

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> SourcemapInstance:
        """Load the persisted sourcemap.

        Returns an empty root instance if the file doesn't exist yet.
        """
        if not self.path.exists():
            logger.debug("No sourcemap at %s, starting from an empty root", self.path)
            return SourcemapInstance()

        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise FileSystemError(f"cannot read sourcemap ({e.strerror or e})", self.path) from e

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise FormatError(f"invalid JSON ({e})", self.path) from e

        return parse_instance(data, self.path)

    def save(self, tree: SourcemapInstance) -> None:
        """Replace the persisted sourcemap with ``tree``.

        The document is written to a temporary file next to the target and
        renamed over it, so readers never see a half-written file.
        """
        data = json.dumps(tree.to_dict(), indent=2)
        tmp_path: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data)
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as e:
            raise FileSystemError(f"cannot write sourcemap ({e.strerror or e})", self.path) from e
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)

        logger.debug("Saved sourcemap with %d instance(s) to %s", tree.count(), self.path)
