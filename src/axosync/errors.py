"""Exception types for axosync."""

from pathlib import Path

from pydantic import ValidationError


class AxosyncError(Exception):
    """Base class for all axosync errors."""


class AddressError(AxosyncError):
    """A patch operation addresses a node that cannot exist."""

    def __init__(
        self,
        index: int,
        message: str,
        segment: str | None = None,
        parent: str | None = None,
    ):
        super().__init__(f"Operation {index}: {message}")
        self.index = index
        self.segment = segment
        self.parent = parent


class FormatError(AxosyncError):
    """A document or request body does not match the expected shape."""

    def __init__(self, message: str, path: Path | None = None):
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)
        self.path = path


class FileSystemError(AxosyncError):
    """Reading or writing the filesystem failed."""

    def __init__(self, message: str, path: Path):
        super().__init__(f"{path}: {message}")
        self.path = path


def describe_validation_error(error: ValidationError) -> str:
    """Flatten a pydantic error into one ``location: message`` entry per failure."""
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "(root)"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)
