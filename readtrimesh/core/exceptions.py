"""Custom exceptions for readtrimesh."""

from pathlib import Path
from typing import Any, Optional, Union


class ReadTrimeshError(Exception):
    """Base exception for readtrimesh."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.path: Optional[Path] = None

    def with_path(self, path: Union[str, Path]) -> "ReadTrimeshError":
        """Attach the source file path unless one is already set."""
        if self.path is None:
            self.path = Path(path)
        return self

    def __str__(self) -> str:
        if self.path is not None:
            return f"{self.message} (in '{self.path}')"
        return self.message


class ConfigurationError(ReadTrimeshError):
    """Raised when configuration is invalid."""

    pass


class MeshIOError(ReadTrimeshError):
    """Raised when a mesh file cannot be opened or read."""

    def __init__(self, path: Union[str, Path], reason: str):
        super().__init__(f"Could not read mesh file: {reason}")
        self.path = Path(path)
        self.reason = reason


class MeshParseError(ReadTrimeshError):
    """Raised when the format parser rejects a document."""

    def __init__(self, path: Union[str, Path], fmt: str, reason: str):
        super().__init__(f"Could not parse {fmt.upper()} file: {reason}")
        self.path = Path(path)
        self.format = fmt
        self.reason = reason


class UnsupportedFormatError(ReadTrimeshError):
    """Raised when the file extension is not recognized."""

    def __init__(self, path: Union[str, Path], extension: str, supported: list[str]):
        if extension:
            reason = f"Unsupported file extension '{extension}'"
        else:
            reason = "File has no extension"
        super().__init__(
            f"{reason}, supported extensions: {', '.join(supported)}",
            details={"extension": extension},
        )
        self.path = Path(path)
        self.extension = extension
        self.supported = supported


class MissingDataError(ReadTrimeshError):
    """Raised when a required block, property or semantic is absent."""

    def __init__(
        self,
        name: str,
        record: Optional[int] = None,
        kind: str = "vertex",
        where: Optional[str] = None,
    ):
        if record is None:
            message = f"No '{name}' data found"
            if where:
                message += f" in {where}"
        else:
            message = f"Missing '{name}' property in {kind} {record}"
        super().__init__(message, details={"name": name, "record": record})
        self.name = name
        self.record = record


class TypeMismatchError(ReadTrimeshError):
    """Raised when a property has an unexpected type."""

    def __init__(
        self,
        name: str,
        record: int,
        found: str,
        kind: str = "vertex",
    ):
        super().__init__(
            f"Unexpected type {found} for '{name}' in {kind} {record}",
            details={"name": name, "record": record, "found": found},
        )
        self.name = name
        self.record = record
        self.found = found


class ValueRangeError(ReadTrimeshError):
    """Raised when a numeric value cannot be represented without loss."""

    def __init__(self, message: str, record: Optional[int] = None, value: Any = None):
        super().__init__(message, details={"record": record, "value": value})
        self.record = record
        self.value = value


class IndexRangeError(ValueRangeError):
    """Raised when a face index list is too short or an index overflows."""

    def __init__(self, face: int, reason: str, value: Any = None):
        super().__init__(f"Invalid indices in face {face}: {reason}", record=face, value=value)
        self.face = face
        self.reason = reason


class EmptyMeshError(ReadTrimeshError):
    """Raised when a document contains no usable geometry."""

    def __init__(self, reason: str = "The file contains no mesh"):
        super().__init__(reason)
