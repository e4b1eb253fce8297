"""Base classes and helpers for format extractors."""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Any, BinaryIO, ClassVar, List, Union

import numpy as np

from readtrimesh.core.exceptions import (
    IndexRangeError,
    MeshIOError,
    MeshParseError,
    ReadTrimeshError,
)
from readtrimesh.core.mesh import RawMesh
from readtrimesh.processing.coercion import U32_MAX
from readtrimesh.processing.merger import merge_meshes

logger = logging.getLogger(__name__)


class MeshFormat(str, Enum):
    """Supported mesh file formats, keyed by lower-case extension."""

    STL = "stl"  # triangle soup
    PLY = "ply"  # polygon payload
    OBJ = "obj"  # scene models
    DAE = "dae"  # COLLADA scene graph


class FormatExtractor(ABC):
    """Abstract base class for per-format mesh extraction.

    Subclasses parse a file into a format-specific document with an
    external parser (``parse``) and turn that document into one or more
    raw sub-meshes (``extract``).
    """

    format: ClassVar[MeshFormat]

    def load(self, file_path: Union[str, Path]) -> RawMesh:
        """Read a file and return its geometry as one raw mesh.

        Args:
            file_path: Path to the mesh file

        Returns:
            Raw mesh; several sub-meshes are merged with index rebasing

        Raises:
            MeshIOError: If the file cannot be read
            MeshParseError: If the parser rejects the file
        """
        document = self.read(file_path)
        return merge_meshes(self.extract(document))

    def read(self, file_path: Union[str, Path]) -> Any:
        """Parse a file into this format's document type.

        Args:
            file_path: Path to the mesh file

        Returns:
            Parsed document
        """
        file_path = Path(file_path)
        try:
            with open(file_path, "rb") as stream:
                return self.parse(stream)
        except ReadTrimeshError:
            raise
        except OSError as e:
            raise MeshIOError(file_path, e.strerror or str(e)) from e
        except Exception as e:
            raise MeshParseError(file_path, self.format.value, str(e) or type(e).__name__) from e

    @abstractmethod
    def parse(self, stream: BinaryIO) -> Any:
        """Parse an open binary stream into a document.

        Args:
            stream: File opened in binary mode

        Returns:
            Format-specific document
        """
        pass

    @abstractmethod
    def extract(self, document: Any) -> List[RawMesh]:
        """Extract raw sub-meshes from a parsed document.

        Args:
            document: Document returned by ``parse``

        Returns:
            Sub-meshes in document order
        """
        pass


def group_triples(values: Any, dtype: Any, what: str = "values") -> np.ndarray:
    """Group a flat array into rows of three, dropping any remainder.

    Args:
        values: Flat array-like
        dtype: Output dtype
        what: Description used in the warning for a dangling remainder

    Returns:
        Array of shape ``(len(values) // 3, 3)``
    """
    flat = np.asarray(values).reshape(-1)
    remainder = len(flat) % 3
    if remainder:
        logger.warning("Ignoring %d trailing %s not forming a triple", remainder, what)
        flat = flat[: len(flat) - remainder]
    return flat.astype(dtype).reshape((-1, 3))


def checked_index_rows(rows: np.ndarray) -> np.ndarray:
    """Convert integer index rows to uint32 without truncation or wrapping.

    Args:
        rows: Integer array of shape ``(M, 3)``

    Returns:
        The same rows as uint32

    Raises:
        IndexRangeError: Naming the first face with an index outside u32
    """
    rows = np.asarray(rows)
    if len(rows) == 0:
        return np.zeros((0, 3), dtype=np.uint32)

    if not np.issubdtype(rows.dtype, np.integer):
        integral = np.all(rows == np.floor(rows), axis=1) & np.all(np.isfinite(rows), axis=1)
        if not integral.all():
            face = int(np.argmin(integral))
            raise IndexRangeError(
                face,
                f"indices {rows[face].tolist()} are not whole numbers",
                value=rows[face].tolist(),
            )

    # unsigned and signed inputs compared against the u32 range without casting first
    invalid = (rows < 0) | (rows > U32_MAX)
    if invalid.any():
        face = int(np.argmax(invalid.any(axis=1)))
        value = rows[face][invalid[face]][0]
        raise IndexRangeError(
            face,
            f"could not convert vertex index {value} in face {rows[face].tolist()} to u32",
            value=value.item() if hasattr(value, "item") else value,
        )
    return rows.astype(np.uint32)
