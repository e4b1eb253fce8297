"""Factory for creating format extractors."""

from pathlib import Path
from typing import Dict, Type, Union

from readtrimesh.core.exceptions import UnsupportedFormatError
from readtrimesh.formats.base import FormatExtractor, MeshFormat
from readtrimesh.formats.collada import ColladaExtractor
from readtrimesh.formats.obj import ObjExtractor
from readtrimesh.formats.ply import PlyExtractor
from readtrimesh.formats.stl import StlExtractor


class ExtractorFactory:
    """Factory for creating format extractors.

    The set of formats is closed: one extractor class per ``MeshFormat``.
    """

    _extractors: Dict[MeshFormat, Type[FormatExtractor]] = {
        MeshFormat.STL: StlExtractor,
        MeshFormat.PLY: PlyExtractor,
        MeshFormat.OBJ: ObjExtractor,
        MeshFormat.DAE: ColladaExtractor,
    }

    @classmethod
    def create(cls, mesh_format: MeshFormat) -> FormatExtractor:
        """Create the extractor for a format.

        Args:
            mesh_format: Detected mesh format

        Returns:
            Extractor instance
        """
        return cls._extractors[mesh_format]()

    @classmethod
    def available_formats(cls) -> list[str]:
        """Get list of supported file extensions.

        Returns:
            Extensions without the leading dot
        """
        return [mesh_format.value for mesh_format in cls._extractors]


def detect_format(file_path: Union[str, Path]) -> MeshFormat:
    """Determine the mesh format from the file extension, ignoring case.

    Args:
        file_path: Path to the mesh file

    Returns:
        Detected format

    Raises:
        UnsupportedFormatError: If the extension is missing or unknown
    """
    file_path = Path(file_path)
    extension = file_path.suffix[1:]
    try:
        return MeshFormat(extension.lower())
    except ValueError:
        raise UnsupportedFormatError(
            file_path, extension, ExtractorFactory.available_formats()
        ) from None
