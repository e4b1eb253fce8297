"""Polygon-payload extraction for PLY files."""

import logging
from typing import BinaryIO, Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np
from plyfile import PlyData, PlyElement, PlyListProperty

from readtrimesh.core.exceptions import MissingDataError
from readtrimesh.core.mesh import RawMesh
from readtrimesh.formats.base import FormatExtractor, MeshFormat
from readtrimesh.processing.coercion import PropertyKind, PropertyValue, to_f32, to_triangle

logger = logging.getLogger(__name__)

PlyRecord = Mapping[str, PropertyValue]
PlyDocument = Mapping[str, Sequence[PlyRecord]]

COORDINATE_NAMES = ("x", "y", "z")
INDEX_LIST_NAMES = ("vertex_indices", "vertex_index")


def element_records(element: PlyElement) -> List[Dict[str, PropertyValue]]:
    """Convert a parsed PLY element into typed records.

    Args:
        element: Element read by ``plyfile``

    Returns:
        One mapping of property name to ``PropertyValue`` per record
    """
    columns = []
    for prop in element.properties:
        columns.append(
            (
                prop.name,
                PropertyKind.from_dtype(prop.val_dtype),
                isinstance(prop, PlyListProperty),
                element.data[prop.name],
            )
        )

    return [
        {
            name: PropertyValue(kind, column[i], is_list)
            for name, kind, is_list, column in columns
        }
        for i in range(len(element.data))
    ]


class PlyExtractor(FormatExtractor):
    """Extracts a single raw mesh from the ``vertex`` and ``face`` elements."""

    format = MeshFormat.PLY

    def parse(self, stream: BinaryIO) -> Dict[str, List[Dict[str, PropertyValue]]]:
        ply = PlyData.read(stream)
        return {element.name: element_records(element) for element in ply.elements}

    def extract(self, document: PlyDocument) -> List[RawMesh]:
        vertex_records = document.get("vertex")
        if vertex_records is None:
            raise MissingDataError("vertex")
        vertices = self._extract_vertices(vertex_records)

        face_records = document.get("face")
        if face_records is None:
            raise MissingDataError("face")
        indices = self._extract_faces(face_records)

        logger.debug("Extracted %d vertices and %d faces from PLY", len(vertices), len(indices))
        return [RawMesh(vertices=vertices, indices=indices)]

    def _extract_vertices(self, records: Sequence[PlyRecord]) -> np.ndarray:
        vertices = np.empty((len(records), 3), dtype=np.float32)
        for i, record in enumerate(records):
            for axis, name in enumerate(COORDINATE_NAMES):
                prop = record.get(name)
                if prop is None:
                    raise MissingDataError(name, i)
                vertices[i, axis] = to_f32(prop, name, i)
        return vertices

    def _extract_faces(self, records: Sequence[PlyRecord]) -> np.ndarray:
        indices = np.empty((len(records), 3), dtype=np.uint32)
        for i, record in enumerate(records):
            name, prop = self._index_list(record)
            if prop is None:
                raise MissingDataError(INDEX_LIST_NAMES[0], i, kind="face")
            indices[i] = to_triangle(prop, name, i)
        return indices

    @staticmethod
    def _index_list(record: PlyRecord) -> Tuple[str, Optional[PropertyValue]]:
        for name in INDEX_LIST_NAMES:
            if name in record:
                return name, record[name]
        return INDEX_LIST_NAMES[0], None
