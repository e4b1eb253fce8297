"""Scene-graph extraction for COLLADA (.dae) files.

Every ``<geometry>`` in ``<library_geometries>`` owns an independent
vertex space, so each one becomes its own sub-mesh and the sub-meshes are
merged with index rebasing.
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import BinaryIO, Callable, List, Optional

import numpy as np

from readtrimesh.core.exceptions import EmptyMeshError, MissingDataError
from readtrimesh.core.mesh import RawMesh
from readtrimesh.formats.base import FormatExtractor, MeshFormat, group_triples
from readtrimesh.processing.coercion import U32_MAX

logger = logging.getLogger(__name__)

POSITION_SEMANTIC = "POSITION"
VERTEX_SEMANTIC = "VERTEX"


@dataclass
class ColladaInput:
    """A semantic-tagged ``<input>`` pointing at a data source."""

    semantic: str
    source: str
    offset: int = 0

    @property
    def source_id(self) -> str:
        return self.source[1:] if self.source.startswith("#") else self.source


@dataclass
class ColladaSource:
    """A ``<source>`` with its optional ``<float_array>``."""

    id: Optional[str]
    floats: Optional[np.ndarray] = None


@dataclass
class ColladaTriangles:
    """A ``<triangles>`` primitive block with its raw ``<p>`` indices."""

    count: int
    inputs: List[ColladaInput] = field(default_factory=list)
    indices: Optional[np.ndarray] = None


@dataclass
class ColladaMesh:
    sources: List[ColladaSource] = field(default_factory=list)
    vertices: Optional[List[ColladaInput]] = None
    triangles: List[ColladaTriangles] = field(default_factory=list)

    def source_by_id(self, source_id: str) -> Optional[ColladaSource]:
        for source in self.sources:
            if source.id == source_id:
                return source
        return None


@dataclass
class ColladaGeometry:
    id: Optional[str]
    name: Optional[str]
    mesh: Optional[ColladaMesh] = None

    @property
    def label(self) -> str:
        return self.id or self.name or "<unnamed>"


@dataclass
class ColladaDocument:
    geometries: List[ColladaGeometry] = field(default_factory=list)


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _qualifier(root_tag: str) -> Callable[[str], str]:
    if root_tag.startswith("{"):
        namespace = root_tag[1:].split("}", 1)[0]
        return lambda tag: f"{{{namespace}}}{tag}"
    return lambda tag: tag


def _read_inputs(element: ET.Element, q: Callable[[str], str]) -> List[ColladaInput]:
    inputs = []
    for item in element.findall(q("input")):
        offset = int(item.get("offset", 0))
        if offset < 0:
            raise ValueError(f"<input> has negative offset {offset}")
        inputs.append(
            ColladaInput(
                semantic=item.get("semantic", ""),
                source=item.get("source", ""),
                offset=offset,
            )
        )
    return inputs


def _read_indices(text: Optional[str]) -> np.ndarray:
    values = np.array((text or "").split(), dtype=np.int64)
    if len(values) and (values.min() < 0 or values.max() > U32_MAX):
        raise ValueError("<p> contains indices outside the u32 range")
    return values.astype(np.uint32)


def _read_mesh(element: ET.Element, q: Callable[[str], str]) -> ColladaMesh:
    mesh = ColladaMesh()

    for source in element.findall(q("source")):
        float_array = source.find(q("float_array"))
        floats = None
        if float_array is not None:
            floats = np.array((float_array.text or "").split(), dtype=np.float32)
        mesh.sources.append(ColladaSource(id=source.get("id"), floats=floats))

    vertices = element.find(q("vertices"))
    if vertices is not None:
        mesh.vertices = _read_inputs(vertices, q)

    for triangles in element.findall(q("triangles")):
        p = triangles.find(q("p"))
        mesh.triangles.append(
            ColladaTriangles(
                count=int(triangles.get("count", 0)),
                inputs=_read_inputs(triangles, q),
                indices=_read_indices(p.text) if p is not None else None,
            )
        )

    return mesh


def read_collada(stream: BinaryIO) -> ColladaDocument:
    """Read the geometry library of a COLLADA 1.4/1.5 document.

    Args:
        stream: Binary stream with the XML document

    Returns:
        Parsed geometry library

    Raises:
        ET.ParseError: If the XML is malformed
        ValueError: If the document is not COLLADA or holds invalid numbers
    """
    root = ET.parse(stream).getroot()
    if _local_name(root.tag) != "COLLADA":
        raise ValueError(f"root element is <{_local_name(root.tag)}>, expected <COLLADA>")
    q = _qualifier(root.tag)

    document = ColladaDocument()
    for library in root.findall(q("library_geometries")):
        for geometry in library.findall(q("geometry")):
            mesh = geometry.find(q("mesh"))
            document.geometries.append(
                ColladaGeometry(
                    id=geometry.get("id"),
                    name=geometry.get("name"),
                    mesh=_read_mesh(mesh, q) if mesh is not None else None,
                )
            )
    return document


class ColladaExtractor(FormatExtractor):
    """Extracts one sub-mesh per COLLADA geometry."""

    format = MeshFormat.DAE

    def parse(self, stream: BinaryIO) -> ColladaDocument:
        return read_collada(stream)

    def extract(self, document: ColladaDocument) -> List[RawMesh]:
        submeshes = []
        for geometry in document.geometries:
            if geometry.mesh is None or geometry.mesh.vertices is None:
                logger.debug("Geometry %s has no mesh vertices, skipping", geometry.label)
                continue
            submeshes.append(self._extract_geometry(geometry))

        if not submeshes or all(submesh.is_empty for submesh in submeshes):
            raise EmptyMeshError()

        logger.debug("Found %d geometries with mesh data", len(submeshes))
        return submeshes

    def _extract_geometry(self, geometry: ColladaGeometry) -> RawMesh:
        mesh = geometry.mesh
        positions = self._positions(geometry)

        blocks = [np.zeros((0, 3), dtype=np.uint32)]
        for triangles in mesh.triangles:
            if triangles.indices is None:
                continue
            blocks.append(self._vertex_references(triangles, geometry.label))

        return RawMesh(vertices=positions, indices=np.concatenate(blocks))

    @staticmethod
    def _positions(geometry: ColladaGeometry) -> np.ndarray:
        mesh = geometry.mesh
        position_inputs = [item for item in mesh.vertices if item.semantic == POSITION_SEMANTIC]
        if not position_inputs:
            raise MissingDataError(POSITION_SEMANTIC, where=f"geometry {geometry.label}")

        blocks = []
        for item in position_inputs:
            source = mesh.source_by_id(item.source_id)
            if source is None or source.floats is None:
                raise MissingDataError(item.source_id, where=f"geometry {geometry.label}")
            blocks.append(
                group_triples(source.floats, np.float32, f"position values in {item.source_id}")
            )
        return np.concatenate(blocks)

    @staticmethod
    def _vertex_references(triangles: ColladaTriangles, label: str) -> np.ndarray:
        """Pick the VERTEX column out of an interleaved ``<p>`` list.

        Each vertex of a primitive takes ``max(offset) + 1`` consecutive
        ``<p>`` values, one per input offset. Rows past ``count`` are dropped.
        """
        stride = max((item.offset for item in triangles.inputs), default=0) + 1
        vertex_offset = next(
            (item.offset for item in triangles.inputs if item.semantic == VERTEX_SEMANTIC),
            0,
        )

        values = triangles.indices
        remainder = len(values) % stride
        if remainder:
            logger.warning(
                "Ignoring %d trailing <p> values in geometry %s not forming a vertex",
                remainder,
                label,
            )
            values = values[: len(values) - remainder]

        rows = group_triples(
            values.reshape((-1, stride))[:, vertex_offset],
            np.uint32,
            f"indices in geometry {label}",
        )
        if triangles.count and len(rows) > triangles.count:
            logger.warning(
                "Geometry %s declares %d triangles but <p> holds %d, keeping %d",
                label,
                triangles.count,
                len(rows),
                triangles.count,
            )
            rows = rows[: triangles.count]
        return rows
