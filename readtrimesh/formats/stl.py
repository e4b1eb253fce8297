"""Triangle-soup extraction for STL files."""

from dataclasses import dataclass, field
from typing import BinaryIO, List, Optional

import numpy as np
from trimesh.exchange.stl import load_stl

from readtrimesh.core.exceptions import IndexRangeError
from readtrimesh.core.mesh import RawMesh
from readtrimesh.formats.base import FormatExtractor, MeshFormat, checked_index_rows


@dataclass
class StlSolid:
    """One ``solid`` block: a vertex list and per-face vertex references."""

    vertices: np.ndarray
    faces: np.ndarray
    name: Optional[str] = None


@dataclass
class TriangleSoupDocument:
    """Parsed STL content.

    Binary files and single-solid ASCII files hold one solid. ASCII files
    may hold several, each with its own vertex space, and a file without
    facets holds none.
    """

    solids: List[StlSolid] = field(default_factory=list)


class StlExtractor(FormatExtractor):
    """Extracts one raw sub-mesh per solid from binary or ASCII STL."""

    format = MeshFormat.STL

    def parse(self, stream: BinaryIO) -> TriangleSoupDocument:
        loaded = load_stl(stream)
        # several solids (or none at all) come back keyed by solid name
        if "geometry" in loaded:
            parts = list(loaded["geometry"].items())
        else:
            parts = [(loaded.get("metadata", {}).get("name"), loaded)]

        return TriangleSoupDocument(
            solids=[
                StlSolid(
                    vertices=np.asarray(part["vertices"]),
                    faces=np.asarray(part["faces"]),
                    name=name,
                )
                for name, part in parts
            ]
        )

    def extract(self, document: TriangleSoupDocument) -> List[RawMesh]:
        return [self._extract_solid(solid) for solid in document.solids]

    @staticmethod
    def _extract_solid(solid: StlSolid) -> RawMesh:
        faces = np.asarray(solid.faces)
        if faces.size == 0:
            faces = faces.reshape((0, 3))
        if faces.ndim != 2 or faces.shape[1] != 3:
            raise IndexRangeError(
                0,
                f"expected 3 vertex references per face, got shape {faces.shape}",
            )

        return RawMesh(
            vertices=np.asarray(solid.vertices, dtype=np.float32).reshape((-1, 3)),
            indices=checked_index_rows(faces),
        )
