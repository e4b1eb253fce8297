"""Finalization of raw meshes into immutable ``Mesh`` objects."""

import logging
from typing import Tuple

import numpy as np
import trimesh

from readtrimesh.core.exceptions import IndexRangeError, ValueRangeError
from readtrimesh.core.mesh import Mesh, PostProcessFlags, RawMesh

logger = logging.getLogger(__name__)


class MeshFinalizer:
    """Checks mesh invariants and applies post-processing flags.

    ``MERGE_DUPLICATE_VERTICES`` and ``FIX_INTERNAL_EDGES`` may change the
    vertex and index counts. ``FIX_INTERNAL_EDGES`` needs shared vertices
    along shared edges, so it merges duplicates as well.
    """

    def __init__(self, flags: PostProcessFlags = PostProcessFlags.NONE):
        self.flags = flags

    def finalize(self, raw: RawMesh) -> Mesh:
        """Build the returned mesh.

        Args:
            raw: Merged and scaled raw mesh

        Returns:
            Immutable mesh carrying exactly ``self.flags``

        Raises:
            ValueRangeError: If a vertex coordinate is not finite
            IndexRangeError: If a face references a missing vertex
        """
        self.validate(raw)

        vertices = raw.vertices
        indices = raw.indices
        fix_edges = PostProcessFlags.FIX_INTERNAL_EDGES in self.flags
        merge = fix_edges or PostProcessFlags.MERGE_DUPLICATE_VERTICES in self.flags

        if merge and len(vertices):
            vertices, indices = self._merge_duplicate_vertices(vertices, indices)

        if fix_edges and len(indices):
            indices = self._fix_internal_edges(vertices, indices)

        if merge:
            logger.debug(
                "Post-processing changed %d/%d vertices/faces to %d/%d",
                raw.vertex_count,
                raw.face_count,
                len(vertices),
                len(indices),
            )

        return Mesh(vertices=vertices, indices=indices, flags=self.flags)

    def validate(self, raw: RawMesh) -> None:
        """Check finite coordinates and in-range indices."""
        finite = np.isfinite(raw.vertices).all(axis=1)
        if not finite.all():
            bad = int(np.argmin(finite))
            raise ValueRangeError(
                f"Vertex {bad} has non-finite coordinates {raw.vertices[bad].tolist()}",
                record=bad,
                value=raw.vertices[bad].tolist(),
            )

        if raw.face_count:
            out_of_range = raw.indices.max(axis=1) >= raw.vertex_count
            if out_of_range.any():
                face = int(np.argmax(out_of_range))
                raise IndexRangeError(
                    face,
                    f"references vertex {int(raw.indices[face].max())} "
                    f"but the mesh has {raw.vertex_count} vertices",
                    value=raw.indices[face].tolist(),
                )

    @staticmethod
    def _merge_duplicate_vertices(
        vertices: np.ndarray,
        indices: np.ndarray,
    ) -> Tuple[np.ndarray, np.ndarray]:
        # unique holds the first occurrence of each group, sorted by hash
        unique, inverse = trimesh.grouping.unique_rows(vertices)
        inverse = np.asarray(inverse).reshape(-1)

        order = np.argsort(unique)
        remap = np.empty(len(unique), dtype=np.int64)
        remap[order] = np.arange(len(unique))

        merged_vertices = vertices[unique[order]]
        merged_indices = remap[inverse][indices.astype(np.int64)]
        return merged_vertices, merged_indices.astype(np.uint32)

    @staticmethod
    def _fix_internal_edges(vertices: np.ndarray, indices: np.ndarray) -> np.ndarray:
        mesh = trimesh.Trimesh(vertices=vertices, faces=indices, process=False)
        trimesh.repair.fix_winding(mesh)
        return np.asarray(mesh.faces, dtype=np.uint32)


def finalize_mesh(raw: RawMesh, flags: PostProcessFlags = PostProcessFlags.NONE) -> Mesh:
    """Convenience function to finalize a raw mesh.

    Args:
        raw: Merged and scaled raw mesh
        flags: Post-processing flags to apply

    Returns:
        Finalized mesh
    """
    return MeshFinalizer(flags).finalize(raw)
