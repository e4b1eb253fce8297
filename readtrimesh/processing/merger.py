"""Merging of independent sub-meshes into one vertex space."""

import logging
from typing import Sequence

import numpy as np

from readtrimesh.core.exceptions import IndexRangeError
from readtrimesh.core.mesh import RawMesh
from readtrimesh.processing.coercion import U32_MAX

logger = logging.getLogger(__name__)


def merge_meshes(submeshes: Sequence[RawMesh]) -> RawMesh:
    """Concatenate sub-meshes, rebasing each one's indices.

    The indices of sub-mesh ``i`` are shifted by the number of vertices in
    sub-meshes ``0 .. i-1``, so no sub-mesh references another's vertices.

    Args:
        submeshes: Sub-meshes in document order

    Returns:
        The single input unchanged when there is exactly one sub-mesh,
        otherwise a new merged mesh

    Raises:
        IndexRangeError: If a rebased index no longer fits u32
    """
    if len(submeshes) == 1:
        logger.debug("Found single mesh, nothing to merge")
        return submeshes[0]

    vertex_blocks = []
    index_blocks = []
    offset = 0  # python int, never wraps
    face_base = 0

    for submesh in submeshes:
        if submesh.face_count:
            highest = int(submesh.indices.max()) + offset
            if highest > U32_MAX:
                raise IndexRangeError(
                    face_base + int(np.argmax(submesh.indices.max(axis=1))),
                    f"merged index {highest} cannot be represented as u32",
                    value=highest,
                )
            rebased = submesh.indices.astype(np.int64) + offset
            index_blocks.append(rebased.astype(np.uint32))

        vertex_blocks.append(submesh.vertices)
        offset += submesh.vertex_count
        face_base += submesh.face_count

    logger.debug(
        "Merged %d sub-meshes into %d vertices and %d faces",
        len(submeshes),
        offset,
        face_base,
    )

    merged = RawMesh()
    if vertex_blocks:
        merged.vertices = np.concatenate(vertex_blocks)
    if index_blocks:
        merged.indices = np.concatenate(index_blocks)
    return merged
