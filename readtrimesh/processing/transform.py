"""Uniform scaling of raw meshes."""

import logging

import numpy as np

from readtrimesh.core.mesh import RawMesh

logger = logging.getLogger(__name__)

SCALE_EPSILON = float(np.finfo(np.float32).eps)


def is_identity_scale(scale: float) -> bool:
    """True when ``scale`` is 1.0 within float32 epsilon."""
    return abs(scale - 1.0) <= SCALE_EPSILON


def apply_scale(mesh: RawMesh, scale: float) -> RawMesh:
    """Multiply every vertex coordinate by ``scale``.

    Args:
        mesh: Mesh to scale, left untouched
        scale: Uniform scale factor

    Returns:
        ``mesh`` itself for an identity scale, otherwise a new mesh with a
        scaled vertex buffer sharing the index buffer
    """
    if is_identity_scale(scale):
        return mesh

    logger.debug("Scaling %d vertices by %s", mesh.vertex_count, scale)
    return RawMesh(
        vertices=mesh.vertices * np.float32(scale),
        indices=mesh.indices,
    )
