"""Mesh loading pipeline: format dispatch, scaling and finalization."""

import math
import numbers
from pathlib import Path
from typing import Any, Dict, Optional, Union

import numpy as np

from readtrimesh.core.config import LoaderConfig
from readtrimesh.core.exceptions import ConfigurationError, ReadTrimeshError
from readtrimesh.core.mesh import Mesh, PostProcessFlags
from readtrimesh.formats import ExtractorFactory, MeshFormat, detect_format
from readtrimesh.processing import apply_scale, finalize_mesh
from readtrimesh.utils.logging import StructuredLogger, get_logger

logger = get_logger(__name__)


class MeshLoader:
    """Loads mesh files of any supported format into a ``Mesh``.

    The loader holds only its configuration; every ``load`` call is
    independent, so one loader may be shared between threads.
    """

    def __init__(self, config: Optional[LoaderConfig] = None):
        """Initialize mesh loader.

        Args:
            config: Loader configuration supplying default scale and flags
        """
        self.config = config or LoaderConfig()

    def load(
        self,
        file_path: Union[str, Path],
        scale: Optional[float] = None,
        flags: Optional[PostProcessFlags] = None,
    ) -> Mesh:
        """Load a mesh file.

        Args:
            file_path: Path to ``.stl``, ``.ply``, ``.obj`` or ``.dae`` file
            scale: Uniform scale factor (config default if None)
            flags: Post-processing flags (config default if None)

        Returns:
            Finalized mesh

        Raises:
            ConfigurationError: If the scale is not a positive finite number
            UnsupportedFormatError: If the extension is not recognized
            ReadTrimeshError: Any failure while reading or converting the file,
                with ``path`` set to ``file_path``
        """
        file_path = Path(file_path)
        scale = self.config.scale if scale is None else scale
        flags = self.config.post_process_flags() if flags is None else flags

        try:
            self._validate_scale(scale)
            mesh_format = detect_format(file_path)
            with StructuredLogger(
                logger, "mesh_load", path=str(file_path), format=mesh_format.value
            ) as op:
                mesh = self._run(file_path, mesh_format, scale, flags)
                op.update_context(vertices=mesh.vertex_count, faces=mesh.face_count)
            return mesh
        except ReadTrimeshError as e:
            e.with_path(file_path)
            raise

    def _run(
        self,
        file_path: Path,
        mesh_format: MeshFormat,
        scale: float,
        flags: PostProcessFlags,
    ) -> Mesh:
        extractor = ExtractorFactory.create(mesh_format)
        raw = extractor.load(file_path)
        raw = apply_scale(raw, scale)
        return finalize_mesh(raw, flags)

    @staticmethod
    def _validate_scale(scale: float) -> None:
        if not isinstance(scale, numbers.Real) or not math.isfinite(scale) or scale <= 0:
            valid = False
        else:
            # vertices are scaled in float32
            with np.errstate(over="ignore", under="ignore"):
                narrowed = np.float32(scale)
            valid = bool(np.isfinite(narrowed) and narrowed > 0)
        if not valid:
            raise ConfigurationError(
                f"Scale must be a positive finite number, got {scale!r}",
                details={"scale": scale},
            )

    def get_mesh_info(self, mesh: Mesh) -> Dict[str, Any]:
        """Get information about the mesh.

        Args:
            mesh: Loaded mesh

        Returns:
            Dictionary with mesh information
        """
        bounds = mesh.bounds
        return {
            "vertices": mesh.vertex_count,
            "faces": mesh.face_count,
            "flags": mesh.flags.names(),
            "bounds": {
                "min": bounds[0].tolist() if bounds is not None else None,
                "max": bounds[1].tolist() if bounds is not None else None,
            },
            "extents": (bounds[1] - bounds[0]).tolist() if bounds is not None else None,
        }


def load_mesh(file_path: Union[str, Path], scale: float = 1.0) -> Mesh:
    """Load a mesh with the default post-processing flags.

    Applies ``FIX_INTERNAL_EDGES`` and ``MERGE_DUPLICATE_VERTICES``, which
    may change the vertex and face counts. Use ``load_mesh_with_flags``
    with ``PostProcessFlags.NONE`` to get the file content unchanged.

    Args:
        file_path: Path to the mesh file
        scale: Uniform scale factor, e.g. 0.001 for a file in millimeters

    Returns:
        Loaded and scaled mesh

    Example:
        >>> mesh = load_mesh("part.ply", scale=0.001)  # doctest: +SKIP
        >>> mesh.vertex_count  # doctest: +SKIP
        1204
    """
    return load_mesh_with_flags(file_path, scale, PostProcessFlags.default())


def load_mesh_with_flags(
    file_path: Union[str, Path],
    scale: float,
    flags: PostProcessFlags,
) -> Mesh:
    """Load a mesh with explicit post-processing flags.

    Args:
        file_path: Path to the mesh file
        scale: Uniform scale factor
        flags: Post-processing flags, ``PostProcessFlags.NONE`` for none

    Returns:
        Loaded and scaled mesh
    """
    return MeshLoader().load(file_path, scale=scale, flags=flags)
