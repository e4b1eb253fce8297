"""Scene-model extraction for Wavefront OBJ files."""

import logging
from dataclasses import dataclass
from typing import BinaryIO, List, Sequence

import numpy as np
import trimesh

from readtrimesh.core.mesh import RawMesh
from readtrimesh.formats.base import (
    FormatExtractor,
    MeshFormat,
    checked_index_rows,
    group_triples,
)

logger = logging.getLogger(__name__)


@dataclass
class SceneModel:
    """One model of an OBJ document.

    ``positions`` and ``indices`` are flat; indices address the
    document-wide vertex list, as OBJ ``f`` lines do.
    """

    name: str
    positions: np.ndarray
    indices: np.ndarray


class ObjExtractor(FormatExtractor):
    """Flattens every model of an OBJ document into one raw mesh."""

    format = MeshFormat.OBJ

    def parse(self, stream: BinaryIO) -> List[SceneModel]:
        scene = trimesh.load(
            stream,
            file_type="obj",
            force="scene",
            process=False,
            skip_materials=True,
            maintain_order=True,
        )

        # trimesh gives every geometry its own vertex space
        models = []
        base = 0
        for name, geometry in scene.geometry.items():
            if not isinstance(geometry, trimesh.Trimesh):
                logger.debug("Skipping non-mesh geometry %s", name)
                continue
            faces = np.asarray(geometry.faces, dtype=np.int64)
            models.append(
                SceneModel(
                    name=name,
                    positions=np.asarray(geometry.vertices).reshape(-1),
                    indices=(faces + base).reshape(-1),
                )
            )
            base += len(geometry.vertices)
        return models

    def extract(self, document: Sequence[SceneModel]) -> List[RawMesh]:
        vertex_blocks = [np.zeros((0, 3), dtype=np.float32)]
        index_blocks = [np.zeros((0, 3), dtype=np.int64)]

        for model in document:
            vertex_blocks.append(
                group_triples(model.positions, np.float32, f"coordinates in model '{model.name}'")
            )
            index_blocks.append(
                group_triples(model.indices, np.int64, f"indices in model '{model.name}'")
            )

        logger.debug("Flattened %d OBJ models", len(document))
        return [
            RawMesh(
                vertices=np.concatenate(vertex_blocks),
                indices=checked_index_rows(np.concatenate(index_blocks)),
            )
        ]
