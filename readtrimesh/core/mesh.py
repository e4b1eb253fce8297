"""Mesh containers shared by every stage of the loading pipeline."""

from dataclasses import dataclass, field
from enum import Flag, auto
from typing import Iterable, Optional

import numpy as np
import trimesh


class PostProcessFlags(Flag):
    """Topology normalization applied when a mesh is finalized."""

    NONE = 0
    FIX_INTERNAL_EDGES = auto()
    MERGE_DUPLICATE_VERTICES = auto()

    @classmethod
    def default(cls) -> "PostProcessFlags":
        """Flags used by ``load_mesh``."""
        return cls.FIX_INTERNAL_EDGES | cls.MERGE_DUPLICATE_VERTICES

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "PostProcessFlags":
        """Build a flag set from lower-case member names.

        Args:
            names: Names such as ``"merge_duplicate_vertices"``

        Returns:
            Combined flag set (``NONE`` for an empty iterable)

        Raises:
            ValueError: If a name is unknown
        """
        flags = cls.NONE
        for name in names:
            try:
                flags |= cls[name.upper()]
            except KeyError:
                raise ValueError(f"Unknown post-processing flag: {name}") from None
        return flags

    def names(self) -> list[str]:
        """Lower-case names of the members set in this flag."""
        return [
            member.name.lower()
            for member in type(self)
            if member.value and member in self
        ]


def _vertex_array(vertices) -> np.ndarray:
    return np.asarray(vertices, dtype=np.float32).reshape((-1, 3))


def _index_array(indices) -> np.ndarray:
    return np.asarray(indices, dtype=np.uint32).reshape((-1, 3))


def _same_buffers(a, b) -> bool:
    return np.array_equal(a.vertices, b.vertices) and np.array_equal(a.indices, b.indices)


@dataclass(eq=False)
class RawMesh:
    """Vertices and triangles as produced by a format extractor.

    Two raw meshes are equal when both buffers hold the same values.
    """

    vertices: np.ndarray = field(default_factory=lambda: np.zeros((0, 3), dtype=np.float32))
    indices: np.ndarray = field(default_factory=lambda: np.zeros((0, 3), dtype=np.uint32))

    def __post_init__(self):
        self.vertices = _vertex_array(self.vertices)
        self.indices = _index_array(self.indices)

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def face_count(self) -> int:
        return len(self.indices)

    @property
    def is_empty(self) -> bool:
        return self.vertex_count == 0 and self.face_count == 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RawMesh):
            return NotImplemented
        return _same_buffers(self, other)


@dataclass(frozen=True, eq=False)
class Mesh:
    """Finalized triangle mesh returned by the loaders.

    Both buffers are read-only. ``flags`` is the exact flag set the mesh
    was finalized with; when it is not ``NONE`` the counts may differ from
    what the file itself contains.

    Meshes compare equal when their buffers and flags match. They are not
    hashable since the buffers are arrays.
    """

    vertices: np.ndarray
    indices: np.ndarray
    flags: PostProcessFlags = PostProcessFlags.NONE

    def __post_init__(self):
        vertices = _vertex_array(self.vertices).copy()
        indices = _index_array(self.indices).copy()
        vertices.setflags(write=False)
        indices.setflags(write=False)
        object.__setattr__(self, "vertices", vertices)
        object.__setattr__(self, "indices", indices)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mesh):
            return NotImplemented
        return self.flags == other.flags and _same_buffers(self, other)

    __hash__ = None  # type: ignore[assignment]

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def face_count(self) -> int:
        return len(self.indices)

    @property
    def bounds(self) -> Optional[np.ndarray]:
        """Axis-aligned bounds as ``[[min], [max]]``, ``None`` when empty."""
        if self.vertex_count == 0:
            return None
        return np.array([self.vertices.min(axis=0), self.vertices.max(axis=0)])

    def to_trimesh(self) -> trimesh.Trimesh:
        """Copy into a ``trimesh.Trimesh`` without any further processing."""
        return trimesh.Trimesh(
            vertices=np.array(self.vertices, dtype=np.float64),
            faces=np.array(self.indices, dtype=np.int64),
            process=False,
        )
