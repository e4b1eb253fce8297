"""readtrimesh - Load STL, PLY, OBJ and COLLADA files as triangle meshes."""

from readtrimesh.core import (
    ConfigurationError,
    EmptyMeshError,
    IndexRangeError,
    Mesh,
    MeshIOError,
    MeshLoader,
    MeshParseError,
    MissingDataError,
    PostProcessFlags,
    RawMesh,
    ReadTrimeshError,
    TypeMismatchError,
    UnsupportedFormatError,
    ValueRangeError,
    load_mesh,
    load_mesh_with_flags,
)
from readtrimesh.formats import MeshFormat

__version__ = "0.1.0"

__all__ = [
    "load_mesh",
    "load_mesh_with_flags",
    "MeshLoader",
    "Mesh",
    "RawMesh",
    "PostProcessFlags",
    "MeshFormat",
    "ReadTrimeshError",
    "ConfigurationError",
    "MeshIOError",
    "MeshParseError",
    "UnsupportedFormatError",
    "MissingDataError",
    "TypeMismatchError",
    "ValueRangeError",
    "IndexRangeError",
    "EmptyMeshError",
]
