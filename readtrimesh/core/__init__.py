"""Core functionality for readtrimesh."""

from readtrimesh.core.exceptions import (
    ConfigurationError,
    EmptyMeshError,
    IndexRangeError,
    MeshIOError,
    MeshParseError,
    MissingDataError,
    ReadTrimeshError,
    TypeMismatchError,
    UnsupportedFormatError,
    ValueRangeError,
)
from readtrimesh.core.mesh import Mesh, PostProcessFlags, RawMesh
from readtrimesh.core.config import (
    Config,
    LoaderConfig,
    LoggingConfig,
    get_default_config,
    load_config,
)
from readtrimesh.core.loader import MeshLoader, load_mesh, load_mesh_with_flags

__all__ = [
    # Config classes
    "Config",
    "LoaderConfig",
    "LoggingConfig",
    # Config functions
    "get_default_config",
    "load_config",
    # Mesh types
    "Mesh",
    "RawMesh",
    "PostProcessFlags",
    # Loader
    "MeshLoader",
    "load_mesh",
    "load_mesh_with_flags",
    # Exceptions
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
