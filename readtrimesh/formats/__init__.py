"""Format extractors for readtrimesh."""

from readtrimesh.formats.base import (
    FormatExtractor,
    MeshFormat,
    checked_index_rows,
    group_triples,
)
from readtrimesh.formats.collada import ColladaDocument, ColladaExtractor, read_collada
from readtrimesh.formats.factory import ExtractorFactory, detect_format
from readtrimesh.formats.obj import ObjExtractor, SceneModel
from readtrimesh.formats.ply import PlyExtractor, element_records
from readtrimesh.formats.stl import StlExtractor, StlSolid, TriangleSoupDocument

__all__ = [
    "FormatExtractor",
    "MeshFormat",
    "ExtractorFactory",
    "detect_format",
    "StlExtractor",
    "PlyExtractor",
    "ObjExtractor",
    "ColladaExtractor",
    "TriangleSoupDocument",
    "StlSolid",
    "SceneModel",
    "ColladaDocument",
    "read_collada",
    "element_records",
    "checked_index_rows",
    "group_triples",
]
