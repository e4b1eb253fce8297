"""Format-agnostic mesh processing for readtrimesh."""

from readtrimesh.processing.coercion import (
    PropertyKind,
    PropertyValue,
    to_f32,
    to_triangle,
    to_u32_checked,
)
from readtrimesh.processing.finalizer import MeshFinalizer, finalize_mesh
from readtrimesh.processing.merger import merge_meshes
from readtrimesh.processing.transform import apply_scale, is_identity_scale

__all__ = [
    "PropertyKind",
    "PropertyValue",
    "to_f32",
    "to_u32_checked",
    "to_triangle",
    "merge_meshes",
    "apply_scale",
    "is_identity_scale",
    "MeshFinalizer",
    "finalize_mesh",
]
