"""Unit tests for merging, scaling and finalization."""

import numpy as np
import pytest

from readtrimesh.core.exceptions import IndexRangeError, ValueRangeError
from readtrimesh.core.mesh import Mesh, PostProcessFlags, RawMesh
from readtrimesh.processing import (
    MeshFinalizer,
    apply_scale,
    finalize_mesh,
    is_identity_scale,
    merge_meshes,
)
from readtrimesh.processing.coercion import U32_MAX


def _triangle(offset: float = 0.0) -> RawMesh:
    return RawMesh(
        vertices=np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0]], dtype=np.float32) + offset,
        indices=np.array([[0, 1, 2]], dtype=np.uint32),
    )


class TestMergeMeshes:
    """Test sub-mesh merging."""

    def test_single_submesh_returned_as_is(self, triangle_raw_mesh):
        assert merge_meshes([triangle_raw_mesh]) is triangle_raw_mesh

    def test_two_submeshes_rebased(self):
        merged = merge_meshes([_triangle(), _triangle(5.0)])

        assert merged.vertex_count == 6
        assert merged.face_count == 2
        np.testing.assert_array_equal(merged.indices, [[0, 1, 2], [3, 4, 5]])
        np.testing.assert_array_equal(merged.vertices[3], [5, 5, 5])

    def test_rebasing_skips_empty_submesh(self):
        empty = RawMesh()
        merged = merge_meshes([_triangle(), empty, _triangle()])

        np.testing.assert_array_equal(merged.indices, [[0, 1, 2], [3, 4, 5]])

    def test_no_submeshes(self):
        merged = merge_meshes([])

        assert merged.is_empty
        assert merged.vertices.shape == (0, 3)
        assert merged.indices.shape == (0, 3)

    def test_merged_index_overflow(self):
        # sizes are faked: only the index values matter for the overflow check
        big = RawMesh(indices=np.array([[0, 1, U32_MAX]], dtype=np.uint32))
        big.vertices = np.zeros((2, 3), dtype=np.float32)

        with pytest.raises(IndexRangeError):
            merge_meshes([_triangle(), big])


class TestScale:
    """Test uniform scaling."""

    def test_identity_scale_returns_input(self, triangle_raw_mesh):
        assert apply_scale(triangle_raw_mesh, 1.0) is triangle_raw_mesh
        assert is_identity_scale(1.0 + 1e-9)

    def test_scale_is_linear(self, triangle_raw_mesh):
        scaled = apply_scale(triangle_raw_mesh, 0.001)

        assert scaled is not triangle_raw_mesh
        np.testing.assert_allclose(
            scaled.vertices, triangle_raw_mesh.vertices * np.float32(0.001), rtol=1e-6
        )
        np.testing.assert_array_equal(scaled.indices, triangle_raw_mesh.indices)

    def test_input_untouched(self, triangle_raw_mesh):
        before = triangle_raw_mesh.vertices.copy()
        apply_scale(triangle_raw_mesh, 10.0)

        np.testing.assert_array_equal(triangle_raw_mesh.vertices, before)


class TestFinalizer:
    """Test mesh finalization and post-processing flags."""

    def test_no_flags_keeps_content(self, triangle_raw_mesh):
        mesh = finalize_mesh(triangle_raw_mesh, PostProcessFlags.NONE)

        assert isinstance(mesh, Mesh)
        assert mesh.flags == PostProcessFlags.NONE
        np.testing.assert_array_equal(mesh.vertices, triangle_raw_mesh.vertices)
        np.testing.assert_array_equal(mesh.indices, triangle_raw_mesh.indices)

    def test_buffers_read_only(self, triangle_raw_mesh):
        mesh = finalize_mesh(triangle_raw_mesh)

        with pytest.raises(ValueError):
            mesh.vertices[0, 0] = 1.0

    def test_merge_duplicate_vertices(self):
        # two triangles sharing an edge, written as a triangle soup
        soup = RawMesh(
            vertices=np.array(
                [[0, 0, 0], [1, 0, 0], [0, 1, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0]],
                dtype=np.float32,
            ),
            indices=np.array([[0, 1, 2], [3, 4, 5]], dtype=np.uint32),
        )

        mesh = finalize_mesh(soup, PostProcessFlags.MERGE_DUPLICATE_VERTICES)

        assert mesh.vertex_count == 4
        np.testing.assert_array_equal(
            mesh.vertices, [[0, 0, 0], [1, 0, 0], [0, 1, 0], [1, 1, 0]]
        )
        np.testing.assert_array_equal(mesh.indices, [[0, 1, 2], [1, 3, 2]])

    def test_fix_internal_edges_makes_winding_consistent(self):
        raw = RawMesh(
            vertices=np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0], [1, 1, 0]], dtype=np.float32),
            indices=np.array([[0, 1, 2], [1, 2, 3]], dtype=np.uint32),
        )
        assert not finalize_mesh(raw).to_trimesh().is_winding_consistent

        mesh = finalize_mesh(raw, PostProcessFlags.FIX_INTERNAL_EDGES)

        assert mesh.flags == PostProcessFlags.FIX_INTERNAL_EDGES
        assert mesh.to_trimesh().is_winding_consistent

    def test_default_flags_keep_single_triangle(self, triangle_raw_mesh):
        mesh = finalize_mesh(triangle_raw_mesh, PostProcessFlags.default())

        assert mesh.flags == PostProcessFlags.default()
        np.testing.assert_array_equal(mesh.vertices, triangle_raw_mesh.vertices)
        np.testing.assert_array_equal(mesh.indices, [[0, 1, 2]])

    def test_empty_mesh(self):
        mesh = MeshFinalizer(PostProcessFlags.default()).finalize(RawMesh())

        assert mesh.vertex_count == 0
        assert mesh.face_count == 0
        assert mesh.bounds is None

    def test_dangling_index(self):
        raw = RawMesh(
            vertices=np.zeros((3, 3), dtype=np.float32),
            indices=np.array([[0, 1, 3]], dtype=np.uint32),
        )

        with pytest.raises(IndexRangeError) as exc_info:
            finalize_mesh(raw)

        assert exc_info.value.face == 0

    def test_non_finite_vertex(self):
        raw = RawMesh(vertices=np.array([[0, np.nan, 0]], dtype=np.float32))

        with pytest.raises(ValueRangeError) as exc_info:
            finalize_mesh(raw)

        assert exc_info.value.record == 0


class TestPostProcessFlags:
    """Test flag helpers."""

    def test_default(self):
        flags = PostProcessFlags.default()

        assert PostProcessFlags.FIX_INTERNAL_EDGES in flags
        assert PostProcessFlags.MERGE_DUPLICATE_VERTICES in flags

    def test_names_round_trip(self):
        flags = PostProcessFlags.from_names(["merge_duplicate_vertices"])

        assert flags == PostProcessFlags.MERGE_DUPLICATE_VERTICES
        assert flags.names() == ["merge_duplicate_vertices"]
        assert PostProcessFlags.NONE.names() == []

    def test_unknown_name(self):
        with pytest.raises(ValueError):
            PostProcessFlags.from_names(["smooth_normals"])


class TestMeshEquality:
    """Meshes compare by value."""

    def test_equal_meshes(self, sample_vertices, sample_indices):
        first = Mesh(sample_vertices, sample_indices, PostProcessFlags.default())
        second = Mesh(sample_vertices.copy(), sample_indices.copy(), PostProcessFlags.default())

        assert first == second
        assert not first != second

    def test_flags_differ(self, sample_vertices, sample_indices):
        first = Mesh(sample_vertices, sample_indices)
        second = Mesh(sample_vertices, sample_indices, PostProcessFlags.MERGE_DUPLICATE_VERTICES)

        assert first != second

    def test_vertices_differ(self, sample_vertices, sample_indices):
        moved = sample_vertices.copy()
        moved[0, 0] += 1.0

        assert Mesh(sample_vertices, sample_indices) != Mesh(moved, sample_indices)

    def test_shapes_differ(self, sample_vertices, sample_indices):
        assert Mesh(sample_vertices, sample_indices) != Mesh(sample_vertices, [])

    def test_not_hashable(self, sample_vertices, sample_indices):
        with pytest.raises(TypeError):
            hash(Mesh(sample_vertices, sample_indices))

    def test_other_types(self, sample_vertices, sample_indices):
        mesh = Mesh(sample_vertices, sample_indices)

        assert mesh != RawMesh(sample_vertices, sample_indices)
        assert mesh != "mesh"

    def test_raw_mesh_equality(self, triangle_raw_mesh, sample_vertices, sample_indices):
        assert triangle_raw_mesh == RawMesh(sample_vertices.copy(), sample_indices.copy())
        assert triangle_raw_mesh != RawMesh()
