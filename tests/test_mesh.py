"""Unit tests for triangle meshes and OBJ loading.

Tests cover:
- Index validation
- Winding-order normals
- Inside/outside classification and edge cases
- Nearest triangle selection
- OBJ parsing (face formats, negative indices, polygons, errors)
"""

import io

import numpy as np
import pytest

from pathtracer.core.ray import make_ray, vec3
from pathtracer.geometry.mesh import TriangleMesh, hit_mesh, load_obj, parse_obj
from pathtracer.materials.material import Material


def unit_triangle():
    # counter-clockwise seen from +z
    return TriangleMesh(
        vertices=[(0, 0, 0), (1, 0, 0), (0, 1, 0)],
        indices=[0, 1, 2],
        material=Material(),
    )


class TestMeshConstruction:
    """Tests for TriangleMesh validation."""

    def test_triangle_count(self):
        """Test triangle count from the index list."""
        quad = TriangleMesh(
            vertices=[(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)],
            indices=[0, 1, 2, 0, 2, 3],
            material=Material(),
        )
        assert quad.triangle_count == 2
        a, b, c = quad.triangle(1)
        assert np.allclose(c, (0.0, 1.0, 0.0))

    def test_index_count_not_multiple_of_three(self):
        """Test a dangling index raises ValueError."""
        with pytest.raises(ValueError, match="multiple of 3"):
            TriangleMesh(vertices=[(0, 0, 0), (1, 0, 0), (0, 1, 0)], indices=[0, 1], material=Material())

    def test_index_out_of_range(self):
        """Test an index past the vertex list raises ValueError."""
        with pytest.raises(ValueError, match="out of range"):
            TriangleMesh(vertices=[(0, 0, 0), (1, 0, 0), (0, 1, 0)], indices=[0, 1, 3], material=Material())


class TestMeshIntersection:
    """Tests for ray-triangle intersection."""

    def test_hit_inside(self):
        """Test a ray through the triangle interior."""
        hit = hit_mesh(unit_triangle(), make_ray(vec3(0.2, 0.2, 1), vec3(0, 0, -1)))
        assert hit is not None
        assert abs(hit.t - 1.0) < 1e-9
        assert np.allclose(hit.point, (0.2, 0.2, 0.0))

    def test_normal_follows_winding(self):
        """Test counter-clockwise winding gives a +z normal."""
        hit = hit_mesh(unit_triangle(), make_ray(vec3(0.2, 0.2, 1), vec3(0, 0, -1)))
        assert np.allclose(hit.normal, (0.0, 0.0, 1.0))

        flipped = TriangleMesh(
            vertices=[(0, 0, 0), (1, 0, 0), (0, 1, 0)], indices=[0, 2, 1], material=Material()
        )
        hit = hit_mesh(flipped, make_ray(vec3(0.2, 0.2, 1), vec3(0, 0, -1)))
        assert np.allclose(hit.normal, (0.0, 0.0, -1.0))

    def test_hit_from_behind(self):
        """Test triangles are hit from both sides."""
        hit = hit_mesh(unit_triangle(), make_ray(vec3(0.2, 0.2, -1), vec3(0, 0, 1)))
        assert hit is not None
        assert abs(hit.t - 1.0) < 1e-9

    def test_miss_outside(self):
        """Test a ray through the plane but outside the triangle."""
        assert hit_mesh(unit_triangle(), make_ray(vec3(0.8, 0.8, 1), vec3(0, 0, -1))) is None

    def test_parallel_misses(self):
        """Test a ray parallel to the triangle plane."""
        assert hit_mesh(unit_triangle(), make_ray(vec3(-1, 0.2, 0), vec3(1, 0, 0))) is None

    def test_degenerate_triangle_never_hits(self):
        """Test a zero-area triangle never reports a hit."""
        mesh = TriangleMesh(vertices=[(0, 0, 0), (1, 0, 0), (2, 0, 0)], indices=[0, 1, 2], material=Material())
        assert hit_mesh(mesh, make_ray(vec3(0.5, 0, 1), vec3(0, 0, -1))) is None

    def test_nearest_triangle_wins(self):
        """Test the mesh reports its closest triangle."""
        mesh = TriangleMesh(
            vertices=[(0, 0, 0), (1, 0, 0), (0, 1, 0), (0, 0, 2), (1, 0, 2), (0, 1, 2)],
            indices=[0, 1, 2, 3, 4, 5],
            material=Material(),
        )
        hit = hit_mesh(mesh, make_ray(vec3(0.2, 0.2, 5), vec3(0, 0, -1)))
        assert abs(hit.t - 3.0) < 1e-9
        assert mesh.test(make_ray(vec3(0.2, 0.2, 1), vec3(0, 0, -1))).t == pytest.approx(1.0)


class TestObjLoading:
    """Tests for the OBJ reader."""

    def test_parse_vertices_and_faces(self):
        """Test v and f records with comments and blank lines."""
        vertices, indices = parse_obj(
            [
                "# a triangle",
                "v 0 0 0",
                "v 1 0 0",
                "",
                "v 0 1 0  # trailing comment",
                "vn 0 0 1",
                "f 1 2 3",
            ]
        )
        assert vertices == [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0)]
        assert indices == [0, 1, 2]

    def test_slash_tokens(self):
        """Test v/vt/vn and v//vn face tokens use the vertex index."""
        _, indices = parse_obj(["v 0 0 0", "v 1 0 0", "v 0 1 0", "f 1/4/7 2//8 3/9"])
        assert indices == [0, 1, 2]

    def test_negative_indices(self):
        """Test relative indices count back from the latest vertex."""
        _, indices = parse_obj(["v 0 0 0", "v 1 0 0", "v 0 1 0", "f -3 -2 -1"])
        assert indices == [0, 1, 2]

    def test_polygon_fan_triangulation(self):
        """Test a quad face becomes two triangles."""
        _, indices = parse_obj(["v 0 0 0", "v 1 0 0", "v 1 1 0", "v 0 1 0", "f 1 2 3 4"])
        assert indices == [0, 1, 2, 0, 2, 3]

    def test_malformed_vertex(self):
        """Test a short vertex record reports its line number."""
        with pytest.raises(ValueError, match="Line 2"):
            parse_obj(["v 0 0 0", "v 1 0"])

    def test_zero_index_rejected(self):
        """Test index 0 is invalid in OBJ."""
        with pytest.raises(ValueError, match="Line 4"):
            parse_obj(["v 0 0 0", "v 1 0 0", "v 0 1 0", "f 0 1 2"])

    def test_load_obj_from_stream(self):
        """Test loading a mesh from a text stream."""
        stream = io.StringIO("v 0 0 0\nv 1 0 0\nv 0 1 0\nf 1 2 3\n")
        material = Material(reflectance=(0.5, 0.5, 0.5))
        mesh = load_obj(stream, material)
        assert mesh.triangle_count == 1
        assert mesh.material is material

    def test_load_obj_from_path(self, tmp_path):
        """Test loading a mesh from a file path."""
        path = tmp_path / "quad.obj"
        path.write_text("v 0 0 0\nv 1 0 0\nv 1 1 0\nv 0 1 0\nf 1 2 3 4\n")
        mesh = load_obj(path, Material())
        assert mesh.triangle_count == 2
        assert mesh.vertices.shape == (4, 3)

    def test_load_obj_missing_vertex(self):
        """Test faces referencing missing vertices raise ValueError."""
        with pytest.raises(ValueError, match="out of range"):
            load_obj(["v 0 0 0", "f 1 2 3"], Material())
