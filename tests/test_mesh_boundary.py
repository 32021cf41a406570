"""Tests for TetrahedralMeshOperations in shapevtk/geometry/mesh.py.

The bundled cube is split into four corner tetrahedra around one central
tetrahedron, so the boundary labelling is known without a reference run.
"""

import os

import numpy as np
import pytest

from shapevtk.geometry.mesh import TetrahedralMesh, TetrahedralMeshOperations, TriangleMesh
from shapevtk.geometry.mesh_io import read_tetrahedral_mesh
from shapevtk.geometry.operations import decimate

CUBE_TETRA = os.path.join(os.path.dirname(__file__), "data", "cube5_tetra.vtk")


@pytest.fixture(scope="module")
def cube():
    return read_tetrahedral_mesh(CUBE_TETRA)


class TestCubeBoundary:
    def test_every_point_on_boundary(self, cube):
        ops = cube.operations
        assert all(ops.point_is_on_boundary(pid) for pid in range(cube.number_of_points))

    def test_corner_tetrahedra_on_boundary(self, cube):
        ops = cube.operations
        assert [ops.tetrahedron_is_on_boundary(tid) for tid in range(5)] == [
            True, True, True, True, False,
        ]

    def test_boundary_triangles(self, cube):
        tris = cube.operations.boundary_triangles()
        # six cube faces, two triangles each
        assert tris.shape == (12, 3)
        # no boundary triangle uses all three central-only diagonals
        central = {1, 2, 4, 7}
        assert not any(set(t) <= central for t in tris.tolist())

    def test_extract_surface(self, cube):
        surface = cube.operations.extract_surface()
        assert isinstance(surface, TriangleMesh)
        assert surface.number_of_points == 8
        assert surface.number_of_triangles == 12

    def test_surface_decimation_at_full_count(self, cube):
        surface = cube.operations.extract_surface()
        out = decimate(surface, surface.number_of_points)
        assert out.number_of_points == 8
        np.testing.assert_allclose(
            np.sort(out.vertices, axis=0), np.sort(surface.vertices, axis=0)
        )

    def test_operations_cached(self, cube):
        assert cube.operations is cube.operations


class TestInteriorPoint:
    def _mesh(self):
        # two tetrahedra sharing the face (1, 2, 3)
        vertices = np.array([
            [0.0, 0.0, 0.0],
            [1.0, 0.0, 0.0],
            [0.0, 1.0, 0.0],
            [0.0, 0.0, 1.0],
            [1.0, 1.0, 1.0],
        ])
        tetrahedra = np.array([[0, 1, 2, 3], [4, 1, 3, 2]])
        return TetrahedralMesh(vertices, tetrahedra)

    def test_shared_face_not_on_boundary(self):
        ops = TetrahedralMeshOperations(self._mesh())
        tris = ops.boundary_triangles()
        assert tris.shape == (6, 3)
        assert sorted(map(sorted, tris.tolist())).count([1, 2, 3]) == 0
        assert ops.tetrahedron_is_on_boundary(0)
        assert ops.tetrahedron_is_on_boundary(1)

    def test_octahedron_center_is_interior(self):
        vertices = np.array([
            [0.0, 0.0, 0.0],
            [1.0, 0.0, 0.0], [-1.0, 0.0, 0.0],
            [0.0, 1.0, 0.0], [0.0, -1.0, 0.0],
            [0.0, 0.0, 1.0], [0.0, 0.0, -1.0],
        ])
        tetrahedra = []
        for x in (1, 2):
            for y in (3, 4):
                for z in (5, 6):
                    tetrahedra.append([0, x, y, z])
        mesh = TetrahedralMesh(vertices, tetrahedra)
        ops = mesh.operations
        assert not ops.point_is_on_boundary(0)
        assert all(ops.point_is_on_boundary(pid) for pid in range(1, 7))
        assert all(ops.tetrahedron_is_on_boundary(tid) for tid in range(8))
        assert ops.extract_surface().number_of_points == 6
