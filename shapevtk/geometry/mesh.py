"""Triangle and tetrahedral meshes.

Both mesh types are plain ``(vertices, cells)`` containers in the same
array conventions the readers use: ``vertices`` is a float array of shape
``(N, 3)``, cells are integer index arrays of shape ``(M, 3)`` for
triangles and ``(M, 4)`` for tetrahedra.
"""

from functools import cached_property

import numpy as np

# Local vertex indices of the four faces of a tetrahedron, each ordered so
# that the face normal points away from the opposite vertex for a
# positively oriented tetrahedron.
_TET_FACES = np.array([[0, 2, 1], [0, 1, 3], [0, 3, 2], [1, 2, 3]])


def _validate(vertices, cells, k, name):
    vertices = np.asarray(vertices, dtype=np.float64)
    cells = np.asarray(cells, dtype=np.int64)
    if vertices.ndim != 2 or vertices.shape[1] != 3:
        raise ValueError(f"vertices must be an array of shape (N, 3), got shape {vertices.shape}.")
    if cells.size == 0:
        cells = cells.reshape(0, k)
    if cells.ndim != 2 or cells.shape[1] != k:
        raise ValueError(f"{name} must be an array of shape (M, {k}), got shape {cells.shape}.")
    n_verts = vertices.shape[0]
    if cells.size > 0 and (int(cells.max()) >= n_verts or int(cells.min()) < 0):
        raise ValueError(
            f"{name} indices out of range [0, {n_verts}): "
            f"min={int(cells.min())}, max={int(cells.max())}."
        )
    return vertices, cells


class TriangleMesh:
    """A triangulated surface.

    Parameters
    ----------
    vertices : array_like, shape (N, 3)
    triangles : array_like, shape (M, 3)

    Raises
    ------
    ValueError
        If the shapes are wrong or triangle indices are out of range.
    """

    def __init__(self, vertices, triangles):
        self.vertices, self.triangles = _validate(vertices, triangles, 3, "triangles")

    @property
    def number_of_points(self) -> int:
        return self.vertices.shape[0]

    @property
    def number_of_triangles(self) -> int:
        return self.triangles.shape[0]

    def transform(self, fn) -> "TriangleMesh":
        """Return a mesh with *fn* applied to the ``(N, 3)`` vertex array."""
        return TriangleMesh(fn(self.vertices.copy()), self.triangles)

    def __repr__(self):
        return f"TriangleMesh(points={self.number_of_points}, triangles={self.number_of_triangles})"


class TetrahedralMesh:
    """A volumetric mesh made of tetrahedra.

    Parameters
    ----------
    vertices : array_like, shape (N, 3)
    tetrahedra : array_like, shape (M, 4)
    """

    def __init__(self, vertices, tetrahedra):
        self.vertices, self.tetrahedra = _validate(vertices, tetrahedra, 4, "tetrahedra")

    @property
    def number_of_points(self) -> int:
        return self.vertices.shape[0]

    @property
    def number_of_tetrahedra(self) -> int:
        return self.tetrahedra.shape[0]

    def transform(self, fn) -> "TetrahedralMesh":
        """Return a mesh with *fn* applied to the ``(N, 3)`` vertex array."""
        return TetrahedralMesh(fn(self.vertices.copy()), self.tetrahedra)

    @cached_property
    def operations(self) -> "TetrahedralMeshOperations":
        return TetrahedralMeshOperations(self)

    def __repr__(self):
        return f"TetrahedralMesh(points={self.number_of_points}, tetrahedra={self.number_of_tetrahedra})"


class TetrahedralMeshOperations:
    """Boundary queries on a :class:`TetrahedralMesh`.

    A triangle is on the boundary when it belongs to exactly one
    tetrahedron. A point is on the boundary when it is a corner of a
    boundary triangle, and a tetrahedron when one of its four faces is a
    boundary triangle.
    """

    def __init__(self, mesh: TetrahedralMesh):
        self.mesh = mesh
        faces = mesh.tetrahedra[:, _TET_FACES]              # (M, 4, 3)
        keys = np.sort(faces, axis=2).reshape(-1, 3)
        _, inverse, counts = np.unique(keys, axis=0, return_inverse=True, return_counts=True)
        on_boundary = (counts[inverse.reshape(-1)] == 1).reshape(-1, 4)
        self._face_on_boundary = on_boundary
        self._tet_on_boundary = on_boundary.any(axis=1)
        self._boundary_faces = faces[on_boundary]
        self._point_on_boundary = np.zeros(mesh.number_of_points, dtype=bool)
        self._point_on_boundary[self._boundary_faces.ravel()] = True

    def point_is_on_boundary(self, pid) -> bool:
        return bool(self._point_on_boundary[pid])

    def tetrahedron_is_on_boundary(self, tid) -> bool:
        return bool(self._tet_on_boundary[tid])

    def boundary_triangles(self) -> np.ndarray:
        """Boundary faces as ``(K, 3)`` vertex indices, oriented as in their tetrahedron."""
        return self._boundary_faces.copy()

    def extract_surface(self) -> TriangleMesh:
        """Return the boundary surface as a compact :class:`TriangleMesh`.

        Only boundary points are kept; triangle indices are renumbered.
        """
        used = np.flatnonzero(self._point_on_boundary)
        remap = np.full(self.mesh.number_of_points, -1, dtype=np.int64)
        remap[used] = np.arange(used.size)
        return TriangleMesh(self.mesh.vertices[used], remap[self._boundary_faces])
