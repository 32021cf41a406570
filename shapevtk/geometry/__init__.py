"""Geometry subpackage — domain objects, VTK/Nifti IO and mesh operations.

Architecture
------------
The subpackage has three layers:

**Layer 1 — domain objects** (pure numpy):

* :mod:`~shapevtk.geometry.image` — :class:`DiscreteImage`, a 2D/3D
  scalar image with origin, spacing and direction in LPS.
* :mod:`~shapevtk.geometry.mesh` — :class:`TriangleMesh`,
  :class:`TetrahedralMesh` and the tetrahedral boundary predicates.
* :mod:`~shapevtk.geometry.metrics` — procrustes and average distances.

**Layer 2 — conversion** (:mod:`~shapevtk.geometry.conversion`):

Domain objects to and from ``vtkStructuredPoints``, ``vtkPolyData`` and
``vtkUnstructuredGrid``.  Conversions back to domain objects deep-copy the
VTK arrays.

**Layer 3 — adapters** (one file per concern):

* :mod:`~shapevtk.geometry.scalar_type` — ``scalar_type_of_file``, the
  stored voxel type of an image file.
* :mod:`~shapevtk.geometry.image_io` — typed reads, reads with conversion
  and writes of VTK structured points; dispatches Nifti to
  :mod:`~shapevtk.geometry.nifti_io` (nibabel).
* :mod:`~shapevtk.geometry.mesh_io` — triangle and tetrahedral mesh files.
* :mod:`~shapevtk.geometry.operations` — quadric decimation.

Every adapter that creates VTK objects does so inside a
:class:`~shapevtk.utils.native.NativeScope`.
"""
from .conversion import (
    image_to_vtk_structured_points,
    tetrahedral_mesh_to_vtk_unstructured_grid,
    triangle_mesh_to_vtk_polydata,
    vtk_polydata_to_triangle_mesh,
    vtk_structured_points_to_image,
    vtk_unstructured_grid_to_tetrahedral_mesh,
)
from .image import DiscreteImage
from .image_io import (
    read_2d_scalar_image,
    read_2d_scalar_image_as_type,
    read_3d_scalar_image,
    read_3d_scalar_image_as_type,
    read_scalar_image,
    read_scalar_image_as_type,
    write_image,
    write_vtk,
)
from .mesh import TetrahedralMesh, TetrahedralMeshOperations, TriangleMesh
from .mesh_io import read_mesh, read_tetrahedral_mesh, write_mesh, write_tetrahedral_mesh
from .metrics import average_distance, procrustes_distance
from .nifti_io import read_nifti, write_nifti
from .operations import decimate
from .scalar_type import scalar_type_of_file

__all__ = [
    # Layer 1 — domain objects
    'DiscreteImage',
    'TriangleMesh',
    'TetrahedralMesh',
    'TetrahedralMeshOperations',
    'average_distance',
    'procrustes_distance',
    # Layer 2 — conversion
    'image_to_vtk_structured_points',
    'vtk_structured_points_to_image',
    'triangle_mesh_to_vtk_polydata',
    'vtk_polydata_to_triangle_mesh',
    'tetrahedral_mesh_to_vtk_unstructured_grid',
    'vtk_unstructured_grid_to_tetrahedral_mesh',
    # Layer 3 — scalar types
    'scalar_type_of_file',
    # Layer 3 — image IO
    'read_scalar_image',
    'read_2d_scalar_image',
    'read_3d_scalar_image',
    'read_scalar_image_as_type',
    'read_2d_scalar_image_as_type',
    'read_3d_scalar_image_as_type',
    'write_vtk',
    'write_image',
    'read_nifti',
    'write_nifti',
    # Layer 3 — meshes
    'read_mesh',
    'write_mesh',
    'read_tetrahedral_mesh',
    'write_tetrahedral_mesh',
    'decimate',
]
