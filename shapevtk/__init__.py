"""shapevtk: scalar images and meshes between numpy, VTK and Nifti files.

shapevtk moves 2D/3D scalar images and triangle/tetrahedral meshes between
in-memory numpy objects and the VTK and Nifti file formats. It includes:

- **Typed image IO**: ``read_3d_scalar_image`` / ``read_2d_scalar_image``
  require a voxel type, the ``*_as_type`` variants convert on the fly
- **Scalar type resolution**: ``scalar_type_of_file`` reports the stored
  voxel type of a ``.vtk``, ``.nii`` or ``.nia`` file
- **Mesh IO and operations**: VTK/VTP/STL/PLY triangle meshes, VTK/VTU
  tetrahedral meshes, quadric decimation and tetrahedral boundary queries
- **CLI tools**: ``shapevtk-convert``, ``shapevtk-decimate`` and
  ``shapevtk-sys_info``

Reading an image whatever it stores, as 32-bit floats::

    from shapevtk import ScalarDataType, read_3d_scalar_image_as_type, write_vtk

    img = read_3d_scalar_image_as_type('t1.nii', ScalarDataType.FLOAT)
    write_vtk(img, 't1.vtk')

Decimating a surface::

    from shapevtk import decimate, read_mesh, write_mesh

    mesh = read_mesh('lh.vtk')
    write_mesh(decimate(mesh, 5000), 'lh_5k.vtk')

VTK warnings are shown by default; set ``SHAPEVTK_VTK_WARNINGS=0`` or call
:func:`set_vtk_warnings` to mute them.
"""

from ._config import set_vtk_warnings, sys_info, vtk_warnings_from_env
from ._version import __version__  # noqa: F401
from .geometry import (
    DiscreteImage,
    TetrahedralMesh,
    TetrahedralMeshOperations,
    TriangleMesh,
    decimate,
    procrustes_distance,
    read_2d_scalar_image,
    read_2d_scalar_image_as_type,
    read_3d_scalar_image,
    read_3d_scalar_image_as_type,
    read_mesh,
    read_nifti,
    read_scalar_image,
    read_scalar_image_as_type,
    read_tetrahedral_mesh,
    scalar_type_of_file,
    write_image,
    write_mesh,
    write_nifti,
    write_tetrahedral_mesh,
    write_vtk,
)
from .utils.errors import (
    NativeIOError,
    NoConversionError,
    ScalarTypeMismatchError,
    ShapeVtkError,
    UnknownScalarTypeError,
    UnsupportedFileTypeError,
)
from .utils.types import InterpolationMode, ScalarDataType, convert_values

_vtk_warnings = vtk_warnings_from_env()
if _vtk_warnings is not None:
    set_vtk_warnings(_vtk_warnings)

# Export list
__all__ = [
    "__version__",
    "sys_info",
    "set_vtk_warnings",
    # types
    "ScalarDataType",
    "InterpolationMode",
    "convert_values",
    # domain objects
    "DiscreteImage",
    "TriangleMesh",
    "TetrahedralMesh",
    "TetrahedralMeshOperations",
    # image IO
    "scalar_type_of_file",
    "read_scalar_image",
    "read_2d_scalar_image",
    "read_3d_scalar_image",
    "read_scalar_image_as_type",
    "read_2d_scalar_image_as_type",
    "read_3d_scalar_image_as_type",
    "write_vtk",
    "write_nifti",
    "read_nifti",
    "write_image",
    # meshes
    "read_mesh",
    "write_mesh",
    "read_tetrahedral_mesh",
    "write_tetrahedral_mesh",
    "decimate",
    "procrustes_distance",
    # errors
    "ShapeVtkError",
    "NativeIOError",
    "UnsupportedFileTypeError",
    "UnknownScalarTypeError",
    "NoConversionError",
    "ScalarTypeMismatchError",
]
