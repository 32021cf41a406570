"""Conversions between shapevtk domain objects and VTK data objects.

The ``*_to_vtk_*`` functions create new VTK objects that the caller owns
and should track in a :class:`~shapevtk.utils.native.NativeScope`. The
``vtk_*_to_*`` functions deep-copy all arrays, so the resulting domain
objects stay valid after the VTK objects are released.
"""

import logging

import numpy as np
import vtk
from vtk.util import numpy_support

from ..utils.errors import ScalarTypeMismatchError
from ..utils.types import InterpolationMode, ScalarDataType
from .image import DiscreteImage
from .mesh import TetrahedralMesh, TriangleMesh

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------

def _pad3(values, fill):
    out = [fill, fill, fill]
    out[: len(values)] = [float(v) for v in values]
    return out


def _structured_points_from_grid(values, origin, spacing):
    """Fill a vtkStructuredPoints with an axis-aligned voxel array."""
    scalar_type = ScalarDataType.from_dtype(values.dtype)
    dims = list(values.shape) + [1] * (3 - values.ndim)
    flat = np.ascontiguousarray(values.ravel(order="F"))
    scalars = numpy_support.numpy_to_vtk(flat, deep=True, array_type=scalar_type.vtk_id)
    scalars.SetName("scalars")

    sp = vtk.vtkStructuredPoints()
    sp.SetDimensions(*dims)
    sp.SetOrigin(*_pad3(origin, 0.0))
    sp.SetSpacing(*_pad3(spacing, 1.0))
    sp.GetPointData().SetScalars(scalars)
    return sp


def _reslice_axes(image):
    """Matrix mapping output world coordinates to the input's local frame."""
    rot = np.eye(3)
    rot[: image.dim, : image.dim] = image.direction.T
    origin = np.zeros(3)
    origin[: image.dim] = image.origin
    m = np.eye(4)
    m[:3, :3] = rot
    m[:3, 3] = -rot @ origin
    matrix = vtk.vtkMatrix4x4()
    for r in range(4):
        for c in range(4):
            matrix.SetElement(r, c, m[r, c])
    return matrix


def _set_interpolation(reslice, mode):
    if mode is InterpolationMode.NEAREST_NEIGHBOR:
        reslice.SetInterpolationModeToNearestNeighbor()
    elif mode is InterpolationMode.LINEAR:
        reslice.SetInterpolationModeToLinear()
    elif mode is InterpolationMode.CUBIC:
        reslice.SetInterpolationModeToCubic()
    else:
        raise ValueError(f"Unresolved interpolation mode {mode!r}.")


def image_to_vtk_structured_points(image: DiscreteImage, interpolation_mode=InterpolationMode.AUTOMATIC):
    """Convert a :class:`DiscreteImage` to ``vtkStructuredPoints``.

    Axis-aligned images are copied voxel for voxel. Images with a rotated
    direction matrix are resampled onto the axis-aligned grid enclosing
    them, keeping the spacing, with ``vtkImageReslice``; voxels outside the
    source image are set to 0.

    Parameters
    ----------
    image : DiscreteImage
        2D or 3D image.
    interpolation_mode : InterpolationMode, default=InterpolationMode.AUTOMATIC
        Kernel used for resampling rotated images. ``AUTOMATIC`` selects
        nearest neighbour for integer types and linear for floats.

    Returns
    -------
    vtk.vtkStructuredPoints
        A new object owned by the caller.
    """
    source = _structured_points_from_grid(image.values, np.zeros(image.dim), image.spacing)
    if image.is_axis_aligned:
        source.SetOrigin(*_pad3(image.origin, 0.0))
        return source

    mode = InterpolationMode(interpolation_mode).resolve(image.scalar_type)
    lower, upper = image.bounding_box()
    extent = np.floor((upper - lower) / image.spacing + 1e-6).astype(int)
    logger.debug(
        "Resampling rotated image to axis-aligned grid of size %s with %s interpolation",
        tuple(extent + 1), mode.name,
    )

    reslice = vtk.vtkImageReslice()
    reslice.SetInputData(source)
    reslice.SetResliceAxes(_reslice_axes(image))
    reslice.SetOutputOrigin(*_pad3(lower, 0.0))
    reslice.SetOutputSpacing(*_pad3(image.spacing, 1.0))
    ext = [0, 0, 0, 0, 0, 0]
    for d in range(image.dim):
        ext[2 * d + 1] = int(extent[d])
    reslice.SetOutputExtent(*ext)
    reslice.SetBackgroundLevel(0.0)
    _set_interpolation(reslice, mode)
    reslice.Update()

    result = vtk.vtkStructuredPoints()
    result.DeepCopy(reslice.GetOutput())
    reslice.RemoveAllInputs()
    source.ReleaseData()
    return result


def vtk_structured_points_to_image(sp, dim, scalar_type=None, path=None) -> DiscreteImage:
    """Convert ``vtkStructuredPoints`` to a :class:`DiscreteImage`.

    Origin, spacing and dimensions are copied field by field; VTK carries no
    orientation, so the result has an identity direction.

    Parameters
    ----------
    sp : vtk.vtkImageData
        Structured points with single-component point scalars.
    dim : int
        2 or 3. A 2D conversion requires the third VTK dimension to be 1.
    scalar_type : ScalarDataType, optional
        Required voxel type. ``None`` accepts the stored type.
    path : str, optional
        Source file, used in error messages only.

    Raises
    ------
    ValueError
        If the structured points carry no scalars, multi-component scalars,
        or a 3D grid is converted to 2D.
    ScalarTypeMismatchError
        If *scalar_type* differs from the stored type.
    """
    scalars = sp.GetPointData().GetScalars()
    if scalars is None:
        raise ValueError(f"Structured points from {path!r} carry no point scalars.")
    if scalars.GetNumberOfComponents() != 1:
        raise ValueError(
            f"Only single-component scalars are supported, {path!r} has "
            f"{scalars.GetNumberOfComponents()} components."
        )
    found = ScalarDataType.from_vtk_id(scalars.GetDataType())
    if scalar_type is not None:
        expected = ScalarDataType.coerce(scalar_type)
        if found is not expected:
            raise ScalarTypeMismatchError(expected, found, path)

    dims = sp.GetDimensions()
    if dim == 2 and dims[2] != 1:
        raise ValueError(f"Expected a 2D image in {path!r}, got dimensions {dims}.")
    values = np.array(numpy_support.vtk_to_numpy(scalars), dtype=found.dtype, copy=True)
    values = values.reshape(dims[:dim], order="F")
    return DiscreteImage(
        values,
        origin=sp.GetOrigin()[:dim],
        spacing=sp.GetSpacing()[:dim],
    )


# ---------------------------------------------------------------------------
# Meshes
# ---------------------------------------------------------------------------

def _vtk_points(vertices):
    points = vtk.vtkPoints()
    points.SetData(numpy_support.numpy_to_vtk(np.ascontiguousarray(vertices, dtype=np.float64), deep=True))
    return points


def _cell_array(cells):
    n, k = cells.shape
    conn = np.hstack([np.full((n, 1), k, dtype=np.int64), cells.astype(np.int64)]).ravel()
    ca = vtk.vtkCellArray()
    ca.ImportLegacyFormat(numpy_support.numpy_to_vtkIdTypeArray(conn, deep=True))
    return ca


def _points_of(dataset):
    if dataset.GetPoints() is None:
        return np.zeros((0, 3), dtype=np.float64)
    return np.array(numpy_support.vtk_to_numpy(dataset.GetPoints().GetData()), dtype=np.float64, copy=True)


def triangle_mesh_to_vtk_polydata(mesh: TriangleMesh):
    """Convert a :class:`TriangleMesh` to a new ``vtkPolyData``."""
    pd = vtk.vtkPolyData()
    pd.SetPoints(_vtk_points(mesh.vertices))
    pd.SetPolys(_cell_array(mesh.triangles))
    return pd


def _legacy_cells(cell_array):
    """Return the flat ``[n, i0, .., in-1, ...]`` connectivity of a vtkCellArray."""
    ids = vtk.vtkIdTypeArray()
    cell_array.ExportLegacyFormat(ids)
    return numpy_support.vtk_to_numpy(ids).astype(np.int64)


def vtk_polydata_to_triangle_mesh(pd) -> TriangleMesh:
    """Convert a ``vtkPolyData`` made of triangles to a :class:`TriangleMesh`.

    Raises
    ------
    ValueError
        If the polydata has no polygons or contains polygons that are not
        triangles. Use :func:`triangulate` first for general polygons.
    """
    polys = pd.GetPolys()
    if polys is None or polys.GetNumberOfCells() == 0:
        raise ValueError("vtkPolyData contains no polygons.")
    flat = _legacy_cells(polys)
    n_cells = polys.GetNumberOfCells()
    if flat.size != 4 * n_cells:
        raise ValueError("vtkPolyData contains non-triangle polygons.")
    cells = flat.reshape(n_cells, 4)
    if np.any(cells[:, 0] != 3):
        raise ValueError("vtkPolyData contains non-triangle polygons.")
    return TriangleMesh(_points_of(pd), cells[:, 1:])


def triangulate(pd):
    """Return a new polydata with polygons and strips split into triangles."""
    tri = vtk.vtkTriangleFilter()
    tri.SetInputData(pd)
    tri.PassVertsOff()
    tri.PassLinesOff()
    tri.Update()
    out = vtk.vtkPolyData()
    out.DeepCopy(tri.GetOutput())
    tri.RemoveAllInputs()
    return out


def tetrahedral_mesh_to_vtk_unstructured_grid(mesh: TetrahedralMesh):
    """Convert a :class:`TetrahedralMesh` to a new ``vtkUnstructuredGrid``."""
    ug = vtk.vtkUnstructuredGrid()
    ug.SetPoints(_vtk_points(mesh.vertices))
    ug.SetCells(vtk.VTK_TETRA, _cell_array(mesh.tetrahedra))
    return ug


def vtk_unstructured_grid_to_tetrahedral_mesh(ug) -> TetrahedralMesh:
    """Convert a ``vtkUnstructuredGrid`` of tetrahedra to a :class:`TetrahedralMesh`.

    Raises
    ------
    ValueError
        If the grid is empty or holds cells other than ``VTK_TETRA``.
    """
    n_cells = ug.GetNumberOfCells()
    if n_cells == 0:
        raise ValueError("vtkUnstructuredGrid contains no cells.")
    types = {ug.GetCellType(i) for i in range(n_cells)}
    if types != {vtk.VTK_TETRA}:
        raise ValueError(f"Only tetrahedral cells are supported, found VTK cell types {sorted(types)}.")
    cells = _legacy_cells(ug.GetCells()).reshape(n_cells, 5)
    return TetrahedralMesh(_points_of(ug), cells[:, 1:])
