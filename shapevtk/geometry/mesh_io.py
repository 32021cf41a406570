"""Mesh readers and writers built on the VTK file readers.

Supported formats:

* **Triangle meshes** — legacy VTK PolyData (``.vtk``), XML PolyData
  (``.vtp``), STL (``.stl``) and PLY (``.ply``).  Polygons with more than
  three corners and triangle strips are triangulated on read.
* **Tetrahedral meshes** — legacy VTK UnstructuredGrid (``.vtk``) and XML
  UnstructuredGrid (``.vtu``).  Every cell must be a tetrahedron.

The dispatchers :func:`read_mesh`, :func:`write_mesh`,
:func:`read_tetrahedral_mesh` and :func:`write_tetrahedral_mesh` route by
exact file suffix.  Legacy ``.vtk`` output is always written in binary.
"""

import logging
import os

import vtk

from ..utils.errors import NativeIOError, UnsupportedFileTypeError
from ..utils.native import NativeScope
from .conversion import (
    tetrahedral_mesh_to_vtk_unstructured_grid,
    triangle_mesh_to_vtk_polydata,
    triangulate,
    vtk_polydata_to_triangle_mesh,
    vtk_unstructured_grid_to_tetrahedral_mesh,
)
from .mesh import TetrahedralMesh, TriangleMesh

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _run_reader(scope, reader, path):
    """Execute a VTK reader and return its output, raising on error codes."""
    _check_exists(path)
    reader.SetFileName(path)
    reader.Update()
    err = reader.GetErrorCode()
    if err != 0:
        raise NativeIOError(path, err)
    return scope.track(reader.GetOutput())


def _run_writer(writer, data, path):
    writer.SetInputData(data)
    writer.SetFileName(path)
    ok = writer.Write()
    err = writer.GetErrorCode()
    if err != 0 or not ok:
        raise NativeIOError(path, err, action="write")


def _check_exists(path):
    if not os.path.isfile(path):
        raise FileNotFoundError(f"No such mesh file: {path!r}")


def _suffix(path):
    return os.path.splitext(path)[1]


# ---------------------------------------------------------------------------
# Triangle meshes
# ---------------------------------------------------------------------------

_POLYDATA_READERS = {
    ".vtk": vtk.vtkPolyDataReader,
    ".vtp": vtk.vtkXMLPolyDataReader,
    ".stl": vtk.vtkSTLReader,
    ".ply": vtk.vtkPLYReader,
}

_POLYDATA_WRITERS = {
    ".vtk": vtk.vtkPolyDataWriter,
    ".vtp": vtk.vtkXMLPolyDataWriter,
    ".stl": vtk.vtkSTLWriter,
    ".ply": vtk.vtkPLYWriter,
}

_SUPPORTED_MESH = tuple(sorted(_POLYDATA_READERS))


def read_mesh(path) -> TriangleMesh:
    """Read a triangle mesh from a VTK, VTP, STL or PLY file.

    Parameters
    ----------
    path : str or os.PathLike
        Path to a mesh file.  Suffix must be one of ``.vtk``, ``.vtp``,
        ``.stl``, ``.ply`` (case-sensitive).

    Returns
    -------
    TriangleMesh

    Raises
    ------
    UnsupportedFileTypeError
        If the suffix is not recognised.
    FileNotFoundError
        If the file does not exist.
    NativeIOError
        If the VTK reader reports an error.
    ValueError
        If the file holds no polygons.
    """
    path = os.fspath(path)
    reader_cls = _POLYDATA_READERS.get(_suffix(path))
    if reader_cls is None:
        raise UnsupportedFileTypeError(path, _SUPPORTED_MESH)
    with NativeScope() as scope:
        output = _run_reader(scope, scope.track(reader_cls()), path)
        triangles = scope.track(triangulate(output))
        try:
            mesh = vtk_polydata_to_triangle_mesh(triangles)
        except ValueError as exc:
            raise ValueError(f"Could not read a triangle mesh from {path!r}: {exc}") from exc
    logger.debug("Read %r from %s", mesh, path)
    return mesh


def write_mesh(mesh: TriangleMesh, path):
    """Write a triangle mesh to a VTK, VTP, STL or PLY file.

    Raises
    ------
    UnsupportedFileTypeError
        If the suffix is not recognised.
    NativeIOError
        If the VTK writer reports an error.
    """
    path = os.fspath(path)
    writer_cls = _POLYDATA_WRITERS.get(_suffix(path))
    if writer_cls is None:
        raise UnsupportedFileTypeError(path, _SUPPORTED_MESH)
    with NativeScope() as scope:
        polydata = scope.track(triangle_mesh_to_vtk_polydata(mesh))
        writer = scope.track(writer_cls())
        if isinstance(writer, (vtk.vtkPolyDataWriter, vtk.vtkSTLWriter, vtk.vtkPLYWriter)):
            writer.SetFileTypeToBinary()
        _run_writer(writer, polydata, path)
    logger.debug("Wrote %r to %s", mesh, path)


# ---------------------------------------------------------------------------
# Tetrahedral meshes
# ---------------------------------------------------------------------------

_GRID_READERS = {
    ".vtk": vtk.vtkUnstructuredGridReader,
    ".vtu": vtk.vtkXMLUnstructuredGridReader,
}

_GRID_WRITERS = {
    ".vtk": vtk.vtkUnstructuredGridWriter,
    ".vtu": vtk.vtkXMLUnstructuredGridWriter,
}

_SUPPORTED_TETRA = tuple(sorted(_GRID_READERS))


def read_tetrahedral_mesh(path) -> TetrahedralMesh:
    """Read a tetrahedral mesh from a legacy ``.vtk`` or XML ``.vtu`` file.

    Raises
    ------
    UnsupportedFileTypeError
        If the suffix is not recognised.
    FileNotFoundError
        If the file does not exist.
    NativeIOError
        If the VTK reader reports an error.
    ValueError
        If the grid is empty or contains cells other than tetrahedra.
    """
    path = os.fspath(path)
    reader_cls = _GRID_READERS.get(_suffix(path))
    if reader_cls is None:
        raise UnsupportedFileTypeError(path, _SUPPORTED_TETRA)
    with NativeScope() as scope:
        output = _run_reader(scope, scope.track(reader_cls()), path)
        try:
            mesh = vtk_unstructured_grid_to_tetrahedral_mesh(output)
        except ValueError as exc:
            raise ValueError(f"Could not read a tetrahedral mesh from {path!r}: {exc}") from exc
    logger.debug("Read %r from %s", mesh, path)
    return mesh


def write_tetrahedral_mesh(mesh: TetrahedralMesh, path):
    """Write a tetrahedral mesh to a legacy ``.vtk`` or XML ``.vtu`` file.

    Raises
    ------
    UnsupportedFileTypeError
        If the suffix is not recognised.
    NativeIOError
        If the VTK writer reports an error.
    """
    path = os.fspath(path)
    writer_cls = _GRID_WRITERS.get(_suffix(path))
    if writer_cls is None:
        raise UnsupportedFileTypeError(path, _SUPPORTED_TETRA)
    with NativeScope() as scope:
        grid = scope.track(tetrahedral_mesh_to_vtk_unstructured_grid(mesh))
        writer = scope.track(writer_cls())
        if isinstance(writer, vtk.vtkUnstructuredGridWriter):
            writer.SetFileTypeToBinary()
        _run_writer(writer, grid, path)
    logger.debug("Wrote %r to %s", mesh, path)
