"""Scalar type resolution for image files.

:func:`scalar_type_of_file` reports which voxel type a ``.vtk``, ``.nii``
or ``.nia`` file stores without the caller naming it in advance.
"""

import logging
import os

import vtk

from ..utils.errors import NativeIOError, UnsupportedFileTypeError
from ..utils.native import NativeScope
from ..utils.types import ScalarDataType
from .nifti_io import NIFTI_SUFFIXES, nifti_scalar_type

logger = logging.getLogger(__name__)

VTK_SUFFIX = ".vtk"


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------

def vtk_scalar_type(path):
    """Return the scalar type stored in a legacy VTK structured points file.

    The whole file goes through ``vtkStructuredPointsReader`` so the regular
    read path is used; the reader is released and a native sweep is run
    before returning.

    Raises
    ------
    NativeIOError
        If the reader reports a nonzero error code or produced no scalars.
    UnknownScalarTypeError
        If the stored VTK type id is not supported.
    """
    with NativeScope() as scope:
        reader = scope.track(vtk.vtkStructuredPointsReader())
        reader.SetFileName(str(path))
        reader.Update()
        err = reader.GetErrorCode()
        if err != 0:
            raise NativeIOError(path, err)
        output = scope.track(reader.GetOutput())
        scalars = output.GetPointData().GetScalars()
        if scalars is None:
            raise NativeIOError(path, err)
        vtk_id = scalars.GetDataType()
    logger.debug("VTK scalar type id %d in %s", vtk_id, path)
    return ScalarDataType.from_vtk_id(vtk_id)


def scalar_type_of_file(path):
    """Return the voxel scalar type stored in an image file.

    Parameters
    ----------
    path : str or os.PathLike
        Path to a ``.vtk``, ``.nii`` or ``.nia`` file. The suffix match is
        exact and case-sensitive.

    Returns
    -------
    ScalarDataType

    Raises
    ------
    UnsupportedFileTypeError
        If the suffix is not recognised.
    FileNotFoundError
        If *path* does not exist.
    NativeIOError
        If VTK fails to read the file.
    UnknownScalarTypeError
        If the stored type is not supported.
    """
    path = os.fspath(path)
    if path.endswith(NIFTI_SUFFIXES):
        check_exists(path)
        return nifti_scalar_type(path)
    if path.endswith(VTK_SUFFIX):
        check_exists(path)
        return vtk_scalar_type(path)
    raise UnsupportedFileTypeError(path, (VTK_SUFFIX,) + NIFTI_SUFFIXES)


def check_exists(path):
    """Raise :class:`FileNotFoundError` unless *path* is an existing file."""
    if not os.path.isfile(path):
        raise FileNotFoundError(f"No such image file: {path!r}")
