"""Reading and writing 2D and 3D scalar images.

.. warning:: shapevtk images use an **LPS** world coordinate system.

The VTK legacy format does not record the image orientation.  When reading
VTK the header values (origin, spacing, dimensions) are mapped directly to
the image geometry, and writing maps the image geometry directly into the
header.  Images with a rotated direction matrix are resampled onto an
axis-aligned grid before writing, with the kernel selected by
:class:`~shapevtk.utils.types.InterpolationMode`.

Nifti headers hold an affine from voxel indices to an **RAS** world frame.
Reading applies that affine and mirrors the first two world axes to obtain
LPS; writing mirrors them back (see :mod:`shapevtk.geometry.nifti_io`).
When the sform and qform of a Nifti header disagree the sform wins unless
``favour_qform=True`` is passed.

Further reading on orientation conventions:

* http://www.grahamwideman.com/gw/brain/orientation/orientterms.htm
* https://slicer.readthedocs.io/en/latest/user_guide/coordinate_systems.html
* https://brainder.org/2012/09/23/the-nifti-file-format/
"""

import logging
import os

import vtk

from ..utils.errors import NativeIOError, UnsupportedFileTypeError
from ..utils.native import NativeScope
from ..utils.types import InterpolationMode, ScalarDataType, convert_values
from .conversion import image_to_vtk_structured_points, vtk_structured_points_to_image
from .image import DiscreteImage
from .nifti_io import NIFTI_SUFFIXES, read_nifti, write_nifti
from .scalar_type import VTK_SUFFIX, check_exists, scalar_type_of_file

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# VTK structured points
# ---------------------------------------------------------------------------

def read_vtk_image(path, scalar_type=None, dim=3) -> DiscreteImage:
    """Read a legacy VTK structured points file.

    Parameters
    ----------
    path : str
        Path to the ``.vtk`` file (binary or ASCII).
    scalar_type : ScalarDataType, optional
        Required voxel type; ``None`` accepts the stored type.
    dim : int, default=3
        Dimensionality of the returned image.

    Returns
    -------
    DiscreteImage

    Raises
    ------
    NativeIOError
        If the reader reports a nonzero error code or produced no scalars.
    ScalarTypeMismatchError
        If *scalar_type* differs from the stored type.
    """
    with NativeScope() as scope:
        reader = scope.track(vtk.vtkStructuredPointsReader())
        reader.SetFileName(path)
        reader.Update()
        err = reader.GetErrorCode()
        if err != 0:
            raise NativeIOError(path, err)
        sp = scope.track(reader.GetOutput())
        if sp.GetPointData().GetScalars() is None:
            raise NativeIOError(path, err)
        img = vtk_structured_points_to_image(sp, dim, scalar_type=scalar_type, path=path)
    logger.debug("Read VTK %s: size=%s type=%s", path, img.size, img.scalar_type.name)
    return img


def write_vtk(image: DiscreteImage, path, interpolation_mode=InterpolationMode.AUTOMATIC):
    """Write a 2D or 3D image as binary legacy VTK structured points.

    Parameters
    ----------
    image : DiscreteImage
        Image to write.
    path : str or os.PathLike
        Target file.
    interpolation_mode : InterpolationMode, default=InterpolationMode.AUTOMATIC
        Resampling kernel for images that are not axis-aligned.

    Raises
    ------
    NativeIOError
        If the writer reports a nonzero error code.
    """
    path = os.fspath(path)
    with NativeScope() as scope:
        sp = scope.track(image_to_vtk_structured_points(image, interpolation_mode))
        writer = scope.track(vtk.vtkStructuredPointsWriter())
        writer.SetInputData(sp)
        writer.SetFileName(path)
        writer.SetFileTypeToBinary()
        writer.Write()
        err = writer.GetErrorCode()
        if err != 0:
            raise NativeIOError(path, err, action="write")
    logger.debug("Wrote VTK %s: size=%s type=%s", path, image.size, image.scalar_type.name)


# ---------------------------------------------------------------------------
# Typed reads
# ---------------------------------------------------------------------------

def read_scalar_image(path, scalar_type, dim, favour_qform=False) -> DiscreteImage:
    """Read a ``dim``-dimensional image whose voxels are *scalar_type*.

    Parameters
    ----------
    path : str or os.PathLike
        ``.vtk`` file, or for 3D also ``.nii`` / ``.nia``.  The suffix
        match is exact and case-sensitive.
    scalar_type : ScalarDataType or dtype-like
        Voxel type the file must store.
    dim : int
        2 or 3.
    favour_qform : bool, default=False
        Nifti only: prefer the qform affine over the sform.

    Returns
    -------
    DiscreteImage

    Raises
    ------
    UnsupportedFileTypeError
        If the suffix is not recognised for *dim*.
    FileNotFoundError
        If the file does not exist.
    NativeIOError
        If VTK fails to read the file.
    ScalarTypeMismatchError
        If the stored voxel type differs from *scalar_type*.
    """
    if dim not in (2, 3):
        raise ValueError(f"dim must be 2 or 3, got {dim!r}.")
    path = os.fspath(path)
    scalar_type = ScalarDataType.coerce(scalar_type)
    if path.endswith(VTK_SUFFIX):
        check_exists(path)
        return read_vtk_image(path, scalar_type=scalar_type, dim=dim)
    if dim == 3 and path.endswith(NIFTI_SUFFIXES):
        check_exists(path)
        return read_nifti(path, scalar_type=scalar_type, favour_qform=favour_qform)
    supported = (VTK_SUFFIX,) + (NIFTI_SUFFIXES if dim == 3 else ())
    raise UnsupportedFileTypeError(path, supported)


def read_3d_scalar_image(path, scalar_type, favour_qform=False) -> DiscreteImage:
    """Read a 3D image from ``.vtk``, ``.nii`` or ``.nia``.

    See :func:`read_scalar_image`.
    """
    return read_scalar_image(path, scalar_type, 3, favour_qform=favour_qform)


def read_2d_scalar_image(path, scalar_type) -> DiscreteImage:
    """Read a 2D image from ``.vtk``.

    See :func:`read_scalar_image`.
    """
    return read_scalar_image(path, scalar_type, 2)


# ---------------------------------------------------------------------------
# Reads with conversion
# ---------------------------------------------------------------------------

def read_scalar_image_as_type(path, scalar_type, dim, favour_qform=False) -> DiscreteImage:
    """Read an image and convert its voxels to *scalar_type* if needed.

    Unlike :func:`read_scalar_image`, a file storing a different voxel type
    is not an error: it is read as its stored type and each voxel is
    converted with :func:`~shapevtk.utils.types.convert_values`.

    Raises
    ------
    UnsupportedFileTypeError
        If the suffix is not recognised.
    UnknownScalarTypeError
        If the stored or requested type is not supported.
    NativeIOError
        If VTK fails to read the file.
    """
    path = os.fspath(path)
    if not (path.endswith(VTK_SUFFIX) or (dim == 3 and path.endswith(NIFTI_SUFFIXES))):
        supported = (VTK_SUFFIX,) + (NIFTI_SUFFIXES if dim == 3 else ())
        raise UnsupportedFileTypeError(path, supported)
    target = ScalarDataType.coerce(scalar_type)

    stored = scalar_type_of_file(path)
    if stored is target:
        return read_scalar_image(path, target, dim, favour_qform=favour_qform)

    logger.info("Converting %s voxels in %s to %s", stored.name, path, target.name)
    img = read_scalar_image(path, stored, dim, favour_qform=favour_qform)
    return img.with_values(convert_values(img.values, stored, target))


def read_3d_scalar_image_as_type(path, scalar_type, favour_qform=False) -> DiscreteImage:
    """3D variant of :func:`read_scalar_image_as_type`."""
    return read_scalar_image_as_type(path, scalar_type, 3, favour_qform=favour_qform)


def read_2d_scalar_image_as_type(path, scalar_type) -> DiscreteImage:
    """2D variant of :func:`read_scalar_image_as_type`."""
    return read_scalar_image_as_type(path, scalar_type, 2)


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------

def write_image(image: DiscreteImage, path, interpolation_mode=InterpolationMode.AUTOMATIC):
    """Write an image, choosing the format from the suffix.

    ``.vtk`` goes through :func:`write_vtk`, ``.nii`` through
    :func:`~shapevtk.geometry.nifti_io.write_nifti` (3D only).

    Raises
    ------
    UnsupportedFileTypeError
        If the suffix is not ``.vtk`` or ``.nii``.
    """
    path = os.fspath(path)
    if path.endswith(VTK_SUFFIX):
        return write_vtk(image, path, interpolation_mode=interpolation_mode)
    if path.endswith(".nii"):
        return write_nifti(image, path)
    raise UnsupportedFileTypeError(path, (VTK_SUFFIX, ".nii"))

