"""Nifti-1 reading and writing through nibabel.

Nifti headers map voxel indices to an RAS world frame, whereas shapevtk
images live in LPS. Reading applies the stored affine and then mirrors the
first two world axes; writing applies the same mirroring in reverse.

A Nifti header may carry two affines, the sform and the qform, which can
disagree. The sform is preferred unless ``favour_qform=True`` is given.
"""

import logging

import nibabel as nib
import numpy as np

from ..utils.errors import ScalarTypeMismatchError, UnsupportedFileTypeError
from ..utils.types import ScalarDataType
from .image import DiscreteImage

logger = logging.getLogger(__name__)

NIFTI_SUFFIXES = (".nii", ".nia")

# RAS <-> LPS, its own inverse
_RAS_TO_LPS = np.diag([-1.0, -1.0, 1.0, 1.0])


def load_nifti(path):
    """Open a Nifti-1 file lazily, whatever its suffix.

    Only the header is parsed; voxel data stays on disk until the
    ``dataobj`` proxy is accessed.

    Parameters
    ----------
    path : str
        Path to a single-file Nifti-1 image.

    Returns
    -------
    nibabel.Nifti1Image
    """
    file_map = nib.Nifti1Image.make_file_map()
    file_map["image"].filename = path
    return nib.Nifti1Image.from_file_map(file_map)


def _is_scaled(nii):
    # nibabel moves scl_slope/scl_inter from the loaded header onto the proxy
    slope = getattr(nii.dataobj, "slope", 1.0)
    inter = getattr(nii.dataobj, "inter", 0.0)
    scaled_slope = slope is not None and not np.isnan(slope) and slope not in (0.0, 1.0)
    scaled_inter = inter is not None and not np.isnan(inter) and inter != 0.0
    return bool(scaled_slope or scaled_inter)


def image_scalar_type(nii):
    """Return the scalar type a loaded Nifti image yields when read.

    Scaled data (``scl_slope``/``scl_inter`` not trivial) is read as
    ``FLOAT``.
    """
    if _is_scaled(nii):
        return ScalarDataType.FLOAT
    return ScalarDataType.from_nifti_code(int(nii.header["datatype"]))


def nifti_scalar_type(path):
    """Return the scalar type stored in a Nifti file, reading the header only."""
    return image_scalar_type(load_nifti(path))


def select_affine(header, favour_qform=False):
    """Return the voxel-to-RAS affine chosen from a Nifti header.

    Parameters
    ----------
    header : nibabel.Nifti1Header
    favour_qform : bool, default=False
        Prefer the qform over the sform when both are set.

    Returns
    -------
    numpy.ndarray
        ``(4, 4)`` affine.
    """
    sform, scode = header.get_sform(coded=True)
    qform, qcode = header.get_qform(coded=True)
    if scode > 0 and qcode > 0 and not np.allclose(sform, qform, atol=1e-4):
        logger.warning(
            "Nifti sform and qform disagree; using the %s.",
            "qform" if favour_qform else "sform",
        )
    candidates = [(qform, qcode), (sform, scode)] if favour_qform else [(sform, scode), (qform, qcode)]
    for affine, code in candidates:
        if code > 0:
            return np.asarray(affine, dtype=np.float64)
    logger.debug("Nifti header has neither sform nor qform; using pixdim only.")
    return header.get_base_affine()


def _squeeze_trailing(data, dim):
    while data.ndim > dim and data.shape[-1] == 1:
        data = data[..., 0]
    return data


def nifti_to_image(nii, favour_qform=False, path=None) -> DiscreteImage:
    """Convert a loaded Nifti image to a 3D :class:`DiscreteImage` in LPS."""
    header = nii.header
    scalar_type = image_scalar_type(nii)
    if _is_scaled(nii):
        data = nii.get_fdata(dtype=np.float32)
    else:
        data = np.asarray(nii.dataobj.get_unscaled())
    data = _squeeze_trailing(data, 3)
    if data.ndim != 3:
        raise ValueError(
            f"Nifti file {path!r} holds an array of shape {data.shape}; "
            f"expected a 3-D volume."
        )
    data = data.astype(scalar_type.dtype, copy=False)

    affine = _RAS_TO_LPS @ select_affine(header, favour_qform=favour_qform)
    linear = affine[:3, :3]
    spacing = np.linalg.norm(linear, axis=0)
    direction = linear / spacing
    return DiscreteImage(data, origin=affine[:3, 3], spacing=spacing, direction=direction)


def read_nifti(path, scalar_type=None, favour_qform=False) -> DiscreteImage:
    """Read a 3D Nifti image.

    Parameters
    ----------
    path : str
        ``.nii`` or ``.nia`` file.
    scalar_type : ScalarDataType, optional
        Required voxel type. ``None`` accepts whatever the file stores.
    favour_qform : bool, default=False
        Prefer the qform affine over the sform.

    Returns
    -------
    DiscreteImage

    Raises
    ------
    ScalarTypeMismatchError
        If *scalar_type* is given and differs from the stored type.
    """
    nii = load_nifti(path)
    if scalar_type is not None:
        expected = ScalarDataType.coerce(scalar_type)
        found = image_scalar_type(nii)
        if found is not expected:
            raise ScalarTypeMismatchError(expected, found, path)
    img = nifti_to_image(nii, favour_qform=favour_qform, path=path)
    logger.debug("Read Nifti %s: size=%s type=%s", path, img.size, img.scalar_type.name)
    return img


def image_to_nifti(image: DiscreteImage) -> nib.Nifti1Image:
    """Build a Nifti image in RAS from a 3D LPS :class:`DiscreteImage`."""
    if image.dim != 3:
        raise ValueError(f"Nifti export supports 3D images only, got {image.dim}D.")
    affine = np.eye(4)
    affine[:3, :3] = image.direction * image.spacing
    affine[:3, 3] = image.origin
    affine = _RAS_TO_LPS @ affine
    nii = nib.Nifti1Image(image.values, affine)
    nii.header.set_data_dtype(image.values.dtype)
    nii.set_sform(affine, code=1)
    nii.set_qform(affine, code=1)
    return nii


def write_nifti(image: DiscreteImage, path):
    """Write a 3D image to a ``.nii`` file.

    Raises
    ------
    UnsupportedFileTypeError
        If *path* does not end with ``.nii``.
    """
    path = str(path)
    if not path.endswith(".nii"):
        raise UnsupportedFileTypeError(path, (".nii",))
    nib.save(image_to_nifti(image), path)
    logger.debug("Wrote Nifti %s", path)
