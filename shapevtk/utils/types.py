"""Contains the enumeration types used in shapevtk.

This module defines the closed set of voxel scalar types the package can
read and write, together with their bidirectional mappings to VTK type ids,
numpy scalar types and Nifti-1 datatype codes. It also defines the
interpolation modes used when an image has to be resampled before it can be
handed to VTK.

Classes
-------
ScalarDataType
    Voxel scalar types supported by the VTK and Nifti adapters.
InterpolationMode
    Resampling kernel used when converting rotated images to VTK.

Functions
---------
convert_values
    Element-wise conversion between any two scalar types.
"""

import enum

import numpy as np
import vtk

from .errors import NoConversionError, UnknownScalarTypeError


class ScalarDataType(enum.Enum):
    """Voxel scalar types that can be read and written in VTK and Nifti formats.

    Each member carries a ``(vtk_id, numpy_type, nifti_code)`` triple.

    Parameters
    ----------
    *values : tuple
        Positional arguments passed to the Enum constructor (not used by
        consumers of this enum).

    Attributes
    ----------
    BYTE : tuple
        Signed 8-bit integer.
    SHORT : tuple
        Signed 16-bit integer.
    INT : tuple
        Signed 32-bit integer.
    FLOAT : tuple
        32-bit float.
    DOUBLE : tuple
        64-bit float.
    UBYTE : tuple
        Unsigned 8-bit integer.
    USHORT : tuple
        Unsigned 16-bit integer.
    UINT : tuple
        Unsigned 32-bit integer.
    """
    BYTE = (vtk.VTK_SIGNED_CHAR, np.int8, 256)
    SHORT = (vtk.VTK_SHORT, np.int16, 4)
    INT = (vtk.VTK_INT, np.int32, 8)
    FLOAT = (vtk.VTK_FLOAT, np.float32, 16)
    DOUBLE = (vtk.VTK_DOUBLE, np.float64, 64)
    UBYTE = (vtk.VTK_UNSIGNED_CHAR, np.uint8, 2)
    USHORT = (vtk.VTK_UNSIGNED_SHORT, np.uint16, 512)
    UINT = (vtk.VTK_UNSIGNED_INT, np.uint32, 768)

    @property
    def vtk_id(self) -> int:
        """VTK type id written into structured points of this type."""
        return self.value[0]

    @property
    def dtype(self) -> np.dtype:
        """Native-endian numpy dtype of this type."""
        return np.dtype(self.value[1])

    @property
    def nifti_code(self) -> int:
        """Nifti-1 ``datatype`` header code of this type."""
        return self.value[2]

    @property
    def is_integer(self) -> bool:
        return np.issubdtype(self.dtype, np.integer)

    @classmethod
    def from_vtk_id(cls, vtk_id: int) -> "ScalarDataType":
        """Return the member for a VTK scalar type id.

        ``VTK_CHAR`` is accepted as an alias of ``VTK_SIGNED_CHAR``; legacy
        files written as ``char`` come back with that id.

        Raises
        ------
        UnknownScalarTypeError
            If *vtk_id* does not belong to a supported type.
        """
        if vtk_id == vtk.VTK_CHAR:
            return cls.BYTE
        for member in cls:
            if member.vtk_id == vtk_id:
                return member
        raise UnknownScalarTypeError(f"VTK type id {vtk_id}")

    @classmethod
    def from_dtype(cls, dtype) -> "ScalarDataType":
        """Return the member for a numpy dtype (any byte order).

        Raises
        ------
        UnknownScalarTypeError
            If *dtype* is not one of the eight supported scalar types.
        """
        try:
            scalar = np.dtype(dtype).type
        except TypeError as exc:
            raise UnknownScalarTypeError(repr(dtype)) from exc
        for member in cls:
            if member.value[1] is scalar:
                return member
        raise UnknownScalarTypeError(f"numpy dtype {np.dtype(dtype)}")

    @classmethod
    def from_nifti_code(cls, code: int) -> "ScalarDataType":
        """Return the member for a Nifti-1 datatype code.

        Raises
        ------
        UnknownScalarTypeError
            If *code* does not belong to a supported type.
        """
        for member in cls:
            if member.nifti_code == code:
                return member
        raise UnknownScalarTypeError(f"Nifti datatype code {code}")

    @classmethod
    def coerce(cls, scalar_type) -> "ScalarDataType":
        """Accept a member, a member name or a numpy dtype-like."""
        if isinstance(scalar_type, cls):
            return scalar_type
        if isinstance(scalar_type, str) and scalar_type.upper() in cls.__members__:
            return cls[scalar_type.upper()]
        return cls.from_dtype(scalar_type)


class InterpolationMode(enum.Enum):
    """Resampling kernel used when an image must be resampled for VTK.

    Images whose direction matrix is not the identity cannot be represented
    by VTK structured points and are resampled onto an axis-aligned grid.

    Parameters
    ----------
    *values : tuple
        Positional arguments passed to the Enum constructor (not used by
        consumers of this enum).

    Attributes
    ----------
    AUTOMATIC : int
        Nearest neighbour for integer voxel types, linear for floats.
    NEAREST_NEIGHBOR : int
        Nearest-neighbour interpolation.
    LINEAR : int
        Trilinear interpolation.
    CUBIC : int
        Tricubic interpolation.
    """
    AUTOMATIC = 1
    NEAREST_NEIGHBOR = 2
    LINEAR = 3
    CUBIC = 4

    def resolve(self, scalar_type: ScalarDataType) -> "InterpolationMode":
        """Return the concrete kernel for an image of *scalar_type*."""
        if self is not InterpolationMode.AUTOMATIC:
            return self
        if scalar_type.is_integer:
            return InterpolationMode.NEAREST_NEIGHBOR
        return InterpolationMode.LINEAR


# ---------------------------------------------------------------------------
# Conversion table
# ---------------------------------------------------------------------------

# Unsigned sources go through the next wider signed type first.
_INTERMEDIATE = {
    ScalarDataType.UBYTE: np.int16,
    ScalarDataType.USHORT: np.int32,
    ScalarDataType.UINT: np.int64,
}


def _make_converter(source, target):
    intermediate = _INTERMEDIATE.get(source)
    dtype = target.dtype

    def convert(values):
        if intermediate is not None:
            values = values.astype(intermediate)
        return values.astype(dtype, casting="unsafe")

    return convert


_CONVERSIONS = {
    (source, target): _make_converter(source, target)
    for source in ScalarDataType
    for target in ScalarDataType
}


def convert_values(values, source, target):
    """Convert a voxel array from *source* to *target* scalar type.

    Widening and narrowing are both allowed. Narrowing follows numpy's
    unsafe cast: floats truncate toward zero, integers wrap around. No
    saturation or rounding is applied.

    Parameters
    ----------
    values : numpy.ndarray
        Voxel values stored as *source*.
    source, target : ScalarDataType
        Stored and requested scalar types.

    Returns
    -------
    numpy.ndarray
        New array of dtype ``target.dtype`` and the same shape.

    Raises
    ------
    NoConversionError
        If either type is not a :class:`ScalarDataType` member.
    """
    try:
        converter = _CONVERSIONS[(source, target)]
    except (KeyError, TypeError) as exc:
        raise NoConversionError(source, target) from exc
    return converter(np.asarray(values))
