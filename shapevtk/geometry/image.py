"""Discrete scalar images on a regular grid.

A :class:`DiscreteImage` is the value object exchanged by the image
adapters. Coordinates are in an LPS world frame; ``direction`` holds the
grid axes as columns.
"""

from dataclasses import dataclass, field

import numpy as np

from ..utils.types import ScalarDataType, convert_values


def _as_vector(values, dim, name, dtype=np.float64):
    arr = np.asarray(values, dtype=dtype).reshape(-1)
    if arr.shape != (dim,):
        raise ValueError(f"{name} must have {dim} components, got shape {np.shape(values)}.")
    return arr


@dataclass(frozen=True, eq=False)
class DiscreteImage:
    """A 2D or 3D scalar image.

    Parameters
    ----------
    values : numpy.ndarray
        Voxel values of shape ``size`` indexed ``[i, j]`` or ``[i, j, k]``.
        The dtype must be one of :class:`~shapevtk.utils.types.ScalarDataType`.
    origin : array_like
        World position of voxel ``(0, 0[, 0])``.
    spacing : array_like
        Voxel size along each grid axis, all positive.
    direction : array_like, optional
        ``(D, D)`` orthonormal matrix whose columns are the grid axes in
        world coordinates. Defaults to the identity.

    Raises
    ------
    ValueError
        If the dimensionality is not 2 or 3, or the geometry does not match
        the value array.
    UnknownScalarTypeError
        If the value dtype is not supported.
    """
    values: np.ndarray
    origin: np.ndarray
    spacing: np.ndarray
    direction: np.ndarray = field(default=None)

    def __post_init__(self):
        values = np.asarray(self.values)
        dim = values.ndim
        if dim not in (2, 3):
            raise ValueError(f"Only 2D and 3D images are supported, got {dim}D values.")
        ScalarDataType.from_dtype(values.dtype)
        if not values.dtype.isnative:
            values = values.astype(values.dtype.newbyteorder("="))
        origin = _as_vector(self.origin, dim, "origin")
        spacing = _as_vector(self.spacing, dim, "spacing")
        if np.any(spacing <= 0):
            raise ValueError(f"spacing must be positive, got {spacing}.")
        if self.direction is None:
            direction = np.eye(dim)
        else:
            direction = np.asarray(self.direction, dtype=np.float64)
            if direction.shape != (dim, dim):
                raise ValueError(
                    f"direction must have shape ({dim}, {dim}), got {direction.shape}."
                )
        object.__setattr__(self, "values", values)
        object.__setattr__(self, "origin", origin)
        object.__setattr__(self, "spacing", spacing)
        object.__setattr__(self, "direction", direction)

    @property
    def dim(self) -> int:
        return self.values.ndim

    @property
    def size(self) -> tuple:
        return tuple(int(n) for n in self.values.shape)

    @property
    def number_of_points(self) -> int:
        return int(self.values.size)

    @property
    def scalar_type(self) -> ScalarDataType:
        return ScalarDataType.from_dtype(self.values.dtype)

    @property
    def is_axis_aligned(self) -> bool:
        """True when the direction matrix is the identity."""
        return bool(np.allclose(self.direction, np.eye(self.dim)))

    def index_to_point(self, index):
        """Map a (possibly fractional) grid index to world coordinates."""
        index = np.asarray(index, dtype=np.float64)
        return self.origin + (index * self.spacing) @ self.direction.T

    def points(self) -> np.ndarray:
        """World coordinates of all voxels, x index running fastest.

        Returns
        -------
        numpy.ndarray
            Array of shape ``(number_of_points, dim)``.
        """
        grids = np.meshgrid(*[np.arange(n) for n in self.size], indexing="ij")
        index = np.stack([g.ravel(order="F") for g in grids], axis=1)
        return self.index_to_point(index)

    def bounding_box(self):
        """Return ``(lower, upper)`` world corners enclosing all voxels."""
        corners = np.array(
            np.meshgrid(*[[0, n - 1] for n in self.size], indexing="ij")
        ).reshape(self.dim, -1).T
        pts = self.index_to_point(corners)
        return pts.min(axis=0), pts.max(axis=0)

    def with_values(self, values) -> "DiscreteImage":
        """Return an image on the same grid holding *values*."""
        values = np.asarray(values)
        if values.shape != self.values.shape:
            raise ValueError(
                f"values of shape {values.shape} do not fit grid of size {self.size}."
            )
        return DiscreteImage(values, self.origin, self.spacing, self.direction)

    def map(self, fn) -> "DiscreteImage":
        """Apply a vectorised function to the voxel array."""
        return self.with_values(fn(self.values))

    def astype(self, scalar_type) -> "DiscreteImage":
        """Return a copy converted to *scalar_type* element by element.

        See :func:`shapevtk.utils.types.convert_values` for the
        conversion rules.
        """
        target = ScalarDataType.coerce(scalar_type)
        return self.with_values(convert_values(self.values, self.scalar_type, target))
