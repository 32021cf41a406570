"""Tests for shapevtk/geometry/image_io.py.

Images are written to temporary ``.vtk`` files with :func:`write_vtk` and
read back through the typed readers.
"""

import os
import tempfile

import numpy as np
import pytest

from shapevtk.geometry.image import DiscreteImage
from shapevtk.geometry.image_io import (
    read_2d_scalar_image,
    read_2d_scalar_image_as_type,
    read_3d_scalar_image,
    read_3d_scalar_image_as_type,
    write_image,
    write_vtk,
)
from shapevtk.geometry.scalar_type import scalar_type_of_file
from shapevtk.utils.errors import NativeIOError, ScalarTypeMismatchError, UnsupportedFileTypeError
from shapevtk.utils.types import InterpolationMode, ScalarDataType, convert_values


def _tmp_path(suffix):
    """Reserve a temp file name with *suffix*, return its path."""
    fd, path = tempfile.mkstemp(suffix=suffix)
    os.close(fd)
    return path


def _volume(dtype=np.int16):
    values = (np.arange(2 * 3 * 4) - 5).reshape(2, 3, 4).astype(dtype)
    return DiscreteImage(values, origin=(1.0, -2.0, 3.5), spacing=(0.5, 1.0, 2.0))


def _extreme_values(scalar_type):
    """Values spanning *scalar_type*, most of them outside narrower types."""
    if scalar_type.is_integer:
        info = np.iinfo(scalar_type.dtype)
        candidates = [info.min, info.min + 1, -129, -1, 0, 1, 127, 128, 255, 256,
                      300, 40000, 70000, info.max - 1, info.max]
        values = [v for v in candidates if info.min <= v <= info.max]
    else:
        values = [-70000.75, -300.5, -1.5, -0.25, 0.0, 1.5, 127.9, 255.9, 300.25, 70000.5]
    values = np.array(sorted(set(values)), dtype=scalar_type.dtype)
    return values.reshape(-1, 1, 1)


# ---------------------------------------------------------------------------
# write_vtk / read_*_scalar_image
# ---------------------------------------------------------------------------


class TestVtkRoundTrip:
    def test_3d(self):
        img = _volume()
        path = _tmp_path(".vtk")
        try:
            write_vtk(img, path)
            out = read_3d_scalar_image(path, ScalarDataType.SHORT)
        finally:
            os.unlink(path)
        assert out.size == (2, 3, 4)
        assert out.scalar_type is ScalarDataType.SHORT
        np.testing.assert_array_equal(out.values, img.values)
        np.testing.assert_allclose(out.origin, img.origin)
        np.testing.assert_allclose(out.spacing, img.spacing)

    def test_2d(self):
        values = np.array([[0, 250], [17, 3], [9, 8]], dtype=np.uint8)
        img = DiscreteImage(values, origin=(4.0, 5.0), spacing=(0.25, 0.75))
        path = _tmp_path(".vtk")
        try:
            write_vtk(img, path)
            out = read_2d_scalar_image(path, ScalarDataType.UBYTE)
        finally:
            os.unlink(path)
        assert out.dim == 2
        np.testing.assert_array_equal(out.values, values)
        np.testing.assert_allclose(out.origin, [4.0, 5.0])
        np.testing.assert_allclose(out.spacing, [0.25, 0.75])

    @pytest.mark.parametrize("scalar_type", list(ScalarDataType))
    def test_every_scalar_type(self, scalar_type):
        img = _volume(np.uint8).astype(scalar_type)
        path = _tmp_path(".vtk")
        try:
            write_vtk(img, path)
            stored = scalar_type_of_file(path)
            out = read_3d_scalar_image(path, scalar_type)
        finally:
            os.unlink(path)
        assert stored is scalar_type
        assert out.scalar_type is scalar_type
        np.testing.assert_array_equal(out.values, img.values)

    def test_3d_file_as_2d_raises(self):
        path = _tmp_path(".vtk")
        try:
            write_vtk(_volume(), path)
            with pytest.raises(ValueError, match="2D"):
                read_2d_scalar_image(path, ScalarDataType.SHORT)
        finally:
            os.unlink(path)

    def test_write_to_missing_directory_raises(self):
        path = os.path.join(tempfile.gettempdir(), "shapevtk-no-such-dir", "img.vtk")
        with pytest.raises(NativeIOError) as info:
            write_vtk(_volume(), path)
        assert info.value.code != 0

    def test_rotated_image_is_resampled(self):
        values = np.arange(6, dtype=np.int16).reshape(3, 2)
        direction = np.array([[0.0, -1.0], [1.0, 0.0]])
        img = DiscreteImage(values, origin=(0.0, 0.0), spacing=(1.0, 1.0), direction=direction)
        path = _tmp_path(".vtk")
        try:
            write_vtk(img, path, interpolation_mode=InterpolationMode.NEAREST_NEIGHBOR)
            out = read_2d_scalar_image(path, ScalarDataType.SHORT)
        finally:
            os.unlink(path)
        # voxel (a, b) of the output sits at world (-1 + a, b) = source index (b, 1 - a)
        expected = np.array([[values[b, 1 - a] for b in range(3)] for a in range(2)])
        assert out.size == (2, 3)
        np.testing.assert_allclose(out.origin, [-1.0, 0.0])
        np.testing.assert_array_equal(out.values, expected)


# ---------------------------------------------------------------------------
# Typed reads
# ---------------------------------------------------------------------------


class TestTypedReads:
    def test_mismatch_raises(self):
        path = _tmp_path(".vtk")
        try:
            write_vtk(_volume(), path)
            with pytest.raises(ScalarTypeMismatchError) as info:
                read_3d_scalar_image(path, ScalarDataType.FLOAT)
        finally:
            os.unlink(path)
        assert info.value.expected is ScalarDataType.FLOAT
        assert info.value.found is ScalarDataType.SHORT

    def test_missing_file_raises(self):
        with pytest.raises(FileNotFoundError):
            read_3d_scalar_image("/nonexistent/image.vtk", ScalarDataType.SHORT)

    @pytest.mark.parametrize("reader", [read_3d_scalar_image, read_3d_scalar_image_as_type])
    @pytest.mark.parametrize("name", ["image.mha", "image.Vtk", "image.nii.gz"])
    def test_unsupported_suffix_3d(self, reader, name):
        with pytest.raises(UnsupportedFileTypeError):
            reader(name, ScalarDataType.FLOAT)

    @pytest.mark.parametrize("reader", [read_2d_scalar_image, read_2d_scalar_image_as_type])
    def test_nifti_not_supported_for_2d(self, reader):
        with pytest.raises(UnsupportedFileTypeError):
            reader("image.nii", ScalarDataType.FLOAT)


# ---------------------------------------------------------------------------
# Reads with conversion
# ---------------------------------------------------------------------------


class TestReadAsType:
    @pytest.mark.parametrize("source", list(ScalarDataType))
    @pytest.mark.parametrize("target", list(ScalarDataType))
    def test_every_pair_equals_read_then_convert(self, source, target):
        img = DiscreteImage(_extreme_values(source), (0.0, 0.0, 0.0), (1.0, 1.0, 1.0))
        path = _tmp_path(".vtk")
        try:
            write_vtk(img, path)
            plain = read_3d_scalar_image(path, source)
            coerced = read_3d_scalar_image_as_type(path, target)
        finally:
            os.unlink(path)
        expected = convert_values(plain.values, source, target)
        assert coerced.scalar_type is target
        np.testing.assert_array_equal(coerced.values, expected)

    def test_equals_read_then_convert(self):
        img = _volume()
        path = _tmp_path(".vtk")
        try:
            write_vtk(img, path)
            plain = read_3d_scalar_image(path, ScalarDataType.SHORT)
            coerced = read_3d_scalar_image_as_type(path, ScalarDataType.UBYTE)
        finally:
            os.unlink(path)
        expected = convert_values(plain.values, ScalarDataType.SHORT, ScalarDataType.UBYTE)
        assert coerced.scalar_type is ScalarDataType.UBYTE
        np.testing.assert_array_equal(coerced.values, expected)
        np.testing.assert_allclose(coerced.origin, plain.origin)
        np.testing.assert_allclose(coerced.spacing, plain.spacing)

    def test_same_type_equals_plain_read(self):
        img = _volume(np.float32)
        path = _tmp_path(".vtk")
        try:
            write_vtk(img, path)
            plain = read_3d_scalar_image(path, ScalarDataType.FLOAT)
            coerced = read_3d_scalar_image_as_type(path, ScalarDataType.FLOAT)
        finally:
            os.unlink(path)
        np.testing.assert_array_equal(coerced.values, plain.values)
        assert coerced.scalar_type is ScalarDataType.FLOAT

    def test_2d_float_to_short(self):
        values = np.array([[1.5, -2.5], [300.0, 0.25]], dtype=np.float64)
        img = DiscreteImage(values, (0.0, 0.0), (1.0, 1.0))
        path = _tmp_path(".vtk")
        try:
            write_vtk(img, path)
            out = read_2d_scalar_image_as_type(path, "short")
        finally:
            os.unlink(path)
        np.testing.assert_array_equal(out.values, [[1, -2], [300, 0]])


# ---------------------------------------------------------------------------
# write_image
# ---------------------------------------------------------------------------


class TestWriteImage:
    def test_dispatch_vtk(self):
        path = _tmp_path(".vtk")
        try:
            write_image(_volume(), path)
            out = read_3d_scalar_image(path, ScalarDataType.SHORT)
        finally:
            os.unlink(path)
        assert out.size == (2, 3, 4)

    def test_dispatch_nifti(self):
        path = _tmp_path(".nii")
        try:
            write_image(_volume(), path)
            out = read_3d_scalar_image(path, ScalarDataType.SHORT)
        finally:
            os.unlink(path)
        np.testing.assert_array_equal(out.values, _volume().values)

    def test_unsupported_suffix_raises(self):
        with pytest.raises(UnsupportedFileTypeError):
            write_image(_volume(), "image.mhd")
