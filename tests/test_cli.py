"""Tests for the shapevtk command-line entry points.

Each CLI ``run()`` takes an explicit argv list, so no subprocess is needed.
"""

import io
import os
import tempfile

import numpy as np
import pytest
import vtk

from shapevtk._config import set_vtk_warnings, sys_info, vtk_warnings_from_env
from shapevtk.cli import convert, decimate
from shapevtk.commands import sys_info as sys_info_cmd
from shapevtk.geometry.conversion import vtk_polydata_to_triangle_mesh
from shapevtk.geometry.image import DiscreteImage
from shapevtk.geometry.image_io import read_3d_scalar_image, write_vtk
from shapevtk.geometry.mesh_io import read_mesh, write_mesh
from shapevtk.utils.types import ScalarDataType


def _tmp_path(suffix):
    fd, path = tempfile.mkstemp(suffix=suffix)
    os.close(fd)
    return path


# ---------------------------------------------------------------------------
# shapevtk-convert
# ---------------------------------------------------------------------------


class TestConvert:
    def test_vtk_to_nifti_with_type(self):
        img = DiscreteImage(np.arange(8, dtype=np.float32).reshape(2, 2, 2) + 0.5,
                            (0.0, 0.0, 0.0), (1.0, 1.0, 1.0))
        src, dst = _tmp_path(".vtk"), _tmp_path(".nii")
        try:
            write_vtk(img, src)
            convert.run([src, dst, "--as-type", "ushort"])
            out = read_3d_scalar_image(dst, ScalarDataType.USHORT)
        finally:
            os.unlink(src)
            os.unlink(dst)
        np.testing.assert_array_equal(out.values, np.arange(8).reshape(2, 2, 2))

    def test_keeps_stored_type(self):
        img = DiscreteImage(np.ones((2, 2, 2), dtype=np.int8), (0, 0, 0), (1, 1, 1))
        src, dst = _tmp_path(".vtk"), _tmp_path(".vtk")
        try:
            write_vtk(img, src)
            convert.run([src, dst])
            out = read_3d_scalar_image(dst, ScalarDataType.BYTE)
        finally:
            os.unlink(src)
            os.unlink(dst)
        assert out.size == (2, 2, 2)

    def test_unsupported_input_exits(self, capsys):
        with pytest.raises(SystemExit) as info:
            convert.run(["image.mhd", "image.vtk"])
        assert info.value.code == 2
        assert "Unsupported file extension" in capsys.readouterr().err

    def test_unknown_type_rejected(self):
        with pytest.raises(SystemExit):
            convert.run(["a.vtk", "b.vtk", "--as-type", "complex"])


# ---------------------------------------------------------------------------
# shapevtk-decimate
# ---------------------------------------------------------------------------


class TestDecimateCli:
    def test_decimates_file(self):
        source = vtk.vtkSphereSource()
        source.SetThetaResolution(30)
        source.SetPhiResolution(30)
        source.Update()
        mesh = vtk_polydata_to_triangle_mesh(source.GetOutput())
        src, dst = _tmp_path(".vtp"), _tmp_path(".ply")
        try:
            write_mesh(mesh, src)
            decimate.run([src, dst, "--target", "200"])
            out = read_mesh(dst)
        finally:
            os.unlink(src)
            os.unlink(dst)
        assert out.number_of_points < mesh.number_of_points

    def test_nonpositive_target_exits(self, capsys):
        with pytest.raises(SystemExit):
            decimate.run(["a.vtk", "b.vtk", "--target", "0"])
        assert "--target must be positive" in capsys.readouterr().err

    def test_target_required(self):
        with pytest.raises(SystemExit):
            decimate.run(["a.vtk", "b.vtk"])


# ---------------------------------------------------------------------------
# sys_info and VTK warnings
# ---------------------------------------------------------------------------


class TestConfig:
    def test_sys_info_lists_dependencies(self):
        buf = io.StringIO()
        sys_info(fid=buf)
        text = buf.getvalue()
        assert "Platform:" in text
        assert "numpy:" in text
        assert "vtk:" in text

    def test_sys_info_command(self, capsys):
        sys_info_cmd.run(["--developer"])
        assert "Dependencies info" in capsys.readouterr().out

    @pytest.mark.parametrize("raw,expected", [
        ("0", False), ("off", False), ("False", False), ("1", True), ("yes", True),
    ])
    def test_warning_switch_from_env(self, raw, expected):
        assert vtk_warnings_from_env({"SHAPEVTK_VTK_WARNINGS": raw}) is expected

    def test_warning_switch_unset(self):
        assert vtk_warnings_from_env({}) is None

    def test_set_vtk_warnings(self):
        previous = vtk.vtkObject.GetGlobalWarningDisplay()
        try:
            set_vtk_warnings(False)
            assert vtk.vtkObject.GetGlobalWarningDisplay() == 0
            set_vtk_warnings(True)
            assert vtk.vtkObject.GetGlobalWarningDisplay() == 1
        finally:
            vtk.vtkObject.SetGlobalWarningDisplay(previous)
