"""Tests for shapevtk/geometry/operations.py."""

import logging

import numpy as np
import pytest
import vtk

from shapevtk.geometry.conversion import vtk_polydata_to_triangle_mesh
from shapevtk.geometry.mesh import TriangleMesh
from shapevtk.geometry.operations import decimate


def _sphere(resolution=40):
    source = vtk.vtkSphereSource()
    source.SetThetaResolution(resolution)
    source.SetPhiResolution(resolution)
    source.Update()
    return vtk_polydata_to_triangle_mesh(source.GetOutput())


class TestDecimate:
    def test_reaches_about_target(self):
        mesh = _sphere()
        out = decimate(mesh, 500)
        assert isinstance(out, TriangleMesh)
        assert out.number_of_points < mesh.number_of_points
        assert abs(out.number_of_points - 500) <= 0.2 * 500

    def test_input_unchanged(self):
        mesh = _sphere(20)
        vertices = mesh.vertices.copy()
        decimate(mesh, 100)
        np.testing.assert_array_equal(mesh.vertices, vertices)

    def test_target_above_count_keeps_points(self, caplog):
        mesh = _sphere(20)
        with caplog.at_level(logging.WARNING, logger="shapevtk.geometry.operations"):
            out = decimate(mesh, mesh.number_of_points + 10)
        assert out.number_of_points == mesh.number_of_points
        assert "does not reduce" in caplog.text

    @pytest.mark.parametrize("target", [0, -5, 2.5])
    def test_invalid_target_raises(self, target):
        with pytest.raises(ValueError):
            decimate(_sphere(10), target)
