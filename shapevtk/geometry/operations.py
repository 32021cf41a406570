"""Mesh operations backed by VTK filters."""

import logging

import vtk

from ..utils.native import NativeScope
from .conversion import triangle_mesh_to_vtk_polydata, vtk_polydata_to_triangle_mesh
from .mesh import TriangleMesh

logger = logging.getLogger(__name__)


def decimate(mesh: TriangleMesh, target_number_of_points: int) -> TriangleMesh:
    """Reduce the number of vertices of a mesh to about a target count.

    Runs ``vtkQuadricDecimation`` with a target reduction of
    ``1 - target / mesh.number_of_points``. Quadric decimation controls the
    triangle count, so the vertex count of the result is close to, but not
    exactly, the target.

    Parameters
    ----------
    mesh : TriangleMesh
        Mesh to simplify.
    target_number_of_points : int
        Requested number of vertices, positive.

    Returns
    -------
    TriangleMesh
        The decimated mesh.

    Raises
    ------
    ValueError
        If the target is not a positive integer or the mesh has no vertices.
    RuntimeError
        If VTK returned a result that is not a valid triangle mesh.

    Notes
    -----
    A target at or above the current vertex count gives a reduction of zero
    or less. VTK clamps the reduction to ``[0, 1]``, so the filter then
    collapses nothing and the vertex count is unchanged; a warning is logged.
    """
    if isinstance(target_number_of_points, bool) or int(target_number_of_points) != target_number_of_points:
        raise ValueError(f"target_number_of_points must be an integer, got {target_number_of_points!r}.")
    if target_number_of_points <= 0:
        raise ValueError(f"target_number_of_points must be positive, got {target_number_of_points}.")
    n_points = mesh.number_of_points
    if n_points == 0:
        raise ValueError("Cannot decimate a mesh without vertices.")

    reduction = 1.0 - target_number_of_points / float(n_points)
    if reduction <= 0.0:
        logger.warning(
            "Target of %d vertices does not reduce a mesh of %d vertices; "
            "decimation leaves the vertex count unchanged.",
            target_number_of_points, n_points,
        )
    logger.debug("Decimating %d -> %d vertices (reduction %.4f)", n_points, target_number_of_points, reduction)

    with NativeScope() as scope:
        polydata = scope.track(triangle_mesh_to_vtk_polydata(mesh))
        decimator = scope.track(vtk.vtkQuadricDecimation())
        decimator.SetTargetReduction(reduction)
        decimator.SetInputData(polydata)
        decimator.Update()
        output = scope.track(decimator.GetOutput())
        try:
            result = vtk_polydata_to_triangle_mesh(output)
        except ValueError as exc:
            raise RuntimeError(f"Quadric decimation produced an invalid mesh: {exc}") from exc

    logger.debug("Decimated mesh has %d vertices", result.number_of_points)
    return result
