"""Distance measures between meshes in point correspondence."""

import numpy as np


def _points(mesh):
    return np.asarray(getattr(mesh, "vertices", mesh), dtype=np.float64)


def rigid_alignment(source, target):
    """Return the rotation and translation best mapping *source* onto *target*.

    Least-squares rigid fit (Kabsch) of two ``(N, 3)`` point sets in
    correspondence, without reflection.

    Returns
    -------
    rotation : numpy.ndarray, shape (3, 3)
    translation : numpy.ndarray, shape (3,)
    """
    src_c = source.mean(axis=0)
    tgt_c = target.mean(axis=0)
    h = (source - src_c).T @ (target - tgt_c)
    u, _, vt = np.linalg.svd(h)
    d = np.sign(np.linalg.det(vt.T @ u.T))
    correction = np.diag([1.0, 1.0, d])
    rotation = vt.T @ correction @ u.T
    translation = tgt_c - rotation @ src_c
    return rotation, translation


def average_distance(a, b) -> float:
    """Mean Euclidean distance between corresponding points of *a* and *b*."""
    pa, pb = _points(a), _points(b)
    if pa.shape != pb.shape:
        raise ValueError(
            f"Meshes must have the same number of points, got {pa.shape[0]} and {pb.shape[0]}."
        )
    return float(np.linalg.norm(pa - pb, axis=1).mean())


def procrustes_distance(a, b) -> float:
    """Mean point distance after rigidly aligning *a* onto *b*.

    Parameters
    ----------
    a, b : TriangleMesh, TetrahedralMesh or array_like
        Meshes (or ``(N, 3)`` point arrays) in point correspondence.

    Returns
    -------
    float

    Raises
    ------
    ValueError
        If the point counts differ.
    """
    pa, pb = _points(a), _points(b)
    if pa.shape != pb.shape:
        raise ValueError(
            f"Meshes must have the same number of points, got {pa.shape[0]} and {pb.shape[0]}."
        )
    rotation, translation = rigid_alignment(pa, pb)
    aligned = pa @ rotation.T + translation
    return average_distance(aligned, pb)
