#!/usr/bin/env python3
"""CLI entry point for quadric decimation of a triangle mesh file.

Usage::

    shapevtk-decimate lh.white.vtk lh.white.10k.vtp --target 10000

Input and output may be ``.vtk``, ``.vtp``, ``.stl`` or ``.ply``.
"""

import argparse
import logging

from .. import decimate, read_mesh, write_mesh
from .._version import __version__
from ..utils.errors import ShapeVtkError

# Module logger
logger = logging.getLogger(__name__)


def run(argv=None):
    """Command-line entry point for shapevtk mesh decimation.

    Parameters
    ----------
    argv : list of str, optional
        Arguments to parse instead of :data:`sys.argv`.
    """
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    parser = argparse.ArgumentParser(
        prog="shapevtk-decimate",
        description="Reduce a triangle mesh to about a target number of vertices.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("input", type=str, help="Input mesh (.vtk, .vtp, .stl or .ply).")
    parser.add_argument("output", type=str, help="Output mesh (.vtk, .vtp, .stl or .ply).")
    parser.add_argument("-n", "--target", type=int, required=True,
                        help="Requested number of vertices.")
    args = parser.parse_args(argv)

    try:
        if args.target <= 0:
            raise ValueError(f"--target must be positive, got {args.target}.")
    except ValueError as e:
        parser.error(str(e))

    logger.debug("Parsed args: %s", vars(args))

    try:
        mesh = read_mesh(args.input)
        result = decimate(mesh, args.target)
        write_mesh(result, args.output)
        logger.info(
            "Decimated %d -> %d vertices, saved to %s",
            mesh.number_of_points, result.number_of_points, args.output,
        )
    except (ShapeVtkError, FileNotFoundError, ValueError, RuntimeError) as e:
        parser.error(str(e))
