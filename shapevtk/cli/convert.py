#!/usr/bin/env python3
"""CLI entry point for converting 3D scalar images between VTK and Nifti.

Reads a ``.vtk``, ``.nii`` or ``.nia`` image, optionally converts its voxels
to another scalar type and writes it as ``.vtk`` or ``.nii``.

Usage::

    shapevtk-convert t1.nii t1.vtk
    shapevtk-convert labels.vtk labels.nii --as-type USHORT
    shapevtk-convert oblique.nii oblique.vtk --interpolation cubic

See ``shapevtk-convert --help`` for the full list of options.
"""

import argparse
import logging

from .. import read_3d_scalar_image_as_type, scalar_type_of_file, write_image
from .._version import __version__
from ..utils.errors import ShapeVtkError
from ..utils.types import InterpolationMode, ScalarDataType

# Module logger
logger = logging.getLogger(__name__)


def run(argv=None):
    """Command-line entry point for shapevtk image conversion.

    Parameters
    ----------
    argv : list of str, optional
        Arguments to parse instead of :data:`sys.argv`.

    Raises
    ------
    SystemExit
        Through :meth:`argparse.ArgumentParser.error` when the input cannot
        be read or the output cannot be written.
    """
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    parser = argparse.ArgumentParser(
        prog="shapevtk-convert",
        description="Convert a 3D scalar image between VTK and Nifti.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("input", type=str, help="Input image (.vtk, .nii or .nia).")
    parser.add_argument("output", type=str, help="Output image (.vtk or .nii).")
    parser.add_argument(
        "-t", "--as-type", dest="as_type", type=str.upper, default=None,
        choices=list(ScalarDataType.__members__),
        help="Voxel type of the output; defaults to the stored type.",
    )
    parser.add_argument(
        "-i", "--interpolation", type=str.upper, default="AUTOMATIC",
        choices=list(InterpolationMode.__members__),
        help="Resampling kernel for rotated images written to VTK "
             "(default: AUTOMATIC).",
    )
    parser.add_argument("--favour-qform", dest="favour_qform", action="store_true",
                        help="Prefer the Nifti qform over the sform.")
    args = parser.parse_args(argv)

    logger.debug("Parsed args: %s", vars(args))

    try:
        scalar_type = args.as_type or scalar_type_of_file(args.input)
        img = read_3d_scalar_image_as_type(
            args.input, scalar_type, favour_qform=args.favour_qform
        )
        write_image(img, args.output, interpolation_mode=InterpolationMode[args.interpolation])
        logger.info(
            "Wrote %s (%s, size %s)", args.output, img.scalar_type.name,
            "x".join(str(s) for s in img.size),
        )
    except (ShapeVtkError, FileNotFoundError, ValueError) as e:
        parser.error(str(e))
