import argparse

from .. import sys_info


def run(argv=None):
    """Run the sys_info command-line helper.

    Parses CLI arguments and prints platform, CPU, memory and dependency
    versions through the package-level :func:`~shapevtk.sys_info`.

    Parameters
    ----------
    argv : list of str, optional
        Arguments to parse instead of :data:`sys.argv`.
    """
    parser = argparse.ArgumentParser(
        prog=f"{__package__.split('.')[0]}-sys_info",
        description="Print platform and dependency information for bug reports.",
    )
    parser.add_argument(
        "--developer",
        help="also list the test dependencies",
        action="store_true",
    )
    args = parser.parse_args(argv)

    sys_info(developer=args.developer)
