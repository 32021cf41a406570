"""Configuration and system-info helpers (top-level module)."""

import logging
import os
import platform
import re
import sys
from functools import partial
from importlib.metadata import requires, version
from pathlib import Path
from typing import IO, Callable, Optional

import psutil
import vtk

logger = logging.getLogger(__name__)

#: Environment variable read at import; ``0``, ``false``, ``no`` or ``off``
#: mute VTK's warning output.
VTK_WARNINGS_ENV = "SHAPEVTK_VTK_WARNINGS"


def set_vtk_warnings(enabled: bool):
    """Enable or disable VTK's global warning display.

    VTK reports reader and writer warnings through its own output window.
    The library surfaces failures as exceptions, so these messages can be
    muted in batch runs.

    Parameters
    ----------
    enabled : bool
        ``True`` to show VTK warnings, ``False`` to hide them.
    """
    vtk.vtkObject.SetGlobalWarningDisplay(1 if enabled else 0)
    logger.debug("VTK warning display %s", "enabled" if enabled else "disabled")


def vtk_warnings_from_env(environ=None) -> Optional[bool]:
    """Return the warning switch requested by :data:`VTK_WARNINGS_ENV`.

    Returns ``None`` when the variable is unset, so the VTK default stays.
    """
    environ = os.environ if environ is None else environ
    raw = environ.get(VTK_WARNINGS_ENV)
    if raw is None:
        return None
    return raw.strip().lower() not in ("0", "false", "no", "off")


def _pyproject_requires(key=None):
    """Read dependencies from ``pyproject.toml`` when package metadata is missing."""
    try:
        import tomllib as _toml
    except ImportError:
        return []
    pyproject_path = Path(__file__).resolve().parents[1] / "pyproject.toml"
    if not pyproject_path.exists():
        return []
    with pyproject_path.open("rb") as fh:
        proj = _toml.load(fh).get("project", {})
    if key is None:
        return proj.get("dependencies", []) or []
    return (proj.get("optional-dependencies", {}) or {}).get(key, []) or []


def sys_info(fid: Optional[IO] = None, developer: bool = False):
    """Print the system information for debugging.

    Parameters
    ----------
    fid : file-like, default=None
        The file to write to, passed to :func:`print`.
        Can be None to use :data:`sys.stdout`.
    developer : bool, default=False
        If True, display information about optional dependencies.
    """
    ljust = 26
    out = partial(print, end="", file=fid)
    package = __package__.split(".")[0]

    # OS information
    out("Platform:".ljust(ljust) + platform.platform() + "\n")
    # Python information
    out("Python:".ljust(ljust) + sys.version.replace("\n", " ") + "\n")
    out("Executable:".ljust(ljust) + sys.executable + "\n")
    # CPU information
    out("CPU:".ljust(ljust) + platform.processor() + "\n")
    out("Physical cores:".ljust(ljust) + str(psutil.cpu_count(False)) + "\n")
    out("Logical cores:".ljust(ljust) + str(psutil.cpu_count(True)) + "\n")
    # Memory information
    out("RAM:".ljust(ljust))
    out(f"{psutil.virtual_memory().total / float(2 ** 30):0.1f} GB\n")
    out("SWAP:".ljust(ljust))
    out(f"{psutil.swap_memory().total / float(2 ** 30):0.1f} GB\n")

    # dependencies
    out("\nDependencies info\n")
    try:
        pkg_version = version(package)
    except Exception:
        pkg_version = "Not installed."
    out(f"{package}:".ljust(ljust) + pkg_version + "\n")

    try:
        raw_requires = requires(package) or []
    except Exception:
        raw_requires = []
    if not raw_requires:
        raw_requires = _pyproject_requires()

    dependencies = [elt.split(";")[0].rstrip() for elt in raw_requires if "extra" not in elt]
    _list_dependencies_info(out, ljust, dependencies)

    # extras
    if developer:
        for key in ("test",):
            try:
                extra_requires = [
                    elt for elt in (requires(package) or [])
                    if f"extra == '{key}'" in elt or f'extra == "{key}"' in elt
                ]
            except Exception:
                extra_requires = []
            if not extra_requires:
                extra_requires = _pyproject_requires(key)
            dependencies = [elt.split(";")[0].rstrip() for elt in extra_requires]
            if len(dependencies) == 0:
                continue
            out(f"\nOptional '{key}' info\n")
            _list_dependencies_info(out, ljust, dependencies)


def _list_dependencies_info(out: Callable, ljust: int, dependencies: list[str]):
    """List dependencies names and versions.

    Parameters
    ----------
    out : Callable
        output function
    ljust : int
         length of returned string
    dependencies : List[str]
        list of dependencies

    """
    for dep in dependencies:
        # handle dependencies with version specifiers
        specifiers_pattern = r"(~=|==|!=|<=|>=|<|>|===)"
        specifiers = re.findall(specifiers_pattern, dep)
        if len(specifiers) != 0:
            dep, _ = dep.split(specifiers[0])
            while not dep[-1].isalpha():
                dep = dep[:-1]
        # handle dependencies provided with a [key]
        if "[" in dep:
            dep = dep.split("[")[0]
        try:
            version_ = version(dep)
        except Exception:
            version_ = "Not found."

        # the VTK wheel can differ from the library it was built against
        if dep == "vtk" and version_ != "Not found.":
            out(f"{dep}:".ljust(ljust) + version_
                + f" (library: {vtk.vtkVersion.GetVTKVersion()})\n")
        else:
            out(f"{dep}:".ljust(ljust) + version_ + "\n")
