"""Lifetime management of native VTK objects.

VTK objects are reference counted on the C++ side and wrapped by Python
objects. Readers, writers and filters keep their inputs and outputs alive
through pipeline connections, so dropping the Python name alone does not
free the voxel buffers. Every adapter in this package therefore creates its
VTK objects inside a :class:`NativeScope`, which

* holds a single process-wide lock for the duration of the call,
* releases every tracked object explicitly on exit (also when an exception
  is raised), and
* runs one garbage collection sweep to reclaim wrapper cycles the explicit
  release cannot reach.

The sweep inspects interpreter-wide state, so it must not overlap with other
native work from this package; the shared lock guarantees that.
"""

import gc
import logging
import threading

import vtk

logger = logging.getLogger(__name__)

_NATIVE_LOCK = threading.RLock()
_local = threading.local()


def collect_garbage():
    """Run a serialized garbage collection sweep.

    Returns
    -------
    int
        Number of unreachable objects found by :func:`gc.collect`.
    """
    with _NATIVE_LOCK:
        n = gc.collect()
    logger.debug("Native sweep collected %d objects", n)
    return n


def release(obj):
    """Release the native resources held by a single VTK object.

    Algorithms drop their input connections, data objects free their
    arrays. Anything else is left untouched.
    """
    if isinstance(obj, vtk.vtkAlgorithm):
        obj.RemoveAllInputs()
    elif isinstance(obj, vtk.vtkDataObject):
        obj.ReleaseData()


class NativeScope:
    """Scoped ownership of the VTK objects created by one adapter call.

    Usage::

        with NativeScope() as scope:
            reader = scope.track(vtk.vtkStructuredPointsReader())
            ...

    Nested scopes share the lock; only the outermost scope runs the sweep.

    Parameters
    ----------
    sweep : bool, default=True
        Run :func:`collect_garbage` when the outermost scope exits.
    """

    def __init__(self, sweep=True):
        self.sweep = sweep
        self._objects = []

    def track(self, obj):
        """Register *obj* for release on exit and return it unchanged."""
        self._objects.append(obj)
        return obj

    def release_all(self):
        """Release all tracked objects, most recent first."""
        while self._objects:
            release(self._objects.pop())

    def __enter__(self):
        _NATIVE_LOCK.acquire()
        _local.depth = getattr(_local, "depth", 0) + 1
        return self

    def __exit__(self, exc_type, exc, tb):
        _local.depth -= 1
        try:
            self.release_all()
            if self.sweep and _local.depth == 0:
                collect_garbage()
        finally:
            _NATIVE_LOCK.release()
        return False
