"""Exception types raised by the shapevtk adapters.

Every exception derives from :class:`ShapeVtkError` and from the builtin
exception a caller would otherwise expect (``OSError``, ``ValueError``,
``TypeError``), so existing ``except ValueError`` handlers keep working.
"""


class ShapeVtkError(Exception):
    """Base class of all errors raised by shapevtk."""


class NativeIOError(ShapeVtkError, OSError):
    """A VTK reader or writer reported a nonzero error code.

    Parameters
    ----------
    path : str
        File that was being read or written.
    code : int
        Opaque error code returned by ``GetErrorCode()``.
    action : str, default="read"
        ``"read"`` or ``"write"``, used in the message only.
    """

    def __init__(self, path, code, action="read"):
        self.path = str(path)
        self.code = code
        super().__init__(
            f"Failed to {action} vtk file {self.path!r} "
            f"(error code from vtk = {code})."
        )


class UnsupportedFileTypeError(ShapeVtkError, ValueError):
    """The file suffix is not handled by the requested operation."""

    def __init__(self, path, supported=()):
        self.path = str(path)
        self.supported = tuple(supported)
        msg = f"Unsupported file extension for {self.path!r}."
        if self.supported:
            msg += f"  Supported formats: {', '.join(self.supported)}."
        super().__init__(msg)


class UnknownScalarTypeError(ShapeVtkError, ValueError):
    """A scalar type descriptor has no supported mapping."""

    def __init__(self, descriptor):
        self.descriptor = descriptor
        super().__init__(f"Unknown scalar type {descriptor}.")


class NoConversionError(UnknownScalarTypeError):
    """No element conversion is defined between two scalar types."""

    def __init__(self, source, target):
        self.source = source
        self.target = target
        super().__init__(f"{source!r} -> {target!r} (no conversion defined)")


class ScalarTypeMismatchError(ShapeVtkError, TypeError):
    """A typed read found a different scalar type than requested."""

    def __init__(self, expected, found, path=None):
        self.expected = expected
        self.found = found
        self.path = None if path is None else str(path)
        where = f" in {self.path!r}" if self.path else ""
        super().__init__(
            f"Requested voxel type {expected.name} but found {found.name}{where}.  "
            f"Use the *_as_type readers to convert on load."
        )
