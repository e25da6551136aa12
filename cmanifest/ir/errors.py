"""Extraction errors.

All of these are local and recoverable: the assembler skips the offending
declaration, the pipeline skips the offending header.
"""

from __future__ import annotations


class ManifestError(ValueError):
    """Base class for declarations that cannot be turned into manifest records."""

    code = "MANIFEST_ERROR"

    def __init__(self, message: str, declaration: str = ""):
        super().__init__(message)
        self.message = message
        self.declaration = declaration


class BadImport(ManifestError):
    """An include or header path cannot be decomposed into path segments."""

    code = "BAD_IMPORT"


class BadObject(ManifestError):
    """A struct or enum declaration is malformed."""

    code = "BAD_OBJECT"


class BadProperty(ManifestError):
    """A function, method or property declaration is malformed."""

    code = "BAD_PROPERTY"


class BadType(ManifestError):
    """A type expression cannot be normalized."""

    code = "BAD_TYPE"


class ManifestWriteError(OSError):
    """A manifest artifact could not be written."""

    def __init__(self, path, cause: OSError):
        super().__init__(f"Failed to write manifest {path}: {cause}")
        self.path = path
        self.cause = cause
