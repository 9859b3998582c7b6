"""Typed exceptions shared by the store, the CRUD service and the HTTP layer."""

import enum


class ValidationErrorKind(str, enum.Enum):
    EMPTY_PATH = "empty_path"
    PATH_TOO_LONG = "path_too_long"
    INVALID_PATH_FORMAT = "invalid_path_format"
    RESERVED_PATH = "reserved_path"
    EMPTY_URL = "empty_url"
    MALFORMED_URL = "malformed_url"
    UNSUPPORTED_SCHEME = "unsupported_scheme"
    MISSING_HOST = "missing_host"


_PATH_KINDS = {
    ValidationErrorKind.EMPTY_PATH,
    ValidationErrorKind.PATH_TOO_LONG,
    ValidationErrorKind.INVALID_PATH_FORMAT,
    ValidationErrorKind.RESERVED_PATH,
}


class LinkValidationError(Exception):
    """A path or url broke one of the link rules."""

    def __init__(self, kind: ValidationErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    @property
    def field(self) -> str:
        return "path" if self.kind in _PATH_KINDS else "url"


class NotFoundError(Exception):
    """Requested link was not found."""


class AlreadyExistsError(Exception):
    """Another link already uses this path."""

    def __init__(self, path: str):
        super().__init__(f"a link with path '{path}' already exists")
        self.path = path


class StorageError(Exception):
    """Database failure other than a path collision."""
