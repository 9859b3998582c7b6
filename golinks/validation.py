import re
from urllib.parse import urlsplit

from golinks.errors import LinkValidationError
from golinks.errors import ValidationErrorKind as Kind

MAX_PATH_LENGTH = 50
PATH_PATTERN = re.compile(r"[A-Za-z0-9_-]+")
RESERVED_PATHS = frozenset({"api", "swagger", "go", "favicon.ico", "robots.txt"})
ALLOWED_SCHEMES = ("http", "https")


def validate_path(raw: str | None) -> str:
    """Check an alias and return it with surrounding whitespace removed."""
    path = (raw or "").strip()
    if not path:
        raise LinkValidationError(Kind.EMPTY_PATH, "path is required")
    if len(path) > MAX_PATH_LENGTH:
        raise LinkValidationError(Kind.PATH_TOO_LONG, f"path must be {MAX_PATH_LENGTH} characters or less")
    if not PATH_PATTERN.fullmatch(path):
        raise LinkValidationError(
            Kind.INVALID_PATH_FORMAT,
            "path can only contain letters, numbers, hyphens, and underscores",
        )
    if path.lower() in RESERVED_PATHS:
        raise LinkValidationError(Kind.RESERVED_PATH, f"'{path}' is a reserved path")
    return path


def validate_url(raw: str | None) -> str:
    """Check a destination and return it trimmed. Only absolute http(s) URLs with a host pass."""
    url = (raw or "").strip()
    if not url:
        raise LinkValidationError(Kind.EMPTY_URL, "url is required")
    if any(ch.isspace() for ch in url):
        raise LinkValidationError(Kind.MALFORMED_URL, "invalid url")
    try:
        parts = urlsplit(url)
        hostname = parts.hostname
        parts.port  # raises on a non-numeric or out of range port
    except ValueError:
        raise LinkValidationError(Kind.MALFORMED_URL, "invalid url")
    if not parts.scheme:
        raise LinkValidationError(Kind.MALFORMED_URL, "invalid url")
    if parts.scheme.lower() not in ALLOWED_SCHEMES:
        raise LinkValidationError(Kind.UNSUPPORTED_SCHEME, "unsupported url scheme")
    if not hostname:
        raise LinkValidationError(Kind.MISSING_HOST, "url host is required")
    return url


def validate_link(path: str | None, url: str | None) -> tuple[str, str]:
    # first failure wins; the url is not looked at while the path is bad
    clean_path = validate_path(path)
    clean_url = validate_url(url)
    return clean_path, clean_url
