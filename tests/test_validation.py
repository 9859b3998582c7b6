import pytest

from golinks.errors import LinkValidationError, ValidationErrorKind as Kind
from golinks.validation import RESERVED_PATHS, validate_link, validate_path, validate_url


def _kind(fn, value):
    with pytest.raises(LinkValidationError) as exc_info:
        fn(value)
    return exc_info.value.kind


@pytest.mark.parametrize("raw", ["", "   ", None, "\t\n"])
def test_empty_path(raw):
    assert _kind(validate_path, raw) is Kind.EMPTY_PATH


def test_path_length_limit():
    assert validate_path("a" * 50) == "a" * 50
    assert _kind(validate_path, "a" * 51) is Kind.PATH_TOO_LONG


@pytest.mark.parametrize("raw", ["g", "github", "my_link-2", "A", "UPPER-case_09", "-", "_"])
def test_valid_paths(raw):
    assert validate_path(raw) == raw


def test_path_is_trimmed():
    assert validate_path("  docs  ") == "docs"


@pytest.mark.parametrize("raw", ["a b", "a/b", "a.b", "ünï", "a?x=1", "#frag", "a%20"])
def test_invalid_path_format(raw):
    assert _kind(validate_path, raw) is Kind.INVALID_PATH_FORMAT


@pytest.mark.parametrize("raw", ["api", "API", "Api", "swagger", "SwAgGeR", "go", "GO", "gO"])
def test_reserved_paths(raw):
    assert _kind(validate_path, raw) is Kind.RESERVED_PATH


def test_reserved_words_with_dots_fail_on_format_first():
    # the character rule runs before the reserved check
    assert _kind(validate_path, "favicon.ico") is Kind.INVALID_PATH_FORMAT
    assert _kind(validate_path, "ROBOTS.TXT") is Kind.INVALID_PATH_FORMAT


def test_reserved_list():
    assert RESERVED_PATHS == {"api", "swagger", "go", "favicon.ico", "robots.txt"}


def test_near_reserved_paths_are_fine():
    assert validate_path("apis") == "apis"
    assert validate_path("gogo") == "gogo"


@pytest.mark.parametrize(
    "raw",
    [
        "https://google.com",
        "http://example.com/a/b?c=d#e",
        "https://localhost:8080",
        "http://10.0.0.1/wiki",
        "HTTPS://EXAMPLE.COM",
    ],
)
def test_valid_urls(raw):
    assert validate_url(raw) == raw


def test_url_is_trimmed():
    assert validate_url("  https://google.com ") == "https://google.com"


@pytest.mark.parametrize("raw", ["", "  ", None])
def test_empty_url(raw):
    assert _kind(validate_url, raw) is Kind.EMPTY_URL


@pytest.mark.parametrize("raw", ["google.com", "/relative/path", "//example.com/x", "http://[::1", "https://exa mple.com"])
def test_malformed_url(raw):
    assert _kind(validate_url, raw) is Kind.MALFORMED_URL


@pytest.mark.parametrize("raw", ["ftp://example.com", "javascript:alert(1)", "mailto:me@example.com", "file:///etc/passwd"])
def test_unsupported_scheme(raw):
    assert _kind(validate_url, raw) is Kind.UNSUPPORTED_SCHEME


@pytest.mark.parametrize("raw", ["http://", "https:///path", "http:example"])
def test_missing_host(raw):
    assert _kind(validate_url, raw) is Kind.MISSING_HOST


def test_validate_link_reports_path_before_url():
    with pytest.raises(LinkValidationError) as exc_info:
        validate_link("", "not a url")
    assert exc_info.value.kind is Kind.EMPTY_PATH
    assert exc_info.value.field == "path"


def test_validate_link_checks_url_when_path_ok():
    with pytest.raises(LinkValidationError) as exc_info:
        validate_link("g", "ftp://x")
    assert exc_info.value.kind is Kind.UNSUPPORTED_SCHEME
    assert exc_info.value.field == "url"


def test_validate_link_returns_clean_values():
    assert validate_link(" g ", " https://google.com ") == ("g", "https://google.com")
