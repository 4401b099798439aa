#!/usr/bin/env python
import re
from urllib.parse import quote
from urllib.parse import unquote
from urllib.parse import urljoin
from urllib.parse import urlsplit
from urllib.parse import urlunsplit

## RFC 3986 scheme followed by a colon
ABSOLUTE_URI = re.compile(r"^[a-zA-Z][a-zA-Z\d+.-]*:")

## characters left alone when quoting paths.  "%" is included so that
## already-encoded input is not encoded twice
PATH_SAFE = "/%:@!$&'()*+,;=~"


def normalize_base_url(url: str) -> str:
    """
    Drop query string and fragment from the base URL, and make sure the
    path ends with a slash, so relative paths are resolved *below* it.
    The path is percent-encoded the same way canonical paths are.
    """
    if not url:
        raise ValueError("a base URL is required")
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        raise ValueError("base URL %r is not an absolute URL" % url)
    path = quote(parts.path or "/", safe=PATH_SAFE)
    if not path.endswith("/"):
        path += "/"
    return urlunsplit((parts.scheme, parts.netloc, path, "", ""))


def decode_segment(segment: str) -> str:
    try:
        return unquote(segment, errors="strict")
    except UnicodeDecodeError:
        return segment


def basename(path: str) -> str:
    """
    Last non-empty segment of a canonical path, percent-decoded.  The
    root path is its own basename.
    """
    segments = [s for s in path.split("/") if s]
    if not segments:
        return "/"
    return decode_segment(segments[-1])


class PathResolver:
    """
    Turns whatever the caller passes as a path into something usable.

    Paths may be one out of three:

    1) a path relative to the base URL, i.e. "folder/file.txt" with a
    base URL of "https://dav.example.com/remote.php/dav/" refers to
    "https://dav.example.com/remote.php/dav/folder/file.txt".

    2) a path starting with a slash, i.e. "/folder/file.txt".  When
    canonicalizing, this is taken relative to the server root, and the
    base path is stripped off if it's there (so hrefs coming from the
    server map back to the same identity).  When building request URLs,
    it is taken relative to the base URL.

    3) a fully qualified URL, i.e.
    "https://dav.example.com/remote.php/dav/folder/file.txt".

    The canonical path is relative to the base URL, starts with one
    slash and never ends with one, except for the root, which is "/".
    """

    def __init__(self, base_url: str) -> None:
        self.base_url = normalize_base_url(base_url)
        parts = urlsplit(self.base_url)
        self.origin = urlunsplit((parts.scheme, parts.netloc, "/", "", ""))
        self.base_path = parts.path.rstrip("/") or "/"

    def resolve_url(self, path: str) -> str:
        """The URL a path refers to, for canonicalization purposes"""
        if ABSOLUTE_URI.match(path):
            return path
        if path.startswith("/"):
            return urljoin(self.origin, path)
        return urljoin(self.base_url, path)

    def request_url(self, path: str) -> str:
        """
        The URL to send a request to.  Root-relative paths are taken
        relative to the base URL as well, this is also what goes into
        the Destination header of MOVE and COPY.
        """
        if ABSOLUTE_URI.match(path):
            return path
        parts = urlsplit(urljoin(self.base_url, path.lstrip("/")))
        return urlunsplit(
            (
                parts.scheme,
                parts.netloc,
                quote(parts.path, safe=PATH_SAFE),
                parts.query,
                parts.fragment,
            )
        )

    def canonicalize(self, path: str) -> str:
        try:
            pathname = quote(urlsplit(self.resolve_url(path)).path, safe=PATH_SAFE)
        except ValueError:
            ## i.e. an unbalanced IPv6 bracket in the netloc.  Fall back
            ## to plain string handling rather than failing
            ensured = path if path.startswith("/") else "/" + path
            return ensured.rstrip("/") or "/"

        base = self.base_path
        if base != "/" and (pathname == base or pathname.startswith(base + "/")):
            pathname = pathname[len(base) :]

        pathname = pathname.rstrip("/")
        if not pathname:
            return "/"
        if not pathname.startswith("/"):
            pathname = "/" + pathname
        return pathname
