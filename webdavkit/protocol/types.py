"""
Core protocol types for the Sans-I/O WebDAV implementation.

These dataclasses represent HTTP requests and responses at the protocol level,
independent of any I/O implementation, plus the typed records the parsers
produce.
"""

import base64
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional

from webdavkit.lib.url import normalize_base_url


class DAVMethod(Enum):
    """WebDAV HTTP methods."""

    GET = "GET"
    PUT = "PUT"
    DELETE = "DELETE"
    PROPFIND = "PROPFIND"
    MKCOL = "MKCOL"
    MOVE = "MOVE"
    COPY = "COPY"
    SEARCH = "SEARCH"


@dataclass(frozen=True)
class DAVRequest:
    """
    Represents an HTTP request to be made.

    This is a pure data structure with no I/O. It describes what request
    should be made, but does not make it.

    Attributes:
        method: HTTP method (GET, PUT, PROPFIND, etc.)
        url: Full URL for the request
        headers: HTTP headers as dict
        body: Request body, passed on to the transport untouched (optional)
    """

    method: DAVMethod
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None


@dataclass(frozen=True)
class DAVResponse:
    """
    Represents an HTTP response received.

    This is a pure data structure with no I/O. The body is fully
    buffered.

    Attributes:
        status: HTTP status code
        headers: HTTP headers as dict
        body: Response body as bytes
        status_text: Reason phrase as sent by the server, if any
    """

    status: int
    headers: dict[str, str]
    body: bytes
    status_text: str = ""

    @property
    def ok(self) -> bool:
        """True if status indicates success (2xx)."""
        return 200 <= self.status < 300

    @property
    def reason(self) -> str:
        """Return a reason phrase for the status code."""
        if self.status_text:
            return self.status_text
        reasons = {
            200: "OK",
            201: "Created",
            204: "No Content",
            207: "Multi-Status",
            301: "Moved Permanently",
            302: "Found",
            304: "Not Modified",
            400: "Bad Request",
            401: "Unauthorized",
            403: "Forbidden",
            404: "Not Found",
            405: "Method Not Allowed",
            409: "Conflict",
            412: "Precondition Failed",
            415: "Unsupported Media Type",
            423: "Locked",
            500: "Internal Server Error",
            501: "Not Implemented",
            502: "Bad Gateway",
            503: "Service Unavailable",
            507: "Insufficient Storage",
        }
        return reasons.get(self.status, "Unknown")


class ResourceKind(Enum):
    DIRECTORY = "directory"
    FILE = "file"


@dataclass(frozen=True)
class ResourceStat:
    """
    One WebDAV resource as reported by PROPFIND or SEARCH.

    Attributes:
        path: Canonical path relative to the base URL ("/" for the root)
        basename: Last path segment, percent-decoded
        last_modified: HTTP-date exactly as the server sent it
        size: Content length in bytes, 0 when unknown
        kind: ResourceKind.DIRECTORY for collections, else ResourceKind.FILE
        etag: ETag if the server supplied one, else None
        mime_type: Content type if the server supplied one, else None
    """

    path: str
    basename: str
    last_modified: str = ""
    size: int = 0
    kind: ResourceKind = ResourceKind.FILE
    etag: Optional[str] = None
    mime_type: Optional[str] = None

    @property
    def is_directory(self) -> bool:
        return self.kind is ResourceKind.DIRECTORY


@dataclass(frozen=True)
class QuotaInfo:
    """Quota of a collection, RFC 4331.  Both values are in bytes."""

    used: int
    available: int


@dataclass(frozen=True)
class ClientConfig:
    """
    Everything a client needs to build requests.  Never changes after
    construction, so clients may be shared between concurrent tasks.

    Attributes:
        base_url: Absolute base URL, always ending with "/"
        auth_header: Precomputed Authorization header value, or None
        headers: Headers to add to every request
    """

    base_url: str
    auth_header: Optional[str] = None
    headers: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> "ClientConfig":
        auth_header = None
        if username is not None and password is not None:
            credentials = f"{username}:{password}"
            encoded = base64.b64encode(credentials.encode("utf-8")).decode("ascii")
            auth_header = f"Basic {encoded}"
        return cls(
            base_url=normalize_base_url(url),
            auth_header=auth_header,
            headers=MappingProxyType(dict(headers or {})),
        )
