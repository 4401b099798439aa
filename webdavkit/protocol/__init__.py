"""
Sans-I/O WebDAV protocol implementation.

This module provides protocol-level operations without any I/O.
It builds requests and parses responses as pure data transformations.

The protocol layer is organized into:
- types: Core data structures (DAVRequest, DAVResponse, result types)
- xml_builders: Pure functions to build XML request bodies
- xml_parsers: Pure functions to parse XML response bodies
- operations: WebDAVProtocol class combining builders and parsers

Example usage:

    from webdavkit.protocol import ClientConfig, WebDAVProtocol

    protocol = WebDAVProtocol(ClientConfig.build("https://dav.example.com/files/"))

    # Build a request (no I/O)
    request = protocol.list_request("/documents/", depth=1)

    # Execute via your preferred I/O (sync, async, or mock)
    response = your_http_client.execute(request)

    # Parse response (no I/O)
    entries = protocol.parse_listing(response, "/documents/")
"""

from .types import (
    # Enums
    DAVMethod,
    ResourceKind,
    # Request/Response
    DAVRequest,
    DAVResponse,
    # Result types
    QuotaInfo,
    ResourceStat,
    # Configuration
    ClientConfig,
)
from .xml_builders import (
    build_propfind_body,
    build_quota_body,
    build_search_body,
)
from .xml_parsers import (
    parse_multistatus,
    parse_quota,
)
from .operations import WebDAVProtocol, depth_header

__all__ = [
    # Enums
    "DAVMethod",
    "ResourceKind",
    # Request/Response
    "DAVRequest",
    "DAVResponse",
    # Result types
    "QuotaInfo",
    "ResourceStat",
    # Configuration
    "ClientConfig",
    # XML Builders
    "build_propfind_body",
    "build_quota_body",
    "build_search_body",
    # XML Parsers
    "parse_multistatus",
    "parse_quota",
    # Protocol
    "WebDAVProtocol",
    "depth_header",
]
