"""
I/O layer for the WebDAV protocol.

This module provides sync and async implementations for executing
DAVRequest objects and returning DAVResponse objects.

The I/O layer is intentionally thin - it only handles HTTP transport.
All protocol logic (XML building/parsing) is in webdavkit.protocol.

Example (sync):
    from webdavkit.protocol import ClientConfig, WebDAVProtocol
    from webdavkit.io import SyncIO

    protocol = WebDAVProtocol(ClientConfig.build("https://dav.example.com/"))
    with SyncIO() as io:
        request = protocol.list_request("/documents/", depth=1)
        response = io.execute(request)
        entries = protocol.parse_listing(response, "/documents/")

Example (async):
    from webdavkit.protocol import ClientConfig, WebDAVProtocol
    from webdavkit.io import AsyncIO

    protocol = WebDAVProtocol(ClientConfig.build("https://dav.example.com/"))
    async with AsyncIO() as io:
        request = protocol.list_request("/documents/", depth=1)
        response = await io.execute(request)
        entries = protocol.parse_listing(response, "/documents/")
"""

from .base import AsyncIOProtocol, SyncIOProtocol
from .sync import SyncIO
from .async_ import AsyncIO

__all__ = [
    # Protocols
    "SyncIOProtocol",
    "AsyncIOProtocol",
    # Implementations
    "SyncIO",
    "AsyncIO",
]
